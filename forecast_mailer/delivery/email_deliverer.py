"""Email forecast deliverer – sends the CSV as an attachment with a fixed body."""

from typing import Sequence

from forecast_mailer.delivery.abstractions import IForecastDeliverer
from forecast_mailer.models.delivery import DeliveryResult
from forecast_mailer.models.forecast import ForecastCsv
from forecast_mailer.services.email_service import EmailService

FORECAST_HTML = (
    "<span>Good morning,<br/><br/>"
    "Find attached the OCF Day Ahead forecast for tomorrow.<br/><br/>"
    "Kind regards,<br/>"
    "The Open Climate Fix Team"
    "<br/><br/><br/></span>"
)


def forecast_subject(forecast: ForecastCsv, date_string: str) -> str:
    return f"DA {forecast.label} Forecast for {date_string}"


class EmailForecastDeliverer(IForecastDeliverer):
    """Delivers forecasts through :class:`EmailService`."""

    def __init__(self, email_service: EmailService | None = None, html: str = FORECAST_HTML):
        self._email = email_service or EmailService()
        self._html = html

    async def deliver(
        self,
        forecast: ForecastCsv,
        recipients: Sequence[str],
        date_string: str,
    ) -> DeliveryResult:
        return await self._email.send_csv(
            to=list(recipients),
            subject=forecast_subject(forecast, date_string),
            html=self._html,
            filename=forecast.filename,
            content=forecast.content,
        )
