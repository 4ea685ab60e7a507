"""Daily forecast email job – fetch the forecasts, mail them, summarise delivery."""

import asyncio
from typing import Awaitable, Callable

from forecast_mailer.config import Settings, settings
from forecast_mailer.core.messages import SUMMARY_SEPARATOR, check_email_sent_and_build_message
from forecast_mailer.delivery.abstractions import IForecastDeliverer
from forecast_mailer.delivery.email_deliverer import EmailForecastDeliverer
from forecast_mailer.models.forecast import ForecastCsv
from forecast_mailer.services.auth_service import AuthService
from forecast_mailer.services.email_service import EmailService
from forecast_mailer.services.forecast_service import ForecastService
from forecast_mailer.utils.dates import tomorrow_date_string
from forecast_mailer.utils.logger import logger


def parse_recipients(raw: str | None) -> list[str]:
    """Split the configured recipient string on commas.

    A value without a comma is a single recipient, even when empty.
    """
    if raw and "," in raw:
        return [part.strip() for part in raw.split(",")]
    return [(raw or "").strip()]


class ForecastEmailJob:
    """Runs one invocation of the forecast mailing; holds no state between runs."""

    def __init__(
        self,
        config: Settings | None = None,
        auth_service: AuthService | None = None,
        forecast_service: ForecastService | None = None,
        deliverer: IForecastDeliverer | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or settings
        self.auth_service = auth_service or AuthService(self.config)
        self.forecast_service = forecast_service or ForecastService(self.config)
        self.deliverer = deliverer or EmailForecastDeliverer(EmailService(config=self.config))
        self._sleep = sleep

    async def run(self) -> str:
        """Run the job and return the plain-text delivery summary.

        Raises ``UpstreamTokenError`` or ``UpstreamFetchError`` before any
        email is sent; delivery failures end up in the summary instead.
        """
        logger.info("Getting forecast token")
        token = await self.auth_service.get_access_token()

        forecasts: list[ForecastCsv] = []
        for source in self.config.forecast_sources:
            forecasts.append(await self.forecast_service.fetch_forecast_csv(source, token))
        logger.info("Forecast CSVs ready, sending emails")

        recipients = parse_recipients(self.config.email_recipients)
        logger.info(f"Recipients: {recipients}")
        date_string = tomorrow_date_string()

        if self.config.recipient_strategy == "batch":
            messages = await self._send_batch(forecasts, recipients, date_string)
        else:
            messages = await self._send_individually(forecasts, recipients, date_string)

        for message in messages:
            logger.info(message)
        return SUMMARY_SEPARATOR.join(messages)

    @staticmethod
    def _initial_message(forecast: ForecastCsv) -> str:
        return f"{forecast.label} emails sent to "

    async def _send_individually(
        self,
        forecasts: list[ForecastCsv],
        recipients: list[str],
        date_string: str,
    ) -> list[str]:
        # One email per recipient so addresses stay private and each send is tracked.
        messages = [self._initial_message(forecast) for forecast in forecasts]
        for index, recipient in enumerate(recipients):
            logger.info(f"Sending to {recipient}")
            for position, forecast in enumerate(forecasts):
                result = await self.deliverer.deliver(forecast, [recipient], date_string)
                messages[position] = check_email_sent_and_build_message(
                    messages[position], forecast.label, result, recipient, len(recipients), index
                )
            if index < len(recipients) - 1:
                # Provider rate limit
                await self._sleep(self.config.send_delay_seconds)
        return messages

    async def _send_batch(
        self,
        forecasts: list[ForecastCsv],
        recipients: list[str],
        date_string: str,
    ) -> list[str]:
        messages = []
        for position, forecast in enumerate(forecasts):
            if position:
                await self._sleep(self.config.send_delay_seconds)
            result = await self.deliverer.deliver(forecast, recipients, date_string)
            message = self._initial_message(forecast)
            if result.kind == "error":
                message = check_email_sent_and_build_message(
                    message, forecast.label, result, ", ".join(recipients), 1, 0
                )
            else:
                for index, recipient in enumerate(recipients):
                    message = check_email_sent_and_build_message(
                        message, forecast.label, result, recipient, len(recipients), index
                    )
            messages.append(message)
        return messages
