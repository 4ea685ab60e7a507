"""Abstract interface for forecast delivery."""

from abc import ABC, abstractmethod
from typing import Sequence

from forecast_mailer.models.delivery import DeliveryResult
from forecast_mailer.models.forecast import ForecastCsv


class IForecastDeliverer(ABC):
    """Delivers one forecast CSV to one or more recipients."""

    @abstractmethod
    async def deliver(
        self,
        forecast: ForecastCsv,
        recipients: Sequence[str],
        date_string: str,
    ) -> DeliveryResult:
        """
        Deliver ``forecast`` for the day ``date_string``.

        :param forecast: The CSV and its source.
        :param recipients: One address for individual sends, all of them for a batch.
        :param date_string: Forecast day as YYYY-MM-DD.
        :return: The provider outcome; failures are returned, not raised.
        """
        pass
