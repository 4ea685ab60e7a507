"""Forecast delivery layer - abstraction and email implementation."""

from forecast_mailer.delivery.abstractions import IForecastDeliverer
from forecast_mailer.delivery.email_deliverer import EmailForecastDeliverer

__all__ = [
    "IForecastDeliverer",
    "EmailForecastDeliverer",
]
