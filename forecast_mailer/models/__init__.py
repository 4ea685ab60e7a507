"""Data models for forecasts and delivery results."""

from forecast_mailer.models.delivery import DeliveryError, DeliveryResult, DeliverySuccess
from forecast_mailer.models.forecast import ForecastCsv, TokenResponse

__all__ = [
    "DeliveryError",
    "DeliveryResult",
    "DeliverySuccess",
    "ForecastCsv",
    "TokenResponse",
]
