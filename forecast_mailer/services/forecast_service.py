"""Forecast API client – downloads Day-Ahead forecast CSV files."""

import httpx

from forecast_mailer.config import Settings, settings
from forecast_mailer.models.forecast import ForecastCsv
from forecast_mailer.utils.logger import logger


class UpstreamFetchError(Exception):
    """Raised when a forecast CSV cannot be downloaded."""

    def __init__(self, source: str, detail: str):
        super().__init__(detail)
        self.source = source
        self.detail = detail


def filename_from_content_disposition(header: str | None) -> str:
    """Return the value after ``filename=`` or an empty string."""
    if not header or "filename=" not in header:
        return ""
    value = header.split("filename=", 1)[1].split(";", 1)[0].strip()
    return value.strip('"')


class ForecastService:
    """Fetches forecast CSVs for a region, one source at a time."""

    def __init__(self, config: Settings | None = None):
        config = config or settings
        self.api_url = config.ocf_api_url
        self.region = config.forecast_region
        self.timeout = config.http_timeout_seconds

    def csv_url(self, source: str) -> str:
        return f"{self.api_url}/{source}/{self.region}/forecast/csv"

    async def fetch_forecast_csv(self, source: str, token: str) -> ForecastCsv:
        """Download the CSV forecast for ``source`` using a bearer ``token``."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self.csv_url(source), headers=headers, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error(f"{source} forecast request failed: {e}")
            raise UpstreamFetchError(source, f"Request failed: {e}") from e

        if not response.is_success:
            logger.error(f"{source} forecast fetch rejected ({response.status_code}): {response.text}")
            raise UpstreamFetchError(source, response.text)

        filename = filename_from_content_disposition(response.headers.get("Content-Disposition"))
        logger.info(f"{source} forecast received ({len(response.content)} bytes, filename='{filename}')")
        return ForecastCsv(source=source, filename=filename, content=response.content)
