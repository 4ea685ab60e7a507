"""API routes: cron trigger for the forecast email job."""

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import PlainTextResponse

from forecast_mailer.config import Settings, get_settings
from forecast_mailer.core.security import AuthorizationError, verify_cron_token
from forecast_mailer.services.auth_service import UpstreamTokenError
from forecast_mailer.services.forecast_job import ForecastEmailJob
from forecast_mailer.services.forecast_service import UpstreamFetchError
from forecast_mailer.utils.logger import logger

router = APIRouter(tags=["forecasts"])


def get_forecast_job(config: Settings = Depends(get_settings)) -> ForecastEmailJob:
    """Build a fresh job per request from the process settings."""
    return ForecastEmailJob(config)


@router.get("/ruvnl-morning", response_class=PlainTextResponse)
async def send_morning_forecasts(
    authorization: str | None = Header(None),
    config: Settings = Depends(get_settings),
    job: ForecastEmailJob = Depends(get_forecast_job),
) -> PlainTextResponse:
    """Fetch the Day-Ahead forecasts and email them to every configured recipient."""
    try:
        verify_cron_token(authorization, config.cron_secret)
    except AuthorizationError as exc:
        return PlainTextResponse(str(exc), status_code=status.HTTP_403_FORBIDDEN)

    try:
        summary = await job.run()
    except UpstreamTokenError as exc:
        return PlainTextResponse(f"OCF token error: {exc}", status_code=status.HTTP_502_BAD_GATEWAY)
    except UpstreamFetchError as exc:
        return PlainTextResponse(
            f"OCF {exc.source} forecast CSV fetch error: {exc.detail}",
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    logger.info("Forecast emails processed")
    return PlainTextResponse(summary)
