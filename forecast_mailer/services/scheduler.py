"""Scheduler for the daily forecast email job."""

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from forecast_mailer.config import Settings, settings
from forecast_mailer.services.forecast_job import ForecastEmailJob
from forecast_mailer.utils.logger import logger


class SchedulerService:
    """Service for managing scheduled tasks."""

    def __init__(self, job: ForecastEmailJob | None = None, config: Settings | None = None):
        self.config = config or settings
        self.job = job or ForecastEmailJob(self.config)
        self.timezone = pytz.timezone(self.config.schedule_timezone)
        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

    def start(self) -> None:
        """Start the scheduler and register the daily forecast job."""
        self.scheduler.add_job(
            self._run_forecast_job,
            trigger=CronTrigger(
                hour=self.config.schedule_hour,
                minute=self.config.schedule_minute,
                timezone=self.timezone,
            ),
            id="forecast_email",
            name="Day-Ahead Forecast Email",
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(
            f"Scheduler started - forecast email scheduled for "
            f"{self.config.schedule_hour:02d}:{self.config.schedule_minute:02d} "
            f"{self.config.schedule_timezone} daily"
        )

    def shutdown(self) -> None:
        """Shutdown the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown requested")

    async def _run_forecast_job(self) -> None:
        """Run the forecast job (called by scheduler)."""
        logger.info("Starting scheduled forecast email job")
        try:
            summary = await self.job.run()
            logger.info(f"Forecast email job completed: {summary}")
        except Exception as e:
            logger.error(f"Error in scheduled forecast email job: {e}", exc_info=True)
