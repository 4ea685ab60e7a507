"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from forecast_mailer.api.routes import router
from forecast_mailer.config import settings
from forecast_mailer.services.scheduler import SchedulerService
from forecast_mailer.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    scheduler_service = None
    if settings.scheduler_enabled:
        scheduler_service = SchedulerService(config=settings)
        scheduler_service.start()

    logger.info("Application startup complete")
    yield
    # Shutdown
    if scheduler_service is not None:
        scheduler_service.shutdown()
    logger.info("Application shutdown")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Emails the Day-Ahead wind and solar forecast CSVs to configured recipients.",
    lifespan=lifespan,
)

# Include routers
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "operational",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
