"""Logging setup shared by the job, the API and the scheduler."""

import logging
import sys

from forecast_mailer.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str | None = None, level: str | None = None) -> logging.Logger:
    """Set up and return a logger writing to stdout."""
    logger = logging.getLogger(name or __name__)
    logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger


# Default logger instance
logger = setup_logger("forecast_mailer")
