"""Trigger authorization."""

import hmac
from typing import Optional

from forecast_mailer.utils.logger import logger


class AuthorizationError(Exception):
    """Raised when the trigger request carries a missing or wrong token."""

    pass


def verify_cron_token(authorization: Optional[str], secret: str) -> None:
    """Check the ``Authorization`` header against ``Bearer <secret>``.

    The scheduler platform adds this header from the configured secret; any
    other caller must supply it too.
    """
    token = authorization or ""
    if not token:
        logger.warning("Trigger rejected: token missing")
        raise AuthorizationError("Token missing")
    expected = f"Bearer {secret}"
    if not secret or not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Trigger rejected: token invalid")
        raise AuthorizationError("Token invalid")
