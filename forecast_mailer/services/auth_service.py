"""Upstream authentication – OAuth password grant for the forecast API."""

import httpx
from pydantic import ValidationError

from forecast_mailer.config import Settings, settings
from forecast_mailer.models.forecast import TokenResponse
from forecast_mailer.utils.logger import logger


class UpstreamTokenError(Exception):
    """Raised when the access token cannot be obtained."""

    pass


class AuthService:
    """Exchanges configured user credentials for a bearer token."""

    def __init__(self, config: Settings | None = None):
        config = config or settings
        self.token_url = f"{config.auth0_domain}/oauth/token"
        self.username = config.auth0_username
        self.password = config.auth0_password
        self.client_id = config.auth0_client_id
        self.audience = config.auth0_audience
        self.timeout = config.http_timeout_seconds

    async def get_access_token(self) -> str:
        """Return an access token for the forecast API."""
        payload = {
            "username": self.username,
            "password": self.password,
            "client_id": self.client_id,
            "audience": self.audience,
            "grant_type": "password",
        }
        logger.info("Requesting forecast API token")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.token_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
        except httpx.RequestError as e:
            logger.error(f"Token request failed: {e}")
            raise UpstreamTokenError(f"Token request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Token request rejected ({response.status_code}): {response.text}")
            raise UpstreamTokenError(response.text)

        try:
            token = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamTokenError(f"Malformed token response: {e}") from e

        logger.info(f"Token received (type={token.token_type}, expires_in={token.expires_in})")
        return token.access_token
