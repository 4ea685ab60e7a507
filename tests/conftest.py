"""Shared test fixtures."""

import pytest

from forecast_mailer.config import Settings


@pytest.fixture
def make_settings():
    """Build isolated settings that ignore the environment's .env file."""

    def _make(**overrides) -> Settings:
        values = {
            "cron_secret": "s3cret",
            "auth0_domain": "https://auth.test.com",
            "auth0_username": "user@test.com",
            "auth0_password": "pw",
            "auth0_client_id": "client",
            "auth0_audience": "https://api.test.com",
            "ocf_api_url": "https://api.test.com/v0",
            "email_api_url": "https://mail.test.com",
            "resend_api_key": "re_test",
            "email_recipients": "a@test.com,b@test.com",
            "send_delay_seconds": 0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()
