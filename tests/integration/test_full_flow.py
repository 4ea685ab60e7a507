"""Integration tests for the cron trigger through to the email API."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from forecast_mailer.api.routes import get_forecast_job
from forecast_mailer.config import get_settings
from forecast_mailer.main import app
from forecast_mailer.services.forecast_job import ForecastEmailJob

AUTH = {"Authorization": "Bearer s3cret"}


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_forecast_job] = lambda: ForecastEmailJob(settings, sleep=AsyncMock())
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeUpstream:
    """Routes httpx calls to canned token, forecast and email responses."""

    def __init__(self, token_status=200, failing_source=None, failing_recipient=None):
        self.token_status = token_status
        self.failing_source = failing_source
        self.failing_recipient = failing_recipient
        self.emails: list[dict] = []

    async def post(self, url, json=None, headers=None, timeout=None):
        if url.endswith("/oauth/token"):
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="Unauthorized")
            return httpx.Response(200, json={"access_token": "tok", "token_type": "Bearer"})
        self.emails.append(json)
        if self.failing_recipient in json["to"]:
            return httpx.Response(429, json={"name": "rate_limit_exceeded", "message": "Too many requests"})
        return httpx.Response(200, json={"id": f"email_{len(self.emails)}"})

    async def get(self, url, headers=None, timeout=None):
        source = url.split("/")[-4]
        if source == self.failing_source:
            return httpx.Response(404, text="No forecast")
        return httpx.Response(
            200,
            content=f"time,{source}\n".encode(),
            headers={"Content-Disposition": f"attachment; filename={source}_da.csv"},
        )


def run_with_upstream(client, upstream, headers=AUTH):
    with patch("httpx.AsyncClient") as mock_client:
        mock_client.return_value.__aenter__.return_value = upstream
        return client.get("/api/ruvnl-morning", headers=headers)


class TestFullFlow:
    """Integration tests for the complete trigger flow."""

    def test_missing_token(self, client):
        response = client.get("/api/ruvnl-morning")
        assert response.status_code == 403
        assert response.text == "Token missing"

    def test_invalid_token(self, client):
        response = client.get("/api/ruvnl-morning", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 403
        assert response.text == "Token invalid"

    def test_success_summary(self, client):
        upstream = FakeUpstream()

        response = run_with_upstream(client, upstream)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == (
            "Wind emails sent to a@test.com and b@test.com \n---\n "
            "Solar emails sent to a@test.com and b@test.com"
        )
        assert len(upstream.emails) == 4
        subjects = [email["subject"] for email in upstream.emails]
        assert subjects[0].startswith("DA Wind Forecast for ")
        assert subjects[1].startswith("DA Solar Forecast for ")
        assert upstream.emails[0]["attachments"][0]["filename"] == "wind_da.csv"

    def test_delivery_error_is_reported_not_fatal(self, client):
        upstream = FakeUpstream(failing_recipient="a@test.com")

        response = run_with_upstream(client, upstream)

        assert response.status_code == 200
        assert response.text.count("Too many requests") == 2
        assert "and b@test.com" in response.text
        assert len(upstream.emails) == 4

    def test_token_error(self, client):
        upstream = FakeUpstream(token_status=401)

        response = run_with_upstream(client, upstream)

        assert response.status_code == 502
        assert response.text == "OCF token error: Unauthorized"
        assert upstream.emails == []

    def test_fetch_error(self, client):
        upstream = FakeUpstream(failing_source="solar")

        response = run_with_upstream(client, upstream)

        assert response.status_code == 502
        assert response.text == "OCF solar forecast CSV fetch error: No forecast"
        assert upstream.emails == []

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
