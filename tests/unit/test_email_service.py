"""Unit tests for email service."""

import base64
import smtplib
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from forecast_mailer.models.delivery import DeliveryError, DeliverySuccess
from forecast_mailer.services.email_service import CSV_CONTENT_TYPE, EmailService


class TestEmailService:
    """Test cases for EmailService."""

    def test_init_api(self, settings):
        service = EmailService(config=settings)
        assert service.provider == "api"
        assert service.api_url == "https://mail.test.com"
        assert service.api_key == "re_test"

    def test_init_smtp(self, settings):
        service = EmailService(provider="smtp", smtp_host="smtp.test.com", config=settings)
        assert service.provider == "smtp"
        assert service.smtp_host == "smtp.test.com"

    @patch("forecast_mailer.services.email_service.httpx.AsyncClient")
    async def test_send_via_api_success(self, mock_client, settings):
        post = AsyncMock(return_value=httpx.Response(200, json={"id": "email_123"}))
        mock_client.return_value.__aenter__.return_value.post = post

        result = await EmailService(config=settings).send_csv(
            "a@test.com", "DA Wind Forecast for 2024-06-02", "<span>hi</span>", "wind.csv", b"a,b\n"
        )

        assert isinstance(result, DeliverySuccess)
        assert result.data == {"id": "email_123"}
        args, kwargs = post.call_args
        assert args[0] == "https://mail.test.com/emails"
        assert kwargs["headers"]["Authorization"] == "Bearer re_test"
        payload = kwargs["json"]
        assert payload["to"] == ["a@test.com"]
        assert payload["subject"] == "DA Wind Forecast for 2024-06-02"
        assert payload["reply_to"] == settings.email_reply_to
        assert payload["tags"] == [{"name": "category", "value": "ruvnl_email"}]
        attachment = payload["attachments"][0]
        assert attachment["filename"] == "wind.csv"
        assert attachment["content_type"] == CSV_CONTENT_TYPE
        assert base64.b64decode(attachment["content"]) == b"a,b\n"

    @patch("forecast_mailer.services.email_service.httpx.AsyncClient")
    async def test_send_via_api_rejected(self, mock_client, settings):
        mock_client.return_value.__aenter__.return_value.post = AsyncMock(
            return_value=httpx.Response(
                422, json={"statusCode": 422, "name": "validation_error", "message": "Invalid `to` field."}
            )
        )

        result = await EmailService(config=settings).send_csv("", "s", "h", "f.csv", b"")

        assert isinstance(result, DeliveryError)
        assert result.message == "Invalid `to` field."
        assert result.name == "validation_error"

    @patch("forecast_mailer.services.email_service.httpx.AsyncClient")
    async def test_send_via_api_connection_error(self, mock_client, settings):
        mock_client.return_value.__aenter__.return_value.post = AsyncMock(
            side_effect=httpx.ConnectError("down")
        )

        result = await EmailService(config=settings).send_csv("a@test.com", "s", "h", "f.csv", b"")

        assert isinstance(result, DeliveryError)
        assert "down" in result.message

    async def test_send_via_api_missing_key(self, make_settings):
        service = EmailService(config=make_settings(resend_api_key=None))

        result = await service.send_csv("a@test.com", "s", "h", "f.csv", b"")

        assert isinstance(result, DeliveryError)
        assert "API key" in result.message

    @patch("forecast_mailer.services.email_service.smtplib.SMTP")
    async def test_send_via_smtp_success(self, mock_smtp, settings):
        mock_server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = mock_server

        service = EmailService(
            provider="smtp",
            smtp_host="smtp.test.com",
            smtp_port=587,
            smtp_use_tls=True,
            config=settings,
        )
        result = await service.send_csv(["a@test.com", "b@test.com"], "s", "<p>h</p>", "wind.csv", b"a,b\n")

        assert isinstance(result, DeliverySuccess)
        assert result.data["id"]
        mock_server.starttls.assert_called_once()
        mock_server.send_message.assert_called_once()
        sent = mock_server.send_message.call_args[0][0]
        assert sent["To"] == "a@test.com, b@test.com"

    @patch("forecast_mailer.services.email_service.smtplib.SMTP")
    async def test_send_via_smtp_closes_connection_on_error(self, mock_smtp, settings):
        mock_server = MagicMock()
        mock_server.send_message.side_effect = smtplib.SMTPRecipientsRefused({"a@test.com": (550, b"no")})
        mock_smtp.return_value.__enter__.return_value = mock_server

        service = EmailService(provider="smtp", smtp_host="smtp.test.com", config=settings)
        result = await service.send_csv("a@test.com", "s", "h", "f.csv", b"")

        assert isinstance(result, DeliveryError)
        assert result.name == "smtp_error"
        mock_smtp.return_value.__exit__.assert_called_once()

    async def test_send_via_smtp_missing_host(self, settings):
        service = EmailService(provider="smtp", config=settings)

        result = await service.send_csv("a@test.com", "s", "h", "f.csv", b"")

        assert isinstance(result, DeliveryError)
        assert "SMTP host" in result.message

    def test_mime_message_attachment(self, settings):
        service = EmailService(provider="smtp", smtp_host="smtp.test.com", config=settings)
        msg = service._build_mime_message(["a@test.com"], "s", "<p>h</p>", "wind.csv", b"a,b\n")

        attachment = msg.get_payload()[1]
        assert attachment.get_content_type() == "text/csv"
        assert 'filename="wind.csv"' in attachment["Content-Disposition"]
        assert attachment.get_payload(decode=True) == b"a,b\n"
