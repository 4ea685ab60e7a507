"""Email delivery service – sends CSV attachments via an HTTP email API or SMTP."""

import asyncio
import base64
import re
import smtplib
from email import policy
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from forecast_mailer.config import Settings, settings
from forecast_mailer.models.delivery import DeliveryError, DeliveryResult, DeliverySuccess
from forecast_mailer.utils.logger import logger

CSV_CONTENT_TYPE = 'text/csv; charset="UTF-8"'
_RFC5987_SAFE = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"


class EmailDeliveryError(Exception):
    """Raised when email delivery fails."""

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.message = message
        self.name = name


class EmailService:
    """Sends one email with a single CSV attachment and reports the outcome."""

    def __init__(
        self,
        provider: str | None = None,
        api_url: str | None = None,
        api_key: str | None = None,
        from_email: str | None = None,
        reply_to: str | None = None,
        tag_category: str | None = None,
        smtp_host: str | None = None,
        smtp_port: int | None = None,
        smtp_user: str | None = None,
        smtp_password: str | None = None,
        smtp_use_tls: bool | None = None,
        timeout: float | None = None,
        config: Settings | None = None,
    ):
        config = config or settings
        self.provider = provider or config.email_provider
        self.api_url = (api_url or config.email_api_url).rstrip("/")
        self.api_key = api_key or config.resend_api_key
        self.from_email = from_email or config.email_from
        self.reply_to = reply_to or config.email_reply_to
        self.tag_category = tag_category or config.email_tag_category
        self.smtp_host = smtp_host or config.smtp_host
        self.smtp_port = smtp_port or config.smtp_port
        self.smtp_user = smtp_user or config.smtp_user
        self.smtp_password = smtp_password or config.smtp_password
        self.smtp_use_tls = smtp_use_tls if smtp_use_tls is not None else config.smtp_use_tls
        self.timeout = timeout or config.http_timeout_seconds

    async def send_csv(
        self,
        to: str | Sequence[str],
        subject: str,
        html: str,
        filename: str,
        content: bytes,
    ) -> DeliveryResult:
        """Send ``content`` as a CSV attachment; never raises for delivery failures."""
        recipients = [to] if isinstance(to, str) else list(to)
        try:
            logger.info(f"Sending '{subject}' to {', '.join(recipients)}")
            if self.provider == "api":
                data = await self._send_via_api(recipients, subject, html, filename, content)
            elif self.provider == "smtp":
                data = await self._send_via_smtp(recipients, subject, html, filename, content)
            else:
                raise EmailDeliveryError(f"Unknown email provider: {self.provider}")
        except EmailDeliveryError as e:
            logger.error(f"Email delivery failed: {e.message}")
            return DeliveryError(message=e.message, name=e.name)
        except Exception as e:
            logger.error(f"Email delivery failed: {e}", exc_info=True)
            return DeliveryError(message=f"Email delivery failed: {e}")
        return DeliverySuccess(data=data)

    def _api_payload(
        self,
        recipients: list[str],
        subject: str,
        html: str,
        filename: str,
        content: bytes,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "from": self.from_email,
            "to": recipients,
            "subject": subject,
            "html": html,
            "attachments": [
                {
                    "filename": filename,
                    "content": base64.b64encode(content).decode("ascii"),
                    "content_type": CSV_CONTENT_TYPE,
                }
            ],
            "tags": [{"name": "category", "value": self.tag_category}],
        }
        if self.reply_to:
            payload["reply_to"] = self.reply_to
        return payload

    async def _send_via_api(
        self,
        recipients: list[str],
        subject: str,
        html: str,
        filename: str,
        content: bytes,
    ) -> dict[str, Any]:
        if not self.api_key:
            raise EmailDeliveryError("Email API key not configured", name="missing_api_key")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = self._api_payload(recipients, subject, html, filename, content)

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self.api_url}/emails", json=payload, headers=headers, timeout=self.timeout
                )
        except httpx.RequestError as e:
            raise EmailDeliveryError(f"Email API request failed: {e}", name="request_error") from e

        if not response.is_success:
            raise self._api_error(response)

        try:
            body = response.json()
        except ValueError:
            body = {}
        return body if isinstance(body, dict) else {"response": body}

    @staticmethod
    def _api_error(response: httpx.Response) -> EmailDeliveryError:
        """Turn a rejected API response into an error carrying the provider's message."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or str(body)
            return EmailDeliveryError(str(message), name=body.get("name"))
        text = response.text[:500] or f"Status {response.status_code}"
        return EmailDeliveryError(text)

    @staticmethod
    def _ascii_fallback_filename(filename: str) -> str:
        """Return an ASCII-only filename for clients that ignore ``filename*``."""
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", filename).strip()
        if not safe or all(c in "_." for c in safe):
            return "forecast.csv"
        return safe

    @staticmethod
    def _content_disposition(filename: str) -> str:
        """Content-Disposition value with an RFC 5987 ``filename*`` parameter."""
        ascii_name = EmailService._ascii_fallback_filename(filename)
        encoded_name = quote(filename.encode("utf-8"), safe=_RFC5987_SAFE)
        return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{encoded_name}"

    def _build_mime_message(
        self,
        recipients: list[str],
        subject: str,
        html: str,
        filename: str,
        content: bytes,
    ) -> MIMEMultipart:
        msg = MIMEMultipart(policy=policy.SMTP)
        msg["From"] = self.from_email
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        if self.reply_to:
            msg["Reply-To"] = self.reply_to

        msg.attach(MIMEText(html, "html", "utf-8"))

        attachment = MIMEApplication(content, _subtype="csv")
        attachment.replace_header("Content-Type", CSV_CONTENT_TYPE)
        attachment["Content-Disposition"] = self._content_disposition(filename or "forecast.csv")
        msg.attach(attachment)
        return msg

    async def _send_via_smtp(
        self,
        recipients: list[str],
        subject: str,
        html: str,
        filename: str,
        content: bytes,
    ) -> dict[str, Any]:
        if not self.smtp_host or not self.smtp_host.strip():
            raise EmailDeliveryError("SMTP host not configured. Set SMTP_HOST in your .env file")

        msg = self._build_mime_message(recipients, subject, html, filename, content)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._send_smtp_sync, msg)
        logger.info(f"'{subject}' sent via SMTP to {msg['To']}")
        return {"id": msg["Message-ID"]}

    def _send_smtp_sync(self, msg: MIMEMultipart) -> None:
        smtp_class = smtplib.SMTP if self.smtp_use_tls else smtplib.SMTP_SSL
        try:
            with smtp_class(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            raise EmailDeliveryError(
                "SMTP authentication failed. Check SMTP_USER and SMTP_PASSWORD", name="smtp_auth"
            ) from e
        except smtplib.SMTPException as e:
            raise EmailDeliveryError(f"SMTP error: {e}", name="smtp_error") from e
        except OSError as e:
            raise EmailDeliveryError(
                f"SMTP connection failed to {self.smtp_host}:{self.smtp_port}: {e}",
                name="smtp_connection",
            ) from e
