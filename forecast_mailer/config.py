"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = Field(default="Forecast Mailer")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Trigger
    cron_secret: str = Field(default="", description="Bearer secret expected on the trigger request")

    # Upstream auth (OAuth password grant)
    auth0_domain: str = Field(default="", description="Auth server base URL, e.g. https://tenant.auth0.com")
    auth0_username: str = Field(default="")
    auth0_password: str = Field(default="")
    auth0_client_id: str = Field(default="")
    auth0_audience: str = Field(default="")

    # Forecast API
    ocf_api_url: str = Field(default="", description="Forecast API base URL")
    forecast_region: str = Field(default="ruvnl")
    forecast_sources: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["wind", "solar"])
    http_timeout_seconds: float = Field(default=30.0, gt=0)

    # Email Service
    email_provider: str = Field(default="api", description="api or smtp")
    email_api_url: str = Field(default="https://api.resend.com")
    resend_api_key: Optional[str] = Field(default=None)
    email_from: str = Field(default="Quartz Energy <notifications@mail.quartz.energy>")
    email_reply_to: Optional[str] = Field(default="quartz.support@openclimatefix.org")
    email_tag_category: str = Field(default="ruvnl_email")
    smtp_host: Optional[str] = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_user: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=True)

    # Recipients
    email_recipients: str = Field(default="", description="Comma separated recipient addresses")
    recipient_strategy: str = Field(default="individual", description="individual or batch")
    send_delay_seconds: float = Field(default=2.0, ge=0)

    # Scheduler
    scheduler_enabled: bool = Field(default=False)
    schedule_hour: int = Field(default=6, ge=0, le=23)
    schedule_minute: int = Field(default=0, ge=0, le=59)
    schedule_timezone: str = Field(default="Asia/Kolkata")

    @field_validator("email_provider")
    @classmethod
    def validate_email_provider(cls, v: str) -> str:
        """Validate email provider."""
        if v.lower() not in ["smtp", "api"]:
            raise ValueError("Email provider must be 'smtp' or 'api'")
        return v.lower()

    @field_validator("recipient_strategy")
    @classmethod
    def validate_recipient_strategy(cls, v: str) -> str:
        """Validate recipient batching strategy."""
        if v.lower() not in ["individual", "batch"]:
            raise ValueError("Recipient strategy must be 'individual' or 'batch'")
        return v.lower()

    @field_validator("forecast_sources", mode="before")
    @classmethod
    def validate_forecast_sources(cls, v):
        """Accept a comma separated string or a list; lower-case every source."""
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        sources = [str(part).strip().lower() for part in v]
        if not sources:
            raise ValueError("At least one forecast source is required")
        return sources

    @field_validator("auth0_domain", "ocf_api_url", "email_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
