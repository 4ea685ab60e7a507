"""Forecast payloads fetched from the upstream API."""

from typing import Optional

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """Access token returned by the OAuth password grant."""

    access_token: str
    scope: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None


class ForecastCsv(BaseModel):
    """A Day-Ahead forecast CSV for one source (e.g. wind or solar)."""

    source: str = Field(..., min_length=1)
    filename: str = Field(default="")
    content: bytes = Field(default=b"")

    @property
    def label(self) -> str:
        """Human readable source name used in subjects and summaries."""
        return self.source.capitalize()
