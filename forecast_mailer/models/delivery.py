"""Outcome of a single email-send attempt."""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class DeliveryError(BaseModel):
    """The provider rejected the email or could not be reached."""

    kind: Literal["error"] = "error"
    message: str
    name: Optional[str] = None


class DeliverySuccess(BaseModel):
    """The provider accepted the email; ``data`` is its response payload."""

    kind: Literal["success"] = "success"
    data: dict[str, Any] = Field(default_factory=dict)


DeliveryResult = Annotated[Union[DeliveryError, DeliverySuccess], Field(discriminator="kind")]
