"""Pydantic models for notifications."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from backoffice.models.common import CamelModel


class Notification(CamelModel):
    """A notification as served by ``GET /api/notifications``."""

    id: int
    type: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None
    user_id: int | None = None

    @field_validator("details", mode="before")
    @classmethod
    def _details_object(cls, value: Any) -> Any:
        # Stored as free JSON; anything but an object reads as empty
        return value if isinstance(value, dict) else {}


class NotificationCreate(CamelModel):
    type: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    details: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    user_id: int | None = None


class ReadAllRequest(CamelModel):
    user_id: int | None = None
