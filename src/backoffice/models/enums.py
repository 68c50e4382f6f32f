"""String enums for notification, order and alert vocabularies."""

from enum import StrEnum


class NotificationType(StrEnum):
    CALL = "call"
    BOOKING = "booking"
    ORDER = "order"
    REVIEW = "review"
    CHAT = "chat"
    FUNCTION_BOOKING = "function_booking"
    OTHER = "other"

    @classmethod
    def coerce(cls, value: str | None) -> "NotificationType":
        """Map a stored type string onto the enum, unknown values to OTHER."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


class OrderStatus(StrEnum):
    NEW = "new"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AlertKind(StrEnum):
    ORDER = "order"
    BOOKING = "booking"
    FUNCTION_BOOKING = "function_booking"
    OTHER = "other"


class AlertState(StrEnum):
    IDLE = "idle"
    SHOWN = "shown"
    ACCEPTED = "accepted"
    DISMISSED = "dismissed"
    AUTO_CLOSED = "auto_closed"


class SoundState(StrEnum):
    PLAYING = "playing"
    RETRY_ARMED = "retry_armed"
    BLOCKED = "blocked"


class ToastVariant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"
