"""Pydantic models for table and function bookings."""

from datetime import datetime

from pydantic import Field

from backoffice.models.common import CamelModel


class Booking(CamelModel):
    id: int
    customer_name: str
    booking_time: datetime
    party_size: int
    status: str = "confirmed"
    special_occasion: str | None = None
    notes: str | None = None
    source: str = "website"
    ai_processed: bool = True
    user_id: int | None = None
    call_id: int | None = None


class BookingCreate(CamelModel):
    customer_name: str = Field(..., min_length=1)
    booking_time: datetime
    party_size: int = Field(..., ge=1)
    status: str = "confirmed"
    special_occasion: str | None = None
    notes: str | None = None
    source: str = "website"
    ai_processed: bool = True
    user_id: int | None = None
    call_id: int | None = None


class BookingUpdate(CamelModel):
    customer_name: str | None = None
    booking_time: datetime | None = None
    party_size: int | None = Field(None, ge=1)
    status: str | None = None
    special_occasion: str | None = None
    notes: str | None = None
    source: str | None = None
    ai_processed: bool | None = None
