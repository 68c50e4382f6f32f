"""Pydantic models for orders and their line items."""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from backoffice.models.common import CamelModel

MANUAL_ORDER_TYPES = {"dine-in", "takeout", "delivery"}


class OrderItem(CamelModel):
    """One normalised line of an order."""

    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    price: str = ""


class Order(CamelModel):
    id: int
    customer_name: str
    type: str
    table_number: str | None = None
    items: Any = None
    total: str
    status: str
    ai_processed: bool = True
    order_time: datetime | None = None
    call_id: int | None = None


class OrderLine(CamelModel):
    """Line item as submitted by the manual order form."""

    name: str = Field(..., min_length=1)
    price: str
    quantity: int = Field(..., ge=1)


class OrderCreate(CamelModel):
    customer_name: str = Field(..., min_length=1)
    order_time: datetime | None = None
    status: str = "processing"
    type: str
    table_number: str | None = None
    items: list[OrderLine]
    total: str
    ai_processed: bool = False
    call_id: int | None = None

    @field_validator("type")
    @classmethod
    def _manual_type(cls, value: str) -> str:
        base = value.lower().removeprefix("manual-")
        if base not in MANUAL_ORDER_TYPES:
            raise ValueError("Order type must be 'manual-dine-in', 'manual-takeout', or 'manual-delivery'")
        return f"manual-{base}"


class OrderUpdate(CamelModel):
    customer_name: str | None = None
    status: str | None = None
    type: str | None = None
    table_number: str | None = None
    items: Any = None
    total: str | None = None
    ai_processed: bool | None = None
    call_id: int | None = None
