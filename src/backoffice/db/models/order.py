"""Order storage table."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.db.base import Base


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    order_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="processing")
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    table_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Not schema-enforced: list, {formatted, original}, name map or JSON text
    items: Mapped[Any] = mapped_column(JSON, nullable=False)
    total: Mapped[str] = mapped_column(String(32), nullable=False)
    ai_processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    call_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
