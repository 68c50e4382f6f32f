"""Notification storage table."""

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.db.base import Base, CreatedAtMixin


class NotificationRow(Base, CreatedAtMixin):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # Column is named "data" in the hosted schema
    details: Mapped[dict] = mapped_column("data", JSON, nullable=False, default=dict)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
