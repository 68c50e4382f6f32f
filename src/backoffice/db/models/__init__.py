"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from backoffice.db.models.booking import BookingRow
from backoffice.db.models.notification import NotificationRow
from backoffice.db.models.order import OrderRow

__all__ = [
    "BookingRow",
    "NotificationRow",
    "OrderRow",
]
