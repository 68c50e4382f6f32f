"""Booking repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.models.booking import BookingRow
from backoffice.repositories.base import BaseRepository


class BookingRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, BookingRow)

    async def list_latest_first(self, limit: int = 200) -> list[BookingRow]:
        stmt = select(BookingRow).order_by(BookingRow.booking_time.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
