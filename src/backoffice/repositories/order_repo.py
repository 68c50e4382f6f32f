"""Order repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.models.order import OrderRow
from backoffice.repositories.base import BaseRepository


class OrderRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, OrderRow)

    async def list_recent(self, status: str | None = None, limit: int = 200) -> list[OrderRow]:
        stmt = select(OrderRow).order_by(OrderRow.order_time.desc(), OrderRow.id.desc()).limit(limit)
        if status:
            stmt = stmt.where(OrderRow.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
