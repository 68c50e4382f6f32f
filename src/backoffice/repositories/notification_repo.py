"""Notification repository."""

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.db.models.notification import NotificationRow
from backoffice.repositories.base import BaseRepository


class NotificationRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, NotificationRow)

    def _for_user(self, stmt, user_id: int | None):
        # Broadcast notifications (no user) are visible to everyone
        if user_id is None:
            return stmt
        return stmt.where(or_(NotificationRow.user_id == user_id, NotificationRow.user_id.is_(None)))

    async def list_all(self, user_id: int | None = None, limit: int = 100) -> list[NotificationRow]:
        stmt = select(NotificationRow).order_by(
            NotificationRow.created_at.desc(), NotificationRow.id.desc()
        ).limit(limit)
        result = await self.session.execute(self._for_user(stmt, user_id))
        return list(result.scalars().all())

    async def list_unread(self, user_id: int | None = None, limit: int = 50) -> list[NotificationRow]:
        stmt = (
            select(NotificationRow)
            .where(NotificationRow.is_read.is_(False))
            .order_by(NotificationRow.created_at.desc(), NotificationRow.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(self._for_user(stmt, user_id))
        return list(result.scalars().all())

    async def mark_read(self, notification_id: int) -> NotificationRow | None:
        row = await self.get(notification_id)
        if row is None:
            return None
        if not row.is_read:
            await self.update(row, is_read=True)
        return row

    async def mark_all_read(self, user_id: int | None = None) -> int:
        stmt = update(NotificationRow).where(NotificationRow.is_read.is_(False))
        if user_id is not None:
            stmt = stmt.where(or_(NotificationRow.user_id == user_id, NotificationRow.user_id.is_(None)))
        result = await self.session.execute(stmt.values(is_read=True))
        return result.rowcount or 0
