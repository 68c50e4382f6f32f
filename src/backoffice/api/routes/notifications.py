"""Notification API routes."""

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.dependencies import Hub, get_db
from backoffice.errors.exceptions import NotFoundError, ValidationError
from backoffice.models.notification import Notification, NotificationCreate, ReadAllRequest
from backoffice.repositories.notification_repo import NotificationRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


def _to_wire(row) -> dict:
    return Notification.model_validate(row).to_wire()


async def _create(db: AsyncSession, hub, body: NotificationCreate) -> dict:
    repo = NotificationRepository(db)
    row = await repo.create(
        type=body.type,
        message=body.message,
        details=body.details,
        is_read=body.is_read,
        user_id=body.user_id,
    )
    await db.commit()
    notification = _to_wire(row)
    hub.publish("notification", {"notification": notification})
    logger.info("Notification %s created (type=%s)", row.id, row.type)
    return notification


@router.get("/notifications")
async def list_notifications(
    user_id: int | None = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    rows = await NotificationRepository(db).list_all(user_id)
    return [_to_wire(r) for r in rows]


@router.get("/notifications/unread")
async def list_unread_notifications(
    user_id: int | None = Query(None, alias="userId"),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    rows = await NotificationRepository(db).list_unread(user_id)
    return [_to_wire(r) for r in rows]


@router.post("/notifications", status_code=201)
async def create_notification(
    body: NotificationCreate,
    hub: Hub,
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await _create(db, hub, body)


@router.patch("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict:
    row = await NotificationRepository(db).mark_read(notification_id)
    if row is None:
        raise NotFoundError("Notification", notification_id)
    await db.commit()
    return _to_wire(row)


@router.post("/notifications/read-all")
async def mark_all_notifications_read(
    body: ReadAllRequest | None = None,
    db: AsyncSession = Depends(get_db),
) -> dict:
    user_id = body.user_id if body else None
    updated = await NotificationRepository(db).mark_all_read(user_id)
    await db.commit()
    return {"success": True, "updated": updated}


@router.post("/ai-agent/notify", status_code=201)
async def ai_agent_notify(
    body: dict,
    hub: Hub,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Entry point for the automation workflow to raise a notification."""
    if not body.get("message") or not body.get("type"):
        raise ValidationError("Missing required fields", details={"required": ["type", "message"]})
    details = body.get("details")
    try:
        create = NotificationCreate(
            type=str(body["type"]),
            message=str(body["message"]),
            details=details if isinstance(details, dict) else {},
            user_id=body.get("userId"),
        )
    except PydanticValidationError as exc:
        raise ValidationError("Invalid notification", details=exc.errors(include_url=False, include_context=False)) from exc
    notification = await _create(db, hub, create)
    return {
        "success": True,
        "message": "Notification created successfully",
        "notification": notification,
    }
