"""Order API routes."""

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.dependencies import get_db
from backoffice.errors.exceptions import NotFoundError, ValidationError
from backoffice.models.enums import OrderStatus
from backoffice.models.order import Order, OrderCreate, OrderUpdate
from backoffice.repositories.order_repo import OrderRepository
from backoffice.services.order_items import parse_order_items

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Orders"])

_STATUSES = {s.value for s in OrderStatus}


def _to_wire(row) -> dict:
    return Order.model_validate(row).to_wire()


async def _get_or_404(repo: OrderRepository, order_id: int):
    row = await repo.get(order_id)
    if row is None:
        raise NotFoundError("Order", order_id)
    return row


def _check_status(status) -> str:
    if status not in _STATUSES:
        raise ValidationError(
            f"Invalid order status '{status}'",
            details={"allowed": sorted(_STATUSES)},
        )
    return status


@router.get("/orders")
async def list_orders(
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    rows = await OrderRepository(db).list_recent(status=status)
    return [_to_wire(r) for r in rows]


@router.get("/orders/{order_id}")
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict:
    return _to_wire(await _get_or_404(OrderRepository(db), order_id))


@router.get("/orders/{order_id}/items")
async def get_order_items(
    order_id: int,
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    """Line items normalised from whatever shape the order stored."""
    row = await _get_or_404(OrderRepository(db), order_id)
    return [item.to_wire() for item in parse_order_items(row.items)]


@router.post("/orders", status_code=201)
async def create_order(
    body: OrderCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    original = [line.model_dump(mode="json", by_alias=True) for line in body.items]
    formatted = {line.name: line.quantity for line in body.items}

    kwargs = dict(
        customer_name=body.customer_name,
        status=body.status,
        type=body.type,
        table_number=body.table_number,
        # Both views are kept for older readers of the column
        items={"formatted": formatted, "original": original},
        total=body.total,
        ai_processed=body.ai_processed,
        call_id=body.call_id,
    )
    if body.order_time is not None:
        kwargs["order_time"] = body.order_time

    row = await OrderRepository(db).create(**kwargs)
    await db.commit()
    logger.info("Order %s created (type=%s, items=%d)", row.id, row.type, len(original))
    return _to_wire(row)


@router.patch("/orders/{order_id}")
async def update_order(
    order_id: int,
    body: dict,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Update an order's status, or any subset of its fields."""
    if not body:
        raise ValidationError("No fields to update")

    repo = OrderRepository(db)
    row = await _get_or_404(repo, order_id)

    if set(body) == {"status"}:
        changes = {"status": _check_status(body["status"])}
    else:
        try:
            update = OrderUpdate.model_validate(body)
        except PydanticValidationError as exc:
            raise ValidationError(
                "Invalid order data",
                details=exc.errors(include_url=False, include_context=False),
            ) from exc
        changes = update.model_dump(exclude_unset=True)
        if "status" in changes:
            _check_status(changes["status"])

    previous = row.status
    await repo.update(row, **changes)
    await db.commit()
    if changes.get("status") not in (None, previous):
        logger.info("Order %s status %s -> %s", order_id, previous, changes["status"])
    return _to_wire(row)
