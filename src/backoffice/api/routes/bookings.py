"""Booking API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.dependencies import get_db
from backoffice.errors.exceptions import NotFoundError, ValidationError
from backoffice.models.booking import Booking, BookingCreate, BookingUpdate
from backoffice.repositories.booking_repo import BookingRepository

router = APIRouter(tags=["Bookings"])


def _to_wire(row) -> dict:
    return Booking.model_validate(row).to_wire()


async def _get_or_404(repo: BookingRepository, booking_id: int):
    row = await repo.get(booking_id)
    if row is None:
        raise NotFoundError("Booking", booking_id)
    return row


@router.get("/bookings")
async def list_bookings(db: AsyncSession = Depends(get_db)) -> list[dict]:
    rows = await BookingRepository(db).list_latest_first()
    return [_to_wire(r) for r in rows]


@router.get("/bookings/{booking_id}")
async def get_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
) -> dict:
    return _to_wire(await _get_or_404(BookingRepository(db), booking_id))


@router.post("/bookings", status_code=201)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    row = await BookingRepository(db).create(**body.model_dump())
    await db.commit()
    return _to_wire(row)


@router.patch("/bookings/{booking_id}")
async def update_booking(
    booking_id: int,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
) -> dict:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")
    repo = BookingRepository(db)
    row = await _get_or_404(repo, booking_id)
    await repo.update(row, **changes)
    await db.commit()
    return _to_wire(row)


@router.delete("/bookings/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    repo = BookingRepository(db)
    row = await _get_or_404(repo, booking_id)
    await repo.delete(row)
    await db.commit()
