"""
Read side for bookings: scoped listing, single fetch, and joined assembly.

Every returned booking is assembled with its room, lodging (through the
room), guest and payment. Each join is loaded independently and is
best-effort: a failed lookup is logged and becomes null in the response, it
never replaces the primary result or its error.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.models.booking import Booking, BookingStatus
from hotel_business.models.lodging import Lodging
from hotel_business.models.payment import Payment
from hotel_business.models.room import Room
from hotel_business.models.user import User
from hotel_business.schemas.booking import BookingDetail, BookingListResponse, BookingResponse
from hotel_business.schemas.lodging import LodgingResponse
from hotel_business.schemas.payment import PaymentResponse
from hotel_business.schemas.room import RoomResponse
from hotel_business.schemas.user import UserResponse
from hotel_business.services.callers import Caller

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class BookingFilters:
    status: Optional[BookingStatus] = None
    lodging_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = 1
    limit: int = 20


async def _best_effort(
    db: AsyncSession,
    field: str,
    booking_id: int,
    loader: Callable[[], Awaitable[T]],
) -> Optional[T]:
    # One savepoint per join: a failed statement must not abort the outer
    # transaction that later joins and list items still read through
    try:
        async with db.begin_nested():
            return await loader()
    except SQLAlchemyError as e:
        logger.warning("join_degraded", field=field, booking_id=booking_id, error=str(e))
        return None


async def _load_room(db: AsyncSession, room_id: int) -> Optional[Room]:
    return await db.get(Room, room_id)


async def _load_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def _load_lodging(db: AsyncSession, lodging_id: int) -> Optional[Lodging]:
    return await db.get(Lodging, lodging_id)


async def _load_payment(db: AsyncSession, booking_id: int) -> Optional[Payment]:
    result = await db.execute(
        select(Payment)
        .where(Payment.booking_id == booking_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def assemble_booking(db: AsyncSession, booking: Booking) -> BookingDetail:
    """Join a booking with its room, lodging, guest and payment."""
    # One AsyncSession cannot run statements concurrently, so joins load in turn
    room = await _best_effort(db, "room", booking.id, lambda: _load_room(db, booking.room_id))
    user = await _best_effort(db, "user", booking.id, lambda: _load_user(db, booking.user_id))
    payment = await _best_effort(db, "payment", booking.id, lambda: _load_payment(db, booking.id))
    lodging = None
    if room is not None:
        lodging = await _best_effort(
            db, "lodging", booking.id, lambda: _load_lodging(db, room.lodging_id)
        )

    return BookingDetail(
        booking=BookingResponse.model_validate(booking),
        room=RoomResponse.model_validate(room) if room else None,
        lodging=LodgingResponse.model_validate(lodging) if lodging else None,
        user=UserResponse.model_validate(user) if user else None,
        payment=PaymentResponse.model_validate(payment) if payment else None,
    )


async def list_bookings(
    db: AsyncSession,
    caller: Caller,
    filters: BookingFilters,
) -> BookingListResponse:
    """
    List bookings visible to the caller, newest first.
    Guests see their own bookings, businesses the bookings of their lodgings.
    """
    query = caller.scope_bookings(select(Booking))

    if filters.status is not None:
        query = query.where(Booking.booking_status == filters.status.value)

    if filters.lodging_id is not None:
        room_ids = (
            await db.execute(select(Room.id).where(Room.lodging_id == filters.lodging_id))
        ).scalars().all()
        query = query.where(Booking.room_id.in_(list(room_ids)))

    if filters.start_date is not None:
        query = query.where(Booking.checkin_date >= filters.start_date)
    if filters.end_date is not None:
        query = query.where(Booking.checkin_date <= filters.end_date)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    bookings_query = (
        query
        .order_by(Booking.booking_date.desc(), Booking.id.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    )
    bookings = list((await db.execute(bookings_query)).scalars().all())

    items = [await assemble_booking(db, booking) for booking in bookings]

    return BookingListResponse(
        items=items,
        total=total,
        page=filters.page,
        limit=filters.limit,
        total_pages=math.ceil(total / filters.limit) if filters.limit else 0,
    )


async def get_booking(db: AsyncSession, booking_id: int, caller: Caller) -> BookingDetail:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise ServiceError(ErrorCode.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")
    if not caller.can_view(booking):
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Booking belongs to another account")
    return await assemble_booking(db, booking)
