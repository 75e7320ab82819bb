"""
Booking lifecycle: creation with availability checking, status transitions,
and payment-status changes.

CONCURRENCY STRATEGY: Optimistic Room Claim with Retry
======================================================

Problem:
  A room has a finite inventory_count. Two guests request overlapping dates
  for the last free unit at the same time. Both count the overlapping
  bookings, both see count < inventory, both insert.
  Result: Overbooking.

Solution:
  Every creation claims the room through its `version` column inside the
  same transaction as the overlap count and the insert:

  1. Read the room (and the version we saw)
  2. Count overlapping inventory-holding bookings; reject if count >= inventory
  3. UPDATE rooms SET version = version + 1
     WHERE id = :room_id AND version = :seen_version
  4. If rows_affected == 0, another creator claimed the room after our read
     -> roll back and start over from step 1
  5. Insert the booking and commit

  The UPDATE takes a row lock that is held until commit, so a second creator
  blocks at step 3 until the first commits, then sees a new version and
  retries with a fresh count. The decision is therefore never made on a
  stale count, and nothing is written when any check fails.

Overlap rule:
  existing.checkin < candidate.checkout AND existing.checkout > candidate.checkin

  Both ends are open: a stay ending on the day another begins does not
  overlap (same-day turnover). Only pending and confirmed bookings hold
  inventory; cancelled and completed ones release it.
"""

import time
from datetime import date
from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.config import get_settings
from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.core.metrics import (
    booking_latency,
    record_booking_attempt,
    record_db_operation,
    record_status_transition,
)
from hotel_business.models.booking import (
    Booking,
    BookingStatus,
    PaymentStatus,
    INVENTORY_HOLDING_STATUSES,
)
from hotel_business.models.lodging import Lodging
from hotel_business.models.room import Room
from hotel_business.models.user import User
from hotel_business.schemas.booking import BookingCreate, BookingDetail
from hotel_business.services.booking_query import assemble_booking
from hotel_business.services.callers import BusinessCaller, Caller, UserCaller
from hotel_business.services.interfaces import TransitionPolicy
from hotel_business.services.payment_service import charge_for_stay, refund_payment, settle_payment
from hotel_business.services.strategy_factory import get_transition_policy

logger = get_logger(__name__)
settings = get_settings()

# Outcome label for the booking_attempts metric, per failure code
_ATTEMPT_OUTCOME = {
    ErrorCode.ROOM_NOT_AVAILABLE: "unavailable",
}


async def count_overlapping_bookings(
    db: AsyncSession,
    room_id: int,
    checkin_date: date,
    checkout_date: date,
) -> int:
    """Count inventory-holding bookings of `room_id` that overlap the range."""
    result = await db.execute(
        select(func.count())
        .select_from(Booking)
        .where(
            Booking.room_id == room_id,
            Booking.booking_status.in_(INVENTORY_HOLDING_STATUSES),
            Booking.checkin_date < checkout_date,
            Booking.checkout_date > checkin_date,
        )
    )
    record_db_operation("read")
    return result.scalar() or 0


async def _claim_room(db: AsyncSession, room_id: int, seen_version: int) -> bool:
    """Bump the room version if nobody else has; False means we lost the race."""
    result = await db.execute(
        update(Room)
        .where(Room.id == room_id, Room.version == seen_version)
        .values(version=Room.version + 1)
        .execution_options(synchronize_session=False)
    )
    record_db_operation("write")
    return result.rowcount == 1


async def _load_room(db: AsyncSession, room_id: int) -> Optional[Room]:
    result = await db.execute(
        select(Room).where(Room.id == room_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _resolve_guest(data: BookingCreate, caller: Caller) -> int:
    if isinstance(caller, UserCaller):
        return caller.user_id
    if data.user_id is None:
        raise ServiceError(ErrorCode.USER_NOT_FOUND, "user_id is required when booking for a guest")
    return data.user_id


async def _insert_booking(db: AsyncSession, data: BookingCreate, caller: Caller) -> Booking:
    """Run the checked insert, retrying when another creator claims the room first."""
    max_attempts = settings.BOOKING_MAX_RETRY_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        room = await _load_room(db, data.room_id)
        if room is None:
            raise ServiceError(ErrorCode.ROOM_NOT_FOUND, f"Room {data.room_id} not found")

        lodging = await db.get(Lodging, room.lodging_id)
        if lodging is None:
            logger.error("room_without_lodging", room_id=room.id, lodging_id=room.lodging_id)
            raise ServiceError(ErrorCode.LODGING_NOT_FOUND, f"Lodging of room {room.id} not found")

        if isinstance(caller, BusinessCaller) and lodging.business_id != caller.business_id:
            raise ServiceError(ErrorCode.UNAUTHORIZED, "Room belongs to another business")

        guests = data.adult + data.child
        if guests < room.capacity_min or guests > room.capacity_max:
            raise ServiceError(
                ErrorCode.INVALID_GUEST_COUNT,
                f"Room {room.id} accepts {room.capacity_min}-{room.capacity_max} guests, got {guests}",
            )

        if room.status != "active":
            raise ServiceError(ErrorCode.ROOM_NOT_AVAILABLE, f"Room {room.id} is {room.status}")

        seen_version = room.version
        overlapping = await count_overlapping_bookings(
            db, room.id, data.checkin_date, data.checkout_date
        )
        if overlapping >= room.inventory_count:
            logger.warning(
                "booking_rejected_no_inventory",
                room_id=room.id,
                overlapping=overlapping,
                inventory=room.inventory_count,
            )
            raise ServiceError(
                ErrorCode.ROOM_NOT_AVAILABLE,
                f"Room {room.id} is fully booked for the requested dates",
            )

        # The guest is checked last, after the room is known to be bookable
        user_id = _resolve_guest(data, caller)
        user = await db.get(User, user_id)
        if user is None:
            raise ServiceError(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found")

        if not await _claim_room(db, room.id, seen_version):
            logger.info("booking_retry", room_id=room.id, attempt=attempt, reason="version_conflict")
            record_db_operation("retry")
            # Drop our snapshot so the next pass reads the winner's booking
            await db.rollback()
            continue

        booking = Booking(
            room_id=room.id,
            user_id=user.id,
            business_id=lodging.business_id,
            adult=data.adult,
            child=data.child,
            checkin_date=data.checkin_date,
            checkout_date=data.checkout_date,
            duration=(data.checkout_date - data.checkin_date).days,
            booking_status=BookingStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
        )
        db.add(booking)
        await db.flush()
        await db.refresh(booking)
        await db.commit()

        logger.info(
            "booking_created",
            booking_id=booking.id,
            room_id=room.id,
            user_id=user.id,
            business_id=booking.business_id,
            nights=booking.duration,
            attempt=attempt,
        )
        return booking

    raise ServiceError(
        ErrorCode.ROOM_NOT_AVAILABLE,
        "Booking failed due to high demand for this room. Please try again.",
    )


async def create_booking(db: AsyncSession, data: BookingCreate, caller: Caller) -> BookingDetail:
    """
    Create a pending booking after checking, in order: room exists, its
    lodging exists (and belongs to a business caller), guest count fits the
    room, the room is active with a unit free for the dates, and the guest
    exists. Nothing is persisted when any check fails.
    """
    start = time.perf_counter()
    try:
        booking = await _insert_booking(db, data, caller)
    except ServiceError as e:
        await db.rollback()
        record_booking_attempt(_ATTEMPT_OUTCOME.get(e.code, "rejected"))
        logger.info("booking_rejected", room_id=data.room_id, code=e.code.value)
        raise
    except Exception:
        await db.rollback()
        record_booking_attempt("error")
        raise
    finally:
        booking_latency.observe(time.perf_counter() - start)

    record_booking_attempt("success")
    return await assemble_booking(db, booking)


async def _get_business_booking(db: AsyncSession, booking_id: int, caller: BusinessCaller) -> Booking:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id, Booking.business_id == caller.business_id)
        .with_for_update()
    )
    booking = result.scalar_one_or_none()
    if booking is None:
        raise ServiceError(ErrorCode.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")
    return booking


async def set_booking_status(
    db: AsyncSession,
    booking_id: int,
    status: BookingStatus,
    caller: BusinessCaller,
    cancellation_reason: Optional[str] = None,
    policy: Optional[TransitionPolicy] = None,
) -> BookingDetail:
    """
    Move a booking to `status` and synchronize its payment in one commit.

    cancelled            -> payment.paid = 0, payment_status = refunded,
                            cancellation reason stored
    confirmed, completed -> payment created or overwritten at the computed
                            total and fully paid, payment_status = paid
    pending              -> no payment change
    Any status other than cancelled clears the cancellation reason.
    """
    policy = policy or get_transition_policy()
    try:
        booking = await _get_business_booking(db, booking_id, caller)
        current = BookingStatus(booking.booking_status)
        if not policy.allows(current, status):
            raise ServiceError(
                ErrorCode.INVALID_STATUS_TRANSITION,
                f"Cannot move booking from {current.value} to {status.value}",
            )

        room = await db.get(Room, booking.room_id)
        if room is None:
            raise ServiceError(ErrorCode.ROOM_NOT_FOUND, f"Room {booking.room_id} not found")

        if status == BookingStatus.CANCELLED:
            await refund_payment(db, booking.id)
            booking.payment_status = PaymentStatus.REFUNDED.value
            if cancellation_reason:
                booking.cancellation_reason = cancellation_reason
        elif status in (BookingStatus.CONFIRMED, BookingStatus.COMPLETED):
            await charge_for_stay(db, booking, room)
            booking.payment_status = PaymentStatus.PAID.value
            booking.cancellation_reason = None
        else:
            booking.cancellation_reason = None

        booking.booking_status = status.value
        await db.flush()
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    record_status_transition(status.value)
    logger.info(
        "booking_status_changed",
        booking_id=booking.id,
        business_id=caller.business_id,
        from_status=current.value,
        to_status=status.value,
        policy=policy.name,
    )
    return await assemble_booking(db, booking)


async def set_payment_status(
    db: AsyncSession,
    booking_id: int,
    payment_status: PaymentStatus,
    caller: BusinessCaller,
) -> BookingDetail:
    """Change settlement state only; the booking status is left alone."""
    try:
        booking = await _get_business_booking(db, booking_id, caller)
        await settle_payment(db, booking.id, payment_status)
        booking.payment_status = payment_status.value
        await db.flush()
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "payment_status_changed",
        booking_id=booking.id,
        business_id=caller.business_id,
        payment_status=payment_status.value,
    )
    return await assemble_booking(db, booking)
