"""
Service-level tests for booking creation, availability, and payment sync.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select, func, text, update

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.models import Booking, Payment, Room
from hotel_business.models.booking import BookingStatus, PaymentStatus
from hotel_business.schemas.booking import BookingCreate
from hotel_business.services import booking_query, booking_service
from hotel_business.services.booking_query import BookingFilters, list_bookings
from hotel_business.services.booking_service import (
    count_overlapping_bookings,
    create_booking,
    set_booking_status,
    set_payment_status,
)
from hotel_business.services.callers import BusinessCaller, UserCaller
from hotel_business.services.interfaces import LifecycleTransitionPolicy
from tests.conftest import make_lodging, make_room

DAY1 = date(2027, 3, 1)


def d(offset: int) -> date:
    return DAY1 + timedelta(days=offset)


def request(room_id: int, start: int, end: int, adult: int = 2, child: int = 0, user_id=None) -> BookingCreate:
    return BookingCreate(
        room_id=room_id,
        user_id=user_id,
        adult=adult,
        child=child,
        checkin_date=d(start),
        checkout_date=d(end),
    )


async def booking_count(db, room_id: int) -> int:
    return (
        await db.execute(select(func.count()).select_from(Booking).where(Booking.room_id == room_id))
    ).scalar()


async def fetch_payment(db, booking_id: int):
    result = await db.execute(
        select(Payment)
        .where(Payment.booking_id == booking_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@pytest.mark.asyncio
async def test_create_booking_starts_pending(db_session, guest_caller, business, room_id, lodging_id):
    detail = await create_booking(db_session, request(room_id, 0, 2), guest_caller)

    assert detail.booking.booking_status == BookingStatus.PENDING
    assert detail.booking.payment_status == PaymentStatus.PENDING
    assert detail.booking.duration == 2
    assert detail.booking.business_id == business.id
    assert detail.booking.user_id == guest_caller.user_id
    assert detail.room.id == room_id
    assert detail.lodging.id == lodging_id
    assert detail.user.id == guest_caller.user_id
    assert detail.payment is None


@pytest.mark.asyncio
async def test_inventory_allows_n_bookings_then_rejects(db_session, guest_caller, lodging_id):
    room_id = await make_room(db_session, lodging_id, inventory_count=3)

    for _ in range(3):
        await create_booking(db_session, request(room_id, 0, 3), guest_caller)

    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 1, 2), guest_caller)
    assert exc.value.code == ErrorCode.ROOM_NOT_AVAILABLE
    assert await booking_count(db_session, room_id) == 3


@pytest.mark.asyncio
async def test_touching_ranges_do_not_overlap(db_session, guest_caller, room_id):
    await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    await create_booking(db_session, request(room_id, 2, 4), guest_caller)

    assert await booking_count(db_session, room_id) == 2


@pytest.mark.asyncio
async def test_overlap_count_uses_open_intervals(db_session, guest_caller, room_id):
    await create_booking(db_session, request(room_id, 2, 5), guest_caller)

    assert await count_overlapping_bookings(db_session, room_id, d(0), d(2)) == 0
    assert await count_overlapping_bookings(db_session, room_id, d(5), d(7)) == 0
    assert await count_overlapping_bookings(db_session, room_id, d(1), d(3)) == 1
    assert await count_overlapping_bookings(db_session, room_id, d(3), d(4)) == 1
    assert await count_overlapping_bookings(db_session, room_id, d(0), d(9)) == 1


@pytest.mark.asyncio
async def test_cancelled_and_completed_bookings_release_inventory(
    db_session, guest_caller, business_caller, room_id, payment_types
):
    first = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    await set_booking_status(db_session, first.booking.id, BookingStatus.CANCELLED, business_caller)
    second = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    await set_booking_status(db_session, second.booking.id, BookingStatus.COMPLETED, business_caller)

    third = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    assert third.booking.booking_status == BookingStatus.PENDING


@pytest.mark.asyncio
@pytest.mark.parametrize("adult,child", [(0, 0), (3, 2), (5, 0)])
async def test_guest_count_outside_capacity_is_rejected(db_session, guest_caller, room_id, adult, child):
    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 0, 1, adult=adult, child=child), guest_caller)

    assert exc.value.code == ErrorCode.INVALID_GUEST_COUNT
    assert await booking_count(db_session, room_id) == 0


@pytest.mark.asyncio
async def test_missing_room(db_session, guest_caller):
    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(9999, 0, 1), guest_caller)
    assert exc.value.code == ErrorCode.ROOM_NOT_FOUND


@pytest.mark.asyncio
async def test_room_without_lodging(db_session, guest_caller, lodging_id):
    room_id = await make_room(db_session, lodging_id)
    # SQLite does not enforce foreign keys here, which lets us orphan the room
    await db_session.execute(update(Room).where(Room.id == room_id).values(lodging_id=4242))
    await db_session.commit()

    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 0, 1), guest_caller)
    assert exc.value.code == ErrorCode.LODGING_NOT_FOUND


@pytest.mark.asyncio
async def test_missing_user_is_checked_after_availability(db_session, room_id):
    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 0, 1), UserCaller(user_id=777))
    assert exc.value.code == ErrorCode.USER_NOT_FOUND
    assert await booking_count(db_session, room_id) == 0


@pytest.mark.asyncio
async def test_inactive_room_is_not_bookable(db_session, guest_caller, lodging_id):
    room_id = await make_room(db_session, lodging_id, status="maintenance")

    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 0, 1), guest_caller)
    assert exc.value.code == ErrorCode.ROOM_NOT_AVAILABLE


@pytest.mark.asyncio
async def test_business_books_on_behalf_of_guest(db_session, business_caller, guest, room_id):
    detail = await create_booking(db_session, request(room_id, 0, 1, user_id=guest.id), business_caller)
    assert detail.booking.user_id == guest.id


@pytest.mark.asyncio
async def test_business_cannot_book_foreign_room(db_session, other_business, guest, room_id):
    caller = BusinessCaller(business_id=other_business.id)
    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 0, 1, user_id=guest.id), caller)
    assert exc.value.code == ErrorCode.UNAUTHORIZED


@pytest.mark.asyncio
async def test_business_without_guest_fails_on_room_checks_first(
    db_session, business_caller, guest_caller, room_id
):
    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(9999, 0, 1), business_caller)
    assert exc.value.code == ErrorCode.ROOM_NOT_FOUND

    await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 1, 3), business_caller)
    assert exc.value.code == ErrorCode.ROOM_NOT_AVAILABLE

    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 5, 6), business_caller)
    assert exc.value.code == ErrorCode.USER_NOT_FOUND
    assert await booking_count(db_session, room_id) == 1


@pytest.mark.asyncio
async def test_concurrent_claim_forces_recount(
    db_session, guest_caller, other_guest, business, room_id, monkeypatch
):
    """A rival booking committed between our count and our claim wins the last unit."""
    real_claim = booking_service._claim_room
    calls = []

    async def racing_claim(db, claimed_room_id, seen_version):
        if not calls:
            db.add(Booking(
                room_id=claimed_room_id,
                user_id=other_guest.id,
                business_id=business.id,
                adult=1,
                child=0,
                checkin_date=d(0),
                checkout_date=d(2),
                duration=2,
            ))
            await db.execute(
                update(Room)
                .where(Room.id == claimed_room_id)
                .values(version=Room.version + 1)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        calls.append(seen_version)
        return await real_claim(db, claimed_room_id, seen_version)

    monkeypatch.setattr(booking_service, "_claim_room", racing_claim)

    with pytest.raises(ServiceError) as exc:
        await create_booking(db_session, request(room_id, 1, 3), guest_caller)

    assert exc.value.code == ErrorCode.ROOM_NOT_AVAILABLE
    assert len(calls) == 1
    assert await booking_count(db_session, room_id) == 1


@pytest.mark.asyncio
async def test_concurrent_claim_retries_when_inventory_remains(
    db_session, guest_caller, other_guest, business, lodging_id, monkeypatch
):
    room_id = await make_room(db_session, lodging_id, inventory_count=2)
    real_claim = booking_service._claim_room
    seen = []

    async def racing_claim(db, claimed_room_id, seen_version):
        if not seen:
            db.add(Booking(
                room_id=claimed_room_id,
                user_id=other_guest.id,
                business_id=business.id,
                adult=1,
                child=0,
                checkin_date=d(0),
                checkout_date=d(2),
                duration=2,
            ))
            await db.execute(
                update(Room)
                .where(Room.id == claimed_room_id)
                .values(version=Room.version + 1)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        seen.append(seen_version)
        return await real_claim(db, claimed_room_id, seen_version)

    monkeypatch.setattr(booking_service, "_claim_room", racing_claim)

    detail = await create_booking(db_session, request(room_id, 0, 2), guest_caller)

    assert detail.booking.booking_status == BookingStatus.PENDING
    assert seen == [1, 2]
    assert await booking_count(db_session, room_id) == 2


@pytest.mark.asyncio
async def test_confirm_creates_discounted_payment(db_session, guest_caller, business_caller, room_id, payment_types):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)

    detail = await set_booking_status(db_session, created.booking.id, BookingStatus.CONFIRMED, business_caller)

    # 100 * 2 - 10% - 5% of the base price
    assert detail.payment.total == Decimal("170")
    assert detail.payment.paid == Decimal("170")
    assert detail.payment.payment_type.type_code == 1
    assert detail.booking.payment_status == PaymentStatus.PAID
    assert detail.booking.booking_status == BookingStatus.CONFIRMED


@pytest.mark.asyncio
async def test_reconfirm_does_not_drift(db_session, guest_caller, business_caller, room_id, payment_types):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id

    first = await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)
    second = await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)

    assert first.payment.id == second.payment.id
    assert second.payment.total == Decimal("170")
    assert second.payment.paid == Decimal("170")
    payments = (
        await db_session.execute(select(func.count()).select_from(Payment).where(Payment.booking_id == booking_id))
    ).scalar()
    assert payments == 1


@pytest.mark.asyncio
async def test_cancel_zeroes_payment_but_keeps_it(db_session, guest_caller, business_caller, room_id, payment_types):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id
    await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)

    detail = await set_booking_status(
        db_session, booking_id, BookingStatus.CANCELLED, business_caller, cancellation_reason="Guest request"
    )

    assert detail.booking.payment_status == PaymentStatus.REFUNDED
    assert detail.booking.cancellation_reason == "Guest request"
    payment = await fetch_payment(db_session, booking_id)
    assert payment is not None
    assert payment.paid == Decimal("0")
    assert payment.total == Decimal("170")


@pytest.mark.asyncio
async def test_cancel_without_payment(db_session, guest_caller, business_caller, room_id):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)

    detail = await set_booking_status(db_session, created.booking.id, BookingStatus.CANCELLED, business_caller)

    assert detail.payment is None
    assert detail.booking.payment_status == PaymentStatus.REFUNDED


@pytest.mark.asyncio
async def test_reopening_clears_cancellation_reason(db_session, guest_caller, business_caller, room_id):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id
    await set_booking_status(
        db_session, booking_id, BookingStatus.CANCELLED, business_caller, cancellation_reason="No show"
    )

    detail = await set_booking_status(db_session, booking_id, BookingStatus.PENDING, business_caller)

    assert detail.booking.booking_status == BookingStatus.PENDING
    assert detail.booking.cancellation_reason is None


@pytest.mark.asyncio
async def test_confirm_without_payment_types_fails_atomically(db_session, guest_caller, business_caller, room_id):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id

    with pytest.raises(ServiceError) as exc:
        await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)
    assert exc.value.code == ErrorCode.PAYMENT_TYPE_NOT_FOUND

    booking = (
        await db_session.execute(
            select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert booking.booking_status == BookingStatus.PENDING.value
    assert booking.payment_status == PaymentStatus.PENDING.value


@pytest.mark.asyncio
async def test_status_change_requires_ownership(db_session, guest_caller, other_business, room_id):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)

    with pytest.raises(ServiceError) as exc:
        await set_booking_status(
            db_session, created.booking.id, BookingStatus.CONFIRMED, BusinessCaller(business_id=other_business.id)
        )
    assert exc.value.code == ErrorCode.BOOKING_NOT_FOUND


@pytest.mark.asyncio
async def test_lifecycle_policy_blocks_reopening(db_session, guest_caller, business_caller, room_id, payment_types):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id
    policy = LifecycleTransitionPolicy()
    await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller, policy=policy)
    await set_booking_status(db_session, booking_id, BookingStatus.COMPLETED, business_caller, policy=policy)

    with pytest.raises(ServiceError) as exc:
        await set_booking_status(db_session, booking_id, BookingStatus.PENDING, business_caller, policy=policy)
    assert exc.value.code == ErrorCode.INVALID_STATUS_TRANSITION


@pytest.mark.asyncio
async def test_payment_status_paid_and_refunded(db_session, guest_caller, business_caller, room_id, payment_types):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id
    await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)

    refunded = await set_payment_status(db_session, booking_id, PaymentStatus.REFUNDED, business_caller)
    assert refunded.payment.paid == Decimal("0")
    assert refunded.booking.payment_status == PaymentStatus.REFUNDED
    assert refunded.booking.booking_status == BookingStatus.CONFIRMED

    paid = await set_payment_status(db_session, booking_id, PaymentStatus.PAID, business_caller)
    assert paid.payment.paid == paid.payment.total == Decimal("170")
    assert paid.booking.booking_status == BookingStatus.CONFIRMED


@pytest.mark.asyncio
async def test_payment_status_failed_leaves_amounts(db_session, guest_caller, business_caller, room_id, payment_types):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    booking_id = created.booking.id
    await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)

    detail = await set_payment_status(db_session, booking_id, PaymentStatus.FAILED, business_caller)

    assert detail.booking.payment_status == PaymentStatus.FAILED
    assert detail.payment.paid == Decimal("170")


@pytest.mark.asyncio
async def test_booking_business_id_is_written_once(db_session, guest_caller, business, other_business, room_id):
    created = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    # Moving the lodging to another business does not move existing bookings
    lodging_id = await make_lodging(db_session, other_business.id, name="New owner")
    await db_session.execute(update(Room).where(Room.id == room_id).values(lodging_id=lodging_id))
    await db_session.commit()

    booking = (
        await db_session.execute(
            select(Booking).where(Booking.id == created.booking.id).execution_options(populate_existing=True)
        )
    ).scalar_one()
    assert booking.business_id == business.id


@pytest.mark.asyncio
async def test_failed_join_leaves_other_joins_and_items_intact(
    db_session, monkeypatch, guest_caller, business_caller, lodging_id, payment_types
):
    room_id = await make_room(db_session, lodging_id, inventory_count=2)
    first = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    second = await create_booking(db_session, request(room_id, 0, 2), guest_caller)
    for booking_id in (first.booking.id, second.booking.id):
        await set_booking_status(db_session, booking_id, BookingStatus.CONFIRMED, business_caller)

    load_payment = booking_query._load_payment

    async def broken_for_newest(db, booking_id):
        if booking_id == second.booking.id:
            # A failing statement aborts the surrounding transaction on Postgres
            await db.execute(text("SELECT no_such_column FROM payments"))
        return await load_payment(db, booking_id)

    monkeypatch.setattr(booking_query, "_load_payment", broken_for_newest)

    listing = await list_bookings(db_session, business_caller, BookingFilters())

    newest, older = listing.items
    assert newest.booking.id == second.booking.id
    assert newest.payment is None
    assert newest.room.id == room_id
    assert newest.lodging.id == lodging_id
    assert newest.user.id == guest_caller.user_id
    assert older.booking.id == first.booking.id
    assert older.payment.total == Decimal("170")
    assert older.lodging.id == lodging_id
