"""
Payment synchronization.

A booking's Payment mirrors its status: it is created lazily the first time
the booking is confirmed or completed, recomputed and overwritten on every
later confirm/complete, and zeroed (never deleted) on cancellation. These
helpers only stage changes on the session; the caller owns the commit so the
payment write lands in the same transaction as the booking status write.

Pricing:
    base  = room.price * booking.duration
    total = max(0, base - base * owner_discount / 100 - base * platform_discount / 100)

Both discounts are taken from the base price; they do not compound.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.core.metrics import record_payment_sync
from hotel_business.models.booking import Booking, PaymentStatus
from hotel_business.models.payment import Payment, PaymentType
from hotel_business.models.room import Room

logger = get_logger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def calculate_total(room: Room, duration: int) -> Decimal:
    """Amount owed for `duration` nights of `room` after both discounts."""
    base_price = Decimal(room.price) * duration
    owner_discount = base_price * Decimal(room.owner_discount or 0) / 100
    platform_discount = base_price * Decimal(room.platform_discount or 0) / 100
    total = max(ZERO, base_price - owner_discount - platform_discount)
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


async def get_payment(db: AsyncSession, booking_id: int) -> Optional[Payment]:
    result = await db.execute(select(Payment).where(Payment.booking_id == booking_id))
    return result.scalar_one_or_none()


async def get_default_payment_type(db: AsyncSession) -> PaymentType:
    """The payment type with the lowest type code."""
    result = await db.execute(select(PaymentType).order_by(PaymentType.type_code.asc()).limit(1))
    payment_type = result.scalar_one_or_none()
    if payment_type is None:
        raise ServiceError(ErrorCode.PAYMENT_TYPE_NOT_FOUND, "No payment type is configured")
    return payment_type


async def list_payment_types(db: AsyncSession) -> list[PaymentType]:
    result = await db.execute(select(PaymentType).order_by(PaymentType.type_code.asc()))
    return list(result.scalars().all())


async def charge_for_stay(db: AsyncSession, booking: Booking, room: Room) -> Payment:
    """
    Create or overwrite the booking's payment as fully paid.

    Re-applying is idempotent: total and paid are recomputed from the room, so
    repeated confirmations never drift.
    """
    payment_type = await get_default_payment_type(db)
    total = calculate_total(room, booking.duration)

    payment = await get_payment(db, booking.id)
    if payment is None:
        payment = Payment(
            booking_id=booking.id,
            payment_type_id=payment_type.id,
            total=total,
            paid=total,
        )
        payment.payment_type = payment_type
        db.add(payment)
        action = "created"
    else:
        payment.total = total
        payment.paid = total
        action = "updated"

    await db.flush()
    record_payment_sync(action)
    logger.info("payment_synced", booking_id=booking.id, action=action, total=total)
    return payment


async def refund_payment(db: AsyncSession, booking_id: int) -> Optional[Payment]:
    """Zero the paid amount, keeping the record. No-op without a payment."""
    payment = await get_payment(db, booking_id)
    if payment is None:
        return None
    payment.paid = ZERO
    await db.flush()
    record_payment_sync("refunded")
    logger.info("payment_refunded", booking_id=booking_id, total=payment.total)
    return payment


async def settle_payment(
    db: AsyncSession,
    booking_id: int,
    payment_status: PaymentStatus,
) -> Optional[Payment]:
    """
    Align the paid amount with a settlement status.

    paid     -> paid = total
    refunded -> paid = 0
    pending / failed leave the amounts untouched.
    """
    payment = await get_payment(db, booking_id)
    if payment is None:
        return None

    if payment_status == PaymentStatus.PAID:
        payment.paid = payment.total
    elif payment_status == PaymentStatus.REFUNDED:
        payment.paid = ZERO
    else:
        return payment

    await db.flush()
    record_payment_sync("settled")
    logger.info(
        "payment_settled",
        booking_id=booking_id,
        payment_status=payment_status.value,
        paid=payment.paid,
    )
    return payment
