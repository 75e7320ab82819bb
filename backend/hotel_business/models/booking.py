"""
Booking model representing a guest's reservation of one room.

Key design decisions:
- business_id is denormalized from room -> lodging at creation time so that
  business-scoped queries never need a join. It is written once and never
  updated afterwards
- Status fields are plain strings guarded by CHECK constraints; the allowed
  values live in the enums below
- booking_date is the reservation time, i.e. when the guest made the booking.
  Listings sort by it. The row's created_at is bookkeeping only and is not
  part of the API
- Index on (room_id, checkin_date, checkout_date) backs the overlap count
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Index, CheckConstraint

from hotel_business.db.base import Base, TimestampMixin


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


# Statuses that count against a room's inventory
INVENTORY_HOLDING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    adult = Column(Integer, nullable=False, default=0)
    child = Column(Integer, nullable=False, default=0)
    checkin_date = Column(Date, nullable=False)
    checkout_date = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False)
    booking_status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    cancellation_reason = Column(String(500), nullable=True)
    booking_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint("checkin_date < checkout_date", name="check_booking_date_order"),
        CheckConstraint("duration > 0", name="check_booking_duration_positive"),
        CheckConstraint("adult >= 0 AND child >= 0", name="check_booking_guests_non_negative"),
        CheckConstraint(
            "booking_status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'paid', 'refunded', 'failed')",
            name="check_booking_payment_status",
        ),
        Index("ix_bookings_room_dates", "room_id", "checkin_date", "checkout_date"),
        Index("ix_bookings_business_booked", "business_id", "booking_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, room={self.room_id}, user={self.user_id}, "
            f"status={self.booking_status}, payment={self.payment_status})>"
        )
