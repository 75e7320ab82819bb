"""
Payment state for a booking, plus the payment-method lookup table.

A Payment is one-to-one with a Booking (unique booking_id). It is created the
first time the booking is confirmed or completed and mutated afterwards,
never recreated or deleted.
"""

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from hotel_business.db.base import Base, TimestampMixin


class PaymentType(Base):
    __tablename__ = "payment_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(20), nullable=False)
    type_code = Column(Integer, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<PaymentType(code={self.type_code}, name={self.name})>"


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True, index=True)
    payment_type_id = Column(Integer, ForeignKey("payment_types.id"), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    paid = Column(Numeric(12, 2), nullable=False, default=0)

    payment_type = relationship("PaymentType", lazy="joined")

    __table_args__ = (
        CheckConstraint("total >= 0", name="check_payment_total_non_negative"),
        CheckConstraint("paid >= 0", name="check_payment_paid_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Payment(booking={self.booking_id}, paid={self.paid}/{self.total})>"
