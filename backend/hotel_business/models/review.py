"""
Guest reviews of lodgings and the moderation trail around them.

Key design decisions:
- One review per booking (unique booking_id); only the guest who made a
  confirmed or completed booking may write it
- Businesses never delete reviews. They report them to the platform or block
  them from display; a blocked review keeps its content and records blocked_at
- A business reports a given review at most once
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from hotel_business.db.base import Base, TimestampMixin


class ReviewStatus(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    REJECTED = "rejected"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    lodging_id = Column(Integer, ForeignKey("lodgings.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)
    rating = Column(Integer, nullable=False)
    content = Column(String(2000), nullable=False)
    images = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=ReviewStatus.ACTIVE.value)
    blocked_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
        CheckConstraint("status IN ('active', 'blocked')", name="check_review_status"),
        Index("ix_reviews_lodging_status", "lodging_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, lodging={self.lodging_id}, rating={self.rating}, status={self.status})>"


class ReviewReport(Base):
    __tablename__ = "review_reports"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("reviews.id"), nullable=False, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    reason = Column(String(500), nullable=False)
    status = Column(String(20), nullable=False, default=ReportStatus.PENDING.value)
    reported_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    review = relationship("Review", lazy="joined")

    __table_args__ = (
        UniqueConstraint("review_id", "business_id", name="uq_review_reports_review_business"),
        CheckConstraint(
            "status IN ('pending', 'reviewed', 'rejected')",
            name="check_review_report_status",
        ),
        Index("ix_review_reports_status_reported", "status", "reported_at"),
    )

    def __repr__(self) -> str:
        return f"<ReviewReport(review={self.review_id}, business={self.business_id}, status={self.status})>"
