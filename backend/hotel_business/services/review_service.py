"""
Review service: guest reviews and business moderation.

A guest may review a stay once its booking is confirmed or completed, and
only once per booking. A business moderates the reviews of its own lodgings:
it can report a review to the platform (once per business) or block it from
display. Platform administrators page through the reports.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.core.metrics import record_review_action
from hotel_business.models.booking import Booking, BookingStatus
from hotel_business.models.lodging import Lodging
from hotel_business.models.review import Review, ReviewReport, ReviewStatus, ReportStatus
from hotel_business.models.room import Room
from hotel_business.schemas.review import (
    ReviewCreate,
    ReviewReportCreate,
    ReviewReportListResponse,
    ReviewReportResponse,
)
from hotel_business.services.callers import BusinessCaller, UserCaller

logger = get_logger(__name__)

REVIEWABLE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)


async def create_review(db: AsyncSession, data: ReviewCreate, caller: UserCaller) -> Review:
    booking = await db.get(Booking, data.booking_id)
    if booking is None:
        raise ServiceError(ErrorCode.BOOKING_NOT_FOUND, f"Booking {data.booking_id} not found")
    if booking.user_id != caller.user_id:
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Only your own bookings can be reviewed")
    if booking.booking_status not in REVIEWABLE_STATUSES:
        raise ServiceError(
            ErrorCode.UNAUTHORIZED,
            f"A {booking.booking_status} booking cannot be reviewed yet",
        )

    room = await db.get(Room, booking.room_id)
    if room is None:
        raise ServiceError(ErrorCode.ROOM_NOT_FOUND, f"Room {booking.room_id} not found")
    if room.lodging_id != data.lodging_id:
        raise ServiceError(
            ErrorCode.REVIEW_LODGING_MISMATCH,
            f"Booking {booking.id} is not a stay at lodging {data.lodging_id}",
        )

    existing = await db.execute(select(Review.id).where(Review.booking_id == booking.id))
    if existing.scalar_one_or_none() is not None:
        raise ServiceError(ErrorCode.REVIEW_ALREADY_EXISTS, f"Booking {booking.id} already has a review")

    review = Review(
        lodging_id=room.lodging_id,
        user_id=caller.user_id,
        booking_id=booking.id,
        rating=data.rating,
        content=data.content,
        images=data.images,
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent review of the same booking
        raise ServiceError(ErrorCode.REVIEW_ALREADY_EXISTS, f"Booking {booking.id} already has a review") from e
    await db.refresh(review)

    record_review_action("created")
    logger.info("review_created", review_id=review.id, booking_id=booking.id, rating=review.rating)
    return review


async def _get_moderated_review(db: AsyncSession, review_id: int, caller: BusinessCaller) -> Review:
    review = await db.get(Review, review_id)
    if review is None:
        raise ServiceError(ErrorCode.REVIEW_NOT_FOUND, f"Review {review_id} not found")
    lodging = await db.get(Lodging, review.lodging_id)
    if lodging is None or lodging.business_id != caller.business_id:
        raise ServiceError(ErrorCode.UNAUTHORIZED, "Review belongs to another business's lodging")
    return review


async def report_review(
    db: AsyncSession,
    review_id: int,
    data: ReviewReportCreate,
    caller: BusinessCaller,
) -> ReviewReport:
    review = await _get_moderated_review(db, review_id, caller)

    existing = await db.execute(
        select(ReviewReport.id).where(
            ReviewReport.review_id == review.id,
            ReviewReport.business_id == caller.business_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ServiceError(ErrorCode.REVIEW_ALREADY_REPORTED, f"Review {review.id} was already reported")

    report = ReviewReport(review_id=review.id, business_id=caller.business_id, reason=data.reason)
    report.review = review
    db.add(report)
    try:
        await db.flush()
    except IntegrityError as e:
        raise ServiceError(ErrorCode.REVIEW_ALREADY_REPORTED, f"Review {review.id} was already reported") from e

    record_review_action("reported")
    logger.info("review_reported", review_id=review.id, report_id=report.id, business_id=caller.business_id)
    return report


async def block_review(db: AsyncSession, review_id: int, caller: BusinessCaller) -> Review:
    """Hide a review from display. The content is kept."""
    review = await _get_moderated_review(db, review_id, caller)
    if review.status == ReviewStatus.BLOCKED.value:
        raise ServiceError(ErrorCode.REVIEW_ALREADY_BLOCKED, f"Review {review.id} is already blocked")

    review.status = ReviewStatus.BLOCKED.value
    review.blocked_at = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(review)

    record_review_action("blocked")
    logger.info("review_blocked", review_id=review.id, business_id=caller.business_id)
    return review


async def list_blocked_reviews(db: AsyncSession, caller: BusinessCaller) -> list[Review]:
    """Blocked reviews across the caller's lodgings, most recently blocked first."""
    result = await db.execute(
        select(Review)
        .join(Lodging, Lodging.id == Review.lodging_id)
        .where(
            Lodging.business_id == caller.business_id,
            Review.status == ReviewStatus.BLOCKED.value,
        )
        .order_by(Review.blocked_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())


async def list_reports(
    db: AsyncSession,
    status: Optional[ReportStatus] = None,
    page: int = 1,
    limit: int = 20,
) -> ReviewReportListResponse:
    query = select(ReviewReport)
    if status is not None:
        query = query.where(ReviewReport.status == status.value)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

    result = await db.execute(
        query
        .order_by(ReviewReport.reported_at.desc(), ReviewReport.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    reports = result.scalars().all()

    logger.info("review_reports_listed", status=status.value if status else None, total=total)
    return ReviewReportListResponse(
        total=total,
        page=page,
        limit=limit,
        reports=[ReviewReportResponse.model_validate(r) for r in reports],
    )
