"""
Review endpoints: guests write reviews, businesses moderate the reviews of
their own lodgings, and administrators read the report queue.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.security import require_admin, require_business, require_user
from hotel_business.db.session import get_db
from hotel_business.models.review import ReportStatus
from hotel_business.schemas.review import (
    BlockedReviewList,
    ReviewCreate,
    ReviewReportCreate,
    ReviewReportListResponse,
    ReviewReportResponse,
    ReviewResponse,
)
from hotel_business.services.callers import BusinessCaller, UserCaller
from hotel_business.services.review_service import (
    block_review,
    create_review,
    list_blocked_reviews,
    list_reports,
    report_review,
)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review_endpoint(
    data: ReviewCreate,
    caller: UserCaller = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Review a confirmed or completed stay. One review per booking."""
    return await create_review(db, data, caller)


@router.get("/blocked", response_model=BlockedReviewList)
async def list_blocked_reviews_endpoint(
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    reviews = await list_blocked_reviews(db, caller)
    return BlockedReviewList(
        count=len(reviews),
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
    )


@router.get("/reports", response_model=ReviewReportListResponse)
async def list_reports_endpoint(
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _: UserCaller = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Report queue for platform administrators, newest first."""
    return await list_reports(db, status_filter, page, limit)


@router.post(
    "/{review_id}/report",
    response_model=ReviewReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_review_endpoint(
    review_id: int,
    data: ReviewReportCreate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await report_review(db, review_id, data, caller)


@router.patch("/{review_id}/block", response_model=ReviewResponse)
async def block_review_endpoint(
    review_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await block_review(db, review_id, caller)
