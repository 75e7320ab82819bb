"""
Pydantic schemas for reviews and review moderation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from hotel_business.models.review import ReportStatus, ReviewStatus


class ReviewCreate(BaseModel):
    lodging_id: int
    booking_id: int
    rating: int = Field(..., ge=1, le=5)
    content: str = Field(..., min_length=1, max_length=2000)
    images: list[str] = Field(default_factory=list, max_length=10)


class ReviewReportCreate(BaseModel):
    reason: str = Field(..., max_length=500)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("reason must not be blank")
        return value


class ReviewResponse(BaseModel):
    id: int
    lodging_id: int
    user_id: int
    booking_id: int
    rating: int
    content: str
    images: list[str]
    status: ReviewStatus
    blocked_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}


class BlockedReviewList(BaseModel):
    count: int
    reviews: list[ReviewResponse]


class ReviewReportResponse(BaseModel):
    id: int
    review_id: int
    business_id: int
    reason: str
    status: ReportStatus
    reported_at: datetime
    review: Optional[ReviewResponse] = None

    model_config = {"from_attributes": True}


class ReviewReportListResponse(BaseModel):
    total: int
    page: int
    limit: int
    reports: list[ReviewReportResponse]
