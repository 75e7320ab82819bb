"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from hotel_business.models.booking import BookingStatus, PaymentStatus
from hotel_business.schemas.lodging import LodgingResponse
from hotel_business.schemas.payment import PaymentResponse
from hotel_business.schemas.room import RoomResponse
from hotel_business.schemas.user import UserResponse


class BookingCreate(BaseModel):
    room_id: int
    # Required when a business books on a guest's behalf; ignored for guests
    user_id: Optional[int] = None
    adult: int = Field(1, ge=0, le=50)
    child: int = Field(0, ge=0, le=50)
    checkin_date: date
    checkout_date: date

    @model_validator(mode="after")
    def check_date_order(self):
        if self.checkout_date <= self.checkin_date:
            raise ValueError("checkout_date must be after checkin_date")
        return self


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    cancellation_reason: Optional[str] = Field(None, max_length=500)


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class BookingResponse(BaseModel):
    id: int
    room_id: int
    user_id: int
    business_id: int
    adult: int
    child: int
    checkin_date: date
    checkout_date: date
    duration: int
    booking_status: BookingStatus
    payment_status: PaymentStatus
    cancellation_reason: Optional[str]
    booking_date: datetime

    model_config = {"from_attributes": True}


class BookingDetail(BaseModel):
    """A booking with its best-effort joins; any join may be null."""

    booking: BookingResponse
    room: Optional[RoomResponse] = None
    lodging: Optional[LodgingResponse] = None
    user: Optional[UserResponse] = None
    payment: Optional[PaymentResponse] = None

    model_config = {"from_attributes": True}


class BookingListResponse(BaseModel):
    items: list[BookingDetail]
    total: int
    page: int
    limit: int
    total_pages: int
