"""
Booking endpoints with concurrency-safe reservation and payment sync.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.config import get_settings
from hotel_business.core.security import get_current_caller, require_business
from hotel_business.db.session import get_db
from hotel_business.models.booking import BookingStatus
from hotel_business.schemas.booking import (
    BookingCreate,
    BookingDetail,
    BookingListResponse,
    BookingStatusUpdate,
    PaymentStatusUpdate,
)
from hotel_business.services.booking_query import BookingFilters, get_booking, list_bookings
from hotel_business.services.booking_service import (
    create_booking,
    set_booking_status,
    set_payment_status,
)
from hotel_business.services.callers import BusinessCaller, Caller

settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingDetail, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Reserve a room for a date range.

    The overlap check and the insert run in one transaction guarded by an
    optimistic claim on the room, so concurrent requests for the last unit
    yield exactly one booking; the others get 409 ROOM_NOT_AVAILABLE.
    """
    return await create_booking(db, booking_data, caller)


@router.get("/", response_model=BookingListResponse)
async def list_bookings_endpoint(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    lodging_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.BOOKING_PAGE_SIZE, ge=1, le=100),
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """List bookings visible to the caller, newest first."""
    filters = BookingFilters(
        status=status_filter,
        lodging_id=lodging_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return await list_bookings(db, caller, filters)


@router.get("/{booking_id}", response_model=BookingDetail)
async def get_booking_endpoint(
    booking_id: int,
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    return await get_booking(db, booking_id, caller)


@router.patch("/{booking_id}/status", response_model=BookingDetail)
async def update_booking_status_endpoint(
    booking_id: int,
    body: BookingStatusUpdate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Confirm, complete, cancel or reopen a booking; the payment follows."""
    return await set_booking_status(
        db, booking_id, body.status, caller, cancellation_reason=body.cancellation_reason
    )


@router.patch("/{booking_id}/payment", response_model=BookingDetail)
async def update_payment_status_endpoint(
    booking_id: int,
    body: PaymentStatusUpdate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Record a settlement change without touching the booking status."""
    return await set_payment_status(db, booking_id, body.payment_status, caller)
