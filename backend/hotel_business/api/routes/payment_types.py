"""
Payment method lookup.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.db.session import get_db
from hotel_business.schemas.payment import PaymentTypeResponse
from hotel_business.services.payment_service import list_payment_types

router = APIRouter(prefix="/payment-types", tags=["Payments"])


@router.get("/", response_model=list[PaymentTypeResponse])
async def list_payment_types_endpoint(db: AsyncSession = Depends(get_db)):
    """Payment methods ordered by type code; the first one is the default."""
    return await list_payment_types(db)
