"""
Facility endpoints. All operations are scoped to the calling business.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.security import require_business
from hotel_business.db.session import get_db
from hotel_business.schemas.facility import FacilityResponse, FacilityUpdate, FacilityUpsert
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.facility_service import (
    get_lodging_facility,
    update_facility,
    upsert_facility,
)

router = APIRouter(prefix="/facilities", tags=["Facilities"])


@router.post("/", response_model=FacilityResponse, status_code=status.HTTP_201_CREATED)
async def upsert_facility_endpoint(
    data: FacilityUpsert,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Create the lodging's facility, replacing any existing one."""
    return await upsert_facility(db, data, caller)


@router.get("/lodging/{lodging_id}", response_model=Optional[FacilityResponse])
# Path used by clients of the previous API
@router.get("/hotel/{lodging_id}", response_model=Optional[FacilityResponse], include_in_schema=False)
async def get_lodging_facility_endpoint(
    lodging_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await get_lodging_facility(db, lodging_id, caller)


@router.put("/{facility_id}", response_model=FacilityResponse)
async def update_facility_endpoint(
    facility_id: int,
    data: FacilityUpdate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await update_facility(db, facility_id, data, caller)
