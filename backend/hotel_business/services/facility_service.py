"""
Facility service. A lodging carries at most one facility record, so writes
through the create endpoint replace the existing one.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.models.facility import Facility
from hotel_business.models.lodging import Lodging
from hotel_business.schemas.facility import FacilityUpdate, FacilityUpsert
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.lodging_service import get_lodging

logger = get_logger(__name__)


async def _facility_of(db: AsyncSession, lodging_id: int) -> Optional[Facility]:
    result = await db.execute(select(Facility).where(Facility.lodging_id == lodging_id))
    return result.scalar_one_or_none()


async def upsert_facility(db: AsyncSession, data: FacilityUpsert, caller: BusinessCaller) -> Facility:
    lodging = await get_lodging(db, data.lodging_id, caller)

    facility = await _facility_of(db, lodging.id)
    if facility is None:
        facility = Facility(
            lodging_id=lodging.id,
            service_name=data.service_name,
            service_detail=data.service_detail,
        )
        db.add(facility)
        action = "created"
    else:
        facility.service_name = data.service_name
        facility.service_detail = data.service_detail
        action = "replaced"

    await db.flush()
    await db.refresh(facility)

    logger.info("facility_saved", facility_id=facility.id, lodging_id=lodging.id, action=action)
    return facility


async def get_lodging_facility(
    db: AsyncSession,
    lodging_id: int,
    caller: BusinessCaller,
) -> Optional[Facility]:
    lodging = await get_lodging(db, lodging_id, caller)
    return await _facility_of(db, lodging.id)


async def update_facility(
    db: AsyncSession,
    facility_id: int,
    data: FacilityUpdate,
    caller: BusinessCaller,
) -> Facility:
    result = await db.execute(
        select(Facility)
        .join(Lodging, Lodging.id == Facility.lodging_id)
        .where(Facility.id == facility_id, Lodging.business_id == caller.business_id)
    )
    facility = result.scalar_one_or_none()
    if facility is None:
        raise ServiceError(ErrorCode.FACILITY_NOT_FOUND, f"Facility {facility_id} not found")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(facility, field, value)
    await db.flush()
    await db.refresh(facility)

    logger.info("facility_updated", facility_id=facility.id, fields=sorted(changes))
    return facility
