"""
Lodging service handling business-scoped CRUD.

Every lookup is filtered by the owning business, so a lodging of another
business is indistinguishable from a missing one.
"""

from sqlalchemy import delete, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.models.facility import Facility
from hotel_business.models.lodging import Lodging
from hotel_business.models.room import Room
from hotel_business.schemas.lodging import LodgingCreate, LodgingUpdate
from hotel_business.services.callers import BusinessCaller

logger = get_logger(__name__)


async def create_lodging(db: AsyncSession, data: LodgingCreate, caller: BusinessCaller) -> Lodging:
    lodging = Lodging(business_id=caller.business_id, **data.model_dump())
    db.add(lodging)
    await db.flush()
    await db.refresh(lodging)

    logger.info("lodging_created", lodging_id=lodging.id, business_id=caller.business_id)
    return lodging


async def get_lodging(db: AsyncSession, lodging_id: int, caller: BusinessCaller) -> Lodging:
    result = await db.execute(
        select(Lodging).where(Lodging.id == lodging_id, Lodging.business_id == caller.business_id)
    )
    lodging = result.scalar_one_or_none()
    if not lodging:
        raise ServiceError(ErrorCode.LODGING_NOT_FOUND, f"Lodging {lodging_id} not found")
    return lodging


async def list_lodgings(db: AsyncSession, caller: BusinessCaller) -> list[Lodging]:
    result = await db.execute(
        select(Lodging)
        .where(Lodging.business_id == caller.business_id)
        .order_by(Lodging.created_at.desc(), Lodging.id.desc())
    )
    return list(result.scalars().all())


async def update_lodging(
    db: AsyncSession,
    lodging_id: int,
    data: LodgingUpdate,
    caller: BusinessCaller,
) -> Lodging:
    lodging = await get_lodging(db, lodging_id, caller)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(lodging, field, value)
    await db.flush()
    await db.refresh(lodging)

    logger.info("lodging_updated", lodging_id=lodging.id, fields=sorted(changes))
    return lodging


async def delete_lodging(db: AsyncSession, lodging_id: int, caller: BusinessCaller) -> None:
    """Delete an empty lodging. Lodgings with rooms keep booking history alive."""
    lodging = await get_lodging(db, lodging_id, caller)
    room_count = (
        await db.execute(select(func.count()).select_from(Room).where(Room.lodging_id == lodging.id))
    ).scalar()
    if room_count:
        raise ServiceError(
            ErrorCode.LODGING_NOT_EMPTY,
            f"Lodging {lodging_id} still has {room_count} room(s)",
        )
    await db.execute(delete(Facility).where(Facility.lodging_id == lodging.id))
    await db.delete(lodging)
    await db.flush()

    logger.info("lodging_deleted", lodging_id=lodging_id, business_id=caller.business_id)
