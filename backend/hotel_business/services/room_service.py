"""
Room service: CRUD for bookable room definitions.

Writes are restricted to the business that owns the room's lodging; reads of
a lodging's room list are public and cached (see cache_service).
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.models.lodging import Lodging
from hotel_business.models.room import Room
from hotel_business.schemas.room import RoomCreate, RoomUpdate
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.lodging_service import get_lodging

logger = get_logger(__name__)


async def create_room(
    db: AsyncSession,
    lodging_id: int,
    data: RoomCreate,
    caller: BusinessCaller,
) -> Room:
    lodging = await get_lodging(db, lodging_id, caller)
    room = Room(lodging_id=lodging.id, **data.model_dump())
    db.add(room)
    await db.flush()
    await db.refresh(room)

    logger.info(
        "room_created",
        room_id=room.id,
        lodging_id=lodging.id,
        inventory=room.inventory_count,
        price=room.price,
    )
    return room


async def get_room(db: AsyncSession, room_id: int) -> Room:
    room = await db.get(Room, room_id)
    if not room:
        raise ServiceError(ErrorCode.ROOM_NOT_FOUND, f"Room {room_id} not found")
    return room


async def get_owned_room(db: AsyncSession, room_id: int, caller: BusinessCaller) -> Room:
    result = await db.execute(
        select(Room)
        .join(Lodging, Lodging.id == Room.lodging_id)
        .where(Room.id == room_id, Lodging.business_id == caller.business_id)
    )
    room = result.scalar_one_or_none()
    if not room:
        raise ServiceError(ErrorCode.ROOM_NOT_FOUND, f"Room {room_id} not found")
    return room


async def authorize_room(db: AsyncSession, room_id: int, caller: BusinessCaller) -> Room:
    """Like get_owned_room, but a foreign room is refused rather than hidden."""
    room = await get_room(db, room_id)
    lodging = await db.get(Lodging, room.lodging_id)
    if lodging is None or lodging.business_id != caller.business_id:
        raise ServiceError(ErrorCode.UNAUTHORIZED, f"Room {room_id} belongs to another business")
    return room


async def list_rooms(db: AsyncSession, lodging_id: int) -> list[Room]:
    lodging = await db.get(Lodging, lodging_id)
    if not lodging:
        raise ServiceError(ErrorCode.LODGING_NOT_FOUND, f"Lodging {lodging_id} not found")

    result = await db.execute(
        select(Room)
        .where(Room.lodging_id == lodging_id)
        .order_by(Room.created_at.desc(), Room.id.desc())
    )
    return list(result.scalars().all())


async def update_room(
    db: AsyncSession,
    room_id: int,
    data: RoomUpdate,
    caller: BusinessCaller,
) -> Room:
    room = await get_owned_room(db, room_id, caller)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    capacity_min = changes.get("capacity_min", room.capacity_min)
    capacity_max = changes.get("capacity_max", room.capacity_max)
    if capacity_min > capacity_max:
        raise ServiceError(
            ErrorCode.INVALID_GUEST_COUNT,
            f"capacity_min ({capacity_min}) must not exceed capacity_max ({capacity_max})",
        )

    for field, value in changes.items():
        setattr(room, field, value)
    await db.flush()
    await db.refresh(room)

    logger.info("room_updated", room_id=room.id, fields=sorted(changes))
    return room


async def deactivate_room(db: AsyncSession, room_id: int, caller: BusinessCaller) -> Room:
    """Soft delete: bookings keep referencing the room."""
    room = await get_owned_room(db, room_id, caller)
    room.status = "inactive"
    await db.flush()
    await db.refresh(room)

    logger.info("room_deactivated", room_id=room.id, lodging_id=room.lodging_id)
    return room
