"""
Room endpoints with Redis caching on the per-lodging room listing.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.logging import get_logger
from hotel_business.core.security import require_business
from hotel_business.db.session import get_db
from hotel_business.schemas.room import RoomCreate, RoomListResponse, RoomResponse, RoomUpdate
from hotel_business.services.cache_service import (
    get_cached_rooms,
    invalidate_room_cache,
    set_cached_rooms,
)
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.room_service import (
    create_room,
    deactivate_room,
    get_room,
    list_rooms,
    update_room,
)

logger = get_logger(__name__)
router = APIRouter(tags=["Rooms"])


@router.post(
    "/lodgings/{lodging_id}/rooms",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_room_endpoint(
    lodging_id: int,
    data: RoomCreate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    room = await create_room(db, lodging_id, data, caller)
    await invalidate_room_cache(lodging_id)
    return room


@router.get("/lodgings/{lodging_id}/rooms", response_model=RoomListResponse)
async def list_rooms_endpoint(lodging_id: int, db: AsyncSession = Depends(get_db)):
    """
    List a lodging's rooms.
    Results are cached in Redis and invalidated on any room write of the lodging.
    """
    cached = await get_cached_rooms(lodging_id)
    if cached:
        logger.info("rooms_list_cache_hit", lodging_id=lodging_id)
        cached["cached"] = True
        return RoomListResponse(**cached)

    rooms = await list_rooms(db, lodging_id)
    response_data = {
        "rooms": [RoomResponse.model_validate(r).model_dump(mode="json") for r in rooms],
        "total": len(rooms),
        "cached": False,
    }
    await set_cached_rooms(lodging_id, response_data)
    return RoomListResponse(**response_data)


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room_endpoint(room_id: int, db: AsyncSession = Depends(get_db)):
    return await get_room(db, room_id)


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
async def update_room_endpoint(
    room_id: int,
    data: RoomUpdate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    room = await update_room(db, room_id, data, caller)
    await invalidate_room_cache(room.lodging_id)
    return room


@router.delete("/rooms/{room_id}", response_model=RoomResponse)
async def delete_room_endpoint(
    room_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate a room. Its bookings stay intact."""
    room = await deactivate_room(db, room_id, caller)
    await invalidate_room_cache(room.lodging_id)
    return room
