"""
Room picture records, scoped to the business that owns the room.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.models.picture import RoomPicture
from hotel_business.schemas.picture import PictureCreate
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.room_service import authorize_room

logger = get_logger(__name__)


async def list_room_pictures(db: AsyncSession, room_id: int, caller: BusinessCaller) -> list[RoomPicture]:
    room = await authorize_room(db, room_id, caller)
    result = await db.execute(
        select(RoomPicture)
        .where(RoomPicture.room_id == room.id)
        .order_by(RoomPicture.created_at.desc(), RoomPicture.id.desc())
    )
    return list(result.scalars().all())


async def add_picture(db: AsyncSession, data: PictureCreate, caller: BusinessCaller) -> RoomPicture:
    room = await authorize_room(db, data.room_id, caller)
    picture = RoomPicture(room_id=room.id, picture_name=data.picture_name, picture_url=data.picture_url)
    db.add(picture)
    await db.flush()
    await db.refresh(picture)

    logger.info("picture_added", picture_id=picture.id, room_id=room.id)
    return picture


async def delete_picture(db: AsyncSession, picture_id: int, caller: BusinessCaller) -> int:
    picture = await db.get(RoomPicture, picture_id)
    if picture is None:
        raise ServiceError(ErrorCode.PICTURE_NOT_FOUND, f"Picture {picture_id} not found")
    room = await authorize_room(db, picture.room_id, caller)

    await db.delete(picture)
    await db.flush()

    logger.info("picture_deleted", picture_id=picture_id, room_id=room.id)
    return picture_id
