"""
Notice service: the one notice a room can carry.

Unlike room management, a room of another business is refused with
UNAUTHORIZED instead of being reported missing.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.errors import ErrorCode, ServiceError
from hotel_business.core.logging import get_logger
from hotel_business.models.notice import Notice
from hotel_business.schemas.notice import NoticeUpdate, NoticeUpsert
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.room_service import authorize_room

logger = get_logger(__name__)


async def _notice_of(db: AsyncSession, room_id: int) -> Optional[Notice]:
    result = await db.execute(select(Notice).where(Notice.room_id == room_id))
    return result.scalar_one_or_none()


async def upsert_notice(db: AsyncSession, data: NoticeUpsert, caller: BusinessCaller) -> Notice:
    room = await authorize_room(db, data.room_id, caller)
    fields = data.model_dump(exclude={"room_id"})

    notice = await _notice_of(db, room.id)
    if notice is None:
        notice = Notice(room_id=room.id, **fields)
        db.add(notice)
    else:
        for field, value in fields.items():
            setattr(notice, field, value)

    await db.flush()
    await db.refresh(notice)

    logger.info("notice_saved", notice_id=notice.id, room_id=room.id)
    return notice


async def get_room_notice(db: AsyncSession, room_id: int, caller: BusinessCaller) -> Optional[Notice]:
    room = await authorize_room(db, room_id, caller)
    return await _notice_of(db, room.id)


async def update_notice(
    db: AsyncSession,
    notice_id: int,
    data: NoticeUpdate,
    caller: BusinessCaller,
) -> Notice:
    notice = await db.get(Notice, notice_id)
    if notice is None:
        raise ServiceError(ErrorCode.NOTICE_NOT_FOUND, f"Notice {notice_id} not found")
    await authorize_room(db, notice.room_id, caller)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(notice, field, value)
    await db.flush()
    await db.refresh(notice)

    logger.info("notice_updated", notice_id=notice.id, fields=sorted(changes))
    return notice
