"""
Room notice endpoints. A room of another business is refused with 403.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.security import require_business
from hotel_business.db.session import get_db
from hotel_business.schemas.notice import NoticeResponse, NoticeUpdate, NoticeUpsert
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.notice_service import get_room_notice, update_notice, upsert_notice

router = APIRouter(prefix="/notices", tags=["Notices"])


@router.post("/", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
async def upsert_notice_endpoint(
    data: NoticeUpsert,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Create the room's notice, replacing any existing one."""
    return await upsert_notice(db, data, caller)


@router.get("/room/{room_id}", response_model=Optional[NoticeResponse])
@router.get("/own-hotel/{room_id}", response_model=Optional[NoticeResponse], include_in_schema=False)
async def get_room_notice_endpoint(
    room_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await get_room_notice(db, room_id, caller)


@router.put("/{notice_id}", response_model=NoticeResponse)
async def update_notice_endpoint(
    notice_id: int,
    data: NoticeUpdate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await update_notice(db, notice_id, data, caller)
