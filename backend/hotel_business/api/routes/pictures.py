"""
Room picture endpoints. Only picture records are managed here; the image
files live in external storage.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.security import require_business
from hotel_business.db.session import get_db
from hotel_business.schemas.picture import PictureCreate, PictureDeleted, PictureResponse
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.picture_service import add_picture, delete_picture, list_room_pictures

router = APIRouter(prefix="/pictures", tags=["Pictures"])


@router.get("/room/{room_id}", response_model=list[PictureResponse])
@router.get("/own-hotel/{room_id}", response_model=list[PictureResponse], include_in_schema=False)
async def list_room_pictures_endpoint(
    room_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """A room's pictures, newest first."""
    return await list_room_pictures(db, room_id, caller)


@router.post("/", response_model=PictureResponse, status_code=status.HTTP_201_CREATED)
async def add_picture_endpoint(
    data: PictureCreate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await add_picture(db, data, caller)


@router.delete("/{picture_id}", response_model=PictureDeleted)
async def delete_picture_endpoint(
    picture_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return PictureDeleted(id=await delete_picture(db, picture_id, caller))
