"""
Lodging endpoints. All operations are scoped to the calling business.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_business.core.security import require_business
from hotel_business.db.session import get_db
from hotel_business.schemas.lodging import LodgingCreate, LodgingResponse, LodgingUpdate
from hotel_business.services.callers import BusinessCaller
from hotel_business.services.lodging_service import (
    create_lodging,
    delete_lodging,
    get_lodging,
    list_lodgings,
    update_lodging,
)

router = APIRouter(prefix="/lodgings", tags=["Lodgings"])


@router.post("/", response_model=LodgingResponse, status_code=status.HTTP_201_CREATED)
async def create_lodging_endpoint(
    data: LodgingCreate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await create_lodging(db, data, caller)


@router.get("/", response_model=list[LodgingResponse])
async def list_lodgings_endpoint(
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """List the calling business's lodgings, newest first."""
    return await list_lodgings(db, caller)


@router.get("/{lodging_id}", response_model=LodgingResponse)
async def get_lodging_endpoint(
    lodging_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await get_lodging(db, lodging_id, caller)


@router.patch("/{lodging_id}", response_model=LodgingResponse)
async def update_lodging_endpoint(
    lodging_id: int,
    data: LodgingUpdate,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    return await update_lodging(db, lodging_id, data, caller)


@router.delete("/{lodging_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lodging_endpoint(
    lodging_id: int,
    caller: BusinessCaller = Depends(require_business),
    db: AsyncSession = Depends(get_db),
):
    """Delete a lodging. Fails with 409 while it still has rooms."""
    await delete_lodging(db, lodging_id, caller)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
