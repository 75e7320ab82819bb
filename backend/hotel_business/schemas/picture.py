"""
Pydantic schemas for room pictures.
"""

from datetime import datetime
from pydantic import BaseModel, Field


class PictureCreate(BaseModel):
    room_id: int
    picture_name: str = Field(..., min_length=1, max_length=100)
    picture_url: str = Field(..., min_length=1, max_length=200)


class PictureResponse(BaseModel):
    id: int
    room_id: int
    picture_name: str
    picture_url: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PictureDeleted(BaseModel):
    ok: bool = True
    id: int
