"""
Pydantic schemas for lodgings.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class LodgingCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=255)
    region: str = Field(..., min_length=1, max_length=100)
    phone: str = Field("", max_length=30)
    description: str = Field("", max_length=2000)


class LodgingUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    region: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    description: Optional[str] = Field(None, max_length=2000)


class LodgingResponse(BaseModel):
    id: int
    business_id: int
    name: str
    address: str
    region: str
    phone: str
    description: str
    created_at: datetime

    model_config = {"from_attributes": True}
