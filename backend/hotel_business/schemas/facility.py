"""
Pydantic schemas for lodging facilities.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class FacilityUpsert(BaseModel):
    lodging_id: int
    service_name: str = Field(..., min_length=1, max_length=50)
    service_detail: str = Field("", max_length=100)


class FacilityUpdate(BaseModel):
    service_name: Optional[str] = Field(None, min_length=1, max_length=50)
    service_detail: Optional[str] = Field(None, max_length=100)


class FacilityResponse(BaseModel):
    id: int
    lodging_id: int
    service_name: str
    service_detail: str
    updated_at: datetime

    model_config = {"from_attributes": True}
