"""
Pydantic schemas for room notices.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class NoticeUpsert(BaseModel):
    room_id: int
    content: str = Field("", max_length=100)
    usage_guide: str = Field("", max_length=100)
    introduction: str = Field("", max_length=100)


class NoticeUpdate(BaseModel):
    content: Optional[str] = Field(None, max_length=100)
    usage_guide: Optional[str] = Field(None, max_length=100)
    introduction: Optional[str] = Field(None, max_length=100)


class NoticeResponse(BaseModel):
    id: int
    room_id: int
    content: str
    usage_guide: str
    introduction: str
    updated_at: datetime

    model_config = {"from_attributes": True}
