"""
Pydantic schemas for rooms.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

RoomType = Literal["standard", "deluxe", "suite"]
RoomStatus = Literal["active", "inactive", "maintenance"]
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    room_type: RoomType = "standard"
    room_size: str = Field("", max_length=50)
    capacity_min: int = Field(1, ge=1)
    capacity_max: int = Field(..., ge=1)
    check_in_time: str = Field("15:00", pattern=TIME_PATTERN)
    check_out_time: str = Field("11:00", pattern=TIME_PATTERN)
    description: str = Field("", max_length=2000)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    inventory_count: int = Field(1, ge=1)
    owner_discount: Decimal = Field(Decimal("0"), ge=0, le=100, decimal_places=2)
    platform_discount: Decimal = Field(Decimal("0"), ge=0, le=100, decimal_places=2)
    status: RoomStatus = "active"

    @model_validator(mode="after")
    def check_capacity_range(self):
        if self.capacity_min > self.capacity_max:
            raise ValueError("capacity_min must not exceed capacity_max")
        return self


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    room_type: Optional[RoomType] = None
    room_size: Optional[str] = Field(None, max_length=50)
    capacity_min: Optional[int] = Field(None, ge=1)
    capacity_max: Optional[int] = Field(None, ge=1)
    check_in_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    check_out_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    inventory_count: Optional[int] = Field(None, ge=1)
    owner_discount: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    platform_discount: Optional[Decimal] = Field(None, ge=0, le=100, decimal_places=2)
    status: Optional[RoomStatus] = None


class RoomResponse(BaseModel):
    id: int
    lodging_id: int
    name: str
    room_type: str
    room_size: str
    capacity_min: int
    capacity_max: int
    check_in_time: str
    check_out_time: str
    description: str
    price: Decimal
    inventory_count: int
    owner_discount: Decimal
    platform_discount: Decimal
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class RoomListResponse(BaseModel):
    rooms: list[RoomResponse]
    total: int
    cached: bool = False
