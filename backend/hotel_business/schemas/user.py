"""
Pydantic schemas for guest and business accounts.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=100, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(..., min_length=8, max_length=128)
    phone: str = Field("", max_length=30)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    phone: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class BusinessCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    business_name: str = Field(..., min_length=1, max_length=255)
    owner_name: str = Field("", max_length=100)
    phone: str = Field("", max_length=30)
    business_number: Optional[str] = Field(None, max_length=30)
    business_type: Literal["hotel", "motel", "guesthouse", "resort", "etc"] = "hotel"
    address: str = Field("", max_length=255)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class BusinessResponse(BaseModel):
    id: int
    email: str
    business_name: str
    owner_name: str
    phone: str
    business_number: Optional[str]
    business_type: str
    address: str
    status: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
