"""
Pydantic schemas for payments and payment types.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class PaymentTypeResponse(BaseModel):
    id: int
    name: str
    type_code: int

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    total: Decimal
    paid: Decimal
    payment_type: Optional[PaymentTypeResponse]

    model_config = {"from_attributes": True}
