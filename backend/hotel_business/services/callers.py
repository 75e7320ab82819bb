"""
Caller identities.

A request is made either by a guest (UserCaller) or by a business operator
(BusinessCaller). Each variant carries its own booking scope, so query code
asks the caller to restrict a statement instead of branching on a role string.
"""

from dataclasses import dataclass
from typing import Union

from sqlalchemy import Select

from hotel_business.models.booking import Booking


@dataclass(frozen=True)
class UserCaller:
    user_id: int
    role: str = "user"

    def scope_bookings(self, query: Select) -> Select:
        return query.where(Booking.user_id == self.user_id)

    def can_view(self, booking: Booking) -> bool:
        return booking.user_id == self.user_id


@dataclass(frozen=True)
class BusinessCaller:
    business_id: int
    role: str = "business"

    def scope_bookings(self, query: Select) -> Select:
        return query.where(Booking.business_id == self.business_id)

    def can_view(self, booking: Booking) -> bool:
        return booking.business_id == self.business_id


Caller = Union[UserCaller, BusinessCaller]
