"""
Lifecycle transition policy - forward-only status table.

    pending   -> confirmed, cancelled
    confirmed -> completed, cancelled
    cancelled -> (terminal)
    completed -> (terminal)

Re-applying the current status is always allowed, so re-confirming a
confirmed booking recomputes its payment without changing state.
"""

from typing import Mapping

from hotel_business.models.booking import BookingStatus
from hotel_business.services.interfaces.transition_policy import TransitionPolicy

DEFAULT_LIFECYCLE_TABLE: Mapping[BookingStatus, frozenset] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


class LifecycleTransitionPolicy(TransitionPolicy):
    name = "lifecycle"

    def __init__(self, table: Mapping[BookingStatus, frozenset] = DEFAULT_LIFECYCLE_TABLE):
        self.table = table

    def allows(self, current: BookingStatus, target: BookingStatus) -> bool:
        if current == target:
            return True
        return target in self.table.get(current, frozenset())
