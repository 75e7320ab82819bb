"""
Permissive transition policy - no transition table.
Any status is reachable from any other, including completed -> pending.
"""

from hotel_business.models.booking import BookingStatus
from hotel_business.services.interfaces.transition_policy import TransitionPolicy


class PermissiveTransitionPolicy(TransitionPolicy):
    """
    Always allow.

    Use when:
    - Operators need to correct mistakes by hand (re-open a cancelled booking)
    - The deployment predates the lifecycle table
    """

    name = "permissive"

    def allows(self, current: BookingStatus, target: BookingStatus) -> bool:
        return True
