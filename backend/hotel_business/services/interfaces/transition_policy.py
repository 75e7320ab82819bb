"""
Booking status transition policy interface.
Allows swapping which status changes a business may apply without touching
the booking service.
"""

from abc import ABC, abstractmethod

from hotel_business.models.booking import BookingStatus


class TransitionPolicy(ABC):
    """
    Interface for booking status transition rules.

    Implementations:
    - PermissiveTransitionPolicy: any status may move to any status
    - LifecycleTransitionPolicy: forward-only lifecycle table
    """

    name: str = "abstract"

    @abstractmethod
    def allows(self, current: BookingStatus, target: BookingStatus) -> bool:
        """
        Check whether a booking may move from `current` to `target`.

        Args:
            current: Status the booking is in now
            target: Requested status

        Returns:
            True if the transition may be applied
        """
        pass
