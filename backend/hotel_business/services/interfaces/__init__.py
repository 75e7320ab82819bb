"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .transition_policy import TransitionPolicy
from .permissive_policy import PermissiveTransitionPolicy
from .lifecycle_policy import LifecycleTransitionPolicy, DEFAULT_LIFECYCLE_TABLE

__all__ = [
    'TransitionPolicy',
    'PermissiveTransitionPolicy',
    'LifecycleTransitionPolicy',
    'DEFAULT_LIFECYCLE_TABLE',
]
