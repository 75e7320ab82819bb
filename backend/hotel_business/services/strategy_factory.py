"""
Transition policy factory.
Configures which booking status transition policy to use.
"""

from typing import Optional

from hotel_business.core.config import get_settings
from hotel_business.services.interfaces import (
    LifecycleTransitionPolicy,
    PermissiveTransitionPolicy,
    TransitionPolicy,
)

POLICIES = {
    PermissiveTransitionPolicy.name: PermissiveTransitionPolicy,
    LifecycleTransitionPolicy.name: LifecycleTransitionPolicy,
}


def get_transition_policy_strategy(name: Optional[str] = None) -> TransitionPolicy:
    """
    Build a transition policy by name.

    Defaults to BOOKING_TRANSITION_POLICY; unknown names raise ValueError so a
    typo in configuration fails at startup instead of silently allowing
    everything.
    """
    name = name or get_settings().BOOKING_TRANSITION_POLICY
    try:
        return POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown booking transition policy: {name!r}")


# Singleton instance
_policy: Optional[TransitionPolicy] = None


def get_transition_policy() -> TransitionPolicy:
    """Get transition policy singleton."""
    global _policy
    if _policy is None:
        _policy = get_transition_policy_strategy()
    return _policy


def set_transition_policy(policy: Optional[TransitionPolicy]) -> None:
    """Replace the active policy (None resets to the configured default)."""
    global _policy
    _policy = policy
