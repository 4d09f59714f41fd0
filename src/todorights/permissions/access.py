"""Pure level checks.

Runtime helpers that answer "does this effective level satisfy that
capability" without touching any store. The engine calls these after it
has resolved a principal's effective level.
"""

from __future__ import annotations

from .constants import Capability, EntityKind, PermissionLevel
from .policy import CapabilityPolicy, policy_for


def level_satisfies(effective: PermissionLevel, required: PermissionLevel) -> bool:
    """Check if an effective level meets a required level.

    ``NONE`` never satisfies anything, not even a ``NONE`` requirement.

    Example::

        level_satisfies(PermissionLevel.ADMIN, PermissionLevel.WRITE)  # True
        level_satisfies(PermissionLevel.READ, PermissionLevel.WRITE)   # False
    """
    if effective is PermissionLevel.NONE:
        return False
    return effective >= required


def required_level(
    kind: EntityKind,
    capability: Capability,
    policy: CapabilityPolicy | None = None,
) -> PermissionLevel:
    """Level a capability requires on an entity of ``kind``."""
    effective_policy = policy or policy_for(kind)
    return effective_policy.required_level(capability)


def check_capability(
    effective: PermissionLevel,
    kind: EntityKind,
    capability: Capability,
    policy: CapabilityPolicy | None = None,
) -> bool:
    """Combined lookup + comparison.

    Args:
        effective: Level the principal holds on the entity.
        kind: Kind of the entity (the container, for CREATE).
        capability: Requested capability.
        policy: Optional override; defaults to the kind's policy.

    Returns:
        True if the capability is allowed.
    """
    return level_satisfies(effective, required_level(kind, capability, policy))


__all__ = [
    "check_capability",
    "level_satisfies",
    "required_level",
]
