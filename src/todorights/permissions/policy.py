"""Capability policy: which level each capability requires.

Provides:
- ``CapabilityPolicy``: per-kind capability → required level mapping.
- ``DEFAULT_CAPABILITY_POLICY``: read needs read, everything else needs write.
- ``DEFAULT_CAPABILITY_POLICIES``: the policy used for every tree kind.
"""

from __future__ import annotations

from .constants import Capability, EntityKind, PermissionLevel

DEFAULT_CAPABILITY_POLICY: dict[Capability, PermissionLevel] = {
    Capability.READ: PermissionLevel.READ,
    Capability.CREATE: PermissionLevel.WRITE,
    Capability.UPDATE: PermissionLevel.WRITE,
    Capability.DELETE: PermissionLevel.WRITE,
}


class CapabilityPolicy:
    """Required level per capability for one entity kind.

    CREATE is evaluated against the container the new entity goes into,
    so the policy of the *container* kind applies.

    Args:
        kind: Entity kind this policy applies to.
        required: Mapping of capability → minimum level.

    Example::

        policy = CapabilityPolicy(kind=EntityKind.TASK)
        policy.required_level(Capability.UPDATE)  # PermissionLevel.WRITE
    """

    __slots__ = ("kind", "required")

    def __init__(
        self,
        *,
        kind: EntityKind,
        required: dict[Capability, PermissionLevel] | None = None,
    ) -> None:
        self.kind = kind
        self.required = dict(DEFAULT_CAPABILITY_POLICY) if required is None else dict(required)

    def required_level(self, capability: Capability) -> PermissionLevel:
        """Get the level a capability requires.

        Returns :attr:`PermissionLevel.ADMIN` for an unknown capability.
        """
        return self.required.get(capability, PermissionLevel.ADMIN)

    def __repr__(self) -> str:
        return f"CapabilityPolicy(kind={self.kind!r}, required={self.required!r})"


DEFAULT_CAPABILITY_POLICIES: dict[EntityKind, CapabilityPolicy] = {
    kind: CapabilityPolicy(kind=kind)
    for kind in EntityKind
    if kind is not EntityKind.LABEL
}


def policy_for(kind: EntityKind) -> CapabilityPolicy:
    """Policy for a kind; unknown kinds get the default table."""
    return DEFAULT_CAPABILITY_POLICIES.get(kind) or CapabilityPolicy(kind=kind)


__all__ = [
    "CapabilityPolicy",
    "DEFAULT_CAPABILITY_POLICIES",
    "DEFAULT_CAPABILITY_POLICY",
    "policy_for",
]
