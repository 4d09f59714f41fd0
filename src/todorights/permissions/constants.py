"""Permission levels, capabilities and entity kinds for todorights.

Provides:
- ``PermissionLevel``: totally ordered sharing level (none < read < write < admin).
- ``Capability``: the four operations a caller can ask about.
- ``EntityKind``: every resource kind the engine knows how to resolve.
- ``PrincipalKind``: who a grant is issued to (user or team).
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from ..exceptions import InvalidLevel


class PermissionLevel(IntEnum):
    """Sharing level granted on a namespace or project.

    Values match the wire values used by the to-do API so that clients can
    keep sending plain integers: ``0`` read, ``1`` write, ``2`` admin.
    ``NONE`` sits below all of them and is never stored in a grant.

    Ordering is the integer ordering, so ``max()`` picks the most
    permissive level and ``>=`` answers "does this level imply that one".
    """

    NONE = -1
    READ = 0
    WRITE = 1
    ADMIN = 2

    @classmethod
    def parse(cls, value: Any) -> PermissionLevel:
        """Coerce an enum, int or name (``"write"``) into a level.

        Raises:
            InvalidLevel: If the value does not name a known level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidLevel(f"Invalid permission level: {value!r}", level=value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidLevel(f"Invalid permission level: {value!r}", level=value) from None
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise InvalidLevel(f"Invalid permission level: {value!r}", level=value) from None
        raise InvalidLevel(f"Invalid permission level: {value!r}", level=value)

    def implies(self, other: PermissionLevel) -> bool:
        """Admin implies write implies read."""
        return self >= other


class Capability(str, Enum):
    """Operation a principal wants to perform on an entity."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class EntityKind(str, Enum):
    """Resource kinds.

    NAMESPACE is the root of the containment tree. LABEL is shared
    laterally and is never part of a lineage.
    """

    NAMESPACE = "namespace"
    PROJECT = "project"
    TASK = "task"
    COMMENT = "comment"
    ATTACHMENT = "attachment"
    REMINDER = "reminder"
    RELATION = "relation"
    LABEL = "label"


class PrincipalKind(str, Enum):
    """Who a grant is issued to."""

    USER = "user"
    TEAM = "team"


# Kinds that can carry explicit grants.
SHAREABLE_KINDS = frozenset({EntityKind.NAMESPACE, EntityKind.PROJECT})

# Kinds attached directly to a task.
TASK_LEAF_KINDS = frozenset(
    {
        EntityKind.COMMENT,
        EntityKind.ATTACHMENT,
        EntityKind.REMINDER,
        EntityKind.RELATION,
    }
)


__all__ = [
    "Capability",
    "EntityKind",
    "PermissionLevel",
    "PrincipalKind",
    "SHAREABLE_KINDS",
    "TASK_LEAF_KINDS",
]
