"""Level inheritance and tree shape.

Provides:
- ``LEVEL_INHERITANCE``: level → levels it implies.
- ``expand_levels()``: resolve implied levels.
- ``most_permissive()``: compose levels collected along a lineage.
- ``PARENT_KIND``: the only allowed parent kind for every non-root kind.
"""

from __future__ import annotations

from typing import Iterable

from .constants import EntityKind, PermissionLevel

# ── Level Inheritance ───────────────────────────────────
# Higher level implies all lower ones.

LEVEL_INHERITANCE: dict[PermissionLevel, tuple[PermissionLevel, ...]] = {
    PermissionLevel.ADMIN: (PermissionLevel.WRITE,),
    PermissionLevel.WRITE: (PermissionLevel.READ,),
    PermissionLevel.READ: (),
    PermissionLevel.NONE: (),
}


def expand_levels(levels: Iterable[PermissionLevel]) -> tuple[PermissionLevel, ...]:
    """Expand levels by resolving inheritance.

    Example::

        >>> expand_levels((PermissionLevel.ADMIN,))
        (<PermissionLevel.READ: 0>, <PermissionLevel.WRITE: 1>, <PermissionLevel.ADMIN: 2>)
    """
    expanded: set[PermissionLevel] = set(levels)
    queue = list(expanded)

    while queue:
        level = queue.pop()
        for child in LEVEL_INHERITANCE.get(level, ()):
            if child not in expanded:
                expanded.add(child)
                queue.append(child)

    expanded.discard(PermissionLevel.NONE)
    return tuple(sorted(expanded))


def most_permissive(levels: Iterable[PermissionLevel]) -> PermissionLevel:
    """Return the highest level, or NONE for an empty input.

    Grants found at every ancestor are combined with this; a broad grant on
    a namespace is never shadowed by a missing grant on a project below it.
    """
    return max(levels, default=PermissionLevel.NONE)


# ── Tree Shape ──────────────────────────────────────────

PARENT_KIND: dict[EntityKind, EntityKind] = {
    EntityKind.PROJECT: EntityKind.NAMESPACE,
    EntityKind.TASK: EntityKind.PROJECT,
    EntityKind.COMMENT: EntityKind.TASK,
    EntityKind.ATTACHMENT: EntityKind.TASK,
    EntityKind.REMINDER: EntityKind.TASK,
    EntityKind.RELATION: EntityKind.TASK,
}

# leaf → task → project → namespace
MAX_LINEAGE_DEPTH = 4


__all__ = [
    "LEVEL_INHERITANCE",
    "MAX_LINEAGE_DEPTH",
    "PARENT_KIND",
    "expand_levels",
    "most_permissive",
]
