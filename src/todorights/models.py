"""Record types exchanged between the rights core and its stores.

All records are frozen: a decision is computed from snapshots and never
mutates what it was handed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .permissions.constants import EntityKind, PermissionLevel, PrincipalKind


@dataclass(frozen=True)
class EntityRef:
    """Reference to one entity: kind + numeric id."""

    kind: EntityKind
    id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", EntityKind(self.kind))

    @property
    def log_label(self) -> str:
        return f"{self.kind.value}:{self.id}"

    @classmethod
    def namespace(cls, namespace_id: int) -> EntityRef:
        return cls(EntityKind.NAMESPACE, namespace_id)

    @classmethod
    def project(cls, project_id: int) -> EntityRef:
        return cls(EntityKind.PROJECT, project_id)

    @classmethod
    def task(cls, task_id: int) -> EntityRef:
        return cls(EntityKind.TASK, task_id)


@dataclass(frozen=True)
class EntityRecord:
    """Stored facts about a tree entity that rights resolution needs.

    ``parent`` is None only for namespaces. ``created_by_id`` is the
    creating user (owner for namespaces and projects, author for comments);
    entities without a creator leave it None and inherit ownership from
    their ancestors.
    """

    ref: EntityRef
    parent: Optional[EntityRef] = None
    created_by_id: Optional[int] = None
    deleted: bool = False
    archived: bool = False


@dataclass(frozen=True)
class Grantee:
    """Receiver of a grant: a user or a team."""

    kind: PrincipalKind
    id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", PrincipalKind(self.kind))

    @property
    def log_label(self) -> str:
        return f"{self.kind.value}:{self.id}"

    @classmethod
    def user(cls, user_id: int) -> Grantee:
        return cls(PrincipalKind.USER, user_id)

    @classmethod
    def team(cls, team_id: int) -> Grantee:
        return cls(PrincipalKind.TEAM, team_id)


@dataclass(frozen=True)
class Grant:
    """Explicit sharing record on a namespace or project."""

    entity: EntityRef
    grantee: Grantee
    level: PermissionLevel

    @property
    def key(self) -> tuple[EntityRef, Grantee]:
        """Uniqueness key: one grant per (entity, grantee)."""
        return (self.entity, self.grantee)


@dataclass(frozen=True)
class UserRecord:
    """Registered user as known to the identity directory."""

    id: int
    username: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class LinkShareRecord:
    """Link share as stored: a secret hash bound to one project."""

    id: int
    hash: str = field(repr=False)
    project_id: int = 0
    level: PermissionLevel = PermissionLevel.READ
    shared_by_id: Optional[int] = None


@dataclass(frozen=True)
class LabelRecord:
    """Label: shared vocabulary owned by its creator."""

    id: int
    created_by_id: int
    title: str = ""
    deleted: bool = False


__all__ = [
    "EntityRecord",
    "EntityRef",
    "Grant",
    "Grantee",
    "LabelRecord",
    "LinkShareRecord",
    "UserRecord",
]
