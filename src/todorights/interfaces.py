"""Query capability the rights core consumes.

The engine does not prescribe storage format, indexes or a query
language. A persistence layer implements these ABCs (``MemoryStore``
implements all of them) and hands the instances to the components at
construction time.
"""

from abc import ABC, abstractmethod
from contextlib import nullcontext
from typing import ContextManager, Iterable, Optional

from .models import EntityRecord, EntityRef, Grant, Grantee, LabelRecord, LinkShareRecord, UserRecord


class IdentityQuery(ABC):
    """Users and link shares."""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserRecord]:
        raise NotImplementedError

    @abstractmethod
    def get_link_share(self, share_hash: str) -> Optional[LinkShareRecord]:
        raise NotImplementedError


class GrantQuery(ABC):
    """Explicit grants on namespaces and projects."""

    @abstractmethod
    def get_grant(self, entity: EntityRef, grantee: Grantee) -> Optional[Grant]:
        raise NotImplementedError

    @abstractmethod
    def grants_for(self, entity: EntityRef) -> Iterable[Grant]:
        raise NotImplementedError

    @abstractmethod
    def save_grant(self, grant: Grant) -> None:
        """Insert or replace the grant for ``grant.key``."""
        raise NotImplementedError

    @abstractmethod
    def delete_grant(self, entity: EntityRef, grantee: Grantee) -> bool:
        """Remove a grant. Returns False if there was none."""
        raise NotImplementedError

    def atomic(self) -> ContextManager[object]:
        """Scope in which a check and a grant write are applied together.

        Stores without transactions may keep the default no-op.
        """
        return nullcontext()


class TeamQuery(ABC):
    """Team membership (managed elsewhere, read-only here)."""

    @abstractmethod
    def teams_of_user(self, user_id: int) -> Iterable[int]:
        raise NotImplementedError

    @abstractmethod
    def team_exists(self, team_id: int) -> bool:
        raise NotImplementedError


class HierarchyQuery(ABC):
    """Direct, one-row lookup of a tree entity."""

    @abstractmethod
    def get_entity(self, ref: EntityRef) -> Optional[EntityRecord]:
        raise NotImplementedError


class LabelQuery(ABC):
    """Labels and their task attachments."""

    @abstractmethod
    def get_label(self, label_id: int) -> Optional[LabelRecord]:
        raise NotImplementedError

    @abstractmethod
    def label_task_ids(self, label_id: int) -> Iterable[int]:
        raise NotImplementedError


__all__ = [
    "GrantQuery",
    "HierarchyQuery",
    "IdentityQuery",
    "LabelQuery",
    "TeamQuery",
]
