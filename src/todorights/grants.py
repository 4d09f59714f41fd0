"""Grant store: explicit sharing records on namespaces and projects."""

from __future__ import annotations

import logging
from typing import Any, ContextManager

from .exceptions import GrantTargetNotShareable, InvalidLevel
from .interfaces import GrantQuery
from .models import EntityRef, Grant, Grantee
from .permissions.constants import SHAREABLE_KINDS, PermissionLevel

logger = logging.getLogger(__name__)


class GrantStore:
    """Reads and writes grants through a ``GrantQuery``.

    Does not check who is asking. Callers (the engine's ``share`` and
    ``unshare``) authorize before mutating.
    """

    def __init__(self, query: GrantQuery) -> None:
        self._query = query

    def direct_grant(self, entity: EntityRef, grantee: Grantee) -> PermissionLevel:
        """Level of the single explicit grant, or NONE if absent."""
        if entity.kind not in SHAREABLE_KINDS:
            return PermissionLevel.NONE
        grant = self._query.get_grant(entity, grantee)
        if grant is None:
            return PermissionLevel.NONE
        return grant.level

    def grants_for(self, entity: EntityRef) -> list[Grant]:
        """Every grant on an entity, users first, then by id."""
        if entity.kind not in SHAREABLE_KINDS:
            return []
        return sorted(
            self._query.grants_for(entity),
            key=lambda g: (g.grantee.kind.value != "user", g.grantee.id),
        )

    def upsert(self, entity: EntityRef, grantee: Grantee, level: Any) -> Grant:
        """Create the grant or replace its level.

        Raises:
            GrantTargetNotShareable: Entity is not a namespace or project.
            InvalidLevel: Level is NONE or not a level at all.
        """
        if entity.kind not in SHAREABLE_KINDS:
            raise GrantTargetNotShareable(entity=entity.log_label)
        parsed = PermissionLevel.parse(level)
        if parsed is PermissionLevel.NONE:
            raise InvalidLevel("Use revoke to remove a grant", level=int(parsed))

        grant = Grant(entity=entity, grantee=grantee, level=parsed)
        self._query.save_grant(grant)
        logger.info(
            "Grant %s on %s set to %s",
            grantee.log_label,
            entity.log_label,
            parsed.name,
        )
        return grant

    def revoke(self, entity: EntityRef, grantee: Grantee) -> bool:
        """Remove a grant. Idempotent; returns whether one existed."""
        if entity.kind not in SHAREABLE_KINDS:
            return False
        removed = self._query.delete_grant(entity, grantee)
        if removed:
            logger.info("Grant %s on %s revoked", grantee.log_label, entity.log_label)
        return removed

    def atomic(self) -> ContextManager[object]:
        return self._query.atomic()


__all__ = ["GrantStore"]
