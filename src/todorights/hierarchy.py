"""Hierarchy resolver: parent lookups and lineage walks.

Namespace → Project → Task → {Comment, Attachment, Reminder, Relation}.
Each hop is a single ``HierarchyQuery.get_entity`` call, so a full walk
costs at most ``MAX_LINEAGE_DEPTH`` lookups.
"""

from __future__ import annotations

import logging
from typing import Optional

from .exceptions import NotFound
from .interfaces import HierarchyQuery
from .models import EntityRecord, EntityRef
from .permissions.constants import EntityKind
from .permissions.inheritance import MAX_LINEAGE_DEPTH, PARENT_KIND

logger = logging.getLogger(__name__)


class HierarchyResolver:
    """Walks entity references toward their namespace."""

    def __init__(self, query: HierarchyQuery) -> None:
        self._query = query

    def get(self, ref: EntityRef) -> EntityRecord:
        """Load a single live record.

        Raises:
            NotFound: If the entity is missing, deleted, or not a tree kind.
        """
        if ref.kind is EntityKind.LABEL:
            raise NotFound(entity=ref.log_label)
        record = self._query.get_entity(ref)
        if record is None or record.deleted:
            raise NotFound(entity=ref.log_label)
        return record

    def parent_of(self, ref: EntityRef) -> tuple[Optional[EntityRef], bool]:
        """Return ``(parent, ok)``; ``ok`` is False only for a root namespace.

        Raises:
            NotFound: If the entity itself does not resolve.
        """
        record = self.get(ref)
        if ref.kind is EntityKind.NAMESPACE:
            return None, False
        self._check_parent(record)
        return record.parent, True

    def lineage(self, ref: EntityRef) -> tuple[EntityRecord, ...]:
        """Records from ``ref`` up to and including its namespace.

        Any deleted node on the way makes the whole chain unresolvable: a
        deleted namespace hides every project, task and leaf below it.

        Raises:
            NotFound: Missing or deleted node, or a parent of the wrong kind.
        """
        chain: list[EntityRecord] = []
        current: Optional[EntityRef] = ref
        while current is not None:
            if len(chain) >= MAX_LINEAGE_DEPTH:
                logger.error("Lineage of %s exceeds %d hops", ref.log_label, MAX_LINEAGE_DEPTH)
                raise NotFound(entity=ref.log_label)
            record = self.get(current)
            chain.append(record)
            if current.kind is EntityKind.NAMESPACE:
                break
            self._check_parent(record)
            current = record.parent
        return tuple(chain)

    @staticmethod
    def _check_parent(record: EntityRecord) -> None:
        expected = PARENT_KIND.get(record.ref.kind)
        if record.parent is None or expected is None or record.parent.kind is not expected:
            logger.error(
                "Inconsistent hierarchy: %s has parent %s, expected a %s",
                record.ref.log_label,
                record.parent.log_label if record.parent else None,
                expected.value if expected else None,
            )
            raise NotFound(entity=record.ref.log_label)


__all__ = ["HierarchyResolver"]
