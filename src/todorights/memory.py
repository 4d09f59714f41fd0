"""In-process store implementing every query interface.

Useful for embedding the engine without a database and as the reference
implementation of the query capability. All tables are guarded by one
re-entrant lock; :meth:`MemoryStore.atomic` holds it so a rights check and
the guarded write can't interleave with another writer.

Usage::

    store = MemoryStore()
    store.add_user(1, "alice")
    store.add_namespace(10, owner_id=1)
    store.add_project(20, namespace_id=10, owner_id=1)
    engine = RightsEngine.from_store(store)
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional

from .exceptions import NotFound
from .interfaces import GrantQuery, HierarchyQuery, IdentityQuery, LabelQuery, TeamQuery
from .models import (
    EntityRecord,
    EntityRef,
    Grant,
    Grantee,
    LabelRecord,
    LinkShareRecord,
    UserRecord,
)
from .permissions.constants import EntityKind, PermissionLevel


class MemoryStore(IdentityQuery, GrantQuery, TeamQuery, HierarchyQuery, LabelQuery):
    """Dictionary-backed users, teams, tree entities, labels and grants."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[int, UserRecord] = {}
        self._link_shares: dict[str, LinkShareRecord] = {}
        self._teams: dict[int, set[int]] = {}
        self._entities: dict[EntityRef, EntityRecord] = {}
        self._children: dict[EntityRef, set[EntityRef]] = {}
        self._labels: dict[int, LabelRecord] = {}
        self._label_tasks: dict[int, set[int]] = {}
        self._grants: dict[tuple[EntityRef, Grantee], Grant] = {}

    @contextmanager
    def atomic(self) -> Iterator[MemoryStore]:
        with self._lock:
            yield self

    # ── IdentityQuery ─────────────────────────────────────

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        with self._lock:
            return self._users.get(user_id)

    def get_link_share(self, share_hash: str) -> Optional[LinkShareRecord]:
        with self._lock:
            return self._link_shares.get(share_hash)

    def add_user(self, user_id: int, username: str = "", *, is_active: bool = True) -> UserRecord:
        user = UserRecord(id=user_id, username=username or f"user{user_id}", is_active=is_active)
        with self._lock:
            self._users[user_id] = user
        return user

    def add_link_share(
        self,
        share_id: int,
        share_hash: str,
        project_id: int,
        level: PermissionLevel = PermissionLevel.READ,
        *,
        shared_by_id: Optional[int] = None,
    ) -> LinkShareRecord:
        share = LinkShareRecord(
            id=share_id,
            hash=share_hash,
            project_id=project_id,
            level=PermissionLevel.parse(level),
            shared_by_id=shared_by_id,
        )
        with self._lock:
            self._link_shares[share_hash] = share
        return share

    def remove_link_share(self, share_hash: str) -> bool:
        with self._lock:
            return self._link_shares.pop(share_hash, None) is not None

    # ── TeamQuery ─────────────────────────────────────────

    def teams_of_user(self, user_id: int) -> list[int]:
        with self._lock:
            return sorted(team_id for team_id, members in self._teams.items() if user_id in members)

    def team_exists(self, team_id: int) -> bool:
        with self._lock:
            return team_id in self._teams

    def add_team(self, team_id: int, members: tuple[int, ...] = ()) -> None:
        with self._lock:
            self._teams.setdefault(team_id, set()).update(members)

    def add_member(self, team_id: int, user_id: int) -> None:
        with self._lock:
            self._teams.setdefault(team_id, set()).add(user_id)

    def remove_member(self, team_id: int, user_id: int) -> None:
        with self._lock:
            self._teams.get(team_id, set()).discard(user_id)

    # ── HierarchyQuery ────────────────────────────────────

    def get_entity(self, ref: EntityRef) -> Optional[EntityRecord]:
        with self._lock:
            return self._entities.get(ref)

    def add_namespace(self, namespace_id: int, *, owner_id: int, archived: bool = False) -> EntityRecord:
        return self._add(EntityRecord(EntityRef.namespace(namespace_id), None, owner_id, archived=archived))

    def add_project(
        self,
        project_id: int,
        *,
        namespace_id: int,
        owner_id: int,
        archived: bool = False,
    ) -> EntityRecord:
        return self._add(
            EntityRecord(
                EntityRef.project(project_id),
                EntityRef.namespace(namespace_id),
                owner_id,
                archived=archived,
            )
        )

    def add_task(self, task_id: int, *, project_id: int, created_by_id: Optional[int] = None) -> EntityRecord:
        return self._add(EntityRecord(EntityRef.task(task_id), EntityRef.project(project_id), created_by_id))

    def add_comment(self, comment_id: int, *, task_id: int, author_id: Optional[int] = None) -> EntityRecord:
        return self._add_leaf(EntityKind.COMMENT, comment_id, task_id, author_id)

    def add_attachment(self, attachment_id: int, *, task_id: int, created_by_id: Optional[int] = None) -> EntityRecord:
        return self._add_leaf(EntityKind.ATTACHMENT, attachment_id, task_id, created_by_id)

    def add_reminder(self, reminder_id: int, *, task_id: int) -> EntityRecord:
        return self._add_leaf(EntityKind.REMINDER, reminder_id, task_id, None)

    def add_relation(self, relation_id: int, *, task_id: int, created_by_id: Optional[int] = None) -> EntityRecord:
        return self._add_leaf(EntityKind.RELATION, relation_id, task_id, created_by_id)

    def set_archived(self, ref: EntityRef, archived: bool = True) -> None:
        with self._lock:
            record = self._require(ref)
            self._entities[ref] = replace(record, archived=archived)

    def delete(self, ref: EntityRef) -> int:
        """Logically delete an entity and everything beneath it.

        Grants on deleted containers are dropped with them. Returns the
        number of entities marked deleted.
        """
        with self._lock:
            self._require(ref)
            count = 0
            pending = [ref]
            while pending:
                current = pending.pop()
                record = self._entities[current]
                if not record.deleted:
                    self._entities[current] = replace(record, deleted=True)
                    count += 1
                pending.extend(self._children.get(current, ()))
                for key in [key for key in self._grants if key[0] == current]:
                    del self._grants[key]
            return count

    def _add_leaf(self, kind: EntityKind, entity_id: int, task_id: int, created_by_id: Optional[int]) -> EntityRecord:
        return self._add(EntityRecord(EntityRef(kind, entity_id), EntityRef.task(task_id), created_by_id))

    def _add(self, record: EntityRecord) -> EntityRecord:
        with self._lock:
            if record.parent is not None:
                self._require(record.parent)
                self._children.setdefault(record.parent, set()).add(record.ref)
            self._entities[record.ref] = record
        return record

    def _require(self, ref: EntityRef) -> EntityRecord:
        record = self._entities.get(ref)
        if record is None:
            raise NotFound(entity=ref.log_label)
        return record

    # ── LabelQuery ────────────────────────────────────────

    def get_label(self, label_id: int) -> Optional[LabelRecord]:
        with self._lock:
            return self._labels.get(label_id)

    def label_task_ids(self, label_id: int) -> list[int]:
        with self._lock:
            return sorted(self._label_tasks.get(label_id, ()))

    def add_label(self, label_id: int, *, created_by_id: int, title: str = "") -> LabelRecord:
        label = LabelRecord(id=label_id, created_by_id=created_by_id, title=title)
        with self._lock:
            self._labels[label_id] = label
        return label

    def attach_label(self, label_id: int, task_id: int) -> None:
        with self._lock:
            if label_id not in self._labels:
                raise NotFound(entity=f"label:{label_id}")
            self._require(EntityRef.task(task_id))
            self._label_tasks.setdefault(label_id, set()).add(task_id)

    def detach_label(self, label_id: int, task_id: int) -> None:
        with self._lock:
            self._label_tasks.get(label_id, set()).discard(task_id)

    def delete_label(self, label_id: int) -> None:
        with self._lock:
            label = self._labels.get(label_id)
            if label is not None:
                self._labels[label_id] = replace(label, deleted=True)
            self._label_tasks.pop(label_id, None)

    # ── GrantQuery ────────────────────────────────────────

    def get_grant(self, entity: EntityRef, grantee: Grantee) -> Optional[Grant]:
        with self._lock:
            return self._grants.get((entity, grantee))

    def grants_for(self, entity: EntityRef) -> list[Grant]:
        with self._lock:
            return [grant for key, grant in self._grants.items() if key[0] == entity]

    def save_grant(self, grant: Grant) -> None:
        with self._lock:
            self._grants[grant.key] = grant

    def delete_grant(self, entity: EntityRef, grantee: Grantee) -> bool:
        with self._lock:
            return self._grants.pop((entity, grantee), None) is not None


__all__ = ["MemoryStore"]
