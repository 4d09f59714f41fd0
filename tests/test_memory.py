"""Tests for MemoryStore."""

from __future__ import annotations

import threading

import pytest

from todorights import EntityKind, EntityRef, Grant, Grantee, MemoryStore, NotFound, PermissionLevel


class TestTreeBuilders:
    """Tests for adding tree entities."""

    def test_records_parent_and_creator(self, store: MemoryStore) -> None:
        record = store.get_entity(EntityRef.task(30))
        assert record is not None
        assert record.parent == EntityRef.project(20)
        assert record.created_by_id == 1

    def test_reminder_has_no_creator(self, store: MemoryStore) -> None:
        record = store.get_entity(EntityRef(EntityKind.REMINDER, 42))
        assert record is not None
        assert record.created_by_id is None

    def test_missing_parent_rejected(self, store: MemoryStore) -> None:
        with pytest.raises(NotFound):
            store.add_task(99, project_id=404)

    def test_set_archived(self, store: MemoryStore) -> None:
        store.set_archived(EntityRef.project(20))
        assert store.get_entity(EntityRef.project(20)).archived
        store.set_archived(EntityRef.project(20), archived=False)
        assert not store.get_entity(EntityRef.project(20)).archived

    def test_set_archived_missing(self, store: MemoryStore) -> None:
        with pytest.raises(NotFound):
            store.set_archived(EntityRef.project(404))


class TestDelete:
    """Tests for cascading logical deletion."""

    def test_cascade_counts(self, store: MemoryStore) -> None:
        # project 20, task 30, four task leaves
        assert store.delete(EntityRef.project(20)) == 6

    def test_cascade_marks_descendants(self, store: MemoryStore) -> None:
        store.delete(EntityRef.namespace(10))
        for ref in (EntityRef.project(22), EntityRef.task(32), EntityRef(EntityKind.ATTACHMENT, 41)):
            assert store.get_entity(ref).deleted
        assert not store.get_entity(EntityRef.namespace(11)).deleted

    def test_delete_drops_grants(self, store: MemoryStore) -> None:
        store.save_grant(Grant(EntityRef.project(20), Grantee.user(2), PermissionLevel.WRITE))
        store.save_grant(Grant(EntityRef.project(22), Grantee.user(2), PermissionLevel.WRITE))
        store.delete(EntityRef.project(20))
        assert store.get_grant(EntityRef.project(20), Grantee.user(2)) is None
        assert store.get_grant(EntityRef.project(22), Grantee.user(2)) is not None

    def test_delete_twice(self, store: MemoryStore) -> None:
        store.delete(EntityRef.task(30))
        assert store.delete(EntityRef.task(30)) == 0

    def test_delete_missing(self, store: MemoryStore) -> None:
        with pytest.raises(NotFound):
            store.delete(EntityRef.task(404))


class TestLabels:
    """Tests for label records and attachments."""

    def test_attach_and_detach(self, store: MemoryStore) -> None:
        store.add_label(1, created_by_id=1, title="urgent")
        store.attach_label(1, 30)
        store.attach_label(1, 32)
        assert store.label_task_ids(1) == [30, 32]
        store.detach_label(1, 30)
        assert store.label_task_ids(1) == [32]

    def test_attach_unknown_label(self, store: MemoryStore) -> None:
        with pytest.raises(NotFound):
            store.attach_label(5, 30)

    def test_attach_unknown_task(self, store: MemoryStore) -> None:
        store.add_label(1, created_by_id=1)
        with pytest.raises(NotFound):
            store.attach_label(1, 404)

    def test_delete_label(self, store: MemoryStore) -> None:
        store.add_label(1, created_by_id=1)
        store.attach_label(1, 30)
        store.delete_label(1)
        assert store.get_label(1).deleted
        assert store.label_task_ids(1) == []


class TestIdentities:
    """Tests for users and link shares."""

    def test_default_username(self) -> None:
        assert MemoryStore().add_user(7).username == "user7"

    def test_link_share_level_parsed(self, store: MemoryStore) -> None:
        share = store.add_link_share(3, "admin-hash", project_id=20, level="admin")
        assert share.level is PermissionLevel.ADMIN
        assert store.get_link_share("admin-hash") == share

    def test_remove_link_share(self, store: MemoryStore) -> None:
        assert store.remove_link_share("read-hash") is True
        assert store.get_link_share("read-hash") is None
        assert store.remove_link_share("read-hash") is False

    def test_share_hash_not_in_repr(self, store: MemoryStore) -> None:
        assert "read-hash" not in repr(store.get_link_share("read-hash"))


class TestAtomic:
    """Tests for the atomic scope."""

    def test_reentrant(self, store: MemoryStore) -> None:
        with store.atomic():
            with store.atomic():
                store.save_grant(Grant(EntityRef.project(20), Grantee.user(2), PermissionLevel.READ))
        assert store.get_grant(EntityRef.project(20), Grantee.user(2)) is not None

    def test_blocks_other_writers(self, store: MemoryStore) -> None:
        """A writer on another thread waits until the atomic scope ends."""
        written = threading.Event()

        def writer() -> None:
            store.save_grant(Grant(EntityRef.project(20), Grantee.user(4), PermissionLevel.READ))
            written.set()

        with store.atomic():
            thread = threading.Thread(target=writer)
            thread.start()
            assert not written.wait(timeout=0.1)
            assert store.get_grant(EntityRef.project(20), Grantee.user(4)) is None
        thread.join(timeout=2)
        assert written.is_set()
