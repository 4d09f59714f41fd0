"""Tests for the per-resource capability contract."""

from __future__ import annotations

import pytest

from todorights import (
    Attachment,
    Capability,
    Comment,
    EntityRef,
    Grantee,
    Label,
    LabelTask,
    LinkShare,
    MemoryStore,
    Namespace,
    PermissionLevel,
    Project,
    ProjectLinkShare,
    Relation,
    Reminder,
    RightsEngine,
    Share,
    Task,
)

ALICE, BOB, DAVE = 1, 2, 4  # ids of the conftest world

PROJECT = EntityRef.project(20)


def grant(engine: RightsEngine, entity: EntityRef, user_id: int, level: PermissionLevel) -> None:
    engine.grants.upsert(entity, Grantee.user(user_id), level)


class TestNamespace:
    """Tests for Namespace."""

    def test_anyone_registered_creates(self, engine: RightsEngine, dave) -> None:
        assert Namespace(engine).can_create(dave)
        assert not Namespace(engine).can_create(LinkShare(1, 20, PermissionLevel.ADMIN))

    def test_owner(self, engine: RightsEngine, alice) -> None:
        namespace = Namespace(engine, 10)
        assert namespace.can_read(alice)
        assert namespace.can_update(alice)
        assert namespace.can_delete(alice)

    def test_without_id(self, engine: RightsEngine, alice) -> None:
        namespace = Namespace(engine)
        assert not namespace.can_read(alice)
        assert namespace.max_level(alice) is PermissionLevel.NONE
        with pytest.raises(ValueError):
            namespace.ref


class TestProjectAndTask:
    """Tests for Project and Task."""

    def test_project_create_needs_namespace_write(self, engine: RightsEngine, dave) -> None:
        project = Project(engine, namespace_id=10)
        assert not project.can_create(dave)
        grant(engine, EntityRef.namespace(10), DAVE, PermissionLevel.WRITE)
        assert project.can_create(dave)

    def test_task_create_needs_project_write(self, engine: RightsEngine, dave) -> None:
        task = Task(engine, project_id=20)
        grant(engine, PROJECT, DAVE, PermissionLevel.READ)
        assert not task.can_create(dave)
        grant(engine, PROJECT, DAVE, PermissionLevel.WRITE)
        assert task.can_create(dave)

    def test_container_looked_up_from_id(self, engine: RightsEngine, alice, bob) -> None:
        task = Task(engine, id=30)
        assert task.container_ref() == PROJECT
        assert task.can_create(alice)
        assert not task.can_create(bob)

    def test_missing_entity(self, engine: RightsEngine, alice) -> None:
        task = Task(engine, id=404)
        assert task.container_ref() is None
        for capability in Capability:
            assert not task.can(alice, capability)

    def test_dispatch(self, engine: RightsEngine, alice, dave) -> None:
        task = Task(engine, id=30, project_id=20)
        assert task.can(alice, "update")
        assert task.can(alice, Capability.DELETE)
        assert not task.can(dave, Capability.READ)
        with pytest.raises(ValueError):
            task.can(alice, "archive")

    def test_max_level(self, engine: RightsEngine, alice, dave) -> None:
        grant(engine, PROJECT, DAVE, PermissionLevel.WRITE)
        assert Task(engine, id=30).max_level(alice) is PermissionLevel.ADMIN
        assert Task(engine, id=30).max_level(dave) is PermissionLevel.WRITE

    def test_repr(self, engine: RightsEngine) -> None:
        assert repr(Task(engine, id=30, project_id=20)) == "Task(id=30, container_id=20)"


class TestTaskLeaves:
    """Tests for comments, attachments and reminders."""

    @pytest.mark.parametrize("cls, leaf_id", [(Comment, 40), (Attachment, 41), (Reminder, 42)])
    def test_read_and_write(self, engine: RightsEngine, dave, cls, leaf_id: int) -> None:
        grant(engine, PROJECT, DAVE, PermissionLevel.READ)
        leaf = cls(engine, id=leaf_id, task_id=30)
        assert leaf.can_read(dave)
        assert not leaf.can_update(dave)
        assert not cls(engine, task_id=30).can_create(dave)

        grant(engine, PROJECT, DAVE, PermissionLevel.WRITE)
        assert leaf.can_update(dave)
        assert leaf.can_delete(dave)
        assert cls(engine, task_id=30).can_create(dave)


class TestRelation:
    """Tests for Relation."""

    def test_needs_read_on_other_task(self, engine: RightsEngine, alice) -> None:
        assert Relation(engine, task_id=30, other_task_id=32).can_create(alice)
        assert not Relation(engine, task_id=30, other_task_id=31).can_create(alice)

    def test_needs_write_on_own_task(self, engine: RightsEngine, dave) -> None:
        grant(engine, PROJECT, DAVE, PermissionLevel.READ)
        assert not Relation(engine, task_id=30, other_task_id=30).can_create(dave)

    def test_other_task_required(self, engine: RightsEngine, alice) -> None:
        assert not Relation(engine, task_id=30).can_create(alice)

    def test_existing(self, engine: RightsEngine, alice, bob) -> None:
        relation = Relation(engine, id=43)
        assert relation.can_update(alice)
        assert not relation.can_read(bob)


class TestLabelResources:
    """Tests for Label and LabelTask."""

    @pytest.fixture
    def alice_label(self, store: MemoryStore) -> int:
        store.add_label(1, created_by_id=ALICE, title="urgent")
        store.attach_label(1, 30)
        return 1

    @pytest.fixture
    def bob_label(self, store: MemoryStore) -> int:
        store.add_label(2, created_by_id=BOB, title="later")
        return 2

    def test_label(self, engine: RightsEngine, alice, dave, alice_label: int) -> None:
        label = Label(engine, alice_label)
        assert label.can_update(alice)
        assert not label.can_read(dave)
        grant(engine, PROJECT, DAVE, PermissionLevel.ADMIN)
        assert label.can_read(dave)
        assert not label.can_delete(dave)
        assert Label(engine).can_create(dave)

    def test_attach_own_label(self, engine: RightsEngine, alice, alice_label: int) -> None:
        assert LabelTask(engine, alice_label, 32).can_create(alice)

    def test_attach_invisible_label(self, engine: RightsEngine, alice, bob_label: int) -> None:
        """A label the user can't see can't be put on their task."""
        assert not LabelTask(engine, bob_label, 30).can_create(alice)

    def test_attach_needs_task_write(self, engine: RightsEngine, dave, alice_label: int) -> None:
        grant(engine, PROJECT, DAVE, PermissionLevel.READ)
        link = LabelTask(engine, alice_label, 30)
        assert link.can_read(dave)
        assert not link.can_create(dave)
        assert not link.can_delete(dave)
        grant(engine, PROJECT, DAVE, PermissionLevel.WRITE)
        assert link.can_create(dave)
        assert link.can_update(dave)
        assert link.can_delete(dave)


class TestShareResources:
    """Tests for Share and ProjectLinkShare."""

    def test_share(self, engine: RightsEngine, alice, dave) -> None:
        share = Share(engine, PROJECT, Grantee.user(BOB))
        grant(engine, PROJECT, DAVE, PermissionLevel.WRITE)
        assert share.can_create(alice)
        assert share.can_delete(alice)
        assert share.can_read(dave)
        assert not share.can_update(dave)

    def test_link_share_may_not_manage_shares(self, engine: RightsEngine) -> None:
        principal = LinkShare(1, 20, PermissionLevel.ADMIN)
        assert Share(engine, PROJECT, Grantee.user(BOB)).can_read(principal)
        assert not Share(engine, PROJECT, Grantee.user(BOB)).can_create(principal)
        assert not ProjectLinkShare(engine, 20).can_create(principal)

    def test_project_link_share(self, engine: RightsEngine, alice, dave) -> None:
        grant(engine, PROJECT, DAVE, PermissionLevel.WRITE)
        assert ProjectLinkShare(engine, 20, PermissionLevel.WRITE).can_create(dave)
        assert not ProjectLinkShare(engine, 20, PermissionLevel.ADMIN).can_create(dave)
        assert ProjectLinkShare(engine, 20, "admin").can_delete(alice)
        assert ProjectLinkShare(engine, 20).can_read(dave)

    def test_project_link_share_reader(self, engine: RightsEngine, dave) -> None:
        grant(engine, PROJECT, DAVE, PermissionLevel.READ)
        assert not ProjectLinkShare(engine, 20).can_create(dave)
