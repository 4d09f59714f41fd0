"""Shared fixtures: a small multi-tenant world in a MemoryStore.

    ns 10 (owner alice) ── project 20 (owner alice) ── task 30 (alice)
                                                        ├─ comment 40 (alice)
                                                        ├─ attachment 41
                                                        ├─ reminder 42
                                                        └─ relation 43
                       └── project 22 (owner alice) ── task 32 (alice)
    ns 11 (owner bob)   ── project 21 (owner bob)   ── task 31 (bob)

    team 100: carol
    link shares on project 20: "read-hash" (read), "write-hash" (write)
"""

from __future__ import annotations

import pytest

from todorights import (
    MemoryStore,
    PermissionLevel,
    RegisteredUser,
    RightsEngine,
)

ALICE = 1
BOB = 2
CAROL = 3
DAVE = 4  # never shared anything
ERIN = 5  # inactive

TEAM = 100


@pytest.fixture
def store() -> MemoryStore:
    s = MemoryStore()
    s.add_user(ALICE, "alice")
    s.add_user(BOB, "bob")
    s.add_user(CAROL, "carol")
    s.add_user(DAVE, "dave")
    s.add_user(ERIN, "erin", is_active=False)

    s.add_namespace(10, owner_id=ALICE)
    s.add_project(20, namespace_id=10, owner_id=ALICE)
    s.add_project(22, namespace_id=10, owner_id=ALICE)
    s.add_task(30, project_id=20, created_by_id=ALICE)
    s.add_task(32, project_id=22, created_by_id=ALICE)
    s.add_comment(40, task_id=30, author_id=ALICE)
    s.add_attachment(41, task_id=30, created_by_id=ALICE)
    s.add_reminder(42, task_id=30)
    s.add_relation(43, task_id=30, created_by_id=ALICE)

    s.add_namespace(11, owner_id=BOB)
    s.add_project(21, namespace_id=11, owner_id=BOB)
    s.add_task(31, project_id=21, created_by_id=BOB)

    s.add_team(TEAM, members=(CAROL,))

    s.add_link_share(1, "read-hash", project_id=20, level=PermissionLevel.READ, shared_by_id=ALICE)
    s.add_link_share(2, "write-hash", project_id=20, level=PermissionLevel.WRITE, shared_by_id=ALICE)
    return s


@pytest.fixture
def engine(store: MemoryStore) -> RightsEngine:
    return RightsEngine.from_store(store)


@pytest.fixture
def alice() -> RegisteredUser:
    return RegisteredUser(ALICE, "alice")


@pytest.fixture
def bob() -> RegisteredUser:
    return RegisteredUser(BOB, "bob")


@pytest.fixture
def carol() -> RegisteredUser:
    return RegisteredUser(CAROL, "carol")


@pytest.fixture
def dave() -> RegisteredUser:
    return RegisteredUser(DAVE, "dave")
