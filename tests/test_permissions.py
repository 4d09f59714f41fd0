"""Tests for permission levels, inheritance and capability policy."""

from __future__ import annotations

import pytest

from todorights import InvalidLevel
from todorights.permissions import (
    DEFAULT_CAPABILITY_POLICIES,
    PARENT_KIND,
    SHAREABLE_KINDS,
    Capability,
    CapabilityPolicy,
    EntityKind,
    PermissionLevel,
    check_capability,
    expand_levels,
    level_satisfies,
    most_permissive,
    policy_for,
    required_level,
)


class TestPermissionLevel:
    """Tests for PermissionLevel ordering and parsing."""

    def test_total_order(self) -> None:
        """none < read < write < admin."""
        assert PermissionLevel.NONE < PermissionLevel.READ < PermissionLevel.WRITE < PermissionLevel.ADMIN

    def test_wire_values(self) -> None:
        """Levels keep the API's integer values."""
        assert int(PermissionLevel.READ) == 0
        assert int(PermissionLevel.WRITE) == 1
        assert int(PermissionLevel.ADMIN) == 2

    def test_implies(self) -> None:
        """Admin implies write implies read."""
        assert PermissionLevel.ADMIN.implies(PermissionLevel.WRITE)
        assert PermissionLevel.WRITE.implies(PermissionLevel.READ)
        assert not PermissionLevel.READ.implies(PermissionLevel.WRITE)

    def test_parse_accepts_enum_int_and_name(self) -> None:
        assert PermissionLevel.parse(PermissionLevel.WRITE) is PermissionLevel.WRITE
        assert PermissionLevel.parse(2) is PermissionLevel.ADMIN
        assert PermissionLevel.parse(" read ") is PermissionLevel.READ
        assert PermissionLevel.parse("Admin") is PermissionLevel.ADMIN

    @pytest.mark.parametrize("value", [3, -2, "owner", None, 1.5, True])
    def test_parse_rejects_unknown(self, value) -> None:
        """Unknown levels raise InvalidLevel."""
        with pytest.raises(InvalidLevel):
            PermissionLevel.parse(value)


class TestInheritance:
    """Tests for level expansion and composition."""

    def test_admin_expands_to_all(self) -> None:
        assert expand_levels((PermissionLevel.ADMIN,)) == (
            PermissionLevel.READ,
            PermissionLevel.WRITE,
            PermissionLevel.ADMIN,
        )

    def test_read_is_leaf(self) -> None:
        assert expand_levels((PermissionLevel.READ,)) == (PermissionLevel.READ,)

    def test_none_expands_to_nothing(self) -> None:
        assert expand_levels((PermissionLevel.NONE,)) == ()

    def test_most_permissive_picks_highest(self) -> None:
        """A broad grant is never shadowed by a missing narrower one."""
        levels = [PermissionLevel.NONE, PermissionLevel.WRITE, PermissionLevel.READ]
        assert most_permissive(levels) is PermissionLevel.WRITE

    def test_most_permissive_empty(self) -> None:
        assert most_permissive([]) is PermissionLevel.NONE

    def test_tree_shape(self) -> None:
        """Every non-root tree kind has exactly one parent kind."""
        assert EntityKind.NAMESPACE not in PARENT_KIND
        assert EntityKind.LABEL not in PARENT_KIND
        assert PARENT_KIND[EntityKind.PROJECT] is EntityKind.NAMESPACE
        assert PARENT_KIND[EntityKind.TASK] is EntityKind.PROJECT
        for kind in (EntityKind.COMMENT, EntityKind.ATTACHMENT, EntityKind.REMINDER, EntityKind.RELATION):
            assert PARENT_KIND[kind] is EntityKind.TASK

    def test_only_containers_are_shareable(self) -> None:
        assert SHAREABLE_KINDS == {EntityKind.NAMESPACE, EntityKind.PROJECT}


class TestCapabilityPolicy:
    """Tests for capability → required level mapping."""

    def test_default_requirements(self) -> None:
        policy = CapabilityPolicy(kind=EntityKind.TASK)
        assert policy.required_level(Capability.READ) is PermissionLevel.READ
        assert policy.required_level(Capability.CREATE) is PermissionLevel.WRITE
        assert policy.required_level(Capability.UPDATE) is PermissionLevel.WRITE
        assert policy.required_level(Capability.DELETE) is PermissionLevel.WRITE

    def test_unknown_capability_requires_admin(self) -> None:
        policy = CapabilityPolicy(kind=EntityKind.TASK, required={})
        assert policy.required_level(Capability.READ) is PermissionLevel.ADMIN

    def test_every_tree_kind_has_policy(self) -> None:
        for kind in EntityKind:
            if kind is EntityKind.LABEL:
                assert kind not in DEFAULT_CAPABILITY_POLICIES
            else:
                assert policy_for(kind).kind is kind

    def test_repr(self) -> None:
        assert "CapabilityPolicy(kind=" in repr(policy_for(EntityKind.PROJECT))


class TestAccess:
    """Tests for pure level checks."""

    def test_level_satisfies(self) -> None:
        assert level_satisfies(PermissionLevel.ADMIN, PermissionLevel.WRITE)
        assert level_satisfies(PermissionLevel.READ, PermissionLevel.READ)
        assert not level_satisfies(PermissionLevel.READ, PermissionLevel.WRITE)

    def test_none_never_satisfies(self) -> None:
        assert not level_satisfies(PermissionLevel.NONE, PermissionLevel.NONE)

    def test_required_level(self) -> None:
        assert required_level(EntityKind.PROJECT, Capability.CREATE) is PermissionLevel.WRITE

    def test_check_capability(self) -> None:
        assert check_capability(PermissionLevel.WRITE, EntityKind.TASK, Capability.DELETE)
        assert not check_capability(PermissionLevel.READ, EntityKind.TASK, Capability.UPDATE)

    def test_check_capability_with_override(self) -> None:
        strict = CapabilityPolicy(
            kind=EntityKind.PROJECT,
            required={Capability.DELETE: PermissionLevel.ADMIN},
        )
        assert not check_capability(PermissionLevel.WRITE, EntityKind.PROJECT, Capability.DELETE, strict)
        assert check_capability(PermissionLevel.ADMIN, EntityKind.PROJECT, Capability.DELETE, strict)
