"""Rights engine: the single authorization decision function.

Composes the principal, the grant store, the team index and the hierarchy
resolver into ``authorize(principal, entity, capability)``. Resource types
never reimplement this; they only build the reference to check.

Resolution for a tree entity:

1. Load the lineage (entity → namespace). Missing or deleted anywhere on
   the way → NOT_FOUND.
2. Link share: only entities inside the bound project, never namespaces;
   effective level is the share's fixed level.
3. Ownership: creator of the entity or of any ancestor → ADMIN.
4. Otherwise the most permissive of the user's direct grants and team
   grants over every namespace/project in the lineage.
5. Compare against the level the capability requires.
6. With ``enforce_archived`` on, writes under an archived namespace or
   project are denied, except for owners.

The engine holds no mutable state; one instance serves every request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .config import RightsConfig
from .exceptions import (
    ContainerArchived,
    Forbidden,
    GrantTargetNotShareable,
    InvalidLevel,
    NotFound,
    Unauthenticated,
)
from .grants import GrantStore
from .hierarchy import HierarchyResolver
from .interfaces import IdentityQuery, LabelQuery
from .logging import get_rights_logger
from .models import EntityRecord, EntityRef, Grant, Grantee
from .permissions.access import level_satisfies, required_level
from .permissions.constants import (
    SHAREABLE_KINDS,
    Capability,
    EntityKind,
    PermissionLevel,
    PrincipalKind,
)
from .permissions.inheritance import most_permissive
from .principals import LinkShare, Principal, RegisteredUser
from .teams import TeamMembershipIndex

logger = get_rights_logger(__name__)


class DecisionReason(str, Enum):
    """Why a decision came out the way it did."""

    ALLOWED = "allowed"
    NOT_FOUND = "not_found"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Decision:
    """Outcome of one authorization check.

    ``level`` is the effective level the principal holds on the entity
    (NONE when it could not be resolved). It is for the caller's own use,
    e.g. deciding whether to render edit controls; it is never put into an
    error.
    """

    allowed: bool
    reason: DecisionReason
    level: PermissionLevel = PermissionLevel.NONE

    def __bool__(self) -> bool:
        return self.allowed

    def raise_for_denial(self) -> None:
        """Raise the error matching a denial; no-op when allowed.

        Raises:
            NotFound, Unauthenticated, ContainerArchived, Forbidden
        """
        if self.allowed:
            return
        if self.reason is DecisionReason.NOT_FOUND:
            raise NotFound()
        if self.reason is DecisionReason.UNAUTHENTICATED:
            raise Unauthenticated()
        if self.reason is DecisionReason.ARCHIVED:
            raise ContainerArchived()
        raise Forbidden()


def _allow(level: PermissionLevel) -> Decision:
    return Decision(True, DecisionReason.ALLOWED, level)


def _deny(reason: DecisionReason, level: PermissionLevel = PermissionLevel.NONE) -> Decision:
    return Decision(False, reason, level)


@dataclass(frozen=True)
class _Resolution:
    level: PermissionLevel
    lineage: tuple[EntityRecord, ...] = ()
    failure: Optional[DecisionReason] = None
    owned: bool = False


class RightsEngine:
    """Authorization decisions for every resource type.

    Args:
        grants: Explicit user/team grants.
        teams: Team membership index.
        hierarchy: Parent lookups.
        labels: Label records and their task attachments.
        identities: Used to verify that a grantee user exists when sharing.
            Without it, any user id is accepted as a grantee.
        config: Behavioral switches.

    Example::

        store = MemoryStore()
        engine = RightsEngine.from_store(store)
        engine.can_update(user, EntityRef.task(42))
    """

    def __init__(
        self,
        grants: GrantStore,
        teams: TeamMembershipIndex,
        hierarchy: HierarchyResolver,
        labels: LabelQuery,
        *,
        identities: IdentityQuery | None = None,
        config: RightsConfig | None = None,
    ) -> None:
        self._grants = grants
        self._teams = teams
        self._hierarchy = hierarchy
        self._labels = labels
        self._identities = identities
        self._config = config or RightsConfig()

    @classmethod
    def from_store(cls, store: Any, config: RightsConfig | None = None) -> RightsEngine:
        """Build an engine over one object implementing every query interface."""
        return cls(
            GrantStore(store),
            TeamMembershipIndex(store, store),
            HierarchyResolver(store),
            store,
            identities=store,
            config=config,
        )

    @property
    def hierarchy(self) -> HierarchyResolver:
        return self._hierarchy

    @property
    def grants(self) -> GrantStore:
        return self._grants

    # ── Decision ──────────────────────────────────────────

    def authorize(self, principal: Principal, entity: EntityRef, capability: Capability | str) -> Decision:
        """Decide whether ``principal`` may perform ``capability`` on ``entity``.

        For CREATE, ``entity`` is the container the new entity goes into.
        Never raises for a denial; see :meth:`check` for the raising form.
        """
        capability = Capability(capability)

        if entity.kind is EntityKind.LABEL:
            decision = self._authorize_label(principal, entity.id, capability)
        else:
            resolution = self._resolve(principal, entity)
            if resolution.failure is not None:
                decision = _deny(resolution.failure)
            else:
                decision = self._compare(
                    resolution,
                    required_level(entity.kind, capability),
                    capability,
                )

        logger.debug(
            "%s %s -> %s (%s)",
            capability.value,
            entity.log_label,
            "allow" if decision.allowed else "deny",
            decision.reason.value,
            principal=principal,
            entity=entity,
        )
        return decision

    def check(self, principal: Principal, entity: EntityRef, capability: Capability | str) -> Decision:
        """Like :meth:`authorize` but raises on denial.

        Raises:
            NotFound: Entity missing or deleted.
            Unauthenticated: Principal unusable.
            ContainerArchived: Write inside an archived container.
            Forbidden: Anything else; carries no detail.
        """
        decision = self.authorize(principal, entity, capability)
        decision.raise_for_denial()
        return decision

    def effective_level(self, principal: Principal, entity: EntityRef) -> PermissionLevel:
        """Highest level the principal holds on a tree entity (NONE if none)."""
        if entity.kind is EntityKind.LABEL:
            return self.authorize(principal, entity, Capability.READ).level
        resolution = self._resolve(principal, entity)
        if resolution.failure is not None:
            return PermissionLevel.NONE
        return resolution.level

    def can_read(self, principal: Principal, entity: EntityRef) -> bool:
        return self.authorize(principal, entity, Capability.READ).allowed

    def can_create(self, principal: Principal, container: EntityRef) -> bool:
        return self.authorize(principal, container, Capability.CREATE).allowed

    def can_update(self, principal: Principal, entity: EntityRef) -> bool:
        return self.authorize(principal, entity, Capability.UPDATE).allowed

    def can_delete(self, principal: Principal, entity: EntityRef) -> bool:
        return self.authorize(principal, entity, Capability.DELETE).allowed

    def can_create_namespace(self, principal: Principal) -> bool:
        """Any registered user may create their own root container."""
        return isinstance(principal, RegisteredUser)

    # ── Labels ────────────────────────────────────────────

    def can_read_label(self, principal: Principal, label_id: int) -> bool:
        return self._authorize_label(principal, label_id, Capability.READ).allowed

    def can_create_label(self, principal: Principal) -> bool:
        return isinstance(principal, RegisteredUser)

    def can_update_label(self, principal: Principal, label_id: int) -> bool:
        return self._authorize_label(principal, label_id, Capability.UPDATE).allowed

    def can_delete_label(self, principal: Principal, label_id: int) -> bool:
        return self._authorize_label(principal, label_id, Capability.DELETE).allowed

    def _authorize_label(self, principal: Principal, label_id: int, capability: Capability) -> Decision:
        if not isinstance(principal, (RegisteredUser, LinkShare)):
            return _deny(DecisionReason.UNAUTHENTICATED)

        if capability is Capability.CREATE:
            if isinstance(principal, RegisteredUser):
                return _allow(PermissionLevel.ADMIN)
            return _deny(DecisionReason.FORBIDDEN)

        label = self._labels.get_label(label_id)
        if label is None or label.deleted:
            return _deny(DecisionReason.NOT_FOUND)

        if isinstance(principal, RegisteredUser) and label.created_by_id == principal.id:
            return _allow(PermissionLevel.ADMIN)

        # Shared visibility never implies edit rights on the vocabulary.
        if capability is not Capability.READ:
            return _deny(DecisionReason.FORBIDDEN)

        for task_id in self._labels.label_task_ids(label_id):
            if self.authorize(principal, EntityRef.task(task_id), Capability.READ).allowed:
                return _allow(PermissionLevel.READ)
        return _deny(DecisionReason.FORBIDDEN)

    # ── Sharing ───────────────────────────────────────────

    def share(self, principal: Principal, entity: EntityRef, grantee: Grantee, level: Any) -> Grant:
        """Create or update a grant. Caller needs ADMIN on the entity.

        Raises:
            GrantTargetNotShareable, InvalidLevel: Caller errors, checked first.
            NotFound: Entity or grantee does not exist.
            Unauthenticated, Forbidden: Caller may not manage shares here.
        """
        self._validate_grant_target(entity)
        parsed = PermissionLevel.parse(level)
        if parsed is PermissionLevel.NONE:
            raise InvalidLevel("Use unshare to remove a grant", level=int(parsed))

        with self._grants.atomic():
            self._require_share_admin(principal, entity)
            self._require_grantee(grantee)
            grant = self._grants.upsert(entity, grantee, parsed)

        logger.info(
            "Shared %s with %s at %s",
            entity.log_label,
            grantee.log_label,
            parsed.name,
            principal=principal,
            entity=entity,
        )
        return grant

    def unshare(self, principal: Principal, entity: EntityRef, grantee: Grantee) -> bool:
        """Revoke a grant. Caller needs ADMIN; revoking nothing is not an error."""
        self._validate_grant_target(entity)
        with self._grants.atomic():
            self._require_share_admin(principal, entity)
            removed = self._grants.revoke(entity, grantee)

        if removed:
            logger.info(
                "Unshared %s from %s",
                entity.log_label,
                grantee.log_label,
                principal=principal,
                entity=entity,
            )
        return removed

    def list_shares(self, principal: Principal, entity: EntityRef) -> list[Grant]:
        """Grants on an entity, visible to anyone who can read it."""
        self._validate_grant_target(entity)
        self.check(principal, entity, Capability.READ)
        return self._grants.grants_for(entity)

    def _validate_grant_target(self, entity: EntityRef) -> None:
        if entity.kind not in SHAREABLE_KINDS:
            raise GrantTargetNotShareable(entity=entity.log_label)

    def _require_share_admin(self, principal: Principal, entity: EntityRef) -> None:
        resolution = self._resolve(principal, entity)
        if resolution.failure is not None:
            _deny(resolution.failure).raise_for_denial()
        if not isinstance(principal, RegisteredUser):
            raise Forbidden()
        if not level_satisfies(resolution.level, PermissionLevel.ADMIN):
            raise Forbidden()

    def _require_grantee(self, grantee: Grantee) -> None:
        if grantee.kind is PrincipalKind.USER:
            if self._identities is not None and self._identities.get_user(grantee.id) is None:
                raise NotFound("Grantee user not found", grantee=grantee.log_label)
        elif not self._teams.team_exists(grantee.id):
            raise NotFound("Grantee team not found", grantee=grantee.log_label)

    # ── Resolution ────────────────────────────────────────

    def _resolve(self, principal: Principal, entity: EntityRef) -> _Resolution:
        if isinstance(principal, LinkShare):
            return self._resolve_link_share(principal, entity)
        if isinstance(principal, RegisteredUser):
            return self._resolve_user(principal, entity)
        return _Resolution(PermissionLevel.NONE, failure=DecisionReason.UNAUTHENTICATED)

    def _resolve_link_share(self, share: LinkShare, entity: EntityRef) -> _Resolution:
        if not self._config.link_sharing_enabled:
            return _Resolution(PermissionLevel.NONE, failure=DecisionReason.UNAUTHENTICATED)

        bound = EntityRef.project(share.project_id)
        try:
            self._hierarchy.lineage(bound)
        except NotFound:
            return _Resolution(PermissionLevel.NONE, failure=DecisionReason.UNAUTHENTICATED)

        try:
            lineage = self._hierarchy.lineage(entity)
        except NotFound:
            return _Resolution(PermissionLevel.NONE, failure=DecisionReason.NOT_FOUND)

        if entity.kind is EntityKind.NAMESPACE:
            return _Resolution(PermissionLevel.NONE, lineage)
        if all(record.ref != bound for record in lineage):
            return _Resolution(PermissionLevel.NONE, lineage)
        return _Resolution(share.level, lineage)

    def _resolve_user(self, user: RegisteredUser, entity: EntityRef) -> _Resolution:
        try:
            lineage = self._hierarchy.lineage(entity)
        except NotFound:
            return _Resolution(PermissionLevel.NONE, failure=DecisionReason.NOT_FOUND)

        if any(record.created_by_id == user.id for record in lineage):
            return _Resolution(PermissionLevel.ADMIN, lineage, owned=True)

        team_ids = self._teams.teams_of(user.id)
        levels = []
        for record in lineage:
            if record.ref.kind not in SHAREABLE_KINDS:
                continue
            levels.append(self._grants.direct_grant(record.ref, Grantee.user(user.id)))
            if team_ids:
                levels.append(self._teams.best_team_level(record.ref, team_ids))
        return _Resolution(most_permissive(levels), lineage)

    def _compare(self, resolution: _Resolution, required: PermissionLevel, capability: Capability) -> Decision:
        level = resolution.level
        if not level_satisfies(level, required):
            return _deny(DecisionReason.FORBIDDEN, level)

        # Creators pass every check, archived or not.
        if self._config.enforce_archived and not resolution.owned and capability is not Capability.READ:
            target, ancestors = resolution.lineage[0], resolution.lineage[1:]
            if any(record.archived for record in ancestors):
                return _deny(DecisionReason.ARCHIVED, level)
            if target.archived:
                # Only an admin may change or remove the archived container itself.
                if capability is Capability.CREATE or level < PermissionLevel.ADMIN:
                    return _deny(DecisionReason.ARCHIVED, level)

        return _allow(level)


__all__ = [
    "Decision",
    "DecisionReason",
    "RightsEngine",
]
