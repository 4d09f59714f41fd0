"""Principals and the principal resolver.

The authentication subsystem (session/JWT handling, password checks) lives
outside this package. It hands over an :class:`AuthContext` it has already
verified; :class:`PrincipalResolver` turns that into a concrete principal:

- :class:`RegisteredUser`: a logged-in, activated user.
- :class:`LinkShare`: an anonymous link-share token bound to one project
  with a fixed ceiling level.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional, Union

from .config import RightsConfig
from .exceptions import NotFound, PrincipalInactive, Unauthenticated
from .hierarchy import HierarchyResolver
from .interfaces import IdentityQuery
from .logging import get_rights_logger
from .models import EntityRef
from .permissions.constants import PermissionLevel

logger = get_rights_logger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Already-verified identity handed over by the authentication layer.

    Exactly one of ``user_id`` / ``link_share_hash`` must be set.
    ``exp_unix`` is the expiry of the underlying session or token
    (None = no expiration).
    """

    user_id: Optional[int] = None
    link_share_hash: Optional[str] = field(default=None, repr=False)
    exp_unix: Optional[float] = None

    def is_expired(self, *, now: float | None = None) -> bool:
        """Check if the context has expired."""
        if self.exp_unix is None:
            return False
        t = time.time() if now is None else now
        return t >= self.exp_unix

    @classmethod
    def for_user(cls, user_id: int, *, exp_unix: float | None = None) -> AuthContext:
        return cls(user_id=user_id, exp_unix=exp_unix)

    @classmethod
    def for_link_share(cls, share_hash: str, *, exp_unix: float | None = None) -> AuthContext:
        return cls(link_share_hash=share_hash, exp_unix=exp_unix)


@dataclass(frozen=True)
class RegisteredUser:
    """Logged-in user. Team memberships are looked up per decision."""

    id: int
    username: str = ""

    @property
    def log_label(self) -> str:
        return f"user:{self.id}"


@dataclass(frozen=True)
class LinkShare:
    """Anonymous access through a shared link.

    Scoped to exactly one project, never exceeds ``level``, has no teams
    and never owns anything.
    """

    id: int
    project_id: int
    level: PermissionLevel
    shared_by_id: Optional[int] = None

    @property
    def log_label(self) -> str:
        return f"link_share:{self.id}"


Principal = Union[RegisteredUser, LinkShare]


class PrincipalResolver:
    """Maps an :class:`AuthContext` to a :data:`Principal`. No side effects."""

    def __init__(
        self,
        identities: IdentityQuery,
        hierarchy: HierarchyResolver,
        config: RightsConfig | None = None,
    ) -> None:
        self._identities = identities
        self._hierarchy = hierarchy
        self._config = config or RightsConfig()

    def resolve(self, auth: AuthContext | None) -> Principal:
        """Resolve the principal behind an auth context.

        Raises:
            Unauthenticated: The context maps to no usable identity.
            PrincipalInactive: The user exists but is not activated.
        """
        if not isinstance(auth, AuthContext):
            raise Unauthenticated("Missing authentication context")
        if (auth.user_id is None) == (auth.link_share_hash is None):
            raise Unauthenticated("Authentication context must name exactly one identity")
        if auth.is_expired():
            raise Unauthenticated("Authentication context expired")

        if auth.user_id is not None:
            return self._resolve_user(auth.user_id)
        return self._resolve_link_share(auth.link_share_hash or "")

    def _resolve_user(self, user_id: int) -> RegisteredUser:
        user = self._identities.get_user(user_id)
        if user is None:
            raise Unauthenticated("Unknown user")
        if not user.is_active:
            raise PrincipalInactive(user_id=user.id)
        return RegisteredUser(id=user.id, username=user.username)

    def _resolve_link_share(self, share_hash: str) -> LinkShare:
        if not self._config.link_sharing_enabled:
            raise Unauthenticated("Link sharing is disabled")
        if not share_hash:
            raise Unauthenticated("Unknown link share")

        share = self._identities.get_link_share(share_hash)
        if share is None:
            raise Unauthenticated("Unknown link share")
        if share.level is PermissionLevel.NONE:
            raise Unauthenticated("Link share carries no rights")

        try:
            self._hierarchy.lineage(EntityRef.project(share.project_id))
        except NotFound:
            logger.info("Link share %d points at a missing project %d", share.id, share.project_id)
            raise Unauthenticated("Link share target no longer exists") from None

        return LinkShare(
            id=share.id,
            project_id=share.project_id,
            level=share.level,
            shared_by_id=share.shared_by_id,
        )


__all__ = [
    "AuthContext",
    "LinkShare",
    "Principal",
    "PrincipalResolver",
    "RegisteredUser",
]
