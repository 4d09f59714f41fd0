"""Team membership index.

Read-only view of which teams a user belongs to and what each team was
granted. Membership itself is managed outside the rights core.
"""

from __future__ import annotations

from typing import Iterable

from .interfaces import GrantQuery, TeamQuery
from .models import EntityRef, Grantee
from .permissions.constants import SHAREABLE_KINDS, PermissionLevel
from .permissions.inheritance import most_permissive


class TeamMembershipIndex:
    """Team lookups used by the engine while composing grants."""

    def __init__(self, teams: TeamQuery, grants: GrantQuery) -> None:
        self._teams = teams
        self._grants = grants

    def teams_of(self, user_id: int) -> frozenset[int]:
        """Snapshot of the user's team ids."""
        return frozenset(self._teams.teams_of_user(user_id))

    def team_grant(self, entity: EntityRef, team_id: int) -> PermissionLevel:
        """Level granted to a team on an entity; NONE when there is no grant."""
        if entity.kind not in SHAREABLE_KINDS:
            return PermissionLevel.NONE
        grant = self._grants.get_grant(entity, Grantee.team(team_id))
        return grant.level if grant is not None else PermissionLevel.NONE

    def best_team_level(self, entity: EntityRef, team_ids: Iterable[int]) -> PermissionLevel:
        """Highest level any of ``team_ids`` holds on the entity."""
        return most_permissive(self.team_grant(entity, team_id) for team_id in team_ids)

    def team_exists(self, team_id: int) -> bool:
        return self._teams.team_exists(team_id)


__all__ = ["TeamMembershipIndex"]
