"""Permission levels, capability policy and level inheritance for todorights.

Defines:
- PermissionLevel: none < read < write < admin
- Capability: read / create / update / delete
- EntityKind / PrincipalKind: what is shared and with whom
- LEVEL_INHERITANCE / PARENT_KIND: level implication and tree shape
- CapabilityPolicy: capability → required level
"""

from .access import check_capability, level_satisfies, required_level
from .constants import (
    SHAREABLE_KINDS,
    TASK_LEAF_KINDS,
    Capability,
    EntityKind,
    PermissionLevel,
    PrincipalKind,
)
from .inheritance import (
    LEVEL_INHERITANCE,
    MAX_LINEAGE_DEPTH,
    PARENT_KIND,
    expand_levels,
    most_permissive,
)
from .policy import (
    DEFAULT_CAPABILITY_POLICIES,
    DEFAULT_CAPABILITY_POLICY,
    CapabilityPolicy,
    policy_for,
)

__all__ = [
    "DEFAULT_CAPABILITY_POLICIES",
    "DEFAULT_CAPABILITY_POLICY",
    "LEVEL_INHERITANCE",
    "MAX_LINEAGE_DEPTH",
    "PARENT_KIND",
    "SHAREABLE_KINDS",
    "TASK_LEAF_KINDS",
    "Capability",
    "CapabilityPolicy",
    "EntityKind",
    "PermissionLevel",
    "PrincipalKind",
    "check_capability",
    "expand_levels",
    "level_satisfies",
    "most_permissive",
    "policy_for",
    "required_level",
]
