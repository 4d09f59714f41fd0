from .config import LogLevel, RightsConfig, load_config_from_env
from .engine import Decision, DecisionReason, RightsEngine
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ContainerArchived,
    EntityReferenceError,
    Forbidden,
    GrantTargetNotShareable,
    InvalidLevel,
    InvariantViolation,
    NotFound,
    PrincipalInactive,
    RightsError,
    Unauthenticated,
)
from .grants import GrantStore
from .hierarchy import HierarchyResolver
from .logging import (
    RightsLogFormatter,
    RightsLoggerAdapter,
    get_rights_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .memory import MemoryStore
from .models import EntityRecord, EntityRef, Grant, Grantee, LabelRecord, LinkShareRecord, UserRecord
from .permissions import Capability, EntityKind, PermissionLevel, PrincipalKind
from .principals import AuthContext, LinkShare, Principal, PrincipalResolver, RegisteredUser
from .resources import (
    Attachment,
    Comment,
    Label,
    LabelTask,
    Namespace,
    Project,
    ProjectLinkShare,
    Reminder,
    Relation,
    Resource,
    Share,
    Task,
)
from .teams import TeamMembershipIndex

__all__ = [
    # Engine
    "RightsEngine",
    "Decision",
    "DecisionReason",
    # Components
    "GrantStore",
    "HierarchyResolver",
    "PrincipalResolver",
    "TeamMembershipIndex",
    "MemoryStore",
    # Principals
    "AuthContext",
    "LinkShare",
    "Principal",
    "RegisteredUser",
    # Model
    "Capability",
    "EntityKind",
    "EntityRecord",
    "EntityRef",
    "Grant",
    "Grantee",
    "LabelRecord",
    "LinkShareRecord",
    "PermissionLevel",
    "PrincipalKind",
    "UserRecord",
    # Resources
    "Attachment",
    "Comment",
    "Label",
    "LabelTask",
    "Namespace",
    "Project",
    "ProjectLinkShare",
    "Reminder",
    "Relation",
    "Resource",
    "Share",
    "Task",
    # Errors
    "RightsError",
    "AuthenticationError",
    "AuthorizationError",
    "ContainerArchived",
    "EntityReferenceError",
    "Forbidden",
    "GrantTargetNotShareable",
    "InvalidLevel",
    "InvariantViolation",
    "NotFound",
    "PrincipalInactive",
    "Unauthenticated",
    # Config / logging
    "LogLevel",
    "RightsConfig",
    "load_config_from_env",
    "RightsLogFormatter",
    "RightsLoggerAdapter",
    "get_rights_logger",
    "redact_secrets",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
]
