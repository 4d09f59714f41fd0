"""Unified exception hierarchy for todorights.

Every failure of the rights core is one of four families:

- Authentication errors: no usable principal (``Unauthenticated``,
  ``PrincipalInactive``).
- Authorization errors: valid principal, insufficient level (``Forbidden``,
  ``ContainerArchived``).
- Reference errors: the entity or grant target does not exist
  (``NotFound``).
- Invariant violations: caller bugs in grant mutation (``InvalidLevel``,
  ``GrantTargetNotShareable``).

This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for protocol mapping
- HTTP and gRPC status mapping, plus a gRPC error handler decorator

Usage at the API layer:
    from todorights.exceptions import RightsError, get_http_status

    try:
        engine.check(principal, ref, Capability.UPDATE)
    except RightsError as e:
        return json_response({"code": e.code, "message": e.message}, get_http_status(e))
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "RightsError",
    "AuthenticationError",
    "Unauthenticated",
    "PrincipalInactive",
    "AuthorizationError",
    "Forbidden",
    "ContainerArchived",
    "EntityReferenceError",
    "NotFound",
    "InvariantViolation",
    "InvalidLevel",
    "GrantTargetNotShareable",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # Protocol helpers
    "get_http_status",
    "get_grpc_status_code",
    "grpc_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class RightsError(Exception):
    """Base exception for the rights core.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "FORBIDDEN").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
        http_status: Status the API layer should answer with.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"
    http_status: int = 500

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class AuthenticationError(RightsError):
    """No usable principal."""

    code: str = "AUTHENTICATION_ERROR"
    message: str = "Authentication required"
    http_status: int = 401


class Unauthenticated(AuthenticationError):
    """The auth context maps to no known identity (or a dangling link share)."""

    code: str = "UNAUTHENTICATED"


class PrincipalInactive(AuthenticationError):
    """The user exists but is not activated yet (email not confirmed)."""

    code: str = "PRINCIPAL_INACTIVE"
    message: str = "The user is not activated"
    http_status: int = 412


class AuthorizationError(RightsError):
    """Valid principal, insufficient rights."""

    code: str = "AUTHORIZATION_ERROR"
    message: str = "Forbidden"
    http_status: int = 403


class Forbidden(AuthorizationError):
    """Uniform denial.

    Always carries the same message so a caller can't tell an entity it
    may not see from one it may see but not change.
    """

    code: str = "FORBIDDEN"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(AuthorizationError.message, **kwargs)


class ContainerArchived(AuthorizationError):
    """Write attempted inside an archived namespace or project."""

    code: str = "CONTAINER_ARCHIVED"
    message: str = "The container is archived and can only be read"
    http_status: int = 412


class EntityReferenceError(RightsError):
    """Entity or grant target does not exist."""

    code: str = "REFERENCE_ERROR"
    message: str = "Not found"
    http_status: int = 404


class NotFound(EntityReferenceError):
    """Nonexistent or logically deleted entity."""

    code: str = "NOT_FOUND"


class InvariantViolation(RightsError):
    """Caller error in grant mutation. Never retried."""

    code: str = "INVARIANT_VIOLATION"
    message: str = "Invalid request"
    http_status: int = 400


class InvalidLevel(InvariantViolation):
    """Level is NONE or unknown where a real level is required."""

    code: str = "INVALID_LEVEL"
    message: str = "Invalid permission level"


class GrantTargetNotShareable(InvariantViolation):
    """Grant targeted at something other than a namespace or project."""

    code: str = "GRANT_TARGET_NOT_SHAREABLE"
    message: str = "Only namespaces and projects can be shared"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[RightsError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[RightsError]] = {}

    def register(self, code: str, error_cls: type[RightsError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[RightsError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[RightsError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("TEAM_LOCKED")
        class TeamLocked(AuthorizationError):
            code = "TEAM_LOCKED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
for _cls in (
    RightsError,
    AuthenticationError,
    Unauthenticated,
    PrincipalInactive,
    AuthorizationError,
    Forbidden,
    ContainerArchived,
    EntityReferenceError,
    NotFound,
    InvariantViolation,
    InvalidLevel,
    GrantTargetNotShareable,
):
    error_registry.register(_cls.code, _cls)
del _cls


# ---- Protocol Mapping -------------------------------------------------------


def get_http_status(error: RightsError) -> int:
    """HTTP status for an error; 500 for anything outside the hierarchy."""
    if isinstance(error, RightsError):
        return error.http_status
    return 500


def get_grpc_status_code(error: RightsError) -> int:
    """Map RightsError to gRPC status code.

    Returns grpc.StatusCode value for the given error type.
    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "AUTHENTICATION_ERROR": grpc.StatusCode.UNAUTHENTICATED,
        "UNAUTHENTICATED": grpc.StatusCode.UNAUTHENTICATED,
        "PRINCIPAL_INACTIVE": grpc.StatusCode.UNAUTHENTICATED,
        "AUTHORIZATION_ERROR": grpc.StatusCode.PERMISSION_DENIED,
        "FORBIDDEN": grpc.StatusCode.PERMISSION_DENIED,
        "CONTAINER_ARCHIVED": grpc.StatusCode.FAILED_PRECONDITION,
        "REFERENCE_ERROR": grpc.StatusCode.NOT_FOUND,
        "NOT_FOUND": grpc.StatusCode.NOT_FOUND,
        "INVARIANT_VIOLATION": grpc.StatusCode.INVALID_ARGUMENT,
        "INVALID_LEVEL": grpc.StatusCode.INVALID_ARGUMENT,
        "GRANT_TARGET_NOT_SHAREABLE": grpc.StatusCode.INVALID_ARGUMENT,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)


def grpc_error_handler(method):
    """Decorator for unary gRPC service methods guarded by the rights core.

    Catches RightsError and aborts with the mapped gRPC status code.
    Authorization failures are logged at INFO, everything else at ERROR.

    Usage:
        @grpc_error_handler
        async def UpdateTask(self, request, context):
            engine.check(principal, ref, Capability.UPDATE)
            ...
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except RightsError as e:
            status_code = get_grpc_status_code(e)
            error_message = f"[{e.code}] {e.message}"

            log = logger.info if isinstance(e, (AuthorizationError, EntityReferenceError)) else logger.error
            log(
                "%s failed: %s",
                method.__name__,
                error_message,
                extra={"error_code": e.code},
            )

            context.set_trailing_metadata([("error-code", e.code)])
            await context.abort(status_code, error_message)
            return

        except Exception as e:
            import grpc

            logger.exception("%s unexpected error: %s", method.__name__, e)
            await context.abort(
                grpc.StatusCode.INTERNAL,
                f"Unexpected {type(e)}: {e}",
            )
            return

    return wrapper
