"""Configuration for the todorights rights core.

Pydantic-validated settings shared by every process embedding the engine.
Direct os.environ/os.getenv usage is limited to
:func:`load_config_from_env`; everything else receives a ``RightsConfig``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RightsConfig(BaseModel):
    """Settings for the rights core.

    Permission semantics are fixed; the only behavioral switches are
    whether link shares are honoured at all and whether archived containers
    are read-only.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name for log records (e.g. 'todo-api')",
    )
    service_version: Optional[str] = Field(
        default=None,
        description="Service version for log records",
    )

    # Behavior
    link_sharing_enabled: bool = Field(
        default=True,
        description="Resolve link-share tokens. Disabled = every link share is unauthenticated.",
    )
    enforce_archived: bool = Field(
        default=False,
        description="Treat archived namespaces and projects (and their content) as read-only for everyone but their owners.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
        "frozen": True,
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_config_from_env() -> RightsConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for log records
    - SERVICE_VERSION: Service version
    - LINK_SHARING_ENABLED: Honour link shares (default: true)
    - ENFORCE_ARCHIVED: Archived containers are read-only (default: false)

    Returns:
        RightsConfig instance with values from environment or defaults.
    """
    import os

    return RightsConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
        service_version=os.getenv("SERVICE_VERSION"),
        link_sharing_enabled=os.getenv("LINK_SHARING_ENABLED", "true").lower() in _TRUTHY,
        enforce_archived=os.getenv("ENFORCE_ARCHIVED", "false").lower() in _TRUTHY,
    )


__all__ = [
    "LogLevel",
    "RightsConfig",
    "load_config_from_env",
]
