"""Centralized logging utilities for todorights.

This module provides:
- Logging configuration from RightsConfig
- Safe preview utilities for sensitive data
- Secret redaction (session tokens, link-share hashes)
- Structured logging with principal / entity context
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import LogLevel, RightsConfig


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:share[_-]?hash|link[_-]?share|hash)\s*[:=]\s*["\']?([^"\'\s,}]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=._-]+)',
    r'[a-f0-9]{32,}',  # Long hex strings (could be hashes or keys)
]

# Record attributes that are part of logging itself, not caller extras.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "principal", "entity",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A single-line string of at most ``limit`` characters.
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns from text.

    Covers passwords, session and API tokens, bearer credentials and
    link-share hashes. Non-string input is returned unchanged.
    """
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview + optional redaction. Use for anything caller-supplied."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


def log_label(value: Any) -> str:
    """Short label for a principal or entity reference.

    Objects exposing a ``log_label`` attribute (principals, entity refs)
    use it; anything else falls back to ``str()``.
    """
    if value is None:
        return ""
    label = getattr(value, "log_label", None)
    if isinstance(label, str):
        return label
    return safe_preview(value, limit=80)


class RightsLogFormatter(logging.Formatter):
    """Formatter that includes principal / entity context.

    Outputs either one JSON object per record or a plain line, and redacts
    secrets from the message and every extra field.
    """

    def __init__(
        self,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        principal = getattr(record, "principal", None)
        entity = getattr(record, "entity", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if principal:
            log_data["principal"] = log_label(principal)
        if entity:
            log_data["entity"] = log_label(entity)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if principal:
            parts.append(f"principal={log_data['principal']}")
        if entity:
            parts.append(f"entity={log_data['entity']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class RightsLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that attaches principal and entity to log records.

    Usage:
        logger = get_rights_logger(__name__, principal=user)
        logger.debug("decision: %s", decision, entity=ref)
    """

    def __init__(
        self,
        logger: logging.Logger,
        principal: Any = None,
        entity: Any = None,
    ):
        super().__init__(logger, {})
        self.principal = principal
        self.entity = entity

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        principal = kwargs.pop("principal", self.principal)
        entity = kwargs.pop("entity", self.entity)

        extra = kwargs.get("extra", {})
        if principal is not None:
            extra["principal"] = log_label(principal)
        if entity is not None:
            extra["entity"] = log_label(entity)
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[RightsConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure root logging for a process embedding the rights core.

    Args:
        config: RightsConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_config_from_env
        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        RightsLogFormatter(
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_rights_logger(
    name: str,
    principal: Any = None,
    entity: Any = None,
) -> RightsLoggerAdapter:
    """Get a logger adapter bound to an optional principal / entity.

    Example:
        logger = get_rights_logger(__name__)
        logger.info("share updated", principal=user, entity=ref)
    """
    logger = logging.getLogger(name)
    return RightsLoggerAdapter(logger, principal=principal, entity=entity)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "log_label",
    "RightsLogFormatter",
    "RightsLoggerAdapter",
    "setup_logging",
    "get_rights_logger",
]
