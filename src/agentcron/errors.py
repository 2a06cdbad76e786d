"""agentcron · Unified Error Hierarchy.

All custom exceptions inherit from AgentCronError, which carries an
error_code and an optional details dict for programmatic handling.
Every error is raised before any external collaborator is touched, so
there is never partial work to roll back.

Usage::

    from agentcron.errors import InvalidFieldError

    raise InvalidFieldError("minute", "61", "out of range 0-59")
"""

from __future__ import annotations

from typing import Any


class AgentCronError(Exception):
    """Base exception for all agentcron errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "AGENTCRON_ERROR",
        details: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ConfigError(AgentCronError):
    """Configuration-related errors (loading, validation, bad overrides)."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: dict | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code, details=details)


class JobValidationError(AgentCronError, ValueError):
    """A job descriptor failed validation.

    Also a ValueError so that pydantic validators can raise it directly.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "VALIDATION_ERROR",
        details: dict | None = None,
    ) -> None:
        super().__init__(message, error_code=error_code, details=details)


class InvalidFieldError(JobValidationError):
    """A cron field (or another descriptor field) holds an invalid value."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(
            f"Invalid value {value!r} for field '{field}': {reason}",
            error_code="INVALID_FIELD",
            details={"field": field, "value": value, "reason": reason},
        )
        self.field = field
        self.value = value
        self.reason = reason


class InvalidSplayError(JobValidationError):
    """Splay is not a positive integer."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Splay must be a positive integer, got {value!r}",
            error_code="INVALID_SPLAY",
            details={"value": value},
        )
        self.value = value


class UnsupportedPlatformError(AgentCronError):
    """No cron backend is known for the target platform."""

    def __init__(self, platform: str) -> None:
        super().__init__(
            f"No cron backend for platform '{platform}'",
            error_code="UNSUPPORTED_PLATFORM",
            details={"platform": platform},
        )
        self.platform = platform
