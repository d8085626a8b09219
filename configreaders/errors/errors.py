"""
Exceptions raised by configuration readers.

Exception hierarchy:
- ConfigReaderError (base)
  - ConfigKeyNotFoundError: key absent from the backing source (raised by ``require`` only)
  - SourceUnavailableError: backing source unreachable, unreadable or unauthenticated
  - ConfigurationError: invalid reader construction or composition settings
"""

from __future__ import annotations

from typing import Any, Optional


class ConfigReaderError(Exception):
    """Base exception for all configuration reader errors."""

    def __init__(
        self,
        message: str,
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.component = component
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.args[0] if self.args else ""]
        if self.component:
            parts.append(f"[component={self.component}]")
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class ConfigKeyNotFoundError(ConfigReaderError, KeyError):
    """Raised when a required key has no value in the backing source."""

    def __init__(
        self,
        key: str,
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.key = key
        details = details or {}
        details["key"] = key
        super().__init__(f"Configuration key '{key}' not found", component=component, details=details)

    # KeyError.__str__ would repr() the message
    __str__ = ConfigReaderError.__str__


class SourceUnavailableError(ConfigReaderError):
    """Raised when the backing source cannot be read, reached or authenticated against."""

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        key: Optional[str] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.source = source
        self.key = key
        details = details or {}
        if source:
            details["source"] = source
        if key:
            details["key"] = key
        super().__init__(message, component=component, details=details)


class ConfigurationError(ConfigReaderError, ValueError):
    """Raised when a reader or the composition root is configured with invalid values."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.value = value
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, component=component, details=details)
