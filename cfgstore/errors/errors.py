"""
Custom exceptions for cfgstore.

Runtime I/O failures (open, close, write, delete, plain read misses) are
reported as boolean results and never raised. The exceptions below are for
contract violations and for the opt-in enforced-read policy.

Exception hierarchy:
- ConfigStoreError (base)
  - AccessorStateError: operation not valid in the accessor's current state
    - AccessorNotOpenError: Has/Read/Write/Delete outside an open session
  - InvalidKeyError: empty or non-string key
  - EnforcedReadError: read miss while enforce_read is set (fatal for the session)
  - BackendOpenError: session() context could not open the backend
  - SettingsError: invalid accessor settings
"""

from __future__ import annotations

from typing import Any, Optional


class ConfigStoreError(Exception):
    """Base exception for all cfgstore errors."""

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
        parts = [super().__str__()]
        if self.component:
            parts.append(f"[component={self.component}]")
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class AccessorStateError(ConfigStoreError):
    """Raised when an operation is not valid in the accessor's current state."""

    def __init__(
        self,
        message: str,
        *,
        state: Optional[str] = None,
        operation: Optional[str] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.state = state
        self.operation = operation
        details = details or {}
        if state:
            details["state"] = state
        if operation:
            details["operation"] = operation
        super().__init__(message, component=component, details=details)


class AccessorNotOpenError(AccessorStateError):
    """Raised when Has/Read/Write/Delete is called before open or after close."""


class InvalidKeyError(ConfigStoreError):
    """Raised when a key is not a non-empty string."""

    def __init__(
        self,
        message: str,
        *,
        key: Optional[Any] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.key = key
        details = details or {}
        details["key"] = repr(key)
        super().__init__(message, component=component, details=details)


class EnforcedReadError(ConfigStoreError):
    """
    Raised when a read misses while enforce_read is set.

    Fatal for the session: the accessor is closed without flushing before
    this propagates, and it is never converted back into a False result.
    """

    def __init__(
        self,
        message: str,
        *,
        key: Optional[str] = None,
        value_type: Optional[str] = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.key = key
        self.value_type = value_type
        details = details or {}
        if key:
            details["key"] = key
        if value_type:
            details["value_type"] = value_type
        super().__init__(message, component=component, details=details)


class BackendOpenError(ConfigStoreError):
    """Raised by the session() context manager when the backend refuses to open."""

    def __init__(
        self,
        message: str,
        *,
        backend: Optional[str] = None,
        dont_read: bool = False,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.backend = backend
        self.dont_read = dont_read
        details = details or {}
        if backend:
            details["backend"] = backend
        details["dont_read"] = dont_read
        super().__init__(message, component=component, details=details)


class SettingsError(ConfigStoreError):
    """Raised when accessor settings are invalid."""

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
