"""
Config Accessor - typed façade over one storage backend.

Owns the session lifecycle and the read policy; every typed call is
forwarded to the backend entry point bound for its ValueType.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, NoReturn, Optional, Union

from cfgstore.config.settings import AccessorSettings
from cfgstore.core.factory import create_backend
from cfgstore.errors.errors import (
    AccessorNotOpenError,
    AccessorStateError,
    BackendOpenError,
    EnforcedReadError,
    InvalidKeyError,
)
from cfgstore.ports.backend import Backend
from cfgstore.ports.telemetry import Telemetry
from cfgstore.types.option import Option
from cfgstore.types.values import Value, ValueType, render_value

logger = logging.getLogger(__name__)


class AccessorState(str, Enum):
    """State machine for ConfigAccessor."""

    UNINITIALIZED = "uninitialized"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class _EntryPoints:
    has: Callable[[str], bool]
    read: Callable[[str], Optional[Value]]
    write: Callable[[str, Any], bool]


def _bind_entry_points(backend: Backend) -> dict[ValueType, _EntryPoints]:
    return {
        ValueType.STRING: _EntryPoints(
            backend.has_key_string, backend.read_string, backend.write_string
        ),
        ValueType.BOOL: _EntryPoints(backend.has_key_bool, backend.read_bool, backend.write_bool),
        ValueType.UINT32: _EntryPoints(
            backend.has_key_uint32, backend.read_uint32, backend.write_uint32
        ),
        ValueType.INT32: _EntryPoints(
            backend.has_key_int32, backend.read_int32, backend.write_int32
        ),
        ValueType.UINT64: _EntryPoints(
            backend.has_key_uint64, backend.read_uint64, backend.write_uint64
        ),
        ValueType.INT64: _EntryPoints(
            backend.has_key_int64, backend.read_int64, backend.write_int64
        ),
    }


class ConfigAccessor:
    """
    Typed key/value access over exactly one Backend.

    State Machine:
        [UNINITIALIZED] --open() ok--> [OPEN] --close()--> [CLOSED]
        [UNINITIALIZED] --open() fails--> [UNINITIALIZED]
        [CLOSED] --open() ok--> [OPEN]

    has_key/read/write/delete are only valid in OPEN and raise
    AccessorNotOpenError anywhere else. Backend I/O failures come back as
    False. The single escalation is a read miss with enforce_read set: the
    session is terminated without flushing and EnforcedReadError propagates.

    Usage:
        accessor = ConfigAccessor(JsonFileBackend(path))
        with accessor.session():
            accessor.read("server_port", port_option)
    """

    def __init__(
        self,
        backend: Backend,
        *,
        enforce_read: bool = False,
        telemetry: Optional[Telemetry] = None,
        component: str = "config",
    ) -> None:
        """
        Args:
            backend: the storage backend this accessor owns for its lifetime
            enforce_read: make read misses fatal (see set_enforce_read)
            telemetry: optional structured event sink
            component: name used in log records and errors
        """
        self._backend = backend
        self._entry_points = _bind_entry_points(backend)
        self._state = AccessorState.UNINITIALIZED
        self._dont_read = False
        self._enforce_read = enforce_read
        self._telemetry = telemetry
        self._component = component
        self._last_close_ok: Optional[bool] = None

    @classmethod
    def from_settings(
        cls,
        settings: AccessorSettings,
        *,
        platform: Optional[str] = None,
        store: Optional[dict[str, Any]] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> "ConfigAccessor":
        backend = create_backend(settings, platform, store=store)
        return cls(backend, enforce_read=settings.enforce_read, telemetry=telemetry)

    # --- Property methods ---

    @property
    def state(self) -> AccessorState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is AccessorState.OPEN

    @property
    def dont_read(self) -> bool:
        return self._dont_read

    @property
    def enforce_read(self) -> bool:
        return self._enforce_read

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def last_close_ok(self) -> Optional[bool]:
        """Result of the most recent close(), None if never closed."""
        return self._last_close_ok

    def set_enforce_read(self) -> None:
        """Opt in: from now on a read miss terminates the session."""
        self._enforce_read = True

    # --- Lifecycle ---

    def open(self, dont_read: bool = False) -> bool:
        """
        Open the backend. With dont_read the stored content is not loaded
        (write-only session that replaces the store on close).
        """
        if self._state is AccessorState.OPEN:
            raise AccessorStateError(
                "Accessor is already open",
                state=self._state.value,
                operation="open",
                component=self._component,
            )

        if not self._backend.open(dont_read):
            logger.warning(
                "config_open_failed",
                extra={
                    "event": "config_open_failed",
                    "backend": self._backend.name,
                    "dont_read": dont_read,
                },
            )
            self._emit("config_open_failed", backend=self._backend.name, dont_read=dont_read)
            return False

        self._state = AccessorState.OPEN
        self._dont_read = dont_read
        logger.debug(
            "config_opened",
            extra={"event": "config_opened", "backend": self._backend.name, "dont_read": dont_read},
        )
        self._emit("config_opened", backend=self._backend.name, dont_read=dont_read)
        return True

    def close(self) -> bool:
        """
        Flush and close the backend. The session is CLOSED afterwards even if
        the flush failed; the return value reports the flush. Closing an
        accessor that is not open does not touch the backend.
        """
        if self._state is not AccessorState.OPEN:
            return True
        try:
            ok = self._backend.close()
        finally:
            self._state = AccessorState.CLOSED
        self._last_close_ok = ok

        if not ok:
            logger.warning(
                "config_close_failed",
                extra={"event": "config_close_failed", "backend": self._backend.name},
            )
        else:
            logger.debug(
                "config_closed", extra={"event": "config_closed", "backend": self._backend.name}
            )
        self._emit("config_closed", backend=self._backend.name, flushed=ok)
        return ok

    @contextmanager
    def session(self, dont_read: bool = False) -> Iterator["ConfigAccessor"]:
        """Open for the duration of a with-block; close runs on every exit path."""
        if not self.open(dont_read):
            raise BackendOpenError(
                "Backend refused to open",
                backend=self._backend.name,
                dont_read=dont_read,
                component=self._component,
            )
        try:
            yield self
        finally:
            self.close()

    def __enter__(self) -> "ConfigAccessor":
        if not self.open():
            raise BackendOpenError(
                "Backend refused to open", backend=self._backend.name, component=self._component
            )
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- Typed operations ---

    def has_key(self, key: str, value_type: ValueType) -> bool:
        """True iff `key` exists and is representable as `value_type`."""
        entry = self._entry_for(ValueType.coerce(value_type))
        self._require_open("has_key")
        self._check_key(key)
        return entry.has(key)

    def read(self, key: str, option: Option, is_masked: bool = False) -> bool:
        """
        Load `key` into `option.value`.

        On a miss `option.value` keeps whatever the caller put there and False
        is returned, unless enforce_read is set, in which case the session is
        terminated and EnforcedReadError is raised. `is_masked` only changes
        what gets logged.
        """
        if not isinstance(option, Option):
            raise TypeError(f"read() expects an Option, got {type(option).__name__}")
        value_type = option.value_type
        entry = self._entry_for(value_type)
        self._require_open("read")
        self._check_key(key)

        value = entry.read(key)
        if value is None:
            if self._enforce_read:
                self._abort_enforced_read(key, value_type)
            logger.info(
                "config_option_missing",
                extra={
                    "event": "config_option_missing",
                    "key": key,
                    "value_type": value_type.value,
                },
            )
            self._emit("config_option_missing", key=key, value_type=value_type.value)
            return False

        option.value = value
        logger.debug(
            "config_option_read",
            extra={
                "event": "config_option_read",
                "key": key,
                "value_type": value_type.value,
                "value": render_value(value, is_masked),
            },
        )
        self._emit(
            "config_option_read",
            masked=("value",) if is_masked else (),
            key=key,
            value_type=value_type.value,
            value=value,
        )
        return True

    def write(
        self,
        key: str,
        value: Union[Option, Value, bytes, bytearray, memoryview],
        is_masked: bool = False,
        *,
        value_type: Optional[ValueType] = None,
    ) -> bool:
        """
        Upsert `key`. Pass an Option (its type and current value are written)
        or a raw value together with `value_type`.
        """
        if isinstance(value, Option):
            if value_type is not None and ValueType.coerce(value_type) is not value.value_type:
                raise TypeError(
                    f"value_type {value_type.value} conflicts with option type "
                    f"{value.value_type.value}"
                )
            resolved_type = value.value_type
            payload: Value = value.value
        else:
            if value_type is None:
                raise TypeError("write() with a raw value requires value_type")
            resolved_type = ValueType.coerce(value_type)
            payload = resolved_type.validate(value)
        entry = self._entry_for(resolved_type)
        self._require_open("write")
        self._check_key(key)

        ok = entry.write(key, payload)
        log_extra = {
            "event": "config_option_written" if ok else "config_write_failed",
            "key": key,
            "value_type": resolved_type.value,
            "value": render_value(payload, is_masked),
        }
        if ok:
            logger.debug("config_option_written", extra=log_extra)
        else:
            logger.warning("config_write_failed", extra=log_extra)
        self._emit(
            log_extra["event"],
            masked=("value",) if is_masked else (),
            key=key,
            value_type=resolved_type.value,
            value=payload,
        )
        return ok

    def delete(self, key: str) -> bool:
        """Remove `key`; True whether or not it existed, False on I/O failure."""
        self._require_open("delete")
        self._check_key(key)
        ok = self._backend.delete(key)
        if not ok:
            logger.warning("config_delete_failed", extra={"event": "config_delete_failed", "key": key})
        self._emit("config_option_deleted" if ok else "config_delete_failed", key=key)
        return ok

    # --- Internals ---

    def _entry_for(self, value_type: ValueType) -> _EntryPoints:
        try:
            return self._entry_points[value_type]
        except KeyError:  # pragma: no cover - ValueType is closed
            raise TypeError(f"unsupported value type: {value_type!r}") from None

    def _require_open(self, operation: str) -> None:
        if self._state is not AccessorState.OPEN:
            raise AccessorNotOpenError(
                f"{operation}() requires an open accessor",
                state=self._state.value,
                operation=operation,
                component=self._component,
            )

    def _check_key(self, key: Any) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidKeyError(
                "Key must be a non-empty string", key=key, component=self._component
            )

    def _abort_enforced_read(self, key: str, value_type: ValueType) -> NoReturn:
        # terminate without flushing: pending writes of this session are dropped
        self._state = AccessorState.CLOSED
        self._backend.discard()
        logger.critical(
            "config_enforced_read_failed",
            extra={
                "event": "config_enforced_read_failed",
                "key": key,
                "value_type": value_type.value,
                "backend": self._backend.name,
            },
        )
        self._emit("config_enforced_read_failed", key=key, value_type=value_type.value)
        raise EnforcedReadError(
            f"Required option {key!r} could not be read",
            key=key,
            value_type=value_type.value,
            component=self._component,
        )

    def _emit(self, event: str, *, masked: tuple[str, ...] = (), **fields: Any) -> None:
        if self._telemetry is None:
            return
        try:
            self._telemetry.log(event, masked=masked, component=self._component, **fields)
        except OSError as exc:
            # a broken sink never fails the store operation it reports on
            logger.warning(
                "config_telemetry_failed",
                extra={
                    "event": "config_telemetry_failed",
                    "telemetry_event": event,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
