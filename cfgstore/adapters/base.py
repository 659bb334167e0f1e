"""
Goal: shared backend scaffolding
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from cfgstore.types.values import StringLike, Value, ValueType, normalize_string

# --- Base backend contract ---


class BaseBackend(ABC):
    """
    Implements the per-type surface of the Backend port on top of three
    type-tagged primitives, so a concrete backend only decides how a
    (key, ValueType) pair maps onto its medium.

    key principles:
        - I/O failures are return values (False / None), never exceptions
        - values reaching _write are already validated for their ValueType
        - string writes are normalized to str before they reach the medium
    """

    name: str = "base"

    # --- Session ---

    @abstractmethod
    def open(self, dont_read: bool) -> bool: ...

    @abstractmethod
    def close(self) -> bool: ...

    @abstractmethod
    def discard(self) -> None:
        """Release the session without persisting anything it changed."""

    @abstractmethod
    def delete(self, key: str) -> bool: ...

    # --- Typed primitives ---

    @abstractmethod
    def _has(self, key: str, value_type: ValueType) -> bool: ...

    @abstractmethod
    def _read(self, key: str, value_type: ValueType) -> Optional[Value]: ...

    @abstractmethod
    def _write(self, key: str, value_type: ValueType, value: Value) -> bool: ...

    # --- HasKey ---

    def has_key_string(self, key: str) -> bool:
        return self._has(key, ValueType.STRING)

    def has_key_bool(self, key: str) -> bool:
        return self._has(key, ValueType.BOOL)

    def has_key_uint32(self, key: str) -> bool:
        return self._has(key, ValueType.UINT32)

    def has_key_int32(self, key: str) -> bool:
        return self._has(key, ValueType.INT32)

    def has_key_uint64(self, key: str) -> bool:
        return self._has(key, ValueType.UINT64)

    def has_key_int64(self, key: str) -> bool:
        return self._has(key, ValueType.INT64)

    # --- Read ---

    def read_string(self, key: str) -> Optional[str]:
        return self._read(key, ValueType.STRING)  # type: ignore[return-value]

    def read_bool(self, key: str) -> Optional[bool]:
        return self._read(key, ValueType.BOOL)  # type: ignore[return-value]

    def read_uint32(self, key: str) -> Optional[int]:
        return self._read(key, ValueType.UINT32)  # type: ignore[return-value]

    def read_int32(self, key: str) -> Optional[int]:
        return self._read(key, ValueType.INT32)  # type: ignore[return-value]

    def read_uint64(self, key: str) -> Optional[int]:
        return self._read(key, ValueType.UINT64)  # type: ignore[return-value]

    def read_int64(self, key: str) -> Optional[int]:
        return self._read(key, ValueType.INT64)  # type: ignore[return-value]

    # --- Write ---

    def write_string(self, key: str, value: StringLike) -> bool:
        return self._write(key, ValueType.STRING, normalize_string(value))

    def write_bool(self, key: str, value: bool) -> bool:
        return self._write(key, ValueType.BOOL, ValueType.BOOL.validate(value))

    def write_uint32(self, key: str, value: int) -> bool:
        return self._write(key, ValueType.UINT32, ValueType.UINT32.validate(value))

    def write_int32(self, key: str, value: int) -> bool:
        return self._write(key, ValueType.INT32, ValueType.INT32.validate(value))

    def write_uint64(self, key: str, value: int) -> bool:
        return self._write(key, ValueType.UINT64, ValueType.UINT64.validate(value))

    def write_int64(self, key: str, value: int) -> bool:
        return self._write(key, ValueType.INT64, ValueType.INT64.validate(value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
