"""
define canonical value types
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

# -------- Aliases (clarify intent) --------
Value = Union[str, bool, int]
StringLike = Union[str, bytes, bytearray, memoryview]

REDACTION_TOKEN = "***REDACTED***"

# -------- Enums --------


class ValueType(str, Enum):
    """Closed set of value types a backend can store."""

    STRING = "string"
    BOOL = "bool"
    UINT32 = "uint32"
    INT32 = "int32"
    UINT64 = "uint64"
    INT64 = "int64"

    @property
    def bounds(self) -> tuple[int, int]:
        """Inclusive (min, max) for integer types."""
        try:
            return _INT_RANGES[self]
        except KeyError:
            raise TypeError(f"{self.value} has no integer range") from None

    def accepts(self, raw: Any) -> bool:
        """
        True iff `raw` (a natively stored value) is representable as this type.
        bool is never an integer and integers are never bool.
        """
        if self is ValueType.STRING:
            return isinstance(raw, str)
        if self is ValueType.BOOL:
            return isinstance(raw, bool)
        if isinstance(raw, bool) or not isinstance(raw, int):
            return False
        low, high = _INT_RANGES[self]
        return low <= raw <= high

    def validate(self, value: Any) -> Value:
        """Return `value` normalized for storage, raising on a type or range mismatch."""
        if self is ValueType.STRING:
            return normalize_string(value)
        if self is ValueType.BOOL:
            if not isinstance(value, bool):
                raise TypeError(f"expected bool, got {type(value).__name__}")
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int for {self.value}, got {type(value).__name__}")
        low, high = _INT_RANGES[self]
        if not low <= value <= high:
            raise ValueError(f"{value} out of range for {self.value} [{low}, {high}]")
        return value

    def parse(self, text: str) -> Value:
        """Parse a command-line token into a value of this type."""
        if self is ValueType.STRING:
            return text
        if self is ValueType.BOOL:
            lowered = text.strip().lower()
            if lowered in _TRUE_TOKENS:
                return True
            if lowered in _FALSE_TOKENS:
                return False
            raise ValueError(f"invalid bool literal: {text!r}")
        return self.validate(int(text, 0))

    @classmethod
    def coerce(cls, value_type: Any) -> "ValueType":
        """Bind-time check that `value_type` belongs to the closed set."""
        if isinstance(value_type, cls):
            return value_type
        raise TypeError(f"unsupported value type: {value_type!r}")


_INT_RANGES: dict[ValueType, tuple[int, int]] = {
    ValueType.UINT32: (0, 2**32 - 1),
    ValueType.INT32: (-(2**31), 2**31 - 1),
    ValueType.UINT64: (0, 2**64 - 1),
    ValueType.INT64: (-(2**63), 2**63 - 1),
}

_TRUE_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_string(value: Any) -> str:
    """Owned or borrowed string forms all end up as one `str`."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8")
    raise TypeError(f"expected str or bytes-like, got {type(value).__name__}")


def render_value(value: Any, is_masked: bool) -> Any:
    """What a diagnostic path may print for `value`."""
    return REDACTION_TOKEN if is_masked else value
