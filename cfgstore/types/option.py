"""
Typed option holder.

An Option is the thing application code declares once (name, type, default)
and hands to the accessor: `read` fills its value from the store, `write`
persists it.

Example:
    port = Option("server_port", ValueType.UINT32, default=8443)
    accessor.read("server_port", port)
"""

from __future__ import annotations

from typing import Any, Optional

from cfgstore.types.values import Value, ValueType


class Option:
    __slots__ = ("_name", "_value_type", "_default", "_value")

    def __init__(self, name: str, value_type: ValueType, default: Optional[Any] = None) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("Option name must be a non-empty string")
        self._name = name
        self._value_type = ValueType.coerce(value_type)
        if default is None:
            default = _ZERO_VALUES[self._value_type]
        self._default: Value = self._value_type.validate(default)
        self._value: Value = self._default

    # --- Property methods ---

    @property
    def name(self) -> str:
        return self._name

    @property
    def value_type(self) -> ValueType:
        return self._value_type

    @property
    def default(self) -> Value:
        return self._default

    @property
    def value(self) -> Value:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self._value = self._value_type.validate(new_value)

    @property
    def is_default(self) -> bool:
        return self._value == self._default

    def reset(self) -> None:
        self._value = self._default

    def __repr__(self) -> str:
        return f"Option(name={self._name!r}, value_type={self._value_type.value}, value={self._value!r})"


_ZERO_VALUES: dict[ValueType, Value] = {
    ValueType.STRING: "",
    ValueType.BOOL: False,
    ValueType.UINT32: 0,
    ValueType.INT32: 0,
    ValueType.UINT64: 0,
    ValueType.INT64: 0,
}
