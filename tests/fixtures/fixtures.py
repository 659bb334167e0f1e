from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from cfgstore.adapters.base import BaseBackend
from cfgstore.adapters.document import MemoryBackend
from cfgstore.core.accessor import ConfigAccessor
from cfgstore.types.values import Value, ValueType

SAMPLE_VALUES: dict[ValueType, Any] = {
    ValueType.STRING: "hello world",
    ValueType.BOOL: True,
    ValueType.UINT32: 2**32 - 1,
    ValueType.INT32: -(2**31),
    ValueType.UINT64: 2**64 - 1,
    ValueType.INT64: -(2**63),
}


@dataclass
class StubTelemetry:
    events: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def log(self, event: str, *, masked: Iterable[str] = (), **fields: Any) -> None:
        self.events.append((event, {**fields, "_masked": tuple(masked)}))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


class StubBackend(BaseBackend):
    """
    Backend whose store is guaranteed empty: every read misses. Records the
    calls it receives and can be told to fail any session operation.
    """

    name = "stub"

    def __init__(
        self,
        *,
        fail_open: bool = False,
        fail_close: bool = False,
        fail_write: bool = False,
        fail_delete: bool = False,
    ) -> None:
        self.fail_open = fail_open
        self.fail_close = fail_close
        self.fail_write = fail_write
        self.fail_delete = fail_delete
        self.calls: List[Tuple[str, Any]] = []
        self.written: Dict[str, Tuple[ValueType, Value]] = {}

    def open(self, dont_read: bool) -> bool:
        self.calls.append(("open", dont_read))
        return not self.fail_open

    def close(self) -> bool:
        self.calls.append(("close", None))
        return not self.fail_close

    def discard(self) -> None:
        self.calls.append(("discard", None))

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        return not self.fail_delete

    def _has(self, key: str, value_type: ValueType) -> bool:
        self.calls.append(("has", (key, value_type)))
        return False

    def _read(self, key: str, value_type: ValueType) -> Optional[Value]:
        self.calls.append(("read", (key, value_type)))
        return None

    def _write(self, key: str, value_type: ValueType, value: Value) -> bool:
        self.calls.append(("write", (key, value_type, value)))
        if self.fail_write:
            return False
        self.written[key] = (value_type, value)
        return True

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def memory_store() -> Dict[str, Any]:
    return {}


@pytest.fixture
def memory_accessor(memory_store: Dict[str, Any]) -> ConfigAccessor:
    return ConfigAccessor(MemoryBackend(memory_store))


@pytest.fixture
def open_accessor(memory_accessor: ConfigAccessor):
    """An accessor opened on an empty memory store, closed after the test."""
    assert memory_accessor.open(dont_read=False)
    try:
        yield memory_accessor
    finally:
        memory_accessor.close()
