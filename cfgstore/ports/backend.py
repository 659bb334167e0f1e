"""Backend Port Interface.

Contract: typed I/O against one storage medium (file, registry, ...).

- Failures are return values: open/close/write/delete report False, reads
  report None. Nothing raises across this boundary for I/O problems.
- has_key_<type> is True iff the key exists AND its stored form is
  representable as <type>.
- write_<type> upserts, replacing any prior value or type at the key.
- delete is idempotent: True whether or not the key existed.
- discard ends the session like close but persists nothing.
"""

from __future__ import annotations

from typing import Optional, Protocol

from cfgstore.types.values import StringLike


class Backend(Protocol):
    name: str

    def open(self, dont_read: bool) -> bool: ...

    def close(self) -> bool: ...

    def discard(self) -> None: ...

    def has_key_string(self, key: str) -> bool: ...

    def has_key_bool(self, key: str) -> bool: ...

    def has_key_uint32(self, key: str) -> bool: ...

    def has_key_int32(self, key: str) -> bool: ...

    def has_key_uint64(self, key: str) -> bool: ...

    def has_key_int64(self, key: str) -> bool: ...

    def read_string(self, key: str) -> Optional[str]: ...

    def read_bool(self, key: str) -> Optional[bool]: ...

    def read_uint32(self, key: str) -> Optional[int]: ...

    def read_int32(self, key: str) -> Optional[int]: ...

    def read_uint64(self, key: str) -> Optional[int]: ...

    def read_int64(self, key: str) -> Optional[int]: ...

    def write_string(self, key: str, value: StringLike) -> bool: ...

    def write_bool(self, key: str, value: bool) -> bool: ...

    def write_uint32(self, key: str, value: int) -> bool: ...

    def write_int32(self, key: str, value: int) -> bool: ...

    def write_uint64(self, key: str, value: int) -> bool: ...

    def write_int64(self, key: str, value: int) -> bool: ...

    def delete(self, key: str) -> bool: ...
