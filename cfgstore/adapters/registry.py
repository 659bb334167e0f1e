"""Windows registry backend.

Values live under <root>\\Software\\<app_name>:
- string          -> REG_SZ (REG_EXPAND_SZ is accepted on read)
- bool            -> REG_DWORD holding 0 or 1
- uint32 / int32  -> REG_DWORD (int32 as two's complement)
- uint64 / int64  -> REG_QWORD (int64 as two's complement); REG_DWORD accepted on read

Writes go straight to the hive; close flushes and releases the key handle.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

from cfgstore.adapters.base import BaseBackend
from cfgstore.types.values import Value, ValueType

if sys.platform == "win32":
    import winreg

_LOGGER = logging.getLogger(__name__)

_U32_MASK = 0xFFFF_FFFF
_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF


def _signed(value: int, bits: int) -> int:
    return value - (1 << bits) if value >= 1 << (bits - 1) else value


class RegistryBackend(BaseBackend):
    name = "registry"

    def __init__(self, app_name: str, *, root: str = "HKEY_CURRENT_USER") -> None:
        self._subkey = f"Software\\{app_name}"
        self._root_name = root
        self._hkey: Any = None

    @property
    def subkey(self) -> str:
        return self._subkey

    def open(self, dont_read: bool) -> bool:
        if sys.platform != "win32":
            _LOGGER.warning(
                "config_backend_unavailable",
                extra={
                    "event": "config_backend_unavailable",
                    "backend": self.name,
                    "platform": sys.platform,
                },
            )
            return False
        # a write-only session does not ask for read access
        access = winreg.KEY_WRITE if dont_read else winreg.KEY_READ | winreg.KEY_WRITE
        try:
            root = getattr(winreg, self._root_name)
            self._hkey = winreg.CreateKeyEx(root, self._subkey, 0, access)
        except (AttributeError, OSError) as exc:
            _LOGGER.warning(
                "config_backend_load_failed",
                extra={
                    "event": "config_backend_load_failed",
                    "backend": self.name,
                    "subkey": self._subkey,
                    "error": str(exc),
                },
            )
            return False
        _LOGGER.debug(
            "config_backend_opened",
            extra={"event": "config_backend_opened", "backend": self.name, "dont_read": dont_read},
        )
        return True

    def close(self) -> bool:
        if self._hkey is None:
            return True
        hkey, self._hkey = self._hkey, None
        try:
            winreg.FlushKey(hkey)
        except OSError as exc:
            _LOGGER.warning(
                "config_backend_flush_failed",
                extra={"event": "config_backend_flush_failed", "backend": self.name, "error": str(exc)},
            )
            winreg.CloseKey(hkey)
            return False
        winreg.CloseKey(hkey)
        return True

    def discard(self) -> None:
        # values already set are in the hive; only the handle is released
        if self._hkey is None:
            return
        hkey, self._hkey = self._hkey, None
        try:
            winreg.CloseKey(hkey)
        except OSError as exc:
            _LOGGER.warning(
                "config_backend_release_failed",
                extra={"event": "config_backend_release_failed", "backend": self.name, "error": str(exc)},
            )

    def delete(self, key: str) -> bool:
        try:
            winreg.DeleteValue(self._handle(), key)
        except FileNotFoundError:
            return True
        except OSError as exc:
            _LOGGER.warning(
                "config_backend_delete_failed",
                extra={"event": "config_backend_delete_failed", "backend": self.name, "error": str(exc)},
            )
            return False
        return True

    def _has(self, key: str, value_type: ValueType) -> bool:
        return self._read(key, value_type) is not None

    def _read(self, key: str, value_type: ValueType) -> Optional[Value]:
        try:
            raw, reg_type = winreg.QueryValueEx(self._handle(), key)
        except OSError:
            return None
        return self._decode(value_type, raw, reg_type)

    def _write(self, key: str, value_type: ValueType, value: Value) -> bool:
        reg_type, raw = self._encode(value_type, value)
        try:
            winreg.SetValueEx(self._handle(), key, 0, reg_type, raw)
        except OSError as exc:
            _LOGGER.warning(
                "config_backend_write_failed",
                extra={"event": "config_backend_write_failed", "backend": self.name, "error": str(exc)},
            )
            return False
        return True

    @staticmethod
    def _decode(value_type: ValueType, raw: Any, reg_type: int) -> Optional[Value]:
        if value_type is ValueType.STRING:
            return raw if reg_type in (winreg.REG_SZ, winreg.REG_EXPAND_SZ) else None
        if value_type is ValueType.BOOL:
            if reg_type == winreg.REG_DWORD and raw in (0, 1):
                return bool(raw)
            return None
        if value_type is ValueType.UINT32:
            return raw if reg_type == winreg.REG_DWORD else None
        if value_type is ValueType.INT32:
            return _signed(raw, 32) if reg_type == winreg.REG_DWORD else None
        if reg_type == winreg.REG_DWORD:
            return raw
        if reg_type == winreg.REG_QWORD:
            return raw if value_type is ValueType.UINT64 else _signed(raw, 64)
        return None

    @staticmethod
    def _encode(value_type: ValueType, value: Value) -> tuple[int, Any]:
        if value_type is ValueType.STRING:
            return winreg.REG_SZ, value
        if value_type is ValueType.BOOL:
            return winreg.REG_DWORD, int(value)
        if value_type in (ValueType.UINT32, ValueType.INT32):
            return winreg.REG_DWORD, int(value) & _U32_MASK
        return winreg.REG_QWORD, int(value) & _U64_MASK

    def _handle(self) -> Any:
        if self._hkey is None:
            raise RuntimeError("registry backend used outside an open session")
        return self._hkey

    def __repr__(self) -> str:
        return f"RegistryBackend(root={self._root_name!r}, subkey={self._subkey!r})"
