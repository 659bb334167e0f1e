"""
Typed key/value configuration store.

One accessor API over interchangeable storage backends (JSON file, macOS
property list, Windows registry, in-memory), with typed reads and writes,
opt-in enforced reads and masked (redacted) values.

Components:
- ConfigAccessor: session lifecycle + typed has/read/write/delete
- Backend port and adapters: MemoryBackend, JsonFileBackend, PlistFileBackend, RegistryBackend
- create_backend: picks the backend for the running platform from AccessorSettings
- Option / ValueType: typed option holder and the closed set of value types

Usage:
    from cfgstore import AccessorSettings, ConfigAccessor, Option, ValueType

    accessor = ConfigAccessor.from_settings(AccessorSettings(config_file="app.json"))
    port = Option("server_port", ValueType.UINT32, default=8443)
    with accessor.session():
        accessor.read("server_port", port)
"""

from cfgstore.adapters.document import MemoryBackend
from cfgstore.adapters.json_file import JsonFileBackend
from cfgstore.adapters.plist_file import PlistFileBackend
from cfgstore.adapters.registry import RegistryBackend
from cfgstore.config.settings import AccessorSettings, BackendKind, resolve_settings
from cfgstore.core.accessor import AccessorState, ConfigAccessor
from cfgstore.core.factory import create_backend
from cfgstore.errors.errors import (
    AccessorNotOpenError,
    AccessorStateError,
    BackendOpenError,
    ConfigStoreError,
    EnforcedReadError,
    InvalidKeyError,
    SettingsError,
)
from cfgstore.types.option import Option
from cfgstore.types.values import REDACTION_TOKEN, ValueType, render_value

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "ConfigAccessor",
    "AccessorState",
    "AccessorSettings",
    "BackendKind",
    "create_backend",
    "resolve_settings",
    # Backends
    "MemoryBackend",
    "JsonFileBackend",
    "PlistFileBackend",
    "RegistryBackend",
    # Types
    "Option",
    "ValueType",
    "REDACTION_TOKEN",
    "render_value",
    # Errors
    "ConfigStoreError",
    "AccessorStateError",
    "AccessorNotOpenError",
    "InvalidKeyError",
    "EnforcedReadError",
    "BackendOpenError",
    "SettingsError",
]
