"""
Backend selection.

Picks exactly one concrete backend for the accessor, once, at construction.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

from cfgstore.adapters.base import BaseBackend
from cfgstore.adapters.document import MemoryBackend
from cfgstore.adapters.json_file import JsonFileBackend
from cfgstore.adapters.plist_file import PlistFileBackend
from cfgstore.adapters.registry import RegistryBackend
from cfgstore.config.settings import AccessorSettings, BackendKind
from cfgstore.utils.utility import default_config_dir, default_plist_path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def resolve_backend_kind(settings: AccessorSettings, platform: Optional[str] = None) -> BackendKind:
    """
    AUTO resolves to the JSON file backend when a config file is given,
    otherwise to the platform's native store.
    """
    if settings.backend is not BackendKind.AUTO:
        return settings.backend
    if settings.config_file is not None:
        return BackendKind.JSON
    platform = sys.platform if platform is None else platform
    if platform == "win32":
        return BackendKind.REGISTRY
    if platform == "darwin":
        return BackendKind.PLIST
    return BackendKind.JSON


def default_config_file(settings: AccessorSettings, env: Optional[Mapping[str, str]] = None) -> Path:
    if settings.config_file is not None:
        return settings.config_file.expanduser()
    return default_config_dir(settings.app_name, env) / CONFIG_FILE_NAME


def create_backend(
    settings: AccessorSettings,
    platform: Optional[str] = None,
    *,
    store: Optional[dict[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> BaseBackend:
    """
    Build the backend described by `settings`.

    Args:
        settings: accessor settings (backend kind, paths, app name)
        platform: sys.platform-style name, defaults to the running platform
        store: backing dict for the memory backend
        env: environment used to locate default directories
    """
    kind = resolve_backend_kind(settings, platform)

    backend: BaseBackend
    if kind is BackendKind.MEMORY:
        backend = MemoryBackend(store)
    elif kind is BackendKind.JSON:
        backend = JsonFileBackend(default_config_file(settings, env))
    elif kind is BackendKind.PLIST:
        path = settings.config_file or default_plist_path(settings.resolved_bundle_id)
        backend = PlistFileBackend(path.expanduser())
    elif kind is BackendKind.REGISTRY:
        backend = RegistryBackend(settings.app_name, root=settings.registry_root)
    else:  # pragma: no cover - AUTO is always resolved above
        raise ValueError(f"Unresolved backend kind: {kind}")

    logger.debug(
        "config_backend_selected",
        extra={
            "event": "config_backend_selected",
            "requested": settings.backend.value,
            "backend": backend.name,
            "target": repr(backend),
        },
    )
    return backend
