"""
Purpose:
    - Describe which backend an accessor uses and where it persists
    - Load those settings from a TOML file and/or environment variables
    - Resolve layers: defaults < file < env < explicit overrides
"""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cfgstore.errors.errors import SettingsError
from cfgstore.utils.utility import first_error_field, validation_error_parser

ENV_PREFIX = "CFGSTORE_"
SETTINGS_TABLE = "cfgstore"


class BackendKind(str, Enum):
    """Selectable storage backends."""

    AUTO = "auto"
    MEMORY = "memory"
    JSON = "json"
    PLIST = "plist"
    REGISTRY = "registry"


class AccessorSettings(BaseModel):
    """
    Everything the backend factory needs. The config file path lives here
    and is threaded into the factory; there is no module-level path.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    backend: BackendKind = BackendKind.AUTO
    config_file: Optional[Path] = None
    app_name: str = "cfgstore"
    bundle_id: Optional[str] = None
    registry_root: Literal["HKEY_CURRENT_USER", "HKEY_LOCAL_MACHINE"] = "HKEY_CURRENT_USER"
    enforce_read: bool = False

    @field_validator("app_name")
    @classmethod
    def _check_app_name(cls, value: str) -> str:
        if not value or value.strip() != value:
            raise ValueError("app_name must be non-empty without surrounding whitespace")
        if any(sep in value for sep in ("/", "\\")):
            raise ValueError("app_name must not contain path separators")
        return value

    @property
    def resolved_bundle_id(self) -> str:
        return self.bundle_id or self.app_name

    @classmethod
    def build(cls, **values: Any) -> "AccessorSettings":
        """Construct, surfacing pydantic validation failures as SettingsError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise SettingsError(
                "Invalid accessor settings",
                field=first_error_field(exc),
                component="cfgstore.settings",
                details={"errors": validation_error_parser(exc)},
            ) from exc

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        prefix: str = ENV_PREFIX,
    ) -> "AccessorSettings":
        return cls.build(**env_layer(env, prefix))


_ENV_FIELDS = ("backend", "config_file", "app_name", "bundle_id", "registry_root", "enforce_read")


def env_layer(env: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Pick <prefix><FIELD> variables; empty values are treated as unset."""
    if not prefix:
        raise ValueError("Environment prefix must be a non-empty string")
    env = os.environ if env is None else env
    layer: dict[str, Any] = {}
    for name in _ENV_FIELDS:
        raw = env.get(f"{prefix}{name.upper()}")
        if raw:
            layer[name] = raw
    return layer


def file_layer(path: Path | str) -> dict[str, Any]:
    """
    Read settings from a TOML file. Keys may sit at top level or under a
    [cfgstore] table; a relative config_file is resolved against the
    settings file's directory.
    """
    path = Path(path)
    if not path.exists():
        raise SettingsError(
            f"Settings file not found: {path}", field="settings_file", value=path
        )
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(
            f"Settings file is not valid TOML: {exc}", field="settings_file", value=path
        ) from exc

    table = data.get(SETTINGS_TABLE, data)
    if not isinstance(table, dict):
        raise SettingsError(f"[{SETTINGS_TABLE}] must be a table", field=SETTINGS_TABLE)
    layer = dict(table)

    config_file = layer.get("config_file")
    if isinstance(config_file, str) and config_file:
        candidate = Path(config_file).expanduser()
        if not candidate.is_absolute():
            candidate = path.parent / candidate
        layer["config_file"] = candidate
    return layer


def resolve_settings(
    settings_file: Optional[Path | str] = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    prefix: str = ENV_PREFIX,
) -> AccessorSettings:
    """
    Resolves settings according to hierarchy, applying layers sequentially:
    defaults (model), settings file, environment, explicit overrides.
    Overrides set to None are ignored.
    """
    resolved: dict[str, Any] = {}
    if settings_file is not None:
        resolved.update(file_layer(settings_file))
    resolved.update(env_layer(env, prefix))
    if overrides:
        resolved.update({k: v for k, v in overrides.items() if v is not None})
    return AccessorSettings.build(**resolved)
