import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

# --- File helpers ---


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """
    Write `payload` to `path` via a temp file in the same directory and
    os.replace, so readers see either the old or the new content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


# --- Default locations ---


def default_config_dir(app_name: str, env: Optional[Mapping[str, str]] = None) -> Path:
    """$XDG_CONFIG_HOME/<app_name>, falling back to ~/.config/<app_name>."""
    env = os.environ if env is None else env
    base = env.get("XDG_CONFIG_HOME") or ""
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def default_plist_path(bundle_id: str) -> Path:
    return Path.home() / "Library" / "Preferences" / f"{bundle_id}.plist"


# --- Other ---


def validation_error_parser(error: ValidationError) -> list[dict[str, str]]:
    parsed_error = [
        {
            "component": "cfgstore.settings",
            "path": ".".join(map(str, err["loc"])),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    return parsed_error


def first_error_field(error: ValidationError) -> Any:
    errors = error.errors()
    if not errors:
        return None
    return ".".join(map(str, errors[0]["loc"])) or None
