from pathlib import Path

import pytest

from cfgstore.adapters.document import MemoryBackend
from cfgstore.adapters.json_file import JsonFileBackend
from cfgstore.adapters.plist_file import PlistFileBackend
from cfgstore.adapters.registry import RegistryBackend
from cfgstore.config.settings import AccessorSettings, BackendKind
from cfgstore.core.accessor import ConfigAccessor
from cfgstore.core.factory import create_backend, resolve_backend_kind
from cfgstore.types.option import Option
from cfgstore.types.values import ValueType


@pytest.mark.parametrize(
    "platform,expected",
    [
        ("win32", BackendKind.REGISTRY),
        ("darwin", BackendKind.PLIST),
        ("linux", BackendKind.JSON),
        ("freebsd13", BackendKind.JSON),
    ],
)
def test_auto_follows_platform(platform: str, expected: BackendKind) -> None:
    assert resolve_backend_kind(AccessorSettings(), platform) is expected


def test_explicit_config_file_selects_json_on_every_platform(tmp_path: Path) -> None:
    settings = AccessorSettings(config_file=tmp_path / "c.json")
    for platform in ("win32", "darwin", "linux"):
        assert resolve_backend_kind(settings, platform) is BackendKind.JSON


def test_explicit_backend_wins(tmp_path: Path) -> None:
    settings = AccessorSettings(backend=BackendKind.PLIST, config_file=tmp_path / "c.plist")
    backend = create_backend(settings, "linux")
    assert isinstance(backend, PlistFileBackend)
    assert backend.path == tmp_path / "c.plist"


def test_json_default_location_uses_xdg(tmp_path: Path) -> None:
    backend = create_backend(
        AccessorSettings(app_name="demo"), "linux", env={"XDG_CONFIG_HOME": str(tmp_path)}
    )
    assert isinstance(backend, JsonFileBackend)
    assert backend.path == tmp_path / "demo" / "config.json"


def test_json_default_location_falls_back_to_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    backend = create_backend(AccessorSettings(app_name="demo"), "linux", env={})
    assert isinstance(backend, JsonFileBackend)
    assert backend.path == tmp_path / ".config" / "demo" / "config.json"


def test_plist_default_location(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    backend = create_backend(AccessorSettings(bundle_id="org.example.demo"), "darwin")
    assert isinstance(backend, PlistFileBackend)
    assert backend.path == tmp_path / "Library" / "Preferences" / "org.example.demo.plist"


def test_registry_on_windows() -> None:
    backend = create_backend(AccessorSettings(app_name="demo"), "win32")
    assert isinstance(backend, RegistryBackend)
    assert backend.subkey == "Software\\demo"


def test_memory_uses_given_store() -> None:
    store = {"k": "v"}
    backend = create_backend(AccessorSettings(backend=BackendKind.MEMORY), store=store)
    assert isinstance(backend, MemoryBackend)
    assert backend.store is store


def test_accessor_from_settings(tmp_path: Path) -> None:
    settings = AccessorSettings(config_file=tmp_path / "app.json", enforce_read=True)
    accessor = ConfigAccessor.from_settings(settings)
    assert accessor.enforce_read is True
    assert isinstance(accessor.backend, JsonFileBackend)

    with accessor.session():
        accessor.write("retries", 3, value_type=ValueType.UINT32)
    with accessor.session():
        out = Option("retries", ValueType.UINT32)
        assert accessor.read("retries", out)
        assert out.value == 3
