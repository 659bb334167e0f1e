import io
import json
from pathlib import Path

import pytest

from cfgstore.cli.cfg import (
    EXIT_ENFORCED_READ,
    EXIT_FALSE,
    EXIT_OK,
    EXIT_USAGE,
    build_parser,
    main,
)


def _run(*argv: str, env=None) -> tuple[int, str]:
    out = io.StringIO()
    code = main(list(argv), env=env or {}, out=out)
    return code, out.getvalue().strip()


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "config.json"


def test_build_parser():
    p = build_parser()
    assert p.prog == "cfgstore"
    args = p.parse_args(["set", "port", "443", "--type", "uint32", "--config", "c.json", "--masked"])
    assert args.command == "set"
    assert args.key == "port"
    assert args.value == "443"
    assert args.value_type == "uint32"
    assert args.config == Path("c.json")
    assert args.masked is True
    assert args.replace is False


def test_parser_rejects_unknown_type():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["get", "k", "--type", "float"])


def test_set_then_get(store_file: Path):
    assert _run("set", "port", "443", "--type", "uint32", "--config", str(store_file))[0] == EXIT_OK
    assert _run("get", "port", "--type", "uint32", "--config", str(store_file)) == (EXIT_OK, "443")
    assert json.loads(store_file.read_text(encoding="utf-8")) == {"port": 443}


def test_bool_round_trip(store_file: Path):
    _run("set", "enabled", "yes", "--type", "bool", "--config", str(store_file))
    assert _run("get", "enabled", "--type", "bool", "--config", str(store_file)) == (
        EXIT_OK,
        "true",
    )


def test_get_missing(store_file: Path):
    assert _run("get", "nope", "--config", str(store_file)) == (EXIT_FALSE, "")


def test_get_missing_enforced(store_file: Path):
    code, _ = _run("get", "nope", "--enforce-read", "--config", str(store_file))
    assert code == EXIT_ENFORCED_READ


def test_enforce_read_from_env(store_file: Path):
    env = {"CFGSTORE_ENFORCE_READ": "true", "CFGSTORE_CONFIG_FILE": str(store_file)}
    assert _run("get", "nope", env=env)[0] == EXIT_ENFORCED_READ


def test_has_and_delete(store_file: Path):
    cfg = ("--config", str(store_file))
    _run("set", "name", "alice", *cfg)
    assert _run("has", "name", *cfg) == (EXIT_OK, "true")
    assert _run("has", "name", "--type", "int64", *cfg) == (EXIT_FALSE, "false")
    assert _run("delete", "name", *cfg)[0] == EXIT_OK
    assert _run("delete", "name", *cfg)[0] == EXIT_OK
    assert _run("has", "name", *cfg) == (EXIT_FALSE, "false")


def test_replace_overwrites_store(store_file: Path):
    cfg = ("--config", str(store_file))
    _run("set", "a", "1", *cfg)
    _run("set", "b", "2", "--replace", *cfg)
    assert json.loads(store_file.read_text(encoding="utf-8")) == {"b": "2"}


def test_invalid_value(store_file: Path):
    code, _ = _run("set", "port", "-1", "--type", "uint32", "--config", str(store_file))
    assert code == EXIT_USAGE
    assert not store_file.exists()


@pytest.mark.parametrize(
    "argv",
    [
        ("set", "port", "-1", "--type", "uint32"),
        ("set", "enabled", "maybe", "--type", "bool"),
        ("set", "", "x"),
    ],
)
def test_rejected_replace_keeps_store(store_file: Path, argv):
    cfg = ("--config", str(store_file))
    assert _run("set", "a", "1", *cfg)[0] == EXIT_OK
    assert _run(*argv, "--replace", *cfg)[0] == EXIT_USAGE
    assert json.loads(store_file.read_text(encoding="utf-8")) == {"a": "1"}


def test_empty_key(store_file: Path):
    assert _run("get", "", "--config", str(store_file))[0] == EXIT_USAGE


def test_corrupt_store(store_file: Path):
    store_file.write_text("{broken", encoding="utf-8")
    assert _run("get", "k", "--config", str(store_file))[0] == EXIT_USAGE


def test_invalid_settings(store_file: Path):
    env = {"CFGSTORE_BACKEND": "floppy"}
    assert _run("get", "k", "--config", str(store_file), env=env)[0] == EXIT_USAGE


def test_settings_file(tmp_path: Path):
    settings = tmp_path / "settings.toml"
    settings.write_text('[cfgstore]\nconfig_file = "data/store.json"\n', encoding="utf-8")
    assert _run("set", "k", "v", "--settings", str(settings))[0] == EXIT_OK
    assert (tmp_path / "data" / "store.json").exists()


def test_masked_set_redacts_telemetry(store_file: Path, tmp_path: Path):
    sink = tmp_path / "events.jsonl"
    code, _ = _run(
        "set",
        "token",
        "s3cr3t",
        "--masked",
        "--config",
        str(store_file),
        "--telemetry",
        str(sink),
    )
    assert code == EXIT_OK
    events = [json.loads(line) for line in sink.read_text(encoding="utf-8").splitlines()]
    written = [e for e in events if e["event"] == "config_option_written"]
    assert written[0]["value"] == "***REDACTED***"
    assert "s3cr3t" not in sink.read_text(encoding="utf-8")
    # the store itself holds the clear value
    assert json.loads(store_file.read_text(encoding="utf-8")) == {"token": "s3cr3t"}
