"""cfgstore CLI entrypoint.

Subcommands: get, set, has, delete.

Exit status:
    0  success
    1  key missing, has -> false, or the backend reported a write/delete/flush failure
    2  usage error, invalid settings, or the backend could not be opened
    3  enforced read failed (--enforce-read and the key is missing)

Masking (--masked) only redacts values in log records and telemetry; the
value asked for by `get` is still printed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from cfgstore.adapters.telemetry.jsonl import JsonlTelemetry
from cfgstore.config.settings import BackendKind, resolve_settings
from cfgstore.core.accessor import ConfigAccessor
from cfgstore.errors.errors import (
    ConfigStoreError,
    EnforcedReadError,
    InvalidKeyError,
    SettingsError,
)
from cfgstore.ports.telemetry import Telemetry
from cfgstore.types.option import Option
from cfgstore.types.values import Value, ValueType

EXIT_OK = 0
EXIT_FALSE = 1
EXIT_USAGE = 2
EXIT_ENFORCED_READ = 3

_TYPE_CHOICES = [t.value for t in ValueType]


def build_parser() -> argparse.ArgumentParser:
    """
    Return the top-level CLI argument parser.
    """
    p = argparse.ArgumentParser(prog="cfgstore")
    sub = p.add_subparsers(dest="command", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        """Add arguments shared across all subcommands."""
        sp.add_argument(
            "--backend",
            choices=[k.value for k in BackendKind],
            default=None,
            help="Storage backend (default: auto)",
        )
        sp.add_argument("--config", type=Path, default=None, help="Path to the config store file")
        sp.add_argument("--settings", type=Path, default=None, help="TOML settings file")
        sp.add_argument("--app-name", dest="app_name", default=None, help="Application name")
        sp.add_argument(
            "--telemetry", type=Path, default=None, help="Append JSONL telemetry events here"
        )
        sp.add_argument(
            "--log-level",
            dest="log_level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        )

    def add_typed(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("key", help="Option key")
        sp.add_argument(
            "--type", dest="value_type", choices=_TYPE_CHOICES, default=ValueType.STRING.value
        )

    get = sub.add_parser("get", help="Print the value stored at KEY")
    add_common(get)
    add_typed(get)
    get.add_argument("--enforce-read", action="store_true", help="Treat a missing key as fatal")
    get.add_argument("--masked", action="store_true", help="Redact the value in logs")

    set_ = sub.add_parser("set", help="Store VALUE at KEY")
    add_common(set_)
    add_typed(set_)
    set_.add_argument("value", help="Value to store")
    set_.add_argument("--masked", action="store_true", help="Redact the value in logs")
    set_.add_argument(
        "--replace",
        action="store_true",
        help="Open write-only: the store is replaced by this single key",
    )

    has = sub.add_parser("has", help="Exit 0 if KEY exists as --type")
    add_common(has)
    add_typed(has)

    delete = sub.add_parser("delete", help="Remove KEY")
    add_common(delete)
    delete.add_argument("key", help="Option key")
    return p


def run_command(
    args: argparse.Namespace,
    accessor: ConfigAccessor,
    out: TextIO,
) -> int:
    """Execute one parsed command against `accessor`, returning the exit status."""
    # arguments are checked before open so a rejected `set --replace` never
    # reaches the store
    if not args.key:
        raise InvalidKeyError("Key must be a non-empty string", key=args.key, component="cli")
    value = ValueType(args.value_type).parse(args.value) if args.command == "set" else None

    dont_read = bool(getattr(args, "replace", False))
    if not accessor.open(dont_read):
        print("cfgstore: could not open the config store", file=sys.stderr)
        return EXIT_USAGE

    try:
        status = _dispatch(args, accessor, out, value)
    finally:
        flushed = accessor.close()
    if not flushed:
        print("cfgstore: failed to flush the config store", file=sys.stderr)
        return EXIT_FALSE
    return status


def _dispatch(
    args: argparse.Namespace, accessor: ConfigAccessor, out: TextIO, value: Optional[Value]
) -> int:
    if args.command == "delete":
        return EXIT_OK if accessor.delete(args.key) else EXIT_FALSE

    value_type = ValueType(args.value_type)
    if args.command == "has":
        present = accessor.has_key(args.key, value_type)
        print("true" if present else "false", file=out)
        return EXIT_OK if present else EXIT_FALSE

    if args.command == "get":
        option = Option(args.key, value_type)
        if not accessor.read(args.key, option, is_masked=args.masked):
            print(f"cfgstore: {args.key!r} not found as {value_type.value}", file=sys.stderr)
            return EXIT_FALSE
        print(_format(option.value), file=out)
        return EXIT_OK

    # set
    written = accessor.write(args.key, value, args.masked, value_type=value_type)
    return EXIT_OK if written else EXIT_FALSE


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def main(
    argv: list[str] | None = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    out: Optional[TextIO] = None,
) -> int:
    """CLI entrypoint wrapper compatible with setuptools scripts."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if out is None:
        out = sys.stdout

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    overrides: dict[str, Any] = {
        "backend": args.backend,
        "config_file": args.config,
        "app_name": args.app_name,
    }
    if getattr(args, "enforce_read", False):
        overrides["enforce_read"] = True

    try:
        settings = resolve_settings(args.settings, env=env, overrides=overrides)
    except SettingsError as exc:
        print(f"cfgstore: {exc}", file=sys.stderr)
        return EXIT_USAGE

    telemetry: Optional[Telemetry] = None
    if args.telemetry is not None:
        telemetry = JsonlTelemetry(sink_path=args.telemetry, session_id=f"cli-{args.command}")

    accessor = ConfigAccessor.from_settings(settings, telemetry=telemetry)
    try:
        return run_command(args, accessor, out)
    except EnforcedReadError as exc:
        print(f"cfgstore: {exc}", file=sys.stderr)
        return EXIT_ENFORCED_READ
    except (ConfigStoreError, TypeError, ValueError) as exc:
        print(f"cfgstore: {exc}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
