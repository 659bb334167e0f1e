"""Property list backend (macOS preferences format)."""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from cfgstore.adapters.document import DocumentBackend
from cfgstore.utils.utility import atomic_write_bytes


class PlistFileBackend(DocumentBackend):
    name = "plist"

    def __init__(self, path: Path | str, *, fmt: plistlib.PlistFormat = plistlib.FMT_XML) -> None:
        super().__init__()
        self._path = path if isinstance(path, Path) else Path(path)
        self._fmt = fmt

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with self._path.open("rb") as handle:
            try:
                data = plistlib.load(handle)
            except (plistlib.InvalidFileException, ExpatError) as exc:
                raise ValueError(f"{self._path} is not a property list") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a dictionary")
        return data

    def _dump(self, doc: dict[str, Any]) -> None:
        # OverflowError (int beyond 64 bits) is an ArithmeticError, not a ValueError
        try:
            payload = plistlib.dumps(doc, fmt=self._fmt, sort_keys=True)
        except OverflowError as exc:
            raise ValueError(str(exc)) from exc
        atomic_write_bytes(self._path, payload)

    def __repr__(self) -> str:
        return f"PlistFileBackend(path={str(self._path)!r})"
