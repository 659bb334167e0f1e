"""JSON file backend.

Persists the store as one flat JSON object. Values that are not
string/bool/int (hand-edited floats, lists, ...) are kept on disk untouched
but are not representable as any ValueType.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from cfgstore.adapters.document import DocumentBackend
from cfgstore.utils.utility import atomic_write_bytes


class JsonFileBackend(DocumentBackend):
    name = "json"

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self._path = path if isinstance(path, Path) else Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        # a missing file is an empty store, not a failure
        if not self._path.exists():
            return {}
        raw = self._path.read_bytes()
        if not raw.strip():
            return {}
        data = orjson.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return data

    def _dump(self, doc: dict[str, Any]) -> None:
        payload = orjson.dumps(
            doc, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS | orjson.OPT_APPEND_NEWLINE
        )
        atomic_write_bytes(self._path, payload)

    def __repr__(self) -> str:
        return f"JsonFileBackend(path={str(self._path)!r})"
