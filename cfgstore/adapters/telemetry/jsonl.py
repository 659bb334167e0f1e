"""JSON Lines Telemetry adapter.

Implements the Telemetry port by writing structured JSON objects (one per
line) to disk. Masked fields, and fields whose name is always secret, are
replaced by the redaction token before anything is written.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from cfgstore.types.values import REDACTION_TOKEN


class JsonlTelemetry:
    _REDACTION_TOKEN = REDACTION_TOKEN
    _DEFAULT_SECRET_KEYS = frozenset(
        {
            "password",
            "secret",
            "token",
            "api_key",
        }
    )

    def __init__(
        self,
        sink_path: Path,
        session_id: str = "default",
        secret_keys: Iterable[str] = _DEFAULT_SECRET_KEYS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._sink_path = sink_path if isinstance(sink_path, Path) else Path(sink_path)
        self._session_id = str(session_id)
        # a bare string would otherwise be treated as a set of characters
        if isinstance(secret_keys, str):
            secret_keys = (secret_keys,)
        self._secret_keys = frozenset(secret_keys)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def sink_path(self) -> Path:
        return self._sink_path

    def log(self, event: str, *, masked: Iterable[str] = (), **fields: Any) -> None:
        if not event:
            raise ValueError("Telemetry event name must be non-empty")

        sanitized_fields, redacted = self._sanitize_fields(fields, frozenset(masked))

        record: dict[str, Any] = {
            "event": event,
            "ts_utc": self._clock().isoformat(),
            "session_id": self._session_id,
            **sanitized_fields,
        }
        if redacted:
            record["redacted_fields"] = sorted(redacted)

        self._write_record(record)

    def _sanitize_fields(
        self, fields: Mapping[str, Any], masked: frozenset[str]
    ) -> tuple[dict[str, Any], set[str]]:
        sanitized: dict[str, Any] = {}
        redacted: set[str] = set()
        for key, value in fields.items():
            if key in masked or key in self._secret_keys:
                sanitized[key] = self._REDACTION_TOKEN
                redacted.add(key)
            else:
                sanitized[key] = value

        return sanitized, redacted

    def _write_record(self, record: Mapping[str, Any]) -> None:
        payload = json.dumps(record, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
        self._sink_path.parent.mkdir(parents=True, exist_ok=True)
        with self._sink_path.open("a", encoding="utf-8") as handle:
            handle.write(payload + "\n")
