"""Document backends.

A document backend loads the whole store into a flat dict on open, serves
Has/Read/Write/Delete from memory, and persists the dict on close. The
memory, JSON and plist backends differ only in _load/_dump.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any, Optional

from cfgstore.adapters.base import BaseBackend
from cfgstore.types.values import Value, ValueType

_LOGGER = logging.getLogger(__name__)

_MISSING = object()


class DocumentBackend(BaseBackend):
    name = "document"

    def __init__(self) -> None:
        self._doc: Optional[dict[str, Any]] = None
        self._dirty = False

    @abstractmethod
    def _load(self) -> dict[str, Any]:
        """Return the persisted document. May raise OSError/ValueError."""

    @abstractmethod
    def _dump(self, doc: dict[str, Any]) -> None:
        """Persist `doc`. May raise OSError/ValueError/TypeError."""

    def open(self, dont_read: bool) -> bool:
        if dont_read:
            doc: dict[str, Any] = {}
        else:
            try:
                doc = self._load()
            except (OSError, ValueError) as exc:
                _LOGGER.warning(
                    "config_backend_load_failed",
                    extra={
                        "event": "config_backend_load_failed",
                        "backend": self.name,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )
                return False
        self._doc = doc
        # a write-only session replaces the stored document even if nothing is written
        self._dirty = dont_read
        _LOGGER.debug(
            "config_backend_opened",
            extra={
                "event": "config_backend_opened",
                "backend": self.name,
                "dont_read": dont_read,
                "keys_total": len(doc),
            },
        )
        return True

    def close(self) -> bool:
        if self._doc is None:
            return True
        doc, dirty = self._doc, self._dirty
        self._doc = None
        self._dirty = False
        if not dirty:
            return True
        try:
            self._dump(doc)
        except (OSError, ValueError, TypeError) as exc:
            _LOGGER.warning(
                "config_backend_flush_failed",
                extra={
                    "event": "config_backend_flush_failed",
                    "backend": self.name,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            return False
        _LOGGER.debug(
            "config_backend_flushed",
            extra={"event": "config_backend_flushed", "backend": self.name, "keys_total": len(doc)},
        )
        return True

    def discard(self) -> None:
        self._doc = None
        self._dirty = False

    def delete(self, key: str) -> bool:
        doc = self._document()
        if doc.pop(key, _MISSING) is not _MISSING:
            self._dirty = True
        return True

    def _has(self, key: str, value_type: ValueType) -> bool:
        doc = self._document()
        return key in doc and value_type.accepts(doc[key])

    def _read(self, key: str, value_type: ValueType) -> Optional[Value]:
        raw = self._document().get(key, _MISSING)
        if raw is _MISSING or not value_type.accepts(raw):
            return None
        return raw

    def _write(self, key: str, value_type: ValueType, value: Value) -> bool:
        self._document()[key] = value
        self._dirty = True
        return True

    def _document(self) -> dict[str, Any]:
        if self._doc is None:
            raise RuntimeError(f"{self.name} backend used outside an open session")
        return self._doc


class MemoryBackend(DocumentBackend):
    """
    Document backend over a caller-owned dict.

    The dict outlives sessions, so it behaves like a persisted medium: open
    copies it, close commits the working copy back.
    """

    name = "memory"

    def __init__(self, store: Optional[dict[str, Any]] = None) -> None:
        super().__init__()
        self._store: dict[str, Any] = store if store is not None else {}

    @property
    def store(self) -> dict[str, Any]:
        return self._store

    def _load(self) -> dict[str, Any]:
        return dict(self._store)

    def _dump(self, doc: dict[str, Any]) -> None:
        self._store.clear()
        self._store.update(doc)
