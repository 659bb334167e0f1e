"""Telemetry Port Interface.

Contract: log structured events. Fields listed in `masked` must never be
rendered in clear text by the implementation.
"""
from __future__ import annotations
from typing import Protocol, Any, Iterable

class Telemetry(Protocol):
    def log(self, event: str, *, masked: Iterable[str] = (), **fields: Any) -> None: ...
