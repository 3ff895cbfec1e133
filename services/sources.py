"""Identifier, clock and caller collaborators consumed by the service layer."""

from __future__ import annotations

import time
from contextlib import contextmanager
from contextvars import ContextVar
from threading import Lock
from typing import Iterator, Optional, Protocol
from uuid import uuid4


class IdentifierSource(Protocol):
    def new_id(self) -> str:
        ...


class ClockSource(Protocol):
    def now(self) -> int:
        ...


class CallerIdentity(Protocol):
    def current(self) -> str:
        ...


class UuidIdentifierSource:
    """Random version 4 UUIDs rendered as 36 character strings."""

    def new_id(self) -> str:
        return str(uuid4())


class MonotonicClock:
    """Wall-clock nanoseconds that never step backwards between calls."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, time.time_ns())
            return self._last


_current_caller: ContextVar[Optional[str]] = ContextVar("current_caller", default=None)


@contextmanager
def caller_scope(identity: Optional[str]) -> Iterator[None]:
    """Bind ``identity`` as the caller for operations run inside the block."""
    token = _current_caller.set(identity)
    try:
        yield
    finally:
        _current_caller.reset(token)


class ContextCallerIdentity:
    """Resolves the caller bound by :func:`caller_scope`, else a fallback."""

    def __init__(self, default: str) -> None:
        self.default = default

    def current(self) -> str:
        identity = _current_caller.get()
        if identity is None or not identity.strip():
            return self.default
        return identity.strip()
