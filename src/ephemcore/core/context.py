"""
Ephemeris context: owner of the per-instant caches.

Nutation/obliquity ("Earth tilt") is memoized by TT and Greenwich sidereal
time by TT and UT together, since one TT maps to different UT under
different ΔT models. Each cache holds only the most recent instant, so staleness cannot
leak between instants. The process-wide default context is lock-protected;
callers that run independent searches concurrently can bind their own
context with `use_context`.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional, TypeVar

T = TypeVar("T")

TILT_TOLERANCE_DAYS = 1.0e-6


class _Slot:
    __slots__ = ("tt", "ut", "value")

    def __init__(self) -> None:
        self.tt: Optional[float] = None
        self.ut: Optional[float] = None
        self.value = None


class EphemerisContext:
    """Holds the memo slots and the lock that guards them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: dict[str, _Slot] = {}

    def memo(
        self,
        key: str,
        tt: float,
        compute: Callable[[], T],
        *,
        tolerance: float = 0.0,
        ut: Optional[float] = None,
    ) -> T:
        """
        Return the cached value for `key` if it was computed for the same tt
        (within `tolerance` days) and the same ut, otherwise compute and
        store it. Slots memoized without a ut match on tt alone.
        """
        with self._lock:
            slot = self._slots.get(key)
            if (slot is not None and slot.tt is not None and abs(slot.tt - tt) <= tolerance
                    and slot.ut == ut):
                return slot.value
        value = compute()
        with self._lock:
            slot = self._slots.setdefault(key, _Slot())
            slot.tt = tt
            slot.ut = ut
            slot.value = value
        return value

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()


_default_context = EphemerisContext()
_bound: ContextVar[Optional[EphemerisContext]] = ContextVar("ephemcore_context", default=None)


def current_context() -> EphemerisContext:
    ctx = _bound.get()
    return ctx if ctx is not None else _default_context


@contextmanager
def use_context(ctx: Optional[EphemerisContext] = None) -> Iterator[EphemerisContext]:
    """Bind `ctx` (or a fresh context) for the current thread/task."""
    ctx = ctx or EphemerisContext()
    token = _bound.set(ctx)
    try:
        yield ctx
    finally:
        _bound.reset(token)
