from __future__ import annotations

"""
ephemcore.search.solver

Root refinement shared by every event search.

search() takes a bracket [t1, t2] over which f changes sign and narrows it
by regula falsi with the Illinois modification: when the same endpoint is
kept twice in a row its stored value is halved, which keeps the secant
step from stalling on one side. The midpoint is used whenever the secant
point is degenerate or falls outside the bracket, and after two steps that
failed to halve the bracket.

Bracketing is the caller's job. A bracket without a sign change returns
None; running out of iterations raises InternalError.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from ephemcore.core.constants import SECONDS_PER_DAY
from ephemcore.core.errors import InternalError
from ephemcore.core.time import AstroTime

logger = logging.getLogger(__name__)

TimeFunction = Callable[[AstroTime], float]


def search(
    f: TimeFunction,
    t1: AstroTime,
    t2: AstroTime,
    *,
    dt_tolerance_seconds: float = 1.0,
    init_f1: Optional[float] = None,
    init_f2: Optional[float] = None,
    iter_limit: int = 20,
) -> Optional[AstroTime]:
    """
    Find the instant between t1 and t2 where f crosses zero.

    t2 may precede t1. init_f1/init_f2 are the already known values of f at
    the endpoints, used to save two evaluations.
    """
    dt_days = abs(dt_tolerance_seconds / SECONDS_PER_DAY)
    f1 = f(t1) if init_f1 is None else init_f1
    f2 = f(t2) if init_f2 is None else init_f2

    if f1 == 0.0:
        return t1
    if f2 == 0.0:
        return t2
    if (f1 > 0.0) == (f2 > 0.0):
        logger.debug("no sign change between %s and %s", t1, t2)
        return None

    # which endpoint the previous step replaced: -1 for t1, +1 for t2
    side = 0
    stalled = 0
    prev_ut: Optional[float] = None

    for _ in range(iter_limit):
        width = abs(t2.ut - t1.ut)
        ut = (t1.ut * f2 - t2.ut * f1) / (f2 - f1)
        lo, hi = min(t1.ut, t2.ut), max(t1.ut, t2.ut)
        if stalled >= 2 or not math.isfinite(ut) or not (lo < ut < hi):
            ut = (t1.ut + t2.ut) / 2.0
            stalled = 0

        tq = AstroTime.from_ut(ut, t1.model)
        fq = f(tq)
        if fq == 0.0:
            return tq
        if prev_ut is not None and abs(ut - prev_ut) < dt_days:
            return tq
        prev_ut = ut

        if (fq > 0.0) == (f1 > 0.0):
            t1, f1 = tq, fq
            if side == -1:
                f2 /= 2.0
            side = -1
        else:
            t2, f2 = tq, fq
            if side == +1:
                f1 /= 2.0
            side = +1

        new_width = abs(t2.ut - t1.ut)
        if new_width < dt_days:
            return tq
        stalled = stalled + 1 if new_width > width / 2.0 else 0

    raise InternalError(f"search exceeded {iter_limit} iterations between {t1} and {t2}")


# ------------------------------------------------------------
# Ascending-crossing bracketing (rise/set, altitude searches)
# ------------------------------------------------------------

@dataclass(frozen=True)
class AscentInfo:
    tx: AstroTime
    ty: AstroTime
    ax: float
    ay: float


_MAX_ASCENT_DEPTH = 17


def find_ascent(
    depth: int,
    altdiff: TimeFunction,
    max_deriv_alt: float,
    t1: AstroTime,
    t2: AstroTime,
    a1: float,
    a2: float,
) -> Optional[AscentInfo]:
    """
    Recursively split [t1, t2] until a subinterval where altdiff goes from
    negative to non-negative is found. `max_deriv_alt` bounds |d altdiff/dt|
    in degrees per day and prunes halves that cannot reach zero.
    """
    if a1 < 0.0 <= a2:
        return AscentInfo(t1, t2, a1, a2)
    if a1 >= 0.0 > a2:
        # descending: the ascent, if any, lies outside this interval
        return None
    if depth > _MAX_ASCENT_DEPTH:
        raise InternalError("excessive recursion in rise/set ascent search")

    dt = t2.ut - t1.ut
    if dt * SECONDS_PER_DAY < 1.0:
        return None

    da = min(abs(a1), abs(a2))
    if da > max_deriv_alt * (dt / 2.0):
        return None

    tmid = AstroTime.from_ut((t1.ut + t2.ut) / 2.0, t1.model)
    amid = altdiff(tmid)
    return (find_ascent(depth + 1, altdiff, max_deriv_alt, t1, tmid, a1, amid)
            or find_ascent(depth + 1, altdiff, max_deriv_alt, tmid, t2, amid, a2))
