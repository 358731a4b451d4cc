from __future__ import annotations

"""
ephemcore.search.moon

Lunar phase angle and searches for phases and quarters.

The phase angle is the geocentric ecliptic longitude of the Moon minus
that of the Sun: 0 new, 90 first quarter, 180 full, 270 third quarter.
"""

import math
from dataclasses import dataclass
from typing import Optional

from ephemcore.core.constants import MEAN_SYNODIC_MONTH
from ephemcore.core.errors import InternalError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body
from ephemcore.geometry.bodies import pair_longitude
from ephemcore.reference.astro_args import longitude_offset
from ephemcore.search.solver import search

QUARTER_NAMES = ("new moon", "first quarter", "full moon", "third quarter")

# days either side of the mean-motion estimate that always contain the event
_PHASE_UNCERTAINTY = 1.5


def moon_phase(time: AstroTime) -> float:
    """Moon's phase angle [deg] in [0, 360)."""
    return pair_longitude(Body.MOON, Body.SUN, time)


def search_moon_phase(target_lon: float, start: AstroTime, limit_days: float) -> Optional[AstroTime]:
    """
    First time the phase angle reaches `target_lon` within `limit_days` of
    `start`. A negative limit searches backward in time. Returns None when
    the event lies outside the window.
    """
    if not math.isfinite(target_lon) or not math.isfinite(limit_days):
        raise ValueError("target longitude and limit must be finite")

    def moon_offset(t: AstroTime) -> float:
        return longitude_offset(moon_phase(t) - target_lon)

    ya = moon_offset(start)
    if limit_days < 0.0:
        if ya < 0.0:
            ya += 360.0
        est_dt = -(MEAN_SYNODIC_MONTH * ya) / 360.0
        dt2 = est_dt + _PHASE_UNCERTAINTY
        if dt2 < limit_days:
            return None
        dt1 = max(limit_days, est_dt - _PHASE_UNCERTAINTY)
    else:
        if ya > 0.0:
            ya -= 360.0
        est_dt = -(MEAN_SYNODIC_MONTH * ya) / 360.0
        dt1 = est_dt - _PHASE_UNCERTAINTY
        if dt1 > limit_days:
            return None
        dt2 = min(limit_days, est_dt + _PHASE_UNCERTAINTY)

    t1 = start.add_days(dt1)
    t2 = start.add_days(dt2)
    return search(moon_offset, t1, t2, dt_tolerance_seconds=0.1)


@dataclass(frozen=True)
class MoonQuarter:
    quarter: int  # 0 new, 1 first quarter, 2 full, 3 third quarter
    time: AstroTime

    @property
    def name(self) -> str:
        return QUARTER_NAMES[self.quarter]


def search_moon_quarter(start: AstroTime) -> MoonQuarter:
    """First lunar quarter strictly after the quarter in progress at `start`."""
    quarter = (int(math.floor(moon_phase(start) / 90.0)) + 1) % 4
    time = search_moon_phase(90.0 * quarter, start, 10.0)
    if time is None:
        raise InternalError(f"cannot find moon quarter {quarter} after {start}")
    return MoonQuarter(quarter, time)


def next_moon_quarter(mq: MoonQuarter) -> MoonQuarter:
    # skip ahead far enough to land inside the next quarter
    nxt = search_moon_quarter(mq.time.add_days(6.0))
    if nxt.quarter != (mq.quarter + 1) % 4:
        raise InternalError(f"expected quarter {(mq.quarter + 1) % 4}, found {nxt.quarter}")
    return nxt
