from __future__ import annotations

"""
ephemcore.search.longitude

Longitude-driven events: planetary conjunctions and oppositions, the
Sun's passage through a given apparent longitude (equinoxes and
solstices), greatest elongations of Mercury and Venus, and the peak
brightness of Venus.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ephemcore.core.constants import SECONDS_PER_DAY
from ephemcore.core.errors import InternalError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Visibility, is_superior_planet
from ephemcore.geometry.bodies import (
    angle_from_sun,
    ecliptic_longitude,
    pair_longitude,
    sun_position,
    synodic_period,
)
from ephemcore.geometry.illumination import IlluminationInfo, illumination
from ephemcore.reference.astro_args import longitude_offset
from ephemcore.search.solver import search

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Relative longitude
# ------------------------------------------------------------

def search_relative_longitude(body: Body, target_rel_lon: float, start: AstroTime) -> AstroTime:
    """
    Next time after `start` when the heliocentric ecliptic longitudes of
    the Earth and `body` differ by `target_rel_lon` degrees. 0 is an
    inferior conjunction for Mercury/Venus and an opposition for the
    outer planets; 180 is a superior conjunction or a conjunction.
    """
    if body in (Body.EARTH, Body.SUN, Body.MOON, Body.EMB):
        raise InvalidBodyError(f"cannot search relative longitude for {body.value}")
    if not math.isfinite(target_rel_lon):
        raise ValueError("target relative longitude must be finite")

    direction = +1.0 if is_superior_planet(body) else -1.0

    def offset(t: AstroTime) -> float:
        plon = ecliptic_longitude(body, t)
        elon = ecliptic_longitude(Body.EARTH, t)
        return longitude_offset(direction * (elon - plon) - target_rel_lon)

    syn = synodic_period(body)
    time = start
    error_angle = offset(time)
    if error_angle > 0.0:
        # always search forward
        error_angle -= 360.0

    for _ in range(100):
        day_adjust = (-error_angle / 360.0) * syn
        time = time.add_days(day_adjust)
        if abs(day_adjust) * SECONDS_PER_DAY < 1.0:
            return time
        prev_angle = error_angle
        error_angle = offset(time)
        if abs(prev_angle) < 30.0 and prev_angle != error_angle:
            # scale the synodic period by the observed rate of convergence
            ratio = prev_angle / (prev_angle - error_angle)
            if 0.5 < ratio < 2.0:
                syn *= ratio

    raise InternalError(f"relative longitude search for {body.value} did not converge")


# ------------------------------------------------------------
# Sun longitude and seasons
# ------------------------------------------------------------

SUN_LONGITUDE_STEP_DAYS = 20.0


def search_sun_longitude(target_lon: float, start: AstroTime, limit_days: float) -> Optional[AstroTime]:
    """
    First time within `limit_days` of `start` when the Sun's apparent
    true-of-date longitude reaches `target_lon`. A negative limit searches
    backward. Returns None if the window holds no such time.

    The window is walked in slices of SUN_LONGITUDE_STEP_DAYS; only a slice
    whose end offsets change sign by less than 180 degrees brackets a root,
    the other sign change being the wrap opposite the target.
    """
    if not math.isfinite(target_lon) or not math.isfinite(limit_days):
        raise ValueError("target longitude and limit must be finite")

    def sun_offset(t: AstroTime) -> float:
        return longitude_offset(sun_position(t).elon - target_lon)

    step = math.copysign(SUN_LONGITUDE_STEP_DAYS, limit_days)
    t1 = start
    f1 = sun_offset(t1)
    if f1 == 0.0:
        return t1
    covered = 0.0
    while covered < abs(limit_days):
        span = min(SUN_LONGITUDE_STEP_DAYS, abs(limit_days) - covered)
        t2 = t1.add_days(math.copysign(span, step))
        f2 = sun_offset(t2)
        if (f1 > 0.0) != (f2 > 0.0) and abs(f2 - f1) < 180.0:
            return search(sun_offset, t1, t2, dt_tolerance_seconds=0.01, init_f1=f1, init_f2=f2)
        if f2 == 0.0:
            return t2
        t1, f1 = t2, f2
        covered += span
    return None


@dataclass(frozen=True)
class Seasons:
    mar_equinox: AstroTime
    jun_solstice: AstroTime
    sep_equinox: AstroTime
    dec_solstice: AstroTime


def seasons(year: int, model: Optional[str] = None) -> Seasons:
    """Equinoxes and solstices of a calendar year."""

    def find(target_lon: float, month: int, day: int) -> AstroTime:
        start = AstroTime.from_calendar(year, month, day, model=model)
        time = search_sun_longitude(target_lon, start, 20.0)
        if time is None:
            raise InternalError(f"cannot find season change near {start}")
        return time

    return Seasons(
        mar_equinox=find(0.0, 3, 10),
        jun_solstice=find(90.0, 6, 10),
        sep_equinox=find(180.0, 9, 10),
        dec_solstice=find(270.0, 12, 10),
    )


# ------------------------------------------------------------
# Elongation
# ------------------------------------------------------------

@dataclass(frozen=True)
class ElongationEvent:
    time: AstroTime
    visibility: Visibility
    elongation: float            # angle from the Sun [deg]
    ecliptic_separation: float   # |ecliptic longitude difference| [deg]


def elongation(body: Body, time: AstroTime) -> ElongationEvent:
    lon = pair_longitude(body, Body.SUN, time)
    if lon > 180.0:
        visibility = Visibility.MORNING
        lon = 360.0 - lon
    else:
        visibility = Visibility.EVENING
    return ElongationEvent(time, visibility, angle_from_sun(body, time), lon)


def _bracket_around_quadrature(
    body: Body,
    start: AstroTime,
    s1: float,
    s2: float,
) -> Tuple[AstroTime, AstroTime]:
    """
    Bracket the next interval where the relative longitude runs through
    [s1, s2] (evening side) or [-s2, -s1] (morning side).
    """
    plon = ecliptic_longitude(body, start)
    elon = ecliptic_longitude(Body.EARTH, start)
    rlon = longitude_offset(plon - elon)

    if -s1 <= rlon < s1:
        adjust_days = 0.0
        rlon_lo, rlon_hi = +s1, +s2
    elif rlon >= s2 or rlon < -s2:
        adjust_days = 0.0
        rlon_lo, rlon_hi = -s2, -s1
    elif rlon >= 0.0:
        adjust_days = -synodic_period(body) / 4.0
        rlon_lo, rlon_hi = +s1, +s2
    else:
        adjust_days = -synodic_period(body) / 4.0
        rlon_lo, rlon_hi = -s2, -s1

    t1 = search_relative_longitude(body, rlon_lo, start.add_days(adjust_days))
    t2 = search_relative_longitude(body, rlon_hi, t1)
    return t1, t2


def _search_extremum(
    body: Body,
    start: AstroTime,
    s1: float,
    s2: float,
    slope: Callable[[AstroTime], float],
    what: str,
) -> AstroTime:
    """Zero of `slope` (negative then positive) in the quadrature bracket; two tries."""
    for _ in range(2):
        t1, t2 = _bracket_around_quadrature(body, start, s1, s2)
        m1 = slope(t1)
        if m1 >= 0.0:
            raise InternalError(f"{what}: slope at bracket start is {m1}")
        m2 = slope(t2)
        if m2 <= 0.0:
            raise InternalError(f"{what}: slope at bracket end is {m2}")
        tx = search(slope, t1, t2, dt_tolerance_seconds=10.0, init_f1=m1, init_f2=m2)
        if tx is None:
            raise InternalError(f"{what}: search failed between {t1} and {t2}")
        if tx.tt >= start.tt:
            return tx
        logger.debug("%s at %s precedes %s; retrying", what, tx, start)
        start = t2.add_days(1.0)
    raise InternalError(f"{what}: no event found after two tries")


def search_max_elongation(body: Body, start: AstroTime) -> ElongationEvent:
    """Next greatest elongation of Mercury or Venus after `start`."""
    if body is Body.MERCURY:
        s1, s2 = 50.0, 85.0
    elif body is Body.VENUS:
        s1, s2 = 40.0, 50.0
    else:
        raise InvalidBodyError("maximum elongation is only defined for Mercury and Venus")

    dt = 0.01

    def neg_slope(t: AstroTime) -> float:
        e1 = angle_from_sun(body, t.add_days(-dt / 2.0))
        e2 = angle_from_sun(body, t.add_days(+dt / 2.0))
        return (e1 - e2) / dt

    tx = _search_extremum(body, start, s1, s2, neg_slope, f"{body.value} max elongation")
    return elongation(body, tx)


def search_peak_magnitude(body: Body, start: AstroTime) -> IlluminationInfo:
    """Next time Venus reaches its greatest brightness after `start`."""
    if body is not Body.VENUS:
        raise InvalidBodyError("peak magnitude search is only available for Venus")

    dt = 0.01

    def slope(t: AstroTime) -> float:
        # magnitude decreases as brightness increases
        y1 = illumination(body, t.add_days(-dt / 2.0)).mag
        y2 = illumination(body, t.add_days(+dt / 2.0)).mag
        return (y2 - y1) / dt

    tx = _search_extremum(body, start, 10.0, 30.0, slope, "Venus peak magnitude")
    return illumination(body, tx)
