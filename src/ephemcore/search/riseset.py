from __future__ import annotations

"""
ephemcore.search.riseset

Rise, set, altitude (twilight) and hour-angle searches for an observer.

The altitude searches step through windows of RISE_SET_DT days and use
find_ascent() to locate an interval where the signed altitude difference
goes from negative to non-negative; a set is an ascent of the negated
altitude. The window length must stay well under half a day so that a
rise and the following set never fall into the same window.
"""

import math
from dataclasses import dataclass
from typing import Optional

from ephemcore.core.constants import (
    DEG2RAD,
    MOON_EQUATORIAL_RADIUS_AU,
    RAD2DEG,
    REFRACTION_NEAR_HORIZON,
    SOLAR_DAYS_PER_SIDEREAL_DAY,
    SUN_RADIUS_AU,
)
from ephemcore.core.errors import InternalError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Direction, Observer, Refraction
from ephemcore.core.vectors import HorizontalCoordinates
from ephemcore.geometry.observer import atmosphere, equator, horizon
from ephemcore.reference.nutation import sidereal_time
from ephemcore.search.solver import find_ascent, search

RISE_SET_DT = 0.42

# (d ra/dt, d dec/dt) bounds [deg/day] used to bound the altitude slope
_MOTION_BOUNDS = {
    Body.MOON: (+4.5, +8.2),
    Body.SUN: (+0.8, +0.5),
    Body.MERCURY: (-1.6, +1.0),
    Body.VENUS: (-0.8, +0.6),
    Body.MARS: (-0.5, +0.4),
    Body.JUPITER: (-0.2, +0.2),
    Body.SATURN: (-0.2, +0.2),
    Body.URANUS: (-0.2, +0.2),
    Body.NEPTUNE: (-0.2, +0.2),
}

_HOUR_ANGLE_ITERATIONS = 20


def max_altitude_slope(body: Body, latitude: float) -> float:
    """Upper bound [deg/day] on how fast the body's altitude can change at `latitude`."""
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"latitude {latitude} outside [-90, 90]")
    try:
        deriv_ra, deriv_dec = _MOTION_BOUNDS[body]
    except KeyError:
        raise InvalidBodyError(f"{body.value} is not allowed in altitude searches") from None
    latrad = DEG2RAD * latitude
    return (abs((360.0 / SOLAR_DAYS_PER_SIDEREAL_DAY - deriv_ra) * math.cos(latrad))
            + abs(deriv_dec * math.sin(latrad)))


def _body_radius_au(body: Body) -> float:
    if body is Body.SUN:
        return SUN_RADIUS_AU
    if body is Body.MOON:
        return MOON_EQUATORIAL_RADIUS_AU
    return 0.0


def _search_altitude(
    body: Body,
    observer: Observer,
    direction: Direction,
    start: AstroTime,
    limit_days: float,
    body_radius_au: float,
    target_altitude: float,
) -> Optional[AstroTime]:
    if not math.isfinite(limit_days):
        raise ValueError("limit_days must be finite")
    if not -90.0 <= target_altitude <= 90.0:
        raise ValueError(f"target altitude {target_altitude} outside [-90, 90]")
    sign = float(Direction(direction).value)

    def altdiff(time: AstroTime) -> float:
        ofdate = equator(body, time, observer, ofdate=True, aberration=True)
        hor = horizon(time, observer, ofdate.ra, ofdate.dec, Refraction.NONE)
        altitude = hor.altitude + RAD2DEG * math.asin(body_radius_au / ofdate.dist)
        return sign * (altitude - target_altitude)

    max_deriv_alt = max_altitude_slope(body, observer.latitude)
    t1 = t2 = start
    a1 = a2 = altdiff(start)
    while True:
        if limit_days < 0.0:
            t1 = t2.add_days(-RISE_SET_DT)
            a1 = altdiff(t1)
        else:
            t2 = t1.add_days(+RISE_SET_DT)
            a2 = altdiff(t2)

        ascent = find_ascent(0, altdiff, max_deriv_alt, t1, t2, a1, a2)
        if ascent is not None:
            time = search(
                altdiff, ascent.tx, ascent.ty,
                dt_tolerance_seconds=0.1, init_f1=ascent.ax, init_f2=ascent.ay,
            )
            if time is None:
                raise InternalError(f"altitude search failed after finding ascent between {t1} and {t2}")
            if limit_days < 0.0:
                if time.ut < start.ut + limit_days:
                    return None
            elif time.ut > start.ut + limit_days:
                return None
            return time

        if limit_days < 0.0:
            if t1.ut < start.ut + limit_days:
                return None
            t2, a2 = t1, a1
        else:
            if t2.ut > start.ut + limit_days:
                return None
            t1, a1 = t2, a2


def search_rise_set(
    body: Body,
    observer: Observer,
    direction: Direction,
    start: AstroTime,
    limit_days: float,
) -> Optional[AstroTime]:
    """
    Next rise (Direction.RISE) or set (Direction.SET) of the body's upper
    limb, with standard horizon refraction scaled by the air density at
    the observer's height. A negative `limit_days` searches backward.
    """
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth does not rise or set")
    target = -REFRACTION_NEAR_HORIZON * atmosphere(observer.height).density
    return _search_altitude(body, observer, direction, start, limit_days, _body_radius_au(body), target)


def search_altitude(
    body: Body,
    observer: Observer,
    direction: Direction,
    start: AstroTime,
    limit_days: float,
    altitude: float,
) -> Optional[AstroTime]:
    """
    Next time the body's center ascends (Direction.RISE) or descends
    (Direction.SET) through the unrefracted `altitude`. With the Sun and
    altitude -6, -12 or -18 this gives civil, nautical or astronomical
    twilight.
    """
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth has no altitude")
    return _search_altitude(body, observer, direction, start, limit_days, 0.0, altitude)


# ------------------------------------------------------------
# Hour angle
# ------------------------------------------------------------

@dataclass(frozen=True)
class HourAngleEvent:
    time: AstroTime
    hor: HorizontalCoordinates


def search_hour_angle(
    body: Body,
    observer: Observer,
    hour_angle: float,
    start: AstroTime,
    direction: int = +1,
) -> HourAngleEvent:
    """
    Next (direction > 0) or previous (direction < 0) time the body reaches
    local `hour_angle` [h]; 0 is the upper culmination, 12 the lower.
    """
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth does not have an hour angle")
    if not math.isfinite(hour_angle) or not 0.0 <= hour_angle < 24.0:
        raise ValueError(f"invalid hour angle {hour_angle}")
    if direction == 0:
        raise ValueError("direction must be positive or negative")

    time = start
    for it in range(_HOUR_ANGLE_ITERATIONS):
        gast = sidereal_time(time)
        ofdate = equator(body, time, observer, ofdate=True, aberration=True)
        delta_hours = math.fmod((hour_angle + ofdate.ra - observer.longitude / 15.0) - gast, 24.0)
        if it == 0:
            # the first step fixes the search direction
            if direction > 0 and delta_hours < 0.0:
                delta_hours += 24.0
            elif direction < 0 and delta_hours > 0.0:
                delta_hours -= 24.0
        elif delta_hours < -12.0:
            delta_hours += 24.0
        elif delta_hours > +12.0:
            delta_hours -= 24.0

        if abs(delta_hours) * 3600.0 < 0.1:
            hor = horizon(time, observer, ofdate.ra, ofdate.dec, Refraction.NORMAL)
            return HourAngleEvent(time, hor)

        time = time.add_days((delta_hours / 24.0) * SOLAR_DAYS_PER_SIDEREAL_DAY)

    raise InternalError(f"hour angle search for {body.value} did not converge after {start}")
