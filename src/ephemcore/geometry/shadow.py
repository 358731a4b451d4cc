from __future__ import annotations

"""
ephemcore.geometry.shadow

Shadow-cone geometry for eclipses and transits.

calc_shadow() projects a target onto the axis of a body's shadow (the
line from the Sun through the shadow-casting body) and measures, at that
point, the distance r of the target from the axis together with the
umbral (k) and penumbral (p) cone radii. All three are in km. k turns
negative beyond the umbral apex, which is what separates total from
annular solar eclipses.

The peak_* helpers locate the instant of minimum r by root-finding the
finite-difference slope of r around a search center.
"""

import math
from dataclasses import dataclass
from typing import Callable

from ephemcore.core.constants import (
    EARTH_ECLIPSE_RADIUS_KM,
    KM_PER_AU,
    MOON_MEAN_RADIUS_KM,
    SUN_RADIUS_KM,
)
from ephemcore.core.errors import InternalError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Observer
from ephemcore.core.vectors import Vector
from ephemcore.geometry.bodies import geo_vector
from ephemcore.geometry.observer import observer_vector
from ephemcore.reference.lunar import geo_moon
from ephemcore.search.solver import search

_SLOPE_DT = 1.0 / 86400.0
_MINUTES_PER_DAY = 24.0 * 60.0


@dataclass(frozen=True)
class ShadowInfo:
    time: AstroTime
    u: float        # projection of target on the axis, in units of |dir|
    r: float        # target distance from the axis [km]
    k: float        # umbra radius at the target [km]
    p: float        # penumbra radius at the target [km]
    target: Vector
    dir: Vector


ShadowFunc = Callable[[AstroTime], ShadowInfo]


def calc_shadow(body_radius_km: float, time: AstroTime, target: Vector, dir: Vector) -> ShadowInfo:
    u = dir.dot(target) / dir.dot(dir)
    dx = u * dir.x - target.x
    dy = u * dir.y - target.y
    dz = u * dir.z - target.z
    r = KM_PER_AU * math.sqrt(dx * dx + dy * dy + dz * dz)
    k = SUN_RADIUS_KM - (1.0 + u) * (SUN_RADIUS_KM - body_radius_km)
    p = -SUN_RADIUS_KM + (1.0 + u) * (SUN_RADIUS_KM + body_radius_km)
    return ShadowInfo(time, u, r, k, p, target, dir)


# ------------------------------------------------------------
# Shadows of specific bodies
# ------------------------------------------------------------

def earth_shadow(time: AstroTime) -> ShadowInfo:
    """The Earth's shadow as it falls on the Moon."""
    s = geo_vector(Body.SUN, time, aberration=True)
    m = geo_moon(time)
    return calc_shadow(EARTH_ECLIPSE_RADIUS_KM, time, m, -s)


def moon_shadow(time: AstroTime) -> ShadowInfo:
    """The Moon's shadow relative to the Earth's center."""
    s = geo_vector(Body.SUN, time, aberration=True)
    m = geo_moon(time)
    # target: lunacentric Earth; dir: heliocentric Moon
    return calc_shadow(MOON_MEAN_RADIUS_KM, time, -m, m - s)


def local_moon_shadow(time: AstroTime, observer: Observer) -> ShadowInfo:
    """The Moon's shadow relative to an observer on the Earth's surface."""
    o = observer_vector(time, observer, ofdate=False)
    s = geo_vector(Body.SUN, time, aberration=True)
    m = geo_moon(time)
    return calc_shadow(MOON_MEAN_RADIUS_KM, time, o - m, m - s)


def planet_shadow(body: Body, planet_radius_km: float, time: AstroTime) -> ShadowInfo:
    """The shadow of an inferior planet relative to the Earth's center."""
    g = geo_vector(body, time, aberration=True)
    e = geo_vector(Body.SUN, time, aberration=True)
    return calc_shadow(planet_radius_km, time, -g, g - e)


# ------------------------------------------------------------
# Peaks and durations
# ------------------------------------------------------------

def shadow_distance_slope(shadow_func: ShadowFunc, time: AstroTime) -> float:
    """d r / dt [km/day] by central difference."""
    shadow1 = shadow_func(time.add_days(-_SLOPE_DT))
    shadow2 = shadow_func(time.add_days(+_SLOPE_DT))
    return (shadow2.r - shadow1.r) / _SLOPE_DT


def _peak_shadow(shadow_func: ShadowFunc, center: AstroTime, window: float, what: str) -> ShadowInfo:
    t1 = center.add_days(-window)
    t2 = center.add_days(+window)
    tx = search(lambda t: shadow_distance_slope(shadow_func, t), t1, t2)
    if tx is None:
        raise InternalError(f"failed to find peak {what} shadow near {center}")
    return shadow_func(tx)


def peak_earth_shadow(center: AstroTime) -> ShadowInfo:
    return _peak_shadow(earth_shadow, center, 0.03, "Earth")


def peak_moon_shadow(center: AstroTime) -> ShadowInfo:
    return _peak_shadow(moon_shadow, center, 0.03, "Moon")


def peak_local_moon_shadow(center: AstroTime, observer: Observer) -> ShadowInfo:
    return _peak_shadow(lambda t: local_moon_shadow(t, observer), center, 0.2, "local Moon")


def peak_planet_shadow(body: Body, planet_radius_km: float, center: AstroTime) -> ShadowInfo:
    """Closest approach of the planet's shadow axis to the Earth's center, within a day of `center`."""
    return _peak_shadow(lambda t: planet_shadow(body, planet_radius_km, t), center, 1.0, body.value)


def shadow_semi_duration_minutes(center: AstroTime, radius_limit: float, window_minutes: float) -> float:
    """
    Half the time [min] the Moon's center spends within `radius_limit` km of
    the Earth's shadow axis around `center`. The crossings must fall within
    `window_minutes` on either side.
    """
    window = window_minutes / _MINUTES_PER_DAY
    before = center.add_days(-window)
    after = center.add_days(+window)
    t1 = search(lambda t: -(earth_shadow(t).r - radius_limit), before, center)
    t2 = search(lambda t: +(earth_shadow(t).r - radius_limit), center, after)
    if t1 is None or t2 is None:
        raise InternalError(f"failed to find shadow semi-duration around {center}")
    return (t2.ut - t1.ut) * (_MINUTES_PER_DAY / 2.0)


def planet_shadow_boundary(time: AstroTime, body: Body, planet_radius_km: float, direction: float) -> float:
    shadow = planet_shadow(body, planet_radius_km, time)
    return direction * (shadow.r - shadow.p)


# ------------------------------------------------------------
# Disc overlap
# ------------------------------------------------------------

def obscuration(a: float, b: float, c: float) -> float:
    """
    Fraction of the area of a disc of radius `a` covered by a disc of
    radius `b` whose center lies at distance `c`. Units are arbitrary but
    shared by all three arguments.
    """
    if a <= 0.0:
        raise ValueError("radius of first disc must be positive")
    if b <= 0.0:
        raise ValueError("radius of second disc must be positive")
    if c < 0.0:
        raise ValueError("distance between discs must not be negative")

    if c >= a + b:
        return 0.0

    if c == 0.0:
        # concentric: one disc is inside the other
        return 1.0 if a <= b else (b * b) / (a * a)

    x = (a * a - b * b + c * c) / (2.0 * c)
    radicand = a * a - x * x
    if radicand <= 0.0:
        # circumferences touch or do not cross; one disc is inside the other
        return 1.0 if a <= b else (b * b) / (a * a)

    # two lens-shaped segments, each a sector minus a triangle
    y = math.sqrt(radicand)
    lens1 = a * a * math.acos(x / a) - x * y
    lens2 = b * b * math.acos((c - x) / b) - (c - x) * y
    return (lens1 + lens2) / (math.pi * a * a)
