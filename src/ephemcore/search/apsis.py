from __future__ import annotations

"""
ephemcore.search.apsis

Perigee/apogee of the Moon and perihelion/aphelion of the planets.

Both searches step forward in coarse increments until the finite
difference slope of the distance changes sign, then refine the zero of
the slope. The sign of the slope at the start of the bracket tells which
apsis was crossed. Neptune's orbit is too close to circular and too
perturbed for the slope method, so its apsides are found by scanning the
distance directly.
"""

from dataclasses import dataclass
from typing import Callable

from ephemcore.core.constants import KM_PER_AU, MEAN_SYNODIC_MONTH
from ephemcore.core.errors import InternalError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import ORBITAL_PERIOD, ApsisKind, Body
from ephemcore.geometry.bodies import helio_distance
from ephemcore.reference.lunar import moon_position
from ephemcore.search.solver import search


@dataclass(frozen=True)
class Apsis:
    time: AstroTime
    kind: ApsisKind
    dist_au: float

    @property
    def dist_km(self) -> float:
        return self.dist_au * KM_PER_AU


def _opposite(kind: ApsisKind) -> ApsisKind:
    return ApsisKind.APOCENTER if kind is ApsisKind.PERICENTER else ApsisKind.PERICENTER


def _slope(distance: Callable[[AstroTime], float], time: AstroTime, dt: float) -> float:
    r1 = distance(time.add_days(-dt / 2.0))
    r2 = distance(time.add_days(+dt / 2.0))
    return (r2 - r1) / dt


def _classify_and_refine(
    distance: Callable[[AstroTime], float],
    dt: float,
    t1: AstroTime,
    t2: AstroTime,
    m1: float,
    m2: float,
) -> Apsis:
    if m1 < 0.0 or m2 > 0.0:
        kind = ApsisKind.PERICENTER
        tx = search(lambda t: _slope(distance, t, dt), t1, t2, init_f1=m1, init_f2=m2)
    elif m1 > 0.0 or m2 < 0.0:
        kind = ApsisKind.APOCENTER
        tx = search(lambda t: -_slope(distance, t, dt), t1, t2, init_f1=-m1, init_f2=-m2)
    else:
        raise InternalError("cannot classify apsis: both slopes are zero")
    if tx is None:
        raise InternalError(f"{kind.value} refinement failed between {t1} and {t2}")
    return Apsis(tx, kind, distance(tx))


def _moon_distance(t: AstroTime) -> float:
    return moon_position(t).dist


# ------------------------------------------------------------
# Moon
# ------------------------------------------------------------

def search_lunar_apsis(start: AstroTime) -> Apsis:
    """First lunar perigee or apogee after `start`."""
    dt = 0.001
    increment = 5.0
    t1 = start
    m1 = _slope(_moon_distance, t1, dt)
    n = 0
    while n * increment < 2.0 * MEAN_SYNODIC_MONTH:
        t2 = t1.add_days(increment)
        m2 = _slope(_moon_distance, t2, dt)
        if m1 * m2 <= 0.0:
            return _classify_and_refine(_moon_distance, dt, t1, t2, m1, m2)
        t1, m1 = t2, m2
        n += 1
    raise InternalError(f"no lunar apsis within two synodic months of {start}")


def next_lunar_apsis(apsis: Apsis) -> Apsis:
    nxt = search_lunar_apsis(apsis.time.add_days(11.0))
    if nxt.kind is not _opposite(apsis.kind):
        raise InternalError(f"lunar apsis did not alternate after {apsis.kind.value} at {apsis.time}")
    return nxt


# ------------------------------------------------------------
# Planets
# ------------------------------------------------------------

def _period(body: Body) -> float:
    if body not in ORBITAL_PERIOD:
        raise InvalidBodyError(f"no planetary apsis for {body.value}")
    return ORBITAL_PERIOD[body]


def _planet_extreme(body: Body, kind: ApsisKind, start: AstroTime, dayspan: float) -> Apsis:
    """Narrow [start, start + dayspan] around the distance extremum."""
    direction = 1.0 if kind is ApsisKind.APOCENTER else -1.0
    npoints = 10
    while True:
        interval = dayspan / (npoints - 1)
        if interval < 1.0 / 1440.0:
            apsis_time = start.add_days(interval / 2.0)
            return Apsis(apsis_time, kind, helio_distance(body, apsis_time))
        best_i = -1
        best_dist = 0.0
        for i in range(npoints):
            dist = direction * helio_distance(body, start.add_days(i * interval))
            if i == 0 or dist > best_dist:
                best_i = i
                best_dist = dist
        start = start.add_days((best_i - 1) * interval)
        dayspan = 2.0 * interval


def _brute_search_planet_apsis(body: Body, start: AstroTime) -> Apsis:
    npoints = 100
    period = _period(body)
    t1 = start.add_days(period * (-30.0 / 360.0))
    t2 = start.add_days(period * (+270.0 / 360.0))
    interval = (t2.ut - t1.ut) / (npoints - 1)

    t_min = t_max = t1
    min_dist = max_dist = helio_distance(body, t1)
    for i in range(1, npoints):
        time = t1.add_days(i * interval)
        dist = helio_distance(body, time)
        if dist > max_dist:
            max_dist, t_max = dist, time
        if dist < min_dist:
            min_dist, t_min = dist, time

    perihelion = _planet_extreme(body, ApsisKind.PERICENTER, t_min.add_days(-2.0 * interval), 4.0 * interval)
    aphelion = _planet_extreme(body, ApsisKind.APOCENTER, t_max.add_days(-2.0 * interval), 4.0 * interval)
    if perihelion.time.tt >= start.tt:
        if start.tt <= aphelion.time.tt < perihelion.time.tt:
            return aphelion
        return perihelion
    if aphelion.time.tt >= start.tt:
        return aphelion
    raise InternalError(f"failed to find {body.value} apsis after {start}")


def search_planet_apsis(body: Body, start: AstroTime) -> Apsis:
    """First perihelion or aphelion of `body` after `start`."""
    if body is Body.NEPTUNE:
        return _brute_search_planet_apsis(body, start)

    def distance(t: AstroTime) -> float:
        return helio_distance(body, t)

    dt = 0.001
    period = _period(body)
    increment = period / 6.0
    t1 = start
    m1 = _slope(distance, t1, dt)
    n = 0
    while n * increment < 2.0 * period:
        t2 = t1.add_days(increment)
        m2 = _slope(distance, t2, dt)
        if m1 * m2 <= 0.0:
            return _classify_and_refine(distance, dt, t1, t2, m1, m2)
        t1, m1 = t2, m2
        n += 1
    raise InternalError(f"no {body.value} apsis within two orbital periods of {start}")


def next_planet_apsis(body: Body, apsis: Apsis) -> Apsis:
    nxt = search_planet_apsis(body, apsis.time.add_days(0.25 * _period(body)))
    if nxt.kind is not _opposite(apsis.kind):
        raise InternalError(f"{body.value} apsis did not alternate after {apsis.kind.value} at {apsis.time}")
    return nxt
