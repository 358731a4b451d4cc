from __future__ import annotations

"""
ephemcore.geometry.bodies

Heliocentric and geocentric positions of every supported body, in EQJ.

Planets come from the VSOP evaluator, the Moon from the lunar series.
The Sun is the origin of the heliocentric frame, so its geocentric
position is the negated heliocentric Earth vector.
"""

import math

from ephemcore.core.constants import C_AUDAY, EARTH_MOON_MASS_RATIO, MEAN_SYNODIC_MONTH, EARTH_ORBITAL_PERIOD
from ephemcore.core.errors import InternalError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import ORBITAL_PERIOD, Body, Frame
from ephemcore.core.vectors import (
    EclipticCoordinates,
    StateVector,
    Vector,
    angle_between,
    retag,
    spherical_from_vector,
    zero_vector,
)
from ephemcore.reference.astro_args import normalize_longitude
from ephemcore.reference.lunar import geo_emb_state, geo_moon, geo_moon_state
from ephemcore.reference.rotation import (
    PrecessDirection,
    gyration,
    rotate_vector,
    rotation_eqd_ect,
    rotation_eqj_ecl,
)
from ephemcore.reference.vsop import VSOP_BODIES, vsop_distance, vsop_state, vsop_vector

_LIGHT_TIME_ITERATIONS = 10


def _add_state(a: StateVector, b: StateVector) -> StateVector:
    return StateVector(a.x + b.x, a.y + b.y, a.z + b.z, a.vx + b.vx, a.vy + b.vy, a.vz + b.vz, a.time, a.frame)


# ------------------------------------------------------------
# Heliocentric
# ------------------------------------------------------------

def helio_vector(body: Body, time: AstroTime) -> Vector:
    """Position of `body` relative to the Sun's center [AU, EQJ]."""
    if body is Body.SUN:
        return zero_vector(time)
    if body in VSOP_BODIES:
        return vsop_vector(body, time)
    if body is Body.MOON:
        return vsop_vector(Body.EARTH, time) + geo_moon(time)
    if body is Body.EMB:
        return vsop_vector(Body.EARTH, time) + geo_moon(time).scale(1.0 / (1.0 + EARTH_MOON_MASS_RATIO))
    raise InvalidBodyError(f"heliocentric position not available for {body.value}")


def helio_distance(body: Body, time: AstroTime) -> float:
    """Distance between the body and the Sun [AU]."""
    if body in VSOP_BODIES:
        return vsop_distance(body, time)
    return helio_vector(body, time).length()


def helio_state(body: Body, time: AstroTime) -> StateVector:
    """Heliocentric position [AU] and velocity [AU/day] in EQJ."""
    if body is Body.SUN:
        return StateVector(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, time, Frame.EQJ)
    if body in VSOP_BODIES:
        return vsop_state(body, time)
    if body is Body.MOON:
        return _add_state(vsop_state(Body.EARTH, time), geo_moon_state(time))
    if body is Body.EMB:
        return _add_state(vsop_state(Body.EARTH, time), geo_emb_state(time))
    raise InvalidBodyError(f"heliocentric state not available for {body.value}")


# ------------------------------------------------------------
# Geocentric
# ------------------------------------------------------------

def geo_vector(body: Body, time: AstroTime, aberration: bool = True) -> Vector:
    """
    Apparent geocentric position of `body` [AU, EQJ], corrected for light
    travel time. With `aberration` the Earth stays at the observation
    time while the body is backdated, which folds in the aberration due
    to the Earth's motion; without it both are backdated together.
    """
    if body is Body.EARTH:
        return zero_vector(time)
    if body is Body.MOON:
        return geo_moon(time)

    earth_now = vsop_vector(Body.EARTH, time)
    ltime = time
    for _ in range(_LIGHT_TIME_ITERATIONS):
        observer = earth_now if aberration else vsop_vector(Body.EARTH, ltime)
        pos = retag(helio_vector(body, ltime), Frame.EQJ, time) - retag(observer, Frame.EQJ, time)
        ltime2 = AstroTime.from_tt(time.tt - pos.length() / C_AUDAY, time.model)
        if abs(ltime2.tt - ltime.tt) < 1.0e-9:
            return pos
        ltime = ltime2
    raise InternalError(f"light-travel time solver did not converge for {body.value} at {time}")


def ecliptic(vec: Vector) -> EclipticCoordinates:
    """EQJ vector -> mean ecliptic and equinox of J2000."""
    ecl = rotate_vector(rotation_eqj_ecl(), vec)
    sphere = spherical_from_vector(ecl)
    return EclipticCoordinates(ecl, sphere.lat, sphere.lon)


def ecliptic_longitude(body: Body, time: AstroTime) -> float:
    """Heliocentric ecliptic longitude [deg] in the J2000 ecliptic."""
    if body is Body.SUN:
        raise InvalidBodyError("cannot calculate heliocentric longitude of the Sun")
    return ecliptic(helio_vector(body, time)).elon


def pair_longitude(body1: Body, body2: Body, time: AstroTime) -> float:
    """
    Geocentric ecliptic longitude of body1 minus that of body2, in [0, 360).
    """
    if body1 is Body.EARTH or body2 is Body.EARTH:
        raise InvalidBodyError("the Earth does not have a longitude as seen from itself")
    eclip1 = ecliptic(geo_vector(body1, time, aberration=False))
    eclip2 = ecliptic(geo_vector(body2, time, aberration=False))
    return normalize_longitude(eclip1.elon - eclip2.elon)


def angle_from_sun(body: Body, time: AstroTime) -> float:
    """Angular separation [deg] between the body and the Sun, as seen from the Earth."""
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth does not have an angle as seen from itself")
    sv = geo_vector(Body.SUN, time, aberration=True)
    bv = geo_vector(body, time, aberration=True)
    return angle_between(sv, bv)


def sun_position(time: AstroTime) -> EclipticCoordinates:
    """
    Geocentric Sun in the true ecliptic and equinox of date (ECT),
    corrected for the light travel time from the Sun.
    """
    adjusted = time.add_days(-1.0 / C_AUDAY)
    earth2000 = vsop_vector(Body.EARTH, adjusted)
    sun2000 = -earth2000
    sun_ofdate = gyration(sun2000, PrecessDirection.FROM_2000)
    ect = rotate_vector(rotation_eqd_ect(adjusted), sun_ofdate)
    sphere = spherical_from_vector(ect)
    return EclipticCoordinates(ect, sphere.lat, sphere.lon)


def synodic_period(body: Body) -> float:
    """Mean time [days] between successive conjunctions of the body with the Sun."""
    if body is Body.SUN:
        raise InvalidBodyError("the Sun has no synodic period")
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth does not have a synodic period as seen from itself")
    if body is Body.MOON:
        return MEAN_SYNODIC_MONTH
    if body not in ORBITAL_PERIOD:
        raise InvalidBodyError(f"no orbital period for {body.value}")
    tp = ORBITAL_PERIOD[body]
    return math.fabs(EARTH_ORBITAL_PERIOD / (EARTH_ORBITAL_PERIOD / tp - 1.0))
