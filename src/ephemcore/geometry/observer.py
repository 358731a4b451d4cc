from __future__ import annotations

"""
ephemcore.geometry.observer

Observer-relative geometry: the observer's position on the WGS84-like
oblate Earth, topocentric equatorial coordinates, horizontal coordinates
with optional refraction, hour angle, surface gravity and the standard
atmosphere.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from ephemcore.core.constants import (
    ANGVEL,
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING_SQUARED,
    EARTH_POLAR_RADIUS_KM,
    HOUR2RAD,
    KM_PER_AU,
    RAD2DEG,
    RAD2HOUR,
    SECONDS_PER_DAY,
)
from ephemcore.core.errors import InternalError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Frame, Observer, Refraction
from ephemcore.core.vectors import (
    EquatorialCoordinates,
    HorizontalCoordinates,
    StateVector,
    Vector,
    equator_from_vector,
)
from ephemcore.geometry.bodies import geo_vector
from ephemcore.reference.astro_args import longitude_offset
from ephemcore.reference.nutation import sidereal_time
from ephemcore.reference.rotation import (
    PrecessDirection,
    gyration,
    gyration_state,
    rotation_eqd_hor,
)


# ------------------------------------------------------------
# Observer on the geoid
# ------------------------------------------------------------

def _terra(observer: Observer, st: float) -> Tuple[Tuple[float, float, float], Tuple[float, float, float]]:
    """Observer position [AU] and velocity [AU/day] in EQD for sidereal time `st` [h]."""
    phi = observer.latitude * DEG2RAD
    sinphi = math.sin(phi)
    cosphi = math.cos(phi)
    c = 1.0 / math.sqrt(cosphi * cosphi + EARTH_FLATTENING_SQUARED * sinphi * sinphi)
    s = EARTH_FLATTENING_SQUARED * c
    ht_km = observer.height / 1000.0
    ach = EARTH_EQUATORIAL_RADIUS_KM * c + ht_km
    ash = EARTH_EQUATORIAL_RADIUS_KM * s + ht_km
    stlocl = (15.0 * st + observer.longitude) * DEG2RAD
    sinst = math.sin(stlocl)
    cosst = math.cos(stlocl)
    pos = (
        ach * cosphi * cosst / KM_PER_AU,
        ach * cosphi * sinst / KM_PER_AU,
        ash * sinphi / KM_PER_AU,
    )
    vel = (
        -ANGVEL * ach * cosphi * sinst * SECONDS_PER_DAY / KM_PER_AU,
        ANGVEL * ach * cosphi * cosst * SECONDS_PER_DAY / KM_PER_AU,
        0.0,
    )
    return pos, vel


def _inverse_terra(x_au: float, y_au: float, z_au: float, st: float) -> Observer:
    x = x_au * KM_PER_AU
    y = y_au * KM_PER_AU
    z = z_au * KM_PER_AU
    p = math.hypot(x, y)
    if p < 1.0e-6:
        # directly above a pole
        lon_deg = 0.0
        lat_deg = 90.0 if z > 0.0 else -90.0
        height_km = abs(z) - EARTH_POLAR_RADIUS_KM
        return Observer(lat_deg, lon_deg, 1000.0 * height_km)

    lon_deg = longitude_offset(RAD2DEG * math.atan2(y, x) - 15.0 * st)
    f2 = EARTH_FLATTENING_SQUARED
    factor = (f2 - 1.0) * EARTH_EQUATORIAL_RADIUS_KM
    lat = math.atan2(z, p)
    for _ in range(10):
        coslat = math.cos(lat)
        sinlat = math.sin(lat)
        cos2 = coslat * coslat
        sin2 = sinlat * sinlat
        radicand = cos2 + f2 * sin2
        denom = math.sqrt(radicand)
        w = (factor * sinlat * coslat) / denom - z * coslat + p * sinlat
        if abs(w) < 1.0e-8:
            break
        d = (factor * ((cos2 - sin2) / denom - sin2 * cos2 * (f2 - 1.0) / (factor * radicand))
             + z * sinlat + p * coslat)
        lat -= w / d
    else:
        raise InternalError("geodetic latitude iteration did not converge")

    adjust = EARTH_EQUATORIAL_RADIUS_KM / denom
    if abs(sinlat) > abs(coslat):
        height_km = z / sinlat - f2 * adjust
    else:
        height_km = p / coslat - adjust
    return Observer(RAD2DEG * lat, lon_deg, 1000.0 * height_km)


def observer_vector(time: AstroTime, observer: Observer, ofdate: bool = False) -> Vector:
    """Geocentric observer position [AU]; EQD when `ofdate`, otherwise EQJ."""
    pos, _ = _terra(observer, sidereal_time(time))
    vec = Vector(pos[0], pos[1], pos[2], time, Frame.EQD)
    return vec if ofdate else gyration(vec, PrecessDirection.INTO_2000)


def observer_state(time: AstroTime, observer: Observer, ofdate: bool = False) -> StateVector:
    """Geocentric observer position [AU] and velocity [AU/day]."""
    pos, vel = _terra(observer, sidereal_time(time))
    state = StateVector(pos[0], pos[1], pos[2], vel[0], vel[1], vel[2], time, Frame.EQD)
    return state if ofdate else gyration_state(state, PrecessDirection.INTO_2000)


def vector_observer(vec: Vector) -> Observer:
    """Geographic location of a geocentric EQJ or EQD vector (inverse of observer_vector)."""
    if vec.frame is Frame.EQJ:
        vec = gyration(vec, PrecessDirection.FROM_2000)
    elif vec.frame is not Frame.EQD:
        raise ValueError(f"expected an EQJ or EQD vector, got {vec.frame.value}")
    return _inverse_terra(vec.x, vec.y, vec.z, sidereal_time(vec.time))


def observer_gravity(latitude: float, height: float) -> float:
    """Effective gravitational acceleration [m/s^2] at a geodetic latitude [deg] and height [m]."""
    s = math.sin(latitude * DEG2RAD)
    s2 = s * s
    g0 = 9.7803253359 * (1.0 + 0.00193185265241 * s2) / math.sqrt(1.0 - 0.00669437999013 * s2)
    return g0 * (1.0 - (3.15704e-07 - 2.10269e-09 * s2) * height + 7.37452e-14 * height * height)


# ------------------------------------------------------------
# Atmosphere
# ------------------------------------------------------------

@dataclass(frozen=True)
class AtmosphereInfo:
    pressure: float     # [Pa]
    temperature: float  # [K]
    density: float      # relative to sea level


def atmosphere(elevation: float) -> AtmosphereInfo:
    """U.S. Standard Atmosphere (1976) for elevations -500 m .. 100 km."""
    P0 = 101325.0   # sea level pressure [Pa]
    T0 = 288.15     # sea level temperature [K]
    T1 = 216.65     # temperature between 20 km and 32 km [K]

    if not math.isfinite(elevation) or elevation < -500.0 or elevation > 100000.0:
        raise ValueError(f"invalid elevation: {elevation}")

    if elevation <= 11000.0:
        temperature = T0 - 0.0065 * elevation
        pressure = P0 * math.pow(T0 / temperature, -5.25577)
    elif elevation <= 20000.0:
        temperature = T1
        pressure = 22632.0 * math.exp(-0.00015768832 * (elevation - 11000.0))
    else:
        temperature = T1 + 0.001 * (elevation - 20000.0)
        pressure = 5474.87 * math.pow(T1 / temperature, 34.16319)

    density = (pressure / temperature) / (P0 / T0)
    return AtmosphereInfo(pressure, temperature, density)


# ------------------------------------------------------------
# Refraction
# ------------------------------------------------------------

def refraction(mode: Refraction, altitude: float) -> float:
    """
    Angle [deg] by which refraction raises an object seen at geometric
    `altitude` [deg]. Zero for Refraction.NONE or altitudes outside
    [-90, 90].
    """
    if altitude < -90.0 or altitude > 90.0:
        return 0.0
    if mode is Refraction.NONE:
        return 0.0

    # Saemundsson (Meeus 16.4), clamped below -1 deg
    hd = max(altitude, -1.0)
    refr = (1.02 / math.tan((hd + 10.3 / (hd + 5.11)) * DEG2RAD)) / 60.0
    if mode is Refraction.NORMAL and altitude < -1.0:
        # taper to zero at the nadir
        refr *= (altitude + 90.0) / 89.0
    return refr


def inverse_refraction(mode: Refraction, bent_altitude: float) -> float:
    """
    Correction [deg] to add to an observed (refracted) altitude to get the
    geometric altitude. The result is zero or negative.
    """
    if bent_altitude < -90.0 or bent_altitude > 90.0:
        raise ValueError(f"altitude {bent_altitude} outside [-90, 90]")
    altitude = bent_altitude - refraction(mode, bent_altitude)
    for _ in range(100):
        diff = (altitude + refraction(mode, altitude)) - bent_altitude
        if abs(diff) < 1.0e-14:
            return altitude - bent_altitude
        altitude -= diff
    raise InternalError(f"inverse refraction did not converge for altitude {bent_altitude}")


# ------------------------------------------------------------
# Topocentric coordinates
# ------------------------------------------------------------

def equator(
    body: Body,
    time: AstroTime,
    observer: Observer,
    ofdate: bool = True,
    aberration: bool = True,
) -> EquatorialCoordinates:
    """
    Topocentric equatorial coordinates of `body`: EQD (true equator of
    date) when `ofdate`, otherwise EQJ.
    """
    gc_observer = observer_vector(time, observer, ofdate=False)
    gc = geo_vector(body, time, aberration)
    j2000 = gc - gc_observer
    if not ofdate:
        return equator_from_vector(j2000)
    return equator_from_vector(gyration(j2000, PrecessDirection.FROM_2000))


def horizon(
    time: AstroTime,
    observer: Observer,
    ra: float,
    dec: float,
    mode: Refraction = Refraction.NONE,
) -> HorizontalCoordinates:
    """
    Azimuth/altitude of a direction given in true equator of date
    coordinates (`ra` [h], `dec` [deg]). Refraction changes only the
    altitude; the returned ra/dec follow the refracted direction.
    """
    rot = rotation_eqd_hor(time, observer)
    un, uw, uz = rot.rot

    decrad = dec * DEG2RAD
    rarad = ra * HOUR2RAD
    cosdc = math.cos(decrad)
    p = (cosdc * math.cos(rarad), cosdc * math.sin(rarad), math.sin(decrad))

    pz = p[0] * uz[0] + p[1] * uz[1] + p[2] * uz[2]
    pn = p[0] * un[0] + p[1] * un[1] + p[2] * un[2]
    pw = p[0] * uw[0] + p[1] * uw[1] + p[2] * uw[2]

    proj = math.hypot(pn, pw)
    if proj > 0.0:
        az = -RAD2DEG * math.atan2(pw, pn)
        if az < 0.0:
            az += 360.0
        elif az >= 360.0:
            az -= 360.0
    else:
        az = 0.0

    zd = RAD2DEG * math.atan2(proj, pz)
    out_ra, out_dec = ra, dec

    if mode is not Refraction.NONE:
        zd0 = zd
        refr = refraction(mode, 90.0 - zd)
        zd -= refr
        if refr > 0.0 and zd > 3.0e-4:
            sinzd = math.sin(zd * DEG2RAD)
            coszd = math.cos(zd * DEG2RAD)
            sinzd0 = math.sin(zd0 * DEG2RAD)
            coszd0 = math.cos(zd0 * DEG2RAD)
            pr = [((p[j] - coszd0 * uz[j]) / sinzd0) * sinzd + uz[j] * coszd for j in range(3)]
            proj = math.hypot(pr[0], pr[1])
            if proj > 0.0:
                out_ra = RAD2HOUR * math.atan2(pr[1], pr[0])
                if out_ra < 0.0:
                    out_ra += 24.0
                elif out_ra >= 24.0:
                    out_ra -= 24.0
            else:
                out_ra = 0.0
            out_dec = RAD2DEG * math.atan2(pr[2], proj)

    return HorizontalCoordinates(az, 90.0 - zd, out_ra, out_dec)


def hour_angle(body: Body, time: AstroTime, observer: Observer) -> float:
    """Local hour angle [h] of the body, in [0, 24)."""
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth does not have an hour angle")
    gast = sidereal_time(time)
    ofdate = equator(body, time, observer, ofdate=True, aberration=True)
    ha = math.fmod(observer.longitude / 15.0 + gast - ofdate.ra, 24.0)
    if ha < 0.0:
        ha += 24.0
    return ha
