from __future__ import annotations

"""
ephemcore.reference.lunar

Geocentric Moon from the ELP2000-derived closed-form series (Brown's
theory as reduced by Eckert et al.), and the Moon's optical + physical
libration (Meeus ch. 53).

The series works in the mean ecliptic and equinox of date. geo_moon()
turns the result into an EQJ vector: ecliptic -> equator of date at the
mean obliquity, then precession into J2000.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from ephemcore.core.constants import (
    ARC,
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_AU,
    EARTH_MOON_MASS_RATIO,
    KM_PER_AU,
    MOON_MEAN_RADIUS_KM,
    PI2,
    RAD2DEG,
)
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Frame
from ephemcore.core.vectors import Spherical, StateVector, Vector
from ephemcore.reference import astro_args as aa
from ephemcore.reference.lunar_terms import (
    LATITUDE_N_TERMS,
    PLANETARY_LON_TERMS,
    RHO_TERMS,
    SIGMA_TERMS,
    SOLAR_TERMS,
    TAU_TERMS,
    LibrationTerm,
)
from ephemcore.reference.nutation import mean_obliquity
from ephemcore.reference.rotation import PrecessDirection, ecliptic_to_equatorial, precession


@dataclass(frozen=True)
class MoonPosition:
    """Geocentric ecliptic coordinates of date: lon in [0, 2π), lat [rad], dist [AU]."""
    lon: float
    lat: float
    dist: float


@dataclass(frozen=True)
class LibrationInfo:
    elat: float     # sub-Earth libration latitude [deg]
    elon: float     # sub-Earth libration longitude [deg]
    mlat: float     # Moon's geocentric ecliptic latitude [deg]
    mlon: float     # Moon's geocentric ecliptic longitude [deg]
    dist_km: float  # Earth-Moon center distance
    diam_deg: float  # apparent angular diameter


def _sine(phi: float) -> float:
    """sin of an angle given in turns."""
    return math.sin(PI2 * phi)


# ------------------------------------------------------------
# Series evaluation
# ------------------------------------------------------------

_JMAX = 6  # column offset: multiple j lives at index j + _JMAX


def _multiples(arg: float, jmax: int, fac: float) -> Tuple[List[float], List[float]]:
    """fac^|j| cos(j arg), fac^|j| sin(j arg) for j in [-jmax, jmax], zero elsewhere."""
    co = [0.0] * (2 * _JMAX + 1)
    si = [0.0] * (2 * _JMAX + 1)
    c1 = math.cos(arg) * fac
    s1 = math.sin(arg) * fac
    co[_JMAX] = 1.0
    co[_JMAX + 1] = c1
    si[_JMAX + 1] = s1
    for j in range(2, jmax + 1):
        c, s = co[_JMAX + j - 1], si[_JMAX + j - 1]
        co[_JMAX + j] = c * c1 - s * s1
        si[_JMAX + j] = s * c1 + c * s1
    for j in range(1, jmax + 1):
        co[_JMAX - j] = co[_JMAX + j]
        si[_JMAX - j] = -si[_JMAX + j]
    return co, si


def moon_position_tt(tt: float) -> MoonPosition:
    T = tt / 36525.0
    T2 = T * T

    s1 = _sine(0.19833 + 0.05611 * T)
    s2 = _sine(0.27869 + 0.04508 * T)
    s3 = _sine(0.16827 - 0.36903 * T)
    s4 = _sine(0.34734 - 5.37261 * T)
    s5 = _sine(0.10498 - 5.37899 * T)
    s6 = _sine(0.42681 - 0.41855 * T)
    s7 = _sine(0.14943 - 5.37511 * T)

    # long-period perturbations [arcsec]
    dl0 = 0.84 * s1 + 0.31 * s2 + 14.27 * s3 + 7.26 * s4 + 0.28 * s5 + 0.24 * s6
    dl = 2.94 * s1 + 0.31 * s2 + 14.27 * s3 + 9.34 * s4 + 1.12 * s5 + 0.83 * s6
    dls = -6.40 * s1 - 1.89 * s6
    df = 0.21 * s1 + 0.31 * s2 + 14.27 * s3 - 88.70 * s4 - 15.30 * s5 + 0.24 * s6 - 1.86 * s7
    dd = dl0 - dls
    dgam = (-3332e-9 * _sine(0.59734 - 5.37261 * T)
            - 539e-9 * _sine(0.35498 - 5.37899 * T)
            - 64e-9 * _sine(0.39943 - 5.37511 * T))

    # mean elements [rad]
    l0 = PI2 * aa.frac01(0.60643382 + 1336.85522467 * T - 0.00000313 * T2) + dl0 / ARC
    l = PI2 * aa.frac01(0.37489701 + 1325.55240982 * T + 0.00002565 * T2) + dl / ARC
    ls = PI2 * aa.frac01(0.99312619 + 99.99735956 * T - 0.00000044 * T2) + dls / ARC
    f = PI2 * aa.frac01(0.25909118 + 1342.22782980 * T - 0.00000892 * T2) + df / ARC
    d = PI2 * aa.frac01(0.82736186 + 1236.85308708 * T - 0.00000397 * T2) + dd / ARC

    tables = (
        _multiples(l, 4, 1.000002208),
        _multiples(ls, 3, 0.997504612 - 0.002495388 * T),
        _multiples(f, 4, 1.000002708 + 139.978 * dgam),
        _multiples(d, 6, 1.0),
    )

    def term(p: int, q: int, r: int, s: int) -> Tuple[float, float]:
        x, y = 1.0, 0.0
        for (co, si), n in zip(tables, (p, q, r, s)):
            if n:
                c, sn = co[_JMAX + n], si[_JMAX + n]
                x, y = x * c - y * sn, y * c + x * sn
        return x, y

    dlam = 0.0
    ds = 0.0
    gam1c = 0.0
    sinpi = 3422.7
    for cl, cs, cg, cp, p, q, r, s in SOLAR_TERMS:
        x, y = term(p, q, r, s)
        dlam += cl * y
        ds += cs * y
        gam1c += cg * x
        sinpi += cp * x

    n_lat = sum(amp * term(p, q, r, s)[1] for amp, p, q, r, s in LATITUDE_N_TERMS)
    dlam += sum(amp * _sine(c0 + c1 * T) for amp, c0, c1 in PLANETARY_LON_TERMS)

    arg_s = f + ds / ARC
    lat_seconds = ((1.000002708 + 139.978 * dgam) * (18518.511 + 1.189 + gam1c) * math.sin(arg_s)
                   - 6.24 * math.sin(3.0 * arg_s)
                   + n_lat)

    return MoonPosition(
        lon=PI2 * aa.frac01((l0 + dlam / ARC) / PI2),
        lat=lat_seconds * (math.pi / (180.0 * 3600.0)),
        dist=(ARC * EARTH_EQUATORIAL_RADIUS_AU) / (0.999953253 * sinpi),
    )


def moon_position(time: AstroTime) -> MoonPosition:
    return moon_position_tt(time.tt)


def ecliptic_geo_moon(time: AstroTime) -> Spherical:
    """Moon's geocentric ecliptic lat/lon [deg] and distance [AU], mean equinox of date."""
    m = moon_position(time)
    return Spherical(RAD2DEG * m.lat, RAD2DEG * m.lon, m.dist)


# ------------------------------------------------------------
# Vectors
# ------------------------------------------------------------

def geo_moon(time: AstroTime) -> Vector:
    """Geocentric Moon in EQJ [AU]."""
    m = moon_position(time)
    dist_cos_lat = m.dist * math.cos(m.lat)
    x, y, z = ecliptic_to_equatorial(
        dist_cos_lat * math.cos(m.lon),
        dist_cos_lat * math.sin(m.lon),
        m.dist * math.sin(m.lat),
        mean_obliquity(time),
    )
    return precession(Vector(x, y, z, time, Frame.EQM), PrecessDirection.INTO_2000)


def geo_moon_state(time: AstroTime, dt: float = 1.0e-5) -> StateVector:
    """Geocentric Moon position [AU] and velocity [AU/day] in EQJ."""
    r1 = geo_moon(time.add_days(-dt))
    r2 = geo_moon(time.add_days(+dt))
    return StateVector(
        (r1.x + r2.x) / 2.0,
        (r1.y + r2.y) / 2.0,
        (r1.z + r2.z) / 2.0,
        (r2.x - r1.x) / (2.0 * dt),
        (r2.y - r1.y) / (2.0 * dt),
        (r2.z - r1.z) / (2.0 * dt),
        time,
        Frame.EQJ,
    )


def geo_emb_state(time: AstroTime) -> StateVector:
    """Geocentric Earth/Moon barycenter state in EQJ."""
    s = geo_moon_state(time)
    d = 1.0 + EARTH_MOON_MASS_RATIO
    return StateVector(s.x / d, s.y / d, s.z / d, s.vx / d, s.vy / d, s.vz / d, time, Frame.EQJ)


# ------------------------------------------------------------
# Libration
# ------------------------------------------------------------

_MOON_EQUATOR_INCLINATION = 1.543 * DEG2RAD


def _libration_sum(terms: Tuple[LibrationTerm, ...], mdash: float, m: float, f: float, d: float) -> float:
    total = 0.0
    for amp, trig, n_mdash, n_m, n_f, n_d in terms:
        arg = n_mdash * mdash + n_m * m + n_f * f + n_d * d
        total += amp * (math.sin(arg) if trig == "sin" else math.cos(arg))
    return total


def libration(time: AstroTime) -> LibrationInfo:
    """Optical + physical libration of the Moon (Meeus ch. 53)."""
    t = aa.T_centuries(time.tt)
    moon = moon_position(time)
    mlon = moon.lon
    mlat = moon.lat
    dist_km = moon.dist * KM_PER_AU

    fa = aa.fundamental_args(t)
    f, omega, m, mdash, d = fa.F, fa.Omega, fa.M, fa.Mp, fa.D
    e = aa.eccentricity_factor(t)
    inc = _MOON_EQUATOR_INCLINATION

    # optical
    w = mlon - omega
    a = math.atan2(
        math.sin(w) * math.cos(mlat) * math.cos(inc) - math.sin(mlat) * math.sin(inc),
        math.cos(w) * math.cos(mlat),
    )
    ldash = aa.longitude_offset(RAD2DEG * (a - f))
    bdash = math.asin(-math.sin(w) * math.cos(mlat) * math.sin(inc) - math.sin(mlat) * math.cos(inc))

    # physical
    k1 = DEG2RAD * (119.75 + 131.849 * t)
    k2 = DEG2RAD * (72.56 + 20.186 * t)
    rho = _libration_sum(RHO_TERMS, mdash, m, f, d)
    sigma = _libration_sum(SIGMA_TERMS, mdash, m, f, d)
    tau = (0.02520 * e * math.sin(m)
           + 0.00396 * math.sin(k1)
           + 0.00196 * math.sin(omega)
           + 0.00023 * math.sin(k2)
           + _libration_sum(TAU_TERMS, mdash, m, f, d))

    ldash2 = -tau + (rho * math.cos(a) + sigma * math.sin(a)) * math.tan(bdash)
    bdash2 = sigma * math.cos(a) - rho * math.sin(a)

    diam_deg = 2.0 * RAD2DEG * math.atan(
        MOON_MEAN_RADIUS_KM / math.sqrt(dist_km * dist_km - MOON_MEAN_RADIUS_KM * MOON_MEAN_RADIUS_KM)
    )
    return LibrationInfo(
        elat=RAD2DEG * bdash + bdash2,
        elon=ldash + ldash2,
        mlat=RAD2DEG * mlat,
        mlon=RAD2DEG * mlon,
        dist_km=dist_km,
        diam_deg=diam_deg,
    )
