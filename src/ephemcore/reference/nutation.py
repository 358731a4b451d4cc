from __future__ import annotations

"""
ephemcore.reference.nutation

Earth orientation quantities of date:

- IAU 2000B nutation (five largest luni-solar terms plus the fixed
  offsets that stand in for the planetary terms),
- mean and true obliquity, equation of the equinoxes,
- Greenwich apparent sidereal time (Earth rotation angle + IAU 2006
  precession polynomial + equation of the equinoxes).

Results are memoized per TT in the current EphemerisContext.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ephemcore.core.constants import ASEC2RAD, ASEC360, DEG2RAD
from ephemcore.core.context import TILT_TOLERANCE_DAYS, EphemerisContext, current_context
from ephemcore.core.time import AstroTime
from ephemcore.reference.astro_args import T_centuries, mean_obliquity_deg


# ------------------------------------------------------------
# IAU 2000B
# ------------------------------------------------------------

# (multipliers of elp, f, d, om), (ps, pst, pc), (ec, ect, es)
# in units of 0.1 microarcsecond; pst/ect are per Julian century.
_IAU2000B_TERMS: Tuple[Tuple[Tuple[int, int, int, int], Tuple[float, float, float], Tuple[float, float, float]], ...] = (
    ((0, 0, 0, 1), (-172064161.0, -174666.0, 33386.0), (92052331.0, 9086.0, 15377.0)),
    ((0, 2, -2, 2), (-13170906.0, -1675.0, -13696.0), (5730336.0, -3015.0, -4587.0)),
    ((0, 2, 0, 2), (-2276413.0, -234.0, 2796.0), (978459.0, -485.0, 1374.0)),
    ((0, 0, 0, 2), (2074554.0, 207.0, -698.0), (-897492.0, 470.0, -291.0)),
    ((1, 0, 0, 0), (1475877.0, -3633.0, 11817.0), (73871.0, -184.0, -1924.0)),
)


def iau2000b(T: float) -> Tuple[float, float]:
    """
    Nutation in longitude and obliquity (dpsi, deps) in arcseconds.

    T is Julian centuries of TT from J2000.0.
    """
    elp = ((1287104.79305 + T * 129596581.0481) % ASEC360) * ASEC2RAD
    f = ((335779.526232 + T * 1739527262.8478) % ASEC360) * ASEC2RAD
    d = ((1072260.70369 + T * 1602961601.2090) % ASEC360) * ASEC2RAD
    om = ((450160.398036 - T * 6962890.5431) % ASEC360) * ASEC2RAD

    dp = 0.0
    de = 0.0
    for (n_elp, n_f, n_d, n_om), (ps, pst, pc), (ec, ect, es) in _IAU2000B_TERMS:
        arg = n_elp * elp + n_f * f + n_d * d + n_om * om
        sarg = math.sin(arg)
        carg = math.cos(arg)
        dp += (ps + pst * T) * sarg + pc * carg
        de += (ec + ect * T) * carg + es * sarg

    dpsi = -0.000135 + dp * 1.0e-7
    deps = +0.000388 + de * 1.0e-7
    return dpsi, deps


@dataclass(frozen=True)
class EarthTilt:
    tt: float
    dpsi: float  # nutation in longitude [arcsec]
    deps: float  # nutation in obliquity [arcsec]
    ee: float    # equation of the equinoxes [seconds of time]
    mobl: float  # mean obliquity [deg]
    tobl: float  # true obliquity [deg]


def _compute_tilt(tt: float) -> EarthTilt:
    T = T_centuries(tt)
    dpsi, deps = iau2000b(T)
    mobl = mean_obliquity_deg(T)
    tobl = mobl + deps / 3600.0
    ee = dpsi * math.cos(mobl * DEG2RAD) / 15.0
    return EarthTilt(tt, dpsi, deps, ee, mobl, tobl)


def e_tilt(time: AstroTime, ctx: Optional[EphemerisContext] = None) -> EarthTilt:
    ctx = ctx or current_context()
    return ctx.memo("tilt", time.tt, lambda: _compute_tilt(time.tt), tolerance=TILT_TOLERANCE_DAYS)


def nutation(time: AstroTime, ctx: Optional[EphemerisContext] = None) -> Tuple[float, float]:
    """(dpsi, deps) in arcseconds for the given instant."""
    tilt = e_tilt(time, ctx)
    return tilt.dpsi, tilt.deps


def mean_obliquity(time: AstroTime) -> float:
    """Mean obliquity of the ecliptic of date [deg]."""
    return mean_obliquity_deg(T_centuries(time.tt))


def true_obliquity(time: AstroTime, ctx: Optional[EphemerisContext] = None) -> float:
    return e_tilt(time, ctx).tobl


def equation_of_equinoxes(time: AstroTime, ctx: Optional[EphemerisContext] = None) -> float:
    """Equation of the equinoxes in seconds of time."""
    return e_tilt(time, ctx).ee


# ------------------------------------------------------------
# Sidereal time
# ------------------------------------------------------------

def earth_rotation_angle(time: AstroTime) -> float:
    """Earth rotation angle in degrees, [0, 360)."""
    thet1 = 0.7790572732640 + 0.00273781191135448 * time.ut
    thet3 = time.ut % 1.0
    theta = 360.0 * ((thet1 + thet3) % 1.0)
    if theta < 0.0:
        theta += 360.0
    return theta


def _compute_sidereal(time: AstroTime, ctx: EphemerisContext) -> float:
    t = T_centuries(time.tt)
    eqeq = 15.0 * e_tilt(time, ctx).ee  # arcseconds
    theta = earth_rotation_angle(time)
    st = (eqeq + 0.014506
          + ((((-0.0000000368 * t - 0.000029956) * t - 0.00000044) * t + 1.3915817) * t + 4612.156534) * t)
    gst = ((st / 3600.0 + theta) % 360.0) / 15.0
    if gst < 0.0:
        gst += 24.0
    return gst


def sidereal_time(time: AstroTime, ctx: Optional[EphemerisContext] = None) -> float:
    """Greenwich apparent sidereal time in hours, [0, 24)."""
    ctx = ctx or current_context()
    return ctx.memo("gast", time.tt, lambda: _compute_sidereal(time, ctx), ut=time.ut)
