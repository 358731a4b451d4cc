from __future__ import annotations

"""
ephemcore.geometry.illumination

Phase angle, illuminated fraction and apparent visual magnitude of the
Sun, Moon and planets as seen from the Earth's center.

Planet magnitudes follow the empirical polynomials in the phase angle of
the Astronomical Almanac (x = phase/100); Saturn adds the ring-tilt term.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ephemcore.core.constants import DEG2RAD, MOON_MEAN_DISTANCE_AU, RAD2DEG, SUN_MAG_1AU
from ephemcore.core.errors import InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body
from ephemcore.core.vectors import Vector, angle_between, zero_vector
from ephemcore.geometry.bodies import ecliptic, helio_vector
from ephemcore.reference.lunar import geo_moon
from ephemcore.reference.vsop import vsop_vector


@dataclass(frozen=True)
class IlluminationInfo:
    time: AstroTime
    mag: float                # apparent visual magnitude
    phase_angle: float        # Sun-body-Earth angle [deg]
    phase_fraction: float     # illuminated fraction of the disc, 0..1
    helio_dist: float         # [AU]
    geo_dist: float           # [AU]
    gc: Vector                # geocentric body, EQJ
    hc: Vector                # heliocentric body, EQJ
    ring_tilt: Optional[float] = None  # Saturn only [deg]


# (c0, c1, c2, c3) for mag = c0 + x(c1 + x(c2 + x c3)), x = phase/100
_MAG_COEFFS: Dict[Body, Tuple[float, float, float, float]] = {
    Body.MERCURY: (-0.60, +4.98, -4.88, +3.02),
    Body.MARS: (-1.52, +1.60, 0.0, 0.0),
    Body.JUPITER: (-9.40, +0.50, 0.0, 0.0),
    Body.URANUS: (-7.19, +0.25, 0.0, 0.0),
    Body.NEPTUNE: (-6.87, 0.0, 0.0, 0.0),
}

_VENUS_NEAR = (-4.47, +1.03, +0.57, +0.13)
_VENUS_CRESCENT = (+0.98, -1.02, 0.0, 0.0)


def visual_magnitude(body: Body, phase: float, helio_dist: float, geo_dist: float) -> float:
    if body is Body.VENUS:
        c0, c1, c2, c3 = _VENUS_NEAR if phase < 163.6 else _VENUS_CRESCENT
    elif body in _MAG_COEFFS:
        c0, c1, c2, c3 = _MAG_COEFFS[body]
    else:
        raise InvalidBodyError(f"no magnitude formula for {body.value}")
    x = phase / 100.0
    mag = c0 + x * (c1 + x * (c2 + x * c3))
    return mag + 5.0 * math.log10(helio_dist * geo_dist)


def moon_magnitude(phase: float, helio_dist: float, geo_dist: float) -> float:
    rad = phase * DEG2RAD
    rad2 = rad * rad
    mag = -12.717 + 1.49 * abs(rad) + 0.0431 * rad2 * rad2
    geo_au = geo_dist / MOON_MEAN_DISTANCE_AU
    return mag + 5.0 * math.log10(helio_dist * geo_au)


def saturn_magnitude(
    phase: float,
    helio_dist: float,
    geo_dist: float,
    gc: Vector,
    time: AstroTime,
) -> Tuple[float, float]:
    """
    Saturn's magnitude including its rings. Returns (mag, ring_tilt_deg).

    The ring plane has a fixed inclination of 28.06 deg to the ecliptic and
    an ascending node that drifts slowly with time.
    """
    eclip = ecliptic(gc)
    ir = DEG2RAD * 28.06
    nr = DEG2RAD * (169.51 + 3.82e-5 * time.tt)

    lat = DEG2RAD * eclip.elat
    lon = DEG2RAD * eclip.elon
    tilt = math.asin(math.sin(lat) * math.cos(ir) - math.cos(lat) * math.sin(ir) * math.sin(lon - nr))
    sin_tilt = math.sin(abs(tilt))

    mag = -9.0 + 0.044 * phase
    mag += sin_tilt * (-2.6 + 1.2 * sin_tilt)
    mag += 5.0 * math.log10(helio_dist * geo_dist)
    return mag, RAD2DEG * tilt


def illumination(body: Body, time: AstroTime) -> IlluminationInfo:
    """Brightness and phase of `body` as seen from the center of the Earth."""
    if body is Body.EARTH:
        raise InvalidBodyError("the Earth cannot be observed from its own center")

    earth = vsop_vector(Body.EARTH, time)
    if body is Body.SUN:
        gc = -earth
        hc = zero_vector(time)
        phase = 0.0
    else:
        if body is Body.MOON:
            gc = geo_moon(time)
            hc = earth + gc
        else:
            hc = helio_vector(body, time)
            gc = hc - earth
        phase = angle_between(gc, hc)

    geo_dist = gc.length()
    helio_dist = hc.length()
    ring_tilt = None

    if body is Body.SUN:
        mag = SUN_MAG_1AU + 5.0 * math.log10(geo_dist)
    elif body is Body.MOON:
        mag = moon_magnitude(phase, helio_dist, geo_dist)
    elif body is Body.SATURN:
        mag, ring_tilt = saturn_magnitude(phase, helio_dist, geo_dist, gc, time)
    else:
        mag = visual_magnitude(body, phase, helio_dist, geo_dist)

    phase_fraction = (1.0 + math.cos(DEG2RAD * phase)) / 2.0
    return IlluminationInfo(time, mag, phase, phase_fraction, helio_dist, geo_dist, gc, hc, ring_tilt)
