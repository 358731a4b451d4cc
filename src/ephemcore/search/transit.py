from __future__ import annotations

"""
ephemcore.search.transit

Transits of Mercury and Venus across the Sun's disc as seen from the
Earth's center.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from ephemcore.core.constants import MERCURY_MEAN_RADIUS_KM, VENUS_RADIUS_KM
from ephemcore.core.errors import InternalError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body
from ephemcore.geometry.bodies import angle_from_sun
from ephemcore.geometry.shadow import peak_planet_shadow, planet_shadow_boundary
from ephemcore.search.longitude import search_relative_longitude
from ephemcore.search.solver import search

logger = logging.getLogger(__name__)

# inferior conjunctions further than this from the Sun [deg] cannot transit
_THRESHOLD_ANGLE = 0.4
# enough for the gap between Venus transit pairs (~121.5 years)
_MAX_CONJUNCTIONS = 200


@dataclass(frozen=True)
class TransitInfo:
    start: AstroTime
    peak: AstroTime
    finish: AstroTime
    separation: float  # planet-Sun center distance at peak [arcmin]


def _planet_radius_km(body: Body) -> float:
    if body is Body.MERCURY:
        return MERCURY_MEAN_RADIUS_KM
    if body is Body.VENUS:
        return VENUS_RADIUS_KM
    raise InvalidBodyError(f"transits are only possible for Mercury and Venus, not {body.value}")


def _boundary(body: Body, radius_km: float, t1: AstroTime, t2: AstroTime, direction: float) -> AstroTime:
    tx = search(lambda t: planet_shadow_boundary(t, body, radius_km, direction), t1, t2)
    if tx is None:
        raise InternalError(f"{body.value} transit boundary search failed between {t1} and {t2}")
    return tx


def search_transit(body: Body, start: AstroTime) -> TransitInfo:
    """First transit of Mercury or Venus after `start`."""
    radius_km = _planet_radius_km(body)
    dt_days = 1.0

    search_time = start
    for _ in range(_MAX_CONJUNCTIONS):
        conj = search_relative_longitude(body, 0.0, search_time)
        separation = angle_from_sun(body, conj)
        if separation < _THRESHOLD_ANGLE:
            shadow = peak_planet_shadow(body, radius_km, conj)
            if shadow.r < shadow.p:
                begin = _boundary(body, radius_km, shadow.time.add_days(-dt_days), shadow.time, -1.0)
                finish = _boundary(body, radius_km, shadow.time, shadow.time.add_days(+dt_days), +1.0)
                min_separation = 60.0 * angle_from_sun(body, shadow.time)
                return TransitInfo(begin, shadow.time, finish, min_separation)
            logger.debug("%s conjunction %s: shadow misses the Earth", body.value, conj)
        search_time = conj.add_days(10.0)
    raise InternalError(f"no {body.value} transit within {_MAX_CONJUNCTIONS} conjunctions of {start}")


def next_transit(body: Body, prev_peak: AstroTime) -> TransitInfo:
    return search_transit(body, prev_peak.add_days(100.0))


def transits(body: Body, start: AstroTime) -> Iterator[TransitInfo]:
    """Unbounded chronological stream of transits of `body` after `start`."""
    info = search_transit(body, start)
    while True:
        yield info
        info = next_transit(body, info.peak)
