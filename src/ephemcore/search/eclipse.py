from __future__ import annotations

"""
ephemcore.search.eclipse

Lunar eclipses, solar eclipses seen anywhere on the Earth, and solar
eclipses seen by a given observer.

Every search walks through consecutive full (lunar) or new (solar) moons.
A full/new moon whose ecliptic latitude exceeds PRUNE_LATITUDE cannot be
eclipsed and is skipped before any shadow geometry is evaluated.

Each kind of eclipse has its own record type. The peak of a lunar or
global solar eclipse is an AstroTime; the peak of a local solar eclipse
is an EclipseEvent that also carries the Sun's altitude.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from ephemcore.core.constants import (
    DEG2RAD,
    EARTH_EQUATORIAL_RADIUS_KM,
    EARTH_FLATTENING,
    EARTH_FLATTENING_SQUARED,
    EARTH_MEAN_RADIUS_KM,
    KM_PER_AU,
    MOON_MEAN_RADIUS_KM,
    MOON_POLAR_RADIUS_AU,
    MOON_POLAR_RADIUS_KM,
    RAD2DEG,
    SUN_RADIUS_AU,
)
from ephemcore.core.errors import InternalError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, EclipseKind, Frame, Observer, Refraction
from ephemcore.core.vectors import Vector, angle_between
from ephemcore.geometry.observer import equator, horizon
from ephemcore.geometry.shadow import (
    ShadowInfo,
    calc_shadow,
    local_moon_shadow,
    obscuration,
    peak_earth_shadow,
    peak_local_moon_shadow,
    peak_moon_shadow,
    shadow_semi_duration_minutes,
)
from ephemcore.reference.astro_args import longitude_offset
from ephemcore.reference.lunar import ecliptic_geo_moon
from ephemcore.reference.nutation import sidereal_time
from ephemcore.reference.rotation import inverse_rotation, rotate_vector, rotation_eqj_eqd
from ephemcore.search.moon import search_moon_phase
from ephemcore.search.solver import search

logger = logging.getLogger(__name__)

# Moon's ecliptic latitude [deg] beyond which no eclipse is possible
PRUNE_LATITUDE = 1.8

# Umbra radius [km] above which the central eclipse counts as total.
# Calibrated against Espenak's eclipse catalogue rather than derived.
TOTAL_UMBRA_BIAS_KM = 0.014

_MAX_MOONS = 12
_MAX_LOCAL_MOONS = 1200
_MINUTES_PER_DAY = 24.0 * 60.0


# ============================================================
# Records
# ============================================================

@dataclass(frozen=True)
class EclipseEvent:
    """An instant of a local solar eclipse and the refracted altitude [deg] of the Sun's center."""
    time: AstroTime
    altitude: float


@dataclass(frozen=True)
class LunarEclipseInfo:
    kind: EclipseKind
    obscuration: float     # fraction of the Moon's disc in the umbra at peak
    peak: AstroTime
    sd_penum: float        # semi-durations [min], 0 if the phase is not reached
    sd_partial: float
    sd_total: float

    @property
    def peak_time(self) -> AstroTime:
        return self.peak

    def _offset(self, minutes: float) -> AstroTime:
        return self.peak.add_days(minutes / _MINUTES_PER_DAY)

    @property
    def penumbral_begin(self) -> AstroTime:
        return self._offset(-self.sd_penum)

    @property
    def penumbral_end(self) -> AstroTime:
        return self._offset(+self.sd_penum)

    @property
    def partial_begin(self) -> Optional[AstroTime]:
        return self._offset(-self.sd_partial) if self.sd_partial > 0.0 else None

    @property
    def partial_end(self) -> Optional[AstroTime]:
        return self._offset(+self.sd_partial) if self.sd_partial > 0.0 else None

    @property
    def total_begin(self) -> Optional[AstroTime]:
        return self._offset(-self.sd_total) if self.sd_total > 0.0 else None

    @property
    def total_end(self) -> Optional[AstroTime]:
        return self._offset(+self.sd_total) if self.sd_total > 0.0 else None


@dataclass(frozen=True)
class GlobalSolarEclipseInfo:
    kind: EclipseKind
    obscuration: Optional[float]  # at the peak location; None for partial eclipses
    peak: AstroTime
    distance: float               # shadow axis to Earth's center [km]
    latitude: Optional[float]     # geodetic peak location; None for partial eclipses
    longitude: Optional[float]

    @property
    def peak_time(self) -> AstroTime:
        return self.peak


@dataclass(frozen=True)
class LocalSolarEclipseInfo:
    kind: EclipseKind
    obscuration: float
    partial_begin: EclipseEvent
    total_begin: Optional[EclipseEvent]
    peak: EclipseEvent
    total_end: Optional[EclipseEvent]
    partial_end: EclipseEvent

    @property
    def peak_time(self) -> AstroTime:
        return self.peak.time


EclipseInfo = Union[LunarEclipseInfo, GlobalSolarEclipseInfo, LocalSolarEclipseInfo]


# ============================================================
# Helpers
# ============================================================

def _moon_latitude(time: AstroTime) -> float:
    return ecliptic_geo_moon(time).lat


def eclipse_kind_from_umbra(k: float) -> EclipseKind:
    return EclipseKind.TOTAL if k > TOTAL_UMBRA_BIAS_KM else EclipseKind.ANNULAR


def solar_eclipse_obscuration(hm: Vector, lo: Vector) -> float:
    """
    Fraction of the Sun's disc covered by the Moon for an observer at
    lunacentric `lo`, with `hm` the heliocentric Moon. Never returns 1;
    totality is classified separately.
    """
    ho = hm + lo
    sun_radius = math.asin(SUN_RADIUS_AU / ho.length())
    moon_radius = math.asin(MOON_POLAR_RADIUS_AU / lo.length())
    separation = angle_between(lo, ho)
    return min(0.9999, obscuration(sun_radius, moon_radius, separation * DEG2RAD))


def _sun_altitude(time: AstroTime, observer: Observer) -> float:
    equ = equator(Body.SUN, time, observer, ofdate=True, aberration=True)
    return horizon(time, observer, equ.ra, equ.dec, Refraction.NORMAL).altitude


def _event(observer: Observer, time: AstroTime) -> EclipseEvent:
    return EclipseEvent(time, _sun_altitude(time, observer))


def _new_or_full_moon(target_lon: float, start: AstroTime) -> AstroTime:
    time = search_moon_phase(target_lon, start, 40.0)
    if time is None:
        what = "new" if target_lon == 0.0 else "full"
        raise InternalError(f"cannot find {what} moon after {start}")
    return time


# ============================================================
# Lunar eclipses
# ============================================================

def search_lunar_eclipse(start: AstroTime) -> LunarEclipseInfo:
    """First lunar eclipse (penumbral or deeper) whose peak follows `start`."""
    fm_time = start
    for _ in range(_MAX_MOONS):
        full_moon = _new_or_full_moon(180.0, fm_time)
        eclip_lat = _moon_latitude(full_moon)
        if abs(eclip_lat) < PRUNE_LATITUDE:
            shadow = peak_earth_shadow(full_moon)
            if shadow.r < shadow.p + MOON_MEAN_RADIUS_KM:
                return _lunar_eclipse(shadow)
        else:
            logger.debug("full moon %s pruned: latitude %.3f", full_moon, eclip_lat)
        fm_time = full_moon.add_days(10.0)
    raise InternalError(f"no lunar eclipse within {_MAX_MOONS} full moons of {start}")


def _lunar_eclipse(shadow: ShadowInfo) -> LunarEclipseInfo:
    kind = EclipseKind.PENUMBRAL
    obsc = 0.0
    sd_partial = 0.0
    sd_total = 0.0
    sd_penum = shadow_semi_duration_minutes(shadow.time, shadow.p + MOON_MEAN_RADIUS_KM, 200.0)

    if shadow.r < shadow.k + MOON_MEAN_RADIUS_KM:
        kind = EclipseKind.PARTIAL
        sd_partial = shadow_semi_duration_minutes(shadow.time, shadow.k + MOON_MEAN_RADIUS_KM, sd_penum)
        if shadow.r + MOON_MEAN_RADIUS_KM < shadow.k:
            kind = EclipseKind.TOTAL
            obsc = 1.0
            sd_total = shadow_semi_duration_minutes(shadow.time, shadow.k - MOON_MEAN_RADIUS_KM, sd_partial)
        else:
            obsc = obscuration(MOON_MEAN_RADIUS_KM, shadow.k, shadow.r)

    return LunarEclipseInfo(kind, obsc, shadow.time, sd_penum, sd_partial, sd_total)


def next_lunar_eclipse(prev_peak: AstroTime) -> LunarEclipseInfo:
    return search_lunar_eclipse(prev_peak.add_days(10.0))


# ============================================================
# Global solar eclipses
# ============================================================

def geoid_intersect(shadow: ShadowInfo) -> GlobalSolarEclipseInfo:
    """
    Intersect the Moon's shadow axis with the Earth's oblate geoid.

    The z axis is stretched by 1/flattening so the geoid becomes a sphere of
    equatorial radius, the line/sphere quadratic is solved there and the
    near-side root is mapped back (Montenbruck & Pfleger, p. 184).
    """
    time = shadow.time
    rot = rotation_eqj_eqd(time)
    v = rotate_vector(rot, shadow.dir)      # shadow axis, EQD
    e = rotate_vector(rot, shadow.target)   # lunacentric Earth, EQD

    vx, vy, vz = v.x * KM_PER_AU, v.y * KM_PER_AU, v.z * KM_PER_AU / EARTH_FLATTENING
    ex, ey, ez = e.x * KM_PER_AU, e.y * KM_PER_AU, e.z * KM_PER_AU / EARTH_FLATTENING

    R = EARTH_EQUATORIAL_RADIUS_KM
    A = vx * vx + vy * vy + vz * vz
    B = -2.0 * (vx * ex + vy * ey + vz * ez)
    C = (ex * ex + ey * ey + ez * ez) - R * R
    radicand = B * B - 4.0 * A * C

    if radicand <= 0.0:
        # the axis misses the Earth: partial everywhere
        return GlobalSolarEclipseInfo(EclipseKind.PARTIAL, None, time, shadow.r, None, None)

    u = (-B - math.sqrt(radicand)) / (2.0 * A)
    px = u * vx - ex
    py = u * vy - ey
    pz = (u * vz - ez) * EARTH_FLATTENING

    proj = math.hypot(px, py) * EARTH_FLATTENING_SQUARED
    if proj == 0.0:
        latitude = 90.0 if pz > 0.0 else -90.0
    else:
        latitude = RAD2DEG * math.atan(pz / proj)
    longitude = longitude_offset(RAD2DEG * math.atan2(py, px) - 15.0 * sidereal_time(time))

    # lunacentric observer at the ground point, back in EQJ
    o = rotate_vector(
        inverse_rotation(rot),
        Vector(px / KM_PER_AU, py / KM_PER_AU, pz / KM_PER_AU, time, Frame.EQD),
    )
    o = o + shadow.target

    surface = calc_shadow(MOON_POLAR_RADIUS_KM, time, o, shadow.dir)
    if not 0.0 <= surface.r <= 1.0e-9:
        raise InternalError(f"unexpected shadow distance {surface.r} at the geoid intersection")

    kind = eclipse_kind_from_umbra(surface.k)
    obsc = 1.0 if kind is EclipseKind.TOTAL else solar_eclipse_obscuration(shadow.dir, o)
    return GlobalSolarEclipseInfo(kind, obsc, time, shadow.r, latitude, longitude)


def search_global_solar_eclipse(start: AstroTime) -> GlobalSolarEclipseInfo:
    """First solar eclipse visible anywhere on the Earth after `start`."""
    nm_time = start
    for _ in range(_MAX_MOONS):
        new_moon = _new_or_full_moon(0.0, nm_time)
        eclip_lat = _moon_latitude(new_moon)
        if abs(eclip_lat) < PRUNE_LATITUDE:
            shadow = peak_moon_shadow(new_moon)
            if shadow.r < shadow.p + EARTH_MEAN_RADIUS_KM:
                return geoid_intersect(shadow)
        else:
            logger.debug("new moon %s pruned: latitude %.3f", new_moon, eclip_lat)
        nm_time = new_moon.add_days(10.0)
    raise InternalError(f"no solar eclipse within {_MAX_MOONS} new moons of {start}")


def next_global_solar_eclipse(prev_peak: AstroTime) -> GlobalSolarEclipseInfo:
    return search_global_solar_eclipse(prev_peak.add_days(10.0))


# ============================================================
# Local solar eclipses
# ============================================================

def _local_partial_distance(shadow: ShadowInfo) -> float:
    return shadow.p - shadow.r


def _local_total_distance(shadow: ShadowInfo) -> float:
    # k is negative for annular eclipses
    return abs(shadow.k) - shadow.r


def _local_transition(observer: Observer, direction: float, func, t1: AstroTime, t2: AstroTime) -> EclipseEvent:
    def evaluate(time: AstroTime) -> float:
        return direction * func(local_moon_shadow(time, observer))

    time = search(evaluate, t1, t2)
    if time is None:
        raise InternalError(f"local eclipse transition search failed between {t1} and {t2}")
    return _event(observer, time)


def _local_eclipse(shadow: ShadowInfo, observer: Observer) -> LocalSolarEclipseInfo:
    partial_window = 0.2
    total_window = 0.01

    peak = _event(observer, shadow.time)
    partial_begin = _local_transition(
        observer, +1.0, _local_partial_distance, shadow.time.add_days(-partial_window), shadow.time)
    partial_end = _local_transition(
        observer, -1.0, _local_partial_distance, shadow.time, shadow.time.add_days(+partial_window))

    total_begin: Optional[EclipseEvent] = None
    total_end: Optional[EclipseEvent] = None
    if shadow.r < abs(shadow.k):
        total_begin = _local_transition(
            observer, +1.0, _local_total_distance, shadow.time.add_days(-total_window), shadow.time)
        total_end = _local_transition(
            observer, -1.0, _local_total_distance, shadow.time, shadow.time.add_days(+total_window))
        kind = eclipse_kind_from_umbra(shadow.k)
    else:
        kind = EclipseKind.PARTIAL

    obsc = 1.0 if kind is EclipseKind.TOTAL else solar_eclipse_obscuration(shadow.dir, shadow.target)
    return LocalSolarEclipseInfo(kind, obsc, partial_begin, total_begin, peak, total_end, partial_end)


def search_local_solar_eclipse(start: AstroTime, observer: Observer) -> LocalSolarEclipseInfo:
    """
    First solar eclipse after `start` seen from `observer`. Eclipses during
    which the Sun is below the horizon at both the beginning and the end of
    the partial phase are skipped.
    """
    nm_time = start
    for _ in range(_MAX_LOCAL_MOONS):
        new_moon = _new_or_full_moon(0.0, nm_time)
        if abs(_moon_latitude(new_moon)) < PRUNE_LATITUDE:
            shadow = peak_local_moon_shadow(new_moon, observer)
            if shadow.r < shadow.p:
                eclipse = _local_eclipse(shadow, observer)
                if eclipse.partial_begin.altitude > 0.0 or eclipse.partial_end.altitude > 0.0:
                    return eclipse
                logger.debug("eclipse at %s below the horizon for %s", shadow.time, observer)
        nm_time = new_moon.add_days(10.0)
    raise InternalError(f"no local solar eclipse within {_MAX_LOCAL_MOONS} new moons of {start}")


def next_local_solar_eclipse(prev_peak: AstroTime, observer: Observer) -> LocalSolarEclipseInfo:
    return search_local_solar_eclipse(prev_peak.add_days(10.0), observer)


# ============================================================
# Iteration
# ============================================================

def lunar_eclipses(start: AstroTime) -> Iterator[LunarEclipseInfo]:
    """Unbounded chronological stream of lunar eclipses after `start`."""
    info = search_lunar_eclipse(start)
    while True:
        yield info
        info = next_lunar_eclipse(info.peak)


def global_solar_eclipses(start: AstroTime) -> Iterator[GlobalSolarEclipseInfo]:
    info = search_global_solar_eclipse(start)
    while True:
        yield info
        info = next_global_solar_eclipse(info.peak)


def local_solar_eclipses(start: AstroTime, observer: Observer) -> Iterator[LocalSolarEclipseInfo]:
    info = search_local_solar_eclipse(start, observer)
    while True:
        yield info
        info = next_local_solar_eclipse(info.peak.time, observer)


ECLIPSE_CHOICES = ("all", "solar", "lunar")


def search_eclipses(
    start: AstroTime,
    which: str = "all",
    observer: Optional[Observer] = None,
    count: int = 5,
) -> List[EclipseInfo]:
    """
    The first `count` eclipses after `start`, in chronological order.

    `which` selects "lunar", "solar" or "all". Solar eclipses are local to
    `observer` when one is given and global otherwise.
    """
    if which not in ECLIPSE_CHOICES:
        raise ValueError(f"which must be one of {', '.join(ECLIPSE_CHOICES)}, got {which!r}")
    if count < 0:
        raise ValueError("count must not be negative")

    def solar() -> Iterator[EclipseInfo]:
        if observer is not None:
            return local_solar_eclipses(start, observer)
        return global_solar_eclipses(start)

    streams: List[Iterator[EclipseInfo]] = []
    if which in ("all", "lunar"):
        streams.append(lunar_eclipses(start))
    if which in ("all", "solar"):
        streams.append(solar())

    out: List[EclipseInfo] = []
    if count == 0:
        return out
    heads = [next(s) for s in streams]
    while True:
        i = min(range(len(heads)), key=lambda j: heads[j].peak_time.ut)
        out.append(heads[i])
        if len(out) >= count:
            return out
        heads[i] = next(streams[i])
