from __future__ import annotations

"""
ephemcore.reference.vsop

Heliocentric planet positions from the truncated VSOP87D series
(Meeus, Astronomical Algorithms, App. III).

Each coordinate is Σ_k τ^k Σ_i A_i cos(B_i + C_i τ), τ in Julian millennia
of TT from J2000.0, amplitudes in units of 1e-8 (rad for L/B, AU for R).
VSOP87D refers to the mean ecliptic and equinox of date; results are
precessed to the J2000 ecliptic (Meeus 21.5) and rotated into EQJ.

The coefficient table is packaged as CSV (body, coord, power, a, b, c) and
loaded once into read-only numpy arrays.
"""

import csv
import importlib
import importlib.resources
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Mapping, Tuple

import numpy as np

from ephemcore import config
from ephemcore.core.constants import ASEC2RAD, DAYS_PER_CENTURY, DAYS_PER_MILLENNIUM, DEG2RAD, PI2
from ephemcore.core.errors import InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Frame
from ephemcore.core.vectors import StateVector, Vector
from ephemcore.reference.rotation import rotate_vector, rotation_ecl_eqj

logger = logging.getLogger(__name__)

VSOP_BODIES = (
    Body.MERCURY, Body.VENUS, Body.EARTH, Body.MARS,
    Body.JUPITER, Body.SATURN, Body.URANUS, Body.NEPTUNE,
)

_TABLE_NAME = "vsop87d_meeus.csv"
_COORDS = ("L", "B", "R")

# (a, b, c) arrays for one power of τ
Terms = Tuple[np.ndarray, np.ndarray, np.ndarray]


@dataclass(frozen=True)
class VsopModel:
    """Series of one body: coord -> tuple of term arrays indexed by power of τ."""
    body: Body
    series: Mapping[str, Tuple[Terms, ...]]

    def nterms(self) -> int:
        return sum(len(a) for terms in self.series.values() for a, _, _ in terms)


@dataclass(frozen=True)
class HeliocentricEcliptic:
    """L, B [rad], R [AU]; mean ecliptic and equinox of date."""
    lon: float
    lat: float
    dist: float


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _frozen(values: list) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    arr.setflags(write=False)
    return arr


def read_vsop_rows(rows: Iterable[dict]) -> Dict[Body, VsopModel]:
    raw: Dict[Body, Dict[str, Dict[int, list]]] = {}
    for r in rows:
        body = Body.parse(r["body"])
        coord = r["coord"].strip().upper()
        if coord not in _COORDS:
            raise ValueError(f"unknown VSOP coordinate {coord!r}")
        power = int(r["power"])
        if not 0 <= power <= 5:
            raise ValueError(f"VSOP power out of range: {power}")
        bucket = raw.setdefault(body, {}).setdefault(coord, {}).setdefault(power, [])
        bucket.append((float(r["a"]), float(r["b"]), float(r["c"])))

    models: Dict[Body, VsopModel] = {}
    for body, coords in raw.items():
        series: Dict[str, Tuple[Terms, ...]] = {}
        for coord in _COORDS:
            if coord not in coords:
                raise ValueError(f"VSOP table has no {coord} series for {body.value}")
            by_power = coords[coord]
            terms = []
            for k in range(max(by_power) + 1):
                rows_k = by_power.get(k, [])
                terms.append((
                    _frozen([t[0] for t in rows_k]),
                    _frozen([t[1] for t in rows_k]),
                    _frozen([t[2] for t in rows_k]),
                ))
            series[coord] = tuple(terms)
        models[body] = VsopModel(body, series)
    return models


@lru_cache(maxsize=1)
def load_vsop_table() -> Dict[Body, VsopModel]:
    """
    Load the VSOP87D coefficient table.

    Search order:
      1) EPHEMCORE_VSOP_TABLE environment variable (path to CSV)
      2) packaged data (ephemcore.reference.data/vsop87d_meeus.csv)
    """
    override = config.vsop_table_path()
    if override is not None:
        with override.open("r", encoding="utf-8", newline="") as f:
            models = read_vsop_rows(csv.DictReader(f))
        source = str(override)
    else:
        pkg = importlib.import_module("ephemcore.reference.data")
        path = importlib.resources.files(pkg).joinpath(_TABLE_NAME)
        with path.open("r", encoding="utf-8", newline="") as f:
            models = read_vsop_rows(csv.DictReader(f))
        source = _TABLE_NAME

    missing = [b.value for b in VSOP_BODIES if b not in models]
    if missing:
        raise ValueError(f"VSOP table {source} lacks bodies: {', '.join(missing)}")
    logger.debug("loaded VSOP table %s (%d terms)", source, sum(m.nterms() for m in models.values()))
    return models


def vsop_model(body: Body) -> VsopModel:
    if body not in VSOP_BODIES:
        raise InvalidBodyError(f"no VSOP series for {body.value}")
    return load_vsop_table()[body]


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _sum_series(terms: Tuple[Terms, ...], tau: float) -> float:
    total = 0.0
    tpow = 1.0
    for a, b, c in terms:
        if len(a):
            total += tpow * float(np.sum(a * np.cos(b + c * tau)))
        tpow *= tau
    return total * 1.0e-8


def vsop_lbr(body: Body, tt: float) -> HeliocentricEcliptic:
    """Heliocentric L, B, R referred to the mean ecliptic and equinox of date."""
    model = vsop_model(body)
    tau = tt / DAYS_PER_MILLENNIUM
    lon = _sum_series(model.series["L"], tau) % PI2
    lat = _sum_series(model.series["B"], tau)
    dist = _sum_series(model.series["R"], tau)
    return HeliocentricEcliptic(lon, lat, dist)


def precess_ecliptic_to_j2000(lon: float, lat: float, tt: float) -> Tuple[float, float]:
    """
    Rigorous ecliptic precession (Meeus 21.5) from the ecliptic of date
    (TT days `tt` from J2000) back to the J2000 ecliptic. Angles in radians.
    """
    T = tt / DAYS_PER_CENTURY
    t = -T
    t2 = t * t
    eta = ((47.0029 - 0.06603 * T + 0.000598 * T * T) * t
           + (-0.03302 + 0.000598 * T) * t2
           + 0.000060 * t2 * t) * ASEC2RAD
    pi_ = (174.876384 * DEG2RAD
           + (3289.4789 * T + 0.60622 * T * T) * ASEC2RAD
           - (869.8089 + 0.50491 * T) * t * ASEC2RAD
           + 0.03536 * t2 * ASEC2RAD)
    p = ((5029.0966 + 2.22226 * T - 0.000042 * T * T) * t
         + (1.11113 - 0.000042 * T) * t2
         - 0.000006 * t2 * t) * ASEC2RAD

    ceta, seta = math.cos(eta), math.sin(eta)
    cb, sb = math.cos(lat), math.sin(lat)
    s = math.sin(pi_ - lon)
    a_ = ceta * cb * s - seta * sb
    b_ = cb * math.cos(pi_ - lon)
    c_ = ceta * sb + seta * cb * s
    lon0 = (p + pi_ - math.atan2(a_, b_)) % PI2
    lat0 = math.asin(max(-1.0, min(1.0, c_)))
    return lon0, lat0


def vsop_ecliptic_j2000(body: Body, tt: float) -> Tuple[float, float, float]:
    """Heliocentric cartesian coordinates [AU] in the J2000 mean ecliptic."""
    lbr = vsop_lbr(body, tt)
    lon, lat = precess_ecliptic_to_j2000(lbr.lon, lbr.lat, tt)
    rcb = lbr.dist * math.cos(lat)
    return (rcb * math.cos(lon), rcb * math.sin(lon), lbr.dist * math.sin(lat))


def vsop_vector(body: Body, time: AstroTime) -> Vector:
    """Heliocentric position of a VSOP body in EQJ."""
    x, y, z = vsop_ecliptic_j2000(body, time.tt)
    return rotate_vector(rotation_ecl_eqj(), Vector(x, y, z, time, Frame.ECL))


def vsop_state(body: Body, time: AstroTime, dt: float = 1.0e-3) -> StateVector:
    """Heliocentric position and velocity [AU/day] in EQJ, velocity by central difference."""
    pos = vsop_vector(body, time)
    before = vsop_vector(body, AstroTime.from_tt(time.tt - dt, time.model))
    after = vsop_vector(body, AstroTime.from_tt(time.tt + dt, time.model))
    k = 1.0 / (2.0 * dt)
    return StateVector(
        pos.x, pos.y, pos.z,
        k * (after.x - before.x), k * (after.y - before.y), k * (after.z - before.z),
        time, Frame.EQJ,
    )


def vsop_distance(body: Body, time: AstroTime) -> float:
    """Heliocentric distance [AU]; cheaper than building the full vector."""
    return vsop_lbr(body, time.tt).dist
