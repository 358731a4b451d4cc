from __future__ import annotations

"""
ephemcore.reference.deltat

ΔT (= TT − UT1) models used by the time model.

Models
------
- "espenak-meeus": NASA Five Millennium Canon piecewise polynomials,
  evaluated at the decimal year y = 2000 + (ut − 14) / 365.24217.
- "jpl-horizons": Espenak–Meeus with ut clamped 17 tropical years after
  J2000, which tracks what JPL Horizons extrapolates for the future.
- "iers": a tabulated ΔT derived from IERS EOP data (CSV with columns
  decimal_year, delta_t_seconds), blended into Espenak–Meeus beyond the
  table ends. The table is never shipped with the package; it is looked up
  through EPHEMCORE_DELTAT_TABLE or the user cache directory.
"""

import csv
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Tuple

from ephemcore import config
from ephemcore.core.constants import DAYS_PER_TROPICAL_YEAR

logger = logging.getLogger(__name__)

DeltaTFunc = Callable[[float], float]


# ---------------------------------------------------------------------------
# Table model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeltaTTable:
    """
    Piecewise-linear ΔT table over decimal-year coordinate.
    """
    x: Tuple[float, ...]   # decimal years (strictly increasing)
    y: Tuple[float, ...]   # ΔT in seconds

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return iter(zip(self.x, self.y))

    def eval(self, xq: float) -> float:
        if not (self.x[0] <= xq <= self.x[-1]):
            raise ValueError(f"x out of range [{self.x[0]}, {self.x[-1]}]: {xq}")
        lo, hi = 0, len(self.x) - 1
        while hi - lo > 1:
            mid = (lo + hi) // 2
            if self.x[mid] <= xq:
                lo = mid
            else:
                hi = mid
        x0, x1 = self.x[lo], self.x[hi]
        if x1 == x0:
            return self.y[lo]
        w = (xq - x0) / (x1 - x0)
        return self.y[lo] + w * (self.y[hi] - self.y[lo])

    @property
    def range(self) -> Tuple[float, float]:
        return (self.x[0], self.x[-1])


def read_table(rows: Iterable[dict], *, xcol: str = "decimal_year", ycol: str = "delta_t_seconds") -> DeltaTTable:
    xs: list[float] = []
    ys: list[float] = []
    for r in rows:
        xs.append(float(r[xcol]))
        ys.append(float(r[ycol]))
    if len(xs) < 2:
        raise ValueError("ΔT table needs at least two rows")
    for i in range(1, len(xs)):
        if not (xs[i] > xs[i - 1]):
            raise ValueError("ΔT table x is not strictly increasing")
    return DeltaTTable(tuple(xs), tuple(ys))


def _read_table_file(path: Path) -> DeltaTTable:
    with path.open("r", encoding="utf-8", newline="") as f:
        return read_table(csv.DictReader(f))


@lru_cache(maxsize=None)
def _warn_missing_explicit(path: Path) -> None:
    logger.warning("EPHEMCORE_DELTAT_TABLE=%s does not exist; ignoring", path)


def iers_table_path() -> Optional[Path]:
    """
    Path of the IERS-derived ΔT table in effect, resolved on each call.

    Search order:
      1) EPHEMCORE_DELTAT_TABLE environment variable (path to CSV)
      2) user cache ($XDG_CACHE_HOME/ephemcore/deltat_iers_monthly.csv)
    """
    explicit = config.deltat_table_path()
    if explicit is not None:
        if explicit.is_file():
            return explicit
        _warn_missing_explicit(explicit)
    cached = config.cache_dir() / "deltat_iers_monthly.csv"
    return cached if cached.is_file() else None


@lru_cache(maxsize=8)
def _load_table(path: Path, mtime_ns: int) -> DeltaTTable:
    try:
        table = _read_table_file(path)
    except (OSError, KeyError, ValueError) as e:
        raise ValueError(f"cannot read ΔT table {path}: {e}") from e
    logger.debug("loaded ΔT table %s (%d rows, %.2f..%.2f)", path, len(table), *table.range)
    return table


def load_iers_table() -> Optional[DeltaTTable]:
    """
    Load the IERS-derived ΔT table found by iers_table_path().

    Parsed tables are cached per path and modification time, so a changed
    setting or a rewritten file is picked up. Returns None when no table
    exists. A file that exists but cannot be parsed is an error.
    """
    path = iers_table_path()
    if path is None:
        return None
    return _load_table(path, path.stat().st_mtime_ns)


# ---------------------------------------------------------------------------
# Espenak–Meeus (NASA) piecewise polynomial
# ---------------------------------------------------------------------------

# (upper bound of y, origin, scale, coefficients in ascending powers of (y - origin)/scale)
_EM_BRANCHES: Tuple[Tuple[float, float, float, Tuple[float, ...]], ...] = (
    (-500.0, 1820.0, 100.0, (-20.0, 0.0, 32.0)),
    (500.0, 0.0, 100.0, (10583.6, -1014.41, 33.78311, -5.952053, -0.1798452, 0.022174192, 0.0090316521)),
    (1600.0, 1000.0, 100.0, (1574.2, -556.01, 71.23472, 0.319781, -0.8503463, -0.005050998, 0.0083572073)),
    (1700.0, 1600.0, 1.0, (120.0, -0.9808, -0.01532, 1.0 / 7129.0)),
    (1800.0, 1700.0, 1.0, (8.83, 0.1603, -0.0059285, 0.00013336, -1.0 / 1174000.0)),
    (1860.0, 1800.0, 1.0, (13.72, -0.332447, 0.0068612, 0.0041116, -0.00037436,
                           0.0000121272, -0.0000001699, 0.000000000875)),
    (1900.0, 1860.0, 1.0, (7.62, 0.5737, -0.251754, 0.01680668, -0.0004473624, 1.0 / 233174.0)),
    (1920.0, 1900.0, 1.0, (-2.79, 1.494119, -0.0598939, 0.0061966, -0.000197)),
    (1941.0, 1920.0, 1.0, (21.20, 0.84493, -0.076100, 0.0020936)),
    (1961.0, 1950.0, 1.0, (29.07, 0.407, -1.0 / 233.0, 1.0 / 2547.0)),
    (1986.0, 1975.0, 1.0, (45.45, 1.067, -1.0 / 260.0, -1.0 / 718.0)),
    (2005.0, 2000.0, 1.0, (63.86, 0.3345, -0.060374, 0.0017275, 0.000651814, 0.00002373599)),
    (2050.0, 2000.0, 1.0, (62.92, 0.32217, 0.005589)),
)


def _horner(u: float, coeffs: Tuple[float, ...]) -> float:
    acc = 0.0
    for c in reversed(coeffs):
        acc = acc * u + c
    return acc


def delta_t_em2006(y: float) -> float:
    """
    Espenak–Meeus piecewise polynomial ΔT(y) in seconds for decimal year y.

    Past 2050 the long-term parabola -20 + 32 u², u = (y - 1820)/100, takes
    over; between 2050 and 2150 it carries the linear term that removes the
    discontinuity at 2050.
    """
    for upper, origin, scale, coeffs in _EM_BRANCHES:
        if y < upper:
            return _horner((y - origin) / scale, coeffs)
    u = (y - 1820.0) / 100.0
    dt = -20.0 + 32.0 * u * u
    if y < 2150.0:
        dt -= 0.5628 * (2150.0 - y)
    return dt


def ut_to_decimal_year(ut: float) -> float:
    """Decimal year for a UT day offset from J2000, as used by the ΔT polynomials."""
    return 2000.0 + (ut - 14.0) / DAYS_PER_TROPICAL_YEAR


# ---------------------------------------------------------------------------
# Public models (functions of UT days since J2000)
# ---------------------------------------------------------------------------

def delta_t_espenak_meeus(ut: float) -> float:
    return delta_t_em2006(ut_to_decimal_year(ut))


def delta_t_jpl_horizons(ut: float) -> float:
    return delta_t_espenak_meeus(min(ut, 17.0 * DAYS_PER_TROPICAL_YEAR))


def delta_t_iers(ut: float, *, blend_years: float = 30.0) -> float:
    """
    Tabulated ΔT inside the table range, Espenak–Meeus elsewhere.

    After the table ends the polynomial is offset to match the last table
    value, and the offset fades out linearly over blend_years.
    """
    y = ut_to_decimal_year(ut)
    tbl = load_iers_table()
    if tbl is None:
        _warn_missing_table()
        return delta_t_em2006(y)

    a, b = tbl.range
    if a <= y <= b:
        return tbl.eval(y)
    if y > b and blend_years > 0.0:
        offset = tbl.eval(b) - delta_t_em2006(b)
        w = min(1.0, (y - b) / blend_years)
        return delta_t_em2006(y) + (1.0 - w) * offset
    return delta_t_em2006(y)


@lru_cache(maxsize=1)
def _warn_missing_table() -> None:
    logger.warning("ΔT model 'iers' selected but no table found; using Espenak-Meeus")


_MODELS = {
    "espenak-meeus": delta_t_espenak_meeus,
    "jpl-horizons": delta_t_jpl_horizons,
    "iers": delta_t_iers,
}


def delta_t_function(model: Optional[str] = None) -> DeltaTFunc:
    """Return the ΔT function (seconds, of UT days) for a model name or the configured default."""
    name = (model or config.deltat_model()).lower()
    try:
        return _MODELS[name]
    except KeyError:
        raise ValueError(f"unknown ΔT model {name!r}; choose one of {', '.join(_MODELS)}") from None
