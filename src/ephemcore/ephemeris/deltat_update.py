from __future__ import annotations

"""
ephemcore.ephemeris.deltat_update

Build the monthly ΔT table consumed by the "iers" ΔT model from the IERS
C04 daily UT1−UTC series and the IANA leap-second list:

  ΔT = TT − UT1 = (TAI − UTC) + 32.184 − (UT1 − UTC)

Each month is sampled on (or near) its 15th and tabulated at the month
center y + (m − 0.5)/12. The result is written to the user cache, where
reference.deltat finds it without further configuration.
"""

import csv
import logging
import urllib.request
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ephemcore import config

logger = logging.getLogger(__name__)

IERS_C04_CSV_URL = "https://datacenter.iers.org/data/csv/eopc04_14_IAU2000.62-now.csv"
LEAP_SECONDS_URL = "https://data.iana.org/time-zones/data/leap-seconds.list"

TABLE_NAME = "deltat_iers_monthly.csv"
TABLE_HEADER = ("decimal_year", "year", "month", "sample_date", "tai_utc", "ut1_utc", "delta_t_seconds")

TT_MINUS_TAI = 32.184

_MONTHS = {m: i + 1 for i, m in enumerate(
    ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"))}

_MJD_EPOCH = date(1858, 11, 17)


@dataclass(frozen=True)
class LeapStep:
    since: date            # first UTC day the offset applies
    tai_minus_utc: int


@dataclass(frozen=True)
class DailyEop:
    day: date
    ut1_minus_utc: float   # seconds


@dataclass(frozen=True)
class MonthlyDeltaT:
    year: int
    month: int
    sample_date: date
    tai_utc: int
    ut1_utc: float
    delta_t: float

    @property
    def decimal_year(self) -> float:
        return self.year + (self.month - 0.5) / 12.0


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_leap_seconds(text: str) -> List[LeapStep]:
    """
    Parse leap-seconds.list data lines of the form

      2272060800 10 # 1 Jan 1972

    The calendar date in the trailing comment is used; the NTP count is
    not converted because it does not account for leap seconds itself.
    """
    steps: Dict[date, LeapStep] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "#" not in line:
            continue
        data, when = (part.split() for part in line.split("#", 1))
        if len(data) < 2 or len(when) < 3:
            continue
        try:
            since = date(int(when[2]), _MONTHS[when[1][:3].lower()], int(when[0]))
            steps[since] = LeapStep(since, int(data[1]))
        except (KeyError, ValueError):
            logger.debug("skipping leap-second line %r", line)
    if not steps:
        raise ValueError("no entries found in leap-seconds list")
    return [steps[d] for d in sorted(steps)]


def tai_minus_utc(steps: Sequence[LeapStep], day: date) -> int:
    """TAI − UTC [s] on UTC `day`; days before 1972 take the first offset."""
    i = bisect_right([s.since for s in steps], day)
    return steps[max(i - 1, 0)].tai_minus_utc


def _column(header: List[str], *names: str) -> Optional[int]:
    for name in names:
        if name in header:
            return header.index(name)
    return None


def parse_iers_c04(text: str) -> List[DailyEop]:
    """Daily UT1 − UTC from the IERS C04 CSV (usually ';' separated)."""
    lines = [ln for ln in text.splitlines() if ln.strip() and not ln.lstrip().startswith("#")]
    if not lines:
        raise ValueError("IERS C04 data is empty")
    delim = max(";,\t", key=lines[0].count)

    reader = csv.reader(lines, delimiter=delim)
    header = [c.strip().lower() for c in next(reader)]
    iy = _column(header, "year", "yyyy")
    im = _column(header, "month", "mm")
    iday = _column(header, "day", "dd")
    imjd = _column(header, "mjd")
    iut1 = _column(header, "ut1-utc", "ut1 - utc", "ut1_utc", "ut1utc")
    if iut1 is None:
        iut1 = next((j for j, name in enumerate(header) if "ut1" in name and "utc" in name), None)
    if iut1 is None:
        raise ValueError(f"no UT1-UTC column in IERS header {header}")

    rows: List[DailyEop] = []
    for row in reader:
        if len(row) <= iut1 or not row[iut1].strip():
            continue
        try:
            ut1 = float(row[iut1])
            if iy is not None and im is not None and iday is not None:
                day = date(int(row[iy]), int(row[im]), int(row[iday]))
            elif imjd is not None:
                day = _MJD_EPOCH + timedelta(days=int(float(row[imjd])))
            else:
                continue
        except (IndexError, ValueError):
            continue
        rows.append(DailyEop(day, ut1))

    if not rows:
        raise ValueError("parsed no daily rows from IERS C04 data")
    rows.sort(key=lambda r: r.day)
    return rows


# ---------------------------------------------------------------------------
# Monthly table
# ---------------------------------------------------------------------------

def _sample(by_day: Dict[date, float], year: int, month: int, last: date) -> Optional[date]:
    mid = date(year, month, 15)
    for k in (0, -1, 1, -2, 2, -3, 3):
        day = mid + timedelta(days=k)
        if day in by_day:
            return day
    # partial trailing month: latest day available in it
    day = min(last, date(year + month // 12, month % 12 + 1, 1) - timedelta(days=1))
    while day.month == month:
        if day in by_day:
            return day
        day -= timedelta(days=1)
    return None


def build_monthly_table(eops: Sequence[DailyEop], steps: Sequence[LeapStep]) -> List[MonthlyDeltaT]:
    by_day = {r.day: r.ut1_minus_utc for r in eops}
    first, last = eops[0].day, eops[-1].day

    table: List[MonthlyDeltaT] = []
    for year in range(first.year, last.year + 1):
        for month in range(1, 13):
            if (year, month) < (first.year, first.month) or date(year, month, 1) > last:
                continue
            day = _sample(by_day, year, month, last)
            if day is None or day < steps[0].since:
                continue
            ut1 = by_day[day]
            tai = tai_minus_utc(steps, day)
            table.append(MonthlyDeltaT(year, month, day, tai, ut1, tai + TT_MINUS_TAI - ut1))

    if not table:
        raise ValueError("no monthly ΔT rows could be built")
    return table


def write_table(table: Sequence[MonthlyDeltaT], out: Path) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", newline="") as f:
        w = csv.writer(f)
        w.writerow(TABLE_HEADER)
        for r in table:
            w.writerow([
                f"{r.decimal_year:.8f}", r.year, r.month, r.sample_date.isoformat(),
                r.tai_utc, f"{r.ut1_utc:.6f}", f"{r.delta_t:.6f}",
            ])
    return out


def default_table_path() -> Path:
    return config.cache_dir() / TABLE_NAME


def _fetch(url: str) -> str:
    logger.info("downloading %s", url)
    with urllib.request.urlopen(url, timeout=60) as r:
        return r.read().decode("utf-8", errors="replace")


def update_table(out: Optional[Path] = None) -> List[MonthlyDeltaT]:
    """Download both sources, rebuild the monthly table and write it to `out`."""
    eops = parse_iers_c04(_fetch(IERS_C04_CSV_URL))
    steps = parse_leap_seconds(_fetch(LEAP_SECONDS_URL))
    logger.info("IERS daily range %s .. %s; TAI-UTC now %d s", eops[0].day, eops[-1].day, steps[-1].tai_minus_utc)

    table = build_monthly_table(eops, steps)
    write_table(table, out or default_table_path())
    return table
