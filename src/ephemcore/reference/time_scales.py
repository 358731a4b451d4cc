from __future__ import annotations

from datetime import datetime, timedelta, timezone
import math
from typing import Tuple

from ephemcore.core.constants import J2000_JD, MILLIS_PER_DAY


# ============================================================
# Gregorian calendar date <-> JDN  (Fliegel–Van Flandern)
# ============================================================

def civil_to_jdn(year: int, month: int, day: int) -> int:
    """
    Proleptic Gregorian (year, month, day) -> Julian Day Number.
    Valid for any integer year, including year 0 and negative years.
    """
    a = (14 - month) // 12
    y2 = year + 4800 - a
    m2 = month + 12 * a - 3
    return day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045


def jdn_to_civil(jdn: int) -> Tuple[int, int, int]:
    """JDN -> proleptic Gregorian (year, month, day)."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return year, month, day


def days_in_month(year: int, month: int) -> int:
    if month == 12:
        return civil_to_jdn(year + 1, 1, 1) - civil_to_jdn(year, 12, 1)
    return civil_to_jdn(year, month + 1, 1) - civil_to_jdn(year, month, 1)


# JDN of 2000-01-01; J2000.0 is half a day later.
_JDN_2000_01_01 = 2451545


# ============================================================
# Calendar <-> days since J2000 (UT)
# ============================================================

def civil_to_ut(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: float = 0.0) -> float:
    """
    UTC calendar fields -> UT days since J2000.0.

    Fields are validated here so malformed input fails immediately.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    if not 1 <= day <= days_in_month(year, month):
        raise ValueError(f"day out of range for {year:04d}-{month:02d}: {day}")
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    if not 0 <= minute <= 59:
        raise ValueError(f"minute out of range: {minute}")
    if not (0.0 <= second < 60.0):
        raise ValueError(f"second out of range: {second}")

    # Integer milliseconds keep the conversion exact to the millisecond.
    millis = round(((hour * 60 + minute) * 60 + second) * 1000.0)
    days = civil_to_jdn(year, month, day) - _JDN_2000_01_01
    return days - 0.5 + millis / MILLIS_PER_DAY


def ut_to_civil(ut: float) -> Tuple[int, int, int, int, int, float]:
    """
    UT days since J2000.0 -> (year, month, day, hour, minute, second),
    rounded to the nearest millisecond.
    """
    total_ms = round((ut + 0.5) * MILLIS_PER_DAY)
    day_index, ms = divmod(total_ms, MILLIS_PER_DAY)
    year, month, day = jdn_to_civil(_JDN_2000_01_01 + day_index)
    hour, ms = divmod(ms, 3_600_000)
    minute, ms = divmod(ms, 60_000)
    return year, month, day, hour, minute, ms / 1000.0


def format_ut(ut: float) -> str:
    """ISO 8601 UTC text with millisecond resolution."""
    year, month, day, hour, minute, second = ut_to_civil(ut)
    ytext = f"{year:04d}" if 0 <= year <= 9999 else f"{year:+07d}"
    return f"{ytext}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:{second:06.3f}Z"


# ============================================================
# datetime(UTC) <-> days since J2000 (UT)
# ============================================================

_J2000_UTC = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def datetime_to_ut(dt: datetime) -> float:
    """
    datetime -> UT days since J2000.0. Requires a timezone-aware datetime.
    """
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    delta = dt.astimezone(timezone.utc) - _J2000_UTC
    return delta / timedelta(days=1)


def ut_to_datetime(ut: float) -> datetime:
    """
    UT days since J2000.0 -> timezone-aware UTC datetime (millisecond resolution).
    """
    return _J2000_UTC + timedelta(milliseconds=round(ut * MILLIS_PER_DAY))


# ============================================================
# Julian dates and centuries
# ============================================================

def ut_to_jd(ut: float) -> float:
    return J2000_JD + ut


def jd_to_ut(jd: float) -> float:
    return jd - J2000_JD


def jd_to_jdn(jd: float) -> int:
    """
    Julian Date -> Julian Day Number: JDN = floor(JD + 0.5).
    """
    return int(math.floor(jd + 0.5))
