# tests/test_time_scales.py

import random
from datetime import datetime, timedelta, timezone

import pytest

from ephemcore.core.time import AstroTime, interpolate_time
from ephemcore.reference import deltat
from ephemcore.reference import time_scales as ts


def test_jdn_civil_roundtrip():
    random.seed(42)
    for _ in range(10000):
        jdn_in = random.randint(1721426, 5373484)
        assert ts.civil_to_jdn(*ts.jdn_to_civil(jdn_in)) == jdn_in


def test_ut_datetime_roundtrip():
    """Sub-day UTC round-tripping between UT day counts and aware datetimes."""
    random.seed(42)
    for _ in range(1000):
        ut_in = random.uniform(-30000.0, 30000.0)
        ut_out = ts.datetime_to_ut(ts.ut_to_datetime(ut_in))
        # 1e-8 days is roughly a millisecond
        assert ut_out == pytest.approx(ut_in, abs=1e-8)


def test_known_epochs():
    """J2000.0 is 2000-01-01 12:00 UTC; the Unix epoch is JD 2440587.5."""
    assert ts.civil_to_ut(2000, 1, 1, 12) == 0.0
    assert ts.civil_to_jdn(2000, 1, 1) == 2451545
    assert ts.ut_to_jd(ts.datetime_to_ut(datetime(1970, 1, 1, tzinfo=timezone.utc))) == 2440587.5
    assert ts.format_ut(0.0) == "2000-01-01T12:00:00.000Z"
    assert ts.format_ut(ts.civil_to_ut(2024, 4, 8, 18, 17, 16.5)) == "2024-04-08T18:17:16.500Z"


def test_calendar_validation():
    with pytest.raises(ValueError):
        ts.civil_to_ut(2023, 2, 29)
    with pytest.raises(ValueError):
        ts.civil_to_ut(2024, 13, 1)
    with pytest.raises(ValueError):
        ts.civil_to_ut(2024, 1, 1, 24)
    with pytest.raises(ValueError):
        ts.datetime_to_ut(datetime(2024, 1, 1))
    assert ts.days_in_month(2024, 2) == 29
    assert ts.days_in_month(1900, 2) == 28


def test_datetime_offsets_are_honored():
    aware = datetime(2024, 1, 1, 7, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert ts.datetime_to_ut(aware) == pytest.approx(ts.civil_to_ut(2024, 1, 1, 12))


def test_tt_ut_conversion_stability():
    """The fixed-point TT -> UT iteration inverts UT -> TT."""
    t = AstroTime.from_ut(8000.25, model="espenak-meeus")
    back = AstroTime.from_tt(t.tt, model="espenak-meeus")
    assert back.ut == pytest.approx(t.ut, abs=1e-10)
    assert back.tt == pytest.approx(t.tt, abs=1e-12)


def test_delta_t_espenak_meeus_known_values():
    """ΔT ≈ 63.8 s at 2000.0 and ≈ 29 s around 1950 (Espenak & Meeus)."""
    assert deltat.delta_t_em2006(2000.0) == pytest.approx(63.86, abs=0.1)
    assert deltat.delta_t_em2006(1950.0) == pytest.approx(29.07, abs=0.2)
    t = AstroTime.from_calendar(2000, 1, 1, 12, model="espenak-meeus")
    assert (t.tt - t.ut) * 86400.0 == pytest.approx(63.8, abs=0.2)


def test_delta_t_jpl_horizons_clamps_future():
    far = AstroTime.from_calendar(2100, 1, 1, model="jpl-horizons")
    near = AstroTime.from_calendar(2030, 1, 1, model="jpl-horizons")
    assert far.tt - far.ut == pytest.approx(near.tt - near.ut, abs=1e-12)


def test_unknown_delta_t_model():
    with pytest.raises(ValueError):
        deltat.delta_t_function("bogus")


def test_add_days_and_interpolation_keep_model():
    t1 = AstroTime.from_calendar(2024, 1, 1, model="jpl-horizons")
    t2 = t1.add_days(2.0)
    assert t2.model == "jpl-horizons"
    assert t2.ut - t1.ut == pytest.approx(2.0)
    mid = interpolate_time(t1, t2, 0.25)
    assert mid.ut == pytest.approx(t1.ut + 0.5)
    assert mid.model == "jpl-horizons"
    assert str(t1) == "2024-01-01T00:00:00.000Z"
    assert t1.julian_date == pytest.approx(2460310.5)
    assert t1.to_datetime() == datetime(2024, 1, 1, tzinfo=timezone.utc)
