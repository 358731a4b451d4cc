# tests/test_nutation.py

import random
import threading

import pytest

from ephemcore.core.context import EphemerisContext, current_context, use_context
from ephemcore.core.time import AstroTime
from ephemcore.reference import nutation as nut


def test_meeus_example_22a_nutation():
    """
    Meeus Example 22.a, 1987 April 10, 0h TD:
    Δψ = -3.788", Δε = +9.443", true obliquity 23°26'36.850".
    """
    t = AstroTime.from_tt(2446895.5 - 2451545.0, model="espenak-meeus")
    dpsi, deps = nut.nutation(t, EphemerisContext())
    assert dpsi == pytest.approx(-3.788, abs=0.05)
    assert deps == pytest.approx(+9.443, abs=0.05)
    assert nut.true_obliquity(t, EphemerisContext()) == pytest.approx(
        23.0 + 26.0 / 60.0 + 36.850 / 3600.0, abs=2.0 / 3600.0
    )


def test_meeus_example_12a_sidereal_time():
    """
    Meeus Example 12.a/12.b, 1987 April 10, 0h UT:
    apparent sidereal time at Greenwich 13h10m46.1351s.
    """
    t = AstroTime.from_calendar(1987, 4, 10, model="espenak-meeus")
    gast = nut.sidereal_time(t, EphemerisContext())
    assert gast == pytest.approx(13.0 + 10.0 / 60.0 + 46.1351 / 3600.0, abs=0.05 / 3600.0)


def test_sidereal_time_memo_tells_delta_t_models_apart():
    """In 2200 the two ΔT models differ by minutes, so one TT maps to two UTs."""
    em = AstroTime.from_calendar(2200, 1, 1, model="espenak-meeus")
    jpl = AstroTime(AstroTime.from_tt(em.tt, model="jpl-horizons").ut, em.tt, "jpl-horizons")
    assert jpl.tt == em.tt and abs(jpl.ut - em.ut) > 60.0 / 86400.0

    ctx = EphemerisContext()
    first = nut.sidereal_time(em, ctx)
    second = nut.sidereal_time(jpl, ctx)
    assert second == nut.sidereal_time(jpl, EphemerisContext())
    assert abs(second - first) > 1.0 / 3600.0


def test_nutation_stays_within_physical_bounds():
    random.seed(42)
    ctx = EphemerisContext()
    for _ in range(200):
        t = AstroTime.from_ut(random.uniform(-36525.0, 36525.0), model="espenak-meeus")
        dpsi, deps = nut.nutation(t, ctx)
        assert abs(dpsi) < 20.0
        assert abs(deps) < 11.0
        assert 0.0 <= nut.sidereal_time(t, ctx) < 24.0
        assert 0.0 <= nut.earth_rotation_angle(t) < 360.0


def test_tilt_cache_reuses_and_refreshes():
    ctx = EphemerisContext()
    t1 = AstroTime.from_ut(1000.0, model="espenak-meeus")
    t2 = AstroTime.from_ut(1000.5, model="espenak-meeus")

    a = nut.e_tilt(t1, ctx)
    assert nut.e_tilt(t1, ctx) is a
    b = nut.e_tilt(t2, ctx)
    assert b is not a
    assert b.tt == pytest.approx(t2.tt)
    # same value as a freshly computed tilt: the cache never serves stale data
    assert nut.e_tilt(t1, ctx) == nut.e_tilt(t1, EphemerisContext())


def test_use_context_binds_per_thread():
    seen = {}

    def worker() -> None:
        with use_context() as ctx:
            seen["inner"] = current_context() is ctx

    outer = current_context()
    th = threading.Thread(target=worker)
    th.start()
    th.join()
    assert seen["inner"] is True
    assert current_context() is outer
