# tests/test_lunar.py

import math

import pytest

from ephemcore.core.constants import KM_PER_AU
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Frame
from ephemcore.reference import lunar


def test_meeus_example_47a_moon_position():
    """
    Meeus Example 47.a, 1992 April 12, 0h TD:
    λ = 133.162655° (mean equinox of date), β = -3.229126°, Δ = 368409.7 km.
    """
    m = lunar.moon_position_tt(2448724.5 - 2451545.0)
    assert math.degrees(m.lon) == pytest.approx(133.162655, abs=0.005)
    assert math.degrees(m.lat) == pytest.approx(-3.229126, abs=0.005)
    assert m.dist * KM_PER_AU == pytest.approx(368409.7, abs=10.0)


def test_meeus_example_53a_libration():
    """
    Meeus Example 53.a, 1992 April 12, 0h TD: total libration
    l = -1.23°, b = +4.20°.
    """
    t = AstroTime.from_tt(2448724.5 - 2451545.0, model="espenak-meeus")
    lib = lunar.libration(t)
    assert lib.elon == pytest.approx(-1.23, abs=0.03)
    assert lib.elat == pytest.approx(4.20, abs=0.03)
    assert lib.mlon == pytest.approx(133.162655, abs=0.005)
    assert lib.dist_km == pytest.approx(368409.7, abs=10.0)
    # apparent diameter ~ 2 * 1737.4 / 368409.7 rad
    assert lib.diam_deg == pytest.approx(math.degrees(2.0 * 1737.4 / 368409.7), rel=1e-4)


def test_geo_moon_distance_and_frame():
    t = AstroTime.from_calendar(2024, 1, 1, model="espenak-meeus")
    v = lunar.geo_moon(t)
    assert v.frame is Frame.EQJ
    assert 356000.0 < v.length() * KM_PER_AU < 407000.0
    ecl = lunar.ecliptic_geo_moon(t)
    assert ecl.dist == pytest.approx(v.length(), rel=1e-12)
    assert abs(ecl.lat) < 5.3


def test_geo_moon_state_velocity():
    """Velocity by central difference matches the displacement over an hour."""
    t = AstroTime.from_calendar(2024, 2, 1, model="espenak-meeus")
    state = lunar.geo_moon_state(t)
    before = lunar.geo_moon(t.add_days(-1.0 / 48.0))
    after = lunar.geo_moon(t.add_days(+1.0 / 48.0))
    assert state.vx == pytest.approx((after.x - before.x) * 24.0, rel=1e-3, abs=1e-9)
    assert state.vz == pytest.approx((after.z - before.z) * 24.0, rel=1e-3, abs=1e-9)
    # ~1.02 km/s orbital speed
    speed_km_s = state.velocity().length() * KM_PER_AU / 86400.0
    assert 0.9 < speed_km_s < 1.1


def test_emb_state_is_moon_scaled():
    t = AstroTime.from_calendar(2024, 2, 1, model="espenak-meeus")
    emb = lunar.geo_emb_state(t)
    moon = lunar.geo_moon_state(t)
    assert emb.x == pytest.approx(moon.x / (1.0 + 81.30056), rel=1e-9)
