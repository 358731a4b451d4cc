# tests/test_shadow.py

import math

import pytest

from ephemcore.core.errors import InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body
from ephemcore.geometry import shadow
from ephemcore.geometry.illumination import illumination, saturn_magnitude


def test_obscuration_edge_cases():
    # disjoint and tangent discs
    assert shadow.obscuration(1.0, 1.0, 2.5) == 0.0
    assert shadow.obscuration(1.0, 1.0, 2.0) == 0.0
    # concentric: covered completely, or by the area ratio
    assert shadow.obscuration(1.0, 2.0, 0.0) == 1.0
    assert shadow.obscuration(2.0, 1.0, 0.0) == pytest.approx(0.25)
    # small disc inside a larger one, off center
    assert shadow.obscuration(1.0, 3.0, 0.5) == 1.0
    assert shadow.obscuration(3.0, 1.0, 0.5) == pytest.approx(1.0 / 9.0)


def test_obscuration_half_overlap():
    """Two unit discs whose centers are one radius apart overlap by 2π/3 - √3/2."""
    expected = (2.0 * math.pi / 3.0 - math.sqrt(3.0) / 2.0) / math.pi
    assert shadow.obscuration(1.0, 1.0, 1.0) == pytest.approx(expected, rel=1e-12)


def test_obscuration_is_monotonic_in_distance():
    prev = 1.0
    for i in range(1, 40):
        cur = shadow.obscuration(1.0, 0.9, i * 0.05)
        assert cur <= prev
        prev = cur


def test_obscuration_rejects_bad_input():
    with pytest.raises(ValueError):
        shadow.obscuration(0.0, 1.0, 0.5)
    with pytest.raises(ValueError):
        shadow.obscuration(1.0, -1.0, 0.5)
    with pytest.raises(ValueError):
        shadow.obscuration(1.0, 1.0, -0.1)


def test_earth_shadow_cone_at_lunar_distance():
    """Near the 2022-11-08 eclipse the Moon sits inside the umbra (r < k < p)."""
    peak = shadow.peak_earth_shadow(AstroTime.from_calendar(2022, 11, 8, 11, 0, model="espenak-meeus"))
    assert peak.r < peak.k < peak.p
    # umbra radius at the Moon is roughly 4600 km, penumbra roughly 8200 km
    assert peak.k == pytest.approx(4650.0, abs=200.0)
    assert peak.p == pytest.approx(8250.0, abs=300.0)
    assert abs(shadow.shadow_distance_slope(shadow.earth_shadow, peak.time)) < 1000.0


def test_moon_illumination_near_full_and_new():
    full = illumination(Body.MOON, AstroTime.from_calendar(2024, 1, 25, 17, 54, model="espenak-meeus"))
    assert full.phase_fraction > 0.99
    assert full.mag == pytest.approx(-12.7, abs=0.3)
    new = illumination(Body.MOON, AstroTime.from_calendar(2024, 1, 11, 11, 57, model="espenak-meeus"))
    assert new.phase_fraction < 0.01


def test_planet_illumination():
    t = AstroTime.from_calendar(2020, 3, 24, model="espenak-meeus")
    venus = illumination(Body.VENUS, t)
    assert venus.phase_angle == pytest.approx(90.0, abs=3.0)
    assert -4.8 < venus.mag < -4.2
    jupiter = illumination(Body.JUPITER, t)
    assert -2.5 < jupiter.mag < -1.8
    assert jupiter.ring_tilt is None

    saturn = illumination(Body.SATURN, t)
    assert saturn.ring_tilt is not None
    assert 0.0 < saturn.mag < 1.0

    sun = illumination(Body.SUN, t)
    assert sun.mag == pytest.approx(-26.7, abs=0.2)

    with pytest.raises(InvalidBodyError):
        illumination(Body.EARTH, t)


def test_saturn_ring_tilt_is_bounded_by_inclination():
    """The ring opening never exceeds the ring plane inclination (~28°)."""
    for year in range(2020, 2035):
        t = AstroTime.from_calendar(year, 1, 1, model="espenak-meeus")
        info = illumination(Body.SATURN, t)
        assert abs(info.ring_tilt) < 29.0
        mag, tilt = saturn_magnitude(info.phase_angle, info.helio_dist, info.geo_dist, info.gc, t)
        assert (mag, tilt) == (info.mag, info.ring_tilt)
