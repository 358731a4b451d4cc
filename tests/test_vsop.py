# tests/test_vsop.py

import math

import pytest

from ephemcore.core.errors import InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Frame
from ephemcore.geometry import bodies
from ephemcore.reference import vsop


def test_meeus_example_25b_earth():
    """
    Meeus Example 25.b, 1992 October 13, 0h TD (JDE 2448908.5), full
    VSOP87 for the Earth: L = 19.907372°, B = -0.000179°, R = 0.99760775 AU.
    """
    lbr = vsop.vsop_lbr(Body.EARTH, 2448908.5 - 2451545.0)
    assert math.degrees(lbr.lon) == pytest.approx(19.907372, abs=2e-4)
    assert math.degrees(lbr.lat) == pytest.approx(-0.000179, abs=2e-5)
    assert lbr.dist == pytest.approx(0.99760775, abs=2e-6)


def test_meeus_example_32a_venus():
    """
    Meeus Example 32.a, 1992 December 20, 0h TD (JDE 2448976.5):
    L = 26.11428°, B = -2.62070°, R = 0.724603 AU.
    """
    lbr = vsop.vsop_lbr(Body.VENUS, 2448976.5 - 2451545.0)
    assert math.degrees(lbr.lon) == pytest.approx(26.11428, abs=2e-4)
    assert math.degrees(lbr.lat) == pytest.approx(-2.62070, abs=2e-4)
    assert lbr.dist == pytest.approx(0.724603, abs=2e-6)


def test_every_planet_has_series():
    for body in vsop.VSOP_BODIES:
        model = vsop.vsop_model(body)
        assert model.body is body
        assert model.nterms() > 0
        assert set(model.series) == {"L", "B", "R"}


def test_mean_distances():
    """Heliocentric distances stay within each planet's perihelion/aphelion range."""
    t = AstroTime.from_calendar(2024, 1, 1, model="espenak-meeus")
    ranges = {
        Body.MERCURY: (0.30, 0.47),
        Body.VENUS: (0.71, 0.73),
        Body.EARTH: (0.98, 1.02),
        Body.MARS: (1.38, 1.67),
        Body.JUPITER: (4.95, 5.46),
        Body.SATURN: (9.0, 10.1),
        Body.URANUS: (18.2, 20.1),
        Body.NEPTUNE: (29.8, 30.4),
    }
    for body, (lo, hi) in ranges.items():
        d = bodies.helio_distance(body, t)
        assert lo < d < hi, body
        assert bodies.helio_vector(body, t).length() == pytest.approx(d, rel=1e-12)


def test_vectors_are_eqj():
    t = AstroTime.from_calendar(2024, 1, 1, model="espenak-meeus")
    assert bodies.helio_vector(Body.MARS, t).frame is Frame.EQJ
    assert bodies.helio_vector(Body.SUN, t).length() == 0.0
    assert bodies.geo_vector(Body.EARTH, t).length() == 0.0
    assert bodies.geo_vector(Body.SUN, t).frame is Frame.EQJ


def test_state_velocity_matches_finite_difference():
    t = AstroTime.from_calendar(2024, 5, 1, model="espenak-meeus")
    state = bodies.helio_state(Body.EARTH, t)
    before = bodies.helio_vector(Body.EARTH, t.add_days(-0.01))
    after = bodies.helio_vector(Body.EARTH, t.add_days(+0.01))
    assert state.vx == pytest.approx((after.x - before.x) / 0.02, rel=1e-5)
    assert state.vy == pytest.approx((after.y - before.y) / 0.02, rel=1e-5)
    # orbital speed near 0.0172 AU/day
    assert state.velocity().length() == pytest.approx(0.0172, abs=0.0005)


def test_sun_geocentric_longitude_at_march_equinox():
    """The Sun's apparent ecliptic longitude of date is ~0° at the 2024 March equinox."""
    t = AstroTime.from_calendar(2024, 3, 20, 3, 6, model="espenak-meeus")
    lon = bodies.sun_position(t).elon
    assert min(lon, 360.0 - lon) < 0.01


def test_invalid_bodies():
    t = AstroTime.from_ut(0.0, model="espenak-meeus")
    with pytest.raises(InvalidBodyError):
        vsop.vsop_model(Body.MOON)
    with pytest.raises(InvalidBodyError):
        bodies.synodic_period(Body.EARTH)
    assert bodies.synodic_period(Body.MARS) == pytest.approx(779.9, abs=1.0)
    assert bodies.helio_vector(Body.EMB, t).length() == pytest.approx(0.983, abs=0.005)
