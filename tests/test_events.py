# tests/test_events.py

import pytest

from ephemcore.core.errors import InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import ApsisKind, Body, Visibility
from ephemcore.geometry.bodies import angle_from_sun
from ephemcore.search.apsis import (
    next_lunar_apsis,
    next_planet_apsis,
    search_lunar_apsis,
    search_planet_apsis,
)
from ephemcore.search.longitude import (
    elongation,
    search_max_elongation,
    search_peak_magnitude,
    search_relative_longitude,
    search_sun_longitude,
    seasons,
)

MINUTE = 1.0 / 1440.0


def _utc(*args) -> AstroTime:
    return AstroTime.from_calendar(*args, model="espenak-meeus")


# ------------------------------------------------------------
# Seasons
# ------------------------------------------------------------

def test_seasons_2024():
    """Equinoxes and solstices of 2024 (USNO, UTC)."""
    s = seasons(2024, model="espenak-meeus")
    assert s.mar_equinox.ut == pytest.approx(_utc(2024, 3, 20, 3, 6).ut, abs=2 * MINUTE)
    assert s.jun_solstice.ut == pytest.approx(_utc(2024, 6, 20, 20, 51).ut, abs=2 * MINUTE)
    assert s.sep_equinox.ut == pytest.approx(_utc(2024, 9, 22, 12, 44).ut, abs=2 * MINUTE)
    assert s.dec_solstice.ut == pytest.approx(_utc(2024, 12, 21, 9, 20).ut, abs=2 * MINUTE)
    assert s.mar_equinox.model == "espenak-meeus"


def test_sun_longitude_outside_window():
    # the June solstice is not within 5 days of June 1
    assert search_sun_longitude(90.0, _utc(2024, 6, 1), 5.0) is None
    with pytest.raises(ValueError):
        search_sun_longitude(float("nan"), _utc(2024, 6, 1), 5.0)


def test_sun_longitude_long_window_skips_the_wrap():
    """The Sun passes 180° opposite the target at the September equinox; that is not a root."""
    start = _utc(2024, 6, 1)
    assert search_sun_longitude(0.0, start, 200.0) is None

    t = search_sun_longitude(0.0, start, 300.0)
    assert t is not None
    assert t.ut == pytest.approx(_utc(2025, 3, 20, 9, 1).ut, abs=2 * MINUTE)


def test_sun_longitude_backward_window():
    t = search_sun_longitude(90.0, _utc(2024, 12, 1), -300.0)
    assert t is not None
    assert t.ut == pytest.approx(_utc(2024, 6, 20, 20, 51).ut, abs=2 * MINUTE)


# ------------------------------------------------------------
# Apsides
# ------------------------------------------------------------

def test_lunar_apsides_alternate():
    apsis = search_lunar_apsis(_utc(2024, 1, 1))
    assert 0.0 <= apsis.time.ut - _utc(2024, 1, 1).ut < 16.0
    for _ in range(10):
        if apsis.kind is ApsisKind.PERICENTER:
            assert 356000.0 < apsis.dist_km < 370500.0
        else:
            assert 404000.0 < apsis.dist_km < 406800.0
        nxt = next_lunar_apsis(apsis)
        assert nxt.kind is not apsis.kind
        assert 10.0 < nxt.time.ut - apsis.time.ut < 19.0
        apsis = nxt


def test_earth_perihelion_and_aphelion_2024():
    """Perihelion 2024-01-03 00:39 UT (0.983 AU); aphelion 2024-07-05 05:06 UT (1.017 AU)."""
    peri = search_planet_apsis(Body.EARTH, _utc(2023, 12, 1))
    assert peri.kind is ApsisKind.PERICENTER
    # the monthly lunar wobble blurs the extremum by about a day
    assert peri.time.ut == pytest.approx(_utc(2024, 1, 3, 0, 39).ut, abs=1.5)
    assert peri.dist_au == pytest.approx(0.98331, abs=2e-4)

    aph = next_planet_apsis(Body.EARTH, peri)
    assert aph.kind is ApsisKind.APOCENTER
    assert aph.time.ut == pytest.approx(_utc(2024, 7, 5, 5, 6).ut, abs=1.5)
    assert aph.dist_au == pytest.approx(1.01673, abs=2e-4)


def test_apsis_rejects_non_planets():
    with pytest.raises(InvalidBodyError):
        search_planet_apsis(Body.MOON, _utc(2024, 1, 1))


# ------------------------------------------------------------
# Relative longitude, elongation and brightness
# ------------------------------------------------------------

def test_mars_opposition_2020():
    """Mars opposition 2020-10-13 23:20 UT."""
    opp = search_relative_longitude(Body.MARS, 0.0, _utc(2020, 6, 1))
    assert opp.ut == pytest.approx(_utc(2020, 10, 13, 23, 20).ut, abs=0.1)
    assert angle_from_sun(Body.MARS, opp) > 170.0


def test_venus_inferior_conjunction_2020():
    """Venus inferior conjunction 2020-06-03 18 UT."""
    conj = search_relative_longitude(Body.VENUS, 0.0, _utc(2020, 4, 1))
    assert conj.ut == pytest.approx(_utc(2020, 6, 3, 18, 0).ut, abs=0.2)
    assert angle_from_sun(Body.VENUS, conj) < 1.0


def test_relative_longitude_rejects_earth_and_moon():
    for body in (Body.EARTH, Body.MOON, Body.SUN):
        with pytest.raises(InvalidBodyError):
            search_relative_longitude(body, 0.0, _utc(2020, 1, 1))


def test_venus_greatest_elongation_2020():
    """Greatest eastern elongation of Venus: 2020-03-24 22 UT, 46.1°."""
    ev = search_max_elongation(Body.VENUS, _utc(2020, 1, 1))
    assert ev.visibility is Visibility.EVENING
    assert ev.time.ut == pytest.approx(_utc(2020, 3, 24, 22, 0).ut, abs=0.5)
    assert ev.elongation == pytest.approx(46.1, abs=0.2)


def test_mercury_elongations_are_bounded():
    start = _utc(2024, 1, 1)
    for _ in range(3):
        ev = search_max_elongation(Body.MERCURY, start)
        assert 17.5 < ev.elongation < 28.5
        assert ev.time.tt >= start.tt
        start = ev.time.add_days(1.0)


def test_elongation_sides():
    t = _utc(2020, 3, 24)
    ev = elongation(Body.VENUS, t)
    assert ev.visibility is Visibility.EVENING
    assert 0.0 <= ev.ecliptic_separation <= 180.0
    with pytest.raises(InvalidBodyError):
        search_max_elongation(Body.MARS, t)


def test_venus_peak_magnitude_2020():
    """Venus at greatest brilliancy 2020-04-28, magnitude about -4.7."""
    info = search_peak_magnitude(Body.VENUS, _utc(2020, 3, 1))
    assert info.time.ut == pytest.approx(_utc(2020, 4, 28).ut, abs=3.0)
    assert info.mag < -4.4
    with pytest.raises(InvalidBodyError):
        search_peak_magnitude(Body.MERCURY, _utc(2020, 3, 1))
