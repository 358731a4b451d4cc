# tests/test_astro_args.py

import pytest

from ephemcore.reference import astro_args as aa


def test_meeus_example_47a_lunar_fundamentals():
    """
    Test against Jean Meeus, Astronomical Algorithms (2nd Ed), Example 47.a.
    Date: 1992 April 12, 0h TD (TT).
    JD: 2448724.5
    """
    T = aa.T_centuries(2448724.5 - 2451545.0)
    assert T == pytest.approx(-0.077221081451, abs=1e-12)

    fa = aa.fundamental_args(T)
    assert fa.D_deg == pytest.approx(113.842304, abs=1e-6)
    assert fa.M_deg == pytest.approx(97.643514, abs=1e-6)
    assert fa.Mp_deg == pytest.approx(5.150833, abs=1e-6)
    assert fa.F_deg == pytest.approx(219.889721, abs=1e-6)

    assert aa.eccentricity_factor(T) == pytest.approx(1.000194, abs=1e-6)


def test_meeus_example_22a_node():
    """
    Meeus Example 22.a, 1987 April 10, 0h TD: longitude of the Moon's
    ascending node Ω = 11.2531°.
    """
    T = aa.T_centuries(2446895.5 - 2451545.0)
    assert T == pytest.approx(-0.127296372348, abs=1e-12)
    assert aa.fundamental_args(T).Omega_deg == pytest.approx(11.2531, abs=1e-4)


def test_mean_obliquity_at_j2000():
    """IAU 2006 mean obliquity at J2000.0 is 84381.406" = 23°26'21.406"."""
    assert aa.mean_obliquity_arcsec(0.0) == pytest.approx(84381.406, abs=1e-9)
    assert aa.mean_obliquity_deg(0.0) == pytest.approx(23.0 + 26.0 / 60.0 + 21.406 / 3600.0, abs=1e-9)
    # obliquity is currently decreasing by ~47"/century
    assert aa.mean_obliquity_arcsec(1.0) - aa.mean_obliquity_arcsec(0.0) == pytest.approx(-46.84, abs=0.01)


def test_angle_wrapping():
    assert aa.normalize_longitude(-30.0) == pytest.approx(330.0)
    assert aa.normalize_longitude(720.0) == 0.0
    assert 0.0 <= aa.normalize_longitude(-1e-15) < 360.0

    assert aa.longitude_offset(190.0) == pytest.approx(-170.0)
    assert aa.longitude_offset(-180.0) == pytest.approx(180.0)
    assert aa.longitude_offset(180.0) == pytest.approx(180.0)

    assert aa.frac01(-0.25) == pytest.approx(0.75)
