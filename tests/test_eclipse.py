# tests/test_eclipse.py

import pytest

from ephemcore.core.constants import MOON_MEAN_RADIUS_KM
from ephemcore.core.time import AstroTime
from ephemcore.core.types import EclipseKind, Observer
from ephemcore.geometry.shadow import peak_earth_shadow
from ephemcore.reference.lunar import ecliptic_geo_moon
from ephemcore.search.eclipse import (
    PRUNE_LATITUDE,
    GlobalSolarEclipseInfo,
    LocalSolarEclipseInfo,
    LunarEclipseInfo,
    eclipse_kind_from_umbra,
    lunar_eclipses,
    next_global_solar_eclipse,
    search_eclipses,
    search_global_solar_eclipse,
    search_local_solar_eclipse,
    search_lunar_eclipse,
)
from ephemcore.search.moon import search_moon_phase

MINUTE = 1.0 / 1440.0
DALLAS = Observer(32.78, -96.80)


def _utc(*args) -> AstroTime:
    return AstroTime.from_calendar(*args, model="espenak-meeus")


# ------------------------------------------------------------
# Lunar
# ------------------------------------------------------------

def test_total_lunar_eclipse_2022_11_08():
    """
    Greatest eclipse 10:59 UT. Penumbral 08:02-13:56, partial 09:09-12:49,
    total 10:16-11:41 (NASA, Espenak).
    """
    info = search_lunar_eclipse(_utc(2022, 10, 1))
    assert info.kind is EclipseKind.TOTAL
    assert info.obscuration == 1.0
    assert info.peak.ut == pytest.approx(_utc(2022, 11, 8, 10, 59).ut, abs=3 * MINUTE)
    assert info.sd_penum == pytest.approx(177.0, abs=4.0)
    assert info.sd_partial == pytest.approx(110.0, abs=3.0)
    assert info.sd_total == pytest.approx(42.5, abs=3.0)
    assert info.total_begin.ut == pytest.approx(_utc(2022, 11, 8, 10, 16).ut, abs=4 * MINUTE)
    assert info.partial_end.ut == pytest.approx(_utc(2022, 11, 8, 12, 49).ut, abs=4 * MINUTE)


def test_lunar_eclipses_2024():
    """2024-03-25 penumbral (07:13 UT) and 2024-09-18 partial (02:44 UT)."""
    stream = lunar_eclipses(_utc(2024, 1, 1))
    first = next(stream)
    assert first.kind is EclipseKind.PENUMBRAL
    assert first.peak.ut == pytest.approx(_utc(2024, 3, 25, 7, 13).ut, abs=5 * MINUTE)
    assert first.obscuration == 0.0
    assert first.partial_begin is None and first.total_begin is None

    second = next(stream)
    assert second.kind is EclipseKind.PARTIAL
    assert second.peak.ut == pytest.approx(_utc(2024, 9, 18, 2, 44).ut, abs=5 * MINUTE)
    assert 0.0 < second.obscuration < 0.1
    assert second.total_begin is None
    assert second.partial_begin.ut < second.peak.ut < second.partial_end.ut


def test_pruned_full_moons_cannot_be_eclipsed():
    """A full moon farther than the pruning latitude from the ecliptic stays out of the penumbra."""
    time = _utc(2024, 1, 1)
    pruned = 0
    for _ in range(13):
        full = search_moon_phase(180.0, time, 40.0)
        if abs(ecliptic_geo_moon(full).lat) >= PRUNE_LATITUDE:
            pruned += 1
            shadow = peak_earth_shadow(full)
            assert shadow.r > shadow.p + MOON_MEAN_RADIUS_KM
        time = full.add_days(10.0)
    assert pruned >= 6


# ------------------------------------------------------------
# Solar
# ------------------------------------------------------------

def test_global_total_solar_eclipse_2024_04_08():
    """Greatest eclipse 18:17 UT at 25.29°N, 104.14°W."""
    info = search_global_solar_eclipse(_utc(2024, 1, 1))
    assert info.kind is EclipseKind.TOTAL
    assert info.obscuration == 1.0
    assert info.peak.ut == pytest.approx(_utc(2024, 4, 8, 18, 17).ut, abs=3 * MINUTE)
    assert info.latitude == pytest.approx(25.29, abs=0.5)
    assert info.longitude == pytest.approx(-104.14, abs=0.5)

    nxt = next_global_solar_eclipse(info.peak)
    assert nxt.kind is EclipseKind.ANNULAR
    assert nxt.peak.ut == pytest.approx(_utc(2024, 10, 2, 18, 45).ut, abs=5 * MINUTE)
    assert 0.8 < nxt.obscuration < 1.0


def test_local_total_solar_eclipse_dallas():
    """Dallas 2024-04-08: partial 17:23-20:02 UT, totality 18:40:43-18:44:35 UT."""
    info = search_local_solar_eclipse(_utc(2024, 3, 1), DALLAS)
    assert info.kind is EclipseKind.TOTAL
    assert info.obscuration == 1.0
    assert info.partial_begin.time.ut == pytest.approx(_utc(2024, 4, 8, 17, 23).ut, abs=3 * MINUTE)
    assert info.partial_end.time.ut == pytest.approx(_utc(2024, 4, 8, 20, 2).ut, abs=3 * MINUTE)
    assert info.total_begin.time.ut == pytest.approx(_utc(2024, 4, 8, 18, 40, 43).ut, abs=2 * MINUTE)
    assert info.total_end.time.ut == pytest.approx(_utc(2024, 4, 8, 18, 44, 35).ut, abs=2 * MINUTE)
    assert info.total_begin.time.ut < info.peak.time.ut < info.total_end.time.ut
    # the Sun stood high over Texas at mid-eclipse
    assert 55.0 < info.peak.altitude < 70.0


def test_kind_from_umbra():
    assert eclipse_kind_from_umbra(100.0) is EclipseKind.TOTAL
    assert eclipse_kind_from_umbra(-100.0) is EclipseKind.ANNULAR
    assert eclipse_kind_from_umbra(0.0) is EclipseKind.ANNULAR


# ------------------------------------------------------------
# Merged listing
# ------------------------------------------------------------

def test_search_eclipses_merges_in_order():
    found = search_eclipses(_utc(2024, 1, 1), count=4)
    assert [type(e) for e in found] == [
        LunarEclipseInfo,
        GlobalSolarEclipseInfo,
        LunarEclipseInfo,
        GlobalSolarEclipseInfo,
    ]
    peaks = [e.peak_time.ut for e in found]
    assert peaks == sorted(peaks)


def test_search_eclipses_local_and_filtered():
    found = search_eclipses(_utc(2024, 3, 1), which="solar", observer=DALLAS, count=1)
    assert len(found) == 1
    assert isinstance(found[0], LocalSolarEclipseInfo)

    lunar = search_eclipses(_utc(2024, 1, 1), which="lunar", count=2)
    assert all(isinstance(e, LunarEclipseInfo) for e in lunar)


def test_search_eclipses_validation():
    start = _utc(2024, 1, 1)
    assert search_eclipses(start, count=0) == []
    with pytest.raises(ValueError):
        search_eclipses(start, which="both")
    with pytest.raises(ValueError):
        search_eclipses(start, count=-1)
