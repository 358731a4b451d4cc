# tests/test_transit.py

import pytest

from ephemcore.core.errors import InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body
from ephemcore.search.transit import next_transit, search_transit, transits

MINUTE = 1.0 / 1440.0


def _utc(*args) -> AstroTime:
    return AstroTime.from_calendar(*args, model="espenak-meeus")


def test_mercury_transit_2019():
    """
    Transit of Mercury 2019-11-11 (geocentric): ingress 12:35:27,
    greatest 15:19:48, egress 18:04:08 UT; minimum separation 75.9".
    """
    tr = search_transit(Body.MERCURY, _utc(2019, 1, 1))
    assert tr.peak.ut == pytest.approx(_utc(2019, 11, 11, 15, 19, 48).ut, abs=3 * MINUTE)
    assert tr.start.ut == pytest.approx(_utc(2019, 11, 11, 12, 35, 27).ut, abs=5 * MINUTE)
    assert tr.finish.ut == pytest.approx(_utc(2019, 11, 11, 18, 4, 8).ut, abs=5 * MINUTE)
    assert tr.separation == pytest.approx(75.9 / 60.0, abs=0.2)


def test_venus_transit_2012():
    """
    Transit of Venus 2012-06-05/06 (geocentric): ingress 22:09:38,
    greatest 01:29:36, egress 04:49:35 UT; minimum separation 554.4".
    """
    tr = search_transit(Body.VENUS, _utc(2012, 1, 1))
    assert tr.peak.ut == pytest.approx(_utc(2012, 6, 6, 1, 29, 36).ut, abs=3 * MINUTE)
    assert tr.start.ut == pytest.approx(_utc(2012, 6, 5, 22, 9, 38).ut, abs=5 * MINUTE)
    assert tr.finish.ut == pytest.approx(_utc(2012, 6, 6, 4, 49, 35).ut, abs=5 * MINUTE)
    assert tr.separation == pytest.approx(554.4 / 60.0, abs=0.2)


def test_next_mercury_transit():
    """After 2019 the next transit of Mercury is on 2032-11-13."""
    first = search_transit(Body.MERCURY, _utc(2019, 1, 1))
    second = next_transit(Body.MERCURY, first.peak)
    assert second.peak.ut == pytest.approx(_utc(2032, 11, 13, 8, 54).ut, abs=0.1)

    stream = transits(Body.MERCURY, _utc(2019, 1, 1))
    assert next(stream).peak.ut == pytest.approx(first.peak.ut, abs=1e-9)
    assert next(stream).peak.ut == pytest.approx(second.peak.ut, abs=1e-9)


def test_transit_rejects_outer_planets():
    with pytest.raises(InvalidBodyError):
        search_transit(Body.MARS, _utc(2019, 1, 1))
