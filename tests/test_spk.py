# tests/test_spk.py

import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

from ephemcore.core.constants import KM_PER_AU
from ephemcore.core.errors import EphemerisUnavailableError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Frame
from ephemcore.ephemeris import require_ephemeris
from ephemcore.ephemeris.spk import SpkEphemeris


@dataclass
class _Segment:
    offset: tuple
    start_jd: float = 2287184.5
    end_jd: float = 2688976.5

    def compute(self, jd):
        return self.offset


class _Kernel:
    """In-memory kernel: every segment is a fixed offset [km]."""

    def __init__(self):
        self.pairs = {
            (0, 10): _Segment((1000.0, 0.0, 0.0)),
            (0, 3): _Segment((KM_PER_AU, 0.0, 0.0), start_jd=2300000.5),
            (3, 399): _Segment((-4000.0, 0.0, 0.0)),
            (3, 301): _Segment((300000.0, 0.0, 0.0), end_jd=2600000.5),
            (0, 4): _Segment((0.0, 1.5 * KM_PER_AU, 0.0)),
        }
        self.segments = list(self.pairs.values())
        self.closed = False

    def __getitem__(self, key):
        return self.pairs[key]

    def close(self):
        self.closed = True


def _eph() -> SpkEphemeris:
    return SpkEphemeris(kernel=_Kernel(), path=Path("memory.bsp"))


def test_segment_chains_are_summed():
    t = AstroTime.from_calendar(2024, 1, 1, model="espenak-meeus")
    eph = _eph()

    earth = eph.helio_vector(Body.EARTH, t)
    assert earth.frame is Frame.EQJ
    assert earth.x * KM_PER_AU == pytest.approx(KM_PER_AU - 4000.0 - 1000.0)

    moon = eph.geo_vector(Body.MOON, t)
    assert moon.x * KM_PER_AU == pytest.approx(304000.0)
    assert moon.y == 0.0

    mars = eph.geo_vector(Body.MARS, t)
    assert mars.y == pytest.approx(1.5)


def test_coverage_is_the_common_interval():
    assert _eph().coverage() == (2300000.5, 2600000.5)


def test_close():
    eph = _eph()
    eph.close()
    assert eph.kernel.closed


def test_load_without_kernel(monkeypatch):
    pytest.importorskip("jplephem")
    monkeypatch.delenv("EPHEMCORE_JPL_KERNEL", raising=False)
    with pytest.raises(EphemerisUnavailableError):
        SpkEphemeris.load()


def test_load_missing_file(monkeypatch, tmp_path):
    pytest.importorskip("jplephem")
    monkeypatch.setenv("EPHEMCORE_JPL_KERNEL", str(tmp_path / "de440s.bsp"))
    with pytest.raises(EphemerisUnavailableError):
        SpkEphemeris.load()


def test_missing_extra_is_reported(monkeypatch):
    # a None entry makes the import fail as if the package were absent
    monkeypatch.setitem(sys.modules, "jplephem", None)
    with pytest.raises(EphemerisUnavailableError, match="ephemcore\\[ephemeris\\]"):
        require_ephemeris()
    with pytest.raises(EphemerisUnavailableError):
        SpkEphemeris.load()
