from __future__ import annotations

"""
ephemcore.ephemeris.spk

Heliocentric and geocentric positions from a JPL SPK kernel (DE421,
DE440, ...) through jplephem, in the same EQJ/AU convention as the
analytic models. The ICRF axes of the kernels and EQJ differ by a few
milliarcseconds, well below the analytic models' accuracy.

Requires optional deps:
  pip install "ephemcore[ephemeris]"
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from ephemcore import config
from ephemcore.core.constants import J2000_JD, KM_PER_AU
from ephemcore.core.errors import EphemerisUnavailableError, InvalidBodyError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Frame
from ephemcore.core.vectors import Vector
from ephemcore.ephemeris import require_ephemeris

# NAIF segment chains from the solar-system barycenter (0)
_CHAINS: Dict[Body, Tuple[Tuple[int, int], ...]] = {
    Body.SUN: ((0, 10),),
    Body.MERCURY: ((0, 1),),
    Body.VENUS: ((0, 2),),
    Body.EARTH: ((0, 3), (3, 399)),
    Body.MOON: ((0, 3), (3, 301)),
    Body.EMB: ((0, 3),),
    Body.MARS: ((0, 4),),
    Body.JUPITER: ((0, 5),),
    Body.SATURN: ((0, 6),),
    Body.URANUS: ((0, 7),),
    Body.NEPTUNE: ((0, 8),),
}


@dataclass
class SpkEphemeris:
    kernel: object
    path: Path

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "SpkEphemeris":
        """Open `path`, or the kernel named by EPHEMCORE_JPL_KERNEL."""
        require_ephemeris()
        from jplephem.spk import SPK  # type: ignore

        path = path or config.jpl_kernel_path()
        if path is None:
            raise EphemerisUnavailableError("no JPL kernel given; set EPHEMCORE_JPL_KERNEL to a .bsp file")
        if not path.is_file():
            raise EphemerisUnavailableError(f"JPL kernel {path} does not exist")
        return cls(kernel=SPK.open(str(path)), path=path)

    def close(self) -> None:
        self.kernel.close()

    def coverage(self) -> Tuple[float, float]:
        """(first, last) TDB Julian date covered by every segment."""
        segments = self.kernel.segments
        return max(s.start_jd for s in segments), min(s.end_jd for s in segments)

    def _barycentric_km(self, body: Body, jd_tdb: float) -> Tuple[float, float, float]:
        try:
            chain = _CHAINS[body]
        except KeyError:
            raise InvalidBodyError(f"no SPK segment chain for {body.value}") from None
        x = y = z = 0.0
        for center, target in chain:
            pos = self.kernel[center, target].compute(jd_tdb)
            x += float(pos[0])
            y += float(pos[1])
            z += float(pos[2])
        return x, y, z

    def _vector(self, body: Body, origin: Body, time: AstroTime) -> Vector:
        # TT is used for TDB; the difference stays under 2 ms
        jd = J2000_JD + time.tt
        bx, by, bz = self._barycentric_km(body, jd)
        ox, oy, oz = self._barycentric_km(origin, jd)
        return Vector(
            (bx - ox) / KM_PER_AU, (by - oy) / KM_PER_AU, (bz - oz) / KM_PER_AU,
            time, Frame.EQJ,
        )

    def helio_vector(self, body: Body, time: AstroTime) -> Vector:
        return self._vector(body, Body.SUN, time)

    def geo_vector(self, body: Body, time: AstroTime) -> Vector:
        """Geometric (not light-time corrected) geocentric position."""
        return self._vector(body, Body.EARTH, time)
