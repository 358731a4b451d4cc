from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from ephemcore.core.errors import InvalidObserverError


class Body(str, Enum):
    SUN = "Sun"
    MOON = "Moon"
    MERCURY = "Mercury"
    VENUS = "Venus"
    EARTH = "Earth"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"
    EMB = "EMB"  # Earth/Moon barycenter

    @classmethod
    def parse(cls, name: str) -> "Body":
        key = name.strip().lower()
        for body in cls:
            if body.value.lower() == key:
                return body
        raise ValueError(f"unknown body {name!r}")


PLANETS = (
    Body.MERCURY, Body.VENUS, Body.EARTH, Body.MARS,
    Body.JUPITER, Body.SATURN, Body.URANUS, Body.NEPTUNE,
)

# Mean sidereal orbital periods [days]
ORBITAL_PERIOD = {
    Body.MERCURY: 87.969,
    Body.VENUS: 224.701,
    Body.EARTH: 365.256,
    Body.MARS: 686.980,
    Body.JUPITER: 4332.589,
    Body.SATURN: 10759.22,
    Body.URANUS: 30685.4,
    Body.NEPTUNE: 60189.0,
}


def is_superior_planet(body: Body) -> bool:
    return body in (Body.MARS, Body.JUPITER, Body.SATURN, Body.URANUS, Body.NEPTUNE)


class Frame(str, Enum):
    """Reference frame tags carried by vectors and rotation matrices."""
    EQJ = "EQJ"  # mean equator and equinox of J2000
    EQM = "EQM"  # mean equator and equinox of date
    EQD = "EQD"  # true equator and equinox of date
    ECL = "ECL"  # mean ecliptic and equinox of J2000
    ECT = "ECT"  # true ecliptic and equinox of date
    HOR = "HOR"  # observer horizon (x north, y west, z zenith)


class Refraction(str, Enum):
    NONE = "none"
    NORMAL = "normal"
    JPLHOR = "jplhor"


class Direction(int, Enum):
    RISE = +1
    SET = -1


class ApsisKind(str, Enum):
    PERICENTER = "pericenter"
    APOCENTER = "apocenter"


class EclipseKind(str, Enum):
    PENUMBRAL = "penumbral"
    PARTIAL = "partial"
    ANNULAR = "annular"
    TOTAL = "total"


class Visibility(str, Enum):
    MORNING = "morning"
    EVENING = "evening"


@dataclass(frozen=True)
class Observer:
    """
    Geographic observer: geodetic latitude/longitude [deg, east positive]
    and height above the WGS84 ellipsoid [m].
    """
    latitude: float
    longitude: float
    height: float = 0.0

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude", "height"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or not math.isfinite(v):
                raise InvalidObserverError(f"observer {name} must be a finite number, got {v!r}")
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidObserverError(f"latitude {self.latitude} outside [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidObserverError(f"longitude {self.longitude} outside [-180, 180]")
