from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional

from ephemcore.core.constants import DEG2RAD, RAD2DEG
from ephemcore.core.errors import FrameMismatchError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Frame


def _check_frames(a: Frame, b: Frame) -> None:
    if a != b:
        raise FrameMismatchError(f"cannot combine {a.value} and {b.value} vectors")


@dataclass(frozen=True)
class Vector:
    """Cartesian position [AU] valid at `time`, expressed in `frame`."""
    x: float
    y: float
    z: float
    time: AstroTime
    frame: Frame = Frame.EQJ

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def dot(self, other: "Vector") -> float:
        _check_frames(self.frame, other.frame)
        return self.x * other.x + self.y * other.y + self.z * other.z

    def scale(self, k: float) -> "Vector":
        return replace(self, x=k * self.x, y=k * self.y, z=k * self.z)

    def __add__(self, other: "Vector") -> "Vector":
        _check_frames(self.frame, other.frame)
        return replace(self, x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: "Vector") -> "Vector":
        _check_frames(self.frame, other.frame)
        return replace(self, x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __neg__(self) -> "Vector":
        return replace(self, x=-self.x, y=-self.y, z=-self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class StateVector:
    """Position [AU] and velocity [AU/day] at `time` in `frame`."""
    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float
    time: AstroTime
    frame: Frame = Frame.EQJ

    def position(self) -> Vector:
        return Vector(self.x, self.y, self.z, self.time, self.frame)

    def velocity(self) -> Vector:
        return Vector(self.vx, self.vy, self.vz, self.time, self.frame)


@dataclass(frozen=True)
class Spherical:
    """Latitude/longitude [deg] and distance (AU unless stated otherwise)."""
    lat: float
    lon: float
    dist: float


@dataclass(frozen=True)
class EquatorialCoordinates:
    ra: float    # hours
    dec: float   # degrees
    dist: float  # AU
    vec: Vector


@dataclass(frozen=True)
class EclipticCoordinates:
    """Ecliptic latitude/longitude [deg]; the frame and epoch are those of `vec`."""
    vec: Vector
    elat: float
    elon: float

    @property
    def frame(self) -> Frame:
        return self.vec.frame


@dataclass(frozen=True)
class HorizontalCoordinates:
    azimuth: float   # degrees east of north
    altitude: float  # degrees above the horizon
    ra: float        # hours (refraction-adjusted when requested)
    dec: float       # degrees


# ------------------------------------------------------------
# Conversions
# ------------------------------------------------------------

def vector_from_spherical(sphere: Spherical, time: AstroTime, frame: Frame = Frame.EQJ) -> Vector:
    radlat = sphere.lat * DEG2RAD
    radlon = sphere.lon * DEG2RAD
    rcoslat = sphere.dist * math.cos(radlat)
    return Vector(
        rcoslat * math.cos(radlon),
        rcoslat * math.sin(radlon),
        sphere.dist * math.sin(radlat),
        time,
        frame,
    )


def spherical_from_vector(vec: Vector) -> Spherical:
    xyproj = vec.x * vec.x + vec.y * vec.y
    dist = math.sqrt(xyproj + vec.z * vec.z)
    if xyproj == 0.0:
        if vec.z == 0.0:
            raise ValueError("zero-length vector has no direction")
        return Spherical(90.0 if vec.z > 0.0 else -90.0, 0.0, dist)
    lon = RAD2DEG * math.atan2(vec.y, vec.x)
    if lon < 0.0:
        lon += 360.0
    lat = RAD2DEG * math.atan2(vec.z, math.sqrt(xyproj))
    return Spherical(lat, lon, dist)


def equator_from_vector(vec: Vector) -> EquatorialCoordinates:
    sphere = spherical_from_vector(vec)
    return EquatorialCoordinates(sphere.lon / 15.0, sphere.lat, sphere.dist, vec)


def vector_from_equator(ra_hours: float, dec: float, dist: float, time: AstroTime, frame: Frame) -> Vector:
    return vector_from_spherical(Spherical(dec, 15.0 * ra_hours, dist), time, frame)


def angle_between(a: Vector, b: Vector) -> float:
    """Angle in degrees between two vectors of the same frame."""
    r = a.length() * b.length()
    if r < 1.0e-8:
        raise ValueError("cannot find angle between vectors because they are too short")
    dot = a.dot(b) / r
    if dot <= -1.0:
        return 180.0
    if dot >= 1.0:
        return 0.0
    return RAD2DEG * math.acos(dot)


def zero_vector(time: AstroTime, frame: Frame = Frame.EQJ) -> Vector:
    return Vector(0.0, 0.0, 0.0, time, frame)


def retag(vec: Vector, frame: Frame, time: Optional[AstroTime] = None) -> Vector:
    """Same components under a different frame tag (used by rotation code only)."""
    return Vector(vec.x, vec.y, vec.z, time or vec.time, frame)
