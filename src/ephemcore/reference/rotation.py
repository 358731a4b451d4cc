from __future__ import annotations

"""
ephemcore.reference.rotation

Frame-tagged 3x3 rotation matrices (row-major: out_i = sum_j r[i][j] v_j)
and the rotations between the frames used by the package:

  EQJ  mean equator and equinox of J2000
  EQM  mean equator and equinox of date
  EQD  true equator and equinox of date
  ECL  mean ecliptic and equinox of J2000
  ECT  true ecliptic and equinox of date
  HOR  observer horizon (x north, y west, z zenith)

Precession uses the IAU 2006 angles (psi_A, omega_A, chi_A); nutation uses
the IAU 2000B angles from ephemcore.reference.nutation. Going from J2000 to
date is precession followed by nutation; the reverse applies the inverse
nutation first.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ephemcore.core.constants import ASEC2RAD, DEG2RAD
from ephemcore.core.errors import FrameMismatchError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Frame, Observer
from ephemcore.core.vectors import StateVector, Vector
from ephemcore.reference.nutation import e_tilt, sidereal_time

Matrix = Tuple[Tuple[float, float, float], Tuple[float, float, float], Tuple[float, float, float]]

# cos/sin of the mean obliquity of the J2000 ecliptic (0.40909260059599012 rad)
_COS_OB2000 = 0.9174821430670688
_SIN_OB2000 = 0.3977769691083922


class PrecessDirection(str, Enum):
    FROM_2000 = "from2000"  # J2000 -> of date
    INTO_2000 = "into2000"  # of date -> J2000


@dataclass(frozen=True)
class RotationMatrix:
    rot: Matrix
    source: Frame
    target: Frame

    def __post_init__(self) -> None:
        if len(self.rot) != 3 or any(len(row) != 3 for row in self.rot):
            raise ValueError("rotation matrix must be 3x3")
        if not all(math.isfinite(x) for row in self.rot for x in row):
            raise ValueError("rotation matrix entries must be finite")

    def apply(self, x: float, y: float, z: float) -> Tuple[float, float, float]:
        r = self.rot
        return (
            r[0][0] * x + r[0][1] * y + r[0][2] * z,
            r[1][0] * x + r[1][1] * y + r[1][2] * z,
            r[2][0] * x + r[2][1] * y + r[2][2] * z,
        )


def _transpose(m: Matrix) -> Matrix:
    return (
        (m[0][0], m[1][0], m[2][0]),
        (m[0][1], m[1][1], m[2][1]),
        (m[0][2], m[1][2], m[2][2]),
    )


def _matmul(b: Matrix, a: Matrix) -> Matrix:
    return tuple(
        tuple(sum(b[i][k] * a[k][j] for k in range(3)) for j in range(3))
        for i in range(3)
    )  # type: ignore[return-value]


# ------------------------------------------------------------
# Generic operations
# ------------------------------------------------------------

def identity_matrix(frame: Frame = Frame.EQJ) -> RotationMatrix:
    return RotationMatrix(((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)), frame, frame)


def inverse_rotation(rotation: RotationMatrix) -> RotationMatrix:
    return RotationMatrix(_transpose(rotation.rot), rotation.target, rotation.source)


def combine_rotation(a: RotationMatrix, b: RotationMatrix) -> RotationMatrix:
    """Rotation equivalent to applying `a` first and then `b`."""
    if a.target != b.source:
        raise FrameMismatchError(
            f"cannot chain {a.source.value}->{a.target.value} with {b.source.value}->{b.target.value}"
        )
    return RotationMatrix(_matmul(b.rot, a.rot), a.source, b.target)


def pivot(rotation: RotationMatrix, axis: int, angle: float) -> RotationMatrix:
    """
    Follow `rotation` by a counterclockwise turn of `angle` degrees about
    coordinate axis 0, 1 or 2 of the target frame.
    """
    if axis not in (0, 1, 2):
        raise ValueError(f"invalid axis {axis}; must be 0, 1 or 2")
    c = math.cos(angle * DEG2RAD)
    s = math.sin(angle * DEG2RAD)
    i = (axis + 1) % 3
    j = (axis + 2) % 3
    q = [[0.0] * 3 for _ in range(3)]
    q[axis][axis] = 1.0
    q[i][i] = c
    q[i][j] = -s
    q[j][i] = s
    q[j][j] = c
    turn: Matrix = tuple(tuple(row) for row in q)  # type: ignore[assignment]
    return RotationMatrix(_matmul(turn, rotation.rot), rotation.source, rotation.target)


def rotate_vector(rotation: RotationMatrix, vec: Vector) -> Vector:
    if vec.frame != rotation.source:
        raise FrameMismatchError(f"vector is {vec.frame.value}, rotation expects {rotation.source.value}")
    x, y, z = rotation.apply(vec.x, vec.y, vec.z)
    return Vector(x, y, z, vec.time, rotation.target)


def rotate_state(rotation: RotationMatrix, state: StateVector) -> StateVector:
    if state.frame != rotation.source:
        raise FrameMismatchError(f"state is {state.frame.value}, rotation expects {rotation.source.value}")
    x, y, z = rotation.apply(state.x, state.y, state.z)
    vx, vy, vz = rotation.apply(state.vx, state.vy, state.vz)
    return StateVector(x, y, z, vx, vy, vz, state.time, rotation.target)


# ------------------------------------------------------------
# Precession and nutation
# ------------------------------------------------------------

def _frames(direction: PrecessDirection, date_frame: Frame) -> Tuple[Frame, Frame]:
    if direction is PrecessDirection.FROM_2000:
        return Frame.EQJ, date_frame
    return date_frame, Frame.EQJ


def precession_rot(time: AstroTime, direction: PrecessDirection) -> RotationMatrix:
    """
    IAU 2006 precession between the J2000 mean equator (EQJ) and the mean
    equator of date (EQM).
    """
    t = time.centuries
    eps0 = 84381.406
    psia = (((((-0.0000000951 * t + 0.000132851) * t - 0.00114045) * t - 1.0790069) * t
             + 5038.481507) * t)
    omegaa = (((((0.0000003337 * t - 0.000000467) * t - 0.00772503) * t + 0.0512623) * t
               - 0.025754) * t + eps0)
    chia = (((((-0.0000000560 * t + 0.000170663) * t - 0.00121197) * t - 2.3814292) * t
             + 10.556403) * t)

    sa = math.sin(eps0 * ASEC2RAD)
    ca = math.cos(eps0 * ASEC2RAD)
    sb = math.sin(-psia * ASEC2RAD)
    cb = math.cos(-psia * ASEC2RAD)
    sc = math.sin(-omegaa * ASEC2RAD)
    cc = math.cos(-omegaa * ASEC2RAD)
    sd = math.sin(chia * ASEC2RAD)
    cd = math.cos(chia * ASEC2RAD)

    xx = cd * cb - sb * sd * cc
    yx = cd * sb * ca + sd * cc * cb * ca - sa * sd * sc
    zx = cd * sb * sa + sd * cc * cb * sa + ca * sd * sc
    xy = -sd * cb - sb * cd * cc
    yy = -sd * sb * ca + cd * cc * cb * ca - sa * cd * sc
    zy = -sd * sb * sa + cd * cc * cb * sa + ca * cd * sc
    xz = sb * sc
    yz = -sc * cb * ca - sa * cc
    zz = -sc * cb * sa + cc * ca

    into: Matrix = ((xx, xy, xz), (yx, yy, yz), (zx, zy, zz))
    source, target = _frames(direction, Frame.EQM)
    if direction is PrecessDirection.INTO_2000:
        return RotationMatrix(into, source, target)
    return RotationMatrix(_transpose(into), source, target)


def nutation_rot(time: AstroTime, direction: PrecessDirection) -> RotationMatrix:
    """Nutation between the mean (EQM) and true (EQD) equator of date."""
    tilt = e_tilt(time)
    oblm = tilt.mobl * DEG2RAD
    oblt = tilt.tobl * DEG2RAD
    psi = tilt.dpsi * ASEC2RAD
    cobm, sobm = math.cos(oblm), math.sin(oblm)
    cobt, sobt = math.cos(oblt), math.sin(oblt)
    cpsi, spsi = math.cos(psi), math.sin(psi)

    xx = cpsi
    yx = -spsi * cobm
    zx = -spsi * sobm
    xy = spsi * cobt
    yy = cpsi * cobm * cobt + sobm * sobt
    zy = cpsi * sobm * cobt - cobm * sobt
    xz = spsi * sobt
    yz = cpsi * cobm * sobt - sobm * cobt
    zz = cpsi * sobm * sobt + cobm * cobt

    into: Matrix = ((xx, xy, xz), (yx, yy, yz), (zx, zy, zz))
    if direction is PrecessDirection.INTO_2000:
        return RotationMatrix(into, Frame.EQD, Frame.EQM)
    return RotationMatrix(_transpose(into), Frame.EQM, Frame.EQD)


def precession(vec: Vector, direction: PrecessDirection) -> Vector:
    """Precess an EQJ vector to the mean equator of date (EQM) or back."""
    return rotate_vector(precession_rot(vec.time, direction), vec)


def gyration(vec: Vector, direction: PrecessDirection) -> Vector:
    """
    Precession and nutation combined. FROM_2000: EQJ -> EQD (precession
    then nutation); INTO_2000: EQD -> EQJ (nutation^-1 then precession^-1).
    """
    rot = rotation_eqj_eqd(vec.time) if direction is PrecessDirection.FROM_2000 else rotation_eqd_eqj(vec.time)
    return rotate_vector(rot, vec)


def gyration_state(state: StateVector, direction: PrecessDirection) -> StateVector:
    rot = rotation_eqj_eqd(state.time) if direction is PrecessDirection.FROM_2000 else rotation_eqd_eqj(state.time)
    return rotate_state(rot, state)


# ------------------------------------------------------------
# Frame-to-frame builders
# ------------------------------------------------------------

def rotation_eqj_ecl() -> RotationMatrix:
    c, s = _COS_OB2000, _SIN_OB2000
    return RotationMatrix(((1.0, 0.0, 0.0), (0.0, c, s), (0.0, -s, c)), Frame.EQJ, Frame.ECL)


def rotation_ecl_eqj() -> RotationMatrix:
    return inverse_rotation(rotation_eqj_ecl())


def rotation_eqj_eqd(time: AstroTime) -> RotationMatrix:
    prec = precession_rot(time, PrecessDirection.FROM_2000)
    nut = nutation_rot(time, PrecessDirection.FROM_2000)
    return combine_rotation(prec, nut)


def rotation_eqd_eqj(time: AstroTime) -> RotationMatrix:
    nut = nutation_rot(time, PrecessDirection.INTO_2000)
    prec = precession_rot(time, PrecessDirection.INTO_2000)
    return combine_rotation(nut, prec)


def rotation_eqd_ect(time: AstroTime) -> RotationMatrix:
    tobl = e_tilt(time).tobl * DEG2RAD
    c, s = math.cos(tobl), math.sin(tobl)
    return RotationMatrix(((1.0, 0.0, 0.0), (0.0, c, s), (0.0, -s, c)), Frame.EQD, Frame.ECT)


def rotation_ect_eqd(time: AstroTime) -> RotationMatrix:
    return inverse_rotation(rotation_eqd_ect(time))


def rotation_eqj_ect(time: AstroTime) -> RotationMatrix:
    return combine_rotation(rotation_eqj_eqd(time), rotation_eqd_ect(time))


def rotation_ect_eqj(time: AstroTime) -> RotationMatrix:
    return combine_rotation(rotation_ect_eqd(time), rotation_eqd_eqj(time))


def _spin(angle: float, v: Tuple[float, float, float]) -> Tuple[float, float, float]:
    c = math.cos(angle * DEG2RAD)
    s = math.sin(angle * DEG2RAD)
    return (c * v[0] + s * v[1], c * v[1] - s * v[0], v[2])


def rotation_eqd_hor(time: AstroTime, observer: Observer) -> RotationMatrix:
    lat = observer.latitude * DEG2RAD
    lon = observer.longitude * DEG2RAD
    sinlat, coslat = math.sin(lat), math.cos(lat)
    sinlon, coslon = math.sin(lon), math.cos(lon)

    spin_angle = -15.0 * sidereal_time(time)
    uz = _spin(spin_angle, (coslat * coslon, coslat * sinlon, sinlat))
    un = _spin(spin_angle, (-sinlat * coslon, -sinlat * sinlon, coslat))
    uw = _spin(spin_angle, (sinlon, -coslon, 0.0))
    return RotationMatrix((un, uw, uz), Frame.EQD, Frame.HOR)


def rotation_hor_eqd(time: AstroTime, observer: Observer) -> RotationMatrix:
    return inverse_rotation(rotation_eqd_hor(time, observer))


def rotation_eqj_hor(time: AstroTime, observer: Observer) -> RotationMatrix:
    return combine_rotation(rotation_eqj_eqd(time), rotation_eqd_hor(time, observer))


def rotation_hor_eqj(time: AstroTime, observer: Observer) -> RotationMatrix:
    return inverse_rotation(rotation_eqj_hor(time, observer))


def rotation_ecl_eqd(time: AstroTime) -> RotationMatrix:
    return combine_rotation(rotation_ecl_eqj(), rotation_eqj_eqd(time))


def rotation_eqd_ecl(time: AstroTime) -> RotationMatrix:
    return inverse_rotation(rotation_ecl_eqd(time))


def rotation_ecl_hor(time: AstroTime, observer: Observer) -> RotationMatrix:
    return combine_rotation(rotation_ecl_eqd(time), rotation_eqd_hor(time, observer))


def rotation_hor_ecl(time: AstroTime, observer: Observer) -> RotationMatrix:
    return inverse_rotation(rotation_ecl_hor(time, observer))


# ------------------------------------------------------------
# Ecliptic <-> equatorial at a single obliquity
# ------------------------------------------------------------

def ecliptic_to_equatorial(x: float, y: float, z: float, obliquity_deg: float) -> Tuple[float, float, float]:
    """Rotate ecliptic components into equatorial about the x axis."""
    c = math.cos(obliquity_deg * DEG2RAD)
    s = math.sin(obliquity_deg * DEG2RAD)
    return x, c * y - s * z, s * y + c * z


def equatorial_to_ecliptic(x: float, y: float, z: float, obliquity_deg: float) -> Tuple[float, float, float]:
    c = math.cos(obliquity_deg * DEG2RAD)
    s = math.sin(obliquity_deg * DEG2RAD)
    return x, c * y + s * z, -s * y + c * z


def equ_to_ect(vec: Vector) -> Vector:
    """EQD vector -> true ecliptic of date."""
    return rotate_vector(rotation_eqd_ect(vec.time), vec)


def ect_to_equ(vec: Vector) -> Vector:
    return rotate_vector(rotation_ect_eqd(vec.time), vec)
