from __future__ import annotations

from dataclasses import dataclass
from math import fmod

import math

from ephemcore.core.constants import DAYS_PER_CENTURY


# ------------------------------------------------------------
# Angle helpers
# ------------------------------------------------------------

def normalize_longitude(deg: float) -> float:
    """Wrap degrees to [0,360)."""
    y = fmod(deg, 360.0)
    if y < 0:
        y += 360.0
    return y if y < 360.0 else 0.0


def longitude_offset(deg: float) -> float:
    """Wrap a longitude difference in degrees to (-180, 180]."""
    y = fmod(deg, 360.0)
    if y <= -180.0:
        y += 360.0
    elif y > 180.0:
        y -= 360.0
    return y


def frac01(x: float) -> float:
    """Return fractional part in [0,1)."""
    return x - math.floor(x)


def arcsec_to_deg(arcsec: float) -> float:
    return arcsec / 3600.0


def arcsec_to_rad(arcsec: float) -> float:
    return math.radians(arcsec_to_deg(arcsec))


# ------------------------------------------------------------
# Time variable (TT)
# ------------------------------------------------------------

def T_centuries(tt: float) -> float:
    """Julian centuries of TT from J2000.0, given TT days from J2000.0."""
    return tt / DAYS_PER_CENTURY


# ------------------------------------------------------------
# Fundamental arguments (Meeus ch. 47 / ELP2000; degrees)
# ------------------------------------------------------------

@dataclass(frozen=True)
class FundamentalArgs:
    """Fundamental arguments in degrees, wrapped to [0,360)."""
    D_deg: float      # Moon's mean elongation
    M_deg: float      # Sun's mean anomaly
    Mp_deg: float     # Moon's mean anomaly
    F_deg: float      # Moon's argument of latitude
    Omega_deg: float  # longitude of the Moon's mean ascending node

    @property
    def D(self) -> float: return math.radians(self.D_deg)
    @property
    def M(self) -> float: return math.radians(self.M_deg)
    @property
    def Mp(self) -> float: return math.radians(self.Mp_deg)
    @property
    def F(self) -> float: return math.radians(self.F_deg)
    @property
    def Omega(self) -> float: return math.radians(self.Omega_deg)


def fundamental_args(T: float) -> FundamentalArgs:
    """
    Mean elements as quartic polynomials in T (Julian centuries of TT):
      D  = 297.8501921 + 445267.1114034  T - 0.0018819 T^2 + T^3/545868  - T^4/113065000
      M  = 357.5291092 + 35999.0502909   T - 0.0001536 T^2 + T^3/24490000
      M' = 134.9633964 + 477198.8675055  T + 0.0087414 T^2 + T^3/69699   - T^4/14712000
      F  = 93.2720950  + 483202.0175233  T - 0.0036539 T^2 - T^3/3526000 + T^4/863310000
      Ω  = 125.0445479 - 1934.1362891    T + 0.0020754 T^2 + T^3/467441  - T^4/60616000
    """
    T2 = T * T
    T3 = T2 * T
    T4 = T2 * T2

    D = 297.8501921 + 445267.1114034 * T - 0.0018819 * T2 + T3 / 545868.0 - T4 / 113065000.0
    M = 357.5291092 + 35999.0502909 * T - 0.0001536 * T2 + T3 / 24490000.0
    Mp = 134.9633964 + 477198.8675055 * T + 0.0087414 * T2 + T3 / 69699.0 - T4 / 14712000.0
    F = 93.2720950 + 483202.0175233 * T - 0.0036539 * T2 - T3 / 3526000.0 + T4 / 863310000.0
    Omega = 125.0445479 - 1934.1362891 * T + 0.0020754 * T2 + T3 / 467441.0 - T4 / 60616000.0

    return FundamentalArgs(
        D_deg=normalize_longitude(D),
        M_deg=normalize_longitude(M),
        Mp_deg=normalize_longitude(Mp),
        F_deg=normalize_longitude(F),
        Omega_deg=normalize_longitude(Omega),
    )


def eccentricity_factor(T: float) -> float:
    """
    Eccentricity factor E for the Earth's orbit; scales lunar terms that
    depend on the Sun's mean anomaly.
    """
    return 1.0 - 0.002516 * T - 0.0000074 * (T * T)


# ------------------------------------------------------------
# Mean obliquity epsilon
# ------------------------------------------------------------

def mean_obliquity_arcsec(T: float) -> float:
    """
    Mean obliquity of the ecliptic in arcseconds (IAU 2006):
        eps = 84381.406"
            - 46.836769"T - 0.0001831"T^2 + 0.00200340"T^3
            - 0.000000576"T^4 - 0.0000000434"T^5
    """
    return (((((-0.0000000434 * T - 0.000000576) * T + 0.00200340) * T - 0.0001831) * T - 46.836769) * T
            + 84381.406)


def mean_obliquity_deg(T: float) -> float:
    return arcsec_to_deg(mean_obliquity_arcsec(T))
