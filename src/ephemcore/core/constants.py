"""Physical and astronomical constants shared across the package."""
from __future__ import annotations

import math

# Units
DEG2RAD = 0.017453292519943296
RAD2DEG = 57.295779513082321
HOUR2RAD = 0.2617993877991494365
RAD2HOUR = 3.819718634205488
ASEC360 = 1296000.0
ASEC2RAD = 4.848136811095359935899141e-6
ARC = 3600.0 * 180.0 / math.pi  # arcseconds per radian
PI2 = 2.0 * math.pi
SECONDS_PER_DAY = 86400.0
MILLIS_PER_DAY = 86_400_000

# Epochs
J2000_JD = 2451545.0
DAYS_PER_TROPICAL_YEAR = 365.24217
DAYS_PER_MILLENNIUM = 365250.0
DAYS_PER_CENTURY = 36525.0

# Distances
KM_PER_AU = 1.4959787069098932e8
C_AUDAY = 173.1446326846693  # speed of light [AU/day]
AU_PER_PARSEC = 206264.806247096

SUN_RADIUS_KM = 695700.0
SUN_RADIUS_AU = SUN_RADIUS_KM / KM_PER_AU

EARTH_FLATTENING = 0.996647180302104
EARTH_FLATTENING_SQUARED = EARTH_FLATTENING * EARTH_FLATTENING
EARTH_EQUATORIAL_RADIUS_KM = 6378.1366
EARTH_EQUATORIAL_RADIUS_AU = EARTH_EQUATORIAL_RADIUS_KM / KM_PER_AU
EARTH_POLAR_RADIUS_KM = EARTH_EQUATORIAL_RADIUS_KM * EARTH_FLATTENING
EARTH_MEAN_RADIUS_KM = 6371.0  # mean radius of the Earth's geoid
EARTH_ATMOSPHERE_KM = 88.0  # effective atmosphere thickness for lunar eclipses
EARTH_ECLIPSE_RADIUS_KM = EARTH_MEAN_RADIUS_KM + EARTH_ATMOSPHERE_KM
ANGVEL = 7.2921150e-5  # Earth rotation [rad/s]

MOON_EQUATORIAL_RADIUS_KM = 1738.1
MOON_MEAN_RADIUS_KM = 1737.4
MOON_POLAR_RADIUS_KM = 1736.0
MOON_EQUATORIAL_RADIUS_AU = MOON_EQUATORIAL_RADIUS_KM / KM_PER_AU
MOON_POLAR_RADIUS_AU = MOON_POLAR_RADIUS_KM / KM_PER_AU

MERCURY_EQUATORIAL_RADIUS_KM = 2440.5
VENUS_RADIUS_KM = 6051.8
MERCURY_MEAN_RADIUS_KM = 2439.7

EARTH_MOON_MASS_RATIO = 81.30056

# Periods [days]
MEAN_SYNODIC_MONTH = 29.530588
EARTH_ORBITAL_PERIOD = 365.256
NEPTUNE_ORBITAL_PERIOD = 60189.0
SOLAR_DAYS_PER_SIDEREAL_DAY = 0.9972695717592592

# Refraction at the horizon used for rise/set [deg]
REFRACTION_NEAR_HORIZON = 34.0 / 60.0

# Magnitudes
SUN_MAG_1AU = -0.17 - 5.0 * math.log10(AU_PER_PARSEC)
MOON_MEAN_DISTANCE_AU = 385000.6 / KM_PER_AU
