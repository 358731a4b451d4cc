"""ephemcore public API.

Analytic ephemerides (VSOP87 planets, ELP Moon, IAU 2000B nutation) and
the astronomical event searches built on them. Most users only need the
names re-exported here; the submodules hold the lower-level pieces.
"""

__version__ = "0.3.0"

from .core.errors import (
    EphemcoreError,
    EphemerisUnavailableError,
    FrameMismatchError,
    InternalError,
    InvalidBodyError,
    InvalidObserverError,
)
from .core.time import AstroTime
from .core.types import ApsisKind, Body, Direction, EclipseKind, Frame, Observer, Refraction, Visibility
from .core.vectors import StateVector, Vector, angle_between
from .geometry.bodies import (
    ecliptic,
    ecliptic_longitude,
    geo_vector,
    helio_distance,
    helio_state,
    helio_vector,
    pair_longitude,
    sun_position,
)
from .geometry.illumination import illumination
from .geometry.observer import equator, horizon, observer_vector, refraction, vector_observer
from .reference.lunar import geo_moon, libration
from .reference.nutation import sidereal_time
from .search.apsis import next_lunar_apsis, next_planet_apsis, search_lunar_apsis, search_planet_apsis
from .search.eclipse import (
    global_solar_eclipses,
    local_solar_eclipses,
    lunar_eclipses,
    next_global_solar_eclipse,
    next_local_solar_eclipse,
    next_lunar_eclipse,
    search_eclipses,
    search_global_solar_eclipse,
    search_local_solar_eclipse,
    search_lunar_eclipse,
)
from .search.longitude import (
    elongation,
    search_max_elongation,
    search_peak_magnitude,
    search_relative_longitude,
    search_sun_longitude,
    seasons,
)
from .search.moon import moon_phase, next_moon_quarter, search_moon_phase, search_moon_quarter
from .search.riseset import search_altitude, search_hour_angle, search_rise_set
from .search.solver import search
from .search.transit import next_transit, search_transit, transits

__all__ = [
    "__version__",
    "EphemcoreError",
    "EphemerisUnavailableError",
    "FrameMismatchError",
    "InternalError",
    "InvalidBodyError",
    "InvalidObserverError",
    "AstroTime",
    "ApsisKind",
    "Body",
    "Direction",
    "EclipseKind",
    "Frame",
    "Observer",
    "Refraction",
    "Visibility",
    "StateVector",
    "Vector",
    "angle_between",
    "ecliptic",
    "ecliptic_longitude",
    "geo_vector",
    "helio_distance",
    "helio_state",
    "helio_vector",
    "pair_longitude",
    "sun_position",
    "illumination",
    "equator",
    "horizon",
    "observer_vector",
    "refraction",
    "vector_observer",
    "geo_moon",
    "libration",
    "sidereal_time",
    "next_lunar_apsis",
    "next_planet_apsis",
    "search_lunar_apsis",
    "search_planet_apsis",
    "global_solar_eclipses",
    "local_solar_eclipses",
    "lunar_eclipses",
    "next_global_solar_eclipse",
    "next_local_solar_eclipse",
    "next_lunar_eclipse",
    "search_eclipses",
    "search_global_solar_eclipse",
    "search_local_solar_eclipse",
    "search_lunar_eclipse",
    "elongation",
    "search_max_elongation",
    "search_peak_magnitude",
    "search_relative_longitude",
    "search_sun_longitude",
    "seasons",
    "moon_phase",
    "next_moon_quarter",
    "search_moon_phase",
    "search_moon_quarter",
    "search_altitude",
    "search_hour_angle",
    "search_rise_set",
    "search",
    "next_transit",
    "search_transit",
    "transits",
]
