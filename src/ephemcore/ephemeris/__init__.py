"""Ephemeris adapters (optional).

Thin wrappers around external ephemerides used to cross-check the
analytic models. Install with:
  pip install "ephemcore[ephemeris]"
"""

from ephemcore.core.errors import EphemerisUnavailableError


def require_ephemeris():
    """Raise a clear error if ephemeris extras aren't installed."""
    try:
        import jplephem  # noqa: F401
    except ImportError as e:
        raise EphemerisUnavailableError('Ephemeris support requires: pip install "ephemcore[ephemeris]"') from e
