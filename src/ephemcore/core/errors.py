class EphemcoreError(Exception):
    """Base error."""

class InvalidBodyError(EphemcoreError, ValueError):
    """Raised when a body is not supported by the requested operation."""

class InvalidObserverError(EphemcoreError, ValueError):
    """Raised when observer latitude/longitude fall outside their valid ranges."""

class FrameMismatchError(EphemcoreError, ValueError):
    """Raised when vectors or rotations from different reference frames are combined."""

class InternalError(EphemcoreError, RuntimeError):
    """
    A search that is guaranteed to succeed did not, or an iteration cap was hit.

    This signals a defect in bracketing/stepping logic, not an ordinary
    "event not found" outcome (those are returned as None).
    """

class EphemerisUnavailableError(EphemcoreError, RuntimeError):
    """Raised when optional ephemeris extras (jplephem, kernels) are not available."""
