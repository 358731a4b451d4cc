from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ephemcore import config
from ephemcore.core.constants import DAYS_PER_CENTURY, SECONDS_PER_DAY
from ephemcore.core.errors import InternalError
from ephemcore.reference import time_scales as ts
from ephemcore.reference.deltat import delta_t_function


@dataclass(frozen=True)
class AstroTime:
    """
    One instant, as UT and TT days since J2000.0 (2000-01-01T12:00:00Z).

    tt = ut + ΔT(ut)/86400 always holds for the ΔT model named in `model`.
    Instances are built through the classmethods below; derived instants
    (add_days, interpolate) keep the model of their source.
    """
    ut: float
    tt: float
    model: str = field(default=config.DEFAULT_DELTAT_MODEL, compare=False)

    # --------------------------------------------------------
    # Constructors
    # --------------------------------------------------------

    @classmethod
    def from_ut(cls, ut: float, model: Optional[str] = None) -> "AstroTime":
        name = model or config.deltat_model()
        ut = float(ut)
        return cls(ut, ut + delta_t_function(name)(ut) / SECONDS_PER_DAY, name)

    @classmethod
    def from_tt(cls, tt: float, model: Optional[str] = None) -> "AstroTime":
        """Instant whose TT is `tt`; UT found by fixed-point iteration."""
        time = cls.from_ut(tt, model)
        for _ in range(20):
            err = tt - time.tt
            if abs(err) < 1e-12:
                return time
            time = time.add_days(err)
        raise InternalError(f"TT -> UT iteration did not converge for tt={tt}")

    @classmethod
    def from_datetime(cls, dt: datetime, model: Optional[str] = None) -> "AstroTime":
        return cls.from_ut(ts.datetime_to_ut(dt), model)

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
        *,
        model: Optional[str] = None,
    ) -> "AstroTime":
        """UTC calendar date and time (proleptic Gregorian)."""
        return cls.from_ut(ts.civil_to_ut(year, month, day, hour, minute, second), model)

    @classmethod
    def from_jd(cls, jd_ut: float, model: Optional[str] = None) -> "AstroTime":
        return cls.from_ut(ts.jd_to_ut(jd_ut), model)

    # --------------------------------------------------------
    # Derived instants and views
    # --------------------------------------------------------

    def add_days(self, days: float) -> "AstroTime":
        return AstroTime.from_ut(self.ut + days, self.model)

    @property
    def julian_date(self) -> float:
        return ts.ut_to_jd(self.ut)

    @property
    def centuries(self) -> float:
        """Julian centuries of TT since J2000.0."""
        return self.tt / DAYS_PER_CENTURY

    def to_datetime(self) -> datetime:
        return ts.ut_to_datetime(self.ut)

    def __str__(self) -> str:
        return ts.format_ut(self.ut)


def interpolate_time(t1: AstroTime, t2: AstroTime, fraction: float) -> AstroTime:
    """Instant at `fraction` of the way from t1 to t2 (in UT)."""
    return AstroTime.from_ut(t1.ut + fraction * (t2.ut - t1.ut), t1.model)
