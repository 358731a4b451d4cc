"""
ephemcore.config

Environment-driven settings. Values are read on demand so that tests (and
long-running processes) can change them without re-importing modules.

  EPHEMCORE_DELTAT_MODEL   espenak-meeus | jpl-horizons | iers
  EPHEMCORE_DELTAT_TABLE   path to an IERS-style ΔT CSV
  EPHEMCORE_VSOP_TABLE     path overriding the packaged VSOP87D CSV
  EPHEMCORE_JPL_KERNEL     path to a JPL SPK kernel (diagnostics only)
  EPHEMCORE_LOG_LEVEL      log level used by the CLI
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

DELTAT_MODELS = ("espenak-meeus", "jpl-horizons", "iers")
DEFAULT_DELTAT_MODEL = "espenak-meeus"


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def _env_path(name: str) -> Optional[Path]:
    p = _env(name)
    return Path(p).expanduser() if p else None


def deltat_model() -> str:
    model = (_env("EPHEMCORE_DELTAT_MODEL") or DEFAULT_DELTAT_MODEL).lower()
    if model not in DELTAT_MODELS:
        raise ValueError(
            f"EPHEMCORE_DELTAT_MODEL must be one of {', '.join(DELTAT_MODELS)}; got {model!r}"
        )
    return model


def deltat_table_path() -> Optional[Path]:
    return _env_path("EPHEMCORE_DELTAT_TABLE")


def cache_dir() -> Path:
    """User cache directory ($XDG_CACHE_HOME/ephemcore or ~/.cache/ephemcore)."""
    xdg = _env("XDG_CACHE_HOME")
    return (Path(xdg).expanduser() / "ephemcore") if xdg else (Path.home() / ".cache" / "ephemcore")


def vsop_table_path() -> Optional[Path]:
    return _env_path("EPHEMCORE_VSOP_TABLE")


def jpl_kernel_path() -> Optional[Path]:
    return _env_path("EPHEMCORE_JPL_KERNEL")


def log_level(default: str = "WARNING") -> str:
    return (_env("EPHEMCORE_LOG_LEVEL") or default).upper()
