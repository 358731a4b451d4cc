#!/usr/bin/env python3
from __future__ import annotations

"""
Cross-check the analytic models (VSOP87 planets, ELP Moon) against a JPL
SPK kernel and plot the angular residuals.

  EPHEMCORE_JPL_KERNEL=de440.bsp python -m ephemcore.diagnostics.validate_reference
"""

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ephemcore.core.constants import DAYS_PER_TROPICAL_YEAR, J2000_JD
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body
from ephemcore.core.vectors import angle_between
from ephemcore.ephemeris.spk import SpkEphemeris
from ephemcore.geometry.bodies import geo_vector, helio_vector

logger = logging.getLogger(__name__)

DEFAULT_BODIES = (Body.SUN, Body.MOON, Body.MERCURY, Body.VENUS, Body.MARS, Body.JUPITER, Body.SATURN)


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "ephemcore[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "ephemcore[diagnostics]"') from e


def residual_arcsec(eph: SpkEphemeris, body: Body, time: AstroTime) -> float:
    """
    Angle between the analytic and kernel positions [arcsec]: geocentric
    for the Sun and Moon, heliocentric for the planets.
    """
    if body is Body.SUN:
        # geometric, like the kernel vector
        return 3600.0 * angle_between(helio_vector(Body.EARTH, time).scale(-1.0), eph.geo_vector(body, time))
    if body is Body.MOON:
        return 3600.0 * angle_between(geo_vector(body, time), eph.geo_vector(body, time))
    return 3600.0 * angle_between(helio_vector(body, time), eph.helio_vector(body, time))


def compute_residuals(
    eph: SpkEphemeris,
    year_start: int,
    year_end: int,
    step_days: float,
    bodies=DEFAULT_BODIES,
):
    """Return (years, {body: residuals}) as numpy arrays over the kernel-clipped grid."""
    np = _need_numpy()

    first, last = eph.coverage()
    jd_start = max(J2000_JD + (year_start - 2000) * DAYS_PER_TROPICAL_YEAR, first + 1.0)
    jd_end = min(J2000_JD + (year_end - 2000) * DAYS_PER_TROPICAL_YEAR, last - 1.0)
    if jd_start >= jd_end:
        raise ValueError(f"requested years lie outside the kernel range JD {first} .. {last}")

    jds = np.arange(jd_start, jd_end, step_days)
    years = 2000.0 + (jds - J2000_JD) / DAYS_PER_TROPICAL_YEAR
    logger.info("validating %d epochs from %.0f to %.0f", len(jds), years[0], years[-1])

    residuals: Dict[Body, object] = {}
    for body in bodies:
        residuals[body] = np.array([
            residual_arcsec(eph, body, AstroTime.from_tt(float(jd) - J2000_JD)) for jd in jds
        ])
    return years, residuals


def plot_residuals(years, residuals, out_png: Path) -> Path:
    plt = _need_matplotlib()

    fig, axs = plt.subplots(len(residuals), 1, figsize=(12, 2.4 * len(residuals)), sharex=True, squeeze=False)
    for ax, (body, err) in zip(axs[:, 0], residuals.items()):
        ax.scatter(years, err, s=1, alpha=0.5)
        ax.set_title(f"{body.value}: analytic − kernel")
        ax.set_ylabel("arcsec")
        ax.grid(True, alpha=0.3)
    axs[-1, 0].set_xlabel("Year")

    fig.suptitle(f"Analytic models against JPL kernel ({years[0]:.0f} to {years[-1]:.0f})", fontsize=14)
    fig.tight_layout()
    fig.savefig(out_png, dpi=150)
    plt.close(fig)
    return out_png


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Validate VSOP87/ELP models against a JPL SPK kernel.")
    p.add_argument("--kernel", default=None, help="SPK file (default: $EPHEMCORE_JPL_KERNEL)")
    p.add_argument("--year-start", type=int, default=1900)
    p.add_argument("--year-end", type=int, default=2100)
    p.add_argument("--step-days", type=float, default=10.0)
    p.add_argument("--out-png", default="reference_validation.png")
    args = p.parse_args(argv)

    np = _need_numpy()
    eph = SpkEphemeris.load(Path(args.kernel) if args.kernel else None)
    try:
        years, residuals = compute_residuals(eph, args.year_start, args.year_end, args.step_days)
    finally:
        eph.close()

    print(f"{'body':<10}{'rms':>10}{'max':>10}  [arcsec]")
    for body, err in residuals.items():
        print(f"{body.value:<10}{float(np.sqrt(np.mean(err ** 2))):>10.2f}{float(np.max(err)):>10.2f}")

    out = plot_residuals(years, residuals, Path(args.out_png))
    print(f"Plot saved to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
