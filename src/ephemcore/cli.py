from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from ephemcore import config
from ephemcore.core.errors import EphemcoreError
from ephemcore.core.time import AstroTime
from ephemcore.core.types import Body, Direction, Observer

_LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"

_TWILIGHT = {"civil": -6.0, "nautical": -12.0, "astronomical": -18.0}


def _parse_time(s: str) -> AstroTime:
    """YYYY-MM-DD[THH:MM[:SS]] in UTC (an explicit offset is honored), or 'now'."""
    if s == "now":
        return AstroTime.from_datetime(datetime.now(timezone.utc))
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid time {s!r}; expected YYYY-MM-DD[THH:MM[:SS]]") from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return AstroTime.from_datetime(dt)


def _observer_args(p: argparse.ArgumentParser, required: bool = True) -> None:
    p.add_argument("--lat", type=float, required=required, help="Geodetic latitude [deg, north positive]")
    p.add_argument("--lon", type=float, required=required, help="Longitude [deg, east positive]")
    p.add_argument("--height", type=float, default=0.0, help="Height above the ellipsoid [m]")


def _observer(args: argparse.Namespace) -> Optional[Observer]:
    if args.lat is None or args.lon is None:
        return None
    return Observer(args.lat, args.lon, args.height)


def _fmt(time: Optional[AstroTime]) -> str:
    return "-" if time is None else str(time)


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """Import module and run its main(argv)."""
    mod = importlib.import_module(modpath)
    fn = getattr(mod, "main", None)
    if fn is None:
        raise SystemExit(f"Module {modpath} has no main()")
    rv = fn() if len(inspect.signature(fn).parameters) == 0 else fn(argv)
    return int(rv or 0)


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    else:
        level = config.log_level()
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)


# ------------------------------------------------------------
# Commands
# ------------------------------------------------------------

def cmd_time(argv: list[str]) -> int:
    from ephemcore.core.constants import SECONDS_PER_DAY
    from ephemcore.reference.nutation import sidereal_time

    p = argparse.ArgumentParser(prog="ephemcore time", description="Time scales of an instant.")
    p.add_argument("time", type=_parse_time, help="YYYY-MM-DD[THH:MM[:SS]] (UTC) or 'now'")
    args = p.parse_args(argv)

    t: AstroTime = args.time
    print(f"UTC          = {t}")
    print(f"JD (UT)      = {t.julian_date:.6f}")
    print(f"UT  [d J2000]= {t.ut:.8f}")
    print(f"TT  [d J2000]= {t.tt:.8f}")
    print(f"ΔT  [s]      = {(t.tt - t.ut) * SECONDS_PER_DAY:.3f}   ({t.model})")
    print(f"GAST [h]     = {sidereal_time(t):.8f}")
    return 0


def cmd_moon(argv: list[str]) -> int:
    from ephemcore.geometry.illumination import illumination
    from ephemcore.reference.lunar import libration
    from ephemcore.search.moon import moon_phase

    p = argparse.ArgumentParser(prog="ephemcore moon", description="Geocentric Moon: position, phase, libration.")
    p.add_argument("time", type=_parse_time, nargs="?", default="now")
    args = p.parse_args(argv)
    t: AstroTime = args.time

    lib = libration(t)
    ill = illumination(Body.MOON, t)
    print(f"Time: {t}")
    print()
    print("Geocentric ecliptic of date (degrees):")
    print(f"  Longitude          = {lib.mlon:.6f}")
    print(f"  Latitude           = {lib.mlat:.6f}")
    print(f"  Distance [km]      = {lib.dist_km:.1f}")
    print(f"  Apparent diameter  = {lib.diam_deg:.5f}")
    print()
    print(f"Phase angle (Moon - Sun longitude) = {moon_phase(t):.4f}")
    print(f"Illuminated fraction               = {ill.phase_fraction:.4f}")
    print(f"Visual magnitude                   = {ill.mag:.2f}")
    print()
    print("Libration (degrees):")
    print(f"  Longitude = {lib.elon:+.4f}")
    print(f"  Latitude  = {lib.elat:+.4f}")
    return 0


def cmd_phases(argv: list[str]) -> int:
    from ephemcore.search.moon import next_moon_quarter, search_moon_quarter

    p = argparse.ArgumentParser(prog="ephemcore phases", description="List lunar quarters after a start time.")
    p.add_argument("start", type=_parse_time)
    p.add_argument("--count", type=int, default=8)
    args = p.parse_args(argv)

    mq = search_moon_quarter(args.start)
    for _ in range(args.count):
        print(f"{mq.time}  {mq.name}")
        mq = next_moon_quarter(mq)
    return 0


def cmd_seasons(argv: list[str]) -> int:
    from ephemcore.search.longitude import seasons

    p = argparse.ArgumentParser(prog="ephemcore seasons", description="Equinoxes and solstices of a year.")
    p.add_argument("year", type=int)
    args = p.parse_args(argv)

    s = seasons(args.year)
    print(f"March equinox     {s.mar_equinox}")
    print(f"June solstice     {s.jun_solstice}")
    print(f"September equinox {s.sep_equinox}")
    print(f"December solstice {s.dec_solstice}")
    return 0


def cmd_riseset(argv: list[str]) -> int:
    from ephemcore.search.riseset import search_altitude, search_hour_angle, search_rise_set

    p = argparse.ArgumentParser(prog="ephemcore riseset", description="Rise, culmination and set within a day.")
    p.add_argument("start", type=_parse_time)
    _observer_args(p)
    p.add_argument("--body", type=Body.parse, default=Body.SUN)
    p.add_argument("--twilight", choices=sorted(_TWILIGHT), default=None,
                   help="Also report dawn/dusk for this twilight (Sun only)")
    args = p.parse_args(argv)

    observer = _observer(args)
    body: Body = args.body
    if args.twilight is not None and body is not Body.SUN:
        p.error("--twilight applies to the Sun only")
    rise = search_rise_set(body, observer, Direction.RISE, args.start, 1.0)
    culm = search_hour_angle(body, observer, 0.0, args.start)
    sset = search_rise_set(body, observer, Direction.SET, args.start, 1.0)

    print(f"{body.value} at lat {observer.latitude:g}, lon {observer.longitude:g}, height {observer.height:g} m")
    print(f"  rise         {_fmt(rise)}")
    print(f"  culmination  {culm.time}   altitude {culm.hor.altitude:.3f} deg")
    print(f"  set          {_fmt(sset)}")

    if args.twilight is not None:
        depth = _TWILIGHT[args.twilight]
        dawn = search_altitude(Body.SUN, observer, Direction.RISE, args.start, 1.0, depth)
        dusk = search_altitude(Body.SUN, observer, Direction.SET, args.start, 1.0, depth)
        print(f"  {args.twilight} dawn  {_fmt(dawn)}")
        print(f"  {args.twilight} dusk  {_fmt(dusk)}")
    return 0


def cmd_eclipse(argv: list[str]) -> int:
    from ephemcore.search.eclipse import (
        ECLIPSE_CHOICES,
        GlobalSolarEclipseInfo,
        LocalSolarEclipseInfo,
        search_eclipses,
    )

    p = argparse.ArgumentParser(prog="ephemcore eclipse", description="List upcoming eclipses.")
    p.add_argument("start", type=_parse_time)
    p.add_argument("--which", choices=ECLIPSE_CHOICES, default="all")
    p.add_argument("--count", type=int, default=5)
    _observer_args(p, required=False)
    args = p.parse_args(argv)

    for info in search_eclipses(args.start, args.which, _observer(args), args.count):
        if isinstance(info, LocalSolarEclipseInfo):
            print(f"{info.peak_time}  solar {info.kind.value:<9} obscuration {info.obscuration:.3f}"
                  f"  sun altitude {info.peak.altitude:.1f} deg")
            print(f"    partial {info.partial_begin.time} .. {info.partial_end.time}")
            if info.total_begin is not None and info.total_end is not None:
                print(f"    {info.kind.value:<7} {info.total_begin.time} .. {info.total_end.time}")
        elif isinstance(info, GlobalSolarEclipseInfo):
            where = ""
            if info.latitude is not None and info.longitude is not None:
                where = f"  at lat {info.latitude:.2f}, lon {info.longitude:.2f}"
            print(f"{info.peak_time}  solar {info.kind.value:<9}{where}")
        else:
            print(f"{info.peak_time}  lunar {info.kind.value:<9} obscuration {info.obscuration:.3f}"
                  f"  semi-durations {info.sd_penum:.1f}/{info.sd_partial:.1f}/{info.sd_total:.1f} min")
    return 0


def cmd_transit(argv: list[str]) -> int:
    from ephemcore.search.transit import transits

    p = argparse.ArgumentParser(prog="ephemcore transit", description="Transits of Mercury or Venus.")
    p.add_argument("body", type=Body.parse, choices=[Body.MERCURY, Body.VENUS], metavar="{Mercury,Venus}")
    p.add_argument("start", type=_parse_time)
    p.add_argument("--count", type=int, default=3)
    args = p.parse_args(argv)

    stream = transits(args.body, args.start)
    for _ in range(args.count):
        tr = next(stream)
        print(f"{tr.start} .. {tr.peak} .. {tr.finish}   separation {tr.separation:.2f} arcmin")
    return 0


def cmd_update_deltat(argv: list[str]) -> int:
    from pathlib import Path

    from ephemcore.ephemeris.deltat_update import default_table_path, update_table

    p = argparse.ArgumentParser(prog="ephemcore update-deltat",
                                description="Rebuild the monthly ΔT table from IERS C04 and leap seconds.")
    p.add_argument("--out", default=None, help=f"Output CSV (default: {default_table_path()})")
    args = p.parse_args(argv)

    out = Path(args.out) if args.out else default_table_path()
    table = update_table(out)
    print(f"Monthly rows: {len(table)}   ({table[0].year:04d}-{table[0].month:02d} "
          f"to {table[-1].year:04d}-{table[-1].month:02d})")
    print(f"Wrote: {out}")
    print()
    print("To use it, set:")
    print("  export EPHEMCORE_DELTAT_MODEL=iers")
    if args.out:
        print(f'  export EPHEMCORE_DELTAT_TABLE="{out}"')
    return 0


_COMMANDS = {
    "time": (cmd_time, "Time scales (UT, TT, ΔT, sidereal time) of an instant"),
    "moon": (cmd_moon, "Geocentric Moon position, phase and libration"),
    "phases": (cmd_phases, "Upcoming lunar quarters"),
    "seasons": (cmd_seasons, "Equinoxes and solstices of a year"),
    "riseset": (cmd_riseset, "Rise, culmination, set and twilight"),
    "eclipse": (cmd_eclipse, "Upcoming lunar and solar eclipses"),
    "transit": (cmd_transit, "Transits of Mercury or Venus"),
    "update-deltat": (cmd_update_deltat, "Download IERS data and rebuild the ΔT table"),
}


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="ephemcore", description="Astronomical ephemeris and event-search toolkit.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging on stderr (-vv for debug)")
    sub = p.add_subparsers(dest="cmd", required=True)
    for name, (_, help_text) in _COMMANDS.items():
        sub.add_parser(name, help=help_text, add_help=False)
    sub.add_parser("validate-ref", help="Compare the analytic models against a JPL kernel (diagnostics)",
                   add_help=False)

    args, rest = p.parse_known_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.cmd == "validate-ref":
            return _run_module_main("ephemcore.diagnostics.validate_reference", rest)
        fn, _ = _COMMANDS[args.cmd]
        return fn(rest)
    except EphemcoreError as e:
        print(f"ephemcore {args.cmd}: error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
