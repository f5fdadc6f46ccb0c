from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import sys
from typing import Optional, Tuple

from .core.errors import FicCalError
from .engines.astro.solar_system import SolarSystemSchema
from .engines.schema import CalendarSchema


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _add_calendar_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--calendar", default="earthlike", help="registered calendar name")
    p.add_argument("--world", default=None, help="YAML file with a calendar and/or solar_system section")
    p.add_argument("--format", default="canonical", choices=["canonical", "iso", "long", "relative"])


def _schemas(args: argparse.Namespace) -> Tuple[CalendarSchema, Optional[SolarSystemSchema]]:
    import ficcal

    calendar, solar = None, None
    if args.world:
        calendar, solar = ficcal.load_world(args.world)
    if calendar is None:
        calendar = ficcal.get_calendar(args.calendar)
    if solar is None and getattr(args, "solar", None):
        solar = ficcal.get_solar_system(args.solar)
    return calendar, solar


def _spec(args: argparse.Namespace):
    from .grammar.patterns import BUILTIN_SPECS
    return BUILTIN_SPECS[args.format]


def cmd_parse(argv: list[str]) -> int:
    import ficcal

    p = argparse.ArgumentParser(prog="ficcal parse", description="Read a date or duration and print it back")
    p.add_argument("text")
    p.add_argument("--relative-to", default=None, help="reference date for durations and year-less dates")
    _add_calendar_args(p)
    args = p.parse_args(argv)

    calendar, _ = _schemas(args)
    ref = ficcal.parse(calendar, args.relative_to) if args.relative_to else None
    if ref is not None and not isinstance(ref, ficcal.Date):
        raise SystemExit("--relative-to must be a date")
    if ref is not None:
        value = ficcal.parse_date(calendar, args.text, ref)
    else:
        value = ficcal.parse(calendar, args.text)
    print(ficcal.render(calendar, value, _spec(args)))
    return 0


def cmd_add(argv: list[str]) -> int:
    import ficcal

    p = argparse.ArgumentParser(prog="ficcal add", description="Add a duration to a date")
    p.add_argument("date")
    p.add_argument("duration", help='e.g. "1y2mo3d" or "3 months and 5 days"')
    _add_calendar_args(p)
    args = p.parse_args(argv)

    calendar, _ = _schemas(args)
    start = ficcal.parse(calendar, args.date)
    step = ficcal.parse(calendar, args.duration)
    if not isinstance(start, ficcal.Date) or not isinstance(step, ficcal.Duration):
        raise SystemExit("expected a date and a duration")
    print(ficcal.render(calendar, ficcal.add(calendar, start, step), _spec(args)))
    return 0


def cmd_diff(argv: list[str]) -> int:
    import ficcal

    p = argparse.ArgumentParser(prog="ficcal diff", description="Days between two dates (a - b)")
    p.add_argument("a")
    p.add_argument("b")
    _add_calendar_args(p)
    args = p.parse_args(argv)

    calendar, _ = _schemas(args)
    a, b = ficcal.parse(calendar, args.a), ficcal.parse(calendar, args.b)
    if not isinstance(a, ficcal.Date) or not isinstance(b, ficcal.Date):
        raise SystemExit("expected two dates")
    print(ficcal.render(calendar, ficcal.difference(calendar, a, b), _spec(args)))
    return 0


def cmd_events(argv: list[str]) -> int:
    import ficcal

    p = argparse.ArgumentParser(prog="ficcal events", description="Celestial events between two dates")
    p.add_argument("start")
    p.add_argument("end")
    p.add_argument("--solar", default="default", help="registered solar system name")
    p.add_argument("--kind", action="append", default=[], choices=[k.value for k in ficcal.EventKind],
                   help="only events of this kind (repeatable)")
    _add_calendar_args(p)
    args = p.parse_args(argv)

    calendar, solar = _schemas(args)
    start, end = ficcal.parse(calendar, args.start), ficcal.parse(calendar, args.end)
    if not isinstance(start, ficcal.Date) or not isinstance(end, ficcal.Date):
        raise SystemExit("expected two dates")

    for e in ficcal.events_in_range(solar, calendar, start, end):
        if args.kind and e.kind.value not in args.kind:
            continue
        day = ficcal.from_absolute(calendar, e.timestamp.numerator // e.timestamp.denominator)
        when = ficcal.render(calendar, day, _spec(args))
        frac = e.timestamp - day.absolute
        what = e.label or e.kind.value
        if e.others:
            what += " with " + ", ".join(e.others)
        print(f"{when}  +{float(frac):.3f}  {e.body:<10} {e.kind.value:<11} {what}")
    return 0


def cmd_calendars(argv: list[str]) -> int:
    import ficcal

    p = argparse.ArgumentParser(prog="ficcal calendars", description="List registered calendars and solar systems")
    p.parse_args(argv)

    for name in ficcal.list_calendars():
        cal = ficcal.get_calendar(name)
        eras = ", ".join(e.name for e in cal.eras) or "-"
        print(f"{name:<12} {cal.months_in_year:>2} months  {cal.days_in_week:>2}-day week  "
              f"{cal.common_year_days} days/year  eras: {eras}")
    for name in ficcal.list_solar_systems():
        solar = ficcal.get_solar_system(name)
        bodies = ", ".join(f"{b.name} ({b.period})" for b in solar.bodies)
        print(f"{name:<12} solar system: {bodies}")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="ficcal", description="Custom calendar and celestial event toolkit CLI.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="log to stderr (-vv for debug)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("parse", help="Read a date or duration and print it back", add_help=False)
    sub.add_parser("add", help="Add a duration to a date", add_help=False)
    sub.add_parser("diff", help="Days between two dates", add_help=False)
    sub.add_parser("events", help="Celestial events between two dates", add_help=False)
    sub.add_parser("calendars", help="List registered calendars and solar systems", add_help=False)

    # diagnostics
    sub.add_parser("month-grid", help="Print a month as a week grid (diagnostics)", add_help=False)
    sub.add_parser("phase-plot", help="Plot satellite illumination (diagnostics, needs numpy/matplotlib)",
                   add_help=False)

    args, rest = p.parse_known_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    commands = {
        "parse": cmd_parse,
        "add": cmd_add,
        "diff": cmd_diff,
        "events": cmd_events,
        "calendars": cmd_calendars,
    }
    try:
        if args.cmd in commands:
            return commands[args.cmd](rest)
        if args.cmd == "month-grid":
            return _run_module_main("ficcal.diagnostics.month_grid", rest)
        if args.cmd == "phase-plot":
            return _run_module_main("ficcal.diagnostics.phase_plot", rest)
    except (FicCalError, KeyError) as e:
        msg = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
        print(f"ficcal: error: {msg}", file=sys.stderr)
        return 2

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
