from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

import ficcal
from ficcal.core.types import Date
from ficcal.engines import arithmetic as ar
from ficcal.engines.astro.events import phase_name, satellite_phase
from ficcal.engines.astro.solar_system import SolarSystemSchema
from ficcal.engines.schema import CalendarSchema


def dow_header(schema: CalendarSchema, w: int = 6) -> str:
    return " ".join((wd.abbreviation or wd.name)[:w].ljust(w) for wd in schema.weekdays).rstrip()


def cell(top: str, bot: str, w: int = 6) -> Tuple[str, str]:
    return (top[:w].ljust(w), bot[:w].ljust(w))


def month_weeks(
    schema: CalendarSchema, first: Date, solar: Optional[SolarSystemSchema] = None, body: Optional[str] = None
) -> List[List[Tuple[str, str]]]:
    """Rows of week cells for the month starting at `first`; the bottom line
    of a cell names the phase of `body`, when given."""
    width = schema.days_in_week
    length = schema.month_length(ar.internal_year(schema, first), first.month)
    sat = solar.body(body) if solar is not None and body else None

    weeks: List[List[Tuple[str, str]]] = []
    wk: List[Tuple[str, str]] = [cell("", "") for _ in range(first.weekday - 1)]
    for i in range(length):
        bot = ""
        if sat is not None:
            bot = phase_name(satellite_phase(solar, sat, first.absolute + i)).replace("_", " ")
        wk.append(cell(f"{i + 1:2d}", bot))
        if len(wk) == width:
            weeks.append(wk)
            wk = []
    if wk:
        while len(wk) < width:
            wk.append(cell("", ""))
        weeks.append(wk)
    return weeks


def render_month(
    schema: CalendarSchema, first: Date, solar: Optional[SolarSystemSchema] = None, body: Optional[str] = None
) -> str:
    header = dow_header(schema)
    title = ficcal.format_date(schema, first, ficcal.FormatSpec("{month} {year} {era}"))
    lines = [f"{schema.name}  {title}", header, "-" * len(header)]
    for wk in month_weeks(schema, first, solar, body):
        lines.append(" ".join(c[0] for c in wk).rstrip())
        if solar is not None and body:
            lines.append(" ".join(c[1] for c in wk).rstrip())
    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Print a month of a calendar as a week grid.")
    p.add_argument("--calendar", default="earthlike", help=f"one of {ficcal.list_calendars()}")
    p.add_argument("--year", type=int, default=1)
    p.add_argument("--month", type=int, default=1)
    p.add_argument("--era", default=None, help="era name or abbreviation (default: the current era)")
    p.add_argument("--solar", default=None, help="solar system whose phases to show")
    p.add_argument("--body", default=None, help="satellite to show phases for")
    args = p.parse_args(argv)

    schema = ficcal.get_calendar(args.calendar)
    solar = ficcal.get_solar_system(args.solar) if args.solar else None
    body = args.body
    if solar is not None and body is None and solar.satellites:
        body = solar.satellites[0].name

    first = ficcal.from_components(schema, args.era, args.year, args.month, 1)
    print(render_month(schema, first, solar, body))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
