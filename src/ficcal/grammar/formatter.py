"""
ficcal.grammar.formatter
------------------------
Render dates and durations as text. Total over valid inputs: one rendering per
value and format spec, readable back by the parser.
"""

from __future__ import annotations

import re
from typing import Dict, List, Union

from ..core.types import Date, Duration
from ..engines import arithmetic as ar
from ..engines.schema import CalendarSchema
from .patterns import CANONICAL, FormatSpec
from .vocabulary import ordinal_suffix

_UNIT_NAMES = (("years", "year"), ("months", "month"), ("days", "day"))
_SPACES = re.compile(r"\s{2,}")


def _fields(schema: CalendarSchema, date: Date) -> Dict[str, object]:
    month = schema.months[date.month - 1]
    weekday = schema.weekdays[date.weekday - 1]
    era = schema.effective_eras[date.era]
    return {
        "day": date.day,
        "day_ord": f"{date.day}{ordinal_suffix(date.day)}",
        "month": month.name,
        "month_abbr": month.abbreviation or month.name,
        "month_num": date.month,
        "year": date.year,
        "era": era.marker,
        "era_name": era.name,
        "weekday": weekday.name,
        "weekday_abbr": weekday.abbreviation or weekday.name,
        "day_of_year": ar.day_of_year(schema, date),
    }


def format_date(schema: CalendarSchema, date: Date, spec: FormatSpec = CANONICAL) -> str:
    ar.absolute_day(schema, date)  # schema check
    values = _fields(schema, date)
    out: List[str] = []
    for part in spec.parts():
        if part.field is None:
            out.append(part.literal)
            continue
        value = values[part.field]
        if value == "":
            # Empty field (implicit unnamed era): drop the separator before it.
            if out:
                out[-1] = out[-1].rstrip(" ,")
            continue
        out.append(format(value, f"0{part.width}") if part.width and isinstance(value, int) else str(value))
    return _SPACES.sub(" ", "".join(out)).strip(" ,")


def _quantity(n: int, unit: str, singular: str) -> str:
    return f"{n} {singular if abs(n) == 1 else unit}"


def format_duration(schema: CalendarSchema, duration: Duration, spec: FormatSpec = CANONICAL) -> str:
    parts = [(getattr(duration, unit), unit, singular) for unit, singular in _UNIT_NAMES]
    parts = [p for p in parts if p[0] != 0]
    if not parts:
        return "0 days"

    signs = {n > 0 for n, _, _ in parts}
    if spec.duration_style == "relative" and len(signs) == 1:
        words = [_quantity(abs(n), unit, singular) for n, unit, singular in parts]
        body = words[0] if len(words) == 1 else ", ".join(words[:-1]) + " and " + words[-1]
        return f"in {body}" if signs == {True} else f"{body} ago"

    return ", ".join(_quantity(n, unit, singular) for n, unit, singular in parts)


def render(schema: CalendarSchema, value: Union[Date, Duration], spec: FormatSpec = CANONICAL) -> str:
    if isinstance(value, Date):
        return format_date(schema, value, spec)
    if isinstance(value, Duration):
        return format_duration(schema, value, spec)
    raise TypeError(f"cannot format {type(value).__name__}")
