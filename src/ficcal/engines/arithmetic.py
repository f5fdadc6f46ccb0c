"""
ficcal.engines.arithmetic
-------------------------
Date construction, conversion to and from the absolute day line, and
calendar arithmetic.

Every date maps to a single signed integer, its absolute day. Comparison and
differences work on that integer. Year and month steps work on internal
(era-independent) years and re-resolve the day of month against the target
year: a day past the end of its month rolls forward into the next month.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

from ..core.errors import DateError, SchemaMismatchError
from ..core.types import Date, Duration
from .schema import CalendarSchema

EraRef = Union[int, str, None]


def _check(schema: CalendarSchema, date: Date) -> None:
    if date.calendar_id != schema.calendar_id:
        raise SchemaMismatchError(
            f"date built for '{date.calendar_id}' used with calendar '{schema.calendar_id}'"
        )


# ---------------------------------------------------------
# Eras
# ---------------------------------------------------------

def era_bounds(schema: CalendarSchema, era: int) -> Tuple[Optional[int], Optional[int]]:
    """Half-open absolute-day range [start, end) of an era; None is unbounded."""
    eras = schema.effective_eras
    end = eras[era + 1].start if era + 1 < len(eras) else None
    return eras[era].start, end


def era_of_day(schema: CalendarSchema, n: int) -> int:
    found = None
    for i, e in enumerate(schema.effective_eras):
        if e.start is None or e.start <= n:
            found = i
        else:
            break
    if found is None:
        raise DateError("absolute day", n, "before the first era")
    return found


def _era_anchor(schema: CalendarSchema, era: int) -> Optional[int]:
    # Internal year counted as year 1 of the era (None: era year == internal year).
    e = schema.effective_eras[era]
    start, end = era_bounds(schema, era)
    if e.direction == 1:
        return None if start is None else schema.year_of_day(start)
    return schema.year_of_day(end - 1)


def _to_internal_year(schema: CalendarSchema, era: int, year: int) -> int:
    anchor = _era_anchor(schema, era)
    if anchor is None:
        return year
    if schema.effective_eras[era].direction == 1:
        return anchor + year - 1
    return anchor - year + 1


def _to_era_year(schema: CalendarSchema, era: int, internal: int) -> int:
    anchor = _era_anchor(schema, era)
    if anchor is None:
        return internal
    if schema.effective_eras[era].direction == 1:
        return internal - anchor + 1
    return anchor - internal + 1


def resolve_era(schema: CalendarSchema, era: EraRef) -> int:
    """Turn an era index, name or marker (None: the current era) into an index."""
    eras = schema.effective_eras
    if era is None:
        return len(eras) - 1
    if isinstance(era, str):
        try:
            return schema.era_index(era)
        except KeyError:
            raise DateError("era", era, "unknown era") from None
    if not 0 <= era < len(eras):
        raise DateError("era", era, f"calendar has {len(eras)} era(s)")
    return era


# ---------------------------------------------------------
# Construction
# ---------------------------------------------------------

def from_absolute(schema: CalendarSchema, n: int) -> Date:
    """Build the date for absolute day n."""
    era = era_of_day(schema, n)
    year = schema.year_of_day(n)
    month, day = schema.locate(year, n - schema.days_before_year(year))
    return Date(
        calendar_id=schema.calendar_id,
        era=era,
        year=_to_era_year(schema, era, year),
        month=month,
        day=day,
        weekday=(n + schema.weekday_offset) % schema.days_in_week + 1,
        absolute=n,
    )


def from_components(schema: CalendarSchema, era: EraRef, year: int, month: int, day: int) -> Date:
    """Validate (era, year, month, day) against the schema and build the date.

    Never clamps: any coordinate outside the calendar raises DateError.
    """
    idx = resolve_era(schema, era)
    if not 1 <= month <= schema.months_in_year:
        raise DateError("month", month, f"calendar has {schema.months_in_year} months")
    internal = _to_internal_year(schema, idx, year)
    length = schema.month_length(internal, month)
    if not 1 <= day <= length:
        raise DateError("day", day, f"month {month} has {length} days in year {year}")

    n = schema.days_before_year(internal) + schema.days_before_month(internal, month) + day - 1
    start, end = era_bounds(schema, idx)
    if (start is not None and n < start) or (end is not None and n >= end):
        name = schema.effective_eras[idx].name
        raise DateError("year", year, f"date falls outside era {name!r}")
    return from_absolute(schema, n)


def absolute_day(schema: CalendarSchema, date: Date) -> int:
    _check(schema, date)
    return date.absolute


def internal_year(schema: CalendarSchema, date: Date) -> int:
    _check(schema, date)
    return _to_internal_year(schema, date.era, date.year)


def _roll(schema: CalendarSchema, year: int, month: int, day: int) -> int:
    # Absolute day of (year, month, day); a day past the month end spills forward.
    return schema.days_before_year(year) + schema.days_before_month(year, month) + day - 1


def _coords(schema: CalendarSchema, n: int) -> Tuple[int, int, int]:
    year = schema.year_of_day(n)
    month, day = schema.locate(year, n - schema.days_before_year(year))
    return year, month, day


# ---------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------

def add(schema: CalendarSchema, date: Date, duration: Duration) -> Date:
    _check(schema, date)
    if duration.is_zero:
        return date

    year, month, day = internal_year(schema, date), date.month, date.day

    if duration.years:
        year, month, day = _coords(schema, _roll(schema, year + duration.years, month, day))

    if duration.months:
        total = (month - 1) + duration.months
        year += total // schema.months_in_year
        month = total % schema.months_in_year + 1
        year, month, day = _coords(schema, _roll(schema, year, month, day))

    return from_absolute(schema, _roll(schema, year, month, day) + duration.days)


def subtract(schema: CalendarSchema, date: Date, duration: Duration) -> Date:
    return add(schema, date, -duration)


def difference(schema: CalendarSchema, a: Date, b: Date) -> Duration:
    """a - b in days. Months and years are not decomposed: month lengths vary."""
    _check(schema, a)
    _check(schema, b)
    return Duration(days=a.absolute - b.absolute)


def compare(schema: CalendarSchema, a: Date, b: Date) -> int:
    _check(schema, a)
    _check(schema, b)
    return (a.absolute > b.absolute) - (a.absolute < b.absolute)


# ---------------------------------------------------------
# Queries
# ---------------------------------------------------------

def day_of_year(schema: CalendarSchema, date: Date) -> int:
    """1-based position of the date within its (internal) year."""
    return date.absolute - schema.days_before_year(internal_year(schema, date)) + 1


def month_name(schema: CalendarSchema, date: Date) -> str:
    _check(schema, date)
    return schema.months[date.month - 1].name


def weekday_name(schema: CalendarSchema, date: Date) -> str:
    _check(schema, date)
    return schema.weekdays[date.weekday - 1].name


def era_of(schema: CalendarSchema, date: Date):
    _check(schema, date)
    return schema.effective_eras[date.era]


def start_of_month(schema: CalendarSchema, date: Date) -> Date:
    _check(schema, date)
    return from_absolute(schema, date.absolute - date.day + 1)


def start_of_year(schema: CalendarSchema, date: Date) -> Date:
    return from_absolute(schema, schema.days_before_year(internal_year(schema, date)))


def next_weekday(schema: CalendarSchema, date: Date, weekday: Union[int, str]) -> Date:
    """First date strictly after `date` that falls on `weekday`."""
    _check(schema, date)
    try:
        target = schema.weekday_index(weekday) if isinstance(weekday, str) else weekday
    except KeyError:
        raise DateError("weekday", weekday, "unknown weekday") from None
    if not 1 <= target <= schema.days_in_week:
        raise DateError("weekday", weekday, f"week has {schema.days_in_week} days")
    delta = (target - date.weekday) % schema.days_in_week or schema.days_in_week
    return from_absolute(schema, date.absolute + delta)
