# tests/test_properties.py
"""
Property-based tests for the calendar and sky invariants using Hypothesis.
"""

from datetime import date

from hypothesis import given, settings
from hypothesis import strategies as st

from ficcal import (
    CANONICAL,
    Body,
    BodyKind,
    CalendarSchema,
    Duration,
    Era,
    LeapRule,
    MonthDef,
    SolarSystemSchema,
    WeekdayDef,
)
from ficcal.engines import arithmetic as ar
from ficcal.engines.astro.events import events_between
from ficcal.engines.specs import ALL_CALENDARS, EARTHLIKE
from ficcal.grammar.formatter import render
from ficcal.grammar.parser import parse

# Eras change mid-year, a backward era sits between two forward ones and
# the leap year adds several days to a single month.
SPLIT_ERAS = CalendarSchema(
    name="split-eras",
    months=(
        MonthDef("Frost", 20),
        MonthDef("Thaw", 25, leap_days=3),
        MonthDef("Bloom", 20),
        MonthDef("Ember", 15),
    ),
    weekdays=tuple(WeekdayDef(name) for name in ("Dawnrest", "Toil", "Market", "Ash")),
    eras=(
        Era("Founding", start=None),
        Era("Silence", start=100, direction=-1),
        Era("Restoration", start=250),
    ),
    leap_rule=LeapRule(((3, True),)),
)

calendars = st.sampled_from(sorted(ALL_CALENDARS.values(), key=lambda c: c.name) + [SPLIT_ERAS])
days = st.integers(min_value=-2_000_000, max_value=2_000_000)
small = st.integers(min_value=-5000, max_value=5000)


# ============================================================
# Absolute day line
# ============================================================

@given(calendars, days)
def test_absolute_day_bijection(cal, n):
    d = ar.from_absolute(cal, n)
    assert ar.absolute_day(cal, d) == n
    assert ar.from_components(cal, d.era, d.year, d.month, d.day) == d


@given(st.dates())
def test_earthlike_agrees_with_datetime(ref: date):
    d = ar.from_components(EARTHLIKE, None, ref.year, ref.month, ref.day)
    assert d.absolute == ref.toordinal() - 1
    assert d.weekday == ref.isoweekday()


@given(calendars, days, days)
def test_compare_is_sign_of_absolute_difference(cal, a, b):
    da, db = ar.from_absolute(cal, a), ar.from_absolute(cal, b)
    assert ar.compare(cal, da, db) == (a > b) - (a < b)


# ============================================================
# Arithmetic
# ============================================================

@given(calendars, days, small)
def test_difference_undoes_day_addition(cal, n, k):
    d = ar.from_absolute(cal, n)
    assert ar.difference(cal, ar.add(cal, d, Duration(days=k)), d) == Duration(days=k)


@given(calendars, days)
def test_adding_zero_is_identity(cal, n):
    d = ar.from_absolute(cal, n)
    assert ar.add(cal, d, Duration()) == d


@given(calendars, days, st.integers(-300, 300), st.integers(-300, 300))
def test_month_steps_keep_day_when_it_fits(cal, n, years, months):
    d = ar.start_of_month(cal, ar.from_absolute(cal, n))
    out = ar.add(cal, d, Duration(years=years, months=months))
    # the 1st of a month always exists, so nothing rolls over
    assert out.day == 1
    assert (out.month - 1 - (d.month - 1) - months) % cal.months_in_year == 0


# ============================================================
# Text
# ============================================================

@settings(max_examples=200)
@given(calendars, days)
def test_canonical_round_trip_dates(cal, n):
    d = ar.from_absolute(cal, n)
    assert parse(cal, render(cal, d, CANONICAL), CANONICAL) == d


@given(st.builds(Duration, small, small, small))
def test_canonical_round_trip_durations(dur):
    assert parse(EARTHLIKE, render(EARTHLIKE, dur, CANONICAL), CANONICAL) == dur


# ============================================================
# Sky
# ============================================================

periods = st.fractions(min_value=1, max_value=60, max_denominator=8)


@settings(max_examples=50, deadline=None)
@given(periods, periods, periods, st.integers(-500, 500), st.integers(1, 120))
def test_event_streams_are_ordered_and_resumable(p1, p2, p3, start, length):
    solar = SolarSystemSchema(
        name="prop",
        bodies=(
            Body("Sun", 1, kind=BodyKind.PRIMARY),
            Body("A", p1),
            Body("B", p2, subdivisions=8),
            Body("C", p3),
        ),
    )
    events = list(events_between(solar, start, start + length))
    stamps = [e.timestamp for e in events]
    assert stamps == sorted(stamps)
    assert all(start <= t < start + length for t in stamps)
    keys = [(e.body, e.kind, e.timestamp) for e in events]
    assert len(keys) == len(set(keys))
    if events:
        cut = len(events) // 2
        assert list(events_between(solar, start, start + length, after=events[cut])) == events[cut + 1:]
