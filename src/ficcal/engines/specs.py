from __future__ import annotations

from fractions import Fraction
from typing import Dict

from .astro.solar_system import Body, BodyKind, SolarSystemSchema
from .leap import LeapRule
from .schema import CalendarSchema, Era, MonthDef, WeekdayDef


# ============================================================
# EARTH-LIKE
# ============================================================

# Day 0 is 1 January of year 1, a Monday.
GREGORIAN_RULE = LeapRule(((4, True), (100, False), (400, True)))

EARTHLIKE = CalendarSchema(
    name="earthlike",
    months=(
        MonthDef("January", 31, "Jan"),
        MonthDef("February", 28, "Feb", leap_days=1),
        MonthDef("March", 31, "Mar"),
        MonthDef("April", 30, "Apr"),
        MonthDef("May", 31),
        MonthDef("June", 30, "Jun"),
        MonthDef("July", 31, "Jul"),
        MonthDef("August", 31, "Aug"),
        MonthDef("September", 30, "Sep"),
        MonthDef("October", 31, "Oct"),
        MonthDef("November", 30, "Nov"),
        MonthDef("December", 31, "Dec"),
    ),
    weekdays=(
        WeekdayDef("Monday", "Mon"),
        WeekdayDef("Tuesday", "Tue"),
        WeekdayDef("Wednesday", "Wed"),
        WeekdayDef("Thursday", "Thu"),
        WeekdayDef("Friday", "Fri"),
        WeekdayDef("Saturday", "Sat"),
        WeekdayDef("Sunday", "Sun"),
    ),
    leap_rule=GREGORIAN_RULE,
)


# ============================================================
# RECKONING
# ============================================================

# Twelve 30-day months and five single festival days, 365 days; Midsummer
# gains a second day every fourth year. A ten-day week. Years before day 0
# count backwards (Before Reckoning), from day 0 on forwards (Dale Reckoning).
RECKONING = CalendarSchema(
    name="reckoning",
    months=(
        MonthDef("Hammer", 30),
        MonthDef("Midwinter", 1),
        MonthDef("Alturiak", 30),
        MonthDef("Ches", 30),
        MonthDef("Tarsakh", 30),
        MonthDef("Greengrass", 1),
        MonthDef("Mirtul", 30),
        MonthDef("Kythorn", 30),
        MonthDef("Flamerule", 30),
        MonthDef("Midsummer", 1, leap_days=1),
        MonthDef("Eleasis", 30),
        MonthDef("Eleint", 30),
        MonthDef("Highharvestide", 1),
        MonthDef("Marpenoth", 30),
        MonthDef("Uktar", 30),
        MonthDef("Moonfeast", 1),
        MonthDef("Nightal", 30),
    ),
    weekdays=tuple(
        WeekdayDef(name)
        for name in (
            "Firstday", "Twoday", "Threeday", "Fourday", "Fiveday",
            "Sixday", "Sevenday", "Eightday", "Nineday", "Tenday",
        )
    ),
    eras=(
        Era("Before Reckoning", start=None, direction=-1, abbreviation="BR"),
        Era("Dale Reckoning", start=0, abbreviation="DR"),
    ),
    leap_rule=LeapRule(((4, True),)),
)


# ============================================================
# DECIMAL
# ============================================================

DECIMAL = CalendarSchema(
    name="decimal",
    months=(MonthDef("Prima", 10), MonthDef("Secunda", 10), MonthDef("Tertia", 10)),
    weekdays=tuple(WeekdayDef(name) for name in ("Alpha", "Beta", "Gamma", "Delta", "Epsilon")),
)


# ============================================================
# SOLAR SYSTEMS
# ============================================================

DEFAULT_SOLAR = SolarSystemSchema(
    name="default",
    bodies=(
        Body("Sun", 1, kind=BodyKind.PRIMARY),
        Body("Moon", 28),
    ),
)

TWIN_MOONS = SolarSystemSchema(
    name="twin-moons",
    bodies=(
        Body("Sun", 1, kind=BodyKind.PRIMARY),
        Body("Selune", Fraction(487, 16), subdivisions=8),
        Body("Shard", 12, phase_offset=Fraction(1, 2)),
    ),
)


ALL_CALENDARS: Dict[str, CalendarSchema] = {
    "earthlike": EARTHLIKE,
    "reckoning": RECKONING,
    "decimal": DECIMAL,
}

ALL_SOLAR_SYSTEMS: Dict[str, SolarSystemSchema] = {
    "default": DEFAULT_SOLAR,
    "twin-moons": TWIN_MOONS,
}
