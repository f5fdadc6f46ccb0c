"""ficcal public API.

Calendars and solar systems are plain immutable schemas; every operation takes
the schema (or the name of a registered one) as its first argument.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    get_calendar,
    list_calendars,
    register_calendar,
    get_solar_system,
    list_solar_systems,
    register_solar_system,
    from_components,
    from_absolute,
    absolute_day,
    add,
    subtract,
    difference,
    compare,
    next_weekday,
    parse,
    parse_date,
    render,
    format_date,
    format_duration,
    events_in_range,
    body_states,
)
from .config import (
    check_calendar,
    check_solar_system,
    calendar_from_dict,
    solar_from_dict,
    load_calendar,
    load_solar_system,
    load_world,
)
from .core.errors import DateError, FicCalError, ParseError, SchemaError, SchemaMismatchError
from .core.types import BodyState, CelestialEvent, Date, Duration, EventKind
from .engines.astro.solar_system import Body, BodyKind, SolarSystemSchema
from .engines.leap import LeapRule
from .engines.schema import CalendarSchema, Era, MonthDef, WeekdayDef
from .grammar.patterns import CANONICAL, ISO, LONG, RELATIVE, FormatSpec

__all__ = [
    "get_calendar",
    "list_calendars",
    "register_calendar",
    "get_solar_system",
    "list_solar_systems",
    "register_solar_system",
    "from_components",
    "from_absolute",
    "absolute_day",
    "add",
    "subtract",
    "difference",
    "compare",
    "next_weekday",
    "parse",
    "parse_date",
    "render",
    "format_date",
    "format_duration",
    "events_in_range",
    "body_states",
    "check_calendar",
    "check_solar_system",
    "calendar_from_dict",
    "solar_from_dict",
    "load_calendar",
    "load_solar_system",
    "load_world",
    "FicCalError",
    "SchemaError",
    "DateError",
    "ParseError",
    "SchemaMismatchError",
    "Date",
    "Duration",
    "EventKind",
    "CelestialEvent",
    "BodyState",
    "CalendarSchema",
    "MonthDef",
    "WeekdayDef",
    "Era",
    "LeapRule",
    "SolarSystemSchema",
    "Body",
    "BodyKind",
    "FormatSpec",
    "CANONICAL",
    "ISO",
    "LONG",
    "RELATIVE",
]
