from __future__ import annotations

from typing import Iterator, List, Optional, Union

from .core.registry import CalendarRegistry
from .core.types import BodyState, CelestialEvent, Date, Duration
from .engines import arithmetic as _ar
from .engines.astro import events as _events
from .engines.astro.solar_system import SolarSystemSchema
from .engines.schema import CalendarSchema
from .grammar import formatter as _fmt
from .grammar import parser as _parser
from .grammar.patterns import CANONICAL, FormatSpec

CalendarRef = Union[str, CalendarSchema]
SolarRef = Union[str, SolarSystemSchema]

_registry: Optional[CalendarRegistry] = None

def set_registry(reg: CalendarRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> CalendarRegistry:
    if _registry is None:
        raise RuntimeError("Calendar registry not initialized")
    return _registry

def _cal(calendar: CalendarRef) -> CalendarSchema:
    return _reg().calendars.get(calendar) if isinstance(calendar, str) else calendar

def _solar(solar: SolarRef) -> SolarSystemSchema:
    return _reg().solar_systems.get(solar) if isinstance(solar, str) else solar

# ============================================================
# Registry
# ============================================================

def get_calendar(name: str) -> CalendarSchema:
    return _reg().calendars.get(name)

def list_calendars() -> List[str]:
    return _reg().calendars.list()

def register_calendar(name: str, calendar: CalendarSchema, *, overwrite: bool = False) -> None:
    _reg().calendars.register(name, calendar, overwrite=overwrite)

def get_solar_system(name: str) -> SolarSystemSchema:
    return _reg().solar_systems.get(name)

def list_solar_systems() -> List[str]:
    return _reg().solar_systems.list()

def register_solar_system(name: str, solar: SolarSystemSchema, *, overwrite: bool = False) -> None:
    _reg().solar_systems.register(name, solar, overwrite=overwrite)

# ============================================================
# Dates
# ============================================================
# Every entry point takes a schema or the name of a registered one.

def from_components(calendar: CalendarRef, era: _ar.EraRef, year: int, month: int, day: int) -> Date:
    return _ar.from_components(_cal(calendar), era, year, month, day)

def from_absolute(calendar: CalendarRef, n: int) -> Date:
    return _ar.from_absolute(_cal(calendar), n)

def absolute_day(calendar: CalendarRef, date: Date) -> int:
    return _ar.absolute_day(_cal(calendar), date)

def add(calendar: CalendarRef, date: Date, duration: Duration) -> Date:
    return _ar.add(_cal(calendar), date, duration)

def subtract(calendar: CalendarRef, date: Date, duration: Duration) -> Date:
    return _ar.subtract(_cal(calendar), date, duration)

def difference(calendar: CalendarRef, a: Date, b: Date) -> Duration:
    return _ar.difference(_cal(calendar), a, b)

def compare(calendar: CalendarRef, a: Date, b: Date) -> int:
    return _ar.compare(_cal(calendar), a, b)

def next_weekday(calendar: CalendarRef, date: Date, weekday: Union[int, str]) -> Date:
    return _ar.next_weekday(_cal(calendar), date, weekday)

# ============================================================
# Text
# ============================================================

def parse(
    calendar: CalendarRef,
    text: str,
    spec: Optional[FormatSpec] = None,
    *,
    relative_to: Optional[Date] = None,
) -> Union[Date, Duration]:
    return _parser.parse(_cal(calendar), text, spec, relative_to=relative_to)

def parse_date(calendar: CalendarRef, text: str, relative_to: Date, spec: Optional[FormatSpec] = None) -> Date:
    return _parser.parse_date(_cal(calendar), text, relative_to, spec)

def render(calendar: CalendarRef, value: Union[Date, Duration], spec: FormatSpec = CANONICAL) -> str:
    return _fmt.render(_cal(calendar), value, spec)

def format_date(calendar: CalendarRef, date: Date, spec: FormatSpec = CANONICAL) -> str:
    return _fmt.format_date(_cal(calendar), date, spec)

def format_duration(calendar: CalendarRef, duration: Duration, spec: FormatSpec = CANONICAL) -> str:
    return _fmt.format_duration(_cal(calendar), duration, spec)

# ============================================================
# Sky
# ============================================================

def events_in_range(
    solar: SolarRef,
    calendar: CalendarRef,
    start: Date,
    end: Date,
    *,
    after: Optional[CelestialEvent] = None,
) -> Iterator[CelestialEvent]:
    return _events.events_in_range(_solar(solar), _cal(calendar), start, end, after=after)

def body_states(solar: SolarRef, calendar: CalendarRef, date: Date) -> List[BodyState]:
    return _events.body_states(_solar(solar), _cal(calendar), date)
