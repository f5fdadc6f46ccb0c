from __future__ import annotations
from ficcal.core.registry import CalendarRegistry
from ficcal.engines.specs import ALL_CALENDARS, ALL_SOLAR_SYSTEMS

def build_registry() -> CalendarRegistry:
    reg = CalendarRegistry()
    for name, schema in ALL_CALENDARS.items():
        reg.calendars.register(name, schema)
    for name, solar in ALL_SOLAR_SYSTEMS.items():
        reg.solar_systems.register(name, solar)
    return reg
