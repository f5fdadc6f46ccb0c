# tests/test_api.py

import pytest

import ficcal
from ficcal import Duration
from ficcal.engines.specs import DECIMAL


def test_builtin_registry():
    assert {"decimal", "earthlike", "reckoning"} <= set(ficcal.list_calendars())
    assert ficcal.list_solar_systems() == ["default", "twin-moons"]
    assert ficcal.get_calendar("decimal") is DECIMAL
    with pytest.raises(KeyError, match="Available"):
        ficcal.get_calendar("gregorian")


def test_register_calendar():
    cal = ficcal.calendar_from_dict({"name": "tiny", "months": [{"name": "Only", "days": 3}], "weekdays": ["Sol"]})
    ficcal.register_calendar("tiny-test", cal)
    assert "tiny-test" in ficcal.list_calendars()
    with pytest.raises(KeyError, match="already exists"):
        ficcal.register_calendar("tiny-test", DECIMAL)
    ficcal.register_calendar("tiny-test", DECIMAL, overwrite=True)
    assert ficcal.get_calendar("tiny-test") is DECIMAL


def test_entry_points_accept_names():
    d = ficcal.from_components("earthlike", None, 2024, 2, 29)
    assert ficcal.render("earthlike", ficcal.add("earthlike", d, Duration(years=1))) == "1 March 2025"
    assert ficcal.parse("earthlike", "29 February 2024") == d
    assert ficcal.parse_date("earthlike", "yesterday", d) == ficcal.from_components("earthlike", None, 2024, 2, 28)
    assert ficcal.difference("earthlike", ficcal.from_absolute("earthlike", 10), ficcal.from_absolute("earthlike", 3)) \
        == Duration(days=7)
    assert ficcal.compare("earthlike", d, d) == 0
    assert ficcal.absolute_day("earthlike", d) == d.absolute
    assert ficcal.format_duration("earthlike", Duration(days=-2), ficcal.RELATIVE) == "2 days ago"


def test_sky_entry_points():
    start = ficcal.from_absolute("earthlike", 0)
    end = ficcal.from_absolute("earthlike", 28)
    moon = [e for e in ficcal.events_in_range("default", "earthlike", start, end) if e.body == "Moon"]
    assert [e.label for e in moon] == ["new", "first_quarter", "full", "last_quarter"]
    states = ficcal.body_states("default", "earthlike", end)
    assert [s.body for s in states] == ["Sun", "Moon"]


def test_error_hierarchy():
    assert issubclass(ficcal.SchemaError, ficcal.FicCalError)
    assert issubclass(ficcal.DateError, ValueError)
    assert issubclass(ficcal.ParseError, ficcal.FicCalError)
    assert not issubclass(ficcal.SchemaMismatchError, ficcal.FicCalError)
