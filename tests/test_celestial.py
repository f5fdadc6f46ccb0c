# tests/test_celestial.py

from fractions import Fraction

import pytest

from ficcal import Body, BodyKind, EventKind, SchemaError, SolarSystemSchema
from ficcal.engines import arithmetic as ar
from ficcal.engines.astro.events import (
    body_states,
    boundary_label,
    events_between,
    events_in_range,
    phase_name,
    satellite_phase,
)
from ficcal.engines.specs import DECIMAL, DEFAULT_SOLAR, EARTHLIKE, TWIN_MOONS


@pytest.fixture
def two_body():
    return SolarSystemSchema(
        name="two-body",
        bodies=(Body("Sun", 1, kind=BodyKind.PRIMARY), Body("Moon", 10)),
    )


def day(n, cal=EARTHLIKE):
    return ar.from_absolute(cal, n)


def test_two_body_ten_days(two_body):
    events = list(events_in_range(two_body, EARTHLIKE, day(0), day(10)))

    phases = [e for e in events if e.kind == EventKind.PHASE]
    assert [e.label for e in phases] == ["new", "first_quarter", "full", "last_quarter"]
    assert [e.timestamp for e in phases] == [0, Fraction(5, 2), 5, Fraction(15, 2)]
    assert sum(e.label == "full" for e in phases) == 1
    assert sum(e.label == "new" for e in phases) == 1

    rises = [e.timestamp for e in events if e.kind == EventKind.RISE]
    sets = [e.timestamp for e in events if e.kind == EventKind.SET]
    assert rises == list(range(10))
    assert sets == [Fraction(2 * k + 1, 2) for k in range(10)]

    stamps = [e.timestamp for e in events]
    assert stamps == sorted(stamps)
    # ties: the primary comes first
    assert (events[0].body, events[0].kind) == ("Sun", EventKind.RISE)
    assert (events[1].body, events[1].label) == ("Moon", "new")


def test_range_is_half_open(two_body):
    events = list(events_between(two_body, 5, 10))
    assert events[0].timestamp == 5
    assert all(5 <= e.timestamp < 10 for e in events)
    assert list(events_between(two_body, 3, 3)) == []


def test_resume_after_any_event(two_body):
    everything = list(events_between(two_body, 0, 30))
    for i, e in enumerate(everything):
        assert list(events_between(two_body, 0, 30, after=e)) == everything[i + 1:]


def test_phase_offsets_are_relative_to_the_primary():
    solar = SolarSystemSchema(
        name="offset",
        bodies=(Body("Sun", 1, Fraction(1, 4), kind=BodyKind.PRIMARY), Body("Moon", 8, Fraction(1, 4))),
    )
    moon = solar.body("moon")
    assert satellite_phase(solar, moon, 0) == 0
    first = next(e for e in events_between(solar, 0, 8) if e.body == "Moon")
    assert (first.timestamp, first.label) == (0, "new")
    # the primary rises when its own cycle wraps to 0
    rise = next(e for e in events_between(solar, 0, 8) if e.kind == EventKind.RISE)
    assert rise.timestamp == Fraction(3, 4)


def test_finer_subdivisions():
    solar = SolarSystemSchema(name="fine", bodies=(Body("Moon", 8, subdivisions=8),))
    labels = [e.label for e in events_between(solar, 0, 8)]
    assert labels == [
        "new", "waxing_crescent", "first_quarter", "waxing_gibbous",
        "full", "waning_gibbous", "last_quarter", "waning_crescent",
    ]
    assert boundary_label(1, 12) == "phase_1_of_12"
    assert boundary_label(3, 12) == "first_quarter"


def conjunctions(solar, start, end):
    return [e for e in events_between(solar, start, end) if e.kind == EventKind.CONJUNCTION]


def test_conjunctions_at_exact_alignments():
    solar = SolarSystemSchema(
        name="pair",
        bodies=(Body("Swift", 10), Body("Slow", 20, Fraction(1, 8))),
    )
    conj = conjunctions(solar, 0, 60)
    assert [e.timestamp for e in conj] == [Fraction(5, 2), Fraction(45, 2), Fraction(85, 2)]
    assert all((e.body, e.others) == ("Swift", ("Slow",)) for e in conj)
    swift, slow = solar.bodies
    for e in conj:
        assert satellite_phase(solar, swift, e.timestamp) == satellite_phase(solar, slow, e.timestamp)


def test_mid_day_alignments_are_kept():
    solar = SolarSystemSchema(name="pair", bodies=(Body("A", 3), Body("B", 5)))
    stamps = [e.timestamp for e in conjunctions(solar, 0, 31)]
    assert stamps == [0, Fraction(15, 2), 15, Fraction(45, 2), 30]


def test_three_way_conjunction_is_one_event_per_body():
    solar = SolarSystemSchema(name="triple", bodies=(Body("A", 2), Body("B", 3), Body("C", 6)))
    conj = conjunctions(solar, 0, 1)
    assert [(e.body, e.timestamp, e.others) for e in conj] == [
        ("A", 0, ("B", "C")),
        ("B", 0, ("C",)),
    ]


def test_conjunction_tolerance_groups_near_alignments():
    bodies = (Body("A", 10), Body("B", 20), Body("C", 20, Fraction(1, 64)))

    loose = SolarSystemSchema(name="loose", bodies=bodies, conjunction_tolerance=Fraction(1, 32))
    conj = conjunctions(loose, 0, 60)
    assert [e.timestamp for e in conj] == [0, 20, 40]
    assert all(e.others == ("B", "C") for e in conj)

    strict = SolarSystemSchema(name="strict", bodies=bodies, conjunction_tolerance=0)
    conj = conjunctions(strict, 0, 30)
    assert [(e.timestamp, e.others) for e in conj] == [
        (0, ("B",)),
        (Fraction(5, 16), ("C",)),
        (20, ("B",)),
        (20 + Fraction(5, 16), ("C",)),
    ]


def test_equal_periods_never_conjoin():
    solar = SolarSystemSchema(name="twins", bodies=(Body("A", 10), Body("B", 10, Fraction(1, 2))))
    assert not any(e.kind == EventKind.CONJUNCTION for e in events_between(solar, 0, 100))


def test_body_states():
    states = {s.body: s for s in body_states(DEFAULT_SOLAR, EARTHLIKE, day(14))}
    assert states["Moon"].phase == Fraction(1, 2)
    assert states["Moon"].label == "full"
    assert states["Moon"].illumination == pytest.approx(1.0)
    assert states["Sun"].label == "day"

    states = {s.body: s for s in body_states(DEFAULT_SOLAR, EARTHLIKE, day(0))}
    assert states["Moon"].label == "new"
    assert states["Moon"].illumination == pytest.approx(0.0)


def test_phase_name_is_nearest_octant():
    assert phase_name(Fraction(0)) == "new"
    assert phase_name(Fraction(15, 16)) == "new"
    assert phase_name(Fraction(1, 4)) == "first_quarter"
    assert phase_name(Fraction(17, 32)) == "full"
    assert phase_name(Fraction(9, 16)) == "waning_gibbous"


def test_builtin_systems_run():
    events = list(events_in_range(TWIN_MOONS, DECIMAL, day(0, DECIMAL), day(90, DECIMAL)))
    assert any(e.body == "Selune" and e.label == "waxing_crescent" for e in events)
    assert any(e.kind == EventKind.CONJUNCTION for e in events)


def test_dates_must_match_the_calendar(two_body):
    with pytest.raises(AssertionError):
        events_in_range(two_body, DECIMAL, day(0), day(10))


def test_invalid_solar_system_lists_every_problem():
    with pytest.raises(SchemaError) as exc:
        SolarSystemSchema(
            name="bad",
            bodies=(
                Body("Sun", 1, kind=BodyKind.PRIMARY),
                Body("Other Sun", 2, kind=BodyKind.PRIMARY),
                Body("Moon", 0, Fraction(3, 2), subdivisions=6),
            ),
            conjunction_tolerance=Fraction(1, 2),
        )
    text = "\n".join(exc.value.violations)
    assert "at most one primary" in text
    assert "period must be > 0" in text
    assert "phase_offset must be in [0, 1)" in text
    assert "multiple of 4" in text
    assert "conjunction_tolerance" in text
