"""
ficcal.engines.astro.events
---------------------------
Celestial events over a range of the absolute day line.

All events are solved for in closed form from the bodies' rational periods:

  * primary:    cycle position c(t) = t/P + o; RISE at c = 0, SET at c = 1/2 (mod 1)
  * satellite:  phase p(t) = t/P + o - o_primary; a boundary at every multiple of
                1/subdivisions (0 new, 1/4 first quarter, 1/2 full, 3/4 last quarter)
  * conjunction: the relative phase of two satellites moves at the synodic
                rate 1/Pa - 1/Pb, so exact alignments are equally spaced. A
                satellite aligning with several later-listed satellites within
                the tolerance yields one event naming all of them.

Each body yields its own ascending streams; the streams are merged.
Nothing is cached between calls: to resume, pass the last event seen.
"""

from __future__ import annotations

import heapq
import logging
import math
from fractions import Fraction
from typing import Iterator, List, Optional, Tuple, Union

from ...core.types import KIND_RANK, BodyState, CelestialEvent, Date, EventKind
from .. import arithmetic as ar
from ..schema import CalendarSchema
from .solar_system import Body, SolarSystemSchema

logger = logging.getLogger(__name__)

NumT = Union[int, Fraction]

OCTANT_NAMES = (
    "new", "waxing_crescent", "first_quarter", "waxing_gibbous",
    "full", "waning_gibbous", "last_quarter", "waning_crescent",
)

HALF = Fraction(1, 2)


def _ceil(x: Fraction) -> int:
    return -((-x.numerator) // x.denominator)


def boundary_label(k: int, n: int) -> str:
    """Name of phase boundary k out of n per cycle."""
    k %= n
    if (8 * k) % n == 0:
        return OCTANT_NAMES[8 * k // n]
    return f"phase_{k}_of_{n}"


def phase_name(phase: Fraction) -> str:
    """Name of the octant nearest to `phase`."""
    return OCTANT_NAMES[math.floor(phase * 8 + HALF) % 8]


def _reference_offset(solar: SolarSystemSchema) -> Fraction:
    primary = solar.primary
    return primary.phase_offset if primary else Fraction(0)


def satellite_phase(solar: SolarSystemSchema, body: Body, t: NumT) -> Fraction:
    """Phase of a satellite at time t, 0 = new (aligned with the primary)."""
    return (Fraction(t) / body.period + body.phase_offset - _reference_offset(solar)) % 1


def illumination(phase: Fraction) -> float:
    return (1 - math.cos(2 * math.pi * float(phase))) / 2


# ---------------------------------------------------------
# Per-body streams
# ---------------------------------------------------------

def _primary_events(body: Body, start: Fraction, end: Fraction) -> Iterator[CelestialEvent]:
    j = _ceil((start / body.period + body.phase_offset) * 2)
    while True:
        t = (Fraction(j, 2) - body.phase_offset) * body.period
        if t >= end:
            return
        kind = EventKind.RISE if j % 2 == 0 else EventKind.SET
        yield CelestialEvent(body=body.name, kind=kind, timestamp=t)
        j += 1


def _phase_events(solar: SolarSystemSchema, body: Body, start: Fraction, end: Fraction) -> Iterator[CelestialEvent]:
    n = body.subdivisions
    offset = body.phase_offset - _reference_offset(solar)
    k = _ceil((start / body.period + offset) * n)
    while True:
        t = (Fraction(k, n) - offset) * body.period
        if t >= end:
            return
        yield CelestialEvent(
            body=body.name,
            kind=EventKind.PHASE,
            timestamp=t,
            phase=Fraction(k % n, n),
            label=boundary_label(k, n),
        )
        k += 1


def _alignments(a: Body, b: Body, start: Fraction, end: Fraction) -> Iterator[Fraction]:
    rate = 1 / a.period - 1 / b.period
    if rate == 0:
        # Same period: the phase gap never changes, no discrete event.
        return
    shift = a.phase_offset - b.phase_offset
    if rate < 0:
        rate, shift = -rate, -shift

    # Alignment k happens at t_k = (k - shift) / rate.
    k = _ceil(start * rate + shift)
    while True:
        t_k = (k - shift) / rate
        if t_k >= end:
            return
        yield t_k
        k += 1


def _conjunction_events(
    solar: SolarSystemSchema, a: Body, partners: List[Body], start: Fraction, end: Fraction
) -> Iterator[CelestialEvent]:
    by_name = {b.name: b for b in partners}

    def tagged(i: int, b: Body) -> Iterator[Tuple[Fraction, int, str]]:
        for t in _alignments(a, b, start, end):
            yield t, i, b.name

    streams = [tagged(i, b) for i, b in enumerate(partners)]

    def event(t: Fraction, others: List[str]) -> CelestialEvent:
        return CelestialEvent(
            body=a.name,
            kind=EventKind.CONJUNCTION,
            timestamp=t,
            phase=satellite_phase(solar, a, t),
            label="conjunction",
            others=tuple(others),
        )

    # Alignments with different partners join the open conjunction while the
    # partner is within tolerance of `a` at its timestamp.
    t0, others = None, []
    for t, _, name in heapq.merge(*streams):
        if t0 is not None and name not in others:
            gap = (satellite_phase(solar, a, t0) - satellite_phase(solar, by_name[name], t0)) % 1
            if min(gap, 1 - gap) <= solar.conjunction_tolerance:
                others.append(name)
                continue
        if t0 is not None:
            yield event(t0, others)
        t0, others = t, [name]
    if t0 is not None:
        yield event(t0, others)


# ---------------------------------------------------------
# Queries
# ---------------------------------------------------------

def _sort_key(solar: SolarSystemSchema):
    rank = {b.name: i for i, b in enumerate(solar.bodies)}

    def key(e: CelestialEvent) -> Tuple[Fraction, int, int]:
        return (e.timestamp, rank[e.body], KIND_RANK[e.kind])

    return key


def events_between(
    solar: SolarSystemSchema,
    start: NumT,
    end: NumT,
    *,
    after: Optional[CelestialEvent] = None,
) -> Iterator[CelestialEvent]:
    """Events with start <= timestamp < end (absolute days), in ascending order.

    With `after`, the sequence resumes right after that event. The streams are
    still read from `start`, since a conjunction can group alignments that
    straddle `after`.
    """
    start, end = Fraction(start), Fraction(end)
    key = _sort_key(solar)
    logger.debug("celestial query %s: [%s, %s) after=%s", solar.name, start, end, after)

    streams: List[Iterator[CelestialEvent]] = []
    for body in solar.bodies:
        if body.is_primary:
            streams.append(_primary_events(body, start, end))
        else:
            streams.append(_phase_events(solar, body, start, end))
    sats = solar.satellites
    for i, a in enumerate(sats[:-1]):
        streams.append(_conjunction_events(solar, a, list(sats[i + 1:]), start, end))

    floor_key = key(after) if after is not None else None
    prev = None
    for event in heapq.merge(*streams, key=key):
        k = key(event)
        if floor_key is not None and k <= floor_key:
            continue
        if k == prev:
            continue
        prev = k
        yield event


def events_in_range(
    solar: SolarSystemSchema,
    calendar: CalendarSchema,
    start: Date,
    end: Date,
    *,
    after: Optional[CelestialEvent] = None,
) -> Iterator[CelestialEvent]:
    """Lazy, finite sequence of events from the start of `start` up to (not
    including) the start of `end`."""
    return events_between(
        solar, ar.absolute_day(calendar, start), ar.absolute_day(calendar, end), after=after
    )


def body_states(solar: SolarSystemSchema, calendar: CalendarSchema, date: Date) -> List[BodyState]:
    """Phase of every body at the start of `date`."""
    t = ar.absolute_day(calendar, date)
    out = []
    for body in solar.bodies:
        if body.is_primary:
            c = (Fraction(t) / body.period + body.phase_offset) % 1
            up = c < HALF
            out.append(BodyState(body.name, c, "day" if up else "night", 1.0 if up else 0.0))
        else:
            p = satellite_phase(solar, body, t)
            out.append(BodyState(body.name, p, phase_name(p), illumination(p)))
    return out
