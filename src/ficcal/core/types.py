from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from functools import total_ordering
from typing import Optional, Tuple

from .errors import SchemaMismatchError


@total_ordering
@dataclass(frozen=True, eq=False)
class Date:
    """A validated point on a calendar's day line.

    Only coordinates are stored; the schema itself is passed to every operation.
    `calendar_id` identifies the schema the date was built against, `era` is the
    0-based era index, `month`, `day` and `weekday` are 1-based and `absolute`
    is the cached absolute day.
    """
    calendar_id: str
    era: int
    year: int
    month: int
    day: int
    weekday: int
    absolute: int

    def _same_calendar(self, other: "Date") -> None:
        if self.calendar_id != other.calendar_id:
            raise SchemaMismatchError(
                f"cannot compare dates of '{self.calendar_id}' and '{other.calendar_id}'"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        self._same_calendar(other)
        return self.absolute == other.absolute

    def __lt__(self, other: "Date") -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        self._same_calendar(other)
        return self.absolute < other.absolute

    def __hash__(self) -> int:
        return hash((self.calendar_id, self.absolute))

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d} (era {self.era})"


@dataclass(frozen=True)
class Duration:
    """Signed calendar span, applied as years, then months, then days."""
    years: int = 0
    months: int = 0
    days: int = 0

    @property
    def is_zero(self) -> bool:
        return self.years == 0 and self.months == 0 and self.days == 0

    def __neg__(self) -> "Duration":
        return Duration(-self.years, -self.months, -self.days)

    def __add__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.years + other.years, self.months + other.months, self.days + other.days)

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return self + (-other)


class EventKind(str, Enum):
    RISE = "rise"
    SET = "set"
    PHASE = "phase"
    CONJUNCTION = "conjunction"


# Tie-break order for events sharing a timestamp.
KIND_RANK = {EventKind.RISE: 0, EventKind.SET: 1, EventKind.PHASE: 2, EventKind.CONJUNCTION: 3}


@dataclass(frozen=True)
class CelestialEvent:
    body: str
    kind: EventKind
    timestamp: Fraction          # absolute days
    phase: Optional[Fraction] = None
    label: str = ""
    others: Tuple[str, ...] = ()  # conjunction partners


@dataclass(frozen=True)
class BodyState:
    body: str
    phase: Fraction
    label: str
    illumination: float
