"""
ficcal.engines.schema
---------------------
Immutable description of a calendar: months, weekdays, eras and the leap rule.

A schema is validated once, at construction, and every later operation trusts
it. Internal years run over all integers; absolute day 0 is the first day of
the first month of internal year 1.
"""

from __future__ import annotations

import hashlib
import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core.errors import SchemaError
from ..grammar.vocabulary import reserved_words
from .leap import LeapRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthDef:
    name: str
    days: int
    abbreviation: Optional[str] = None
    leap_days: int = 0   # intercalary days gained in a leap year


@dataclass(frozen=True)
class WeekdayDef:
    name: str
    abbreviation: Optional[str] = None


@dataclass(frozen=True)
class Era:
    """A named stretch of the day line with its own year count.

    `start` is the absolute day the era begins on (None: unbounded to the
    past, first era only). A forward era (direction +1) counts its first year
    as 1; a backward era (direction -1) counts year 1 as the year just before
    the next era starts, and years grow into the past.
    """
    name: str
    start: Optional[int] = None
    direction: int = 1
    abbreviation: Optional[str] = None

    @property
    def marker(self) -> str:
        return self.abbreviation or self.name


IMPLICIT_ERA = Era(name="")


def calendar_violations(
    name: str,
    months: Sequence[MonthDef],
    weekdays: Sequence[WeekdayDef],
    eras: Sequence[Era],
    leap_rule: LeapRule,
) -> List[str]:
    """Return every violated structural rule (empty list when consistent)."""
    out: List[str] = []

    if not name:
        out.append("calendar name must not be empty")

    if not months:
        out.append("calendar must define at least one month")
    for i, m in enumerate(months, start=1):
        if m.days < 1:
            out.append(f"month {i} ({m.name!r}): length must be >= 1, got {m.days}")
        if m.leap_days < 0:
            out.append(f"month {i} ({m.name!r}): leap_days must be >= 0, got {m.leap_days}")

    if not weekdays:
        out.append("calendar must define at least one weekday")

    prev_start: Optional[int] = None
    for i, e in enumerate(eras):
        if e.direction not in (1, -1):
            out.append(f"era {i} ({e.name!r}): direction must be +1 or -1, got {e.direction}")
        if e.start is None:
            if i > 0:
                out.append(f"era {i} ({e.name!r}): only the first era may have no start")
        else:
            if prev_start is not None and e.start <= prev_start:
                out.append(
                    f"era {i} ({e.name!r}): start {e.start} is not after the previous era's start {prev_start}"
                )
            prev_start = e.start if prev_start is None else max(prev_start, e.start)
        if e.direction == -1 and i == len(eras) - 1:
            out.append(f"era {i} ({e.name!r}): a backward-counting era must be followed by another era")
        if not e.name:
            out.append(f"era {i}: name must not be empty")

    rule_problems = leap_rule.violations()
    out += rule_problems
    # Year lengths over one leap cycle either side of year 1.
    if not rule_problems and months and all(m.days >= 1 for m in months):
        base = sum(m.days for m in months)
        extra = sum(m.leap_days for m in months)
        cycle = leap_rule.cycle
        for y in range(1 - cycle, 1 + cycle):
            if base + (extra if leap_rule.is_leap(y) else 0) < 1:
                out.append(f"leap rule gives a non-positive length to year {y}")
                break

    seen = {}
    reserved = reserved_words()
    labels = [("month", m.name, m.abbreviation) for m in months]
    labels += [("weekday", w.name, w.abbreviation) for w in weekdays]
    labels += [("era", e.name, e.abbreviation) for e in eras]
    for kind, nm, abbr in labels:
        for key, text in {t.lower(): t for t in (nm, abbr) if t}.items():
            if key in reserved:
                out.append(f"{kind} name {text!r} collides with a grammar keyword")
            elif key in seen:
                out.append(f"{kind} name {text!r} is already used by {seen[key]}")
            elif any(ch.isdigit() for ch in key):
                out.append(f"{kind} name {text!r} must not contain digits")
            else:
                seen[key] = f"{kind} {nm!r}"
    return out


@dataclass(frozen=True)
class CalendarSchema:
    name: str
    months: Tuple[MonthDef, ...]
    weekdays: Tuple[WeekdayDef, ...]
    eras: Tuple[Era, ...] = ()
    leap_rule: LeapRule = LeapRule()
    weekday_offset: int = 0

    # Derived tables, filled in __post_init__.
    calendar_id: str = field(init=False, compare=False, repr=False)
    _common_prefix: Tuple[int, ...] = field(init=False, compare=False, repr=False)
    _leap_prefix: Tuple[int, ...] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "months", tuple(self.months))
        object.__setattr__(self, "weekdays", tuple(self.weekdays))
        object.__setattr__(self, "eras", tuple(self.eras))

        problems = calendar_violations(self.name, self.months, self.weekdays, self.eras, self.leap_rule)
        if problems:
            logger.debug("calendar %r rejected: %d problem(s)", self.name, len(problems))
            raise SchemaError(problems)

        common, leap = [0], [0]
        for m in self.months:
            common.append(common[-1] + m.days)
            leap.append(leap[-1] + m.days + m.leap_days)
        object.__setattr__(self, "_common_prefix", tuple(common))
        object.__setattr__(self, "_leap_prefix", tuple(leap))

        digest = hashlib.sha1(
            repr((self.name, self.months, self.weekdays, self.eras, self.leap_rule, self.weekday_offset)).encode()
        ).hexdigest()[:10]
        object.__setattr__(self, "calendar_id", f"{self.name}@{digest}")
        logger.debug("calendar %s validated", self.calendar_id)

    # ---------------------------------------------------------
    # Cycles
    # ---------------------------------------------------------

    @property
    def months_in_year(self) -> int:
        return len(self.months)

    @property
    def days_in_week(self) -> int:
        return len(self.weekdays)

    @property
    def effective_eras(self) -> Tuple[Era, ...]:
        return self.eras or (IMPLICIT_ERA,)

    @property
    def common_year_days(self) -> int:
        return self._common_prefix[-1]

    @property
    def leap_extra_days(self) -> int:
        return self._leap_prefix[-1] - self._common_prefix[-1]

    # ---------------------------------------------------------
    # Year structure (internal years)
    # ---------------------------------------------------------

    def is_leap_year(self, year: int) -> bool:
        return self.leap_extra_days > 0 and self.leap_rule.is_leap(year)

    def days_in_year(self, year: int) -> int:
        return self._leap_prefix[-1] if self.is_leap_year(year) else self._common_prefix[-1]

    def month_length(self, year: int, month: int) -> int:
        m = self.months[month - 1]
        return m.days + (m.leap_days if self.is_leap_year(year) else 0)

    def days_before_month(self, year: int, month: int) -> int:
        prefix = self._leap_prefix if self.is_leap_year(year) else self._common_prefix
        return prefix[month - 1]

    def locate(self, year: int, day_of_year: int) -> Tuple[int, int]:
        """(month, day) of the 0-based `day_of_year` within `year`."""
        prefix = self._leap_prefix if self.is_leap_year(year) else self._common_prefix
        month = bisect_right(prefix, day_of_year)
        return month, day_of_year - prefix[month - 1] + 1

    def days_before_year(self, year: int) -> int:
        """Absolute day of the first day of `year`."""
        leaps = self.leap_rule.leaps_between(1, year) if self.leap_extra_days else 0
        return (year - 1) * self.common_year_days + leaps * self.leap_extra_days

    def year_of_day(self, n: int) -> int:
        """Internal year containing absolute day n."""
        cycle = self.leap_rule.cycle
        cycle_days = cycle * self.common_year_days + self.leap_rule.leaps_per_cycle() * self.leap_extra_days
        y = 1 + (n * cycle) // cycle_days
        while self.days_before_year(y) > n:
            y -= 1
        while self.days_before_year(y + 1) <= n:
            y += 1
        return y

    # ---------------------------------------------------------
    # Names
    # ---------------------------------------------------------

    def month_index(self, name: str) -> int:
        key = name.lower()
        for i, m in enumerate(self.months, start=1):
            if key in (m.name.lower(), (m.abbreviation or "").lower()):
                return i
        raise KeyError(f"Unknown month '{name}'. Available: {[m.name for m in self.months]}")

    def weekday_index(self, name: str) -> int:
        key = name.lower()
        for i, w in enumerate(self.weekdays, start=1):
            if key in (w.name.lower(), (w.abbreviation or "").lower()):
                return i
        raise KeyError(f"Unknown weekday '{name}'. Available: {[w.name for w in self.weekdays]}")

    def era_index(self, name: str) -> int:
        key = name.lower()
        for i, e in enumerate(self.effective_eras):
            if key in (e.name.lower(), (e.abbreviation or "").lower()):
                return i
        raise KeyError(f"Unknown era '{name}'. Available: {[e.name for e in self.eras]}")
