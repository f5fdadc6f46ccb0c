"""
ficcal.engines.leap
-------------------
Layered divisibility rules deciding which years are leap years.

A rule set ((4, True), (100, False), (400, True)) reads "every 4th year is
leap, except every 100th, except every 400th": the last rule whose divisor
divides the (offset) year wins. Divisors must nest, i.e. each one divides the
next. Under that condition the leap indicator is a signed sum of divisibility
indicators,

    leap(y) = sum_i (f_i - f_{i-1}) * [d_i | y],      f_0 = 0,

so the number of leap years in any interval is closed-form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class LeapRule:
    rules: Tuple[Tuple[int, bool], ...] = ()
    offset: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple((int(d), bool(f)) for d, f in self.rules))

    @property
    def cycle(self) -> int:
        """Number of years after which the leap pattern repeats."""
        return self.rules[-1][0] if self.rules else 1

    def violations(self) -> List[str]:
        out: List[str] = []
        prev = None
        for i, (d, _) in enumerate(self.rules):
            if d < 1:
                out.append(f"leap rule {i}: divisor must be >= 1, got {d}")
                continue
            if prev is not None and d % prev != 0:
                out.append(f"leap rule {i}: divisor {d} is not a multiple of the previous divisor {prev}")
            prev = d
        return out

    def _weights(self) -> List[Tuple[int, int]]:
        out = []
        prev_flag = 0
        for d, f in self.rules:
            out.append((d, int(f) - prev_flag))
            prev_flag = int(f)
        return out

    def is_leap(self, year: int) -> bool:
        y = year - self.offset
        leap = False
        for d, f in self.rules:
            if y % d == 0:
                leap = f
        return leap

    def _g(self, n: int) -> int:
        # Signed count of leap years in (0, n] (offset coordinates).
        return sum(c * (n // d) for d, c in self._weights())

    def leaps_between(self, a: int, b: int) -> int:
        """Number of leap years y with a <= y < b (negative if b < a)."""
        return self._g(b - 1 - self.offset) - self._g(a - 1 - self.offset)

    def leaps_per_cycle(self) -> int:
        return self.leaps_between(1, 1 + self.cycle)
