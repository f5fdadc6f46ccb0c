from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

FIELD_RE = re.compile(r"\{(\w+)(?::(\d+))?\}")

FIELDS = frozenset({
    "day", "day_ord", "month", "month_abbr", "month_num", "year",
    "era", "era_name", "weekday", "weekday_abbr", "day_of_year",
})


@dataclass(frozen=True)
class Part:
    literal: str = ""
    field: Optional[str] = None
    width: int = 0


@dataclass(frozen=True)
class FormatSpec:
    """How dates and durations are written.

    `pattern` mixes literal text with fields such as `{day}`, `{month}` or
    `{year:04}` (zero-padded to width 4). `duration_style` is "signed"
    ("1 year, -3 days") or "relative" ("in 1 year and 3 days", "3 days ago").
    """
    pattern: str = "{day} {month} {year} {era}"
    duration_style: Literal["signed", "relative"] = "signed"

    def __post_init__(self) -> None:
        unknown = [f for f, _ in FIELD_RE.findall(self.pattern) if f not in FIELDS]
        if unknown:
            raise ValueError(f"Unknown format field(s) {unknown}. Available: {sorted(FIELDS)}")
        if self.duration_style not in ("signed", "relative"):
            raise ValueError("duration_style must be 'signed' or 'relative'")

    def parts(self) -> Tuple[Part, ...]:
        out = []
        pos = 0
        for m in FIELD_RE.finditer(self.pattern):
            if m.start() > pos:
                out.append(Part(literal=self.pattern[pos:m.start()]))
            out.append(Part(field=m.group(1), width=int(m.group(2) or 0)))
            pos = m.end()
        if pos < len(self.pattern):
            out.append(Part(literal=self.pattern[pos:]))
        return tuple(out)


CANONICAL = FormatSpec()
ISO = FormatSpec("{year:04}-{month_num:02}-{day:02} {era}")
LONG = FormatSpec("{weekday}, {day_ord} of {month}, {year} {era}")
RELATIVE = FormatSpec(duration_style="relative")

BUILTIN_SPECS = {"canonical": CANONICAL, "iso": ISO, "long": LONG, "relative": RELATIVE}
