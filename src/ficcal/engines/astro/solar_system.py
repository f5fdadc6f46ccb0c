"""
ficcal.engines.astro.solar_system
---------------------------------
Immutable description of a toy solar system: one optional primary light
source and any number of reflective satellites, each on a circular cycle with
an exact rational period (in calendar days) and a phase offset at day 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import List, Optional, Tuple, Union

from ...core.errors import SchemaError

logger = logging.getLogger(__name__)

NumLike = Union[int, str, Fraction, float]


def as_fraction(x: NumLike) -> Fraction:
    # Floats go through their decimal repr so 0.1 stays 1/10.
    if isinstance(x, float):
        return Fraction(repr(x))
    return Fraction(x)


class BodyKind(str, Enum):
    PRIMARY = "primary"
    SATELLITE = "satellite"


@dataclass(frozen=True)
class Body:
    name: str
    period: Fraction
    phase_offset: Fraction = Fraction(0)
    kind: BodyKind = BodyKind.SATELLITE
    subdivisions: int = 4   # phase boundaries per cycle

    def __post_init__(self) -> None:
        object.__setattr__(self, "period", as_fraction(self.period))
        object.__setattr__(self, "phase_offset", as_fraction(self.phase_offset))
        object.__setattr__(self, "kind", BodyKind(self.kind))

    @property
    def is_primary(self) -> bool:
        return self.kind == BodyKind.PRIMARY


def solar_violations(bodies: Tuple[Body, ...], tolerance: Fraction) -> List[str]:
    out: List[str] = []
    names = set()
    primaries = []
    for i, b in enumerate(bodies):
        label = f"body {i} ({b.name!r})"
        if not b.name:
            out.append(f"body {i}: name must not be empty")
        elif b.name.lower() in names:
            out.append(f"{label}: duplicate name")
        names.add(b.name.lower())
        if b.period <= 0:
            out.append(f"{label}: period must be > 0, got {b.period}")
        if not 0 <= b.phase_offset < 1:
            out.append(f"{label}: phase_offset must be in [0, 1), got {b.phase_offset}")
        if b.subdivisions < 4 or b.subdivisions % 4:
            out.append(f"{label}: subdivisions must be a positive multiple of 4, got {b.subdivisions}")
        if b.is_primary:
            primaries.append(b.name)
    if len(primaries) > 1:
        out.append(f"at most one primary light source allowed, got {primaries}")
    if not 0 <= tolerance < Fraction(1, 2):
        out.append(f"conjunction_tolerance must be in [0, 1/2), got {tolerance}")
    return out


@dataclass(frozen=True)
class SolarSystemSchema:
    name: str
    bodies: Tuple[Body, ...]
    conjunction_tolerance: Fraction = Fraction(1, 32)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bodies", tuple(self.bodies))
        object.__setattr__(self, "conjunction_tolerance", as_fraction(self.conjunction_tolerance))
        problems = solar_violations(self.bodies, self.conjunction_tolerance)
        if problems:
            logger.debug("solar system %r rejected: %d problem(s)", self.name, len(problems))
            raise SchemaError(problems)

    @property
    def primary(self) -> Optional[Body]:
        for b in self.bodies:
            if b.is_primary:
                return b
        return None

    @property
    def satellites(self) -> Tuple[Body, ...]:
        return tuple(b for b in self.bodies if not b.is_primary)

    def body(self, name: str) -> Body:
        for b in self.bodies:
            if b.name.lower() == name.lower():
                return b
        raise KeyError(f"Unknown body '{name}'. Available: {[b.name for b in self.bodies]}")

    def index(self, name: str) -> int:
        return self.bodies.index(self.body(name))
