from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Iterable, Tuple


class FicCalError(Exception):
    """Base error."""


class SchemaError(FicCalError, ValueError):
    """Raised when a calendar or solar-system definition is inconsistent.

    Carries every violated rule, not only the first one found.
    """

    def __init__(self, violations: Iterable[str]):
        self.violations: Tuple[str, ...] = tuple(violations)
        lines = "\n".join(f"  - {v}" for v in self.violations)
        super().__init__(f"invalid schema ({len(self.violations)} problem(s)):\n{lines}")


class DateErrorKind(str, Enum):
    OUT_OF_RANGE = "out_of_range"


class DateError(FicCalError, ValueError):
    """Raised when date coordinates fall outside the calendar's bounds."""

    def __init__(self, field: str, value: object, detail: str = "", kind: DateErrorKind = DateErrorKind.OUT_OF_RANGE):
        self.field = field
        self.value = value
        self.kind = kind
        msg = f"{field} {value!r} is out of range"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class ParseError(FicCalError, ValueError):
    """Raised when text cannot be read as a date or duration.

    `offset` is the character position of the problem and `expected` the set of
    token kinds that would have been accepted there.
    """

    def __init__(self, message: str, offset: int, expected: Iterable[str] = ()):
        self.offset = offset
        self.expected: FrozenSet[str] = frozenset(expected)
        self.reason = message
        exp = f"; expected one of {sorted(self.expected)}" if self.expected else ""
        super().__init__(f"{message} at offset {offset}{exp}")


class SchemaMismatchError(AssertionError):
    """A date was used with a calendar it was not built from.

    A caller bug, not a runtime condition: it is not a FicCalError.
    """
