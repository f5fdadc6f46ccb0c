"""
ficcal.grammar.vocabulary
-------------------------
Lookup tables for the date grammar.

The fixed part (units, keywords, number words) is built at import; the
schema-driven part (month, weekday and era names) is built once per calendar
schema and memoised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Dict, FrozenSet, Tuple

if TYPE_CHECKING:
    from ..engines.schema import CalendarSchema


class TokenKind(str, Enum):
    NUMBER = "NUMBER"
    ORDINAL = "ORDINAL"
    MONTH = "MONTH"
    WEEKDAY = "WEEKDAY"
    ERA = "ERA"
    UNIT = "UNIT"
    KEYWORD = "KEYWORD"
    PUNCT = "PUNCT"
    WORD = "WORD"
    END = "END"


UNITS: Dict[str, str] = {
    "day": "days", "days": "days", "d": "days",
    "week": "weeks", "weeks": "weeks", "w": "weeks",
    "month": "months", "months": "months", "mo": "months",
    "year": "years", "years": "years", "y": "years",
}

KEYWORDS: FrozenSet[str] = frozenset({
    "in", "ago", "of", "the", "and", "from", "now", "hence", "later",
    "on", "today", "tomorrow", "yesterday",
})

_ONES = (
    "zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
    "seventeen", "eighteen", "nineteen",
)
_ORD_ONES = (
    "zeroth", "first", "second", "third", "fourth", "fifth", "sixth", "seventh",
    "eighth", "ninth", "tenth", "eleventh", "twelfth", "thirteenth", "fourteenth",
    "fifteenth", "sixteenth", "seventeenth", "eighteenth", "nineteenth",
)
_TENS = ("twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety")
_ORD_TENS = ("twentieth", "thirtieth", "fortieth", "fiftieth", "sixtieth",
             "seventieth", "eightieth", "ninetieth")


def _number_words() -> Tuple[Dict[str, int], Dict[str, int]]:
    cardinals = {w: i for i, w in enumerate(_ONES)}
    ordinals = {w: i for i, w in enumerate(_ORD_ONES) if i > 0}
    for k, (tens, ord_tens) in enumerate(zip(_TENS, _ORD_TENS)):
        base = 20 + 10 * k
        cardinals[tens] = base
        ordinals[ord_tens] = base
        for unit in range(1, 10):
            for sep in ("-", " "):
                cardinals[f"{tens}{sep}{_ONES[unit]}"] = base + unit
                ordinals[f"{tens}{sep}{_ORD_ONES[unit]}"] = base + unit
    return cardinals, ordinals


CARDINALS, ORDINALS = _number_words()

ORDINAL_SUFFIXES = ("st", "nd", "rd", "th")


def reserved_words() -> FrozenSet[str]:
    """Words the grammar owns; calendar names may not reuse them."""
    return frozenset(UNITS) | KEYWORDS | frozenset(CARDINALS) | frozenset(ORDINALS)


def ordinal_suffix(n: int) -> str:
    if 10 <= n % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


@dataclass(frozen=True)
class Entry:
    text: str          # lower case
    kind: TokenKind
    value: object


@dataclass(frozen=True)
class Vocabulary:
    entries: Tuple[Entry, ...]   # longest text first
    names: Tuple[Entry, ...]     # schema names, eligible for prefix matching


def _fixed_entries() -> Tuple[Entry, ...]:
    out = [Entry(w, TokenKind.UNIT, u) for w, u in UNITS.items()]
    out += [Entry(w, TokenKind.KEYWORD, w) for w in KEYWORDS]
    out += [Entry(w, TokenKind.NUMBER, n) for w, n in CARDINALS.items()]
    out += [Entry(w, TokenKind.ORDINAL, n) for w, n in ORDINALS.items()]
    return tuple(out)


_FIXED = _fixed_entries()


@lru_cache(maxsize=64)
def vocabulary(schema: "CalendarSchema") -> Vocabulary:
    names = []
    for i, m in enumerate(schema.months, start=1):
        for text in {m.name, m.abbreviation}:
            if text:
                names.append(Entry(text.lower(), TokenKind.MONTH, i))
    for i, w in enumerate(schema.weekdays, start=1):
        for text in {w.name, w.abbreviation}:
            if text:
                names.append(Entry(text.lower(), TokenKind.WEEKDAY, i))
    for i, e in enumerate(schema.eras):
        for text in {e.name, e.abbreviation}:
            if text:
                names.append(Entry(text.lower(), TokenKind.ERA, i))
    entries = sorted(list(_FIXED) + names, key=lambda e: (-len(e.text), e.text))
    return Vocabulary(entries=tuple(entries), names=tuple(names))
