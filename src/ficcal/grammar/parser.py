"""
ficcal.grammar.parser
---------------------
Second parsing stage: resolve tokens into a Date or a Duration.

Free-form input accepts absolute dates ("8 Hammer 1 DR", "1-03-08"),
ordinal forms ("third day of the second month of year 5") and durations
("in 3 months and 5 days", "10 days ago", "1y2mo3d"). With a FormatSpec the
date must follow the format's pattern. Dates always go through
`from_components`, so a parsed date satisfies every calendar invariant.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from ..core.errors import DateError, ParseError
from ..core.types import Date, Duration
from ..engines import arithmetic as ar
from ..engines.schema import CalendarSchema
from .lexer import Token, tokenize
from .patterns import FormatSpec
from .vocabulary import TokenKind

logger = logging.getLogger(__name__)

K = TokenKind
_FORWARD = ("hence", "later")
_DAY_WORDS = {"today": 0, "tomorrow": 1, "yesterday": -1}

# Pattern field -> token kind it reads.
_FIELD_KINDS = {
    "day": K.NUMBER,
    "day_ord": K.ORDINAL,
    "month": K.MONTH,
    "month_abbr": K.MONTH,
    "month_num": K.NUMBER,
    "year": K.NUMBER,
    "era": K.ERA,
    "era_name": K.ERA,
    "weekday": K.WEEKDAY,
    "weekday_abbr": K.WEEKDAY,
    "day_of_year": K.NUMBER,
}


def _names(kinds: Iterable[TokenKind]) -> List[str]:
    return [k.value for k in kinds]


class _Parser:
    def __init__(self, schema: CalendarSchema, text: str, relative_to: Optional[Date]):
        self.schema = schema
        self.text = text
        self.tokens = tokenize(schema, text)
        self.pos = 0
        self.relative_to = relative_to

    # ---------------------------------------------------------
    # Cursor helpers
    # ---------------------------------------------------------

    def peek(self, ahead: int = 0) -> Token:
        return self.tokens[min(self.pos + ahead, len(self.tokens) - 1)]

    def advance(self) -> Token:
        tok = self.peek()
        self.pos += 1
        return tok

    def at(self, kind: TokenKind, value: object = None, ahead: int = 0) -> bool:
        tok = self.peek(ahead)
        return tok.kind == kind and (value is None or tok.value == value)

    def accept(self, kind: TokenKind, value: object = None) -> Optional[Token]:
        if self.at(kind, value):
            return self.advance()
        return None

    def fail(self, message: str, kinds: Iterable[TokenKind], tok: Optional[Token] = None) -> ParseError:
        tok = tok or self.peek()
        return ParseError(message, tok.offset, _names(kinds))

    def expect(self, *kinds: TokenKind, value: object = None) -> Token:
        for kind in kinds:
            if self.at(kind, value):
                return self.advance()
        tok = self.peek()
        what = "end of input" if tok.kind == K.END else repr(tok.text)
        raise self.fail(f"unexpected {what}", kinds)

    # ---------------------------------------------------------
    # Entry points
    # ---------------------------------------------------------

    def looks_like_duration(self) -> bool:
        if self.at(K.KEYWORD, "in") or (self.peek().kind == K.KEYWORD and self.peek().value in _DAY_WORDS):
            return True
        return self.at(K.NUMBER) and self.at(K.UNIT, ahead=1)

    def parse_free(self) -> Union[Date, Duration]:
        if self.looks_like_duration():
            return self.duration()
        return self.date()

    # ---------------------------------------------------------
    # Durations
    # ---------------------------------------------------------

    def duration(self) -> Duration:
        tok = self.peek()
        if tok.kind == K.KEYWORD and tok.value in _DAY_WORDS:
            if self.relative_to is None:
                raise self.fail(f"'{tok.value}' needs a reference date", [K.NUMBER, K.KEYWORD], tok)
            self.advance()
            self.expect(K.END)
            return Duration(days=_DAY_WORDS[tok.value])

        leading_in = self.accept(K.KEYWORD, "in") is not None
        total = Duration()
        while True:
            total += self.quantity()
            self.accept(K.PUNCT, ",")
            self.accept(K.KEYWORD, "and")
            if not self.at(K.NUMBER):
                break

        if self.accept(K.KEYWORD, "ago"):
            if leading_in:
                raise self.fail("'in' and 'ago' cannot be combined", [K.END], self.tokens[self.pos - 1])
            total = -total
        elif self.accept(K.KEYWORD, "from"):
            self.expect(K.KEYWORD, value="now")
        else:
            tok = self.peek()
            if tok.kind == K.KEYWORD and tok.value in _FORWARD:
                self.advance()
        if not self.at(K.END):
            raise self.fail(f"unexpected {self.peek().text!r}", [K.NUMBER, K.KEYWORD, K.END])
        return total

    def quantity(self) -> Duration:
        n = self.expect(K.NUMBER).value
        unit = self.expect(K.UNIT).value
        if unit == "weeks":
            return Duration(days=n * self.schema.days_in_week)
        return Duration(**{unit: n})

    # ---------------------------------------------------------
    # Dates (free form)
    # ---------------------------------------------------------

    def date(self) -> Date:
        self.accept(K.KEYWORD, "on")
        weekday_tok = self.accept(K.WEEKDAY)
        if weekday_tok:
            self.accept(K.PUNCT, ",")
        self.accept(K.KEYWORD, "the")

        if self.at(K.NUMBER) and self.at(K.PUNCT, "-", ahead=1):
            return self.iso_date(weekday_tok)

        if self.at(K.NUMBER) or self.at(K.ORDINAL):
            day_tok = self.advance()
            if self.at(K.UNIT, "days") and self.at(K.KEYWORD, "of", ahead=1):
                return self.ordinal_date(day_tok, weekday_tok)
            self.accept(K.KEYWORD, "of")
            self.accept(K.KEYWORD, "the")
            month_tok = self.expect(K.MONTH)
        elif self.at(K.MONTH):
            month_tok = self.advance()
            self.accept(K.KEYWORD, "the")
            day_tok = self.expect(K.NUMBER, K.ORDINAL)
        else:
            raise self.fail("expected a date", [K.NUMBER, K.ORDINAL, K.MONTH, K.WEEKDAY])

        return self.finish(day_tok, month_tok.value, month_tok, weekday_tok)

    def ordinal_date(self, day_tok: Token, weekday_tok: Optional[Token]) -> Date:
        self.expect(K.UNIT, value="days")
        self.expect(K.KEYWORD, value="of")
        self.accept(K.KEYWORD, "the")
        if self.at(K.MONTH):
            month_tok = self.advance()
            month = month_tok.value
        else:
            month_tok = self.expect(K.ORDINAL, K.NUMBER)
            self.expect(K.UNIT, value="months")
            month = month_tok.value
        return self.finish(day_tok, month, month_tok, weekday_tok)

    def iso_date(self, weekday_tok: Optional[Token]) -> Date:
        year_tok = self.advance()
        self.expect(K.PUNCT, value="-")
        month_tok = self.expect(K.NUMBER)
        self.expect(K.PUNCT, value="-")
        day_tok = self.expect(K.NUMBER)
        era_tok = self.accept(K.ERA)
        self.expect(K.END)
        return self.build(era_tok, year_tok, month_tok.value, month_tok, day_tok, weekday_tok)

    def finish(self, day_tok: Token, month: int, month_tok: Token, weekday_tok: Optional[Token]) -> Date:
        # Optional year part: [","] ["of"] ["the"] ["year"] (NUMBER [ERA] | ERA NUMBER)
        self.accept(K.PUNCT, ",")
        self.accept(K.KEYWORD, "of")
        self.accept(K.KEYWORD, "the")
        self.accept(K.UNIT, "years")
        era_tok = self.accept(K.ERA)
        if era_tok:
            year_tok = self.expect(K.NUMBER)
        else:
            year_tok = self.accept(K.NUMBER)
            if year_tok:
                era_tok = self.accept(K.ERA)
        if year_tok is None and self.relative_to is None:
            raise self.fail("missing year", [K.NUMBER, K.ERA])
        self.expect(K.END)
        return self.build(era_tok, year_tok, month, month_tok, day_tok, weekday_tok)

    def build(
        self,
        era_tok: Optional[Token],
        year_tok: Optional[Token],
        month: int,
        month_tok: Token,
        day_tok: Token,
        weekday_tok: Optional[Token],
        day_of_year: Optional[Token] = None,
    ) -> Date:
        era = era_tok.value if era_tok else (self.relative_to.era if self.relative_to else None)
        year = year_tok.value if year_tok else self.relative_to.year
        offsets = {"era": era_tok, "year": year_tok, "month": month_tok, "day": day_tok}
        try:
            if day_of_year is not None:
                first = ar.from_components(self.schema, era, year, 1, 1)
                date = ar.from_absolute(self.schema, first.absolute + day_of_year.value - 1)
                if day_of_year.value < 1 or date.year != first.year or date.era != first.era:
                    raise DateError("day", day_of_year.value, "day of year outside the year")
            else:
                date = ar.from_components(self.schema, era, year, month, day_tok.value)
        except DateError as err:
            tok = offsets.get(err.field) or day_of_year or self.tokens[0]
            raise ParseError(str(err), tok.offset, [tok.kind.value]) from err
        if weekday_tok and weekday_tok.value != date.weekday:
            raise ParseError(
                f"{weekday_tok.text!r} does not match the weekday of that date", weekday_tok.offset, [K.WEEKDAY.value]
            )
        return date

    # ---------------------------------------------------------
    # Dates (pattern)
    # ---------------------------------------------------------

    def parse_pattern(self, spec: FormatSpec) -> Date:
        got = {}
        for part in spec.parts():
            if part.field is None:
                for lit in tokenize(self.schema, part.literal)[:-1]:
                    tok = self.peek()
                    if tok.kind != lit.kind or tok.value != lit.value:
                        raise self.fail(f"expected {lit.text!r}", [lit.kind])
                    self.advance()
                continue
            kind = _FIELD_KINDS[part.field]
            if kind == K.ERA:
                got[part.field] = self.accept(K.ERA)
                continue
            got[part.field] = self.expect(kind)
        self.expect(K.END)

        day_tok = got.get("day") or got.get("day_ord")
        month_tok = got.get("month") or got.get("month_abbr") or got.get("month_num")
        era_tok = got.get("era") or got.get("era_name")
        weekday_tok = got.get("weekday") or got.get("weekday_abbr")
        doy_tok = got.get("day_of_year")
        if "year" not in got and self.relative_to is None:
            raise self.fail("pattern has no year and no reference date was given", [K.NUMBER])
        if day_tok is None or month_tok is None:
            if doy_tok is None:
                raise self.fail("pattern does not identify a day", [K.NUMBER])
            return self.build(era_tok, got.get("year"), 1, doy_tok, doy_tok, weekday_tok, day_of_year=doy_tok)
        return self.build(era_tok, got.get("year"), month_tok.value, month_tok, day_tok, weekday_tok)


def parse(
    schema: CalendarSchema,
    text: str,
    spec: Optional[FormatSpec] = None,
    *,
    relative_to: Optional[Date] = None,
) -> Union[Date, Duration]:
    """Read `text` as a Date or a Duration.

    Without `spec` the free-form grammar applies; with one, dates must follow
    its pattern (durations are accepted in either style). `relative_to`
    supplies the year and era when the text leaves them out.
    """
    if relative_to is not None:
        ar.absolute_day(schema, relative_to)  # schema check
    p = _Parser(schema, text, relative_to)
    if spec is None or p.looks_like_duration():
        result = p.parse_free()
    else:
        result = p.parse_pattern(spec)
    logger.debug("parsed %r as %r", text, result)
    return result


def parse_date(
    schema: CalendarSchema,
    text: str,
    relative_to: Date,
    spec: Optional[FormatSpec] = None,
) -> Date:
    """Like `parse`, but durations are applied to `relative_to`."""
    result = parse(schema, text, spec, relative_to=relative_to)
    if isinstance(result, Duration):
        return ar.add(schema, relative_to, result)
    return result
