# tests/test_parser.py

import pytest

from ficcal import CANONICAL, ISO, LONG, Duration, ParseError
from ficcal.engines import arithmetic as ar
from ficcal.engines.specs import DECIMAL, EARTHLIKE, RECKONING
from ficcal.grammar.lexer import tokenize
from ficcal.grammar.parser import parse, parse_date
from ficcal.grammar.vocabulary import TokenKind


def greg(y, m, d):
    return ar.from_components(EARTHLIKE, None, y, m, d)


@pytest.mark.parametrize(
    "text",
    [
        "8 March 2024",
        "March 8, 2024",
        "march 8th 2024",
        "Friday, 8 March 2024",
        "on Friday the 8th of March, 2024",
        "2024-03-08",
        "8th of March, year 2024",
        "the eighth of Mar 2024",
        "8 Marc 2024",
    ],
)
def test_absolute_forms(text):
    assert parse(EARTHLIKE, text) == greg(2024, 3, 8)


def test_ordinal_form():
    d = parse(EARTHLIKE, "third day of the second month of year 5")
    assert (d.year, d.month, d.day) == (5, 2, 3)
    d = parse(EARTHLIKE, "the 3rd day of March of year 5")
    assert (d.year, d.month, d.day) == (5, 3, 3)


def test_era_markers():
    d = parse(RECKONING, "8 Hammer 1 DR")
    assert (d.era, d.year, d.month, d.day) == (1, 1, 1, 8)
    d = parse(RECKONING, "Hammer 8, 3 BR")
    assert (d.era, d.year) == (0, 3)
    d = parse(RECKONING, "1 Midwinter Dale Reckoning 12")
    assert (d.era, d.year, d.month) == (1, 12, 2)
    # no era given: the current one
    assert parse(RECKONING, "8 Hammer 1") == parse(RECKONING, "8 Hammer 1 DR")


def test_year_taken_from_reference():
    ref = greg(1999, 6, 1)
    d = parse(EARTHLIKE, "8 March", relative_to=ref)
    assert d == greg(1999, 3, 8)
    d = parse(EARTHLIKE, "third day of the second month", relative_to=ref)
    assert d == greg(1999, 2, 3)


def test_missing_year_without_reference():
    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "8 March")
    assert exc.value.offset == len("8 March")
    assert TokenKind.NUMBER.value in exc.value.expected


@pytest.mark.parametrize(
    "text, expect",
    [
        ("in 3 months and 5 days", Duration(months=3, days=5)),
        ("10 days ago", Duration(days=-10)),
        ("2 weeks", Duration(days=14)),
        ("1y2mo3d", Duration(1, 2, 3)),
        ("-5 days", Duration(days=-5)),
        ("three days from now", Duration(days=3)),
        ("in 1 year, 2 months and 3 days", Duration(1, 2, 3)),
        ("1 year, -3 days", Duration(years=1, days=-3)),
        ("5 days later", Duration(days=5)),
    ],
)
def test_durations(text, expect):
    assert parse(EARTHLIKE, text) == expect


def test_weeks_follow_the_calendar_week():
    assert parse(RECKONING, "2 weeks") == Duration(days=20)
    assert parse(DECIMAL, "1w") == Duration(days=5)


def test_day_words_need_a_reference_date():
    ref = greg(2024, 2, 28)
    assert parse(EARTHLIKE, "tomorrow", relative_to=ref) == Duration(days=1)
    assert parse(EARTHLIKE, "yesterday", relative_to=ref) == Duration(days=-1)
    for text in ("today", "tomorrow", "yesterday"):
        with pytest.raises(ParseError) as exc:
            parse(EARTHLIKE, text)
        assert exc.value.offset == 0


def test_parse_date_applies_durations():
    ref = greg(2024, 2, 28)
    assert parse_date(EARTHLIKE, "tomorrow", ref) == greg(2024, 2, 29)
    assert parse_date(EARTHLIKE, "in 1 month", ref) == greg(2024, 3, 28)
    assert parse_date(EARTHLIKE, "8 March 2024", ref) == greg(2024, 3, 8)


def test_in_and_ago_conflict():
    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "in 3 days ago")
    assert exc.value.offset == len("in 3 days ")


def test_weekday_must_agree():
    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "Monday, 8 March 2024")
    assert exc.value.offset == 0
    assert exc.value.expected == {"WEEKDAY"}


def test_out_of_range_points_at_the_field():
    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "30 February 2024")
    assert exc.value.offset == 0
    assert "out of range" in exc.value.reason
    with pytest.raises(ParseError) as exc:
        parse(RECKONING, "1 Hammer 0 DR")
    assert exc.value.offset == len("1 Hammer ")


def test_ambiguous_prefix():
    with pytest.raises(ParseError) as exc:
        parse(RECKONING, "3 Mid 5 DR")
    assert exc.value.offset == 2
    assert exc.value.expected == {"MONTH"}


def test_unexpected_input():
    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "8 March 2024 !")
    assert exc.value.offset == len("8 March 2024 ")

    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "8 Blorp 2024")
    assert exc.value.offset == 2
    assert "MONTH" in exc.value.expected

    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "")
    assert exc.value.offset == 0


def test_tokenizer():
    kinds = [t.kind for t in tokenize(EARTHLIKE, "Tue, 5th of Sept -3")]
    assert kinds == [
        TokenKind.WEEKDAY, TokenKind.PUNCT, TokenKind.ORDINAL, TokenKind.KEYWORD,
        TokenKind.MONTH, TokenKind.NUMBER, TokenKind.END,
    ]
    toks = tokenize(EARTHLIKE, "twenty-one days")
    assert (toks[0].kind, toks[0].value) == (TokenKind.NUMBER, 21)
    # a hyphen between digits is punctuation, not a sign
    assert [t.value for t in tokenize(EARTHLIKE, "2024-03-08")][:-1] == [2024, "-", 3, "-", 8]


@pytest.mark.parametrize("spec", [CANONICAL, ISO, LONG])
def test_pattern_parsing(spec):
    from ficcal.grammar.formatter import format_date

    for d in (greg(2024, 3, 8), greg(-44, 3, 15), greg(1, 1, 1)):
        assert parse(EARTHLIKE, format_date(EARTHLIKE, d, spec), spec) == d
    for n in (-1, 0, 400, -40000):
        d = ar.from_absolute(RECKONING, n)
        assert parse(RECKONING, format_date(RECKONING, d, spec), spec) == d


def test_pattern_is_strict():
    with pytest.raises(ParseError):
        parse(EARTHLIKE, "March 8, 2024", ISO)
    with pytest.raises(ParseError) as exc:
        parse(EARTHLIKE, "2024/03/08", ISO)
    assert exc.value.offset == 4
