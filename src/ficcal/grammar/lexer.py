"""
ficcal.grammar.lexer
--------------------
First parsing stage: split text into tokens using the schema's vocabulary.

Vocabulary entries are tried longest first, so multi-word names win over
their prefixes. A bare word that is not in the vocabulary but starts a
single calendar name (three letters or more) is read as that name; a word
that starts several names is ambiguous and rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from ..core.errors import ParseError
from ..engines.schema import CalendarSchema
from .vocabulary import ORDINAL_SUFFIXES, TokenKind, vocabulary

_DIGITS = re.compile(r"\d+")
_WORD = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")
_PUNCT = ",-/.:"
_MIN_PREFIX = 3


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: object
    offset: int
    text: str


def tokenize(schema: CalendarSchema, text: str) -> List[Token]:
    vocab = vocabulary(schema)
    lowered = text.lower()
    tokens: List[Token] = []
    i, n = 0, len(text)

    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue

        # Signed number: a sign directly before digits, at a word start.
        signed = ch in "+-" and i + 1 < n and text[i + 1].isdigit() and (i == 0 or text[i - 1].isspace())
        if ch.isdigit() or signed:
            m = _DIGITS.match(text, i + 1 if signed else i)
            value = int(m.group())
            if ch == "-":
                value = -value
            end = m.end()
            suffix = lowered[end:end + 2]
            if not signed and suffix in ORDINAL_SUFFIXES and (end + 2 >= n or not text[end + 2].isalpha()):
                tokens.append(Token(TokenKind.ORDINAL, value, i, text[i:end + 2]))
                i = end + 2
            else:
                tokens.append(Token(TokenKind.NUMBER, value, i, text[i:end]))
                i = end
            continue

        if ch in _PUNCT:
            tokens.append(Token(TokenKind.PUNCT, ch, i, ch))
            i += 1
            continue

        matched = False
        for entry in vocab.entries:
            end = i + len(entry.text)
            if lowered.startswith(entry.text, i) and (end >= n or not text[end].isalpha()):
                tokens.append(Token(entry.kind, entry.value, i, text[i:end]))
                i = end
                matched = True
                break
        if matched:
            continue

        m = _WORD.match(text, i)
        if m is None:
            raise ParseError(f"unexpected character {ch!r}", i, [k.value for k in TokenKind if k != TokenKind.END])
        word = m.group().lower()
        if len(word) >= _MIN_PREFIX:
            hits = {(e.kind, e.value) for e in vocab.names if e.text.startswith(word)}
            if len(hits) > 1:
                raise ParseError(f"ambiguous word {m.group()!r}", i, sorted({k.value for k, _ in hits}))
            if len(hits) == 1:
                kind, value = hits.pop()
                tokens.append(Token(kind, value, i, m.group()))
                i = m.end()
                continue
        tokens.append(Token(TokenKind.WORD, word, i, m.group()))
        i = m.end()

    tokens.append(Token(TokenKind.END, None, n, ""))
    return tokens
