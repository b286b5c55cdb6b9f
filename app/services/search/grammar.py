"""Lexer and recursive-descent parser for filter query values.

Two shapes are recognised::

    field:value              categorical; ``*`` in the value matches any substring
    field:[start TO end]     range; ``[``/``]`` inclusive, ``(``/``)`` exclusive,
                             a bound of ``*`` leaves that side open

Whitespace around ``TO`` is optional, so ``employee_count:[5TO10)`` is valid.
Only the shape is checked here. Whether the field exists, and whether it may
be ranged over, is decided in :mod:`app.services.search.filters`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from app.services.search.errors import InvalidFilterSyntax

WILDCARD = "*"
OPEN_BOUND = "*"
RANGE_SEPARATOR = "TO"


class TokenKind(str, Enum):
    COLON = "COLON"
    OPEN = "OPEN"
    CLOSE = "CLOSE"
    RANGE_TO = "RANGE_TO"
    STAR = "STAR"
    SPACE = "SPACE"
    TEXT = "TEXT"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int


_TOKEN_RE = re.compile(
    r"(?P<COLON>:)"
    r"|(?P<OPEN>[\[(])"
    r"|(?P<CLOSE>[\])])"
    r"|(?P<RANGE_TO>TO)"
    r"|(?P<STAR>\*)"
    r"|(?P<SPACE>\s+)"
    r"|(?P<TEXT>(?:(?!TO)[^:\[\]()*\s])+)"
)


def tokenize(raw: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(raw):
        m = _TOKEN_RE.match(raw, pos)
        if m is None or not m.group(0):
            raise InvalidFilterSyntax(raw, f"unexpected character at position {pos}")
        tokens.append(Token(TokenKind(m.lastgroup), m.group(0), pos))
        pos = m.end()
    return tokens


@dataclass(frozen=True)
class CategoryClause:
    field: str
    value: str

    @property
    def has_wildcard(self) -> bool:
        return WILDCARD in self.value


@dataclass(frozen=True)
class RangeClause:
    field: str
    start: Optional[str]
    start_inclusive: bool
    end: Optional[str]
    end_inclusive: bool


class _Parser:
    def __init__(self, raw: str):
        self.raw = raw
        self.tokens: Sequence[Token] = tokenize(raw)
        self.index = 0

    def _peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _advance(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise self._error("unexpected end of filter")
        self.index += 1
        return tok

    def _expect(self, kind: TokenKind, what: str) -> Token:
        tok = self._peek()
        if tok is None or tok.kind is not kind:
            raise self._error(f"expected {what}")
        return self._advance()

    def _error(self, reason: str) -> InvalidFilterSyntax:
        tok = self._peek()
        if tok is not None:
            reason = f"{reason} at position {tok.pos}"
        return InvalidFilterSyntax(self.raw, reason)

    def _field(self) -> str:
        parts = []
        while True:
            tok = self._peek()
            if tok is None:
                raise self._error("missing ':' after field name")
            if tok.kind is TokenKind.COLON:
                break
            if tok.kind not in (TokenKind.TEXT, TokenKind.RANGE_TO, TokenKind.SPACE):
                raise self._error(f"unexpected '{tok.text}' in field name")
            parts.append(self._advance().text)
        if not parts:
            raise self._error("missing field name")
        self._expect(TokenKind.COLON, "':'")
        # Any other text is a name; the field schema decides whether it exists.
        return "".join(parts)

    def _bound(self, terminator: TokenKind) -> Optional[str]:
        collected: List[Token] = []
        while True:
            tok = self._peek()
            if tok is None:
                raise self._error("unterminated range")
            if tok.kind is terminator:
                break
            if tok.kind not in (TokenKind.TEXT, TokenKind.COLON, TokenKind.STAR, TokenKind.SPACE):
                raise self._error(f"unexpected '{tok.text}' in range bound")
            collected.append(self._advance())
        while collected and collected[0].kind is TokenKind.SPACE:
            collected.pop(0)
        while collected and collected[-1].kind is TokenKind.SPACE:
            collected.pop()
        if not collected:
            raise self._error("empty range bound")
        if len(collected) == 1 and collected[0].kind is TokenKind.STAR:
            return None
        return "".join(t.text for t in collected)

    def category(self) -> CategoryClause:
        name = self._field()
        value = "".join(t.text for t in self.tokens[self.index:])
        self.index = len(self.tokens)
        if not value:
            raise InvalidFilterSyntax(self.raw, "missing value")
        return CategoryClause(field=name, value=value)

    def range(self) -> RangeClause:
        name = self._field()
        opening = self._expect(TokenKind.OPEN, "'[' or '('")
        start = self._bound(TokenKind.RANGE_TO)
        self._expect(TokenKind.RANGE_TO, RANGE_SEPARATOR)
        end = self._bound(TokenKind.CLOSE)
        closing = self._expect(TokenKind.CLOSE, "']' or ')'")
        if self._peek() is not None:
            raise self._error("trailing characters after range")
        return RangeClause(
            field=name,
            start=start,
            start_inclusive=opening.text == "[",
            end=end,
            end_inclusive=closing.text == "]",
        )


def parse_category_clause(raw: str) -> CategoryClause:
    return _Parser(raw).category()


def parse_range_clause(raw: str) -> RangeClause:
    return _Parser(raw).range()
