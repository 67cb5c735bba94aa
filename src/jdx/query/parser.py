"""Character-level parser for dot-notation path queries.

Grammar::

    query   := "." segment*
    segment := key | "." key | "." "*" | "[" bracket "]"
    bracket := "*" | quoted-key | index | slice | predicate

A trailing ``.`` is accepted as an in-progress query because the parser
runs on every keystroke of live input.
"""

from __future__ import annotations

import re

from ..errors import (
    EmptyQueryError,
    InvalidIndexError,
    InvalidPredicateError,
    MustStartWithDotError,
    PredicateError,
    UnclosedBracketError,
    UnclosedQuoteError,
    UnexpectedCharError,
)
from .ast import (
    FilterSegment,
    IndexSegment,
    KeySegment,
    PathSegment,
    SliceSegment,
    WildcardSegment,
)
from .predicate import opens_quote, parse_predicate

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NUMERIC_STARTS = frozenset("0123456789-:")


def parse(query: str) -> list[PathSegment]:
    """Parse ``query`` into an ordered list of path segments.

    ``"."`` parses to ``[]`` (the root). Raises a ``QueryError`` subclass
    carrying the offending position on malformed input.
    """

    if not query:
        raise EmptyQueryError()
    if query[0] != ".":
        raise MustStartWithDotError()

    parser = _PathParser(query)
    return parser.run()


class _PathParser:
    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.segments: list[PathSegment] = []

    def run(self) -> list[PathSegment]:
        i = 1
        if i < self.length and self.source[i] not in ".[":
            i = self._parse_dotted(i)

        while i < self.length:
            ch = self.source[i]
            if ch == "[":
                i = self._parse_bracket(i)
            elif ch == ".":
                i += 1
                if i >= self.length:
                    break
                if self.source[i] in ".[":
                    continue
                i = self._parse_dotted(i)
            else:
                raise UnexpectedCharError(ch, i)
        return self.segments

    def _parse_dotted(self, i: int) -> int:
        """Parse the segment right after a dot: ``*`` or a bare key."""

        if self.source[i] == "*":
            self.segments.append(WildcardSegment())
            return i + 1
        start = i
        while i < self.length and self.source[i] not in ".[":
            i += 1
        self.segments.append(KeySegment(name=self.source[start:i]))
        return i

    def _parse_bracket(self, bracket_pos: int) -> int:
        i = bracket_pos + 1
        if i >= self.length:
            raise UnclosedBracketError(bracket_pos)

        first = self.source[i]
        if first == "*":
            i += 1
            if i >= self.length or self.source[i] != "]":
                raise UnclosedBracketError(bracket_pos)
            self.segments.append(WildcardSegment())
            return i + 1
        if first == '"':
            return self._parse_quoted_key(bracket_pos, i)
        if first in _NUMERIC_STARTS:
            return self._parse_numeric(bracket_pos, i)
        return self._parse_filter(bracket_pos, i)

    def _parse_quoted_key(self, bracket_pos: int, quote_pos: int) -> int:
        chars: list[str] = []
        i = quote_pos + 1
        while i < self.length and self.source[i] != '"':
            if self.source[i] == "\\" and i + 1 < self.length:
                i += 1
            chars.append(self.source[i])
            i += 1
        if i >= self.length:
            raise UnclosedQuoteError(quote_pos)
        i += 1
        if i >= self.length or self.source[i] != "]":
            raise UnclosedBracketError(bracket_pos)
        self.segments.append(KeySegment(name="".join(chars)))
        return i + 1

    def _parse_numeric(self, bracket_pos: int, start: int) -> int:
        end = self.source.find("]", start)
        if end == -1:
            raise UnclosedBracketError(bracket_pos)
        content = self.source[start:end]

        if ":" in content:
            raw_start, raw_end = content.split(":", 1)
            self.segments.append(
                SliceSegment(
                    start=_parse_bound(raw_start, start),
                    end=_parse_bound(raw_end, start + len(raw_start) + 1),
                )
            )
        else:
            index = _parse_bound(content, start)
            if index is None:
                raise InvalidIndexError(content, start)
            self.segments.append(IndexSegment(index=index))
        return end + 1

    def _parse_filter(self, bracket_pos: int, start: int) -> int:
        end = _find_closing_bracket(self.source, start)
        if end == -1:
            raise UnclosedBracketError(bracket_pos)
        expr = self.source[start:end]
        try:
            predicate = parse_predicate(expr)
        except PredicateError as exc:
            raise InvalidPredicateError(expr, start, str(exc)) from exc
        self.segments.append(FilterSegment(predicate=predicate))
        return end + 1


def _parse_bound(raw: str, pos: int) -> int | None:
    if not raw:
        return None
    if not _INTEGER_RE.match(raw):
        raise InvalidIndexError(raw, pos)
    return int(raw)


def _find_closing_bracket(source: str, start: int) -> int:
    """Index of the ``]`` closing a filter, skipping quoted literals."""

    quote: str | None = None
    i = start
    while i < len(source):
        ch = source[i]
        if quote is not None:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif opens_quote(source, i):
            quote = ch
        elif ch == "]":
            return i
        i += 1
    return -1


def get_last_keyword(query: str) -> str:
    """Return the token currently being typed.

    This is the text after the last unescaped ``.`` or ``[`` with any
    trailing ``]`` removed: ``".foo.ba"`` gives ``"ba"`` and ``".foo."``
    gives ``""``. Works on queries that do not parse.
    """

    if not query or query == ".":
        return ""

    last_sep = -1
    i = 0
    while i < len(query):
        ch = query[i]
        if ch == "\\":
            i += 2
            continue
        if ch in ".[":
            last_sep = i
        i += 1

    return query[last_sep + 1 :].rstrip("]")


__all__ = ["get_last_keyword", "parse"]
