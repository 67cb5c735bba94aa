from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .query.traverse import TraversalResult


class JdxError(Exception):
    """Base class for all jdx errors."""


class QueryError(JdxError, ValueError):
    """A query string could not be parsed.

    Every parse error carries the character position it refers to, except
    the two whole-input errors (``EmptyQueryError`` and
    ``MustStartWithDotError``) which report position 0.
    """

    def __init__(self, message: str, *, pos: int = 0) -> None:
        super().__init__(message)
        self.pos = pos


class EmptyQueryError(QueryError):
    def __init__(self) -> None:
        super().__init__("empty query")


class MustStartWithDotError(QueryError):
    def __init__(self) -> None:
        super().__init__("query must start with '.'")


class UnexpectedCharError(QueryError):
    def __init__(self, ch: str, pos: int) -> None:
        super().__init__(f"unexpected character {ch!r} at position {pos}", pos=pos)
        self.ch = ch


class UnclosedBracketError(QueryError):
    def __init__(self, pos: int) -> None:
        super().__init__(f"unclosed bracket at position {pos}", pos=pos)


class UnclosedQuoteError(QueryError):
    def __init__(self, pos: int) -> None:
        super().__init__(f"unclosed quote at position {pos}", pos=pos)


class InvalidIndexError(QueryError):
    def __init__(self, value: str, pos: int) -> None:
        super().__init__(f"invalid index {value!r} at position {pos}", pos=pos)
        self.value = value


class InvalidPredicateError(QueryError):
    def __init__(self, expr: str, pos: int, reason: str = "") -> None:
        message = f"invalid filter {expr!r} at position {pos}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, pos=pos)
        self.expr = expr
        self.reason = reason


class PredicateError(JdxError, ValueError):
    """A ``field op value`` expression is malformed."""


class TransformError(JdxError, ValueError):
    """A transform command is unknown, incomplete or got the wrong shape."""


class NoMatchError(JdxError, LookupError):
    """A path did not resolve against the input value."""

    def __init__(self, query: str, result: TraversalResult) -> None:
        super().__init__(f"no match for query: {query}")
        self.query = query
        self.result = result


__all__ = [
    "EmptyQueryError",
    "InvalidIndexError",
    "InvalidPredicateError",
    "JdxError",
    "MustStartWithDotError",
    "NoMatchError",
    "PredicateError",
    "QueryError",
    "TransformError",
    "UnclosedBracketError",
    "UnclosedQuoteError",
    "UnexpectedCharError",
]
