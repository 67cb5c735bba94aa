"""Parsing and evaluation of ``field op value`` filter predicates."""

from __future__ import annotations

import re
import sys
from typing import assert_never

from ..errors import PredicateError
from ..values import JsonKind, JsonValue, as_float, is_number, json_kind
from .ast import CompareOp, Predicate, Scalar

# Equality tolerance for numeric ``==`` / ``!=`` comparisons.
FLOAT_EPSILON = sys.float_info.epsilon

_OPERATOR_CHARS = "=!<>"
_TOKEN_BOUNDARY = frozenset(" \t=!<>,[(")
_PREDICATE_RE = re.compile(
    r"^\s*(?P<field>[^\s=!<>]+)\s*(?P<op>[=!<>]+)\s*(?P<value>.*?)\s*$",
    re.DOTALL,
)
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_KEYWORDS: dict[str, Scalar] = {"true": True, "false": False, "null": None}


def parse_predicate(expr: str) -> Predicate:
    """Parse ``expr`` (e.g. ``price < 10``) into a ``Predicate``.

    Operators are matched greedily, so ``<=`` wins over ``<``; any run of
    operator characters that is not one of the six operators is rejected.
    Literals are ``true``/``false``/``null``, numbers, quoted strings, or a
    bare word which is taken as a string.
    """

    if not expr.strip():
        raise PredicateError("empty filter expression")

    match = _PREDICATE_RE.match(expr)
    if match is None:
        if not any(ch in expr for ch in _OPERATOR_CHARS):
            raise PredicateError(
                f"no comparison operator in {expr.strip()!r} "
                "(expected one of ==, !=, <, >, <=, >=)"
            )
        head = re.split(r"[=!<>]", expr, maxsplit=1)[0].strip()
        if not head:
            raise PredicateError(f"missing field name in {expr.strip()!r}")
        raise PredicateError(
            f"field name {head!r} may not contain whitespace in {expr.strip()!r}"
        )

    raw_op = match.group("op")
    try:
        op = CompareOp(raw_op)
    except ValueError:
        raise PredicateError(f"unknown operator {raw_op!r}") from None

    raw_value = match.group("value")
    if not raw_value:
        raise PredicateError(
            f"missing value after {raw_op!r} in {expr.strip()!r}"
        )

    return Predicate(field=match.group("field"), op=op, value=_parse_literal(raw_value))


def _parse_literal(raw: str) -> Scalar:
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        return _unescape(raw[1:-1])
    if raw[0] in ("'", '"'):
        raise PredicateError(f"unterminated string literal {raw!r}")
    if raw in _KEYWORDS:
        return _KEYWORDS[raw]
    if _NUMBER_RE.match(raw):
        return float(raw)
    return raw


def opens_quote(text: str, i: int) -> bool:
    """Whether the quote character at ``text[i]`` starts a quoted literal.

    Quotes only open at the start of a token, so apostrophes inside bare
    words (``O'Brien``) are ordinary characters.
    """

    return text[i] in ("'", '"') and (i == 0 or text[i - 1] in _TOKEN_BOUNDARY)


def _unescape(text: str) -> str:
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch == "\\":
            out.append(next(chars, "\\"))
        else:
            out.append(ch)
    return "".join(out)


def eval_predicate(item: JsonValue, predicate: Predicate) -> bool:
    """Return whether ``item`` satisfies ``predicate``.

    Missing fields, non-object items and type mismatches all evaluate to
    ``False``; this never raises for JSON input.
    """

    if not isinstance(item, dict) or predicate.field not in item:
        return False

    actual = item[predicate.field]
    expected = predicate.value
    op = predicate.op

    if expected is None:
        if op is CompareOp.EQ:
            return actual is None
        if op is CompareOp.NE:
            return actual is not None
        return False

    if isinstance(expected, bool):
        if not isinstance(actual, bool) or op.is_ordering:
            return False
        return (actual == expected) if op is CompareOp.EQ else (actual != expected)

    if isinstance(expected, (int, float)):
        if not is_number(actual):
            return False
        return _compare_numbers(as_float(actual), as_float(expected), op)  # type: ignore[arg-type]

    if isinstance(expected, str):
        if json_kind(actual) is not JsonKind.STRING:
            return False
        return _compare_ordered(actual, expected, op)  # type: ignore[arg-type]

    assert_never(expected)


def _compare_numbers(left: float, right: float, op: CompareOp) -> bool:
    if op is CompareOp.EQ:
        return abs(left - right) < FLOAT_EPSILON
    if op is CompareOp.NE:
        return abs(left - right) >= FLOAT_EPSILON
    return _compare_ordered(left, right, op)


def _compare_ordered(left: float | str, right: float | str, op: CompareOp) -> bool:
    match op:
        case CompareOp.EQ:
            return left == right
        case CompareOp.NE:
            return left != right
        case CompareOp.LT:
            return left < right  # type: ignore[operator]
        case CompareOp.GT:
            return left > right  # type: ignore[operator]
        case CompareOp.LE:
            return left <= right  # type: ignore[operator]
        case CompareOp.GE:
            return left >= right  # type: ignore[operator]
        case x:
            assert_never(x)


__all__ = ["FLOAT_EPSILON", "eval_predicate", "opens_quote", "parse_predicate"]
