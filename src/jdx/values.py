"""Helpers for the closed JSON value union."""

from __future__ import annotations

import enum
import json
import math
from typing import Any, TypeAlias, assert_never

JSONScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JSONScalar | list["JsonValue"] | dict[str, "JsonValue"]


class JsonKind(enum.StrEnum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class _Missing:
    """Sentinel for values that did not resolve.

    ``None`` is JSON ``null`` and therefore cannot mark absence.
    """

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> _Missing:
        return self


MISSING: _Missing = _Missing()


def json_kind(value: Any) -> JsonKind:
    """Classify ``value`` as one of the six JSON kinds.

    ``bool`` is checked before numbers since it subclasses ``int``.
    Raises ``TypeError`` for values that cannot come out of ``json.loads``.
    """

    match value:
        case None:
            return JsonKind.NULL
        case bool():
            return JsonKind.BOOL
        case int() | float():
            return JsonKind.NUMBER
        case str():
            return JsonKind.STRING
        case list() | tuple():
            return JsonKind.ARRAY
        case dict():
            return JsonKind.OBJECT
        case _:
            raise TypeError(f"not a JSON value: {type(value).__name__}")


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_float(value: int | float) -> float:
    """Convert a JSON number to ``float``, saturating huge integers to infinity."""

    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def text_form(value: JsonValue) -> str:
    """Compact JSON text of ``value``; strings keep their quotes."""

    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def canonical_form(value: JsonValue) -> str:
    """Text form with sorted keys, equal for structurally equal values."""

    return json.dumps(
        _normalize_numbers(value),
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
    )


def _normalize_numbers(value: JsonValue) -> JsonValue:
    kind = json_kind(value)
    match kind:
        case JsonKind.NUMBER:
            if isinstance(value, float) and value.is_integer():
                return int(value)
            return value
        case JsonKind.ARRAY:
            return [_normalize_numbers(item) for item in value]  # type: ignore[union-attr]
        case JsonKind.OBJECT:
            return {k: _normalize_numbers(v) for k, v in value.items()}  # type: ignore[union-attr]
        case JsonKind.NULL | JsonKind.BOOL | JsonKind.STRING:
            return value
        case x:
            assert_never(x)


def pretty_print(value: JsonValue, indent: int = 2) -> str:
    return json.dumps(value, ensure_ascii=False, indent=indent)


def compact_print(value: JsonValue) -> str:
    return text_form(value)


def number_text(value: float | int) -> str:
    """Render a number the way JSON output does, without a trailing ``.0``."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "MISSING",
    "JSONScalar",
    "JsonKind",
    "JsonValue",
    "as_float",
    "canonical_form",
    "compact_print",
    "is_number",
    "json_kind",
    "number_text",
    "pretty_print",
    "text_form",
]
