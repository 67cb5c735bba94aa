"""Chainable reshaping commands applied to an already-resolved value.

A chain is a sequence of ``:name args`` commands separated by `` :``::

    :filter price < 10 :sort price :pick name,price

Each command consumes the previous command's output. The first failing
command aborts the chain with a ``TransformError``.
"""

from __future__ import annotations

import copy
import functools
import math
from collections.abc import Callable

from .errors import PredicateError, TransformError
from .query.predicate import eval_predicate, opens_quote, parse_predicate
from .runtime.logging import get_logger
from .values import JsonValue, as_float, canonical_form, is_number, text_form

TransformFn = Callable[[JsonValue, str], JsonValue]


def apply_transform(value: JsonValue, commands: str) -> JsonValue:
    """Run the transform chain ``commands`` over ``value``.

    The input is never mutated; the result shares no containers with it.
    """

    logger = get_logger()
    result = copy.deepcopy(value)
    for command in split_chain(commands):
        name, args = _split_command(command)
        handler = _COMMANDS.get(name)
        if handler is None:
            raise TransformError(f"unknown transform command: {name}")
        logger.debug("transform: %s %s", name, args)
        result = handler(result, args)
    return result


def split_chain(commands: str) -> list[str]:
    """Split a chain at `` :`` boundaries that are not inside quotes.

    Unquoted chains split exactly as a plain substring split would. A quote
    that never closes is not quoting anything, so such a chain is split
    plainly as well.
    """

    text = commands.strip()
    if not text:
        raise TransformError("empty transform chain")

    parts = _split_at_boundaries(text, quote_aware=True)
    if parts is None:
        get_logger().debug("transform: unterminated quote in %r", text)
        parts = _split_at_boundaries(text, quote_aware=False)
    assert parts is not None
    return [part for part in parts if part]


def _split_at_boundaries(text: str, *, quote_aware: bool) -> list[str] | None:
    """Cut ``text`` at each `` :``; ``None`` if a quote is left open."""

    parts: list[str] = []
    start = 0
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote is not None:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif quote_aware and opens_quote(text, i):
            quote = ch
        elif ch == " " and text.startswith(" :", i):
            parts.append(text[start:i].strip())
            start = i + 1
        i += 1
    if quote is not None:
        return None
    parts.append(text[start:].strip())
    return parts


def split_query_and_transforms(query: str) -> tuple[str, str | None]:
    """Split a full query line into its path and its transform chain.

    ``".users :pick name :sort age"`` gives
    ``(".users", ":pick name :sort age")``. A line that starts with a
    command applies it to the root.
    """

    stripped = query.strip()
    if stripped.startswith(":"):
        return ".", stripped
    parts = split_chain(stripped) if stripped else [stripped]
    if len(parts) == 1:
        return stripped, None
    head = parts[0]
    return head, stripped[len(head) :].strip()


def _split_command(command: str) -> tuple[str, str]:
    name, _, args = command.strip().partition(" ")
    return name, args.strip()


def _field_list(name: str, args: str) -> list[str]:
    fields = [part.strip() for part in args.split(",") if part.strip()]
    if not fields:
        raise TransformError(f"{name} requires field names (e.g., {name} name,email)")
    return fields


def _keys(value: JsonValue, args: str) -> JsonValue:
    if not isinstance(value, dict):
        raise TransformError(":keys requires an object")
    return list(value.keys())


def _values(value: JsonValue, args: str) -> JsonValue:
    if not isinstance(value, dict):
        raise TransformError(":values requires an object")
    return list(value.values())


def _count(value: JsonValue, args: str) -> JsonValue:
    if not isinstance(value, (list, dict)):
        raise TransformError(":count requires an array or object")
    return len(value)


def _flatten(value: JsonValue, args: str) -> JsonValue:
    if not isinstance(value, list):
        raise TransformError(":flatten requires an array")
    flat: list[JsonValue] = []
    for item in value:
        if isinstance(item, list):
            flat.extend(item)
        else:
            flat.append(item)
    return flat


def _select_fields(name: str, keep: bool) -> TransformFn:
    def run(value: JsonValue, args: str) -> JsonValue:
        fields = set(_field_list(name, args))

        def reshape(obj: dict[str, JsonValue]) -> dict[str, JsonValue]:
            return {k: v for k, v in obj.items() if (k in fields) == keep}

        if isinstance(value, list):
            return [reshape(item) if isinstance(item, dict) else item for item in value]
        if isinstance(value, dict):
            return reshape(value)
        raise TransformError(f"{name} requires an array of objects or an object")

    return run


def _sort(value: JsonValue, args: str) -> JsonValue:
    if not isinstance(value, list):
        raise TransformError(":sort requires an array")
    field = args.strip()
    if not field:
        return sorted(value, key=text_form)

    def field_of(item: JsonValue) -> JsonValue:
        if isinstance(item, dict):
            return item.get(field)
        return None

    return sorted(
        value,
        key=functools.cmp_to_key(lambda a, b: compare_values(field_of(a), field_of(b))),
    )


def compare_values(a: JsonValue, b: JsonValue) -> int:
    """Three-way comparison used by ``:sort field``.

    Numbers compare numerically and strings lexically; any other pairing
    falls back to comparing the compact JSON text of both sides.
    """

    if is_number(a) and is_number(b):
        left, right = as_float(a), as_float(b)  # type: ignore[arg-type]
    elif isinstance(a, str) and isinstance(b, str):
        left, right = a, b  # type: ignore[assignment]
    else:
        left, right = text_form(a), text_form(b)  # type: ignore[assignment]
    return (left > right) - (left < right)  # type: ignore[operator]


def _uniq(value: JsonValue, args: str) -> JsonValue:
    if not isinstance(value, list):
        raise TransformError(":uniq requires an array")
    seen: set[str] = set()
    unique: list[JsonValue] = []
    for item in value:
        key = canonical_form(item)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def _group_by(value: JsonValue, args: str) -> JsonValue:
    field = args.strip()
    if not field:
        raise TransformError(":group_by requires a field name (e.g., :group_by type)")
    if not isinstance(value, list):
        raise TransformError(":group_by requires an array")

    groups: dict[str, list[JsonValue]] = {}
    for item in value:
        if isinstance(item, dict) and field in item:
            raw = item[field]
            key = raw if isinstance(raw, str) else text_form(raw)
        else:
            key = "null"
        groups.setdefault(key, []).append(item)
    return {key: groups[key] for key in sorted(groups)}


def _filter(value: JsonValue, args: str) -> JsonValue:
    if not args:
        raise TransformError(":filter requires an expression (e.g., :filter price < 10)")
    if not isinstance(value, list):
        raise TransformError(":filter requires an array")
    try:
        predicate = parse_predicate(args)
    except PredicateError as exc:
        raise TransformError(f":filter: {exc}") from exc
    return [item for item in value if eval_predicate(item, predicate)]


def _numbers(name: str, value: JsonValue, args: str) -> list[float]:
    if not isinstance(value, list):
        raise TransformError(f"{name} requires an array")
    field = args.strip()
    numbers: list[float] = []
    for item in value:
        if field:
            candidate = item.get(field) if isinstance(item, dict) else None
        else:
            candidate = item
        if is_number(candidate):
            numbers.append(as_float(candidate))  # type: ignore[arg-type]
    return numbers


def _emit_number(number: float) -> int | float:
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _total(numbers: list[float]) -> float:
    try:
        return math.fsum(numbers)
    except (OverflowError, ValueError):
        # fsum rejects overflowing partial sums and inf + -inf
        return sum(numbers)


def _sum(value: JsonValue, args: str) -> JsonValue:
    return _emit_number(_total(_numbers(":sum", value, args)))


def _avg(value: JsonValue, args: str) -> JsonValue:
    numbers = _numbers(":avg", value, args)
    if not numbers:
        return None
    return _emit_number(_total(numbers) / len(numbers))


def _min(value: JsonValue, args: str) -> JsonValue:
    numbers = _numbers(":min", value, args)
    return _emit_number(min(numbers)) if numbers else None


def _max(value: JsonValue, args: str) -> JsonValue:
    numbers = _numbers(":max", value, args)
    return _emit_number(max(numbers)) if numbers else None


_COMMANDS: dict[str, TransformFn] = {
    ":keys": _keys,
    ":values": _values,
    ":count": _count,
    ":flatten": _flatten,
    ":pick": _select_fields(":pick", keep=True),
    ":omit": _select_fields(":omit", keep=False),
    ":sort": _sort,
    ":uniq": _uniq,
    ":group_by": _group_by,
    ":filter": _filter,
    ":sum": _sum,
    ":avg": _avg,
    ":min": _min,
    ":max": _max,
}

COMMAND_NAMES: tuple[str, ...] = tuple(_COMMANDS)


__all__ = [
    "COMMAND_NAMES",
    "apply_transform",
    "compare_values",
    "split_chain",
    "split_query_and_transforms",
]
