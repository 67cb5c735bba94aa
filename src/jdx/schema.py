"""Shape inference for arbitrary JSON values.

``infer_schema`` summarises a value as a ``SchemaType`` tree. Arrays are
summarised by sampling their leading elements and folding the element
schemas together with ``merge_schemas``, which is where optional object
fields and type unions are detected.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Literal, TypeAlias, assert_never

from pydantic import BaseModel, ConfigDict, Field

from .config import get_config
from .runtime.logging import get_logger
from .values import JsonKind, JsonValue, as_float, json_kind, number_text


class _SchemaNode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class NullSchema(_SchemaNode):
    kind: Literal["null"] = "null"


class BoolSchema(_SchemaNode):
    kind: Literal["bool"] = "bool"


class NumberSchema(_SchemaNode):
    kind: Literal["number"] = "number"
    min: float | None = None
    max: float | None = None


class StringSchema(_SchemaNode):
    kind: Literal["string"] = "string"
    sample: str | None = None


class ArraySchema(_SchemaNode):
    kind: Literal["array"] = "array"
    len_min: int = 0
    len_max: int = 0
    items: SchemaType


class FieldSchema(_SchemaNode):
    schema_: SchemaType = Field(alias="schema")
    optional: bool = False
    count: int = 1

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    @property
    def schema(self) -> SchemaType:  # type: ignore[override]
        return self.schema_


class ObjectSchema(_SchemaNode):
    kind: Literal["object"] = "object"
    fields: dict[str, FieldSchema] = Field(default_factory=dict)


class UnionSchema(_SchemaNode):
    kind: Literal["union"] = "union"
    type_names: tuple[str, ...]


class UnknownSchema(_SchemaNode):
    kind: Literal["unknown"] = "unknown"


SchemaType: TypeAlias = Annotated[
    NullSchema
    | BoolSchema
    | NumberSchema
    | StringSchema
    | ArraySchema
    | ObjectSchema
    | UnionSchema
    | UnknownSchema,
    Field(discriminator="kind"),
]

ArraySchema.model_rebuild()
FieldSchema.model_rebuild()
ObjectSchema.model_rebuild()


def infer_schema(value: JsonValue, max_samples: int | None = None) -> SchemaType:
    """Infer the schema of ``value``.

    At most ``max_samples`` leading elements of each array are inspected
    (defaults to ``schema_max_samples`` from the active config); the
    recorded length range is always the real array length.
    """

    config = get_config()
    samples = config.schema_max_samples if max_samples is None else max_samples
    return _infer(value, samples, config.string_sample_chars)


def _infer(value: JsonValue, max_samples: int, sample_chars: int) -> SchemaType:
    kind = json_kind(value)
    match kind:
        case JsonKind.NULL:
            return NullSchema()
        case JsonKind.BOOL:
            return BoolSchema()
        case JsonKind.NUMBER:
            number = as_float(value)  # type: ignore[arg-type]
            return NumberSchema(min=number, max=number)
        case JsonKind.STRING:
            return StringSchema(sample=value[:sample_chars])  # type: ignore[index]
        case JsonKind.ARRAY:
            items = list(value)  # type: ignore[arg-type]
            if not items:
                return ArraySchema(len_min=0, len_max=0, items=UnknownSchema())
            if len(items) > max_samples:
                get_logger().debug(
                    "schema: sampling %d of %d array elements", max_samples, len(items)
                )
            merged: SchemaType | None = None
            for item in items[:max_samples]:
                item_schema = _infer(item, max_samples, sample_chars)
                merged = item_schema if merged is None else merge_schemas(merged, item_schema)
            return ArraySchema(
                len_min=len(items),
                len_max=len(items),
                items=merged if merged is not None else UnknownSchema(),
            )
        case JsonKind.OBJECT:
            return ObjectSchema(
                fields={
                    key: FieldSchema(schema=_infer(value[key], max_samples, sample_chars))  # type: ignore[index]
                    for key in sorted(value)  # type: ignore[arg-type]
                }
            )
        case x:
            assert_never(x)


def merge_schemas(a: SchemaType, b: SchemaType) -> SchemaType:
    """Combine two sample schemas into one that describes both."""

    match a, b:
        case NullSchema(), NullSchema():
            return a
        case BoolSchema(), BoolSchema():
            return a
        case UnknownSchema(), UnknownSchema():
            return a
        case NumberSchema(), NumberSchema():
            return NumberSchema(
                min=_pick(min, a.min, b.min),
                max=_pick(max, a.max, b.max),
            )
        case StringSchema(), StringSchema():
            return b
        case ObjectSchema(), ObjectSchema():
            return ObjectSchema(fields=_merge_fields(a.fields, b.fields))
        case ArraySchema(), ArraySchema():
            return ArraySchema(
                len_min=min(a.len_min, b.len_min),
                len_max=max(a.len_max, b.len_max),
                items=merge_schemas(a.items, b.items),
            )
        case _:
            return UnionSchema(type_names=tuple(sorted(set(type_names(a)) | set(type_names(b)))))


def _pick(
    reducer: Callable[[float, float], float],
    left: float | None,
    right: float | None,
) -> float | None:
    if left is None:
        return right
    if right is None:
        return left
    return reducer(left, right)


def _merge_fields(
    a_fields: dict[str, FieldSchema], b_fields: dict[str, FieldSchema]
) -> dict[str, FieldSchema]:
    merged: dict[str, FieldSchema] = {}
    for key in sorted(a_fields.keys() | b_fields.keys()):
        a_field = a_fields.get(key)
        b_field = b_fields.get(key)
        if a_field is not None and b_field is not None:
            merged[key] = FieldSchema(
                schema=merge_schemas(a_field.schema, b_field.schema),
                optional=a_field.optional or b_field.optional,
                count=a_field.count + 1,
            )
        elif a_field is not None:
            merged[key] = a_field.model_copy(update={"optional": True})
        elif b_field is not None:
            merged[key] = b_field.model_copy(update={"optional": True})
    return merged


def type_names(schema: SchemaType) -> tuple[str, ...]:
    """Kind names contributed by ``schema`` to a union; unions contribute all theirs."""

    if isinstance(schema, UnionSchema):
        return schema.type_names
    return (schema.kind,)


def format_schema(schema: SchemaType, indent: int = 0) -> str:
    """Render ``schema`` as an indented, TypeScript-like tree."""

    pad = "  " * indent
    match schema:
        case NullSchema():
            return "null"
        case BoolSchema():
            return "bool"
        case NumberSchema(min=lo, max=hi):
            if lo is None or hi is None:
                return "number"
            if lo == hi:
                return f"number  # {number_text(lo)}"
            return f"number  # {number_text(lo)}..{number_text(hi)}"
        case StringSchema(sample=sample):
            if sample is None:
                return "string"
            return f'string  # "{sample}"'
        case ArraySchema(len_min=len_min, len_max=len_max, items=items):
            length = f"{len_min}" if len_min == len_max else f"{len_min}..{len_max}"
            return f"[{format_schema(items, indent + 1)}]  # array of {length}"
        case ObjectSchema(fields=fields):
            if not fields:
                return "{}"
            lines = ["{"]
            for key, field in fields.items():
                marker = "?" if field.optional else ""
                lines.append(
                    f"{pad}  {key}{marker}: {format_schema(field.schema, indent + 1)},"
                )
            lines.append(f"{pad}}}")
            return "\n".join(lines)
        case UnionSchema(type_names=names):
            return " | ".join(names)
        case UnknownSchema():
            return "unknown"
        case x:
            assert_never(x)


__all__ = [
    "ArraySchema",
    "BoolSchema",
    "FieldSchema",
    "NullSchema",
    "NumberSchema",
    "ObjectSchema",
    "SchemaType",
    "StringSchema",
    "UnionSchema",
    "UnknownSchema",
    "format_schema",
    "infer_schema",
    "merge_schemas",
    "type_names",
]
