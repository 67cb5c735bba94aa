import json
import math

from jdx.schema import (
    ArraySchema,
    FieldSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    StringSchema,
    UnionSchema,
    UnknownSchema,
    format_schema,
    infer_schema,
    merge_schemas,
)
from jdx.testing import override_config

PEOPLE = [
    {"name": "Alice", "age": 25},
    {"name": "Bob", "age": 35, "email": "b@x.com"},
]


def test_optional_field_detected_across_samples() -> None:
    schema = infer_schema(PEOPLE, 10)

    assert isinstance(schema, ArraySchema)
    assert isinstance(schema.items, ObjectSchema)
    fields = schema.items.fields
    assert fields["email"].optional
    assert not fields["name"].optional
    assert not fields["age"].optional
    assert fields["age"].count == 2
    assert fields["email"].count == 1


def test_number_range_and_string_sample() -> None:
    schema = infer_schema(PEOPLE, 10)

    fields = schema.items.fields  # type: ignore[union-attr]
    assert fields["age"].schema == NumberSchema(min=25, max=35)
    assert fields["name"].schema == StringSchema(sample="Bob")


def test_object_fields_are_sorted() -> None:
    schema = infer_schema({"b": 1, "c": None, "a": True})

    assert isinstance(schema, ObjectSchema)
    assert list(schema.fields) == ["a", "b", "c"]


def test_sampling_keeps_real_length() -> None:
    schema = infer_schema(list(range(100)), 3)

    assert schema == ArraySchema(len_min=100, len_max=100, items=NumberSchema(min=0, max=2))


def test_default_sample_count_comes_from_config() -> None:
    with override_config(schema_max_samples=2):
        schema = infer_schema(list(range(10)))

    assert schema.items == NumberSchema(min=0, max=1)  # type: ignore[union-attr]


def test_string_sample_is_truncated() -> None:
    assert infer_schema("x" * 50) == StringSchema(sample="x" * 30)
    with override_config(string_sample_chars=4):
        assert infer_schema("abcdefgh") == StringSchema(sample="abcd")


def test_empty_array_has_unknown_items() -> None:
    assert infer_schema([]) == ArraySchema(len_min=0, len_max=0, items=UnknownSchema())


def test_mixed_array_becomes_union() -> None:
    schema = infer_schema([1, "a", None])

    assert schema.items == UnionSchema(type_names=("null", "number", "string"))  # type: ignore[union-attr]


def test_union_names_are_flattened() -> None:
    first = merge_schemas(NumberSchema(min=1, max=1), StringSchema(sample="a"))
    second = merge_schemas(first, NullSchema())

    assert second == UnionSchema(type_names=("null", "number", "string"))


def test_merge_unknown() -> None:
    assert merge_schemas(UnknownSchema(), UnknownSchema()) == UnknownSchema()
    assert merge_schemas(UnknownSchema(), NullSchema()) == UnionSchema(
        type_names=("null", "unknown")
    )


def test_nested_array_lengths_merge() -> None:
    schema = infer_schema([[1], [1, 2, 3]])

    assert schema.items == ArraySchema(  # type: ignore[union-attr]
        len_min=1, len_max=3, items=NumberSchema(min=1, max=3)
    )


def test_field_schema_accepts_alias_and_name() -> None:
    by_alias = FieldSchema(schema=NullSchema())
    by_name = FieldSchema(schema_=NullSchema())

    assert by_alias == by_name
    assert by_alias.model_dump(by_alias=True) == {
        "schema": {"kind": "null"},
        "optional": False,
        "count": 1,
    }


def test_format_schema() -> None:
    rendered = format_schema(infer_schema(PEOPLE, 10))

    assert rendered == (
        "[{\n"
        "    age: number  # 25..35,\n"
        '    email?: string  # "b@x.com",\n'
        '    name: string  # "Bob",\n'
        "  }]  # array of 2"
    )


def test_format_schema_scalars_and_empties() -> None:
    assert format_schema(infer_schema(None)) == "null"
    assert format_schema(infer_schema(False)) == "bool"
    assert format_schema(infer_schema(2.5)) == "number  # 2.5"
    assert format_schema(infer_schema({})) == "{}"
    assert format_schema(infer_schema([])) == "[unknown]  # array of 0"
    assert format_schema(NumberSchema()) == "number"
    assert format_schema(UnionSchema(type_names=("bool", "string"))) == "bool | string"


def test_format_schema_nested_object() -> None:
    rendered = format_schema(infer_schema({"user": {"id": 7}}))

    assert rendered == "{\n  user: {\n    id: number  # 7,\n  },\n}"


def test_huge_integer_becomes_infinite_range() -> None:
    huge = json.loads("1" + "0" * 400)

    schema = infer_schema([huge, 1], 10)

    assert schema.items == NumberSchema(min=1, max=math.inf)  # type: ignore[union-attr]
    assert format_schema(infer_schema(huge)) == "number  # inf"
