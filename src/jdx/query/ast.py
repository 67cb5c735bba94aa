"""AST models for compiled path queries and filter predicates."""

from __future__ import annotations

import enum
from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field


Scalar: TypeAlias = str | float | bool | None


class CompareOp(enum.StrEnum):
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="

    @property
    def is_ordering(self) -> bool:
        return self not in (CompareOp.EQ, CompareOp.NE)


class _Node(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Predicate(_Node):
    field: str = Field(min_length=1)
    op: CompareOp
    value: Scalar

    def __str__(self) -> str:
        return f"{self.field} {self.op.value} {_literal_text(self.value)}"


class KeySegment(_Node):
    kind: Literal["key"] = "key"
    name: str


class IndexSegment(_Node):
    kind: Literal["index"] = "index"
    index: int


class SliceSegment(_Node):
    kind: Literal["slice"] = "slice"
    start: int | None = None
    end: int | None = None


class WildcardSegment(_Node):
    kind: Literal["wildcard"] = "wildcard"


class FilterSegment(_Node):
    kind: Literal["filter"] = "filter"
    predicate: Predicate


PathSegment: TypeAlias = Annotated[
    KeySegment | IndexSegment | SliceSegment | WildcardSegment | FilterSegment,
    Field(discriminator="kind"),
]


def Key(name: str) -> KeySegment:
    return KeySegment(name=name)


def Index(index: int) -> IndexSegment:
    return IndexSegment(index=index)


def Slice(start: int | None = None, end: int | None = None) -> SliceSegment:
    return SliceSegment(start=start, end=end)


def Wildcard() -> WildcardSegment:
    return WildcardSegment()


def Filter(predicate: Predicate) -> FilterSegment:
    return FilterSegment(predicate=predicate)


def _literal_text(value: Scalar) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return repr(value)


__all__ = [
    "CompareOp",
    "Filter",
    "FilterSegment",
    "Index",
    "IndexSegment",
    "Key",
    "KeySegment",
    "PathSegment",
    "Predicate",
    "Scalar",
    "Slice",
    "SliceSegment",
    "Wildcard",
    "WildcardSegment",
]
