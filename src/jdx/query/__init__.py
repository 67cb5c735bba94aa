from .ast import (
    CompareOp,
    Filter,
    FilterSegment,
    Index,
    IndexSegment,
    Key,
    KeySegment,
    PathSegment,
    Predicate,
    Scalar,
    Slice,
    SliceSegment,
    Wildcard,
    WildcardSegment,
)
from .parser import get_last_keyword, parse
from .predicate import FLOAT_EPSILON, eval_predicate, parse_predicate
from .traverse import TraversalResult, get_available_keys, traverse

__all__ = [
    "FLOAT_EPSILON",
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
    "TraversalResult",
    "Wildcard",
    "WildcardSegment",
    "eval_predicate",
    "get_available_keys",
    "get_last_keyword",
    "parse",
    "parse_predicate",
    "traverse",
]
