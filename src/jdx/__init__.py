"""
jdx: explore JSON with dot-paths, filters and transform chains.

This package uses a src-layout. Import the package as `jdx`.
"""

from importlib.metadata import version

__version__ = version("jdx")

from .config import JdxConfig, get_config, load_config, set_config
from .engine import run_query
from .errors import (
    EmptyQueryError,
    InvalidIndexError,
    InvalidPredicateError,
    JdxError,
    MustStartWithDotError,
    NoMatchError,
    PredicateError,
    QueryError,
    TransformError,
    UnclosedBracketError,
    UnclosedQuoteError,
    UnexpectedCharError,
)
from .query import (
    FLOAT_EPSILON,
    CompareOp,
    PathSegment,
    Predicate,
    TraversalResult,
    eval_predicate,
    get_available_keys,
    get_last_keyword,
    parse,
    parse_predicate,
    traverse,
)
from .runtime import configure_logging, get_logger
from .schema import FieldSchema, SchemaType, format_schema, infer_schema, merge_schemas
from .transform import apply_transform, split_query_and_transforms
from .values import MISSING, JsonValue, compact_print, pretty_print

__all__ = [
    "__version__",
    "FLOAT_EPSILON",
    "MISSING",
    "CompareOp",
    "EmptyQueryError",
    "FieldSchema",
    "InvalidIndexError",
    "InvalidPredicateError",
    "JdxConfig",
    "JdxError",
    "JsonValue",
    "MustStartWithDotError",
    "NoMatchError",
    "PathSegment",
    "Predicate",
    "PredicateError",
    "QueryError",
    "SchemaType",
    "TransformError",
    "TraversalResult",
    "UnclosedBracketError",
    "UnclosedQuoteError",
    "UnexpectedCharError",
    "apply_transform",
    "compact_print",
    "configure_logging",
    "eval_predicate",
    "format_schema",
    "get_available_keys",
    "get_config",
    "get_last_keyword",
    "get_logger",
    "infer_schema",
    "load_config",
    "merge_schemas",
    "parse",
    "parse_predicate",
    "pretty_print",
    "run_query",
    "set_config",
    "split_query_and_transforms",
    "traverse",
]
