from __future__ import annotations

from .errors import NoMatchError
from .query.parser import parse
from .query.traverse import traverse
from .runtime.logging import get_logger
from .transform import apply_transform, split_query_and_transforms
from .values import JsonValue


def run_query(value: JsonValue, query: str) -> JsonValue:
    """Evaluate a full query line such as ``.users[age > 30] :pick name``.

    The path part is parsed and traversed first; an unresolved path raises
    ``NoMatchError``. The transform chain, if any, is then applied to the
    resolved value.
    """

    path, chain = split_query_and_transforms(query)
    segments = parse(path)
    result = traverse(value, segments)
    if not result.found:
        get_logger().debug(
            "run_query: %r resolved %d of %d segment(s)",
            path,
            result.depth,
            len(segments),
        )
        raise NoMatchError(path, result)
    if chain is None:
        return result.value  # type: ignore[return-value]
    return apply_transform(result.value, chain)  # type: ignore[arg-type]


__all__ = ["run_query"]
