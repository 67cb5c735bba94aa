"""Walk a JSON value along a compiled path."""

from __future__ import annotations

import copy
from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

from ..runtime.logging import get_logger
from ..values import MISSING, JsonValue, _Missing
from .ast import (
    FilterSegment,
    IndexSegment,
    KeySegment,
    PathSegment,
    SliceSegment,
    WildcardSegment,
)
from .predicate import eval_predicate


@dataclass(frozen=True)
class TraversalResult:
    """Outcome of ``traverse``.

    ``value`` is ``MISSING`` when some segment failed to resolve; in that
    case ``parent`` is the container that failed to provide it and
    ``depth`` counts the segments consumed before the failure.
    """

    value: JsonValue | _Missing = MISSING
    parent: JsonValue | _Missing = MISSING
    depth: int = 0

    @property
    def found(self) -> bool:
        return self.value is not MISSING


def traverse(root: JsonValue, segments: Sequence[PathSegment]) -> TraversalResult:
    """Resolve ``segments`` against ``root``.

    ``Slice`` and ``Wildcard`` end the walk as soon as they apply; any
    later segments are not evaluated. ``Filter`` narrows the current array
    and the walk continues with the next segment.
    """

    if not segments:
        return TraversalResult(value=copy.deepcopy(root), depth=0)

    current: JsonValue = root
    parent: JsonValue | _Missing = MISSING
    depth = 0

    for segment in segments:
        match segment:
            case KeySegment(name=name):
                if not isinstance(current, dict) or name not in current:
                    return _stopped(current, depth)
                parent, current = current, current[name]

            case IndexSegment(index=index):
                if not isinstance(current, list):
                    return _stopped(current, depth)
                resolved = len(current) + index if index < 0 else index
                if not 0 <= resolved < len(current):
                    return _stopped(current, depth)
                parent, current = current, current[resolved]

            case SliceSegment(start=start, end=end):
                if not isinstance(current, list):
                    return _stopped(current, depth)
                lo, hi = _clamp_slice(len(current), start, end)
                return _result(current[lo:hi], current, depth + 1)

            case WildcardSegment():
                if isinstance(current, dict):
                    return _result(list(current.values()), current, depth + 1)
                if isinstance(current, list):
                    return _result(current, parent, depth + 1)
                return _stopped(current, depth)

            case FilterSegment(predicate=predicate):
                if not isinstance(current, list):
                    return _stopped(current, depth)
                filtered = [item for item in current if eval_predicate(item, predicate)]
                parent, current = current, filtered

            case x:
                assert_never(x)

        depth += 1

    return _result(current, parent, depth)


def _clamp_slice(length: int, start: int | None, end: int | None) -> tuple[int, int]:
    lo = 0 if start is None else start
    hi = length if end is None else end
    if lo < 0:
        lo += length
    if hi < 0:
        hi += length
    lo = min(max(lo, 0), length)
    hi = min(max(hi, 0), length)
    return lo, max(lo, hi)


def _result(value: JsonValue, parent: JsonValue | _Missing, depth: int) -> TraversalResult:
    return TraversalResult(
        value=copy.deepcopy(value),
        parent=copy.deepcopy(parent),
        depth=depth,
    )


def _stopped(container: JsonValue, depth: int) -> TraversalResult:
    get_logger().debug("traverse: stopped after %d segment(s)", depth)
    return TraversalResult(value=MISSING, parent=copy.deepcopy(container), depth=depth)


def get_available_keys(value: JsonValue) -> list[str]:
    """Keys a user could type next: sorted object keys or ``[i]`` indices."""

    if isinstance(value, dict):
        return sorted(value)
    if isinstance(value, list):
        return [f"[{i}]" for i in range(len(value))]
    return []


__all__ = ["TraversalResult", "get_available_keys", "traverse"]
