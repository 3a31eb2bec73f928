"""
JSONPath select and mutate capabilities backed by jsonpath-ng.

``JsonPathSelector`` returns all values matching a query.
``JsonPathMutator`` locates all matches and replaces each one with the
result of a callback, or excises it when the callback returns ``REMOVE``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, List, Optional, Tuple, Union

from jsonpath_ng import jsonpath as jp
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as parse_jsonpath

from ..exceptions import JsonPathError
from ..value import Array, Value

logger = logging.getLogger(__name__)

PathSegment = Union[str, int]


class _Remove:
    """Replacement result that removes the matched node."""

    def __repr__(self) -> str:
        return "REMOVE"


REMOVE = _Remove()

Replacement = Callable[[Value], Any]


def compile_query(query: str) -> jp.JSONPath:
    """
    Compile a JSONPath query.

    Raises:
        JsonPathError: If the query does not parse
    """
    try:
        return parse_jsonpath(query)
    except (JSONPathError, ValueError, TypeError) as err:
        raise JsonPathError(f"Failed to parse JSONPath query:\n{err}") from err


# =============================================================================
# Match paths
# =============================================================================

def _segments(path: jp.JSONPath) -> Optional[List[PathSegment]]:
    """
    Turn a match's full path into key/index segments.

    Returns None for paths that do not address a location in the document
    (e.g. the results of ``len`` or arithmetic extensions).
    """
    if isinstance(path, (jp.Root, jp.This)):
        return []
    if isinstance(path, jp.Child):
        left = _segments(path.left)
        right = _segments(path.right)
        if left is None or right is None:
            return None
        return left + right
    if isinstance(path, jp.Fields):
        if len(path.fields) != 1:
            return None
        return [path.fields[0]]
    if isinstance(path, jp.Index):
        indices = getattr(path, "indices", None) or (path.index,)
        if len(indices) != 1:
            return None
        return [indices[0]]
    return None


def _sort_key(segments: Tuple[PathSegment, ...]) -> Tuple[Tuple[int, Any], ...]:
    return tuple((0, s) if isinstance(s, int) else (1, s) for s in segments)


# =============================================================================
# Capabilities
# =============================================================================

class JsonPathSelector:
    """Selects all values matching a query; the result is always an array."""

    def __init__(self, query: str):
        self.query = query
        self._path = compile_query(query)

    def select(self, value: Value) -> Array:
        # Matches may overlap or repeat, so each one is copied out
        return [copy.deepcopy(match.value) for match in self._path.find(value)]


class JsonPathMutator:
    """
    Replaces every node matching a query in place.

    Matches are processed deepest first and, within one container, from the
    highest index down, so removals never shift a pending match.
    """

    def __init__(self, query: str):
        self.query = query
        self._path = compile_query(query)

    def mutate(self, value: Value, replace: Replacement) -> Value:
        paths = set()
        for match in self._path.find(value):
            segments = _segments(match.full_path)
            if segments is None:
                logger.debug("Skipping match without location for %r", self.query)
                continue
            paths.add(tuple(segments))

        if () in paths:
            result = replace(value)
            return None if result is REMOVE else result

        for segments in sorted(paths, key=_sort_key, reverse=True):
            _replace_at(value, segments, replace)
        return value


def _replace_at(root: Value, segments: Tuple[PathSegment, ...], replace: Replacement) -> None:
    parent = root
    for segment in segments[:-1]:
        parent = _child(parent, segment)
        if parent is None:
            return

    last = segments[-1]
    if isinstance(parent, dict) and isinstance(last, str):
        if last not in parent:
            return
        result = replace(parent[last])
        if result is REMOVE:
            del parent[last]
        else:
            parent[last] = result
    elif isinstance(parent, list) and isinstance(last, int):
        index = last + len(parent) if last < 0 else last
        if not 0 <= index < len(parent):
            return
        result = replace(parent[index])
        if result is REMOVE:
            del parent[index]
        else:
            parent[index] = result


def _child(container: Value, segment: PathSegment) -> Value:
    if isinstance(container, dict) and isinstance(segment, str):
        return container.get(segment)
    if isinstance(container, list) and isinstance(segment, int):
        if -len(container) <= segment < len(container):
            return container[segment]
    return None
