"""
Key flattening and expansion.

``flatten_keys`` turns a nested Value into a flat object mapping rendered
flat keys to values; ``expand_keys`` reverses it. Every array and object
node gets its own entry holding an empty ``[]``/``{}`` marker so the exact
shape can be rebuilt::

    flatten_keys({"foo": ["bar"]}, "data")
    # {"data": {}, "data.foo": [], "data.foo[0]": "bar"}
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator

from .. import value as values
from ..exceptions import FlatKeyParseError
from ..key import Ident, KeyParts
from ..value import Object, Value

logger = logging.getLogger(__name__)


class KeyFlattener:
    """Walks a Value depth-first, recording one entry per node."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._stack = KeyParts()

    def flatten(self, value: Value) -> Dict[str, Value]:
        flat: Dict[str, Value] = {}
        self._stack.push_ident(self.prefix)
        self._flatten_value(flat, value)
        self._stack.pop()
        return {key: flat[key] for key in sorted(flat)}

    def _flatten_value(self, flat: Dict[str, Value], value: Value) -> None:
        if isinstance(value, list):
            flat[str(self._stack)] = []
            for index, item in enumerate(value):
                self._stack.push_index(index)
                self._flatten_value(flat, item)
                self._stack.pop()
        elif isinstance(value, dict):
            flat[str(self._stack)] = {}
            for key, item in value.items():
                self._stack.push_ident(key)
                self._flatten_value(flat, item)
                self._stack.pop()
        else:
            flat[str(self._stack)] = value


def flatten_keys(value: Value, prefix: str) -> Object:
    """
    Flatten ``value`` into an object of flat keys, sorted by key.

    Args:
        value: The value to flatten
        prefix: Name of the root entry

    Returns:
        Object mapping flat keys to leaves and container markers
    """
    return KeyFlattener(prefix).flatten(value)


def expand_keys(value: Value) -> Value:
    """
    Rebuild nested values from an object of flat keys.

    Keys that do not parse as flat keys are used literally as one-level
    keys. The per-key values are deep merged in key order. Arrays are
    expanded element-wise; other values are returned unchanged.
    """
    if isinstance(value, dict):
        if not value:
            return value
        result: Value = None
        for key, item in value.items():
            result = values.deep_merge(result, _expand_key(key, item))
        return result

    if isinstance(value, list):
        return [expand_keys(item) for item in value]

    return value


def _expand_key(key: str, value: Value) -> Value:
    try:
        parts = KeyParts.parse(key)
    except FlatKeyParseError:
        logger.debug("Using unparseable flat key %r as literal key", key)
        parts = KeyParts([Ident(key)])

    parts.reverse()
    return _expand_key_parts(parts, value)


def _expand_key_parts(parts: KeyParts, value: Value) -> Value:
    # parts is reversed: the root segment is popped first
    part = parts.pop()
    if part is None:
        return value
    if isinstance(part, Ident):
        return {part.key: _expand_key_parts(parts, value)}
    array: list = [None] * (part.index + 1)
    array[part.index] = _expand_key_parts(parts, value)
    return array


def gron_statements(value: Value, prefix: str = "json") -> Iterator[str]:
    """
    Render ``value`` as gron-style assignment statements.

    Each flattened entry becomes one ``<flat key> = <json>;`` line, with
    containers rendered as their ``{}``/``[]`` marker.
    """
    for key, item in flatten_keys(value, prefix).items():
        yield f"{key} = {values.dumps(item)};"
