"""
Visitors - pluggable hooks for recursive walks over a Value.

A walk visits children before their parent (bottom-up). ``visit_key`` is
called for every object key and ``visit_value`` for every node, including
containers once their children have been visited.
"""

from __future__ import annotations

from typing import Optional

from .. import value as values
from ..value import Value
from .base import Transform


class Visitor:
    """Identity visitor; subclasses override the hooks they need."""

    def visit_key(self, key: str) -> str:
        return key

    def visit_value(self, value: Value) -> Value:
        return value


class KeyVisitor(Visitor):
    """Applies a transform to every object key, read as a String value."""

    def __init__(self, transform: Transform):
        self.transform = transform

    def visit_key(self, key: str) -> str:
        return values.into_string(self.transform.transform(key))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, KeyVisitor) and self.transform == other.transform

    def __repr__(self) -> str:
        return f"KeyVisitor({self.transform!r})"


class ValueVisitor(Visitor):
    """Applies a transform to every value."""

    def __init__(self, transform: Transform):
        self.transform = transform

    def visit_value(self, value: Value) -> Value:
        return self.transform.transform(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ValueVisitor) and self.transform == other.transform

    def __repr__(self) -> str:
        return f"ValueVisitor({self.transform!r})"


def walk(value: Value, visitor: Visitor, max_depth: Optional[int] = None) -> Value:
    """
    Walk ``value`` bottom-up, calling the visitor hooks.

    Args:
        value: Root of the walk
        visitor: Hooks to call
        max_depth: Deepest collection level whose keys and children are
            visited; None walks the whole tree, 0 only the root collection

    Returns:
        The visited value
    """
    return _walk(value, visitor, max_depth, 0)


def _walk(value: Value, visitor: Visitor, max_depth: Optional[int], depth: int) -> Value:
    if max_depth is None or depth <= max_depth:
        if isinstance(value, list):
            value = [_walk(item, visitor, max_depth, depth + 1) for item in value]
        elif isinstance(value, dict):
            value = {
                visitor.visit_key(key): _walk(item, visitor, max_depth, depth + 1)
                for key, item in value.items()
            }
    return visitor.visit_value(value)
