"""
Transform core - the Transform abstraction and the Chain combinator.

A Transform is a total function over Values: it consumes its input and
returns a new Value and never raises for type mismatches. All fallible work
(parsing queries, regexes and literals) happens when a Transform is
constructed.

Transforms compose with ``>>``::

    chain = Unparameterized.FLATTEN >> Sort(Order.DESC)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List

from ..value import Value

logger = logging.getLogger(__name__)


# =============================================================================
# Transform
# =============================================================================

class Transform(ABC):
    """
    A transformation step: Value -> Value.

    ::: This is-in-layer Domain-Layer.
    ::: This is stateless.
    """

    @abstractmethod
    def transform(self, value: Value) -> Value:
        """Transform ``value`` and return the result."""
        pass

    def __call__(self, value: Value) -> Value:
        return self.transform(value)

    def __rshift__(self, other: "Transform") -> "Chain":
        """Compose transforms: first >> second"""
        return Chain([self, other])

    def and_then(self, other: "Transform") -> "Chain":
        """Compose transforms: first.and_then(second)"""
        return self >> other


# =============================================================================
# Chain
# =============================================================================

class Chain(Transform):
    """
    An ordered sequence of transforms, itself a Transform.

    The input is folded through the members left to right. Nested chains
    are flattened on construction. A Chain holds no per-call state, so one
    instance may be applied to many documents, also concurrently.

    ::: This is-in-layer Domain-Layer.
    ::: This is a composite.
    """

    def __init__(self, transforms: Iterable[Transform] = ()):
        self._transforms: List[Transform] = []
        for transform in transforms:
            if isinstance(transform, Chain):
                self._transforms.extend(transform)
            else:
                self._transforms.append(transform)

    def transform(self, value: Value) -> Value:
        for transform in self._transforms:
            logger.debug("Applying %r", transform)
            value = transform.transform(value)
        return value

    def __rshift__(self, other: Transform) -> "Chain":
        return Chain([*self._transforms, other])

    def __iter__(self) -> Iterator[Transform]:
        return iter(self._transforms)

    def __len__(self) -> int:
        return len(self._transforms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return self._transforms == other._transforms

    def __repr__(self) -> str:
        return f"Chain({self._transforms!r})"
