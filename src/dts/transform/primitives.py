"""
Transform primitives.

Every primitive owns the configuration it was built with (a compiled query
or regex, a nested Chain, ...) and implements ``transform`` as a total
function: on a type mismatch the input is returned unchanged.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Union

from .. import value as values
from ..exceptions import RegexError
from ..value import Value
from .base import Chain, Transform
from .jsonpath import REMOVE, JsonPathMutator, JsonPathSelector
from .key import expand_keys, flatten_keys
from .sort import Order, ValueSorter
from .visitor import Visitor, walk


def compile_regex(pattern: str) -> "re.Pattern[str]":
    """
    Compile a regular expression.

    Raises:
        RegexError: If ``pattern`` is invalid
    """
    try:
        return re.compile(pattern)
    except re.error as err:
        raise RegexError(f"Invalid regex `{pattern}`: {err}") from err


# =============================================================================
# Query based transforms
# =============================================================================

@dataclass
class Select(Transform):
    """Selects all values matching a JSONPath query into an array."""
    query: str
    selector: JsonPathSelector = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.selector = JsonPathSelector(self.query)

    def transform(self, value: Value) -> Value:
        return self.selector.select(value)


@dataclass
class Mutate(Transform):
    """Replaces every query match with the result of a nested chain."""
    query: str
    chain: Transform
    mutator: JsonPathMutator = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.mutator = JsonPathMutator(self.query)

    def transform(self, value: Value) -> Value:
        return self.mutator.mutate(value, self.chain.transform)


@dataclass
class Delete(Transform):
    """Replaces every query match with null."""
    query: str
    mutator: JsonPathMutator = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.mutator = JsonPathMutator(self.query)

    def transform(self, value: Value) -> Value:
        return self.mutator.mutate(value, lambda _: None)


@dataclass
class Remove(Transform):
    """Removes every query match from its container."""
    query: str
    mutator: JsonPathMutator = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.mutator = JsonPathMutator(self.query)

    def transform(self, value: Value) -> Value:
        return self.mutator.mutate(value, lambda _: REMOVE)


# =============================================================================
# Key transforms
# =============================================================================

@dataclass
class FlattenKeys(Transform):
    """Flattens a value into an object of flat keys."""
    prefix: str = "data"

    def transform(self, value: Value) -> Value:
        return flatten_keys(value, self.prefix)


@dataclass
class DeleteKeys(Transform):
    """Drops the keys of a top-level object that match a regex."""
    pattern: str
    regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.regex = compile_regex(self.pattern)

    def transform(self, value: Value) -> Value:
        if not isinstance(value, dict):
            return value
        return {key: item for key, item in value.items() if not self.regex.search(key)}


@dataclass
class EachKey(Transform):
    """Applies a chain to every key of an object."""
    chain: Transform

    def transform(self, value: Value) -> Value:
        if not isinstance(value, dict):
            return value
        return {
            values.into_string(self.chain.transform(key)): item
            for key, item in value.items()
        }


@dataclass
class EachValue(Transform):
    """Applies a chain to every element of an array or value of an object."""
    chain: Transform

    def transform(self, value: Value) -> Value:
        if isinstance(value, list):
            return [self.chain.transform(item) for item in value]
        if isinstance(value, dict):
            return {key: self.chain.transform(item) for key, item in value.items()}
        return value


# =============================================================================
# Structural transforms
# =============================================================================

@dataclass
class Sort(Transform):
    """Sorts arrays and objects recursively up to ``max_depth``."""
    order: Order = Order.ASC
    max_depth: Optional[int] = None

    def transform(self, value: Value) -> Value:
        return ValueSorter(self.order, self.max_depth).sort(value)


@dataclass
class Visit(Transform):
    """Walks a value bottom-up, calling a visitor for keys and values."""
    visitor: Visitor
    max_depth: Optional[int] = None

    def transform(self, value: Value) -> Value:
        return walk(value, self.visitor, self.max_depth)


@dataclass
class ReplaceString(Transform):
    """
    Replaces regex matches in string values.

    ``replacement`` may reference capture groups (``\\1``, ``\\g<name>``).
    ``limit`` caps the number of replacements, 0 replaces all.
    """
    pattern: str
    replacement: str
    limit: int = 0
    regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.regex = compile_regex(self.pattern)
        # Expand the template once against an empty match so bad group
        # references fail here instead of during transform.
        probe = re.compile(self.pattern + "|", self.regex.flags)
        try:
            probe.sub(self.replacement, "", count=1)
        except re.error as err:
            raise RegexError(
                f"Invalid replacement `{self.replacement}` for `{self.pattern}`: {err}"
            ) from err

    def transform(self, value: Value) -> Value:
        if not isinstance(value, str):
            return value
        return self.regex.sub(self.replacement, value, count=self.limit)


@dataclass
class Wrap(Transform):
    """Wraps a value in a one-element array, or a one-key object if ``key`` is set."""
    key: Optional[str] = None

    @classmethod
    def array(cls) -> "Wrap":
        return cls()

    @classmethod
    def object(cls, key: str) -> "Wrap":
        return cls(key)

    def transform(self, value: Value) -> Value:
        if self.key is None:
            return [value]
        return {self.key: value}


@dataclass
class Insert(Transform):
    """
    Inserts a value into an object by key or into an array by index.

    Array indices past the end append. Any other combination is a no-op.
    """
    key_or_index: Union[str, int]
    value: Value

    def transform(self, value: Value) -> Value:
        if isinstance(value, dict) and isinstance(self.key_or_index, str):
            value[self.key_or_index] = copy.deepcopy(self.value)
        elif isinstance(value, list) and isinstance(self.key_or_index, int):
            if self.key_or_index > len(value):
                value.append(copy.deepcopy(self.value))
            else:
                value.insert(self.key_or_index, copy.deepcopy(self.value))
        return value


# =============================================================================
# Unparameterized transforms
# =============================================================================

def flatten(value: Value) -> Value:
    """
    Remove one level of nesting.

    A one-element array or object unwraps to its only element; a longer
    array concatenates its children, wrapping non-array children.
    """
    if isinstance(value, list):
        if len(value) == 1:
            return value[0]
        result = []
        for item in value:
            result.extend(values.to_array(item))
        return result
    if isinstance(value, dict) and len(value) == 1:
        return next(iter(value.values()))
    return value


def remove_empty_values(value: Value) -> Value:
    """Recursively drop null, empty array and empty object children."""
    if isinstance(value, list):
        cleaned = (remove_empty_values(item) for item in value)
        return [item for item in cleaned if not values.is_empty(item)]
    if isinstance(value, dict):
        cleaned_items = ((key, remove_empty_values(item)) for key, item in value.items())
        return {key: item for key, item in cleaned_items if not values.is_empty(item)}
    return value


def deep_merge(value: Value) -> Value:
    """Deep merge the elements of an array left to right."""
    if not isinstance(value, list):
        return value
    result: Value = []
    for item in value:
        result = values.deep_merge(result, item)
    return result


def keys(value: Value) -> Value:
    """Object keys as an array; empty for anything else."""
    if isinstance(value, dict):
        return list(value.keys())
    return []


def values_of(value: Value) -> Value:
    """Array elements or object values as an array; empty for anything else."""
    if isinstance(value, dict):
        return list(value.values())
    if isinstance(value, list):
        return value
    return []


def arrays_to_objects(value: Value) -> Value:
    """Recursively turn arrays into objects keyed by the stringified index."""
    if isinstance(value, list):
        return {str(index): arrays_to_objects(item) for index, item in enumerate(value)}
    if isinstance(value, dict):
        return {key: arrays_to_objects(item) for key, item in value.items()}
    return value


class Operation(Enum):
    """Transforms that take no arguments."""
    FLATTEN = "flatten"
    REMOVE_EMPTY_VALUES = "remove_empty_values"
    DEEP_MERGE = "deep_merge"
    EXPAND_KEYS = "expand_keys"
    KEYS = "keys"
    VALUES = "values"
    ARRAYS_TO_OBJECTS = "arrays_to_objects"


_OPERATIONS: Dict[Operation, Callable[[Value], Value]] = {
    Operation.FLATTEN: flatten,
    Operation.REMOVE_EMPTY_VALUES: remove_empty_values,
    Operation.DEEP_MERGE: deep_merge,
    Operation.EXPAND_KEYS: expand_keys,
    Operation.KEYS: keys,
    Operation.VALUES: values_of,
    Operation.ARRAYS_TO_OBJECTS: arrays_to_objects,
}


@dataclass(frozen=True)
class Unparameterized(Transform):
    """
    A transform without arguments.

    Use the shared instances, e.g. ``Unparameterized.FLATTEN``.
    """
    operation: Operation

    def transform(self, value: Value) -> Value:
        return _OPERATIONS[self.operation](value)


for _operation in Operation:
    setattr(Unparameterized, _operation.name, Unparameterized(_operation))
del _operation


__all__ = [
    "Chain",
    "Select",
    "Mutate",
    "Delete",
    "Remove",
    "FlattenKeys",
    "DeleteKeys",
    "EachKey",
    "EachValue",
    "Sort",
    "Visit",
    "ReplaceString",
    "Wrap",
    "Insert",
    "Operation",
    "Unparameterized",
    "compile_regex",
    "flatten",
    "remove_empty_values",
    "deep_merge",
    "keys",
    "values_of",
    "arrays_to_objects",
]
