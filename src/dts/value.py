"""
Value - the canonical in-memory document representation.

A Value is built from plain Python objects:

- Null:   ``None``
- Bool:   ``bool``
- Number: ``dts.number.Number`` (never a bare int or float)
- String: ``str``
- Array:  ``list`` of Values
- Object: ``dict`` mapping ``str`` to Values, insertion ordered

Structural equality is Python ``==``. This module adds the total order
(``compare``/``SortKey``), hashing, variant projections and the deep merge
used by key expansion and the ``deep_merge`` transformation.
"""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional, Union

from .exceptions import ValueConversionError
from .number import Number

Value = Union[None, bool, Number, str, List[Any], Dict[str, Any]]
Array = List[Value]
Object = Dict[str, Value]


class ValueKind(IntEnum):
    """Value variants in canonical sort order."""
    NULL = 0
    BOOL = 1
    NUMBER = 2
    STRING = 3
    OBJECT = 4
    ARRAY = 5


def kind_of(value: Value) -> ValueKind:
    """
    Return the variant of ``value``.

    Raises:
        ValueConversionError: If ``value`` is not a Value
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, Number):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, list):
        return ValueKind.ARRAY
    raise ValueConversionError(f"not a value: {type(value).__name__}")


# =============================================================================
# Conversion from and to native Python data
# =============================================================================

def from_native(obj: Any) -> Value:
    """
    Convert native Python data into a Value.

    ints and floats become Numbers (non-finite floats become None), tuples
    and lists become arrays, mappings with string keys become objects.

    Raises:
        ValueConversionError: For unsupported types or non-string keys
    """
    if obj is None or isinstance(obj, (bool, str, Number)):
        return obj
    if isinstance(obj, int):
        return Number.from_int(obj)
    if isinstance(obj, float):
        return Number.from_float(obj)
    if isinstance(obj, Mapping):
        result: Object = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise ValueConversionError(
                    f"object keys must be strings, got {type(key).__name__}"
                )
            result[key] = from_native(item)
        return result
    if isinstance(obj, (list, tuple)):
        return [from_native(item) for item in obj]
    raise ValueConversionError(f"cannot convert {type(obj).__name__} to a value")


def to_native(value: Value) -> Any:
    """Convert a Value back to plain Python data (Numbers become int/float)."""
    if isinstance(value, Number):
        return value.to_native()
    if isinstance(value, dict):
        return {key: to_native(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_native(item) for item in value]
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def loads(text: str) -> Value:
    """
    Parse JSON text into a Value, keeping integer and float literals apart.

    Raises:
        ValueError: If ``text`` is not valid JSON
    """
    return json.loads(
        text,
        parse_int=Number.parse,
        parse_float=Number.parse,
        parse_constant=_reject_constant,
    )


def _encode_default(obj: Any) -> Any:
    if isinstance(obj, Number):
        return obj.to_native()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(value: Value, indent: Optional[int] = None) -> str:
    """Render a Value as JSON text."""
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        value,
        default=_encode_default,
        ensure_ascii=False,
        indent=indent,
        separators=separators,
    )


# =============================================================================
# Ordering and hashing
# =============================================================================

def compare(lhs: Value, rhs: Value) -> int:
    """
    Total order over Values, returning -1, 0 or 1.

    Variants order as Null < Bool < Number < String < Object < Array.
    Objects compare by length, then by (key, value) pairs in iteration
    order. Arrays compare by length, then element-wise.
    """
    lhs_kind, rhs_kind = kind_of(lhs), kind_of(rhs)
    if lhs_kind != rhs_kind:
        return -1 if lhs_kind < rhs_kind else 1

    if lhs_kind == ValueKind.NULL:
        return 0
    if lhs_kind == ValueKind.NUMBER:
        return lhs.compare(rhs)
    if lhs_kind in (ValueKind.BOOL, ValueKind.STRING):
        return (lhs > rhs) - (lhs < rhs)

    if len(lhs) != len(rhs):
        return -1 if len(lhs) < len(rhs) else 1

    if lhs_kind == ValueKind.OBJECT:
        for (lkey, lval), (rkey, rval) in zip(lhs.items(), rhs.items()):
            if lkey != rkey:
                return -1 if lkey < rkey else 1
            result = compare(lval, rval)
            if result:
                return result
        return 0

    for lval, rval in zip(lhs, rhs):
        result = compare(lval, rval)
        if result:
            return result
    return 0


class SortKey:
    """Key wrapper ordering Values by ``compare``, for ``sorted(key=SortKey)``."""

    __slots__ = ("value",)

    def __init__(self, value: Value):
        self.value = value

    def __lt__(self, other: "SortKey") -> bool:
        return compare(self.value, other.value) < 0

    def __gt__(self, other: "SortKey") -> bool:
        return compare(self.value, other.value) > 0

    def __le__(self, other: "SortKey") -> bool:
        return compare(self.value, other.value) <= 0

    def __ge__(self, other: "SortKey") -> bool:
        return compare(self.value, other.value) >= 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortKey):
            return NotImplemented
        return compare(self.value, other.value) == 0

    __hash__ = None


def value_hash(value: Value) -> int:
    """Hash a Value consistently with ``==`` (object hashes ignore key order)."""
    if isinstance(value, dict):
        return hash(frozenset((key, value_hash(item)) for key, item in value.items()))
    if isinstance(value, list):
        return hash(tuple(value_hash(item) for item in value))
    return hash(value)


# =============================================================================
# Projections
# =============================================================================

def is_null(value: Value) -> bool:
    return value is None


def is_empty(value: Value) -> bool:
    """True for Null, an empty array or an empty object; False otherwise."""
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def as_array(value: Value) -> Optional[Array]:
    return value if isinstance(value, list) else None


def as_object(value: Value) -> Optional[Object]:
    return value if isinstance(value, dict) else None


def as_str(value: Value) -> Optional[str]:
    return value if isinstance(value, str) else None


def as_bool(value: Value) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def as_number(value: Value) -> Optional[Number]:
    return value if isinstance(value, Number) else None


def as_f64(value: Value) -> Optional[float]:
    return value.as_float() if isinstance(value, Number) else None


def as_i64(value: Value) -> Optional[int]:
    return value.as_int() if isinstance(value, Number) else None


def as_u64(value: Value) -> Optional[int]:
    return value.as_unsigned() if isinstance(value, Number) else None


def to_array(value: Value) -> Array:
    """Return arrays as they are, wrap anything else in a one-element array."""
    if isinstance(value, list):
        return value
    return [value]


def into_object(value: Value, key: str) -> Object:
    """Return objects as they are, wrap anything else as ``{key: value}``."""
    if isinstance(value, dict):
        return value
    return {key: value}


def into_string(value: Value) -> str:
    """Return strings unquoted and anything else as compact JSON."""
    if isinstance(value, str):
        return value
    return dumps(value)


def type_name(value: Value) -> str:
    return kind_of(value).name.lower()


# =============================================================================
# Deep merge
# =============================================================================

def deep_merge(lhs: Value, rhs: Value) -> Value:
    """
    Merge ``rhs`` into ``lhs`` and return the result.

    - object + object: union of keys, shared keys are merged recursively
    - array + array: element-wise merge, ``lhs`` is padded with Null up to
      the length of ``rhs``
    - anything + Null: ``lhs`` is kept
    - any other combination: ``rhs`` replaces ``lhs``

    Containers in ``lhs`` are updated in place. ``rhs`` is consumed: its
    subtrees are moved into the result and it must not be used afterwards.
    """
    if isinstance(lhs, dict) and isinstance(rhs, dict):
        for key, item in rhs.items():
            if key in lhs:
                lhs[key] = deep_merge(lhs[key], item)
            else:
                lhs[key] = item
        return lhs

    if isinstance(lhs, list) and isinstance(rhs, list):
        if len(lhs) < len(rhs):
            lhs.extend([None] * (len(rhs) - len(lhs)))
        for index, item in enumerate(rhs):
            lhs[index] = deep_merge(lhs[index], item)
        return lhs

    if rhs is None:
        return lhs

    return rhs
