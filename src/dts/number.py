"""
Number - the numeric type of the canonical value model.

A Number keeps one of three internal representations so integers never get
rounded through a float on their way through a transformation:

- POS_INT: a non-negative integer
- NEG_INT: a negative integer
- FLOAT:   a finite float

Equality and hashing only match numbers of the same representation, so the
integer ``1`` and the float ``1.0`` are different values. Ordering is total:
integers compare exactly, mixed int/float pairs compare as floats, and a pair
that is not comparable orders as equal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class NumberKind(Enum):
    """Internal representation of a Number."""
    POS_INT = "pos_int"
    NEG_INT = "neg_int"
    FLOAT = "float"


@dataclass(frozen=True, eq=False)
class Number:
    """
    A JSON-compatible number.

    Construct with ``Number.from_int``, ``Number.from_float`` or
    ``Number.parse``; the dataclass constructor does not validate.

    ::: This is-in-layer Domain-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    kind: NumberKind
    value: Union[int, float]

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_int(cls, value: int) -> "Number":
        if isinstance(value, bool):
            raise TypeError("bool is not a number")
        if value >= 0:
            return cls(NumberKind.POS_INT, int(value))
        return cls(NumberKind.NEG_INT, int(value))

    @classmethod
    def from_float(cls, value: float) -> Optional["Number"]:
        """Create a float Number, or return None if ``value`` is NaN or infinite."""
        value = float(value)
        if not math.isfinite(value):
            return None
        return cls(NumberKind.FLOAT, value)

    @classmethod
    def parse(cls, text: str) -> "Number":
        """
        Parse a JSON number literal.

        Literals without a fraction or exponent become integers, everything
        else a float.

        Raises:
            ValueError: If ``text`` is not a finite number
        """
        text = text.strip()
        if text and "." not in text and "e" not in text and "E" not in text:
            return cls.from_int(int(text))
        number = cls.from_float(float(text))
        if number is None:
            raise ValueError(f"number out of range: {text}")
        return number

    # =========================================================================
    # Accessors
    # =========================================================================

    def is_int(self) -> bool:
        return self.kind is not NumberKind.FLOAT

    def is_unsigned(self) -> bool:
        return self.kind is NumberKind.POS_INT

    def is_float(self) -> bool:
        return self.kind is NumberKind.FLOAT

    def as_int(self) -> Optional[int]:
        return self.value if self.is_int() else None

    def as_unsigned(self) -> Optional[int]:
        return self.value if self.is_unsigned() else None

    def as_float(self) -> float:
        """Return the value as a float (always possible, may lose precision)."""
        return float(self.value)

    def to_native(self) -> Union[int, float]:
        return self.value

    # Query filters coerce operands with int()/float()
    def __int__(self) -> int:
        return int(self.value)

    def __float__(self) -> float:
        return float(self.value)

    def __bool__(self) -> bool:
        return self.value != 0

    # =========================================================================
    # Equality, hashing and ordering
    # =========================================================================

    def _same_kind_value(self, other: Any) -> Optional[Union[int, float]]:
        # Native numbers take part in comparisons so query filters work on
        # plain literals; bools are never numbers.
        if isinstance(other, Number):
            return other.value if other.is_int() == self.is_int() else None
        if isinstance(other, bool):
            return None
        if isinstance(other, int):
            return other if self.is_int() else None
        if isinstance(other, float):
            return other if self.is_float() else None
        return None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, (Number, int, float)) or isinstance(other, bool):
            return NotImplemented
        other_value = self._same_kind_value(other)
        return other_value is not None and self.value == other_value

    def __ne__(self, other: Any) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        if self.kind is NumberKind.FLOAT and self.value == 0:
            # +0.0 and -0.0 are equal and must hash alike
            return hash(0.0)
        return hash(self.value)

    def compare(self, other: Union["Number", int, float]) -> int:
        """Three-way comparison returning -1, 0 or 1."""
        other_value = other.value if isinstance(other, Number) else other
        self_value = self.value
        # Mixed int/float pairs compare as floats; NaN compares neither way
        if isinstance(self_value, float) != isinstance(other_value, float):
            self_value, other_value = float(self_value), float(other_value)
        if self_value < other_value:
            return -1
        if self_value > other_value:
            return 1
        return 0

    def _comparable(self, other: Any) -> bool:
        return isinstance(other, (Number, int, float)) and not isinstance(other, bool)

    def __lt__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare(other) >= 0

    # =========================================================================
    # Display
    # =========================================================================

    def __str__(self) -> str:
        if self.is_float():
            return repr(self.value)
        return str(self.value)

    def __repr__(self) -> str:
        return f"Number({self.kind.name}, {self.value!r})"
