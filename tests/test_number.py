"""
Tests for the Number type.

Tests cover:
- Construction from ints, floats and JSON literals
- Same-representation equality and hashing
- Ordering across representations
- Comparison with native Python numbers
"""

import math

import pytest

from dts.number import Number, NumberKind


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Test Number constructors."""

    def test_from_int_kinds(self):
        assert Number.from_int(0).kind is NumberKind.POS_INT
        assert Number.from_int(7).kind is NumberKind.POS_INT
        assert Number.from_int(-7).kind is NumberKind.NEG_INT

    def test_from_int_rejects_bool(self):
        with pytest.raises(TypeError):
            Number.from_int(True)

    def test_from_float(self):
        number = Number.from_float(1.5)
        assert number.kind is NumberKind.FLOAT
        assert number.value == 1.5

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_from_float_rejects_non_finite(self, value):
        assert Number.from_float(value) is None

    def test_parse_integer_literal(self):
        number = Number.parse("10")
        assert number.is_int()
        assert number.as_int() == 10

    def test_parse_float_literals(self):
        assert Number.parse("1.0").is_float()
        assert Number.parse("-1e3").value == -1000.0

    def test_parse_keeps_large_integers_exact(self):
        assert Number.parse("18446744073709551615").value == 2 ** 64 - 1

    def test_parse_out_of_range(self):
        with pytest.raises(ValueError):
            Number.parse("1e400")


# =============================================================================
# Accessors
# =============================================================================

class TestAccessors:
    """Test the projection helpers."""

    def test_as_unsigned(self):
        assert Number.from_int(3).as_unsigned() == 3
        assert Number.from_int(-3).as_unsigned() is None
        assert Number.from_float(3.0).as_unsigned() is None

    def test_as_int(self):
        assert Number.from_int(-3).as_int() == -3
        assert Number.from_float(3.0).as_int() is None

    def test_as_float(self):
        assert Number.from_int(3).as_float() == 3.0

    def test_native_conversions(self):
        assert int(Number.from_float(2.7)) == 2
        assert float(Number.from_int(2)) == 2.0
        assert not Number.from_int(0)
        assert Number.from_float(0.5)


# =============================================================================
# Equality and ordering
# =============================================================================

class TestEquality:
    """Test equality and hashing."""

    def test_same_kind_equality(self):
        assert Number.from_int(1) == Number.from_int(1)
        assert Number.from_float(1.5) == Number.from_float(1.5)

    def test_int_and_float_are_different_values(self):
        assert Number.from_int(1) != Number.from_float(1.0)
        assert Number.from_float(1.0) != Number.from_int(1)

    def test_signed_and_unsigned_ints_compare_by_value(self):
        assert Number.from_int(-1) != Number.from_int(1)

    def test_zero_sign_is_ignored(self):
        pos, neg = Number.from_float(0.0), Number.from_float(-0.0)
        assert pos == neg
        assert hash(pos) == hash(neg)

    def test_usable_as_set_members(self):
        numbers = {Number.from_int(1), Number.from_int(1), Number.from_float(1.0)}
        assert len(numbers) == 2

    def test_native_numbers(self):
        assert Number.from_int(1) == 1
        assert Number.from_float(1.5) == 1.5
        assert Number.from_float(1.0) != 1
        assert Number.from_int(1) != True  # noqa: E712


class TestOrdering:
    """Test the total order."""

    def test_mixed_representations(self):
        assert Number.from_int(1) < Number.from_float(1.5)
        assert Number.from_int(2) > Number.from_float(1.5)
        assert Number.from_int(-2) < Number.from_int(1)

    def test_equal_values_across_kinds_compare_equal(self):
        assert Number.from_int(1).compare(Number.from_float(1.0)) == 0

    def test_large_integers_compare_exactly(self):
        assert Number.from_int(2 ** 63 + 1) > Number.from_int(2 ** 63)

    def test_mixed_kinds_compare_as_floats(self):
        assert Number.from_int(2 ** 53 + 1).compare(Number.from_float(2.0 ** 53)) == 0
        assert Number.from_float(2.0 ** 53).compare(2 ** 53 + 1) == 0
        assert Number.from_int(2 ** 53 + 1).compare(2 ** 53) == 1

    def test_compare_with_native(self):
        assert Number.from_int(5) > 3
        assert Number.from_float(0.5) <= 1

    def test_sorted(self):
        numbers = [Number.from_float(2.5), Number.from_int(-1), Number.from_int(2)]
        assert [n.value for n in sorted(numbers)] == [-1, 2, 2.5]


class TestDisplay:
    """Test string rendering."""

    def test_str(self):
        assert str(Number.from_int(3)) == "3"
        assert str(Number.from_float(1.0)) == "1.0"

    def test_repr(self):
        assert repr(Number.from_int(-3)) == "Number(NEG_INT, -3)"
