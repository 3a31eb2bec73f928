"""
Tests for transform primitives and chains.

Tests cover:
- Unparameterized transforms (flatten, remove_empty_values, deep_merge, ...)
- Sort order, depth limit and idempotence
- Key and value mapping (each_key, each_value, visit)
- String replacement, wrapping and insertion
- Chain composition
"""

import pytest

from dts.exceptions import RegexError
from dts.number import Number
from dts.transform import (
    Chain,
    DeleteKeys,
    EachKey,
    EachValue,
    FlattenKeys,
    Insert,
    KeyVisitor,
    Operation,
    Order,
    ReplaceString,
    Sort,
    Unparameterized,
    ValueVisitor,
    Visit,
    Wrap,
)
from dts.transform.primitives import (
    arrays_to_objects,
    deep_merge,
    flatten,
    keys,
    remove_empty_values,
    values_of,
)
from dts.value import loads


# =============================================================================
# Unparameterized transforms
# =============================================================================

class TestFlatten:
    """Test removing one level of nesting."""

    @pytest.mark.parametrize("text", ["null", "1", '"a"', "[]", "{}", "[1, 2]", '{"a": [1]}'])
    def test_left_inverse_of_wrap_array(self, text):
        wrapped = Wrap.array().transform(loads(text))
        assert flatten(wrapped) == loads(text)

    def test_multi_element_array(self):
        assert flatten(loads('["a", "b"]')) == ["a", "b"]

    def test_children_are_concatenated(self):
        assert flatten(loads("[[1], [2, 3], 4]")) == loads("[1, 2, 3, 4]")

    def test_one_element_object(self):
        assert flatten(loads('{"a": 1}')) == loads("1")

    def test_other_values_unchanged(self):
        assert flatten(loads('{"a": 1, "b": 2}')) == loads('{"a": 1, "b": 2}')
        assert flatten("x") == "x"


class TestRemoveEmptyValues:
    """Test dropping null and empty children."""

    def test_top_level_is_kept(self):
        assert remove_empty_values(None) is None
        assert remove_empty_values({}) == {}

    def test_children_are_removed(self):
        value = loads('{"foo": null, "bar": {}, "baz": "qux"}')
        assert remove_empty_values(value) == {"baz": "qux"}

    def test_recursive(self):
        value = loads('[null, [[]], {"a": {"b": null}}, 0, "", false]')
        assert remove_empty_values(value) == loads('[0, "", false]')


class TestDeepMerge:
    """Test merging array elements."""

    def test_left_to_right(self):
        value = loads(
            '[{"foo": "bar"},'
            ' {"foo": {"bar": "baz"}, "bar": [1], "qux": null},'
            ' {"foo": {"bar": "qux"}, "bar": [2], "baz": 1}]'
        )
        assert deep_merge(value) == loads(
            '{"foo": {"bar": "qux"}, "bar": [2], "baz": 1, "qux": null}'
        )

    def test_arrays(self):
        assert deep_merge(loads("[[1, 2], [null, 3, 4]]")) == loads("[1, 3, 4]")

    def test_non_array_is_noop(self):
        assert deep_merge(loads('{"a": 1}')) == loads('{"a": 1}')

    def test_empty_array(self):
        assert deep_merge([]) == []


class TestKeysAndValues:
    """Test keys, values and arrays_to_objects."""

    def test_keys(self):
        assert keys(loads('{"b": 1, "a": 2}')) == ["b", "a"]
        assert keys(loads("[1]")) == []

    def test_values(self):
        assert values_of(loads('{"b": 1, "a": 2}')) == loads("[1, 2]")
        assert values_of(loads("[1]")) == loads("[1]")
        assert values_of("x") == []

    def test_arrays_to_objects(self):
        value = loads('{"a": [1, [true]]}')
        assert arrays_to_objects(value) == loads('{"a": {"0": 1, "1": {"0": true}}}')

    def test_shared_instances(self):
        assert Unparameterized.FLATTEN == Unparameterized(Operation.FLATTEN)
        assert Unparameterized.KEYS.transform(loads('{"a": 1}')) == ["a"]


# =============================================================================
# Sort
# =============================================================================

class TestSort:
    """Test recursive sorting."""

    def test_ascending(self):
        value = loads('{"b": [3, 1, "a", null], "a": {"y": 1, "x": 2}}')
        result = Sort().transform(value)
        assert list(result) == ["a", "b"]
        assert list(result["a"]) == ["x", "y"]
        assert result["b"] == loads('[null, 1, 3, "a"]')

    def test_descending(self):
        result = Sort(Order.DESC).transform(loads("[1, [2, 3], 2.5]"))
        assert result == loads("[[3, 2], 2.5, 1]")

    def test_max_depth_zero_sorts_only_top_level(self):
        value = loads('[{"b": 2, "a": 1}, {"a": 1, "b": 1}]')
        result = Sort(Order.DESC, max_depth=0).transform(value)
        assert result == loads('[{"b": 2, "a": 1}, {"a": 1, "b": 1}]')
        assert list(result[0]) == ["b", "a"]

    def test_max_depth(self):
        result = Sort(max_depth=1).transform(loads("[[[2, 1]], [3, 1]]"))
        assert result == loads("[[[2, 1]], [1, 3]]")

    def test_idempotent(self):
        value = loads('{"z": [{"b": 1}, {"a": [3, 2]}], "y": [true, null]}')
        once = Sort(Order.DESC).transform(value)
        assert Sort(Order.DESC).transform(once) == once

    def test_order_parse(self):
        assert Order.parse("DESC") is Order.DESC
        assert Order.parse("asc") is Order.ASC


# =============================================================================
# Keys and values
# =============================================================================

class TestEach:
    """Test each_key and each_value."""

    def test_each_key(self):
        transform = EachKey(Chain([ReplaceString("-", "_")]))
        assert transform.transform(loads('{"a-b": {"c-d": 1}}')) == loads('{"a_b": {"c-d": 1}}')

    def test_each_key_stringifies_results(self):
        transform = EachKey(Wrap.array())
        assert transform.transform(loads('{"a": 1}')) == loads('{"[\\"a\\"]": 1}')

    def test_each_value(self):
        transform = EachValue(Wrap.array())
        assert transform.transform(loads('{"a": 1}')) == loads('{"a": [1]}')
        assert transform.transform(loads("[1, 2]")) == loads("[[1], [2]]")
        assert transform.transform("x") == "x"


class TestDeleteKeys:
    """Test deleting top level keys."""

    def test_top_level_only(self):
        value = loads('{"foo": 1, "bar": {"foo": 2}, "xfoo": 3}')
        assert DeleteKeys("^fo").transform(value) == loads('{"bar": {"foo": 2}, "xfoo": 3}')

    def test_search_semantics(self):
        assert DeleteKeys("oo").transform(loads('{"foo": 1, "bar": 2}')) == loads('{"bar": 2}')

    def test_invalid_regex(self):
        with pytest.raises(RegexError):
            DeleteKeys("(")


class TestVisit:
    """Test recursive visitors."""

    def test_value_visitor(self):
        visit = Visit(ValueVisitor(ReplaceString("a", "b")))
        value = loads('{"a": ["a", {"y": "aa"}], "n": 1}')
        assert visit.transform(value) == loads('{"a": ["b", {"y": "bb"}], "n": 1}')

    def test_key_visitor(self):
        visit = Visit(KeyVisitor(ReplaceString("a", "x")))
        assert visit.transform(loads('{"a": {"a": [{"a": 1}]}}')) == loads(
            '{"x": {"x": [{"x": 1}]}}'
        )

    def test_key_visitor_max_depth_zero_visits_root_keys(self):
        visit = Visit(KeyVisitor(ReplaceString("a", "x")), max_depth=0)
        assert visit.transform(loads('{"a": {"a": "a"}}')) == loads('{"x": {"a": "a"}}')

    def test_key_visitor_max_depth(self):
        visit = Visit(KeyVisitor(ReplaceString("a", "x")), max_depth=1)
        value = loads('{"a": {"a": {"a": 1}}}')
        assert visit.transform(value) == loads('{"x": {"x": {"a": 1}}}')

    def test_value_visitor_max_depth_zero_visits_root_values(self):
        visit = Visit(ValueVisitor(ReplaceString("a", "b")), max_depth=0)
        value = loads('{"a": "a", "c": {"d": "a"}}')
        assert visit.transform(value) == loads('{"a": "b", "c": {"d": "a"}}')

    def test_children_before_parents(self):
        visit = Visit(ValueVisitor(Unparameterized.FLATTEN))
        assert visit.transform(loads("[[[1]]]")) == loads("1")


# =============================================================================
# Strings, wrapping and insertion
# =============================================================================

class TestReplaceString:
    """Test regex replacement in strings."""

    def test_replace_all(self):
        assert ReplaceString("a", "b").transform("aaa") == "bbb"

    def test_limit(self):
        assert ReplaceString("a", "b", 1).transform("aaa") == "baa"

    def test_capture_groups(self):
        transform = ReplaceString(r"(\w+)@(\w+)", r"\2 at \1")
        assert transform.transform("me@host") == "host at me"

    def test_named_groups(self):
        transform = ReplaceString(r"(?P<word>\w+)", r"<\g<word>>")
        assert transform.transform("a b") == "<a> <b>"

    def test_non_strings_unchanged(self):
        number = loads("1")
        assert ReplaceString("1", "2").transform(number) is number

    def test_invalid_regex(self):
        with pytest.raises(RegexError):
            ReplaceString("[", "x")

    def test_invalid_group_reference(self):
        with pytest.raises(RegexError):
            ReplaceString("a", r"\2")


class TestWrap:
    """Test wrapping values."""

    def test_array(self):
        assert Wrap.array().transform("x") == ["x"]

    def test_object(self):
        assert Wrap.object("k").transform(loads("[1]")) == loads('{"k": [1]}')


class TestInsert:
    """Test inserting into containers."""

    def test_object_key(self):
        assert Insert("k", "v").transform(loads('{"a": 1}')) == loads('{"a": 1, "k": "v"}')

    def test_array_index(self):
        assert Insert(0, "x").transform(loads("[1]")) == loads('["x", 1]')

    def test_index_past_end_appends(self):
        assert Insert(5, "x").transform(loads("[1]")) == loads('[1, "x"]')

    def test_mismatch_is_noop(self):
        assert Insert(0, "x").transform(loads('{"a": 1}')) == loads('{"a": 1}')
        assert Insert("k", "x").transform(loads("[1]")) == loads("[1]")
        assert Insert("k", "x").transform("s") == "s"

    def test_inserted_values_are_not_shared(self):
        insert = Insert("k", loads("[]"))
        first = insert.transform({})
        second = insert.transform({})
        first["k"].append(1)
        assert second == {"k": []}


# =============================================================================
# Chain
# =============================================================================

class TestChain:
    """Test chain composition."""

    def test_applies_in_order(self):
        chain = Chain([Wrap.array(), Wrap.object("k")])
        assert chain.transform("x") == {"k": ["x"]}

    def test_rshift(self):
        chain = Wrap.array() >> Wrap.object("k")
        assert isinstance(chain, Chain)
        assert chain("x") == {"k": ["x"]}

    def test_and_then(self):
        assert Wrap.array().and_then(Wrap.array())("x") == [["x"]]

    def test_nested_chains_are_flattened(self):
        chain = Chain([Chain([Wrap.array(), Wrap.array()]), Wrap.array()])
        assert len(chain) == 3
        assert len(chain >> Wrap.array()) == 4

    def test_empty_chain_is_identity(self):
        assert Chain().transform("x") == "x"

    def test_equality(self):
        assert Chain([FlattenKeys("data")]) == Chain([FlattenKeys("data")])
        assert Chain([FlattenKeys("data")]) != Chain([FlattenKeys("json")])
