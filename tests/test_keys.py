"""
Tests for key flattening and expansion.

Tests cover:
- flatten_keys entries, container markers and ordering
- expand_keys as the inverse of flatten_keys
- Literal fallback for keys that are not flat keys
- Gron-style statements
"""

import pytest

from dts.transform.key import KeyFlattener, expand_keys, flatten_keys, gron_statements
from dts.value import loads


# =============================================================================
# Flatten
# =============================================================================

class TestFlattenKeys:
    """Test flattening nested values."""

    def test_nested_value(self):
        value = loads('{"foo": {"bar": ["baz", "qux"]}}')
        assert flatten_keys(value, "data") == {
            "data": {},
            "data.foo": {},
            "data.foo.bar": [],
            "data.foo.bar[0]": "baz",
            "data.foo.bar[1]": "qux",
        }

    def test_keys_are_sorted(self):
        value = loads('{"b": 1, "a": [true]}')
        assert list(flatten_keys(value, "data")) == ["data", "data.a", "data.a[0]", "data.b"]

    def test_leaf_value(self):
        assert flatten_keys("foo", "data") == {"data": "foo"}

    def test_empty_containers_get_markers(self):
        value = loads('{"a": [], "b": {}}')
        assert flatten_keys(value, "json") == {"json": {}, "json.a": [], "json.b": {}}

    def test_special_keys_are_quoted(self):
        value = loads('{"a b": {"c.d": 1}}')
        assert list(flatten_keys(value, "data")) == [
            "data", 'data["a b"]', 'data["a b"]["c.d"]'
        ]

    def test_flattener_is_reusable(self):
        flattener = KeyFlattener("x")
        assert flattener.flatten(loads("[1]")) == flattener.flatten(loads("[1]"))


# =============================================================================
# Expand
# =============================================================================

class TestExpandKeys:
    """Test rebuilding nested values."""

    def test_inverse_of_flatten(self):
        flat = loads(
            '{"data": {}, "data.foo": {}, "data.foo.bar": [],'
            ' "data.foo.bar[0]": "baz", "data.foo.bar[1]": "qux"}'
        )
        assert expand_keys(flat) == loads('{"data": {"foo": {"bar": ["baz", "qux"]}}}')

    @pytest.mark.parametrize("text", [
        '{"foo": {"bar": ["baz", "qux"]}}',
        '[1, [2, [3]], {"a": null}]',
        '{"a b": {"c.d": [true, false]}, "京": 1.5}',
        '"leaf"',
        "[[], {}]",
        '{"items": [' + ", ".join(str(i) for i in range(12)) + "]}",
    ])
    def test_round_trip(self, text):
        value = loads(text)
        assert expand_keys(flatten_keys(value, "data")) == {"data": loads(text)}

    def test_array_of_flat_objects(self):
        value = loads('[{"foo.bar": 1, "foo[\\"bar-baz\\"]": 2}]')
        assert expand_keys(value) == loads('[{"foo": {"bar": 1, "bar-baz": 2}}]')

    def test_indices_pad_with_null(self):
        assert expand_keys(loads('{"a[2]": 1}')) == loads('{"a": [null, null, 1]}')

    def test_unparseable_keys_are_literal(self):
        value = loads('{"foo.[": 1, "a.b": 2}')
        assert expand_keys(value) == loads('{"foo.[": 1, "a": {"b": 2}}')

    def test_empty_object(self):
        assert expand_keys({}) == {}

    def test_scalars_unchanged(self):
        assert expand_keys("x") == "x"


# =============================================================================
# Gron
# =============================================================================

class TestGron:
    """Test gron-style statements."""

    def test_statements(self):
        value = loads('{"a": [1, "x"], "b": {}}')
        assert list(gron_statements(value)) == [
            "json = {};",
            "json.a = [];",
            "json.a[0] = 1;",
            'json.a[1] = "x";',
            "json.b = {};",
        ]

    def test_prefix(self):
        assert list(gron_statements(None, "root")) == ["root = null;"]
