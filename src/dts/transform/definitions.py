"""
Builtin transformation definitions and the pipeline compiler.

``definitions()`` declares every transformation the engine understands.
``parse_chain`` parses a pipeline string, matches it against the
definitions and builds the Chain of transforms::

    chain = parse_chain('select("$.items[*]").sort(order="desc")')
    result = chain.transform(value)

Builders are registered per definition name with the ``@builder``
decorator when this module is imported.
"""

from __future__ import annotations

import logging
import sys
import textwrap
from typing import Callable, Dict, Iterable, List, Optional, TextIO, Union

from .. import value as values
from ..config import EngineConfig
from ..exceptions import TransformError, UnknownTransformationError
from ..number import Number
from ..value import Value
from .base import Chain, Transform
from .dsl import Arg, Definition, DefinitionMatch, Definitions
from .primitives import (
    Delete,
    DeleteKeys,
    EachKey,
    EachValue,
    FlattenKeys,
    Insert,
    Mutate,
    Remove,
    ReplaceString,
    Select,
    Sort,
    Unparameterized,
    Visit,
    Wrap,
)
from .sort import Order
from .visitor import KeyVisitor, ValueVisitor

logger = logging.getLogger(__name__)

Builder = Callable[[DefinitionMatch], Transform]

_BUILDERS: Dict[str, Builder] = {}


# =============================================================================
# Definitions
# =============================================================================

def _expression_arg(description: str) -> Arg:
    return Arg("expression").with_description(description)


def _query_arg() -> Arg:
    return Arg("query").with_description("A JSONPath query.")


def _max_depth_arg(what: str) -> Arg:
    return Arg("max_depth").with_required(False).with_description(
        f"Upper bound for child collections to be {what}. A max depth of 0 means "
        "that only the top level is visited."
    )


def definitions(config: Optional[EngineConfig] = None) -> Definitions:
    """
    Build the registry of builtin transformations.

    Args:
        config: Defaults for omitted arguments; uses EngineConfig() if None

    Returns:
        A new Definitions registry
    """
    config = config or EngineConfig()

    return (
        Definitions()
        .add(
            Definition("select")
            .add_aliases(["j", "jp", "jsonpath"])
            .with_description(
                "Selects data via JSONPath query. The result is always an array with zero "
                "or more elements; see `flatten` to remove one level of nesting from "
                "single element results."
            )
            .add_arg(_query_arg())
        )
        .add(
            Definition("mutate")
            .add_alias("mut")
            .with_description(
                "Replaces every value matching a JSONPath query with the result of an "
                "expression applied to it."
            )
            .add_args([
                _query_arg(),
                _expression_arg("The transformation expression applied to each match."),
            ])
        )
        .add(
            Definition("delete")
            .add_alias("del")
            .with_description("Replaces every value matching a JSONPath query with null.")
            .add_arg(_query_arg())
        )
        .add(
            Definition("remove")
            .add_alias("rm")
            .with_description(
                "Removes every value matching a JSONPath query from its parent array "
                "or object."
            )
            .add_arg(_query_arg())
        )
        .add(
            Definition("flatten")
            .add_alias("f")
            .with_description(
                "Removes one level of nesting if the data is shaped like an array or "
                "one-element object.\n\n"
                "If the input is a one-element array it will be removed entirely, leaving "
                "the single element as output."
            )
        )
        .add(
            Definition("flatten_keys")
            .add_aliases(["F", "flatten-keys"])
            .with_description(
                "Flattens the input to an object with flat keys, similar to the output "
                "of `gron`."
            )
            .add_arg(
                Arg("prefix")
                .with_default(config.flatten_prefix)
                .with_description("The prefix for flattened keys.")
            )
        )
        .add(
            Definition("expand_keys")
            .add_aliases(["e", "expand-keys"])
            .with_description("Expands flat object keys to nested objects.")
        )
        .add(
            Definition("remove_empty_values")
            .add_aliases(["r", "remove-empty-values"])
            .with_description(
                "Recursively removes nulls, empty arrays and empty objects from the "
                "data.\n\nTop level empty values are not removed."
            )
        )
        .add(
            Definition("deep_merge")
            .add_aliases(["m", "deep-merge"])
            .with_description(
                "If the data is an array, all children are merged into one from left to "
                "right. Otherwise this is a no-op.\n\n"
                "Arrays are merged by recursively merging values at the same index. "
                "Nulls on the right-hand side are not merged.\n\n"
                "Objects are merged by creating a new object with all keys from the left "
                "and right value. Keys present on both sides are merged recursively.\n\n"
                "In all other cases, the rightmost value is taken."
            )
        )
        .add(
            Definition("keys")
            .add_alias("k")
            .with_description(
                "Transforms the data into an array of object keys which is empty if the "
                "top level value is not an object."
            )
        )
        .add(
            Definition("values")
            .add_alias("v")
            .with_description(
                "Transforms the data into an array of the array elements or object "
                "values, which is empty for any other value."
            )
        )
        .add(
            Definition("delete_keys")
            .add_aliases(["d", "delete-keys"])
            .with_description("Deletes all keys of the top level object matching a regex.")
            .add_arg(
                Arg("pattern").with_description(
                    "A regex pattern to match the keys that should be deleted."
                )
            )
        )
        .add(
            Definition("sort")
            .add_alias("s")
            .with_description(
                "Sorts collections (arrays and objects) recursively.\n\n"
                "Optionally accepts a `max_depth` which defines the upper bound for child "
                "collections to be visited and sorted. If `max_depth` is omitted, all "
                "child collections are sorted."
            )
            .add_args([
                Arg("order")
                .with_default(config.sort_order)
                .with_description('The sort order. Possible values are "asc" and "desc".'),
                _max_depth_arg("sorted"),
            ])
        )
        .add(
            Definition("arrays_to_objects")
            .add_aliases(["ato", "arrays-to-objects"])
            .with_description(
                "Recursively transforms all arrays into objects with the array index as key."
            )
        )
        .add(
            Definition("each_key")
            .add_aliases(["ek", "each-key"])
            .with_description(
                "Applies an expression to every key of the top level object."
            )
            .add_arg(_expression_arg("The transformation expression applied to each key."))
        )
        .add(
            Definition("each_value")
            .add_aliases(["ev", "each-value"])
            .with_description(
                "Applies an expression to every element of the top level array or every "
                "value of the top level object."
            )
            .add_arg(_expression_arg("The transformation expression applied to each value."))
        )
        .add(
            Definition("visit_keys")
            .add_aliases(["vk", "visit-keys"])
            .with_description("Recursively applies an expression to all object keys.")
            .add_args([
                _expression_arg("The transformation expression applied to each key."),
                _max_depth_arg("visited"),
            ])
        )
        .add(
            Definition("visit_values")
            .add_aliases(["vv", "visit-values"])
            .with_description(
                "Recursively applies an expression to all values, children before their "
                "parents."
            )
            .add_args([
                _expression_arg("The transformation expression applied to each value."),
                _max_depth_arg("visited"),
            ])
        )
        .add(
            Definition("replace_string")
            .add_aliases(["rs", "replace-string"])
            .with_description(
                "Replaces regex matches in string values. Other values are left untouched."
            )
            .add_args([
                Arg("regex").with_description("The regex pattern to search for."),
                Arg("replacement").with_description(
                    "The replacement. Capture groups can be referenced as \\1 or \\g<name>."
                ),
                Arg("limit")
                .with_default(config.replace_limit)
                .with_description("Maximum number of replacements, 0 replaces all."),
            ])
        )
        .add(
            Definition("wrap_array")
            .add_aliases(["wa", "wrap-array"])
            .with_description("Wraps the data in a one-element array.")
        )
        .add(
            Definition("wrap_object")
            .add_aliases(["wo", "wrap-object"])
            .with_description("Wraps the data in an object with a single key.")
            .add_arg(Arg("key").with_description("The key of the wrapping object."))
        )
        .add(
            Definition("insert")
            .add_alias("i")
            .with_description(
                "Inserts a value into an object by key or into an array by index. "
                "Indices past the end append the value."
            )
            .add_args([
                Arg("key_or_index").with_description(
                    "The object key (a string) or array index (an unsigned integer)."
                ),
                Arg("value").with_description("The value to insert."),
            ])
        )
    )


# =============================================================================
# Builders
# =============================================================================

def builder(name: str) -> Callable[[Builder], Builder]:
    """Register the function building the transform for definition ``name``."""
    def decorator(fn: Builder) -> Builder:
        _BUILDERS[name] = fn
        return fn

    return decorator


def _unsigned(number: Number) -> int:
    value = number.as_unsigned()
    if value is None:
        raise ValueError(f"Expected unsigned integer, got {number}")
    return value


def _key_or_index(value: Value) -> Union[str, int]:
    if isinstance(value, str):
        return value
    index = values.as_u64(value)
    if index is None:
        raise TypeError(f"Expected string or unsigned integer, got {values.dumps(value)}")
    return index


def _max_depth(match: DefinitionMatch) -> Optional[int]:
    return match.optional("max_depth", lambda name: match.parse_number(name, _unsigned))


@builder("select")
def _select(match: DefinitionMatch) -> Transform:
    return Select(match.str_value("query"))


@builder("mutate")
def _mutate(match: DefinitionMatch) -> Transform:
    return Mutate(match.str_value("query"), match.map_expr("expression", build_chain))


@builder("delete")
def _delete(match: DefinitionMatch) -> Transform:
    return Delete(match.str_value("query"))


@builder("remove")
def _remove(match: DefinitionMatch) -> Transform:
    return Remove(match.str_value("query"))


@builder("flatten")
def _flatten(match: DefinitionMatch) -> Transform:
    return Unparameterized.FLATTEN


@builder("flatten_keys")
def _flatten_keys(match: DefinitionMatch) -> Transform:
    return FlattenKeys(match.str_value("prefix"))


@builder("expand_keys")
def _expand_keys(match: DefinitionMatch) -> Transform:
    return Unparameterized.EXPAND_KEYS


@builder("remove_empty_values")
def _remove_empty_values(match: DefinitionMatch) -> Transform:
    return Unparameterized.REMOVE_EMPTY_VALUES


@builder("deep_merge")
def _deep_merge(match: DefinitionMatch) -> Transform:
    return Unparameterized.DEEP_MERGE


@builder("keys")
def _keys(match: DefinitionMatch) -> Transform:
    return Unparameterized.KEYS


@builder("values")
def _values(match: DefinitionMatch) -> Transform:
    return Unparameterized.VALUES


@builder("delete_keys")
def _delete_keys(match: DefinitionMatch) -> Transform:
    return DeleteKeys(match.str_value("pattern"))


@builder("sort")
def _sort(match: DefinitionMatch) -> Transform:
    return Sort(Order.parse(match.str_value("order")), _max_depth(match))


@builder("arrays_to_objects")
def _arrays_to_objects(match: DefinitionMatch) -> Transform:
    return Unparameterized.ARRAYS_TO_OBJECTS


@builder("each_key")
def _each_key(match: DefinitionMatch) -> Transform:
    return EachKey(match.map_expr("expression", build_chain))


@builder("each_value")
def _each_value(match: DefinitionMatch) -> Transform:
    return EachValue(match.map_expr("expression", build_chain))


@builder("visit_keys")
def _visit_keys(match: DefinitionMatch) -> Transform:
    chain = match.map_expr("expression", build_chain)
    return Visit(KeyVisitor(chain), _max_depth(match))


@builder("visit_values")
def _visit_values(match: DefinitionMatch) -> Transform:
    chain = match.map_expr("expression", build_chain)
    return Visit(ValueVisitor(chain), _max_depth(match))


@builder("replace_string")
def _replace_string(match: DefinitionMatch) -> Transform:
    return ReplaceString(
        match.str_value("regex"),
        match.str_value("replacement"),
        match.parse_number("limit", _unsigned),
    )


@builder("wrap_array")
def _wrap_array(match: DefinitionMatch) -> Transform:
    return Wrap.array()


@builder("wrap_object")
def _wrap_object(match: DefinitionMatch) -> Transform:
    return Wrap.object(match.str_value("key"))


@builder("insert")
def _insert(match: DefinitionMatch) -> Transform:
    return Insert(match.map_value("key_or_index", _key_or_index), match.value("value"))


# =============================================================================
# Compilation
# =============================================================================

def match_transformation(match: DefinitionMatch) -> Transform:
    """
    Build the transform for one matched definition.

    Raises:
        UnknownTransformationError: If no builder exists for the match
        TransformError: If the arguments cannot be turned into a transform
    """
    build = _BUILDERS.get(match.name)
    if build is None:
        raise UnknownTransformationError(f"Unknown transformation `{match.name}`")

    try:
        return build(match)
    except UnknownTransformationError:
        raise
    except TransformError as err:
        raise type(err)(f"Invalid transformation `{match.name}`: {err}") from err


def build_chain(matches: Iterable[DefinitionMatch]) -> Chain:
    """Build a Chain from matched definitions, in order."""
    return Chain(match_transformation(match) for match in matches)


def parse_chain(text: str, registry: Optional[Definitions] = None) -> Chain:
    """
    Compile a pipeline string into a Chain.

    Args:
        text: The pipeline, e.g. ``'flatten_keys.sort(order="desc")'``
        registry: Definitions to match against; the builtin ones if None

    Returns:
        The compiled Chain

    Raises:
        FuncSigParseError: If the pipeline is malformed
        DefinitionError: If a call does not match its definition
        TransformError: If a transform cannot be constructed
    """
    return parse_chains([text], registry)


def parse_chains(texts: Iterable[str], registry: Optional[Definitions] = None) -> Chain:
    """
    Compile several pipeline strings into one Chain.

    All pipelines are parsed and matched before any transform is built; the
    first error aborts the whole compilation.
    """
    registry = registry if registry is not None else definitions()
    match_groups: List[List[DefinitionMatch]] = [registry.parse(text) for text in texts]
    chain = build_chain(match for group in match_groups for match in group)
    logger.debug("Compiled chain of %d transform(s)", len(chain))
    return chain


# =============================================================================
# Documentation
# =============================================================================

def _format_description(description: str, indent: str) -> str:
    indented = textwrap.indent(description, indent)
    if not indented.endswith("\n"):
        indented += "\n"
    return indented


def format_definitions(registry: Optional[Definitions] = None) -> str:
    """Render help text for all definitions, sorted by name."""
    registry = registry if registry is not None else definitions()

    buf = ["TRANSFORMATIONS:\n"]
    for i, definition in enumerate(sorted(registry, key=lambda d: d.name)):
        if i > 0:
            buf.append("\n")

        buf.append(f"    {definition}")
        if definition.aliases:
            buf.append(f"    [aliases: {', '.join(definition.aliases)}]")
        buf.append("\n")

        if definition.description:
            buf.append(_format_description(definition.description, " " * 8))

        for arg in definition.args:
            buf.append(f"\n        <{arg.name}>\n")
            if arg.description:
                buf.append(_format_description(arg.description, " " * 12))

    return "".join(buf)


def print_definitions(registry: Optional[Definitions] = None,
                      file: Optional[TextIO] = None) -> None:
    """Write the help text of all definitions to ``file`` (stdout by default)."""
    (file or sys.stdout).write(format_definitions(registry))
