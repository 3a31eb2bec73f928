"""
dts transform - transformation primitives, the DSL registry and chains.

Usage:
    from dts.transform import parse_chain

    chain = parse_chain('flatten_keys.remove_empty_values')
    result = chain.transform(value)
"""

from .base import Chain, Transform
from .definitions import (
    build_chain,
    builder,
    definitions,
    format_definitions,
    match_transformation,
    parse_chain,
    parse_chains,
    print_definitions,
)
from .dsl import (
    NO_DEFAULT,
    Arg,
    ArgMatch,
    Definition,
    DefinitionMatch,
    Definitions,
)
from .jsonpath import REMOVE, JsonPathMutator, JsonPathSelector
from .key import KeyFlattener, expand_keys, flatten_keys, gron_statements
from .primitives import (
    Delete,
    DeleteKeys,
    EachKey,
    EachValue,
    FlattenKeys,
    Insert,
    Mutate,
    Operation,
    Remove,
    ReplaceString,
    Select,
    Sort,
    Unparameterized,
    Visit,
    Wrap,
)
from .sort import Order, ValueSorter
from .visitor import KeyVisitor, ValueVisitor, Visitor, walk

__all__ = [
    # Core
    "Transform",
    "Chain",
    # DSL
    "Arg",
    "ArgMatch",
    "Definition",
    "DefinitionMatch",
    "Definitions",
    "NO_DEFAULT",
    # Builtin definitions
    "definitions",
    "builder",
    "match_transformation",
    "build_chain",
    "parse_chain",
    "parse_chains",
    "format_definitions",
    "print_definitions",
    # Primitives
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
    # Helpers
    "JsonPathSelector",
    "JsonPathMutator",
    "REMOVE",
    "KeyFlattener",
    "flatten_keys",
    "expand_keys",
    "gron_statements",
    "Order",
    "ValueSorter",
    "Visitor",
    "KeyVisitor",
    "ValueVisitor",
    "walk",
]
