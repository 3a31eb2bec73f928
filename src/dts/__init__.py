"""
dts - a transformation engine for semi-structured documents.

Documents are decoded into a canonical Value (``None``, ``bool``,
``Number``, ``str``, ``list``, ``dict``). Pipelines written in a small
function-call language are compiled into Chains of transforms:

    from dts import loads, parse_chain

    chain = parse_chain('select("$.items[*]").sort(order="desc")')
    result = chain.transform(loads(text))
"""

from .config import EngineConfig
from .exceptions import (
    ArgumentError,
    DefinitionError,
    DtsError,
    FlatKeyParseError,
    FuncSigParseError,
    InvalidSortOrderError,
    JsonPathError,
    ParseError,
    RegexError,
    TransformError,
    UnknownTransformationError,
    ValueConversionError,
)
from .key import Ident, Index, KeyPart, KeyParts
from .logging_config import configure_logging, get_debug_trace_logger
from .number import Number, NumberKind
from .transform import Chain, Transform, definitions, parse_chain, parse_chains
from .value import (
    SortKey,
    Value,
    ValueKind,
    compare,
    deep_merge,
    dumps,
    from_native,
    loads,
    to_native,
    value_hash,
)

__version__ = "0.1.0"

__all__ = [
    # Values
    "Value",
    "ValueKind",
    "Number",
    "NumberKind",
    "SortKey",
    "compare",
    "deep_merge",
    "value_hash",
    "from_native",
    "to_native",
    "loads",
    "dumps",
    # Flat keys
    "KeyPart",
    "KeyParts",
    "Ident",
    "Index",
    # Transforms
    "Transform",
    "Chain",
    "definitions",
    "parse_chain",
    "parse_chains",
    # Configuration and logging
    "EngineConfig",
    "configure_logging",
    "get_debug_trace_logger",
    # Errors
    "DtsError",
    "ValueConversionError",
    "ParseError",
    "FlatKeyParseError",
    "FuncSigParseError",
    "DefinitionError",
    "ArgumentError",
    "TransformError",
    "UnknownTransformationError",
    "JsonPathError",
    "InvalidSortOrderError",
    "RegexError",
]
