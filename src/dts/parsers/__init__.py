"""
dts parsers - Lark grammars for flat keys and transformation pipelines.
"""

from .base import GrammarParser
from .flat_key import FlatKeyParser, parse_flat_key
from .func_sig import (
    ExprTerm,
    FuncArg,
    FuncSig,
    FuncSigParser,
    ValueTerm,
    decode_literal,
    parse,
)

__all__ = [
    "GrammarParser",
    # Flat keys
    "FlatKeyParser",
    "parse_flat_key",
    # Pipelines
    "FuncSigParser",
    "FuncSig",
    "FuncArg",
    "ValueTerm",
    "ExprTerm",
    "parse",
    "decode_literal",
]
