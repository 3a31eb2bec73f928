"""
Function Signature Parser - parses transformation pipelines.

A pipeline is a sequence of function calls separated by ``.`` or
whitespace::

    select("$.items[*]").sort(order="desc") flatten

Each call has a name and optional positional or named arguments. An
argument is either a literal value, kept as raw text for the caller to
decode, or a nested pipeline::

    mutate("$.items[*]", flatten.sort(order="desc"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from lark import Transformer, v_args

from .. import value as values
from ..exceptions import FuncSigParseError
from ..value import Value
from .base import GrammarParser
from .flat_key import unescape

logger = logging.getLogger(__name__)


# ============================================================
# AST TYPES
# ============================================================

@dataclass(frozen=True)
class ValueTerm:
    """A literal argument, kept as the raw text that was written."""
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ExprTerm:
    """A nested pipeline argument."""
    calls: Tuple["FuncSig", ...]

    def __str__(self) -> str:
        return ".".join(str(call) for call in self.calls)


Term = Union[ValueTerm, ExprTerm]


@dataclass(frozen=True)
class FuncArg:
    """A positional (``name`` is None) or named call-site argument."""
    term: Term
    name: Optional[str] = None

    @property
    def is_named(self) -> bool:
        return self.name is not None

    def __str__(self) -> str:
        if self.name is None:
            return str(self.term)
        return f"{self.name}={self.term}"


@dataclass(frozen=True)
class FuncSig:
    """One function call of a pipeline."""
    name: str
    args: Tuple[FuncArg, ...] = ()

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(arg) for arg in self.args)})"


# ============================================================
# PARSER
# ============================================================

class FuncSigParser(GrammarParser):
    """Parser for the pipeline grammar."""
    grammar_file = "func_sig.lark"
    error_class = FuncSigParseError


class FuncSigTransformer(Transformer):
    """
    Turns a pipeline parse tree into FuncSigs.

    Literal values are sliced from the source text using the positions Lark
    propagates, so the raw text is exactly what the user wrote.
    """

    def __init__(self, text: str):
        super().__init__()
        self._text = text

    def start(self, items):
        return list(items)

    def call(self, items):
        name, *args = items
        return FuncSig(str(name), tuple(args))

    def named(self, items):
        name, term = items
        return FuncArg(term, str(name))

    def positional(self, items):
        return FuncArg(items[0])

    def expression(self, items):
        return ExprTerm(tuple(items))

    @v_args(meta=True)
    def value(self, meta, items):
        return ValueTerm(self._text[meta.start_pos:meta.end_pos])


def parse(text: str) -> List[FuncSig]:
    """
    Parse a transformation pipeline into its function calls.

    Args:
        text: Pipeline such as ``flatten_keys("data").sort(order="desc")``

    Returns:
        List of FuncSig in pipeline order

    Raises:
        FuncSigParseError: On malformed syntax (unbalanced parentheses or
            quotes, unknown tokens)
    """
    tree = FuncSigParser().parse_tree(text)
    calls = FuncSigTransformer(text).transform(tree)
    logger.debug("Parsed %d call(s) from %r", len(calls), text)
    return calls


def decode_literal(text: str) -> Value:
    """
    Decode the raw text of a literal argument into a Value.

    Single quoted strings are unescaped directly; everything else is JSON.

    Raises:
        ValueError: If ``text`` is not a valid literal
    """
    text = text.strip()
    if len(text) >= 2 and text[0] == "'" and text[-1] == "'":
        return unescape(text[1:-1], "'")
    return values.loads(text)
