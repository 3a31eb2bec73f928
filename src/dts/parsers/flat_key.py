"""
Flat Key Parser - parses ``foo.bar[0]["quoted"]`` into KeyParts.
"""

import re

from lark import Token, Transformer

from ..exceptions import FlatKeyParseError
from ..key import Ident, Index, KeyParts
from .base import GrammarParser

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


def unescape(content: str, quote: str) -> str:
    """Resolve ``\\<quote>`` and ``\\\\``; any other backslash is kept as is."""
    def replace(match: "re.Match[str]") -> str:
        char = match.group(1)
        if char == quote or char == "\\":
            return char
        return match.group(0)

    return _ESCAPE.sub(replace, content)


class FlatKeyParser(GrammarParser):
    """Parser for the flat key grammar."""
    grammar_file = "flat_key.lark"
    error_class = FlatKeyParseError


class FlatKeyTransformer(Transformer):
    """Turns a flat key parse tree into KeyParts."""

    def start(self, items):
        return KeyParts(items)

    def ident(self, items):
        return Ident(str(items[0]))

    def index(self, items):
        return Index(int(items[0]))

    def double_quoted(self, items):
        token: Token = items[0]
        return Ident(unescape(token[1:-1], '"'))

    def single_quoted(self, items):
        token: Token = items[0]
        return Ident(unescape(token[1:-1], "'"))


def parse_flat_key(text: str) -> KeyParts:
    """
    Parse a flat key into KeyParts.

    Args:
        text: Flat key such as ``data.items[0]["display name"]``

    Returns:
        The parsed KeyParts, root first

    Raises:
        FlatKeyParseError: On malformed input (``foo.[``, unterminated quotes)
    """
    tree = FlatKeyParser().parse_tree(text)
    return FlatKeyTransformer().transform(tree)
