"""
Grammar Parser - shared Lark infrastructure for the dts grammars.

Each grammar lives in a ``.lark`` file next to its parser module. Parsers are
built lazily, once per grammar, and Lark's exceptions are turned into
``ParseError`` subclasses that carry the original input, the failure
position and a caret-annotated context line.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Type

from lark import Lark, Tree
from lark.exceptions import (
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
)

from ..exceptions import ParseError

logger = logging.getLogger(__name__)

GRAMMAR_DIR = Path(__file__).parent


# ============================================================
# PARSER
# ============================================================

class GrammarParser:
    """
    Lark LALR parser for one grammar file.

    Subclasses set ``grammar_file`` and ``error_class``; instances are
    shared per subclass so the grammar is compiled only once.

    Usage:
        tree = FlatKeyParser().parse_tree('foo.bar[0]')
    """

    grammar_file: str = ""
    error_class: Type[ParseError] = ParseError

    _instances: Dict[type, "GrammarParser"] = {}

    def __new__(cls) -> "GrammarParser":
        """One instance per grammar."""
        instance = GrammarParser._instances.get(cls)
        if instance is None:
            instance = super().__new__(cls)
            instance._parser = None
            GrammarParser._instances[cls] = instance
        return instance

    @property
    def parser(self) -> Lark:
        """Get the Lark parser instance, compiling the grammar on first use."""
        if self._parser is None:
            grammar_path = GRAMMAR_DIR / self.grammar_file
            if not grammar_path.exists():
                raise FileNotFoundError(f"Grammar file not found: {grammar_path}")

            with open(grammar_path, "r", encoding="utf-8") as f:
                grammar = f.read()

            logger.debug("Compiling grammar %s", grammar_path.name)
            self._parser = Lark(
                grammar,
                start="start",
                parser="lalr",
                propagate_positions=True,
                maybe_placeholders=False,
            )
        return self._parser

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance to force a grammar reload on next use."""
        GrammarParser._instances.pop(cls, None)

    def parse_tree(self, text: str) -> Tree:
        """
        Parse ``text`` into a Lark tree.

        Raises:
            ParseError: ``error_class`` describing the failure
        """
        if not text or not text.strip():
            raise self.error_class(
                "Empty input",
                text,
                line=1,
                column=1,
            )

        try:
            return self.parser.parse(text)

        except UnexpectedToken as e:
            raise self._handle_unexpected_token(e, text) from e

        except UnexpectedCharacters as e:
            raise self._handle_unexpected_characters(e, text) from e

        except UnexpectedEOF as e:
            raise self._handle_unexpected_eof(e, text) from e

        except UnexpectedInput as e:
            raise self.error_class(
                str(e),
                text,
                line=getattr(e, "line", 1) or 1,
                column=getattr(e, "column", 1) or 1,
            ) from e

    # ============================================================
    # ERROR HANDLERS
    # ============================================================

    def _handle_unexpected_token(self, e: UnexpectedToken, text: str) -> ParseError:
        """Handle unexpected token errors."""
        expected = sorted(e.expected) if e.expected else []

        if e.token.type == "$END":
            return self._eof_error(text, expected)

        line = e.line if e.line and e.line > 0 else 1
        column = e.column if e.column and e.column > 0 else 1
        return self.error_class(
            f"Unexpected token '{e.token}'",
            text,
            line=line,
            column=column,
            expected=expected,
            context=_context(text, line, column),
            suggestion=_expected_suggestion(expected),
        )

    def _handle_unexpected_characters(
        self, e: UnexpectedCharacters, text: str
    ) -> ParseError:
        """Handle unexpected character errors."""
        line = e.line or 1
        column = e.column or 1
        char = e.char if hasattr(e, "char") else "unknown"
        expected = sorted(e.allowed) if e.allowed else []

        return self.error_class(
            f"Unexpected character '{char}'",
            text,
            line=line,
            column=column,
            expected=expected,
            context=_context(text, line, column),
            suggestion=_suggest_for_char(char) or _expected_suggestion(expected),
        )

    def _handle_unexpected_eof(self, e: UnexpectedEOF, text: str) -> ParseError:
        return self._eof_error(text, sorted(e.expected) if e.expected else [])

    def _eof_error(self, text: str, expected: List[str]) -> ParseError:
        lines = text.split("\n")
        line = len(lines)
        column = len(lines[-1]) + 1
        return self.error_class(
            "Unexpected end of input",
            text,
            line=line,
            column=column,
            expected=expected,
            context=_context(text, line, column),
            suggestion=_expected_suggestion(expected),
        )


# ============================================================
# HELPERS
# ============================================================

def _context(text: str, line: int, column: int) -> Optional[str]:
    """Return the offending source line with a caret under ``column``."""
    lines = text.split("\n")
    if 1 <= line <= len(lines):
        source_line = lines[line - 1].rstrip()
        return f"  {source_line}\n  {' ' * (column - 1)}^"
    return None


def _expected_suggestion(expected: List[str]) -> Optional[str]:
    if not expected:
        return None
    expected_str = ", ".join(expected[:5])
    if len(expected) > 5:
        expected_str += f" (and {len(expected) - 5} more)"
    return f"Expected one of: {expected_str}"


def _suggest_for_char(char: str) -> Optional[str]:
    """Suggest fixes for common character errors."""
    if char == '"' or char == "'":
        return "Check for unclosed string"
    if char == "[":
        return "Square brackets must contain an index or a quoted key"
    if char == "\\":
        return "Backslash escapes are only allowed inside quoted strings"
    return None
