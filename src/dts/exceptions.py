"""
dts Exception Hierarchy

Contains all exception classes raised while parsing pipelines, matching
them against definitions and constructing transforms. Transform execution
itself does not raise.
"""

from typing import List, Optional


class DtsError(Exception):
    """
    Base exception for all dts operations.

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    ::: This is stateless.
    """
    pass


class ValueConversionError(DtsError):
    """Raised when native Python data cannot be represented as a Value."""
    pass


# =============================================================================
# Parse errors
# =============================================================================

class ParseError(DtsError):
    """
    Raised when text does not match a grammar.

    Carries the original input and the position of the failure so callers
    can render diagnostics.

    Attributes:
        message: Human readable description of the failure
        text: The complete input that failed to parse
        rule: Name of the grammar that was being parsed
        line: 1-based line of the failure, if known
        column: 1-based column of the failure, if known
        expected: Terminals the parser would have accepted
        context: The offending source line with a caret marker
        suggestion: Optional hint on how to fix the input

    ::: This is-in-layer Utility-Layer.
    ::: This is a exception.
    """

    rule = "input"

    def __init__(
        self,
        message: str,
        text: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        expected: Optional[List[str]] = None,
        context: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        self.message = message
        self.text = text
        self.line = line
        self.column = column
        self.expected = expected or []
        self.context = context
        self.suggestion = suggestion
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [f"Failed to parse {self.rule} `{self.text}`: {self.message}"]
        if self.line is not None:
            parts[0] += f" (line {self.line}, column {self.column})"
        if self.context:
            parts.append(self.context)
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return "\n".join(parts)


class FlatKeyParseError(ParseError):
    """Raised when a flat key such as ``foo.bar[0]`` is malformed."""
    rule = "flat key"


class FuncSigParseError(ParseError):
    """Raised when a transformation pipeline expression is malformed."""
    rule = "expression"


# =============================================================================
# Definition errors
# =============================================================================

class DefinitionError(DtsError):
    """
    Raised when a parsed function call does not match a definition.

    Attributes:
        function: The function signature or name the error refers to
        argument: The argument the error refers to, if any
    """

    def __init__(self, message: str, function: Optional[str] = None,
                 argument: Optional[str] = None):
        self.function = function
        self.argument = argument
        super().__init__(message)


class ArgumentError(DefinitionError):
    """Raised when a matched argument is missing or has the wrong type."""
    pass


# =============================================================================
# Transform construction errors
# =============================================================================

class TransformError(DtsError):
    """Raised when a transform cannot be constructed from its arguments."""
    pass


class UnknownTransformationError(TransformError):
    """Raised when no builder exists for a matched definition."""
    pass


class JsonPathError(TransformError):
    """Raised when a JSONPath query does not compile."""
    pass


class InvalidSortOrderError(TransformError):
    """Raised for sort orders other than ``asc`` and ``desc``."""
    pass


class RegexError(TransformError):
    """Raised when a regular expression does not compile."""
    pass
