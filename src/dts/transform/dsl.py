"""
Transformation DSL - definitions, argument matching and resolved matches.

This module declares what transformations exist and which arguments they
take, and resolves parsed function calls against those declarations:

- Arg: one declared parameter (required, optional, or defaulted)
- Definition: a named transformation with aliases and an argument schema
- Definitions: the registry used to look up and match function calls
- DefinitionMatch/ArgMatch: the resolved arguments of one matched call

Example:
    definitions = Definitions().add(
        Definition("sort").add_arg(Arg("order").with_default("asc"))
    )
    for match in definitions.parse('sort("desc")'):
        order = match.str_value("order")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TypeVar, Union

from .. import value as values
from ..exceptions import ArgumentError, DefinitionError, DtsError
from ..number import Number
from ..parsers.func_sig import ExprTerm, FuncArg, FuncSig, decode_literal, parse
from ..value import Value

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _NoDefault:
    """Marker for arguments without a default value."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT = _NoDefault()


# =============================================================================
# Arg
# =============================================================================

@dataclass
class Arg:
    """
    A declared parameter of a Definition.

    Arguments are required unless a default value is set or they are
    explicitly marked optional.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.
    """
    name: str
    required: bool = True
    default: Any = NO_DEFAULT
    description: Optional[str] = None

    def with_default(self, default: Any) -> "Arg":
        """Set the default value; this makes the argument optional."""
        self.default = values.from_native(default)
        self.required = False
        return self

    def with_required(self, required: bool) -> "Arg":
        self.required = required
        return self

    def with_description(self, description: str) -> "Arg":
        self.description = description
        return self

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def sort_rank(self) -> int:
        """Required args sort first, then optional, then defaulted."""
        if self.has_default:
            return 2
        return 0 if self.required else 1

    def contains_keyword(self, keyword: str) -> bool:
        if keyword in self.name.lower():
            return True
        return self.description is not None and keyword in self.description.lower()

    def __str__(self) -> str:
        if self.has_default:
            return f"{self.name}={values.dumps(self.default)}"
        return self.name


# =============================================================================
# Matches
# =============================================================================

@dataclass(frozen=True)
class ArgMatch:
    """
    A resolved argument: either a literal value or a nested expression.

    ``expr`` is None for literal values; for expressions it holds the
    matched definitions of the nested pipeline.
    """
    value: Value = None
    expr: Optional[List["DefinitionMatch"]] = None

    @classmethod
    def of_value(cls, value: Value) -> "ArgMatch":
        return cls(value=value)

    @classmethod
    def of_expr(cls, matches: List["DefinitionMatch"]) -> "ArgMatch":
        return cls(expr=list(matches))

    @property
    def is_expr(self) -> bool:
        return self.expr is not None


@dataclass
class DefinitionMatch:
    """
    The result of matching a function call against a Definition.

    Typed getters raise ArgumentError naming the argument and the
    transformation on a missing argument or a type mismatch.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.
    """
    name: str
    args: Dict[str, ArgMatch] = field(default_factory=dict)

    def is_present(self, name: str) -> bool:
        return name in self.args

    def _get(self, name: str) -> ArgMatch:
        try:
            return self.args[name]
        except KeyError:
            raise ArgumentError(
                f"Argument `{name}` missing for `{self.name}`",
                function=self.name,
                argument=name,
            ) from None

    def _invalid(self, name: str, cause: Any) -> ArgumentError:
        return ArgumentError(
            f"Invalid argument `{name}` for `{self.name}`: {cause}",
            function=self.name,
            argument=name,
        )

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def expr(self, name: str) -> List["DefinitionMatch"]:
        """Return the nested matches of an expression argument."""
        arg = self._get(name)
        if not arg.is_expr:
            raise self._invalid(
                name, f"Expected expression, got value `{values.dumps(arg.value)}`"
            )
        return arg.expr

    def map_expr(self, name: str, fn: Callable[[List["DefinitionMatch"]], T]) -> T:
        """Pass the nested matches of ``name`` to ``fn`` and return its result."""
        matches = self.expr(name)
        try:
            return fn(matches)
        except (DtsError, ValueError, TypeError) as err:
            raise self._invalid(name, err) from err

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def value(self, name: str) -> Value:
        """Return the literal value of ``name``."""
        arg = self._get(name)
        if arg.is_expr:
            expression = ".".join(match.name for match in arg.expr)
            raise self._invalid(name, f"Expected value, got expression `{expression}`")
        return arg.value

    def map_value(self, name: str, fn: Callable[[Value], T]) -> T:
        """Pass the literal value of ``name`` to ``fn`` and return its result."""
        value = self.value(name)
        try:
            return fn(value)
        except (DtsError, ValueError, TypeError) as err:
            raise self._invalid(name, err) from err

    def str_value(self, name: str) -> str:
        return self.map_value(name, _expect(values.as_str, "string"))

    def bool_value(self, name: str) -> bool:
        return self.map_value(name, _expect(values.as_bool, "boolean"))

    def numeric_value(self, name: str) -> Number:
        return self.map_value(name, _expect(values.as_number, "number"))

    def parse_str(self, name: str, parser: Callable[[str], T]) -> T:
        """Parse the string value of ``name`` with ``parser``."""
        return self.map_value(name, lambda v: parser(_expect(values.as_str, "string")(v)))

    def parse_number(self, name: str, parser: Callable[[Number], T]) -> T:
        """Convert the numeric value of ``name`` with ``parser``."""
        return self.map_value(name, lambda v: parser(_expect(values.as_number, "number")(v)))

    def optional(self, name: str, getter: Callable[[str], T]) -> Optional[T]:
        """Call ``getter(name)`` if the argument is present, else return None."""
        if not self.is_present(name):
            return None
        return getter(name)


def _expect(projection: Callable[[Value], Optional[T]], expected: str) -> Callable[[Value], T]:
    def convert(value: Value) -> T:
        result = projection(value)
        if result is None:
            raise TypeError(f"Expected {expected}, got {values.dumps(value)}")
        return result

    return convert


# =============================================================================
# Definition
# =============================================================================

@dataclass
class Definition:
    """
    Declares one transformation: its name, aliases and argument schema.

    Args are kept stably sorted: required, then optional without default,
    then optional with default. This is the positional argument order.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a value-object.
    """
    name: str
    aliases: List[str] = field(default_factory=list)
    description: Optional[str] = None
    args: List[Arg] = field(default_factory=list)

    def add_alias(self, alias: str) -> "Definition":
        self.aliases.append(alias)
        return self

    def add_aliases(self, aliases: Iterable[str]) -> "Definition":
        for alias in aliases:
            self.add_alias(alias)
        return self

    def with_description(self, description: str) -> "Definition":
        self.description = description
        return self

    def add_arg(self, arg: Union[Arg, str]) -> "Definition":
        """Add an argument (replacing one of the same name) and re-sort."""
        if isinstance(arg, str):
            arg = Arg(arg)
        self.args = [existing for existing in self.args if existing.name != arg.name]
        self.args.append(arg)
        self.args.sort(key=Arg.sort_rank)
        return self

    def add_args(self, args: Iterable[Union[Arg, str]]) -> "Definition":
        for arg in args:
            self.add_arg(arg)
        return self

    def matches(self, name: str) -> bool:
        """True if ``name`` is the definition's name or one of its aliases."""
        return self.name == name or name in self.aliases

    def contains_keyword(self, keyword: str) -> bool:
        """
        True if the name, description, an alias or an arg contains ``keyword``.

        The keyword is assumed to be lowercase.
        """
        if keyword in self.name.lower():
            return True
        if self.description is not None and keyword in self.description.lower():
            return True
        if any(keyword in alias.lower() for alias in self.aliases):
            return True
        return any(arg.contains_keyword(keyword) for arg in self.args)

    def match_func_sig(self, func_sig: FuncSig, definitions: "Definitions") -> DefinitionMatch:
        """
        Resolve the arguments of ``func_sig`` against this definition.

        Raises:
            DefinitionError: Wrapping the cause with the offending signature
        """
        try:
            args = self._match_args(func_sig.args, definitions)
        except DefinitionError as err:
            raise DefinitionError(
                f"Invalid function signature `{func_sig}`: {err}",
                function=str(func_sig),
                argument=err.argument,
            ) from err
        return DefinitionMatch(self.name, args)

    def _match_args(
        self, func_args: Iterable[FuncArg], definitions: "Definitions"
    ) -> Dict[str, ArgMatch]:
        remaining: Dict[str, Arg] = {arg.name: arg for arg in self.args}
        matched: Dict[str, ArgMatch] = {}

        for func_arg in func_args:
            if func_arg.is_named:
                if func_arg.name in matched:
                    raise DefinitionError(
                        f"Duplicate argument `{func_arg.name}`",
                        function=self.name,
                        argument=func_arg.name,
                    )
                arg = remaining.pop(func_arg.name, None)
                if arg is None:
                    raise DefinitionError(
                        f"Unexpected named argument `{func_arg}`",
                        function=self.name,
                        argument=func_arg.name,
                    )
            else:
                if not remaining:
                    raise DefinitionError(
                        f"Unexpected positional argument `{func_arg.term}`",
                        function=self.name,
                    )
                arg = remaining.pop(next(iter(remaining)))

            matched[arg.name] = self._match_term(arg, func_arg, definitions)

        missing = []
        for arg in remaining.values():
            if arg.has_default:
                matched[arg.name] = ArgMatch.of_value(arg.default)
            elif arg.required:
                missing.append(arg.name)

        if missing:
            raise DefinitionError(
                f"Required arguments missing: {','.join(missing)}",
                function=self.name,
                argument=missing[0],
            )

        return matched

    def _match_term(self, arg: Arg, func_arg: FuncArg, definitions: "Definitions") -> ArgMatch:
        term = func_arg.term
        if isinstance(term, ExprTerm):
            return ArgMatch.of_expr([definitions.match(call) for call in term.calls])

        try:
            return ArgMatch.of_value(decode_literal(term.text))
        except ValueError as err:
            raise DefinitionError(
                f"Invalid value for argument `{arg.name}`: {err}",
                function=self.name,
                argument=arg.name,
            ) from err

    def __str__(self) -> str:
        parts = []
        optional = 0
        for arg in self.args:
            if arg.required:
                parts.append(str(arg))
            else:
                parts.append(f"[{arg}")
                optional += 1
        return f"{self.name}({', '.join(parts)}{']' * optional})"


# =============================================================================
# Definitions
# =============================================================================

class Definitions:
    """
    Registry of available transformation definitions.

    Built once with ``add`` and treated as read-only afterwards; matching
    never mutates it, so one instance can be shared between threads.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a registry.
    """

    def __init__(self, definitions: Optional[Iterable[Definition]] = None):
        self._definitions: List[Definition] = list(definitions or [])

    def add(self, definition: Definition) -> "Definitions":
        """Add a definition and return the registry."""
        self._definitions.append(definition)
        return self

    def find(self, name: str) -> Optional[Definition]:
        """Find a definition by name or alias."""
        for definition in self._definitions:
            if definition.matches(name):
                return definition
        return None

    def match(self, func_sig: FuncSig) -> DefinitionMatch:
        """
        Match one parsed function call.

        Raises:
            DefinitionError: For unknown functions or invalid arguments
        """
        definition = self.find(func_sig.name)
        if definition is None:
            raise DefinitionError(
                f"Unknown function `{func_sig.name}`", function=func_sig.name
            )
        match = definition.match_func_sig(func_sig, self)
        logger.debug("Matched `%s` as %s", func_sig, definition.name)
        return match

    def parse(self, text: str) -> List[DefinitionMatch]:
        """
        Parse a pipeline and match every call against the registry.

        Raises:
            FuncSigParseError: If ``text`` is not a valid pipeline
            DefinitionError: If a call does not match its definition
        """
        return [self.match(func_sig) for func_sig in parse(text)]

    def search(self, keyword: str) -> List[Definition]:
        """Definitions whose name, description, aliases or args contain ``keyword``."""
        keyword = keyword.lower()
        return [d for d in self._definitions if d.contains_keyword(keyword)]

    def __iter__(self) -> Iterator[Definition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
