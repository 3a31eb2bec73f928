"""
Flat keys - path segments addressing a position inside a Value.

A flat key such as ``foo.bar[0]["weird key"]`` is a sequence of KeyParts,
stored root to leaf. Rendering is the exact inverse of parsing:

- idents made only of ASCII alphanumerics and ``_`` render bare and are
  joined to the previous segment with a dot
- any other ident renders as ``["escaped"]`` (``\\`` and ``"`` escaped)
- indices render as ``[N]``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union


@dataclass(frozen=True)
class Ident:
    """An object key segment."""
    key: str

    def is_bare(self) -> bool:
        """True if the key can be rendered without brackets and quotes."""
        return bool(self.key) and all(
            c == "_" or (c.isascii() and c.isalnum()) for c in self.key
        )

    def render(self, first: bool = False) -> str:
        if self.is_bare():
            return self.key if first else f".{self.key}"
        escaped = self.key.replace("\\", "\\\\").replace('"', '\\"')
        return f'["{escaped}"]'


@dataclass(frozen=True)
class Index:
    """An array index segment."""
    index: int

    def render(self, first: bool = False) -> str:
        return f"[{self.index}]"


KeyPart = Union[Ident, Index]


class KeyParts:
    """
    A flat key as a sequence of KeyPart, root first.

    Construction code treats it as a stack: ``push`` appends a leaf segment
    and ``pop`` removes the last one.

    ::: This is-in-layer Domain-Layer.
    ::: This is a value-object.
    """

    __slots__ = ("_parts",)

    def __init__(self, parts: Optional[Iterable[KeyPart]] = None):
        self._parts: List[KeyPart] = list(parts) if parts is not None else []

    @classmethod
    def parse(cls, text: str) -> "KeyParts":
        """
        Parse a flat key.

        Raises:
            FlatKeyParseError: If ``text`` is not a valid flat key
        """
        from .parsers.flat_key import parse_flat_key
        return parse_flat_key(text)

    def push(self, part: KeyPart) -> None:
        self._parts.append(part)

    def push_ident(self, key: str) -> None:
        self._parts.append(Ident(key))

    def push_index(self, index: int) -> None:
        self._parts.append(Index(index))

    def pop(self) -> Optional[KeyPart]:
        """Remove and return the last segment, or None if empty."""
        if not self._parts:
            return None
        return self._parts.pop()

    def reverse(self) -> None:
        self._parts.reverse()

    def copy(self) -> "KeyParts":
        return KeyParts(self._parts)

    def __iter__(self) -> Iterator[KeyPart]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __getitem__(self, index: int) -> KeyPart:
        return self._parts[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyParts):
            return NotImplemented
        return self._parts == other._parts

    def __hash__(self) -> int:
        return hash(tuple(self._parts))

    def __str__(self) -> str:
        return "".join(
            part.render(first=(i == 0)) for i, part in enumerate(self._parts)
        )

    def __repr__(self) -> str:
        return f"KeyParts({self._parts!r})"
