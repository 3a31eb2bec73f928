"""
Recursive sorting of arrays and objects by the Value total order.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..exceptions import InvalidSortOrderError
from ..value import SortKey, Value


class Order(Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, text: str) -> "Order":
        """
        Parse ``asc`` or ``desc`` (case-insensitive).

        Raises:
            InvalidSortOrderError: For any other input
        """
        try:
            return cls(text.lower())
        except ValueError:
            raise InvalidSortOrderError(f"Invalid sort order `{text}`") from None


class ValueSorter:
    """
    Sorts array elements and object entries recursively.

    Objects are ordered by their (key, value) pairs. ``max_depth`` limits
    the recursion: None sorts every level, 0 only the outermost collection.
    """

    def __init__(self, order: Order = Order.ASC, max_depth: Optional[int] = None):
        self.order = order
        self.max_depth = max_depth

    def sort(self, value: Value) -> Value:
        return self._sort(value, 0)

    def _sort(self, value: Value, depth: int) -> Value:
        if not isinstance(value, (list, dict)):
            return value

        if self.max_depth is None or depth < self.max_depth:
            if isinstance(value, list):
                value = [self._sort(item, depth + 1) for item in value]
            else:
                value = {key: self._sort(item, depth + 1) for key, item in value.items()}

        reverse = self.order is Order.DESC
        if isinstance(value, list):
            return sorted(value, key=SortKey, reverse=reverse)
        entries = sorted(
            value.items(), key=lambda entry: (entry[0], SortKey(entry[1])), reverse=reverse
        )
        return dict(entries)
