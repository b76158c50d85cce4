from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Sequence, TypeVar

from wms_client_sdk import SortOrder

T = TypeVar("T")


@dataclass
class SortState:
    """Column sort for a table.

    Selecting the active field again flips the direction; selecting a new
    field starts ascending.
    """

    sort_key: str = "id"
    descending: bool = False

    def select(self, key: str) -> None:
        if key == self.sort_key:
            self.descending = not self.descending
        else:
            self.sort_key = key
            self.descending = False

    @property
    def order(self) -> SortOrder:
        return SortOrder.DESC if self.descending else SortOrder.ASC

    def stable_sort(self, rows: Sequence[T], accessor: Callable[[T, str], Any] | None = None) -> list[T]:
        return stable_sort(rows, self.sort_key, descending=self.descending, accessor=accessor)


def _field_value(row: Any, key: str) -> Any:
    if isinstance(row, dict):
        return row.get(key)
    return getattr(row, key, None)


def _sort_value(value: Any) -> tuple[int, Any]:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return (1, value.casefold())
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float, Decimal)):
        return (0, value)
    if isinstance(value, datetime):
        return (2, value.timestamp())
    return (3, str(value).casefold())


def stable_sort(
    rows: Sequence[T],
    key: str,
    *,
    descending: bool = False,
    accessor: Callable[[T, str], Any] | None = None,
) -> list[T]:
    """Sort rows by one field, keeping ties in their original order.

    ``None`` sorts last in both directions.
    """
    read = accessor or _field_value
    present: list[tuple[tuple[int, Any], T]] = []
    missing: list[T] = []
    for row in rows:
        value = read(row, key)
        if value is None:
            missing.append(row)
        else:
            present.append((_sort_value(value), row))
    # sorted() is stable for reverse=True as well.
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [row for _, row in present] + missing
