"""Stable, non-mutating row ordering with a three-state column toggle."""

import math
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, TypeVar

from quakeview.models import SortCriterion
from quakeview.observable import Observable

T = TypeVar("T")

# Columns the table can sort by.
SORTABLE_COLUMNS: tuple[str, ...] = (
    "time",
    "mag",
    "place",
    "depth",
    "latitude",
    "longitude",
    "region",
    "magnitude_category",
    "status",
)

# Numeric and date columns sort descending on their first toggle; text
# columns sort ascending.
DESC_FIRST_COLUMNS: frozenset[str] = frozenset(
    {"time", "mag", "depth", "latitude", "longitude"}
)


def is_missing(value: object) -> bool:
    """None and NaN count as absent."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def _sort_key(value: object) -> tuple:
    # Numbers, datetimes and strings each compare within their own rank so a
    # mixed column never raises TypeError. str comparison is code-point order.
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, datetime):
        return (1, value.timestamp())
    return (2, str(value))


def sort_rows(
    rows: Sequence[T],
    criteria: Sequence[SortCriterion],
    key: Callable[[T, str], Any] = getattr,
) -> list[T]:
    """Return rows ordered by criteria, first criterion most significant.

    Stable: rows with equal keys keep their input order. Absent values
    (None/NaN) sort last in both directions. The input is not modified.

    Args:
        rows: Rows in canonical order.
        criteria: Ordered (column, descending) pairs.
        key: Column accessor, ``key(row, column)``.

    Returns:
        A new list in sorted order.
    """
    ordered = list(rows)
    # Python's sort is stable, so applying criteria from least to most
    # significant yields a multi-key ordering.
    for criterion in reversed(criteria):
        present = [r for r in ordered if not is_missing(key(r, criterion.column))]
        absent = [r for r in ordered if is_missing(key(r, criterion.column))]
        present.sort(
            key=lambda r: _sort_key(key(r, criterion.column)),
            reverse=criterion.descending,
        )
        ordered = present + absent
    return ordered


class SortController:
    """Owns the table sort criteria.

    ``toggle(column)`` cycles a column through its first direction, the
    opposite direction and unsorted. Numeric and date columns start at
    descending, text columns at ascending. Switching to another column starts
    it at its first direction.
    Listeners receive ``(column, direction)`` with direction "asc", "desc"
    or None.
    """

    def __init__(self, columns: Sequence[str] = SORTABLE_COLUMNS) -> None:
        self._columns = tuple(columns)
        self._criteria: Observable[tuple[SortCriterion, ...]] = Observable(())

    @property
    def criteria(self) -> tuple[SortCriterion, ...]:
        return self._criteria.value

    def direction(self, column: str) -> str | None:
        for criterion in self._criteria.value:
            if criterion.column == column:
                return "desc" if criterion.descending else "asc"
        return None

    def first_direction(self, column: str) -> str:
        return "desc" if column in DESC_FIRST_COLUMNS else "asc"

    def toggle(self, column: str) -> str | None:
        first = self.first_direction(column)
        current = self.direction(column)
        if current is None:
            nxt: str | None = first
        elif current == first:
            nxt = "asc" if first == "desc" else "desc"
        else:
            nxt = None
        self.set_sort(column, nxt)
        return nxt

    def set_sort(self, column: str, direction: str | None) -> None:
        if column not in self._columns:
            raise ValueError(f"Unknown sort column: {column!r}")
        if direction not in ("asc", "desc", None):
            raise ValueError(f"direction must be 'asc', 'desc' or None, got {direction!r}")
        if direction is None:
            self._criteria.set(())
        else:
            self._criteria.set((SortCriterion(column, direction == "desc"),))

    def clear(self) -> None:
        self._criteria.set(())

    def apply(self, rows: Sequence[T]) -> list[T]:
        return sort_rows(rows, self._criteria.value)

    def subscribe(self, listener: Callable[[str, str | None], None]) -> Callable[[], None]:
        def relay(
            new: tuple[SortCriterion, ...], old: tuple[SortCriterion, ...]
        ) -> None:
            if new:
                listener(new[0].column, "desc" if new[0].descending else "asc")
            elif old:
                listener(old[0].column, None)

        return self._criteria.subscribe(relay)
