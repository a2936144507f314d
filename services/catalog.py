"""In-memory filtering and column sorting over cached driver records."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from pnputil_manager.constants import IMMUTABLE_CONFIG
from services.driver_parser import DriverRecord

SEARCH_PLACEHOLDER = IMMUTABLE_CONFIG.display.search_placeholder

COLUMN_GETTERS: tuple[Callable[[DriverRecord], str], ...] = (
    lambda record: record.published_name,
    lambda record: record.original_name,
    lambda record: record.provider,
    lambda record: record.driver_version,
    lambda record: record.driver_class,
)


class SortOrder(enum.Enum):
    NONE = "none"
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class SortState:
    column: int = 0
    order: SortOrder = SortOrder.NONE

    @classmethod
    def after_enumerate(cls) -> "SortState":
        return cls(IMMUTABLE_CONFIG.display.default_sort_column, SortOrder.ASCENDING)

    def toggled(self, column: int) -> "SortState":
        """Next state after a click on ``column``'s header."""
        if column == self.column:
            order = SortOrder.DESCENDING if self.order == SortOrder.ASCENDING else SortOrder.ASCENDING
            return SortState(column, order)
        return SortState(column, SortOrder.ASCENDING)


def column_text(record: DriverRecord, column: int) -> str:
    if not 0 <= column < len(COLUMN_GETTERS):
        raise ValueError(f"Unknown sort column: {column}")
    return COLUMN_GETTERS[column](record) or ""


def is_empty_query(query: str | None, placeholder: str = SEARCH_PLACEHOLDER) -> bool:
    cleaned = (query or "").strip()
    return not cleaned or cleaned == placeholder


def _ordinal_fold(text: str) -> str:
    # Upper-cases one code point at a time; characters whose upper case is longer (such as "ß") stay as they are.
    folded = []
    for char in text:
        upper = char.upper()
        folded.append(upper if len(upper) == 1 else char)
    return "".join(folded)


def apply_filter(
    records: Iterable[DriverRecord],
    query: str | None,
    placeholder: str = SEARCH_PLACEHOLDER,
) -> list[DriverRecord]:
    if is_empty_query(query, placeholder):
        return list(records)
    needle = _ordinal_fold((query or "").strip())
    return [record for record in records if record.provider and needle in _ordinal_fold(record.provider)]


def sort_records(records: Sequence[DriverRecord], state: SortState) -> list[DriverRecord]:
    if state.order == SortOrder.NONE:
        return list(records)
    if not 0 <= state.column < len(COLUMN_GETTERS):
        raise ValueError(f"Unknown sort column: {state.column}")
    getter = COLUMN_GETTERS[state.column]
    # sorted(reverse=True) keeps equal keys in input order, matching a negated comparator.
    return sorted(
        records,
        key=lambda record: _ordinal_fold(getter(record) or ""),
        reverse=state.order == SortOrder.DESCENDING,
    )
