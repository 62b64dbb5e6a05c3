"""Coverage window filters and function ordering policies."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from covhtml.analysis.functions import ReportFunction


class SortOrder(Enum):
    """Ordering applied to the functions of each package."""

    HIGH_COVERAGE = "high-coverage"
    """Ascending coverage ratio, ties by ascending statement count."""

    LOW_COVERAGE = "low-coverage"
    """Descending coverage ratio, ties by ascending statement count."""

    LOCATION = "location"
    """Ascending (file, start offset)."""

    @classmethod
    def parse(cls, value: str | SortOrder) -> SortOrder:
        """Return the sort order named *value*.

        Raises:
            ValueError: If *value* is not a known sort order.
        """
        if isinstance(value, SortOrder):
            return value
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(order.value for order in cls)
            raise ValueError(f"invalid sort order {value!r} (expected one of: {choices})") from None

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in {order.value for order in cls}


def in_window(percent: float, lower: int, upper: int) -> bool:
    """Return True if ``lower <= percent <= upper``, compared as floats."""
    return float(lower) <= percent <= float(upper)


def filter_functions(
    functions: Iterable[ReportFunction], lower: int, upper: int
) -> list[ReportFunction]:
    """Keep the functions whose coverage percent lies inside ``[lower, upper]``."""
    return [fn for fn in functions if in_window(fn.coverage_percent, lower, upper)]


def sort_functions(functions: Iterable[ReportFunction], order: SortOrder) -> list[ReportFunction]:
    """Return *functions* ordered by *order*."""
    if order is SortOrder.HIGH_COVERAGE:
        return sorted(functions, key=lambda fn: (fn.coverage_ratio, fn.total_statements))
    if order is SortOrder.LOW_COVERAGE:
        return sorted(functions, key=lambda fn: (-fn.coverage_ratio, fn.total_statements))
    return sorted(functions, key=lambda fn: (fn.file, fn.start))
