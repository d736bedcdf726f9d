"""
Base class for row filters.

A row filter is a single threshold predicate over RowStatistics. Filters are
small immutable objects that know their own name, parameters and the outcome
they assign on failure; the filter chain runs them in a fixed order and stops
at the first failure.

Engineering Design:
    Pure predicates:
        - No side effects (rows and statistics are never modified)
        - Deterministic (same statistics + params -> same answer)
        - Composable (an ordered list forms the chain)

Examples:
    >>> from htseqfilter.core.transform import RowFilter
    >>> from htseqfilter.core.quality import FilterOutcome
    >>>
    >>> class MaxTotalFilter(RowFilter):
    ...     outcome = FilterOutcome.BELOW_MIN_COUNT
    ...
    ...     def __init__(self, max_total: float):
    ...         super().__init__(name="MaxTotalFilter", params={"max_total": max_total})
    ...         self.max_total = max_total
    ...
    ...     def check(self, stats):
    ...         return stats.total <= self.max_total
    >>>
    >>> MaxTotalFilter(100)
    MaxTotalFilter(max_total=100)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

from htseqfilter.core.quality import FilterOutcome

if TYPE_CHECKING:
    from htseqfilter.core.statistics import RowStatistics

__all__ = ['RowFilter']


class RowFilter(ABC):
    """
    Abstract base class for threshold predicates over row statistics.

    Subclasses set the class attribute ``outcome`` to the FilterOutcome
    assigned to rows that fail, and implement ``check()`` and
    ``describe_failure()``.

    Attributes:
        name: Human-readable filter name (e.g., "MinCountFilter")
        params: Parameters of this filter, for logging
        outcome: FilterOutcome assigned when ``check()`` returns False
    """

    outcome: FilterOutcome

    def __init__(self, name: str, params: dict[str, Any]) -> None:
        self.name = name
        self.params = params

    @abstractmethod
    def check(self, stats: RowStatistics) -> bool:
        """
        Return True if the row passes this filter.

        Args:
            stats: Statistics of the row under test

        Returns:
            True to keep the row, False to reject it
        """
        pass

    def describe_failure(self, stats: RowStatistics) -> str:
        """Diagnostic detail for a failing row, e.g. "total count 3 < 5"."""
        return self.outcome.reason

    def __repr__(self) -> str:
        params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
        return f"{self.name}({params_str})"
