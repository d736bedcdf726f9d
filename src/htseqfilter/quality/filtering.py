"""
Threshold filters for gene rows of a counts matrix.

Filters run in a fixed order and the first failure decides the outcome:

    1. MinCountFilter         total >= min_count
    2. MaxZeroCountFilter     zero_count <= max_zerocount
    3. IdenticalValuesFilter  variance > 0
    4. MinExpressedFilter     n_expressed >= min_expressed

Only filters whose option is set take part in the chain; with nothing
configured every row passes.

Examples:
    >>> from htseqfilter.quality.filtering import FilterConfig, FilterChain
    >>> from htseqfilter.core.statistics import compute_row_statistics
    >>> import numpy as np
    >>>
    >>> chain = FilterChain.from_config(FilterConfig(min_count=5, max_zerocount=1))
    >>> chain.evaluate(compute_row_statistics(np.array([10.0, 0.0, 0.0, 20.0])))
    <FilterOutcome.TOO_MANY_ZEROS: 'too many zero counts'>
"""

from __future__ import annotations

import logging
from argparse import Namespace
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from htseqfilter.core.quality import FilterOutcome
from htseqfilter.core.statistics import DEFAULT_EXPRESSION_THRESHOLD, RowStatistics
from htseqfilter.core.transform import RowFilter

logger = logging.getLogger(__name__)

__all__ = [
    'FilterConfig',
    'MinCountFilter',
    'MaxZeroCountFilter',
    'IdenticalValuesFilter',
    'MinExpressedFilter',
    'FilterChain',
    'FilterReport',
]


@dataclass(frozen=True)
class FilterConfig:
    """
    Immutable set of filter thresholds.

    Attributes:
        min_count: Inclusive lower bound on the row total (None = off)
        max_zerocount: Inclusive upper bound on zero-valued samples (None = off)
        filter_identical: Reject rows whose values are all identical
        min_expressed: Inclusive lower bound on expressed samples (None = off)
        expression_threshold: Value at or above which a sample is "expressed"
    """
    min_count: Optional[float] = None
    max_zerocount: Optional[int] = None
    filter_identical: bool = False
    min_expressed: Optional[int] = None
    expression_threshold: float = DEFAULT_EXPRESSION_THRESHOLD

    @property
    def is_active(self) -> bool:
        """True if at least one filter is configured."""
        return (
            self.min_count is not None
            or self.max_zerocount is not None
            or self.filter_identical
            or self.min_expressed is not None
        )

    @classmethod
    def from_namespace(cls, args: Namespace) -> FilterConfig:
        """Build a FilterConfig from parsed (and config-merged) CLI arguments."""
        return cls(
            min_count=args.min_count,
            max_zerocount=args.max_zerocount,
            filter_identical=bool(args.filter_identical),
            min_expressed=args.min_expressed,
            expression_threshold=args.expression_threshold,
        )


class MinCountFilter(RowFilter):
    """Reject rows whose total count is below ``min_count``."""

    outcome = FilterOutcome.BELOW_MIN_COUNT

    def __init__(self, min_count: float):
        super().__init__(name="MinCountFilter", params={"min_count": min_count})
        self.min_count = min_count

    def check(self, stats: RowStatistics) -> bool:
        return stats.total >= self.min_count

    def describe_failure(self, stats: RowStatistics) -> str:
        return f"total count {stats.total:g} < {self.min_count:g}"


class MaxZeroCountFilter(RowFilter):
    """Reject rows with more than ``max_zerocount`` zero-valued samples."""

    outcome = FilterOutcome.TOO_MANY_ZEROS

    def __init__(self, max_zerocount: int):
        super().__init__(name="MaxZeroCountFilter", params={"max_zerocount": max_zerocount})
        self.max_zerocount = max_zerocount

    def check(self, stats: RowStatistics) -> bool:
        return stats.zero_count <= self.max_zerocount

    def describe_failure(self, stats: RowStatistics) -> str:
        return f"zero count {stats.zero_count} > {self.max_zerocount}"


class IdenticalValuesFilter(RowFilter):
    """Reject rows with zero variance, i.e. all sample values identical."""

    outcome = FilterOutcome.IDENTICAL_VALUES

    def __init__(self):
        super().__init__(name="IdenticalValuesFilter", params={})

    def check(self, stats: RowStatistics) -> bool:
        return stats.variance > 0

    def describe_failure(self, stats: RowStatistics) -> str:
        return "zero variance"


class MinExpressedFilter(RowFilter):
    """Reject rows expressed (value >= threshold) in fewer than ``min_expressed`` samples."""

    outcome = FilterOutcome.TOO_FEW_EXPRESSED

    def __init__(self, min_expressed: int, expression_threshold: float = DEFAULT_EXPRESSION_THRESHOLD):
        super().__init__(
            name="MinExpressedFilter",
            params={"min_expressed": min_expressed, "expression_threshold": expression_threshold},
        )
        self.min_expressed = min_expressed
        self.expression_threshold = expression_threshold

    def check(self, stats: RowStatistics) -> bool:
        return stats.n_expressed >= self.min_expressed

    def describe_failure(self, stats: RowStatistics) -> str:
        return f"expressed count {stats.n_expressed} < {self.min_expressed}"


class FilterChain:
    """
    Ordered, short-circuiting sequence of row filters.

    Args:
        filters: Filters in evaluation order

    Examples:
        >>> chain = FilterChain.from_config(FilterConfig(filter_identical=True))
        >>> chain
        FilterChain([IdenticalValuesFilter()])
    """

    def __init__(self, filters: List[RowFilter]):
        self.filters = list(filters)

    @classmethod
    def from_config(cls, config: FilterConfig) -> FilterChain:
        """Build the chain of active filters in the fixed evaluation order."""
        filters: List[RowFilter] = []
        if config.min_count is not None:
            filters.append(MinCountFilter(config.min_count))
        if config.max_zerocount is not None:
            filters.append(MaxZeroCountFilter(config.max_zerocount))
        if config.filter_identical:
            filters.append(IdenticalValuesFilter())
        if config.min_expressed is not None:
            filters.append(MinExpressedFilter(config.min_expressed, config.expression_threshold))
        return cls(filters)

    def evaluate(self, stats: RowStatistics, gene: Optional[str] = None) -> FilterOutcome:
        """
        Run the row through the chain.

        Args:
            stats: Statistics of the row
            gene: Row identifier, used only for debug logging

        Returns:
            PASSED, or the outcome of the first filter the row fails
        """
        for row_filter in self.filters:
            if not row_filter.check(stats):
                if gene is not None:
                    logger.debug(
                        f"gene {gene} failed filtering ({row_filter.describe_failure(stats)})"
                    )
                return row_filter.outcome

        if gene is not None:
            logger.debug(f"gene {gene} passed filtering")
        return FilterOutcome.PASSED

    def __len__(self) -> int:
        return len(self.filters)

    def __repr__(self) -> str:
        return f"FilterChain([{', '.join(repr(f) for f in self.filters)}])"


@dataclass
class FilterReport:
    """Tally of filter outcomes for one run."""
    outcomes: Counter = field(default_factory=Counter)
    n_metacounts: int = 0
    parameters: Dict[str, Any] = field(default_factory=dict)

    def record(self, outcome: FilterOutcome) -> None:
        self.outcomes[outcome] += 1

    @property
    def n_genes(self) -> int:
        return sum(self.outcomes.values())

    @property
    def n_passed(self) -> int:
        return self.outcomes[FilterOutcome.PASSED]

    @property
    def n_failed(self) -> int:
        return self.n_genes - self.n_passed

    @property
    def pass_rate(self) -> float:
        return self.n_passed / self.n_genes if self.n_genes > 0 else 0.0
