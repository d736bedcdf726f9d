"""
Per-sample summary counts.

Accumulates, for every sample column, how many reads and how many expressed
genes there were before and after filtering. The accumulator is fed one data
row at a time and holds only four fixed-size arrays, so memory does not grow
with the number of rows.

Summary rows (one value per sample):
    total_count: Sum of values over all data rows
    passed_count: Sum of values over rows that passed filtering
    total_expressed: Number of data rows with value >= expression threshold
    passed_expressed: Number of passing rows with value >= expression threshold

Examples:
    >>> import numpy as np
    >>> summary = SampleSummary(["s1", "s2"])
    >>> summary.add(np.array([5.0, 0.0]), passed=True)
    >>> summary.add(np.array([1.0, 2.0]), passed=False)
    >>> summary.to_frame().loc["total_count"].tolist()
    [6.0, 2.0]
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from htseqfilter.core.statistics import DEFAULT_EXPRESSION_THRESHOLD

__all__ = ['SampleSummary', 'SUMMARY_ROWS']

SUMMARY_ROWS = ("total_count", "passed_count", "total_expressed", "passed_expressed")


class SampleSummary:
    """
    Running per-sample totals of counts and expressed genes.

    Args:
        sample_names: Sample column names, in matrix column order
        expression_threshold: Minimum value for a sample to count as expressed
    """

    def __init__(
        self,
        sample_names: Sequence[str],
        expression_threshold: float = DEFAULT_EXPRESSION_THRESHOLD,
    ):
        self.sample_names = list(sample_names)
        self.expression_threshold = expression_threshold

        n_samples = len(self.sample_names)
        self.total_count = np.zeros(n_samples, dtype=float)
        self.passed_count = np.zeros(n_samples, dtype=float)
        self.total_expressed = np.zeros(n_samples, dtype=np.int64)
        self.passed_expressed = np.zeros(n_samples, dtype=np.int64)

    @property
    def n_samples(self) -> int:
        return len(self.sample_names)

    def add(self, values: np.ndarray, passed: bool) -> None:
        """
        Add one data row to the running totals.

        Args:
            values: Per-sample values of the row
            passed: Whether the row passed filtering

        Raises:
            ValueError: If the row length does not match the number of samples
        """
        if len(values) != self.n_samples:
            raise ValueError(
                f"row has {len(values)} values but summary tracks {self.n_samples} samples"
            )

        expressed = values >= self.expression_threshold
        self.total_count += values
        self.total_expressed += expressed
        if passed:
            self.passed_count += values
            self.passed_expressed += expressed

    def to_frame(self) -> pd.DataFrame:
        """Summary as a DataFrame: one row per summary metric, one column per sample."""
        return pd.DataFrame(
            [self.total_count, self.passed_count, self.total_expressed, self.passed_expressed],
            index=pd.Index(SUMMARY_ROWS, name="feature"),
            columns=self.sample_names,
        )
