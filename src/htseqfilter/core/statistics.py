"""
Per-row statistics for count rows.

Computes the aggregates the filter chain thresholds on: the row total, the
number of zero-valued samples, the population variance and the number of
"expressed" samples (value at or above an expression threshold).

Variance uses divisor n (numpy's default ``ddof=0``). A row whose values are
all identical is assigned a variance of exactly 0.0 rather than whatever
floating-point residue ``np.var`` leaves for values such as 0.1, so that
identical-value filtering is exact.

Examples:
    >>> import numpy as np
    >>> from htseqfilter.core.statistics import compute_row_statistics
    >>> stats = compute_row_statistics(np.array([10.0, 0.0, 0.0, 20.0]))
    >>> stats.total, stats.zero_count
    (30.0, 2)
    >>> stats.variance
    68.75
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = ['RowStatistics', 'compute_row_statistics', 'DEFAULT_EXPRESSION_THRESHOLD']

DEFAULT_EXPRESSION_THRESHOLD = 1.0


@dataclass(frozen=True)
class RowStatistics:
    """
    Read-only aggregates of a single data row.

    Attributes:
        total: Sum of all sample values
        zero_count: Number of samples with a value of exactly zero
        variance: Population variance of the sample values
        n_expressed: Number of samples at or above the expression threshold
        n_samples: Number of samples in the row
    """
    total: float
    zero_count: int
    variance: float
    n_expressed: int
    n_samples: int


def compute_row_statistics(
    values: np.ndarray,
    expression_threshold: float = DEFAULT_EXPRESSION_THRESHOLD,
) -> RowStatistics:
    """
    Compute total, zero count, population variance and expressed count.

    Args:
        values: 1D array of per-sample values
        expression_threshold: Minimum value for a sample to count as expressed

    Returns:
        RowStatistics for the row

    Raises:
        ValueError: If values is not one-dimensional
    """
    values = np.asarray(values, dtype=float)
    if values.ndim != 1:
        raise ValueError(f"values must be 1D, got shape {values.shape}")

    n_samples = values.shape[0]
    if n_samples == 0:
        return RowStatistics(total=0.0, zero_count=0, variance=0.0, n_expressed=0, n_samples=0)

    total = float(values.sum())
    zero_count = int(np.count_nonzero(values == 0))
    n_expressed = int(np.count_nonzero(values >= expression_threshold))

    # Identical values have zero spread by definition
    if np.all(values == values[0]):
        variance = 0.0
    else:
        variance = float(values.var())

    return RowStatistics(
        total=total,
        zero_count=zero_count,
        variance=variance,
        n_expressed=n_expressed,
        n_samples=n_samples,
    )
