"""
Quality filtering for HTSeq counts matrices.

Components:
    FilterConfig: Immutable thresholds (min count, max zero count, identical
                  values, min expressed samples)
    FilterChain: Fixed-order, first-failure-wins evaluation of active filters
    FilterReport: Outcome tally for a run

Examples:
    >>> from htseqfilter.quality import FilterConfig, FilterChain
    >>> chain = FilterChain.from_config(FilterConfig(min_count=10, filter_identical=True))
    >>> len(chain)
    2
"""

from htseqfilter.quality.filtering import (
    FilterConfig,
    FilterChain,
    FilterReport,
    MinCountFilter,
    MaxZeroCountFilter,
    IdenticalValuesFilter,
    MinExpressedFilter,
)

__all__ = [
    'FilterConfig',
    'FilterChain',
    'FilterReport',
    'MinCountFilter',
    'MaxZeroCountFilter',
    'IdenticalValuesFilter',
    'MinExpressedFilter',
]
