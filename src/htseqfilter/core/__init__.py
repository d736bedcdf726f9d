"""
Core data structures for counts-matrix filtering.

1. CountRow / RowKind: A parsed matrix row and its data/metacount classification
2. RowStatistics: Per-row total, zero count, variance and expressed count
3. FilterOutcome: Pass or the reason a row was rejected
4. RowFilter: Abstract base class for threshold predicates
5. SampleSummary: Per-sample totals before and after filtering
"""

from htseqfilter.core.row import (
    METACOUNT_PREFIX,
    CountRow,
    RowKind,
    classify_identifier,
    is_metacount,
    strip_metacount_prefix,
)
from htseqfilter.core.statistics import RowStatistics, compute_row_statistics
from htseqfilter.core.quality import FilterOutcome
from htseqfilter.core.transform import RowFilter
from htseqfilter.core.summary import SampleSummary, SUMMARY_ROWS

__all__ = [
    'METACOUNT_PREFIX',
    'CountRow',
    'RowKind',
    'classify_identifier',
    'is_metacount',
    'strip_metacount_prefix',
    'RowStatistics',
    'compute_row_statistics',
    'FilterOutcome',
    'RowFilter',
    'SampleSummary',
    'SUMMARY_ROWS',
]
