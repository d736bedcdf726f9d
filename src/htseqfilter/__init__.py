"""
htseqfilter - Filter HTSeq gene-expression counts matrices

Streams a tab-delimited counts matrix, drops genes that fail per-row
thresholds (total count, zero count, identical values, expressed samples)
and separates HTSeq metacount rows (``__no_feature``, ``__ambiguous``, ...)
into an optional side file.
"""

__version__ = "0.1.0"

from htseqfilter.core.row import CountRow, RowKind
from htseqfilter.core.statistics import RowStatistics, compute_row_statistics
from htseqfilter.core.quality import FilterOutcome
from htseqfilter.quality.filtering import FilterConfig, FilterChain, FilterReport
from htseqfilter.pipeline import filter_counts, run_filter

__all__ = [
    "CountRow",
    "RowKind",
    "RowStatistics",
    "compute_row_statistics",
    "FilterOutcome",
    "FilterConfig",
    "FilterChain",
    "FilterReport",
    "filter_counts",
    "run_filter",
]
