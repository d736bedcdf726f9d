"""
Filter outcomes for count rows.

Every data row receives exactly one outcome: it either passes, or it is
rejected by the first filter in the chain that it fails. Outcomes carry a
short human-readable reason used in diagnostic logging.

Examples:
    >>> from htseqfilter.core.quality import FilterOutcome
    >>> FilterOutcome.TOO_MANY_ZEROS.reason
    'too many zero counts'
    >>> FilterOutcome.PASSED.passed
    True
"""

from __future__ import annotations

from enum import Enum

__all__ = ['FilterOutcome']


class FilterOutcome(Enum):
    """
    Result of running a data row through the filter chain.

    Attributes:
        PASSED: Row passed every active filter
        BELOW_MIN_COUNT: Row total is below the minimum count
        TOO_MANY_ZEROS: More zero-valued samples than allowed
        IDENTICAL_VALUES: All sample values identical (zero variance)
        TOO_FEW_EXPRESSED: Fewer expressed samples than required
    """

    PASSED = "passed"
    BELOW_MIN_COUNT = "below minimum count"
    TOO_MANY_ZEROS = "too many zero counts"
    IDENTICAL_VALUES = "zero variance / identical values"
    TOO_FEW_EXPRESSED = "too few expressed samples"

    @property
    def passed(self) -> bool:
        return self is FilterOutcome.PASSED

    @property
    def reason(self) -> str:
        return self.value
