"""
Tests for row classification and per-row statistics.
"""

import numpy as np
import pytest

from htseqfilter.core.row import (
    RowKind,
    classify_identifier,
    is_metacount,
    strip_metacount_prefix,
)
from htseqfilter.core.statistics import compute_row_statistics


class TestMetacountClassifier:
    """Identifiers starting with exactly '__' are metacounts."""

    @pytest.mark.parametrize("identifier", ["__no_feature", "__ambiguous", "__", "___x"])
    def test_metacount_identifiers(self, identifier):
        assert is_metacount(identifier)
        assert classify_identifier(identifier) is RowKind.METACOUNT

    @pytest.mark.parametrize("identifier", ["ENSG00000000003", "_single", "gene__x", " __lead", ""])
    def test_data_identifiers(self, identifier):
        assert not is_metacount(identifier)
        assert classify_identifier(identifier) is RowKind.DATA

    def test_strip_removes_exact_prefix_once(self):
        assert strip_metacount_prefix("__no_feature") == "no_feature"
        assert strip_metacount_prefix("___odd") == "_odd"
        assert strip_metacount_prefix("__") == ""

    def test_strip_leaves_data_identifiers_unchanged(self):
        assert strip_metacount_prefix("GENE1") == "GENE1"
        assert strip_metacount_prefix("_GENE1") == "_GENE1"


class TestRowStatistics:
    """Total, zero count, population variance and expressed count."""

    def test_example_row(self):
        stats = compute_row_statistics(np.array([10.0, 0.0, 0.0, 20.0]))
        assert stats.total == 30.0
        assert stats.zero_count == 2
        assert stats.variance == pytest.approx(68.75)
        assert stats.n_expressed == 2
        assert stats.n_samples == 4

    def test_population_variance_divisor(self):
        """Divisor is n, not n - 1."""
        values = np.array([1.0, 2.0, 3.0, 4.0])
        stats = compute_row_statistics(values)
        assert stats.variance == pytest.approx(np.var(values, ddof=0))
        assert stats.variance != pytest.approx(np.var(values, ddof=1))

    def test_identical_values_have_exactly_zero_variance(self):
        assert compute_row_statistics(np.array([5.0, 5.0, 5.0, 5.0])).variance == 0.0
        # 0.1 is not exactly representable; np.var alone can leave residue
        assert compute_row_statistics(np.full(7, 0.1)).variance == 0.0

    def test_single_sample_variance_is_zero(self):
        stats = compute_row_statistics(np.array([42.0]))
        assert stats.variance == 0.0
        assert stats.total == 42.0

    def test_empty_row(self):
        stats = compute_row_statistics(np.array([]))
        assert stats.total == 0.0
        assert stats.zero_count == 0
        assert stats.variance == 0.0

    def test_expression_threshold(self):
        values = np.array([0.0, 1.0, 4.0, 5.0, 10.0])
        assert compute_row_statistics(values).n_expressed == 4
        assert compute_row_statistics(values, expression_threshold=5).n_expressed == 2

    def test_negative_zero_counts_as_zero(self):
        assert compute_row_statistics(np.array([-0.0, 1.0])).zero_count == 1

    def test_rejects_2d_input(self):
        with pytest.raises(ValueError, match="must be 1D"):
            compute_row_statistics(np.zeros((2, 2)))
