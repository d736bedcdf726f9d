"""
Tests for the counts/metacount writers and the per-sample summary.
"""

import io

import numpy as np
import pytest

from htseqfilter.core.summary import SUMMARY_ROWS, SampleSummary
from htseqfilter.errors import InputOutputError
from htseqfilter.io.loaders import parse_row
from htseqfilter.io.writers import CountsWriter, MetacountWriter, format_value


class _FailingStream(io.StringIO):
    def write(self, text):
        raise OSError(28, "No space left on device")


class TestFormatValue:

    @pytest.mark.parametrize("value, expected", [
        (0.0, "0"),
        (12.0, "12"),
        (np.int64(7), "7"),
        (0.5, "0.5"),
        (1234567890123.0, "1234567890123"),
    ])
    def test_format(self, value, expected):
        assert format_value(value) == expected


class TestCountsWriter:

    def test_rows_written_unchanged(self):
        out = io.StringIO()
        writer = CountsWriter(out)
        writer.write_header("id\ts1\ts2")
        writer.write_row(parse_row("g1\t01\t2.50", line_number=2, n_columns=3))
        assert out.getvalue() == "id\ts1\ts2\ng1\t01\t2.50\n"
        assert writer.n_lines == 2

    def test_write_failure_wrapped(self):
        writer = CountsWriter(_FailingStream(), destination="out.tsv")
        with pytest.raises(InputOutputError, match="failed to write to out.tsv"):
            writer.write_header("id\ts1")


class TestMetacountWriter:

    def test_header_and_stripped_rows(self):
        out = io.StringIO()
        writer = MetacountWriter(out, ["S1", "S2"])
        writer.write_row(parse_row("__no_feature\t100\t200", line_number=5, n_columns=3))
        writer.write_row(parse_row("___odd\t1\t2", line_number=6, n_columns=3))
        assert out.getvalue().splitlines() == [
            "feature\tS1\tS2",
            "no_feature\t100\t200",
            "_odd\t1\t2",
        ]
        assert writer.n_metacounts == 2

    def test_summary_rows(self):
        summary = SampleSummary(["S1", "S2"])
        summary.add(np.array([10.0, 0.0]), passed=True)
        summary.add(np.array([3.0, 4.0]), passed=False)

        out = io.StringIO()
        writer = MetacountWriter(out, ["S1", "S2"])
        writer.write_summary(summary)
        assert out.getvalue().splitlines() == [
            "feature\tS1\tS2",
            "total_count\t13\t4",
            "passed_count\t10\t0",
            "total_expressed\t2\t1",
            "passed_expressed\t1\t0",
        ]


class TestSampleSummary:

    def test_accumulates_per_sample(self):
        summary = SampleSummary(["a", "b", "c"], expression_threshold=5)
        summary.add(np.array([5.0, 4.0, 0.0]), passed=True)
        summary.add(np.array([10.0, 10.0, 10.0]), passed=False)

        np.testing.assert_array_equal(summary.total_count, [15, 14, 10])
        np.testing.assert_array_equal(summary.passed_count, [5, 4, 0])
        np.testing.assert_array_equal(summary.total_expressed, [2, 1, 1])
        np.testing.assert_array_equal(summary.passed_expressed, [1, 0, 0])

    def test_to_frame_layout(self):
        summary = SampleSummary(["a", "b"])
        frame = summary.to_frame()
        assert list(frame.index) == list(SUMMARY_ROWS)
        assert list(frame.columns) == ["a", "b"]
        assert frame.index.name == "feature"
        assert (frame.values == 0).all()

    def test_length_mismatch(self):
        summary = SampleSummary(["a", "b"])
        with pytest.raises(ValueError, match="row has 3 values"):
            summary.add(np.array([1.0, 2.0, 3.0]), passed=True)
