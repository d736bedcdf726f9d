"""
Writers for filtered counts and extracted metacounts.

Two independent output streams:

1. Primary output (CountsWriter): the header line unchanged, followed by
   every passing gene row exactly as it appeared in the input.
2. Metacount output (MetacountWriter): a ``feature`` header line with the
   sample names, every metacount row with its ``__`` marker stripped, and
   optionally the per-sample summary rows at the end.

Rows are written as they arrive, so output order always matches input order.

Examples:
    >>> import io
    >>> from htseqfilter.io.writers import format_value
    >>> format_value(12.0), format_value(0.5)
    ('12', '0.5')
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, TextIO

from htseqfilter.core.row import CountRow
from htseqfilter.core.summary import SampleSummary
from htseqfilter.errors import InputOutputError

logger = logging.getLogger(__name__)

__all__ = ['CountsWriter', 'MetacountWriter', 'format_value', 'METACOUNT_HEADER_LABEL']

METACOUNT_HEADER_LABEL = "feature"


def format_value(value: float) -> str:
    """Format a count: integral values without a decimal point, others in shortest form."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class _LineWriter:
    """Write newline-terminated lines to a stream, wrapping OSError."""

    def __init__(self, stream: TextIO, destination: str):
        self._stream = stream
        self.destination = destination
        self.n_lines = 0

    def _write_line(self, text: str) -> None:
        try:
            self._stream.write(text)
            self._stream.write("\n")
        except BrokenPipeError:
            raise
        except OSError as e:
            raise InputOutputError(f"failed to write to {self.destination}: {e}") from e
        self.n_lines += 1

    def _write_fields(self, fields: Iterable[str]) -> None:
        self._write_line("\t".join(fields))

    def flush(self) -> None:
        try:
            self._stream.flush()
        except BrokenPipeError:
            raise
        except OSError as e:
            raise InputOutputError(f"failed to write to {self.destination}: {e}") from e


class CountsWriter(_LineWriter):
    """
    Primary output: header and passing gene rows, textually unchanged.

    Args:
        stream: Open text stream
        destination: Name of the stream, used in error messages
    """

    def __init__(self, stream: TextIO, destination: str = "<stdout>"):
        super().__init__(stream, destination)

    def write_header(self, header: str) -> None:
        self._write_line(header)

    def write_row(self, row: CountRow) -> None:
        self._write_line(row.line)


class MetacountWriter(_LineWriter):
    """
    Metacount output: ``feature`` header, stripped metacount rows, summary rows.

    Args:
        stream: Open text stream
        sample_names: Sample names, written after the ``feature`` label
        destination: Name of the stream, used in error messages
    """

    def __init__(self, stream: TextIO, sample_names: Sequence[str], destination: str = "<metacounts>"):
        super().__init__(stream, destination)
        self.sample_names = list(sample_names)
        self.n_metacounts = 0
        self._write_fields([METACOUNT_HEADER_LABEL, *self.sample_names])

    def write_row(self, row: CountRow) -> None:
        """Write a metacount row with its marker stripped and its value fields unchanged."""
        self._write_fields([row.name, *row.fields])
        self.n_metacounts += 1

    def write_summary(self, summary: SampleSummary) -> None:
        """Append one row per summary metric with one value per sample."""
        frame = summary.to_frame()
        for metric, values in frame.iterrows():
            self._write_fields([str(metric), *(format_value(v) for v in values)])
        logger.debug(f"wrote {len(frame)} summary rows to {self.destination}")
