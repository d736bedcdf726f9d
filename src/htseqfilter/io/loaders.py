"""
Streaming reader for HTSeq counts matrices.

Expected format (tab-delimited, one header line):
```
gene_id	sample_A	sample_B
ENSG00000000003	612	1056
ENSG00000000005	0	1
__no_feature	1200	980
```

- First line: header; fields after the first are the sample names
- Remaining lines: identifier followed by one numeric value per sample
- Identifiers starting with ``__`` are HTSeq metacounts

Rows are produced one at a time; nothing is retained after a row has been
yielded. Leading and trailing whitespace is ignored when splitting a line into
fields, but each row keeps its original text for output. Every row must have
the same number of fields as the header (a blank line has none), and every
value field must be a finite number written without padding or digit
separators. Violations raise ParseError naming the line.

Examples:
    >>> import io
    >>> from htseqfilter.io.loaders import CountsReader
    >>> reader = CountsReader(io.StringIO("id\\ts1\\ts2\\ng1\\t1\\t2\\n"))
    >>> reader.sample_names
    ['s1', 's2']
    >>> [row.identifier for row in reader]
    ['g1']
"""

from __future__ import annotations

import logging
import math
from typing import Iterator, List, Optional, TextIO

import numpy as np

from htseqfilter.core.row import CountRow, classify_identifier
from htseqfilter.errors import InputOutputError, ParseError

logger = logging.getLogger(__name__)

__all__ = ['CountsReader', 'split_fields', 'parse_row']


def split_fields(line: str) -> List[str]:
    """
    Split a matrix line into fields.

    Surrounding whitespace (including a trailing tab) is ignored. Lines are
    tab-delimited; a line without any tab is split on runs of whitespace
    instead. A blank line has no fields.
    """
    line = line.strip()
    if "\t" in line:
        return line.split("\t")
    return line.split()


def _parse_value(field: str, line_number: int, line: str) -> float:
    # float() also accepts "1_000" and " 5"
    if "_" in field or field != field.strip():
        raise ParseError(f"non-numeric value {field!r}", line_number, line)
    try:
        value = float(field)
    except ValueError:
        raise ParseError(f"non-numeric value {field!r}", line_number, line) from None
    if not math.isfinite(value):
        raise ParseError(f"non-finite value {field!r}", line_number, line)
    return value


def parse_row(line: str, line_number: int, n_columns: Optional[int] = None) -> CountRow:
    """
    Parse one data line into a CountRow.

    Args:
        line: Line text without its line terminator
        line_number: 1-based line number, for error messages
        n_columns: Expected number of fields (identifier + samples);
            None to accept any width

    Returns:
        CountRow with numeric values and classification

    Raises:
        ParseError: If the field count is wrong or a value is not numeric
    """
    fields = split_fields(line)
    if n_columns is not None and len(fields) != n_columns:
        raise ParseError(
            f"expected {n_columns} columns, found {len(fields)}", line_number, line
        )
    if not fields:
        raise ParseError("blank line", line_number, line)

    identifier = fields[0]
    value_fields = tuple(fields[1:])
    values = np.array(
        [_parse_value(f, line_number, line) for f in value_fields], dtype=float
    )

    return CountRow(
        identifier=identifier,
        values=values,
        fields=value_fields,
        line=line,
        line_number=line_number,
        kind=classify_identifier(identifier),
    )


class CountsReader:
    """
    Iterate over the rows of a counts matrix read from a text stream.

    The header is read on construction. Iterating yields CountRow objects in
    input order; a blank line is a ParseError like any other short row.

    Args:
        stream: Open text stream positioned at the start of the matrix
        source: Name of the stream, used in error messages

    Attributes:
        header: Header line text, without its line terminator
        sample_names: Sample column names from the header
        n_columns: Number of fields each row must have

    Raises:
        ParseError: If the stream has no header line
        InputOutputError: If reading the stream fails
    """

    def __init__(self, stream: TextIO, source: str = "<stream>"):
        self._stream = stream
        self.source = source
        self._line_number = 0

        header = self._readline()
        if header is None:
            raise ParseError(f"failed to read header from {source}: file is empty")

        self.header = header
        header_fields = split_fields(header)
        self.sample_names = header_fields[1:]
        self.n_columns = len(header_fields)

        logger.debug(f"read header from {source}: {len(self.sample_names)} samples")

    def _readline(self) -> Optional[str]:
        try:
            line = self._stream.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise InputOutputError(f"failed to read {self.source}: {e}") from e
        if not line:
            return None
        self._line_number += 1
        return line.rstrip("\r\n")

    @property
    def n_samples(self) -> int:
        return len(self.sample_names)

    def __iter__(self) -> Iterator[CountRow]:
        while True:
            line = self._readline()
            if line is None:
                return
            yield parse_row(line, self._line_number, self.n_columns)
