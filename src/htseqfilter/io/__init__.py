"""
I/O for HTSeq counts matrices.

Key Classes:
    - CountsReader: Stream rows from a counts matrix, header first
    - CountsWriter: Write the header and passing rows unchanged
    - MetacountWriter: Write extracted metacount rows and summary rows

Examples:
    >>> import io, sys
    >>> from htseqfilter.io import CountsReader, CountsWriter
    >>> reader = CountsReader(io.StringIO("id\\ts1\\ng1\\t4\\n"))
    >>> writer = CountsWriter(sys.stdout)
    >>> writer.write_header(reader.header)  # doctest: +NORMALIZE_WHITESPACE
    id	s1
"""

from htseqfilter.io.loaders import CountsReader, parse_row, split_fields
from htseqfilter.io.writers import CountsWriter, MetacountWriter, format_value

__all__ = [
    'CountsReader',
    'parse_row',
    'split_fields',
    'CountsWriter',
    'MetacountWriter',
    'format_value',
]
