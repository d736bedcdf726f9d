"""
Row model for HTSeq counts matrices.

A counts matrix has one row per feature. Most rows are genes, but HTSeq also
appends summary rows whose identifiers start with a double underscore
(``__no_feature``, ``__ambiguous``, ``__too_low_aQual``, ...). These
"metacount" rows are classified once, when the row is parsed, and are kept
out of the numeric filtering pipeline.

Examples:
    >>> from htseqfilter.core.row import classify_identifier, strip_metacount_prefix
    >>> classify_identifier("__no_feature")
    <RowKind.METACOUNT: 'metacount'>
    >>> strip_metacount_prefix("__no_feature")
    'no_feature'
    >>> classify_identifier("ENSG00000000003")
    <RowKind.DATA: 'data'>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

__all__ = [
    'METACOUNT_PREFIX',
    'RowKind',
    'CountRow',
    'is_metacount',
    'classify_identifier',
    'strip_metacount_prefix',
]

METACOUNT_PREFIX = "__"


class RowKind(Enum):
    """Classification of a matrix row."""
    DATA = "data"
    METACOUNT = "metacount"


def is_metacount(identifier: str) -> bool:
    """Return True if the identifier carries the metacount marker."""
    return identifier.startswith(METACOUNT_PREFIX)


def classify_identifier(identifier: str) -> RowKind:
    """Classify a row by its identifier."""
    return RowKind.METACOUNT if is_metacount(identifier) else RowKind.DATA


def strip_metacount_prefix(identifier: str) -> str:
    """
    Remove the metacount marker from an identifier.

    Exactly one leading ``__`` is removed; identifiers without the marker are
    returned unchanged. Matching is case-sensitive and literal.

    Examples:
        >>> strip_metacount_prefix("__ambiguous")
        'ambiguous'
        >>> strip_metacount_prefix("___odd")
        '_odd'
        >>> strip_metacount_prefix("GENE1")
        'GENE1'
    """
    if is_metacount(identifier):
        return identifier[len(METACOUNT_PREFIX):]
    return identifier


@dataclass(frozen=True)
class CountRow:
    """
    One parsed row of a counts matrix.

    Attributes:
        identifier: Row identifier as it appears in the file (marker included)
        values: Per-sample values in column order
        fields: Raw value fields as they appear in the file
        line: Original line text without its line terminator
        line_number: 1-based line number in the input
        kind: DATA or METACOUNT, fixed at parse time
    """
    identifier: str
    values: np.ndarray
    fields: tuple[str, ...]
    line: str
    line_number: int
    kind: RowKind

    @property
    def is_metacount(self) -> bool:
        return self.kind is RowKind.METACOUNT

    @property
    def name(self) -> str:
        """Identifier with the metacount marker removed."""
        if self.is_metacount:
            return strip_metacount_prefix(self.identifier)
        return self.identifier

    @property
    def n_samples(self) -> int:
        return len(self.values)
