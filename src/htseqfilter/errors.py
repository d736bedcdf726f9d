"""
Exception hierarchy for htseqfilter.

Every failure is fatal: nothing is retried or silently skipped. The CLI maps
each class to an exit status.

Classes:
    HTSeqFilterError: Base class for all errors raised by this package
    ParseError: Malformed counts file (non-numeric field, ragged row, no header)
    InputOutputError: File could not be opened, read or written
    ConfigError: Invalid option combination or configuration file
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    'HTSeqFilterError',
    'ParseError',
    'InputOutputError',
    'ConfigError',
]


class HTSeqFilterError(Exception):
    """Base class for all htseqfilter errors."""
    pass


class ParseError(HTSeqFilterError, ValueError):
    """
    Raised when a line of the counts matrix cannot be parsed.

    Attributes:
        line_number: 1-based line number of the offending line (None if unknown)
        line: Text of the offending line, without its line terminator
    """

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class InputOutputError(HTSeqFilterError, OSError):
    """Raised when an input or output file cannot be opened, read or written."""
    pass


class ConfigError(HTSeqFilterError, ValueError):
    """Raised for invalid option combinations or configuration files."""
    pass
