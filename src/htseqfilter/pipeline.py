"""
Streaming filter pipeline for HTSeq counts matrices.

Each row flows through a single linear path:

    parse -> classify -> [statistics -> filter chain] -> write

Gene rows are evaluated and, if they pass, written to the primary output.
Metacount rows bypass the filters and go to the metacount output when one is
configured; otherwise they are dropped. Nothing is accumulated across rows
apart from the outcome tally and the fixed-size per-sample summary.

Errors are fatal. Output already written before a failure is left in place.

Examples:
    >>> import io
    >>> from htseqfilter.pipeline import filter_counts
    >>> from htseqfilter.quality.filtering import FilterConfig
    >>> source = io.StringIO("id\\ts1\\ts2\\ng1\\t5\\t5\\ng2\\t1\\t9\\n__no_feature\\t3\\t4\\n")
    >>> out = io.StringIO()
    >>> report = filter_counts(source, out, FilterConfig(filter_identical=True))
    >>> out.getvalue().splitlines()
    ['id\\ts1\\ts2', 'g2\\t1\\t9']
    >>> report.n_passed, report.n_genes, report.n_metacounts
    (1, 2, 1)
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import ExitStack
from dataclasses import asdict
from pathlib import Path
from typing import Optional, TextIO, Union

from htseqfilter.core.statistics import compute_row_statistics
from htseqfilter.core.summary import SampleSummary
from htseqfilter.errors import ConfigError, InputOutputError
from htseqfilter.io.loaders import CountsReader
from htseqfilter.io.writers import CountsWriter, MetacountWriter
from htseqfilter.quality.filtering import FilterChain, FilterConfig, FilterReport

logger = logging.getLogger(__name__)

__all__ = ['filter_counts', 'run_filter', 'expand_path']


def expand_path(path: Union[str, os.PathLike]) -> Path:
    """Expand ``~`` and environment variables in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path))))


def filter_counts(
    input_stream: TextIO,
    output_stream: TextIO,
    config: FilterConfig,
    metacount_stream: Optional[TextIO] = None,
    summary: bool = False,
    source: str = "<input>",
    metacount_destination: str = "<metacounts>",
) -> FilterReport:
    """
    Filter a counts matrix from one stream to another.

    Args:
        input_stream: Counts matrix, header first
        output_stream: Receives the header and passing gene rows
        config: Filter thresholds
        metacount_stream: Receives metacount rows (None = drop them)
        summary: Append per-sample summary rows to the metacount stream
        source: Name of the input, for messages
        metacount_destination: Name of the metacount output, for messages

    Returns:
        FilterReport with the outcome of every gene row

    Raises:
        ConfigError: If summary is requested without a metacount stream
        ParseError: On a malformed input line
        InputOutputError: If reading or writing fails
    """
    if summary and metacount_stream is None:
        raise ConfigError("summary metacounts require a metacount output")

    chain = FilterChain.from_config(config)
    if config.is_active:
        logger.info(f"filters: {chain}")
    else:
        logger.info("no filters configured; every gene row passes")

    reader = CountsReader(input_stream, source=source)
    writer = CountsWriter(output_stream)
    writer.write_header(reader.header)

    metacount_writer: Optional[MetacountWriter] = None
    if metacount_stream is not None:
        metacount_writer = MetacountWriter(
            metacount_stream, reader.sample_names, destination=metacount_destination
        )

    sample_summary: Optional[SampleSummary] = None
    if summary:
        sample_summary = SampleSummary(reader.sample_names, config.expression_threshold)

    report = FilterReport(parameters=asdict(config))
    logger.info(f"filter parameters: {report.parameters}")

    for row in reader:
        if row.is_metacount:
            report.n_metacounts += 1
            if metacount_writer is not None:
                metacount_writer.write_row(row)
            else:
                logger.debug(f"dropping metacount {row.identifier}")
            continue

        stats = compute_row_statistics(row.values, config.expression_threshold)
        outcome = chain.evaluate(stats, gene=row.identifier)
        report.record(outcome)

        if outcome.passed:
            writer.write_row(row)
        if sample_summary is not None:
            sample_summary.add(row.values, passed=outcome.passed)

    if metacount_writer is not None:
        if sample_summary is not None:
            metacount_writer.write_summary(sample_summary)
        metacount_writer.flush()
    writer.flush()

    logger.info(
        f"{report.n_passed} / {report.n_genes} genes passed filter ({report.pass_rate:.1%})"
    )
    logger.info(f"{report.n_metacounts} metacounts detected")
    for outcome, count in report.outcomes.items():
        if not outcome.passed:
            logger.info(f"  {count} genes rejected: {outcome.reason}")

    return report


def run_filter(
    path: Union[str, os.PathLike],
    config: FilterConfig,
    metacount_path: Optional[Union[str, os.PathLike]] = None,
    summary: bool = False,
    output: Optional[TextIO] = None,
) -> FilterReport:
    """
    Filter a counts file, writing passing rows to ``output`` (default: stdout).

    The input file and the metacount file are each opened once and closed on
    every exit path, including a parse error part-way through the input.

    Args:
        path: Input counts file (``~`` and ``$VARS`` are expanded)
        config: Filter thresholds
        metacount_path: File to receive metacount rows (None = drop them)
        summary: Append per-sample summary rows to the metacount file
        output: Primary output stream

    Returns:
        FilterReport for the run

    Raises:
        ConfigError: If summary is requested without a metacount path
        ParseError: On a malformed input line
        InputOutputError: If a file cannot be opened, read or written
    """
    if summary and metacount_path is None:
        raise ConfigError("--summary requires --metacount-file")

    if output is None:
        output = sys.stdout

    input_path = expand_path(path)

    with ExitStack() as stack:
        try:
            input_stream = stack.enter_context(open(input_path, "r", newline=""))
        except OSError as e:
            raise InputOutputError(f"failed to open input file {input_path}: {e}") from e
        logger.info(f"reading counts from {input_path}")

        metacount_stream: Optional[TextIO] = None
        metacount_destination = "<metacounts>"
        if metacount_path is not None:
            metacount_file = expand_path(metacount_path)
            try:
                metacount_stream = stack.enter_context(open(metacount_file, "w"))
            except OSError as e:
                raise InputOutputError(
                    f"failed to create metacount file {metacount_file}: {e}"
                ) from e
            metacount_destination = str(metacount_file)
            logger.info(f"writing metacounts to {metacount_file}")
        else:
            logger.info("metacounts will be dropped (no metacount file given)")

        return filter_counts(
            input_stream,
            output,
            config,
            metacount_stream=metacount_stream,
            summary=summary,
            source=str(input_path),
            metacount_destination=metacount_destination,
        )
