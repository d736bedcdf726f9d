"""
htseq-filter CLI - Filter HTSeq counts matrix files.

Usage:
    htseq-filter counts.tsv -m 10 -z 2 -i > filtered.tsv
    htseq-filter counts.tsv -o metacounts.tsv -s > filtered.tsv
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, List

from htseqfilter import __version__
from htseqfilter.cli._validators import _non_negative_float, _non_negative_int
from htseqfilter.core.statistics import DEFAULT_EXPRESSION_THRESHOLD
from htseqfilter.errors import ConfigError, InputOutputError, ParseError
from htseqfilter.quality.filtering import FilterConfig

logger = logging.getLogger(__name__)

# 128 + SIGPIPE
EXIT_BROKEN_PIPE = 141

_VERBOSITY_LEVELS = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for htseq-filter."""
    parser = argparse.ArgumentParser(
        prog="htseq-filter",
        description="Filter HTSeq counts matrix files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        # _explicit_destinations only recognises full option names
        allow_abbrev=False,
        epilog="""
The following filters are applied to each gene, in order:
  * The gene is filtered on total read count (if -m is specified);
  * The gene is filtered on zero count (if -z is specified);
  * The gene is filtered on non-zero variance (if -i is specified);
  * The gene is filtered on expressed sample count (if -e is specified)

Filtered counts are written to standard output. Metacounts (rows starting
with double underscores) are written to the file given with -o, or dropped.

Examples:
  htseq-filter counts.tsv -m 10 > filtered.tsv
  htseq-filter counts.tsv -z 2 -i -o metacounts.tsv -s > filtered.tsv
  htseq-filter counts.tsv --config filters.yaml > filtered.tsv
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Provide verbose output. Supply multiple times to increase verbosity")

    parser.add_argument("path", type=Path, help="Input counts file")

    # Filters
    parser.add_argument("-m", "--min-count", type=_non_negative_float, default=None, metavar="n",
                        help="Minimum total gene count")
    parser.add_argument("-z", "--max-zerocount", type=_non_negative_int, default=None, metavar="n",
                        help="Maximum number of samples with a zero count")
    parser.add_argument("-i", "--filter-identical", action="store_true",
                        help="Filter out genes with zero variance (i.e. with all values identical)")
    parser.add_argument("-e", "--min-expressed", type=_non_negative_int, default=None, metavar="n",
                        help="Minimum number of expressed samples")
    parser.add_argument("-x", "--expression", dest="expression_threshold", type=_non_negative_float,
                        default=DEFAULT_EXPRESSION_THRESHOLD, metavar="e",
                        help="Minimum count for a sample to be expressed (default: 1)")

    # Metacounts
    parser.add_argument("-o", "--metacount-file", "--output-metacounts", dest="metacount_path",
                        type=Path, default=None, metavar="path",
                        help="Extract metacounts (starting with double underscores) to file")
    parser.add_argument("-s", "--summary", action="store_true",
                        help="Include sample summary metacounts (requires -o)")

    parser.add_argument("-c", "--config", type=Path, default=None, metavar="path",
                        help="YAML or JSON config file (command-line options take precedence)")

    return parser


def configure_logging(verbosity: int) -> None:
    """Log to stderr; each -v lowers the threshold one level, from ERROR down to DEBUG."""
    level = _VERBOSITY_LEVELS[min(verbosity, len(_VERBOSITY_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
        force=True,
    )


def _silence_stdout() -> None:
    """Point stdout at devnull so the interpreter's flush at exit does not fail again."""
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        # Not backed by a file descriptor, e.g. replaced by an in-memory stream
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point for htseq-filter."""
    from htseqfilter.pipeline import run_filter

    parser = build_parser()
    cli_args = sys.argv[1:] if args is None else list(args)
    parsed_args = parser.parse_args(cli_args)

    configure_logging(parsed_args.verbose)

    if parsed_args.config:
        from htseqfilter.cli.config import load_config, merge_config_with_args, validate_config

        try:
            config = load_config(parsed_args.config)
            validate_config(config)
        except ConfigError as e:
            parser.error(f"config file error: {e}")
        parsed_args = merge_config_with_args(config, parsed_args, cli_args)
        logger.info(f"loaded configuration from {parsed_args.config}")

    if parsed_args.summary and parsed_args.metacount_path is None:
        parser.error("--summary requires --metacount-file")

    filter_config = FilterConfig.from_namespace(parsed_args)

    try:
        run_filter(
            parsed_args.path,
            filter_config,
            metacount_path=parsed_args.metacount_path,
            summary=parsed_args.summary,
        )
    except BrokenPipeError:
        # Downstream closed the pipe (e.g. `| head`)
        _silence_stdout()
        return EXIT_BROKEN_PIPE
    except ConfigError as e:
        parser.error(str(e))
    except (ParseError, InputOutputError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
