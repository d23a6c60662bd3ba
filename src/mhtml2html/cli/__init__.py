"""Command-line interface for the mhtml2html conversion library.

Examples
--------
Basic conversion, writing ``page.html`` beside the archive::

    $ mhtml2html page.mhtml

Specify the output file and inline iframes::

    $ mhtml2html page.mhtml snapshot.html --convert-iframes

Produce an inert snapshot::

    $ mhtml2html page.mhtml --inert --base-url https://example.com/

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import sys
import time
from pathlib import Path

from mhtml2html.api import convert_file
from mhtml2html.cli.builder import (
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    INERT_PREFIX,
    DynamicCLIBuilder,
    create_parser,
    get_exit_code_for_exception,
)
from mhtml2html.cli.output import print_conversion_summary, should_use_rich_output
from mhtml2html.exceptions import DependencyError, Mhtml2HtmlError
from mhtml2html.logging_utils import configure_logging
from mhtml2html.options.inert import InertOptions
from mhtml2html.options.mhtml import ConvertOptions

logger = logging.getLogger(__name__)

__all__ = ["main", "DynamicCLIBuilder", "create_parser"]


def _resolve_log_level(parsed_args: argparse.Namespace) -> int:
    """Map ``--trace``, ``--verbose`` and ``--log-level`` to a logging level."""
    if parsed_args.trace:
        return logging.DEBUG
    # --verbose only lowers the level when --log-level was left at its default
    if parsed_args.verbose and parsed_args.log_level == "WARNING":
        return logging.DEBUG
    return logging.getLevelName(parsed_args.log_level.upper())


def _build_options(parsed_args: argparse.Namespace) -> tuple[ConvertOptions, InertOptions | None]:
    """Create conversion and inert options from parsed arguments.

    Raises
    ------
    ValueError
        If an option value fails validation

    """
    builder = DynamicCLIBuilder()
    options = ConvertOptions(**builder.map_args_to_options(parsed_args, ConvertOptions))

    inert_options = None
    if parsed_args.inert:
        inert_options = InertOptions(**builder.map_args_to_options(parsed_args, InertOptions, prefix=INERT_PREFIX))
    return options, inert_options


def main(args: list[str] | None = None) -> int:
    """Execute main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(_resolve_log_level(parsed_args), log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        options, inert_options = _build_options(parsed_args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        use_rich = should_use_rich_output(parsed_args, raise_on_missing=True)
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    start = time.perf_counter()
    try:
        output_path = convert_file(parsed_args.input, parsed_args.output, options, inert_options)
    except (Mhtml2HtmlError, ImportError) as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    elapsed = time.perf_counter() - start

    print_conversion_summary(Path(parsed_args.input), output_path, elapsed, use_rich)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
