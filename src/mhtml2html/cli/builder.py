#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/cli/builder.py
"""Argument parser construction for the mhtml2html command line.

Option arguments are generated from the options dataclasses, so a field's
``help`` metadata is the single source of its CLI documentation:

- ``bool`` fields defaulting to False become ``--field-name`` flags
- ``bool`` fields defaulting to True become ``--no-field-name`` flags
- fields with ``choices`` metadata become choice arguments
- other fields become string arguments

``cli_name`` metadata overrides the generated name, ``cli_short`` adds a
short alias and ``exclude_from_cli`` hides a field.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import MISSING, fields
from typing import Any, Dict, Optional, Type

from mhtml2html.exceptions import (
    DependencyError,
    FileError,
    ParsingError,
    ValidationError,
)
from mhtml2html.options.inert import InertOptions
from mhtml2html.options.mhtml import ConvertOptions
from mhtml2html.utils.packages import get_package_version

logger = logging.getLogger(__name__)

INERT_PREFIX = "inert"


class DynamicCLIBuilder:
    """Build argparse arguments from options dataclasses and map them back."""

    @staticmethod
    def snake_to_kebab(name: str) -> str:
        """Convert snake_case to kebab-case."""
        return name.replace("_", "-")

    def infer_cli_name(self, field_name: str, prefix: Optional[str] = None, negated: bool = False) -> str:
        """Infer CLI argument name from field name.

        Parameters
        ----------
        field_name : str
            Dataclass field name
        prefix : str, optional
            Group prefix (e.g., 'inert')
        negated : bool
            Whether this is a boolean field with default=True

        Returns
        -------
        str
            CLI argument name with -- prefix

        Examples
        --------
        >>> DynamicCLIBuilder().infer_cli_name("remove_scripts", "inert", negated=True)
        '--inert-no-remove-scripts'

        """
        kebab_name = self.snake_to_kebab(field_name)
        if negated:
            kebab_name = f"no-{kebab_name}"
        if prefix:
            kebab_name = f"{prefix}-{kebab_name}"
        return f"--{kebab_name}"

    @staticmethod
    def dest_name(field_name: str, prefix: Optional[str] = None) -> str:
        return f"{prefix}_{field_name}" if prefix else field_name

    def add_options_class_arguments(
        self,
        parser: argparse.ArgumentParser,
        options_class: Type[Any],
        prefix: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> None:
        """Add one argument per CLI-visible field of ``options_class``."""
        group = parser.add_argument_group(group_name) if group_name else parser

        for field in fields(options_class):
            metadata: Dict[str, Any] = dict(field.metadata) if field.metadata else {}
            if metadata.get("exclude_from_cli", False):
                continue

            default = field.default if field.default is not MISSING else None
            kwargs: Dict[str, Any] = {
                "dest": self.dest_name(field.name, prefix),
                "help": metadata.get("help", ""),
            }

            negated = False
            if isinstance(default, bool):
                negated = default is True
                kwargs["action"] = "store_false" if negated else "store_true"
                kwargs["default"] = default
            else:
                kwargs["default"] = default
                if "choices" in metadata:
                    kwargs["choices"] = metadata["choices"]

            if "cli_name" in metadata:
                cli_name = f"--{metadata['cli_name']}"
            else:
                cli_name = self.infer_cli_name(field.name, prefix, negated=negated)

            names = [metadata["cli_short"], cli_name] if "cli_short" in metadata else [cli_name]
            group.add_argument(*names, **kwargs)

    def map_args_to_options(
        self, parsed_args: argparse.Namespace, options_class: Type[Any], prefix: Optional[str] = None
    ) -> dict:
        """Collect the parsed values of ``options_class``'s fields into constructor kwargs."""
        values: Dict[str, Any] = {}
        for field in fields(options_class):
            dest = self.dest_name(field.name, prefix)
            if hasattr(parsed_args, dest):
                values[field.name] = getattr(parsed_args, dest)
        logger.debug("Mapped CLI arguments for %s: %s", options_class.__name__, values)
        return values

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the complete argument parser.

        Returns
        -------
        ArgumentParser
            Configured parser

        """
        parser = argparse.ArgumentParser(
            prog="mhtml2html",
            description="Convert MHTML web archives into self-contained HTML files",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Write page.html next to the archive
  mhtml2html page.mhtml

  # Choose the output path and inline iframes
  mhtml2html page.mhtml out/page.html -i

  # Produce an inert snapshot safe to open offline
  mhtml2html page.mhtml --inert --base-url https://example.com/
        """,
        )

        parser.add_argument("input", help="MHTML file to convert")
        parser.add_argument(
            "output",
            nargs="?",
            default=None,
            help="Output HTML file (default: input path with an .html suffix)",
        )

        version = get_package_version("mhtml2html") or "unknown"
        parser.add_argument("--version", "-V", action="version", version=f"mhtml2html {version}")

        self.add_options_class_arguments(parser, ConvertOptions, group_name="Conversion options")

        inert_group = parser.add_argument_group("Inert snapshot options")
        inert_group.add_argument(
            "--inert",
            action="store_true",
            help="Strip scripts, links, forms and external resources from the output",
        )
        self.add_options_class_arguments(parser, InertOptions, prefix=INERT_PREFIX, group_name="Inert step toggles")

        logging_group = parser.add_argument_group("Logging and output")
        logging_group.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            default="WARNING",
            help="Set logging level for debugging (default: WARNING)",
        )
        logging_group.add_argument("--log-file", type=str, help="Write log messages to FILE in addition to console")
        logging_group.add_argument("--verbose", action="store_true", help="Enable verbose output with detailed logging")
        logging_group.add_argument(
            "--trace",
            action="store_true",
            help="Enable trace mode with very verbose logging and timing information",
        )
        logging_group.add_argument("--rich", action="store_true", help="Print a rich summary table after conversion")
        logging_group.add_argument(
            "--force-rich",
            action="store_true",
            help="Use rich output even when stdout is not a terminal",
        )

        return parser


def create_parser() -> argparse.ArgumentParser:
    """Create the mhtml2html argument parser."""
    return DynamicCLIBuilder().build_parser()


EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR

    return EXIT_ERROR
