#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/cli/output.py
"""Terminal reporting for the mhtml2html command line."""

import argparse
import importlib.util
import sys
from pathlib import Path
from typing import TextIO

from mhtml2html.exceptions import DependencyError

RICH_INSTALL_HINT = "Rich output requires the optional 'rich' dependency. Install with: pip install mhtml2html[rich]"


def check_rich_available() -> bool:
    """Return True when the ``rich`` package can be imported."""
    return importlib.util.find_spec("rich") is not None


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    if not callable(isatty):
        return False
    try:
        return bool(isatty())
    except (OSError, ValueError):
        # closed or detached stream
        return False


def should_use_rich_output(
    args: argparse.Namespace, raise_on_missing: bool = False, stream: TextIO | None = None
) -> bool:
    """Decide whether the conversion summary is rendered with Rich.

    ``--rich`` must be given and Rich must be installed. The summary then goes
    through Rich when ``--force-rich`` is also given or ``stream`` (stdout by
    default) is a terminal.

    Raises
    ------
    DependencyError
        If ``raise_on_missing`` is set and ``--rich`` was requested without
        Rich installed

    """
    if not args.rich:
        return False

    if not check_rich_available():
        if not raise_on_missing:
            return False
        raise DependencyError(
            converter_name="rich-output",
            missing_packages=[("rich", "")],
            message=RICH_INSTALL_HINT,
        )

    return bool(getattr(args, "force_rich", False)) or _is_terminal(stream or sys.stdout)


def print_conversion_summary(input_path: Path, output_path: Path, elapsed: float, use_rich: bool) -> None:
    """Print one line, or a one-row Rich table, describing a finished conversion.

    Parameters
    ----------
    input_path : Path
        Archive that was converted
    output_path : Path
        HTML file that was written
    elapsed : float
        Conversion time in seconds
    use_rich : bool
        Render a Rich table instead of a plain line

    """
    size = output_path.stat().st_size

    if not use_rich:
        print(f"Converted {input_path} -> {output_path} ({size:,} bytes, {elapsed:.2f}s)")
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(title="mhtml2html", header_style="bold cyan")
    for heading, justify, style in (
        ("Input", "left", "white"),
        ("Output", "left", "green"),
        ("Size", "right", None),
        ("Time", "right", None),
    ):
        table.add_column(heading, justify=justify, style=style)
    table.add_row(str(input_path), str(output_path), f"{size:,} B", f"{elapsed:.2f}s")

    Console().print(table)
