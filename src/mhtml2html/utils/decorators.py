#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/utils/decorators.py
"""Dependency gating and timing helpers shared by the parsing entry points."""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, NamedTuple, Optional, Tuple

from mhtml2html.exceptions import DependencyError
from mhtml2html.utils.packages import check_version_requirement


class DependencyReport(NamedTuple):
    """Outcome of probing a list of packages."""

    missing: List[Tuple[str, str]]
    mismatched: List[Tuple[str, str, str]]
    first_import_error: Optional[ImportError]

    @property
    def satisfied(self) -> bool:
        return not self.missing and not self.mismatched


def probe_dependencies(packages: List[Tuple[str, str, str]]) -> DependencyReport:
    """Import each package and compare its installed version with the requirement.

    Parameters
    ----------
    packages : list of tuple
        ``(install_name, import_name, version_spec)`` triples. An empty
        ``version_spec`` accepts any installed version.

    Returns
    -------
    DependencyReport
        Packages that failed to import, packages whose version is outside the
        requirement, and the first ImportError seen

    """
    missing: List[Tuple[str, str]] = []
    mismatched: List[Tuple[str, str, str]] = []
    first_error: Optional[ImportError] = None

    for install_name, import_name, version_spec in packages:
        try:
            importlib.import_module(import_name)
        except ImportError as exc:
            missing.append((install_name, version_spec))
            first_error = first_error or exc
            continue

        if not version_spec:
            continue
        ok, installed = check_version_requirement(install_name, version_spec)
        if not ok:
            mismatched.append((install_name, version_spec, installed or "unknown"))

    return DependencyReport(missing, mismatched, first_error)


def requires_dependencies(component_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Refuse to run the decorated callable until its packages are importable.

    The check happens on every call, so installing a package mid-session is
    picked up without re-importing mhtml2html.

    Raises
    ------
    DependencyError
        Listing every missing package and version mismatch at once

    Examples
    --------
        >>> @requires_dependencies("html", [("beautifulsoup4", "bs4", ">=4.12.0")])
        ... def parse_html(markup, parser):
        ...     from bs4 import BeautifulSoup

    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            report = probe_dependencies(packages)
            if not report.satisfied:
                raise DependencyError(
                    converter_name=component_name,
                    missing_packages=report.missing,
                    version_mismatches=report.mismatched,
                    original_import_error=report.first_import_error,
                ) from report.first_import_error
            return func(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long the block took, but only when ``logger`` emits DEBUG.

    Examples
    --------
        >>> with debug_timer(logger, "Converting archive"):
        ...     document = converter.convert(archive)

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    started = time.perf_counter()
    yield
    logger.debug("%s completed in %.2fs", operation, time.perf_counter() - started)
