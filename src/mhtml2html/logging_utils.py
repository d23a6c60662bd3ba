#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/logging_utils.py
"""Root logger setup for the mhtml2html command-line tool.

Library modules only log through ``logging.getLogger(__name__)``; handler
configuration happens here, once, when the CLI starts.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# chardet logs every prober it tries at DEBUG
_NOISY_LOGGERS = ("chardet",)


def _level_from(value: int | str) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else logging.INFO


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Route log records to stderr and, optionally, to a file.

    Any handlers already on the root logger are replaced, so calling this
    twice does not duplicate output.

    Parameters
    ----------
    log_level : int | str
        Numeric level or level name such as ``"WARNING"``. Unknown names fall
        back to INFO.
    log_file : str, optional
        File that receives a copy of every record, opened in append mode
    trace_mode : bool, default False
        Include timestamps and logger names in each line

    Returns
    -------
    logging.Logger
        The root logger

    """
    level = _level_from(log_level)
    formatter = (
        logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(PLAIN_FORMAT)
    )

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    _attach(root, logging.StreamHandler(sys.stderr), level, formatter)

    if level <= logging.DEBUG and not trace_mode:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.INFO)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root.warning("Could not open log file %s: %s", log_file, exc)
        else:
            _attach(root, file_handler, level, formatter)
            root.info("Writing log to %s", log_file)

    return root
