#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for mhtml2html options.

This module defines the foundation shared by the parse and convert option
dataclasses: immutable configuration with a cloning helper, and the injected
capabilities (DOM parsing, charset decoding) both stages need.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from mhtml2html.constants import DEFAULT_HTML_PARSER, HTML_PARSER_CHOICES, HtmlParser
from mhtml2html.utils.encoding import CharsetDecoder

# Injected DOM parsing capability: HTML text -> BeautifulSoup-compatible document
DomParser = Callable[[str], Any]


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        Raises
        ------
        TypeError
            If a keyword does not name a field

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseOptions(CloneFrozenMixin):
    """Options shared by parsing and conversion.

    Parameters
    ----------
    html_parser : {"html.parser", "html5lib", "lxml"}
        BeautifulSoup tree builder used by the default DOM parser
    parse_dom : callable, optional
        Replaces the default BeautifulSoup-based DOM parser entirely
    decoder : callable, optional
        Replaces the default charset decoder for non-UTF-8 part bodies

    """

    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": (
                "BeautifulSoup parser to use: 'html.parser' (built-in), "
                "'html5lib' (standards-compliant, matches browser behavior), "
                "'lxml' (fast, requires C library)"
            ),
            "choices": list(HTML_PARSER_CHOICES),
            "importance": "advanced",
        },
    )
    parse_dom: Optional[DomParser] = field(
        default=None,
        metadata={
            "help": "Callable turning HTML text into a BeautifulSoup document (overrides html_parser)",
            "exclude_from_cli": True,
        },
    )
    decoder: Optional[CharsetDecoder] = field(
        default=None,
        metadata={
            "help": "Callable decoding (bytes, charset) into text for part bodies",
            "exclude_from_cli": True,
        },
    )

    def __post_init__(self) -> None:
        """Validate shared option values.

        Raises
        ------
        ValueError
            If the parser name is unknown or a capability is not callable.

        """
        if self.html_parser not in HTML_PARSER_CHOICES:
            raise ValueError(
                f"html_parser must be one of {', '.join(HTML_PARSER_CHOICES)}, got {self.html_parser!r}"
            )
        if self.parse_dom is not None and not callable(self.parse_dom):
            raise ValueError("parse_dom must be callable")
        if self.decoder is not None and not callable(self.decoder):
            raise ValueError("decoder must be callable")
