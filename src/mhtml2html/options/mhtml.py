#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mhtml2html/options/mhtml.py
"""Configuration options for MHTML parsing and conversion."""

from __future__ import annotations

from dataclasses import dataclass, field

from mhtml2html.constants import DEFAULT_CONVERT_IFRAMES, DEFAULT_HTML_ONLY
from mhtml2html.options.base import BaseOptions


@dataclass(frozen=True)
class ParseOptions(BaseOptions):
    """Configuration options for parsing an MHTML archive.

    Parameters
    ----------
    html_only : bool, default False
        Stop after the root part and return it parsed as a DOM, skipping all
        subresources

    """

    html_only: bool = field(
        default=DEFAULT_HTML_ONLY,
        metadata={"help": "Return only the parsed root HTML document, ignoring subresources", "importance": "core"},
    )


@dataclass(frozen=True)
class ConvertOptions(BaseOptions):
    """Configuration options for MHTML-to-HTML conversion.

    Parameters
    ----------
    convert_iframes : bool, default False
        Inline ``<iframe src="cid:...">`` documents as converted
        ``data:text/html`` URIs

    """

    convert_iframes: bool = field(
        default=DEFAULT_CONVERT_IFRAMES,
        metadata={
            "help": "Include iframes in the converted output as inlined data URIs",
            "cli_name": "convert-iframes",
            "cli_short": "-i",
            "importance": "core",
        },
    )

    def to_parse_options(self) -> ParseOptions:
        """Return parse options carrying the same injected capabilities."""
        return ParseOptions(html_parser=self.html_parser, parse_dom=self.parse_dom, decoder=self.decoder)
