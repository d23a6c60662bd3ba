"""mhtml2html - Convert MHTML web archives into self-contained HTML.

An MHTML file (``.mhtml``/``.mht``) stores a captured web page as a MIME
``multipart/related`` message: the page's HTML plus every stylesheet, image,
font and frame it referenced. mhtml2html parses that archive and rewrites the
page so each reference points at an inline ``data:`` URI, producing a single
HTML file that renders without network access.

Key Features
------------
- Tolerant multipart parser for archives saved by Chrome, Edge and others
- Asset lookup by exact, relative, root-relative and filename matching
- Recursive CSS rewriting, including ``@import`` chains
- Optional inlining of ``cid:`` iframes as nested data URIs
- Declarative Shadow DOM flattening
- Optional "inert" post-processing for safe offline viewing

Requirements
------------
- Python 3.10+
- beautifulsoup4 and chardet

Examples
--------
Convert an archive to an HTML string:

    >>> from mhtml2html import convert_to_html
    >>> html = convert_to_html(Path("page.mhtml").read_bytes(), convert_iframes=True)

Parse once and inspect the parts:

    >>> from mhtml2html import parse
    >>> archive = parse(Path("page.mhtml").read_bytes())
    >>> sorted(archive.media)[:2]
    ['https://example.com/', 'https://example.com/logo.png']

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mhtml2html requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

import logging

from mhtml2html.api import convert, convert_file, convert_to_html, parse
from mhtml2html.archive import ParsedArchive, Part, TransferEncoding
from mhtml2html.converters import DomConverter, make_inert
from mhtml2html.exceptions import (
    DependencyError,
    FileError,
    InvalidRootError,
    Mhtml2HtmlError,
    ParsingError,
    ValidationError,
)
from mhtml2html.options import ConvertOptions, InertOptions, ParseOptions
from mhtml2html.parsers import MultipartParser
from mhtml2html.utils.dom import serialize_document

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    # Functions
    "parse",
    "convert",
    "convert_to_html",
    "convert_file",
    "serialize_document",
    "make_inert",
    # Classes
    "MultipartParser",
    "DomConverter",
    "ParsedArchive",
    "Part",
    "TransferEncoding",
    # Options
    "ParseOptions",
    "ConvertOptions",
    "InertOptions",
    # Exceptions
    "Mhtml2HtmlError",
    "ValidationError",
    "FileError",
    "ParsingError",
    "InvalidRootError",
    "DependencyError",
]
