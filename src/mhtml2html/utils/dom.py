#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/utils/dom.py
"""Default DOM parsing capability and document helpers built on BeautifulSoup."""

from __future__ import annotations

import logging
from typing import Any

from mhtml2html.constants import DEPS_HTML, DEPS_HTML_PARSER_BACKENDS, HTML_DOCTYPE, HtmlParser
from mhtml2html.exceptions import DependencyError
from mhtml2html.options.base import DomParser
from mhtml2html.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


@requires_dependencies("html", DEPS_HTML)
def parse_html(html_text: str, html_parser: HtmlParser = "html.parser") -> Any:
    """Parse HTML text into a BeautifulSoup document.

    Parameters
    ----------
    html_text : str
        HTML markup
    html_parser : str
        BeautifulSoup tree builder name

    Returns
    -------
    BeautifulSoup
        Parsed document

    Raises
    ------
    DependencyError
        If BeautifulSoup or the requested tree builder is not installed

    """
    from bs4 import BeautifulSoup
    from bs4.exceptions import FeatureNotFound

    try:
        return BeautifulSoup(html_text, html_parser)
    except FeatureNotFound as e:
        backend = DEPS_HTML_PARSER_BACKENDS.get(html_parser)
        missing_packages = [(backend[0], backend[2])] if backend else []
        raise DependencyError(
            converter_name="html",
            missing_packages=missing_packages,
            message=f"Selected html_parser {html_parser!r} is not available: {e}",
        ) from e


def default_dom_parser(html_parser: HtmlParser = "html.parser") -> DomParser:
    """Return a DOM parsing capability bound to one BeautifulSoup tree builder."""

    def parse_dom(html_text: str) -> Any:
        return parse_html(html_text, html_parser)

    return parse_dom


def resolve_dom_parser(parse_dom: DomParser | None, html_parser: HtmlParser) -> DomParser:
    """Return the injected DOM parser, or the default one for ``html_parser``."""
    if parse_dom is not None:
        return parse_dom
    return default_dom_parser(html_parser)


def serialize_document(document: Any, include_doctype: bool = True) -> str:
    """Serialize a converted document to an HTML string.

    The document's own doctype is dropped and, when ``include_doctype`` is set,
    replaced with a plain ``<!DOCTYPE html>``.

    Parameters
    ----------
    document : BeautifulSoup
        Converted document
    include_doctype : bool, default True
        Prefix the output with ``<!DOCTYPE html>``

    Returns
    -------
    str
        Serialized HTML

    """
    from bs4 import Doctype

    root = document.find("html")
    if root is not None:
        markup = str(root)
    else:
        markup = "".join(str(node) for node in document.contents if not isinstance(node, Doctype))
    if include_doctype:
        return f"{HTML_DOCTYPE}\n{markup}"
    return markup
