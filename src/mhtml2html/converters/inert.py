#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/converters/inert.py
"""Post-processing that turns a converted document into an inert snapshot.

A converted page still carries scripts, live links, forms and references to
any resources the archive did not contain. Viewing such a snapshot offline
would run code and fire network requests. :func:`make_inert` strips all of
that so the document only renders.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from bs4 import NavigableString, Tag
from bs4.element import Stylesheet

from mhtml2html.constants import (
    INERT_FORM_CONTROLS,
    INERT_KEPT_URL_SCHEMES,
    INERT_REMOVED_ELEMENTS,
    INERT_STYLESHEET,
    SNAPSHOT_CONTENT_SECURITY_POLICY,
    TRANSPARENT_GIF_DATA_URI,
)
from mhtml2html.options.inert import InertOptions

logger = logging.getLogger(__name__)

_KEPT_SCHEMES_PATTERN = "|".join(re.escape(scheme) for scheme in INERT_KEPT_URL_SCHEMES)

# url(...) whose target is not already embedded
_EXTERNAL_CSS_URL_RE = re.compile(
    r"url\s*\(\s*(['\"]?)(?!" + _KEPT_SCHEMES_PATTERN + r")([^)'\"]+)\1\s*\)",
    re.IGNORECASE,
)


def clean_css_urls(css: str) -> str:
    """Empty every ``url()`` reference that is not a ``data:`` or ``blob:`` URL.

    Examples
    --------
    >>> clean_css_urls("a { background: url('http://x.com/a.png') }")
    'a { background: url() }'
    >>> clean_css_urls("a { background: url(data:image/png;base64,AA==) }")
    'a { background: url(data:image/png;base64,AA==) }'

    """
    return _EXTERNAL_CSS_URL_RE.sub("url()", css)


def _is_embedded(url: str) -> bool:
    return url.startswith(INERT_KEPT_URL_SCHEMES)


def _is_stylesheet_link(link: Tag) -> bool:
    rel = link.get("rel")
    if isinstance(rel, (list, tuple)):
        rel = " ".join(rel)
    return bool(rel) and rel.strip().lower() == "stylesheet"


def clean_resource_urls(document: Any) -> None:
    """Remove references to resources that were not inlined during conversion."""
    for style in document.find_all("style"):
        css = "".join(str(node) for node in style.contents if isinstance(node, NavigableString))
        if css:
            style.string = Stylesheet(clean_css_urls(css))

    for element in document.find_all(attrs={"style": True}):
        element["style"] = clean_css_urls(element["style"])

    for link in document.find_all("link"):
        href = link.get("href")
        if _is_stylesheet_link(link) and href and not href.startswith("data:"):
            logger.debug("Removing stylesheet link to %s", href)
            link.decompose()

    for img in document.find_all("img", src=True):
        src = img["src"]
        if src and not _is_embedded(src):
            img["data-original-src"] = src
            img["src"] = TRANSPARENT_GIF_DATA_URI


def _set_base_url(document: Any, head: Tag | None, base_url: str) -> None:
    base = document.find("base")
    if base is None:
        if head is None:
            logger.warning("Document has no <head>, cannot set base URL %s", base_url)
            return
        base = document.new_tag("base")
        head.insert(0, base)
    base["href"] = base_url


def _remove_event_handlers(document: Any) -> None:
    for element in document.find_all(True):
        handlers = [name for name in element.attrs if name.lower().startswith("on")]
        for name in handlers:
            del element[name]


def make_inert(document: Any, options: InertOptions | None = None) -> Any:
    """Make a converted document safe to display as a static snapshot.

    The document is modified in place and also returned for chaining.

    Parameters
    ----------
    document : BeautifulSoup
        A document produced by :class:`~mhtml2html.converters.dom.DomConverter`
    options : InertOptions or None
        Which inert steps to apply; all of them by default

    Returns
    -------
    BeautifulSoup
        The same document

    Examples
    --------
        >>> document = make_inert(convert(mhtml_bytes), InertOptions(base_url="https://example.com/"))
        >>> document.find("script") is None
        True

    """
    options = options or InertOptions()
    head = document.find("head")

    if options.base_url:
        _set_base_url(document, head, options.base_url)

    if options.clean_resource_urls:
        clean_resource_urls(document)

    if options.remove_scripts:
        for element in document.find_all(list(INERT_REMOVED_ELEMENTS)):
            element.decompose()

    if options.disable_links:
        for link in document.find_all("a", href=True):
            href = link["href"]
            if href:
                link["data-original-href"] = href
                del link["href"]

    # Handlers go before forms so the submit guard below survives
    if options.remove_event_handlers:
        _remove_event_handlers(document)

    if options.disable_forms:
        for form in document.find_all("form"):
            form.attrs.pop("action", None)
            form["onsubmit"] = "return false;"
        for control in document.find_all(list(INERT_FORM_CONTROLS)):
            control["disabled"] = "disabled"

    if head is None:
        logger.warning("Document has no <head>, skipping snapshot meta tags and styles")
        return document

    meta_attrs = {"name": options.snapshot_meta_name, "content": "true"}
    if options.captured_at:
        meta_attrs["data-captured-at"] = options.captured_at
    head.append(document.new_tag("meta", attrs=meta_attrs))

    if options.add_content_security_policy:
        csp = document.new_tag(
            "meta", attrs={"http-equiv": "Content-Security-Policy", "content": SNAPSHOT_CONTENT_SECURITY_POLICY}
        )
        head.insert(0, csp)

    if options.add_inert_styles:
        style = document.new_tag("style")
        style.string = Stylesheet(INERT_STYLESHEET)
        head.append(style)

    return document
