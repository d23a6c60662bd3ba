#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/converters/dom.py
"""Rewrite an archive's root HTML document into a self-contained document.

This module provides the DomConverter class. It parses the root part with the
DOM parsing capability, then walks the tree breadth-first and replaces every
resource-bearing element or attribute with its inlined equivalent:

- ``<link rel="stylesheet">`` becomes a ``<style>`` with rewritten CSS
- ``<style>`` text and ``style`` attributes get their ``url()`` references inlined
- ``<img src>`` becomes a data URI
- ``<iframe src="cid:...">`` optionally becomes a ``data:text/html`` URI of the
  recursively converted frame document

Declarative Shadow DOM templates are flattened into their hosts and
``integrity`` attributes are dropped, since inlined resources no longer match
their recorded hashes.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from typing import Any, AbstractSet, Mapping
from urllib.parse import quote

from bs4 import Comment, NavigableString, Tag
from bs4.element import Stylesheet, TemplateString

from mhtml2html.archive import ParsedArchive, Part
from mhtml2html.constants import (
    BASE_TARGET,
    CID_SCHEME,
    FRAME_DATA_URI_PREFIX,
    HOST_LOADED_ATTRIBUTE,
    INTEGRITY_ATTRIBUTE,
    SELF_CONTAINED_SOURCE_PREFIXES,
    SHADOW_ROOT_ATTRIBUTES,
    SHADOW_ROOT_DATA_ATTRIBUTES,
    URI_COMPONENT_SAFE,
)
from mhtml2html.exceptions import InvalidRootError, ValidationError
from mhtml2html.options.mhtml import ConvertOptions
from mhtml2html.parsers.multipart import MultipartParser
from mhtml2html.utils.css import replace_references, rewrite_css
from mhtml2html.utils.dom import resolve_dom_parser, serialize_document
from mhtml2html.utils.resolver import resolve

logger = logging.getLogger(__name__)

_SHADOW_ATTRIBUTE_RE = re.compile(
    r"(?<!data-)(" + "|".join(re.escape(name) for name in SHADOW_ROOT_ATTRIBUTES) + r")=",
    re.IGNORECASE,
)


def rename_shadow_root_attributes(html_text: str) -> str:
    """Rename declarative shadow root attributes to inert ``data-`` attributes.

    Some HTML parsers partially understand ``<template shadowrootmode>`` and
    swallow the host's light DOM children while parsing it. Renaming the
    attribute beforehand keeps the template an ordinary element.

    Examples
    --------
    >>> rename_shadow_root_attributes('<template shadowrootmode="open">')
    '<template data-shadowrootmode="open">'

    """
    return _SHADOW_ATTRIBUTE_RE.sub(lambda m: f"data-{m.group(1).lower()}=", html_text)


def _attribute_text(value: Any) -> str | None:
    """Return an attribute value as text; multi-valued attributes are space-joined."""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def _find_shadow_template(host: Tag) -> Tag | None:
    for child in host.children:
        if isinstance(child, Tag) and child.name == "template":
            if any(child.has_attr(name) for name in SHADOW_ROOT_DATA_ATTRIBUTES):
                return child
    return None


def _holds_only_slots(template: Tag) -> bool:
    for node in template.contents:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            if node.strip():
                return False
        elif isinstance(node, Tag) and node.name != "slot":
            return False
    return True


def _detach_template_strings(node: Any) -> None:
    """Turn template-owned strings under ``node`` back into ordinary document text."""
    strings = [node] if isinstance(node, TemplateString) else []
    if isinstance(node, Tag):
        strings = [s for s in node.descendants if isinstance(s, TemplateString)]
    for string in strings:
        string.replace_with(NavigableString(str(string)))


def flatten_shadow_root(host: Tag) -> bool:
    """Replace a declarative shadow root template on ``host`` with real content.

    When the host already has light DOM children (the rendered fallback
    state), or the template only holds ``<slot>`` elements, the template is
    simply dropped. Otherwise the template's content, comments excluded, is
    moved into the host in its place. A stale ``loaded`` attribute on the host
    is removed so CSS rules gating visibility on it apply again.

    Parameters
    ----------
    host : Tag
        Element that may carry a shadow root template

    Returns
    -------
    bool
        True if a template was found and processed

    """
    template = _find_shadow_template(host)
    if template is None:
        return False

    has_light_dom = any(isinstance(child, Tag) and child is not template for child in host.children)

    if not has_light_dom and not _holds_only_slots(template):
        for node in list(template.contents):
            if isinstance(node, Comment):
                continue
            template.insert_before(node.extract())
            _detach_template_strings(node)

    template.decompose()

    if host.has_attr(HOST_LOADED_ATTRIBUTE):
        del host[HOST_LOADED_ATTRIBUTE]
    return True


class _DocumentRewriter:
    """Per-document walk state; created for one conversion and then discarded."""

    def __init__(
        self,
        document: Any,
        archive: ParsedArchive,
        options: ConvertOptions,
        frame_stack: AbstractSet[str],
    ):
        self.document = document
        self.archive = archive
        self.media: Mapping[str, Part] = archive.media
        self.base = archive.base_location
        self.options = options
        self.frame_stack = frame_stack

    def run(self) -> None:
        worklist: deque[Any] = deque([self.document])

        while worklist:
            node = worklist.popleft()
            # Snapshot before rewriting so replacements don't disturb the walk
            children = [child for child in node.children if isinstance(child, Tag)]
            for child in children:
                worklist.append(self._visit(child))

    def _visit(self, element: Tag) -> Tag:
        """Rewrite one element and return the node now standing in its place."""
        element.attrs.pop(INTEGRITY_ATTRIBUTE, None)
        flatten_shadow_root(element)

        name = element.name
        if name == "head":
            self._insert_base(element)
        elif name == "link":
            return self._inline_stylesheet(element)
        elif name == "style":
            self._rewrite_style_element(element)
        elif name == "img":
            self._inline_image(element)
            self._rewrite_style_attribute(element)
        elif name == "iframe":
            self._inline_frame(element)
        else:
            self._rewrite_style_attribute(element)
        return element

    def _insert_base(self, head: Tag) -> None:
        base = self.document.new_tag("base", attrs={"target": BASE_TARGET})
        head.insert(0, base)

    def _inline_stylesheet(self, link: Tag) -> Tag:
        rel = _attribute_text(link.get("rel"))
        href = _attribute_text(link.get("href"))
        if rel is None or rel.strip().lower() != "stylesheet" or not href:
            return link

        part = resolve(href, self.base, self.media)
        if part is None:
            logger.warning("Stylesheet %s not found in archive", href)
            return link
        if not part.is_css:
            return link

        style = self.document.new_tag("style", attrs={"type": "text/css"})
        style.string = Stylesheet(rewrite_css(part, self.media))
        link.replace_with(style)
        return style

    def _rewrite_style_element(self, style: Tag) -> None:
        css = "".join(str(node) for node in style.contents if isinstance(node, NavigableString))
        style.string = Stylesheet(replace_references(css, self.base, self.media))

    def _rewrite_style_attribute(self, element: Tag) -> None:
        inline_style = _attribute_text(element.get("style"))
        if inline_style:
            element["style"] = replace_references(inline_style, self.base, self.media)

    def _lookup_cid(self, reference: str) -> Part | None:
        return self.archive.frames.get(reference[len(CID_SCHEME) :].strip())

    def _inline_image(self, img: Tag) -> None:
        src = _attribute_text(img.get("src"))
        if not src or src.strip().lower().startswith(SELF_CONTAINED_SOURCE_PREFIXES):
            return

        if src.lower().startswith(CID_SCHEME):
            part = self._lookup_cid(src)
        else:
            part = resolve(src, self.base, self.media)

        if part is None:
            logger.warning("Image %s not found in archive", src)
            return
        if part.is_image:
            img["src"] = part.to_data_uri()

    def _inline_frame(self, iframe: Tag) -> None:
        src = _attribute_text(iframe.get("src"))
        if not self.options.convert_iframes or not src or not src.lower().startswith(CID_SCHEME):
            return

        frame_id = src[len(CID_SCHEME) :].strip()
        frame = self.archive.frames.get(frame_id)
        if frame is None:
            logger.warning("Frame %s not found in archive", src)
            return
        if not frame.is_html:
            return
        if frame_id in self.frame_stack:
            logger.warning("Frame %s references itself, leaving it unconverted", src)
            return

        nested = _convert_archive(self.archive.with_root(frame_id), self.options, self.frame_stack | {frame_id})
        markup = serialize_document(nested, include_doctype=False)
        iframe["src"] = FRAME_DATA_URI_PREFIX + quote(markup, safe=URI_COMPONENT_SAFE)


def _convert_archive(archive: ParsedArchive, options: ConvertOptions, frame_stack: AbstractSet[str]) -> Any:
    root = archive.root_part
    if root is None:
        raise InvalidRootError(archive.root_location)
    if not root.is_html:
        raise InvalidRootError(archive.root_location, root.mime_type)

    parse_dom = resolve_dom_parser(options.parse_dom, options.html_parser)
    document = parse_dom(rename_shadow_root_attributes(root.text()))
    _DocumentRewriter(document, archive, options, frame_stack).run()
    return document


def coerce_archive(mhtml: Any, options: ConvertOptions) -> ParsedArchive:
    """Return a ParsedArchive for raw MHTML, a ParsedArchive, or an archive-shaped mapping.

    Raises
    ------
    ValidationError
        If the argument has an unsupported type or lacks media, frames or a root
    ParsingError
        If raw MHTML cannot be parsed

    """
    if isinstance(mhtml, (str, bytes, bytearray)):
        return MultipartParser(options.to_parse_options()).parse(mhtml)

    if isinstance(mhtml, ParsedArchive):
        archive = mhtml
    elif isinstance(mhtml, Mapping):
        archive = ParsedArchive(
            media=mhtml.get("media"),  # type: ignore[arg-type]
            frames=mhtml.get("frames"),  # type: ignore[arg-type]
            root_location=mhtml.get("root_location", mhtml.get("index")),
        )
    else:
        raise ValidationError(
            "Expected argument of type str, bytes or ParsedArchive",
            parameter_name="mhtml",
            parameter_value=type(mhtml).__name__,
        )

    if not isinstance(archive.frames, Mapping):
        raise ValidationError("MHTML error: invalid frames", parameter_name="frames")
    if not isinstance(archive.media, Mapping):
        raise ValidationError("MHTML error: invalid media", parameter_name="media")
    if not isinstance(archive.root_location, str):
        raise ValidationError(
            "MHTML error: invalid index", parameter_name="root_location", parameter_value=archive.root_location
        )
    return archive


class DomConverter:
    """Convert MHTML archives into self-contained HTML documents.

    A converter holds only its options. Every :meth:`convert` call parses and
    rewrites its own document, so independent conversions never observe each
    other.

    Parameters
    ----------
    options : ConvertOptions or None
        Conversion options

    Examples
    --------
        >>> document = DomConverter(ConvertOptions(convert_iframes=True)).convert(mhtml_bytes)
        >>> document.find("img")["src"][:11]
        'data:image/'

    """

    def __init__(self, options: ConvertOptions | None = None):
        """Initialize the converter with options."""
        self.options = options or ConvertOptions()

    def convert(self, mhtml: Any) -> Any:
        """Convert an archive into a document with every resolvable asset inlined.

        Parameters
        ----------
        mhtml : str, bytes, ParsedArchive or Mapping
            Raw MHTML or an already parsed archive

        Returns
        -------
        BeautifulSoup
            The converted document, as returned by the DOM parsing capability

        Raises
        ------
        ValidationError
            If the argument type is unsupported or the archive is incomplete
        ParsingError
            If raw MHTML cannot be parsed
        InvalidRootError
            If the root part is missing or is not HTML

        """
        archive = coerce_archive(mhtml, self.options)
        return _convert_archive(archive, self.options, frozenset())
