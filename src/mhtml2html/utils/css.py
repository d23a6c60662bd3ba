#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/utils/css.py
"""Inline CSS ``url()`` references as data URIs.

The scanner looks for the literal token ``url(`` and treats everything up to
the next ``)`` as the reference. Nested parentheses or an unescaped ``)``
inside an unquoted URL therefore cut the reference short; this matches how
existing archives have always been converted and is kept as a known
limitation.
"""

from __future__ import annotations

import base64
import logging
from typing import AbstractSet, Mapping

from mhtml2html.archive import Part
from mhtml2html.constants import CSS_URL_TERMINATOR, CSS_URL_TOKEN, DEFAULT_CHARSET
from mhtml2html.utils.resolver import resolve_with_key

logger = logging.getLogger(__name__)


def _embed(key: str, part: Part, media: Mapping[str, Part], active: AbstractSet[str]) -> str | None:
    """Return the data URI for a resolved asset, or None to leave the reference alone."""
    if not part.is_css:
        return part.to_data_uri()

    if key in active:
        logger.warning("Circular stylesheet reference to %s, leaving it unresolved", key)
        return None

    css = _rewrite(part, key, media, active | {key})
    payload = base64.b64encode(css.encode(DEFAULT_CHARSET)).decode("ascii")
    return f"data:{part.mime_type};base64,{payload}"


def _replace(css: str, base: str | None, media: Mapping[str, Part], active: AbstractSet[str]) -> str:
    position = 0
    while True:
        start = css.find(CSS_URL_TOKEN, position)
        if start < 0:
            break
        ref_start = start + len(CSS_URL_TOKEN)
        ref_end = css.find(CSS_URL_TERMINATOR, ref_start)
        if ref_end < 0:
            break

        reference = css[ref_start:ref_end]
        found = resolve_with_key(reference, base, media)
        data_uri = _embed(found[0], found[1], media, active) if found is not None else None
        if data_uri is None:
            position = ref_end
            continue

        embedded = f"'{data_uri}'"
        css = css[:ref_start] + embedded + css[ref_end:]
        position = ref_start + len(embedded)
    return css


def _rewrite(part: Part, key: str | None, media: Mapping[str, Part], active: AbstractSet[str]) -> str:
    base = part.location or key
    return _replace(part.text(), base, media, active)


def replace_references(css: str, base: str | None, media: Mapping[str, Part]) -> str:
    """Replace every resolvable ``url(...)`` reference in ``css`` with a data URI.

    Parameters
    ----------
    css : str
        Stylesheet text, an inline ``<style>`` body or a ``style`` attribute
    base : str or None
        Location relative references are resolved against
    media : Mapping[str, Part]
        Parts keyed by Content-Location

    Returns
    -------
    str
        The rewritten CSS; unresolved references are left as written

    Examples
    --------
        >>> replace_references("a { background: url(foo.png) }", "http://x.com/", media)
        "a { background: url('data:image/png;base64,iVBORw0...') }"

    """
    return _replace(css, base, media, frozenset())


def rewrite_css(css_part: Part, media: Mapping[str, Part]) -> str:
    """Decode a stylesheet part and inline every ``url(...)`` reference it makes.

    References resolve against the stylesheet's own location. Referenced
    stylesheets (``@import url(...)``) are rewritten recursively before being
    embedded.

    Parameters
    ----------
    css_part : Part
        The stylesheet part
    media : Mapping[str, Part]
        Parts keyed by Content-Location

    Returns
    -------
    str
        Rewritten CSS text

    """
    key = css_part.location
    active = frozenset({key}) if key else frozenset()
    return _rewrite(css_part, key, media, active)
