#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/utils/resolver.py
"""Asset reference resolution against an archive's location table.

Captured pages reference their subresources in every way HTML allows:
absolute URLs, document-relative paths, root-relative paths. The archive only
knows each part by the absolute URL it was fetched from, so a reference is
tried against the table with several strategies in order of confidence:

1. exact key match
2. path-relative join against the base location
3. root-relative join against the base location's origin
4. filename suffix match (last resort)

A reference that no strategy resolves is reported as not found; callers leave
it untouched instead of failing the conversion.
"""

from __future__ import annotations

import logging
from typing import Mapping
from urllib.parse import urlsplit

from mhtml2html.archive import Part
from mhtml2html.constants import ABSOLUTE_URL_PREFIXES, DATA_URI_PREFIX, MIN_FILENAME_MATCH_LENGTH

logger = logging.getLogger(__name__)


def clean_reference(reference: str) -> str:
    """Strip whitespace and surrounding quote characters from a reference.

    Examples
    --------
    >>> clean_reference(" 'img/a.png' ")
    'img/a.png'
    >>> clean_reference('"font.woff"')
    'font.woff'

    """
    return reference.strip().strip("\"'").strip()


def absolute_url(base: str, relative: str) -> str:
    """Join ``relative`` onto ``base`` with stack-based ``.``/``..`` handling.

    Absolute ``http(s)://`` references are returned unchanged.

    Examples
    --------
    >>> absolute_url("http://a.com/x/page.html", "img/b.png")
    'http://a.com/x/img/b.png'
    >>> absolute_url("http://a.com/x/y/style.css", "../fonts/f.woff")
    'http://a.com/x/fonts/f.woff'
    >>> absolute_url("http://a.com/x/page.html", "https://cdn.com/c.png")
    'https://cdn.com/c.png'

    """
    if relative.startswith(ABSOLUTE_URL_PREFIXES):
        return relative

    stack = base.split("/")
    stack.pop()
    for segment in relative.split("/"):
        if segment == ".":
            continue
        if segment == "..":
            if stack:
                stack.pop()
        else:
            stack.append(segment)
    return "/".join(stack)


def url_origin(url: str) -> str | None:
    """Return ``scheme://netloc`` of ``url``, or None if it has no origin.

    Examples
    --------
    >>> url_origin("https://example.com:8080/a/b.css")
    'https://example.com:8080'
    >>> url_origin("cid:frame-1") is None
    True

    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"


def _candidate_keys(reference: str, base: str | None):
    """Yield lookup keys for ``reference`` in resolution order, with the strategy name."""
    yield "exact", reference

    if base:
        yield "relative", absolute_url(base, reference)

        if reference.startswith("/"):
            if reference.startswith("//"):
                scheme = urlsplit(base).scheme
                if scheme:
                    yield "protocol-relative", f"{scheme}:{reference}"
            else:
                origin = url_origin(base)
                if origin:
                    yield "root-relative", origin + reference


def resolve_with_key(reference: str, base: str | None, media: Mapping[str, Part]) -> tuple[str, Part] | None:
    """Resolve a reference to its ``(key, part)`` entry in ``media``.

    Parameters
    ----------
    reference : str
        Raw reference as written in HTML or CSS, possibly quoted
    base : str or None
        Location the reference is relative to
    media : Mapping[str, Part]
        Parts keyed by Content-Location

    Returns
    -------
    tuple or None
        The matching key and part, or None when no strategy finds one

    """
    cleaned = clean_reference(reference)
    if not cleaned or cleaned.startswith(DATA_URI_PREFIX):
        return None

    for strategy, key in _candidate_keys(cleaned, base):
        part = media.get(key)
        if part is not None:
            if strategy != "exact":
                logger.debug("Resolved %s via %s match to %s", cleaned, strategy, key)
            return key, part

    filename = cleaned.split("/")[-1]
    if len(filename) >= MIN_FILENAME_MATCH_LENGTH:
        for key, part in media.items():
            if key.endswith(filename):
                logger.debug("Resolved %s via filename match to %s", cleaned, key)
                return key, part

    logger.debug("Could not resolve asset reference %s (base %s)", cleaned, base)
    return None


def resolve(reference: str, base: str | None, media: Mapping[str, Part]) -> Part | None:
    """Resolve a reference to a part in ``media``, or None if not found.

    See :func:`resolve_with_key` for the parameters.

    """
    found = resolve_with_key(reference, base, media)
    return found[1] if found is not None else None
