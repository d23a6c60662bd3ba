#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/parsers/headers.py
"""MIME header block accumulation and Content-Type parameter extraction."""

from __future__ import annotations

import re
from typing import Iterator

_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([^\"';\s]+)", re.IGNORECASE)
_BOUNDARY_RE = re.compile(r"boundary\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^;\s]+))", re.IGNORECASE)


class HeaderBlock:
    """Accumulates ``key: value`` lines of one MIME header block.

    Indented lines and lines without a colon continue the most recently seen
    header (RFC 5322 folding); the key they fold onto is tracked per block. Lookups are
    case-insensitive because capturers disagree on header capitalisation.

    Examples
    --------
    >>> block = HeaderBlock()
    >>> block.add_line("Content-Type: multipart/related;")
    >>> block.add_line('\\tboundary="abc"')
    >>> block.get("content-type")
    'multipart/related;boundary="abc"'

    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._names: dict[str, str] = {}
        self.last_key: str | None = None

    def add_line(self, line: str) -> None:
        """Add one raw header line to the block."""
        colon = line.find(":")
        folded = line[:1] in (" ", "\t") and self.last_key is not None
        if colon > -1 and not folded:
            name = line[:colon].strip()
            key = name.lower()
            self._names[key] = name
            self._values[key] = line[colon + 1 :].strip()
            self.last_key = key
        elif self.last_key is not None:
            self._values[self.last_key] += line.strip()
        # A continuation before any header has nothing to fold onto

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._values.get(name.lower(), default)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> dict[str, str]:
        """Return the headers keyed by their original spelling."""
        return {self._names[key]: value for key, value in self._values.items()}


def extract_mime_type(content_type: str | None) -> str | None:
    """Return the lower-cased MIME type of a Content-Type value.

    Examples
    --------
    >>> extract_mime_type("Text/HTML; charset=utf-8")
    'text/html'

    """
    if not content_type:
        return None
    mime_type = content_type.split(";")[0].strip().lower()
    return mime_type or None


def extract_charset(content_type: str | None) -> str | None:
    """Return the lower-cased ``charset`` parameter of a Content-Type value.

    Examples
    --------
    >>> extract_charset('text/html; charset="Windows-1252"')
    'windows-1252'

    """
    if not content_type:
        return None
    match = _CHARSET_RE.search(content_type)
    return match.group(1).lower() if match else None


def extract_boundary(content_type: str | None) -> str | None:
    """Return the ``boundary`` parameter of a Content-Type value.

    Examples
    --------
    >>> extract_boundary('multipart/related;type="text/html";boundary="----Part--1"')
    '----Part--1'
    >>> extract_boundary("multipart/related; boundary=abc; type=text/html")
    'abc'

    """
    if not content_type:
        return None
    match = _BOUNDARY_RE.search(content_type)
    if not match:
        return None
    boundary = next(group for group in match.groups() if group is not None)
    return boundary or None
