#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/archive.py
"""Data model for parsed MHTML archives.

A :class:`ParsedArchive` is built once per parse and is read-only afterward.
It holds every referenceable MIME part twice over: by ``Content-Location`` in
``media`` (used for URL resolution) and by ``Content-ID`` in ``frames`` (used
for ``cid:`` references such as nested frame documents).
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping

from mhtml2html.constants import DEFAULT_CHARSET
from mhtml2html.utils.encoding import decode_charset

logger = logging.getLogger(__name__)


class TransferEncoding(str, Enum):
    """Content-Transfer-Encoding values understood by the parser."""

    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BINARY = "binary"
    QUOTED_PRINTABLE = "quoted-printable"
    BASE64 = "base64"
    UNKNOWN = "unknown"

    @classmethod
    def from_header(cls, value: str) -> TransferEncoding:
        """Map a header value to a member; anything unrecognised is UNKNOWN."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Part:
    """One MIME body from an MHTML archive.

    Parameters
    ----------
    mime_type : str
        Lower-cased MIME type without parameters
    transfer_encoding : TransferEncoding
        How ``data`` was encoded in the archive
    data : str
        Base64 text when ``transfer_encoding`` is BASE64, decoded text otherwise
    content_id : str or None
        Content-ID with angle brackets removed
    location : str or None
        Content-Location (the original resource URL)
    charset : str or None
        Declared charset, lower-cased

    """

    mime_type: str
    transfer_encoding: TransferEncoding
    data: str
    content_id: str | None = None
    location: str | None = None
    charset: str | None = None

    @property
    def is_html(self) -> bool:
        return "html" in self.mime_type

    @property
    def is_css(self) -> bool:
        return "css" in self.mime_type

    @property
    def is_image(self) -> bool:
        return "image" in self.mime_type

    @property
    def is_base64(self) -> bool:
        return self.transfer_encoding is TransferEncoding.BASE64

    def payload_bytes(self) -> bytes:
        """Return the part's raw bytes.

        Base64 data is decoded; text data is encoded as UTF-8. Undecodable
        base64 is logged and yields empty bytes.
        """
        if self.is_base64:
            try:
                return base64.b64decode(self.data)
            except (binascii.Error, ValueError) as e:
                logger.warning("Invalid base64 data in part %s: %s", self.location or self.content_id, e)
                return b""
        return self.data.encode(DEFAULT_CHARSET)

    def text(self) -> str:
        """Return the part's content as text, decoding base64 data first."""
        if self.is_base64:
            return decode_charset(self.payload_bytes(), self.charset)
        return self.data

    def base64_payload(self) -> str:
        """Return the part's content as base64 text."""
        if self.is_base64:
            return self.data
        return base64.b64encode(self.payload_bytes()).decode("ascii")

    def to_data_uri(self) -> str:
        """Build a ``data:<mime-type>;base64,<payload>`` URI for this part."""
        return f"data:{self.mime_type};base64,{self.base64_payload()}"


@dataclass(frozen=True)
class ParsedArchive:
    """Lookup tables produced by parsing one MHTML archive.

    Parameters
    ----------
    media : Mapping[str, Part]
        Parts keyed by Content-Location
    frames : Mapping[str, Part]
        Parts keyed by Content-ID (angle brackets removed)
    root_location : str or None
        Key of the root HTML document, normally the first part's location

    """

    media: Mapping[str, Part]
    frames: Mapping[str, Part]
    root_location: str | None

    @property
    def root_part(self) -> Part | None:
        """Return the root part, looked up by location first, then by id."""
        if self.root_location is None:
            return None
        part = self.media.get(self.root_location)
        if part is None:
            part = self.frames.get(self.root_location)
        return part

    @property
    def base_location(self) -> str | None:
        """Location that relative references in the root document resolve against."""
        part = self.root_part
        if part is not None and part.location:
            return part.location
        return self.root_location

    def with_root(self, root_location: str) -> ParsedArchive:
        """Return an archive sharing this one's tables with a different root."""
        return replace(self, root_location=root_location)
