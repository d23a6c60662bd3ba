#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/parsers/multipart.py
"""MHTML multipart/related parser.

This module provides the MultipartParser class that tokenizes a raw MHTML
archive into a :class:`~mhtml2html.archive.ParsedArchive`. Parsing is an
explicit state machine over four states::

    HEADERS -> PART_HEADERS -> PART_DATA -> PART_HEADERS -> ... -> END

Real-world archives are produced by several browsers that disagree on line
endings, header capitalisation and which headers to emit at all. Per-part
irregularities therefore degrade to a logged warning and a default, while the
few structural impossibilities (no document Content-Type, no boundary) raise
:class:`~mhtml2html.exceptions.ParsingError`.
"""

from __future__ import annotations

import logging
import quopri
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Union

from mhtml2html.archive import ParsedArchive, Part, TransferEncoding
from mhtml2html.constants import (
    DEFAULT_PART_MIME_TYPE,
    DEFAULT_TRANSFER_ENCODING,
    HEADER_CONTENT_ID,
    HEADER_CONTENT_LOCATION,
    HEADER_CONTENT_TYPE,
    HEADER_TRANSFER_ENCODING,
)
from mhtml2html.exceptions import ParsingError, ValidationError
from mhtml2html.options.mhtml import ParseOptions
from mhtml2html.parsers.headers import HeaderBlock, extract_boundary, extract_charset, extract_mime_type
from mhtml2html.parsers.scanner import Scanner
from mhtml2html.utils.dom import resolve_dom_parser
from mhtml2html.utils.encoding import decode_charset

logger = logging.getLogger(__name__)

MhtmlInput = Union[str, bytes, bytearray]

# Every byte maps to exactly one code point, so part bodies survive a
# text round trip unchanged until their own charset is applied
_BYTE_TRANSPARENT_CODEC = "latin-1"


class ParserState(Enum):
    """States of the MHTML parsing state machine."""

    HEADERS = auto()
    PART_HEADERS = auto()
    PART_DATA = auto()
    END = auto()


@dataclass(frozen=True)
class _PendingPart:
    """Header-derived attributes of the part whose body is being read."""

    mime_type: str
    charset: str | None
    transfer_encoding: TransferEncoding
    content_id: str | None
    location: str | None
    is_root: bool


def _strip_content_id(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    if stripped.startswith("<") and stripped.endswith(">"):
        stripped = stripped[1:-1].strip()
    return stripped or None


def _is_closing_delimiter(line: str, boundary: str) -> bool:
    return line.strip().endswith(f"{boundary}--")


def _to_scan_text(mhtml: MhtmlInput) -> str:
    """Return the archive as text with exactly one character per input byte."""
    if isinstance(mhtml, (bytes, bytearray)):
        raw = bytes(mhtml)
    elif isinstance(mhtml, str):
        try:
            # Text already holding one byte per character scans unchanged
            raw = mhtml.encode(_BYTE_TRANSPARENT_CODEC)
        except UnicodeEncodeError:
            raw = mhtml.encode("utf-8")
    else:
        raise ValidationError(
            f"Expected MHTML as str or bytes, got {type(mhtml).__name__}",
            parameter_name="mhtml",
            parameter_value=type(mhtml).__name__,
        )
    return raw.decode(_BYTE_TRANSPARENT_CODEC)


class MultipartParser:
    """Parse raw MHTML text into lookup tables of its parts.

    A parser instance holds only its options; all per-archive state lives in
    local variables of :meth:`parse`, so one instance can parse any number of
    archives independently.

    Parameters
    ----------
    options : ParseOptions or None
        Parsing options

    Examples
    --------
        >>> archive = MultipartParser().parse(mhtml_bytes)
        >>> archive.root_part.mime_type
        'text/html'

    """

    def __init__(self, options: ParseOptions | None = None):
        """Initialize the parser with options."""
        self.options = options or ParseOptions()

    def parse(self, mhtml: MhtmlInput) -> ParsedArchive | Any:
        """Parse an MHTML archive.

        Parameters
        ----------
        mhtml : str or bytes
            The archive. Text whose characters all fit in one byte is read as
            one byte per character, so declared part charsets apply to it
            exactly as to bytes. Other text is encoded as UTF-8 first.

        Returns
        -------
        ParsedArchive or document
            The archive's lookup tables, or, with ``html_only``, the root part
            parsed by the DOM parsing capability

        Raises
        ------
        ParsingError
            If the document headers lack a Content-Type or a boundary
        ValidationError
            If ``mhtml`` is neither text nor bytes

        """
        scanner = Scanner(_to_scan_text(mhtml))
        media: dict[str, Part] = {}
        frames: dict[str, Part] = {}
        root_location: str | None = None
        seen_first_part = False

        document_headers = HeaderBlock()
        part_headers = HeaderBlock()
        pending: _PendingPart | None = None
        boundary = ""

        state = ParserState.HEADERS
        scanner.skip_whitespace()

        while state is not ParserState.END:
            if scanner.at_end() and state is not ParserState.PART_DATA:
                if state is ParserState.HEADERS:
                    boundary = self._read_boundary(document_headers, scanner)
                break

            if state is ParserState.HEADERS:
                line = scanner.next_line()
                if line.strip():
                    document_headers.add_line(line)
                    continue

                boundary = self._read_boundary(document_headers, scanner)
                scanner.skip_whitespace()
                if scanner.at_end():
                    state = ParserState.END
                    continue
                delimiter = scanner.next_line()
                if boundary not in delimiter:
                    logger.warning("Expected boundary at line %d, continuing anyway", scanner.line_number)
                state = ParserState.PART_HEADERS

            elif state is ParserState.PART_HEADERS:
                line = scanner.next_line()
                if line.strip():
                    if _is_closing_delimiter(line, boundary):
                        state = ParserState.END
                    else:
                        part_headers.add_line(line)
                    continue
                if len(part_headers) == 0:
                    # Blank lines before a header block carry nothing
                    continue

                is_root = not seen_first_part
                seen_first_part = True
                pending = self._build_pending_part(part_headers, scanner.line_number, is_root)
                part_headers = HeaderBlock()

                if pending is None:
                    closed = self._skip_to_boundary(scanner, boundary)
                    state = ParserState.END if closed or scanner.at_end() else ParserState.PART_HEADERS
                    continue

                if is_root:
                    root_location = pending.location if pending.location is not None else pending.content_id

                scanner.skip_whitespace()
                state = ParserState.PART_DATA

            elif state is ParserState.PART_DATA:
                if pending is None:
                    raise ParsingError(
                        f"Part body without headers; Line {scanner.line_number}", parsing_stage="part_data"
                    )
                part, closed = self._read_part(scanner, boundary, pending)

                if self.options.html_only and pending.is_root:
                    parse_dom = resolve_dom_parser(self.options.parse_dom, self.options.html_parser)
                    return parse_dom(part.data)

                self._store_part(part, media, frames)
                pending = None
                state = ParserState.END if closed or scanner.at_end() else ParserState.PART_HEADERS

        logger.debug("Parsed MHTML archive: %d located parts, %d identified parts", len(media), len(frames))
        return ParsedArchive(
            media=MappingProxyType(media),
            frames=MappingProxyType(frames),
            root_location=root_location,
        )

    @staticmethod
    def _read_boundary(headers: HeaderBlock, scanner: Scanner) -> str:
        content_type = headers.get(HEADER_CONTENT_TYPE)
        if content_type is None:
            raise ParsingError(
                f"Missing document content type; Line {scanner.line_number}", parsing_stage="document_headers"
            )
        boundary = extract_boundary(content_type)
        if boundary is None:
            raise ParsingError(
                f"Missing boundary from document headers; Line {scanner.line_number}",
                parsing_stage="document_headers",
            )
        return boundary

    @staticmethod
    def _build_pending_part(headers: HeaderBlock, line_number: int, is_root: bool) -> _PendingPart | None:
        """Derive part attributes from its header block, or None to skip the part."""
        content_type = headers.get(HEADER_CONTENT_TYPE)
        encoding_header = headers.get(HEADER_TRANSFER_ENCODING)
        content_id = _strip_content_id(headers.get(HEADER_CONTENT_ID))
        location = headers.get(HEADER_CONTENT_LOCATION) or None

        if content_id is None and location is None:
            logger.warning("Skipping content without ID or location at line %d", line_number)
            return None

        if encoding_header is None:
            logger.warning(
                "Missing Content-Transfer-Encoding at line %d, defaulting to %s", line_number, DEFAULT_TRANSFER_ENCODING
            )
            encoding_header = DEFAULT_TRANSFER_ENCODING
        transfer_encoding = TransferEncoding.from_header(encoding_header)
        if transfer_encoding is TransferEncoding.UNKNOWN:
            logger.warning(
                "Unsupported Content-Transfer-Encoding %r at line %d, keeping data as-is", encoding_header, line_number
            )

        mime_type = extract_mime_type(content_type)
        if mime_type is None:
            logger.warning("Missing Content-Type at line %d, defaulting to %s", line_number, DEFAULT_PART_MIME_TYPE)
            mime_type = DEFAULT_PART_MIME_TYPE

        if is_root and "html" not in mime_type:
            logger.warning("Index not HTML (%s) at line %d", mime_type, line_number)

        return _PendingPart(
            mime_type=mime_type,
            charset=extract_charset(content_type),
            transfer_encoding=transfer_encoding,
            content_id=content_id,
            location=location,
            is_root=is_root,
        )

    @staticmethod
    def _skip_to_boundary(scanner: Scanner, boundary: str) -> bool:
        """Discard lines through the next boundary; True if it closed the archive."""
        while not scanner.at_end():
            line = scanner.next_line()
            if boundary in line:
                return _is_closing_delimiter(line, boundary)
        return False

    def _read_part(self, scanner: Scanner, boundary: str, pending: _PendingPart) -> tuple[Part, bool]:
        """Read a part body up to the next boundary line and build the Part.

        Returns the part and whether the boundary line closed the archive.
        """
        encoding = pending.transfer_encoding
        chunks: list[str] = []
        closed = False

        while not scanner.at_end():
            line = scanner.next_line()
            if boundary in line:
                closed = _is_closing_delimiter(line, boundary)
                break
            if encoding is TransferEncoding.BASE64:
                chunks.append(line.strip())
            elif encoding is TransferEncoding.QUOTED_PRINTABLE:
                raw = line.encode(_BYTE_TRANSPARENT_CODEC)
                chunks.append(quopri.decodestring(raw).decode(_BYTE_TRANSPARENT_CODEC))
            else:
                chunks.append(line)

        data = "".join(chunks)
        if encoding is not TransferEncoding.BASE64:
            data = self._decode_text(data.encode(_BYTE_TRANSPARENT_CODEC), pending.charset)

        part = Part(
            mime_type=pending.mime_type,
            transfer_encoding=encoding,
            data=data,
            content_id=pending.content_id,
            location=pending.location,
            charset=pending.charset,
        )
        return part, closed

    def _decode_text(self, data: bytes, charset: str | None) -> str:
        if self.options.decoder is not None:
            return self.options.decoder(data, charset)
        return decode_charset(data, charset)

    @staticmethod
    def _store_part(part: Part, media: dict[str, Part], frames: dict[str, Part]) -> None:
        if part.location is not None:
            if part.location in media:
                logger.debug("Duplicate Content-Location %s, keeping first occurrence", part.location)
            else:
                media[part.location] = part
        if part.content_id is not None:
            if part.content_id in frames:
                logger.debug("Duplicate Content-ID %s, keeping first occurrence", part.content_id)
            else:
                frames[part.content_id] = part


def parse(mhtml: MhtmlInput, options: ParseOptions | None = None) -> ParsedArchive | Any:
    """Parse an MHTML archive with a fresh :class:`MultipartParser`."""
    return MultipartParser(options).parse(mhtml)
