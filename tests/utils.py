"""Test utilities for mhtml2html test suite.

This module provides small helpers for building archive tables by hand and
for inspecting converted documents.
"""

import base64
import shutil
import tempfile
from pathlib import Path
from types import MappingProxyType
from urllib.parse import unquote

from mhtml2html.archive import ParsedArchive, Part, TransferEncoding

# Base64 encoded 1x1 pixel PNG for testing
MINIMAL_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9FpQHLwAAAAASUVORK5CYII="
MINIMAL_PNG_BYTES = base64.b64decode(MINIMAL_PNG_B64)


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def text_part(mime_type: str, data: str, location: str | None = None, content_id: str | None = None) -> Part:
    """Build a quoted-printable (already decoded) text part."""
    return Part(
        mime_type=mime_type,
        transfer_encoding=TransferEncoding.QUOTED_PRINTABLE,
        data=data,
        content_id=content_id,
        location=location,
    )


def image_part(location: str | None = None, content_id: str | None = None, mime_type: str = "image/png") -> Part:
    """Build a base64 image part holding the minimal PNG."""
    return Part(
        mime_type=mime_type,
        transfer_encoding=TransferEncoding.BASE64,
        data=MINIMAL_PNG_B64,
        content_id=content_id,
        location=location,
    )


def make_archive(*parts: Part, root_location: str | None = None) -> ParsedArchive:
    """Assemble a ParsedArchive from parts; the first part is the root unless given."""
    media = {part.location: part for part in parts if part.location is not None}
    frames = {part.content_id: part for part in parts if part.content_id is not None}
    if root_location is None and parts:
        root_location = parts[0].location or parts[0].content_id
    return ParsedArchive(
        media=MappingProxyType(media),
        frames=MappingProxyType(frames),
        root_location=root_location,
    )


def decode_frame_src(src: str) -> str:
    """Return the HTML carried by a ``data:text/html;charset=utf-8,`` iframe src."""
    prefix = "data:text/html;charset=utf-8,"
    assert src.startswith(prefix)
    return unquote(src[len(prefix) :])


def decode_data_uri(uri: str) -> bytes:
    """Return the payload bytes of a base64 data URI, tolerating surrounding quotes."""
    uri = uri.strip("'\"")
    header, _, payload = uri.partition(",")
    assert header.endswith(";base64")
    return base64.b64decode(payload)
