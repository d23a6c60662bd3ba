"""MHTML test fixture generators for testing MHTML-to-HTML conversion.

This module provides functions to programmatically create MHTML archives
for testing the parser and converter against the shapes real browsers save.
"""

import base64
import quopri
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_BOUNDARY = "----MultipartBoundary--abc123----"

# 1x1 PNG
TEST_PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\nIDATx\x9cc\x00\x01"
    b"\x00\x00\x05\x00\x01\r\n-\xdb\x00\x00\x00\x00IEND\xaeB`\x82"
)


@dataclass
class FixturePart:
    """One body of a generated archive."""

    content_type: Optional[str]
    body: bytes
    location: Optional[str] = None
    content_id: Optional[str] = None
    encoding: Optional[str] = "quoted-printable"


def html_part(html: str, location: Optional[str] = None, content_id: Optional[str] = None) -> FixturePart:
    return FixturePart("text/html; charset=utf-8", html.encode("utf-8"), location, content_id)


def css_part(css: str, location: Optional[str] = None) -> FixturePart:
    return FixturePart("text/css", css.encode("utf-8"), location)


def png_part(location: Optional[str] = None, content_id: Optional[str] = None) -> FixturePart:
    return FixturePart("image/png", TEST_PNG_BYTES, location, content_id, encoding="base64")


def _encode_body(part: FixturePart) -> bytes:
    if part.encoding == "base64":
        encoded = base64.b64encode(part.body)
        # Wrap at 76 columns like browsers do
        return b"\r\n".join(encoded[i : i + 76] for i in range(0, len(encoded), 76))
    if part.encoding == "quoted-printable":
        return quopri.encodestring(part.body).replace(b"\n", b"\r\n")
    return part.body


def build_mhtml(
    parts: list[FixturePart],
    boundary: str = DEFAULT_BOUNDARY,
    subject: str = "Test page",
    snapshot_location: Optional[str] = None,
) -> bytes:
    """Assemble an archive the way Chrome's "Save as MHTML" lays one out.

    Parameters
    ----------
    parts : list of FixturePart
        Bodies in archive order; the first is the root document
    boundary : str
        Multipart boundary
    subject : str
        Subject header value
    snapshot_location : str, optional
        ``Snapshot-Content-Location`` header value

    Returns
    -------
    bytes
        MHTML file content as bytes.

    """
    lines = [
        "From: <Saved by Blink>",
        f"Snapshot-Content-Location: {snapshot_location or 'http://example.com/'}",
        f"Subject: {subject}",
        "Date: Fri, 1 Mar 2024 12:00:00 -0000",
        "MIME-Version: 1.0",
        "Content-Type: multipart/related;",
        '\ttype="text/html";',
        f'\tboundary="{boundary}"',
        "",
        "",
    ]
    output = "\r\n".join(lines).encode("ascii")

    for part in parts:
        headers = [f"--{boundary}"]
        if part.content_type is not None:
            headers.append(f"Content-Type: {part.content_type}")
        if part.content_id is not None:
            headers.append(f"Content-ID: <{part.content_id}>")
        if part.encoding is not None:
            headers.append(f"Content-Transfer-Encoding: {part.encoding}")
        if part.location is not None:
            headers.append(f"Content-Location: {part.location}")
        output += ("\r\n".join(headers) + "\r\n\r\n").encode("ascii")
        output += _encode_body(part) + b"\r\n\r\n"

    output += f"--{boundary}--\r\n".encode("ascii")
    return output


def create_simple_mhtml() -> bytes:
    """Create a single-part archive with basic HTML content."""
    html = """<!DOCTYPE html>
<html>
<head>
    <title>Test MHTML Document</title>
</head>
<body>
    <h1>Test MHTML Document</h1>
    <p>This is a simple MHTML document with <strong>bold</strong> text.</p>
</body>
</html>
"""
    return build_mhtml([html_part(html, location="http://example.com/test.html")])


def create_mhtml_with_assets() -> bytes:
    """Create an archive with a linked stylesheet, a background image and an img."""
    html = """<!DOCTYPE html>
<html>
<head>
    <title>Assets</title>
    <link rel="stylesheet" href="css/site.css" integrity="sha384-abc" crossorigin="anonymous">
</head>
<body>
    <h1 style="background: url(/img/bg.png)">Heading</h1>
    <img src="img/logo.png" alt="logo">
    <img src="https://cdn.example.org/missing.png" alt="missing">
</body>
</html>
"""
    css = """body { background-image: url("../../img/bg.png"); }
h1 { color: #333; }
"""
    return build_mhtml(
        [
            html_part(html, location="http://example.com/page/index.html"),
            css_part(css, location="http://example.com/page/css/site.css"),
            png_part(location="http://example.com/img/bg.png"),
            png_part(location="http://example.com/page/img/logo.png"),
        ],
        snapshot_location="http://example.com/page/index.html",
    )


def create_mhtml_with_iframe() -> bytes:
    """Create an archive whose root embeds one frame document addressed by Content-ID."""
    root = """<html><head><title>Outer</title></head>
<body><p>Outer page</p><iframe src="cid:frame-1@mhtml.blink"></iframe></body></html>
"""
    frame = """<html><head></head><body><p>Inner frame</p><img src="pixel.png"></body></html>
"""
    return build_mhtml(
        [
            html_part(root, location="http://example.com/"),
            html_part(frame, location="http://frames.example.com/inner.html", content_id="frame-1@mhtml.blink"),
            png_part(location="http://frames.example.com/pixel.png"),
        ]
    )


def create_mhtml_with_shadow_dom() -> bytes:
    """Create an archive with a declarative shadow root on a custom element."""
    html = """<html><head></head><body>
<my-card loaded=""><template shadowrootmode="open"><!-- shadow --><p class="inner">Shadow content</p></template></my-card>
</body></html>
"""
    return build_mhtml([html_part(html, location="http://example.com/shadow.html")])


def create_mhtml_with_charset(charset: str = "windows-1252", text: str = "café “quoted”") -> bytes:
    """Create an archive whose root part is encoded in a non-UTF-8 charset.

    ``text`` must be encodable in ``charset``; the default suits windows-1252.
    """
    html = f"<html><head></head><body><p>{text}</p></body></html>"
    part = FixturePart(f"text/html; charset={charset}", html.encode(charset), "http://example.com/")
    return build_mhtml([part])


def create_malformed_mhtml() -> bytes:
    """Create an archive whose document headers carry no boundary."""
    return (
        b"MIME-Version: 1.0\r\n"
        b"Content-Type: multipart/related; type=\"text/html\"\r\n"
        b"\r\n"
        b"--whatever\r\n"
        b"Content-Type: text/html\r\n"
        b"\r\n"
        b"<html></html>\r\n"
    )


def create_mhtml_file(content: bytes, temp_dir: Path, filename: str = "test.mhtml") -> Path:
    """Write MHTML content to a file in ``temp_dir`` and return its path."""
    mhtml_file = temp_dir / filename
    mhtml_file.write_bytes(content)
    return mhtml_file
