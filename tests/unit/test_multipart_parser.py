"""Unit tests for the MHTML multipart parser.

This module covers the parser state machine: document header handling,
per-part header defaults, transfer decoding, charset decoding and the
lookup tables it produces.
"""

import logging
from types import MappingProxyType

import pytest
from fixtures.generators.mhtml_fixtures import (
    TEST_PNG_BYTES,
    FixturePart,
    build_mhtml,
    create_malformed_mhtml,
    create_mhtml_with_assets,
    create_mhtml_with_charset,
    create_mhtml_with_iframe,
    create_simple_mhtml,
    css_part,
    html_part,
    png_part,
)

from mhtml2html.archive import ParsedArchive, TransferEncoding
from mhtml2html.exceptions import ParsingError, ValidationError
from mhtml2html.options import ParseOptions
from mhtml2html.parsers.multipart import MultipartParser, parse


def _qp_archive(body: bytes, extra_headers: bytes = b"") -> bytes:
    return (
        b"MIME-Version: 1.0\r\n"
        b'Content-Type: multipart/related; boundary="BOUNDARY-1"\r\n'
        b"\r\n"
        b"--BOUNDARY-1\r\n"
        b"Content-Type: text/html\r\n" + extra_headers + b"Content-Location: http://x.test/\r\n"
        b"\r\n" + body + b"--BOUNDARY-1--\r\n"
    )


@pytest.mark.unit
class TestMultipartParserBasic:
    """Test parsing of well-formed archives."""

    def test_simple_archive(self):
        archive = parse(create_simple_mhtml())

        assert isinstance(archive, ParsedArchive)
        assert archive.root_location == "http://example.com/test.html"
        assert list(archive.media) == ["http://example.com/test.html"]
        assert len(archive.frames) == 0

        root = archive.root_part
        assert root is not None
        assert root.is_html
        assert root.mime_type == "text/html"
        assert root.charset == "utf-8"
        assert "<h1>Test MHTML Document</h1>" in root.data

    def test_tables_are_read_only(self):
        archive = parse(create_simple_mhtml())

        assert isinstance(archive.media, MappingProxyType)
        assert isinstance(archive.frames, MappingProxyType)
        with pytest.raises(TypeError):
            archive.media["http://other/"] = archive.root_part  # type: ignore[index]

    def test_every_located_part_is_stored(self):
        archive = parse(create_mhtml_with_assets())

        assert set(archive.media) == {
            "http://example.com/page/index.html",
            "http://example.com/page/css/site.css",
            "http://example.com/img/bg.png",
            "http://example.com/page/img/logo.png",
        }
        assert archive.root_location == "http://example.com/page/index.html"

    def test_base64_part_keeps_encoded_text(self):
        archive = parse(create_mhtml_with_assets())
        image = archive.media["http://example.com/page/img/logo.png"]

        assert image.transfer_encoding is TransferEncoding.BASE64
        assert image.is_image
        assert "\n" not in image.data
        assert image.payload_bytes() == TEST_PNG_BYTES

    def test_css_part_is_decoded_text(self):
        archive = parse(create_mhtml_with_assets())
        css = archive.media["http://example.com/page/css/site.css"]

        assert css.is_css
        assert 'background-image: url("../../img/bg.png");' in css.data

    def test_content_id_is_stored_without_brackets(self):
        archive = parse(create_mhtml_with_iframe())

        assert "frame-1@mhtml.blink" in archive.frames
        frame = archive.frames["frame-1@mhtml.blink"]
        assert frame.content_id == "frame-1@mhtml.blink"
        # Frames with a location are reachable through both tables
        assert archive.media["http://frames.example.com/inner.html"] is frame

    def test_str_and_bytes_input_agree(self):
        data = create_mhtml_with_assets()

        from_bytes = parse(data)
        from_text = parse(data.decode("utf-8"))

        assert dict(from_bytes.media) == dict(from_text.media)
        assert from_bytes.root_location == from_text.root_location

    def test_str_and_bytes_input_agree_for_single_byte_charset(self):
        data = create_mhtml_with_charset("windows-1252", text="café")

        from_bytes = parse(data)
        from_text = parse(data.decode("latin-1"))

        assert "<p>café</p>" in from_bytes.root_part.data
        assert from_text.root_part.data == from_bytes.root_part.data

    def test_str_input_beyond_latin1_is_read_as_utf8(self):
        text = build_mhtml([html_part("<p>naïve ✓</p>", location="http://example.com/")]).decode("utf-8")

        assert "<p>naïve ✓</p>" in parse(text).root_part.data

    def test_parser_instance_is_reusable(self):
        parser = MultipartParser()

        first = parser.parse(create_simple_mhtml())
        second = parser.parse(create_mhtml_with_assets())
        third = parser.parse(create_simple_mhtml())

        assert first.root_location == third.root_location
        assert dict(first.media) == dict(third.media)
        assert len(second.media) == 4

    def test_lf_only_line_endings(self):
        data = create_simple_mhtml().replace(b"\r\n", b"\n")

        archive = parse(data)

        assert archive.root_location == "http://example.com/test.html"


@pytest.mark.unit
class TestMultipartParserDecoding:
    """Test transfer and charset decoding of part bodies."""

    def test_quoted_printable_soft_breaks_and_escapes(self):
        archive = parse(_qp_archive(b"<p>Hel=\r\nlo =3D</p>\r\n", b"Content-Transfer-Encoding: quoted-printable\r\n"))

        assert archive.root_part.data == "<p>Hello =</p>\n"

    def test_missing_transfer_encoding_defaults_to_quoted_printable(self, caplog):
        with caplog.at_level(logging.WARNING):
            archive = parse(_qp_archive(b"<p>a=3Db</p>\r\n"))

        assert archive.root_part.transfer_encoding is TransferEncoding.QUOTED_PRINTABLE
        assert archive.root_part.data == "<p>a=b</p>\n"
        assert "Missing Content-Transfer-Encoding" in caplog.text

    def test_unknown_transfer_encoding_keeps_data(self, caplog):
        with caplog.at_level(logging.WARNING):
            archive = parse(_qp_archive(b"<p>a=3Db</p>\r\n", b"Content-Transfer-Encoding: x-uuencode\r\n"))

        assert archive.root_part.transfer_encoding is TransferEncoding.UNKNOWN
        assert archive.root_part.data == "<p>a=3Db</p>\n"
        assert "Unsupported Content-Transfer-Encoding" in caplog.text

    @pytest.mark.parametrize(
        ("header", "expected"), [("8bit", TransferEncoding.EIGHT_BIT), ("Binary", TransferEncoding.BINARY)]
    )
    def test_identity_transfer_encodings_are_quiet(self, caplog, header, expected):
        body = "<p>café a=3Db</p>\r\n".encode("utf-8")
        extra = f"Content-Transfer-Encoding: {header}\r\n".encode("ascii")
        with caplog.at_level(logging.WARNING):
            archive = parse(_qp_archive(body, extra))

        assert archive.root_part.transfer_encoding is expected
        assert archive.root_part.data == "<p>café a=3Db</p>\n"
        assert "Content-Transfer-Encoding" not in caplog.text

    def test_declared_charset_is_applied(self):
        archive = parse(create_mhtml_with_charset("windows-1252"))

        assert "café “quoted”" in archive.root_part.data

    def test_utf8_non_ascii_survives(self):
        data = build_mhtml([html_part("<p>naïve – ✓</p>", location="http://example.com/")])

        assert "<p>naïve – ✓</p>" in parse(data).root_part.data

    def test_injected_decoder_is_used(self):
        calls = []

        def decoder(data, charset):
            calls.append(charset)
            return "DECODED"

        archive = parse(create_mhtml_with_charset("iso-8859-1", text="café"), ParseOptions(decoder=decoder))

        assert archive.root_part.data == "DECODED"
        assert calls == ["iso-8859-1"]


@pytest.mark.unit
class TestMultipartParserTolerance:
    """Test recovery from irregular parts."""

    def test_part_without_id_or_location_is_skipped(self, caplog):
        data = build_mhtml(
            [
                html_part("<p>anonymous</p>"),
                png_part(location="http://example.com/a.png"),
            ]
        )

        with caplog.at_level(logging.WARNING):
            archive = parse(data)

        assert archive.root_location is None
        assert archive.root_part is None
        assert list(archive.media) == ["http://example.com/a.png"]
        assert "Skipping content without ID or location" in caplog.text

    def test_missing_content_type_defaults(self, caplog):
        data = build_mhtml(
            [
                html_part("<p>root</p>", location="http://example.com/"),
                FixturePart(None, b"blob", location="http://example.com/blob"),
            ]
        )

        with caplog.at_level(logging.WARNING):
            archive = parse(data)

        assert archive.media["http://example.com/blob"].mime_type == "application/octet-stream"
        assert "Missing Content-Type" in caplog.text

    def test_non_html_root_is_warned_not_rejected(self, caplog):
        data = build_mhtml([css_part("a { color: red }", location="http://example.com/s.css")])

        with caplog.at_level(logging.WARNING):
            archive = parse(data)

        assert archive.root_location == "http://example.com/s.css"
        assert "Index not HTML" in caplog.text

    def test_root_without_location_uses_content_id(self):
        data = build_mhtml([html_part("<p>root</p>", content_id="root@x")])

        archive = parse(data)

        assert archive.root_location == "root@x"
        assert archive.root_part is archive.frames["root@x"]

    def test_duplicate_location_keeps_first(self):
        data = build_mhtml(
            [
                html_part("<p>root</p>", location="http://example.com/"),
                css_part("first", location="http://example.com/s.css"),
                css_part("second", location="http://example.com/s.css"),
            ]
        )

        archive = parse(data)

        assert archive.media["http://example.com/s.css"].data.startswith("first")

    def test_archive_without_closing_delimiter(self):
        data = create_simple_mhtml().replace(b"------MultipartBoundary--abc123------\r\n", b"")

        archive = parse(data)

        assert "Test MHTML Document" in archive.root_part.data


@pytest.mark.unit
class TestMultipartParserErrors:
    """Test fatal structural errors."""

    def test_missing_boundary(self):
        with pytest.raises(ParsingError) as exc_info:
            parse(create_malformed_mhtml())

        assert "Missing boundary from document headers" in str(exc_info.value)
        assert exc_info.value.parsing_stage == "document_headers"

    def test_missing_content_type(self):
        with pytest.raises(ParsingError, match="Missing document content type"):
            parse(b"MIME-Version: 1.0\r\nSubject: x\r\n\r\n--b\r\n")

    def test_empty_input(self):
        with pytest.raises(ParsingError):
            parse(b"")

    def test_error_reports_line_number(self):
        with pytest.raises(ParsingError, match=r"Line \d+"):
            parse(create_malformed_mhtml())

    def test_unsupported_input_type(self):
        with pytest.raises(ValidationError):
            parse(12345)  # type: ignore[arg-type]


@pytest.mark.unit
class TestHtmlOnly:
    """Test the root-only short circuit."""

    def test_returns_parsed_root_document(self):
        document = MultipartParser(ParseOptions(html_only=True)).parse(create_mhtml_with_assets())

        assert document.find("title").get_text() == "Assets"
        # Subresources are not inlined in this mode
        assert document.find("img")["src"] == "img/logo.png"

    def test_uses_injected_dom_parser(self):
        seen = []

        def parse_dom(html_text):
            seen.append(html_text)
            return "DOCUMENT"

        result = parse(create_simple_mhtml(), ParseOptions(html_only=True, parse_dom=parse_dom))

        assert result == "DOCUMENT"
        assert len(seen) == 1
        assert "Test MHTML Document" in seen[0]
