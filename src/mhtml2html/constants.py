#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for mhtml2html.

This module centralizes the hardcoded values, header names and default
configuration constants used across the mhtml2html package.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. MIME Archive Constants - header names and archive defaults
3. Resolution and Rewriting Constants - asset lookup and CSS scanning
4. DOM Conversion Constants - shadow DOM workaround and frame inlining
5. Inert Output Constants - post-processing of converted snapshots
6. Dependency Declarations - packages checked at runtime
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HtmlParser = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# MIME Archive Constants
# =============================================================================

HEADER_CONTENT_TYPE = "Content-Type"
HEADER_TRANSFER_ENCODING = "Content-Transfer-Encoding"
HEADER_CONTENT_ID = "Content-ID"
HEADER_CONTENT_LOCATION = "Content-Location"

DEFAULT_PART_MIME_TYPE = "application/octet-stream"
DEFAULT_TRANSFER_ENCODING = "quoted-printable"
DEFAULT_CHARSET = "utf-8"

# Charset labels treated as UTF-8 without consulting the codec registry
UTF8_CHARSET_ALIASES = frozenset({"utf-8", "utf8"})

# Encodings tried after the declared charset fails to decode a part body
FALLBACK_ENCODINGS = ["utf-8", "utf-8-sig", "latin-1"]

# chardet tuning used when a declared charset cannot decode the data
CHARDET_SAMPLE_SIZE = 8192
CHARDET_CONFIDENCE_THRESHOLD = 0.7

# =============================================================================
# Resolution and Rewriting Constants
# =============================================================================

CSS_URL_TOKEN = "url("
CSS_URL_TERMINATOR = ")"

# Shortest final path segment eligible for filename-suffix matching
MIN_FILENAME_MATCH_LENGTH = 4

ABSOLUTE_URL_PREFIXES = ("http://", "https://")
CID_SCHEME = "cid:"
DATA_URI_PREFIX = "data:"

# Image sources that already carry their bytes and never name an archive part
SELF_CONTAINED_SOURCE_PREFIXES = (DATA_URI_PREFIX, "blob:")

# =============================================================================
# DOM Conversion Constants
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParser = "html.parser"
HTML_PARSER_CHOICES = ("html.parser", "html5lib", "lxml")

DEFAULT_CONVERT_IFRAMES = False
DEFAULT_HTML_ONLY = False

SHADOW_ROOT_ATTRIBUTES = ("shadowrootmode", "shadowmode")
SHADOW_ROOT_DATA_ATTRIBUTES = tuple(f"data-{name}" for name in SHADOW_ROOT_ATTRIBUTES)

BASE_TARGET = "_parent"
HOST_LOADED_ATTRIBUTE = "loaded"
INTEGRITY_ATTRIBUTE = "integrity"

FRAME_DATA_URI_PREFIX = "data:text/html;charset=utf-8,"

# Characters left unescaped by JavaScript's encodeURIComponent beyond
# those urllib.parse.quote always keeps
URI_COMPONENT_SAFE = "!*'()"

HTML_DOCTYPE = "<!DOCTYPE html>"

# =============================================================================
# Inert Output Constants
# =============================================================================

TRANSPARENT_GIF_DATA_URI = "data:image/gif;base64,R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"

DEFAULT_SNAPSHOT_META_NAME = "mhtml2html-snapshot"

SNAPSHOT_CONTENT_SECURITY_POLICY = (
    "default-src 'self' data: blob:; script-src 'none'; style-src 'unsafe-inline' data: blob:; "
    "font-src data: blob:; img-src 'self' data: blob:; frame-src 'none'; object-src 'none';"
)

INERT_STYLESHEET = """
    a[data-original-href] { cursor: default !important; pointer-events: none !important; }
    button:disabled, input:disabled, select:disabled, textarea:disabled { opacity: 0.7; }
"""

INERT_FORM_CONTROLS = ("button", "input", "select", "textarea")
INERT_REMOVED_ELEMENTS = ("script", "noscript")
INERT_KEPT_URL_SCHEMES = ("data:", "blob:")

# =============================================================================
# Dependency Declarations
# =============================================================================

# (install_name, import_name, version_spec)
DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.12.0")]
DEPS_HTML_PARSER_BACKENDS = {
    "html5lib": ("html5lib", "html5lib", ""),
    "lxml": ("lxml", "lxml", ""),
}
