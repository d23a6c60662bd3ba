#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/utils/encoding.py
"""Character set handling for MHTML part bodies.

MHTML parts declare their character set in the ``Content-Type`` header, but
capturing browsers are inconsistent: some omit it, some declare a charset the
body does not actually use. This module decodes part bodies with the declared
charset first, then falls back to chardet-based detection and a fixed list of
encodings so that a single mislabelled part never aborts a conversion.
"""

from __future__ import annotations

import codecs
import logging
from typing import Callable, Optional

import chardet

from mhtml2html.constants import (
    CHARDET_CONFIDENCE_THRESHOLD,
    CHARDET_SAMPLE_SIZE,
    DEFAULT_CHARSET,
    FALLBACK_ENCODINGS,
    UTF8_CHARSET_ALIASES,
)

logger = logging.getLogger(__name__)

# Injected charset decoding capability: (raw bytes, declared charset or None) -> text
CharsetDecoder = Callable[[bytes, Optional[str]], str]


def detect_encoding(
    data: bytes,
    sample_size: int = CHARDET_SAMPLE_SIZE,
    confidence_threshold: float = CHARDET_CONFIDENCE_THRESHOLD,
) -> str | None:
    """Guess the encoding of ``data`` from its first ``sample_size`` bytes.

    Returns
    -------
    str | None
        The encoding chardet proposes, or None when it has no guess or its
        confidence is below ``confidence_threshold``

    """
    result = chardet.detect(data[:sample_size])
    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet found no encoding")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug("chardet detected encoding: %s (confidence: %.2f)", encoding, confidence)

    if confidence >= confidence_threshold:
        return encoding
    logger.debug("chardet confidence %.2f below threshold %s", confidence, confidence_threshold)
    return None


def normalize_charset(charset: str | None) -> str | None:
    """Return a canonical codec name for ``charset``, or None if unknown.

    Examples
    --------
    >>> normalize_charset("UTF8")
    'utf-8'
    >>> normalize_charset("windows-1252")
    'cp1252'
    >>> normalize_charset("x-made-up") is None
    True

    """
    if not charset:
        return None
    label = charset.strip().strip("\"'").lower()
    if label in UTF8_CHARSET_ALIASES:
        return DEFAULT_CHARSET
    try:
        return codecs.lookup(label).name
    except LookupError:
        return None


def decode_with_detection(
    data: bytes,
    fallback_encodings: list[str] | None = None,
    use_chardet: bool = True,
) -> str:
    """Decode a body whose charset is unknown or wrong.

    Candidates are tried in order: chardet's guess (unless ``use_chardet`` is
    off), then each of ``fallback_encodings``. If none of them decodes the
    data cleanly, it is decoded as UTF-8 with replacement characters, so this
    never raises.
    """
    candidates = [detect_encoding(data)] if use_chardet else []
    candidates += FALLBACK_ENCODINGS if fallback_encodings is None else fallback_encodings

    for encoding in filter(None, candidates):
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue

    return data.decode(DEFAULT_CHARSET, errors="replace")


def decode_charset(data: bytes, charset: str | None) -> str:
    """Decode a part body according to its declared charset.

    This is the default charset decoding capability used by the parser. UTF-8
    (declared or assumed) is decoded strictly first; a declared non-UTF-8
    charset goes through the codec registry. When the declared charset is
    unknown or does not match the data, a warning is logged and detection
    takes over.

    Parameters
    ----------
    data : bytes
        Raw (transfer-decoded) body bytes
    charset : str or None
        Charset parameter from the part's ``Content-Type``

    Returns
    -------
    str
        Decoded text

    """
    codec = normalize_charset(charset) if charset else DEFAULT_CHARSET
    if codec is None:
        logger.warning("Unsupported charset %r, falling back to encoding detection", charset)
        return decode_with_detection(data)

    try:
        return data.decode(codec)
    except UnicodeDecodeError as e:
        if charset:
            logger.warning("Part body does not match declared charset %r (%s), detecting encoding", charset, e)
        else:
            logger.debug("Part body is not valid UTF-8, detecting encoding")
        return decode_with_detection(data, fallback_encodings=FALLBACK_ENCODINGS)
