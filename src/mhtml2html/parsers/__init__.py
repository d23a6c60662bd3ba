#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tokenizers for raw MHTML archives."""

from mhtml2html.parsers.multipart import MultipartParser, ParserState, parse

__all__ = ["MultipartParser", "ParserState", "parse"]
