#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for mhtml2html.

Options are frozen dataclasses: create a modified copy with
``options.create_updated(field=value)`` rather than mutating an instance.
"""

from __future__ import annotations

from mhtml2html.options.base import BaseOptions, CloneFrozenMixin, DomParser
from mhtml2html.options.inert import InertOptions
from mhtml2html.options.mhtml import ConvertOptions, ParseOptions

__all__ = [
    "BaseOptions",
    "CloneFrozenMixin",
    "ConvertOptions",
    "DomParser",
    "InertOptions",
    "ParseOptions",
]
