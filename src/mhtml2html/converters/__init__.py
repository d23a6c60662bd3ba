#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Conversion of parsed archives into self-contained HTML documents."""

from mhtml2html.converters.dom import DomConverter, flatten_shadow_root, rename_shadow_root_attributes
from mhtml2html.converters.inert import clean_css_urls, clean_resource_urls, make_inert

__all__ = [
    "DomConverter",
    "clean_css_urls",
    "clean_resource_urls",
    "flatten_shadow_root",
    "make_inert",
    "rename_shadow_root_attributes",
]
