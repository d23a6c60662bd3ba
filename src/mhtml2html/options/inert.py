#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mhtml2html/options/inert.py
"""Configuration options for making converted snapshots inert."""

from __future__ import annotations

from dataclasses import dataclass, field

from mhtml2html.constants import DEFAULT_SNAPSHOT_META_NAME
from mhtml2html.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class InertOptions(CloneFrozenMixin):
    """Settings controlling which interactive features are stripped from a snapshot.

    Parameters
    ----------
    base_url : str, optional
        ``href`` for the document's ``<base>`` element
    captured_at : str, optional
        Timestamp recorded on the snapshot marker meta tag
    snapshot_meta_name : str
        ``name`` of the snapshot marker meta tag
    clean_resource_urls : bool, default True
        Drop references to resources that were not inlined
    remove_scripts : bool, default True
        Remove ``<script>`` and ``<noscript>`` elements
    disable_links : bool, default True
        Move ``a[href]`` into ``data-original-href``
    disable_forms : bool, default True
        Neutralise form submission and disable form controls
    remove_event_handlers : bool, default True
        Remove ``on*`` event handler attributes
    add_content_security_policy : bool, default True
        Insert a restrictive Content-Security-Policy meta tag
    add_inert_styles : bool, default True
        Append a stylesheet making disabled links and controls look inert

    """

    base_url: str | None = field(
        default=None,
        metadata={
            "help": "Base URL set on the snapshot's <base> element",
            "cli_name": "base-url",
            "importance": "core",
        },
    )
    captured_at: str | None = field(
        default=None,
        metadata={"help": "Capture timestamp recorded on the snapshot marker meta tag", "importance": "advanced"},
    )
    snapshot_meta_name: str = field(
        default=DEFAULT_SNAPSHOT_META_NAME,
        metadata={"help": "Name of the meta tag marking the document as a snapshot", "importance": "advanced"},
    )
    clean_resource_urls: bool = field(
        default=True,
        metadata={"help": "Drop references to resources that were not inlined", "importance": "advanced"},
    )
    remove_scripts: bool = field(default=True, metadata={"help": "Remove script and noscript elements"})
    disable_links: bool = field(default=True, metadata={"help": "Disable hyperlinks, keeping the original href"})
    disable_forms: bool = field(default=True, metadata={"help": "Disable forms and form controls"})
    remove_event_handlers: bool = field(default=True, metadata={"help": "Remove on* event handler attributes"})
    add_content_security_policy: bool = field(
        default=True,
        metadata={"help": "Insert a restrictive Content-Security-Policy meta tag"},
    )
    add_inert_styles: bool = field(default=True, metadata={"help": "Append styles for disabled links and controls"})

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If the snapshot meta name is empty.

        """
        if not self.snapshot_meta_name.strip():
            raise ValueError("snapshot_meta_name must not be empty")
