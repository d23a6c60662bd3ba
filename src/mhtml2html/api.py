#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/api.py
"""Public functions for parsing and converting MHTML archives."""

import logging
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

from mhtml2html.archive import ParsedArchive
from mhtml2html.converters.dom import DomConverter
from mhtml2html.converters.inert import make_inert
from mhtml2html.exceptions import FileNotFoundError, OutputWriteError, ValidationError
from mhtml2html.options.base import CloneFrozenMixin
from mhtml2html.options.inert import InertOptions
from mhtml2html.options.mhtml import ConvertOptions, ParseOptions
from mhtml2html.parsers.multipart import MhtmlInput, MultipartParser
from mhtml2html.utils.decorators import debug_timer
from mhtml2html.utils.dom import serialize_document

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound=CloneFrozenMixin)

__all__ = ["parse", "convert", "convert_to_html", "convert_file", "serialize_document"]


def _apply_kwargs(options: OptionsT, kwargs: dict[str, Any]) -> OptionsT:
    """Return ``options`` updated with ``kwargs``, reporting bad keys as ValidationError."""
    if not kwargs:
        return options
    try:
        return options.create_updated(**kwargs)
    except TypeError as e:
        raise ValidationError(
            f"Unknown option for {type(options).__name__}: {e}",
            parameter_name=", ".join(sorted(kwargs)),
            original_error=e,
        ) from e
    except ValueError as e:
        raise ValidationError(str(e), parameter_name=", ".join(sorted(kwargs)), original_error=e) from e


def parse(mhtml: MhtmlInput, options: Optional[ParseOptions] = None, **kwargs: Any) -> Union[ParsedArchive, Any]:
    """Parse an MHTML archive into lookup tables of its parts.

    Parameters
    ----------
    mhtml : str or bytes
        The raw archive
    options : ParseOptions, optional
        Parsing options
    kwargs : Any
        Individual option overrides (``html_only``, ``html_parser``,
        ``parse_dom``, ``decoder``)

    Returns
    -------
    ParsedArchive or document
        The parsed archive, or with ``html_only`` the root part parsed as a DOM

    Raises
    ------
    ValidationError
        If an option override is unknown or invalid
    ParsingError
        If the archive headers are missing a Content-Type or boundary

    Examples
    --------
        >>> archive = parse(Path("page.mhtml").read_bytes())
        >>> archive.root_location
        'https://example.com/'

    """
    final_options = _apply_kwargs(options or ParseOptions(), kwargs)
    with debug_timer(logger, "Parsing MHTML archive"):
        return MultipartParser(final_options).parse(mhtml)


def convert(
    mhtml: Union[MhtmlInput, ParsedArchive, dict], options: Optional[ConvertOptions] = None, **kwargs: Any
) -> Any:
    """Convert an MHTML archive into a self-contained document.

    Parameters
    ----------
    mhtml : str, bytes, ParsedArchive or Mapping
        Raw MHTML, or an archive previously returned by :func:`parse`. A
        mapping must provide ``media``, ``frames`` and ``root_location``.
    options : ConvertOptions, optional
        Conversion options
    kwargs : Any
        Individual option overrides (``convert_iframes``, ``html_parser``,
        ``parse_dom``, ``decoder``)

    Returns
    -------
    BeautifulSoup
        The converted document

    Raises
    ------
    ValidationError
        If the input type or an option override is invalid
    ParsingError
        If raw MHTML cannot be parsed
    InvalidRootError
        If the archive's root part is missing or not HTML

    """
    final_options = _apply_kwargs(options or ConvertOptions(), kwargs)
    with debug_timer(logger, "Converting MHTML archive"):
        return DomConverter(final_options).convert(mhtml)


def convert_to_html(
    mhtml: Union[MhtmlInput, ParsedArchive, dict],
    options: Optional[ConvertOptions] = None,
    inert_options: Optional[InertOptions] = None,
    **kwargs: Any,
) -> str:
    """Convert an MHTML archive and serialize the result as an HTML string.

    Parameters
    ----------
    mhtml : str, bytes, ParsedArchive or Mapping
        See :func:`convert`
    options : ConvertOptions, optional
        Conversion options
    inert_options : InertOptions, optional
        When given, the document is made inert before serialization
    kwargs : Any
        Conversion option overrides

    Returns
    -------
    str
        ``<!DOCTYPE html>``-prefixed markup

    """
    document = convert(mhtml, options, **kwargs)
    if inert_options is not None:
        document = make_inert(document, inert_options)
    return serialize_document(document)


def convert_file(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[ConvertOptions] = None,
    inert_options: Optional[InertOptions] = None,
) -> Path:
    """Convert an ``.mhtml`` file and write the HTML next to it or to ``output_path``.

    The output file is only written once conversion has succeeded, so a failed
    conversion never leaves a partial file behind.

    Parameters
    ----------
    input_path : str or Path
        Archive to read
    output_path : str or Path, optional
        Destination; defaults to ``input_path`` with an ``.html`` suffix
    options : ConvertOptions, optional
        Conversion options
    inert_options : InertOptions, optional
        When given, the output is made inert

    Returns
    -------
    Path
        The written output path

    Raises
    ------
    FileNotFoundError
        If the input file does not exist
    OutputWriteError
        If the output file cannot be written

    """
    source = Path(input_path)
    destination = Path(output_path) if output_path is not None else source.with_suffix(".html")

    if not source.is_file():
        raise FileNotFoundError(str(source))

    try:
        data = source.read_bytes()
    except OSError as e:
        raise FileNotFoundError(str(source), message=f"Could not read {source}: {e}", original_error=e) from e

    html = convert_to_html(data, options, inert_options)

    try:
        destination.write_text(html, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(str(destination), original_error=e) from e

    logger.info("Wrote %s (%d characters)", destination, len(html))
    return destination
