#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Exceptions raised by mhtml2html.

Only conditions that make a conversion impossible are raised. Sloppy part
headers, assets missing from the archive and unknown charsets are logged as
warnings and the conversion carries on.

Exception Hierarchy
-------------------
- Mhtml2HtmlError

  - ValidationError (bad arguments, bad options, incomplete parsed archives)

  - FileError
    - FileNotFoundError (input path does not exist)
    - OutputWriteError (converted document cannot be saved)

  - ParsingError (input is not an MHTML archive we can convert)
    - InvalidRootError (no root part, or the root part is not HTML)

  - DependencyError (an HTML parser backend is missing or too old)

"""

from typing import Any


class Mhtml2HtmlError(Exception):
    """Root of every exception mhtml2html raises.

    Parameters
    ----------
    message : str
        Human-readable description
    original_error : Exception, optional
        Lower-level exception this error wraps

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Mhtml2HtmlError):
    """An argument or option value was rejected before any work started.

    ``parameter_name`` and ``parameter_value`` identify the offending input
    when it is known.
    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(Mhtml2HtmlError):
    """Reading an archive from disk or writing a document to disk failed."""

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """The input archive path does not exist."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        super().__init__(message or f"File not found: {file_path}", file_path=file_path, original_error=original_error)


class OutputWriteError(FileError):
    """The converted HTML could not be saved."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        super().__init__(
            message or f"Cannot write output file: {file_path}", file_path=file_path, original_error=original_error
        )


class ParsingError(Mhtml2HtmlError):
    """The input cannot be read as an MHTML archive.

    Raised when the document has no ``Content-Type`` header, when that header
    carries no ``boundary`` parameter, or when the root part cannot be
    converted.

    Attributes
    ----------
    parsing_stage : str or None
        Short tag for where parsing stopped, e.g. ``"boundary"``

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class InvalidRootError(ParsingError):
    """The archive's root location names no part, or names a non-HTML part.

    Parameters
    ----------
    root_location : str or None
        Root key declared by the archive
    mime_type : str or None
        MIME type of the part found at ``root_location``, if any
    message : str, optional
        Replaces the generated message

    """

    def __init__(self, root_location: str | None, mime_type: str | None = None, message: str | None = None):
        if message is None:
            if mime_type is None:
                message = f"MHTML error: invalid index, no root part found for {root_location!r}"
            else:
                message = f"MHTML error: invalid index, root part {root_location!r} has non-HTML type {mime_type!r}"
        super().__init__(message, parsing_stage="root_lookup")
        self.root_location = root_location
        self.mime_type = mime_type


def _requirement(name: str, spec: str) -> str:
    return f"{name}{spec}" if spec else name


def _describe_dependency_problems(
    component: str,
    missing: list[tuple[str, str]],
    mismatched: list[tuple[str, str, str]],
) -> str:
    lines = []
    if missing:
        wanted = ", ".join(repr(_requirement(name, spec)) for name, spec in missing)
        lines.append(f"{component} requires the following packages: {wanted}")
    if mismatched:
        found = ", ".join(
            f"{name!r} (requires {required}, but {installed} is installed)" for name, required, installed in mismatched
        )
        lines.append(f"{component} has version mismatches: {found}")

    to_install = missing + [(name, required) for name, required, _ in mismatched]
    if to_install:
        quoted = " ".join(f'"{name}{spec}"' if spec else name for name, spec in to_install)
        lines.append(f"Install with: pip install --upgrade {quoted}")
    return "\n".join(lines)


class DependencyError(Mhtml2HtmlError):
    """A package the requested operation needs is missing or has the wrong version.

    Parameters
    ----------
    converter_name : str
        Component that needs the packages, e.g. ``"html"``
    missing_packages : list[tuple[str, str]]
        ``(package_name, version_spec)`` for packages that failed to import
    version_mismatches : list[tuple[str, str, str]], optional
        ``(package_name, required, installed)`` for packages with a bad version
    message : str, optional
        Replaces the generated message, which otherwise ends with a
        ``pip install`` command line
    original_import_error : ImportError, optional
        First ImportError seen while probing

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        version_mismatches = version_mismatches or []
        if message is None:
            message = _describe_dependency_problems(converter_name, missing_packages, version_mismatches)
        super().__init__(message, original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
