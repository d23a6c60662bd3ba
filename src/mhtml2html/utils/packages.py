"""Utility functions for checking installed packages."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/mhtml2html/utils/packages.py
from __future__ import annotations

from importlib import metadata
from typing import Optional, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version


def get_package_version(package_name: str) -> Optional[str]:
    """Get the installed version of a distribution, or None if not installed.

    Parameters
    ----------
    package_name : str
        Distribution name as used by pip (e.g. ``beautifulsoup4``)

    """
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> Tuple[bool, Optional[str]]:
    """Check if an installed package meets a version requirement.

    Parameters
    ----------
    package_name : str
        Name of the package
    version_spec : str
        Version specification (e.g., ">=4.12.0")

    Returns
    -------
    tuple
        (meets_requirement, installed_version)

    """
    installed_version = get_package_version(package_name)
    if not installed_version:
        return False, None

    try:
        meets = Version(installed_version) in SpecifierSet(version_spec)
    except (InvalidSpecifier, InvalidVersion):
        return False, installed_version
    return meets, installed_version
