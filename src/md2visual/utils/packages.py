#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/utils/packages.py
"""Helpers for checking which optional packages are installed."""

from __future__ import annotations

import importlib
from importlib import metadata
from typing import Optional, Sequence, Tuple

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version


def get_package_version(package_name: str) -> Optional[str]:
    """Return the installed distribution version, or None if not installed."""
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> Tuple[bool, Optional[str]]:
    """Check if an installed distribution satisfies a version specifier.

    Parameters
    ----------
    package_name : str
        Distribution name as published on the index (e.g. "Pillow")
    version_spec : str
        PEP 440 specifier such as ">=9.0.0"

    Returns
    -------
    tuple
        (meets_requirement, installed_version). An unparsable installed
        version is accepted as-is.

    """
    installed_version = get_package_version(package_name)
    if not installed_version:
        return False, None

    try:
        return Version(installed_version) in SpecifierSet(version_spec), installed_version
    except (InvalidSpecifier, InvalidVersion):
        return True, installed_version


def find_unmet_requirements(
    packages: Sequence[Tuple[str, str, str]],
) -> Tuple[list[tuple[str, str]], list[tuple[str, str, str]], ImportError | None]:
    """Split requirements into missing packages and version mismatches.

    Parameters
    ----------
    packages : sequence of tuple
        (install_name, import_name, version_spec) triples

    Returns
    -------
    tuple
        (missing, version_mismatches, first_import_error)

    """
    missing: list[tuple[str, str]] = []
    mismatches: list[tuple[str, str, str]] = []
    first_error: ImportError | None = None

    for install_name, import_name, version_spec in packages:
        try:
            importlib.import_module(import_name)
        except ImportError as e:
            missing.append((install_name, version_spec))
            if first_error is None:
                first_error = e
            continue

        if version_spec:
            meets, installed = check_version_requirement(install_name, version_spec)
            if not meets:
                mismatches.append((install_name, version_spec, installed or "unknown"))

    return missing, mismatches, first_error
