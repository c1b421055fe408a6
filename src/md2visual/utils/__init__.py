#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/utils/__init__.py
"""Utility modules for the md2visual package."""

from md2visual.utils.decorators import debug_timer, requires_dependencies
from md2visual.utils.packages import check_version_requirement, get_package_version

__all__ = [
    "check_version_requirement",
    "debug_timer",
    "get_package_version",
    "requires_dependencies",
]
