#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/options/__init__.py
"""Option classes for parsing and compiling."""

from md2visual.options.base import CloneFrozenMixin
from md2visual.options.markdown import MarkdownParserOptions
from md2visual.options.render import RenderConfig, validate_highlight_theme

__all__ = [
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "RenderConfig",
    "validate_highlight_theme",
]
