#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/options/render.py
"""Configuration for compiling an AST into a visual tree."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, get_args

from md2visual.constants import (
    DEFAULT_IMAGE_MODE,
    DEFAULT_PROMOTE_INLINE_CODE,
    DEFAULT_TABLE_STRICT_COLUMNS,
    ImageMode,
)
from md2visual.options.base import CloneFrozenMixin


def validate_highlight_theme(theme_name: str) -> str:
    """Check that ``theme_name`` names an installed Pygments style.

    Parameters
    ----------
    theme_name : str
        Style name, e.g. ``"monokai"``

    Returns
    -------
    str
        The validated theme name

    Raises
    ------
    ValueError
        If no such style exists. The message lists close matches.

    """
    from pygments.styles import get_all_styles

    available_themes = list(get_all_styles())
    if theme_name not in available_themes:
        suggestions = sorted(difflib.get_close_matches(theme_name, available_themes))
        hint = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
        raise ValueError(f"Invalid highlight_theme '{theme_name}'.{hint}")
    return theme_name


@dataclass(frozen=True)
class RenderConfig(CloneFrozenMixin):
    """Settings for the tree compiler.

    Parameters
    ----------
    base_image_directory : Path or None, default = None
        Directory relative image paths resolve against. None means the
        current working directory at compile time.
    default_code_language : str or None, default = None
        Language used for code blocks whose fence carries no language
    max_quote_depth : int or None, default = None
        Maximum block quote nesting; None means unlimited
    max_list_depth : int or None, default = None
        Maximum list nesting; None means unlimited
    table_strict_columns : bool, default = True
        Raise ``MalformedTableError`` when a row's cell count differs from the
        column count. When False, rows are padded or truncated and a warning
        is recorded on the compile result.
    image_mode : {"resolve", "ignore"}, default = "resolve"
        "resolve" checks every image on disk; "ignore" drops images from the
        visual tree without touching the filesystem
    highlight_theme : str or None, default = None
        Pygments style used to colour code spans. None leaves spans uncoloured.
    promote_inline_code : bool, default = True
        Emit ``InlineCode`` for code spans that carry no other style, instead
        of a ``TextRun`` with the code flag

    """

    base_image_directory: Optional[Path] = field(
        default=None,
        metadata={"help": "Directory relative image paths are resolved against (default: working directory)"},
    )
    default_code_language: Optional[str] = field(
        default=None,
        metadata={"help": "Language assumed for code blocks without a language tag"},
    )
    max_quote_depth: Optional[int] = field(
        default=None,
        metadata={"help": "Maximum block quote nesting depth (None for unlimited)"},
    )
    max_list_depth: Optional[int] = field(
        default=None,
        metadata={"help": "Maximum list nesting depth (None for unlimited)"},
    )
    table_strict_columns: bool = field(
        default=DEFAULT_TABLE_STRICT_COLUMNS,
        metadata={"help": "Fail on table rows whose cell count differs from the header"},
    )
    image_mode: ImageMode = field(
        default=DEFAULT_IMAGE_MODE,
        metadata={"help": "How images are handled: 'resolve' checks files on disk, 'ignore' drops them"},
    )
    highlight_theme: Optional[str] = field(
        default=None,
        metadata={"help": "Pygments style used to colour highlighted code (e.g. 'monokai')"},
    )
    promote_inline_code: bool = field(
        default=DEFAULT_PROMOTE_INLINE_CODE,
        metadata={"help": "Emit InlineCode nodes for unstyled code spans"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If a depth cap is not positive, the image mode is unknown, or the
            highlight theme is not an installed Pygments style

        """
        if self.base_image_directory is not None and not isinstance(self.base_image_directory, Path):
            object.__setattr__(self, "base_image_directory", Path(self.base_image_directory))

        for name in ("max_quote_depth", "max_list_depth"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be a positive integer or None, got {value}")

        if self.image_mode not in get_args(ImageMode):
            raise ValueError(f"image_mode must be one of {get_args(ImageMode)}, got {self.image_mode!r}")

        if self.highlight_theme is not None:
            validate_highlight_theme(self.highlight_theme)
