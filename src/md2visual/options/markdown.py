#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/options/markdown.py
"""Configuration for the Markdown parser."""

from __future__ import annotations

from dataclasses import dataclass, field

from md2visual.constants import (
    DEFAULT_PARSE_FOOTNOTES,
    DEFAULT_PARSE_MATH,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_PARSE_TASK_LISTS,
)
from md2visual.options.base import CloneFrozenMixin


@dataclass(frozen=True)
class MarkdownParserOptions(CloneFrozenMixin):
    """Which Markdown extensions the parser recognises.

    The defaults enable the GitHub-flavoured set. Math and footnotes are
    parsed so that they can be reported as unsupported rather than rendered as
    literal text.

    Parameters
    ----------
    parse_tables : bool, default = True
        Parse GFM pipe tables
    parse_strikethrough : bool, default = True
        Parse ``~~strikethrough~~``
    parse_task_lists : bool, default = True
        Parse ``- [ ]`` / ``- [x]`` task list items
    parse_math : bool, default = True
        Parse ``$inline$`` and ``$$block$$`` math
    parse_footnotes : bool, default = True
        Parse ``[^ref]`` footnotes

    """

    parse_tables: bool = field(default=DEFAULT_PARSE_TABLES, metadata={"help": "Parse GFM pipe tables"})
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH, metadata={"help": "Parse ~~strikethrough~~ text"}
    )
    parse_task_lists: bool = field(default=DEFAULT_PARSE_TASK_LISTS, metadata={"help": "Parse task list checkboxes"})
    parse_math: bool = field(default=DEFAULT_PARSE_MATH, metadata={"help": "Parse $inline$ and $$block$$ math"})
    parse_footnotes: bool = field(default=DEFAULT_PARSE_FOOTNOTES, metadata={"help": "Parse [^ref] footnotes"})

    def mistune_plugins(self) -> list[str]:
        """Return the mistune plugin names matching the enabled flags."""
        plugins = []
        if self.parse_tables:
            plugins.append("table")
        if self.parse_strikethrough:
            plugins.append("strikethrough")
        if self.parse_task_lists:
            plugins.append("task_lists")
        if self.parse_math:
            plugins.append("math")
        if self.parse_footnotes:
            plugins.append("footnotes")
        return plugins
