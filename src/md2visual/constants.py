#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/constants.py
"""Constants and default values shared across md2visual."""

from __future__ import annotations

from typing import Literal

# Dependency specs as (install_name, import_name, version_spec)
DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_HIGHLIGHT = [("Pygments", "pygments", ">=2.15.0")]
DEPS_IMAGE = [("Pillow", "PIL", ">=9.0.0")]

ImageMode = Literal["resolve", "ignore"]

# Tag used for code that could not be (or was not) highlighted
PLAIN_HIGHLIGHT_TAG = "plain"

# Heading levels map to a Section level; paragraphs use level 0
PARAGRAPH_SECTION_LEVEL = 0
MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6

# Render configuration defaults
DEFAULT_TABLE_STRICT_COLUMNS = True
DEFAULT_IMAGE_MODE: ImageMode = "resolve"
DEFAULT_PROMOTE_INLINE_CODE = True

# Markdown parser defaults (GitHub flavoured)
DEFAULT_PARSE_TABLES = True
DEFAULT_PARSE_STRIKETHROUGH = True
DEFAULT_PARSE_TASK_LISTS = True
DEFAULT_PARSE_MATH = True
DEFAULT_PARSE_FOOTNOTES = True

# Only plain paths and file:// URLs are resolved. Windows drive letters look
# like a one-letter scheme and are excluded by the length check.
LOCAL_IMAGE_SCHEMES = frozenset({"", "file"})
MIN_URL_SCHEME_LENGTH = 2

HARD_BREAK_TEXT = "\n"
SOFT_BREAK_TEXT = " "
