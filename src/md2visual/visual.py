#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/visual.py
"""Visual tree node classes produced by the tree compiler.

The visual tree is the toolkit-agnostic output of :mod:`md2visual.compiler`.
Every node is a frozen dataclass and every child sequence is a tuple, so a
compiled tree is an immutable value that the caller owns outright. A
presentation layer walks it and maps each node onto its own widgets without
re-reading any Markdown.

Block-level nodes:
    - Section (headings and paragraphs), CodeBlock, Quote
    - ListContainer, ListItem, Table, Image, ThematicBreak
    - Unsupported

Inline nodes (children of Section, table cells):
    - TextRun, InlineCode, Image, Unsupported

"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterator, Optional, Tuple, Union

from md2visual.ast.nodes import Alignment
from md2visual.constants import MAX_HEADING_LEVEL, PARAGRAPH_SECTION_LEVEL


@dataclass(frozen=True)
class VisualNode:
    """Base class for all visual nodes."""

    kind: ClassVar[str] = "visual"


# ============================================================================
# Inline visual nodes
# ============================================================================


@dataclass(frozen=True)
class TextRun(VisualNode):
    """Indivisible span of text with a single set of formatting flags.

    Parameters
    ----------
    text : str
        Run text (never empty)
    bold, italic, strike, code : bool, default = False
        Formatting flags
    link_target : str or None, default = None
        URL this run links to. Set per run, so a presentation layer can make
        exactly the anchor text clickable.

    """

    kind: ClassVar[str] = "text_run"

    text: str
    bold: bool = False
    italic: bool = False
    strike: bool = False
    code: bool = False
    link_target: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject empty runs."""
        if not self.text:
            raise ValueError("TextRun text must not be empty")

    @property
    def is_plain_code(self) -> bool:
        """Whether this run is a code span with no other style and no link."""
        return self.code and not (self.bold or self.italic or self.strike) and self.link_target is None


@dataclass(frozen=True)
class InlineCode(VisualNode):
    """Inline code span carrying no other formatting."""

    kind: ClassVar[str] = "inline_code"

    text: str


@dataclass(frozen=True)
class Unsupported(VisualNode):
    """Placeholder for an input node kind with no visual counterpart.

    Parameters
    ----------
    original_kind : str
        Kind tag of the AST node that was not rendered

    """

    kind: ClassVar[str] = "unsupported"

    original_kind: str


@dataclass(frozen=True)
class Image(VisualNode):
    """Local image, resolved and probed.

    Parameters
    ----------
    resolved_path : Path
        Absolute path of the image file
    alt : str, default = ''
        Alternative text
    title : str or None, default = None
        Optional title from the source
    width, height : int or None, default = None
        Pixel dimensions, when known

    """

    kind: ClassVar[str] = "image"

    resolved_path: Path
    alt: str = ""
    title: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


InlineVisual = Union[TextRun, InlineCode, Image, Unsupported]
CellChildren = Tuple[InlineVisual, ...]


# ============================================================================
# Block visual nodes
# ============================================================================


@dataclass(frozen=True)
class Section(VisualNode):
    """Heading (level 1-6) or paragraph (level 0) with its inline content."""

    kind: ClassVar[str] = "section"

    level: int
    children: Tuple[InlineVisual, ...] = ()

    def __post_init__(self) -> None:
        """Validate the section level."""
        if not PARAGRAPH_SECTION_LEVEL <= self.level <= MAX_HEADING_LEVEL:
            raise ValueError(f"Section level must be {PARAGRAPH_SECTION_LEVEL}-{MAX_HEADING_LEVEL}, got {self.level}")

    @property
    def is_heading(self) -> bool:
        return self.level > PARAGRAPH_SECTION_LEVEL

    @property
    def plain_text(self) -> str:
        """Concatenated text of the runs and code spans, without formatting."""
        return "".join(child.text for child in self.children if isinstance(child, (TextRun, InlineCode)))


@dataclass(frozen=True)
class HighlightSpan:
    """Slice of a code block tagged with a syntactic category.

    Parameters
    ----------
    text : str
        The source slice
    highlight_tag : str
        Token category (``"plain"`` when not highlighted)
    color : str or None, default = None
        ``#rrggbb`` foreground colour, when a highlight theme is configured
    bold, italic, underline : bool, default = False
        Font style from the highlight theme

    """

    text: str
    highlight_tag: str
    color: Optional[str] = None
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class CodeBlock(VisualNode):
    """Highlighted code block. The spans partition the source text exactly."""

    kind: ClassVar[str] = "code_block"

    spans: Tuple[HighlightSpan, ...] = ()
    language: Optional[str] = None

    @property
    def text(self) -> str:
        """The original source text."""
        return "".join(span.text for span in self.spans)


@dataclass(frozen=True)
class Quote(VisualNode):
    """Block quote. ``depth`` is 1 for a top-level quote."""

    kind: ClassVar[str] = "quote"

    depth: int
    children: Tuple[VisualNode, ...] = ()

    def __post_init__(self) -> None:
        if self.depth < 1:
            raise ValueError(f"Quote depth must be >= 1, got {self.depth}")


@dataclass(frozen=True)
class ListItem(VisualNode):
    """List item.

    Parameters
    ----------
    children : tuple of VisualNode
        Block content, possibly including nested ``ListContainer`` nodes
    checked : bool or None, default = None
        Task-list checkbox state; None when the item is not a task

    """

    kind: ClassVar[str] = "list_item"

    children: Tuple[VisualNode, ...] = ()
    checked: Optional[bool] = None


@dataclass(frozen=True)
class ListContainer(VisualNode):
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool
        Whether items are numbered
    items : tuple of ListItem
        Items in source order
    start : int or None, default = None
        First number of an ordered list; always None for unordered lists
    depth : int, default = 1
        List nesting level, 1 for a top-level list. Presentation layers use it
        for indentation.

    """

    kind: ClassVar[str] = "list"

    ordered: bool
    items: Tuple[ListItem, ...] = ()
    start: Optional[int] = None
    depth: int = 1


@dataclass(frozen=True)
class Table(VisualNode):
    """Table as a grid of cells.

    Every row, and the header when present, has exactly ``len(columns)``
    cells. Construction with a ragged row raises ``ValueError``.

    Parameters
    ----------
    columns : tuple of Alignment or None
        One alignment per column
    rows : tuple of rows
        Body rows; each row is a tuple of cells, each cell a tuple of inline
        visual nodes
    header : row or None, default = None
        Header row, same shape as a body row

    """

    kind: ClassVar[str] = "table"

    columns: Tuple[Optional[Alignment], ...]
    rows: Tuple[Tuple[CellChildren, ...], ...] = ()
    header: Optional[Tuple[CellChildren, ...]] = None

    def __post_init__(self) -> None:
        """Enforce the rectangular grid."""
        width = len(self.columns)
        if self.header is not None and len(self.header) != width:
            raise ValueError(f"Table header has {len(self.header)} cells, expected {width}")
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"Table row {index} has {len(row)} cells, expected {width}")


@dataclass(frozen=True)
class ThematicBreak(VisualNode):
    """Horizontal separator."""

    kind: ClassVar[str] = "thematic_break"


# ============================================================================
# Tree and result
# ============================================================================


@dataclass(frozen=True)
class VisualTree:
    """Root of a compiled document."""

    children: Tuple[VisualNode, ...] = ()

    def __iter__(self) -> Iterator[VisualNode]:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    @property
    def is_empty(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class CompileResult:
    """Outcome of a successful compile.

    Parameters
    ----------
    tree : VisualTree
        The compiled visual tree
    diagnostics : tuple of (str, int)
        Unsupported kinds and how often each was met, in first-encounter order
    warnings : tuple of str
        Non-fatal repairs the compiler made (only with lenient table columns)

    """

    tree: VisualTree = field(default_factory=VisualTree)
    diagnostics: Tuple[Tuple[str, int], ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def has_unsupported(self) -> bool:
        return bool(self.diagnostics)
