#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/ast/nodes.py
"""AST node classes for the parsed Markdown input.

This module defines the node hierarchy the tree compiler consumes. A Markdown
parser (see :mod:`md2visual.parsers.markdown`) produces these nodes; the
compiler only ever reads them.

Every node class carries a ``kind`` tag. The tag is what ends up in an
``Unsupported`` visual node and in the compile diagnostics when a node has no
counterpart in the visual vocabulary.

Node Hierarchy
--------------
Block-level nodes:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak

Inline nodes:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, Image, LineBreak

Kinds without a visual counterpart (compiled to ``Unsupported``):
    - HTMLBlock, HTMLInline, MathBlock, MathInline
    - FootnoteReference, FootnoteDefinition
    - ExtensionNode (any other tag a parser wants to pass through)

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Optional

Alignment = Literal["left", "center", "right"]
TaskStatus = Literal["checked", "unchecked"]


class Node(ABC):
    """Base class for all AST nodes.

    Attributes
    ----------
    kind : str
        Stable tag naming the node kind (e.g. ``"heading"``, ``"math"``)
    is_inline : bool
        Whether the node belongs in inline content (paragraph text) rather
        than at block level
    has_visual : bool
        Whether the kind has a visual counterpart. Only such kinds are checked
        for block or inline position; the rest are reported wherever they occur

    """

    kind: ClassVar[str] = "node"
    is_inline: ClassVar[bool] = False
    has_visual: ClassVar[bool] = True

    metadata: dict[str, Any]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata

    """

    kind: ClassVar[str] = "root"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    content : list of Node, default = empty list
        Inline nodes representing heading text
    metadata : dict, default = empty dict
        Heading metadata

    """

    kind: ClassVar[str] = "heading"

    level: int
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    kind: ClassVar[str] = "paragraph"

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    content : str
        Code content, verbatim
    language : str or None, default = None
        Language tag from the fence info string
    metadata : dict, default = empty dict
        Code block metadata (the parser stores the full info string here)

    """

    kind: ClassVar[str] = "code"

    content: str
    language: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements."""

    kind: ClassVar[str] = "blockquote"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists, as resolved by the parser
    tight : bool, default = True
        Whether list is tight (no blank lines between items)
    metadata : dict, default = empty dict
        List metadata

    """

    kind: ClassVar[str] = "list"

    ordered: bool
    items: list[Node] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item node.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the item; nested lists appear here
    task_status : {"checked", "unchecked"} or None, default = None
        GFM task-list checkbox state, if the item is a task

    """

    kind: ClassVar[str] = "list_item"

    children: list[Node] = field(default_factory=list)
    task_status: Optional[TaskStatus] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """Table node (GFM extension).

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Body rows
    header : TableRow or None, default = None
        Header row; its cell count defines the column count
    alignments : list of Alignment or None, default = empty list
        Column alignments from the delimiter row
    metadata : dict, default = empty dict
        Table metadata

    """

    kind: ClassVar[str] = "table"

    rows: list[Node] = field(default_factory=list)
    header: Optional[Node] = None
    alignments: list[Alignment | None] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row node."""

    kind: ClassVar[str] = "table_row"

    cells: list[Node] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell node holding inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes in the cell
    alignment : Alignment or None, default = None
        Cell alignment as reported by the parser

    """

    kind: ClassVar[str] = "table_cell"

    content: list[Node] = field(default_factory=list)
    alignment: Alignment | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    kind: ClassVar[str] = "thematic_break"

    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node."""

    kind: ClassVar[str] = "text"
    is_inline: ClassVar[bool] = True

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasis (italic) wrapper."""

    kind: ClassVar[str] = "emphasis"
    is_inline: ClassVar[bool] = True

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) wrapper."""

    kind: ClassVar[str] = "strong"
    is_inline: ClassVar[bool] = True

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strong``."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough wrapper (GFM extension)."""

    kind: ClassVar[str] = "strikethrough"
    is_inline: ClassVar[bool] = True

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strikethrough``."""
        return visitor.visit_strikethrough(self)


@dataclass
class Code(Node):
    """Inline code span.

    Parameters
    ----------
    content : str
        Code text, verbatim (never interpreted as Markdown)

    """

    kind: ClassVar[str] = "inline_code"
    is_inline: ClassVar[bool] = True

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink wrapper.

    Parameters
    ----------
    url : str
        Link target
    content : list of Node, default = empty list
        Inline nodes forming the anchor text
    title : str or None, default = None
        Optional link title

    """

    kind: ClassVar[str] = "link"
    is_inline: ClassVar[bool] = True

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image reference.

    Images are normally inline (inside a paragraph), but the compiler also
    accepts them at block level.

    Parameters
    ----------
    url : str
        Image path as written in the document
    alt_text : str, default = ''
        Alternative text description
    title : str or None, default = None
        Optional image title
    width : int or None, default = None
        Width in pixels, when the source states it
    height : int or None, default = None
        Height in pixels, when the source states it

    """

    kind: ClassVar[str] = "image"
    is_inline: ClassVar[bool] = True

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_image``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Line break node.

    Parameters
    ----------
    soft : bool, default = False
        True for soft breaks (newline in source), False for hard breaks

    """

    kind: ClassVar[str] = "break"
    is_inline: ClassVar[bool] = True

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


# ============================================================================
# Kinds without a visual counterpart
# ============================================================================


@dataclass
class HTMLBlock(Node):
    """Raw HTML block. Never interpreted."""

    kind: ClassVar[str] = "html"
    has_visual: ClassVar[bool] = False

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_html_block(self)


@dataclass
class HTMLInline(Node):
    """Raw inline HTML. Never interpreted."""

    kind: ClassVar[str] = "inline_html"
    is_inline: ClassVar[bool] = True
    has_visual: ClassVar[bool] = False

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_html_inline(self)


@dataclass
class MathBlock(Node):
    """Display math block (``$$ ... $$``)."""

    kind: ClassVar[str] = "math"
    has_visual: ClassVar[bool] = False

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_math_block(self)


@dataclass
class MathInline(Node):
    """Inline math (``$ ... $``)."""

    kind: ClassVar[str] = "inline_math"
    is_inline: ClassVar[bool] = True
    has_visual: ClassVar[bool] = False

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_math_inline(self)


@dataclass
class FootnoteReference(Node):
    """Footnote reference (``[^label]``)."""

    kind: ClassVar[str] = "footnote_reference"
    is_inline: ClassVar[bool] = True
    has_visual: ClassVar[bool] = False

    identifier: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_footnote_reference(self)


@dataclass
class FootnoteDefinition(Node):
    """Footnote definition block."""

    kind: ClassVar[str] = "footnote_definition"
    has_visual: ClassVar[bool] = False

    identifier: str
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_footnote_definition(self)


@dataclass
class ExtensionNode(Node):
    """Node of a kind this package does not model.

    Parsers use this to pass through syntax they recognise but that has no
    dedicated class (definition lists, front matter, directives, ...), so the
    walk can report it instead of dropping it.

    Parameters
    ----------
    tag : str
        Kind tag reported in diagnostics
    inline : bool, default = False
        Whether the node appeared in inline content
    children : list of Node, default = empty list
        Child nodes, kept for consumers that want to inspect them
    raw : str, default = ''
        Raw source text, when available

    """

    has_visual: ClassVar[bool] = False

    tag: str
    inline: bool = False
    children: list[Node] = field(default_factory=list)
    raw: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Reject empty tags."""
        if not self.tag:
            raise ValueError("ExtensionNode tag must be a non-empty string")

    # Instance-level overrides of the class tags
    @property  # type: ignore[override]
    def kind(self) -> str:  # noqa: D102
        return self.tag

    @property  # type: ignore[override]
    def is_inline(self) -> bool:  # noqa: D102
        return self.inline

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_extension``."""
        return visitor.visit_extension(self)
