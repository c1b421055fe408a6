#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

Nodes dispatch to ``visit_<name>`` through :meth:`Node.accept`. Kinds with a
counterpart in the visual vocabulary have abstract visit methods, so a visitor
that forgets one fails at instantiation. Kinds without a counterpart fall back
to :meth:`NodeVisitor.generic_visit`, which is the single place a visitor
decides what to do with everything it does not model.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from md2visual.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    ExtensionNode,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Examples
    --------
    A visitor that collects the kinds it has no handler for:

        >>> class KindCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.kinds = []
        ...
        ...     def generic_visit(self, node):
        ...         self.kinds.append(node.kind)
        ...     # ... visit_* methods for the supported kinds

    """

    # Block-level kinds

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    # Inline kinds

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""

    @abstractmethod
    def visit_strikethrough(self, node: Strikethrough) -> Any:
        """Visit a Strikethrough node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit an inline Code node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""

    # Kinds without a visual counterpart

    def visit_html_block(self, node: HTMLBlock) -> Any:
        return self.generic_visit(node)

    def visit_html_inline(self, node: HTMLInline) -> Any:
        return self.generic_visit(node)

    def visit_math_block(self, node: MathBlock) -> Any:
        return self.generic_visit(node)

    def visit_math_inline(self, node: MathInline) -> Any:
        return self.generic_visit(node)

    def visit_footnote_reference(self, node: FootnoteReference) -> Any:
        return self.generic_visit(node)

    def visit_footnote_definition(self, node: FootnoteDefinition) -> Any:
        return self.generic_visit(node)

    def visit_extension(self, node: ExtensionNode) -> Any:
        return self.generic_visit(node)

    def generic_visit(self, node: Node) -> Any:
        """Fallback for node kinds without a dedicated visit method.

        Parameters
        ----------
        node : Node
            The node to visit

        Returns
        -------
        Any
            Result of processing (default: None)

        """
        return None
