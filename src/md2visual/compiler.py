#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/compiler.py
"""Compile a Markdown AST into a visual tree.

The compiler walks a :class:`~md2visual.ast.Document` depth-first and emits
the immutable visual tree defined in :mod:`md2visual.visual`. Inline content
goes through :func:`~md2visual.style.resolve_inline`, code blocks through
:func:`~md2visual.style.highlight_code`, and images through
:func:`~md2visual.images.load_image`.

Compilation is all-or-nothing: the first failure raises a
:class:`~md2visual.exceptions.RenderError` and no partial tree is returned.
Node kinds without a visual counterpart do not fail; they become
``Unsupported`` nodes and are counted in the result's diagnostics.

Each call walks the tree with its own :class:`_TreeWalk`, which carries the
quote and list depth of the node being visited plus the diagnostics of that
call. A :class:`TreeCompiler` holds configuration only.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from md2visual import visual
from md2visual.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
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
from md2visual.ast.visitors import NodeVisitor
from md2visual.constants import PARAGRAPH_SECTION_LEVEL
from md2visual.exceptions import (
    DepthExceededError,
    InvalidOptionsError,
    MalformedTableError,
    ParserContractViolation,
    RenderError,
)
from md2visual.images import load_image
from md2visual.options.render import RenderConfig
from md2visual.style import Highlighter, PygmentsHighlighter, highlight_code, resolve_inline
from md2visual.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


class TreeCompiler:
    """Turns a Document AST into a :class:`~md2visual.visual.VisualTree`.

    The compiler keeps no state between or during calls; every
    :meth:`compile` walks the document with a fresh :class:`_TreeWalk`, so
    one compiler can be reused, shared between threads, or called again from
    inside a highlighter.

    Parameters
    ----------
    config : RenderConfig, optional
        Compilation settings (default: ``RenderConfig()``)
    highlighter : callable, optional
        Code highlighter, see :func:`~md2visual.style.highlight_code`.
        Defaults to a :class:`~md2visual.style.PygmentsHighlighter` using
        ``config.highlight_theme``.

    Examples
    --------
        >>> from md2visual.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text("Title")])])
        >>> result = TreeCompiler().compile(doc)
        >>> result.tree.children[0].level
        1

    """

    def __init__(self, config: Optional[RenderConfig] = None, highlighter: Optional[Highlighter] = None):
        if config is not None and not isinstance(config, RenderConfig):
            raise InvalidOptionsError(
                component_name="TreeCompiler",
                expected_type=RenderConfig,
                received_type=type(config),
            )
        self.config = config or RenderConfig()
        self.highlighter: Highlighter = (
            highlighter if highlighter is not None else PygmentsHighlighter(theme=self.config.highlight_theme)
        )

    def compile(self, document: Optional[Document]) -> visual.CompileResult:
        """Compile a document.

        Parameters
        ----------
        document : Document or None
            Root of the AST. ``None`` yields an empty tree.

        Returns
        -------
        CompileResult
            The visual tree with its diagnostics and warnings

        Raises
        ------
        RenderError
            On the first failure. Subclasses name the cause
            (``MalformedTableError``, ``ImageUnavailableError``,
            ``DepthExceededError``, ``ParserContractViolation``,
            ``HighlightContractError``); anything else a collaborator raises
            is wrapped with ``original_error`` set.

        """
        if document is None:
            return visual.CompileResult()
        if not isinstance(document, Document):
            raise ParserContractViolation(_kind_of(document), "document root")

        walk = _TreeWalk(self.config, self.highlighter)
        try:
            with debug_timer(logger, "Compiling visual tree"):
                tree = document.accept(walk)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(
                f"Unexpected error while compiling visual tree: {e!r}", rendering_stage="compile", original_error=e
            ) from e

        return visual.CompileResult(
            tree=tree,
            diagnostics=tuple(walk.diagnostics.items()),
            warnings=tuple(walk.warnings),
        )


class _TreeWalk(NodeVisitor):
    """State of one compile call.

    ``quote_depth`` and ``list_depth`` are the nesting levels of the node
    being visited. Entering a quote or list raises them for its children and
    restores them on the way out.
    """

    def __init__(self, config: RenderConfig, highlighter: Highlighter):
        self.config = config
        self.highlighter = highlighter
        self.quote_depth = 0
        self.list_depth = 0
        self.diagnostics: dict[str, int] = {}
        self.warnings: list[str] = []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record_unsupported(self, kind: str) -> visual.Unsupported:
        if kind not in self.diagnostics:
            logger.debug(f"No visual counterpart for node kind '{kind}'")
        self.diagnostics[kind] = self.diagnostics.get(kind, 0) + 1
        return visual.Unsupported(original_kind=kind)

    def _compile_block(self, node: Any) -> Optional[visual.VisualNode]:
        if not isinstance(node, Node):
            raise ParserContractViolation(_kind_of(node), "block content")
        if node.has_visual and node.is_inline and not isinstance(node, Image):
            raise ParserContractViolation(node.kind, "block content")
        return node.accept(self)

    def _compile_blocks(self, nodes: list[Node]) -> tuple[visual.VisualNode, ...]:
        compiled = (self._compile_block(node) for node in nodes)
        return tuple(node for node in compiled if node is not None)

    def _embed_inline(self, node: Node) -> Optional[visual.InlineVisual]:
        if isinstance(node, Image):
            return self._compile_image(node)
        return self._record_unsupported(node.kind)

    def _compile_inline(self, content: list[Node]) -> tuple[visual.InlineVisual, ...]:
        runs = resolve_inline(content, embed=self._embed_inline)
        if not self.config.promote_inline_code:
            return runs
        return tuple(
            visual.InlineCode(text=run.text) if isinstance(run, visual.TextRun) and run.is_plain_code else run
            for run in runs
        )

    def _compile_image(self, node: Image) -> Optional[visual.Image]:
        if self.config.image_mode == "ignore":
            logger.debug(f"Skipping image '{node.url}' (image_mode='ignore')")
            return None
        return load_image(node, self.config.base_image_directory)

    def _row_cells(self, row: Any, context: str) -> list[TableCell]:
        if not isinstance(row, TableRow):
            raise ParserContractViolation(_kind_of(row), context)
        for cell in row.cells:
            if not isinstance(cell, TableCell):
                raise ParserContractViolation(_kind_of(cell), "table row")
        return row.cells

    def _fit_row(self, cells: list[TableCell], index: int, width: int) -> list[Optional[TableCell]]:
        if len(cells) == width:
            return list(cells)
        if self.config.table_strict_columns:
            raise MalformedTableError(row_index=index, expected=width, actual=len(cells))

        message = f"Table row {index} has {len(cells)} cells, expected {width}; "
        message += "padded with empty cells" if len(cells) < width else "extra cells dropped"
        logger.warning(message)
        self.warnings.append(message)
        fitted: list[Optional[TableCell]] = list(cells[:width])
        fitted.extend([None] * (width - len(fitted)))
        return fitted

    def _compile_row(self, cells: list[Optional[TableCell]]) -> tuple[visual.CellChildren, ...]:
        return tuple(self._compile_inline(cell.content) if cell is not None else () for cell in cells)

    # ------------------------------------------------------------------
    # Block kinds
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> visual.VisualTree:
        return visual.VisualTree(children=self._compile_blocks(node.children))

    def visit_heading(self, node: Heading) -> visual.Section:
        return visual.Section(level=node.level, children=self._compile_inline(node.content))

    def visit_paragraph(self, node: Paragraph) -> visual.Section:
        return visual.Section(level=PARAGRAPH_SECTION_LEVEL, children=self._compile_inline(node.content))

    def visit_code_block(self, node: CodeBlock) -> visual.CodeBlock:
        language = node.language or self.config.default_code_language
        spans = highlight_code(node.content, language, self.highlighter, strict=True)
        return visual.CodeBlock(spans=spans, language=language)

    def visit_block_quote(self, node: BlockQuote) -> visual.Quote:
        depth = self.quote_depth + 1
        limit = self.config.max_quote_depth
        if limit is not None and depth > limit:
            raise DepthExceededError("quote", depth, limit)

        saved_depth = self.quote_depth
        self.quote_depth = depth
        try:
            children = self._compile_blocks(node.children)
        finally:
            self.quote_depth = saved_depth
        return visual.Quote(depth=depth, children=children)

    def visit_list(self, node: List) -> visual.ListContainer:
        depth = self.list_depth + 1
        limit = self.config.max_list_depth
        if limit is not None and depth > limit:
            raise DepthExceededError("list", depth, limit)

        saved_depth = self.list_depth
        self.list_depth = depth
        try:
            items = []
            for item in node.items:
                if not isinstance(item, ListItem):
                    raise ParserContractViolation(_kind_of(item), "list")
                items.append(self._compile_list_item(item))
        finally:
            self.list_depth = saved_depth

        return visual.ListContainer(
            ordered=node.ordered,
            items=tuple(items),
            start=node.start if node.ordered else None,
            depth=depth,
        )

    def _compile_list_item(self, node: ListItem) -> visual.ListItem:
        checked = None if node.task_status is None else node.task_status == "checked"
        return visual.ListItem(children=self._compile_blocks(node.children), checked=checked)

    def visit_list_item(self, node: ListItem) -> Any:
        raise ParserContractViolation(node.kind, "block content outside a list")

    def visit_table(self, node: Table) -> visual.Table:
        header_cells = self._row_cells(node.header, "table header") if node.header is not None else None
        body = [self._row_cells(row, "table") for row in node.rows]

        if header_cells is not None:
            width = len(header_cells)
        elif node.alignments:
            width = len(node.alignments)
        elif body:
            width = len(body[0])
        else:
            width = 0

        columns = []
        for index in range(width):
            alignment = node.alignments[index] if index < len(node.alignments) else None
            if alignment is None and header_cells is not None:
                alignment = header_cells[index].alignment
            columns.append(alignment)

        fitted_rows = [self._fit_row(cells, index, width) for index, cells in enumerate(body)]

        return visual.Table(
            columns=tuple(columns),
            header=self._compile_row(list(header_cells)) if header_cells is not None else None,
            rows=tuple(self._compile_row(cells) for cells in fitted_rows),
        )

    def visit_table_row(self, node: TableRow) -> Any:
        raise ParserContractViolation(node.kind, "block content outside a table")

    def visit_table_cell(self, node: TableCell) -> Any:
        raise ParserContractViolation(node.kind, "block content outside a table row")

    def visit_thematic_break(self, node: ThematicBreak) -> visual.ThematicBreak:
        return visual.ThematicBreak()

    def visit_image(self, node: Image) -> Optional[visual.Image]:
        return self._compile_image(node)

    def generic_visit(self, node: Node) -> visual.Unsupported:
        return self._record_unsupported(node.kind)

    # ------------------------------------------------------------------
    # Inline kinds are handled by the style resolver; reaching these
    # means an inline node was dispatched at block level
    # ------------------------------------------------------------------

    def _reject_inline(self, node: Node) -> Any:
        raise ParserContractViolation(node.kind, "block content")

    def visit_text(self, node: Text) -> Any:
        return self._reject_inline(node)

    def visit_emphasis(self, node: Emphasis) -> Any:
        return self._reject_inline(node)

    def visit_strong(self, node: Strong) -> Any:
        return self._reject_inline(node)

    def visit_strikethrough(self, node: Strikethrough) -> Any:
        return self._reject_inline(node)

    def visit_code(self, node: Code) -> Any:
        return self._reject_inline(node)

    def visit_link(self, node: Link) -> Any:
        return self._reject_inline(node)

    def visit_line_break(self, node: LineBreak) -> Any:
        return self._reject_inline(node)


def _kind_of(value: Any) -> str:
    return value.kind if isinstance(value, Node) else type(value).__name__


def compile_document(
    document: Optional[Document],
    config: Optional[RenderConfig] = None,
    highlighter: Optional[Highlighter] = None,
) -> visual.CompileResult:
    """Compile a Document AST into a visual tree.

    Parameters
    ----------
    document : Document or None
        Root of the AST
    config : RenderConfig, optional
        Compilation settings
    highlighter : callable, optional
        Code highlighter (default: Pygments)

    Returns
    -------
    CompileResult
        Visual tree, unsupported-kind diagnostics and repair warnings

    Raises
    ------
    RenderError
        If compilation fails; no partial tree is returned

    """
    return TreeCompiler(config=config, highlighter=highlighter).compile(document)
