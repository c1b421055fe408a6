#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/style.py
"""Inline style resolution and code highlighting.

Two pure transformations used by the tree compiler:

- :func:`resolve_inline` flattens a tree of inline AST nodes (emphasis,
  strong, links, code spans, ...) into a flat sequence of :class:`TextRun`
  values with maximal merging.
- :func:`highlight_code` splits a code block into :class:`HighlightSpan`
  values that partition the source text exactly.

Neither function touches the filesystem. Inline nodes that need I/O (images)
are handed to an ``embed`` callback supplied by the caller.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Generator, Iterable, Optional, Sequence, Tuple, Union

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
from md2visual.constants import DEPS_HIGHLIGHT, HARD_BREAK_TEXT, PLAIN_HIGHLIGHT_TAG, SOFT_BREAK_TEXT
from md2visual.exceptions import HighlightContractError, ParserContractViolation
from md2visual.utils.decorators import requires_dependencies
from md2visual.visual import HighlightSpan, InlineVisual, TextRun, Unsupported

if TYPE_CHECKING:
    from pygments.style import StyleMeta

logger = logging.getLogger(__name__)

EmbedCallback = Callable[[Node], Optional[InlineVisual]]
Highlighter = Callable[[str, Optional[str]], Sequence[Union[HighlightSpan, Tuple[str, str]]]]


@dataclass(frozen=True)
class StyleState:
    """Formatting in effect at a point of the inline tree.

    ``link_id`` identifies the link occurrence, so text from two separate
    links never merges into one run even when the URLs match.
    """

    bold: bool = False
    italic: bool = False
    strike: bool = False
    code: bool = False
    link_target: Optional[str] = None
    link_id: Optional[int] = None

    def to_run(self, text: str) -> TextRun:
        """Build a run carrying this style."""
        return TextRun(
            text=text,
            bold=self.bold,
            italic=self.italic,
            strike=self.strike,
            code=self.code,
            link_target=self.link_target,
        )


class InlineStyleResolver(NodeVisitor):
    """Visitor flattening inline AST content into styled runs.

    Parameters
    ----------
    embed : callable, optional
        Called with every inline node that is not a style wrapper or text
        (images, unsupported inline kinds). Its return value is inserted in
        document order; ``None`` drops the node. Without a callback such nodes
        become :class:`Unsupported`.

    """

    def __init__(self, embed: Optional[EmbedCallback] = None):
        self._embed = embed
        self._output: list[InlineVisual] = []
        self._buffer: list[str] = []
        self._buffer_state: Optional[StyleState] = None
        self._state = StyleState()
        self._link_counter = 0

    def resolve(self, nodes: Iterable[Any], style: Optional[StyleState] = None) -> tuple[InlineVisual, ...]:
        """Resolve a sequence of inline nodes.

        Parameters
        ----------
        nodes : iterable of Node
            Inline content, e.g. ``Paragraph.content``
        style : StyleState, optional
            Style in effect around the content

        Returns
        -------
        tuple of InlineVisual
            Runs and embedded nodes in document order

        Raises
        ------
        ParserContractViolation
            If the content holds a block-level node or a non-node value

        """
        self._output = []
        self._buffer = []
        self._buffer_state = None
        self._state = style or StyleState()

        for node in nodes:
            self._visit(node)
        self._flush()
        return tuple(self._output)

    # ------------------------------------------------------------------
    # Run accumulation
    # ------------------------------------------------------------------

    def _visit(self, node: Any) -> None:
        if not isinstance(node, Node):
            raise ParserContractViolation(type(node).__name__, "inline content")
        if node.has_visual and not node.is_inline:
            raise ParserContractViolation(node.kind, "inline content")
        node.accept(self)

    def _emit_text(self, text: str) -> None:
        if not text:
            return
        if self._buffer_state != self._state:
            self._flush()
            self._buffer_state = self._state
        self._buffer.append(text)

    def _flush(self) -> None:
        if self._buffer and self._buffer_state is not None:
            self._output.append(self._buffer_state.to_run("".join(self._buffer)))
        self._buffer = []
        self._buffer_state = None

    def _emit_embedded(self, node: Node) -> None:
        visual = self._embed(node) if self._embed is not None else Unsupported(original_kind=node.kind)
        if visual is not None:
            self._flush()
            self._output.append(visual)

    @contextmanager
    def _styled(self, **changes: Any) -> Generator[None, None, None]:
        previous = self._state
        self._state = replace(previous, **changes)
        try:
            yield
        finally:
            self._state = previous

    def _visit_children(self, children: Iterable[Any]) -> None:
        for child in children:
            self._visit(child)

    # ------------------------------------------------------------------
    # Inline kinds
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        self._emit_text(node.content)

    def visit_emphasis(self, node: Emphasis) -> None:
        with self._styled(italic=True):
            self._visit_children(node.content)

    def visit_strong(self, node: Strong) -> None:
        with self._styled(bold=True):
            self._visit_children(node.content)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        with self._styled(strike=True):
            self._visit_children(node.content)

    def visit_code(self, node: Code) -> None:
        with self._styled(code=True):
            self._emit_text(node.content)

    def visit_link(self, node: Link) -> None:
        self._link_counter += 1
        with self._styled(link_target=node.url, link_id=self._link_counter):
            if node.content:
                self._visit_children(node.content)
            else:
                self._emit_text(node.title or node.url)

    def visit_line_break(self, node: LineBreak) -> None:
        self._emit_text(SOFT_BREAK_TEXT if node.soft else HARD_BREAK_TEXT)

    def visit_image(self, node: Image) -> None:
        self._emit_embedded(node)

    def generic_visit(self, node: Node) -> None:
        self._emit_embedded(node)

    # ------------------------------------------------------------------
    # Block kinds are never valid here; _visit rejects them first
    # ------------------------------------------------------------------

    def _reject(self, node: Node) -> None:
        raise ParserContractViolation(node.kind, "inline content")

    def visit_document(self, node: Document) -> None:
        self._reject(node)

    def visit_heading(self, node: Heading) -> None:
        self._reject(node)

    def visit_paragraph(self, node: Paragraph) -> None:
        self._reject(node)

    def visit_code_block(self, node: CodeBlock) -> None:
        self._reject(node)

    def visit_block_quote(self, node: BlockQuote) -> None:
        self._reject(node)

    def visit_list(self, node: List) -> None:
        self._reject(node)

    def visit_list_item(self, node: ListItem) -> None:
        self._reject(node)

    def visit_table(self, node: Table) -> None:
        self._reject(node)

    def visit_table_row(self, node: TableRow) -> None:
        self._reject(node)

    def visit_table_cell(self, node: TableCell) -> None:
        self._reject(node)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        self._reject(node)


def resolve_inline(
    nodes: Iterable[Any], style: Optional[StyleState] = None, embed: Optional[EmbedCallback] = None
) -> tuple[InlineVisual, ...]:
    """Flatten inline AST nodes into styled text runs.

    Parameters
    ----------
    nodes : iterable of Node
        Inline content
    style : StyleState, optional
        Style in effect around the content (default: no formatting)
    embed : callable, optional
        Handler for images and other non-text inline nodes

    Returns
    -------
    tuple of InlineVisual
        One ``TextRun`` per maximal span of unchanged style, with embedded
        nodes in between

    Examples
    --------
        >>> from md2visual.ast import Strong, Emphasis, Text
        >>> resolve_inline([Strong(content=[Text("bold "), Emphasis(content=[Text("and italic")])])])
        (TextRun(text='bold ', bold=True, ...), TextRun(text='and italic', bold=True, italic=True, ...))

    """
    return InlineStyleResolver(embed=embed).resolve(nodes, style)


# ============================================================================
# Code highlighting
# ============================================================================


class PygmentsHighlighter:
    """Highlighter backed by Pygments lexers.

    Spans are tagged with the lower-case dotted token type without the
    ``Token.`` prefix (``"keyword"``, ``"name.function"``). With a theme,
    each span also carries the theme's colour and font style.

    Parameters
    ----------
    theme : str, optional
        Pygments style name. An unknown name logs a warning and leaves spans
        uncoloured.

    """

    def __init__(self, theme: Optional[str] = None):
        self.theme = theme
        self._style: Optional[StyleMeta] = None
        self._style_loaded = False

    @requires_dependencies("syntax highlighter", DEPS_HIGHLIGHT)
    def __call__(self, source: str, language: Optional[str]) -> list[HighlightSpan]:
        """Lex ``source`` as ``language``.

        Raises
        ------
        LookupError
            If no language is given or Pygments has no lexer for it

        """
        from pygments.lexers import get_lexer_by_name
        from pygments.util import ClassNotFound

        if not language:
            raise LookupError("No language given")
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound as e:
            raise LookupError(f"No lexer for language {language!r}") from e

        style = self._load_style()
        return [
            self._make_span(value, token_type, style)
            for _, token_type, value in lexer.get_tokens_unprocessed(source)
            if value
        ]

    def _load_style(self) -> Optional[StyleMeta]:
        if self._style_loaded:
            return self._style
        self._style_loaded = True
        if self.theme is None:
            return None

        from pygments.styles import get_style_by_name
        from pygments.util import ClassNotFound

        try:
            self._style = get_style_by_name(self.theme)
        except ClassNotFound:
            logger.warning(f"Unknown highlight theme '{self.theme}', code spans will not be coloured")
        return self._style

    @staticmethod
    def _make_span(text: str, token_type: Any, style: Optional[StyleMeta]) -> HighlightSpan:
        tag = str(token_type)
        tag = tag[len("Token.") :].lower() if tag.startswith("Token.") else PLAIN_HIGHLIGHT_TAG
        if style is None:
            return HighlightSpan(text=text, highlight_tag=tag)

        token_style = style.style_for_token(token_type)
        color = token_style.get("color")
        return HighlightSpan(
            text=text,
            highlight_tag=tag,
            color=f"#{color}" if color else None,
            bold=bool(token_style.get("bold")),
            italic=bool(token_style.get("italic")),
            underline=bool(token_style.get("underline")),
        )


def _coerce_span(item: Any) -> Optional[HighlightSpan]:
    if isinstance(item, HighlightSpan):
        return item
    if isinstance(item, tuple) and len(item) == 2 and all(isinstance(part, str) for part in item):
        return HighlightSpan(text=item[0], highlight_tag=item[1])
    return None


def _span_style(span: HighlightSpan) -> tuple[Any, ...]:
    return (span.highlight_tag, span.color, span.bold, span.italic, span.underline)


def _merge_spans(spans: Iterable[HighlightSpan]) -> tuple[HighlightSpan, ...]:
    merged: list[HighlightSpan] = []
    for span in spans:
        if not span.text:
            continue
        if merged and _span_style(merged[-1]) == _span_style(span):
            merged[-1] = replace(merged[-1], text=merged[-1].text + span.text)
        else:
            merged.append(span)
    return tuple(merged)


def highlight_code(
    source: str,
    language: Optional[str] = None,
    highlighter: Optional[Highlighter] = None,
    strict: bool = False,
) -> tuple[HighlightSpan, ...]:
    """Split code into tagged spans that partition the source exactly.

    Parameters
    ----------
    source : str
        Code block text
    language : str, optional
        Language tag from the code fence
    highlighter : callable, optional
        ``(source, language) -> spans``; defaults to :class:`PygmentsHighlighter`.
        Raising ``LookupError`` means the language is unknown.
    strict : bool, default = False
        Raise instead of falling back to plain text when the highlighter
        output is malformed or does not rebuild the source

    Returns
    -------
    tuple of HighlightSpan
        Spans whose texts concatenate to ``source``. Empty when ``source`` is
        empty. A single ``"plain"`` span when the language is absent or
        unknown, or (unless ``strict``) the highlighter output does not
        rebuild the source.

    Raises
    ------
    HighlightContractError
        With ``strict``, if the highlighter output breaks the partition

    """
    if not source:
        return ()

    plain = (HighlightSpan(text=source, highlight_tag=PLAIN_HIGHLIGHT_TAG),)
    if not language:
        logger.debug("Code block has no language, rendering as plain text")
        return plain

    if highlighter is None:
        highlighter = PygmentsHighlighter()

    try:
        raw_spans = highlighter(source, language)
    except LookupError:
        logger.warning(f"Could not find syntax highlighting for language '{language}'")
        return plain

    coerced = [_coerce_span(item) for item in raw_spans]
    if any(span is None for span in coerced):
        if strict:
            raise HighlightContractError(language)
        logger.warning(f"Highlighter returned malformed spans for language '{language}', using plain text")
        return plain

    spans = _merge_spans(span for span in coerced if span is not None)
    if "".join(span.text for span in spans) != source:
        if strict:
            raise HighlightContractError(language)
        logger.warning(f"Highlighter spans for language '{language}' do not match the source, using plain text")
        return plain
    return spans
