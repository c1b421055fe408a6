#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/parsers/markdown.py
"""Markdown to AST parser.

Uses mistune to tokenize Markdown and maps its token stream onto the node
classes in :mod:`md2visual.ast`. Token types without a dedicated node class
become :class:`~md2visual.ast.ExtensionNode`, so the compiler can report them
instead of losing them.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Optional, Union

from md2visual.ast import (
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
from md2visual.constants import DEPS_MARKDOWN
from md2visual.exceptions import InvalidOptionsError, ParsingError
from md2visual.options.markdown import MarkdownParserOptions
from md2visual.utils.decorators import debug_timer, requires_dependencies

logger = logging.getLogger(__name__)

# Token types that carry no content
_SKIPPED_BLOCK_TOKENS = frozenset({"blank_line"})


class MarkdownParser:
    r"""Parse Markdown text into a :class:`~md2visual.ast.Document`.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Which Markdown extensions to recognise

    Examples
    --------
        >>> parser = MarkdownParser()
        >>> doc = parser.parse("# Hello\n\nThis is **bold**.")
        >>> [child.kind for child in doc.children]
        ['heading', 'paragraph']

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        if options is not None and not isinstance(options, MarkdownParserOptions):
            raise InvalidOptionsError(
                component_name="MarkdownParser",
                expected_type=MarkdownParserOptions,
                received_type=type(options),
            )
        self.options: MarkdownParserOptions = options or MarkdownParserOptions()

    @requires_dependencies("markdown parser", DEPS_MARKDOWN)
    def parse(self, input_data: Union[str, bytes, Path]) -> Document:
        """Parse Markdown input.

        Parameters
        ----------
        input_data : str, bytes or Path
            Markdown text, UTF-8 encoded bytes, or the path of a Markdown file

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        ParsingError
            If the input cannot be read or decoded, or mistune fails

        """
        text = self._load_text(input_data)

        import mistune

        markdown = mistune.create_markdown(plugins=self.options.mistune_plugins(), renderer=None)

        try:
            with debug_timer(logger, "Parsing Markdown"):
                tokens, _state = markdown.parse(text)
        except Exception as e:
            raise ParsingError(
                f"mistune failed to parse input: {e!r}", parsing_stage="tokenize", original_error=e
            ) from e

        if not isinstance(tokens, list):
            raise ParsingError(
                f"Expected a token list from mistune, got {type(tokens).__name__}", parsing_stage="tokenize"
            )
        return Document(children=self._process_tokens(tokens))

    @staticmethod
    def _load_text(input_data: Union[str, bytes, Path]) -> str:
        if isinstance(input_data, str):
            return input_data
        try:
            if isinstance(input_data, Path):
                return input_data.read_text(encoding="utf-8")
            if isinstance(input_data, (bytes, bytearray)):
                return bytes(input_data).decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParsingError(f"Could not read Markdown input: {e}", parsing_stage="load", original_error=e) from e
        raise ParsingError(f"Unsupported input type: {type(input_data).__name__}", parsing_stage="load")

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        """Map one block-level mistune token onto AST node(s)."""
        token_type = token.get("type", "")

        if token_type in _SKIPPED_BLOCK_TOKENS:
            return None
        if token_type == "heading":
            return self._process_heading(token)
        if token_type in ("paragraph", "block_text"):
            # block_text is the paragraph of a tight list item
            return Paragraph(content=self._process_inline_tokens(token.get("children", [])))
        if token_type == "block_code":
            return self._process_code_block(token)
        if token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        if token_type == "list":
            return self._process_list(token)
        if token_type == "table":
            return self._process_table(token)
        if token_type == "thematic_break":
            return ThematicBreak()
        if token_type == "block_html":
            return HTMLBlock(content=token.get("raw", ""))
        if token_type == "block_math":
            return MathBlock(content=token.get("raw", ""))
        if token_type == "footnotes":
            # Collected footnote definitions, appended after the body
            return self._process_tokens(token.get("children", []))
        if token_type in ("footnote_item", "footnote_def"):
            return self._process_footnote(token)

        return self._extension(token, inline=False)

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        attrs = token.get("attrs") or {}
        level = attrs.get("level", 1)
        if not isinstance(level, int) or not 1 <= level <= 6:
            level = 1
        return Heading(level=level, content=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        attrs = token.get("attrs") or {}
        info_string = (attrs.get("info") or "").strip()

        metadata: dict[str, Any] = {}
        language = None
        if info_string:
            metadata["info_string"] = info_string
            language = info_string.split(maxsplit=1)[0]

        return CodeBlock(content=token.get("raw", ""), language=language, metadata=metadata)

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs") or {}
        items = [self._process_list_item(child) for child in token.get("children", []) if isinstance(child, dict)]
        return List(
            ordered=bool(attrs.get("ordered", False)),
            items=items,
            start=attrs.get("start", 1),
            tight=attrs.get("tight", True),
        )

    def _process_list_item(self, token: dict[str, Any]) -> ListItem:
        task_status: Literal["checked", "unchecked"] | None = None
        attrs = token.get("attrs") or {}
        if "checked" in attrs:
            task_status = "checked" if attrs["checked"] else "unchecked"
        return ListItem(children=self._process_tokens(token.get("children", [])), task_status=task_status)

    def _process_table(self, token: dict[str, Any]) -> Table:
        header = None
        rows = []
        alignments: list[Any] = []

        for section in token.get("children", []):
            section_type = section.get("type", "")
            if section_type == "table_head":
                # Header cells are direct children of table_head
                cells = self._process_cells(section.get("children", []))
                header = TableRow(cells=cells, is_header=True)
                alignments = [cell.alignment for cell in cells]
            elif section_type == "table_body":
                for row_token in section.get("children", []):
                    rows.append(TableRow(cells=self._process_cells(row_token.get("children", []))))

        return Table(header=header, rows=rows, alignments=alignments)

    def _process_cells(self, cell_tokens: list[dict[str, Any]]) -> list[TableCell]:
        cells = []
        for cell_token in cell_tokens:
            if cell_token.get("type") != "table_cell":
                continue
            attrs = cell_token.get("attrs") or {}
            cells.append(
                TableCell(
                    content=self._process_inline_tokens(cell_token.get("children", [])),
                    alignment=attrs.get("align"),
                )
            )
        return cells

    def _process_footnote(self, token: dict[str, Any]) -> FootnoteDefinition:
        attrs = token.get("attrs") or {}
        identifier = str(attrs.get("key") or attrs.get("label") or attrs.get("index", ""))
        return FootnoteDefinition(identifier=identifier, content=self._process_tokens(token.get("children", [])))

    def _extension(self, token: dict[str, Any], inline: bool) -> ExtensionNode | None:
        token_type = token.get("type")
        if not token_type:
            return None
        logger.debug(f"Passing through unmodelled mistune token '{token_type}'")
        children = token.get("children")
        processor = self._process_inline_tokens if inline else self._process_tokens
        return ExtensionNode(
            tag=token_type,
            inline=inline,
            children=processor(children) if isinstance(children, list) else [],
            raw=token.get("raw", "") or "",
        )

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            # mistune 3.x leaves empty text tokens between adjacent delimiters
            if token.get("type") == "text" and not token.get("raw"):
                continue
            node = self._process_inline_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Node | None:
        token_type = token.get("type", "")
        handler_map = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "strikethrough": self._handle_strikethrough_token,
            "inline_html": self._handle_inline_html_token,
            "inline_math": self._handle_inline_math_token,
            "footnote_ref": self._handle_footnote_ref_token,
        }
        handler = handler_map.get(token_type)
        if handler is not None:
            return handler(token)
        return self._extension(token, inline=True)

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        return Strikethrough(content=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        attrs = token.get("attrs") or {}
        return Link(
            url=attrs.get("url", ""),
            content=self._process_inline_tokens(token.get("children", [])),
            title=attrs.get("title"),
        )

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        attrs = token.get("attrs") or {}
        # Alt text is in children, not attrs
        alt_text = "".join(_plain_text(child) for child in token.get("children", []))
        return Image(url=attrs.get("url", ""), alt_text=alt_text, title=attrs.get("title"))

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=True)

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        return HTMLInline(content=token.get("raw", ""))

    def _handle_inline_math_token(self, token: dict[str, Any]) -> MathInline:
        return MathInline(content=token.get("raw", ""))

    def _handle_footnote_ref_token(self, token: dict[str, Any]) -> FootnoteReference:
        attrs = token.get("attrs") or {}
        identifier = attrs.get("label") or attrs.get("key") or token.get("raw", "")
        return FootnoteReference(identifier=str(identifier))


def _plain_text(token: dict[str, Any]) -> str:
    if not isinstance(token, dict):
        return ""
    if "children" in token and isinstance(token["children"], list):
        return "".join(_plain_text(child) for child in token["children"])
    return token.get("raw", "")


def markdown_to_ast(
    markdown_content: Union[str, bytes, Path], options: Optional[MarkdownParserOptions] = None
) -> Document:
    r"""Parse Markdown into a Document AST.

    Parameters
    ----------
    markdown_content : str, bytes or Path
        Markdown text, UTF-8 bytes, or a file path
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> from md2visual.parsers.markdown import markdown_to_ast
    >>> doc = markdown_to_ast("# Hello\n\nWorld")
    >>> len(doc.children)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
