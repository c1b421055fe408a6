#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_compiler.py
"""Unit tests for the tree compiler.

Tests cover:
- Mapping of every supported kind
- Quote and list depth tracking and caps
- Table column checks and lenient repair
- Image resolution failures
- Unsupported kinds and diagnostics
- Contract violations and error wrapping

"""

import pytest

from md2visual.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    ExtensionNode,
    Heading,
    HTMLBlock,
    Image,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Paragraph,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from md2visual import visual
from md2visual.compiler import TreeCompiler, compile_document
from md2visual.exceptions import (
    DepthExceededError,
    HighlightContractError,
    ImageUnavailableError,
    InvalidOptionsError,
    MalformedTableError,
    ParserContractViolation,
    RenderError,
)
from md2visual.options import MarkdownParserOptions, RenderConfig
from md2visual.visual import HighlightSpan, InlineCode, Section, TextRun


def _para(text):
    return Paragraph(content=[Text(content=text)])


def _row(*texts):
    return TableRow(cells=[TableCell(content=[Text(content=t)]) for t in texts])


def _nested_quotes(levels):
    node = _para("deep")
    for _ in range(levels):
        node = BlockQuote(children=[node])
    return node


@pytest.mark.unit
class TestBasicMapping:
    """Tests for the kind-to-visual mapping."""

    def test_none_document_is_empty(self):
        """Test None compiles to an empty tree."""
        result = compile_document(None)
        assert result.tree.is_empty
        assert result.diagnostics == ()

    def test_empty_document_is_empty(self):
        """Test a document without children compiles to an empty tree."""
        assert compile_document(Document()).tree == visual.VisualTree()

    def test_heading_and_paragraph_sections(self):
        """Test headings keep their level and paragraphs use level 0."""
        doc = Document(children=[Heading(level=2, content=[Text(content="Title")]), _para("Body")])

        tree = compile_document(doc).tree

        assert tree.children == (
            Section(level=2, children=(TextRun(text="Title"),)),
            Section(level=0, children=(TextRun(text="Body"),)),
        )

    def test_nested_emphasis_in_paragraph(self):
        """Test inline styles resolve inside a paragraph."""
        strong = Strong(content=[Text(content="bold "), Emphasis(content=[Text(content="and italic")])])
        doc = Document(children=[Paragraph(content=[strong])])

        section = compile_document(doc).tree.children[0]

        assert section.children == (
            TextRun(text="bold ", bold=True),
            TextRun(text="and italic", bold=True, italic=True),
        )

    def test_code_span_promoted_to_inline_code(self):
        """Test an unstyled code run becomes InlineCode."""
        doc = Document(children=[Paragraph(content=[Text(content="run "), Code(content="make")])])
        section = compile_document(doc).tree.children[0]
        assert section.children == (TextRun(text="run "), InlineCode(text="make"))

    def test_styled_code_span_stays_a_run(self):
        """Test a bold code span keeps its TextRun."""
        doc = Document(children=[Paragraph(content=[Strong(content=[Code(content="make")])])])
        section = compile_document(doc).tree.children[0]
        assert section.children == (TextRun(text="make", bold=True, code=True),)

    def test_code_promotion_can_be_disabled(self):
        """Test promote_inline_code=False keeps code runs."""
        doc = Document(children=[Paragraph(content=[Code(content="make")])])
        result = compile_document(doc, RenderConfig(promote_inline_code=False))
        assert result.tree.children[0].children == (TextRun(text="make", code=True),)

    def test_thematic_break(self):
        """Test thematic breaks map one-to-one."""
        assert compile_document(Document(children=[ThematicBreak()])).tree.children == (visual.ThematicBreak(),)

    def test_input_document_not_mutated(self):
        """Test compiling leaves the AST untouched."""
        doc = Document(children=[_para("a"), MathBlock(content="x")])
        before = repr(doc)
        compile_document(doc)
        assert repr(doc) == before


@pytest.mark.unit
class TestCodeBlocks:
    """Tests for code block compilation."""

    def test_unknown_language_is_plain(self):
        """Test an unrecognised language yields one plain span."""
        doc = Document(children=[CodeBlock(content="foo bar\n", language="klingon")])

        block = compile_document(doc).tree.children[0]

        assert block.spans == (HighlightSpan(text="foo bar\n", highlight_tag="plain"),)
        assert block.text == "foo bar\n"

    def test_default_language_applies(self):
        """Test default_code_language fills in a missing fence language."""
        calls = []

        def highlighter(source, language):
            calls.append(language)
            return [(source, "text")]

        config = RenderConfig(default_code_language="python")
        block = compile_document(Document(children=[CodeBlock(content="x")]), config, highlighter).tree.children[0]

        assert calls == ["python"]
        assert block.language == "python"

    def test_fence_language_wins_over_default(self):
        """Test the fence language is preferred."""
        config = RenderConfig(default_code_language="python")
        doc = Document(children=[CodeBlock(content="x", language="rust")])
        assert compile_document(doc, config).tree.children[0].language == "rust"

    def test_spans_rebuild_source(self):
        """Test the compiled spans partition the source."""
        source = "for i in range(3):\n    print(i)\n"
        block = compile_document(Document(children=[CodeBlock(content=source, language="python")])).tree.children[0]
        assert block.text == source
        assert len(block.spans) > 1

    def test_partition_failure_raises(self):
        """Test highlighter output that does not rebuild the source is rejected."""

        def highlighter(source, language):
            return [HighlightSpan(source[:-1], "name")]

        doc = Document(children=[CodeBlock(content="abc", language="python")])
        with pytest.raises(HighlightContractError):
            compile_document(doc, highlighter=highlighter)

    def test_malformed_spans_raise(self):
        """Test spans of the wrong shape are rejected."""

        def highlighter(source, language):
            return [source]

        doc = Document(children=[CodeBlock(content="abc", language="python")])
        with pytest.raises(HighlightContractError):
            compile_document(doc, highlighter=highlighter)


@pytest.mark.unit
class TestQuotes:
    """Tests for quote depth."""

    @pytest.mark.parametrize("levels", [1, 2, 5])
    def test_depth_is_nesting_level(self, levels):
        """Test each Quote's depth equals its 1-indexed nesting level."""
        node = compile_document(Document(children=[_nested_quotes(levels)])).tree.children[0]

        for expected in range(1, levels + 1):
            assert isinstance(node, visual.Quote)
            assert node.depth == expected
            node = node.children[0]
        assert node == Section(level=0, children=(TextRun(text="deep"),))

    def test_sibling_quotes_restart_depth(self):
        """Test depth is restored after leaving a quote."""
        doc = Document(children=[_nested_quotes(2), _nested_quotes(1)])
        first, second = compile_document(doc).tree.children
        assert first.depth == 1
        assert second.depth == 1

    def test_depth_cap(self):
        """Test exceeding max_quote_depth raises."""
        with pytest.raises(DepthExceededError) as exc_info:
            compile_document(Document(children=[_nested_quotes(3)]), RenderConfig(max_quote_depth=2))
        assert exc_info.value.depth == 3
        assert exc_info.value.limit == 2

    def test_depth_cap_not_reached(self):
        """Test quotes at the cap compile."""
        result = compile_document(Document(children=[_nested_quotes(2)]), RenderConfig(max_quote_depth=2))
        assert result.tree.children[0].children[0].depth == 2


@pytest.mark.unit
class TestLists:
    """Tests for list compilation."""

    def test_nested_lists(self):
        """Test nested lists become nested containers with increasing depth."""
        inner = List(ordered=True, start=3, items=[ListItem(children=[_para("inner")])])
        outer = List(ordered=False, items=[ListItem(children=[_para("outer"), inner])])

        container = compile_document(Document(children=[outer])).tree.children[0]

        assert container.ordered is False
        assert container.start is None
        assert container.depth == 1
        nested = container.items[0].children[1]
        assert nested.ordered is True
        assert nested.start == 3
        assert nested.depth == 2

    def test_item_order_preserved(self):
        """Test items keep AST order."""
        lst = List(ordered=False, items=[ListItem(children=[_para(t)]) for t in "abc"])
        items = compile_document(Document(children=[lst])).tree.children[0].items
        assert [item.children[0].plain_text for item in items] == ["a", "b", "c"]

    def test_task_status(self):
        """Test task list state maps onto checked."""
        lst = List(
            ordered=False,
            items=[
                ListItem(children=[_para("done")], task_status="checked"),
                ListItem(children=[_para("todo")], task_status="unchecked"),
                ListItem(children=[_para("plain")]),
            ],
        )
        items = compile_document(Document(children=[lst])).tree.children[0].items
        assert [item.checked for item in items] == [True, False, None]

    def test_list_depth_cap(self):
        """Test exceeding max_list_depth raises."""
        inner = List(ordered=False, items=[ListItem(children=[_para("x")])])
        outer = List(ordered=False, items=[ListItem(children=[inner])])
        with pytest.raises(DepthExceededError):
            compile_document(Document(children=[outer]), RenderConfig(max_list_depth=1))

    def test_non_item_child_violates_contract(self):
        """Test a paragraph directly under a list is rejected."""
        with pytest.raises(ParserContractViolation):
            compile_document(Document(children=[List(ordered=False, items=[_para("x")])]))


@pytest.mark.unit
class TestTables:
    """Tests for table compilation."""

    def test_well_formed_table(self):
        """Test every row has exactly k cells."""
        table = Table(
            header=_row("A", "B"),
            rows=[_row("1", "2"), _row("3", "4")],
            alignments=["left", "right"],
        )

        compiled = compile_document(Document(children=[table])).tree.children[0]

        assert compiled.columns == ("left", "right")
        assert compiled.header == ((TextRun(text="A"),), (TextRun(text="B"),))
        assert len(compiled.rows) == 2
        assert all(len(row) == 2 for row in compiled.rows)

    def test_row_mismatch_raises(self):
        """Test a short row raises MalformedTableError with the row details."""
        table = Table(header=_row("A", "B", "C"), rows=[_row("1", "2", "3"), _row("4", "5")])

        with pytest.raises(MalformedTableError) as exc_info:
            compile_document(Document(children=[table]))

        assert (exc_info.value.row_index, exc_info.value.expected, exc_info.value.actual) == (1, 3, 2)

    def test_alignment_falls_back_to_header_cells(self):
        """Test header cell alignment is used when the table has none."""
        header = TableRow(cells=[TableCell(content=[Text(content="A")], alignment="center")])
        compiled = compile_document(Document(children=[Table(header=header, rows=[_row("1")])])).tree.children[0]
        assert compiled.columns == ("center",)

    def test_headerless_table_uses_first_row(self):
        """Test column count comes from the first row without header or alignments."""
        compiled = compile_document(Document(children=[Table(rows=[_row("a", "b")])])).tree.children[0]
        assert compiled.header is None
        assert compiled.columns == (None, None)

    def test_lenient_mode_pads_and_truncates(self):
        """Test table_strict_columns=False repairs rows and records warnings."""
        table = Table(header=_row("A", "B"), rows=[_row("1"), _row("1", "2", "3")])

        result = compile_document(Document(children=[table]), RenderConfig(table_strict_columns=False))

        compiled = result.tree.children[0]
        assert compiled.rows[0] == ((TextRun(text="1"),), ())
        assert compiled.rows[1] == ((TextRun(text="1"),), (TextRun(text="2"),))
        assert len(result.warnings) == 2

    def test_non_row_child_violates_contract(self):
        """Test a paragraph under a table is rejected."""
        with pytest.raises(ParserContractViolation) as exc_info:
            compile_document(Document(children=[Table(header=_row("A"), rows=[_para("x")])]))
        assert exc_info.value.node_kind == "paragraph"

    def test_non_cell_child_violates_contract(self):
        """Test a text node directly in a row is rejected."""
        with pytest.raises(ParserContractViolation):
            compile_document(Document(children=[Table(rows=[TableRow(cells=[Text(content="x")])])]))


@pytest.mark.unit
class TestImages:
    """Tests for image handling in the compiler."""

    def test_missing_image_aborts(self, tmp_path):
        """Test a nonexistent image fails the whole compile."""
        doc = Document(children=[_para("before"), Paragraph(content=[Image(url="nope.png")])])
        with pytest.raises(ImageUnavailableError) as exc_info:
            compile_document(doc, RenderConfig(base_image_directory=tmp_path))
        assert exc_info.value.path == "nope.png"

    def test_inline_image_embedded_in_section(self, png_image):
        """Test an image inside a paragraph lands in the section's children."""
        doc = Document(children=[Paragraph(content=[Text(content="see "), Image(url="pixel.png", alt_text="dot")])])

        section = compile_document(doc, RenderConfig(base_image_directory=png_image.parent)).tree.children[0]

        text, image = section.children
        assert text == TextRun(text="see ")
        assert isinstance(image, visual.Image)
        assert image.resolved_path == png_image
        assert (image.width, image.height) == (40, 30)

    def test_block_level_image(self, png_image):
        """Test an image directly under the document is emitted as a block."""
        doc = Document(children=[Image(url=str(png_image))])
        assert isinstance(compile_document(doc).tree.children[0], visual.Image)

    def test_ignore_mode_skips_io(self):
        """Test image_mode='ignore' drops images without checking files."""
        doc = Document(children=[Paragraph(content=[Text(content="a"), Image(url="nope.png"), Text(content="b")])])
        result = compile_document(doc, RenderConfig(image_mode="ignore"))
        assert result.tree.children[0].children == (TextRun(text="ab"),)

    def test_remote_image_rejected(self):
        """Test remote images raise without a network request."""
        doc = Document(children=[Paragraph(content=[Image(url="https://example.com/a.png")])])
        with pytest.raises(ImageUnavailableError):
            compile_document(doc)

    def test_unstattable_image_is_unavailable(self, tmp_path):
        """Test OS errors on an image path surface as ImageUnavailableError."""
        doc = Document(children=[Paragraph(content=[Image(url="b" * 5000 + ".png")])])
        with pytest.raises(ImageUnavailableError):
            compile_document(doc, RenderConfig(base_image_directory=tmp_path))

    def test_first_image_failure_stops_the_walk(self, tmp_path):
        """Test nothing after the first unavailable image is visited."""
        calls = []

        def highlighter(source, language):
            calls.append(source)
            return [(source, "text")]

        doc = Document(
            children=[
                Paragraph(content=[Image(url="first.png")]),
                CodeBlock(content="x = 1", language="python"),
                Paragraph(content=[Image(url="second.png")]),
            ]
        )

        with pytest.raises(ImageUnavailableError) as exc_info:
            compile_document(doc, RenderConfig(base_image_directory=tmp_path), highlighter=highlighter)

        assert exc_info.value.path == "first.png"
        assert "second.png" not in str(exc_info.value)
        assert calls == []


@pytest.mark.unit
class TestUnsupported:
    """Tests for unsupported kinds and diagnostics."""

    def test_math_block(self):
        """Test a math block becomes Unsupported and is counted once."""
        result = compile_document(Document(children=[MathBlock(content="x^2")]))
        assert result.tree.children == (visual.Unsupported(original_kind="math"),)
        assert result.diagnostics == (("math", 1),)

    def test_diagnostics_in_first_encounter_order(self):
        """Test counts are grouped by kind in first-encounter order."""
        doc = Document(
            children=[
                HTMLBlock(content="<div>"),
                MathBlock(content="a"),
                Paragraph(content=[MathInline(content="b")]),
                HTMLBlock(content="<p>"),
                ExtensionNode(tag="def_list"),
            ]
        )

        result = compile_document(doc)

        assert result.diagnostics == (("html", 2), ("math", 1), ("inline_math", 1), ("def_list", 1))
        assert result.has_unsupported

    def test_unsupported_inside_quote(self):
        """Test compilation continues around unsupported nodes."""
        doc = Document(children=[BlockQuote(children=[MathBlock(content="x"), _para("after")])])
        quote = compile_document(doc).tree.children[0]
        assert quote.children[0] == visual.Unsupported(original_kind="math")
        assert quote.children[1].plain_text == "after"

    def test_extension_node_in_paragraph(self):
        """Test an unknown kind inside inline content becomes Unsupported."""
        doc = Document(children=[Paragraph(content=[Text(content="a"), ExtensionNode(tag="emoji")])])

        result = compile_document(doc)

        assert result.tree.children[0].children == (TextRun(text="a"), visual.Unsupported(original_kind="emoji"))
        assert result.diagnostics == (("emoji", 1),)

    def test_inline_unmodelled_kinds_at_block_level(self):
        """Test unmodelled inline kinds directly under the document are reported."""
        doc = Document(children=[MathInline(content="x"), ExtensionNode(tag="mark", inline=True)])

        result = compile_document(doc)

        assert result.tree.children == (
            visual.Unsupported(original_kind="inline_math"),
            visual.Unsupported(original_kind="mark"),
        )


@pytest.mark.unit
class TestContractAndErrors:
    """Tests for contract violations and error wrapping."""

    def test_non_document_root(self):
        """Test a root that is not a Document is rejected."""
        with pytest.raises(ParserContractViolation, match="document root"):
            compile_document(_para("x"))

    def test_inline_node_at_block_level(self):
        """Test text directly under the document is rejected."""
        with pytest.raises(ParserContractViolation):
            compile_document(Document(children=[Text(content="loose")]))

    def test_non_node_child(self):
        """Test arbitrary objects in the tree are rejected."""
        with pytest.raises(ParserContractViolation, match="dict"):
            compile_document(Document(children=[{"type": "paragraph"}]))

    def test_orphan_list_item(self):
        """Test a list item outside a list is rejected."""
        with pytest.raises(ParserContractViolation):
            compile_document(Document(children=[ListItem(children=[_para("x")])]))

    def test_collaborator_errors_are_wrapped(self):
        """Test unexpected highlighter exceptions surface as RenderError."""

        def highlighter(source, language):
            raise RuntimeError("boom")

        with pytest.raises(RenderError) as exc_info:
            compile_document(Document(children=[CodeBlock(content="x", language="py")]), highlighter=highlighter)

        assert isinstance(exc_info.value.original_error, RuntimeError)

    def test_wrong_config_type(self):
        """Test passing the wrong options class is rejected."""
        with pytest.raises(InvalidOptionsError):
            TreeCompiler(MarkdownParserOptions())

    def test_compiler_is_reusable(self):
        """Test per-call state does not leak between compiles."""
        compiler = TreeCompiler()
        first = compiler.compile(Document(children=[MathBlock(content="x")]))
        second = compiler.compile(Document(children=[_para("y")]))
        assert first.diagnostics == (("math", 1),)
        assert second.diagnostics == ()

    def test_compile_from_inside_highlighter(self):
        """Test a nested compile on the same compiler leaves the outer walk intact."""
        inner_results = []

        def highlighter(source, language):
            inner_results.append(compiler.compile(Document(children=[MathBlock(content="m")])))
            return [(source, "text")]

        compiler = TreeCompiler(highlighter=highlighter)
        inner = BlockQuote(children=[CodeBlock(content="x", language="py"), BlockQuote(children=[_para("deep")])])
        doc = Document(children=[BlockQuote(children=[inner]), HTMLBlock(content="<p>")])

        result = compiler.compile(doc)

        outer = result.tree.children[0]
        middle = outer.children[0]
        assert middle.depth == 2
        assert middle.children[1].depth == 3
        assert result.diagnostics == (("html", 1),)
        assert inner_results[0].diagnostics == (("math", 1),)
