#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_highlight.py
"""Unit tests for code highlighting."""

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from md2visual.exceptions import HighlightContractError
from md2visual.style import PygmentsHighlighter, highlight_code
from md2visual.visual import HighlightSpan


@pytest.mark.unit
class TestHighlightCode:
    """Tests for highlight_code()."""

    def test_python_spans_rebuild_source(self):
        """Test Pygments spans concatenate back to the source."""
        source = "def f(x):\n    return x + 1\n"
        spans = highlight_code(source, "python")

        assert "".join(span.text for span in spans) == source
        assert any(span.highlight_tag == "keyword" for span in spans)
        assert any(span.highlight_tag == "name.function" for span in spans)

    def test_unknown_language_is_single_plain_span(self, caplog):
        """Test an unrecognised language degrades to one plain span with a warning."""
        source = "some ??? text"
        with caplog.at_level(logging.WARNING, logger="md2visual.style"):
            spans = highlight_code(source, "no-such-language-xyz")

        assert spans == (HighlightSpan(text=source, highlight_tag="plain"),)
        assert "no-such-language-xyz" in caplog.text

    def test_no_language_is_plain(self):
        """Test a missing language yields one plain span."""
        assert highlight_code("x = 1", None) == (HighlightSpan(text="x = 1", highlight_tag="plain"),)

    def test_empty_source_yields_no_spans(self):
        """Test empty code yields no spans at all."""
        assert highlight_code("", "python") == ()

    def test_crlf_and_trailing_whitespace_preserved(self):
        """Test line endings and trailing blanks survive highlighting."""
        source = "x = 1\r\ny = 2  \n\n"
        spans = highlight_code(source, "python")
        assert "".join(span.text for span in spans) == source

    def test_custom_highlighter_tuples_are_accepted(self):
        """Test a highlighter may return (text, tag) tuples."""

        def highlighter(source, language):
            return [(source[:3], "keyword"), (source[3:], "text")]

        spans = highlight_code("let x", "custom", highlighter)
        assert spans == (HighlightSpan("let", "keyword"), HighlightSpan(" x", "text"))

    def test_adjacent_same_tag_spans_merge(self):
        """Test neighbouring spans with one tag are merged."""

        def highlighter(source, language):
            return [HighlightSpan("a", "name"), HighlightSpan("b", "name"), HighlightSpan("c", "op")]

        assert highlight_code("abc", "x", highlighter) == (HighlightSpan("ab", "name"), HighlightSpan("c", "op"))

    def test_lookup_error_means_unknown_language(self):
        """Test a highlighter raising LookupError triggers the plain fallback."""

        def highlighter(source, language):
            raise LookupError(language)

        assert highlight_code("abc", "x", highlighter) == (HighlightSpan("abc", "plain"),)

    def test_broken_partition_degrades_to_plain(self, caplog):
        """Test spans that drop text are replaced by a plain span."""

        def highlighter(source, language):
            return [HighlightSpan(source[:-1], "name")]

        with caplog.at_level(logging.WARNING, logger="md2visual.style"):
            spans = highlight_code("abcd", "x", highlighter)

        assert spans == (HighlightSpan("abcd", "plain"),)
        assert "do not match" in caplog.text

    def test_strict_broken_partition_raises(self):
        """Test strict mode raises instead of falling back."""

        def highlighter(source, language):
            return [HighlightSpan(source[:-1], "name")]

        with pytest.raises(HighlightContractError):
            highlight_code("abcd", "x", highlighter, strict=True)

    def test_strict_unknown_language_still_plain(self):
        """Test an unknown language is never an error, even in strict mode."""

        def highlighter(source, language):
            raise LookupError(language)

        assert highlight_code("abc", "x", highlighter, strict=True) == (HighlightSpan("abc", "plain"),)

    def test_same_tag_different_style_not_merged(self):
        """Test neighbouring spans keep their own colour and weight."""

        def highlighter(source, language):
            return [
                HighlightSpan("a", "name", color="#ff0000"),
                HighlightSpan("b", "name", color="#00ff00", bold=True),
                HighlightSpan("c", "name", color="#00ff00", bold=True),
            ]

        assert highlight_code("abc", "x", highlighter) == (
            HighlightSpan("a", "name", color="#ff0000"),
            HighlightSpan("bc", "name", color="#00ff00", bold=True),
        )

    @given(st.text(max_size=200))
    def test_partition_property(self, source):
        """Test spans always rebuild arbitrary source exactly."""
        spans = highlight_code(source, "python")
        assert "".join(span.text for span in spans) == source
        assert all(span.text for span in spans)


@pytest.mark.unit
class TestPygmentsHighlighter:
    """Tests for the Pygments-backed highlighter."""

    def test_unknown_language_raises_lookup_error(self):
        """Test unknown languages surface as LookupError."""
        with pytest.raises(LookupError):
            PygmentsHighlighter()("x", "no-such-language-xyz")

    def test_theme_adds_colours(self):
        """Test a theme resolves colours onto spans."""
        spans = highlight_code("def f(): pass\n", "python", PygmentsHighlighter(theme="monokai"))
        keyword = next(span for span in spans if span.highlight_tag == "keyword")
        assert keyword.color is not None
        assert keyword.color.startswith("#")

    def test_no_theme_leaves_spans_uncoloured(self):
        """Test spans carry no colour without a theme."""
        spans = highlight_code("def f(): pass\n", "python")
        assert all(span.color is None for span in spans)

    def test_unknown_theme_warns_and_falls_back(self, caplog):
        """Test an unknown theme logs a warning and leaves spans uncoloured."""
        with caplog.at_level(logging.WARNING, logger="md2visual.style"):
            spans = highlight_code("x = 1\n", "python", PygmentsHighlighter(theme="not-a-theme"))

        assert all(span.color is None for span in spans)
        assert "not-a-theme" in caplog.text
