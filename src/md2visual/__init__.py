"""md2visual - compile Markdown into a toolkit-agnostic visual tree.

md2visual turns a Markdown document into an immutable tree of visual nodes
(sections, styled text runs, highlighted code blocks, quotes, lists, tables,
images) that a GUI or terminal presentation layer can map one-to-one onto its
own widgets. No rendering toolkit is involved and nothing here draws.

Pipeline
--------
1. :mod:`md2visual.parsers.markdown` parses Markdown (mistune) into the
   :mod:`md2visual.ast` node tree.
2. :mod:`md2visual.compiler` walks that tree and produces a
   :class:`~md2visual.visual.VisualTree`, resolving inline styles
   (:mod:`md2visual.style`), highlighting code (Pygments) and probing local
   images (Pillow).

Examples
--------
    >>> from md2visual import render_markdown
    >>> result = render_markdown("**bold *and italic***")
    >>> [(run.text, run.bold, run.italic) for run in result.tree.children[0].children]
    [('bold ', True, False), ('and italic', True, True)]

Compiling an AST built by hand:

    >>> from md2visual import compile_document
    >>> from md2visual.ast import Document, MathBlock
    >>> compile_document(Document(children=[MathBlock(content="x^2")])).diagnostics
    (('math', 1),)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "md2visual requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from pathlib import Path
from typing import Optional, Union

from md2visual.ast import Document
from md2visual.compiler import TreeCompiler, compile_document
from md2visual.exceptions import (
    DependencyError,
    DepthExceededError,
    HighlightContractError,
    ImageUnavailableError,
    InvalidOptionsError,
    MalformedTableError,
    Md2VisualError,
    ParserContractViolation,
    ParsingError,
    RenderError,
    ValidationError,
)
from md2visual.options import MarkdownParserOptions, RenderConfig
from md2visual.parsers.markdown import MarkdownParser, markdown_to_ast
from md2visual.serialization import tree_to_dict, tree_to_json
from md2visual.style import Highlighter, PygmentsHighlighter, StyleState, highlight_code, resolve_inline
from md2visual.visual import CompileResult, VisualTree


def render_markdown(
    markdown_content: Union[str, bytes, Path],
    config: Optional[RenderConfig] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
    highlighter: Optional[Highlighter] = None,
) -> CompileResult:
    """Parse Markdown and compile it into a visual tree in one step.

    Parameters
    ----------
    markdown_content : str, bytes or Path
        Markdown text, UTF-8 bytes, or the path of a Markdown file
    config : RenderConfig, optional
        Compilation settings
    parser_options : MarkdownParserOptions, optional
        Markdown extensions to recognise (default: GitHub flavoured)
    highlighter : callable, optional
        Code highlighter (default: Pygments)

    Returns
    -------
    CompileResult
        Visual tree, diagnostics and warnings

    Raises
    ------
    ParsingError
        If the Markdown cannot be parsed
    RenderError
        If the visual tree cannot be compiled

    """
    document = markdown_to_ast(markdown_content, parser_options)
    return compile_document(document, config=config, highlighter=highlighter)


__all__ = [
    "__version__",
    # API
    "render_markdown",
    "compile_document",
    "markdown_to_ast",
    "resolve_inline",
    "highlight_code",
    "tree_to_dict",
    "tree_to_json",
    # Classes
    "CompileResult",
    "Document",
    "MarkdownParser",
    "MarkdownParserOptions",
    "PygmentsHighlighter",
    "RenderConfig",
    "StyleState",
    "TreeCompiler",
    "VisualTree",
    # Exceptions
    "DependencyError",
    "DepthExceededError",
    "HighlightContractError",
    "ImageUnavailableError",
    "InvalidOptionsError",
    "MalformedTableError",
    "Md2VisualError",
    "ParserContractViolation",
    "ParsingError",
    "RenderError",
    "ValidationError",
]
