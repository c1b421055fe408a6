#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/parsers/__init__.py
"""Parsers producing the md2visual input AST."""

from md2visual.parsers.markdown import MarkdownParser, markdown_to_ast

__all__ = ["MarkdownParser", "markdown_to_ast"]
