#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/serialization.py
"""JSON serialization for visual trees.

A presentation layer running in another process (or another language) can
consume a compiled tree as plain JSON. Every visual node becomes an object
with a ``node_type`` key holding its ``kind`` and one key per field.

Examples
--------
    >>> from md2visual import render_markdown
    >>> from md2visual.serialization import tree_to_json
    >>> result = render_markdown("# Title")
    >>> print(tree_to_json(result, indent=2))

"""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Union

from md2visual.visual import CompileResult, HighlightSpan, VisualNode, VisualTree


def _serialize_value(value: Any) -> Any:
    if isinstance(value, VisualNode):
        return _serialize_node(value)
    if isinstance(value, HighlightSpan):
        span = {"text": value.text, "highlight_tag": value.highlight_tag}
        if value.color is not None:
            span["color"] = value.color
        for flag in ("bold", "italic", "underline"):
            if getattr(value, flag):
                span[flag] = True
        return span
    if isinstance(value, (tuple, list)):
        return [_serialize_value(item) for item in value]
    if isinstance(value, Path):
        return value.as_posix()
    return value


def _serialize_node(node: VisualNode) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": node.kind}
    for f in fields(node):
        result[f.name] = _serialize_value(getattr(node, f.name))
    return result


def tree_to_dict(tree: Union[VisualTree, CompileResult]) -> dict[str, Any]:
    """Convert a visual tree (or a whole compile result) to a dictionary.

    Parameters
    ----------
    tree : VisualTree or CompileResult
        Compiled tree. For a ``CompileResult`` the diagnostics and warnings
        are included next to the tree.

    Returns
    -------
    dict
        JSON-compatible dictionary

    """
    if isinstance(tree, CompileResult):
        return {
            "tree": tree_to_dict(tree.tree),
            "diagnostics": [{"kind": kind, "count": count} for kind, count in tree.diagnostics],
            "warnings": list(tree.warnings),
        }
    if not isinstance(tree, VisualTree):
        raise TypeError(f"Expected VisualTree or CompileResult, got {type(tree).__name__}")
    return {"node_type": "visual_tree", "children": [_serialize_node(child) for child in tree.children]}


def tree_to_json(tree: Union[VisualTree, CompileResult], indent: int | None = None) -> str:
    """Serialize a visual tree (or compile result) to a JSON string.

    Parameters
    ----------
    tree : VisualTree or CompileResult
        Compiled tree
    indent : int or None, default = None
        JSON indentation; None gives compact output

    Returns
    -------
    str
        JSON text

    """
    return json.dumps(tree_to_dict(tree), indent=indent, ensure_ascii=False)
