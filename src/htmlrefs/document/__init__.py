"""Document tree model and the tree-sitter backed builder."""

from __future__ import annotations

from .nodes import (
    AttributeNode,
    DocumentTree,
    ElementNode,
    ElementVisitor,
    HtmlTree,
    TextRange,
    walk,
)
from .treesitter import parse_html

__all__ = [
    "AttributeNode",
    "DocumentTree",
    "ElementNode",
    "ElementVisitor",
    "HtmlTree",
    "TextRange",
    "parse_html",
    "walk",
]
