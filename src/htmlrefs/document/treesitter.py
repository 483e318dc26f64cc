"""Build :class:`~htmlrefs.document.nodes.DocumentTree` from HTML via tree-sitter."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence

from htmlrefs.core.logging import get_logger
from htmlrefs.errors import ParserUnavailableError

from .nodes import AttributeNode, DocumentTree, ElementNode, TextRange

__all__ = ["parse_html"]

_LOGGER = get_logger(__name__, component="html-tree")

_ELEMENT_TYPES = frozenset({"element", "script_element", "style_element"})
_TAG_TYPES = ("start_tag", "self_closing_tag")
_LEAF_TYPES = frozenset(
    {
        *_TAG_TYPES,
        "end_tag",
        "erroneous_end_tag",
        "text",
        "raw_text",
        "comment",
        "doctype",
    }
)


@lru_cache(maxsize=1)
def _load_parser() -> Any:
    try:
        import tree_sitter_html  # type: ignore[import-untyped]
        from tree_sitter import Language, Parser
    except ImportError as exc:
        raise ParserUnavailableError(
            "HTML parsing requires the 'tree-sitter' and 'tree-sitter-html' "
            "packages."
        ) from exc

    try:
        return Parser(Language(tree_sitter_html.language()))
    except Exception as exc:  # pragma: no cover - incompatible grammar build
        raise ParserUnavailableError(
            f"tree-sitter parser for 'html' is unavailable: {exc}"
        ) from exc


def parse_html(text: str, *, version: int = 0) -> DocumentTree:
    """Parse ``text`` and return its element tree with character offsets.

    Raises:
        ParserUnavailableError: If the tree-sitter HTML grammar is missing.
    """

    parser = _load_parser()
    source_bytes = text.encode("utf-8")
    tree = parser.parse(source_bytes)
    builder = _TreeBuilder(text=text, byte_offsets=_byte_offsets(text))
    roots = builder.build(tree.root_node)
    _LOGGER.debug(
        "html-tree-built",
        version=version,
        roots=len(roots),
        has_error=bool(getattr(tree.root_node, "has_error", False)),
    )
    return DocumentTree(roots=roots, version=version)


def _byte_offsets(text: str) -> Sequence[int]:
    offsets = [0]
    total = 0
    for char in text:
        total += len(char.encode("utf-8"))
        offsets.append(total)
    return offsets


@dataclass(slots=True)
class _TreeBuilder:
    text: str
    byte_offsets: Sequence[int]

    def build(self, root: Any) -> tuple[ElementNode, ...]:
        return tuple(self._collect_elements(root))

    # ------------------------------------------------------------------
    # Tree traversal
    # ------------------------------------------------------------------
    def _collect_elements(self, node: Any) -> list[ElementNode]:
        elements: list[ElementNode] = []
        for child in node.named_children:
            if child.type in _ELEMENT_TYPES:
                elements.append(self._element(child))
            elif child.type not in _LEAF_TYPES:
                # Error recovery can wrap elements in ERROR nodes.
                elements.extend(self._collect_elements(child))
        return elements

    def _element(self, node: Any) -> ElementNode:
        tag = _first_child_of_type(node, *_TAG_TYPES)
        name = ""
        attributes: tuple[AttributeNode, ...] = ()
        if tag is not None:
            name_node = _first_child_of_type(tag, "tag_name")
            if name_node is not None:
                name = self._slice(name_node.start_byte, name_node.end_byte)
            attributes = tuple(
                self._attribute(child)
                for child in tag.named_children
                if child.type == "attribute"
            )
        children = self._collect_elements(node)
        return ElementNode(
            name=name,
            attributes=attributes,
            children=children,
            start=self._char_index(node.start_byte),
            end=self._char_index(node.end_byte),
        )

    def _attribute(self, node: Any) -> AttributeNode:
        name_node = _first_child_of_type(node, "attribute_name")
        name = (
            self._slice(name_node.start_byte, name_node.end_byte)
            if name_node is not None
            else ""
        )
        value_node = _first_child_of_type(node, "attribute_value")
        if value_node is not None:
            return self._valued(name, value_node.start_byte, value_node.end_byte)

        quoted = _first_child_of_type(node, "quoted_attribute_value")
        if quoted is None:
            return AttributeNode(name=name)
        inner = _first_child_of_type(quoted, "attribute_value")
        if inner is not None:
            return self._valued(name, inner.start_byte, inner.end_byte)
        # Empty quotes: a zero-length value just past the opening quote.
        start = self._char_index(quoted.start_byte) + 1
        return AttributeNode(name=name, value="", value_range=TextRange(start, 0))

    # ------------------------------------------------------------------
    # Text helpers
    # ------------------------------------------------------------------
    def _valued(self, name: str, start_byte: int, end_byte: int) -> AttributeNode:
        start = self._char_index(start_byte)
        end = self._char_index(end_byte)
        return AttributeNode(
            name=name,
            value=self.text[start:end],
            value_range=TextRange(start, end - start),
        )

    def _slice(self, start_byte: int, end_byte: int) -> str:
        return self.text[self._char_index(start_byte) : self._char_index(end_byte)]

    def _char_index(self, byte_offset: int) -> int:
        return max(0, bisect_right(self.byte_offsets, byte_offset) - 1)


def _first_child_of_type(node: Any, *type_names: str) -> Any | None:
    for child in node.children:
        if child.type in type_names:
            return child
    return None
