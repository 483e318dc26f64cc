"""Value types shared by the classifier, finder and highlight state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from htmlrefs.document.nodes import AttributeNode, ElementNode
from htmlrefs.text.spans import Span

__all__ = [
    "SymbolKind",
    "SymbolRole",
    "Symbol",
    "ReferenceResult",
]


class SymbolKind(StrEnum):
    """Kinds of HTML symbols the engine can cross-reference."""

    CLASS_NAME = "class-name"
    ELEMENT_ID = "element-id"
    FRAME_OR_WINDOW_NAME = "frame-name"
    RADIO_GROUP_NAME = "radio-group"


class SymbolRole(StrEnum):
    """How a highlighted span relates to the symbol under the cursor."""

    DEFINITION = "definition"
    REFERENCE = "reference"

    @property
    def marker_format(self) -> str:
        """Editor marker format name used to render spans of this role."""

        if self is SymbolRole.DEFINITION:
            return "MarkerFormatDefinition/HighlightedDefinition"
        return "MarkerFormatDefinition/HighlightedReference"


@dataclass(frozen=True, slots=True)
class Symbol:
    """The classified symbol under the cursor.

    ``element`` and ``origin`` point at the node the cursor sits in; they are
    only meaningful for the tree the symbol was classified against.
    """

    kind: SymbolKind
    value: str
    element: ElementNode
    origin: AttributeNode

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Symbol value must not be empty")


@dataclass(frozen=True, slots=True)
class ReferenceResult:
    """Definition and reference spans, each in document order."""

    definitions: tuple[Span, ...] = ()
    references: tuple[Span, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.definitions and not self.references
