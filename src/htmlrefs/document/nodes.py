"""Read-only HTML element tree consumed by the highlighting engine.

Hosts may supply their own tree as long as it satisfies :class:`HtmlTree`;
:func:`htmlrefs.document.treesitter.parse_html` builds the concrete
:class:`DocumentTree` defined here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Protocol

__all__ = [
    "TextRange",
    "AttributeNode",
    "ElementNode",
    "ElementVisitor",
    "HtmlTree",
    "DocumentTree",
    "walk",
]


@dataclass(frozen=True, slots=True)
class TextRange:
    """Character range ``[start, start + length)`` in the parsed text."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def touches(self, offset: int) -> bool:
        """Return ``True`` when ``offset`` is inside the range or at its end."""

        return self.start <= offset <= self.end


@dataclass(frozen=True, slots=True)
class AttributeNode:
    """Attribute with its raw value and unquoted value range.

    ``value`` and ``value_range`` are ``None`` for valueless attributes such
    as ``<input disabled>``.
    """

    name: str
    value: str | None = None
    value_range: TextRange | None = None

    def is_named(self, name: str, *, ignore_case: bool = True) -> bool:
        if ignore_case:
            return self.name.casefold() == name.casefold()
        return self.name == name


@dataclass(slots=True, eq=False)
class ElementNode:
    """Element with ordered attributes and children.

    ``start``/``end`` delimit the whole element in the source text.
    """

    name: str
    attributes: tuple[AttributeNode, ...] = ()
    children: list["ElementNode"] = field(default_factory=list)
    start: int = 0
    end: int = 0

    def is_named(self, *names: str) -> bool:
        """Return ``True`` when the tag matches one of ``names`` ignoring case."""

        folded = self.name.casefold()
        return any(folded == name.casefold() for name in names)

    def get_attribute(self, name: str, ignore_case: bool = True) -> AttributeNode | None:
        for attribute in self.attributes:
            if attribute.is_named(name, ignore_case=ignore_case):
                return attribute
        return None

    def get_attribute_value(self, name: str) -> str | None:
        attribute = self.get_attribute(name)
        return None if attribute is None else attribute.value


ElementVisitor = Callable[[ElementNode], bool]


def walk(roots: Iterable[ElementNode], visitor: ElementVisitor) -> None:
    """Visit ``roots`` and their descendants in document (pre-)order.

    ``visitor`` returns ``False`` to skip the children of the element it was
    given; siblings are still visited.
    """

    stack: list[ElementNode] = list(reversed(tuple(roots)))
    while stack:
        element = stack.pop()
        if visitor(element) and element.children:
            stack.extend(reversed(element.children))


class HtmlTree(Protocol):
    """Tree interface the classifier and finder depend on."""

    def get_element_and_attribute_at(
        self, offset: int
    ) -> tuple[ElementNode | None, AttributeNode | None]: ...

    def traverse(self, visitor: ElementVisitor) -> None: ...


@dataclass(slots=True)
class DocumentTree:
    """Ordered forest of :class:`ElementNode` for one text version."""

    roots: tuple[ElementNode, ...] = ()
    version: int = 0

    def traverse(self, visitor: ElementVisitor) -> None:
        walk(self.roots, visitor)

    def iter_elements(self) -> Iterator[ElementNode]:
        collected: list[ElementNode] = []

        def _collect(element: ElementNode) -> bool:
            collected.append(element)
            return True

        self.traverse(_collect)
        return iter(collected)

    def get_element_and_attribute_at(
        self, offset: int
    ) -> tuple[ElementNode | None, AttributeNode | None]:
        """Return the innermost element spanning ``offset`` and its attribute.

        The attribute is only returned when ``offset`` lies inside its
        unquoted value or right after the value's last character.
        """

        found_element: ElementNode | None = None
        found_attribute: AttributeNode | None = None

        def _visit(element: ElementNode) -> bool:
            nonlocal found_element, found_attribute
            if found_attribute is not None:
                return False
            if not element.start <= offset <= element.end:
                return False
            found_element = element
            for attribute in element.attributes:
                if attribute.value_range is not None and attribute.value_range.touches(
                    offset
                ):
                    found_attribute = attribute
                    return False
            return True

        self.traverse(_visit)
        return found_element, found_attribute
