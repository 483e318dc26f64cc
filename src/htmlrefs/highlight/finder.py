"""Collect definition and reference spans for a symbol in one tree walk."""

from __future__ import annotations

from typing import Iterator

from htmlrefs.core.logging import get_logger
from htmlrefs.document.nodes import AttributeNode, ElementNode, HtmlTree
from htmlrefs.text.spans import Span

from .rules import (
    AttributeSite,
    ClassTokenizer,
    EqualityPolicy,
    ReferenceRule,
    ReferenceRuleSet,
    build_rule_set,
)
from .symbols import ReferenceResult, Symbol

__all__ = ["CrossReferenceFinder", "find_references"]

_LOGGER = get_logger(__name__, component="finder")


class CrossReferenceFinder:
    """Apply the rule for a symbol's kind across the whole document."""

    def __init__(self, rule_set: ReferenceRuleSet | None = None) -> None:
        self._rules = rule_set or build_rule_set()

    def find_references(
        self,
        tree: HtmlTree,
        symbol: Symbol,
        *,
        version: int = 0,
    ) -> ReferenceResult:
        """Return every definition and reference span of ``symbol``.

        The tree is walked once in document order and never pruned. Matches
        are not deduplicated: duplicate ids each produce a definition.
        """

        rule = self._rules.for_kind(symbol.kind)
        matcher = _SiteMatcher(
            rule=rule,
            value=symbol.value,
            tokenizer=self._rules.tokenizer,
            version=version,
        )
        definitions: list[Span] = []
        references: list[Span] = []

        def _visit(element: ElementNode) -> bool:
            for site in rule.definitions:
                definitions.extend(matcher.spans(element, site))
            for site in rule.references:
                references.extend(matcher.spans(element, site))
            return True

        tree.traverse(_visit)
        result = ReferenceResult(
            definitions=tuple(definitions),
            references=tuple(references),
        )
        _LOGGER.debug(
            "references-found",
            kind=symbol.kind.value,
            value=symbol.value,
            definitions=len(result.definitions),
            references=len(result.references),
        )
        return result


class _SiteMatcher:
    __slots__ = ("_rule", "_value", "_tokenizer", "_version")

    def __init__(
        self,
        *,
        rule: ReferenceRule,
        value: str,
        tokenizer: ClassTokenizer,
        version: int,
    ) -> None:
        self._rule = rule
        self._value = value
        self._tokenizer = tokenizer
        self._version = version

    def spans(self, element: ElementNode, site: AttributeSite) -> Iterator[Span]:
        attribute = site.attribute_of(element)
        if attribute is None:
            return
        if self._rule.policy is EqualityPolicy.TOKEN:
            yield from self._token_spans(attribute)
            return
        value = attribute.value or ""
        if value != site.prefix + self._value:
            return
        start = attribute.value_range.start + len(site.prefix)  # type: ignore[union-attr]
        yield Span(start, len(self._value), self._version)

    def _token_spans(self, attribute: AttributeNode) -> Iterator[Span]:
        base = attribute.value_range.start  # type: ignore[union-attr]
        for match in self._tokenizer.tokens(attribute.value or ""):
            if match.group(0) == self._value:
                yield Span(base + match.start(), len(self._value), self._version)


def find_references(
    tree: HtmlTree,
    symbol: Symbol,
    *,
    version: int = 0,
    rule_set: ReferenceRuleSet | None = None,
) -> ReferenceResult:
    """Convenience wrapper around :meth:`CrossReferenceFinder.find_references`."""

    return CrossReferenceFinder(rule_set).find_references(tree, symbol, version=version)
