"""Resolve the symbol under the cursor from a document tree and offset."""

from __future__ import annotations

from htmlrefs.core.logging import get_logger
from htmlrefs.document.nodes import HtmlTree

from .rules import EqualityPolicy, ReferenceRuleSet, build_rule_set
from .symbols import Symbol

__all__ = ["SymbolClassifier", "classify"]

_LOGGER = get_logger(__name__, component="classifier")


class SymbolClassifier:
    """Map ``(tree, offset)`` to the :class:`Symbol` the cursor is on."""

    def __init__(self, rule_set: ReferenceRuleSet | None = None) -> None:
        self._rules = rule_set or build_rule_set()

    @property
    def rule_set(self) -> ReferenceRuleSet:
        return self._rules

    def classify(self, tree: HtmlTree, offset: int) -> Symbol | None:
        """Return the symbol at ``offset`` or ``None`` when there is none.

        The cursor counts as inside an attribute value when it sits anywhere
        within the unquoted value, including right after its last character.
        """

        element, attribute = tree.get_element_and_attribute_at(offset)
        if element is None or attribute is None:
            return None
        value_range = attribute.value_range
        value = attribute.value
        if value is None or value_range is None or not value_range.touches(offset):
            return None

        for rule, site in self._rules.iter_triggers():
            if not site.matches(element, attribute):
                continue
            if rule.policy is EqualityPolicy.TOKEN:
                token = self._rules.tokenizer.token_at(value, offset - value_range.start)
                extracted = token.group(0) if token is not None else None
            else:
                extracted = site.strip(value)
            if not extracted:
                # The first matching site decides; later rows never apply.
                return None
            symbol = Symbol(
                kind=rule.kind,
                value=extracted,
                element=element,
                origin=attribute,
            )
            _LOGGER.debug(
                "symbol-classified",
                kind=symbol.kind.value,
                value=symbol.value,
                attribute=attribute.name,
                offset=offset,
            )
            return symbol
        return None


def classify(
    tree: HtmlTree,
    offset: int,
    rule_set: ReferenceRuleSet | None = None,
) -> Symbol | None:
    """Convenience wrapper around :meth:`SymbolClassifier.classify`."""

    return SymbolClassifier(rule_set).classify(tree, offset)
