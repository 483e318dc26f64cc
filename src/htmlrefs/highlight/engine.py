"""Recompute highlights and reduce host events into new highlight states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from htmlrefs.core.config import HighlightSettings, ReuseScope
from htmlrefs.core.logging import get_logger
from htmlrefs.document.nodes import HtmlTree

from .classifier import SymbolClassifier
from .finder import CrossReferenceFinder
from .rules import ReferenceRuleSet, build_rule_set
from .state import HighlightState
from .symbols import SymbolKind

__all__ = [
    "CursorMoved",
    "LayoutChanged",
    "HighlightEvent",
    "HighlightEngine",
]

_LOGGER = get_logger(__name__, component="highlight-engine")


@dataclass(frozen=True, slots=True)
class CursorMoved:
    """The caret moved to ``offset`` in text ``version``.

    ``offset`` is ``None`` when the caret cannot be mapped into the buffer.
    """

    offset: int | None
    version: int


@dataclass(frozen=True, slots=True)
class LayoutChanged:
    """The view was laid out again; the text may have moved versions."""

    old_version: int
    new_version: int
    caret_offset: int | None


HighlightEvent = Union[CursorMoved, LayoutChanged]


class HighlightEngine:
    """Stateless engine: every method returns a new :class:`HighlightState`."""

    def __init__(
        self,
        settings: HighlightSettings | None = None,
        *,
        rule_set: ReferenceRuleSet | None = None,
    ) -> None:
        self._settings = settings or HighlightSettings()
        rules = rule_set or build_rule_set(self._settings)
        self._classifier = SymbolClassifier(rules)
        self._finder = CrossReferenceFinder(rules)

    @property
    def settings(self) -> HighlightSettings:
        return self._settings

    @property
    def classifier(self) -> SymbolClassifier:
        return self._classifier

    @property
    def finder(self) -> CrossReferenceFinder:
        return self._finder

    def recompute(self, tree: HtmlTree, offset: int, version: int) -> HighlightState:
        """Classify ``offset`` and collect spans for the resulting symbol."""

        symbol = self._classifier.classify(tree, offset)
        if symbol is None:
            _LOGGER.debug("highlight-cleared", offset=offset, version=version)
            return HighlightState.empty(version)
        result = self._finder.find_references(tree, symbol, version=version)
        _LOGGER.debug(
            "highlight-recomputed",
            kind=symbol.kind.value,
            value=symbol.value,
            version=version,
            definitions=len(result.definitions),
            references=len(result.references),
        )
        return HighlightState.from_result(result, version=version, symbol=symbol)

    def can_reuse(self, state: HighlightState, offset: int, version: int) -> bool:
        """Return ``True`` when ``state`` still answers a caret at ``offset``.

        Only states resolved against ``version`` itself qualify; translated
        states carry a symbol from an older text and are recomputed.
        """

        if state.symbol is None:
            return False
        if state.version != version or state.computed_version != version:
            return False
        if (
            self._settings.reuse_scope is ReuseScope.CLASS_NAME
            and state.symbol.kind is not SymbolKind.CLASS_NAME
        ):
            return False
        return state.contains(offset)

    def reduce(
        self,
        state: HighlightState,
        event: HighlightEvent,
        tree_provider: Callable[[], HtmlTree],
    ) -> HighlightState:
        """Return the state that follows ``event``.

        The same ``state`` object comes back when the event does not call for
        a recomputation; otherwise a fresh state is built from a tree
        obtained through ``tree_provider``.
        """

        if isinstance(event, LayoutChanged):
            if event.new_version == event.old_version:
                return state
            if event.caret_offset is None:
                return state
            # A new text version always gets a fresh classification.
            return self.recompute(tree_provider(), event.caret_offset, event.new_version)

        offset, version = event.offset, event.version
        if offset is None:
            return state
        if self.can_reuse(state, offset, version):
            _LOGGER.debug("highlight-reused", offset=offset, version=version)
            return state
        return self.recompute(tree_provider(), offset, version)
