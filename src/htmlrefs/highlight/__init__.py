"""Symbol classification, cross-referencing and highlight tracking."""

from __future__ import annotations

from .classifier import SymbolClassifier, classify
from .engine import CursorMoved, HighlightEngine, HighlightEvent, LayoutChanged
from .finder import CrossReferenceFinder, find_references
from .rules import (
    AttributeSite,
    ClassTokenizer,
    EqualityPolicy,
    ReferenceRule,
    ReferenceRuleSet,
    build_rule_set,
)
from .state import HighlightQuery, HighlightState, TaggedSpan, query
from .symbols import ReferenceResult, Symbol, SymbolKind, SymbolRole
from .tracker import HighlightTracker, TagsChangedListener

__all__ = [
    "AttributeSite",
    "ClassTokenizer",
    "CrossReferenceFinder",
    "CursorMoved",
    "EqualityPolicy",
    "HighlightEngine",
    "HighlightEvent",
    "HighlightQuery",
    "HighlightState",
    "HighlightTracker",
    "LayoutChanged",
    "ReferenceResult",
    "ReferenceRule",
    "ReferenceRuleSet",
    "Symbol",
    "SymbolClassifier",
    "SymbolKind",
    "SymbolRole",
    "TaggedSpan",
    "TagsChangedListener",
    "build_rule_set",
    "classify",
    "find_references",
    "query",
]
