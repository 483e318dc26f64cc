"""Versioned highlight snapshots and the query interface used for rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from htmlrefs.text.spans import Span, SpanTranslator

from .symbols import ReferenceResult, Symbol, SymbolRole

__all__ = ["HighlightState", "HighlightQuery", "TaggedSpan", "query"]


@dataclass(frozen=True, slots=True)
class TaggedSpan:
    """A highlighted span and the role it is rendered with."""

    span: Span
    role: SymbolRole


@dataclass(frozen=True, slots=True)
class HighlightState:
    """Immutable snapshot of the spans computed for one text version.

    States are never mutated; recomputation and translation both produce a
    new instance that replaces the previous one wholesale. ``version`` is the
    version the spans are expressed in and ``computed_version`` the version
    the symbol was resolved against; the two differ once a state has been
    translated.
    """

    version: int
    definitions: tuple[Span, ...] = ()
    references: tuple[Span, ...] = ()
    symbol: Symbol | None = None
    computed_version: int | None = None

    def __post_init__(self) -> None:
        if self.computed_version is None:
            object.__setattr__(self, "computed_version", self.version)
        for span in (*self.definitions, *self.references):
            if span.version != self.version:
                raise ValueError(
                    f"Span {span!r} does not belong to version {self.version}"
                )

    @classmethod
    def empty(cls, version: int = 0) -> "HighlightState":
        return cls(version=version)

    @classmethod
    def from_result(
        cls,
        result: ReferenceResult,
        *,
        version: int,
        symbol: Symbol | None = None,
    ) -> "HighlightState":
        return cls(
            version=version,
            definitions=result.definitions,
            references=result.references,
            symbol=symbol,
        )

    @property
    def is_empty(self) -> bool:
        return not self.definitions and not self.references

    def tagged(self) -> Iterator[TaggedSpan]:
        """Yield references then definitions, each in document order."""

        for span in self.references:
            yield TaggedSpan(span, SymbolRole.REFERENCE)
        for span in self.definitions:
            yield TaggedSpan(span, SymbolRole.DEFINITION)

    def contains(self, offset: int) -> bool:
        return any(
            span.contains(offset) for span in (*self.definitions, *self.references)
        )

    def translated(self, translator: SpanTranslator, version: int) -> "HighlightState":
        """Return this state mapped onto ``version``, dropping stale spans."""

        if version == self.version:
            return self
        return HighlightState(
            version=version,
            definitions=_translate_all(self.definitions, translator, version),
            references=_translate_all(self.references, translator, version),
            symbol=self.symbol,
            computed_version=self.computed_version,
        )


def _translate_all(
    spans: tuple[Span, ...],
    translator: SpanTranslator,
    version: int,
) -> tuple[Span, ...]:
    translated = (translator(span, version) for span in spans)
    return tuple(span for span in translated if span is not None)


class HighlightQuery:
    """Restartable view of the stored spans overlapping a visible range.

    Every iteration recomputes the result from the stored state, so the same
    query may be iterated any number of times.
    """

    __slots__ = ("_state", "_visible", "_translator")

    def __init__(
        self,
        state: HighlightState,
        visible: Span,
        translator: SpanTranslator | None = None,
    ) -> None:
        self._state = state
        self._visible = visible
        self._translator = translator

    def __iter__(self) -> Iterator[TaggedSpan]:
        state = self._state
        if state.is_empty:
            return
        if state.version != self._visible.version:
            if self._translator is None:
                # Without an offset map, spans from another version are unusable.
                return
            state = state.translated(self._translator, self._visible.version)
        for tagged in state.tagged():
            if tagged.span.overlaps(self._visible):
                yield tagged

    def spans(self, role: SymbolRole | None = None) -> list[Span]:
        return [
            tagged.span for tagged in self if role is None or tagged.role is role
        ]


def query(
    state: HighlightState,
    visible: Span,
    translator: SpanTranslator | None = None,
) -> HighlightQuery:
    """Return the spans of ``state`` overlapping ``visible`` with their roles."""

    return HighlightQuery(state, visible, translator)
