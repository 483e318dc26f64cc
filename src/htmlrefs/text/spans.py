"""Version-tagged text spans and edge-exclusive translation across edits."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Protocol

__all__ = [
    "Span",
    "TextChange",
    "SpanTranslator",
    "translate_span",
]


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """Half-open character range ``[start, start + length)`` in one version."""

    start: int
    length: int
    version: int = 0

    def __post_init__(self) -> None:
        if self.start < 0 or self.length < 0:
            raise ValueError(
                f"Span offsets must be non-negative (got {self.start}, {self.length})"
            )

    @property
    def end(self) -> int:
        return self.start + self.length

    def _require_same_version(self, other: "Span") -> None:
        if other.version != self.version:
            raise ValueError(
                "Spans from different text versions cannot be compared "
                f"({self.version} != {other.version})"
            )

    def contains(self, position: int) -> bool:
        """Return ``True`` when ``position`` lies in ``[start, end)``."""

        return self.start <= position < self.end

    def overlaps(self, other: "Span") -> bool:
        """Return ``True`` when both spans share at least one character."""

        self._require_same_version(other)
        return self.start < other.end and other.start < self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(frozen=True, slots=True)
class TextChange:
    """One replacement that moved the text from ``version - 1`` to ``version``.

    ``old_length`` characters at ``position`` were replaced by
    ``new_length`` characters.
    """

    version: int
    position: int
    old_length: int
    new_length: int

    @property
    def old_end(self) -> int:
        return self.position + self.old_length

    @property
    def delta(self) -> int:
        return self.new_length - self.old_length


class SpanTranslator(Protocol):
    """Host hook mapping a stored span into ``version``; ``None`` drops it."""

    def __call__(self, span: Span, version: int) -> Span | None: ...


def _apply_change(span: Span, change: TextChange) -> Span | None:
    if change.old_length == 0 and change.new_length == 0:
        return replace(span, version=change.version)
    if change.old_end < span.start:
        return Span(span.start + change.delta, span.length, change.version)
    if change.position > span.end:
        return replace(span, version=change.version)
    # The edit overlaps or touches the span; its new extent is unknowable.
    return None


def translate_span(
    span: Span,
    changes: Iterable[TextChange],
    version: int,
) -> Span | None:
    """Map ``span`` forward through ``changes`` into ``version``.

    Changes at or below ``span.version`` are ignored, the rest must be
    contiguous and ordered. Translation is edge-exclusive: an edit that
    overlaps the span or touches either of its boundaries drops the span and
    ``None`` is returned.

    Raises:
        ValueError: If ``version`` precedes ``span.version`` or the change
            history has gaps.
    """

    if version < span.version:
        raise ValueError(
            f"Cannot translate span from version {span.version} back to {version}"
        )
    current: Span | None = span
    for change in changes:
        if change.version <= span.version or change.version > version:
            continue
        if current is None:
            return None
        if change.version != current.version + 1:
            raise ValueError(
                f"Missing text change between versions {current.version} "
                f"and {change.version}"
            )
        current = _apply_change(current, change)
    if current is not None and current.version != version:
        raise ValueError(
            f"Change history ends at version {current.version}, expected {version}"
        )
    return current
