"""In-memory versioned text buffer used as the host-side offset map."""

from __future__ import annotations

from typing import Sequence

from htmlrefs.core.logging import get_logger

from .spans import Span, TextChange, translate_span

__all__ = ["TextBuffer"]

_LOGGER = get_logger(__name__, component="text-buffer")


class TextBuffer:
    """Hold document text and record every edit as a :class:`TextChange`.

    Each edit advances :attr:`version` by one. The recorded history lets
    spans computed against an older version be mapped onto the current one
    via :meth:`translate_span`, which satisfies
    :class:`~htmlrefs.text.spans.SpanTranslator`.
    """

    def __init__(self, text: str = "", *, version: int = 0) -> None:
        if version < 0:
            raise ValueError("version must be >= 0")
        self._text = text
        self._version = version
        self._base_version = version
        self._changes: list[TextChange] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._text)

    def full_span(self) -> Span:
        """Return the span covering the whole current text."""

        return Span(0, len(self._text), self._version)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def apply_edit(self, position: int, old_length: int, new_text: str) -> TextChange:
        """Replace ``old_length`` characters at ``position`` with ``new_text``.

        Raises:
            ValueError: If the replaced range falls outside the text.
        """

        if position < 0 or old_length < 0 or position + old_length > len(self._text):
            raise ValueError(
                f"Edit [{position}, {position + old_length}) is outside the "
                f"text of length {len(self._text)}"
            )
        self._text = (
            self._text[:position] + new_text + self._text[position + old_length :]
        )
        self._version += 1
        change = TextChange(
            version=self._version,
            position=position,
            old_length=old_length,
            new_length=len(new_text),
        )
        self._changes.append(change)
        _LOGGER.debug(
            "text-edit-applied",
            version=change.version,
            position=position,
            old_length=old_length,
            new_length=change.new_length,
        )
        return change

    def insert(self, position: int, text: str) -> TextChange:
        return self.apply_edit(position, 0, text)

    def delete(self, position: int, length: int) -> TextChange:
        return self.apply_edit(position, length, "")

    # ------------------------------------------------------------------
    # Offset mapping
    # ------------------------------------------------------------------
    def changes_between(self, from_version: int, to_version: int) -> Sequence[TextChange]:
        """Return the edits that moved the text from ``from_version`` on.

        Raises:
            ValueError: If the range is reversed or predates the history.
        """

        if from_version > to_version:
            raise ValueError(
                f"from_version {from_version} is after to_version {to_version}"
            )
        if from_version < self._base_version or to_version > self._version:
            raise ValueError(
                f"Versions [{from_version}, {to_version}] are outside the "
                f"recorded history [{self._base_version}, {self._version}]"
            )
        first = from_version - self._base_version
        last = to_version - self._base_version
        return tuple(self._changes[first:last])

    @property
    def oldest_version(self) -> int:
        """Oldest version spans can still be translated from."""

        return self._base_version

    def discard_history(self, before_version: int) -> int:
        """Forget the edits that led up to ``before_version``.

        Spans from versions older than ``before_version`` can no longer be
        translated afterwards. Returns the number of changes dropped.

        Raises:
            ValueError: If ``before_version`` is newer than the text.
        """

        if before_version > self._version:
            raise ValueError(
                f"Cannot discard history up to {before_version}; "
                f"the text is at version {self._version}"
            )
        if before_version <= self._base_version:
            return 0
        dropped = before_version - self._base_version
        del self._changes[:dropped]
        self._base_version = before_version
        _LOGGER.debug(
            "text-history-discarded",
            dropped=dropped,
            oldest_version=before_version,
        )
        return dropped

    def translate_span(self, span: Span, version: int | None = None) -> Span | None:
        """Map ``span`` onto ``version`` (default: current), or drop it."""

        target = self._version if version is None else version
        if span.version == target:
            return span
        changes = self.changes_between(span.version, target)
        translated = translate_span(span, changes, target)
        if translated is None:
            _LOGGER.debug(
                "span-dropped",
                start=span.start,
                length=span.length,
                from_version=span.version,
                to_version=target,
            )
        return translated
