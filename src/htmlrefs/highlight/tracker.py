"""Per-document highlight tracking wired to a :class:`TextBuffer`."""

from __future__ import annotations

from typing import Callable

from htmlrefs.core.config import HighlightSettings
from htmlrefs.core.logging import get_logger
from htmlrefs.document.nodes import HtmlTree
from htmlrefs.document.treesitter import parse_html
from htmlrefs.text.buffer import TextBuffer
from htmlrefs.text.spans import Span

from .engine import CursorMoved, HighlightEngine, HighlightEvent, LayoutChanged
from .state import HighlightQuery, HighlightState, query

__all__ = ["HighlightTracker", "TagsChangedListener"]

TagsChangedListener = Callable[[Span], None]

_LOGGER = get_logger(__name__, component="highlight-tracker")


class HighlightTracker:
    """Own the highlight state of one open document.

    Events are expected on a single thread. Each recomputation replaces the
    state and notifies every listener once with the whole-document span,
    because highlights can move arbitrarily far from the caret.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        *,
        tree_provider: Callable[[], HtmlTree] | None = None,
        settings: HighlightSettings | None = None,
        engine: HighlightEngine | None = None,
    ) -> None:
        self._buffer = buffer
        self._engine = engine or HighlightEngine(settings)
        self._tree_provider = tree_provider or self._parse_current
        self._state = HighlightState.empty(buffer.version)
        self._listeners: list[TagsChangedListener] = []
        self._tree_cache: tuple[int, HtmlTree] | None = None

    @property
    def state(self) -> HighlightState:
        return self._state

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    def subscribe(self, listener: TagsChangedListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unregisters it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------
    def handle(self, event: HighlightEvent) -> HighlightState:
        previous = self._state
        state = self._engine.reduce(previous, event, self._tree_provider)
        if state is not previous:
            self._state = state
            self._buffer.discard_history(state.version)
            self._notify()
        return self._state

    def caret_moved(self, offset: int | None) -> HighlightState:
        return self.handle(CursorMoved(offset=offset, version=self._buffer.version))

    def layout_changed(self, old_version: int, caret_offset: int | None) -> HighlightState:
        return self.handle(
            LayoutChanged(
                old_version=old_version,
                new_version=self._buffer.version,
                caret_offset=caret_offset,
            )
        )

    # ------------------------------------------------------------------
    # Rendering queries
    # ------------------------------------------------------------------
    def tags(self, visible: Span | None = None) -> HighlightQuery:
        """Return the highlighted spans overlapping ``visible``.

        ``visible`` defaults to the whole current text. A state computed for
        an older version is translated once and stored in its place; the
        stored state keeps its ``computed_version``, so the next caret event
        still recomputes. Edits older than the stored state are discarded.
        """

        visible = visible or self._buffer.full_span()
        if self._state.version != visible.version and not self._state.is_empty:
            self._state = self._state.translated(self._buffer.translate_span, visible.version)
            self._buffer.discard_history(self._state.version)
        return query(self._state, visible, self._buffer.translate_span)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _notify(self) -> None:
        changed = self._buffer.full_span()
        _LOGGER.debug(
            "tags-changed",
            version=changed.version,
            listeners=len(self._listeners),
        )
        for listener in list(self._listeners):
            listener(changed)

    def _parse_current(self) -> HtmlTree:
        version = self._buffer.version
        if self._tree_cache is None or self._tree_cache[0] != version:
            self._tree_cache = (version, parse_html(self._buffer.text, version=version))
        return self._tree_cache[1]
