"""Text versions, spans and edit tracking."""

from __future__ import annotations

from .buffer import TextBuffer
from .spans import Span, SpanTranslator, TextChange, translate_span

__all__ = [
    "Span",
    "SpanTranslator",
    "TextBuffer",
    "TextChange",
    "translate_span",
]
