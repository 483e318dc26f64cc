"""Core utilities shared across :mod:`htmlrefs` modules.

The core namespace provides configuration loading and logging setup so the
highlighting engine and its adapters stay lightweight.
"""

from __future__ import annotations

from .config import AppConfig, HighlightSettings, ReuseScope, load_config
from .logging import configure_logging, get_logger

__all__ = [
    "AppConfig",
    "HighlightSettings",
    "ReuseScope",
    "configure_logging",
    "get_logger",
    "load_config",
]
