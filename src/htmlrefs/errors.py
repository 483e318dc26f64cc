"""Domain-specific exceptions for :mod:`htmlrefs`.

The highlighting engine itself never raises for missing matches; these errors
cover the host-side adapters (file loading, parser setup, configuration).
"""

from __future__ import annotations


class HtmlRefsError(RuntimeError):
    """Base error for htmlrefs failures."""


class DocumentLoadError(HtmlRefsError):
    """Raised when an HTML document cannot be read or decoded."""


class ParserUnavailableError(HtmlRefsError):
    """Raised when the tree-sitter HTML grammar cannot be loaded."""


class ConfigError(HtmlRefsError):
    """Raised when configuration files cannot be parsed or validated."""


__all__ = [
    "HtmlRefsError",
    "DocumentLoadError",
    "ParserUnavailableError",
    "ConfigError",
]
