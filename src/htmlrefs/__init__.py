"""Cross-reference highlighting for HTML class names, ids, frames and radio groups.

Example:
    >>> from htmlrefs import __version__
    >>> isinstance(__version__, str)
    True
"""

from importlib import metadata

try:
    __version__ = metadata.version("htmlrefs")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
    __version__ = "0.0.0"

__all__ = ["__version__"]
