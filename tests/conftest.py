"""Shared pytest fixtures for htmlrefs tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

import pytest

from htmlrefs.document import DocumentTree, parse_html


def _clear_root_handlers() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    """Ensure each test runs with a clean logging configuration."""

    _clear_root_handlers()
    yield
    _clear_root_handlers()


@pytest.fixture
def parse() -> Callable[..., DocumentTree]:
    """Return :func:`parse_html` for building trees from markup."""

    return parse_html


@pytest.fixture
def value_at() -> Callable[..., int]:
    """Return a helper locating the first character of an attribute value.

    ``value_at(markup, 'href="#a"')`` returns the offset of ``#``; pass
    ``occurrence`` to pick a later match of the same attribute text.
    """

    def _value_at(markup: str, attribute_text: str, occurrence: int = 0) -> int:
        index = -1
        for _ in range(occurrence + 1):
            index = markup.index(attribute_text, index + 1)
        quote = attribute_text.find('"')
        if quote == -1:
            return index + attribute_text.index("=") + 1
        return index + quote + 1

    return _value_at
