"""Command-line interface for :mod:`htmlrefs`.

Exposes the Typer application behind the ``htmlrefs`` console script.

Example:
    >>> import typer
    >>> from htmlrefs.cli import create_app
    >>> isinstance(create_app(), typer.Typer)
    True
"""

from __future__ import annotations

import typer

from htmlrefs.cli.config import register_config_command
from htmlrefs.cli.inspect import register_inspect_command

_app_help = (
    "Cross-reference highlighting for HTML documents."
    "\n\n"
    "Use `htmlrefs inspect FILE --offset N` to see what a cursor position "
    "refers to."
)


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``htmlrefs`` CLI."""

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
        invoke_without_command=False,
    )

    @app.callback()
    def main_callback() -> None:
        """Top-level CLI callback ensuring subcommands are dispatched."""

        return None

    register_inspect_command(app)
    register_config_command(app)
    return app


__all__ = ["create_app"]
