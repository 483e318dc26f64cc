"""Typer command printing the effective configuration, plus shared loaders."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import typer

from htmlrefs.core.config import (
    AppConfig,
    env_overrides,
    load_config,
    load_packaged_defaults,
    read_config_file,
    render_config,
)
from htmlrefs.errors import HtmlRefsError


def load_cli_config(
    config_path: Path | None,
    *,
    log_level: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Merge packaged defaults, ``config_path``, environment and CLI flags.

    Raises:
        ConfigError: If the config file is unreadable or invalid.
    """

    user_config = read_config_file(config_path) if config_path is not None else None
    cli_overrides = {"log_level": log_level} if log_level else None
    return load_config(
        defaults=load_packaged_defaults(),
        user_config=user_config,
        env_config=env_overrides(os.environ if environ is None else environ),
        cli_overrides=cli_overrides,
    )


def fail(message: str) -> typer.Exit:
    """Print ``message`` in red and return the exit to raise."""

    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=2)


def register_config_command(app: typer.Typer) -> None:
    """Register the ``htmlrefs config`` command on the Typer app."""

    @app.command("config", help="Print the effective configuration as TOML.")
    def config_command(
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML file layered over the packaged defaults.",
        ),
        bare: bool = typer.Option(
            False,
            "--bare",
            help="Omit explanatory comments from the output.",
        ),
    ) -> None:
        try:
            config = load_cli_config(config_path)
        except HtmlRefsError as exc:
            raise fail(str(exc)) from exc
        typer.echo(render_config(config, include_comments=not bare), nl=False)


__all__ = ["fail", "load_cli_config", "register_config_command"]
