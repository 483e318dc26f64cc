"""Typer command printing the symbol and highlights at a cursor position."""

from __future__ import annotations

from bisect import bisect_right
from pathlib import Path
from typing import Sequence

import typer

from htmlrefs.core.logging import configure_logging, get_logger
from htmlrefs.errors import DocumentLoadError, HtmlRefsError
from htmlrefs.highlight import HighlightTracker, SymbolRole
from htmlrefs.text import Span, TextBuffer

from .config import fail, load_cli_config

_ROLE_COLORS: dict[SymbolRole, str] = {
    SymbolRole.DEFINITION: typer.colors.GREEN,
    SymbolRole.REFERENCE: typer.colors.CYAN,
}


def read_document(path: Path) -> str:
    """Return the UTF-8 text of ``path``.

    Raises:
        DocumentLoadError: If the file cannot be read or decoded.
    """

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read {path}: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentLoadError(f"{path} is not valid UTF-8: {exc}") from exc


def _line_starts(text: str) -> Sequence[int]:
    starts = [0]
    for index, char in enumerate(text):
        if char == "\n":
            starts.append(index + 1)
    return starts


def offset_from_position(text: str, line: int, column: int) -> int:
    """Convert a 1-based ``line``/``column`` pair into a character offset.

    Raises:
        ValueError: If the position lies outside ``text``.
    """

    starts = _line_starts(text)
    if line < 1 or line > len(starts):
        raise ValueError(f"Line {line} is outside the document (1-{len(starts)})")
    start = starts[line - 1]
    end = starts[line] - 1 if line < len(starts) else len(text)
    if column < 1 or start + column - 1 > end:
        raise ValueError(f"Column {column} is outside line {line}")
    return start + column - 1


def position_from_offset(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``offset``."""

    starts = _line_starts(text)
    index = bisect_right(starts, offset) - 1
    return index + 1, offset - starts[index] + 1


def _resolve_offset(
    text: str,
    offset: int | None,
    line: int | None,
    column: int | None,
) -> int:
    if offset is not None:
        if line is not None or column is not None:
            raise typer.BadParameter(
                "Use either --offset or --line/--column, not both.",
                param_hint="--offset",
            )
        if not 0 <= offset <= len(text):
            raise typer.BadParameter(
                f"Offset {offset} is outside the document (0-{len(text)}).",
                param_hint="--offset",
            )
        return offset
    if line is None or column is None:
        raise typer.BadParameter(
            "A cursor position is required: pass --offset or --line and --column.",
            param_hint="--offset",
        )
    try:
        return offset_from_position(text, line, column)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--line/--column") from exc


def _render_span(text: str, span: Span, role: SymbolRole) -> str:
    line, column = position_from_offset(text, span.start)
    label = typer.style(f"{role.value:<10}", fg=_ROLE_COLORS[role])
    return f"  {label} {line}:{column}  {span.slice(text)!r}"


def register_inspect_command(app: typer.Typer) -> None:
    """Register the ``htmlrefs inspect`` command on the Typer app."""

    @app.command(
        "inspect",
        help="Show the symbol under a cursor position and every related span.",
    )
    def inspect_command(
        path: Path = typer.Argument(..., help="HTML document to inspect."),
        offset: int | None = typer.Option(
            None,
            "--offset",
            "-o",
            help="0-based character offset of the cursor.",
        ),
        line: int | None = typer.Option(
            None, "--line", "-L", help="1-based cursor line."
        ),
        column: int | None = typer.Option(
            None, "--column", "-C", help="1-based cursor column."
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML file layered over the packaged defaults.",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
        ),
    ) -> None:
        try:
            config = load_cli_config(config_path, log_level=log_level)
            configure_logging(level=config.log_level)
            text = read_document(path)
        except HtmlRefsError as exc:
            raise fail(str(exc)) from exc
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

        cursor = _resolve_offset(text, offset, line, column)
        logger = get_logger(__name__, command="inspect")

        buffer = TextBuffer(text)
        tracker = HighlightTracker(buffer, settings=config.highlight)
        try:
            state = tracker.caret_moved(cursor)
        except HtmlRefsError as exc:
            raise fail(str(exc)) from exc

        symbol = state.symbol
        logger.info(
            "inspect-complete",
            path=str(path),
            offset=cursor,
            kind=symbol.kind.value if symbol else None,
            definitions=len(state.definitions),
            references=len(state.references),
        )
        if symbol is None:
            typer.secho(f"No symbol at offset {cursor}", fg=typer.colors.YELLOW)
            raise typer.Exit(code=1)

        typer.secho(
            f"{symbol.kind.value} {symbol.value!r} "
            f"(<{symbol.element.name} {symbol.origin.name}>)",
            bold=True,
        )
        for tagged in tracker.tags():
            typer.echo(_render_span(text, tagged.span, tagged.role))


__all__ = [
    "offset_from_position",
    "position_from_offset",
    "read_document",
    "register_inspect_command",
]
