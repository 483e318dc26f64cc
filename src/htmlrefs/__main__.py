"""Console-script entry point for :mod:`htmlrefs`."""

from __future__ import annotations

from htmlrefs.cli import create_app


def main() -> None:
    """Execute the CLI application."""

    app = create_app()
    app(prog_name="htmlrefs")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
