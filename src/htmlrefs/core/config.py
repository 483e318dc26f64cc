"""Configuration models and loaders for :mod:`htmlrefs`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from enum import StrEnum
from pathlib import Path
import re
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from htmlrefs.errors import ConfigError
from htmlrefs.resources import get_resource

DEFAULTS_RESOURCE_NAME = "htmlrefs.defaults.toml"
ENV_PREFIX = "HTMLREFS_"


class ReuseScope(StrEnum):
    """Which symbol kinds keep their highlights while the caret stays inside."""

    ALL = "all"
    CLASS_NAME = "class-name"


_DEFAULT_RESERVED_FRAME_NAMES = ("_blank", "_parent", "_self", "_top")


class HighlightSettings(BaseModel):
    """Tunables for symbol classification and highlight tracking."""

    reuse_scope: ReuseScope = Field(
        default=ReuseScope.ALL,
        description=(
            "Symbol kinds whose highlights survive caret moves that stay "
            "inside an already highlighted span."
        ),
    )
    reserved_frame_names: tuple[str, ...] = Field(
        default=_DEFAULT_RESERVED_FRAME_NAMES,
        description="Browsing-context keywords never treated as frame names.",
    )
    class_token_pattern: str = Field(
        default="[A-Za-z0-9_-]+",
        description="Regular expression matching one CSS class token.",
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("reserved_frame_names", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value.strip(),)
        return tuple(str(item).strip() for item in value if str(item).strip())

    @field_validator("class_token_pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        if not value:
            raise ValueError("class_token_pattern must not be empty")
        try:
            compiled = re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid class_token_pattern: {exc}") from exc
        if compiled.match(""):
            raise ValueError("class_token_pattern must not match empty text")
        return value


class AppConfig(BaseModel):
    """Root configuration for the :mod:`htmlrefs` runtime."""

    log_level: str = Field(
        default="INFO",
        description="Default logging level for the application runtime.",
    )
    highlight: HighlightSettings = Field(
        default_factory=HighlightSettings,
        description="Highlight engine settings.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @model_validator(mode="after")
    def _post_process(self) -> "AppConfig":
        object.__setattr__(self, "log_level", self.log_level.upper())
        return self


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content."""

    resource = get_resource(DEFAULTS_RESOURCE_NAME)
    return resource.read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> load_packaged_defaults()["log_level"]
        'INFO'
    """

    data: dict[str, Any] = tomllib.loads(read_packaged_defaults_text())
    return data


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a user TOML config file.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Failed to parse config file {path}: TOML error: {exc}"
        ) from exc


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate ``HTMLREFS_*`` environment variables into a config layer."""

    layer: dict[str, Any] = {}
    level = environ.get(f"{ENV_PREFIX}LOG_LEVEL")
    if level:
        layer["log_level"] = level
    scope = environ.get(f"{ENV_PREFIX}REUSE_SCOPE")
    if scope:
        layer["highlight"] = {"reuse_scope": scope.strip().lower()}
    return layer


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any],
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults shipped with the application.
        user_config: Parsed user TOML content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Raises:
        ConfigError: If the merged payload fails validation.
    """

    stack = dict(defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)

    highlight_raw = stack.pop("highlight", None)
    try:
        if isinstance(highlight_raw, HighlightSettings):
            highlight = highlight_raw
        elif isinstance(highlight_raw, MappingABC):
            highlight = HighlightSettings(**highlight_raw)
        elif highlight_raw is None:
            highlight = HighlightSettings()
        else:
            raise ConfigError(
                f"Unsupported highlight configuration payload: {highlight_raw!r}"
            )
        return AppConfig(highlight=highlight, **stack)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def render_config(config: AppConfig, *, include_comments: bool = True) -> str:
    """Render ``config`` as a TOML document users can save and edit."""

    document = tomlkit.document()
    if include_comments:
        document.add(tomlkit.comment("htmlrefs configuration"))
        document.add(
            tomlkit.comment(
                "Precedence: CLI flags > env vars > config file > defaults"
            )
        )
        document.add(tomlkit.comment("Environment overrides:"))
        document.add(tomlkit.comment(f"  {ENV_PREFIX}LOG_LEVEL=debug"))
        document.add(tomlkit.comment(f"  {ENV_PREFIX}REUSE_SCOPE=class-name"))
        document.add(tomlkit.nl())

    document["log_level"] = config.log_level

    highlight_table = tomlkit.table()
    highlight_table["reuse_scope"] = config.highlight.reuse_scope.value
    highlight_table["reserved_frame_names"] = list(
        config.highlight.reserved_frame_names
    )
    highlight_table["class_token_pattern"] = config.highlight.class_token_pattern
    document["highlight"] = highlight_table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "HighlightSettings",
    "ReuseScope",
    "DEFAULTS_RESOURCE_NAME",
    "ENV_PREFIX",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "read_config_file",
    "read_packaged_defaults_text",
    "render_config",
]
