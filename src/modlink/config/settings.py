"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MODLINK_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``modlink.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The projection root is the directory holding ``modlink.toml`` unless
``--root`` says otherwise.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from modlink.config.discovery import CONFIG_FILENAME, find_config
from modlink.config.models import ProjectionConfig, VcsConfig, WorkspaceConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``modlink.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class ModlinkSettings(BaseSettings):
    """Settings for one modlink invocation, frozen after construction.

    Attributes:
        root: Projection root (parent of ``modlink.toml``, or CWD).
        config_path: The config file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MODLINK_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    vcs: VcsConfig = Field(default_factory=VcsConfig)
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> ModlinkSettings:
        """Construct settings from a CLI invocation.

        With an explicit *root*, ``modlink.toml`` is read from that directory
        only. Otherwise it is discovered by walking up from CWD, and the root
        becomes the config file's parent.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        elif root is not None:
            candidate = root / CONFIG_FILENAME
            toml_path = candidate if candidate.is_file() else None
        else:
            toml_path = find_config()

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                root=resolved_root.resolve(),
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
