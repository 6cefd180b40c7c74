"""Config file discovery and loading.

Walk-up finder locates modlink.toml, similar to how git finds .git/.
The directory holding it is the projection root. Supports the
MODLINK_CONFIG env var and the --config CLI flag as overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from modlink.config.models import ModlinkConfig

CONFIG_FILENAME = "modlink.toml"
CONFIG_ENV_VAR = "MODLINK_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for modlink.toml.

    Returns the path to the config file, or None if not found.
    Checks MODLINK_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> ModlinkConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default ModlinkConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)

    if path is None:
        return ModlinkConfig()

    raw = path.read_text(encoding="utf-8")
    data: dict[str, Any] = tomllib.loads(raw)
    return ModlinkConfig.model_validate(data)


def render_config(repository: str, client: str) -> str:
    """Minimal modlink.toml content written by ``modlink init``."""
    lines = [
        "# modlink projection root",
        "",
        "[vcs]",
        f'client = "{client}"',
        f"repository = {_toml_string(repository)}",
        "",
    ]
    return "\n".join(lines)


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
