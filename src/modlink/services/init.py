"""InitService — create a projection root.

Static entry point: there is no workspace until the config file exists.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from modlink.config.discovery import CONFIG_FILENAME, render_config
from modlink.config.models import WorkspaceConfig
from modlink.services.result import ServiceResult

if TYPE_CHECKING:
    from modlink.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class InitService:
    """Write ``modlink.toml`` and the private working-copy store."""

    @staticmethod
    def init_root(
        path: Path,
        *,
        repository: str = "",
        client: str = "svn",
        force: bool = False,
        modules_dir: str | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> ServiceResult:
        op = "init"
        config_file = path / CONFIG_FILENAME
        if config_file.exists() and not force:
            return ServiceResult.failure(
                op,
                "ALREADY_INITIALIZED",
                f"{config_file} already exists (use --force to overwrite)",
                path=str(config_file),
            )

        store = path / (modules_dir or WorkspaceConfig().modules_dir)
        try:
            store.mkdir(parents=True, exist_ok=True)
            config_file.write_text(render_config(repository, client), encoding="utf-8")
        except OSError as exc:
            return ServiceResult.failure(
                op, "CREATION_FAILURE", f"Cannot initialize {path}: {exc}", path=str(path)
            )

        warnings: list[str] = []
        if not repository:
            warnings.append("No repository set; edit [vcs] repository before checkout")
        logger.debug("Initialized projection root %s", path)
        if plugin_manager is not None:
            try:
                plugin_manager.dispatch(
                    "post_init", {"root": str(path), "repository": repository, "client": client}
                )
            except Exception:
                logger.debug("Plugin hook post_init failed", exc_info=True)
                warnings.append("Plugin hook post_init failed")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(path),
                "config": str(config_file),
                "modules_dir": str(store),
                "client": client,
                "repository": repository,
            },
            warnings=warnings,
        )
