"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, modlink.toml only contains
overrides. A fresh root needs only ``[vcs] repository``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

# --- modlink.toml sections ---


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    modules_dir: str = ".modlink/modules"
    descriptor: str = "modlink.map"

    @field_validator("descriptor")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            msg = f"descriptor must be a plain filename, got {value!r}"
            raise ValueError(msg)
        return value


class VcsConfig(BaseModel):
    """[vcs] section."""

    model_config = {"frozen": True}

    client: Literal["svn", "git"] = "svn"
    command: str = ""
    repository: str = ""


class ProjectionConfig(BaseModel):
    """[projection] section."""

    model_config = {"frozen": True}

    relative_links: bool = False
    sweep_after_update: bool = True


class ModlinkConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    vcs: VcsConfig = Field(default_factory=VcsConfig)
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
