"""External version-control client.

modlink never interprets version-control semantics. Each operation maps
to one subprocess invocation of the configured client; exit status and
output are passed through to the caller.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from modlink.config.models import VcsConfig
from modlink.domain.errors import VcsCommandFailure

logger = logging.getLogger(__name__)

# Verb -> client arguments. "checkout" and "export" take URL and destination.
_VERBS: dict[str, dict[str, tuple[str, ...]]] = {
    "svn": {
        "checkout": ("checkout",),
        "export": ("export",),
        "update": ("update",),
        "status": ("status",),
        "diff": ("diff",),
        "commit": ("commit",),
        "info": ("info",),
    },
    "git": {
        "checkout": ("clone",),
        "export": ("clone", "--depth", "1"),
        "update": ("pull", "--ff-only"),
        "status": ("status",),
        "diff": ("diff",),
        "commit": ("commit", "-a"),
        "info": ("log", "-1"),
    },
}

SUPPORTED_CLIENTS = tuple(_VERBS)
PASSTHROUGH_VERBS = ("status", "diff", "commit", "info")


@dataclass(frozen=True)
class VcsOutput:
    """Uninterpreted result of a client invocation."""

    command: list[str]
    returncode: int
    stdout: str
    stderr: str


class VcsClient:
    """Run the configured client as a subprocess."""

    def __init__(self, config: VcsConfig | None = None) -> None:
        self._config = config or VcsConfig()
        if self._config.client not in _VERBS:
            msg = f"Unsupported VCS client {self._config.client!r}"
            raise ValueError(msg)

    @property
    def client(self) -> str:
        return self._config.client

    @property
    def executable(self) -> str:
        return self._config.command or self._config.client

    def module_url(self, module: str) -> str:
        repository = self._config.repository.rstrip("/")
        if not repository:
            msg = "No repository configured; set [vcs] repository in modlink.toml"
            raise VcsCommandFailure(msg, module=module)
        return f"{repository}/{module}"

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def checkout(self, module: str, dest: Path, extra: Sequence[str] = ()) -> VcsOutput:
        return self._run("checkout", *extra, self.module_url(module), os.fspath(dest))

    def export(self, module: str, dest: Path, extra: Sequence[str] = ()) -> VcsOutput:
        """Fetch *module* into *dest* without version-control metadata."""
        out = self._run("export", *extra, self.module_url(module), os.fspath(dest))
        if self.client == "git":
            # git has no export verb; a shallow clone minus .git is equivalent.
            shutil.rmtree(dest / ".git", ignore_errors=True)
        return out

    def update(self, working_copy: Path, extra: Sequence[str] = ()) -> VcsOutput:
        return self._run("update", *extra, cwd=working_copy)

    def run(self, verb: str, working_copy: Path, extra: Sequence[str] = ()) -> VcsOutput:
        """Pass-through for status/diff/commit/info."""
        if verb not in PASSTHROUGH_VERBS:
            msg = f"Unknown VCS verb {verb!r}"
            raise ValueError(msg)
        return self._run(verb, *extra, cwd=working_copy)

    # ------------------------------------------------------------------
    # Subprocess helper
    # ------------------------------------------------------------------

    def argv(self, verb: str, *args: str) -> list[str]:
        return [self.executable, *_VERBS[self.client][verb], *args]

    def _run(self, verb: str, *args: str, cwd: Path | None = None) -> VcsOutput:
        command = self.argv(verb, *args)
        logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)
        try:
            proc = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            msg = f"Cannot run {self.executable}: {exc}"
            raise VcsCommandFailure(msg, command=command, returncode=None) from exc

        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            msg = f"{' '.join(command)} exited with status {proc.returncode}"
            if stderr:
                msg = f"{msg}: {stderr.splitlines()[-1]}"
            raise VcsCommandFailure(
                msg,
                command=command,
                returncode=proc.returncode,
                stderr=stderr,
                stdout=proc.stdout,
            )
        return VcsOutput(
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
