"""
Shell runner — execute install commands on the real host.

Presence checks resolve against the process PATH plus any directories
added during the run. Commands go through the installer's single
subprocess entry point.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Sequence

from devsetup.adapters.base import CommandRunner
from devsetup.core.models.command import Command, Receipt
from devsetup.core.services.installer.execution.subprocess_runner import (
    _run_subprocess,
    is_root,
)

logger = logging.getLogger(__name__)

# Version and status queries should answer quickly.
_CAPTURE_TIMEOUT = 30


class ShellRunner(CommandRunner):
    """Run commands with ``subprocess`` and resolve tools with ``shutil.which``.

    Args:
        use_sudo: Prefix root-requiring commands with sudo when not root.
        timeout: Per-command timeout in seconds.
    """

    def __init__(self, *, use_sudo: bool = True, timeout: int = 900):
        self.use_sudo = use_sudo
        self._timeout = timeout
        self._extra_path: list[str] = []

    @property
    def name(self) -> str:
        return "shell"

    @property
    def is_root(self) -> bool:
        return is_root()

    def search_path(self) -> str:
        """PATH as seen by presence checks and child processes."""
        return os.pathsep.join(self._extra_path + [os.environ.get("PATH", "")])

    def which(self, tool: str) -> str | None:
        return shutil.which(tool, path=self.search_path())

    def add_to_path(self, directory: str) -> None:
        expanded = os.path.expanduser(directory)
        if expanded not in self._extra_path:
            logger.debug("Adding %s to search path", expanded)
            self._extra_path.insert(0, expanded)

    def capture(self, argv: Sequence[str], *, unset_env: Sequence[str] = ()) -> str | None:
        if not argv or not self.exists(argv[0]):
            return None
        result = _run_subprocess(
            list(argv),
            timeout=_CAPTURE_TIMEOUT,
            env_overrides={"PATH": self.search_path()},
            unset_env=list(unset_env),
        )
        if not result["ok"]:
            return None
        return (result.get("stdout", "") + result.get("stderr", "")).strip()

    def _execute(self, command: Command) -> Receipt:
        result = _run_subprocess(
            list(command.argv),
            needs_sudo=command.sudo and self.use_sudo,
            timeout=self._timeout,
            env_overrides={"PATH": self.search_path()},
            unset_env=list(command.unset_env),
            cwd=command.cwd,
        )
        if result["ok"]:
            return Receipt.success(
                action=command.text,
                output=result.get("stdout", ""),
                duration_ms=result.get("elapsed_ms", 0),
                metadata={"stderr": result.get("stderr", "")},
            )

        error = result["error"]
        stderr = result.get("stderr", "").strip()
        if stderr:
            error = f"{error}: {stderr.splitlines()[-1]}"
        return Receipt.failure(
            action=command.text,
            error=error,
            duration_ms=result.get("elapsed_ms", 0),
            metadata={
                "returncode": result.get("returncode"),
                "stderr": stderr,
                "stdout": result.get("stdout", ""),
            },
        )
