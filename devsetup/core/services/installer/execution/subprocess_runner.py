"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for install
operations. Sudo handling, environment shaping, timeouts and error
capture are centralised here.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)

_OUTPUT_TAIL = 2000


def is_root() -> bool:
    """Whether the current process runs as root (always False on Windows)."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _run_subprocess(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: int = 900,
    env_overrides: dict[str, str] | None = None,
    unset_env: list[str] | None = None,
    cwd: str | None = None,
) -> dict[str, Any]:
    """Run a subprocess command with sudo and env support.

    Sudo rules:
    - Already root → command runs unchanged.
    - Not root, ``sudo`` on PATH → ``sudo`` prefix (sudo prompts on the
      terminal itself; no password ever passes through this process).
    - Not root, no ``sudo`` → failure without running anything.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Whether the command requires root.
        timeout: Seconds before ``TimeoutExpired``.
        env_overrides: Extra env vars (e.g. PATH with install dirs).
        unset_env: Env vars removed for this command only.
        cwd: Working directory for the command.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    # ── Sudo handling ──
    if needs_sudo and not is_root():
        if not shutil.which("sudo"):
            return {
                "ok": False,
                "error": "This step requires root privileges and sudo is not available.",
            }
        cmd = ["sudo"] + cmd

    # ── Environment ──
    env = os.environ.copy()
    if env_overrides:
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)
    for key in unset_env or ():
        env.pop(key, None)

    # ── Execute ──
    logger.debug("Running: %s (cwd=%s)", cmd, cwd)
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
        )
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode == 0:
            return {
                "ok": True,
                "stdout": result.stdout[-_OUTPUT_TAIL:] if result.stdout else "",
                "stderr": result.stderr[-_OUTPUT_TAIL:] if result.stderr else "",
                "elapsed_ms": elapsed_ms,
            }

        stderr = result.stderr[-_OUTPUT_TAIL:] if result.stderr else ""
        logger.warning("Command failed (exit %d): %s", result.returncode, cmd)
        return {
            "ok": False,
            "error": f"Command failed (exit {result.returncode})",
            "returncode": result.returncode,
            "stderr": stderr,
            "stdout": result.stdout[-_OUTPUT_TAIL:] if result.stdout else "",
            "elapsed_ms": elapsed_ms,
        }

    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, cmd)
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "error": str(e)}
