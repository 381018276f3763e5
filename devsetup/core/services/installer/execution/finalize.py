"""
L4 Execution — Project finalization steps.

Run after the dependency phases: project dependency sync, environment
hook approval, starship configuration and cache cleanup. All of these
are best-effort: failures become warnings, never a non-zero exit.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from devsetup.core.models.command import Command, Receipt
from devsetup.core.services.installer.data.constants import (
    CACHE_CLEANUP,
    DIRENV_ALLOWED_MARKER,
    NPM_CACHE_CLEANUP,
    STARSHIP_CONFIG,
)
from devsetup.core.services.installer.detection.presence import python_version
from devsetup.core.services.installer.execution.command_builder import build_steps
from devsetup.core.services.installer.resolver.method_selection import detect_package_manager
from devsetup.core.services.installer.session import InstallSession

logger = logging.getLogger(__name__)


def sync_project_dependencies(session: InstallSession) -> Receipt:
    """``uv sync`` in the project root when it has a manifest."""
    manifest = session.project_root / session.config.manifest
    if not manifest.is_file():
        return Receipt.skip(action="uv sync", reason=f"no {session.config.manifest}")

    session.console.info("Syncing Python dependencies with uv")
    if python_version(session.runner) is None:
        session.console.warn(
            "Python not available - skipping uv sync. "
            "Run 'just install' manually after setup.",
        )
        return Receipt.skip(action="uv sync", reason="python3 not callable")

    receipt = session.runner.run(Command(
        argv=["uv", "sync"],
        cwd=str(session.project_root),
    ))
    if receipt.ok:
        session.console.success("Python dependencies installed")
    else:
        session.console.warn(
            f"uv sync failed ({receipt.error}). Run 'just install' manually after setup.",
        )
    return receipt


def allow_env_hook(session: InstallSession) -> Receipt:
    """``direnv allow`` the project unless it is already allowed."""
    hook = session.project_root / session.config.env_hook
    if not session.runner.exists("direnv") or not hook.is_file():
        return Receipt.skip(action="direnv allow", reason="no direnv or env hook")

    root = str(session.project_root)
    status = session.runner.capture(["direnv", "status", root]) or ""
    if DIRENV_ALLOWED_MARKER in status:
        session.console.success("direnv already allowed for this directory")
        return Receipt.skip(action="direnv allow", reason="already allowed")

    session.console.info("Running direnv allow")
    receipt = session.runner.run(Command(argv=["direnv", "allow", root], cwd=root))
    if receipt.ok:
        session.console.success("direnv allow completed")
    else:
        session.console.warn(f"direnv allow failed - run 'direnv allow' in {root}")
    return receipt


def configure_starship(session: InstallSession) -> Receipt:
    """Write the fixed prompt configuration, replacing any existing file."""
    path = Path(os.path.expanduser(session.config.starship_config))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(STARSHIP_CONFIG, encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write %s: %s", path, exc)
        session.console.warn(f"Could not write starship config to {path}: {exc}")
        return Receipt.failure(action="configure starship", error=str(exc))
    session.console.success(f"Starship configured at {path}")
    return Receipt.success(action="configure starship", metadata={"path": str(path)})


def cleanup_caches(session: InstallSession) -> list[Receipt]:
    """Purge package caches to keep container layers small."""
    session.console.info("Cleaning up package caches")
    receipts: list[Receipt] = []

    if session.platform.is_linux:
        pm = detect_package_manager(session.runner)
        if pm is not None:
            commands = build_steps(
                CACHE_CLEANUP[pm], session, sudo=True, ignore_errors=True,
            )
            receipts.extend(session.runner.run(c) for c in commands)

    if session.runner.exists("npm"):
        receipts.append(session.runner.run(
            Command(argv=NPM_CACHE_CLEANUP, ignore_errors=True),
        ))

    session.console.success("Cleanup completed")
    return receipts
