"""
L4 Execution — Per-tool install routines.

``install_tool`` is the single entry point. Table-driven tools go
through ``_install_from_recipe``; tools whose logic is more than a
method table (Python, gcloud, the assistant plugin) have a dedicated
routine. Every routine returns a Receipt and never raises for a
failed command.
"""

from __future__ import annotations

import logging

from devsetup.core.models.command import Command, Receipt
from devsetup.core.models.platform import Platform
from devsetup.core.services.installer.data.constants import (
    GCLOUD_ARCH_MAP,
    PACKAGE_INDEX_REFRESH,
)
from devsetup.core.services.installer.data.recipes import DEPENDENCY_RECIPES
from devsetup.core.services.installer.detection.presence import is_present
from devsetup.core.services.installer.domain.version_constraint import latest_matching
from devsetup.core.services.installer.execution.command_builder import build_steps, render
from devsetup.core.services.installer.resolver.method_selection import (
    candidate_methods,
    method_needs_sudo,
    pick_install_method,
)
from devsetup.core.services.installer.session import InstallSession

logger = logging.getLogger(__name__)


def tool_label(tool_id: str, session: InstallSession) -> str:
    return render(DEPENDENCY_RECIPES[tool_id]["label"], session)


def install_tool(tool_id: str, session: InstallSession) -> Receipt:
    """Install one dependency through the best available channel.

    Preconditions (``requires``) are checked first; when one is unmet
    nothing is attempted. Callers must only invoke this for tools whose
    presence check is false.
    """
    recipe = DEPENDENCY_RECIPES[tool_id]
    label = tool_label(tool_id, session)
    session.console.info(f"Installing {label}")

    for binary in recipe.get("requires", []):
        if not session.runner.exists(binary):
            message = f"{binary} is required to install {label}"
            session.console.error(message)
            return Receipt.failure(action=tool_id, error=message)

    routine = recipe.get("routine")
    if routine == "python":
        receipt = _install_python(tool_id, session)
    elif routine == "gcloud":
        receipt = _install_gcloud(tool_id, session)
    elif routine == "claude_plugin":
        receipt = _install_claude_plugin(tool_id, session)
    else:
        receipt = _install_from_recipe(tool_id, session)

    if receipt.ok and recipe.get("success_note"):
        session.console.info(render(recipe["success_note"], session))
    return receipt


# ── Table-driven install ────────────────────────────────────────


def _install_from_recipe(
    tool_id: str,
    session: InstallSession,
    *,
    method: str | None = None,
) -> Receipt:
    recipe = DEPENDENCY_RECIPES[tool_id]
    if method is None:
        method = pick_install_method(recipe, session.platform, session.runner)
    if method is None:
        message = _no_method_message(tool_id, session)
        session.console.warn(message)
        return Receipt.failure(action=tool_id, error=message)

    note = recipe.get("notes", {}).get(method)
    if note:
        session.console.info(render(note, session))

    receipt = _run_method(tool_id, method, session)
    if receipt.failed:
        return receipt
    return _verify(tool_id, method, session)


def _no_method_message(tool_id: str, session: InstallSession) -> str:
    """Warning shown when no install channel is usable on this host."""
    recipe = DEPENDENCY_RECIPES[tool_id]
    label = tool_label(tool_id, session)
    url = recipe.get("url")
    where = f" from {url}" if url else ""
    offered = candidate_methods(recipe, session.platform)

    if session.platform.is_mac and "brew" in offered:
        return f"Homebrew not found. Please install {label} manually{where}"
    if offered:
        return f"No suitable package manager found. Please install {label} manually{where}"
    return (
        f"Unsupported platform for automatic {label} installation: "
        f"{session.platform.label}. Please install it manually{where}"
    )


def _run_method(tool_id: str, method: str, session: InstallSession) -> Receipt:
    """Run every step of one install method, stopping at the first failure."""
    recipe = DEPENDENCY_RECIPES[tool_id]
    if method in PACKAGE_INDEX_REFRESH:
        refresh_package_index(session, method)

    commands = build_steps(
        recipe["install"][method], session,
        sudo=method_needs_sudo(recipe, method),
    )
    for command in commands:
        logger.debug("[%s] %s: %s", tool_id, method, command.text)
        receipt = session.runner.run(command)
        if receipt.failed:
            logger.warning("Install step failed for %s: %s", tool_id, receipt.error)
            return Receipt.failure(
                action=tool_id,
                error=receipt.error or f"{command.text} failed",
                metadata={"method": method, "command": command.text},
            )

    for post in recipe.get("post_install", {}).get(method, []):
        for command in build_steps(post, session, sudo=True, ignore_errors=True):
            session.runner.run(command)

    for directory in recipe.get("post_path", []):
        session.runner.add_to_path(directory)

    return Receipt.success(action=tool_id, metadata={"method": method})


def _verify(
    tool_id: str,
    method: str,
    session: InstallSession,
    *,
    hint: str | None = None,
) -> Receipt:
    """Re-check presence after a successful install.

    Installers often change PATH or shell profiles that only a new
    session picks up, so a tool still missing here is a warning (the
    recipe's ``restart_hint`` or a generic one), never a failure.
    """
    if is_present(tool_id, session):
        return Receipt.success(action=tool_id, metadata={"method": method})

    hint = hint or DEPENDENCY_RECIPES[tool_id].get("restart_hint")
    if not hint:
        hint = f"{tool_label(tool_id, session)} installation may require shell restart"
    logger.warning("%s not found after install via %s", tool_id, method)
    session.console.warn(render(hint, session))
    return Receipt.success(
        action=tool_id,
        metadata={"method": method, "verified": False},
    )


def refresh_package_index(session: InstallSession, pm: str) -> None:
    """Refresh the system package index once per run.

    Skipped entirely under ``--docker-optimize``. A failed refresh is
    logged and does not block the install that triggered it.
    """
    if session.index_refreshed or session.options.docker_optimize:
        return
    argv = PACKAGE_INDEX_REFRESH.get(pm)
    if argv is None:
        return
    session.index_refreshed = True
    receipt = session.runner.run(Command(argv=argv, sudo=True, ignore_errors=True))
    if not receipt.ok:
        logger.warning("Package index refresh failed: %s", receipt.output)


# ── Python ──────────────────────────────────────────────────────


def _install_python(tool_id: str, session: InstallSession) -> Receipt:
    """pyenv first, then the system package manager."""
    if session.runner.exists("pyenv"):
        session.console.info("Found pyenv - using it to manage Python")
        receipt = _install_python_pyenv(tool_id, session)
        if receipt is not None:
            return receipt

    session.console.info(
        render("Installing Python {python_min}+ via system package manager", session),
    )
    return _install_from_recipe(tool_id, session)


def _install_python_pyenv(tool_id: str, session: InstallSession) -> Receipt | None:
    """Install the newest interpreter of the minimum series with pyenv.

    Returns None when pyenv has no matching version, so the caller can
    fall back to the system package manager.
    """
    runner = session.runner
    series = session.config.python_min_version
    pinned = (session.project_root / ".python-version").is_file()
    cwd = str(session.project_root)
    hint = (
        f"Python {series} is managed by pyenv; select it with "
        f"'pyenv local {series}' or 'pyenv global {series}' if python3 is older"
    )
    runner.add_to_path("~/.pyenv/shims")

    installed = (runner.capture(["pyenv", "versions", "--bare"]) or "").splitlines()
    if any(v.strip().startswith(f"{series}.") or v.strip() == series for v in installed):
        session.console.success(f"Python {series} already installed via pyenv")
        if pinned:
            runner.run(Command(argv=["pyenv", "local", series], cwd=cwd, ignore_errors=True))
        return _verify(tool_id, "pyenv", session, hint=hint)

    available = (runner.capture(["pyenv", "install", "--list"]) or "").splitlines()
    latest = latest_matching(available, series)
    if latest is None:
        session.console.warn(
            f"Could not find Python {series} in pyenv - falling back to system install",
        )
        return None

    session.console.info(f"Installing Python {latest} via pyenv")
    receipt = runner.run(Command(argv=["pyenv", "install", latest]))
    if receipt.failed:
        return Receipt.failure(
            action=tool_id,
            error=receipt.error or f"pyenv install {latest} failed",
            metadata={"method": "pyenv"},
        )
    if pinned:
        runner.run(Command(argv=["pyenv", "local", latest], cwd=cwd, ignore_errors=True))
    session.console.success(f"Python {latest} installed via pyenv")
    return _verify(tool_id, "pyenv", session, hint=hint)


# ── Google Cloud SDK ────────────────────────────────────────────


def _install_gcloud(tool_id: str, session: InstallSession) -> Receipt:
    """Cloud SDK: architecture check, then per-channel preconditions."""
    host = session.platform
    if host.tag is Platform.LINUX and host.machine not in GCLOUD_ARCH_MAP:
        message = f"Unsupported architecture for gcloud: {host.machine}"
        session.console.error(message)
        return Receipt.failure(action=tool_id, error=message)

    recipe = DEPENDENCY_RECIPES[tool_id]
    method = pick_install_method(recipe, host, session.runner)
    if method == "apt" and not session.runner.exists("curl"):
        message = "curl is required to install gcloud"
        session.console.error(message)
        return Receipt.failure(action=tool_id, error=message)
    return _install_from_recipe(tool_id, session, method=method)


# ── Assistant plugin ────────────────────────────────────────────


def _install_claude_plugin(tool_id: str, session: InstallSession) -> Receipt:
    """Register the marketplace, then install the plugin from it."""
    runner = session.runner
    plugin = session.config.claude_plugin
    if not runner.exists("claude"):
        message = "Claude CLI not found - skipping plugin installation"
        session.console.warn(message)
        return Receipt.failure(action=tool_id, error=message)

    # Re-adding a known marketplace fails harmlessly.
    runner.run(Command(
        argv=["claude", "plugin", "marketplace", "add", plugin.marketplace],
        ignore_errors=True,
    ))
    receipt = runner.run(Command(argv=["claude", "plugin", "install", plugin.name]))
    if receipt.failed:
        session.console.warn(
            f"Failed to install {plugin.name} plugin - you can install it manually "
            f"with 'claude plugin install {plugin.name}'",
        )
        return Receipt.failure(
            action=tool_id,
            error=receipt.error or "plugin install failed",
        )
    return Receipt.success(action=tool_id, metadata={"method": "claude"})


# ── Release tooling ─────────────────────────────────────────────


def install_release_plugins(session: InstallSession) -> Receipt:
    """Global npm install of semantic-release and its plugins.

    Installed globally so projects need no package.json. Best-effort:
    npm warnings and failures never fail the run.
    """
    plugins = session.config.release_plugins
    if not plugins:
        return Receipt.skip(action="release_plugins", reason="no plugins configured")
    if not session.runner.exists("npm"):
        session.console.warn("npm not found - skipping semantic-release plugins")
        return Receipt.skip(action="release_plugins", reason="npm not found")

    session.console.info("Installing semantic-release and plugins")
    receipt = session.runner.run(Command(
        argv=["npm", "install", "-g", *plugins],
        ignore_errors=True,
    ))
    if receipt.ok:
        session.console.success("semantic-release plugins installed")
    else:
        session.console.warn(
            "semantic-release plugins could not be installed - "
            f"run 'npm install -g {' '.join(plugins)}' manually",
        )
    return receipt.model_copy(update={"action": "release_plugins"})

