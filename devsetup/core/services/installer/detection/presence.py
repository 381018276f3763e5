"""
L3 Detection — Presence and version probes.

Read-only: nothing here installs or mutates the host. A tool counts as
present when its command resolves on the runner's search path; Python
and the assistant plugin have stricter checks.
"""

from __future__ import annotations

import logging

from devsetup.adapters.base import CommandRunner
from devsetup.core.services.installer.data.recipes import DEPENDENCY_RECIPES
from devsetup.core.services.installer.domain.version_constraint import (
    parse_version,
    version_at_least,
)
from devsetup.core.services.installer.session import InstallSession

logger = logging.getLogger(__name__)

# A pinned pyenv version would make python3 report that version
# instead of the interpreter that is actually installed.
PYTHON_PROBE_UNSET = ["PYENV_VERSION"]


def python_version(runner: CommandRunner) -> str | None:
    """Version reported by ``python3 --version``, or None."""
    output = runner.capture(["python3", "--version"], unset_env=PYTHON_PROBE_UNSET)
    if not output:
        return None
    version = parse_version(output)
    if version is None:
        return None
    return ".".join(str(part) for part in version)


def python_ok(session: InstallSession) -> bool:
    """python3 is callable and at least the configured minimum."""
    version = python_version(session.runner)
    if version is None:
        return False
    ok = version_at_least(version, session.config.python_min_version)
    if not ok:
        logger.debug(
            "python3 %s is older than %s",
            version, session.config.python_min_version,
        )
    return ok


def plugin_installed(session: InstallSession) -> bool:
    """Whether ``claude plugin list`` mentions the configured plugin."""
    output = session.runner.capture(["claude", "plugin", "list"])
    return bool(output) and session.config.claude_plugin.name in output


def is_present(tool_id: str, session: InstallSession) -> bool:
    """Presence check for a dependency id."""
    recipe = DEPENDENCY_RECIPES[tool_id]
    check = recipe.get("presence")
    if check == "python":
        return python_ok(session)
    if check == "claude_plugin":
        return session.runner.exists("claude") and plugin_installed(session)
    return session.runner.exists(recipe["cli"])


def get_tool_version(tool_id: str, runner: CommandRunner) -> str | None:
    """First meaningful line of the tool's version output, or None."""
    recipe = DEPENDENCY_RECIPES[tool_id]
    argv = recipe.get("version")
    if not argv:
        return None
    unset = PYTHON_PROBE_UNSET if recipe.get("presence") == "python" else []
    output = runner.capture(argv, unset_env=unset)
    if not output:
        return None
    lines = output.splitlines()
    index = recipe.get("version_line", 0)
    if index >= len(lines):
        return lines[0].strip() or None
    return lines[index].strip() or None
