"""
L5 Orchestration — Dependency check phases.

Required tools first, always all of them, in fixed order. Any failure
aborts before optional work. Then project sync, flag-gated optional
tools (whose failures are only warnings) and finalize steps.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from devsetup.core.models.command import Receipt
from devsetup.core.models.report import DependencyOutcome, SetupReport
from devsetup.core.services.installer.data.recipes import (
    DEPENDENCY_RECIPES,
    OPTIONAL_DEPENDENCIES,
    REQUIRED_DEPENDENCIES,
)
from devsetup.core.services.installer.detection.presence import get_tool_version, is_present
from devsetup.core.services.installer.execution.command_builder import render
from devsetup.core.services.installer.execution.finalize import (
    allow_env_hook,
    cleanup_caches,
    configure_starship,
    sync_project_dependencies,
)
from devsetup.core.services.installer.execution.install_steps import (
    install_release_plugins,
    install_tool,
    tool_label,
)
from devsetup.core.services.installer.session import InstallSession

logger = logging.getLogger(__name__)

_GROUP_TITLES: dict[str, str] = {
    "dev": "Development tools (--dev)",
    "ci": "CI tools (--ci)",
    "template": "Template testing tools (--template)",
    "starship": "Prompt (--starship)",
}

# Follow-up steps a recipe can name in its ``then`` field.
_FOLLOW_UPS: dict[str, tuple[str, Callable[[InstallSession], Receipt]]] = {
    "release_plugins": ("Installing semantic-release plugins", install_release_plugins),
    "configure_starship": ("Configuring starship", configure_starship),
}


def ensure_dependency(tool_id: str, session: InstallSession) -> DependencyOutcome:
    """Check one tool and install it when missing.

    Never invokes the install routine for a tool that is already present.
    """
    recipe = DEPENDENCY_RECIPES[tool_id]
    label = tool_label(tool_id, session)
    required = bool(recipe.get("required"))
    console = session.console
    report = session.report

    console.step(f"Checking {label}" + (" (required)" if required else ""))

    if is_present(tool_id, session):
        version = get_tool_version(tool_id, session.runner)
        suffix = f": {version}" if version else ""
        console.success(f"{label} is already installed{suffix}")
        return report.record(DependencyOutcome(
            tool=tool_id, label=label, required=required,
            status="present", version=version,
        ))

    missing = render(recipe.get("missing", "not found"), session)
    purpose = recipe.get("purpose")
    console.warn(f"{label} {missing}" + (f" ({purpose})" if purpose else ""))

    receipt = install_tool(tool_id, session)
    if receipt.ok:
        console.success(f"{label} installed successfully")
        version = get_tool_version(tool_id, session.runner)
        return report.record(DependencyOutcome(
            tool=tool_id, label=label, required=required,
            status="installed", version=version,
        ))

    manual = render(recipe.get("manual", "please install it manually"), session)
    if required:
        console.error(f"Failed to install {label} - {manual} and re-run setup")
    else:
        console.warn(f"Skipping {label} - {manual}")
    logger.warning("%s not installed: %s", tool_id, receipt.error)
    return report.record(DependencyOutcome(
        tool=tool_id, label=label, required=required,
        status="failed", message=receipt.error or "",
    ))


def check_dependencies(session: InstallSession) -> SetupReport:
    """Run every phase and return the report.

    The report is ``aborted`` when any required tool is missing after
    its install attempt; nothing past the required phase runs then.
    """
    report = session.report
    report.platform = session.platform.label
    _announce(session)

    for tool_id in REQUIRED_DEPENDENCIES:
        ensure_dependency(tool_id, session)

    if report.failed_required:
        session.console.error(
            "Required dependencies are missing. Please install them and re-run setup.",
        )
        logger.error("Required dependencies missing: %s", ", ".join(report.failed_required))
        report.aborted = True
        return report

    report.steps.append(sync_project_dependencies(session))

    for tool_id in OPTIONAL_DEPENDENCIES:
        _check_optional(tool_id, session)

    _finalize(session)
    return report


def _check_optional(tool_id: str, session: InstallSession) -> None:
    recipe = DEPENDENCY_RECIPES[tool_id]
    if not session.options.enables(recipe.get("groups", [])):
        return

    gate = recipe.get("gate")
    if gate and not session.runner.exists(gate):
        label = tool_label(tool_id, session)
        session.console.warn(f"{gate.capitalize()} CLI not found - skipping {label}")
        session.report.record(DependencyOutcome(
            tool=tool_id, label=label, status="skipped",
            message=f"{gate} not found",
        ))
        return

    outcome = ensure_dependency(tool_id, session)

    follow_up = recipe.get("then")
    if not follow_up:
        return
    if follow_up["when"] == "installed" and outcome.status != "installed":
        return
    if follow_up["when"] == "available" and not session.runner.exists(recipe["cli"]):
        return
    title, step = _FOLLOW_UPS[follow_up["step"]]
    session.console.step(title)
    session.report.steps.append(step(session))


def _announce(session: InstallSession) -> None:
    """Say what this run will check before checking anything."""
    console = session.console
    required = ", ".join(tool_label(t, session) for t in REQUIRED_DEPENDENCIES)
    console.info(f"Required dependencies: {required}")

    groups = session.options.active_groups
    if not groups:
        console.info(
            "Optional tools skipped (use --dev, --ci, --template or --starship to include them)",
        )
        return
    for group in groups:
        labels = [
            tool_label(t, session) for t in OPTIONAL_DEPENDENCIES
            if group in DEPENDENCY_RECIPES[t].get("groups", [])
        ]
        console.info(f"{_GROUP_TITLES[group]}: {', '.join(labels)} (will be installed)")
    console.blank()


def _finalize(session: InstallSession) -> None:
    session.report.steps.append(allow_env_hook(session))
    if session.options.docker_optimize:
        session.report.steps.extend(cleanup_caches(session))
