"""
Setup use case — bring a workstation up to the project's requirements.

Ties together config loading, platform detection and the phased
dependency check. The CLI calls this and only decides presentation
and exit code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.core.config.loader import ConfigError, load_config
from devsetup.core.models.options import SetupOptions
from devsetup.core.models.platform import HostPlatform
from devsetup.core.models.report import SetupReport
from devsetup.core.observability.console import Console
from devsetup.core.services.installer import InstallSession, check_dependencies, detect_platform
from devsetup.core.services.installer.data.constants import NEXT_STEPS_HINT

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Result of the setup use case."""

    report: SetupReport | None = None
    platform: HostPlatform | None = None
    project_root: Path | None = None
    error: str | None = None

    @property
    def exit_code(self) -> int:
        if self.error or self.report is None:
            return 1
        return self.report.exit_code

    def to_dict(self) -> dict:
        result: dict = {"exit_code": self.exit_code}
        if self.error:
            result["error"] = self.error
            return result

        result["project_root"] = str(self.project_root)
        if self.platform:
            result["machine"] = self.platform.machine
        if self.report:
            result.update(self.report.to_dict())
        return result


def run_setup(
    options: SetupOptions,
    *,
    project_root: Path | None = None,
    config_path: Path | None = None,
    runner: CommandRunner | None = None,
    console: Console | None = None,
    kernel: str | None = None,
    machine: str | None = None,
) -> SetupResult:
    """Detect the platform and ensure every dependency the options ask for.

    Args:
        options: Feature flags for this run.
        project_root: Directory holding pyproject.toml / .envrc (default: cwd).
        config_path: Explicit devsetup.yml (default: search from project_root).
        runner: Command runner (default: a ShellRunner on the real host).
        console: Progress output (default: stdout console).
        kernel: Override the detected kernel name (tests, dry inspection).
        machine: Override the detected architecture.
    """
    root = (project_root or Path.cwd()).resolve()
    console = console or Console()

    try:
        config = load_config(config_path, project_root=root)
    except ConfigError as exc:
        logger.error("Config error: %s", exc)
        console.error(str(exc))
        return SetupResult(project_root=root, error=str(exc))

    host = detect_platform(kernel, machine)
    console.info(f"Detected platform: {host.label}")

    if runner is None:
        from devsetup.adapters.shell.command import ShellRunner

        runner = ShellRunner(use_sudo=config.use_sudo, timeout=config.command_timeout)

    session = InstallSession(
        platform=host,
        options=options,
        config=config,
        runner=runner,
        console=console,
        project_root=root,
    )
    report = check_dependencies(session)

    if not report.aborted:
        console.blank()
        console.success("All required dependencies are installed!")
        console.info(NEXT_STEPS_HINT)

    return SetupResult(report=report, platform=host, project_root=root)
