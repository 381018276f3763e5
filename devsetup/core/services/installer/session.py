"""
Install session — everything one run needs, built once.

Platform, options and config are immutable values. The session is the
single place per-run mutable state lives (the package-index refresh
flag), so routines never consult globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devsetup.adapters.base import CommandRunner
from devsetup.core.models.config import SetupConfig
from devsetup.core.models.options import SetupOptions
from devsetup.core.models.platform import HostPlatform
from devsetup.core.models.report import SetupReport
from devsetup.core.observability.console import Console


@dataclass
class InstallSession:
    """Context passed explicitly to every install routine."""

    platform: HostPlatform
    options: SetupOptions
    config: SetupConfig
    runner: CommandRunner
    console: Console
    project_root: Path
    report: SetupReport = field(default_factory=SetupReport)
    index_refreshed: bool = False
