"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from devsetup.core.models import Command, Receipt, SetupOptions, SetupReport
"""

from devsetup.core.models.command import Command, Receipt
from devsetup.core.models.config import ClaudePluginConfig, SetupConfig
from devsetup.core.models.options import SetupOptions
from devsetup.core.models.platform import HostPlatform, Platform
from devsetup.core.models.report import DependencyOutcome, SetupReport

__all__ = [
    # config.py
    "ClaudePluginConfig",
    # command.py
    "Command",
    # report.py
    "DependencyOutcome",
    # platform.py
    "HostPlatform",
    "Platform",
    "Receipt",
    "SetupConfig",
    # options.py
    "SetupOptions",
    "SetupReport",
]
