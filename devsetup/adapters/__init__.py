"""
Runners — the installer's only route to the host system.

    from devsetup.adapters import CommandRunner, ShellRunner, MockRunner
"""

from devsetup.adapters.base import CommandRunner
from devsetup.adapters.mock import MockRunner
from devsetup.adapters.shell.command import ShellRunner

__all__ = ["CommandRunner", "MockRunner", "ShellRunner"]
