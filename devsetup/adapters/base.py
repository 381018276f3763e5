"""
Runner base — the protocol contract between the installer and the host.

Install routines never call ``subprocess`` or ``shutil.which`` directly.
They talk to a CommandRunner, which answers presence checks and runs
commands. The shell runner does this for real; the mock runner stands
in for a host in tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from devsetup.core.models.command import Command, Receipt

logger = logging.getLogger(__name__)


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners perform side effects and return receipts. They NEVER raise
    for a failing command; failures are captured in the Receipt.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement name, is_root, which, add_to_path, capture, _execute
    """

    use_sudo: bool = True

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @property
    @abstractmethod
    def is_root(self) -> bool:
        """Whether commands already run with root privileges."""

    @abstractmethod
    def which(self, tool: str) -> str | None:
        """Resolve a command name on the runner's search path."""

    @abstractmethod
    def add_to_path(self, directory: str) -> None:
        """Prepend a directory to the search path for the rest of the run.

        Installers that drop binaries in ``~/.local/bin`` and similar
        only update shell rc files; this makes the binary visible to the
        current run without a new shell.
        """

    @abstractmethod
    def capture(self, argv: Sequence[str], *, unset_env: Sequence[str] = ()) -> str | None:
        """Run a read-only query and return its combined output.

        Returns None when the command is missing or exits non-zero.
        Used for version strings and status queries, never for installs.
        """

    @abstractmethod
    def _execute(self, command: Command) -> Receipt:
        """Run the command and return a receipt. MUST never raise."""

    def exists(self, tool: str) -> bool:
        """Presence check: true iff ``tool`` resolves on the search path."""
        return self.which(tool) is not None

    @property
    def sudo_prefix(self) -> str:
        """Text substituted for ``{sudo}`` inside shell pipelines."""
        if self.is_root or not self.use_sudo:
            return ""
        return "sudo "

    def run(self, command: Command) -> Receipt:
        """Run a command; ``ignore_errors`` downgrades failure to skipped."""
        receipt = self._execute(command)
        if receipt.failed and command.ignore_errors:
            logger.debug("Ignoring failure of %s: %s", command.text, receipt.error)
            return Receipt.skip(
                action=receipt.action,
                reason=receipt.error or "",
                metadata=receipt.metadata,
            )
        return receipt

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
