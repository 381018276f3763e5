"""
Mock runner — a scripted host for tests and dry inspection.

Simulates a machine with a fixed set of tools on PATH. Commands are
matched against rules by substring; a matching rule can make the
command fail or "install" tools by adding them to the simulated PATH.
Every run() is logged so tests can assert exactly what was attempted.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from devsetup.adapters.base import CommandRunner
from devsetup.core.models.command import Command, Receipt

# Version strings returned by capture() when no rule overrides them.
_DEFAULT_OUTPUTS: dict[str, str] = {
    "python3": "Python 3.12.4",
}


@dataclass
class _Rule:
    fragment: str
    provides: tuple[str, ...] = ()
    fail: bool = False
    output: str = ""
    error: str = "Mock failure"
    hits: int = 0


@dataclass
class _Query:
    fragment: str
    output: str | None


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    By default every command succeeds and changes nothing. Use ``on()``
    to script installs and failures, ``answer()`` to script queries.
    """

    def __init__(
        self,
        present: Iterable[str] = (),
        *,
        root: bool = True,
        use_sudo: bool = True,
    ):
        self.use_sudo = use_sudo
        self._present: set[str] = set(present)
        self._root = root
        self._rules: list[_Rule] = []
        self._queries: list[_Query] = []
        self._path: list[str] = []
        self._call_log: list[Command] = []
        self._capture_log: list[list[str]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def is_root(self) -> bool:
        return self._root

    @property
    def call_log(self) -> list[Command]:
        """All commands passed to run(), in order."""
        return self._call_log

    @property
    def commands(self) -> list[str]:
        """Rendered text of every command passed to run()."""
        return [c.text for c in self._call_log]

    @property
    def capture_log(self) -> list[list[str]]:
        return self._capture_log

    @property
    def path_entries(self) -> list[str]:
        return list(self._path)

    @property
    def present(self) -> set[str]:
        return set(self._present)

    # ── Scripting ───────────────────────────────────────────────

    def add_tool(self, *tools: str) -> None:
        self._present.update(tools)

    def remove_tool(self, *tools: str) -> None:
        self._present.difference_update(tools)

    def on(
        self,
        fragment: str,
        *,
        provides: Iterable[str] = (),
        fail: bool = False,
        output: str = "",
        error: str = "Mock failure",
    ) -> None:
        """Script commands whose text contains ``fragment``.

        The first matching rule wins, so register specific fragments
        before general ones.
        """
        self._rules.append(_Rule(
            fragment=fragment,
            provides=tuple(provides),
            fail=fail,
            output=output,
            error=error,
        ))

    def answer(self, fragment: str, output: str | None) -> None:
        """Script capture() output; None makes the query fail."""
        self._queries.append(_Query(fragment=fragment, output=output))

    def ran(self, fragment: str) -> bool:
        """Whether any executed command contains ``fragment``."""
        return any(fragment in text for text in self.commands)

    # ── CommandRunner protocol ──────────────────────────────────

    def which(self, tool: str) -> str | None:
        if tool in self._present:
            return f"/mock/bin/{tool}"
        return None

    def add_to_path(self, directory: str) -> None:
        if directory not in self._path:
            self._path.insert(0, directory)

    def capture(self, argv: Sequence[str], *, unset_env: Sequence[str] = ()) -> str | None:
        self._capture_log.append(list(argv))
        if not argv or argv[0] not in self._present:
            return None
        text = shlex.join(argv)
        for query in self._queries:
            if query.fragment in text:
                return query.output
        return _DEFAULT_OUTPUTS.get(argv[0], f"{argv[0]} 1.0.0")

    def _execute(self, command: Command) -> Receipt:
        self._call_log.append(command)
        text = command.text
        for rule in self._rules:
            if rule.fragment not in text:
                continue
            rule.hits += 1
            if rule.fail:
                return Receipt.failure(action=text, error=rule.error)
            self._present.update(rule.provides)
            return Receipt.success(action=text, output=rule.output)
        return Receipt.success(action=text, output="[mock] executed")
