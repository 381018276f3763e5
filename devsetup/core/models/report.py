"""
Setup report — what one run found, installed, and failed to install.

Mutated only by the orchestrator while a run is in progress; read by
the CLI afterwards to decide the exit code and render JSON.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from devsetup.core.models.command import Receipt

OutcomeStatus = Literal["present", "installed", "failed", "skipped"]


class DependencyOutcome(BaseModel):
    """Final state of one dependency after its check (and install)."""

    tool: str
    label: str
    required: bool = False
    status: OutcomeStatus
    version: str | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status in ("present", "installed")


class SetupReport(BaseModel):
    """Accumulated outcome of a whole run."""

    platform: str = ""
    outcomes: list[DependencyOutcome] = Field(default_factory=list)
    steps: list[Receipt] = Field(default_factory=list)
    aborted: bool = False

    def record(self, outcome: DependencyOutcome) -> DependencyOutcome:
        self.outcomes.append(outcome)
        return outcome

    def outcome(self, tool: str) -> DependencyOutcome | None:
        """Look up the outcome for a tool, if it was evaluated."""
        for entry in self.outcomes:
            if entry.tool == tool:
                return entry
        return None

    @property
    def failed_required(self) -> list[str]:
        return [o.tool for o in self.outcomes if o.required and o.status == "failed"]

    @property
    def failed_optional(self) -> list[str]:
        return [o.tool for o in self.outcomes if not o.required and o.status == "failed"]

    @property
    def installed(self) -> list[str]:
        return [o.tool for o in self.outcomes if o.status == "installed"]

    @property
    def exit_code(self) -> int:
        return 1 if self.aborted else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "aborted": self.aborted,
            "exit_code": self.exit_code,
            "failed_required": self.failed_required,
            "failed_optional": self.failed_optional,
            "installed": self.installed,
            "dependencies": [o.model_dump() for o in self.outcomes],
            "steps": [
                {"action": s.action, "status": s.status, "error": s.error}
                for s in self.steps
            ],
        }
