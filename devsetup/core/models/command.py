"""
Command and Receipt models — the execution contract.

Commands represent requested subprocess invocations. Receipts represent
results. Runners take Commands and hand back Receipts, never exceptions:
a failing install is data the orchestrator decides about, not a crash.
"""

from __future__ import annotations

import shlex
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Command(BaseModel):
    """A subprocess invocation requested by an install routine."""

    argv: list[str]
    sudo: bool = False              # needs root; runner adds sudo when not root
    ignore_errors: bool = False     # failure is downgraded to a skipped receipt
    unset_env: list[str] = Field(default_factory=list)
    cwd: str | None = None

    @property
    def text(self) -> str:
        """Shell-quoted rendering, used for logs and receipts."""
        return shlex.join(self.argv)

    @classmethod
    def shell(cls, script: str, **kwargs: Any) -> Command:
        """Wrap a shell script in ``sh -c``.

        Pipelines (``curl ... | sh``) run under ``bash -o pipefail`` so a
        failed download fails the step; plain ``sh`` would report the
        status of the last stage, which exits 0 on empty input.
        """
        if "|" in script:
            return cls(argv=["bash", "-o", "pipefail", "-c", script], **kwargs)
        return cls(argv=["sh", "-c", script], **kwargs)


class Receipt(BaseModel):
    """Result of running a command or an install routine.

    ``action`` names what was attempted: the command text for runner
    receipts, the tool id for routine receipts.
    """

    action: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the action succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the action failed."""
        return self.status == "failed"

    @classmethod
    def success(cls, action: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(action=action, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, action: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(action=action, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, action: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a skip receipt."""
        return cls(action=action, status="skipped", output=reason, **kwargs)
