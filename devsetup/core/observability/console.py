"""
Console — prefixed, human-readable progress lines.

Every outcome of a run (info, success, warning, error) is surfaced as
one line with a distinct prefix. Errors always go to stderr. In JSON
mode the CLI sends everything to stderr so stdout carries only the
report.
"""

from __future__ import annotations

import click

PREFIX_INFO = "ℹ️ "
PREFIX_SUCCESS = "✅"
PREFIX_WARN = "⚠️ "
PREFIX_ERROR = "❌"


class Console:
    """Progress writer shared by the use case and the installer layers.

    Args:
        quiet: Hide info lines (warnings, errors and successes still show).
        err: Write every line to stderr instead of stdout.
    """

    def __init__(self, *, quiet: bool = False, err: bool = False):
        self._quiet = quiet
        self._err = err
        self._step = 0

    @property
    def step_count(self) -> int:
        """Number of step headers written so far."""
        return self._step

    def info(self, message: str) -> None:
        if self._quiet:
            return
        click.secho(f"{PREFIX_INFO} {message}", fg="blue", err=self._err)

    def success(self, message: str) -> None:
        click.secho(f"{PREFIX_SUCCESS} {message}", fg="green", err=self._err)

    def warn(self, message: str) -> None:
        click.secho(f"{PREFIX_WARN} {message}", fg="yellow", err=self._err)

    def error(self, message: str) -> None:
        click.secho(f"{PREFIX_ERROR} {message}", fg="red", err=True)

    def step(self, label: str) -> None:
        """Numbered step header, e.g. ``[3] Checking uv (required)``."""
        self._step += 1
        click.secho(f"[{self._step}] {label}", fg="cyan", bold=True, err=self._err)

    def blank(self) -> None:
        if not self._quiet:
            click.echo(err=self._err)
