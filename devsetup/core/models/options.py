"""
Feature flags — which optional dependency groups a run evaluates.

Built once from the command line and passed explicitly to every
routine that needs it.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

# Group names used by dependency recipes. ``docker_optimize`` changes
# behaviour (cache cleanup, skipped index refreshes) but gates no tools.
GROUPS: tuple[str, ...] = ("dev", "ci", "template", "starship")


class SetupOptions(BaseModel):
    """Immutable feature-flag set for one run."""

    model_config = ConfigDict(frozen=True)

    dev: bool = False
    ci: bool = False
    template: bool = False
    starship: bool = False
    docker_optimize: bool = False

    def enables(self, groups: Iterable[str]) -> bool:
        """True when any of the named groups is switched on."""
        return any(getattr(self, group, False) for group in groups)

    @property
    def active_groups(self) -> list[str]:
        return [group for group in GROUPS if getattr(self, group)]
