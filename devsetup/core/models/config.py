"""
Setup configuration — optional per-project overrides (devsetup.yml).

Every field has a default, so a project without a config file gets the
stock behaviour.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RELEASE_PLUGINS: list[str] = [
    "semantic-release",
    "@semantic-release/changelog",
    "@semantic-release/exec",
    "@semantic-release/git",
    "conventional-changelog-conventionalcommits",
]


class ClaudePluginConfig(BaseModel):
    """Which assistant plugin to install, and from which marketplace."""

    model_config = ConfigDict(extra="forbid")

    name: str = "claudevoyant"
    marketplace: str = "cloudvoyant/claudevoyant"


class SetupConfig(BaseModel):
    """Validated contents of devsetup.yml."""

    model_config = ConfigDict(extra="forbid")

    python_min_version: str = "3.12"
    release_plugins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RELEASE_PLUGINS),
    )
    claude_plugin: ClaudePluginConfig = Field(default_factory=ClaudePluginConfig)
    starship_config: str = "~/.config/starship.toml"
    use_sudo: bool = True
    command_timeout: int = Field(default=900, gt=0)
    manifest: str = "pyproject.toml"   # triggers `uv sync` when present
    env_hook: str = ".envrc"           # triggers `direnv allow` when present

    @field_validator("python_min_version")
    @classmethod
    def _numeric_version(cls, value: str) -> str:
        parts = value.split(".")
        if not all(p.isdigit() for p in parts):
            raise ValueError(f"python_min_version must be dotted numbers, got {value!r}")
        return value
