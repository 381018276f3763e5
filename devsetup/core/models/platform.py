"""
Host platform — the dispatch key every install routine branches on.

Computed once at startup from the running kernel and never mutated.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Platform(StrEnum):
    """Operating-system categories the installer distinguishes."""

    LINUX = "Linux"
    MAC = "Mac"
    CYGWIN = "Cygwin"
    MINGW = "MinGw"
    GIT = "Git"
    UNKNOWN = "Unknown"


class HostPlatform(BaseModel):
    """Detected platform tag plus the raw values it was derived from."""

    model_config = ConfigDict(frozen=True)

    tag: Platform
    kernel: str = ""    # raw kernel name, e.g. "Linux", "MINGW64_NT-10.0"
    machine: str = ""   # raw architecture, e.g. "x86_64", "arm64"

    @property
    def label(self) -> str:
        """Display label; unknown kernels keep their raw name."""
        if self.tag is Platform.UNKNOWN:
            return f"UNKNOWN:{self.kernel}"
        return self.tag.value

    @property
    def is_linux(self) -> bool:
        return self.tag is Platform.LINUX

    @property
    def is_mac(self) -> bool:
        return self.tag is Platform.MAC
