"""
L2 Resolver — Install method selection.

Decides which channel installs a tool on this host. Priority lists are
data (the recipe's ``prefer`` table); this module only walks them.
"""

from __future__ import annotations

import logging

from devsetup.adapters.base import CommandRunner
from devsetup.core.models.platform import HostPlatform
from devsetup.core.services.installer.data.constants import (
    METHOD_BINARIES,
    SUDO_METHODS,
    SYSTEM_PACKAGE_MANAGERS,
)

logger = logging.getLogger(__name__)


def method_binary(recipe: dict, method: str) -> str | None:
    """Binary whose presence makes ``method`` usable (None: always usable)."""
    override = recipe.get("method_requires", {}).get(method)
    if override:
        return override
    if method == "_default":
        return None
    return METHOD_BINARIES.get(method, method)


def method_available(recipe: dict, method: str, runner: CommandRunner) -> bool:
    binary = method_binary(recipe, method)
    return binary is None or runner.exists(binary)


def method_needs_sudo(recipe: dict, method: str) -> bool:
    """Whether commands of ``method`` run as root by default."""
    override = recipe.get("needs_sudo", {})
    if method in override:
        return bool(override[method])
    return method in SUDO_METHODS


def candidate_methods(recipe: dict, host: HostPlatform) -> list[str]:
    """Ordered methods the recipe offers for this platform.

    A platform-specific list wins over the ``*`` wildcard. Methods named
    in ``prefer`` but missing from ``install`` are dropped.
    """
    prefer = recipe.get("prefer", {})
    order = prefer.get(host.tag.value, prefer.get("*", []))
    install = recipe.get("install", {})
    return [m for m in order if m in install]


def pick_install_method(
    recipe: dict,
    host: HostPlatform,
    runner: CommandRunner,
) -> str | None:
    """Pick the first available install method, or None.

    The first available method is used exclusively: if its command
    later fails, no other method is tried.
    """
    for method in candidate_methods(recipe, host):
        if method_available(recipe, method, runner):
            logger.debug("Selected method %s for %s", method, recipe.get("label"))
            return method
    return None


def detect_package_manager(runner: CommandRunner) -> str | None:
    """First system package manager on PATH, in probe order."""
    for pm in SYSTEM_PACKAGE_MANAGERS:
        if runner.exists(METHOD_BINARIES.get(pm, pm)):
            return pm
    return None

