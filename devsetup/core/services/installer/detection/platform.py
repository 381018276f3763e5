"""
L3 Detection — Host platform.

Maps the kernel name to a Platform tag by prefix. Computed once per
run, before any dependency logic.
"""

from __future__ import annotations

import logging
import platform as _platform

from devsetup.core.models.platform import HostPlatform, Platform

logger = logging.getLogger(__name__)

# Kernel-name prefix → platform, checked in order.
_KERNEL_PREFIXES: tuple[tuple[str, Platform], ...] = (
    ("Linux", Platform.LINUX),
    ("Darwin", Platform.MAC),
    ("CYGWIN", Platform.CYGWIN),
    ("MINGW", Platform.MINGW),
    ("MSYS", Platform.GIT),
)


def detect_platform(kernel: str | None = None, machine: str | None = None) -> HostPlatform:
    """Classify the host.

    Args:
        kernel: Kernel name as ``uname -s`` prints it. Defaults to
            ``platform.system()``.
        machine: Architecture as ``uname -m`` prints it. Defaults to
            ``platform.machine()``.
    """
    if kernel is None:
        kernel = _platform.system()
    if machine is None:
        machine = _platform.machine()

    tag = Platform.UNKNOWN
    for prefix, candidate in _KERNEL_PREFIXES:
        if kernel.startswith(prefix):
            tag = candidate
            break

    host = HostPlatform(tag=tag, kernel=kernel, machine=machine)
    logger.info("Detected platform: %s (%s)", host.label, machine or "unknown arch")
    return host
