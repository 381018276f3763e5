"""
Dependency installer — detect, install and verify development tools.

Layers, bottom-up:
    data/           recipes and constants (pure data)
    domain/         version parsing (pure)
    resolver/       install-method selection
    detection/      platform, presence and version probes
    execution/      subprocess runner, install routines, finalize steps
    orchestration/  the phased dependency check
"""

from devsetup.core.services.installer.data.recipes import (  # noqa: F401
    DEPENDENCY_RECIPES,
    OPTIONAL_DEPENDENCIES,
    REQUIRED_DEPENDENCIES,
)
from devsetup.core.services.installer.detection.platform import detect_platform  # noqa: F401
from devsetup.core.services.installer.detection.presence import (  # noqa: F401
    get_tool_version,
    is_present,
)
from devsetup.core.services.installer.execution.install_steps import install_tool  # noqa: F401
from devsetup.core.services.installer.orchestration.orchestrator import (  # noqa: F401
    check_dependencies,
    ensure_dependency,
)
from devsetup.core.services.installer.session import InstallSession  # noqa: F401
