"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devsetup.adapters.mock import MockRunner
from devsetup.core.models.config import SetupConfig
from devsetup.core.models.options import SetupOptions
from devsetup.core.observability.console import Console
from devsetup.core.services.installer.detection.platform import detect_platform
from devsetup.core.services.installer.session import InstallSession

# Commands a fully provisioned host resolves for the required phase.
REQUIRED_CLIS = ["bash", "just", "python3", "uv", "direnv"]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty project directory (no pyproject.toml, no .envrc)."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def make_session(project_dir: Path, tmp_path: Path):
    """Factory for an InstallSession on a scripted host.

    Returns ``(session, runner)``. The starship config path points
    inside ``tmp_path`` so no test writes to the real home directory.
    """

    def _make(
        present=(),
        *,
        kernel: str = "Linux",
        machine: str = "x86_64",
        root: bool = True,
        use_sudo: bool = True,
        options: SetupOptions | None = None,
        config: SetupConfig | None = None,
    ):
        runner = MockRunner(present, root=root, use_sudo=use_sudo)
        session = InstallSession(
            platform=detect_platform(kernel, machine),
            options=options or SetupOptions(),
            config=config or SetupConfig(
                starship_config=str(tmp_path / "home" / ".config" / "starship.toml"),
            ),
            runner=runner,
            console=Console(),
            project_root=project_dir,
        )
        return session, runner

    return _make
