"""
Tests for the phased dependency check — required abort, optional
tolerance, flag gating, follow-up steps and idempotence.
"""

import shutil
from pathlib import Path

import pytest

from devsetup.adapters.shell.command import ShellRunner
from devsetup.core.models.config import SetupConfig
from devsetup.core.models.options import SetupOptions
from devsetup.core.observability.console import Console
from devsetup.core.services.installer.data.recipes import REQUIRED_DEPENDENCIES
from devsetup.core.services.installer.detection.platform import detect_platform
from devsetup.core.services.installer.orchestration.orchestrator import (
    check_dependencies,
    ensure_dependency,
)
from devsetup.core.services.installer.session import InstallSession

REQUIRED_CLIS = ["bash", "just", "python3", "uv", "direnv"]

# Every optional tool present, plus the package managers they came from.
DEV_CLIS = [
    "docker", "npx", "npm", "node", "gcloud", "twine",
    "shellcheck", "shfmt", "claude", "bats", "parallel", "starship",
]

ALL_FLAGS = SetupOptions(dev=True, ci=True, template=True, starship=True)


def _statuses(report):
    return {o.tool: o.status for o in report.outcomes}


class TestEnsureDependency:
    def test_present_tool_is_not_installed(self, make_session, capsys):
        session, runner = make_session(["bash"])
        outcome = ensure_dependency("bash", session)
        assert outcome.status == "present"
        assert outcome.version == "bash 1.0.0"
        assert runner.call_log == []
        out = capsys.readouterr().out
        assert "[1] Checking Bash (required)" in out
        assert "Bash is already installed: bash 1.0.0" in out

    def test_shellcheck_version_from_second_line(self, make_session):
        session, runner = make_session(["shellcheck"])
        runner.answer("shellcheck --version", "ShellCheck - shell script analysis tool\nversion: 0.9.0")
        assert ensure_dependency("shellcheck", session).version == "version: 0.9.0"

    def test_installed(self, make_session, capsys):
        session, runner = make_session(["apt-get"])
        runner.on("apt-get install", provides=["bash"])
        outcome = ensure_dependency("bash", session)
        assert outcome.status == "installed"
        out = capsys.readouterr().out
        assert "Bash not found" in out
        assert "Bash installed successfully" in out

    def test_required_failure_message(self, make_session, capsys):
        session, _ = make_session([])
        outcome = ensure_dependency("uv", session)
        # uv's installer "succeeds" but leaves nothing on PATH: restart hint.
        assert outcome.status == "installed"

        session, _ = make_session([])
        outcome = ensure_dependency("bash", session)
        assert outcome.status == "failed"
        err = capsys.readouterr().err
        assert "Failed to install Bash - please install manually and re-run setup" in err

    def test_optional_failure_is_a_warning(self, make_session, capsys):
        session, _ = make_session([])
        outcome = ensure_dependency("docker", session)
        assert outcome.status == "failed"
        captured = capsys.readouterr()
        assert "Skipping Docker - install manually from https://docker.com" in captured.out
        assert "Skipping Docker" not in captured.err

    def test_old_python_counts_as_missing(self, make_session, capsys):
        session, runner = make_session(["python3"])
        runner.answer("python3 --version", "Python 3.9.18")
        outcome = ensure_dependency("python", session)
        assert outcome.status == "failed"
        assert "not found, not working, or older than 3.12" in capsys.readouterr().out

    def test_python_probe_unsets_pyenv_version(self, make_session):
        session, runner = make_session(["python3"])
        ensure_dependency("python", session)
        assert ["python3", "--version"] in runner.capture_log


class TestRequiredPhase:
    def test_all_present_does_nothing(self, make_session):
        session, runner = make_session(REQUIRED_CLIS)
        report = check_dependencies(session)
        assert report.exit_code == 0
        assert runner.call_log == []
        assert [o.tool for o in report.outcomes] == list(REQUIRED_DEPENDENCIES)
        assert all(o.status == "present" for o in report.outcomes)

    def test_no_early_abort(self, make_session):
        session, runner = make_session(["python3", "uv", "direnv"])
        runner.on("just.systems", fail=True)
        report = check_dependencies(session)
        assert report.aborted
        assert report.exit_code == 1
        assert report.failed_required == ["bash", "just"]
        # All five were evaluated even though the first failed.
        assert [o.tool for o in report.outcomes] == list(REQUIRED_DEPENDENCIES)

    def test_abort_skips_everything_after(self, make_session, project_dir: Path, capsys):
        (project_dir / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        session, runner = make_session(
            ["just", "python3", "uv", "direnv"], options=ALL_FLAGS,
        )
        report = check_dependencies(session)
        assert report.aborted
        assert not runner.ran("uv sync")
        assert len(report.outcomes) == len(REQUIRED_DEPENDENCIES)
        assert "Required dependencies are missing" in capsys.readouterr().err

    def test_flags_do_not_change_required_phase(self, make_session):
        plain, plain_runner = make_session(["apt-get"])
        flagged, flagged_runner = make_session(["apt-get"], options=ALL_FLAGS)
        for runner in (plain_runner, flagged_runner):
            runner.on("apt-get install", fail=True)
        plain_report = check_dependencies(plain)
        flagged_report = check_dependencies(flagged)
        assert plain_report.aborted and flagged_report.aborted
        assert _statuses(plain_report) == _statuses(flagged_report)
        assert plain_runner.commands == flagged_runner.commands

    def test_missing_required_installed(self, make_session):
        session, runner = make_session(["bash", "python3", "uv", "direnv", "cargo"])
        runner.on("cargo install just", provides=["just"])
        report = check_dependencies(session)
        assert report.exit_code == 0
        assert report.installed == ["just"]


class TestOptionalPhase:
    def test_no_flags_checks_no_optional_tool(self, make_session):
        session, _ = make_session(REQUIRED_CLIS)
        report = check_dependencies(session)
        assert {o.tool for o in report.outcomes} == set(REQUIRED_DEPENDENCIES)

    def test_optional_failures_keep_exit_zero(self, make_session):
        session, runner = make_session(REQUIRED_CLIS + ["apt-get"], options=SetupOptions(dev=True))
        runner.on("apt-get install", fail=True)
        report = check_dependencies(session)
        assert report.exit_code == 0
        assert "docker" in report.failed_optional
        assert report.failed_required == []

    def test_ci_and_template_without_package_manager(self, make_session):
        session, _ = make_session(REQUIRED_CLIS, options=SetupOptions(ci=True, template=True))
        report = check_dependencies(session)
        assert report.exit_code == 0
        statuses = _statuses(report)
        assert statuses["bats"] == "failed"
        assert statuses["parallel"] == "failed"
        # --ci includes node and gcloud but not the dev-only linters.
        assert "node" in statuses
        assert "shellcheck" not in statuses

    def test_template_only(self, make_session):
        session, _ = make_session(REQUIRED_CLIS, options=SetupOptions(template=True))
        report = check_dependencies(session)
        optional = [o.tool for o in report.outcomes if not o.required]
        assert optional == ["bats", "parallel"]

    def test_dev_order(self, make_session):
        session, _ = make_session(REQUIRED_CLIS, options=SetupOptions(dev=True))
        report = check_dependencies(session)
        optional = [o.tool for o in report.outcomes if not o.required]
        assert optional == [
            "docker", "node", "gcloud", "twine", "shellcheck", "shfmt",
            "claude", "claude-plugin",
        ]

    def test_fully_provisioned_rerun_only_refreshes_release_plugins(self, make_session):
        session, runner = make_session(REQUIRED_CLIS + DEV_CLIS, options=ALL_FLAGS)
        runner.answer("claude plugin list", "claudevoyant@cloudvoyant (enabled)")
        report = check_dependencies(session)
        assert report.exit_code == 0
        assert report.installed == []
        assert len(runner.commands) == 1
        assert runner.commands[0].startswith("npm install -g semantic-release")

    def test_release_plugins_need_npx(self, make_session):
        session, runner = make_session(REQUIRED_CLIS, options=SetupOptions(ci=True))
        report = check_dependencies(session)
        assert not runner.ran("npm install -g")
        assert not any(s.action == "release_plugins" for s in report.steps)

    def test_release_plugins_after_fresh_node(self, make_session):
        session, runner = make_session(REQUIRED_CLIS + ["apt-get"], options=SetupOptions(ci=True))
        runner.on("nodejs npm", provides=["node", "npm", "npx"])
        check_dependencies(session)
        assert runner.ran("npm install -g semantic-release")

    def test_plugin_skipped_without_claude(self, make_session, capsys):
        session, _ = make_session(REQUIRED_CLIS, options=SetupOptions(dev=True))
        report = check_dependencies(session)
        assert report.outcome("claude-plugin").status == "skipped"
        assert "Claude CLI not found - skipping claudevoyant plugin" in capsys.readouterr().out

    def test_plugin_installed_when_missing(self, make_session):
        session, runner = make_session(REQUIRED_CLIS + ["claude"], options=SetupOptions(dev=True))
        runner.answer("claude plugin list", "")
        report = check_dependencies(session)
        assert runner.ran("claude plugin install claudevoyant")
        assert report.outcome("claude-plugin").status == "installed"

    def test_starship_configured_after_fresh_install(self, make_session, tmp_path):
        session, runner = make_session(REQUIRED_CLIS, options=SetupOptions(starship=True))
        runner.on("starship.rs", provides=["starship"])
        report = check_dependencies(session)
        assert report.outcome("starship").status == "installed"
        config = tmp_path / "home" / ".config" / "starship.toml"
        assert config.is_file()
        assert "[git_branch]" in config.read_text()

    def test_existing_starship_left_alone(self, make_session, tmp_path):
        session, _ = make_session(REQUIRED_CLIS + ["starship"], options=SetupOptions(starship=True))
        check_dependencies(session)
        assert not (tmp_path / "home" / ".config" / "starship.toml").exists()


class TestFinalizePhase:
    def test_sync_runs_in_project_root(self, make_session, project_dir: Path):
        (project_dir / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        session, runner = make_session(REQUIRED_CLIS)
        check_dependencies(session)
        sync = runner.call_log[0]
        assert sync.argv == ["uv", "sync"]
        assert sync.cwd == str(project_dir)

    def test_docker_optimize_cleans_caches(self, make_session):
        session, runner = make_session(
            REQUIRED_CLIS + ["apt-get", "npm"], options=SetupOptions(docker_optimize=True),
        )
        report = check_dependencies(session)
        assert report.exit_code == 0
        assert runner.ran("rm -rf /var/lib/apt/lists/*")
        assert runner.ran("npm cache clean --force")
        assert not runner.ran("apt-get update")

    def test_report_to_dict(self, make_session):
        session, _ = make_session(REQUIRED_CLIS)
        data = check_dependencies(session).to_dict()
        assert data["platform"] == "Linux"
        assert data["exit_code"] == 0
        assert len(data["dependencies"]) == 5


@pytest.mark.skipif(
    shutil.which("bash") is None or shutil.which("sh") is None,
    reason="requires bash and sh",
)
class TestRealShellDownloads:
    """Download pipelines on a real shell whose PATH has no curl."""

    def _session(self, tmp_path, monkeypatch, project_dir):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        for name in ("bash", "sh"):
            (bin_dir / name).symlink_to(shutil.which(name))
        monkeypatch.setenv("PATH", str(bin_dir))
        monkeypatch.setenv("HOME", str(tmp_path))
        runner = ShellRunner(use_sudo=False, timeout=30)
        session = InstallSession(
            platform=detect_platform("Linux", "x86_64"),
            options=SetupOptions(),
            config=SetupConfig(),
            runner=runner,
            console=Console(),
            project_root=project_dir,
        )
        return session, runner

    def test_missing_downloader_fails_required_install(
        self, tmp_path, monkeypatch, project_dir, capsys,
    ):
        session, runner = self._session(tmp_path, monkeypatch, project_dir)
        outcome = ensure_dependency("uv", session)
        assert outcome.status == "failed"
        assert session.report.failed_required == ["uv"]
        assert not runner.exists("uv")
        captured = capsys.readouterr()
        assert "may require shell restart" not in captured.out
        assert "Failed to install uv" in captured.err
