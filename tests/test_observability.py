"""
Tests for observability — logging setup and console progress lines.
"""

import logging

import pytest

from devsetup.core.observability.console import Console
from devsetup.core.observability.logging_config import _parse_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# ── Logging ──────────────────────────────────────────────────────────


class TestParseLevel:
    @pytest.mark.parametrize("name, expected", [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("Error", logging.ERROR),
        ("nonsense", logging.WARNING),
        (None, logging.WARNING),
        ("", logging.WARNING),
    ])
    def test_levels(self, name, expected):
        assert _parse_level(name) == expected


class TestSetupLogging:
    def test_console_handler_only(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_replaces_previous_handlers(self):
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler_with_own_level(self, tmp_path):
        log_file = tmp_path / "devsetup.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 2
        # Root level drops to the more verbose of the two handlers.
        assert root.level == logging.DEBUG

        logging.getLogger("devsetup.test").debug("written to file only")
        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text(encoding="utf-8")

    def test_unopenable_log_file_falls_back_to_console(self, tmp_path, capsys):
        log_file = tmp_path / "missing-dir" / "devsetup.log"
        setup_logging("INFO", log_file=str(log_file))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
        err = capsys.readouterr().err
        assert f"cannot open log file {log_file}" in err
        assert "logging to stderr only" in err

    def test_cli_reports_unopenable_log_file(self, tmp_path, monkeypatch, capsys):
        from devsetup.main import main

        monkeypatch.setenv("DEVSETUP_LOG_FILE", str(tmp_path / "missing-dir" / "x.log"))
        monkeypatch.chdir(tmp_path)
        # A missing config file ends the run with exit 1 before any detection.
        assert main(["-c", str(tmp_path / "none.yml")]) == 1
        assert "cannot open log file" in capsys.readouterr().err


# ── Console ──────────────────────────────────────────────────────────


class TestConsole:
    def test_prefixes(self, capsys):
        console = Console()
        console.info("checking")
        console.success("done")
        console.warn("careful")
        console.error("broken")
        captured = capsys.readouterr()
        assert "ℹ️  checking" in captured.out
        assert "✅ done" in captured.out
        assert "⚠️  careful" in captured.out
        assert "❌ broken" in captured.err
        assert "broken" not in captured.out

    def test_step_numbering(self, capsys):
        console = Console()
        console.step("Checking Bash (required)")
        console.step("Checking just (required)")
        out = capsys.readouterr().out
        assert "[1] Checking Bash (required)" in out
        assert "[2] Checking just (required)" in out
        assert console.step_count == 2

    def test_quiet_hides_info_only(self, capsys):
        console = Console(quiet=True)
        console.info("noise")
        console.warn("signal")
        out = capsys.readouterr().out
        assert "noise" not in out
        assert "signal" in out

    def test_err_mode_keeps_stdout_clean(self, capsys):
        console = Console(err=True)
        console.info("progress")
        console.success("ok")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "progress" in captured.err
