"""
devsetup — CLI entrypoint.

Usage:
    devsetup --help
    devsetup
    devsetup --dev --starship
    python -m devsetup --ci --docker-optimize
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devsetup import __version__
from devsetup.core.observability.logging_config import setup_logging

PROG_NAME = "devsetup"
HELP_OPTIONS = ("-h", "--help")

_EPILOG = """\b
Required (always checked): bash, just, python3 (3.12+), uv, direnv

\b
Optional groups:
  --dev       docker, node/npx, semantic-release plugins, gcloud, twine,
              shellcheck, shfmt, claude, claude plugin
  --ci        node/npx, semantic-release plugins, gcloud, twine, bats,
              parallel
  --template  bats, parallel
  --starship  starship (writes ~/.config/starship.toml)

\b
Examples:
  devsetup                     # required tools only
  devsetup --dev               # full development environment
  devsetup --ci --docker-optimize
"""


@click.command(
    context_settings={"help_option_names": list(HELP_OPTIONS)},
    epilog=_EPILOG,
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option("--dev", is_flag=True, help="Install development tools.")
@click.option("--ci", is_flag=True, help="Install CI/CD tools.")
@click.option("--template", is_flag=True, help="Install template testing tools.")
@click.option("--starship", is_flag=True, help="Install and configure the starship prompt.")
@click.option(
    "--docker-optimize",
    is_flag=True,
    help="Skip package index refreshes and purge caches afterwards.",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory for uv sync and direnv allow (default: cwd).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to devsetup.yml (default: auto-detect).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    dev: bool,
    ci: bool,
    template: bool,
    starship: bool,
    docker_optimize: bool,
    project_root: Path | None,
    config_path: Path | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Install development dependencies for this project.

    Detects the platform, installs missing required tools, then the
    optional tools selected by flags. Safe to re-run: tools already
    present are left alone.
    """
    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DEVSETUP_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DEVSETUP_LOG_FILE"),
        log_file_level=os.environ.get("DEVSETUP_LOG_FILE_LEVEL"),
    )

    from devsetup.core.models.options import SetupOptions
    from devsetup.core.observability.console import Console
    from devsetup.core.use_cases.setup import run_setup

    options = SetupOptions(
        dev=dev,
        ci=ci,
        template=template,
        starship=starship,
        docker_optimize=docker_optimize,
    )
    result = run_setup(
        options,
        project_root=project_root,
        config_path=config_path,
        console=Console(quiet=quiet, err=as_json),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))

    ctx.exit(result.exit_code)


def main(argv: list[str] | None = None) -> int:
    """Console-script entry point.

    Argument errors exit 1 (click's own convention is 2) with a pointer
    to ``--help``; nothing is detected or installed in that case. Tokens
    are read left to right, so a help flag before a bad token still
    prints help and exits 0.
    """
    tokens = sys.argv[1:] if argv is None else list(argv)
    try:
        if _help_requested(tokens):
            with cli.make_context(PROG_NAME, [], resilient_parsing=True) as ctx:
                click.echo(ctx.get_help())
            return 0
        return cli.main(args=tokens, prog_name=PROG_NAME, standalone_mode=False) or 0
    except click.UsageError as exc:
        click.echo(f"Error: {exc.format_message()}", err=True)
        click.echo(f"Run '{PROG_NAME} --help' for usage", err=True)
        return 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1


# ── Token scan ──────────────────────────────────────────────────


def _option_table() -> dict[str, bool]:
    """Option name → whether it consumes a value."""
    table = {name: False for name in HELP_OPTIONS}
    for param in cli.params:
        if isinstance(param, click.Option):
            for name in param.opts + param.secondary_opts:
                table[name] = not param.is_flag
    return table


def _check_token(token: str, table: dict[str, bool]) -> tuple[click.UsageError | None, bool]:
    """Validate one token; returns (error, next token is a value)."""
    if token == "-" or not token.startswith("-"):
        return click.UsageError(f"Got unexpected extra argument ({token})"), False

    if token.startswith("--"):
        name, has_value = token.split("=", 1)[0], "=" in token
        if name not in table:
            return click.NoSuchOption(name), False
        if has_value and not table[name]:
            return click.UsageError(f"Option '{name}' does not take a value."), False
        return None, table[name] and not has_value

    # Short options may be clustered (-vq) or carry an attached value (-cFILE).
    for pos, char in enumerate(token[1:], start=2):
        name = f"-{char}"
        if name not in table:
            return click.NoSuchOption(name), False
        if table[name]:
            return None, pos == len(token)
    return None, False


def _help_requested(tokens: list[str]) -> bool:
    """Whether a help flag is reached before any unusable token.

    Tokens are read left to right. An unknown option or stray argument
    ahead of the help flag is raised as a UsageError; one after it is
    never looked at. Returns False when there is no help flag (or it
    follows ``--``), leaving everything else to click.
    """
    table = _option_table()
    error: click.UsageError | None = None
    expects_value = False
    for token in tokens:
        if expects_value:
            expects_value = False
            continue
        if token == "--":
            return False
        if token in HELP_OPTIONS:
            if error is not None:
                raise error
            return True
        if error is None:
            error, expects_value = _check_token(token, table)
    return False


if __name__ == "__main__":
    sys.exit(main())
