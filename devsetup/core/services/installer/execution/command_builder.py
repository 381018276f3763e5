"""
L4 Execution — Placeholder substitution and step normalization.

Turns recipe data into concrete Command objects for the current host.
"""

from __future__ import annotations

from pathlib import Path

from devsetup.core.models.command import Command
from devsetup.core.services.installer.data.constants import GCLOUD_ARCH_MAP, _IARCH_MAP
from devsetup.core.services.installer.session import InstallSession


def install_vars(session: InstallSession) -> dict[str, str]:
    """Values for the ``{var}`` placeholders recipes may use.

    - ``{sudo}``: ``"sudo "`` or empty, for use inside shell pipelines
    - ``{home}``: the user's home directory
    - ``{arch}``: Go-style architecture (``amd64``, ``arm64``)
    - ``{gcloud_arch}``: Cloud SDK tarball suffix
    - ``{python_min}``: minimum Python series, e.g. ``3.12``
    - ``{claude_plugin}``: assistant plugin name
    """
    machine = session.platform.machine
    return {
        "sudo": session.runner.sudo_prefix,
        "home": str(Path.home()),
        "arch": _IARCH_MAP.get(machine, machine.lower()),
        "gcloud_arch": GCLOUD_ARCH_MAP.get(machine, machine),
        "python_min": session.config.python_min_version,
        "claude_plugin": session.config.claude_plugin.name,
    }


def substitute(text: str, variables: dict[str, str]) -> str:
    """Replace known ``{var}`` tokens; anything else is left alone."""
    for key, value in variables.items():
        text = text.replace(f"{{{key}}}", value)
    return text


def render(text: str, session: InstallSession) -> str:
    """Substitute placeholders in a user-facing message."""
    return substitute(text, install_vars(session))


def build_steps(
    spec: list | dict,
    session: InstallSession,
    *,
    sudo: bool = False,
    ignore_errors: bool = False,
) -> list[Command]:
    """Normalize a recipe install entry into Commands.

    ``spec`` is a single argv list, a single step dict, or a list of
    steps. ``sudo`` is the method default; ``sh -c`` steps never get a
    sudo prefix since their scripts use ``{sudo}`` where it matters, and
    go through ``Command.shell`` so pipelines fail when any stage does.
    Steps marked ``unless: <option>`` are dropped when that option is set,
    steps marked ``unless_present: <binary>`` when that binary exists.
    """
    if isinstance(spec, dict) or (spec and isinstance(spec[0], str)):
        spec = [spec]

    variables = install_vars(session)
    commands: list[Command] = []
    for step in spec:
        if isinstance(step, dict):
            argv = step["argv"]
            unless = step.get("unless")
            if unless and getattr(session.options, unless, False):
                continue
            if step.get("unless_present") and session.runner.exists(step["unless_present"]):
                continue
            step_sudo = step.get("sudo", sudo and argv[0] != "sh")
            step_ignore = step.get("ignore_errors", ignore_errors)
        else:
            argv = step
            step_sudo = sudo and argv[0] != "sh"
            step_ignore = ignore_errors
        argv = [substitute(arg, variables) for arg in argv]
        if argv[:2] == ["sh", "-c"]:
            command = Command.shell(argv[2], sudo=step_sudo, ignore_errors=step_ignore)
        else:
            command = Command(argv=argv, sudo=step_sudo, ignore_errors=step_ignore)
        commands.append(command)
    return commands
