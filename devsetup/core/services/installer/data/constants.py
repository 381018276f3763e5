"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Architecture name normalization, Go-style (amd64/arm64). Used for
# release-binary URLs such as shfmt's.
_IARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "AMD64": "amd64",      # Windows / WSL2
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "armv7l": "armhf",
    "i686": "i386",
    "i386": "i386",
}

# The Cloud SDK tarballs use their own suffixes. Architectures missing
# here have no tarball and are rejected before download.
GCLOUD_ARCH_MAP: dict[str, str] = {
    "x86_64": "x86_64",
    "aarch64": "arm",
    "arm64": "arm",
}

# Linux system package managers, probed in this order. The first one on
# PATH is the only one used for a given tool.
SYSTEM_PACKAGE_MANAGERS: tuple[str, ...] = ("apk", "apt", "yum", "pacman")

# Method key → binary that must be on PATH for the method to be usable.
# Methods not listed here probe a binary of the same name.
METHOD_BINARIES: dict[str, str] = {
    "apt": "apt-get",
}

# Methods whose commands need root by default.
SUDO_METHODS: frozenset[str] = frozenset(SYSTEM_PACKAGE_MANAGERS)

# One-time index refresh before the first system package install.
PACKAGE_INDEX_REFRESH: dict[str, list[str]] = {
    "apk": ["apk", "update"],
    "apt": ["apt-get", "update"],
}

# Cache purge for --docker-optimize, keyed by system package manager.
CACHE_CLEANUP: dict[str, list[str]] = {
    "apk": ["sh", "-c", "{sudo}rm -rf /var/cache/apk/*"],
    "apt": ["sh", "-c", "{sudo}rm -rf /var/lib/apt/lists/*"],
    "yum": ["yum", "clean", "all"],
    "pacman": ["pacman", "-Sc", "--noconfirm"],
}

NPM_CACHE_CLEANUP: list[str] = ["npm", "cache", "clean", "--force"]

# `direnv status` prints this once the .envrc has been allowed.
DIRENV_ALLOWED_MARKER = "Found RC allowed 0"

STARSHIP_CONFIG = """\
# Starship configuration for dev containers
format = \"\"\"
[┌───────────────────────────────────────────────────────────>](bold green)
[│](bold green)$directory$git_branch$git_status
[└─>](bold green) \"\"\"

[directory]
style = "blue bold"
truncation_length = 4
truncate_to_repo = false

[git_branch]
style = "yellow bold"
format = " on [$symbol$branch]($style)"

[git_status]
style = "red bold"
format = '([\\[$all_status$ahead_behind\\]]($style))'
"""

NEXT_STEPS_HINT = (
    "Setup complete! Run 'just build' to build, 'just test' to run tests, "
    "or 'just' to see all commands."
)
