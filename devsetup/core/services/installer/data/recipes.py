"""
L0 Data — Dependency recipe registry.

Every tool the installer knows about, all platforms. Pure data, no logic.

Recipe fields:
    label           Display name.
    cli             Command whose presence means "installed".
    required        Required tools abort the run when they cannot be installed.
    groups          Feature flags that enable an optional tool (any of).
    purpose         Why the tool matters, shown when it is missing.
    missing         Wording for the missing-tool warning (default "not found").
    version         Command printing a version line.
    version_line    Which output line holds the version (default 0).
    install         Method → command, or list of steps. A step is an argv
                    list or a dict with ``argv`` plus optional ``sudo``,
                    ``ignore_errors``, ``unless`` (an option name that
                    skips the step when set) and ``unless_present`` (a
                    binary that skips the step when it exists).
    needs_sudo      Method → bool override of the default (system package
                    managers need root, everything else does not).
    prefer          Platform → ordered method list. ``*`` matches any
                    platform. First available method wins, exclusively.
    method_requires Method → binary probed for availability, overriding
                    the default probe.
    requires        Binaries that must already be present (preconditions).
    post_install    Method → best-effort follow-up commands.
    post_path       Directories added to the search path after install.
    notes           Method → info line shown when that method is chosen.
    success_note    Info line shown after any successful install.
    restart_hint    Warning when the tool is still absent after install.
    url             Manual-install location.
    manual          Hint used in the final failure/skip message.
    routine         Dedicated routine for tools that are not a plain table.
    presence        Dedicated presence check (default: ``cli`` on PATH).
    gate            Binary that must exist before the tool is even checked.
    then            Follow-up step after the check: ``{"step": name,
                    "when": "available" | "installed"}``.

Placeholders expanded at run time: ``{sudo}``, ``{home}``, ``{arch}``,
``{gcloud_arch}``, ``{python_min}``, ``{claude_plugin}``.
"""

from __future__ import annotations

_JUST_SCRIPT = "https://just.systems/install.sh"
_GCLOUD_TARBALL = (
    "https://dl.google.com/dl/cloudsdk/channels/rapid/downloads/"
    "google-cloud-cli-linux-{gcloud_arch}.tar.gz"
)
_GCLOUD_YUM_REPO = """\
[google-cloud-sdk]
name=Google Cloud SDK
baseurl=https://packages.cloud.google.com/yum/repos/cloud-sdk-el8-x86_64
enabled=1
gpgcheck=1
repo_gpgcheck=0
gpgkey=https://packages.cloud.google.com/yum/doc/yum-key.gpg
       https://packages.cloud.google.com/yum/doc/rpm-package-key.gpg
"""
_STARSHIP_SCRIPT = "curl -fsS https://starship.rs/install.sh | sh -s -- -y"

_LINUX_PMS = ["apk", "apt", "yum", "pacman"]

# Systemd hosts start and enable the daemon after a package install.
_SYSTEMCTL_DOCKER = [
    ["systemctl", "start", "docker"],
    ["systemctl", "enable", "docker"],
]


DEPENDENCY_RECIPES: dict[str, dict] = {

    # ── Required ────────────────────────────────────────────────

    "bash": {
        "label": "Bash",
        "cli": "bash",
        "required": True,
        "version": ["bash", "--version"],
        "install": {
            "brew": ["brew", "install", "bash"],
            "apk": ["apk", "add", "--no-cache", "bash"],
            "apt": ["apt-get", "install", "-y", "--no-install-recommends", "bash"],
            "yum": ["yum", "install", "-y", "bash"],
            "pacman": ["pacman", "-S", "--noconfirm", "bash"],
        },
        "prefer": {"Mac": ["brew"], "Linux": _LINUX_PMS},
        "manual": "please install manually",
    },
    "just": {
        "label": "just",
        "cli": "just",
        "required": True,
        "version": ["just", "--version"],
        "install": {
            "brew": ["brew", "install", "just"],
            "cargo": ["cargo", "install", "just"],
            "apt_script": [
                "sh", "-c",
                f"curl --proto '=https' --tlsv1.2 -sSf {_JUST_SCRIPT}"
                " | {sudo}bash -s -- --to /usr/local/bin",
            ],
            "_default": [
                "sh", "-c",
                f"curl --proto '=https' --tlsv1.2 -sSf {_JUST_SCRIPT}"
                " | bash -s -- --to {home}/bin",
            ],
        },
        "method_requires": {"apt_script": "apt-get"},
        "prefer": {
            "Mac": ["brew", "_default"],
            "Linux": ["cargo", "apt_script", "_default"],
        },
        "notes": {"_default": "Installing just from binary; add ~/bin to your PATH if not already present"},
        "post_path": ["~/.cargo/bin", "~/bin"],
        "url": "https://just.systems",
        "manual": "visit https://just.systems to install manually",
    },
    "python": {
        "label": "Python",
        "cli": "python3",
        "required": True,
        "missing": "not found, not working, or older than {python_min}",
        "version": ["python3", "--version"],
        "install": {
            "brew": ["brew", "install", "python@{python_min}"],
            "apt": [
                "apt-get", "install", "-y",
                "python{python_min}", "python{python_min}-venv", "python3-pip",
            ],
            "yum": ["yum", "install", "-y", "python{python_min}"],
            "pacman": ["pacman", "-S", "--noconfirm", "python"],
        },
        "prefer": {"Mac": ["brew"], "Linux": ["apt", "yum", "pacman"]},
        "routine": "python",
        "presence": "python",
        "url": "https://www.python.org/downloads/",
        "manual": "please install Python {python_min}+ manually (or install pyenv)",
    },
    "uv": {
        "label": "uv",
        "cli": "uv",
        "required": True,
        "version": ["uv", "--version"],
        "install": {
            "_default": ["sh", "-c", "curl -LsSf https://astral.sh/uv/install.sh | sh"],
        },
        "prefer": {"*": ["_default"]},
        "post_path": ["~/.local/bin", "~/.cargo/bin"],
        "restart_hint": "uv installation may require shell restart. Add ~/.local/bin to PATH",
        "url": "https://docs.astral.sh/uv/",
        "manual": "visit https://docs.astral.sh/uv/ to install manually",
    },
    "direnv": {
        "label": "direnv",
        "cli": "direnv",
        "required": True,
        "version": ["direnv", "--version"],
        "install": {
            "brew": ["brew", "install", "direnv"],
            "curl_script": ["sh", "-c", "curl -sfL https://direnv.net/install.sh | bash"],
            "apk": ["apk", "add", "--no-cache", "direnv"],
            "apt": ["apt-get", "install", "-y", "--no-install-recommends", "direnv"],
            "yum": ["yum", "install", "-y", "direnv"],
            "pacman": ["pacman", "-S", "--noconfirm", "direnv"],
        },
        "method_requires": {"curl_script": "curl"},
        "prefer": {"Mac": ["brew"], "Linux": ["curl_script"] + _LINUX_PMS},
        "notes": {"curl_script": "Installing direnv from binary release"},
        "success_note": "Please add 'eval \"$(direnv hook bash)\"' to your ~/.bashrc or shell config",
        "url": "https://direnv.net/docs/installation.html",
        "manual": "visit https://direnv.net to install manually",
    },

    # ── Optional: development (--dev) ───────────────────────────

    "docker": {
        "label": "Docker",
        "cli": "docker",
        "groups": ["dev"],
        "purpose": "needed for containerization",
        "version": ["docker", "--version"],
        "install": {
            "brew": ["brew", "install", "--cask", "docker"],
            "apk": ["apk", "add", "--no-cache", "docker", "docker-compose"],
            "apt": [
                "apt-get", "install", "-y", "--no-install-recommends",
                "docker.io", "docker-compose",
            ],
            "yum": ["yum", "install", "-y", "docker", "docker-compose"],
            "pacman": ["pacman", "-S", "--noconfirm", "docker", "docker-compose"],
        },
        "prefer": {"Mac": ["brew"], "Linux": _LINUX_PMS},
        "post_install": {
            "apk": [
                ["rc-update", "add", "docker", "boot"],
                ["service", "docker", "start"],
            ],
            "apt": _SYSTEMCTL_DOCKER,
            "yum": _SYSTEMCTL_DOCKER,
            "pacman": _SYSTEMCTL_DOCKER,
        },
        "url": "https://docs.docker.com/engine/install/",
        "manual": "install manually from https://docker.com if needed",
    },
    "node": {
        "label": "Node.js and npx",
        "cli": "npx",
        "groups": ["dev", "ci"],
        "purpose": "needed for semantic-release",
        "version": ["node", "--version"],
        "install": {
            "brew": ["brew", "install", "node"],
            "apk": ["apk", "add", "--no-cache", "nodejs", "npm"],
            "apt": ["apt-get", "install", "-y", "--no-install-recommends", "nodejs", "npm"],
            "yum": ["yum", "install", "-y", "nodejs", "npm"],
            "pacman": ["pacman", "-S", "--noconfirm", "nodejs", "npm"],
        },
        "prefer": {"Mac": ["brew"], "Linux": _LINUX_PMS},
        "then": {"step": "release_plugins", "when": "available"},
        "url": "https://nodejs.org",
        "manual": "install manually from https://nodejs.org if needed",
    },
    "gcloud": {
        "label": "Google Cloud SDK",
        "cli": "gcloud",
        "groups": ["dev", "ci"],
        "purpose": "needed for GCP Artifact Registry",
        "version": ["gcloud", "--version"],
        "install": {
            "brew": ["brew", "install", "--cask", "google-cloud-sdk"],
            "apk": [
                {
                    "argv": ["apk", "add", "--no-cache", "python3", "py3-pip"],
                    "unless_present": "python3",
                },
                [
                    "sh", "-c",
                    f"cd /tmp && curl -fsSLO {_GCLOUD_TARBALL}"
                    " && {sudo}tar -xzf google-cloud-cli-linux-{gcloud_arch}.tar.gz -C /usr/local"
                    " && rm -f google-cloud-cli-linux-{gcloud_arch}.tar.gz",
                ],
                ["sh", "-c", "{sudo}/usr/local/google-cloud-sdk/install.sh --quiet"],
                [
                    "sh", "-c",
                    "echo 'export PATH=$PATH:/usr/local/google-cloud-sdk/bin'"
                    " | {sudo}tee /etc/profile.d/gcloud.sh >/dev/null",
                ],
            ],
            "apt": [
                [
                    "sh", "-c",
                    "echo 'deb [signed-by=/usr/share/keyrings/cloud.google.gpg]"
                    " https://packages.cloud.google.com/apt cloud-sdk main'"
                    " | {sudo}tee -a /etc/apt/sources.list.d/google-cloud-sdk.list >/dev/null",
                ],
                [
                    "sh", "-c",
                    "curl -fsSL https://packages.cloud.google.com/apt/doc/apt-key.gpg"
                    " | {sudo}gpg --dearmor --yes -o /usr/share/keyrings/cloud.google.gpg",
                ],
                {"argv": ["apt-get", "update"], "unless": "docker_optimize"},
                ["apt-get", "install", "-y", "--no-install-recommends", "google-cloud-sdk"],
            ],
            "yum": [
                [
                    "sh", "-c",
                    "{sudo}tee /etc/yum.repos.d/google-cloud-sdk.repo >/dev/null <<'EOM'\n"
                    f"{_GCLOUD_YUM_REPO}EOM",
                ],
                ["yum", "install", "-y", "google-cloud-sdk"],
            ],
        },
        "prefer": {"Mac": ["brew"], "Linux": ["apk", "apt", "yum"]},
        "post_path": ["/usr/local/google-cloud-sdk/bin"],
        "notes": {"apk": "Installing gcloud from official tarball ({gcloud_arch})"},
        "routine": "gcloud",
        "url": "https://cloud.google.com/sdk/docs/install",
        "manual": "install manually from https://cloud.google.com/sdk/docs/install if needed",
    },
    "twine": {
        "label": "twine",
        "cli": "twine",
        "groups": ["dev", "ci"],
        "purpose": "needed for publishing to GCP Artifact Registry",
        "version": ["twine", "--version"],
        "install": {"_default": ["uv", "tool", "install", "twine"]},
        "prefer": {"*": ["_default"]},
        "requires": ["uv"],
        "post_path": ["~/.local/bin"],
        "restart_hint": "twine installation may require shell restart",
        "manual": "install manually with 'uv tool install twine' if needed",
    },
    "shellcheck": {
        "label": "shellcheck",
        "cli": "shellcheck",
        "groups": ["dev"],
        "purpose": "recommended for shell script linting",
        "version": ["shellcheck", "--version"],
        "version_line": 1,
        "install": {
            "brew": ["brew", "install", "shellcheck"],
            "apk": ["apk", "add", "--no-cache", "shellcheck"],
            "apt": ["apt-get", "install", "-y", "--no-install-recommends", "shellcheck"],
            "yum": ["yum", "install", "-y", "ShellCheck"],
            "pacman": ["pacman", "-S", "--noconfirm", "shellcheck"],
        },
        "prefer": {"Mac": ["brew"], "Linux": _LINUX_PMS},
        "url": "https://www.shellcheck.net",
        "manual": "install manually from https://www.shellcheck.net if needed",
    },
    "shfmt": {
        "label": "shfmt",
        "cli": "shfmt",
        "groups": ["dev"],
        "purpose": "recommended for shell script formatting",
        "version": ["shfmt", "--version"],
        "install": {
            "brew": ["brew", "install", "shfmt"],
            "go": ["go", "install", "mvdan.cc/sh/v3/cmd/shfmt@latest"],
            "_default": [
                "sh", "-c",
                "curl -fsSL https://github.com/mvdan/sh/releases/latest/download/shfmt_v3_linux_{arch}"
                " -o /tmp/shfmt && chmod +x /tmp/shfmt && {sudo}mv /tmp/shfmt /usr/local/bin/shfmt",
            ],
        },
        "prefer": {"Mac": ["brew"], "Linux": ["go", "_default"]},
        "notes": {"_default": "Go not found. Installing shfmt from binary"},
        "post_path": ["~/go/bin"],
        "url": "https://github.com/mvdan/sh",
        "manual": "install manually from https://github.com/mvdan/sh if needed",
    },
    "claude": {
        "label": "Claude CLI",
        "cli": "claude",
        "groups": ["dev"],
        "purpose": "AI-powered coding assistant",
        "version": ["claude", "--version"],
        "install": {
            "_default": {"argv": ["npm", "install", "-g", "@anthropic-ai/claude-cli"]},
        },
        "prefer": {"*": ["_default"]},
        "requires": ["npm"],
        "manual": (
            "ensure Node.js is installed and try "
            "'npm install -g @anthropic-ai/claude-cli' manually"
        ),
    },
    "claude-plugin": {
        "label": "{claude_plugin} plugin",
        "cli": "claude",
        "groups": ["dev"],
        "gate": "claude",
        "presence": "claude_plugin",
        "routine": "claude_plugin",
        "missing": "not installed (slash commands for Claude)",
        "manual": "you can install it later with 'claude plugin install {claude_plugin}'",
    },

    # ── Optional: CI / template testing (--ci, --template) ──────

    "bats": {
        "label": "bats-core",
        "cli": "bats",
        "groups": ["ci", "template"],
        "purpose": "needed for template testing",
        "version": ["bats", "--version"],
        "install": {
            "brew": ["brew", "install", "bats-core"],
            "apk": ["apk", "add", "--no-cache", "bats"],
            "apt": ["apt-get", "install", "-y", "--no-install-recommends", "bats"],
            "yum": ["yum", "install", "-y", "bats"],
            "_default": [
                "sh", "-c",
                "rm -rf /tmp/bats-core"
                " && git clone --depth 1 https://github.com/bats-core/bats-core.git /tmp/bats-core"
                " && {sudo}/tmp/bats-core/install.sh /usr/local;"
                " status=$?; rm -rf /tmp/bats-core; exit $status",
            ],
        },
        "method_requires": {"_default": "git"},
        "prefer": {"Mac": ["brew"], "Linux": ["apk", "apt", "yum", "_default"]},
        "notes": {"_default": "Installing bats-core from source"},
        "url": "https://github.com/bats-core/bats-core",
        "manual": "install manually from https://github.com/bats-core/bats-core if needed",
    },
    "parallel": {
        "label": "GNU parallel",
        "cli": "parallel",
        "groups": ["ci", "template"],
        "purpose": "recommended for parallel test execution",
        "version": ["parallel", "--version"],
        "install": {
            "brew": ["brew", "install", "parallel"],
            "apk": ["apk", "add", "--no-cache", "parallel"],
            "apt": ["apt-get", "install", "-y", "--no-install-recommends", "parallel"],
            "yum": ["yum", "install", "-y", "parallel"],
            "pacman": ["pacman", "-S", "--noconfirm", "parallel"],
        },
        "prefer": {"Mac": ["brew"], "Linux": _LINUX_PMS},
        "url": "https://www.gnu.org/software/parallel/",
        "manual": "tests will run sequentially",
    },

    # ── Optional: prompt (--starship) ───────────────────────────

    "starship": {
        "label": "starship",
        "cli": "starship",
        "groups": ["starship"],
        "version": ["starship", "--version"],
        "install": {
            "brew": ["brew", "install", "starship"],
            "_default": ["sh", "-c", _STARSHIP_SCRIPT],
        },
        "prefer": {"Mac": ["brew", "_default"], "Linux": ["_default"]},
        "notes": {"_default": "Installing starship from official installer"},
        "then": {"step": "configure_starship", "when": "installed"},
        "url": "https://starship.rs",
        "manual": "install manually from https://starship.rs if needed",
    },
}

# Processing order. Required tools always run, in this order, whatever
# flags are set. Optional tools run afterwards when their groups allow.
REQUIRED_DEPENDENCIES: tuple[str, ...] = ("bash", "just", "python", "uv", "direnv")

OPTIONAL_DEPENDENCIES: tuple[str, ...] = (
    "docker",
    "node",
    "gcloud",
    "twine",
    "shellcheck",
    "shfmt",
    "claude",
    "claude-plugin",
    "bats",
    "parallel",
    "starship",
)
