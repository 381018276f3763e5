"""
Tests for install-method selection — channel priority per platform.
"""

from devsetup.adapters.mock import MockRunner
from devsetup.core.services.installer.data.recipes import (
    DEPENDENCY_RECIPES,
    OPTIONAL_DEPENDENCIES,
    REQUIRED_DEPENDENCIES,
)
from devsetup.core.services.installer.detection.platform import detect_platform
from devsetup.core.services.installer.resolver.method_selection import (
    candidate_methods,
    detect_package_manager,
    method_needs_sudo,
    pick_install_method,
)

LINUX = detect_platform("Linux", "x86_64")
MAC = detect_platform("Darwin", "arm64")
CYGWIN = detect_platform("CYGWIN_NT-10.0", "x86_64")
UNKNOWN = detect_platform("SunOS", "sparc")


def _pick(tool, host, present=()):
    return pick_install_method(DEPENDENCY_RECIPES[tool], host, MockRunner(present))


class TestRecipeTable:
    def test_every_listed_tool_has_a_recipe(self):
        for tool in REQUIRED_DEPENDENCIES + OPTIONAL_DEPENDENCIES:
            assert tool in DEPENDENCY_RECIPES

    def test_required_order(self):
        assert REQUIRED_DEPENDENCIES == ("bash", "just", "python", "uv", "direnv")

    def test_required_flags_match_lists(self):
        for tool in REQUIRED_DEPENDENCIES:
            assert DEPENDENCY_RECIPES[tool].get("required") is True
            assert not DEPENDENCY_RECIPES[tool].get("groups")
        for tool in OPTIONAL_DEPENDENCIES:
            assert not DEPENDENCY_RECIPES[tool].get("required")
            assert DEPENDENCY_RECIPES[tool]["groups"]

    def test_prefer_only_names_known_methods(self):
        for tool, recipe in DEPENDENCY_RECIPES.items():
            for methods in recipe.get("prefer", {}).values():
                for method in methods:
                    assert method in recipe["install"], (tool, method)


class TestPickInstallMethod:
    def test_linux_package_manager_order(self):
        assert _pick("bash", LINUX, ["apk", "apt-get", "yum"]) == "apk"
        assert _pick("bash", LINUX, ["apt-get", "yum"]) == "apt"
        assert _pick("bash", LINUX, ["yum", "pacman"]) == "yum"
        assert _pick("bash", LINUX, ["pacman"]) == "pacman"

    def test_no_package_manager(self):
        assert _pick("bash", LINUX, []) is None

    def test_just_prefers_cargo(self):
        assert _pick("just", LINUX, ["cargo", "apt-get"]) == "cargo"

    def test_just_apt_script_needs_apt_get(self):
        assert _pick("just", LINUX, ["apt-get"]) == "apt_script"
        assert _pick("just", LINUX, ["yum"]) == "_default"

    def test_mac_brew_or_nothing(self):
        assert _pick("bash", MAC, ["brew"]) == "brew"
        assert _pick("bash", MAC, []) is None

    def test_mac_just_falls_back_to_script(self):
        assert _pick("just", MAC, []) == "_default"

    def test_direnv_curl_script_before_package_managers(self):
        assert _pick("direnv", LINUX, ["curl", "apt-get"]) == "curl_script"
        assert _pick("direnv", LINUX, ["apt-get"]) == "apt"

    def test_wildcard_platform(self):
        assert _pick("uv", UNKNOWN) == "_default"
        assert _pick("uv", CYGWIN) == "_default"

    def test_unsupported_platform_has_no_system_channel(self):
        assert _pick("bash", CYGWIN, ["apt-get", "brew"]) is None
        assert candidate_methods(DEPENDENCY_RECIPES["docker"], UNKNOWN) == []

    def test_shfmt_prefers_go(self):
        assert _pick("shfmt", LINUX, ["go"]) == "go"
        assert _pick("shfmt", LINUX, []) == "_default"

    def test_bats_source_install_needs_git(self):
        assert _pick("bats", LINUX, ["git"]) == "_default"
        assert _pick("bats", LINUX, []) is None

    def test_gcloud_has_no_pacman_channel(self):
        assert _pick("gcloud", LINUX, ["pacman"]) is None


class TestSudoAndPackageManager:
    def test_system_package_managers_need_root(self):
        recipe = DEPENDENCY_RECIPES["bash"]
        assert method_needs_sudo(recipe, "apt")
        assert method_needs_sudo(recipe, "apk")
        assert not method_needs_sudo(recipe, "brew")

    def test_user_level_channels_do_not(self):
        assert not method_needs_sudo(DEPENDENCY_RECIPES["just"], "cargo")
        assert not method_needs_sudo(DEPENDENCY_RECIPES["uv"], "_default")

    def test_detect_package_manager(self):
        assert detect_package_manager(MockRunner(["apt-get", "yum"])) == "apt"
        assert detect_package_manager(MockRunner(["pacman"])) == "pacman"
        assert detect_package_manager(MockRunner(["apt"])) is None
        assert detect_package_manager(MockRunner()) is None
