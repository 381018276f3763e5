"""
Tests for platform detection and the immutable run values.
"""

import pytest
from pydantic import ValidationError

from devsetup.core.models.options import SetupOptions
from devsetup.core.models.platform import HostPlatform, Platform
from devsetup.core.services.installer.detection.platform import detect_platform


class TestDetectPlatform:
    @pytest.mark.parametrize("kernel, expected", [
        ("Linux", Platform.LINUX),
        ("Darwin", Platform.MAC),
        ("CYGWIN_NT-10.0", Platform.CYGWIN),
        ("MINGW64_NT-10.0-19045", Platform.MINGW),
        ("MSYS_NT-10.0", Platform.GIT),
    ])
    def test_kernel_prefixes(self, kernel, expected):
        host = detect_platform(kernel, "x86_64")
        assert host.tag is expected
        assert host.label == expected.value

    def test_unknown_keeps_raw_name(self):
        host = detect_platform("FreeBSD", "amd64")
        assert host.tag is Platform.UNKNOWN
        assert host.label == "UNKNOWN:FreeBSD"

    def test_prefix_must_match_at_start(self):
        assert detect_platform("NotLinux", "x86_64").tag is Platform.UNKNOWN

    def test_defaults_to_running_host(self, monkeypatch):
        monkeypatch.setattr("platform.system", lambda: "Darwin")
        monkeypatch.setattr("platform.machine", lambda: "arm64")
        host = detect_platform()
        assert host.is_mac
        assert host.machine == "arm64"

    def test_host_platform_is_frozen(self):
        host = HostPlatform(tag=Platform.LINUX, kernel="Linux")
        with pytest.raises(ValidationError):
            host.tag = Platform.MAC


class TestSetupOptions:
    def test_defaults_all_off(self):
        opts = SetupOptions()
        assert opts.active_groups == []
        assert not opts.enables(["dev", "ci"])

    def test_enables_any_group(self):
        opts = SetupOptions(ci=True)
        assert opts.enables(["dev", "ci"])
        assert not opts.enables(["dev"])

    def test_docker_optimize_gates_no_group(self):
        opts = SetupOptions(docker_optimize=True)
        assert opts.active_groups == []

    def test_frozen(self):
        opts = SetupOptions()
        with pytest.raises(ValidationError):
            opts.dev = True
