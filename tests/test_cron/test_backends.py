"""Tests für die Plattform → Backend-Zuordnung."""

from __future__ import annotations

import pytest

from agentcron.config import AgentCronConfig, NodeConfig
from agentcron.cron.backends import CRON_DIRECTORY_PLATFORMS, NO_CRON_PLATFORMS, select_backend
from agentcron.cron.compiler import JobCompiler
from agentcron.errors import UnsupportedPlatformError
from agentcron.models import CronBackend


class TestSelectBackend:
    @pytest.mark.parametrize("platform", ["linux", "ubuntu", "debian", "rhel", "amazon", "suse"])
    def test_linux_uses_cron_directory(self, platform: str) -> None:
        assert select_backend(platform) is CronBackend.CRON_DIRECTORY

    @pytest.mark.parametrize("platform", ["linuxmint", "manjaro", "clearos"])
    def test_linux_derivatives_use_cron_directory(self, platform: str) -> None:
        assert select_backend(platform) is CronBackend.CRON_DIRECTORY

    @pytest.mark.parametrize(
        "platform", ["solaris", "solaris2", "aix", "freebsd", "openbsd", "mac_os_x"]
    )
    def test_others_use_legacy_crontab(self, platform: str) -> None:
        assert select_backend(platform) is CronBackend.LEGACY_CRONTAB

    @pytest.mark.parametrize("platform", ["hpux", "opensolaris", "plan9", "dragonfly"])
    def test_unlisted_unix_uses_legacy_crontab(self, platform: str) -> None:
        assert select_backend(platform) is CronBackend.LEGACY_CRONTAB

    @pytest.mark.parametrize("family", ["debian", "rhel", " Fedora "])
    def test_unlisted_platform_with_linux_family(self, family: str) -> None:
        assert select_backend("pop", family=family) is CronBackend.CRON_DIRECTORY

    def test_unlisted_platform_with_other_family(self) -> None:
        assert select_backend("smartos", family="solaris2") is CronBackend.LEGACY_CRONTAB

    def test_family_does_not_rescue_windows(self) -> None:
        with pytest.raises(UnsupportedPlatformError):
            select_backend("windows", family="debian")

    def test_case_insensitive(self) -> None:
        assert select_backend(" Linux ") is CronBackend.CRON_DIRECTORY

    @pytest.mark.parametrize("platform", ["windows", "", "  ", "mswin", "Windows"])
    def test_unsupported(self, platform: str) -> None:
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            select_backend(platform)
        assert exc_info.value.platform == platform
        assert exc_info.value.error_code == "UNSUPPORTED_PLATFORM"

    def test_tables_have_no_overlap(self) -> None:
        assert not CRON_DIRECTORY_PLATFORMS & NO_CRON_PLATFORMS
        assert all(key == key.lower() for key in CRON_DIRECTORY_PLATFORMS | NO_CRON_PLATFORMS)

    def test_compiler_delegates(self) -> None:
        assert JobCompiler.select_backend("solaris") is CronBackend.LEGACY_CRONTAB
        assert JobCompiler.select_backend("linux") is CronBackend.CRON_DIRECTORY
        assert JobCompiler.select_backend("pop", "debian") is CronBackend.CRON_DIRECTORY

    def test_compiler_uses_family_from_config(self) -> None:
        config = AgentCronConfig(
            platform="pop",
            platform_family="debian",
            node=NodeConfig(name="node1.example.com"),
        )
        job = JobCompiler(config).compile({})
        assert job.backend is CronBackend.CRON_DIRECTORY

    def test_unlisted_platform_compiles_to_crontab(self) -> None:
        config = AgentCronConfig(platform="hpux", node=NodeConfig(name="node1.example.com"))
        job = JobCompiler(config).compile({})
        assert job.backend is CronBackend.LEGACY_CRONTAB
        assert job.entry().splitlines()[-1].startswith("0,30 * * * * /bin/sleep ")
