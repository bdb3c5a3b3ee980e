from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from nixwrap.commands.elevation import (
    DarwinElevation,
    DefaultElevation,
    get_elevation_strategy,
)
from nixwrap.commands.exceptions import SpawnError
from nixwrap.commands.schema import Exited

SUDO_HELP_WITH_PRESERVE = """usage: sudo -h | -K | -k | -V
options:
  -E, --preserve-env            preserve user environment when running command
      --preserve-env=list       preserve specific environment variables
  -H, --set-home                set HOME variable to target user's home dir
"""

SUDO_HELP_WITHOUT_PRESERVE = """usage: sudo -h | -K | -k | -V
options:
  -H, --set-home                set HOME variable to target user's home dir
"""


def test_strategy_selection():
    assert isinstance(get_elevation_strategy("darwin"), DarwinElevation)
    assert isinstance(get_elevation_strategy("linux"), DefaultElevation)
    assert isinstance(get_elevation_strategy("freebsd14"), DefaultElevation)


@pytest.mark.anyio
async def test_default_elevation_prefixes_helper_only(spawner):
    argv = await DefaultElevation().elevate(["nix", "build", ".#default"])

    assert argv == ["sudo", "nix", "build", ".#default"]
    assert spawner.calls == []


class TestDarwinElevation:
    @pytest.mark.anyio
    async def test_preserve_env_supported(self, spawner):
        spawner.stdout = SUDO_HELP_WITH_PRESERVE

        argv = await DarwinElevation().elevate(["nix", "build"])

        assert argv == [
            "sudo",
            "--set-home",
            "--preserve-env=PATH",
            "env",
            "nix",
            "build",
        ]

    @pytest.mark.anyio
    async def test_preserve_env_missing(self, spawner):
        spawner.stdout = SUDO_HELP_WITHOUT_PRESERVE

        argv = await DarwinElevation().elevate(["nix", "build"])

        assert argv == ["sudo", "--set-home", "nix", "build"]

    @pytest.mark.anyio
    async def test_probe_error_falls_back(self, spawner):
        spawner.error = SpawnError("Failed to spawn sudo: not found")

        argv = await DarwinElevation().elevate(["nix", "build"])

        assert argv == ["sudo", "--set-home", "nix", "build"]

    @pytest.mark.anyio
    async def test_probe_nonzero_exit_falls_back(self, spawner):
        spawner.stdout = SUDO_HELP_WITH_PRESERVE
        spawner.status = Exited(code=1)

        argv = await DarwinElevation().elevate(["nix", "build"])

        assert argv == ["sudo", "--set-home", "nix", "build"]

    @pytest.mark.anyio
    async def test_probe_is_quiet_and_repeated(self, spawner):
        spawner.stdout = SUDO_HELP_WITH_PRESERVE
        strategy = DarwinElevation()

        await strategy.elevate(["true"])
        await strategy.elevate(["true"])

        assert len(spawner.calls) == 2
        for call in spawner.calls:
            assert call.command == ("sudo", "--help")
            assert call.capture
            assert call.quiet_stderr


@pytest.mark.anyio
@pytest.mark.parametrize("strategy", [DefaultElevation(), DarwinElevation()])
async def test_elevating_twice_wraps_once(spawner, strategy):
    spawner.stdout = SUDO_HELP_WITH_PRESERVE

    once = await strategy.elevate(["nix", "build"])
    twice = await strategy.elevate(once)

    assert twice == once
    assert twice[0] == "sudo"
    assert twice.count("sudo") == 1


def _fake_helper(path: Path, output: bytes) -> str:
    path.write_text(
        f"#!{sys.executable}\n"
        "import sys\n"
        f"sys.stdout.buffer.write({output!r})\n"
    )
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return str(path)


@pytest.mark.skipif(sys.platform == "win32", reason="shebang helper")
class TestDarwinElevationOutput:
    @pytest.mark.anyio
    async def test_undecodable_help_is_not_supported(self, tmp_path):
        helper = _fake_helper(tmp_path / "sudo", b"ok\xff\n")

        strategy = DarwinElevation(helper=helper)

        assert not await strategy.supports_preserve_env()
        assert await strategy.elevate(["nix"]) == [helper, "--set-home", "nix"]

    @pytest.mark.anyio
    async def test_undecodable_help_with_marker(self, tmp_path):
        helper = _fake_helper(tmp_path / "sudo", b"ok\xff\n  --preserve-env=list\n")

        assert await DarwinElevation(helper=helper).supports_preserve_env()
