from __future__ import annotations

import sys
from typing import Final, final, override

from attrs import define
from loguru import logger

from nixwrap.utils.process import run_process

from .abc import ElevationStrategy
from .exceptions import CommandExecutionError
from .schema import Exited

ELEVATION_HELPER: Final = "sudo"
PRESERVE_ENV_MARKER: Final = "--preserve-env"
SET_HOME_FLAGS: Final[tuple[str, ...]] = ("--set-home",)
PRESERVE_ENV_FLAGS: Final[tuple[str, ...]] = (
    "--set-home",
    "--preserve-env=PATH",
    "env",
)


@final
@define
class DefaultElevation(ElevationStrategy):
    helper: str = ELEVATION_HELPER

    @override
    async def flags(self) -> list[str]:
        return []


@final
@define
class DarwinElevation(ElevationStrategy):
    """
    Elevation for macOS, where `sudo` resets PATH and HOME.

    The helper's `--help` output is probed on every request; when it
    advertises `--preserve-env` the caller's PATH is carried over through
    `env`, otherwise only the home directory is reset.
    """

    helper: str = ELEVATION_HELPER

    @override
    async def flags(self) -> list[str]:
        if await self.supports_preserve_env():
            return list(PRESERVE_ENV_FLAGS)
        return list(SET_HOME_FLAGS)

    async def supports_preserve_env(self) -> bool:
        try:
            result = await run_process(
                self.helper, "--help", capture=True, quiet_stderr=True
            )
        except CommandExecutionError as exc:
            logger.debug("Probing {} failed: {}", self.helper, exc)
            return False

        if result.status != Exited(code=0):
            logger.debug("Probing {} returned {}", self.helper, result.status)
            return False
        return PRESERVE_ENV_MARKER in (result.stdout or "")


def get_elevation_strategy(platform: str = sys.platform) -> ElevationStrategy:
    if platform == "darwin":
        return DarwinElevation()
    return DefaultElevation()

