from __future__ import annotations

from loguru import logger

from .commands import Build, BuildExitError, Command, CommandError
from .installable import Expression, FileInstallable, Flake, Installable, StorePath

logger.disable("nixwrap")

__all__ = [
    "Build",
    "BuildExitError",
    "Command",
    "CommandError",
    "Expression",
    "FileInstallable",
    "Flake",
    "Installable",
    "StorePath",
]
