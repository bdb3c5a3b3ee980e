from __future__ import annotations

from .abc import ElevationStrategy
from .build import Build
from .command import Command
from .elevation import DarwinElevation, DefaultElevation, get_elevation_strategy
from .exceptions import (
    BuildExitError,
    CaptureError,
    CommandError,
    CommandExecutionError,
    SpawnError,
)
from .schema import ExitOutcome, ExitStatus, Exited, Failure, Signaled, Success

__all__ = [
    "Build",
    "BuildExitError",
    "CaptureError",
    "Command",
    "CommandError",
    "CommandExecutionError",
    "DarwinElevation",
    "DefaultElevation",
    "ElevationStrategy",
    "ExitOutcome",
    "ExitStatus",
    "Exited",
    "Failure",
    "Signaled",
    "SpawnError",
    "Success",
    "get_elevation_strategy",
]
