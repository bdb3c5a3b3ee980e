from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import ExitStatus


class CommandError(Exception):
    """Base exception for the commands module."""


class CommandExecutionError(CommandError):
    """Raised when the OS fails to run a command."""

    def __init__(self, message: str, *, context: str | None = None) -> None:
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        base = super().__str__()
        return f"{self.context}: {base}" if self.context else base


class SpawnError(CommandExecutionError):
    """Raised when a child process cannot be created."""


class CaptureError(CommandExecutionError):
    """Raised when reading a child's output or waiting for it fails."""


class BuildExitError(CommandError):
    """Raised when the build tool terminates with anything but a clean exit."""

    def __init__(self, status: ExitStatus) -> None:
        super().__init__(f"Command exited with status {status}")
        self.status = status
