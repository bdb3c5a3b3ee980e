from __future__ import annotations

import subprocess
from typing import NamedTuple

import anyio
from loguru import logger

from nixwrap.commands.exceptions import CaptureError, SpawnError
from nixwrap.commands.schema import ExitStatus, exit_status


class ProcessResult(NamedTuple):
    status: ExitStatus
    stdout: str | None


async def run_process(
    *command: str,
    capture: bool = False,
    merge_stderr: bool = False,
    quiet_stderr: bool = False,
    encoding: str = "utf-8",
) -> ProcessResult:
    """
    Runs a process to completion and returns its exit status.

    Standard streams are inherited from the parent unless `capture` pipes
    stdout, `merge_stderr` folds stderr into stdout or `quiet_stderr`
    discards it. `stdout` in the result is only set when captured and is
    decoded lossily, undecodable bytes become U+FFFD.
    """
    if merge_stderr:
        stderr: int | None = subprocess.STDOUT
    elif quiet_stderr:
        stderr = subprocess.DEVNULL
    else:
        stderr = None

    try:
        process = await anyio.open_process(
            list(command),
            stdin=None,
            stdout=subprocess.PIPE if capture else None,
            stderr=stderr,
        )
    except OSError as exc:
        raise SpawnError(f"Failed to spawn {command[0]}: {exc}") from exc

    async with process:
        try:
            output = (
                b"".join([chunk async for chunk in process.stdout])
                if process.stdout
                else None
            )
            returncode = await process.wait()
        except (OSError, anyio.BrokenResourceError) as exc:
            raise CaptureError(f"Failed to collect {command[0]}: {exc}") from exc

    logger.debug("{} finished with return code {}", command[0], returncode)
    stdout = output.decode(encoding, errors="replace") if output is not None else None
    return ProcessResult(status=exit_status(returncode), stdout=stdout)
