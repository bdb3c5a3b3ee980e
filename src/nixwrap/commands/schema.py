from __future__ import annotations

import signal

from attrs import frozen


@frozen
class Exited:
    """The child returned normally with `code`."""

    code: int

    def __str__(self) -> str:
        return f"exit code {self.code}"


@frozen
class Signaled:
    """The child was terminated by `signal`."""

    signal: int

    def __str__(self) -> str:
        try:
            name = signal.Signals(self.signal).name
        except ValueError:
            name = str(self.signal)
        return f"killed by signal {name}"


type ExitStatus = Exited | Signaled


def exit_status(returncode: int) -> ExitStatus:
    """Map a POSIX style return code (negative for signals) to an `ExitStatus`."""
    if returncode < 0:
        return Signaled(signal=-returncode)
    return Exited(code=returncode)


@frozen
class Success:
    pass


@frozen
class Failure:
    status: ExitStatus


type ExitOutcome = Success | Failure


def classify(status: ExitStatus) -> ExitOutcome:
    match status:
        case Exited(code=0):
            return Success()
        case _:
            return Failure(status=status)
