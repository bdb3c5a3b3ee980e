from __future__ import annotations

from collections.abc import Iterable
from typing import Self

from attrs import define, field
from loguru import logger

from nixwrap.utils.process import run_process

from .abc import ElevationStrategy
from .elevation import get_elevation_strategy
from .exceptions import CommandExecutionError
from .schema import ExitOutcome, Failure, Success, classify


@define
class Command:
    """
    Builder for a best-effort external command.

    Configure through chained calls, then await `run` (output goes straight
    to the terminal) or `run_capture` (stdout is collected as text):

        ```python
        await Command("nix-collect-garbage").arg("-d").elevate(True).run()
        ```
    """

    program: str
    _args: list[str] = field(factory=list, init=False)
    _message: str | None = field(default=None, init=False)
    _dry: bool = field(default=False, init=False)
    _elevate: bool = field(default=False, init=False)

    elevation: ElevationStrategy = field(factory=get_elevation_strategy, kw_only=True)
    """Strategy used to wrap the command when elevation is requested."""

    def arg(self, arg: str) -> Self:
        self._args.append(arg)
        return self

    def args(self, args: Iterable[str]) -> Self:
        self._args.extend(args)
        return self

    def message(self, message: str) -> Self:
        self._message = message
        return self

    def dry(self, dry: bool) -> Self:
        self._dry = dry
        return self

    def elevate(self, elevate: bool) -> Self:
        self._elevate = elevate
        return self

    @property
    def argv(self) -> list[str]:
        """The command line before elevation."""
        return [self.program, *self._args]

    async def run(self) -> ExitOutcome:
        """
        Run the command with inherited stdout and stderr.

        A non-zero or signalled exit is returned as `Failure`, never raised.
        Only OS level failures raise `CommandExecutionError`.
        """
        argv = self.argv
        if self._elevate:
            argv = await self.elevation.elevate(argv)

        self._announce(argv)
        if self._dry:
            return Success()

        try:
            result = await run_process(*argv)
        except CommandExecutionError as exc:
            exc.context = self._message
            raise

        outcome = classify(result.status)
        if isinstance(outcome, Failure):
            logger.debug("Ignoring {} of {}", outcome.status, self.program)
        return outcome

    async def run_capture(self) -> str | None:
        """
        Run the command unprivileged and return its stdout verbatim.

        Returns None in dry mode. The exit code is not enforced.
        """
        argv = self.argv
        self._announce(argv)
        if self._dry:
            return None

        try:
            result = await run_process(*argv, capture=True)
        except CommandExecutionError as exc:
            exc.context = self._message
            raise

        if isinstance(outcome := classify(result.status), Failure):
            logger.debug("{} finished with {}", self.program, outcome.status)
        return result.stdout or ""

    def _announce(self, argv: list[str]) -> None:
        if self._message:
            logger.info(self._message)
        logger.bind(argv=argv, dry=self._dry).debug("Command: {}", " ".join(argv))
