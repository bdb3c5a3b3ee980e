from __future__ import annotations

from collections.abc import Iterable
from typing import Final, Self

from attrs import define, field
from loguru import logger

from nixwrap.installable import Installable
from nixwrap.utils.process import run_process

from .abc import ElevationStrategy
from .elevation import get_elevation_strategy
from .exceptions import BuildExitError, CommandExecutionError
from .schema import ExitOutcome, Failure, Success, classify

BUILD_TOOL: Final = "nix"
ALTERNATE_FRONTEND: Final = "nom"


@define
class Build:
    """
    Builder for a `nix build` invocation against an installable.

    Unlike `Command.run`, any termination other than a clean zero exit is
    fatal and raised as `BuildExitError`.
    """

    installable: Installable
    _extra_args: list[str] = field(factory=list, init=False)
    _message: str | None = field(default=None, init=False)
    _nom: bool = field(default=False, init=False)
    _dry: bool = field(default=False, init=False)

    elevation: ElevationStrategy = field(factory=get_elevation_strategy, kw_only=True)

    def message(self, message: str) -> Self:
        self._message = message
        return self

    def extra_arg(self, arg: str) -> Self:
        self._extra_args.append(arg)
        return self

    def extra_args(self, args: Iterable[str]) -> Self:
        self._extra_args.extend(args)
        return self

    def nom(self, yes: bool) -> Self:
        self._nom = yes
        return self

    def dry(self, dry: bool) -> Self:
        self._dry = dry
        return self

    @property
    def tool(self) -> str:
        return ALTERNATE_FRONTEND if self._nom else BUILD_TOOL

    @property
    def argv(self) -> list[str]:
        """The command line before elevation."""
        return [self.tool, "build", *self.installable.to_args(), *self._extra_args]

    async def run(self) -> ExitOutcome:
        if self._message:
            logger.info(self._message)

        argv = self.argv
        # store paths are rebuilt in place, which needs write access to the store
        if self.installable.is_store_backed():
            argv = await self.elevation.elevate(argv)

        logger.bind(argv=argv, dry=self._dry).debug("Build: {}", " ".join(argv))
        if self._dry:
            return Success()

        try:
            result = await run_process(*argv, merge_stderr=True)
        except CommandExecutionError as exc:
            exc.context = self._message
            raise

        outcome = classify(result.status)
        if isinstance(outcome, Failure):
            raise BuildExitError(outcome.status)
        return outcome
