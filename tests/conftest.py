from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest
from attrs import define, field
from loguru import logger

from nixwrap.commands.exceptions import CommandExecutionError
from nixwrap.commands.schema import Exited, ExitStatus
from nixwrap.utils.process import ProcessResult

if TYPE_CHECKING:
    from loguru import Record


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@define
class SpawnCall:
    command: tuple[str, ...]
    capture: bool
    merge_stderr: bool
    quiet_stderr: bool


@define
class FakeSpawner:
    """Records every spawn and answers with canned results."""

    status: ExitStatus = Exited(code=0)
    stdout: str = ""
    error: CommandExecutionError | None = None
    calls: list[SpawnCall] = field(factory=list)

    async def __call__(
        self,
        *command: str,
        capture: bool = False,
        merge_stderr: bool = False,
        quiet_stderr: bool = False,
        encoding: str = "utf-8",
    ) -> ProcessResult:
        self.calls.append(SpawnCall(command, capture, merge_stderr, quiet_stderr))
        if self.error is not None:
            raise self.error
        return ProcessResult(
            status=self.status, stdout=self.stdout if capture else None
        )


@pytest.fixture
def spawner(monkeypatch: pytest.MonkeyPatch) -> FakeSpawner:
    fake = FakeSpawner()
    for module in ("command", "build", "elevation"):
        monkeypatch.setattr(f"nixwrap.commands.{module}.run_process", fake)
    return fake


@pytest.fixture
def log_records() -> Iterator[list[Record]]:
    records: list[Record] = []
    logger.enable("nixwrap")
    sink_id = logger.add(lambda msg: records.append(msg.record), level="DEBUG")
    yield records
    logger.remove(sink_id)
    logger.disable("nixwrap")
