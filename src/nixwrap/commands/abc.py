from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class ElevationStrategy(ABC):
    helper: str

    @abstractmethod
    async def flags(self) -> list[str]:
        """Flags placed between the helper and the wrapped command."""

    async def elevate(self, argv: Sequence[str]) -> list[str]:
        """Wrap `argv` so that it runs with elevated privileges."""
        if argv and argv[0] == self.helper:
            return list(argv)
        return [self.helper, *await self.flags(), *argv]
