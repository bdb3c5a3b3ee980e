from __future__ import annotations

from collections.abc import Sequence
from typing import Final, Protocol, runtime_checkable

from attrs import field, frozen

STORE_PREFIX: Final = "/nix/store"


@runtime_checkable
class Installable(Protocol):
    def to_args(self) -> list[str]:
        """Arguments naming this installable on the build tool's command line."""
        ...

    def is_store_backed(self) -> bool:
        """Whether this installable already lives under the protected store."""
        ...


def join_attribute(attribute: Sequence[str]) -> str:
    """Join attribute path segments, quoting segments that contain a dot."""
    return ".".join(f'"{part}"' if "." in part else part for part in attribute)


def split_attribute(text: str) -> tuple[str, ...]:
    """Inverse of `join_attribute`."""
    parts: list[str] = []
    current: list[str] = []
    quoted = False
    for ch in text:
        match ch:
            case '"':
                quoted = not quoted
            case "." if not quoted:
                parts.append("".join(current))
                current = []
            case _:
                current.append(ch)
    if current or parts:
        parts.append("".join(current))
    return tuple(parts)


def _to_tuple(value: Sequence[str]) -> tuple[str, ...]:
    return tuple(value)


@frozen
class Flake:
    reference: str
    attribute: tuple[str, ...] = field(default=(), converter=_to_tuple)

    @classmethod
    def parse(cls, text: str) -> Flake:
        reference, sep, attribute = text.partition("#")
        return cls(
            reference=reference,
            attribute=split_attribute(attribute) if sep else (),
        )

    def to_args(self) -> list[str]:
        if not self.attribute:
            return [self.reference]
        return [f"{self.reference}#{join_attribute(self.attribute)}"]

    def is_store_backed(self) -> bool:
        return self.reference.startswith(STORE_PREFIX)


@frozen
class FileInstallable:
    path: str
    attribute: tuple[str, ...] = field(default=(), converter=_to_tuple)

    def to_args(self) -> list[str]:
        args = ["--file", self.path]
        if self.attribute:
            args.append(join_attribute(self.attribute))
        return args

    def is_store_backed(self) -> bool:
        return False


@frozen
class Expression:
    expression: str
    attribute: tuple[str, ...] = field(default=(), converter=_to_tuple)

    def to_args(self) -> list[str]:
        args = ["--expr", self.expression]
        if self.attribute:
            args.append(join_attribute(self.attribute))
        return args

    def is_store_backed(self) -> bool:
        return False


@frozen
class StorePath:
    path: str

    def to_args(self) -> list[str]:
        return [self.path]

    def is_store_backed(self) -> bool:
        return False
