from __future__ import annotations

import sys

from cyclopts import App

from nixwrap.commands import Build, Command, CommandError
from nixwrap.installable import (
    Expression,
    FileInstallable,
    Flake,
    Installable,
    StorePath,
    split_attribute,
)
from nixwrap.logging import setup_logging

app = App(help="Run nix builds and helper commands, elevating when needed.")


def _installable(
    installable: str,
    *,
    file: str | None = None,
    expr: str | None = None,
    store: str | None = None,
) -> Installable:
    if store is not None:
        return StorePath(path=store)
    if file is not None:
        return FileInstallable(path=file, attribute=split_attribute(installable))
    if expr is not None:
        return Expression(expression=expr, attribute=split_attribute(installable))
    return Flake.parse(installable)


@app.command
async def build(
    installable: str = ".",
    *extra_args: str,
    file: str | None = None,
    expr: str | None = None,
    store: str | None = None,
    nom: bool = False,
    dry: bool = False,
    message: str | None = None,
    verbose: bool = False,
) -> None:
    """
    Build an installable with nix (or nom).

    With `--file` or `--expr` the positional argument is the attribute path;
    `--store` builds an existing store path directly.
    """
    setup_logging("DEBUG" if verbose else "INFO")

    cmd = (
        Build(_installable(installable, file=file, expr=expr, store=store))
        .extra_args(extra_args)
        .nom(nom)
        .dry(dry)
    )
    if message:
        cmd.message(message)

    try:
        await cmd.run()
    except CommandError as exc:
        raise SystemExit(f"error: {exc}") from exc


@app.command(name="exec")
async def exec_(
    program: str,
    *args: str,
    elevate: bool = False,
    capture: bool = False,
    dry: bool = False,
    message: str | None = None,
    verbose: bool = False,
) -> None:
    """Run a command, optionally elevated or with its output captured."""
    setup_logging("DEBUG" if verbose else "INFO")

    cmd = Command(program).args(args).dry(dry)
    if message:
        cmd.message(message)

    try:
        if capture:
            if (output := await cmd.run_capture()) is not None:
                sys.stdout.write(output)
        else:
            await cmd.elevate(elevate).run()
    except CommandError as exc:
        raise SystemExit(f"error: {exc}") from exc
