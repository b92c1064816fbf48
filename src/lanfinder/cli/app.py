from __future__ import annotations

from typing import Annotated, get_args

import typer

from lanfinder.utils.logging import LogLevel, setup_logging

from . import config as config_cmd
from .find import register as register_find
from .list_cmd import register as register_list
from .scan import register as register_scan

app = typer.Typer(
    help="lanfinder - find devices on the local network", no_args_is_help=True
)

app.add_typer(config_cmd.app, name="config")

register_scan(app)
register_find(app)
register_list(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="Log level (default: LANFINDER_LOGLEVEL, LOGLEVEL or INFO)",
        ),
    ] = None,
) -> None:
    """lanfinder CLI."""
    level = log_level.upper() if log_level else None
    if level is not None and level not in get_args(LogLevel):
        raise typer.BadParameter(
            f"{log_level!r} is not one of {', '.join(get_args(LogLevel))}",
            param_hint="--log-level",
        )
    setup_logging(level)  # type: ignore[arg-type]

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"lanfinder version {get_version('lanfinder')}")
        raise typer.Exit()
