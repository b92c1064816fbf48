from __future__ import annotations

import os
from typing import Annotated

import typer

from lanfinder.config import (
    CONCURRENCY_ENV_VAR,
    Settings,
    render_settings_toml,
    write_settings,
)

from .common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Show or create the configuration file")


@app.command("show")
def show_config() -> None:
    """Print the effective scanning settings and where they came from."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    source = str(path) if exists else "defaults"
    typer.echo(f"Config source: {source}")
    if os.environ.get(CONCURRENCY_ENV_VAR):
        typer.echo(
            f"Override: scanning.concurrency = {settings.scanning.concurrency}"
            f" (from {CONCURRENCY_ENV_VAR})"
        )
    if not settings.scanning.default_ranges:
        typer.echo("Targets: local interface networks (no default_ranges set)")
    typer.echo(render_settings_toml(settings))


@app.command("init")
def init_config(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Write a config file with the default scanning settings."""
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    if exists and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)")
        return

    write_settings(Settings(), path)
    typer.echo(f"Wrote default config to {path}")
