from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from lanfinder.core import NeighborTableError, get_local_device_list
from lanfinder.utils.redaction import Redactor

from .common import (
    RANGES_HELP,
    device_table,
    load_settings_or_exit,
    scanning_config,
    target_ranges,
)


def register(app: typer.Typer) -> None:
    @app.command("list")
    def list_devices(
        ranges: list[str] | None = typer.Argument(None, help=RANGES_HELP),
        concurrency: int | None = typer.Option(
            None, "--concurrency", "-c", min=1, help="Maximum probes in flight"
        ),
        timeout: float | None = typer.Option(
            None, "--timeout", "-t", min=0.001, help="Probe timeout in seconds"
        ),
        redact: bool = typer.Option(
            False,
            "--redact",
            help="Redact sensitive values in output",
        ),
    ) -> None:
        """Probe all addresses, then list devices sorted by IP."""
        console = Console()

        settings = load_settings_or_exit()
        config = scanning_config(settings, concurrency, timeout)
        targets = target_ranges(ranges, config)

        console.print(f"Probing {', '.join(targets) or 'local networks'}...")
        try:
            devices = asyncio.run(get_local_device_list(*targets, config=config))
        except NeighborTableError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        if not devices:
            console.print("No devices found.")
            return

        console.print(device_table(devices, Redactor(enabled=redact)))
        console.print(f"\n[green]Found {len(devices)} device(s)[/green]")
