from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from lanfinder.core import NeighborTableError, find_local_device
from lanfinder.utils.redaction import Redactor

from .common import (
    RANGES_HELP,
    device_table,
    load_settings_or_exit,
    scanning_config,
    target_ranges,
)


def register(app: typer.Typer) -> None:
    @app.command()
    def find(
        query: str = typer.Argument(..., help="MAC address or IPv4 address to find"),
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
        """Find a single device by MAC or IP address."""
        console = Console()

        settings = load_settings_or_exit()
        config = scanning_config(settings, concurrency, timeout)
        targets = target_ranges(ranges, config)

        try:
            device = asyncio.run(find_local_device(query, *targets, config=config))
        except NeighborTableError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        if device is None:
            console.print(f"[yellow]![/yellow] Device '{query}' not found")
            raise typer.Exit(1)

        console.print(device_table([device], Redactor(enabled=redact)))
