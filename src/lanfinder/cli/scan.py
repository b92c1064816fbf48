from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console

from lanfinder.core import NeighborTableError, find_local_devices
from lanfinder.utils.redaction import Redactor

from .common import (
    RANGES_HELP,
    device_row,
    load_settings_or_exit,
    scanning_config,
    target_ranges,
)

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    @app.command()
    def scan(
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
        """Stream devices as they are discovered."""
        console = Console()

        settings = load_settings_or_exit()
        config = scanning_config(settings, concurrency, timeout)
        targets = target_ranges(ranges, config)

        console.print(f"Scanning {', '.join(targets) or 'local networks'}...")
        logger.info(
            "Scan settings: port=%d, timeout=%.2fs, concurrency=%d",
            config.port,
            config.timeout,
            config.concurrency,
        )

        redactor = Redactor(enabled=redact)

        async def _stream() -> int:
            count = 0
            async for device in find_local_devices(*targets, config=config):
                ip, mac, interface, _flag = device_row(device, redactor)
                console.print(f"[cyan]{ip}[/cyan]\t[green]{mac}[/green]\t{interface}")
                count += 1
            return count

        try:
            found = asyncio.run(_stream())
        except NeighborTableError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        if not found:
            console.print("No devices found.")
            return
        console.print(f"\n[green]Found {found} device(s)[/green]")
