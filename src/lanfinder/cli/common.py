from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import typer
from rich.table import Table

from lanfinder.config import ScanningConfig, Settings, get_settings, resolve_config_path
from lanfinder.models import Device
from lanfinder.utils.redaction import Redactor

RANGES_HELP = (
    "IPv4 ranges (CIDR, a.b.c.d-e.f.g.h or single address). "
    "Uses config default_ranges, then local interfaces, if omitted."
)


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def scanning_config(
    settings: Settings, concurrency: int | None, timeout: float | None
) -> ScanningConfig:
    """Scanning settings with command line overrides applied."""
    overrides: dict[str, object] = {}
    if concurrency is not None:
        overrides["concurrency"] = concurrency
    if timeout is not None:
        overrides["timeout"] = timeout
    if not overrides:
        return settings.scanning
    return ScanningConfig.model_validate(
        {**settings.scanning.model_dump(), **overrides}
    )


def target_ranges(ranges: list[str] | None, config: ScanningConfig) -> list[str]:
    return list(ranges or config.default_ranges)


def device_table(devices: Iterable[Device], redactor: Redactor) -> Table:
    table = Table()
    table.add_column("IP", style="cyan")
    table.add_column("MAC Address", style="green")
    table.add_column("Interface")
    table.add_column("Flag")

    for device in devices:
        table.add_row(*device_row(device, redactor))
    return table


def device_row(device: Device, redactor: Redactor) -> tuple[str, str, str, str]:
    interface = device.interface_name or redactor.redact_interface(device.interface)
    return (
        redactor.redact_ip(device.ip),
        redactor.redact_mac(device.mac),
        interface,
        device.flag or "",
    )
