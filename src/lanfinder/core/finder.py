"""Entry points for finding devices on the local network."""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing

from lanfinder.config import ScanningConfig, get_settings
from lanfinder.models import Device, ip_sort_key, normalize_mac

from .neighbors import NeighborTable
from .probe import probe
from .ranges import make_ip_set
from .scheduler import race_bounded
from .session import scan

logger = logging.getLogger(__name__)


def _resolve(
    config: ScanningConfig | None, table: NeighborTable | None
) -> tuple[ScanningConfig, NeighborTable]:
    return (
        config if config is not None else get_settings().scanning,
        table if table is not None else NeighborTable(),
    )


def device_matcher(query: str) -> Callable[[Device], bool]:
    """Match devices by IPv4 address if ``query`` is one, by MAC otherwise."""
    try:
        ip = str(ipaddress.IPv4Address(query.strip()))
    except ValueError:
        mac = normalize_mac(query)
        return lambda device: normalize_mac(device.mac) == mac
    return lambda device: device.ip == ip


def find_local_devices(
    *addresses: str,
    config: ScanningConfig | None = None,
    table: NeighborTable | None = None,
) -> AsyncIterator[Device]:
    """Stream neighbor entries for ``addresses`` as their probes complete.

    ``addresses`` are IPv4 ranges in CIDR notation, hyphenated ranges or
    single addresses. Without any, every local IPv4 network is scanned.
    """
    config, table = _resolve(config, table)
    return scan(make_ip_set(*addresses), config, table)


async def find_local_device(
    query: str,
    *addresses: str,
    config: ScanningConfig | None = None,
    table: NeighborTable | None = None,
) -> Device | None:
    """Find one device by MAC or IP address within ``addresses``.

    The cached neighbor table is checked first. Only when the device is not
    in it are the addresses probed. Returns None when nothing matches.
    """
    config, table = _resolve(config, table)
    ip_set = make_ip_set(*addresses)
    matches = device_matcher(query)

    for device in await table.read():
        if device.ip in ip_set and matches(device):
            logger.debug("Found %s in neighbor cache", query)
            return device

    logger.debug("%s not cached, probing %d addresses", query, len(ip_set))
    async with aclosing(scan(ip_set, config, table)) as devices:
        async for device in devices:
            if matches(device):
                return device

    logger.debug("%s not found", query)
    return None


async def get_local_device_list(
    *addresses: str,
    config: ScanningConfig | None = None,
    table: NeighborTable | None = None,
) -> list[Device]:
    """Probe all ``addresses``, then return their neighbor entries sorted by IP."""
    config, table = _resolve(config, table)
    ip_set = make_ip_set(*addresses)

    async def _probe(ip: str) -> str:
        return await probe(ip, config)

    async with aclosing(race_bounded(ip_set, _probe, config.concurrency)) as hosts:
        async for _ in hosts:
            pass

    devices = [device for device in await table.read() if device.ip in ip_set]
    return sorted(devices, key=lambda device: ip_sort_key(device.ip))
