from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Set
from contextlib import aclosing

from lanfinder.config import ScanningConfig
from lanfinder.models import Device

from .neighbors import NeighborTable
from .probe import probe
from .scheduler import race_bounded

logger = logging.getLogger(__name__)


async def scan(
    ip_set: Set[str],
    config: ScanningConfig,
    table: NeighborTable | None = None,
) -> AsyncIterator[Device]:
    """Probe every address in ``ip_set`` and yield neighbor entries as they appear.

    Each address is probed exactly once. After its probe completes the
    neighbor table is consulted for that address, and entries inside
    ``ip_set`` are yielded the first time their IP is seen. A table read that
    started after a probe finished already covers that address, so bursts of
    completions share one read.
    """
    if table is None:
        table = NeighborTable()
    seen: set[str] = set()
    logger.debug(
        "Scanning %d addresses (concurrency=%d, timeout=%.2fs)",
        len(ip_set),
        config.concurrency,
        config.timeout,
    )

    async def _probe(ip: str) -> tuple[str, float]:
        await probe(ip, config)
        return ip, time.monotonic()

    async with aclosing(race_bounded(ip_set, _probe, config.concurrency)) as hosts:
        async for host, finished in hosts:
            for device in await table.lookup(host, since=finished):
                if device.ip not in ip_set or device.ip in seen:
                    continue
                seen.add(device.ip)
                logger.debug("Found %s at %s", device.mac, device.ip)
                yield device

    logger.debug("Scan complete: found %d devices", len(seen))
