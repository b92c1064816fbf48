from __future__ import annotations

import asyncio
import logging

from lanfinder.config import ScanningConfig

logger = logging.getLogger(__name__)


async def probe(ip: str, config: ScanningConfig) -> str:
    """Knock on ``ip`` so the OS refreshes its neighbor cache entry for it.

    Reachability is not the point: the address is returned whether the
    connection succeeds, fails or times out, and the socket is always closed.
    """
    writer: asyncio.StreamWriter | None = None
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(ip, config.port),
            timeout=config.timeout,
        )
        logger.debug("Probe %s:%d connected", ip, config.port)
    except (asyncio.TimeoutError, TimeoutError):
        logger.debug("Probe %s:%d timed out", ip, config.port)
    except OSError as exc:
        logger.debug("Probe %s:%d failed: %s", ip, config.port, exc)
    finally:
        if writer is not None:
            writer.close()
    return ip
