"""Bounded-concurrency racing of asynchronous work items."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Tasks left running after their consumer stopped iterating. The event loop
# only keeps weak references to tasks, so they are held here until done.
_detached: set[asyncio.Task] = set()


def _detach(task: asyncio.Task) -> None:
    _detached.add(task)
    task.add_done_callback(_detached.discard)


async def race_bounded(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    limit: int | None = None,
) -> AsyncIterator[R]:
    """Run ``worker`` over ``items`` and yield results in completion order.

    At most ``limit`` workers are in flight at any time. Every finished worker
    frees its slot for the next pending item before its result is yielded,
    so the window stays full while the consumer handles that result.
    ``limit=None`` starts every item at once.

    A worker exception ends the race and propagates to the consumer. Workers
    still in flight when the consumer stops iterating keep running in the
    background and their results are dropped.
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    pending = iter(items)
    window: dict[asyncio.Task[R], int] = {}

    async def _run(item: T) -> R:
        return await worker(item)

    def _fill(slot: int) -> bool:
        try:
            item = next(pending)
        except StopIteration:
            return False
        window[asyncio.create_task(_run(item))] = slot
        return True

    slot = 0
    while (limit is None or slot < limit) and _fill(slot):
        slot += 1
    logger.debug("Race started with %d slots", len(window))

    try:
        while window:
            done, _ = await asyncio.wait(window, return_when=asyncio.FIRST_COMPLETED)
            # refill every freed slot before handing results to the consumer
            for task in done:
                _fill(window.pop(task))
            for task in done:
                yield task.result()
    finally:
        for task in window:
            _detach(task)
