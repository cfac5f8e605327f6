"""
Worker Pool
===========
Bounded-concurrency runner for independent units of work.

``min(concurrency, len(tasks))`` worker coroutines share one cursor into
the task list.  Each worker claims the next index, awaits that task to
completion, then claims again until the list is exhausted.  The cursor
is read and advanced with no ``await`` in between, so no task is ever
claimed twice.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[None]]


async def run_pool(tasks: Sequence[Task], concurrency: int) -> None:
    """Run every task, at most *concurrency* at a time; return when all are done."""
    if concurrency < 1:
        raise ValueError(f"concurrency must be a positive integer, got {concurrency}")

    cursor = 0

    async def worker(worker_id: int) -> None:
        nonlocal cursor
        while cursor < len(tasks):
            index = cursor
            cursor += 1
            try:
                await tasks[index]()
            except Exception as e:
                logger.error(f"[POOL-{worker_id}] Task {index} failed: {e}", exc_info=True)

    workers = [worker(i) for i in range(min(concurrency, len(tasks)))]
    await asyncio.gather(*workers)
