"""
Run Statistics
==============
Aggregate counters for one mirror run.

Tracks:
- Tenants enumerated
- Activities (list entries) visited
- Files downloaded, bucketed by extension
- Root tasks done / total (drives the live progress line)

Async-safe: all mutations go through an asyncio.Lock.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .utils import extension_bucket

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Snapshot of the run counters at a point in time."""
    tenant_count: int = 0
    activity_count: int = 0
    file_count: int = 0
    extension_histogram: Dict[str, int] = field(default_factory=dict)
    work_done: int = 0
    work_total: int = 0


def format_progress(stats: RunStats) -> str:
    return f"[{stats.work_done}/{stats.work_total}] {stats.file_count} files downloaded"


def print_progress(stats: RunStats) -> None:
    """Default progress callback: rewrite the current terminal line."""
    sys.stdout.write("\r" + format_progress(stats))
    sys.stdout.flush()


class StatsAggregator:
    """
    Shared by every worker of a run.

    Usage::

        stats = StatsAggregator()
        await stats.set_work_total(len(roots))

        # In the downloader / crawler:
        await stats.record_file("slides.pdf")
        await stats.record_activity()

        # At the end:
        final = await stats.snapshot()
    """

    def __init__(self, progress_callback: Optional[Callable[[RunStats], None]] = None):
        self._lock = asyncio.Lock()
        self._stats = RunStats()
        self._progress_callback = progress_callback

    def set_progress_callback(self, callback: Optional[Callable[[RunStats], None]]) -> None:
        """Set callback: callback(stats: RunStats)"""
        self._progress_callback = callback

    async def record_tenant(self) -> None:
        async with self._lock:
            self._stats.tenant_count += 1

    async def record_activity(self) -> None:
        async with self._lock:
            self._stats.activity_count += 1

    async def record_file(self, filename: str) -> None:
        """Count a downloaded file and bucket it by extension."""
        ext = extension_bucket(filename)
        async with self._lock:
            self._stats.file_count += 1
            hist = self._stats.extension_histogram
            hist[ext] = hist.get(ext, 0) + 1
        await self._emit_progress()

    async def set_work_total(self, total: int) -> None:
        async with self._lock:
            self._stats.work_total = total

    async def record_root_done(self) -> None:
        async with self._lock:
            self._stats.work_done += 1
        await self._emit_progress()

    async def snapshot(self) -> RunStats:
        """Take a consistent copy of all counters."""
        async with self._lock:
            s = self._stats
            return RunStats(
                tenant_count=s.tenant_count,
                activity_count=s.activity_count,
                file_count=s.file_count,
                extension_histogram=dict(s.extension_histogram),
                work_done=s.work_done,
                work_total=s.work_total,
            )

    async def _emit_progress(self) -> None:
        if not self._progress_callback:
            return
        snap = await self.snapshot()
        try:
            self._progress_callback(snap)
        except Exception as e:
            logger.debug(f"[MONITOR] Progress callback error: {e}")
