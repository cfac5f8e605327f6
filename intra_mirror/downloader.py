"""
File Downloader
===============
Best-effort download of every file listed on a leaf page.

A file that fails to fetch or write is dropped: no retry, no partial
file left behind.  Only successful downloads reach the statistics.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import FileWriteFailure, MirrorError
from .monitor import StatsAggregator
from .session import BrowserSession, FileEntry
from .utils import safe_filename

logger = logging.getLogger(__name__)

# Accessibility duplicates of the regular handouts
EXCLUDED_NAME_FRAGMENTS: Tuple[str, ...] = ("dyslexic",)


@dataclass
class DownloadTask:
    source_link: str
    destination_path: Path


@dataclass
class DownloadResult:
    task: DownloadTask
    ok: bool
    nbytes: int = 0
    error: Optional[MirrorError] = None


def is_excluded(name: str) -> bool:
    lowered = name.lower()
    return any(fragment in lowered for fragment in EXCLUDED_NAME_FRAGMENTS)


def plan_downloads(entries: Iterable[FileEntry], directory: Path) -> List[DownloadTask]:
    """Turn listed files into download tasks, dropping excluded names.

    Exclusion looks at the name as listed, before any path stripping.
    """
    tasks = []
    for entry in entries:
        if not entry.link or is_excluded(entry.name):
            continue
        name = safe_filename(entry.name)
        if not name:
            continue
        tasks.append(DownloadTask(entry.link, Path(directory) / name))
    return tasks


def write_atomic(path: Path, data: bytes) -> None:
    """Write *data* to *path* via a temp file + rename in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".part-")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class FileDownloader:

    def __init__(self, stats: StatsAggregator):
        self.stats = stats

    async def download_all(self, session: BrowserSession, directory: Path) -> List[DownloadResult]:
        """Download every eligible file on the current page into *directory*."""
        entries = await session.extract_file_entries()
        tasks = plan_downloads(entries, directory)
        if len(tasks) < len(entries):
            logger.debug(f"[FILE] {len(entries) - len(tasks)} entries skipped in {directory}")

        results = []
        for task in tasks:
            try:
                results.append(await self.download(session, task))
            except Exception as e:
                logger.debug(f"[FILE] Dropped {task.destination_path.name}: {e}")
                results.append(DownloadResult(task, False))
        return results

    async def download(self, session: BrowserSession, task: DownloadTask) -> DownloadResult:
        fetched = await session.fetch(task.source_link)
        if not fetched.ok:
            logger.debug(f"[FILE] Dropped {task.destination_path.name}: {fetched.error}")
            return DownloadResult(task, False, error=fetched.error)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, write_atomic, task.destination_path, fetched.body)
        except OSError as e:
            err = FileWriteFailure(str(task.destination_path), str(e))
            logger.warning(f"[FILE] {err}")
            return DownloadResult(task, False, error=err)

        await self.stats.record_file(task.destination_path.name)
        return DownloadResult(task, True, nbytes=len(fetched.body))
