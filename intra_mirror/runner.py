"""
Mirror Runner
=============
Wires one complete run together.

1. Launch Chromium and log in (cookies captured once)
2. Enumerate tenants → sub-projects into root tasks
3. Run one crawl per root on a bounded worker pool,
   each root with its own authenticated session
4. Render the report, write ``report.txt``, echo it to stdout
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List

from playwright.async_api import async_playwright

from .auth.session_factory import SessionFactory
from .classifier import PageClassifier
from .crawler import Crawler, VisitedSet
from .downloader import FileDownloader
from .enumeration import RootTask, TenantEnumerator
from .monitor import RunStats, StatsAggregator, print_progress
from .pool import run_pool
from .report import render_report, write_report
from .run_config import MirrorRunConfig
from .session import BrowserSession

logger = logging.getLogger(__name__)

SessionOpener = Callable[[], Awaitable[BrowserSession]]


@dataclass
class MirrorResult:
    stats: RunStats
    report: str
    report_path: Path
    elapsed_sec: float


def build_root_tasks(roots: List[RootTask], crawler: Crawler, open_session: SessionOpener,
                     stats: StatsAggregator, depth: int = 2):
    """One zero-argument coroutine factory per root.

    Each task opens its own session, crawls its root, and always closes
    the session and counts the root as done.
    """
    def make_task(root: RootTask):
        async def task() -> None:
            session = None
            try:
                session = await open_session()
                await crawler.visit(session, root.url, root.directory, depth)
            except Exception as e:
                logger.warning(f"[ROOT] '{root.label or root.url}' aborted: {e}")
            finally:
                await stats.record_root_done()
                if session is not None:
                    await session.close()
        return task

    return [make_task(root) for root in roots]


class MirrorRunner:
    """
    Usage::

        cfg = MirrorRunConfig.from_json("config.json").apply_env()
        result = MirrorRunner(cfg).run()
    """

    def __init__(self, config: MirrorRunConfig):
        self.config = config
        self.stats = StatsAggregator(progress_callback=print_progress)
        self.visited = VisitedSet()

    def run(self) -> MirrorResult:
        """Sync wrapper — run the async mirror from synchronous code."""
        return asyncio.run(self.mirror())

    async def mirror(self) -> MirrorResult:
        cfg = self.config
        started = time.monotonic()
        output_dir = cfg.output_path
        output_dir.mkdir(parents=True, exist_ok=True)

        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=cfg.headless)
            try:
                factory = await SessionFactory.login(
                    browser, cfg.base_url, cfg.credentials(),
                    viewport=cfg.viewport,
                    navigation_timeout_ms=cfg.navigation_timeout_ms,
                )
                roots = await self._enumerate(factory, output_dir)
                await self._crawl(roots, factory.new_authenticated_session)
            finally:
                await browser.close()

        elapsed = time.monotonic() - started
        final = await self.stats.snapshot()
        report = render_report(final, elapsed)
        path = write_report(output_dir, report)
        print("\n\n" + report + "\n")
        return MirrorResult(stats=final, report=report, report_path=path, elapsed_sec=elapsed)

    async def _enumerate(self, factory: SessionFactory, output_dir: Path) -> List[RootTask]:
        cfg = self.config
        enumerator = TenantEnumerator(
            output_dir, self.stats,
            navigation_timeout_ms=cfg.navigation_timeout_ms,
            marker_timeout_ms=cfg.marker_timeout_ms,
        )
        session = await factory.new_authenticated_session()
        try:
            return await enumerator.enumerate(session, cfg.base_url)
        finally:
            await session.close()

    async def _crawl(self, roots: List[RootTask], open_session: SessionOpener) -> None:
        cfg = self.config
        crawler = Crawler(
            cfg.base_url, self.visited, self.stats,
            classifier=PageClassifier(graph_timeout_ms=cfg.graph_timeout_ms),
            downloader=FileDownloader(self.stats),
            navigation_timeout_ms=cfg.navigation_timeout_ms,
            marker_timeout_ms=cfg.marker_timeout_ms,
        )
        await self.stats.set_work_total(len(roots))
        print(f"\nProcessing {len(roots)} activities with {cfg.concurrency} workers\n")

        tasks = build_root_tasks(roots, crawler, open_session, self.stats)
        await run_pool(tasks, cfg.concurrency)
