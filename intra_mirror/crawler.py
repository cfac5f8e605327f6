"""
Tree Crawler
============
Depth-first descent of the platform's content tree.

For every page:
    1. Claim the URL in the run's ``VisitedSet`` (skip if already seen)
    2. Navigate (30s) and wait for a structural marker (10s, non-fatal)
    3. Classify the page
    4. GRAPH → recurse into each node, one sub-directory per node label
       LIST  → one sub-directory per activity; load it and download its files
       LEAF  → download the page's files into the current directory

Failures are handled per node / per activity: they are logged and the
crawl continues with the next sibling.  Nothing propagates out of
``visit()``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Set

from .classifier import Classification, PageClassifier
from .downloader import FileDownloader
from .errors import MissingStructuralMarker
from .monitor import StatsAggregator
from .session import BrowserSession, GraphNodeEntry, ListEntry, PageKind, ResourceNode
from .utils import normalize_label

logger = logging.getLogger(__name__)

STRUCTURE_MARKERS = (".project", ".list", "#graph", ".stack")
ACTIVITY_MARKERS = (".list", ".stack")

DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000
DEFAULT_MARKER_TIMEOUT_MS = 10_000


class VisitedSet:
    """URLs already handed to the page-load step during this run.

    ``claim()`` checks and inserts without awaiting in between, so two
    coroutines can never both win the same URL.
    """

    def __init__(self, urls: Iterable[str] = ()):
        self._urls: Set[str] = set(urls)

    def claim(self, url: str) -> bool:
        """Mark *url* visited; False if it already was."""
        if url in self._urls:
            return False
        self._urls.add(url)
        return True

    def __contains__(self, url: str) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)


class Crawler:
    """
    Recursive page walker.

    One instance serves a whole run; sessions are passed per call so
    several workers can share the crawler and its ``VisitedSet``.
    """

    def __init__(
        self,
        base_url: str,
        visited: VisitedSet,
        stats: StatsAggregator,
        classifier: PageClassifier = None,
        downloader: FileDownloader = None,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        marker_timeout_ms: int = DEFAULT_MARKER_TIMEOUT_MS,
    ):
        self.base_url = base_url
        self.visited = visited
        self.stats = stats
        self.classifier = classifier or PageClassifier()
        self.downloader = downloader or FileDownloader(stats)
        self.navigation_timeout_ms = navigation_timeout_ms
        self.marker_timeout_ms = marker_timeout_ms

    async def visit(self, session: BrowserSession, url: str,
                    target_dir: Path, depth: int = 0) -> Optional[ResourceNode]:
        """Mirror the page at *url* (and everything below it) into *target_dir*.

        Returns the classified node, or None when the URL was already
        visited or the page could not be processed.
        """
        if not self.visited.claim(url):
            logger.debug(f"[CRAWL] Already visited: {url}")
            return None
        try:
            return await self._process(session, url, Path(target_dir), depth)
        except Exception as e:
            logger.warning(f"[CRAWL] Node {url} failed: {e}")
            return None

    async def _process(self, session: BrowserSession, url: str,
                       target_dir: Path, depth: int) -> Optional[ResourceNode]:
        nav = await session.navigate(url, self.navigation_timeout_ms)
        if not nav.ok:
            logger.warning(f"[CRAWL] Skipping node: {nav.error}")
            return None
        warning = None
        if not await session.wait_for_any(STRUCTURE_MARKERS, self.marker_timeout_ms):
            warning = MissingStructuralMarker(", ".join(STRUCTURE_MARKERS))

        shape = await self.classifier.classify(session)
        node = ResourceNode(url=url, label=target_dir.name, directory=str(target_dir),
                            depth=depth, kind=shape.kind, warning=warning)
        if node.warning:
            logger.debug(f"[CRAWL] {node.warning} on {url}, classified as {node.kind.value}")
        logger.debug(f"[CRAWL] depth={depth} {node.kind.value:<5} {url}")

        if shape.kind is PageKind.GRAPH:
            await self._visit_graph(session, node, shape)
        elif shape.kind is PageKind.LIST:
            await self._visit_list(session, node, shape)
        else:
            await self._download(session, target_dir)
        return node

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    async def _visit_graph(self, session: BrowserSession, node: ResourceNode,
                           shape: Classification) -> None:
        for child in self.child_links(shape.graph_nodes):
            label, child_url = child
            try:
                child_dir = Path(node.directory) / normalize_label(label)
                child_dir.mkdir(parents=True, exist_ok=True)
                await self.visit(session, child_url, child_dir, node.depth + 1)
            except Exception as e:
                logger.warning(f"[CRAWL] Node '{label}' failed: {e}")

    async def _visit_list(self, session: BrowserSession, node: ResourceNode,
                          shape: Classification) -> None:
        for entry in shape.list_entries:
            try:
                await self._visit_activity(session, node, entry)
            except Exception as e:
                logger.warning(f"[CRAWL] Activity '{entry.name}' failed: {e}")

    async def _visit_activity(self, session: BrowserSession, node: ResourceNode,
                              entry: ListEntry) -> None:
        if not self.visited.claim(entry.link):
            logger.debug(f"[CRAWL] Activity already visited: {entry.link}")
            return

        activity_dir = Path(node.directory) / normalize_label(entry.name)
        activity_dir.mkdir(parents=True, exist_ok=True)
        await self.stats.record_activity()

        nav = await session.navigate(entry.link, self.navigation_timeout_ms)
        if not nav.ok:
            logger.warning(f"[CRAWL] Skipping activity '{entry.name}': {nav.error}")
            return
        await session.wait_for_any(ACTIVITY_MARKERS, self.marker_timeout_ms)
        await self._download(session, activity_dir)

    async def _download(self, session: BrowserSession, directory: Path) -> None:
        results = await self.downloader.download_all(session, directory)
        if results:
            done = sum(1 for r in results if r.ok)
            logger.debug(f"[CRAWL] {done}/{len(results)} files saved to {directory}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def child_links(self, nodes: Iterable[GraphNodeEntry]):
        """(label, absolute URL) for every node whose href is site-relative."""
        children = []
        for n in nodes:
            if not n.label or not n.href.startswith("/"):
                continue
            children.append((n.label, self.base_url.rstrip("/") + n.href))
        return children
