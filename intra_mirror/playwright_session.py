"""
Playwright Session
==================
``BrowserSession`` backed by a Playwright ``Page``.

Selectors encode the platform's markup contract:

    - graph pages    → ``#graph .nodes .node a`` wrapping a ``.nodeLabel``
    - list pages     → ``.list a.list__item[data-name]`` (activities)
    - file listings  → ``.stack > div:first-child .list a.list__item``
    - dashboard      → ``a.project`` cards with a ``.project__title``

A change to the site's markup only touches this module.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from .errors import FetchFailure, NavigationFailure, NavigationTimeout
from .session import (
    BrowserSession,
    FetchResult,
    FileEntry,
    GraphNodeEntry,
    ListEntry,
    NavigationResult,
    ProjectCard,
)

logger = logging.getLogger(__name__)

GRAPH_CONTAINER = "#graph"
GRAPH_NODE_LINKS = "#graph .nodes .node a"
ACTIVITY_ITEMS = ".list a.list__item[data-name]"
FILE_LIST = ".stack > div:first-child .list"
PROJECT_CARDS = "a.project"

_GRAPH_NODES_JS = """
anchors => anchors.map(a => ({
    label: a.querySelector('.nodeLabel')?.textContent?.trim() || '',
    href: a.getAttribute('href') || ''
}))
"""

_ACTIVITIES_JS = """
items => items.map(a => ({
    name: a.getAttribute('data-name')?.trim() || '',
    link: a.href
}))
"""

_FILES_JS = """
selector => {
    const list = document.querySelector(selector);
    if (!list) return [];
    return Array.from(list.querySelectorAll('a.list__item')).map(a => ({
        name: a.querySelector('.list__item__name')?.textContent?.trim() || '',
        link: a.href
    }));
}
"""

_PROJECTS_JS = """
cards => cards.map(c => ({
    title: c.querySelector('.project__title')?.textContent?.trim() || '',
    link: c.href
}))
"""


class PlaywrightSession(BrowserSession):
    """Wraps one Playwright page.

    If *owned_context* is given, ``close()`` closes the whole context
    (the page goes with it); otherwise only the page is closed.
    """

    def __init__(self, page: Page, owned_context: Optional[BrowserContext] = None,
                 fetch_timeout_ms: int = 30_000):
        self.page = page
        self._owned_context = owned_context
        self._fetch_timeout_ms = fetch_timeout_ms

    # ── Navigation ────────────────────────────────────────────────

    async def navigate(self, url: str, timeout_ms: int) -> NavigationResult:
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightTimeout:
            return NavigationResult(url, False, NavigationTimeout(url, timeout_ms))
        except PlaywrightError as e:
            return NavigationResult(url, False, NavigationFailure(url, str(e)))
        return NavigationResult(url, True)

    async def wait_for_any(self, selectors: Sequence[str], timeout_ms: int) -> bool:
        try:
            await self.page.wait_for_selector(", ".join(selectors), timeout=timeout_ms)
            return True
        except PlaywrightTimeout:
            return False

    # ── Fetch ─────────────────────────────────────────────────────

    async def fetch(self, url: str) -> FetchResult:
        # page.request shares the context's cookie jar
        try:
            resp = await self.page.request.get(url, timeout=self._fetch_timeout_ms)
        except PlaywrightError as e:
            return FetchResult(url, False, error=FetchFailure(url, reason=str(e)))
        try:
            if not resp.ok:
                return FetchResult(url, False, status=resp.status,
                                   error=FetchFailure(url, status=resp.status))
            body = await resp.body()
        except PlaywrightError as e:
            return FetchResult(url, False, error=FetchFailure(url, reason=str(e)))
        finally:
            await resp.dispose()
        return FetchResult(url, True, body=body, status=resp.status)

    # ── Extraction ────────────────────────────────────────────────

    async def has_graph_container(self) -> bool:
        return await self.page.query_selector(GRAPH_CONTAINER) is not None

    async def wait_for_graph_nodes(self, timeout_ms: int) -> bool:
        return await self.wait_for_any([GRAPH_NODE_LINKS], timeout_ms)

    async def extract_graph_nodes(self) -> List[GraphNodeEntry]:
        raw = await self.page.eval_on_selector_all(GRAPH_NODE_LINKS, _GRAPH_NODES_JS)
        return [GraphNodeEntry(n["label"], n["href"]) for n in raw if n["label"] and n["href"]]

    async def extract_list_entries(self) -> List[ListEntry]:
        raw = await self.page.eval_on_selector_all(ACTIVITY_ITEMS, _ACTIVITIES_JS)
        return [ListEntry(e["name"], e["link"]) for e in raw if e["name"] and e["link"]]

    async def extract_file_entries(self) -> List[FileEntry]:
        raw = await self.page.evaluate(_FILES_JS, FILE_LIST)
        return [FileEntry(f["name"], f["link"]) for f in raw if f["name"] and f["link"]]

    async def extract_project_cards(self) -> List[ProjectCard]:
        raw = await self.page.eval_on_selector_all(PROJECT_CARDS, _PROJECTS_JS)
        return [ProjectCard(c["title"], c["link"]) for c in raw if c["title"] and c["link"]]

    # ── Lifecycle ─────────────────────────────────────────────────

    async def close(self) -> None:
        try:
            if self._owned_context is not None:
                await self._owned_context.close()
            else:
                await self.page.close()
        except PlaywrightError as e:
            logger.debug(f"[SESSION] Close failed: {e}")
