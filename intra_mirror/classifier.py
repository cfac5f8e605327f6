"""
Page Classifier
===============
Decides which of the three page shapes a loaded page has.

Detection order:
    1. GRAPH — the graph container exists AND its node links render
       within ``graph_timeout_ms``.  A container whose nodes never
       render is treated as "not a graph" so a half-rendered page
       still gets traversed.
    2. LIST  — the page lists at least one named sub-activity.
    3. LEAF  — anything else; the page is a file container.

The children found while classifying are returned with the shape so the
crawler does not query the page twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .session import ContentExtractor, GraphNodeEntry, ListEntry, PageKind

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_TIMEOUT_MS = 15_000


@dataclass
class Classification:
    kind: PageKind
    graph_nodes: List[GraphNodeEntry] = field(default_factory=list)
    list_entries: List[ListEntry] = field(default_factory=list)


class PageClassifier:

    def __init__(self, graph_timeout_ms: int = DEFAULT_GRAPH_TIMEOUT_MS):
        self.graph_timeout_ms = graph_timeout_ms

    async def classify(self, page: ContentExtractor) -> Classification:
        if await self._is_graph(page):
            return Classification(PageKind.GRAPH, graph_nodes=await page.extract_graph_nodes())

        entries = await page.extract_list_entries()
        if entries:
            return Classification(PageKind.LIST, list_entries=entries)

        return Classification(PageKind.LEAF)

    async def _is_graph(self, page: ContentExtractor) -> bool:
        if not await page.has_graph_container():
            return False
        if await page.wait_for_graph_nodes(self.graph_timeout_ms):
            return True
        logger.debug("[CLASSIFY] Graph container present but nodes never rendered — not a graph")
        return False
