"""
Shared fixtures: an in-memory site and a ``BrowserSession`` that walks it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pytest

from intra_mirror.errors import FetchFailure, NavigationTimeout
from intra_mirror.session import (
    BrowserSession,
    FetchResult,
    FileEntry,
    GraphNodeEntry,
    ListEntry,
    NavigationResult,
    ProjectCard,
)

BASE_URL = "https://intra.example.test"


@dataclass
class FakePage:
    has_graph: bool = False
    graph_ready: bool = True
    graph_nodes: List[GraphNodeEntry] = field(default_factory=list)
    list_entries: List[ListEntry] = field(default_factory=list)
    file_entries: List[FileEntry] = field(default_factory=list)
    project_cards: List[ProjectCard] = field(default_factory=list)
    has_markers: bool = True


@dataclass
class FakeSite:
    pages: Dict[str, FakePage] = field(default_factory=dict)
    files: Dict[str, Optional[bytes]] = field(default_factory=dict)
    broken_urls: set = field(default_factory=set)
    navigations: List[str] = field(default_factory=list)
    fetches: List[str] = field(default_factory=list)


class FakeSession(BrowserSession):

    def __init__(self, site: FakeSite):
        self.site = site
        self.current: Optional[FakePage] = None
        self.closed = False

    async def navigate(self, url: str, timeout_ms: int) -> NavigationResult:
        self.site.navigations.append(url)
        if url in self.site.broken_urls or url not in self.site.pages:
            self.current = None
            return NavigationResult(url, False, NavigationTimeout(url, timeout_ms))
        self.current = self.site.pages[url]
        return NavigationResult(url, True)

    async def wait_for_any(self, selectors: Sequence[str], timeout_ms: int) -> bool:
        return bool(self.current and self.current.has_markers)

    async def fetch(self, url: str) -> FetchResult:
        self.site.fetches.append(url)
        body = self.site.files.get(url)
        if body is None:
            return FetchResult(url, False, status=404, error=FetchFailure(url, status=404))
        return FetchResult(url, True, body=body, status=200)

    async def close(self) -> None:
        self.closed = True

    async def has_graph_container(self) -> bool:
        return self.current.has_graph

    async def wait_for_graph_nodes(self, timeout_ms: int) -> bool:
        return self.current.graph_ready

    async def extract_graph_nodes(self):
        return list(self.current.graph_nodes)

    async def extract_list_entries(self):
        return list(self.current.list_entries)

    async def extract_file_entries(self):
        return list(self.current.file_entries)

    async def extract_project_cards(self):
        return list(self.current.project_cards)


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def session(site):
    return FakeSession(site)
