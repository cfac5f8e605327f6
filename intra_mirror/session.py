"""
Browser Session Interface
=========================
The narrow contract between the traversal engine and the browser layer.

The engine never touches Playwright directly.  It talks to a
``BrowserSession``, which bundles:

    - navigation with a bounded timeout        → ``navigate()``
    - bounded waits for structural markers     → ``wait_for_any()``
    - authenticated file fetches               → ``fetch()``
    - one extraction method per page shape     → ``ContentExtractor``

Every fallible step returns a result object instead of raising; the
caller decides whether to log, skip or continue.

The production implementation lives in ``playwright_session.py``; tests
use in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .errors import MirrorError


# ---------------------------------------------------------------------------
# Extracted entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphNodeEntry:
    """A node of a graph page: its label and its (usually relative) href."""
    label: str
    href: str


@dataclass(frozen=True)
class ListEntry:
    """A sub-activity listed on a list page."""
    name: str
    link: str


@dataclass(frozen=True)
class FileEntry:
    """A downloadable file listed on a leaf page."""
    name: str
    link: str


@dataclass(frozen=True)
class ProjectCard:
    """A tenant or sub-project card on the dashboard."""
    title: str
    link: str


class PageKind(Enum):
    GRAPH = "graph"
    LIST = "list"
    LEAF = "leaf"


@dataclass
class ResourceNode:
    """One page of the content tree, as seen by the crawler."""
    url: str
    label: str
    directory: str
    depth: int
    kind: Optional[PageKind] = None
    warning: Optional[MirrorError] = None


# ---------------------------------------------------------------------------
# Step results
# ---------------------------------------------------------------------------

@dataclass
class NavigationResult:
    url: str
    ok: bool
    error: Optional[MirrorError] = None


@dataclass
class FetchResult:
    url: str
    ok: bool
    body: bytes = b""
    status: int = 0
    error: Optional[MirrorError] = None


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------

class ContentExtractor(ABC):
    """Structured data extraction from the currently loaded page."""

    @abstractmethod
    async def has_graph_container(self) -> bool:
        """True if the graph container element exists on the page."""
        ...

    @abstractmethod
    async def wait_for_graph_nodes(self, timeout_ms: int) -> bool:
        """Wait until graph node links are queryable.

        Returns False on timeout instead of raising.
        """
        ...

    @abstractmethod
    async def extract_graph_nodes(self) -> List[GraphNodeEntry]:
        ...

    @abstractmethod
    async def extract_list_entries(self) -> List[ListEntry]:
        ...

    @abstractmethod
    async def extract_file_entries(self) -> List[FileEntry]:
        ...

    @abstractmethod
    async def extract_project_cards(self) -> List[ProjectCard]:
        ...


class BrowserSession(ContentExtractor):
    """An authenticated page the engine can drive, one navigation at a time."""

    @abstractmethod
    async def navigate(self, url: str, timeout_ms: int) -> NavigationResult:
        ...

    @abstractmethod
    async def wait_for_any(self, selectors: Sequence[str], timeout_ms: int) -> bool:
        """Wait for any of *selectors*; False if none appeared in time."""
        ...

    @abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        """Fetch *url* with the session's cookies."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
