"""
Tenant Enumeration
==================
Builds the flat list of crawl roots from the dashboard.

    dashboard ──► tenant cards ──► (per tenant) sub-project cards ──► RootTask

Tenant and sub-project directories are created here so the crawl roots
already exist when workers start.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .monitor import StatsAggregator
from .session import BrowserSession
from .utils import normalize_label

logger = logging.getLogger(__name__)

PROJECT_MARKERS = ("a.project",)


@dataclass
class RootTask:
    """One top-level activity to hand to a worker."""
    url: str
    directory: Path
    label: str = ""


class TenantEnumerator:

    def __init__(self, output_dir: Path, stats: StatsAggregator,
                 navigation_timeout_ms: int = 30_000, marker_timeout_ms: int = 10_000):
        self.output_dir = Path(output_dir)
        self.stats = stats
        self.navigation_timeout_ms = navigation_timeout_ms
        self.marker_timeout_ms = marker_timeout_ms

    async def enumerate(self, session: BrowserSession, dashboard_url: str) -> List[RootTask]:
        """Walk dashboard → tenants → sub-projects and return every crawl root."""
        nav = await session.navigate(dashboard_url, self.navigation_timeout_ms)
        if not nav.ok:
            logger.error(f"[ENUM] Dashboard unavailable: {nav.error}")
            return []
        await session.wait_for_any(PROJECT_MARKERS, self.marker_timeout_ms)

        tenants = await session.extract_project_cards()
        logger.info(f"[ENUM] {len(tenants)} tenants on dashboard")

        roots: List[RootTask] = []
        for tenant in tenants:
            name = normalize_label(tenant.title)
            tenant_dir = self.output_dir / name
            tenant_dir.mkdir(parents=True, exist_ok=True)
            await self.stats.record_tenant()
            logger.info(f"[tenant] {name}")

            nav = await session.navigate(tenant.link, self.navigation_timeout_ms)
            if not nav.ok:
                logger.warning(f"[ENUM] Skipping tenant '{tenant.title}': {nav.error}")
                continue
            await session.wait_for_any(PROJECT_MARKERS, self.marker_timeout_ms)

            for sub in await session.extract_project_cards():
                sub_dir = tenant_dir / normalize_label(sub.title)
                sub_dir.mkdir(parents=True, exist_ok=True)
                roots.append(RootTask(url=sub.link, directory=sub_dir, label=sub.title))

        return roots
