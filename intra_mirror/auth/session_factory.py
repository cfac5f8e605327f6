"""
Session Factory
===============
Captures the cookies of one logged-in page and hands out isolated,
authenticated sessions built from them.

Each ``new_authenticated_session()`` call opens a fresh ``BrowserContext``
seeded with the captured cookies, so workers never share navigation
state.  Closing the returned session closes its context.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from playwright.async_api import Browser, Page

from ..errors import AuthenticationError
from ..playwright_session import PlaywrightSession
from .credentials import Credentials
from .login_manager import PlatformLogin

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = {"width": 1280, "height": 800}


class SessionFactory:

    def __init__(self, browser: Browser, cookies: List[dict],
                 viewport: Optional[Dict[str, int]] = None):
        self.browser = browser
        self.cookies = cookies
        self.viewport = viewport or DEFAULT_VIEWPORT

    @classmethod
    async def login(cls, browser: Browser, base_url: str, creds: Credentials,
                    viewport: Optional[Dict[str, int]] = None,
                    navigation_timeout_ms: int = 30_000) -> "SessionFactory":
        """Log in on a throwaway context and capture its cookies.

        Raises ``AuthenticationError`` if the login does not succeed.
        """
        viewport = viewport or DEFAULT_VIEWPORT
        context = await browser.new_context(viewport=viewport)
        try:
            page = await context.new_page()
            ok = await PlatformLogin(base_url, navigation_timeout_ms=navigation_timeout_ms).login(page, creds)
            if not ok:
                raise AuthenticationError(f"Login to {base_url} failed")
            cookies = await context.cookies()
        finally:
            await context.close()

        logger.info(f"[AUTH] Captured {len(cookies)} cookies")
        return cls(browser, cookies, viewport)

    async def new_page(self) -> Page:
        """A bare authenticated page in its own context (caller closes the context)."""
        context = await self.browser.new_context(viewport=self.viewport)
        try:
            await context.add_cookies(self.cookies)
            return await context.new_page()
        except Exception:
            await context.close()
            raise

    async def new_authenticated_session(self) -> PlaywrightSession:
        page = await self.new_page()
        return PlaywrightSession(page, owned_context=page.context)
