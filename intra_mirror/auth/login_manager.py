"""
Login Manager
=============
Playwright-based login flow for the intranet.

Steps:
    1. Navigate to the platform root (redirects to the login form)
    2. Fill ``#id_username`` and ``#id_password``
    3. Submit and wait for the post-login page to settle
    4. Verify the login form is gone

Security:
    - Credentials are never logged or printed.
"""

from __future__ import annotations

import logging

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeout

from .credentials import Credentials

logger = logging.getLogger(__name__)

USERNAME_SELECTOR = "#id_username"
PASSWORD_SELECTOR = "#id_password"
SUBMIT_SELECTOR = 'button[type="submit"]'


class PlatformLogin:
    """Performs the form login on a fresh page.

    Usage::

        login = PlatformLogin("https://intra.forge.epita.fr")
        ok = await login.login(page, creds)
    """

    def __init__(self, base_url: str, *, navigation_timeout_ms: int = 30_000,
                 settle_timeout_ms: int = 30_000):
        self.base_url = base_url
        self.navigation_timeout_ms = navigation_timeout_ms
        self.settle_timeout_ms = settle_timeout_ms

    async def login(self, page: Page, creds: Credentials) -> bool:
        """Execute the login flow. Returns True if the session is authenticated."""
        logger.info(f"[AUTH] Navigating to login page: {self.base_url}")
        try:
            resp = await page.goto(self.base_url, timeout=self.navigation_timeout_ms)
        except PlaywrightTimeout:
            logger.error("[AUTH] Timeout navigating to login page")
            return False

        if resp and resp.status >= 400:
            logger.error(f"[AUTH] Login page returned HTTP {resp.status}")
            return False

        try:
            await page.wait_for_selector(USERNAME_SELECTOR, timeout=self.navigation_timeout_ms)
        except PlaywrightTimeout:
            logger.error("[AUTH] Could not find username field")
            return False

        await page.fill(USERNAME_SELECTOR, creds.username)
        await page.fill(PASSWORD_SELECTOR, creds.password)
        logger.info("[AUTH] Credentials filled — submitting")

        try:
            async with page.expect_navigation(wait_until="networkidle",
                                              timeout=self.settle_timeout_ms):
                await page.click(SUBMIT_SELECTOR)
        except PlaywrightTimeout:
            logger.warning("[AUTH] Post-login page did not settle — checking anyway")

        if await page.query_selector(PASSWORD_SELECTOR):
            logger.error("[AUTH] Login form still present — credentials rejected?")
            return False

        logger.info("[AUTH] Login successful")
        return True
