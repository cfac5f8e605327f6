"""
Authentication Module
=====================
Form login against the platform and cookie hand-off to worker sessions.

Architecture:
    - ``Credentials``     — credential container (resolved from config/env/prompt)
    - ``PlatformLogin``   — fills and submits the login form on a Playwright page
    - ``SessionFactory``  — holds the captured cookies, opens one isolated
                            authenticated ``BrowserSession`` per worker task

Usage::

    from intra_mirror.auth import Credentials, PlatformLogin, SessionFactory

    factory = await SessionFactory.login(browser, base_url, creds)
    session = await factory.new_authenticated_session()
"""

from .credentials import Credentials
from .login_manager import PlatformLogin
from .session_factory import SessionFactory

__all__ = [
    "Credentials",
    "PlatformLogin",
    "SessionFactory",
]
