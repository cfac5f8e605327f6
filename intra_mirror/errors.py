"""
Error Types
===========
Typed failures raised or carried by the mirror engine.

Recoverable (node / file granularity — logged, never propagated):
    - ``NavigationTimeout``       — page load exceeded its timeout
    - ``NavigationFailure``       — page load failed for any other reason
    - ``MissingStructuralMarker`` — none of the expected markers rendered
    - ``FetchFailure``            — file fetch returned a non-success status
    - ``FileWriteFailure``        — bytes could not be written to disk

Fatal (outside the traversal core, reported by the CLI):
    - ``ConfigError``
    - ``AuthenticationError``
"""

from __future__ import annotations


class MirrorError(Exception):
    """Base class for every error raised by intra_mirror."""


# ---------------------------------------------------------------------------
# Recoverable
# ---------------------------------------------------------------------------

class NavigationTimeout(MirrorError):
    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"Timed out after {timeout_ms}ms loading {url}")
        self.url = url
        self.timeout_ms = timeout_ms


class NavigationFailure(MirrorError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to load {url}: {reason}")
        self.url = url
        self.reason = reason


class MissingStructuralMarker(MirrorError):
    def __init__(self, selectors: str):
        super().__init__(f"No structural marker rendered ({selectors})")
        self.selectors = selectors


class FetchFailure(MirrorError):
    def __init__(self, url: str, status: int = 0, reason: str = ""):
        detail = f"HTTP {status}" if status else (reason or "unknown error")
        super().__init__(f"Fetch failed for {url}: {detail}")
        self.url = url
        self.status = status
        self.reason = reason


class FileWriteFailure(MirrorError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not write {path}: {reason}")
        self.path = path
        self.reason = reason


# ---------------------------------------------------------------------------
# Fatal
# ---------------------------------------------------------------------------

class ConfigError(MirrorError):
    """Invalid or incomplete run configuration."""


class AuthenticationError(MirrorError):
    """Login to the platform did not succeed."""
