"""
Unified Run Configuration
=========================
Single source of truth for every mirror default and runtime limit.

Layers, lowest precedence first:
    1. ``_DEFAULTS`` below
    2. ``config.json`` (``login``, ``password``, ``outputDir``,
       ``concurrency``, ``headless``)
    3. Environment (``INTRA_*``, optionally loaded from ``.env``)
    4. CLI flags
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .auth.credentials import Credentials
from .errors import ConfigError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults: the ONLY place these numbers live
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "base_url": "https://intra.forge.epita.fr",
    "output_dir": "./output",
    "concurrency": 4,
    "headless": False,
    "navigation_timeout_ms": 30_000,   # page.goto
    "marker_timeout_ms": 10_000,       # any structural marker
    "graph_timeout_ms": 15_000,        # graph node links
    "viewport_width": 1280,
    "viewport_height": 800,
}

# config.json key → dataclass field
_JSON_KEYS = {
    "login": "login",
    "password": "password",
    "outputDir": "output_dir",
    "concurrency": "concurrency",
    "headless": "headless",
    "baseUrl": "base_url",
}

_ENV_VARS = {
    "INTRA_LOGIN": "login",
    "INTRA_PASSWORD": "password",
    "INTRA_OUTPUT_DIR": "output_dir",
    "INTRA_CONCURRENCY": "concurrency",
    "INTRA_HEADLESS": "headless",
    "INTRA_BASE_URL": "base_url",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class MirrorRunConfig:
    """
    Configuration consumed by every mirror subsystem.

    Populate via:
      - ``MirrorRunConfig()``                  → all defaults
      - ``MirrorRunConfig.from_json(path)``    → from ``config.json``
      - ``cfg.apply_env()``                    → overlay ``INTRA_*`` vars
      - ``cfg.apply_cli_args(ns)``             → overlay argparse Namespace
    """

    # ---- Credentials ----
    login: str = ""
    password: str = ""

    # ---- Target / output ----
    base_url: str = _DEFAULTS["base_url"]
    output_dir: str = _DEFAULTS["output_dir"]

    # ---- Concurrency / browser ----
    concurrency: int = _DEFAULTS["concurrency"]
    headless: bool = _DEFAULTS["headless"]
    viewport_width: int = _DEFAULTS["viewport_width"]
    viewport_height: int = _DEFAULTS["viewport_height"]

    # ---- Timeouts ----
    navigation_timeout_ms: int = _DEFAULTS["navigation_timeout_ms"]
    marker_timeout_ms: int = _DEFAULTS["marker_timeout_ms"]
    graph_timeout_ms: int = _DEFAULTS["graph_timeout_ms"]

    # -----------------------------------------------------------------------
    # Factory helpers
    # -----------------------------------------------------------------------
    @classmethod
    def from_json(cls, path) -> "MirrorRunConfig":
        """Load ``config.json``. Unknown keys are ignored."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")

        cfg = cls()
        cfg._update({_JSON_KEYS[k]: v for k, v in data.items() if k in _JSON_KEYS})
        logger.debug(f"[CONFIG] Loaded {path}")
        return cfg

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> "MirrorRunConfig":
        environ = os.environ if environ is None else environ
        self._update({name: environ[var] for var, name in _ENV_VARS.items() if environ.get(var)})
        return self

    def apply_cli_args(self, args) -> "MirrorRunConfig":
        """Overlay flags that were actually given (``None`` means unset)."""
        overrides = {}
        for f in fields(self):
            value = getattr(args, f.name, None)
            if value is not None:
                overrides[f.name] = value
        self._update(overrides)
        return self

    def _update(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            if name == "concurrency":
                try:
                    value = int(value)
                except (TypeError, ValueError) as exc:
                    raise ConfigError(f"concurrency must be an integer, got {value!r}") from exc
            elif name == "headless" and isinstance(value, str):
                value = value.strip().lower() in _TRUTHY
            setattr(self, name, value)

    # -----------------------------------------------------------------------
    # Derived values
    # -----------------------------------------------------------------------
    @property
    def output_path(self) -> Path:
        return Path(self.output_dir).resolve()

    @property
    def viewport(self) -> Dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    def credentials(self) -> Credentials:
        return Credentials(username=self.login, password=self.password)

    def validate(self) -> None:
        if self.concurrency < 1:
            raise ConfigError(f"concurrency must be at least 1, got {self.concurrency}")
        if not self.login or not self.password:
            raise ConfigError("login and password are required")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")

    # -----------------------------------------------------------------------
    # Logging helper
    # -----------------------------------------------------------------------
    def log_summary(self) -> None:
        """Emit a structured summary to the logger (never the password)."""
        logger.info("=" * 60)
        logger.info("MIRROR RUN CONFIG")
        logger.info("=" * 60)
        logger.info(f"  Base URL:     {self.base_url}")
        logger.info(f"  Login:        {self.login or '(unset)'}")
        logger.info(f"  Output:       {self.output_path}")
        logger.info(f"  Concurrency:  {self.concurrency} workers")
        logger.info(f"  Headless:     {self.headless}")
        logger.info(f"  Timeouts:     nav={self.navigation_timeout_ms}ms "
                    f"marker={self.marker_timeout_ms}ms graph={self.graph_timeout_ms}ms")
        logger.info("=" * 60)
