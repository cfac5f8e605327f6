"""
Credentials
===========
Plain credential container plus the resolution chain used by the CLI:
explicit values → environment variables → interactive prompt.
"""

from __future__ import annotations

import getpass
import logging
import os
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

ENV_VAR_PREFIXES: Sequence[str] = ("INTRA",)


@dataclass
class Credentials:
    """Plain credential container — resolved once, used by the login flow."""
    username: str = ""
    password: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.username and self.password)

    def __repr__(self) -> str:
        # never leak the password into logs
        return f"Credentials(username={self.username!r}, password=***)"

    def resolve(self, *, interactive: bool = True,
                prefixes: Sequence[str] = ENV_VAR_PREFIXES) -> "Credentials":
        """Fill missing fields from ``{PREFIX}_LOGIN`` / ``{PREFIX}_PASSWORD``,
        then from a terminal prompt if *interactive*.
        """
        if self.is_complete:
            return self

        for prefix in prefixes:
            if not self.username:
                self.username = os.environ.get(f"{prefix}_LOGIN", "")
            if not self.password:
                self.password = os.environ.get(f"{prefix}_PASSWORD", "")

        if self.is_complete:
            logger.info("[AUTH] Credentials resolved from environment")
            return self

        if interactive:
            self._prompt()
        return self

    def _prompt(self) -> None:
        print(f"\n{'=' * 55}")
        print("  Intranet Authentication Required")
        print(f"{'=' * 55}")
        if not self.username:
            self.username = input("  Login: ").strip()
        else:
            print(f"  Login: {self.username}")
        if not self.password:
            self.password = getpass.getpass("  Password: ")
        print(f"{'=' * 55}\n")
