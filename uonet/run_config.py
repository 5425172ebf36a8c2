"""
Unified Run Configuration
=========================
Single source of truth for client defaults.

The CLI populates it from flags; scripts can build it from the
environment.  ``to_client_kwargs()`` turns it into ``Client`` arguments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults — the ONLY place these values live
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "host": "vulcan.net.pl",
    "timeout_seconds": 30,
    "session_file": "uonet_session.json",
    "user_agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    ),
}


@dataclass
class ClientConfig:
    """
    Configuration consumed by the CLI and ``Client`` construction.

    Populate via:
      - ``ClientConfig()``                   → all defaults
      - ``ClientConfig(host="fakelog.cf")``  → override one value
      - ``ClientConfig.from_env()``          → from ``UONET_*`` variables
      - ``ClientConfig.from_cli_args(ns)``   → from argparse Namespace
    """

    # ---- Portal ----
    host: str = _DEFAULTS["host"]
    symbol: Optional[str] = None

    # ---- Transport ----
    timeout_seconds: float = _DEFAULTS["timeout_seconds"]
    user_agent: str = _DEFAULTS["user_agent"]

    # ---- Session persistence (CLI only) ----
    session_file: str = _DEFAULTS["session_file"]
    force_login: bool = False

    # ---- Credentials (prefer UONET_USERNAME / UONET_PASSWORD) ----
    username: str = ""
    password: str = ""

    verbose: bool = False

    # -----------------------------------------------------------------------
    # Factory helpers
    # -----------------------------------------------------------------------
    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build config from ``UONET_HOST``, ``UONET_SYMBOL``, ``UONET_TIMEOUT``
        and ``UONET_SESSION_FILE``; unset variables keep their defaults."""
        timeout = os.environ.get("UONET_TIMEOUT")
        return cls(
            host=os.environ.get("UONET_HOST") or _DEFAULTS["host"],
            symbol=os.environ.get("UONET_SYMBOL") or None,
            timeout_seconds=float(timeout) if timeout else _DEFAULTS["timeout_seconds"],
            session_file=os.environ.get("UONET_SESSION_FILE") or _DEFAULTS["session_file"],
        )

    @classmethod
    def from_cli_args(cls, args) -> "ClientConfig":
        """Build config from an argparse Namespace, env values as fallback."""
        base = cls.from_env()
        return cls(
            host=getattr(args, "host", None) or base.host,
            symbol=getattr(args, "symbol", None) or base.symbol,
            timeout_seconds=getattr(args, "timeout", None) or base.timeout_seconds,
            session_file=getattr(args, "session_file", None) or base.session_file,
            force_login=getattr(args, "force_login", False),
            username=getattr(args, "username", None) or "",
            verbose=getattr(args, "verbose", False),
        )

    def to_client_kwargs(self) -> Dict[str, Any]:
        """Transport options accepted by ``Client``."""
        return {
            "timeout_seconds": self.timeout_seconds,
            "user_agent": self.user_agent,
        }

    # -----------------------------------------------------------------------
    # Logging helper
    # -----------------------------------------------------------------------
    def log_summary(self) -> None:
        """Emit a structured summary to the logger."""
        logger.info("=" * 60)
        logger.info("UONET+ CLIENT CONFIG")
        logger.info("=" * 60)
        logger.info(f"  Host:             {self.host}")
        logger.info(f"  Symbol:           {self.symbol or '(auto)'}")
        logger.info(f"  Timeout:          {self.timeout_seconds}s per request")
        logger.info(f"  Session File:     {self.session_file}")
        if self.force_login:
            logger.info("  Force Login:      Yes (ignore saved session)")
        logger.info("=" * 60)
