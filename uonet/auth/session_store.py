"""
Session Store
=============
Snapshot / restore of a client's session as a plain, JSON-compatible bundle.

Bundle layout (the only durable format the client defines)::

    {
        "cookieJar": <cookie state exported by the transport>,
        "symbol":    {"value": "...", "urlList": ["...", ...]} | None,
        "host":      "vulcan.net.pl"
    }

Credentials are never part of a bundle.  Restoring a bundle does not
contact the portal; a stale session is noticed on the first request.

``SessionFile`` keeps one bundle in a JSON file for the CLI.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypedDict

from .symbol_resolver import RegionSymbol

logger = logging.getLogger(__name__)


class SerializedSymbol(TypedDict):
    value: str
    urlList: List[str]


class SerializedSession(TypedDict):
    cookieJar: Dict[str, Any]
    symbol: Optional[SerializedSymbol]
    host: str


def build_bundle(
    cookie_state: Mapping[str, Any],
    symbol: Optional[RegionSymbol],
    host: str,
) -> SerializedSession:
    """Assemble a bundle; every part is deep copied."""
    return {
        "cookieJar": copy.deepcopy(dict(cookie_state)),
        "symbol": copy.deepcopy(symbol.to_dict()) if symbol is not None else None,
        "host": host,
    }


def read_bundle(
    bundle: Mapping[str, Any],
) -> Tuple[Dict[str, Any], Optional[RegionSymbol], str]:
    """Split a bundle into ``(cookie_state, symbol, host)``.

    Raises:
        ValueError: a required key is missing.
    """
    missing = [key for key in ("cookieJar", "host") if key not in bundle]
    if missing:
        raise ValueError(f"Session bundle is missing: {', '.join(missing)}")

    symbol_data = bundle.get("symbol")
    symbol = RegionSymbol.from_dict(symbol_data) if symbol_data is not None else None
    return copy.deepcopy(dict(bundle["cookieJar"])), symbol, bundle["host"]


class SessionFile:
    """Keeps one session bundle in a JSON file.

    Usage::

        store = SessionFile("uonet_session.json")
        bundle = store.load()          # None if absent or unreadable
        store.save(client.serialize())
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[SerializedSession]:
        if not self.path.exists():
            logger.info("[SESSION] No saved session file found")
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning(f"[SESSION] Corrupt session file: {exc}")
            return None
        if not isinstance(data, dict) or "cookieJar" not in data or "host" not in data:
            logger.warning(f"[SESSION] {self.path} is not a session bundle")
            return None
        logger.info(f"[SESSION] Loaded saved session from {self.path}")
        return data

    def save(self, bundle: SerializedSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(bundle, indent=2), encoding="utf-8")
        logger.info(f"[SESSION] Session saved to {self.path}")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info(f"[SESSION] Removed {self.path}")
