"""
Credentials & Credential Providers
==================================
The client never stores a username or password.  It holds a
*credential provider*: an async callable owned by the caller that is
awaited every time a login handshake runs.

Design principles:
    - Credentials are resolved on demand and dropped after the handshake
    - They never appear in logs or in a serialized session bundle
    - The stock provider reads env vars first, then prompts in the terminal
"""

from __future__ import annotations

import getpass
import logging
import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

logger = logging.getLogger(__name__)

_DEFAULT_ENV_PREFIXES = ("UONET",)


# ---------------------------------------------------------------------------
# Credentials container
# ---------------------------------------------------------------------------

@dataclass
class Credentials:
    """Plain credential container, handed to a single login handshake."""
    username: str = ""
    password: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.username and self.password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password=***)"


CredentialProvider = Callable[[], Awaitable[Credentials]]
"""Async zero-argument function returning fresh ``Credentials``."""


# ---------------------------------------------------------------------------
# Resolution (explicit → env → prompt)
# ---------------------------------------------------------------------------

def resolve_credentials(
    creds: Optional[Credentials] = None,
    *,
    env_prefixes: Sequence[str] = _DEFAULT_ENV_PREFIXES,
    interactive: bool = True,
) -> Credentials:
    """Build ``Credentials`` from env vars + interactive prompt.

    Resolution order:
        1. Existing *creds* object (if provided and complete) → use as-is
        2. Environment variables (``{PREFIX}_USERNAME``, ``{PREFIX}_PASSWORD``)
        3. Interactive terminal prompt (if *interactive* is True)

    Returns:
        A new ``Credentials`` instance (may still be incomplete if the user
        declined to enter values).
    """
    resolved = Credentials(
        username=creds.username if creds else "",
        password=creds.password if creds else "",
    )
    if resolved.is_complete:
        return resolved

    for prefix in env_prefixes:
        if not resolved.username:
            resolved.username = os.environ.get(f"{prefix}_USERNAME", "")
        if not resolved.password:
            resolved.password = os.environ.get(f"{prefix}_PASSWORD", "")

    if resolved.is_complete:
        logger.info("[AUTH] Credentials resolved from environment")
        return resolved

    if interactive:
        resolved = _prompt_credentials(resolved)
    return resolved


def _prompt_credentials(creds: Credentials) -> Credentials:
    """Prompt for missing credentials; ``getpass`` keeps the password unechoed."""
    print(f"\n{'=' * 55}")
    print("  UONET+ Authentication Required")
    print(f"{'=' * 55}")

    if not creds.username:
        creds.username = input("  Username / Email: ").strip()
    else:
        print(f"  Username: {creds.username}")

    if not creds.password:
        creds.password = getpass.getpass("  Password: ")

    print(f"{'=' * 55}\n")
    return creds


def env_credentials_provider(
    username: str = "",
    password: str = "",
    *,
    env_prefixes: Sequence[str] = _DEFAULT_ENV_PREFIXES,
    interactive: bool = True,
) -> CredentialProvider:
    """Return a provider that re-resolves credentials on every call.

    Explicit *username* / *password* win over the environment; anything
    still missing is prompted for when *interactive* is set.
    """
    async def provider() -> Credentials:
        return resolve_credentials(
            Credentials(username=username, password=password),
            env_prefixes=env_prefixes,
            interactive=interactive,
        )

    return provider


def static_credentials_provider(username: str, password: str) -> CredentialProvider:
    """Provider that always answers with the same pair (scripts, tests)."""
    async def provider() -> Credentials:
        return Credentials(username=username, password=password)

    return provider
