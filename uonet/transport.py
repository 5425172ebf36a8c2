"""
HTTP Transport
==============
Thin async wrapper around ``aiohttp.ClientSession`` with one shared cookie jar.

Responsibilities:
    1. Perform GET / POST and hand back a fully-read ``Response``
    2. Own the ``aiohttp.CookieJar`` shared by every request of a client
    3. Export the jar as a JSON-compatible cookie state and restore it

The aiohttp session and jar need a running event loop, so they are created
lazily on the first request.  A restored cookie state is held until then,
which keeps construction and ``export_cookies()`` synchronous.

Every transport-level failure (connection error, timeout, HTTP status
>= 400) is raised as ``TransportError``.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import math
import time
from dataclasses import dataclass, field
from email.utils import formatdate
from http.cookies import Morsel, SimpleCookie
from typing import Any, Dict, List, Mapping, Optional, Sequence

import aiohttp
from yarl import URL

from .errors import TransportError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

_COOKIE_STATE_VERSION = 1
_DEFAULT_TIMEOUT_SECONDS = 30.0
_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)


@dataclass
class Response:
    """A completed HTTP exchange (body already read)."""
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    """Response headers; aiohttp hands back a case-insensitive multidict."""
    text: str = ""
    url: str = ""

    def json(self) -> Any:
        return json.loads(self.text)


# ---------------------------------------------------------------------------
# Cookie state
# ---------------------------------------------------------------------------

_SUBDOMAIN_LABEL = "host-only-check"


class SessionCookieJar(aiohttp.CookieJar):
    """``CookieJar`` that rewrites ``Max-Age`` into an absolute ``Expires``
    as cookies arrive, so the deadline lives on the morsel and survives
    ``export_cookie_jar``.
    """

    def update_cookies(self, cookies, response_url: URL = URL()) -> None:
        items = cookies.items() if isinstance(cookies, Mapping) else cookies
        absolute = {}
        for name, cookie in items:
            if isinstance(cookie, Morsel):
                cookie = _absolute_expiry(cookie, self.MAX_TIME)
            absolute[name] = cookie
        super().update_cookies(absolute, response_url)

    def update_cookies_from_headers(self, headers: Sequence[str], response_url: URL) -> None:
        # Newer aiohttp sessions hand raw Set-Cookie headers here.
        parsed: SimpleCookie = SimpleCookie()
        for header in headers:
            parsed.load(header)
        if parsed:
            self.update_cookies(parsed, response_url)


def _absolute_expiry(morsel: Morsel, max_time: float) -> Morsel:
    max_age = morsel["max-age"]
    try:
        seconds = int(max_age)
    except (TypeError, ValueError):
        return morsel
    # Zero or negative means "delete now", aiohttp handles that itself.
    if seconds <= 0:
        return morsel
    deadline = min(math.ceil(time.time() + seconds), max_time)
    morsel = morsel.copy()
    morsel["max-age"] = ""
    morsel["expires"] = formatdate(deadline, usegmt=True)
    return morsel


def _is_host_only(jar: aiohttp.CookieJar, morsel: Morsel) -> bool:
    """A host-only cookie is the one a subdomain request does not get."""
    domain = morsel["domain"]
    if not domain:
        return False
    subdomain = URL.build(
        scheme="https", host=f"{_SUBDOMAIN_LABEL}.{domain}", path=morsel["path"] or "/"
    )
    sent = jar.filter_cookies(subdomain)
    return morsel.key not in sent or sent[morsel.key].value != morsel.value


def empty_cookie_state() -> Dict[str, Any]:
    return {"version": _COOKIE_STATE_VERSION, "cookies": []}


def export_cookie_jar(jar: aiohttp.CookieJar) -> Dict[str, Any]:
    """Snapshot every live cookie of *jar* in iteration order."""
    cookies: List[Dict[str, Any]] = []
    for morsel in list(jar):
        cookies.append({
            "name": morsel.key,
            "value": morsel.value,
            "domain": morsel["domain"],
            "host_only": _is_host_only(jar, morsel),
            "path": morsel["path"] or "/",
            "expires": morsel["expires"] or "",
            "secure": bool(morsel["secure"]),
            "httponly": bool(morsel["httponly"]),
        })
    return {"version": _COOKIE_STATE_VERSION, "cookies": cookies}


def restore_cookie_jar(jar: aiohttp.CookieJar, state: Optional[Mapping[str, Any]]) -> None:
    """Install the cookies of an exported *state* into *jar*.

    Host-only cookies go in without a ``Domain`` attribute, so aiohttp
    binds them to the exact host again.
    """
    if not state:
        return
    version = state.get("version")
    if version != _COOKIE_STATE_VERSION:
        raise ValueError(f"Unsupported cookie state version: {version!r}")

    for entry in state.get("cookies", []):
        name = entry["name"]
        domain = entry["domain"]
        path = entry.get("path") or "/"

        cookie: SimpleCookie = SimpleCookie()
        cookie[name] = entry["value"]
        morsel = cookie[name]
        if not entry.get("host_only"):
            morsel["domain"] = domain
        morsel["path"] = path
        if entry.get("expires"):
            morsel["expires"] = entry["expires"]
        if entry.get("secure"):
            morsel["secure"] = True
        if entry.get("httponly"):
            morsel["httponly"] = True

        jar.update_cookies({name: morsel}, URL.build(scheme="https", host=domain, path=path))


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class Transport:
    """GET / POST over a single aiohttp session and cookie jar.

    Usage::

        transport = Transport(timeout_seconds=15)
        response = await transport.get("https://uonetplus.vulcan.net.pl/")
        state = transport.export_cookies()
        await transport.close()
    """

    def __init__(
        self,
        *,
        cookie_state: Optional[Mapping[str, Any]] = None,
        timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = _DEFAULT_USER_AGENT,
    ):
        """
        Args:
            cookie_state:    Previously exported cookie state to start from.
            timeout_seconds: Total timeout of one request.
            user_agent:      ``User-Agent`` header sent with every request.
        """
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._pending_state = copy.deepcopy(cookie_state) if cookie_state else None
        self._jar: Optional[SessionCookieJar] = None
        self._session: Optional[aiohttp.ClientSession] = None

    # ── Public API ────────────────────────────────────────────────

    async def get(self, url: str) -> Response:
        return await self._request("GET", url)

    async def post(self, url: str, data: Optional[Mapping[str, str]] = None) -> Response:
        return await self._request("POST", url, data=data)

    def export_cookies(self) -> Dict[str, Any]:
        """Current cookie state (JSON-compatible, deep copied)."""
        if self._jar is not None:
            return export_cookie_jar(self._jar)
        if self._pending_state is not None:
            return copy.deepcopy(self._pending_state)
        return empty_cookie_state()

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ── Internal ──────────────────────────────────────────────────

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._jar is None:
            self._jar = SessionCookieJar()
            restore_cookie_jar(self._jar, self._pending_state)
            self._pending_state = None
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                cookie_jar=self._jar,
                headers={"User-Agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )
        return self._session

    async def _request(
        self, method: str, url: str, *, data: Optional[Mapping[str, str]] = None
    ) -> Response:
        session = await self._ensure_session()
        logger.debug(f"[HTTP] {method} {url[:100]}")
        try:
            async with session.request(method, url, data=data) as resp:
                text = await resp.text(errors="replace")
                response = Response(
                    status=resp.status,
                    headers=resp.headers,
                    text=text,
                    url=str(resp.url),
                )
        except asyncio.TimeoutError as exc:
            raise TransportError(f"{method} {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

        if response.status >= 400:
            logger.debug(f"[HTTP] {method} {url[:100]} -> {response.status}")
            raise TransportError(
                f"{method} {url} returned HTTP {response.status}",
                url=url,
                status=response.status,
            )
        return response
