"""
UONET+ Client
=============
Session and authentication engine plus the feature calls built on it.

Lifecycle::

    1. ``await client.login()``
       → SSO handshake; returns the region symbols the credentials unlock.

    2. ``await client.set_symbol(symbol)``
       → validates the symbol and discovers its student-module URLs.

    3. ``await client.get_diary_list()`` (and the other feature calls)
       → every call goes through ``request_with_auto_login``, which signs
         in again once if the session has expired.

    4. ``client.serialize()`` / ``Client.deserialize(bundle, provider)``
       → carry the session across process restarts.

Usage::

    from uonet import Client, env_credentials_provider

    async with Client("vulcan.net.pl", env_credentials_provider()) as client:
        symbols = await client.login()
        await client.set_symbol(symbols[0])
        diaries = await client.get_diary_list()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Mapping, Optional

from .auth.base_auth import CredentialProvider
from .auth.login_handshake import LoginHandshake
from .auth.response_classifier import validate_response
from .auth.session_store import SerializedSession, build_bundle, read_bundle
from .auth.symbol_resolver import RegionSymbol, SymbolResolver
from .diary import Diary
from .errors import UnknownSymbolError
from .mappers import map_diary_info, map_lucky_numbers, map_reporting_units
from .models import DiaryListItem, LuckyNumber, ReportingUnit
from .transport import Response, Transport
from .utils import handle_response, join_url, lucky_numbers_url, reporting_units_url

logger = logging.getLogger(__name__)

RequestFunction = Callable[[], Awaitable[Response]]


class Client:
    """Authenticated client for one portal host."""

    def __init__(
        self,
        host: str,
        get_credentials: CredentialProvider,
        cookie_state: Optional[Mapping[str, Any]] = None,
        *,
        transport_factory: Callable[..., Any] = Transport,
        **transport_options: Any,
    ):
        """
        Args:
            host:              Portal domain, e.g. ``vulcan.net.pl``.
            get_credentials:   Async provider awaited on every login.
            cookie_state:      Cookie state to start from (restored sessions).
            transport_factory: Builds the transport; called with
                               ``cookie_state=`` plus *transport_options*.
        """
        self.host = host
        self._get_credentials = get_credentials
        self.transport = transport_factory(cookie_state=cookie_state, **transport_options)
        self._symbol: Optional[RegionSymbol] = None
        self._handshake = LoginHandshake(self.transport, host)
        self._resolver = SymbolResolver(self.transport, host)

    def set_credentials_function(self, get_credentials: CredentialProvider) -> None:
        self._get_credentials = get_credentials

    # ── Authentication ────────────────────────────────────────────

    async def login(self) -> List[str]:
        """Sign in with fresh credentials from the provider.

        Returns:
            The region symbols the credentials are valid for (may be empty).
        """
        credentials = await self._get_credentials()
        return await self._handshake.run(credentials)

    async def set_symbol(self, symbol: str) -> None:
        """Make *symbol* the active region symbol.

        The previous symbol stays active if resolution fails.

        Raises:
            UnknownSymbolError: unknown symbol or the start page failed.
        """
        resolved = await self._resolver.resolve(symbol)
        self._symbol = resolved

    def get_symbol(self) -> Optional[str]:
        return self._symbol.value if self._symbol is not None else None

    @property
    def region_symbol(self) -> Optional[RegionSymbol]:
        return self._symbol

    # ── Session serialization ─────────────────────────────────────

    def serialize(self) -> SerializedSession:
        return build_bundle(self.transport.export_cookies(), self._symbol, self.host)

    @classmethod
    def deserialize(
        cls,
        serialized: Mapping[str, Any],
        get_credentials: CredentialProvider,
        **kwargs: Any,
    ) -> "Client":
        """Rebuild a client from ``serialize()`` output without any network I/O.

        Extra keyword arguments go to the constructor.
        """
        cookie_state, symbol, host = read_bundle(serialized)
        client = cls(host, get_credentials, cookie_state, **kwargs)
        client._symbol = symbol
        logger.info(
            f"[SESSION] Restored session for {host} "
            f"(symbol: {symbol.value if symbol else 'none'})"
        )
        return client

    # ── Auto re-login ─────────────────────────────────────────────

    async def request_with_auto_login(self, request: RequestFunction) -> Response:
        """Run *request*, signing in again once if it fails.

        The first failure of any kind (including a non-JSON answer) is
        swallowed and followed by a full ``login()``.  A failure of the
        second attempt propagates.
        """
        try:
            response = await request()
            validate_response(response)
            return response
        except Exception as exc:
            logger.info(
                f"[SESSION] Request failed ({type(exc).__name__}); signing in again"
            )

        await self.login()
        response = await request()
        validate_response(response)
        return response

    # ── Feature calls ─────────────────────────────────────────────

    def _require_symbol(self) -> RegionSymbol:
        if self._symbol is None:
            raise UnknownSymbolError()
        return self._symbol

    async def get_diary_list(self) -> List[DiaryListItem]:
        symbol = self._require_symbol()

        async def fetch(base_url: str):
            url = join_url(base_url, "UczenDziennik.mvc/Get")
            response = await self.request_with_auto_login(lambda: self.transport.post(url))
            return base_url, handle_response(response)

        results = await asyncio.gather(*(fetch(base_url) for base_url in symbol.url_list))

        items: List[DiaryListItem] = []
        for base_url, data in results:
            for data_item in data or []:
                serialized = {
                    "info": map_diary_info(data_item),
                    "baseUrl": base_url,
                    "host": self.host,
                }
                items.append(DiaryListItem(
                    serialized=serialized,
                    create_diary=lambda serialized=serialized: Diary(self, serialized),
                ))
        logger.info(f"[DIARY] Found {len(items)} diaries")
        return items

    async def get_lucky_numbers(self) -> List[LuckyNumber]:
        symbol = self._require_symbol()
        url = lucky_numbers_url(self.host, symbol.value)
        response = await self.request_with_auto_login(lambda: self.transport.post(url))
        return map_lucky_numbers(handle_response(response))

    async def get_reporting_units(self) -> List[ReportingUnit]:
        symbol = self._require_symbol()
        url = reporting_units_url(self.host, symbol.value)
        response = await self.request_with_auto_login(lambda: self.transport.get(url))
        return map_reporting_units(handle_response(response))

    # ── Resource management ───────────────────────────────────────

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
