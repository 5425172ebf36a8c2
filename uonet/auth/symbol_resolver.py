"""
Symbol Resolver
===============
Validates a region symbol against the authenticated session and discovers
the student-module base URLs reachable under it.

The portal's start page links every student module from a fixed panel.
All knowledge of that markup lives in ``extract_endpoint_urls`` so page
layout changes stay in one function.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

from bs4 import BeautifulSoup

from ..errors import TransportError, UnknownSymbolError
from ..utils import start_index_url

logger = logging.getLogger(__name__)

_BS_PARSER = "lxml"

# Present only on pages rendered for a signed-in user
LANDMARK = "newAppLink"

# Panel of links to the student modules, one per diary host
_ENDPOINT_LINK_SELECTOR = '.panel.linkownia.pracownik.klient a[href*="uonetplus-uczen"]'


@dataclass(frozen=True)
class RegionSymbol:
    """The active region symbol and its student-module base URLs."""
    value: str
    url_list: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "urlList": list(self.url_list)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegionSymbol":
        return cls(value=data["value"], url_list=tuple(data.get("urlList") or ()))


def is_authenticated_page(html: str) -> bool:
    """True if *html* is a page served to a signed-in user."""
    return LANDMARK in html


def extract_endpoint_urls(html: str) -> List[str]:
    """Collect student-module links from the start page, in document order.

    Anchors without an ``href`` are skipped.
    """
    soup = BeautifulSoup(html, _BS_PARSER)
    urls = []
    for anchor in soup.select(_ENDPOINT_LINK_SELECTOR):
        href = anchor.get("href")
        if href:
            urls.append(href)
    return urls


class SymbolResolver:
    """Resolves symbols through the start page of one portal host."""

    def __init__(self, transport, host: str):
        self.transport = transport
        self.host = host

    async def resolve(self, symbol: str) -> RegionSymbol:
        """Fetch the start page for *symbol* and build its ``RegionSymbol``.

        Raises:
            UnknownSymbolError: the page could not be fetched or is not an
                authenticated page.  Both cases raise the same error.
        """
        url = start_index_url(self.host, symbol)
        try:
            response = await self.transport.get(url)
        except TransportError as exc:
            logger.warning(f"[SYMBOL] Start page for '{symbol}' unavailable: {exc}")
            raise UnknownSymbolError(symbol) from exc

        if not is_authenticated_page(response.text):
            logger.warning(f"[SYMBOL] '{symbol}' not recognised for this session")
            raise UnknownSymbolError(symbol)

        urls = extract_endpoint_urls(response.text)
        logger.info(f"[SYMBOL] '{symbol}' resolved: {len(urls)} endpoint(s)")
        return RegionSymbol(value=symbol, url_list=tuple(urls))
