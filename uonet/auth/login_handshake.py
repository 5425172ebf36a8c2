"""
Login Handshake
===============
WS-Federation sign-in against the portal's SSO gateway (``cufs.<host>``).

Flow:
    1. POST ``LoginName`` / ``Password`` to the gateway.  The answer is an
       HTML auto-submit form whose ``wresult`` field carries a signed
       security-token document.
    2. Read the candidate region symbols from the token's
       ``UserInstance`` claim.
    3. Present the token to every symbol's sign-in endpoint concurrently.
       Each accepted presentation installs that symbol's session cookies.
    4. Keep the symbols whose sign-in page proves an authenticated session.

Security:
    - Credentials and the token document are never logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, ParserRejectedMarkup
from lxml import etree

from ..errors import (
    AuthenticationTransportError,
    MalformedLoginResponseError,
    TransportError,
)
from ..utils import check_user_sign_url, login_url
from .base_auth import Credentials
from .symbol_resolver import is_authenticated_page

logger = logging.getLogger(__name__)

_SYMBOLS_CLAIM = "UserInstance"


# ---------------------------------------------------------------------------
# Token parsing
# ---------------------------------------------------------------------------

def extract_security_token(html: str) -> str:
    """Return the token document embedded in the gateway's sign-in form.

    Raises:
        MalformedLoginResponseError: no non-empty ``wresult`` field.
    """
    soup = BeautifulSoup(html, "lxml")
    token_input = soup.select_one('input[name="wresult"]')
    value = token_input.get("value") if token_input is not None else None
    if not value:
        raise MalformedLoginResponseError(
            "Login response does not contain a security token"
        )
    return value


def parse_symbols(token_xml: str) -> List[str]:
    """Region symbols listed in the token's ``UserInstance`` claim.

    Raises:
        MalformedLoginResponseError: the token is not an XML document.
    """
    try:
        soup = BeautifulSoup(token_xml, "xml")
    except (ParserRejectedMarkup, etree.XMLSyntaxError) as exc:
        raise MalformedLoginResponseError("Security token is not valid XML") from exc
    if soup.find() is None:
        raise MalformedLoginResponseError("Security token is empty")

    symbols: List[str] = []
    for attribute in soup.find_all("Attribute", attrs={"AttributeName": _SYMBOLS_CLAIM}):
        for value in attribute.find_all("AttributeValue"):
            text = value.get_text(strip=True)
            if text:
                symbols.append(text)
    return symbols


# ---------------------------------------------------------------------------
# Handshake
# ---------------------------------------------------------------------------

class LoginHandshake:
    """Runs one complete sign-in for a portal host.

    Usage::

        handshake = LoginHandshake(transport, "vulcan.net.pl")
        symbols = await handshake.run(credentials)
    """

    def __init__(self, transport, host: str):
        self.transport = transport
        self.host = host

    async def run(self, credentials: Credentials) -> List[str]:
        """Sign in and return the symbols the credentials are valid for.

        An empty list is a valid answer; the caller decides what it means.

        Raises:
            AuthenticationTransportError: the gateway could not be reached.
            MalformedLoginResponseError:  the gateway answer has no token.
        """
        logger.info(f"[AUTH] Signing in at cufs.{self.host}")
        try:
            response = await self.transport.post(
                login_url(self.host),
                {"LoginName": credentials.username, "Password": credentials.password},
            )
        except TransportError as exc:
            raise AuthenticationTransportError(
                f"Login endpoint unreachable: {exc}", url=exc.url, status=exc.status
            ) from exc

        token = extract_security_token(response.text)
        candidates = parse_symbols(token)
        logger.info(f"[AUTH] Token lists {len(candidates)} candidate symbol(s)")

        results = await asyncio.gather(
            *(self._confirm_symbol(symbol, token) for symbol in candidates),
            return_exceptions=True,
        )

        valid: List[str] = []
        for symbol, result in zip(candidates, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(f"[AUTH] Sign-in for '{symbol}' failed: {result}")
            elif result is not None:
                valid.append(result)

        logger.info(f"[AUTH] Valid symbols: {valid}")
        return valid

    async def _confirm_symbol(self, symbol: str, token: str) -> Optional[str]:
        """Present *token* to *symbol*'s sign-in endpoint.

        Returns the symbol if the resulting page is authenticated, else None.
        """
        url = check_user_sign_url(self.host, symbol)
        try:
            response = await self.transport.post(url, {
                "wa": "wsignin1.0",
                "wresult": token,
                "wctx": url,
            })
        except TransportError as exc:
            logger.debug(f"[AUTH] Sign-in request for '{symbol}' failed: {exc}")
            return None

        if not is_authenticated_page(response.text):
            logger.debug(f"[AUTH] '{symbol}' rejected the token")
            return None
        return symbol
