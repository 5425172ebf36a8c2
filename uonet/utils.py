"""
Utility Functions
URL construction for the portal's hosts, content-type parsing and the
``{success, data}`` response envelope.
"""

import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlencode, urljoin

from .errors import RequestFailedError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Portal URLs
# ---------------------------------------------------------------------------

def login_url(host: str) -> str:
    """SSO gateway form that accepts ``LoginName`` / ``Password``."""
    endpoint = f"https://uonetplus.{host}/Default/LoginEndpoint.aspx"
    return_url = "/Default/FS/LS?" + urlencode({
        "wa": "wsignin1.0",
        "wtrealm": endpoint,
        "wctx": endpoint,
    })
    return f"https://cufs.{host}/Default/Account/LogOn?" + urlencode({"ReturnUrl": return_url})


def check_user_sign_url(host: str, symbol: str) -> str:
    return f"https://uonetplus.{host}/{symbol}/LoginEndpoint.aspx"


def start_index_url(host: str, symbol: str) -> str:
    return f"https://uonetplus.{host}/{symbol}/Start.mvc/Index"


def lucky_numbers_url(host: str, symbol: str) -> str:
    return f"https://uonetplus.{host}/{symbol}/Start.mvc/GetKidsLuckyNumbers"


def reporting_units_url(host: str, symbol: str) -> str:
    return f"https://uonetplus-uzytkownik.{host}/{symbol}/NowaWiadomosc.mvc/GetJednostkiUzytkownika"


def join_url(base: str, path: str) -> str:
    """Join *path* below *base*, treating *base* as a directory."""
    if not base.endswith("/"):
        base += "/"
    return urljoin(base, path.lstrip("/"))


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

def get_header(headers: Optional[Mapping[str, Any]], name: str) -> Optional[str]:
    """Case-insensitive header lookup over any mapping."""
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if isinstance(key, str) and key.lower() == wanted and isinstance(value, str):
            return value
    return None


def get_content_type(headers: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Media type of a response with parameters (``; charset=...``) removed."""
    header = get_header(headers, "content-type")
    if header is None:
        return None
    return header.split(";")[0].strip().lower()


def handle_response(response) -> Any:
    """Unwrap the ``{"success": bool, "data": ...}`` envelope.

    Raises:
        RequestFailedError: body is not an envelope or ``success`` is false.
    """
    try:
        payload = response.json()
    except ValueError as exc:
        raise RequestFailedError(response, f"Invalid JSON from {response.url}: {exc}") from exc
    if not isinstance(payload, dict) or not payload.get("success"):
        logger.warning(f"[HTTP] Unsuccessful response from {response.url}")
        raise RequestFailedError(response)
    return payload.get("data")
