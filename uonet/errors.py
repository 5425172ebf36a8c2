"""
Error Taxonomy
==============
Every exception raised by the client derives from ``UonetError``.

Only ``Client.request_with_auto_login`` recovers from an error locally
(one silent re-login).  Everything else propagates unmodified.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .transport import Response


class UonetError(Exception):
    """Base class for all client errors."""


class TransportError(UonetError):
    """The HTTP exchange itself failed (connection, timeout, status >= 400)."""

    def __init__(self, message: str, *, url: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class AuthenticationTransportError(TransportError):
    """The login endpoint could not be reached."""


class MalformedLoginResponseError(UonetError):
    """The security-token document could not be located or parsed."""


class UnknownSymbolError(UonetError):
    """The region symbol is unknown, could not be resolved, or is not set.

    Raised both for a symbol the portal does not recognise and for any
    transport failure while resolving it; callers cannot tell the two apart.
    """

    def __init__(self, symbol: Optional[str] = None):
        if symbol is None:
            message = "No region symbol is set"
        else:
            message = f"Unknown region symbol: {symbol}"
        super().__init__(message)
        self.symbol = symbol


class UnexpectedResponseTypeError(UonetError):
    """A JSON response was required but something else came back."""

    def __init__(self, expected: str, actual: Optional[str]):
        super().__init__(
            f"Expected response of type {expected}, got {actual or 'no content type'}"
        )
        self.expected = expected
        self.actual = actual


class RequestFailedError(UonetError):
    """The portal answered with a JSON envelope marked unsuccessful."""

    def __init__(self, response: "Response", message: str = ""):
        super().__init__(message or f"Request to {response.url} was not successful")
        self.response = response
