"""
UONET+ Client Package
An async client for the UONET+ school register: SSO login, region symbol
discovery, transparent re-login and session serialization.

CLI Usage:
    python -m uonet [options]

    Options:
        --host          Portal domain (default: vulcan.net.pl)
        --symbol        Region symbol to use (default: the only valid one,
                        otherwise asked interactively)
        --username      Login; the password comes from UONET_PASSWORD or a prompt
        --session-file  Session bundle path (default: uonet_session.json)
        --timeout       Per-request timeout in seconds (default: 30)
        --force-login   Ignore the saved session
        -v, --verbose   Debug logging
"""

from .auth import Credentials, RegionSymbol, env_credentials_provider, static_credentials_provider
from .client import Client
from .diary import Diary
from .errors import (
    AuthenticationTransportError,
    MalformedLoginResponseError,
    RequestFailedError,
    TransportError,
    UnexpectedResponseTypeError,
    UnknownSymbolError,
    UonetError,
)
from .run_config import ClientConfig
from .transport import Response, Transport

__all__ = [
    'Client',
    'Diary',
    'ClientConfig',
    'Credentials',
    'RegionSymbol',
    'env_credentials_provider',
    'static_credentials_provider',
    'Response',
    'Transport',
    # Errors
    'UonetError',
    'TransportError',
    'AuthenticationTransportError',
    'MalformedLoginResponseError',
    'UnknownSymbolError',
    'UnexpectedResponseTypeError',
    'RequestFailedError',
]

__version__ = '1.0.0'
