"""
Authentication Module
=====================
Session and authentication engine for the UONET+ portal.

Architecture:
    - ``Credentials`` / providers — credentials resolved on demand, never stored
    - ``LoginHandshake``  — WS-Federation sign-in and symbol discovery
    - ``SymbolResolver``  — validates a symbol, finds its module URLs
    - ``validate_response`` — JSON vs. login-page classifier
    - ``build_bundle`` / ``read_bundle`` — session snapshot format
    - ``SessionFile``     — keeps a bundle in a JSON file (CLI)

``uonet.Client`` wires these together; most callers never import them.
"""

from .base_auth import (
    CredentialProvider,
    Credentials,
    env_credentials_provider,
    resolve_credentials,
    static_credentials_provider,
)
from .login_handshake import LoginHandshake, extract_security_token, parse_symbols
from .response_classifier import validate_response
from .session_store import SerializedSession, SessionFile, build_bundle, read_bundle
from .symbol_resolver import RegionSymbol, SymbolResolver, extract_endpoint_urls

__all__ = [
    "CredentialProvider",
    "Credentials",
    "env_credentials_provider",
    "resolve_credentials",
    "static_credentials_provider",
    "LoginHandshake",
    "extract_security_token",
    "parse_symbols",
    "validate_response",
    "SerializedSession",
    "SessionFile",
    "build_bundle",
    "read_bundle",
    "RegionSymbol",
    "SymbolResolver",
    "extract_endpoint_urls",
]
