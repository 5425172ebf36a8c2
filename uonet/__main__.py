#!/usr/bin/env python3
"""
Command-line client for UONET+
==============================
Signs in (or restores the saved session), picks a region symbol, prints
the diaries and lucky numbers, and saves the session for the next run.

Credentials come from ``UONET_USERNAME`` / ``UONET_PASSWORD`` (a ``.env``
file is honoured) or are prompted for when a login is needed.

Run with: python -m uonet
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .auth.base_auth import env_credentials_provider
from .auth.session_store import SessionFile
from .client import Client
from .errors import UonetError
from .run_config import ClientConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Prompt helpers
# ---------------------------------------------------------------------------

def prompt_for_symbol(symbols: List[str]) -> str:
    """Ask which region symbol to use. Accepts a list number or the symbol itself."""
    print("\nThis account has access to several region symbols:")
    for number, symbol in enumerate(symbols, 1):
        print(f"  {number}) {symbol}")
    while True:
        answer = input(f"Symbol [1-{len(symbols)}, Enter for {symbols[0]}]: ").strip()
        if not answer:
            return symbols[0]
        if answer in symbols:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(symbols):
            return symbols[int(answer) - 1]
        print(f"Unknown symbol '{answer}'")


def choose_symbol(symbols: List[str], requested: Optional[str]) -> Optional[str]:
    """Pick the symbol to use: the requested one, the only one, or ask."""
    if requested:
        if requested not in symbols:
            logger.error(f"[AUTH] Symbol '{requested}' is not valid for this account")
            return None
        return requested
    if len(symbols) == 1:
        return symbols[0]
    return prompt_for_symbol(symbols)


# ---------------------------------------------------------------------------
# Main flow
# ---------------------------------------------------------------------------

async def run(config: ClientConfig) -> int:
    store = SessionFile(config.session_file)
    provider = env_credentials_provider(config.username)

    bundle = None if config.force_login else store.load()
    if bundle is not None and bundle.get("host") != config.host:
        logger.info(f"[SESSION] Saved session is for {bundle.get('host')} — ignoring")
        bundle = None

    if bundle is not None:
        client = Client.deserialize(bundle, provider, **config.to_client_kwargs())
    else:
        client = Client(config.host, provider, **config.to_client_kwargs())

    async with client:
        wanted = config.symbol
        if client.get_symbol() is None or (wanted and wanted != client.get_symbol()):
            symbols = await client.login()
            if not symbols:
                print("\n  No region symbol accepted these credentials.")
                return 1
            symbol = choose_symbol(symbols, wanted)
            if symbol is None:
                return 1
            await client.set_symbol(symbol)

        print(f"\n  Symbol: {client.get_symbol()}")

        diaries = await client.get_diary_list()
        print(f"  Diaries ({len(diaries)}):")
        for item in diaries:
            info = item.info
            print(f"    - {info.student_full_name}: {info.name} ({info.school_year})")

        lucky_numbers = await client.get_lucky_numbers()
        if lucky_numbers:
            print("  Lucky numbers:")
            for lucky in lucky_numbers:
                print(f"    - {lucky.school_name}: {lucky.number}")

        store.save(client.serialize())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uonet",
        description="Sign in to UONET+ and list diaries.",
    )
    parser.add_argument("--host", help="Portal domain (default: vulcan.net.pl)")
    parser.add_argument("--symbol", help="Region symbol to use")
    parser.add_argument("--username", help="Login (password is never taken from flags)")
    parser.add_argument("--session-file", dest="session_file",
                        help="Session bundle path (default: uonet_session.json)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--force-login", dest="force_login", action="store_true",
                        help="Ignore the saved session")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    args = build_parser().parse_args(argv)
    config = ClientConfig.from_cli_args(args)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )
    config.log_summary()

    try:
        return asyncio.run(run(config))
    except UonetError as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        return 1
    except KeyboardInterrupt:
        print("\n  Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
