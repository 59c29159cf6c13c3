import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import commands
from .api import ApiClient
from .credentials import CredentialStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lynxprompt", description="LynxPrompt command line client")
    parser.add_argument("--verbose", action="store_true", help="Log HTTP errors")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("login", help="Authenticate with LynxPrompt in the browser")
    subparsers.add_parser("logout", help="Remove stored credentials")
    subparsers.add_parser("whoami", help="Show the authenticated account")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    store = CredentialStore()

    if args.command == "logout":
        return commands.logout(store)

    client = ApiClient(store)
    if args.command == "login":
        return asyncio.run(commands.login(store, client))
    return asyncio.run(commands.whoami(store, client))


if __name__ == "__main__":
    sys.exit(main())
