#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Usage:
    python shortener_cli.py shorten <url>
    python shortener_cli.py resolve <hash> [--visit]
    python shortener_cli.py remove <hash> <remove_token>
    python shortener_cli.py health
"""

import argparse
import asyncio
import json
import secrets
import sys

from app import build_service
from config import load_config
from shortener.common.logging_config import setup_logging
from shortener.errors import ShortenerError


def _print(payload: dict, error: bool = False) -> None:
    print(json.dumps(payload, indent=2, default=str), file=sys.stderr if error else sys.stdout)


class ShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, config, verbose: bool = False):
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        self.service = await build_service(self.config, self.logger)

    async def cleanup(self):
        if self.service:
            await self.service.close()

    async def shorten(self, url: str):
        """Shorten a URL."""
        try:
            view = await self.service.create_or_fetch(url)
        except ShortenerError as e:
            _print({"success": False, "error": e.message}, error=True)
            return 1

        _print({"success": True, **view})
        return 0

    async def resolve(self, hash: str, visit: bool = False):
        """Show the stored record for a hash."""
        record = await self.service.resolve(hash)
        if record is None:
            _print({"success": False, "error": f"Hash '{hash}' not found"}, error=True)
            return 1

        if visit and record.active:
            record = await self.service.register_visit(record) or record

        _print({"success": True, "record": record.to_dict()})
        return 0

    async def remove(self, hash: str, remove_token: str):
        """Disable a short URL."""
        record = await self.service.resolve(hash)
        if record is None or not record.active:
            _print({"success": False, "error": f"Hash '{hash}' not found"}, error=True)
            return 1

        if not secrets.compare_digest(record.remove_token, remove_token):
            _print({"success": False, "error": "Remove token is invalid"}, error=True)
            return 1

        try:
            disabled = await self.service.disable(record)
        except ShortenerError as e:
            _print({"success": False, "error": e.message}, error=True)
            return 1

        _print({"success": disabled, "hash": hash}, error=not disabled)
        return 0 if disabled else 1

    async def health(self):
        """Check service health."""
        health_status = await self.service.health_check()
        _print({"success": True, "health": health_status})
        return 0 if health_status["overall"] else 1


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Show a record
  %(prog)s resolve 3k1PZ2V9ZGq0e6W-8mZ0nA

  # Remove a short URL
  %(prog)s remove 3k1PZ2V9ZGq0e6W-8mZ0nA 0f1c6a52-5b0e-4b8e-9a55-8f4a2d4b2e11
        """
    )

    parser.add_argument(
        "--db-url",
        help="PostgreSQL connection URL (default: from DATABASE_URL env)"
    )
    parser.add_argument(
        "--redis-url",
        help="Redis connection URL for the dictionary state (default: from REDIS_URL env)"
    )
    parser.add_argument(
        "--dictionary",
        action="store_true",
        help="Use the dictionary hashing strategy"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Show the record for a hash")
    resolve_parser.add_argument("hash", help="Hash to lookup")
    resolve_parser.add_argument("--visit", action="store_true", help="Register a visit")

    remove_parser = subparsers.add_parser("remove", help="Remove a short URL")
    remove_parser.add_argument("hash", help="Hash to remove")
    remove_parser.add_argument("remove_token", help="Remove token of the short URL")

    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    config = load_config()
    overrides = {}
    if args.db_url:
        overrides["database_url"] = args.db_url
    if args.redis_url:
        overrides["redis_url"] = args.redis_url
    if args.dictionary:
        overrides["use_dictionary_hash"] = True
    config = config.model_copy(update=overrides)

    cli = ShortenerCLI(config, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url)
        elif args.command == "resolve":
            return await cli.resolve(args.hash, visit=args.visit)
        elif args.command == "remove":
            return await cli.remove(args.hash, args.remove_token)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
