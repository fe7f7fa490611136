"""
Command-line interface for the link shortener.

Usage:
    shortlinks [--user ID] [--roles R1,R2] shorten <url>
    shortlinks resolve <code>
    shortlinks [--user ID] detail <id>
    shortlinks list
    shortlinks [--user ID] delete <id>
    shortlinks health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional, Sequence

from .common.logging_config import setup_logging
from .database import create_link_store
from .database.cache import RedisCache
from .errors import LinkError
from .identity import StaticUserDirectory
from .policy import CallerIdentity, OwnershipPolicy
from .service import LinkService
from .shortcode import ShortCodeGenerator


class ShortLinksCLI:
    """Command-line interface over LinkService."""

    def __init__(
        self,
        db_url: str,
        redis_url: Optional[str] = None,
        caller: Optional[CallerIdentity] = None,
        verbose: bool = False,
        service: Optional[LinkService] = None,
    ):
        self.db_url = db_url
        self.redis_url = redis_url
        self.caller = caller
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = service

    async def initialize(self):
        """Initialize store and service unless one was injected."""
        if self.service is not None:
            return

        cache = None
        if self.redis_url:
            cache = RedisCache(redis_url=self.redis_url, logger=self.logger)
            await cache.connect()

        user_directory = json.loads(os.getenv("USER_DIRECTORY", "{}"))
        self.service = LinkService(
            store=create_link_store(self.db_url, logger=self.logger),
            policy=OwnershipPolicy(admin_role=os.getenv("ADMIN_ROLE", "Admin")),
            generator=ShortCodeGenerator(default_length=int(os.getenv("SHORT_CODE_LENGTH", "7"))),
            user_directory=StaticUserDirectory(user_directory),
            cache=cache,
            logger=self.logger,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _print_ok(self, payload: dict) -> int:
        print(json.dumps({"success": True, **payload}, indent=2))
        return 0

    def _print_error(self, error: LinkError) -> int:
        payload = {"success": False, "error": error.code.value, "message": error.message}
        if error.existing is not None:
            payload["existing"] = error.existing.to_dict()
        print(json.dumps(payload, indent=2), file=sys.stderr)
        return 1

    async def shorten(self, url: str) -> int:
        """Shorten a URL as the configured caller."""
        result = await self.service.create_link(url, self.caller)
        if not result.ok:
            return self._print_error(result.error)
        return self._print_ok({"link": result.value.to_dict()})

    async def resolve(self, code: str) -> int:
        """Print the original URL for a code."""
        result = await self.service.resolve(code)
        if not result.ok:
            return self._print_error(result.error)
        return self._print_ok({"code": code, "original_url": result.value})

    async def detail(self, record_id: int) -> int:
        result = await self.service.get_detail(record_id, self.caller)
        if not result.ok:
            return self._print_error(result.error)
        return self._print_ok({"link": result.value.to_dict()})

    async def list_links(self) -> int:
        result = await self.service.list_links(self.caller)
        links = [d.to_dict() for d in result.value]
        return self._print_ok({"count": len(links), "links": links})

    async def delete(self, record_id: int) -> int:
        result = await self.service.delete_link(record_id, self.caller)
        if not result.ok:
            return self._print_error(result.error)
        return self._print_ok({"deleted": result.value.to_dict()})

    async def health(self) -> int:
        health_status = await self.service.health_check()
        stats = await self.service.get_statistics()
        print(json.dumps({"success": health_status["overall"], "health": health_status, "statistics": stats}, indent=2))
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlinks",
        description="Link shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL as user u1
  %(prog)s --user u1 shorten https://example.com/long/url

  # Resolve a code
  %(prog)s resolve 4fTq0Za

  # Delete a link as an administrator
  %(prog)s --user root --roles Admin delete 12
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "memory://"),
        help="Link store URL (default: from DATABASE_URL env or memory://)"
    )
    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )
    parser.add_argument("--user", help="Caller user id")
    parser.add_argument("--roles", default="", help="Comma-separated caller roles")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")

    resolve_parser = subparsers.add_parser("resolve", help="Get original URL for a code")
    resolve_parser.add_argument("code", help="Short code to look up")

    detail_parser = subparsers.add_parser("detail", help="Show a link by id")
    detail_parser.add_argument("id", type=int, help="Link id")

    subparsers.add_parser("list", help="List all links")

    delete_parser = subparsers.add_parser("delete", help="Delete a link by id")
    delete_parser.add_argument("id", type=int, help="Link id")

    subparsers.add_parser("health", help="Check service health")

    return parser


async def main(argv: Optional[Sequence[str]] = None, service: Optional[LinkService] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    caller = CallerIdentity.of(args.user, args.roles.split(",")) if args.user else None
    cli = ShortLinksCLI(
        db_url=args.db_url,
        redis_url=args.redis_url,
        caller=caller,
        verbose=args.verbose,
        service=service,
    )

    commands = {
        "shorten": lambda: cli.shorten(args.url),
        "resolve": lambda: cli.resolve(args.code),
        "detail": lambda: cli.detail(args.id),
        "list": cli.list_links,
        "delete": lambda: cli.delete(args.id),
        "health": cli.health,
    }

    await cli.initialize()
    try:
        return await commands[args.command]()
    finally:
        if service is None:
            await cli.cleanup()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
