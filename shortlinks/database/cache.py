"""Redis cache for code -> URL redirect lookups."""

import logging
from typing import Optional, Set

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..common.logging_config import get_logger


class RedisCache:
    """Redis cache-aside layer in front of Resolve.

    Read failures are logged and reported as a miss; the store stays the
    source of truth. A deleted code is replaced by a short-lived tombstone
    so an in-flight resolve cannot put the old mapping back.
    """

    KEY_PREFIX = "shortlinks:code:"
    TOMBSTONE = "\x00deleted"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        tombstone_ttl_seconds: int = 60,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached mappings
            tombstone_ttl_seconds: TTL for the marker left by a delete
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.tombstone_ttl_seconds = tombstone_ttl_seconds
        self.logger = logger or get_logger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None
        # Codes deleted while Redis refused the tombstone write
        self._unconfirmed_deletes: Set[str] = set()

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    @property
    def active(self) -> bool:
        return self.enabled and self.client is not None

    def get_cache_key(self, code: str) -> str:
        return f"{self.KEY_PREFIX}{code}"

    async def get_url(self, code: str) -> Optional[str]:
        """Get the cached URL for a code, or None (miss, tombstone or error)."""
        if not self.active:
            return None

        if code in self._unconfirmed_deletes and not await self.mark_deleted(code):
            return None

        try:
            value = await self.client.get(self.get_cache_key(code))
        except RedisError as e:
            self.logger.error(f"Cache get error: {e}")
            return None

        if value == self.TOMBSTONE:
            return None
        return value

    async def set_url(
        self,
        code: str,
        url: str,
        ttl: Optional[int] = None,
        overwrite: bool = True,
    ) -> bool:
        """Cache the URL for a code.

        Args:
            code: Short code
            url: Redirect target
            ttl: TTL override in seconds
            overwrite: False leaves an existing entry (or tombstone) in place

        Returns:
            True if the mapping was written
        """
        if not self.active:
            return False

        if not overwrite and code in self._unconfirmed_deletes:
            return False

        try:
            written = await self.client.set(
                self.get_cache_key(code),
                url,
                ex=ttl or self.ttl_seconds,
                nx=not overwrite,
            )
        except RedisError as e:
            self.logger.error(f"Cache set error: {e}")
            return False

        if written and overwrite:
            self._unconfirmed_deletes.discard(code)
        return bool(written)

    async def mark_deleted(self, code: str) -> bool:
        """Replace the cached URL for a code with a tombstone.

        Returns:
            False if Redis rejected the write. The code then keeps bypassing
            this cache in the current process until a later write succeeds.
        """
        if not self.active:
            return True

        try:
            await self.client.set(
                self.get_cache_key(code),
                self.TOMBSTONE,
                ex=self.tombstone_ttl_seconds,
            )
        except RedisError as e:
            self.logger.error(f"Cache tombstone error for {code}: {e}")
            self._unconfirmed_deletes.add(code)
            return False

        self._unconfirmed_deletes.discard(code)
        return True

    async def ping(self) -> bool:
        if not self.active:
            return True
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")
