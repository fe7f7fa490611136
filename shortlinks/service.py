"""Business logic service for the link shortener."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .database.models import DeleteResult, LinkRecord, is_valid_record_id
from .errors import ErrorCode, ServiceResult
from .identity import UserDirectory, resolve_owner_label
from .policy import CallerIdentity, OwnershipPolicy
from .resolver import UniquenessResolver
from .shortcode import ShortCodeGenerator
from .common.validators import is_valid_url
from .common.logging_config import get_logger


@dataclass(frozen=True)
class LinkDetail:
    """A record together with its owner's display label."""

    record: LinkRecord
    owner_name: str

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data["created_by"] = self.owner_name
        return data


class LinkService:
    """Create, resolve, list and delete short links.

    All collaborators are passed in explicitly; the service keeps no state of
    its own beyond them.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        policy: Optional[OwnershipPolicy] = None,
        generator: Optional[ShortCodeGenerator] = None,
        user_directory: Optional[UserDirectory] = None,
        cache: Optional[RedisCache] = None,
        max_collision_retries: int = 5,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize link service.

        Args:
            store: Link store
            policy: Ownership policy (default admin role "Admin")
            generator: Short code generator (default length 7)
            user_directory: Owner display name lookup
            cache: Optional redirect cache
            max_collision_retries: Retry ceiling for code reservation
            logger: Optional logger
        """
        self.store = store
        self.policy = policy or OwnershipPolicy()
        self.generator = generator or ShortCodeGenerator()
        self.user_directory = user_directory
        self.cache = cache
        self.logger = logger or get_logger(__name__)
        self.resolver = UniquenessResolver(
            self.generator,
            max_attempts=max_collision_retries,
            logger=self.logger,
        )

    async def create_link(
        self,
        original_url: str,
        caller: Optional[CallerIdentity],
    ) -> ServiceResult:
        """Shorten original_url on behalf of caller.

        Returns:
            ServiceResult with the new LinkRecord, or INVALID_URL,
            UNAUTHENTICATED, DUPLICATE_CONFLICT, COLLISION_EXHAUSTED
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            return ServiceResult.failure(ErrorCode.INVALID_URL, f"Invalid URL: {error}")

        own_record = any_record = None
        if caller is not None and caller.is_authenticated:
            own_record = await self.store.find_by_owner_and_url(caller.id, original_url)
            if own_record is None and self.policy.is_admin(caller):
                any_record = await self.store.find_by_url(original_url)

        denied = self.policy.can_create(caller, original_url, own_record, any_record)
        if denied:
            self.logger.info(f"Create denied ({denied.code.value}): {original_url}")
            return ServiceResult.from_error(denied)

        result = await self.resolver.reserve(original_url, self.store, owner_id=caller.id)
        if not result.ok:
            return result

        record = result.value
        if self.cache:
            await self.cache.set_url(record.code, record.original_url)

        self.logger.info(f"Created short link: {record.code} -> {record.original_url} (owner {record.owner_id})")
        return result

    async def resolve(self, code: str) -> ServiceResult:
        """Get the redirect target for a code.

        Returns:
            ServiceResult with the original URL, or NOT_FOUND
        """
        if not self.generator.is_valid_code(code):
            self.logger.debug(f"Malformed code: {code!r}")
            return ServiceResult.failure(ErrorCode.NOT_FOUND, f"Short code '{code}' not found")

        if self.cache:
            cached_url = await self.cache.get_url(code)
            if cached_url:
                self.logger.debug(f"Cache hit for {code}")
                return ServiceResult.success(cached_url)

        record = await self.store.find_by_code(code)
        if record is None:
            self.logger.debug(f"Code not found: {code}")
            return ServiceResult.failure(ErrorCode.NOT_FOUND, f"Short code '{code}' not found")

        denied = self.policy.can_resolve(record)
        if denied:
            return ServiceResult.from_error(denied)

        if self.cache:
            # Never overwrite: a delete may have left a tombstone meanwhile
            await self.cache.set_url(code, record.original_url, overwrite=False)

        self.logger.debug(f"Resolved {code} -> {record.original_url}")
        return ServiceResult.success(record.original_url)

    async def get_detail(
        self,
        record_id: int,
        caller: Optional[CallerIdentity],
    ) -> ServiceResult:
        """Get a record and its owner's display name.

        Returns:
            ServiceResult with a LinkDetail, or NOT_FOUND, UNAUTHENTICATED
        """
        record = await self._find_record(record_id)
        if record is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Shortened URL not found")

        denied = self.policy.can_view_detail(caller, record)
        if denied:
            return ServiceResult.from_error(denied)

        return ServiceResult.success(await self._detail(record))

    async def list_links(self, caller: Optional[CallerIdentity] = None) -> ServiceResult:
        """List every active record with owner labels, newest first."""
        denied = self.policy.can_list(caller)
        if denied:
            return ServiceResult.from_error(denied)

        records = await self.store.list_all()
        records.sort(key=lambda r: (r.created_at, r.id or 0), reverse=True)
        return ServiceResult.success([await self._detail(r) for r in records])

    async def delete_link(
        self,
        record_id: int,
        caller: Optional[CallerIdentity],
    ) -> ServiceResult:
        """Delete a record if caller owns it or is an administrator.

        Returns:
            ServiceResult with the deleted LinkRecord, or NOT_FOUND, FORBIDDEN
        """
        record = await self._find_record(record_id)
        if record is None:
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Shortened URL not found")

        denied = self.policy.can_delete(caller, record)
        if denied:
            self.logger.info(f"Delete of {record.code} denied for {caller.id if caller else None}")
            return ServiceResult.from_error(denied)

        if await self.store.delete(record_id) is DeleteResult.NOT_FOUND:
            # Deleted concurrently by someone else
            return ServiceResult.failure(ErrorCode.NOT_FOUND, "Shortened URL not found")

        if self.cache and not await self.cache.mark_deleted(record.code):
            self.logger.error(
                f"Deleted {record.code} but could not tombstone its cache entry; "
                f"other workers may serve it for up to {self.cache.ttl_seconds}s"
            )

        self.logger.info(f"Deleted short link: {record.code} (id {record_id})")
        return ServiceResult.success(record)

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_links": await self.store.count(),
            "code_length": self.generator.default_length,
            "cache_enabled": self.cache is not None and self.cache.enabled,
        }

    async def health_check(self) -> Dict[str, bool]:
        db_healthy = await self.store.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True

        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()

    async def _find_record(self, record_id: int) -> Optional[LinkRecord]:
        if not is_valid_record_id(record_id):
            return None
        return await self.store.find_by_id(record_id)

    async def _detail(self, record: LinkRecord) -> LinkDetail:
        owner_name = await resolve_owner_label(self.user_directory, record.owner_id)
        return LinkDetail(record=record, owner_name=owner_name)
