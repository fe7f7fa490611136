"""Collision handling for short code reservation."""

import logging
from datetime import datetime, timezone
from typing import Optional

from .database.base import LinkStoreBase
from .database.models import InsertResult, LinkRecord
from .errors import ErrorCode, ServiceResult
from .shortcode import ShortCodeGenerator
from .common.logging_config import get_logger


class UniquenessResolver:
    """Reserve a free code by generating candidates until one inserts.

    Attempts are sequential. Attempt 0 uses the deterministic candidate for
    the URL, every later attempt a fresh nonce. A candidate only counts once
    the store's atomic insert accepted it; a free check alone is not enough.
    """

    def __init__(
        self,
        generator: ShortCodeGenerator,
        max_attempts: int = 5,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize resolver.

        Args:
            generator: Candidate code generator
            max_attempts: Retry ceiling (total candidates tried)
            logger: Optional logger
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.generator = generator
        self.max_attempts = max_attempts
        self.logger = logger or get_logger(__name__)

    async def reserve(
        self,
        original_url: str,
        store: LinkStoreBase,
        owner_id: Optional[str] = None,
    ) -> ServiceResult:
        """Insert a new record for original_url under a free code.

        Args:
            original_url: URL to shorten (also the generator input)
            store: Store to reserve against
            owner_id: Creator of the record

        Returns:
            ServiceResult with the stored LinkRecord, or a COLLISION_EXHAUSTED
            or DUPLICATE_CONFLICT error
        """
        tried = set()

        for attempt in range(self.max_attempts):
            code = self.generator.generate(original_url, attempt)

            if code in tried or await store.exists_by_code(code):
                self.logger.debug(f"Collision on attempt {attempt + 1}: {code}")
                tried.add(code)
                continue
            tried.add(code)

            record = LinkRecord(
                original_url=original_url,
                code=code,
                created_at=datetime.now(timezone.utc),
                owner_id=owner_id,
            )
            result, stored = await store.insert_if_absent(record)

            if result is InsertResult.INSERTED:
                if attempt:
                    self.logger.debug(f"Reserved code after {attempt + 1} attempts: {code}")
                return ServiceResult.success(stored)

            if result is InsertResult.DUPLICATE:
                # Lost a race against the same owner shortening the same URL
                existing = await store.find_by_owner_and_url(owner_id, original_url)
                return ServiceResult.failure(
                    ErrorCode.DUPLICATE_CONFLICT,
                    "This URL has already been shortened by you",
                    existing=existing,
                )

            self.logger.debug(f"Lost insert race on attempt {attempt + 1}: {code}")

        self.logger.error(
            f"Unable to reserve a unique code after {self.max_attempts} attempts "
            f"(code length {self.generator.default_length}); consider raising the retry "
            f"ceiling or the code length"
        )
        return ServiceResult.failure(
            ErrorCode.COLLISION_EXHAUSTED,
            "Unable to generate a unique short code, please try again",
        )
