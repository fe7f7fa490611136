"""In-memory link store.

Used by tests, the CLI demo mode and ``DATABASE_URL=memory://``. State lives
only as long as the process.
"""

import asyncio
import itertools
import logging
from typing import Dict, List, Optional, Tuple

from .base import LinkStoreBase
from .models import DeleteResult, InsertResult, LinkRecord
from ..common.logging_config import get_logger


class InMemoryLinkStore(LinkStoreBase):
    """Dictionary-backed store guarded by an asyncio lock."""

    def __init__(
        self,
        db_config: str = "memory://",
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(db_config)
        self.logger = logger or get_logger(__name__)

        self._by_id: Dict[int, LinkRecord] = {}
        self._id_by_code: Dict[str, int] = {}
        self._id_by_owner_url: Dict[Tuple[str, str], int] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def exists_by_code(self, code: str) -> bool:
        return code in self._id_by_code

    async def insert_if_absent(self, record: LinkRecord) -> Tuple[InsertResult, Optional[LinkRecord]]:
        async with self._lock:
            if record.code in self._id_by_code:
                self.logger.debug(f"Code already taken: {record.code}")
                return InsertResult.ALREADY_EXISTS, None

            owner_key = None
            if record.owner_id is not None:
                owner_key = (record.owner_id, record.original_url)
                if owner_key in self._id_by_owner_url:
                    return InsertResult.DUPLICATE, None

            stored = record.with_id(next(self._ids))
            self._by_id[stored.id] = stored
            self._id_by_code[stored.code] = stored.id
            if owner_key is not None:
                self._id_by_owner_url[owner_key] = stored.id

        return InsertResult.INSERTED, stored

    async def find_by_code(self, code: str) -> Optional[LinkRecord]:
        record_id = self._id_by_code.get(code)
        return self._by_id.get(record_id) if record_id is not None else None

    async def find_by_owner_and_url(self, owner_id: str, url: str) -> Optional[LinkRecord]:
        record_id = self._id_by_owner_url.get((owner_id, url))
        return self._by_id.get(record_id) if record_id is not None else None

    async def find_by_url(self, url: str) -> Optional[LinkRecord]:
        for record in self._by_id.values():
            if record.original_url == url:
                return record
        return None

    async def find_by_id(self, record_id: int) -> Optional[LinkRecord]:
        return self._by_id.get(record_id)

    async def delete(self, record_id: int) -> DeleteResult:
        async with self._lock:
            record = self._by_id.pop(record_id, None)
            if record is None:
                return DeleteResult.NOT_FOUND

            del self._id_by_code[record.code]
            if record.owner_id is not None:
                self._id_by_owner_url.pop((record.owner_id, record.original_url), None)

        return DeleteResult.DELETED

    async def list_all(self) -> List[LinkRecord]:
        return list(self._by_id.values())

    async def count(self) -> int:
        return len(self._by_id)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.logger.debug("In-memory store closed")
