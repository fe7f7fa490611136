"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .models import DeleteResult, InsertResult, LinkRecord


class LinkStoreBase(ABC):
    """Abstract base class for link store operations.

    Implementations must make ``insert_if_absent`` and ``delete`` atomic with
    respect to concurrent callers. Nothing else about the storage technology
    is assumed by the service.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def exists_by_code(self, code: str) -> bool:
        """Check if a code is already taken.

        Args:
            code: The code to check

        Returns:
            True if a record holds the code
        """
        pass

    @abstractmethod
    async def insert_if_absent(self, record: LinkRecord) -> Tuple[InsertResult, Optional[LinkRecord]]:
        """Atomically insert record unless its code (or owner/url pair) is taken.

        Args:
            record: Record to insert; its id is ignored

        Returns:
            Tuple of (result, stored record with assigned id or None)
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[LinkRecord]:
        """Get the record for a code, or None."""
        pass

    @abstractmethod
    async def find_by_owner_and_url(self, owner_id: str, url: str) -> Optional[LinkRecord]:
        """Get the active record created by owner_id for url, or None."""
        pass

    @abstractmethod
    async def find_by_url(self, url: str) -> Optional[LinkRecord]:
        """Get any active record for url, or None."""
        pass

    @abstractmethod
    async def find_by_id(self, record_id: int) -> Optional[LinkRecord]:
        """Get the record with the given id, or None."""
        pass

    @abstractmethod
    async def delete(self, record_id: int) -> DeleteResult:
        """Delete a record by id.

        Args:
            record_id: The record id

        Returns:
            DELETED, or NOT_FOUND if no such record
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[LinkRecord]:
        """List every active record (order unspecified)."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of active records."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
