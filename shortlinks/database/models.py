"""Data models for the link store."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


# Store ids are positive BIGINT values
MAX_RECORD_ID = 2**63 - 1


def is_valid_record_id(record_id: int) -> bool:
    return 1 <= record_id <= MAX_RECORD_ID


class InsertResult(str, Enum):
    """Outcome of an atomic insert-if-absent."""

    INSERTED = "inserted"
    # Another record already holds the code
    ALREADY_EXISTS = "already_exists"
    # Another active record already maps the same (owner, url) pair
    DUPLICATE = "duplicate"


class DeleteResult(str, Enum):
    """Outcome of deleting a record by id."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class LinkRecord:
    """A stored code -> URL mapping.

    Records are never updated. ``id`` is None until the store assigns one.
    """

    original_url: str
    code: str
    created_at: datetime
    owner_id: Optional[str] = None
    id: Optional[int] = None

    def with_id(self, record_id: int) -> "LinkRecord":
        """Return a copy carrying the store-assigned id."""
        return replace(self, id=record_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "original_url": self.original_url,
            "code": self.code,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "owner_id": self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LinkRecord":
        """Create from dictionary (or a database row mapping)."""
        created_at = data["created_at"]
        return cls(
            id=data.get("id"),
            original_url=data["original_url"],
            code=data["code"],
            created_at=created_at if isinstance(created_at, datetime) else datetime.fromisoformat(created_at),
            owner_id=data.get("owner_id"),
        )
