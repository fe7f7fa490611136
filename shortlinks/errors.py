"""Error taxonomy and result values returned by the link service."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .database.models import LinkRecord


class ErrorCode(str, Enum):
    """Failure outcomes of link operations."""

    INVALID_URL = "invalid_url"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    DUPLICATE_CONFLICT = "duplicate_conflict"
    COLLISION_EXHAUSTED = "collision_exhausted"
    NOT_FOUND = "not_found"

    @property
    def retryable(self) -> bool:
        """Whether the caller may simply try the same operation again."""
        return self is ErrorCode.COLLISION_EXHAUSTED


@dataclass(frozen=True)
class LinkError:
    """A failed operation.

    ``existing`` is set for duplicate conflicts so callers can locate the
    record that already covers the URL.
    """

    code: ErrorCode
    message: str
    existing: Optional[LinkRecord] = None


@dataclass(frozen=True)
class ServiceResult:
    """Either a value or a LinkError, never both."""

    value: Any = None
    error: Optional[LinkError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "ServiceResult":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        message: str,
        existing: Optional[LinkRecord] = None,
    ) -> "ServiceResult":
        return cls(error=LinkError(code=code, message=message, existing=existing))

    @classmethod
    def from_error(cls, error: LinkError) -> "ServiceResult":
        return cls(error=error)
