"""Core business logic for the link shortener."""

from .shortcode import ShortCodeGenerator
from .resolver import UniquenessResolver
from .policy import CallerIdentity, OwnershipPolicy
from .errors import ErrorCode, LinkError, ServiceResult
from .service import LinkService, LinkDetail

__all__ = [
    "ShortCodeGenerator",
    "UniquenessResolver",
    "CallerIdentity",
    "OwnershipPolicy",
    "ErrorCode",
    "LinkError",
    "ServiceResult",
    "LinkService",
    "LinkDetail",
]
