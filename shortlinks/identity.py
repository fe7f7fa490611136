"""Owner display name lookup.

User accounts live in an external identity provider. The service only needs
to turn an owner id into a name for listings and detail views.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional


ANONYMOUS_LABEL = "Anonymous"
UNKNOWN_LABEL = "Unknown"


class UserDirectory(ABC):
    """Read-only view of the identity provider's user names."""

    @abstractmethod
    async def display_name(self, user_id: str) -> Optional[str]:
        """Return the user's display name, or None if unknown."""
        pass


class StaticUserDirectory(UserDirectory):
    """User directory backed by a fixed id -> name mapping."""

    def __init__(self, names: Optional[Dict[str, str]] = None):
        self.names = dict(names or {})

    async def display_name(self, user_id: str) -> Optional[str]:
        return self.names.get(user_id)


async def resolve_owner_label(directory: Optional[UserDirectory], owner_id: Optional[str]) -> str:
    """Display label for a record owner.

    "Anonymous" when the record has no owner, "Unknown" when the directory
    cannot resolve the id.
    """
    if not owner_id:
        return ANONYMOUS_LABEL
    if directory is None:
        return UNKNOWN_LABEL
    return await directory.display_name(owner_id) or UNKNOWN_LABEL
