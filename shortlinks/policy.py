"""Ownership and authorization rules for link records."""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from .database.models import LinkRecord
from .errors import ErrorCode, LinkError


DEFAULT_ADMIN_ROLE = "Admin"


@dataclass(frozen=True)
class CallerIdentity:
    """Verified caller as supplied by the identity provider."""

    id: Optional[str] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, user_id: Optional[str], roles: Iterable[str] = ()) -> "CallerIdentity":
        return cls(id=user_id or None, roles=frozenset(r for r in roles if r))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.id)

    def has_role(self, role: str) -> bool:
        return role in self.roles


class OwnershipPolicy:
    """Pure permission checks over (caller, record).

    Each ``can_*`` method returns None when the action is permitted, otherwise
    the LinkError to report. The policy never touches the store; the caller
    passes in whatever records the decision needs.
    """

    def __init__(self, admin_role: str = DEFAULT_ADMIN_ROLE):
        self.admin_role = admin_role

    def is_admin(self, caller: Optional[CallerIdentity]) -> bool:
        return caller is not None and caller.is_authenticated and caller.has_role(self.admin_role)

    def can_create(
        self,
        caller: Optional[CallerIdentity],
        url: str,
        own_record: Optional[LinkRecord] = None,
        any_record: Optional[LinkRecord] = None,
    ) -> Optional[LinkError]:
        """Check whether caller may shorten url.

        Args:
            caller: Caller identity (None when unauthenticated)
            url: URL to shorten
            own_record: Active record for (url, caller.id), if any
            any_record: Any active record for url, if any
        """
        if caller is None or not caller.is_authenticated:
            return LinkError(ErrorCode.UNAUTHENTICATED, "Authentication is required to shorten URLs")

        if own_record is not None and own_record.owner_id == caller.id:
            return LinkError(
                ErrorCode.DUPLICATE_CONFLICT,
                f"This URL has already been shortened by you: {url}",
                existing=own_record,
            )

        # Administrators may not duplicate any existing mapping
        if any_record is not None and self.is_admin(caller):
            return LinkError(
                ErrorCode.DUPLICATE_CONFLICT,
                f"This URL has already been shortened: {url}",
                existing=any_record,
            )

        return None

    def can_view_detail(
        self,
        caller: Optional[CallerIdentity],
        record: LinkRecord,
    ) -> Optional[LinkError]:
        if caller is None or not caller.is_authenticated:
            return LinkError(ErrorCode.UNAUTHENTICATED, "Only authenticated users can view link details")
        return None

    def can_delete(
        self,
        caller: Optional[CallerIdentity],
        record: LinkRecord,
    ) -> Optional[LinkError]:
        if caller is not None and caller.is_authenticated:
            if caller.id == record.owner_id or self.is_admin(caller):
                return None
        return LinkError(ErrorCode.FORBIDDEN, "You do not have permission to delete this link")

    def can_resolve(self, record: LinkRecord) -> Optional[LinkError]:
        """Redirects are public."""
        return None

    def can_list(self, caller: Optional[CallerIdentity] = None) -> Optional[LinkError]:
        """The link listing is public, anonymous callers included."""
        return None
