"""Caller identity middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortlinks.common.headers import (
    DEFAULT_USER_ID_HEADER,
    DEFAULT_USER_ROLES_HEADER,
    extract_caller_identity,
)


class CallerIdentityMiddleware(BaseHTTPMiddleware):
    """Attach the gateway-verified caller identity to request state.

    ``request.state.identity`` is a CallerIdentity, or None for anonymous
    requests.
    """

    def __init__(
        self,
        app,
        user_id_header: str = DEFAULT_USER_ID_HEADER,
        roles_header: str = DEFAULT_USER_ROLES_HEADER,
    ):
        super().__init__(app)
        self.user_id_header = user_id_header
        self.roles_header = roles_header

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and extract the caller identity."""
        request.state.identity = extract_caller_identity(
            dict(request.headers),
            user_id_header=self.user_id_header,
            roles_header=self.roles_header,
        )

        return await call_next(request)
