"""Mapping of service results to HTTP responses."""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from shortlinks.errors import ErrorCode, LinkError
from shortlinks.policy import CallerIdentity


ERROR_STATUS = {
    ErrorCode.INVALID_URL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE_CONFLICT: status.HTTP_409_CONFLICT,
    # Transient; the client may retry
    ErrorCode.COLLISION_EXHAUSTED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: LinkError) -> JSONResponse:
    """Render a LinkError as a JSON error body with its status code."""
    body = {
        "error": error.code.value,
        "detail": error.message,
        "retryable": error.code.retryable,
    }
    if error.existing is not None:
        body["existing_id"] = error.existing.id
        body["existing_code"] = error.existing.code

    headers = {"Retry-After": "1"} if error.code.retryable else None
    return JSONResponse(status_code=ERROR_STATUS[error.code], content=body, headers=headers)


def get_caller(request: Request) -> Optional[CallerIdentity]:
    """Caller identity placed on the request by CallerIdentityMiddleware."""
    return getattr(request.state, "identity", None)
