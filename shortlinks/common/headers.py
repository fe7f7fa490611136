"""Header parsing utilities for the link shortener."""

from typing import Dict, Optional

from ..policy import CallerIdentity


DEFAULT_USER_ID_HEADER = "X-User-Id"
DEFAULT_USER_ROLES_HEADER = "X-User-Roles"


def _lower_keys(headers: Dict[str, str]) -> Dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    headers_lower = _lower_keys(headers)

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build base URL from headers or fallback.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config

    Returns:
        Base URL (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def extract_caller_identity(
    headers: Dict[str, str],
    user_id_header: str = DEFAULT_USER_ID_HEADER,
    roles_header: str = DEFAULT_USER_ROLES_HEADER,
) -> Optional[CallerIdentity]:
    """Build the caller identity from gateway-supplied headers.

    The identity provider in front of the service verifies the token and
    forwards the user id and a comma-separated role list.

    Returns:
        CallerIdentity, or None when no user id header is present
    """
    headers_lower = _lower_keys(headers)

    user_id = (headers_lower.get(user_id_header.lower()) or "").strip()
    if not user_id:
        return None

    roles = (headers_lower.get(roles_header.lower()) or "").split(",")
    return CallerIdentity.of(user_id, (r.strip() for r in roles))
