"""Public short URL construction."""

from urllib.parse import quote


def join_url_path(base_url: str, *segments: str) -> str:
    """Append path segments to base_url with exactly one slash between parts.

    Empty segments (an unset prefix, a bare "/") are skipped.
    """
    parts = [base_url.rstrip("/")]
    parts.extend(s.strip("/") for s in segments if s.strip("/"))
    return "/".join(parts)


def build_short_url(code: str, base_url: str, path_prefix: str = "") -> str:
    """Build the public URL a short code redirects from.

    >>> build_short_url("4fTq0Za", "https://sho.rt/", "/s/")
    'https://sho.rt/s/4fTq0Za'
    """
    return join_url_path(base_url, path_prefix, quote(code, safe=""))
