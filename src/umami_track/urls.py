# src/umami_track/urls.py
"""Send URL resolution.

The send path is appended to whatever path the endpoint already has, so a
collector mounted under a prefix (https://example.com/umami) keeps it.
"""

import httpx

from umami_track.errors import InvalidEndpointError


def normalize_send_path(send_path: str) -> str:
    """Strip surrounding slashes and prefix exactly one."""
    return "/" + send_path.strip("/")


def resolve_send_url(endpoint: str, send_path: str) -> str:
    """Join the endpoint's path with the send path.

    A root endpoint path ("/") counts as empty. Scheme, host, port and query
    of the endpoint are left untouched.

    Examples:
        resolve_send_url("https://a.example.com", "api/send")
            -> "https://a.example.com/api/send"
        resolve_send_url("https://a.example.com/umami", "/api/send/")
            -> "https://a.example.com/umami/api/send"

    Raises:
        InvalidEndpointError: If endpoint is not an absolute URL or the
            joined path cannot be represented
    """
    try:
        base = httpx.URL(endpoint)
    except httpx.InvalidURL as e:
        raise InvalidEndpointError(endpoint, send_path, str(e)) from e

    if not base.scheme or not base.host:
        raise InvalidEndpointError(endpoint, send_path, "endpoint must be an absolute URL")

    base_path = "" if base.path == "/" else base.path
    try:
        resolved = base.copy_with(path=base_path + normalize_send_path(send_path))
    except httpx.InvalidURL as e:
        raise InvalidEndpointError(endpoint, send_path, str(e)) from e
    return str(resolved)
