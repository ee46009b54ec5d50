"""URL composition for the Scheduler0 REST API.

Every endpoint lives under ``<base-path>/api/<version>/``. The base URL is
parsed once when the client is created; request URLs are derived from it.
"""

import posixpath
from collections.abc import Mapping

import httpx

from .errors import ConfigError


def parse_base_url(base_url: str) -> httpx.URL:
    """Parse and validate the API base URL.

    Args:
        base_url: Absolute URL of the server (e.g., "https://scheduler0.example").

    Returns:
        Parsed URL.

    Raises:
        ConfigError: If the URL is empty, malformed, or lacks a scheme or host.
    """
    if not base_url:
        msg = "base_url cannot be empty"
        raise ConfigError(msg)
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        msg = f"Invalid base_url {base_url!r}: {exc}"
        raise ConfigError(msg) from exc
    if not url.scheme or not url.host:
        msg = f"base_url must be absolute (scheme and host required): {base_url!r}"
        raise ConfigError(msg)
    return url


def join_path(*parts: str) -> str:
    """Join path segments and clean the result.

    Empty segments are skipped, repeated slashes collapse to one, ``.`` and
    ``..`` are resolved, and the trailing slash is dropped.
    """
    joined = "/".join(part for part in parts if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    # normpath keeps a leading "//" (POSIX allows it to be special)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def compose_url(
    base_url: httpx.URL,
    api_version: str,
    endpoint: str,
    params: Mapping[str, str] | None = None,
) -> httpx.URL:
    """Build the absolute URL for an API endpoint.

    The query string of ``base_url`` is always replaced: by the encoded
    ``params`` when given and non-empty, otherwise by nothing.

    Args:
        base_url: Parsed base URL (see :func:`parse_base_url`).
        api_version: API version string (e.g., "v1").
        endpoint: Endpoint path, with or without a leading slash.
        params: Optional query parameters.

    Returns:
        Absolute request URL.
    """
    path = join_path(f"{base_url.path}/api/{api_version}/", endpoint)
    return base_url.copy_with(path=path, params=dict(params) if params else None, fragment=None)
