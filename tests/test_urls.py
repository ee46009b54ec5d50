"""Tests for base URL parsing and endpoint URL composition."""

import httpx
import pytest

from scheduler0_client import urls
from scheduler0_client.errors import ConfigError

# ---------------------------------------------------------------------------
# parse_base_url
# ---------------------------------------------------------------------------


def test_parse_base_url_accepts_absolute_url():
    """An absolute http(s) URL parses without error."""
    url = urls.parse_base_url("https://x.test/")
    assert url.host == "x.test"
    assert url.scheme == "https"


def test_parse_base_url_empty_raises():
    """An empty base URL is a configuration error."""
    with pytest.raises(ConfigError, match="empty"):
        urls.parse_base_url("")


def test_parse_base_url_relative_raises():
    """A URL without scheme and host is rejected at construction time."""
    with pytest.raises(ConfigError):
        urls.parse_base_url("just-a-path")


def test_config_error_is_value_error():
    """ConfigError can be caught as a ValueError."""
    with pytest.raises(ValueError):
        urls.parse_base_url("")


# ---------------------------------------------------------------------------
# join_path
# ---------------------------------------------------------------------------


def test_join_path_collapses_duplicate_slashes():
    assert urls.join_path("//api/v1/", "/jobs") == "/api/v1/jobs"


def test_join_path_drops_trailing_slash():
    assert urls.join_path("/api/v1/", "jobs/") == "/api/v1/jobs"


def test_join_path_skips_empty_segments():
    assert urls.join_path("/api/v1/", "") == "/api/v1"


# ---------------------------------------------------------------------------
# compose_url
# ---------------------------------------------------------------------------


def test_compose_url_leading_slash_is_irrelevant():
    """Endpoints with and without a leading slash produce the same URL."""
    base = urls.parse_base_url("https://x.test/")
    with_slash = urls.compose_url(base, "v1", "/jobs")
    without_slash = urls.compose_url(base, "v1", "jobs")
    assert with_slash == without_slash
    assert str(with_slash) == "https://x.test/api/v1/jobs"


def test_compose_url_keeps_base_path():
    """A base URL with a path prefix keeps it in front of /api/<version>."""
    base = urls.parse_base_url("http://proxy.test:8080/scheduler/")
    url = urls.compose_url(base, "v2", "/projects/7")
    assert url.path == "/scheduler/api/v2/projects/7"
    assert url.port == 8080


def test_compose_url_query_round_trip():
    """Query parameters survive encoding and re-parsing."""
    base = urls.parse_base_url("https://x.test")
    params = {"limit": "10", "offset": "0"}
    url = urls.compose_url(base, "v1", "/jobs", params)
    reparsed = httpx.URL(str(url))
    assert dict(reparsed.params) == params


def test_compose_url_percent_encodes_values():
    """Values with reserved characters are percent-encoded."""
    base = urls.parse_base_url("https://x.test")
    url = urls.compose_url(base, "v1", "/executions", {"startDate": "2025-01-01 00:00"})
    assert " " not in str(url)
    assert url.params["startDate"] == "2025-01-01 00:00"


def test_compose_url_replaces_existing_query():
    """Any query string on the base URL is replaced by the given params."""
    base = urls.parse_base_url("https://x.test/?stale=1")
    url = urls.compose_url(base, "v1", "/jobs", {"limit": "5"})
    assert dict(url.params) == {"limit": "5"}


def test_compose_url_without_params_has_no_query():
    """No params means no query string at all."""
    base = urls.parse_base_url("https://x.test/?stale=1")
    url = urls.compose_url(base, "v1", "/jobs")
    assert url.query == b""
    assert "?" not in str(url)
