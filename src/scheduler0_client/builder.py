"""Outgoing request construction.

Combines URL composition, body encoding, authentication and account
resolution into a ready-to-send :class:`httpx.Request`. Building never
performs network I/O.
"""

import json
from collections.abc import Mapping
from typing import Any

import httpx
import pydantic

from .accounts import resolve_account_id
from .auth import Credentials, auth_headers
from .errors import ConfigError, EncodeError
from .urls import compose_url, parse_base_url

JSON_CONTENT_TYPE = "application/json"
ACCOUNT_ID_HEADER = "X-Account-ID"


def _to_jsonable(value: Any) -> Any:
    """Dump pydantic models (also when nested in mappings or sequences)."""
    if isinstance(value, pydantic.BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


def encode_body(body: Any) -> bytes:
    """Serialize a request body to JSON.

    Args:
        body: Any JSON-representable value, pydantic model, or None.

    Returns:
        UTF-8 encoded JSON, or an empty payload for a None body.

    Raises:
        EncodeError: If the body cannot be represented as JSON.
    """
    if body is None:
        return b""
    try:
        payload = json.dumps(
            _to_jsonable(body),
            allow_nan=False,
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        msg = f"Request body is not JSON-serializable: {exc}"
        raise EncodeError(msg) from exc
    return payload.encode("utf-8")


class RequestBuilder:
    """Builds requests for one API server and one set of credentials.

    Holds only immutable state, so a single builder can be shared by
    concurrent callers.
    """

    def __init__(
        self,
        base_url: str,
        api_version: str,
        credentials: Credentials | None = None,
        account_id: str = "",
        timeout: float | None = None,
    ):
        """Initialize the builder.

        Args:
            base_url: Base URL of the API server.
            api_version: API version used in the path prefix (e.g., "v1").
            credentials: Credential state; no authentication when omitted.
            account_id: Default account identifier, "" for none.
            timeout: Timeout in seconds attached to every request, None to
                leave it to the transport.

        Raises:
            ConfigError: If base_url is invalid or api_version is empty.
        """
        if not api_version:
            msg = "api_version cannot be empty"
            raise ConfigError(msg)
        self.base_url = parse_base_url(base_url)
        self.api_version = api_version
        self.credentials = credentials or Credentials()
        self.account_id = account_id
        self._extensions: dict[str, Any] = {}
        if timeout is not None:
            self._extensions["timeout"] = httpx.Timeout(timeout).as_dict()

    def url(self, endpoint: str, params: Mapping[str, str] | None = None) -> httpx.URL:
        """Return the absolute URL for an endpoint."""
        return compose_url(self.base_url, self.api_version, endpoint, params)

    def build(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        *,
        account_id: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Build an authenticated request.

        Args:
            method: HTTP method.
            endpoint: Endpoint path below the versioned prefix (e.g., "/jobs").
            body: Optional JSON body.
            account_id: Per-call account override; None or "" falls back to
                the body and then to the client default.
            params: Optional query parameters.

        Returns:
            The request, ready to send.

        Raises:
            EncodeError: If the body cannot be serialized.
        """
        content = encode_body(body)
        headers = {"Content-Type": JSON_CONTENT_TYPE}
        headers.update(auth_headers(self.credentials))
        if resolved := resolve_account_id(account_id, body, self.account_id):
            headers[ACCOUNT_ID_HEADER] = resolved

        return httpx.Request(
            method.upper(),
            self.url(endpoint, params),
            headers=headers,
            content=content,
            extensions=dict(self._extensions),
        )

    def build_unauthenticated(self, method: str, endpoint: str) -> httpx.Request:
        """Build a bodyless request that carries no credentials or account.

        Used for liveness probes such as the healthcheck endpoint.
        """
        return httpx.Request(
            method.upper(),
            self.url(endpoint),
            headers={"Content-Type": JSON_CONTENT_TYPE},
            extensions=dict(self._extensions),
        )
