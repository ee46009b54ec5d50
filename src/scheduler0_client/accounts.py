"""Account identifier resolution.

Most endpoints are scoped to an account through the ``X-Account-ID``
header. The identifier comes from, in order of precedence:

1. an explicit per-call override,
2. an account identifier carried by the request body,
3. the client-level default.

An empty result means the header is omitted.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

ACCOUNT_ID_FIELD = "accountId"


@runtime_checkable
class AccountScoped(Protocol):
    """A request body that may carry an account identifier."""

    def account_id_candidate(self) -> int | str | None:
        """Return the account identifier held by this body, if any."""
        ...


def normalize_account_id(value: Any) -> str:
    """Convert a candidate identifier to its header form.

    Non-empty strings and non-zero integers are identifiers; everything
    else (including ``None``, ``0``, ``""`` and booleans) is not.
    """
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value) if value != 0 else ""
    return ""


def account_id_from_body(body: Any) -> str:
    """Find an account identifier inside a request body.

    Supports bodies implementing :class:`AccountScoped`, mappings with an
    ``accountId`` key, and lists or tuples of either. For sequences the
    first element yielding an identifier wins.

    Args:
        body: Request body, or None.

    Returns:
        The identifier, or "" if none is present.
    """
    if body is None:
        return ""
    if isinstance(body, AccountScoped):
        return normalize_account_id(body.account_id_candidate())
    if isinstance(body, Mapping):
        return normalize_account_id(body.get(ACCOUNT_ID_FIELD))
    if isinstance(body, (list, tuple)):
        for item in body:
            if account_id := account_id_from_body(item):
                return account_id
    return ""


def resolve_account_id(
    override: str | None,
    body: Any,
    default: str,
) -> str:
    """Pick the account identifier to send with a request.

    Args:
        override: Per-call override; wins when non-empty.
        body: Request body inspected by :func:`account_id_from_body`.
        default: Client-level default account identifier.

    Returns:
        The resolved identifier, or "" when no header should be sent.
    """
    if override:
        return override
    if account_id := account_id_from_body(body):
        return account_id
    return default or ""
