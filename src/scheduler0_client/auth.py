"""Authentication scheme selection.

A request carries exactly one of:

- Basic credentials plus ``X-Peer: cmd`` (peer traffic between nodes),
- the ``X-API-Key`` / ``X-API-Secret`` header pair,
- nothing at all.

Basic auth is checked first and wins when both credential pairs are set.
"""

import base64
import enum
from dataclasses import dataclass

PEER_HEADER = "X-Peer"
PEER_HEADER_VALUE = "cmd"
API_KEY_HEADER = "X-API-Key"
API_SECRET_HEADER = "X-API-Secret"


class AuthMode(enum.Enum):
    """Authentication scheme applied to outgoing requests."""

    BASIC = "basic"
    API_KEY = "api_key"
    NONE = "none"


@dataclass(frozen=True)
class Credentials:
    """Credential state configured on a client.

    A pair only counts when both of its halves are non-empty.
    """

    api_key: str = ""
    api_secret: str = ""
    username: str = ""
    password: str = ""

    def __repr__(self) -> str:
        # Never expose secrets in logs or tracebacks
        return (
            f"Credentials(api_key={self.api_key!r}, api_secret='***', "
            f"username={self.username!r}, password='***')"
        )


def select_auth_mode(credentials: Credentials) -> AuthMode:
    """Decide which authentication scheme applies."""
    if credentials.username and credentials.password:
        return AuthMode.BASIC
    if credentials.api_key and credentials.api_secret:
        return AuthMode.API_KEY
    return AuthMode.NONE


def basic_auth_value(username: str, password: str) -> str:
    """Return the ``Authorization`` header value for HTTP Basic auth."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def auth_headers(credentials: Credentials) -> dict[str, str]:
    """Build the authentication headers for the configured credentials.

    Args:
        credentials: Client credential state.

    Returns:
        Headers to add to the request; empty in no-auth mode.
    """
    mode = select_auth_mode(credentials)
    if mode is AuthMode.BASIC:
        return {
            "Authorization": basic_auth_value(credentials.username, credentials.password),
            PEER_HEADER: PEER_HEADER_VALUE,
        }
    if mode is AuthMode.API_KEY:
        return {
            API_KEY_HEADER: credentials.api_key,
            API_SECRET_HEADER: credentials.api_secret,
        }
    return {}
