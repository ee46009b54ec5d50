"""Scheduler0 client.

Python client for the Scheduler0 job-scheduling service REST API: typed
request/response models, API-key and peer authentication, and per-call
account scoping.

Exports:
    SchedulerClient: HTTP client with authentication and error handling.
    RequestBuilder: Builds authenticated, account-scoped requests.
    types: Module containing Pydantic models for API requests and responses.
    DEFAULT_API_VERSION: Default API version.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from . import types
from .builder import RequestBuilder
from .client import DEFAULT_API_VERSION, DEFAULT_TIMEOUT, SchedulerClient
from .errors import (
    APIError,
    ConfigError,
    DecodeError,
    EncodeError,
    Scheduler0Error,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_TIMEOUT",
    "APIError",
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "RequestBuilder",
    "Scheduler0Error",
    "SchedulerClient",
    "TransportError",
    "types",
]
