"""Configuration loading and logging setup for the Scheduler0 client."""

import json
import logging
import os
import pathlib

import pydantic
import structlog

from .client import DEFAULT_API_VERSION, DEFAULT_TIMEOUT, SchedulerClient

CONFIG_ENV_VAR = "SCHEDULER0_CLIENT_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "scheduler0.json"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for a Scheduler0 client."""

    model_config = pydantic.ConfigDict(frozen=True)

    base_url: str = pydantic.Field(description="Base URL of the Scheduler0 server")
    api_version: str = pydantic.Field(
        DEFAULT_API_VERSION,
        description="API version used in the path prefix",
        min_length=1,
    )
    api_key: str = pydantic.Field("", description="API key for client authentication")
    api_secret: str = pydantic.Field("", description="API secret paired with api_key")
    username: str = pydantic.Field("", description="Peer username for basic auth")
    password: str = pydantic.Field("", description="Peer password for basic auth")
    account_id: str = pydantic.Field("", description="Default X-Account-ID value")
    timeout: float = pydantic.Field(
        DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str | pathlib.Path) -> ClientConfig:
    """Load configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If a value is missing or invalid.
    """
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def create_client(config: ClientConfig, **kwargs) -> SchedulerClient:
    """Construct a client from validated config.

    Extra keyword arguments (e.g., ``transport``) are passed to
    :class:`SchedulerClient`.
    """
    client = SchedulerClient(
        base_url=config.base_url,
        api_version=config.api_version,
        api_key=config.api_key,
        api_secret=config.api_secret,
        username=config.username,
        password=config.password,
        account_id=config.account_id,
        timeout=config.timeout,
        **kwargs,
    )
    logger.info("Created REST client", base_url=config.base_url)
    return client


def create_client_from_file(config_path: str | None = None, **kwargs) -> SchedulerClient:
    """Create a client using a config path or the environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    config = load_config(resolved_path)
    configure_logging(config.log_level)
    return create_client(config, **kwargs)
