"""Scheduler0 REST API client.

Provides the HTTP client with API-key or peer (basic) authentication,
per-call account scoping, thread safety, and response validation using
Pydantic models.
"""

import threading
import time
from typing import Any, TypeVar, overload

import httpx
import pydantic
import structlog

from . import types
from .auth import Credentials, select_auth_mode
from .builder import RequestBuilder
from .errors import APIError, ConfigError, DecodeError, TransportError

logger = structlog.get_logger(__name__)

DEFAULT_API_VERSION = "v1"

DEFAULT_TIMEOUT = 30.0

# Status codes at or above this value are API errors.
ERROR_STATUS_THRESHOLD = 400

T = TypeVar("T")

_adapters: dict[Any, pydantic.TypeAdapter] = {}


def _adapter(result_type: Any) -> pydantic.TypeAdapter:
    adapter = _adapters.get(result_type)
    if adapter is None:
        adapter = _adapters[result_type] = pydantic.TypeAdapter(result_type)
    return adapter


@overload
def decode_response(response: httpx.Response, result_type: None = None) -> None: ...


@overload
def decode_response(response: httpx.Response, result_type: type[T]) -> T: ...


def decode_response(response: httpx.Response, result_type: Any = None) -> Any:
    """Classify a response and decode its body.

    Args:
        response: Response with its body already read.
        result_type: Type to validate the JSON body against, or None when
            the call has no result.

    Returns:
        The validated result, or None when no result type was requested.

    Raises:
        APIError: If the status code is 400 or above.
        DecodeError: If the body is not valid JSON for ``result_type``.
    """
    if response.status_code >= ERROR_STATUS_THRESHOLD:
        logger.error("API error response", status_code=response.status_code)
        raise APIError(response.status_code, response.text)

    if result_type is None:
        return None

    try:
        return _adapter(result_type).validate_json(response.content)
    except pydantic.ValidationError as exc:
        msg = f"Failed to decode response body: {exc}"
        raise DecodeError(msg, response.status_code, response.text) from exc


class SchedulerClient:
    """HTTP client for the Scheduler0 REST API.

    Builds requests through :class:`RequestBuilder`, sends them, and returns
    Pydantic-validated envelopes. Configuration is fixed at construction.

    Thread-safe through thread-local storage of httpx.Client instances.
    Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        base_url: str,
        api_version: str = DEFAULT_API_VERSION,
        *,
        api_key: str = "",
        api_secret: str = "",
        username: str = "",
        password: str = "",
        account_id: str = "",
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the REST API client.

        Args:
            base_url: Base URL of the Scheduler0 server (e.g., "http://localhost:9090").
            api_version: API version used in the path prefix (default: v1).
            api_key: API key, used together with api_secret.
            api_secret: API secret, used together with api_key.
            username: Peer username, used together with password. Basic
                auth wins over the API key pair when both are set.
            password: Peer password.
            account_id: Default account identifier sent as X-Account-ID.
            timeout: Request timeout in seconds (default: 30.0); None
                disables it.
            transport: Optional httpx transport (e.g., httpx.MockTransport).

        Raises:
            ConfigError: If base_url or api_version is invalid or timeout is
                not positive.
        """
        if timeout is not None and timeout <= 0:
            msg = "timeout must be positive"
            raise ConfigError(msg)

        self._builder = RequestBuilder(
            base_url=base_url,
            api_version=api_version,
            credentials=Credentials(
                api_key=api_key,
                api_secret=api_secret,
                username=username,
                password=password,
            ),
            account_id=account_id,
            timeout=timeout,
        )
        self._transport = transport
        self._timeout = timeout

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()
        # Every client handed out, across threads, so close() reaches them all
        self._clients: list[httpx.Client] = []
        self._clients_lock = threading.Lock()

        logger.debug(
            "Created REST client",
            base_url=str(self.base_url),
            api_version=api_version,
            auth_mode=select_auth_mode(self._builder.credentials).value,
        )

    @classmethod
    def with_api_key(
        cls,
        base_url: str,
        api_version: str,
        api_key: str,
        api_secret: str,
        account_id: str = "",
        **kwargs: Any,
    ) -> "SchedulerClient":
        """Create a client authenticating with an API key and secret."""
        return cls(
            base_url,
            api_version,
            api_key=api_key,
            api_secret=api_secret,
            account_id=account_id,
            **kwargs,
        )

    @classmethod
    def with_basic_auth(
        cls,
        base_url: str,
        api_version: str,
        username: str,
        password: str,
        **kwargs: Any,
    ) -> "SchedulerClient":
        """Create a client for peer communication using basic auth."""
        return cls(base_url, api_version, username=username, password=password, **kwargs)

    @property
    def base_url(self) -> httpx.URL:
        return self._builder.base_url

    @property
    def api_version(self) -> str:
        return self._builder.api_version

    @property
    def account_id(self) -> str:
        return self._builder.account_id

    @property
    def builder(self) -> RequestBuilder:
        return self._builder

    @property
    def client(self) -> httpx.Client:
        """Get or create thread-local httpx client.

        Each thread gets its own httpx.Client instance for thread safety.
        Clients are created lazily and reused within the same thread.

        Returns:
            Thread-local httpx.Client instance.
        """
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            http_client = httpx.Client(
                transport=self._transport,
                timeout=self._timeout,
                follow_redirects=True,
            )
            with self._clients_lock:
                self._clients = [c for c in self._clients if not c.is_closed]
                self._clients.append(http_client)
            self._local.client = http_client
        return self._local.client

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close every HTTP client this instance created, in any thread.

        A thread that keeps using the instance afterwards gets a fresh client.
        """
        with self._clients_lock:
            clients, self._clients = self._clients, []
        for http_client in clients:
            if not http_client.is_closed:
                http_client.close()

    def send(self, request: httpx.Request, result_type: Any = None) -> Any:
        """Send a built request and decode the response.

        Args:
            request: Request produced by the builder.
            result_type: Type to decode the body into, or None for calls
                without a result.

        Returns:
            Decoded result, or None.

        Raises:
            TransportError: If the HTTP exchange fails.
            APIError: If the server returns a status of 400 or above.
            DecodeError: If the body does not match ``result_type``.
        """
        start_time = time.time()
        logger.debug("Making API request", method=request.method, url=str(request.url))
        try:
            response = self.client.send(request)
        except httpx.RequestError as exc:
            duration = time.time() - start_time
            logger.exception(
                "API request failed",
                method=request.method,
                url=str(request.url),
                duration_seconds=round(duration, 3),
            )
            msg = f"{request.method} {request.url} failed: {exc}"
            raise TransportError(msg) from exc

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )
        return decode_response(response, result_type)

    def _call(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        result_type: Any = None,
        *,
        account_id: str | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        request = self._builder.build(
            method,
            endpoint,
            body,
            account_id=account_id,
            params=params,
        )
        return self.send(request, result_type)

    # -----------------------------------------------------------------------
    # Accounts
    # -----------------------------------------------------------------------

    def create_account(self, body: types.AccountCreateRequest) -> types.AccountResponse:
        """Create a new account."""
        return self._call("POST", "/accounts", body, types.AccountResponse)

    def get_account(self, account_id: str) -> types.AccountResponse:
        """Fetch a single account by ID."""
        return self._call("GET", f"/accounts/{account_id}", None, types.AccountResponse)

    def get_account_execution_count(
        self,
        account_id: str,
    ) -> types.AccountExecutionCountResponse:
        """Fetch the execution count of an account.

        The ID is used both in the path and as the X-Account-ID header.
        """
        return self._call(
            "GET",
            f"/accounts/{account_id}/execution-count",
            None,
            types.AccountExecutionCountResponse,
            account_id=account_id,
        )

    def increase_account_execution_count(
        self,
        account_id: str,
        count: int,
    ) -> types.AccountExecutionCountIncreaseResponse:
        """Increase the execution count of an account by ``count``."""
        return self._call(
            "PUT",
            f"/accounts/{account_id}/execution-count",
            {"count": count},
            types.AccountExecutionCountIncreaseResponse,
            account_id=account_id,
        )

    def add_feature_to_account(
        self,
        account_id: str,
        body: types.FeatureRequest,
    ) -> types.FeatureRequestResponse:
        return self._call(
            "PUT",
            f"/accounts/{account_id}/feature",
            body,
            types.FeatureRequestResponse,
            account_id=account_id,
        )

    def remove_feature_from_account(self, account_id: str, body: types.FeatureRequest) -> None:
        self._call("DELETE", f"/accounts/{account_id}/feature", body, account_id=account_id)

    def add_all_features_to_account(self, account_id: str) -> None:
        self._call("PUT", f"/accounts/{account_id}/features/all", account_id=account_id)

    def remove_all_features_from_account(self, account_id: str) -> None:
        self._call("DELETE", f"/accounts/{account_id}/features/all", account_id=account_id)

    # -----------------------------------------------------------------------
    # Features
    # -----------------------------------------------------------------------

    def list_features(self) -> types.FeaturesResponse:
        """List all available features."""
        return self._call("GET", "/features", None, types.FeaturesResponse)

    # -----------------------------------------------------------------------
    # Credentials
    # -----------------------------------------------------------------------

    def list_credentials(
        self,
        limit: int = 10,
        offset: int = 0,
        order_by: str = "",
        order_by_direction: str = "",
    ) -> types.PaginatedCredentialsResponse:
        """List credentials.

        Args:
            limit: Maximum number of items to return.
            offset: Number of items to skip.
            order_by: Field to order by (e.g., "date_created").
            order_by_direction: "asc" or "desc".

        Returns:
            Paginated credentials envelope.
        """
        params = _page_params(limit, offset, order_by, order_by_direction)
        return self._call(
            "GET",
            "/credentials",
            None,
            types.PaginatedCredentialsResponse,
            params=params,
        )

    def create_credential(
        self,
        body: types.CredentialCreateRequest,
    ) -> types.CredentialResponse:
        return self._call("POST", "/credentials", body, types.CredentialResponse)

    def get_credential(self, credential_id: str) -> types.CredentialResponse:
        return self._call("GET", f"/credentials/{credential_id}", None, types.CredentialResponse)

    def update_credential(
        self,
        credential_id: str,
        body: types.CredentialUpdateRequest,
    ) -> types.CredentialResponse:
        return self._call(
            "PUT",
            f"/credentials/{credential_id}",
            body,
            types.CredentialResponse,
        )

    def delete_credential(
        self,
        credential_id: str,
        body: types.CredentialDeleteRequest,
    ) -> None:
        self._call("DELETE", f"/credentials/{credential_id}", body)

    def archive_credential(
        self,
        credential_id: str,
        archived_by: str,
        account_id: str | None = None,
    ) -> None:
        """Archive a credential.

        Args:
            credential_id: ID of the credential.
            archived_by: Identifier of the user archiving it.
            account_id: Optional override of the client's default account.
        """
        body = types.CredentialArchiveRequest(archived_by=archived_by)
        self._call(
            "POST",
            f"/credentials/{credential_id}/archive",
            body,
            account_id=account_id,
        )

    # -----------------------------------------------------------------------
    # Executions
    # -----------------------------------------------------------------------

    def list_executions(
        self,
        limit: int = 10,
        offset: int = 0,
        start_date: str = "",
        end_date: str = "",
        project_id: int = 0,
        job_id: int = 0,
        state: str = "",
        order_by: str = "",
        order_direction: str = "",
        account_id: int = 0,
    ) -> types.PaginatedExecutionsResponse:
        """List job executions.

        Empty or zero filters are left out of the query. ``account_id`` is
        sent as the account override only when positive.
        """
        params = {"limit": str(limit), "offset": str(offset)}
        if start_date:
            params["startDate"] = start_date
        if end_date:
            params["endDate"] = end_date
        if project_id > 0:
            params["projectId"] = str(project_id)
        if job_id > 0:
            params["jobId"] = str(job_id)
        if state:
            params["state"] = state
        if order_by:
            params["orderBy"] = order_by
        if order_direction:
            params["orderDirection"] = order_direction

        return self._call(
            "GET",
            "/executions",
            None,
            types.PaginatedExecutionsResponse,
            account_id=_positive_id(account_id),
            params=params,
        )

    def get_date_range_analytics(
        self,
        start_date: str,
        start_time: str,
        account_id: int = 0,
    ) -> types.DateRangeAnalyticsResponse:
        """Fetch execution counts grouped by minute for a date range.

        Dates and times are UTC.
        """
        return self._call(
            "GET",
            "/executions-summary",
            None,
            types.DateRangeAnalyticsResponse,
            account_id=_positive_id(account_id),
            params={"startDate": start_date, "startTime": start_time},
        )

    def get_execution_totals(self, account_id: int = 0) -> types.ExecutionTotalsResponse:
        """Fetch scheduled, succeeded and failed execution totals."""
        return self._call(
            "GET",
            "/executions-totals",
            None,
            types.ExecutionTotalsResponse,
            account_id=_positive_id(account_id),
        )

    # -----------------------------------------------------------------------
    # Executors
    # -----------------------------------------------------------------------

    def list_executors(
        self,
        account_id: int = 0,
        limit: int = 10,
        offset: int = 0,
        order_by: str = "",
        order_by_direction: str = "",
    ) -> types.PaginatedExecutorsResponse:
        params = _page_params(limit, offset, order_by, order_by_direction)
        return self._call(
            "GET",
            "/executors",
            None,
            types.PaginatedExecutorsResponse,
            account_id=_positive_id(account_id),
            params=params,
        )

    def create_executor(self, body: types.ExecutorCreateRequest) -> types.ExecutorResponse:
        return self._call("POST", "/executors", body, types.ExecutorResponse)

    def get_executor(self, executor_id: str) -> types.ExecutorResponse:
        return self._call("GET", f"/executors/{executor_id}", None, types.ExecutorResponse)

    def update_executor(
        self,
        executor_id: str,
        body: types.ExecutorUpdateRequest,
    ) -> types.ExecutorResponse:
        return self._call("PUT", f"/executors/{executor_id}", body, types.ExecutorResponse)

    def delete_executor(self, executor_id: str, body: types.ExecutorDeleteRequest) -> None:
        self._call("DELETE", f"/executors/{executor_id}", body)

    # -----------------------------------------------------------------------
    # Jobs
    # -----------------------------------------------------------------------

    def list_jobs(
        self,
        project_id: str = "",
        limit: int = 10,
        offset: int = 0,
        order_by: str = "",
        order_by_direction: str = "",
        account_id: str | None = None,
    ) -> types.PaginatedJobsResponse:
        """List jobs, optionally restricted to one project.

        Args:
            project_id: Project to filter by; "" lists all jobs of the account.
            limit: Maximum number of items to return.
            offset: Number of items to skip.
            order_by: Field to order by (e.g., "date_created").
            order_by_direction: "asc" or "desc".
            account_id: Optional override of the client's default account.

        Returns:
            Paginated jobs envelope.
        """
        params = _page_params(limit, offset, order_by, order_by_direction)
        if project_id:
            params["projectId"] = project_id
        return self._call(
            "GET",
            "/jobs",
            None,
            types.PaginatedJobsResponse,
            account_id=account_id,
            params=params,
        )

    def create_job(
        self,
        body: types.JobCreateRequest,
        account_id: str | None = None,
    ) -> types.BatchJobResponse:
        """Create a single job.

        The API only accepts batches, so this wraps ``body`` in a one-item
        batch. The server answers 202 Accepted with a request ID that can be
        polled through :meth:`get_async_task`.
        """
        return self.batch_create_jobs([body], account_id=account_id)

    def batch_create_jobs(
        self,
        jobs: list[types.JobCreateRequest],
        account_id: str | None = None,
    ) -> types.BatchJobResponse:
        """Create several jobs in one request."""
        return self._call(
            "POST",
            "/jobs",
            list(jobs),
            types.BatchJobResponse,
            account_id=account_id,
        )

    def get_job(self, job_id: str, account_id: str | None = None) -> types.JobResponse:
        return self._call(
            "GET",
            f"/jobs/{job_id}",
            None,
            types.JobResponse,
            account_id=account_id,
        )

    def update_job(
        self,
        job_id: str,
        body: types.JobUpdateRequest,
        account_id: str | None = None,
    ) -> types.JobResponse:
        return self._call(
            "PUT",
            f"/jobs/{job_id}",
            body,
            types.JobResponse,
            account_id=account_id,
        )

    def delete_job(
        self,
        job_id: str,
        body: types.JobDeleteRequest,
        account_id: str | None = None,
    ) -> None:
        self._call("DELETE", f"/jobs/{job_id}", body, account_id=account_id)

    # -----------------------------------------------------------------------
    # Projects
    # -----------------------------------------------------------------------

    def list_projects(
        self,
        account_id: int = 0,
        limit: int = 10,
        offset: int = 0,
        order_by: str = "",
        order_by_direction: str = "",
    ) -> types.PaginatedProjectsResponse:
        params = _page_params(limit, offset, order_by, order_by_direction)
        return self._call(
            "GET",
            "/projects",
            None,
            types.PaginatedProjectsResponse,
            account_id=_positive_id(account_id),
            params=params,
        )

    def create_project(self, body: types.ProjectCreateRequest) -> types.ProjectResponse:
        return self._call("POST", "/projects", body, types.ProjectResponse)

    def get_project(self, project_id: int) -> types.ProjectResponse:
        return self._call("GET", f"/projects/{project_id}", None, types.ProjectResponse)

    def update_project(
        self,
        project_id: int,
        body: types.ProjectUpdateRequest,
    ) -> types.ProjectResponse:
        return self._call("PUT", f"/projects/{project_id}", body, types.ProjectResponse)

    def delete_project(self, project_id: int, body: types.ProjectDeleteRequest) -> None:
        self._call("DELETE", f"/projects/{project_id}", body)

    # -----------------------------------------------------------------------
    # Async tasks and prompt
    # -----------------------------------------------------------------------

    def get_async_task(self, request_id: str) -> types.AsyncTaskResponse:
        """Fetch the async task tracking ``request_id``."""
        return self._call("GET", f"/async-tasks/{request_id}", None, types.AsyncTaskResponse)

    def create_job_from_prompt(
        self,
        body: types.PromptJobRequest,
    ) -> list[types.PromptJobResponse]:
        """Generate job configurations from a natural-language prompt.

        This endpoint consumes credits. The response is a bare JSON array,
        not an envelope.
        """
        return self._call("POST", "/prompt", body, list[types.PromptJobResponse])

    # -----------------------------------------------------------------------
    # Cluster backups
    # -----------------------------------------------------------------------

    def backup_database(self) -> types.BackupRestoreResponse:
        """Start a timestamped database backup."""
        return self._call("POST", "/cluster/backup", None, types.BackupRestoreResponse)

    def backup_database_to_file(self, dest_path: str) -> types.BackupRestoreResponse:
        """Start a database backup written to ``dest_path`` on the server."""
        return self._call(
            "POST",
            "/cluster/backup-to-file",
            types.BackupToFileRequest(dest_path=dest_path),
            types.BackupRestoreResponse,
        )

    def restore_database(self, backup_path: str) -> types.BackupRestoreResponse:
        """Start restoring the database from a backup file."""
        return self._call(
            "POST",
            "/cluster/restore",
            types.RestoreRequest(backup_path=backup_path),
            types.BackupRestoreResponse,
        )

    def get_backup_restore_progress(self) -> types.BackupRestoreProgressResponse:
        return self._call(
            "GET",
            "/cluster/backup-restore-progress",
            None,
            types.BackupRestoreProgressResponse,
        )

    # -----------------------------------------------------------------------
    # Healthcheck
    # -----------------------------------------------------------------------

    def healthcheck(self) -> types.HealthcheckResponse:
        """Fetch the current leader and Raft stats.

        Sent without credentials or account header, even when the client
        has them configured.
        """
        request = self._builder.build_unauthenticated("GET", "/healthcheck")
        return self.send(request, types.HealthcheckResponse)


def _page_params(
    limit: int,
    offset: int,
    order_by: str,
    order_by_direction: str,
) -> dict[str, str]:
    params = {"limit": str(limit), "offset": str(offset)}
    if order_by:
        params["orderBy"] = order_by
    if order_by_direction:
        params["orderByDirection"] = order_by_direction
    return params


def _positive_id(account_id: int) -> str | None:
    return str(account_id) if account_id > 0 else None
