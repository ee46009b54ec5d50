"""Request and response types for the Scheduler0 REST API.

Pydantic models mirroring the JSON exchanged with the server. Wire names
are camelCase; Python attributes are snake_case. Response models default
every field so partial payloads still validate.

Every successful response is wrapped in an envelope ``{success, data}``;
collection endpoints nest ``total``, ``offset``, ``limit`` and a named
item list under ``data``.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base model using camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountScopedRequest(ApiModel):
    """Request body that can scope the call to an account.

    ``account_id`` is never serialized; it only feeds the ``X-Account-ID``
    header when no explicit override is given.
    """

    account_id: int | str | None = Field(default=None, exclude=True)

    def account_id_candidate(self) -> int | str | None:
        return self.account_id


class Response(ApiModel, Generic[T]):
    """Standard ``{success, data}`` response envelope."""

    success: bool = False
    data: T | None = None


class Page(ApiModel):
    """Pagination fields shared by collection responses."""

    total: int = 0
    offset: int = 0
    limit: int = 0


# ---------------------------------------------------------------------------
# Accounts and features
# ---------------------------------------------------------------------------


class AccountFeature(ApiModel):
    account_id: int = 0
    feature_id: int = 0
    feature: str = ""


class Account(ApiModel):
    id: int = 0
    name: str = ""
    features: list[AccountFeature] = Field(default_factory=list)
    date_created: str = ""
    date_modified: str | None = None


class AccountCreateRequest(ApiModel):
    name: str


class AccountExecutionCount(ApiModel):
    """Execution quota counters for an account."""

    model_config = ConfigDict(extra="allow")

    account_id: int = 0
    execution_count: int = 0


class Feature(ApiModel):
    id: int = 0
    name: str = ""
    date_created: str = ""
    date_modified: str | None = None


class FeatureRequest(AccountScopedRequest):
    """Adds a feature to, or removes it from, an account."""

    feature_id: int


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class Credential(ApiModel):
    id: int = 0
    account_id: int = 0
    archived: bool = False
    api_key: str = ""
    api_secret: str = ""
    date_created: str = ""
    date_modified: str | None = None
    date_deleted: str | None = None
    created_by: str = ""
    modified_by: str | None = None
    deleted_by: str | None = None
    archived_by: str | None = None


class CredentialCreateRequest(AccountScopedRequest):
    archived: bool | None = None
    created_by: str


class CredentialUpdateRequest(AccountScopedRequest):
    archived: bool | None = None
    modified_by: str


class CredentialDeleteRequest(AccountScopedRequest):
    deleted_by: str


class CredentialArchiveRequest(AccountScopedRequest):
    archived_by: str


class CredentialPage(Page):
    credentials: list[Credential] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Executions
# ---------------------------------------------------------------------------


class Execution(ApiModel):
    id: int = 0
    account_id: int = 0
    unique_id: str = ""
    state: int = 0
    node_id: int = 0
    job_id: int = 0
    last_execution_datetime: str = ""
    next_execution_datetime: str = ""
    job_queue_version: int = 0
    execution_version: int = 0
    date_created: str = ""
    date_modified: str | None = None


class ExecutionPage(Page):
    executions: list[Execution] = Field(default_factory=list)


class ExecutionBucket(ApiModel):
    """Execution counts for one minute of a date-range summary."""

    model_config = ConfigDict(extra="allow")

    time: str = ""
    scheduled: int = 0
    success: int = 0
    failed: int = 0


class DateRangeAnalytics(ApiModel):
    """Executions grouped by minute buckets, all times in UTC."""

    model_config = ConfigDict(extra="allow")

    account_id: int = 0
    start_date: str = ""
    start_time: str = ""
    buckets: list[ExecutionBucket] = Field(default_factory=list)


class ExecutionTotals(ApiModel):
    """Total scheduled, succeeded and failed executions for an account."""

    model_config = ConfigDict(extra="allow")

    account_id: int = 0
    scheduled: int = 0
    success: int = 0
    failed: int = 0


# ---------------------------------------------------------------------------
# Executors
# ---------------------------------------------------------------------------


class Executor(ApiModel):
    id: int = 0
    account_id: int = 0
    name: str = ""
    type: str = ""
    region: str = ""
    cloud_provider: str = ""
    cloud_resource_url: str = ""
    cloud_api_key: str = ""
    cloud_api_secret: str = ""
    webhook_url: str = ""
    webhook_secret: str = ""
    webhook_method: str = ""
    date_created: str = ""
    date_modified: str | None = None
    date_deleted: str | None = None
    created_by: str = ""
    modified_by: str | None = None
    deleted_by: str | None = None


class _ExecutorFields(AccountScopedRequest):
    name: str
    type: str
    region: str = ""
    cloud_provider: str = ""
    cloud_resource_url: str = ""
    cloud_api_key: str | None = None
    cloud_api_secret: str | None = None
    webhook_url: str | None = None
    webhook_secret: str | None = None
    webhook_method: str | None = None


class ExecutorCreateRequest(_ExecutorFields):
    created_by: str


class ExecutorUpdateRequest(_ExecutorFields):
    modified_by: str


class ExecutorDeleteRequest(AccountScopedRequest):
    deleted_by: str


class ExecutorPage(Page):
    executors: list[Executor] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


class Job(ApiModel):
    id: int = 0
    account_id: int = 0
    project_id: int = 0
    executor_id: int | None = None
    data: str = ""
    spec: str = ""
    start_date: str = ""
    end_date: str = ""
    last_execution_date: str = ""
    timezone: str = ""
    timezone_offset: int = 0
    retry_max: int = 0
    execution_id: str = ""
    status: str = ""
    date_created: str = ""
    date_modified: str | None = None
    created_by: str = ""
    modified_by: str | None = None
    deleted_by: str | None = None


class JobCreateRequest(AccountScopedRequest):
    project_id: int
    timezone: str
    executor_id: int | None = None
    data: str | None = None
    spec: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    timezone_offset: int | None = None
    retry_max: int | None = None
    status: str | None = None
    created_by: str


class JobUpdateRequest(AccountScopedRequest):
    project_id: int | None = None
    executor_id: int | None = None
    data: str | None = None
    spec: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    timezone: str | None = None
    timezone_offset: int | None = None
    retry_max: int | None = None
    status: str | None = None
    modified_by: str


class JobDeleteRequest(AccountScopedRequest):
    deleted_by: str


class JobPage(Page):
    jobs: list[Job] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class Project(ApiModel):
    id: int = 0
    account_id: int = 0
    name: str = ""
    description: str = ""
    date_created: str = ""
    date_modified: str | None = None
    created_by: str = ""
    modified_by: str | None = None
    deleted_by: str | None = None


class ProjectCreateRequest(AccountScopedRequest):
    name: str
    description: str = ""
    created_by: str


class ProjectUpdateRequest(AccountScopedRequest):
    description: str
    modified_by: str


class ProjectDeleteRequest(AccountScopedRequest):
    deleted_by: str


class ProjectPage(Page):
    projects: list[Project] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Async tasks
# ---------------------------------------------------------------------------


class AsyncTask(ApiModel):
    """Server-side task tracking an asynchronous request (e.g., batch job creation)."""

    id: int = 0
    request_id: str = ""
    input: str = ""
    output: str = ""
    service: str = ""
    state: int = 0
    date_created: str = ""


# ---------------------------------------------------------------------------
# AI prompt
# ---------------------------------------------------------------------------


class PromptJobRequest(ApiModel):
    prompt: str
    purposes: list[str] | None = None
    events: list[str] | None = None
    recipients: list[str] | None = None
    channels: list[str] | None = None
    timezone: str | None = None


class PromptJobResponse(ApiModel):
    """A job configuration generated from a prompt."""

    kind: str = ""
    purpose: str = ""
    subject: str = ""
    next_run_at: str | None = None
    recurrence: str = ""
    event: str = ""
    delivery: str = ""
    cron_expression: str = ""
    channel: str = ""
    recipients: list[str] = Field(default_factory=list)
    start_date: str | None = None
    end_date: str | None = None
    timezone: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Cluster backups
# ---------------------------------------------------------------------------


class BackupRestoreProgress(ApiModel):
    """Progress of a backup or restore operation.

    ``operation_type`` is one of "backup", "restore" or "backup-to-file";
    ``status`` one of "idle", "in-progress", "completed" or "failed";
    ``progress`` runs from 0 to 100.
    """

    operation_type: str = ""
    status: str = ""
    progress: int = 0
    message: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    backup_path: str = ""


class BackupToFileRequest(ApiModel):
    dest_path: str


class RestoreRequest(ApiModel):
    backup_path: str


# ---------------------------------------------------------------------------
# Healthcheck
# ---------------------------------------------------------------------------


class RaftStats(BaseModel):
    """Raft statistics as reported by the leader (snake_case on the wire)."""

    applied_index: str = ""
    commit_index: str = ""
    fsm_pending: str = ""
    last_contact: str = ""
    last_log_index: str = ""
    last_log_term: str = ""
    last_snapshot_index: str = ""
    last_snapshot_term: str = ""
    latest_configuration: str = ""
    latest_configuration_index: str = ""
    num_peers: str = ""
    protocol_version: str = ""
    protocol_version_max: str = ""
    protocol_version_min: str = ""
    snapshot_version_max: str = ""
    snapshot_version_min: str = ""
    state: str = ""
    term: str = ""


class HealthcheckData(ApiModel):
    leader_address: str = ""
    leader_id: str = ""
    raft_stats: RaftStats = Field(default_factory=RaftStats)


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

AccountResponse = Response[Account]
AccountExecutionCountResponse = Response[AccountExecutionCount]
AccountExecutionCountIncreaseResponse = Response[AccountExecutionCount]
FeaturesResponse = Response[list[Feature]]
FeatureRequestResponse = Response[AccountFeature]
CredentialResponse = Response[Credential]
PaginatedCredentialsResponse = Response[CredentialPage]
PaginatedExecutionsResponse = Response[ExecutionPage]
DateRangeAnalyticsResponse = Response[DateRangeAnalytics]
ExecutionTotalsResponse = Response[ExecutionTotals]
ExecutorResponse = Response[Executor]
PaginatedExecutorsResponse = Response[ExecutorPage]
JobResponse = Response[Job]
BatchJobResponse = Response[str]
PaginatedJobsResponse = Response[JobPage]
ProjectResponse = Response[Project]
PaginatedProjectsResponse = Response[ProjectPage]
AsyncTaskResponse = Response[AsyncTask]
BackupRestoreResponse = Response[dict[str, str]]
BackupRestoreProgressResponse = Response[BackupRestoreProgress]
HealthcheckResponse = Response[HealthcheckData]
