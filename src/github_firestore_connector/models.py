"""Record types exchanged between the source API, pipelines and output connectors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from github_firestore_connector.exceptions import InvalidArgumentError


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Normalize a datetime to aware UTC (naive values are assumed to be UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp as returned by the GitHub API."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    # fromisoformat() only learned the "Z" suffix in 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid timestamp: {value!r}") from e


def format_timestamp(dt: datetime) -> str:
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def _require_text(value: Any, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{label} cannot be blank")


def _require_keys(data: Any, keys: tuple[str, ...], label: str) -> None:
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"{label} must be a mapping, got {type(data).__name__}")
    missing = [k for k in keys if k not in data]
    if missing:
        raise InvalidArgumentError(f"{label} missing keys: {', '.join(missing)}")


@dataclass(frozen=True)
class GitHubIssue:
    """A GitHub issue with the fields needed for synchronization."""

    id: int
    title: str
    state: str
    html_url: str
    created_at: datetime

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise InvalidArgumentError(f"Issue ID must be a positive integer, got {self.id!r}")
        _require_text(self.title, "Issue title")
        _require_text(self.state, "Issue state")
        _require_text(self.html_url, "Issue HTML URL")
        if not isinstance(self.created_at, datetime):
            raise InvalidArgumentError("Issue created date must be a datetime")

        object.__setattr__(self, "state", self.state.lower())
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GitHubIssue":
        """Create a GitHubIssue from a GitHub REST API issue payload.

        Extra keys in the payload (user, labels, body, ...) are ignored.

        Raises:
            InvalidArgumentError: If a required key is missing or invalid
        """
        _require_keys(data, ("id", "title", "state", "html_url", "created_at"), "Issue payload")

        return cls(
            id=data["id"],
            title=data["title"],
            state=data["state"],
            html_url=data["html_url"],
            created_at=parse_timestamp(data["created_at"]),
        )


@dataclass(frozen=True)
class FirestoreIssueDocument:
    """A GitHub issue as stored in Firestore, stamped with its sync time."""

    id: str
    title: str
    state: str
    html_url: str
    created_at: datetime
    synced_at: datetime

    def __post_init__(self) -> None:
        _require_text(self.id, "Document ID")
        _require_text(self.title, "Issue title")
        _require_text(self.state, "Issue state")
        _require_text(self.html_url, "Issue HTML URL")
        if not isinstance(self.created_at, datetime):
            raise InvalidArgumentError("Issue created date must be a datetime")
        if not isinstance(self.synced_at, datetime):
            raise InvalidArgumentError("Sync timestamp must be a datetime")

        object.__setattr__(self, "state", self.state.lower())
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))
        object.__setattr__(self, "synced_at", ensure_utc(self.synced_at))

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"

    @classmethod
    def from_github_issue(
        cls, issue: GitHubIssue, synced_at: datetime | None = None
    ) -> "FirestoreIssueDocument":
        """Build a document from an issue, stamping ``synced_at`` (defaults to now)."""
        return cls(
            id=str(issue.id),
            title=issue.title,
            state=issue.state,
            html_url=issue.html_url,
            created_at=issue.created_at,
            synced_at=synced_at if synced_at is not None else utc_now(),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "state": self.state,
            "html_url": self.html_url,
            "created_at": format_timestamp(self.created_at),
            "synced_at": format_timestamp(self.synced_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FirestoreIssueDocument":
        """Create FirestoreIssueDocument from dictionary.

        Raises:
            InvalidArgumentError: If a required key is missing or invalid
        """
        _require_keys(
            data,
            ("id", "title", "state", "html_url", "created_at", "synced_at"),
            "Document",
        )
        return cls(
            id=data["id"],
            title=data["title"],
            state=data["state"],
            html_url=data["html_url"],
            created_at=parse_timestamp(data["created_at"]),
            synced_at=parse_timestamp(data["synced_at"]),
        )


@dataclass(frozen=True)
class SyncResult(ABC):
    """Outcome of pushing a batch of records through a pipeline and connector.

    Only the concrete variants (SyncSuccess, SyncPartialFailure, SyncFailure)
    can be created.
    """

    duration: timedelta

    def __post_init__(self) -> None:
        if not isinstance(self.duration, timedelta) or self.duration < timedelta(0):
            raise InvalidArgumentError("Duration must be a non-negative timedelta")

    @property
    def is_success(self) -> bool:
        return isinstance(self, SyncSuccess)

    @property
    def is_partial_failure(self) -> bool:
        return isinstance(self, SyncPartialFailure)

    @property
    def is_failure(self) -> bool:
        return isinstance(self, SyncFailure)

    @abstractmethod
    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        pass


@dataclass(frozen=True)
class SyncSuccess(SyncResult):
    processed_count: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.processed_count < 0:
            raise InvalidArgumentError("Processed count cannot be negative")

    def to_dict(self) -> dict:
        return {
            "status": "success",
            "processed_count": self.processed_count,
            "duration_sec": self.duration.total_seconds(),
        }


@dataclass(frozen=True)
class SyncPartialFailure(SyncResult):
    processed_count: int = 0
    failed_count: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.processed_count < 0:
            raise InvalidArgumentError("Processed count cannot be negative")
        if self.failed_count <= 0:
            raise InvalidArgumentError("Failed count must be positive for partial failure")
        if not self.errors:
            raise InvalidArgumentError("Errors cannot be empty for partial failure")
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def total_attempted(self) -> int:
        return self.processed_count + self.failed_count

    @property
    def success_rate(self) -> float:
        total = self.total_attempted
        return self.processed_count / total if total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "status": "partial_failure",
            "processed_count": self.processed_count,
            "failed_count": self.failed_count,
            "errors": list(self.errors),
            "duration_sec": self.duration.total_seconds(),
        }


@dataclass(frozen=True)
class SyncFailure(SyncResult):
    error: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.error or not self.error.strip():
            raise InvalidArgumentError("Error message cannot be blank")

    def to_dict(self) -> dict:
        return {
            "status": "failure",
            "error": self.error,
            "duration_sec": self.duration.total_seconds(),
        }
