"""Domain data models for the deployment pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

DEFAULT_EXTENSION = "js"


def normalize_extension(raw: Optional[str], default: str = DEFAULT_EXTENSION) -> str:
    """Clean a user-typed file suffix: trim, drop leading dots and inner whitespace."""
    cleaned = "".join((raw or "").strip().lstrip(".").split())
    return cleaned or default


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Artifact:
    """The staged code payload destined for a repository."""

    content: str
    origin_id: Optional[str] = None
    origin_title: Optional[str] = None
    extension: str = DEFAULT_EXTENSION
    timestamp: str = field(default_factory=_now_iso)

    def with_content(self, content: str) -> "Artifact":
        return replace(self, content=content)

    def with_extension(self, extension: str) -> "Artifact":
        return replace(self, extension=normalize_extension(extension, self.extension))

    def to_record(self) -> Dict[str, Any]:
        """Serialise to the persisted session record."""
        return {
            "code": self.content,
            "ticketId": self.origin_id,
            "ticketTitle": self.origin_title,
            "fileExtension": self.extension,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Artifact":
        return cls(
            content=data.get("code") or "",
            origin_id=data.get("ticketId") or None,
            origin_title=data.get("ticketTitle") or None,
            extension=normalize_extension(data.get("fileExtension")),
            timestamp=data.get("timestamp") or "",
        )


@dataclass
class DeploymentRequest:
    """User-configured parameters for one transfer attempt."""

    repository: str = ""
    branch: str = "main"
    file_path: str = ""
    commit_message: str = ""

    @property
    def file_name(self) -> str:
        return self.file_path.rstrip("/").split("/")[-1]


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class RepositoryDescriptor:
    """One selectable deployment target."""

    name: str
    description: str
    visibility: Visibility = Visibility.PUBLIC

    @property
    def is_private(self) -> bool:
        return self.visibility == Visibility.PRIVATE


@dataclass
class TransferResult:
    """Commit metadata returned by a successful push."""

    repository: str
    commit_sha: Optional[str] = None
    html_url: Optional[str] = None
    commit_url: Optional[str] = None
    size: Optional[int] = None
    encoding: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def short_sha(self) -> Optional[str]:
        return self.commit_sha[:7] if self.commit_sha else None

    @classmethod
    def from_payload(
        cls,
        repository: str,
        payload: Optional[Dict[str, Any]],
        commit_host: str = "https://github.com",
    ) -> "TransferResult":
        """Build a result from the `result` object of a /push-file response.

        The commit link is, in order of preference, the one the service
        supplied, one built from the repository and sha, or absent.
        """
        # The push already happened, so malformed metadata is dropped, never raised.
        payload = payload if isinstance(payload, dict) else {}
        commit = payload.get("commit")
        commit = commit if isinstance(commit, dict) else {}
        content = payload.get("content")
        content = content if isinstance(content, dict) else {}

        sha = _optional_str(commit.get("sha"))
        html_url = _optional_str(commit.get("html_url"))
        commit_url = html_url
        if not commit_url and sha:
            commit_url = f"{commit_host.rstrip('/')}/{repository}/commit/{sha}"

        try:
            size = int(content["size"]) if content.get("size") is not None else None
        except (TypeError, ValueError):
            size = None
        return cls(
            repository=repository,
            commit_sha=sha,
            html_url=html_url,
            commit_url=commit_url,
            size=size,
            encoding=_optional_str(content.get("encoding")),
            raw=payload,
        )


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


class AnnotationStatus(str, Enum):
    """Annotation sub-state of a successful deployment."""

    SKIPPED = "skipped"
    UPDATING = "updating"
    ANNOTATED = "annotated"
    FAILED = "failed"

    NOT_APPLICABLE = "skipped"


@dataclass(frozen=True)
class AnnotationResult:
    status: AnnotationStatus
    reason: Optional[str] = None

    @classmethod
    def skipped(cls, reason: Optional[str] = None) -> "AnnotationResult":
        return cls(status=AnnotationStatus.SKIPPED, reason=reason)

    @classmethod
    def updating(cls) -> "AnnotationResult":
        return cls(status=AnnotationStatus.UPDATING)

    @classmethod
    def annotated(cls) -> "AnnotationResult":
        return cls(status=AnnotationStatus.ANNOTATED)

    @classmethod
    def failed(cls, reason: str) -> "AnnotationResult":
        return cls(status=AnnotationStatus.FAILED, reason=reason)


@dataclass
class Ticket:
    """A work item as returned by the ticket endpoints."""

    id: str
    title: str = ""
    description: str = ""
    status: str = ""
    priority: str = ""
    type: str = ""
    assignee: Optional[str] = None
    labels: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Ticket":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            status=data.get("status") or "",
            priority=data.get("priority") or "",
            type=data.get("type") or "",
            assignee=data.get("assignee"),
            labels=list(data.get("labels") or []),
        )
