"""Core client contract definitions and error taxonomy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from issue_tracker_interface.issue import CustomField, Issue, Version
from issue_tracker_interface.session import Session

__all__ = [
    "ErrorKind",
    "IssueTrackerClient",
    "QueryError",
    "TrackerError",
    "TransitionOutcome",
]


class ErrorKind(str, Enum):
    CONNECT = "connect"
    AUTH = "auth"
    PERMISSION = "permission"
    TRANSPORT = "transport"
    REMOTE = "remote"
    QUERY = "query"
    ACTION_NOT_AVAILABLE = "action_not_available"
    ACTION_FAILED = "action_failed"


class TrackerError(Exception):
    """Base exception for every failure raised by, or recorded from, the remote tracker."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class QueryError(TrackerError):
    """Raised when a search query is malformed or cannot be executed."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.QUERY, message)


@dataclass
class TransitionOutcome:
    """What happened while resolving and executing a workflow action."""

    issue_key: str
    action_name: str
    matched: list[str] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)
    errors: list[TrackerError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.succeeded)

    @property
    def error_kind(self) -> ErrorKind | None:
        """ACTION_NOT_AVAILABLE when nothing matched, ACTION_FAILED when every match failed."""
        if not self.matched:
            return ErrorKind.ACTION_NOT_AVAILABLE
        if not self.succeeded:
            return ErrorKind.ACTION_FAILED
        return None


class IssueTrackerClient(ABC):
    """Stateless operations against an authenticated Session.

    Only ``find_issues_by_query`` lets an error escape (as ``QueryError``).
    Everything else is caught at the operation boundary, logged, and
    collapsed to ``False`` or an empty list.
    """

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    @abstractmethod
    def find_issues_by_query(self, session: Session, query: str) -> list[Issue]:
        """Search issues by query.

        Args:
            session: An authenticated session
            query:   Query text evaluated server-side

        Returns:
            The matching issues, possibly empty. Never a partial list.

        Raises:
            QueryError: If the remote service rejects or fails the query

        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------
    @abstractmethod
    def resolve_workflow_action(self, session: Session, issue_key: str, action_name: str) -> TransitionOutcome:
        """Discover the available actions for the issue and execute every one named action_name."""
        raise NotImplementedError

    def apply_workflow_action(self, session: Session, issue_key: str, action_name: str) -> bool:
        """Return True if at least one matching workflow action executed successfully."""
        return self.resolve_workflow_action(session, issue_key, action_name).ok

    # ------------------------------------------------------------------
    # Comments and fields
    # ------------------------------------------------------------------
    @abstractmethod
    def add_comment(self, session: Session, issue_key: str, text: str) -> bool:
        """Post a comment. Returns False on any failure."""
        raise NotImplementedError

    @abstractmethod
    def update_field(self, session: Session, issue_key: str, field_id: str, values: str | Sequence[str]) -> bool:
        """Set one field to one or more values in a single call.

        Notes on usage:
            A bare string is treated as a one-element value sequence.
            Multi-valued fields are replaced wholesale, so pass every value the field should keep.
        """
        raise NotImplementedError

    @abstractmethod
    def update_fixed_versions(self, session: Session, issue: Issue, version_ids: Iterable[str]) -> bool:
        """Replace the fix versions of the issue with version_ids."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------
    @abstractmethod
    def get_versions(self, session: Session, project_key: str) -> list[Version]:
        """Return all versions of the project. Empty on any failure."""
        raise NotImplementedError

    @abstractmethod
    def get_custom_fields(self, session: Session) -> list[CustomField]:
        """Return all custom fields of the instance. Empty on any failure."""
        raise NotImplementedError
