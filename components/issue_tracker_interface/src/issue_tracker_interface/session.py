"""Session and remote service contract definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from issue_tracker_interface.issue import Comment, FieldUpdate


class RemoteService(ABC):
    """The operation set exposed by the remote tracker.

    Every method is one blocking round trip. Implementations raise
    ``TrackerError`` (with the appropriate ``ErrorKind``) for any fault, and
    return the raw payloads untouched: a remote null comes back as ``None``.
    """

    @abstractmethod
    def login(self, username: str, password: str) -> str:
        """Authenticate and return an opaque token."""
        raise NotImplementedError

    @abstractmethod
    def search_by_query(self, token: str, query: str, max_results: int) -> list[dict[str, Any]] | None:
        """Run a query server-side and return at most max_results raw issues."""
        raise NotImplementedError

    @abstractmethod
    def get_available_actions(self, token: str, issue_key: str) -> list[dict[str, Any]] | None:
        """Return the workflow actions available from the issue's current state."""
        raise NotImplementedError

    @abstractmethod
    def execute_action(
        self,
        token: str,
        issue_key: str,
        action_id: str,
        field_changes: list[FieldUpdate] | None = None,
    ) -> None:
        """Progress the issue through the given workflow action."""
        raise NotImplementedError

    @abstractmethod
    def add_comment(self, token: str, issue_key: str, comment: Comment) -> None:
        """Append a comment to the issue."""
        raise NotImplementedError

    @abstractmethod
    def get_versions(self, token: str, project_key: str) -> list[dict[str, Any]] | None:
        """Return all versions defined for the project."""
        raise NotImplementedError

    @abstractmethod
    def get_custom_fields(self, token: str) -> list[dict[str, Any]] | None:
        """Return all custom fields defined on the instance."""
        raise NotImplementedError

    @abstractmethod
    def update_issue(self, token: str, issue_key: str, field_updates: list[FieldUpdate]) -> None:
        """Apply the field updates to the issue in one call."""
        raise NotImplementedError


@dataclass(frozen=True)
class Session:
    """Authenticated handle to the remote tracker.

    Created once per orchestration run by a login step and reused by every
    client call. The token is read, never written, after construction.
    """

    endpoint: str
    auth_token: str = field(repr=False)
    service: RemoteService = field(repr=False)
