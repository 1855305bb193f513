"""Jira Issue implementation and mappers for the raw RPC payloads."""

from typing import Any

from issue_tracker_interface.issue import CustomField, Issue, Version, WorkflowAction


# ------------------------------------------------------------------
# Issue implementation
# ------------------------------------------------------------------
class JiraIssue(Issue):
    """Concrete Issue backed by a RemoteIssue payload.

    Construct via the module-level ``get_issue()`` factory rather than
    instantiating directly.

    Args:
        raw_data: The RemoteIssue dict as returned by the RPC service.

    """

    def __init__(self, raw_data: dict[str, Any]) -> None:
        """Initialize JiraIssue."""
        self._raw = raw_data

    @property
    def key(self) -> str:
        """Return key."""
        return self._raw.get("key", "")

    @property
    def summary(self) -> str:
        """Return summary."""
        return self._raw.get("summary") or ""

    @property
    def status(self) -> str | None:
        """Return status."""
        #the RPC api reports the status id, not its display name
        status = self._raw.get("status")
        return str(status) if status is not None else None

    @property
    def project(self) -> str | None:
        """Return project key."""
        return self._raw.get("project") or None


# ---------------------------------------------------------------------------
# Reference data mappers
# ---------------------------------------------------------------------------

def get_action(raw_data: dict[str, Any]) -> WorkflowAction:
    """Return a WorkflowAction from a RemoteNamedObject payload."""
    return WorkflowAction(name=raw_data.get("name") or "", id=str(raw_data.get("id", "")))


def get_version(raw_data: dict[str, Any]) -> Version:
    """Return a Version from a RemoteVersion payload."""
    return Version(
        id=str(raw_data.get("id", "")),
        name=raw_data.get("name") or "",
        released=bool(raw_data.get("released", False)),
        archived=bool(raw_data.get("archived", False)),
        release_date=raw_data.get("releaseDate") or None,
    )


def get_custom_field(raw_data: dict[str, Any]) -> CustomField:
    """Return a CustomField from a RemoteField payload."""
    return CustomField(id=str(raw_data.get("id", "")), name=raw_data.get("name") or "")


# ---------------------------------------------------------------------------
# Get issue
# ---------------------------------------------------------------------------

def get_issue(raw_data: dict[str, Any]) -> JiraIssue:
    """Return a JiraIssue from a RemoteIssue payload.

    Args:
        raw_data: The RemoteIssue dict from the RPC response.

    Returns:
        A JiraIssue instance conforming to the Issue contract.

    """
    return JiraIssue(raw_data)
