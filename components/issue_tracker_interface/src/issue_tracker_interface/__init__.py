"""Issue tracker client contract."""

from issue_tracker_interface.client import (
    ErrorKind,
    IssueTrackerClient,
    QueryError,
    TrackerError,
    TransitionOutcome,
)
from issue_tracker_interface.issue import Comment, CustomField, FieldUpdate, Issue, Version, WorkflowAction
from issue_tracker_interface.session import RemoteService, Session

__all__ = [
    "Comment",
    "CustomField",
    "ErrorKind",
    "FieldUpdate",
    "Issue",
    "IssueTrackerClient",
    "QueryError",
    "RemoteService",
    "Session",
    "TrackerError",
    "TransitionOutcome",
    "Version",
    "WorkflowAction",
]
