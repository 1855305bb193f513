"""
Authentication
--------------
A Session is obtained once per orchestration run and passed to every
JiraClient call. The session factory supports two credential modes:

1. When get_session(interactive = True)
    User is prompted at runtime for any of the values below missing from the environment.
2. When get_session(interactive = False) - Default
        JIRA_RPC_URL    https://jira.example.com/rpc/json-rpc/jirasoapservice-v2
        JIRA_USERNAME   builder
        JIRA_PASSWORD   <password of that user>

Dependencies:
    uv add requests

"""
#to avoid having to consider forward declarations, the below line must be first line in the file
from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from getpass import getpass

from issue_tracker_interface.client import (
    ErrorKind,
    IssueTrackerClient,
    QueryError,
    TrackerError,
    TransitionOutcome,
)
from issue_tracker_interface.issue import Comment, CustomField, FieldUpdate, Issue, Version
from issue_tracker_interface.session import Session
from jira_rpc_impl.jira_issue import JiraIssue, get_action, get_custom_field, get_issue as _make_issue, get_version
from jira_rpc_impl.rpc_service import JiraRpcService

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

MAX_ISSUES_RETURNED = 10000

FIX_VERSIONS_FIELD = "fixVersions"

_FAILURE_CAUSES: dict[ErrorKind, str] = {
    ErrorKind.AUTH:       "authentication failed",
    ErrorKind.PERMISSION: "permission denied",
    ErrorKind.TRANSPORT:  "service unreachable",
}


def _cause(error: TrackerError) -> str:
    return _FAILURE_CAUSES.get(error.kind, "remote failure")


def results_truncated(issues: Sequence[Issue]) -> bool:
    """Return True if a search hit the result cap.

    find_issues_by_query asks for one issue more than MAX_ISSUES_RETURNED, so
    receiving that extra one means the server had more matches to give.
    """
    return len(issues) > MAX_ISSUES_RETURNED


def _records(payload: object, method: str) -> list[dict]:
    """Return a list payload of records, or raise a TRANSPORT TrackerError if it has any other shape."""
    if payload is None:
        return []
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise TrackerError(ErrorKind.TRANSPORT, f"{method} returned a malformed response")
    return payload


def _version_order(version_id: str) -> tuple[int, str]:
    #ids are numbers in text form, shorter means smaller
    return (len(version_id), version_id)


# ---------------------------------------------------------------------------
# Client implementation
# ---------------------------------------------------------------------------

class JiraClient(IssueTrackerClient):
    """
    Args:
        logger: Diagnostic sink for every operation. Defaults to this module's logger.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def _build_issue(self, issue: dict) -> JiraIssue:
        return _make_issue(issue)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def find_issues_by_query(self, session: Session, query: str) -> list[Issue]:
        """Fetch every issue matching the query, up to MAX_ISSUES_RETURNED + 1."""
        self._logger.info("Searching for issues by query: %s", query)
        try:
            #one extra result lets callers detect truncation, see results_truncated
            raw_issues = _records(
                session.service.search_by_query(session.auth_token, query, MAX_ISSUES_RETURNED + 1),
                "getIssuesFromJqlSearch",
            )
        except TrackerError as e:
            self._logger.error("Cannot execute Jira issue search by query %r: %s", query, e)
            raise QueryError(e.message) from e

        return [self._build_issue(issue) for issue in raw_issues]

    # ------------------------------------------------------------------
    # Workflow transition
    # ------------------------------------------------------------------

    def resolve_workflow_action(self, session: Session, issue_key: str, action_name: str) -> TransitionOutcome:
        """
        Workflow actions are named transitions that move an issue from one status to another.
        Which ones exist depends on the issue's current status, so the service is asked for
        the available actions first, and only the matching ones are executed by their id.

        Notes on usage:
            Every available action whose name equals action_name ignoring case is executed,
            not just the first. A failing execution is recorded and the scan carries on.
            If the available actions cannot be fetched the call behaves as if there were none.
        """
        outcome = TransitionOutcome(issue_key=issue_key, action_name=action_name)
        self._logger.info(
            "Attempting to update status for issue %s by executing workflow action %r", issue_key, action_name,
        )

        raw_actions: list[dict] = []
        try:
            raw_actions = _records(
                session.service.get_available_actions(session.auth_token, issue_key), "getAvailableActions",
            )
        except TrackerError as e:
            self._logger.error("Error getting available workflow actions for issue %s: %s", issue_key, e)
            outcome.errors.append(e)

        for action in map(get_action, raw_actions):
            self._logger.debug("Issue %s offers action %r (id %s)", issue_key, action.name, action.id)
            if not action.matches(action_name):
                continue

            outcome.matched.append(action.id)
            try:
                session.service.execute_action(session.auth_token, issue_key, action.id)
            except TrackerError as e:
                failure = TrackerError(
                    ErrorKind.ACTION_FAILED,
                    f"Workflow action {action.name!r} (id {action.id}) failed on issue {issue_key}: {e.message}",
                )
                self._logger.error("%s", failure)
                outcome.errors.append(failure)
                continue

            outcome.succeeded.append(action.id)
            self._logger.info("Successfully updated status for issue %s", issue_key)

        if outcome.error_kind is ErrorKind.ACTION_NOT_AVAILABLE:
            not_available = TrackerError(
                ErrorKind.ACTION_NOT_AVAILABLE,
                f"Executing workflow action {action_name!r} is not allowed for issue {issue_key}",
            )
            self._logger.error("%s", not_available)
            outcome.errors.append(not_available)
        elif outcome.error_kind is ErrorKind.ACTION_FAILED:
            self._logger.error("Could not update status for issue %s", issue_key)

        return outcome

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(self, session: Session, issue_key: str, text: str) -> bool:
        comment = Comment(body=text)
        try:
            session.service.add_comment(session.auth_token, issue_key, comment)
        except TrackerError as e:
            self._logger.error("Error adding comment to issue %s (%s): %s", issue_key, _cause(e), e.message)
            return False
        return True

    # ------------------------------------------------------------------
    # Reference data - these fail open to an empty list
    # ------------------------------------------------------------------

    def get_versions(self, session: Session, project_key: str) -> list[Version]:
        """Return all versions defined for the project."""
        try:
            raw_versions = _records(session.service.get_versions(session.auth_token, project_key), "getVersions")
        except TrackerError as e:
            self._logger.error("Error getting versions for project %s: %s", project_key, e)
            return []
        return [get_version(v) for v in raw_versions]

    def get_custom_fields(self, session: Session) -> list[CustomField]:
        """Return all custom fields defined in the Jira instance."""
        try:
            raw_fields = _records(session.service.get_custom_fields(session.auth_token), "getCustomFields")
        except TrackerError as e:
            self._logger.error("Error getting list of custom fields for Jira instance: %s", e)
            return []
        return [get_custom_field(f) for f in raw_fields]

    # ------------------------------------------------------------------
    # Field updates
    # ------------------------------------------------------------------

    def update_field(self, session: Session, issue_key: str, field_id: str, values: str | Sequence[str]) -> bool:
        """
        Args:
            issue_key: The Jira issue key
            field_id:  Id of the field to set (e.g. 'fixVersions', 'customfield_10010')
            values:    One value, or all values of a multi-valued field

        Returns:
            True if the service accepted the update. False without calling the
            service when values is empty.
        """
        update = FieldUpdate.of(field_id, values)
        if not update.values:
            self._logger.error("Refusing to set %s on issue %s: no values given", field_id, issue_key)
            return False
        try:
            session.service.update_issue(session.auth_token, issue_key, [update])
        except TrackerError as e:
            self._logger.error("Error setting %s on issue %s: %s", field_id, issue_key, e)
            return False
        return True

    def update_fixed_versions(self, session: Session, issue: Issue, version_ids: Iterable[str]) -> bool:
        """Set the fix versions of the issue to version_ids (version ids in text form)."""
        #sets carry no order of their own, send them in id order
        if isinstance(version_ids, (set, frozenset)):
            values = sorted(version_ids, key=_version_order)
        else:
            values = list(version_ids)
        return self.update_field(session, issue.key, FIX_VERSIONS_FIELD, values)


# ---------------------------------------------------------------------------
# Session establishment
# ---------------------------------------------------------------------------

def connect(endpoint: str, username: str, password: str, *, timeout: float | None = None) -> Session | None:
    """Open and authenticate a Session.

    Returns None on any failure: a malformed endpoint, bad credentials, or a
    service that cannot be reached. Each case is logged with its own message.
    """
    try:
        service = JiraRpcService(endpoint, timeout=timeout)
    except TrackerError as e:
        logger.error("%s", e)
        return None
    return _authenticate(service, username, password)


def _authenticate(service: JiraRpcService, username: str, password: str) -> Session | None:
    try:
        token = service.login(username, password)
    except TrackerError as e:
        if e.kind is ErrorKind.AUTH:
            logger.error("Authentication to Jira failed: the Jira username and/or password is incorrect! %s", e)
        else:
            failure = TrackerError(ErrorKind.CONNECT, f"Could not connect to Jira at {service.endpoint}: {e.message}")
            logger.error("%s", failure)
        return None
    logger.info("Connected to Jira at %s as %s", service.endpoint, username)
    return Session(endpoint=service.endpoint, auth_token=token, service=service)


# ---------------------------------------------------------------------------
# Get session / client
# ---------------------------------------------------------------------------

def get_session(*, interactive: bool = False) -> Session | None:
    """Return an authenticated Session, or None if connecting failed.

    Reads credentials from environment variables. If "interactive = True" and
    any variable is missing, the user will be prompted.

    Environment variables:
        JIRA_RPC_URL:   URL of the Jira RPC service.
        JIRA_USERNAME:  Jira user name.
        JIRA_PASSWORD:  Password of that user.
    """
    endpoint = os.environ.get("JIRA_RPC_URL", "")
    username = os.environ.get("JIRA_USERNAME", "")
    password = os.environ.get("JIRA_PASSWORD", "")

    if interactive:
        if not endpoint:
            endpoint = input("Jira RPC URL (e.g. https://jira.example.com/rpc/json-rpc/jirasoapservice-v2): ").strip()
        if not username:
            username = input("Jira username: ").strip()
        if not password:
            password = getpass("Jira password: ")
    else:
        #collects the missing fields and raises an error alerting to the missing values
        missing = [name for name, val in [
            ("JIRA_RPC_URL", endpoint),
            ("JIRA_USERNAME", username),
            ("JIRA_PASSWORD", password),
        ] if not val]
        if missing:
            raise EnvironmentError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them or call get_session(interactive=True)."
            )

    return connect(endpoint, username, password)


def get_client(logger: logging.Logger | None = None) -> JiraClient:
    """Return a JiraClient logging to the given logger."""
    return JiraClient(logger)
