"""Jira's legacy RPC service, reached through its JSON-RPC bridge.

Jira exposes the operations of its SOAP service (``jirasoapservice-v2``) as
JSON-RPC 2.0 methods under ``/rpc/json-rpc/jirasoapservice-v2``. Each method
takes the authentication token as its first positional parameter, except
``login`` which produces it.

Dependencies:
    uv add requests
"""
from __future__ import annotations

import itertools
import logging
from typing import Any
from urllib.parse import urlparse

import requests

from issue_tracker_interface.client import ErrorKind, TrackerError
from issue_tracker_interface.issue import Comment, FieldUpdate
from issue_tracker_interface.session import RemoteService

logger = logging.getLogger(__name__)

#fault class names Jira embeds in the error message/data of a failed call
_AUTH_FAULT = "RemoteAuthenticationException"
_PERMISSION_FAULT = "RemotePermissionException"


def validate_endpoint(endpoint: str) -> str:
    """Return the endpoint with trailing slashes removed, or raise a CONNECT TrackerError if it is not a usable URL."""
    parsed = urlparse(endpoint or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise TrackerError(ErrorKind.CONNECT, f"Invalid URL: {endpoint}")
    try:
        requests.PreparedRequest().prepare_url(endpoint, None)
    except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema) as e:
        raise TrackerError(ErrorKind.CONNECT, f"Invalid URL: {endpoint}") from e
    return endpoint.rstrip("/")


class JiraRpcService(RemoteService):
    """
    Args:
        endpoint: Full URL of the RPC service
                  (e.g. 'https://jira.example.com/rpc/json-rpc/jirasoapservice-v2')
        timeout:  Passed to requests as-is. None blocks until the server answers.
    """

    def __init__(self, endpoint: str, *, timeout: float | None = None) -> None:
        self._endpoint = validate_endpoint(endpoint)
        self._timeout = timeout
        self._request_ids = itertools.count(1)
        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})

    @property
    def endpoint(self) -> str:
        return self._endpoint

    # ------------------------------------------------------------------
    # Internal RPC helpers
    # ------------------------------------------------------------------

    def _call(self, method: str, *params: Any) -> Any:
        payload = {"jsonrpc": "2.0", "method": method, "params": list(params), "id": next(self._request_ids)}
        #params are never logged, login carries the password
        logger.debug("RPC call %s on %s", method, self._endpoint)
        try:
            response = self._session.post(self._endpoint, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise TrackerError(ErrorKind.TRANSPORT, f"{method} failed: {e}") from e

        self._raise_for_status(response)
        try:
            body = response.json()
        except ValueError as e:
            raise TrackerError(ErrorKind.TRANSPORT, f"{method} returned a malformed response") from e

        if not isinstance(body, dict):
            raise TrackerError(ErrorKind.TRANSPORT, f"{method} returned a malformed response")
        if body.get("error"):
            raise self._fault(body["error"])
        return body.get("result")

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        if response.status_code == 401:
            raise TrackerError(ErrorKind.AUTH, f"Not authenticated: {response.url}")
        if response.status_code == 403:
            raise TrackerError(ErrorKind.PERMISSION, f"Permission denied: {response.url}")
        if not response.ok:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            #Jira reports most faults as a JSON-RPC error body on a 500
            if isinstance(detail, dict) and detail.get("error"):
                raise JiraRpcService._fault(detail["error"])
            raise TrackerError(ErrorKind.REMOTE, f"Jira RPC error {response.status_code}: {detail}")

    @staticmethod
    def _fault(error: Any) -> TrackerError:
        if isinstance(error, dict):
            message = str(error.get("message") or "")
            data = str(error.get("data") or "")
        else:
            message, data = str(error), ""

        text = f"{message} {data}"
        if _AUTH_FAULT in text:
            kind = ErrorKind.AUTH
        elif _PERMISSION_FAULT in text:
            kind = ErrorKind.PERMISSION
        else:
            kind = ErrorKind.REMOTE
        return TrackerError(kind, message or data or "Unknown remote fault")

    @staticmethod
    def _field_value(update: FieldUpdate) -> dict[str, Any]:
        #RemoteFieldValue
        return {"id": update.field_id, "values": list(update.values)}

    # ------------------------------------------------------------------
    # RemoteService contract
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> str:
        token = self._call("login", username, password)
        if not token:
            raise TrackerError(ErrorKind.AUTH, "Login returned no authentication token")
        return str(token)

    def search_by_query(self, token: str, query: str, max_results: int) -> list[dict[str, Any]] | None:
        return self._call("getIssuesFromJqlSearch", token, query, max_results)

    def get_available_actions(self, token: str, issue_key: str) -> list[dict[str, Any]] | None:
        return self._call("getAvailableActions", token, issue_key)

    def execute_action(
        self,
        token: str,
        issue_key: str,
        action_id: str,
        field_changes: list[FieldUpdate] | None = None,
    ) -> None:
        changes = [self._field_value(u) for u in field_changes or []]
        self._call("progressWorkflowAction", token, issue_key, action_id, changes)

    def add_comment(self, token: str, issue_key: str, comment: Comment) -> None:
        self._call("addComment", token, issue_key, {"body": comment.body})

    def get_versions(self, token: str, project_key: str) -> list[dict[str, Any]] | None:
        return self._call("getVersions", token, project_key)

    def get_custom_fields(self, token: str) -> list[dict[str, Any]] | None:
        return self._call("getCustomFields", token)

    def update_issue(self, token: str, issue_key: str, field_updates: list[FieldUpdate]) -> None:
        self._call("updateIssue", token, issue_key, [self._field_value(u) for u in field_updates])
