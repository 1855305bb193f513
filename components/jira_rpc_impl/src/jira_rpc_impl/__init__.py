"""Jira implementation of the issue tracker client over the legacy RPC service."""

from jira_rpc_impl.jira_impl import (
    MAX_ISSUES_RETURNED,
    JiraClient,
    connect,
    get_client,
    get_session,
    results_truncated,
)
from jira_rpc_impl.rpc_service import JiraRpcService

__all__ = [
    "MAX_ISSUES_RETURNED",
    "JiraClient",
    "JiraRpcService",
    "connect",
    "get_client",
    "get_session",
    "results_truncated",
]
