"""Unit tests for session establishment and the environment-driven factories."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from issue_tracker_interface.client import ErrorKind, TrackerError
from issue_tracker_interface.session import Session
from jira_rpc_impl.jira_impl import JiraClient, connect, get_client, get_session
from jira_rpc_impl.rpc_service import JiraRpcService

ENDPOINT = "https://jira.test/rpc/json-rpc/jirasoapservice-v2"
ENV_VARS = ["JIRA_RPC_URL", "JIRA_USERNAME", "JIRA_PASSWORD"]


def _error_messages(caplog):
    return [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]


#--------------------------- tests for connect --------------------------

def test_connect_returns_authenticated_session():
    # Setup: login succeeds
    with patch.object(JiraRpcService, "login", return_value="token-1") as login:
        session = connect(ENDPOINT, "builder", "secret")

    # Assert: the session carries the endpoint, token and service handle
    login.assert_called_once_with("builder", "secret")
    assert isinstance(session, Session)
    assert session.endpoint == ENDPOINT
    assert session.auth_token == "token-1"
    assert isinstance(session.service, JiraRpcService)
    assert "token-1" not in repr(session)


def test_connect_malformed_endpoint_returns_none_without_login(caplog):
    with patch.object(JiraRpcService, "login") as login:
        assert connect("jira.test without scheme", "builder", "secret") is None

    login.assert_not_called()
    messages = _error_messages(caplog)
    assert any("Invalid URL" in m for m in messages)


def test_connect_bad_credentials_returns_none(caplog):
    fault = TrackerError(ErrorKind.AUTH, "Invalid username or password.")
    with patch.object(JiraRpcService, "login", side_effect=fault):
        assert connect(ENDPOINT, "builder", "wrong") is None

    messages = _error_messages(caplog)
    assert any("username and/or password is incorrect" in m for m in messages)


def test_connect_unreachable_service_returns_none(caplog):
    fault = TrackerError(ErrorKind.TRANSPORT, "Connection refused")
    with patch.object(JiraRpcService, "login", side_effect=fault):
        assert connect(ENDPOINT, "builder", "secret") is None

    messages = _error_messages(caplog)
    assert any("[connect]" in m and "Connection refused" in m for m in messages)
    assert not any("password is incorrect" in m for m in messages)


#--------------------------- tests for get_session / get_client --------------------------

def test_get_session_raises_when_env_vars_missing(monkeypatch):
    # Setup: Remove all Jira environment variables
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    # Assert: Should raise EnvironmentError listing the missing variables
    with pytest.raises(EnvironmentError) as exc_info:
        get_session(interactive=False)

    for var in ENV_VARS:
        assert var in str(exc_info.value)


def test_get_session_connects_with_env_vars(monkeypatch):
    # Setup: Set all three required environment variables
    monkeypatch.setenv("JIRA_RPC_URL", ENDPOINT)
    monkeypatch.setenv("JIRA_USERNAME", "builder")
    monkeypatch.setenv("JIRA_PASSWORD", "secret")
    expected = MagicMock(spec=Session)

    # Act
    with patch("jira_rpc_impl.jira_impl.connect", return_value=expected) as fake_connect:
        session = get_session(interactive=False)

    # Assert
    fake_connect.assert_called_once_with(ENDPOINT, "builder", "secret")
    assert session is expected


def test_get_session_prompts_for_missing_values(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("JIRA_USERNAME", "builder")
    answers = iter([ENDPOINT])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    monkeypatch.setattr("jira_rpc_impl.jira_impl.getpass", lambda prompt: "secret")

    with patch("jira_rpc_impl.jira_impl.connect", return_value=None) as fake_connect:
        assert get_session(interactive=True) is None

    fake_connect.assert_called_once_with(ENDPOINT, "builder", "secret")


def test_get_client_uses_injected_logger():
    sink = logging.getLogger("tests.sink")

    client = get_client(sink)

    assert isinstance(client, JiraClient)
    assert client._logger is sink
