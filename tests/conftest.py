"""Test configuration and fixtures."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from github_issue_dispatch.config import DispatchSettings
from github_issue_dispatch.github.client import GitHubClient
from github_issue_dispatch.session import Session, UserProfile


def make_response(
    status: int, payload: Any = None, *, text: str | None = None
) -> requests.Response:
    """Build a real `requests.Response` without touching the network."""

    resp = requests.Response()
    resp.status_code = status
    body = text if text is not None else json.dumps(payload)
    resp._content = body.encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    resp.url = "https://api.github.com/test"
    return resp


def repo_payload(
    repo_id: int, name: str, *, owner: str = "acme", private: bool = False
) -> dict[str, Any]:
    return {
        "id": repo_id,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner, "id": 1000 + repo_id, "type": "Organization"},
        "description": f"The {name} project",
        "private": private,
        "html_url": f"https://github.com/{owner}/{name}",
        "updated_at": "2025-01-01T00:00:00Z",
        "stargazers_count": 3,
    }


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> DispatchSettings:
    """Settings isolated from the developer's environment and `.env`."""

    for var in (
        "GITHUB_BASE_URL",
        "DISPATCH_GITHUB_TOKEN",
        "DISPATCH_AUTOMATION_AGENT",
        "DISPATCH_AUTOMATION_INSTRUCTION",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    return DispatchSettings(_env_file=None)


@pytest.fixture
def session() -> Session:
    return Session(
        user=UserProfile(name="Octo Cat", email="octo@example.com", avatar_url=None),
        access_token="abc",
    )


@pytest.fixture
def tokenless_session() -> Session:
    return Session(user=UserProfile(name="Octo Cat"), access_token=None)


@pytest.fixture
def github() -> Mock:
    """A mocked GitHub client; inspect its calls to count upstream requests."""

    return Mock(spec=GitHubClient)


@pytest.fixture
def client_factory(github: Mock) -> Mock:
    return Mock(return_value=github)
