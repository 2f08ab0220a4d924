"""Unit tests for the session gate and the forwarded-header session provider."""

from __future__ import annotations

import pytest
from fastapi import Request

from github_issue_dispatch.config import DispatchSettings
from github_issue_dispatch.errors import MissingCredential, Unauthenticated
from github_issue_dispatch.session import (
    ForwardedHeaderSessionProvider,
    Session,
    UserProfile,
    require_access_token,
    session_from_token,
)


def _request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/repos",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()],
    }
    return Request(scope)


def test_gate_without_session_is_unauthenticated() -> None:
    with pytest.raises(Unauthenticated):
        require_access_token(None)


@pytest.mark.parametrize("token", [None, "", "   "])
def test_gate_without_token_is_missing_credential(token: str | None) -> None:
    with pytest.raises(MissingCredential):
        require_access_token(Session(user=UserProfile(name="octocat"), access_token=token))


def test_gate_returns_token() -> None:
    session = Session(user=UserProfile(name="octocat"), access_token=" abc ")

    assert require_access_token(session) == "abc"


def test_provider_without_user_header_is_no_session(settings: DispatchSettings) -> None:
    provider = ForwardedHeaderSessionProvider(settings)

    # A token alone does not make a session.
    assert provider(_request({"X-Forwarded-Access-Token": "abc"})) is None


def test_provider_builds_profile_and_token(settings: DispatchSettings) -> None:
    provider = ForwardedHeaderSessionProvider(settings)

    session = provider(
        _request(
            {
                "X-Forwarded-User": "octocat",
                "X-Forwarded-Preferred-Username": "Octo Cat",
                "X-Forwarded-Email": "octo@example.com",
                "X-Forwarded-Access-Token": "abc",
            }
        )
    )

    assert session is not None
    assert session.user == UserProfile(name="Octo Cat", email="octo@example.com", avatar_url=None)
    assert session.access_token == "abc"
    assert session.has_access_token is True


def test_provider_session_without_token(settings: DispatchSettings) -> None:
    session = ForwardedHeaderSessionProvider(settings)(_request({"X-Forwarded-User": "octocat"}))

    assert session is not None
    assert session.user.name == "octocat"
    assert session.has_access_token is False


def test_provider_honours_custom_header_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISPATCH_SESSION_USER_HEADER", "X-Auth-Login")
    monkeypatch.setenv("DISPATCH_SESSION_TOKEN_HEADER", "X-Auth-Token")
    provider = ForwardedHeaderSessionProvider(DispatchSettings(_env_file=None))

    session = provider(_request({"X-Auth-Login": "octocat", "X-Auth-Token": "abc"}))

    assert session is not None
    assert session.access_token == "abc"


def test_session_from_blank_token_has_no_credential() -> None:
    with pytest.raises(MissingCredential):
        require_access_token(session_from_token(""))
