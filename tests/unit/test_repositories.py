"""Unit tests for repository listing (mocked GitHub client)."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from github_issue_dispatch.errors import (
    CredentialExpired,
    MissingCredential,
    PermissionDenied,
    TransportError,
    Unauthenticated,
    UpstreamError,
)
from github_issue_dispatch.github.models import Repository
from github_issue_dispatch.repositories import RepositoryLister
from github_issue_dispatch.session import Session
from tests.conftest import repo_payload


def test_listing_preserves_upstream_order_and_flattens_owner(
    session: Session, github: Mock, client_factory: Mock
) -> None:
    upstream = [
        repo_payload(3, "newest", owner="acme"),
        repo_payload(1, "middle", owner="octo", private=True),
        repo_payload(2, "oldest", owner="acme"),
    ]
    github.list_user_repositories.return_value = [Repository.from_api(r) for r in upstream]

    repos = RepositoryLister(client_factory=client_factory).list_repositories(session)

    assert len(repos) == 3
    assert [r.name for r in repos] == ["newest", "middle", "oldest"]
    assert [r.owner_login for r in repos] == ["acme", "octo", "acme"]
    client_factory.assert_called_once_with("abc")
    github.close.assert_called_once_with()


def test_no_session_is_unauthenticated_without_network(client_factory: Mock) -> None:
    with pytest.raises(Unauthenticated):
        RepositoryLister(client_factory=client_factory).list_repositories(None)

    assert client_factory.call_count == 0


def test_session_without_token_is_missing_credential(
    tokenless_session: Session, client_factory: Mock
) -> None:
    with pytest.raises(MissingCredential):
        RepositoryLister(client_factory=client_factory).list_repositories(tokenless_session)

    assert client_factory.call_count == 0


@pytest.mark.parametrize(
    "error",
    [
        CredentialExpired(),
        PermissionDenied(),
        UpstreamError(500, "Server Error"),
        TransportError("connection reset"),
    ],
)
def test_upstream_failures_propagate_and_close_client(
    session: Session, github: Mock, client_factory: Mock, error: Exception
) -> None:
    github.list_user_repositories.side_effect = error

    with pytest.raises(type(error)):
        RepositoryLister(client_factory=client_factory).list_repositories(session)

    assert github.list_user_repositories.call_count == 1
    github.close.assert_called_once_with()


def test_serialized_repository_uses_github_field_names() -> None:
    repo = Repository.from_api(repo_payload(7, "widgets", private=True))

    assert repo.model_dump(by_alias=True) == {
        "id": 7,
        "name": "widgets",
        "full_name": "acme/widgets",
        "owner": "acme",
        "description": "The widgets project",
        "private": True,
        "html_url": "https://github.com/acme/widgets",
    }


def test_repository_description_may_be_absent() -> None:
    payload = repo_payload(7, "widgets")
    payload["description"] = None

    assert Repository.from_api(payload).description is None
