"""Repository listing for the signed-in user."""

from __future__ import annotations

import logging
from collections.abc import Callable

from github_issue_dispatch.config import DispatchSettings
from github_issue_dispatch.github.client import GitHubClient
from github_issue_dispatch.github.models import Repository
from github_issue_dispatch.session import Session, require_access_token

logger = logging.getLogger(__name__)

# Builds a GitHub client for one bearer token.
ClientFactory = Callable[[str], GitHubClient]


def client_factory_from_settings(settings: DispatchSettings) -> ClientFactory:
    def factory(token: str) -> GitHubClient:
        return GitHubClient(
            token=token,
            base_url=settings.github_base_url,
            timeout=settings.request_timeout_seconds,
        )

    return factory


class RepositoryLister:
    def __init__(self, *, client_factory: ClientFactory) -> None:
        self._client_factory = client_factory

    @classmethod
    def from_settings(cls, settings: DispatchSettings) -> RepositoryLister:
        return cls(client_factory=client_factory_from_settings(settings))

    def list_repositories(self, session: Session | None) -> list[Repository]:
        """List the caller's repositories in upstream order (most recently updated first).

        Raises:
            Unauthenticated, MissingCredential: from the session gate.
            CredentialExpired, PermissionDenied, UpstreamError, TransportError: from GitHub.
        """

        token = require_access_token(session)
        github = self._client_factory(token)
        try:
            repos = github.list_user_repositories()
        finally:
            github.close()

        logger.info("Listed repositories", extra={"count": len(repos)})
        return repos


def list_repositories(
    session: Session | None, *, settings: DispatchSettings | None = None
) -> list[Repository]:
    """Convenience wrapper around :class:`RepositoryLister` using env settings."""

    lister = RepositoryLister.from_settings(settings or DispatchSettings())
    return lister.list_repositories(session)
