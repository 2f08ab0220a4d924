"""GitHub REST client for the three calls this service makes.

This intentionally wraps a plain `requests.Session` so the status mapping stays explicit
and the client is easy to fake in tests.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from github_issue_dispatch import __version__
from github_issue_dispatch.errors import (
    CredentialExpired,
    PermissionDenied,
    TransportError,
    UpstreamError,
)
from github_issue_dispatch.github.models import CreatedIssue, Repository, parse_repository_list

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30.0

# GitHub caps per_page at 100; we fetch exactly one page.
REPOSITORY_PAGE_SIZE = 100


class GitHubClient:
    """Authenticated GitHub REST client scoped to a single request."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.strip().rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": f"github-issue-dispatch/{__version__}",
            }
        )

    def _url(self, path: str) -> str:
        return f"{self._rest_base_url}/{path.lstrip('/')}"

    def _issues_url(self, *, owner: str, repo: str, suffix: str = "") -> str:
        if suffix and not suffix.startswith("/"):
            suffix = "/" + suffix
        return self._url(f"repos/{quote(owner, safe='')}/{quote(repo, safe='')}/issues{suffix}")

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and return its decoded JSON body.

        Raises:
            CredentialExpired: on 401.
            PermissionDenied: on 403.
            UpstreamError: on any other non-success status.
            TransportError: on network failure or an undecodable body.
        """

        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Network error while calling GitHub: {e}") from e

        if not resp.ok:
            raise _status_error(resp)

        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"GitHub returned a non-JSON response ({resp.status_code})") from e

    def list_user_repositories(self) -> list[Repository]:
        """Return up to 100 repositories of the authenticated user, most recently updated first.

        Accounts with more repositories are truncated; no further pages are requested.
        """

        payload = self._request(
            "GET",
            self._url("user/repos"),
            params={"sort": "updated", "per_page": REPOSITORY_PAGE_SIZE},
        )
        repos = parse_repository_list(payload)
        logger.debug("Fetched repositories", extra={"count": len(repos)})
        return repos

    def create_issue(self, *, owner: str, repo: str, title: str, body: str) -> CreatedIssue:
        payload = self._request(
            "POST",
            self._issues_url(owner=owner, repo=repo),
            json={"title": title, "body": body},
        )
        issue = CreatedIssue.from_api(payload)
        logger.info(
            "Issue created",
            extra={"repo": f"{owner}/{repo}", "issue_number": issue.number},
        )
        return issue

    def create_issue_comment(self, *, owner: str, repo: str, issue_number: int, body: str) -> None:
        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")
        self._request(
            "POST",
            self._issues_url(owner=owner, repo=repo, suffix=f"{issue_number}/comments"),
            json={"body": body},
        )

    def close(self) -> None:
        self._session.close()


def _status_error(resp: requests.Response) -> CredentialExpired | PermissionDenied | UpstreamError:
    message = _error_message(resp)
    if resp.status_code == 401:
        return CredentialExpired()
    if resp.status_code == 403:
        return PermissionDenied(message or PermissionDenied().message)
    return UpstreamError(resp.status_code, message or f"GitHub returned HTTP {resp.status_code}")


def _error_message(resp: requests.Response) -> str:
    """Best-effort extraction of GitHub's `message` field."""

    try:
        data = resp.json()
    except ValueError:
        return (resp.text or "").strip()[:500]
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return ""
