"""GitHub REST integration."""

from github_issue_dispatch.github.client import GitHubClient
from github_issue_dispatch.github.models import CreatedIssue, Repository

__all__ = ["CreatedIssue", "GitHubClient", "Repository"]
