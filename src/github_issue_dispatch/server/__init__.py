"""FastAPI server adapter for github-issue-dispatch.

Design intent:
- Keep GitHub and session logic in `github_issue_dispatch.*`
- Keep server-specific concerns (routing, CORS, error rendering) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from github_issue_dispatch.server.app import create_app
