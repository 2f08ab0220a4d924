"""GitHub Issue Dispatch.

A thin, session-gated proxy over the GitHub REST API:
- list the signed-in user's repositories
- file an issue and tag an automation agent to implement it
"""

__version__ = "0.1.0"

from github_issue_dispatch.config import DispatchSettings

__all__ = ["__version__", "DispatchSettings"]
