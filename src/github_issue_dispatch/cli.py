"""CLI entrypoint.

`serve` runs the HTTP API. `list-repos` and `create-issue` call the same services
directly with the token from `DISPATCH_GITHUB_TOKEN`.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from github_issue_dispatch import __version__
from github_issue_dispatch.config import DispatchSettings
from github_issue_dispatch.errors import DispatchError
from github_issue_dispatch.issues import IssueCreator, IssueRequest
from github_issue_dispatch.logging import configure_logging
from github_issue_dispatch.repositories import RepositoryLister
from github_issue_dispatch.session import session_from_token

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_DISPATCH_ERROR = 3


def _split_repository(value: str) -> tuple[str, str]:
    owner, sep, repo = value.strip().strip("/").partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise argparse.ArgumentTypeError(f"expected 'owner/repo', got {value!r}")
    return owner, repo


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-dispatch",
        description="File GitHub issues and hand them to an automation agent",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-issue-dispatch {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes (dev)")

    subparsers.add_parser(
        "list-repos", help="List your repositories (most recently updated first, max 100)"
    )

    create_issue = subparsers.add_parser(
        "create-issue", help="Create an issue and tag the automation agent on it"
    )
    create_issue.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        type=_split_repository,
        required=True,
        help="Target repository in the form 'owner/repo'",
    )
    create_issue.add_argument("--title", required=True, help="Issue title")
    create_issue.add_argument("--body", default="", help="Issue body")

    return parser


def _serve(args: argparse.Namespace, settings: DispatchSettings) -> int:
    import uvicorn

    uvicorn.run(
        "github_issue_dispatch.server.app:asgi_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
        # Keep our own handlers; uvicorn would otherwise install its default config.
        log_config=None,
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = DispatchSettings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level, settings.log_format)

    try:
        if args.command == "serve":
            return _serve(args, settings)

        session = session_from_token(settings.github_token)

        if args.command == "list-repos":
            repos = RepositoryLister.from_settings(settings).list_repositories(session)
            for repo in repos:
                marker = " (private)" if repo.is_private else ""
                print(f"{repo.full_name}{marker}")
            return EXIT_OK

        if args.command == "create-issue":
            owner, repo = args.repository
            request = IssueRequest.parse(
                {"owner": owner, "repo": repo, "title": args.title, "body": args.body}
            )
            issue = IssueCreator.from_settings(settings).create_issue(session, request)
            print(f"Created issue #{issue.number}: {issue.html_url}")
            return EXIT_OK

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_USAGE

    except DispatchError as e:
        logger.warning(e.message, extra={"kind": e.kind.value})
        print(f"{e.kind.value}: {e.message}", file=sys.stderr)
        return EXIT_DISPATCH_ERROR

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
