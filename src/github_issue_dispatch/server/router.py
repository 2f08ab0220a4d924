"""REST endpoints consumed by the presentation layer.

All routes are mounted under `/api`. Handlers resolve the session explicitly and pass
it to the services; errors surface as `DispatchError` and are rendered by the app's
exception handler.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from github_issue_dispatch import __version__
from github_issue_dispatch.errors import InvalidRequest, Unauthenticated
from github_issue_dispatch.github.models import CreatedIssue, Repository
from github_issue_dispatch.issues import IssueCreator, IssueRequest
from github_issue_dispatch.repositories import RepositoryLister
from github_issue_dispatch.server.models import ApiSession, ApiUser, ErrorBody, Health
from github_issue_dispatch.session import Session, SessionProvider, require_access_token

router = APIRouter()

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorBody},
    401: {"model": ErrorBody},
    403: {"model": ErrorBody},
    502: {"model": ErrorBody},
}

def _session(request: Request) -> Session | None:
    provider: SessionProvider = request.app.state.session_provider
    return provider(request)

@router.get("/health", response_model=Health)
def health() -> Health:
    return Health(status="ok", version=__version__)

@router.get("/session", response_model=ApiSession, responses=_ERROR_RESPONSES)
def current_session(request: Request) -> ApiSession:
    session = _session(request)
    if session is None:
        raise Unauthenticated()
    return ApiSession(
        user=ApiUser(
            name=session.user.name,
            email=session.user.email,
            avatar_url=session.user.avatar_url,
        ),
        has_access_token=session.has_access_token,
    )

@router.get(
    "/repos",
    response_model=list[Repository],
    response_model_by_alias=True,
    responses=_ERROR_RESPONSES,
)
def list_repos(request: Request) -> list[Repository]:
    lister: RepositoryLister = request.app.state.repository_lister
    return lister.list_repositories(_session(request))

@router.post("/issues", response_model=CreatedIssue, responses=_ERROR_RESPONSES)
async def create_issue(request: Request) -> CreatedIssue:
    session = _session(request)
    # Gate before touching the body so an anonymous caller never sees validation details.
    require_access_token(session)

    issue_request = IssueRequest.parse(await _json_body(request))
    creator: IssueCreator = request.app.state.issue_creator
    return await run_in_threadpool(creator.create_issue, session, issue_request)

async def _json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise InvalidRequest(
            ("owner", "repo", "title"), "Request body is not valid JSON"
        ) from e
