"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the repository and issue services.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from github_issue_dispatch import __version__
from github_issue_dispatch.config import DispatchSettings
from github_issue_dispatch.errors import DispatchError
from github_issue_dispatch.issues import IssueCreator
from github_issue_dispatch.repositories import RepositoryLister
from github_issue_dispatch.server.router import router as api_router
from github_issue_dispatch.session import ForwardedHeaderSessionProvider, SessionProvider

logger = logging.getLogger(__name__)


def create_app(
    settings: DispatchSettings | None = None,
    *,
    session_provider: SessionProvider | None = None,
    repository_lister: RepositoryLister | None = None,
    issue_creator: IssueCreator | None = None,
) -> FastAPI:
    settings = settings or DispatchSettings()

    app = FastAPI(
        title="GitHub Issue Dispatch",
        version=__version__,
        description="Browse your GitHub repositories and file issues for an automation agent.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Collaborators are resolved by handlers from app.state so tests can swap them.
    app.state.settings = settings
    app.state.session_provider = session_provider or ForwardedHeaderSessionProvider(settings)
    app.state.repository_lister = repository_lister or RepositoryLister.from_settings(settings)
    app.state.issue_creator = issue_creator or IssueCreator.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "Request handled",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return response

    @app.exception_handler(DispatchError)
    async def dispatch_error_handler(request: Request, exc: DispatchError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            exc.message,
            extra={"kind": exc.kind.value, "status": exc.status_code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    app.include_router(api_router, prefix="/api")

    logger.info(
        "App created",
        extra={"github_base_url": settings.github_base_url, "agent": settings.automation_agent},
    )
    return app


def asgi_app() -> FastAPI:
    """Factory for `uvicorn --factory github_issue_dispatch.server.app:asgi_app`."""

    return create_app()
