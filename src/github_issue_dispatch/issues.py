"""Issue creation with an automation hand-off comment.

Two steps, strictly in order:
1. create the issue (failures abort and propagate)
2. mention the automation agent in a comment (best-effort; failures are logged only)

Repeated calls with the same input create distinct issues; nothing is deduplicated.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from github_issue_dispatch.config import DEFAULT_AUTOMATION_INSTRUCTION, DispatchSettings
from github_issue_dispatch.errors import AnnotationFailed, DispatchError, InvalidRequest
from github_issue_dispatch.github.client import GitHubClient
from github_issue_dispatch.github.models import CreatedIssue
from github_issue_dispatch.repositories import ClientFactory, client_factory_from_settings
from github_issue_dispatch.session import Session, require_access_token

logger = logging.getLogger(__name__)

DEFAULT_AUTOMATION_COMMENT = f"@claude {DEFAULT_AUTOMATION_INSTRUCTION}"

_REQUIRED_FIELDS = ("owner", "repo", "title")


class IssueRequest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    owner: StrictStr
    repo: StrictStr
    title: StrictStr
    body: StrictStr = Field(default="")

    @field_validator("owner", "repo", "title")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("body", mode="before")
    @classmethod
    def _none_body_is_empty(cls, value: object) -> object:
        return "" if value is None else value

    @classmethod
    def parse(cls, payload: Any) -> IssueRequest:
        """Validate an incoming payload.

        Raises:
            InvalidRequest: naming every missing, blank or mistyped field.
        """

        if not isinstance(payload, dict):
            raise InvalidRequest(
                _REQUIRED_FIELDS, "Request body must be a JSON object with owner, repo, title"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidRequest(_invalid_fields(e)) from e


def _invalid_fields(error: ValidationError) -> list[str]:
    found = {str(err["loc"][0]) for err in error.errors() if err["loc"]}
    ordered = [f for f in (*_REQUIRED_FIELDS, "body") if f in found]
    return ordered or list(_REQUIRED_FIELDS)


class IssueCreator:
    def __init__(
        self,
        *,
        client_factory: ClientFactory,
        automation_comment: str = DEFAULT_AUTOMATION_COMMENT,
    ) -> None:
        self._client_factory = client_factory
        self._automation_comment = automation_comment

    @classmethod
    def from_settings(cls, settings: DispatchSettings) -> IssueCreator:
        return cls(
            client_factory=client_factory_from_settings(settings),
            automation_comment=settings.automation_comment,
        )

    def create_issue(self, session: Session | None, request: IssueRequest | Any) -> CreatedIssue:
        """Create an issue and tag the automation agent on it.

        `request` may be an :class:`IssueRequest` or a raw payload mapping.

        Raises:
            Unauthenticated, MissingCredential: from the session gate.
            InvalidRequest: before any network call.
            CredentialExpired, PermissionDenied, UpstreamError, TransportError: from step 1.
        """

        token = require_access_token(session)
        if not isinstance(request, IssueRequest):
            request = IssueRequest.parse(request)

        github = self._client_factory(token)
        try:
            issue = github.create_issue(
                owner=request.owner,
                repo=request.repo,
                title=request.title,
                body=request.body,
            )
            try:
                self._annotate(github, request, issue)
            except AnnotationFailed as e:
                logger.warning(
                    str(e),
                    extra={
                        "repo": f"{request.owner}/{request.repo}",
                        "issue_number": issue.number,
                        "reason": e.reason,
                    },
                )
        finally:
            github.close()

        return issue

    def _annotate(self, github: GitHubClient, request: IssueRequest, issue: CreatedIssue) -> None:
        try:
            github.create_issue_comment(
                owner=request.owner,
                repo=request.repo,
                issue_number=issue.number,
                body=self._automation_comment,
            )
        except DispatchError as e:
            raise AnnotationFailed(issue.number, e.message) from e
        logger.info(
            "Automation comment added",
            extra={"repo": f"{request.owner}/{request.repo}", "issue_number": issue.number},
        )


def create_issue(
    session: Session | None,
    request: IssueRequest | Any,
    *,
    settings: DispatchSettings | None = None,
) -> CreatedIssue:
    """Convenience wrapper around :class:`IssueCreator` using env settings."""

    creator = IssueCreator.from_settings(settings or DispatchSettings())
    return creator.create_issue(session, request)
