"""Typed projections of GitHub REST payloads.

Upstream JSON is validated here, at the boundary; callers only ever see these
models. Wire names follow GitHub's own field names so the presentation layer can
consume them unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from github_issue_dispatch.errors import TransportError


class Repository(BaseModel):
    """A repository as surfaced to the presentation layer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    full_name: str
    owner_login: str = Field(alias="owner")
    description: str | None = None
    is_private: bool = Field(alias="private")
    html_url: str

    @classmethod
    def from_api(cls, data: Any) -> Repository:
        if not isinstance(data, dict):
            raise TransportError("Unexpected repository payload: expected an object")
        owner = data.get("owner")
        try:
            return cls(
                id=data.get("id"),
                name=data.get("name"),
                full_name=data.get("full_name"),
                owner_login=owner.get("login") if isinstance(owner, dict) else None,
                description=data.get("description"),
                is_private=data.get("private"),
                html_url=data.get("html_url"),
            )
        except ValidationError as e:
            raise TransportError(f"Unexpected repository payload: {_summarize(e)}") from e


class CreatedIssue(BaseModel):
    """Minimal issue metadata returned after creation."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(gt=0)
    html_url: str
    title: str

    @classmethod
    def from_api(cls, data: Any) -> CreatedIssue:
        if not isinstance(data, dict):
            raise TransportError("Unexpected create issue response: expected an object")
        try:
            return cls(
                number=data.get("number"),
                html_url=data.get("html_url"),
                title=data.get("title"),
            )
        except ValidationError as e:
            raise TransportError(f"Unexpected create issue response: {_summarize(e)}") from e


def parse_repository_list(payload: Any) -> list[Repository]:
    if not isinstance(payload, list):
        raise TransportError("Unexpected repository list response: expected an array")
    return [Repository.from_api(item) for item in payload]


def _summarize(error: ValidationError) -> str:
    fields = sorted({".".join(str(p) for p in err["loc"]) or "<root>" for err in error.errors()})
    return "invalid or missing " + ", ".join(fields)
