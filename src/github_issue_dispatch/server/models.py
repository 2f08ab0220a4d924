"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorBody(BaseModel):
    error: str
    kind: str


class ApiUser(BaseModel):
    name: str
    email: str | None = None
    avatar_url: str | None = None


class ApiSession(BaseModel):
    user: ApiUser
    has_access_token: bool


class Health(BaseModel):
    status: str
    version: str
