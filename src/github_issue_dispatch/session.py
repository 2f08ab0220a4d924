"""Per-request session values and the session gate.

Sign-in itself (the OAuth dance with GitHub) happens outside this service. An
authenticating reverse proxy performs it and forwards the resulting identity and
access token as request headers; :class:`ForwardedHeaderSessionProvider` turns
those headers back into a :class:`Session`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request

from github_issue_dispatch.config import DispatchSettings
from github_issue_dispatch.errors import MissingCredential, Unauthenticated


@dataclass(frozen=True, slots=True)
class UserProfile:
    name: str
    email: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class Session:
    """Identity and GitHub credential for a single request.

    `access_token` is None when sign-in succeeded but no token was issued.
    """

    user: UserProfile
    access_token: str | None = None

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token and self.access_token.strip())


SessionProvider = Callable[[Request], Session | None]


def require_access_token(session: Session | None) -> str:
    """Run the session gate and return the bearer token.

    Raises:
        Unauthenticated: no session at all.
        MissingCredential: a session without an access token.
    """

    if session is None:
        raise Unauthenticated()
    token = (session.access_token or "").strip()
    if not token:
        raise MissingCredential()
    return token


def _header(request: Request, name: str) -> str | None:
    value = request.headers.get(name, "").strip()
    return value or None


class ForwardedHeaderSessionProvider:
    """Build sessions from identity headers set by an authenticating proxy."""

    def __init__(self, settings: DispatchSettings) -> None:
        self._settings = settings

    def __call__(self, request: Request) -> Session | None:
        s = self._settings
        login = _header(request, s.session_user_header)
        if login is None:
            return None

        profile = UserProfile(
            name=_header(request, s.session_name_header) or login,
            email=_header(request, s.session_email_header),
            avatar_url=_header(request, s.session_avatar_header),
        )
        return Session(user=profile, access_token=_header(request, s.session_token_header))


def session_from_token(token: str, *, name: str = "cli") -> Session:
    """Session for non-HTTP callers that already hold a token (the CLI)."""

    return Session(user=UserProfile(name=name), access_token=token.strip() or None)
