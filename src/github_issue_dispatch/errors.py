"""Error taxonomy shared by the services, the HTTP API and the CLI.

Every failure a caller can observe is a :class:`DispatchError` subclass carrying a
stable :class:`ErrorKind` and the HTTP status the API answers with.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    MISSING_CREDENTIAL = "missing_credential"
    CREDENTIAL_EXPIRED = "credential_expired"
    PERMISSION_DENIED = "permission_denied"
    INVALID_REQUEST = "invalid_request"
    UPSTREAM_ERROR = "upstream_error"
    TRANSPORT_ERROR = "transport_error"
    ANNOTATION_FAILED = "annotation_failed"


class DispatchError(Exception):
    """Base class for all dispatch failures."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message, "kind": self.kind.value}


class Unauthenticated(DispatchError):
    """No session: the caller must sign in."""

    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401

    def __init__(self, message: str = "Unauthorized: sign in to continue") -> None:
        super().__init__(message)


class MissingCredential(DispatchError):
    """A session exists but carries no access token.

    This points at a broken token-issuance setup rather than a user who never signed in.
    """

    kind = ErrorKind.MISSING_CREDENTIAL
    status_code = 401

    def __init__(self, message: str = "Session has no GitHub access token") -> None:
        super().__init__(message)


class CredentialExpired(DispatchError):
    kind = ErrorKind.CREDENTIAL_EXPIRED
    status_code = 401

    def __init__(self, message: str = "GitHub rejected the access token; sign in again") -> None:
        super().__init__(message)


class PermissionDenied(DispatchError):
    kind = ErrorKind.PERMISSION_DENIED
    status_code = 403

    def __init__(
        self, message: str = "GitHub denied access to this resource with the current token"
    ) -> None:
        super().__init__(message)


class InvalidRequest(DispatchError):
    """Local validation failed before any network call."""

    kind = ErrorKind.INVALID_REQUEST
    status_code = 400

    def __init__(self, fields: Sequence[str], message: str | None = None) -> None:
        self.fields = list(fields)
        super().__init__(message or f"Missing required fields: {', '.join(self.fields)}")


class UpstreamError(DispatchError):
    """GitHub answered with a non-success status other than 401/403."""

    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.status_code = status


class TransportError(DispatchError):
    """Network failure, or a response that could not be parsed."""

    kind = ErrorKind.TRANSPORT_ERROR
    status_code = 502


class AnnotationFailed(DispatchError):
    """The automation comment could not be posted. Logged, never surfaced."""

    kind = ErrorKind.ANNOTATION_FAILED
    status_code = 502

    def __init__(self, issue_number: int, reason: str) -> None:
        super().__init__(f"Failed to add automation comment to issue #{issue_number}: {reason}")
        self.issue_number = issue_number
        self.reason = reason
