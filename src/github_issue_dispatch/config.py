"""Configuration for the dispatch server and CLI.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The server is intentionally usable without any GitHub token: credentials arrive per
request through the session, and endpoints validate them at request time. The
`DISPATCH_GITHUB_TOKEN` variable is only read by the CLI.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_AUTOMATION_INSTRUCTION = "please implement end to end and create PR"


class DispatchSettings(BaseSettings):
    """Settings for the REST API, the GitHub client and the CLI.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `DispatchSettings(_env_file=path_to_env)`.
    """

    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )
    github_token: str = Field(
        default="",
        validation_alias="DISPATCH_GITHUB_TOKEN",
        description="Token used by the CLI commands; the server never reads it",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="DISPATCH_REQUEST_TIMEOUT_SECONDS",
        description="Timeout applied to every upstream GitHub request",
        gt=0,
        le=300,
    )

    automation_agent: str = Field(
        default="claude",
        validation_alias="DISPATCH_AUTOMATION_AGENT",
        description="Login of the automation agent mentioned on every new issue",
    )
    automation_instruction: str = Field(
        default=DEFAULT_AUTOMATION_INSTRUCTION,
        validation_alias="DISPATCH_AUTOMATION_INSTRUCTION",
        description="Text that follows the agent mention in the automation comment",
    )

    # Identity headers set by the authenticating reverse proxy in front of the API.
    session_user_header: str = Field(
        default="X-Forwarded-User", validation_alias="DISPATCH_SESSION_USER_HEADER"
    )
    session_email_header: str = Field(
        default="X-Forwarded-Email", validation_alias="DISPATCH_SESSION_EMAIL_HEADER"
    )
    session_name_header: str = Field(
        default="X-Forwarded-Preferred-Username",
        validation_alias="DISPATCH_SESSION_NAME_HEADER",
    )
    session_avatar_header: str = Field(
        default="X-Forwarded-Avatar-Url", validation_alias="DISPATCH_SESSION_AVATAR_HEADER"
    )
    session_token_header: str = Field(
        default="X-Forwarded-Access-Token", validation_alias="DISPATCH_SESSION_TOKEN_HEADER"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "text"] = Field(default="json", validation_alias="LOG_FORMAT")

    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="DISPATCH_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("github_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("automation_agent")
    @classmethod
    def _strip_mention(cls, value: str) -> str:
        agent = value.strip().lstrip("@")
        if not agent:
            raise ValueError("DISPATCH_AUTOMATION_AGENT must not be empty")
        return agent

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def automation_comment(self) -> str:
        """Body of the comment posted on every newly created issue."""

        return f"@{self.automation_agent} {self.automation_instruction}"
