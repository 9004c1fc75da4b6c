"""Shared store constants and client settings.

This module centralizes endpoint paths, scroll lifetimes and credential
environment variables so the runtime modules can stay small and focused.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Scroll context lifetime sent with every search/advance request.
# Long enough to cover one batch being written out, short enough that an
# abandoned cursor does not pin server resources for long.
DEFAULT_SCROLL_LIFETIME = "1m"

# Total timeout (seconds) for a single request
DEFAULT_TIMEOUT = 300.0

# Upper bound (seconds) on a cursor release, including during cancellation
DEFAULT_RELEASE_TIMEOUT = 10.0

# Credentials are read from the environment by the CLI
USER_ENV_VAR = "ES_USER"
PASSWORD_ENV_VAR = "ES_PASSWD"

# Endpoint paths (relative to the store base URL)
SEARCH_PATH = "{index}/_search"
SCROLL_PATH = "_search/scroll"


class ClientSettings(BaseModel):
    """Connection settings for one document store."""

    base_url: str = Field(..., min_length=1)
    user: str | None = None
    password: str | None = None
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    scroll_lifetime: str = Field(DEFAULT_SCROLL_LIFETIME, min_length=1)
    release_timeout: float = Field(DEFAULT_RELEASE_TIMEOUT, gt=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Drop trailing slashes; paths are joined with a single one."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url must not be empty")
        return v

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str | None) -> str | None:
        """Treat an empty user as no authentication."""
        return v or None
