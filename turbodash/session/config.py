"""Session configuration settings."""

from typing import Literal

from pydantic import BaseModel
from pydantic import Field
from pydantic import SecretStr
from pydantic import field_validator

SESSION_KEY_PREFIX = "session:"


class SessionConfig(BaseModel):
    """Session configuration settings."""

    # Session lifetime
    cookie_max_age: int | None = Field(
        default=7 * 24 * 60 * 60,
        description="Cookie max-age in seconds (None = browser session cookie)",
    )
    rolling: bool = Field(
        default=True,
        description="Whether to touch the stored session and refresh the cookie on every request",
    )
    save_uninitialized: bool = Field(
        default=False,
        description="Whether to persist new sessions that were never modified",
    )

    # Cookie settings
    cookie_name: str = Field(default="turbodash.sid", description="Session cookie name")
    cookie_path: str = Field(default="/", description="Cookie path")
    cookie_domain: str | None = Field(default=None, description="Cookie domain")
    cookie_secure: bool = Field(
        default=True,
        description="Whether cookie should only be sent over HTTPS",
    )
    cookie_httponly: bool = Field(
        default=True,
        description="Whether cookie should be inaccessible to JavaScript",
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax",
        description="SameSite cookie attribute",
    )

    # Header settings
    header_name: str = Field(
        default="X-Session-Token",
        description="Custom header carrying the session token for non-browser clients",
    )

    # Security settings
    secret_key: SecretStr = Field(
        ...,
        description="Secret key for signing session tokens (min 32 characters)",
    )

    # Backend settings
    backend_key_prefix: str = Field(
        default=SESSION_KEY_PREFIX,
        description="Prefix for session keys in backend storage",
    )

    @field_validator("secret_key")
    @classmethod
    def _check_secret_length(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value()) < 32:
            msg = "secret_key must be at least 32 characters"
            raise ValueError(msg)
        return value
