"""Session data models and store results."""

import secrets
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any
from typing import Literal
from typing import Optional
from typing import Union

from pydantic import BaseModel
from pydantic import Field

from .config import SessionConfig

USER_ID_KEY = "user_id"


def generate_session_id() -> str:
    return secrets.token_urlsafe(24)


class SessionCookie(BaseModel):
    """Cookie configuration carried inside every session record."""

    original_max_age: Optional[int] = Field(
        default=None, description="Cookie lifetime in milliseconds"
    )
    expires: Optional[datetime] = None
    secure: bool = True
    http_only: bool = True
    path: str = "/"
    domain: Optional[str] = None
    same_site: Literal["lax", "strict", "none"] = "lax"

    @classmethod
    def from_config(cls, config: SessionConfig) -> "SessionCookie":
        cookie = cls(
            original_max_age=config.cookie_max_age * 1000
            if config.cookie_max_age is not None
            else None,
            secure=config.cookie_secure,
            http_only=config.cookie_httponly,
            path=config.cookie_path,
            domain=config.cookie_domain,
            same_site=config.cookie_samesite,
        )
        cookie.reset_expiry()
        return cookie

    def reset_expiry(self) -> None:
        """Push ``expires`` forward by the original max age."""
        if self.original_max_age is None:
            self.expires = None
        else:
            self.expires = datetime.now(timezone.utc) + timedelta(
                milliseconds=self.original_max_age
            )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.expires


class SessionRecord(BaseModel):
    """Serializable payload stored for one session id."""

    cookie: SessionCookie = Field(default_factory=SessionCookie)
    data: dict[str, Any] = Field(default_factory=dict)


# Store results. Absence and failure are values, never raised.


@dataclass(frozen=True)
class SessionFound:
    record: SessionRecord


@dataclass(frozen=True)
class SessionMissing:
    pass


@dataclass(frozen=True)
class StoreSuccess:
    pass


@dataclass(frozen=True)
class StoreFailure:
    cause: Exception


ReadResult = Union[SessionFound, SessionMissing, StoreFailure]
WriteResult = Union[StoreSuccess, StoreFailure]


class RequestSession:
    """Mutable view of the session attached to one request.

    The middleware reads ``modified``, ``destroyed`` and ``previous_id`` after
    the response is produced to decide what to persist.
    """

    def __init__(self, session_id: str, record: SessionRecord, is_new: bool) -> None:
        self.session_id = session_id
        self.record = record
        self.is_new = is_new
        self.modified = False
        self.destroyed = False
        self.previous_id: Optional[str] = None

    @classmethod
    def new(cls, config: SessionConfig) -> "RequestSession":
        record = SessionRecord(cookie=SessionCookie.from_config(config))
        return cls(generate_session_id(), record, is_new=True)

    @property
    def data(self) -> dict[str, Any]:
        return self.record.data

    def get(self, key: str, default: Any = None) -> Any:
        return self.record.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.record.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.record.data[key] = value
        self.modified = True

    def __contains__(self, key: object) -> bool:
        return key in self.record.data

    def pop(self, key: str, default: Any = None) -> Any:
        if key in self.record.data:
            self.modified = True
        return self.record.data.pop(key, default)

    @property
    def user_id(self) -> Optional[str]:
        return self.record.data.get(USER_ID_KEY)

    def regenerate(self) -> str:
        """Move this session to a fresh id; the old record is deleted on save."""
        if not self.is_new and self.previous_id is None:
            self.previous_id = self.session_id
        self.session_id = generate_session_id()
        self.record.cookie.reset_expiry()
        self.modified = True
        return self.session_id

    def login(self, user_id: str) -> None:
        self.regenerate()
        self[USER_ID_KEY] = user_id

    def destroy(self) -> None:
        self.destroyed = True
