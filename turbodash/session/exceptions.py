"""Session-related exceptions."""

from turbodash.exceptions import TurboDashError


class SessionError(TurboDashError):
    """Base class for session errors."""


class SessionStoreError(SessionError):
    """The key-value backend failed while reading or writing a session."""


class SessionDecodeError(SessionError):
    """A stored session record could not be deserialized."""


class SessionTokenError(SessionError):
    """The session token is malformed or its signature does not verify."""
