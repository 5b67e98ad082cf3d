"""Session token signing."""

import hashlib
import hmac

from pydantic import SecretStr

from .exceptions import SessionTokenError

TOKEN_SEPARATOR = "."


class SecurityManager:
    """Signs session ids so clients cannot forge or guess a cookie."""

    def __init__(self, secret_key: str | SecretStr) -> None:
        if isinstance(secret_key, SecretStr):
            secret_key = secret_key.get_secret_value()
        if len(secret_key) < 32:
            msg = "Secret key must be at least 32 characters"
            raise ValueError(msg)
        self.secret_key = secret_key.encode()

    def sign_session_id(self, session_id: str) -> str:
        """Return the HMAC-SHA256 hex digest of ``session_id``."""
        return hmac.new(self.secret_key, session_id.encode(), hashlib.sha256).hexdigest()

    def verify_signature(self, session_id: str, signature: str) -> bool:
        expected = self.sign_session_id(session_id)
        return hmac.compare_digest(expected, signature)

    def make_token(self, session_id: str) -> str:
        return f"{session_id}{TOKEN_SEPARATOR}{self.sign_session_id(session_id)}"

    def parse_token(self, token: str) -> str:
        """Return the session id carried by ``token``.

        Raises:
            SessionTokenError: If the token is malformed or tampered with
        """
        session_id, sep, signature = token.rpartition(TOKEN_SEPARATOR)
        if not sep or not session_id or not signature:
            msg = "Invalid token format"
            raise SessionTokenError(msg)
        if not self.verify_signature(session_id, signature):
            msg = "Invalid session signature"
            raise SessionTokenError(msg)
        return session_id
