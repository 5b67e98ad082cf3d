"""Session middleware resolving a request's session from the store."""

from logging import getLogger
from typing import Optional

from fastapi import Request
from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint
from starlette.types import ASGIApp

from .config import SessionConfig
from .exceptions import SessionTokenError
from .models import RequestSession
from .models import SessionFound
from .models import StoreFailure
from .security import SecurityManager
from .store import SessionStore

logger = getLogger(__name__)


class SessionMiddleware(BaseHTTPMiddleware):
    """Loads the session before the route runs and persists it afterwards.

    Any failure to resume a session (bad token, expired cookie, backend
    error) degrades the request to a fresh, unauthenticated session.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: SessionStore,
        config: SessionConfig,
        security: Optional[SecurityManager] = None,
    ) -> None:
        super().__init__(app)
        self.store = store
        self.config = config
        self.security = security or SecurityManager(config.secret_key)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.app.state.session_store = self.store

        session = await self._load_session(request)
        request.state.session = session

        response = await call_next(request)
        await self._save_session(session, response)
        return response

    def _extract_token(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.config.cookie_name)
        if token:
            return token
        return request.headers.get(self.config.header_name) or None

    async def _load_session(self, request: Request) -> RequestSession:
        token = self._extract_token(request)
        if token is None:
            return RequestSession.new(self.config)

        try:
            session_id = self.security.parse_token(token)
        except SessionTokenError as e:
            logger.info("Ignoring session token: %s", e)
            return RequestSession.new(self.config)

        result = await self.store.read(session_id)
        if isinstance(result, SessionFound):
            if result.record.cookie.is_expired():
                logger.debug("Session <%s> expired", session_id)
                await self.store.destroy(session_id)
                return RequestSession.new(self.config)
            return RequestSession(session_id, result.record, is_new=False)

        if isinstance(result, StoreFailure):
            logger.warning("Unable to resume session <%s>: %s", session_id, result.cause)
        return RequestSession.new(self.config)

    async def _save_session(self, session: RequestSession, response: Response) -> None:
        if session.previous_id is not None:
            await self.store.destroy(session.previous_id)

        if session.destroyed:
            await self.store.destroy(session.session_id)
            response.delete_cookie(
                self.config.cookie_name,
                path=self.config.cookie_path,
                domain=self.config.cookie_domain,
            )
            return

        if session.modified or (session.is_new and self.config.save_uninitialized):
            session.record.cookie.reset_expiry()
            result = await self.store.write(session.session_id, session.record)
        elif not session.is_new and self.config.rolling:
            session.record.cookie.reset_expiry()
            result = await self.store.touch(session.session_id, session.record)
        else:
            return

        if isinstance(result, StoreFailure):
            logger.warning("Session <%s> was not saved: %s", session.session_id, result.cause)
            return

        self._set_cookie(response, session)

    def _set_cookie(self, response: Response, session: RequestSession) -> None:
        token = self.security.make_token(session.session_id)
        response.set_cookie(
            self.config.cookie_name,
            token,
            max_age=self.config.cookie_max_age,
            path=self.config.cookie_path,
            domain=self.config.cookie_domain,
            secure=self.config.cookie_secure,
            httponly=self.config.cookie_httponly,
            samesite=self.config.cookie_samesite,
        )
        response.headers[self.config.header_name] = token
