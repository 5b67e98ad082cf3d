from typing import Annotated

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from .models import RequestSession
from .store import SessionStore


def get_session(request: Request) -> RequestSession:
    """Return the session the middleware attached to this request."""
    session = getattr(request.state, "session", None)
    if not isinstance(session, RequestSession):
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail="SessionMiddleware not installed",
        )
    return session


def get_session_store(request: Request) -> SessionStore:
    store = getattr(request.app.state, "session_store", None)
    if store is None:
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail="SessionStore not initialized",
        )
    return store


SessionDep = Annotated[RequestSession, Depends(get_session)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
