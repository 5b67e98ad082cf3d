from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.testclient import TestClient

from turbodash.session.dependencies import SessionStoreDep
from turbodash.session.dependencies import get_session
from turbodash.session.dependencies import get_session_store
from turbodash.session.models import RequestSession
from turbodash.session.store import SessionStore


def test_get_session_returns_request_session() -> None:
    request = MagicMock(spec=Request)
    session = MagicMock(spec=RequestSession)
    request.state.session = session

    assert get_session(request) is session


def test_get_session_without_middleware() -> None:
    request = MagicMock(spec=Request)
    request.state.session = None

    with pytest.raises(HTTPException) as exc_info:
        get_session(request)
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "SessionMiddleware not installed"


def test_get_session_store_from_app_state() -> None:
    request = MagicMock(spec=Request)
    store = MagicMock(spec=SessionStore)
    request.app.state.session_store = store

    assert get_session_store(request) is store


def test_get_session_store_without_store_returns_500() -> None:
    app = FastAPI()

    @app.get("/test")
    async def endpoint(store: SessionStoreDep):
        return {"ok": True}

    response = TestClient(app).get("/test")

    assert response.status_code == 500
    assert "SessionStore not initialized" in response.json()["detail"]
