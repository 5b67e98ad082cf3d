import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from turbodash.app import create_app
from turbodash.auth.models import User
from turbodash.backends.memory import MemoryBackend
from turbodash.config import Settings
from turbodash.metrics import StaticMetricsProvider
from turbodash.session.dependencies import SessionDep


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", session_secret="a" * 32, redis_url=None)


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def metrics_provider() -> StaticMetricsProvider:
    return StaticMetricsProvider(
        {
            "overview": {"mrr": 120000, "active_clients": 42},
            "clientes": {"total": 42, "churned": 3},
            "contratos": {"active": 57},
        }
    )


@pytest.fixture
def app(
    settings: Settings,
    backend: MemoryBackend,
    metrics_provider: StaticMetricsProvider,
) -> FastAPI:
    app = create_app(settings, backend=backend, metrics_provider=metrics_provider)

    @app.post("/test/login")
    async def login_as(user: User, session: SessionDep) -> dict[str, str]:
        await app.state.users.save(user)
        session.login(user.id)
        return {"user_id": user.id}

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def login(client: TestClient):
    """Sign the test client in as the given user."""

    def _login(user: User) -> None:
        response = client.post("/test/login", json=user.model_dump(mode="json"))
        assert response.status_code == 200

    return _login


@pytest.fixture
def regular_user() -> User:
    return User(
        id="u-1",
        email="ana@example.com",
        name="Ana",
        role="user",
        permissions=["clientes"],
    )


@pytest.fixture
def super_admin() -> User:
    return User(id="sa-1", email="root@example.com", name="Root", role="super_admin")
