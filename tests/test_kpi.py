"""Tests for the cached KPI endpoints."""

import pytest
from fastapi import FastAPI
from fastapi import Request
from fastapi.testclient import TestClient

from turbodash.app import create_app
from turbodash.cache import TTLCache
from turbodash.exceptions import CacheError
from turbodash.kpi import cached


@pytest.fixture
def kpi_cache(app: FastAPI, clock) -> TTLCache:
    cache = TTLCache(clock=clock)
    app.state.kpi_cache = cache
    return cache


def test_overview_requires_login(client: TestClient, metrics_provider) -> None:
    response = client.get("/api/kpis/overview")

    assert response.status_code == 401
    assert metrics_provider.calls == 0


def test_overview_is_cached(client, login, regular_user, metrics_provider, kpi_cache) -> None:
    login(regular_user)

    first = client.get("/api/kpis/overview")
    second = client.get("/api/kpis/overview")

    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["values"]["mrr"] == 120000
    assert metrics_provider.calls == 1
    assert kpi_cache.stats().keys == ["kpi_overview_period=month"]


def test_overview_params_get_their_own_entry(
    client, login, regular_user, metrics_provider, kpi_cache
) -> None:
    login(regular_user)

    client.get("/api/kpis/overview?period=month")
    client.get("/api/kpis/overview?period=year")

    assert metrics_provider.calls == 2
    assert sorted(kpi_cache.stats().keys) == [
        "kpi_overview_period=month",
        "kpi_overview_period=year",
    ]


def test_overview_recomputed_after_expiry(
    client, login, regular_user, metrics_provider, kpi_cache, clock
) -> None:
    login(regular_user)
    client.get("/api/kpis/overview")

    clock.advance(60)
    client.get("/api/kpis/overview")
    assert metrics_provider.calls == 1

    clock.advance(1)
    client.get("/api/kpis/overview")
    assert metrics_provider.calls == 2


def test_family_requires_permission(client, login, regular_user, metrics_provider) -> None:
    login(regular_user)

    response = client.get("/api/kpis/contratos")

    assert response.status_code == 403
    assert metrics_provider.calls == 0


def test_family_requires_login(client: TestClient) -> None:
    assert client.get("/api/kpis/clientes").status_code == 401


def test_family_key_ignores_query_order(
    client, login, regular_user, metrics_provider, kpi_cache
) -> None:
    login(regular_user)

    first = client.get("/api/kpis/clientes?month=2024-05&segment=smb")
    second = client.get("/api/kpis/clientes?segment=smb&month=2024-05")

    assert first.status_code == 200
    assert first.json()["params"] == {"month": "2024-05", "segment": "smb"}
    assert second.json() == first.json()
    assert metrics_provider.calls == 1
    assert kpi_cache.stats().keys == ["kpi_clientes_month=2024-05_segment=smb"]


def test_super_admin_reads_any_family(client, login, super_admin) -> None:
    login(super_admin)
    assert client.get("/api/kpis/contratos").status_code == 200


def test_unknown_family_is_not_found(client, login, super_admin, kpi_cache) -> None:
    login(super_admin)

    response = client.get("/api/kpis/receitas")

    assert response.status_code == 404
    assert len(kpi_cache) == 0


def test_invalidate_requires_super_admin(client, login, regular_user) -> None:
    login(regular_user)
    assert client.post("/api/kpis/invalidate?pattern=kpi_").status_code == 403


def test_invalidate_by_pattern(client, login, super_admin, metrics_provider, kpi_cache) -> None:
    login(super_admin)
    client.get("/api/kpis/clientes")
    client.get("/api/kpis/contratos")

    response = client.post("/api/kpis/invalidate?pattern=kpi_clientes")

    assert response.status_code == 200
    assert response.json() == {"invalidated": 1}
    assert kpi_cache.stats().keys == ["kpi_contratos_"]

    client.get("/api/kpis/clientes")
    assert metrics_provider.calls == 3


def test_default_app_reports_unknown_families(settings, backend) -> None:
    client = TestClient(create_app(settings, backend=backend))
    client.post("/auth/dev-login")

    assert client.get("/api/kpis/overview").status_code == 404
    assert client.get("/api/kpis/clientes").status_code == 404


def test_missing_metrics_provider(app, client, login, super_admin) -> None:
    app.state.metrics_provider = None
    login(super_admin)

    response = client.get("/api/kpis/overview")

    assert response.status_code == 500
    assert response.json()["detail"] == "MetricsProvider not initialized"


def test_cached_requires_prefix() -> None:
    with pytest.raises(CacheError):
        cached("")


def test_cached_skips_non_get_requests() -> None:
    app = FastAPI()
    calls = []

    @app.api_route("/echo", methods=["GET", "POST"])
    @cached("echo")
    def echo(value: int = 1) -> dict[str, int]:
        calls.append(value)
        return {"value": value}

    client = TestClient(app)
    client.get("/echo?value=3")
    client.get("/echo?value=3")
    client.post("/echo?value=3")
    client.post("/echo?value=3")

    assert calls == [3, 3, 3]
    assert app.state.kpi_cache.stats().keys == ["echo_value=3"]


def test_cached_with_declared_request() -> None:
    app = FastAPI()
    calls = []

    @app.get("/whoami")
    @cached("whoami")
    async def whoami(request: Request, name: str = "x") -> dict[str, str]:
        calls.append(name)
        return {"path": request.url.path, "name": name}

    client = TestClient(app)
    assert client.get("/whoami?name=a").json() == {"path": "/whoami", "name": "a"}
    assert client.get("/whoami?name=a").json() == {"path": "/whoami", "name": "a"}

    assert calls == ["a"]
    assert app.state.kpi_cache.stats().keys == ["whoami_name=a"]


def test_cached_does_not_store_none() -> None:
    app = FastAPI()
    calls = []

    @app.get("/nothing")
    @cached("nothing")
    async def nothing() -> None:
        calls.append(1)
        return None

    client = TestClient(app)
    client.get("/nothing")
    client.get("/nothing")

    assert len(calls) == 2
