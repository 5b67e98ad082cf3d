"""Tests for the session store."""

from unittest.mock import AsyncMock

import pytest

from turbodash.backends.memory import MemoryBackend
from turbodash.session.config import SessionConfig
from turbodash.session.exceptions import SessionDecodeError
from turbodash.session.exceptions import SessionStoreError
from turbodash.session.models import SessionCookie
from turbodash.session.models import SessionFound
from turbodash.session.models import SessionMissing
from turbodash.session.models import SessionRecord
from turbodash.session.models import StoreFailure
from turbodash.session.models import StoreSuccess
from turbodash.session.store import SessionStore


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> SessionStore:
    return SessionStore(backend)


@pytest.fixture
def record() -> SessionRecord:
    cookie = SessionCookie.from_config(SessionConfig(secret_key="a" * 32))
    return SessionRecord(cookie=cookie, data={"user_id": "u-1", "theme": "dark"})


@pytest.mark.asyncio
async def test_write_then_read_round_trip(store: SessionStore, record: SessionRecord) -> None:
    assert await store.write("sid-1", record) == StoreSuccess()

    result = await store.read("sid-1")

    assert isinstance(result, SessionFound)
    assert result.record == record


@pytest.mark.asyncio
async def test_records_are_namespaced(
    store: SessionStore, backend: MemoryBackend, record: SessionRecord
) -> None:
    await store.write("sid-1", record)

    assert await backend.keys() == ["session:sid-1"]
    stored = await backend.get("session:sid-1")
    assert stored is not None
    assert SessionRecord.model_validate_json(stored) == record


@pytest.mark.asyncio
async def test_read_missing_is_absence_not_error(store: SessionStore) -> None:
    assert await store.read("unknown") == SessionMissing()


@pytest.mark.asyncio
async def test_destroy_then_read_is_missing(store: SessionStore, record: SessionRecord) -> None:
    await store.write("sid-1", record)

    assert await store.destroy("sid-1") == StoreSuccess()
    assert await store.read("sid-1") == SessionMissing()


@pytest.mark.asyncio
async def test_destroy_is_idempotent(store: SessionStore) -> None:
    assert await store.destroy("never-existed") == StoreSuccess()


@pytest.mark.asyncio
async def test_write_fully_overwrites(store: SessionStore, record: SessionRecord) -> None:
    await store.write("sid-1", record)
    replacement = SessionRecord(cookie=record.cookie, data={"other": 1})
    await store.write("sid-1", replacement)

    result = await store.read("sid-1")
    assert isinstance(result, SessionFound)
    assert result.record.data == {"other": 1}


@pytest.mark.asyncio
async def test_touch_re_persists(store: SessionStore, record: SessionRecord) -> None:
    await store.write("sid-1", record)
    record.cookie.reset_expiry()

    assert await store.touch("sid-1", record) == StoreSuccess()
    result = await store.read("sid-1")
    assert isinstance(result, SessionFound)
    assert result.record.cookie.expires == record.cookie.expires


@pytest.mark.asyncio
async def test_read_undecodable_record_is_failure(
    store: SessionStore, backend: MemoryBackend
) -> None:
    await backend.set("session:broken", "not json")

    result = await store.read("broken")

    assert isinstance(result, StoreFailure)
    assert isinstance(result.cause, SessionDecodeError)


@pytest.mark.asyncio
async def test_backend_failures_are_reported_not_raised(record: SessionRecord) -> None:
    backend = AsyncMock(spec=MemoryBackend)
    backend.get.side_effect = ConnectionError("unreachable")
    backend.set.side_effect = ConnectionError("unreachable")
    backend.delete.side_effect = ConnectionError("unreachable")
    store = SessionStore(backend)

    for result in (
        await store.read("sid"),
        await store.write("sid", record),
        await store.touch("sid", record),
        await store.destroy("sid"),
    ):
        assert isinstance(result, StoreFailure)
        assert isinstance(result.cause, SessionStoreError)
        assert "unreachable" in str(result.cause)


@pytest.mark.asyncio
async def test_ids(store: SessionStore, backend: MemoryBackend, record: SessionRecord) -> None:
    await store.write("a", record)
    await store.write("b", record)
    await backend.set("user:1", "{}")

    assert sorted(await store.ids()) == ["a", "b"]


@pytest.mark.asyncio
async def test_custom_prefix(backend: MemoryBackend, record: SessionRecord) -> None:
    store = SessionStore(backend, prefix="sess/")
    await store.write("sid", record)

    assert await backend.keys() == ["sess/sid"]
