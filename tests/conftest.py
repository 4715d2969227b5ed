from __future__ import annotations

import json
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from app.database import InMemoryStore, KeyValueStore
from app.main import create_app
from app.repository import PasteRepository
from app.sweeper import RetentionSweeper


START_MS = 1_700_000_000_000


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FlakyStore(InMemoryStore):
    """In-memory store whose operations fail for chosen keys."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_get: set[str] = set()
        self.fail_delete: set[str] = set()
        self.fail_set = False
        self.fail_scan = False

    def get(self, key: str) -> Optional[str]:
        if key in self.fail_get:
            raise RedisConnectionError(f"get {key} refused")
        return super().get(key)

    def set(self, key: str, value: str):
        if self.fail_set:
            raise RedisConnectionError("set refused")
        super().set(key, value)

    def delete(self, key: str):
        if key in self.fail_delete:
            raise RedisConnectionError(f"delete {key} refused")
        super().delete(key)

    def scan_iter(self, match: str = "*", count: Optional[int] = None):
        if self.fail_scan:
            raise RedisConnectionError("scan refused")
        return super().scan_iter(match=match, count=count)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def store(backend: FlakyStore) -> KeyValueStore:
    return KeyValueStore(backend, namespace="pastes")


@pytest.fixture
def repo(store: KeyValueStore, clock: FakeClock) -> PasteRepository:
    return PasteRepository(store, clock=clock)


@pytest.fixture
def sweeper(store: KeyValueStore, clock: FakeClock) -> RetentionSweeper:
    return RetentionSweeper(store, clock=clock)


@pytest.fixture
def client(store: KeyValueStore, clock: FakeClock) -> TestClient:
    app = create_app(store=store, clock=clock, test_mode=True)
    return TestClient(app)


@pytest.fixture
def seed(store: KeyValueStore) -> Callable[..., dict]:
    """Write a raw paste record straight into the store."""

    def _seed(paste_id: str, created_at: int, expires_at: int, content: str = "seeded") -> dict:
        record = {
            "id": paste_id,
            "name": f"Paste {paste_id}",
            "content": content,
            "language": "text",
            "created_at": created_at,
            "expires_at": expires_at,
        }
        store.put(paste_id, json.dumps(record))
        return record

    return _seed
