from __future__ import annotations

import pytest

from app.database import InMemoryStore, KeyValueStore
from app.exceptions import StoreFault

from conftest import FlakyStore


def test_keys_are_namespaced(store: KeyValueStore, backend: FlakyStore) -> None:
    store.put("abc12345", "v")

    assert backend.store == {"pastes:abc12345": "v"}
    assert store.list_keys() == ["abc12345"]
    assert store.exists("abc12345")


def test_list_keys_ignores_other_namespaces(backend: FlakyStore) -> None:
    backend.set("other:thing", "x")
    store = KeyValueStore(backend, namespace="pastes")
    store.put("a", "1")

    assert store.list_keys() == ["a"]


def test_list_keys_limit(store: KeyValueStore) -> None:
    for key in ("a", "b", "c"):
        store.put(key, key)

    assert store.list_keys(limit=2) == ["a", "b"]
    assert store.list_keys(limit=0) == []


def test_delete_missing_key(store: KeyValueStore) -> None:
    store.delete("absent")
    assert store.get("absent") is None


def test_redis_errors_become_store_faults(store: KeyValueStore, backend: FlakyStore) -> None:
    backend.fail_get.add("pastes:k")
    with pytest.raises(StoreFault):
        store.get("k")

    backend.fail_scan = True
    with pytest.raises(StoreFault):
        store.list_keys()


def test_unreachable_redis_falls_back_to_memory() -> None:
    store = KeyValueStore.from_url("redis://127.0.0.1:1/0", namespace="pastes")

    assert isinstance(store.client, InMemoryStore)
    assert store.using_fallback
    assert store.is_healthy()


def test_malformed_redis_url_falls_back_to_memory() -> None:
    store = KeyValueStore.from_url("notascheme://x", namespace="pastes")

    assert store.using_fallback
