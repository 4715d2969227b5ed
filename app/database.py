"""
Key-value store layer: Redis with an in-memory fallback for development.
Values are opaque strings; the store knows nothing about pastes.
"""
import logging
from typing import Dict, Iterator, List, Optional
from redis import Redis
from redis.exceptions import ConnectionError, RedisError

from app.config import settings
from app.exceptions import StoreFault

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Simple in-memory store for development/testing (when Redis unavailable)."""

    def __init__(self):
        self.store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    def set(self, key: str, value: str):
        self.store[key] = value

    def delete(self, key: str):
        self.store.pop(key, None)

    def exists(self, key: str) -> int:
        return int(key in self.store)

    def scan_iter(self, match: str = "*", count: Optional[int] = None) -> Iterator[str]:
        """Yield keys in insertion order; only trailing-``*`` patterns are supported."""
        prefix = match[:-1] if match.endswith("*") else match
        # Copy so callers may delete while iterating.
        for key in list(self.store):
            if key.startswith(prefix):
                yield key

    def ping(self):
        """Health check."""
        return True


class KeyValueStore:
    """
    Opaque string store with get/put/delete/list-keys.

    Keys passed in and returned are logical keys; the namespace prefix is
    applied here so several services can share one Redis database.
    """

    def __init__(self, client, namespace: str = ""):
        self.client = client
        self.prefix = f"{namespace}:" if namespace else ""

    @classmethod
    def from_url(cls, url: str, namespace: str = "") -> "KeyValueStore":
        """Connect to Redis, falling back to an in-memory store."""
        try:
            logger.info(f"Attempting to connect to Redis: {url[:30]}...")
            client = Redis.from_url(url, decode_responses=True)
            client.ping()
            logger.info("Redis connected successfully")
        except ConnectionError as e:
            logger.error(f"ConnectionError connecting to Redis: {type(e).__name__}: {str(e)}")
            logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
            client = InMemoryStore()
        except (RedisError, ValueError) as e:
            logger.error(f"Unexpected error connecting to Redis: {type(e).__name__}: {str(e)}")
            logger.warning("Using in-memory fallback for development. Data will NOT persist across restarts.")
            client = InMemoryStore()
        return cls(client, namespace=namespace)

    @property
    def using_fallback(self) -> bool:
        return isinstance(self.client, InMemoryStore)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def is_healthy(self) -> bool:
        """Check if store connection is alive."""
        try:
            self.client.ping()
            return True
        except RedisError as e:
            logger.error(f"Health check failed: {e}")
        return False

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self._key(key))
        except RedisError as e:
            raise StoreFault(f"get {key!r} failed: {e}") from e

    def put(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value)
        except RedisError as e:
            raise StoreFault(f"put {key!r} failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except RedisError as e:
            raise StoreFault(f"delete {key!r} failed: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            return bool(self.client.exists(self._key(key)))
        except RedisError as e:
            raise StoreFault(f"exists {key!r} failed: {e}") from e

    def list_keys(self, limit: Optional[int] = None) -> List[str]:
        """
        Return logical keys in the store's own listing order.

        Args:
            limit: Stop after this many keys (None lists everything)
        """
        keys: List[str] = []
        if limit is not None and limit <= 0:
            return keys
        try:
            for raw in self.client.scan_iter(match=f"{self.prefix}*", count=100):
                keys.append(raw[len(self.prefix):])
                if limit is not None and len(keys) >= limit:
                    break
        except RedisError as e:
            raise StoreFault(f"list keys failed: {e}") from e
        return keys


def create_store() -> KeyValueStore:
    """Build the store configured by environment settings."""
    return KeyValueStore.from_url(settings.REDIS_URL, namespace=settings.REDIS_NAMESPACE)
