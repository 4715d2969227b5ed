"""
Paste repository: the paste lifecycle over the key-value store.

Records are write-once. Each one is stored as JSON under its id and carries
its own ``expires_at``. Expiry is lazy: a record past ``expires_at`` is
treated as absent on read whether or not it has been physically removed yet.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError as RecordDecodeError

from app.config import settings
from app.database import KeyValueStore
from app.exceptions import (
    IdentifierExhausted,
    PasteNotFoundError,
    StoreFault,
    ValidationError,
)
from app.ids import generate_id
from app.models import Paste

logger = logging.getLogger(__name__)

RETENTION_DURATION_MS = 3 * 24 * 60 * 60 * 1000
DEFAULT_LANGUAGE = "text"


def current_time_ms() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def default_name(created_at_ms: int) -> str:
    created = datetime.fromtimestamp(created_at_ms / 1000, tz=timezone.utc)
    return "Paste " + created.strftime("%Y-%m-%d %H:%M:%S UTC")


def decode_paste(raw: str, key: str) -> Paste:
    """Parse a stored record, raising StoreFault if it is not a valid paste."""
    try:
        return Paste.model_validate_json(raw)
    except RecordDecodeError as e:
        raise StoreFault(f"record {key!r} is not a valid paste: {e}") from e


class PasteRepository:
    """
    CRUD over paste records.

    ``now_ms`` arguments let callers pin the clock (tests, the test-mode
    header); when omitted the repository's own clock is used.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], int] = current_time_ms,
        id_factory: Callable[[], str] = generate_id,
        max_id_attempts: int = settings.ID_MAX_ATTEMPTS,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.max_id_attempts = max_id_attempts

    def _now(self, now_ms: Optional[int]) -> int:
        return self.clock() if now_ms is None else now_ms

    def _allocate_id(self) -> str:
        for _ in range(self.max_id_attempts):
            paste_id = self.id_factory()
            if not self.store.exists(paste_id):
                return paste_id
            logger.warning(f"Identifier collision on {paste_id}, regenerating")
        raise IdentifierExhausted(
            f"no free identifier after {self.max_id_attempts} attempts"
        )

    def create(
        self,
        content: str,
        language: Optional[str] = None,
        name: Optional[str] = None,
        now_ms: Optional[int] = None,
    ) -> Paste:
        """
        Store a new paste and return it with server-assigned fields filled in.

        Raises:
            ValidationError: content is empty or whitespace-only
            StoreFault: the store failed; nothing was persisted
        """
        if not content or not content.strip():
            raise ValidationError("content is required and must be non-empty")

        now = self._now(now_ms)
        paste = Paste(
            id=self._allocate_id(),
            name=name or default_name(now),
            content=content,
            language=language or DEFAULT_LANGUAGE,
            created_at=now,
            expires_at=now + RETENTION_DURATION_MS,
        )
        self.store.put(paste.id, paste.model_dump_json())
        logger.info(f"Paste {paste.id} saved ({len(content)} chars, {paste.language})")
        return paste

    def get(self, paste_id: str, now_ms: Optional[int] = None) -> Paste:
        """
        Fetch a live paste by id.

        Raises:
            PasteNotFoundError: absent, or present but expired (``expired=True``)
        """
        raw = self.store.get(paste_id)
        if raw is None:
            raise PasteNotFoundError(paste_id)

        paste = decode_paste(raw, paste_id)
        if not paste.is_live(self._now(now_ms)):
            raise PasteNotFoundError(paste_id, expired=True)
        return paste

    def list(self, limit: int = settings.LIST_LIMIT, now_ms: Optional[int] = None) -> List[Paste]:
        """
        Return up to ``limit`` live pastes, newest first.

        The store has no index on ``created_at``: only the first ``limit``
        keys in the store's listing order are fetched and sorted. With more
        than ``limit`` pastes stored this is a recent sample, not a global
        top-N.
        """
        now = self._now(now_ms)
        pastes: List[Paste] = []
        for key in self.store.list_keys(limit=limit):
            raw = self.store.get(key)
            if raw is None:
                continue
            try:
                paste = decode_paste(raw, key)
            except StoreFault as e:
                logger.warning(f"Skipping unreadable record in listing: {e}")
                continue
            if paste.is_live(now):
                pastes.append(paste)

        pastes.sort(key=lambda p: (-p.created_at, p.id))
        return pastes

    def delete(self, paste_id: str) -> None:
        """Delete a paste. Deleting a missing id is a no-op."""
        self.store.delete(paste_id)
        logger.info(f"Paste {paste_id} deleted")
