"""
Retention sweeper: removes expired pastes from the store.

A pass enumerates every key, so its cost grows with the number of stored
pastes. That is acceptable while retention is three days and volume is
modest; an expiry-bucketed index would let a pass touch only due keys.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from app.database import KeyValueStore
from app.exceptions import StoreFault
from app.repository import current_time_ms, decode_paste

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome of one sweep pass."""
    scanned: int = 0
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: bool = False


class RetentionSweeper:
    """
    Best-effort purge of expired records.

    A failure on one key is logged and the pass moves on. Only one pass runs
    at a time per process; a pass requested while another is running is
    skipped.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = current_time_ms):
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()

    def sweep(self, now_ms: Optional[int] = None) -> SweepReport:
        if not self._lock.acquire(blocking=False):
            logger.debug("Sweep already running, skipping")
            return SweepReport(skipped=True)
        try:
            return self._sweep(self.clock() if now_ms is None else now_ms)
        finally:
            self._lock.release()

    def _sweep(self, now: int) -> SweepReport:
        report = SweepReport()
        try:
            keys = self.store.list_keys()
        except StoreFault as e:
            logger.error(f"Sweep aborted, could not list keys: {e}")
            return report

        for key in keys:
            report.scanned += 1
            try:
                raw = self.store.get(key)
                if raw is None:
                    continue
                paste = decode_paste(raw, key)
                if paste.is_live(now):
                    continue
                self.store.delete(key)
                report.deleted.append(key)
            except StoreFault as e:
                logger.warning(f"Sweep skipped {key}: {e}")
                report.failed.append(key)

        if report.deleted or report.failed:
            logger.info(
                f"Sweep scanned {report.scanned}, deleted {len(report.deleted)}, "
                f"failed {len(report.failed)}"
            )
        return report

    def run_in_background(self, now_ms: Optional[int] = None) -> None:
        """Entry point for background tasks: never raises."""
        try:
            self.sweep(now_ms)
        except Exception:
            logger.exception("Unexpected error during retention sweep")
