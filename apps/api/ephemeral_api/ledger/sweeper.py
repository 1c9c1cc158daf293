"""Retention sweeper for the black box."""

import logging
import threading
from typing import Optional

from ephemeral_api.ledger.intake import IntakeQueue
from ephemeral_api.utils import metrics
from ephemeral_api.utils.clock import Clock, now_ms

logger = logging.getLogger(__name__)


class RetentionSweeper:
    """Purges processed intake entries past a cutoff.

    Two triggers share one deletion rule: an on-demand sweep with an optional
    cutoff, and a periodic sweep with a fixed retention window.
    """

    def __init__(
        self,
        queue: IntakeQueue,
        lock: threading.RLock,
        retention_window_ms: int,
        default_window_ms: int,
        clock: Clock = now_ms,
    ):
        self.queue = queue
        self.lock = lock
        self.retention_window_ms = retention_window_ms
        self.default_window_ms = default_window_ms
        self.clock = clock

    def sweep(self, older_than: Optional[int] = None, trigger: str = "manual") -> int:
        """Delete processed entries older than the cutoff; return the count."""
        if older_than is None:
            older_than = self.clock() - self.default_window_ms
        with self.lock:
            deleted = self.queue.delete(older_than)
            metrics.intake_queue_size.set(len(self.queue))
        if deleted:
            metrics.transactions_swept.labels(trigger=trigger).inc(deleted)
        return deleted

    def sweep_expired(self) -> int:
        """Periodic sweep. Errors are logged, never raised."""
        try:
            deleted = self.sweep(self.clock() - self.retention_window_ms, trigger="periodic")
        except Exception as e:
            logger.error(f"Auto-cleanup failed: {e}", exc_info=True)
            return 0
        if deleted > 0:
            logger.info(f"Auto-cleanup: deleted {deleted} old transactions from black box")
        return deleted
