"""Deferred processing queue that simulates block time."""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Optional

from ephemeral_api.utils.clock import Clock, now_ms


@dataclass(order=True)
class ScheduledTask:
    due_at: int
    seq: int
    transaction_id: str = field(compare=False)


class BlockScheduler:
    """Min-heap of transactions ordered by the time they become processable.

    Nothing here sleeps; a caller pops due entries with an explicit `now`,
    which keeps block time testable without wall-clock delays.
    """

    def __init__(self, clock: Clock = now_ms):
        self.clock = clock
        self._heap: list[ScheduledTask] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, transaction_id: str, delay_ms: int) -> ScheduledTask:
        task = ScheduledTask(self.clock() + delay_ms, next(self._counter), transaction_id)
        heapq.heappush(self._heap, task)
        return task

    def next_due_at(self) -> Optional[int]:
        return self._heap[0].due_at if self._heap else None

    def pop_due(self, now: Optional[int] = None) -> list[str]:
        """Remove and return ids whose due time has passed, oldest first."""
        now = self.clock() if now is None else now
        due = []
        while self._heap and self._heap[0].due_at <= now:
            due.append(heapq.heappop(self._heap).transaction_id)
        return due
