"""
Turn scheduler - cancellable delayed-task queue on virtual time.

Turn pacing (action lands, boss winds up, boss hits) is presentation, not
rules. The session posts those steps here instead of using real timers, so
a UI can advance the clock from its frame loop and a test can jump straight
to the end:

    scheduler = TurnScheduler()
    scheduler.post_delta(2000, "boss_reply", session._boss_reply)
    scheduler.advance(500)    # nothing yet
    scheduler.advance(1500)   # boss_reply runs
    scheduler.cancel_all()    # session disposed, nothing else will run
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable, List


logger = logging.getLogger("BossFight.Scheduler")


@dataclass(order=True)
class ScheduledTask:
    """A single task in the queue, ordered by due time then insertion."""
    due_ms: float
    _seq: int = field(compare=True, repr=False)
    name: str = field(compare=False, default="")
    callback: Callable[[], None] = field(compare=False, default=None, repr=False)
    cancelled: bool = field(compare=False, default=False)


class TurnScheduler:
    """Priority-queue scheduler driven by caller-advanced virtual time."""

    def __init__(self) -> None:
        self._queue: List[ScheduledTask] = []
        self._seq: int = 0
        self.now_ms: float = 0.0
        self.disposed: bool = False
        self.tasks_run: int = 0

    # ── Posting ──────────────────────────────────────────────────────

    def post(self, due_ms: float, name: str, callback: Callable[[], None]) -> ScheduledTask:
        """Schedule `callback` at absolute virtual time `due_ms`."""
        if due_ms < self.now_ms:
            raise ValueError(f"cannot schedule {name!r} in the past ({due_ms} < {self.now_ms})")
        self._seq += 1
        task = ScheduledTask(due_ms=due_ms, _seq=self._seq, name=name, callback=callback)
        if self.disposed:
            # Disposed schedulers accept posts but never run them
            task.cancelled = True
            return task
        heapq.heappush(self._queue, task)
        return task

    def post_delta(self, delay_ms: float, name: str, callback: Callable[[], None]) -> ScheduledTask:
        """Schedule `callback` `delay_ms` after the current virtual time."""
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0, got {delay_ms}")
        return self.post(self.now_ms + delay_ms, name, callback)

    # ── Cancellation ─────────────────────────────────────────────────

    def cancel(self, task: ScheduledTask) -> bool:
        """Cancel one task. Returns False if it already ran or was cancelled."""
        if task.cancelled or task not in self._queue:
            return False
        task.cancelled = True
        return True

    def cancel_all(self) -> int:
        """Cancel every pending task and refuse future ones. Returns count cancelled."""
        count = 0
        for task in self._queue:
            if not task.cancelled:
                task.cancelled = True
                count += 1
        self._queue.clear()
        self.disposed = True
        if count:
            logger.debug("cancelled %d pending task(s)", count)
        return count

    # ── Running ──────────────────────────────────────────────────────

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward and run everything now due."""
        if delta_ms < 0:
            raise ValueError(f"cannot advance by a negative amount: {delta_ms}")
        return self.advance_to(self.now_ms + delta_ms)

    def advance_to(self, time_ms: float) -> int:
        """
        Run every task due at or before `time_ms`, in due order.

        Tasks posted by a running callback run in the same pass if they fall
        due before `time_ms`. Returns the number of tasks run.

        If a callback raises, the pass stops with the clock at that task's
        due time. The failed task counts as run and later tasks stay queued.
        """
        count = 0
        try:
            while self._queue:
                if self._queue[0].cancelled:
                    heapq.heappop(self._queue)
                    continue
                if self._queue[0].due_ms > time_ms:
                    break
                task = heapq.heappop(self._queue)
                self.now_ms = task.due_ms
                task.cancelled = True  # Marks it spent so cancel() reports False
                count += 1
                task.callback()
            self.now_ms = max(self.now_ms, time_ms)
        finally:
            self.tasks_run += count
        return count

    def run_all(self) -> int:
        """Run until the queue is empty, jumping the clock as needed."""
        count = 0
        while True:
            next_due = self.peek_time()
            if next_due == float("inf"):
                return count
            count += self.advance_to(next_due)

    # ── Queries ──────────────────────────────────────────────────────

    def peek_time(self) -> float:
        """Due time of the next live task, or inf if none."""
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
        if self._queue:
            return self._queue[0].due_ms
        return float("inf")

    def pending_count(self) -> int:
        """Number of live tasks in the queue."""
        return sum(1 for t in self._queue if not t.cancelled)

    def __repr__(self) -> str:
        return f"TurnScheduler(now={self.now_ms}, pending={self.pending_count()})"
