"""
Tick-counted deferred actions.

Delayed effects (catch reset, cast timeout, feedback clear) are queued here
instead of running on wall-clock timers. Each entry remembers the epoch it
was scheduled in; `cancel_all()` bumps the epoch so anything queued by an
earlier session is dropped rather than applied.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


@dataclass(order=True)
class _Entry:
    due: int
    seq: int
    epoch: int = field(compare=False)
    label: str = field(compare=False)
    action: Callable[[], None] = field(compare=False)


class Scheduler:
    def __init__(self) -> None:
        self.now = 0
        self.epoch = 0
        self._queue: List[_Entry] = []
        self._seq = itertools.count()

    def schedule(self, delay_ticks: int, action: Callable[[], None], label: str = "") -> None:
        if delay_ticks < 0:
            raise ValueError("delay_ticks must be >= 0")
        entry = _Entry(self.now + delay_ticks, next(self._seq), self.epoch, label, action)
        heapq.heappush(self._queue, entry)
        logger.debug("scheduled %s at tick %d (epoch %d)", label or "action", entry.due, self.epoch)

    def cancel_all(self) -> None:
        self.epoch += 1
        self._queue.clear()

    def advance(self, ticks: int = 1) -> None:
        self.now += ticks

    def drain(self) -> int:
        """Run every due action from the current epoch. Returns how many ran."""
        due: List[_Entry] = []
        while self._queue and self._queue[0].due <= self.now:
            due.append(heapq.heappop(self._queue))

        ran = 0
        for entry in due:
            if entry.epoch != self.epoch:
                logger.debug("dropping stale %s from epoch %d", entry.label, entry.epoch)
                continue
            entry.action()
            ran += 1
        return ran

    @property
    def pending(self) -> int:
        return len(self._queue)

    def labels(self) -> List[str]:
        return [e.label for e in sorted(self._queue)]
