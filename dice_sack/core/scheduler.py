
"""
scheduler.py
Clock abstraction used to drive animated rolls. The core only ever asks a Scheduler to run a
callback after a delay, so the same animation runs under a virtual clock (tests, headless use),
an asyncio event loop, or a GUI toolkit's timer.
Related modules:
- animation.py: Schedules start delay and animation steps through a Scheduler.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple


class Scheduler(ABC):
    """
    Runs callbacks after a delay, on a single logical thread.
    """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """
        Arrange for callback() to run once, no sooner than delay seconds from now.
        Args:
            delay (float): Seconds to wait (>= 0).
            callback (callable): Zero-argument function.
        """
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """
    Virtual clock advanced explicitly by the caller. Callbacks due at the same instant run in the
    order they were scheduled.
    """
    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback))

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._queue)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due (including ones scheduled
        by callbacks during the advance).
        Args:
            seconds (float): How far to move the clock.
        Returns:
            int: Number of callbacks run.
        """
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            ran += 1
        self.now = deadline
        return ran

    def run_until_idle(self, limit: int = 100000) -> int:
        """
        Run queued callbacks in due order until none remain.
        Args:
            limit (int): Safety cap on callbacks run.
        Returns:
            int: Number of callbacks run.
        """
        ran = 0
        while self._queue:
            if ran >= limit:
                raise RuntimeError(f"scheduler still busy after {limit} callbacks")
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        return ran


class AsyncioScheduler(Scheduler):
    """
    Schedules callbacks on an asyncio event loop via loop.call_later.
    """
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        loop = self.loop or asyncio.get_running_loop()
        loop.call_later(delay, callback)
