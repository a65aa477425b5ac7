
"""
animation.py
Implements the per-die rolling animation as a small state machine driven by a Scheduler:
PENDING (start delay) -> TUMBLING (cosmetic faces at fixed sub-intervals) -> DONE (one true roll).
Related modules:
- dice.py: Die.animated_roll creates and starts a DieAnimation.
- scheduler.py: Supplies the clock.
- config.py: AnimationTiming bounds.
"""

import logging
import random
from typing import Callable

from .config import AnimationTiming
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

PENDING = "PENDING"
TUMBLING = "TUMBLING"
DONE = "DONE"


class DieAnimation:
    """
    One animated roll of one die. The start delay and the reveal duration are two independent
    uniform draws from the timing bounds; the duration is split into timing.steps equal intervals.
    The die is marked in motion as soon as the animation starts so it cannot be mutated during the
    start delay either.
    """
    def __init__(self, die, scheduler: Scheduler, timing: AnimationTiming, rng: random.Random,
                 on_complete: Callable[[], None]):
        self.die = die
        self.scheduler = scheduler
        self.timing = timing
        self.on_complete = on_complete
        self.start_delay = rng.uniform(*timing.start_delay)
        self.duration = rng.uniform(*timing.duration)
        self.step_interval = self.duration / timing.steps
        self.steps_taken = 0
        self.status = PENDING

    @property
    def total_time(self) -> float:
        """Seconds from start() until the true roll."""
        return self.start_delay + self.duration

    def start(self) -> None:
        self.die._begin_motion()
        logger.debug("die %s animating: delay %.3fs, duration %.3fs",
                     self.die.id, self.start_delay, self.duration)
        self.scheduler.call_later(self.start_delay, self._step)

    def _step(self) -> None:
        if self.steps_taken < self.timing.steps:
            self.status = TUMBLING
            self.die._show_face()
            self.steps_taken += 1
            self.scheduler.call_later(self.step_interval, self._step)
            return
        self.die._end_motion()
        self.status = DONE
        self.on_complete()
