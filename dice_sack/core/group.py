
"""
group.py
Defines DiceGroup: the ordered set of dice for one turn or one committed roll.
Related modules:
- dice.py: Die members.
- turn.py: Owns the live group during a turn.
- persistence/store.py: Stores committed groups.
"""

import datetime
import logging
import uuid
from typing import Callable, Iterable, List, Optional

from .config import AnimationTiming
from .dice import Die
from .errors import BusyError, InvalidArgumentError
from .events import Observable
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """Naive timestamps are taken to be UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


class DiceGroup(Observable):
    """
    Ordered dice plus a creation timestamp. Order is meaningful (display order).
    Member events are re-emitted with the group id attached; GroupRolled is emitted when a roll of
    the whole group finishes.
    """
    def __init__(self, dice: Iterable[Die] = (), created_at: Optional[datetime.datetime] = None,
                 group_id: Optional[str] = None):
        """
        Args:
            dice (iterable[Die]): Members, stored in the given order.
            created_at (datetime|None): Creation time, normalized to UTC (naive means UTC); now if omitted.
            group_id (str|None): Identifier to restore; a new uuid4 string otherwise.
        """
        super().__init__()
        self.dice: List[Die] = list(dice)
        self.created_at = as_utc(created_at) if created_at is not None else utc_now()
        self.id = group_id or str(uuid.uuid4())
        for die in self.dice:
            die.subscribe(self._forward)

    def _forward(self, event) -> None:
        self._notify(event["type"], **{k: v for k, v in event.items() if k != "type"}, group_id=self.id)

    def __len__(self):
        return len(self.dice)

    def __iter__(self):
        return iter(self.dice)

    def __getitem__(self, index: int) -> Die:
        return self.dice[index]

    @property
    def values(self) -> List[int]:
        """Current faces in display order."""
        return [d.value for d in self.dice]

    @property
    def in_motion(self) -> bool:
        """True while any member die is animating."""
        return any(d.in_motion for d in self.dice)

    def find(self, die_id: str) -> Die:
        """
        Look up a member by id.
        Raises:
            InvalidArgumentError: If no member has that id.
        """
        for die in self.dice:
            if die.id == die_id:
                return die
        raise InvalidArgumentError(f"no die with id {die_id!r} in group {self.id}")

    def _ensure_idle(self) -> None:
        if self.in_motion:
            raise BusyError(f"group {self.id} has dice still rolling")

    def roll_all(self) -> None:
        """
        Roll every member; locked dice keep their value.
        Raises:
            BusyError: If any member is animating (checked before any die changes).
        """
        self._ensure_idle()
        for die in self.dice:
            die.roll()
        logger.debug("group %s rolled %s", self.id, self.values)
        self._notify("GroupRolled", group_id=self.id, values=self.values)

    def roll_all_animated(self, on_all_complete: Callable[[], None], scheduler: Scheduler,
                          timing: Optional[AnimationTiming] = None) -> None:
        """
        Animate every member independently and call on_all_complete once, after the last die
        finishes. Locked dice complete immediately without moving.
        Args:
            on_all_complete (callable): Called exactly once.
            scheduler (Scheduler): Clock driving the animations.
            timing (AnimationTiming|None): Animation bounds shared by all dice.
        Raises:
            BusyError: If any member is already animating.
        """
        self._ensure_idle()
        started = len(self.dice)
        finished = 0

        def one_done():
            nonlocal finished
            finished += 1
            if finished == started:
                logger.debug("group %s finished animated roll %s", self.id, self.values)
                self._notify("GroupRolled", group_id=self.id, values=self.values)
                on_all_complete()

        if started == 0:
            self._notify("GroupRolled", group_id=self.id, values=[])
            on_all_complete()
            return
        for die in self.dice:
            die.animated_roll(one_done, scheduler, timing)

    def __repr__(self):
        return f"DiceGroup(id={self.id!r}, created_at={self.created_at.isoformat()}, values={self.values})"
