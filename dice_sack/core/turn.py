
"""
turn.py
Implements the TurnController class, which owns the live dice group, enforces the turn state
machine (ACTIVE <-> ENDED), commits finished turns to the history store and emits events.
Related modules:
- config.py: SackConfig sizes new turns.
- group.py / dice.py: The live group and its dice.
- persistence/store.py: HistoryStore receives committed groups.
"""

import enum
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .config import SackConfig
from .dice import Die
from .errors import BusyError, InvalidArgumentError, NotActiveError
from .events import Observable
from .group import DiceGroup
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


class TurnStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


@dataclass(frozen=True)
class TurnState:
    """
    Snapshot of the controller state.
    Fields:
        status (TurnStatus): ACTIVE while dice may be rolled, ENDED once committed.
        group (DiceGroup): The live group (ACTIVE) or the group just committed (ENDED).
    """
    status: TurnStatus
    group: DiceGroup

    @property
    def is_active(self) -> bool:
        return self.status is TurnStatus.ACTIVE


class TurnController(Observable):
    """
    State machine for one player's dice session. A fresh ACTIVE turn is started on construction.
    Collaborators are injected: the history store, an optional scheduler for animated rolls and an
    optional RNG (seeded from config.rng_seed when omitted).
    The event log keeps only the most recent max_events entries; callers that need every event
    should drain it with pop_events() or subscribe a listener.
    """
    def __init__(self, store, config: Optional[SackConfig] = None,
                 scheduler: Optional[Scheduler] = None, rng: Optional[random.Random] = None,
                 max_events: int = 1000):
        """
        Args:
            store (HistoryStore): Receives groups on end_turn.
            config (SackConfig|None): Session defaults.
            scheduler (Scheduler|None): Required only for roll_all_animated.
            rng (random.Random|None): Randomness for every die this controller creates.
            max_events (int): Size of the recorded event log; oldest entries drop first.
        """
        super().__init__()
        self.config = config or SackConfig()
        self.store = store
        self.scheduler = scheduler
        self.rng = rng or random.Random(self.config.rng_seed)
        self._events = deque(maxlen=max_events)
        self._group: Optional[DiceGroup] = None
        self._status = TurnStatus.ENDED
        self._unsubscribe_group: Callable[[], None] = lambda: None
        self.new_turn()

    # Events are simple dicts, recorded and pushed to listeners
    def _emit(self, event_type: str, **payload) -> None:
        self._events.append(self._notify(event_type, **payload))

    def _on_group_event(self, event: Dict) -> None:
        # forward only; animation frames are not worth recording
        self._notify(event["type"], **{k: v for k, v in event.items() if k != "type"})

    def pop_events(self) -> List[Dict]:
        """
        Return and clear all recorded events since last call.
        Returns:
            list[dict]: List of event dicts.
        """
        ev = list(self._events)
        self._events.clear()
        return ev

    def get_events(self) -> List[Dict]:
        """Return all recorded events so far (does not clear)."""
        return list(self._events)

    @property
    def state(self) -> TurnState:
        return TurnState(self._status, self._group)

    @property
    def status(self) -> TurnStatus:
        return self._status

    @property
    def group(self) -> DiceGroup:
        return self._group

    def is_active(self) -> bool:
        return self._status is TurnStatus.ACTIVE

    def _ensure_active(self, action: str) -> None:
        if self._status is not TurnStatus.ACTIVE:
            raise NotActiveError(f"cannot {action}: the turn has ended, start a new turn first")

    def _ensure_idle(self, action: str) -> None:
        if self._group is not None and self._group.in_motion:
            raise BusyError(f"cannot {action} while dice are still rolling")

    def new_turn(self, dice_count: Optional[int] = None, sides_per_die: Optional[int] = None) -> DiceGroup:
        """
        Start a fresh ACTIVE turn with newly rolled dice. Callable from either state; the previous
        group is released (if it was committed it lives on in the store).
        Args:
            dice_count (int|None): Dice in the new group; config.dice_count if omitted.
            sides_per_die (int|None): Faces per die; config.sides if omitted.
        Returns:
            DiceGroup: The new live group.
        Raises:
            InvalidArgumentError: If dice_count < 1.
            InvalidSidesError: If sides_per_die < 1.
            BusyError: If the current group is still animating.
        """
        dice_count = self.config.dice_count if dice_count is None else dice_count
        sides = self.config.sides if sides_per_die is None else sides_per_die
        if isinstance(dice_count, bool) or not isinstance(dice_count, int) or dice_count < 1:
            raise InvalidArgumentError(f"dice_count must be a positive integer, got {dice_count!r}")
        self._ensure_idle("start a new turn")
        # build before swapping so a bad sides value leaves the current turn untouched
        group = DiceGroup([Die(sides, rng=self.rng) for _ in range(dice_count)])
        self._unsubscribe_group()
        self._group = group
        self._unsubscribe_group = group.subscribe(self._on_group_event)
        self._status = TurnStatus.ACTIVE
        logger.info("turn started: group %s with %d d%d", group.id, dice_count, sides)
        self._emit("TurnStarted", group_id=group.id, dice_count=dice_count, sides=sides,
                   values=group.values)
        return group

    def roll_all(self) -> None:
        """
        Roll every unlocked die of the live group.
        Raises:
            NotActiveError: If the turn has ended.
            BusyError: If dice are still animating.
        """
        self._ensure_active("roll")
        self._group.roll_all()
        self._emit("Rolled", group_id=self._group.id, values=self._group.values)

    def roll_all_animated(self, on_complete: Optional[Callable[[], None]] = None) -> None:
        """
        Animated version of roll_all. on_complete fires once, after the last die settles.
        Raises:
            NotActiveError: If the turn has ended.
            BusyError: If dice are still animating.
            RuntimeError: If the controller was built without a scheduler.
        """
        self._ensure_active("roll")
        if self.scheduler is None:
            raise RuntimeError("roll_all_animated requires a scheduler")
        group = self._group

        def settled():
            self._emit("Rolled", group_id=group.id, values=group.values)
            if on_complete is not None:
                on_complete()

        group.roll_all_animated(settled, self.scheduler, self.config.timing)

    def toggle_lock(self, die_id: str) -> None:
        """
        Flip the lock on one die of the live group.
        Raises:
            NotActiveError: If the turn has ended.
            InvalidArgumentError: If no die has that id.
            BusyError: If that die is animating.
        """
        self._ensure_active("toggle a lock")
        die = self._group.find(die_id)
        die.toggle_lock()
        self._emit("LockToggled", group_id=self._group.id, die_id=die.id, locked=die.locked)

    def end_turn(self) -> None:
        """
        Commit the live group to the history store and move to ENDED. Ending an ended turn is a
        no-op, so a group is never committed twice.
        Raises:
            BusyError: If dice are still animating (their faces are not final yet).
        """
        if self._status is TurnStatus.ENDED:
            logger.debug("end_turn ignored: turn %s already ended", self._group.id)
            return
        self._ensure_idle("end the turn")
        self.store.commit(self._group)
        self._status = TurnStatus.ENDED
        logger.info("turn ended: group %s committed with %s", self._group.id, self._group.values)
        self._emit("TurnEnded", group_id=self._group.id, values=self._group.values)

    def history(self) -> List[DiceGroup]:
        """Committed groups, most recent first."""
        return self.store.list()

    def clear_history(self) -> None:
        """Delete every committed group from the store."""
        self.store.clear_all()
        logger.info("history cleared")
        self._emit("HistoryCleared")
