
"""
dice.py
Defines the Die model and the dice rolling helpers used throughout the dice sack.
Related modules:
- group.py: DiceGroup owns an ordered list of Die.
- animation.py: Drives Die.animated_roll through a Scheduler.
- turn.py: Creates fresh dice for each turn.
"""

import logging
import random
import uuid
from typing import Callable, List, Optional

from .animation import DieAnimation
from .config import AnimationTiming
from .errors import BusyError, InvalidSidesError, InvalidValueError
from .events import Observable
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

_default_rng = random.Random()


def roll_face(sides: int, rng: random.Random) -> int:
    """
    Roll a single die with the given number of sides using the provided RNG.
    Args:
        sides (int): Number of faces (>= 1).
        rng (random.Random): RNG instance.
    Returns:
        int: Die face (1-sides), each with probability 1/sides.
    """
    return rng.randint(1, sides)


def roll_n(n: int, sides: int, rng: random.Random) -> List[int]:
    """
    Roll n dice of the same kind using the provided RNG.
    Args:
        n (int): Number of dice to roll.
        sides (int): Number of faces per die.
        rng (random.Random): RNG instance.
    Returns:
        list[int]: List of die faces.
    """
    return [roll_face(sides, rng) for _ in range(n)]


def _validate_sides(sides) -> int:
    if isinstance(sides, bool) or not isinstance(sides, int) or sides < 1:
        raise InvalidSidesError(sides)
    return sides


class Die(Observable):
    """
    A single mutable die. Built either fresh (value=None, the die rolls itself) or with a fixed
    value and lock state when restoring history or setting up a test.
    Read-only attributes for renderers: sides, value, locked, in_motion.
    Events: DieRolled, DieLocked, DieFaceShown (cosmetic animation frame), DieMotionChanged.
    """
    def __init__(self, sides: int, value: Optional[int] = None, locked: bool = False,
                 rng: Optional[random.Random] = None, die_id: Optional[str] = None):
        """
        Args:
            sides (int): Number of faces (>= 1), immutable.
            value (int|None): Starting face; None rolls one.
            locked (bool): Starting lock state.
            rng (random.Random|None): Source of randomness; defaults to a shared module RNG.
            die_id (str|None): Identifier to restore; a new uuid4 string otherwise.
        Raises:
            InvalidSidesError: If sides < 1.
            InvalidValueError: If value is given and not in [1, sides].
        """
        super().__init__()
        self._sides = _validate_sides(sides)
        self.rng = rng or _default_rng
        self.id = die_id or str(uuid.uuid4())
        self._in_motion = False
        if value is None:
            self._value = roll_face(self._sides, self.rng)
        else:
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= self._sides:
                raise InvalidValueError(value, self._sides)
            self._value = value
        self._locked = bool(locked)

    @property
    def sides(self) -> int:
        return self._sides

    @property
    def value(self) -> int:
        return self._value

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def in_motion(self) -> bool:
        return self._in_motion

    def _ensure_idle(self, action: str) -> None:
        if self._in_motion:
            raise BusyError(f"cannot {action} die {self.id} while it is rolling")

    def roll(self) -> None:
        """
        Roll the die in place. Locked dice keep their value.
        Raises:
            BusyError: If the die is animating.
        """
        self._ensure_idle("roll")
        self._roll_unchecked()

    def _roll_unchecked(self) -> None:
        if self._locked:
            return
        self._value = roll_face(self._sides, self.rng)
        logger.debug("die %s rolled %d", self.id, self._value)
        self._notify("DieRolled", die_id=self.id, value=self._value)

    def lock(self) -> None:
        """Lock the die. Idempotent."""
        self._ensure_idle("lock")
        if not self._locked:
            self._locked = True
            self._notify("DieLocked", die_id=self.id, locked=True)

    def toggle_lock(self) -> None:
        """Flip the lock flag without touching the value."""
        self._ensure_idle("toggle lock on")
        self._locked = not self._locked
        self._notify("DieLocked", die_id=self.id, locked=self._locked)

    def animated_roll(self, on_complete: Callable[[], None], scheduler: Scheduler,
                      timing: Optional[AnimationTiming] = None) -> Optional[DieAnimation]:
        """
        Roll with a cosmetic tumbling animation. Only the terminal roll is the die's real result;
        faces shown along the way are emitted as DieFaceShown and must not be treated as committed.
        A locked die calls on_complete immediately and does not move.
        Args:
            on_complete (callable): Called once, after the true roll.
            scheduler (Scheduler): Clock that drives the animation.
            timing (AnimationTiming|None): Delay/duration bounds and step count.
        Returns:
            DieAnimation|None: The running animation, or None for a locked die.
        Raises:
            BusyError: If an animation is already in flight on this die.
        """
        self._ensure_idle("start a second animation on")
        if self._locked:
            on_complete()
            return None
        animation = DieAnimation(self, scheduler, timing or AnimationTiming(), self.rng, on_complete)
        animation.start()
        return animation

    # hooks driven by DieAnimation

    def _begin_motion(self) -> None:
        self._in_motion = True
        self._notify("DieMotionChanged", die_id=self.id, in_motion=True)

    def _show_face(self) -> None:
        self._value = roll_face(self._sides, self.rng)
        self._notify("DieFaceShown", die_id=self.id, value=self._value)

    def _end_motion(self) -> None:
        self._roll_unchecked()
        self._in_motion = False
        self._notify("DieMotionChanged", die_id=self.id, in_motion=False)

    def __repr__(self):
        return (f"Die(sides={self._sides}, value={self._value}, locked={self._locked}, "
                f"in_motion={self._in_motion}, id={self.id!r})")
