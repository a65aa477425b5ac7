
"""
config.py
Defines the SackConfig and AnimationTiming dataclasses, which centralize the numeric defaults for a dice sack session.
Related modules:
- turn.py: Uses SackConfig to size new turns and seed the RNG.
- animation.py: Uses AnimationTiming to randomize start delay and reveal duration.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import InvalidArgumentError, InvalidSidesError


@dataclass(frozen=True)
class AnimationTiming:
    """
    Bounds for the cosmetic rolling animation of a single die.
    Fields:
        start_delay (tuple): (low, high) seconds before the die starts tumbling.
        duration (tuple): (low, high) seconds the tumbling lasts.
        steps (int): Number of cosmetic faces shown before the true roll.
    """
    start_delay: Tuple[float, float] = (0.0, 0.25)
    duration: Tuple[float, float] = (0.5, 1.0)
    steps: int = 10

    def __post_init__(self):
        for name in ("start_delay", "duration"):
            low, high = getattr(self, name)
            if low < 0 or high < low:
                raise InvalidArgumentError(f"{name} must be a (low, high) range with 0 <= low <= high")
        if self.steps < 1:
            raise InvalidArgumentError("steps must be at least 1")


@dataclass(frozen=True)
class SackConfig:
    """
    Session defaults for the turn controller.
    Fields:
        dice_count (int): Dice in a fresh turn (default 6).
        sides (int): Faces on each die (default 6).
        rng_seed (int|None): Seed for deterministic sessions; None draws from OS entropy.
        timing (AnimationTiming): Animated roll timing bounds.
    """
    dice_count: int = 6
    sides: int = 6
    rng_seed: Optional[int] = None
    timing: AnimationTiming = field(default_factory=AnimationTiming)

    def __post_init__(self):
        if self.dice_count < 1:
            raise InvalidArgumentError("dice_count must be at least 1")
        if self.sides < 1:
            raise InvalidSidesError(self.sides)
