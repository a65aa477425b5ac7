
"""
errors.py
Exception types raised by the dice sack core. All of them are local, recoverable conditions:
callers decide whether to surface, ignore or retry.
"""


class DiceSackError(Exception):
    """
    Base class for every error raised by the dice sack core.
    """
    pass


class InvalidSidesError(DiceSackError, ValueError):
    """
    Raised when a die is built with fewer than one side.
    """
    def __init__(self, sides):
        super().__init__(f"sides must be at least 1, got {sides!r}")
        self.sides = sides


class InvalidValueError(DiceSackError, ValueError):
    """
    Raised when a die is restored with a value outside [1, sides].
    """
    def __init__(self, value, sides):
        super().__init__(f"value must be between 1 and {sides}, got {value!r}")
        self.value = value
        self.sides = sides


class InvalidArgumentError(DiceSackError, ValueError):
    """
    Raised for malformed arguments such as a zero dice count or an unknown die id.
    """
    pass


class NotActiveError(DiceSackError):
    """
    Raised when rolling or locking is attempted after the turn has ended.
    """
    pass


class BusyError(DiceSackError):
    """
    Raised when a die (or the group holding it) is mutated while its animation is in flight.
    """
    pass
