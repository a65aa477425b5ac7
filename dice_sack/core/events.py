
"""
events.py
Change notification for the dice sack model. Dice, groups and the turn controller emit plain dict
events ({"type": ..., ...}) to subscribed listeners so a presentation layer can refresh without
depending on any UI framework.
Related modules:
- dice.py, group.py, turn.py: Subclass Observable and emit events on mutation.
"""

from typing import Any, Callable, Dict, List

Event = Dict[str, Any]
Listener = Callable[[Event], None]


class Observable:
    """
    Minimal listener registry. Subclasses call _notify(event_type, **payload).
    """
    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for every event emitted by this object.
        Args:
            listener (callable): Called with one event dict.
        Returns:
            callable: Removes the listener when called; safe to call twice.
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, event_type: str, **payload) -> Event:
        event = {"type": event_type, **payload}
        # copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(event)
        return event
