
"""
store.py
Defines the HistoryStore contract and the in-memory implementation used by tests and by sessions
that do not need durable history.
Related modules:
- sql_store.py: Durable SQLAlchemy implementation of the same contract.
- core/turn.py: TurnController commits groups here on end_turn.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from ..core.group import DiceGroup

logger = logging.getLogger(__name__)


class HistoryStore(ABC):
    """
    Append-only collection of committed dice groups, cleared only in bulk.
    Double-commit protection is the turn controller's job, not the store's.
    """

    @abstractmethod
    def commit(self, group: DiceGroup) -> None:
        """Append a finished group."""
        raise NotImplementedError

    @abstractmethod
    def list(self) -> List[DiceGroup]:
        """
        Return every committed group, most recent created_at first; equal timestamps keep
        insertion order.
        """
        raise NotImplementedError

    @abstractmethod
    def clear_all(self) -> None:
        """Remove every committed group. Irreversible."""
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.list())


class InMemoryHistoryStore(HistoryStore):
    """
    Keeps committed groups in a Python list.
    """
    def __init__(self):
        self._groups: List[DiceGroup] = []

    def commit(self, group: DiceGroup) -> None:
        self._groups.append(group)
        logger.info("committed group %s (%d dice)", group.id, len(group))

    def list(self) -> List[DiceGroup]:
        # sorted() is stable, reverse=True included, so ties stay in insertion order
        return sorted(self._groups, key=lambda g: g.created_at, reverse=True)

    def clear_all(self) -> None:
        removed = len(self._groups)
        self._groups = []
        logger.info("cleared %d groups from history", removed)

    def __len__(self) -> int:
        return len(self._groups)
