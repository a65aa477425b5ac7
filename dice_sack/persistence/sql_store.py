
"""
sql_store.py
Durable HistoryStore backed by SQLAlchemy. Every operation runs in its own transaction, so commit
and clear_all are all-or-nothing.
Related modules:
- models.py: DiceGroupRecord / DieRecord tables.
- database.py: Engine and session factory.
- store.py: HistoryStore contract.
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload, sessionmaker

from ..core.dice import Die
from ..core.group import DiceGroup
from .models import DiceGroupRecord, DieRecord
from .store import HistoryStore

logger = logging.getLogger(__name__)


def group_to_record(group: DiceGroup) -> DiceGroupRecord:
    """Build an unsaved DiceGroupRecord (with its DieRecords) from a domain group."""
    return DiceGroupRecord(
        group_id=group.id,
        created_at=group.created_at,
        dice=[
            DieRecord(die_id=die.id, position=i, sides=die.sides, value=die.value, locked=die.locked)
            for i, die in enumerate(group.dice)
        ],
    )


def record_to_group(record: DiceGroupRecord) -> DiceGroup:
    """Rebuild a domain group from a stored record using the direct-state Die constructor."""
    dice = [
        Die(d.sides, value=d.value, locked=d.locked, die_id=d.die_id)
        for d in sorted(record.dice, key=lambda d: d.position)
    ]
    return DiceGroup(dice, created_at=record.created_at, group_id=record.group_id)


class SqlHistoryStore(HistoryStore):
    """
    History kept in a relational database. list() returns fresh domain objects; mutating them does
    not touch the stored rows.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def commit(self, group: DiceGroup) -> None:
        with self.session_factory() as session, session.begin():
            session.add(group_to_record(group))
        logger.info("committed group %s (%d dice)", group.id, len(group))

    def list(self) -> List[DiceGroup]:
        stmt = (
            select(DiceGroupRecord)
            .options(selectinload(DiceGroupRecord.dice))
            .order_by(DiceGroupRecord.created_at.desc(), DiceGroupRecord.seq.asc())
        )
        with self.session_factory() as session:
            return [record_to_group(r) for r in session.scalars(stmt)]

    def clear_all(self) -> None:
        with self.session_factory() as session, session.begin():
            records = session.scalars(select(DiceGroupRecord)).all()
            for record in records:
                session.delete(record)
        logger.info("cleared %d groups from history", len(records))

    def __len__(self) -> int:
        with self.session_factory() as session:
            return session.scalar(select(func.count()).select_from(DiceGroupRecord))

    def count_dice(self) -> int:
        """Number of stored die records (used to check that clears cascade)."""
        with self.session_factory() as session:
            return session.scalar(select(func.count()).select_from(DieRecord))
