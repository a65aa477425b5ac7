"""
SQLAlchemy models for committed dice groups and their dice.
Deleting a group deletes its dice (ORM cascade plus ON DELETE CASCADE), so no die record is ever
orphaned.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class DiceGroupRecord(Base):
    __tablename__ = "dice_groups"

    seq = Column(Integer, primary_key=True, autoincrement=True)  # insertion order, breaks timestamp ties
    group_id = Column(String(36), nullable=False, index=True)  # uuid; the same group may be committed twice
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    dice = relationship(
        "DieRecord",
        back_populates="group",
        order_by="DieRecord.position",
        cascade="all, delete-orphan",
    )


class DieRecord(Base):
    __tablename__ = "dice"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_seq = Column(Integer, ForeignKey("dice_groups.seq", ondelete="CASCADE"), nullable=False, index=True)
    die_id = Column(String(36), nullable=False)  # uuid
    position = Column(Integer, nullable=False)  # display order within the group
    sides = Column(Integer, nullable=False)
    value = Column(Integer, nullable=False)
    locked = Column(Boolean, nullable=False, default=False)

    group = relationship("DiceGroupRecord", back_populates="dice")
