
"""
serializer.py
Provides utility functions for serializing and deserializing dice groups to/from JSON.
Used by the shells to export history and by tests to compare committed groups.
"""

import datetime
import json
from typing import Any, Dict, Iterable, List

from ..core.dice import Die
from ..core.group import DiceGroup


def die_to_dict(die: Die) -> Dict[str, Any]:
    return {"id": die.id, "sides": die.sides, "value": die.value, "locked": die.locked}


def group_to_dict(group: DiceGroup) -> Dict[str, Any]:
    """
    Persisted layout of a group: identifier, ISO timestamp and ordered die records.
    The transient in_motion flag is not part of it.
    """
    return {
        "id": group.id,
        "created_at": group.created_at.isoformat(),
        "dice": [die_to_dict(d) for d in group.dice],
    }


def group_from_dict(data: Dict[str, Any]) -> DiceGroup:
    """
    Rebuild a group from group_to_dict output.
    Raises:
        InvalidSidesError / InvalidValueError: If a die record is out of range.
        KeyError: If a required field is missing.
    """
    dice = [
        Die(int(d["sides"]), value=int(d["value"]), locked=bool(d.get("locked", False)), die_id=d.get("id"))
        for d in data["dice"]
    ]
    created_at = datetime.datetime.fromisoformat(data["created_at"])
    return DiceGroup(dice, created_at=created_at, group_id=data.get("id"))


def dumps(groups: Iterable[DiceGroup], indent: int = None) -> str:
    """
    Serialize groups to a JSON array string.
    Args:
        groups: Dice groups, in the order they should appear.
        indent (int|None): Passed to json.dumps.
    Returns:
        str: JSON string.
    """
    return json.dumps([group_to_dict(g) for g in groups], indent=indent)


def loads(s: str) -> List[DiceGroup]:
    """
    Deserialize a JSON array produced by dumps.
    Args:
        s (str): JSON string.
    Returns:
        list[DiceGroup]: Rebuilt groups.
    """
    return [group_from_dict(d) for d in json.loads(s)]
