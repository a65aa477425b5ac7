"""
csv_io.py
Persistence utilities for exporting dice history to CSV files, one row per die.
"""

import csv
import os
from typing import Any, Dict, Iterable, List

from ..core.group import DiceGroup

HISTORY_HEADER = [
    "group_id", "created_at", "position", "sides", "value", "locked",
]


def history_rows(groups: Iterable[DiceGroup]) -> List[Dict[str, Any]]:
    rows = []
    for group in groups:
        for position, die in enumerate(group.dice):
            rows.append({
                "group_id": group.id,
                "created_at": group.created_at.isoformat(),
                "position": position,
                "sides": die.sides,
                "value": die.value,
                "locked": die.locked,
            })
    return rows


def append_rows_to_csv(rows: List[Dict[str, Any]], csv_path: str, header: List[str]):
    write_header = not os.path.exists(csv_path)
    with open(csv_path, "a", newline='', encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        if write_header:
            writer.writeheader()
        for row in rows:
            writer.writerow(row)


def export_history(groups: Iterable[DiceGroup], csv_path: str) -> int:
    """
    Append every die of every group to csv_path (header written on first use).
    Returns:
        int: Number of rows written.
    """
    rows = history_rows(groups)
    append_rows_to_csv(rows, csv_path, HISTORY_HEADER)
    return len(rows)


def get_history_header():
    return HISTORY_HEADER.copy()
