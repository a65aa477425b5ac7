import csv
import datetime
import os
import tempfile
import unittest

from dice_sack.core.dice import Die
from dice_sack.core.group import DiceGroup
from dice_sack.persistence import csv_io

T0 = datetime.datetime(2025, 7, 30, 12, 0, tzinfo=datetime.timezone.utc)


class TestCsvExport(unittest.TestCase):
    def test_one_row_per_die_and_single_header(self):
        groups = [
            DiceGroup([Die(6, value=1, locked=True), Die(6, value=6, locked=False)], created_at=T0),
            DiceGroup([Die(20, value=13, locked=False)], created_at=T0),
        ]
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "history.csv")
            self.assertEqual(csv_io.export_history(groups, path), 3)
            self.assertEqual(csv_io.export_history(groups[1:], path), 1)
            with open(path, newline='', encoding="utf-8") as f:
                rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 4)
        self.assertEqual(list(rows[0].keys()), csv_io.get_history_header())
        self.assertEqual([r["value"] for r in rows], ["1", "6", "13", "13"])
        self.assertEqual([r["position"] for r in rows], ["0", "1", "0", "0"])
        self.assertEqual(rows[0]["locked"], "True")
        self.assertEqual(rows[0]["group_id"], groups[0].id)


if __name__ == '__main__':
    unittest.main()
