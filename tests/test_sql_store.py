import datetime
import os
import unittest
from unittest import mock

from dice_sack.core.config import SackConfig
from dice_sack.core.dice import Die
from dice_sack.core.group import DiceGroup
from dice_sack.core.turn import TurnController
from dice_sack.persistence.database import DATABASE_URL_ENV, make_session_factory, resolve_database_url
from dice_sack.persistence.sql_store import SqlHistoryStore

T0 = datetime.datetime(2025, 7, 30, 12, 0, tzinfo=datetime.timezone.utc)


class TestSqlHistoryStore(unittest.TestCase):
    """
    Tests for the durable store on an in-memory SQLite database:
      - committed groups come back with ids, timestamps and dice in order
      - list() orders by created_at descending, ties by insertion
      - clear_all() removes groups and cascades to their dice
    """

    def setUp(self):
        self.store = SqlHistoryStore(make_session_factory("sqlite://"))

    def make_group(self, minutes, values, locked=()):
        dice = [Die(6, value=v, locked=i in locked) for i, v in enumerate(values)]
        return DiceGroup(dice, created_at=T0 + datetime.timedelta(minutes=minutes))

    def test_commit_and_list_restores_group(self):
        g = self.make_group(0, [6, 1, 4], locked={1})
        self.store.commit(g)
        [restored] = self.store.list()
        self.assertIsNot(restored, g)
        self.assertEqual(restored.id, g.id)
        self.assertEqual(restored.created_at, g.created_at)
        self.assertEqual(restored.values, [6, 1, 4])
        self.assertEqual([d.locked for d in restored], [False, True, False])
        self.assertEqual([d.id for d in restored], [d.id for d in g])
        self.assertEqual([d.sides for d in restored], [6, 6, 6])
        self.assertFalse(any(d.in_motion for d in restored))

    def test_ordering(self):
        old, new, mid = self.make_group(0, [1]), self.make_group(20, [2]), self.make_group(10, [3])
        tie_a, tie_b = self.make_group(10, [4]), self.make_group(10, [5])
        for g in (old, new, mid, tie_a, tie_b):
            self.store.commit(g)
        self.assertEqual([g.id for g in self.store.list()], [new.id, mid.id, tie_a.id, tie_b.id, old.id])

    def test_clear_all_cascades_to_dice(self):
        self.store.commit(self.make_group(0, [1, 2, 3]))
        self.store.commit(self.make_group(1, [4, 5]))
        self.assertEqual(len(self.store), 2)
        self.assertEqual(self.store.count_dice(), 5)
        self.store.clear_all()
        self.assertEqual(self.store.list(), [])
        self.assertEqual(len(self.store), 0)
        self.assertEqual(self.store.count_dice(), 0)

    def test_mutating_listed_group_does_not_touch_store(self):
        self.store.commit(self.make_group(0, [3, 3]))
        listed = self.store.list()[0]
        listed[0].toggle_lock()
        self.assertFalse(self.store.list()[0][0].locked)

    def test_other_die_sizes(self):
        g = DiceGroup([Die(20, value=17, locked=False), Die(4, value=4, locked=True)], created_at=T0)
        self.store.commit(g)
        [restored] = self.store.list()
        self.assertEqual([(d.sides, d.value, d.locked) for d in restored], [(20, 17, False), (4, 4, True)])

    def test_same_group_committed_twice_is_stored_twice(self):
        # only the turn controller guards against double commits
        g = self.make_group(0, [2, 5])
        self.store.commit(g)
        self.store.commit(g)
        self.assertEqual(len(self.store), 2)
        self.assertEqual(self.store.count_dice(), 4)
        self.assertEqual([r.id for r in self.store.list()], [g.id, g.id])
        self.store.clear_all()
        self.assertEqual(len(self.store), 0)
        self.assertEqual(self.store.count_dice(), 0)

    def test_with_turn_controller(self):
        controller = TurnController(self.store, config=SackConfig(dice_count=6, sides=6, rng_seed=3))
        group = controller.group
        controller.toggle_lock(group[0].id)
        controller.roll_all()
        controller.end_turn()
        controller.end_turn()
        history = controller.history()
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0].id, group.id)
        self.assertEqual(history[0].values, group.values)
        self.assertTrue(history[0][0].locked)
        controller.clear_history()
        self.assertEqual(controller.history(), [])


class TestDatabaseUrl(unittest.TestCase):
    def test_explicit_url_wins(self):
        with mock.patch.dict(os.environ, {DATABASE_URL_ENV: "sqlite:///env.db"}):
            self.assertEqual(resolve_database_url("sqlite://"), "sqlite://")

    def test_env_url_and_postgres_rewrite(self):
        with mock.patch.dict(os.environ, {DATABASE_URL_ENV: "postgres://u:p@host/db"}):
            self.assertEqual(resolve_database_url(), "postgresql://u:p@host/db")

    def test_default_sqlite_file(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            url = resolve_database_url()
        self.assertTrue(url.startswith("sqlite:///"))
        self.assertTrue(url.endswith("dice_sack.db"))


if __name__ == '__main__':
    unittest.main()
