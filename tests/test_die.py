import random
import unittest
from collections import Counter

from dice_sack.core.dice import Die, roll_face, roll_n
from dice_sack.core.errors import BusyError, InvalidSidesError, InvalidValueError
from dice_sack.core.scheduler import ManualScheduler


class TestDieConstruction(unittest.TestCase):
    """
    Tests for the two ways of building a die:
      - fresh (value rolled immediately, unlocked)
      - direct state (value and lock restored, validated against sides)
    """

    def test_fresh_die_value_within_sides(self):
        rng = random.Random(3)
        for sides in range(1, 21):
            for _ in range(20):
                d = Die(sides, rng=rng)
                self.assertEqual(d.sides, sides)
                self.assertGreaterEqual(d.value, 1)
                self.assertLessEqual(d.value, sides)
                self.assertFalse(d.locked)
                self.assertFalse(d.in_motion)

    def test_rejects_sides_below_one(self):
        for sides in (0, -1, -6):
            with self.assertRaises(InvalidSidesError):
                Die(sides)
        with self.assertRaises(InvalidSidesError):
            Die(0, value=1, locked=False)

    def test_sides_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            Die(0)

    def test_direct_state_constructor(self):
        d = Die(6, value=1, locked=False)
        self.assertEqual(d.sides, 6)
        self.assertEqual(d.value, 1)
        self.assertFalse(d.locked)
        d2 = Die(20, value=17, locked=True)
        self.assertEqual(d2.value, 17)
        self.assertTrue(d2.locked)

    def test_direct_state_rejects_out_of_range_value(self):
        with self.assertRaises(InvalidValueError):
            Die(6, value=0, locked=False)
        with self.assertRaises(InvalidValueError):
            Die(6, value=7, locked=False)

    def test_ids_are_unique_unless_given(self):
        self.assertNotEqual(Die(6).id, Die(6).id)
        self.assertEqual(Die(6, value=2, die_id="abc").id, "abc")


class TestDieRolling(unittest.TestCase):
    def test_roll_keeps_value_in_range(self):
        d = Die(8, rng=random.Random(11))
        for _ in range(1000):
            d.roll()
            self.assertTrue(1 <= d.value <= 8)

    def test_one_sided_die_always_shows_one(self):
        d = Die(1)
        for _ in range(10):
            d.roll()
            self.assertEqual(d.value, 1)

    def test_faces_are_roughly_uniform(self):
        d = Die(6, rng=random.Random(2024))
        n = 60000
        counts = Counter()
        for _ in range(n):
            d.roll()
            counts[d.value] += 1
        self.assertEqual(set(counts), {1, 2, 3, 4, 5, 6})
        for face in range(1, 7):
            self.assertAlmostEqual(counts[face] / n, 1 / 6, delta=0.01)

    def test_roll_helpers(self):
        rng = random.Random(5)
        self.assertTrue(1 <= roll_face(12, rng) <= 12)
        faces = roll_n(30, 4, rng)
        self.assertEqual(len(faces), 30)
        self.assertTrue(all(1 <= f <= 4 for f in faces))


class TestDieLocking(unittest.TestCase):
    def test_locked_die_does_not_change(self):
        d = Die(6, rng=random.Random(1))
        d.lock()
        before = d.value
        for _ in range(100):
            d.roll()
            self.assertEqual(d.value, before)

    def test_lock_is_idempotent(self):
        d = Die(6, value=4, locked=False)
        d.lock()
        d.lock()
        self.assertTrue(d.locked)
        self.assertEqual(d.value, 4)

    def test_toggle_twice_restores_lock_state_and_value(self):
        d = Die(6, value=3, locked=False)
        d.toggle_lock()
        self.assertTrue(d.locked)
        self.assertEqual(d.value, 3)
        d.toggle_lock()
        self.assertFalse(d.locked)
        self.assertEqual(d.value, 3)

    def test_events_on_roll_and_lock(self):
        d = Die(6, value=2, locked=False, rng=random.Random(9))
        seen = []
        unsubscribe = d.subscribe(seen.append)
        d.roll()
        d.toggle_lock()
        self.assertEqual([e["type"] for e in seen], ["DieRolled", "DieLocked"])
        self.assertEqual(seen[0]["value"], d.value)
        self.assertTrue(seen[1]["locked"])
        unsubscribe()
        d.toggle_lock()
        self.assertEqual(len(seen), 2)

    def test_locked_roll_emits_nothing(self):
        d = Die(6, value=2, locked=True)
        seen = []
        d.subscribe(seen.append)
        d.roll()
        self.assertEqual(seen, [])


class TestDieBusyGuard(unittest.TestCase):
    """
    While an animation is in flight the die rejects every mutation with BusyError.
    """

    def test_mutations_rejected_while_in_motion(self):
        scheduler = ManualScheduler()
        d = Die(6, rng=random.Random(4))
        d.animated_roll(lambda: None, scheduler)
        self.assertTrue(d.in_motion)
        with self.assertRaises(BusyError):
            d.roll()
        with self.assertRaises(BusyError):
            d.toggle_lock()
        with self.assertRaises(BusyError):
            d.lock()
        scheduler.run_until_idle()
        self.assertFalse(d.in_motion)
        d.toggle_lock()
        self.assertTrue(d.locked)


if __name__ == '__main__':
    unittest.main()
