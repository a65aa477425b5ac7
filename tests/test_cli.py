import contextlib
import io
import unittest

from dice_sack.core.config import SackConfig
from dice_sack.core.turn import TurnController
from dice_sack.persistence.store import InMemoryHistoryStore
from UI.cli import handle_command


class TestCliCommands(unittest.TestCase):
    """
    Tests for the terminal command handler:
      - 'e' saves the turn once and says so only when something was saved
      - 'q' stops the loop
    """

    def setUp(self):
        self.store = InMemoryHistoryStore()
        self.controller = TurnController(self.store, config=SackConfig(rng_seed=5))

    def run_command(self, line):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            keep_going = handle_command(self.controller, line)
        return keep_going, out.getvalue()

    def test_end_turn_twice(self):
        keep_going, first = self.run_command("e")
        self.assertTrue(keep_going)
        self.assertIn("Turn saved to history.", first)
        _, second = self.run_command("e")
        self.assertIn("already ended", second)
        self.assertNotIn("saved", second)
        self.assertEqual(len(self.store), 1)

    def test_new_turn_then_end_saves_again(self):
        self.run_command("e")
        self.run_command("n 3")
        _, out = self.run_command("e")
        self.assertIn("Turn saved to history.", out)
        self.assertEqual(len(self.store), 2)
        self.assertEqual(sorted(len(g) for g in self.store.list()), [3, 6])

    def test_quit(self):
        keep_going, _ = self.run_command("q")
        self.assertFalse(keep_going)


if __name__ == '__main__':
    unittest.main()
