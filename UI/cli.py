import argparse
import logging
import sys
from typing import Optional

from dice_sack.core.config import SackConfig
from dice_sack.core.errors import DiceSackError
from dice_sack.core.pips import face_label
from dice_sack.core.turn import TurnController
from dice_sack.persistence import csv_io
from dice_sack.persistence.database import make_session_factory
from dice_sack.persistence.sql_store import SqlHistoryStore

HELP = """Commands:
  r              roll unlocked dice
  l N [N ...]    toggle lock on die number N (1-based)
  e              end turn (saves the roll to history)
  n [COUNT]      new turn, optionally with COUNT dice
  h              show roll history
  c              clear roll history
  x PATH         export history to a CSV file
  ?              show this help
  q              quit"""


def print_state(controller: TurnController):
    """
    Print the live group: one line per die with its face and lock marker.
    Args:
        controller (TurnController): The session controller.
    """
    state = controller.state
    print(f"\n=== TURN {'ACTIVE' if state.is_active else 'ENDED'} ===")
    for i, die in enumerate(state.group.dice, start=1):
        marker = " (locked)" if die.locked else ""
        print(f"  {i}) {face_label(die.value, die.sides)}{marker}")
    print(f"Total: {sum(state.group.values)}")


def print_history(controller: TurnController):
    """
    Print every committed roll, most recent first.
    """
    rolls = controller.history()
    if not rolls:
        print("No rolls saved yet.")
        return
    print(f"\n=== HISTORY ({len(rolls)} rolls) ===")
    for group in rolls:
        faces = " ".join(face_label(d.value, d.sides) for d in group.dice)
        print(f"{group.created_at:%Y-%m-%d %H:%M:%S}  {faces}  (total {sum(group.values)})")


def handle_command(controller: TurnController, line: str) -> bool:
    """
    Execute one command line against the controller.
    Args:
        controller (TurnController): The session controller.
        line (str): Raw user input.
    Returns:
        bool: False when the user asked to quit.
    """
    parts = line.split()
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]
    if cmd == "q":
        return False
    if cmd == "r":
        controller.roll_all()
        print_state(controller)
    elif cmd == "l":
        if not args:
            print("Which die? e.g. 'l 1 3'")
            return True
        for arg in args:
            try:
                index = int(arg) - 1
            except ValueError:
                print(f"Not a die number: {arg}")
                continue
            if not 0 <= index < len(controller.group):
                print(f"No die number {arg}")
                continue
            controller.toggle_lock(controller.group[index].id)
        print_state(controller)
    elif cmd == "e":
        if not controller.is_active():
            print("Turn already ended. Start a new one with 'n'.")
            return True
        controller.end_turn()
        print("Turn saved to history.")
        print_state(controller)
    elif cmd == "n":
        count: Optional[int] = None
        if args:
            try:
                count = int(args[0])
            except ValueError:
                print("Please enter a valid integer for the dice count.")
                return True
        controller.new_turn(count)
        print_state(controller)
    elif cmd == "h":
        print_history(controller)
    elif cmd == "c":
        controller.clear_history()
        print("History cleared.")
    elif cmd == "x":
        if not args:
            print("Export needs a file path, e.g. 'x history.csv'")
            return True
        written = csv_io.export_history(controller.history(), args[0])
        print(f"[{written} dice rows saved to {args[0]}]")
    elif cmd == "?":
        print(HELP)
    else:
        print("Command not recognized. Type ? for help.")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Roll a sack of dice, lock the keepers, and keep a history of turns.")
    parser.add_argument('--dice', type=int, default=6, help='Dice per turn')
    parser.add_argument('--sides', type=int, default=6, help='Sides per die')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for a repeatable session')
    parser.add_argument('--db', type=str, default=None, help='Database URL (default: $DICE_SACK_DATABASE_URL or ./dice_sack.db)')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        config = SackConfig(dice_count=args.dice, sides=args.sides, rng_seed=args.seed)
    except DiceSackError as e:
        print(f"Invalid options: {e}")
        return 2
    store = SqlHistoryStore(make_session_factory(args.db))
    controller = TurnController(store, config=config)

    print("Welcome to Dice Sack (CLI)")
    print(HELP)
    print_state(controller)
    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye")
            return 0
        try:
            if not handle_command(controller, line):
                print("Goodbye")
                return 0
        except DiceSackError as e:
            print(f"Not allowed: {e}")


if __name__ == "__main__":
    sys.exit(main())
