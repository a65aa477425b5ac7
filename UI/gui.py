import logging
import tkinter as tk
from tkinter import messagebox
from typing import Callable, Dict, Optional

from dice_sack.core.config import SackConfig
from dice_sack.core.dice import Die
from dice_sack.core.errors import DiceSackError
from dice_sack.core.pips import has_pip_layout, pip_positions
from dice_sack.core.scheduler import Scheduler
from dice_sack.core.turn import TurnController
from dice_sack.persistence.database import make_session_factory
from dice_sack.persistence.sql_store import SqlHistoryStore


class TkScheduler(Scheduler):
    """Runs animation callbacks on the Tk event loop."""
    def __init__(self, widget: tk.Misc):
        self.widget = widget

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self.widget.after(int(delay * 1000), callback)


class DiceCanvas(tk.Canvas):
    """A small canvas widget that draws a die face with pips, grey when locked."""

    def __init__(self, master, size: int = 56, on_click: Optional[Callable[[], None]] = None, **kwargs):
        super().__init__(master, width=size, height=size, bg=master.cget("bg"), highlightthickness=0, **kwargs)
        self.size = size
        if on_click is not None:
            self.bind("<Button-1>", lambda _event: on_click())

    def draw(self, value: int, sides: int = 6, locked: bool = False):
        self.delete("all")
        s = self.size
        pad = max(4, s // 10)
        fill = "#bbb" if locked else "white"
        self.create_rectangle(pad, pad, s - pad, s - pad, fill=fill, outline="#333", width=2)
        if not has_pip_layout(value, sides):
            # faces without a pip layout show their number
            self.create_text(s / 2, s / 2, text=str(value), fill="#111", font=("Helvetica", max(10, s // 3), "bold"))
            return
        pip_r = max(3, s // 12)
        for (nx, ny) in pip_positions(value):
            x = pad + nx * (s - 2 * pad)
            y = pad + ny * (s - 2 * pad)
            self.create_oval(x - pip_r, y - pip_r, x + pip_r, y + pip_r, fill="#111", outline="")


class DiceSackGUI:
    def __init__(self, root: tk.Tk, controller: TurnController):
        self.root = root
        root.title("Dice Sack")
        self.controller = controller
        self._canvases: Dict[str, DiceCanvas] = {}
        self._rolling = False

        self.dice_frame = tk.LabelFrame(root, text="Your dice (click to lock)")
        self.dice_frame.pack(fill=tk.X, padx=10, pady=8)
        self.dice_container = tk.Frame(self.dice_frame)
        self.dice_container.pack(padx=6, pady=6)

        controls = tk.Frame(root)
        controls.pack(fill=tk.X, padx=10, pady=4)
        self.roll_button = tk.Button(controls, text="Roll", command=self.on_roll, font=("Helvetica", 14, "bold"))
        self.roll_button.pack(side=tk.LEFT)
        self.turn_button = tk.Button(controls, text="End Turn", command=self.on_turn_button)
        self.turn_button.pack(side=tk.LEFT, padx=(8, 0))
        tk.Button(controls, text="History", command=self.show_history).pack(side=tk.RIGHT)

        self.status_var = tk.StringVar(value="Roll the dice")
        tk.Label(root, textvariable=self.status_var, anchor="w").pack(fill=tk.X, padx=10, pady=(0, 8))

        controller.subscribe(self.on_event)
        self.rebuild_dice()

    def rebuild_dice(self):
        for child in self.dice_container.winfo_children():
            child.destroy()
        self._canvases.clear()
        for die in self.controller.group.dice:
            canvas = DiceCanvas(self.dice_container, size=56, on_click=lambda d=die: self.on_die_click(d))
            canvas.pack(side=tk.LEFT, padx=4)
            self._canvases[die.id] = canvas
        self.update_ui()

    def update_ui(self):
        state = self.controller.state
        for die in state.group.dice:
            canvas = self._canvases.get(die.id)
            if canvas is not None:
                canvas.draw(die.value, die.sides, locked=state.is_active and die.locked)
        busy = self._rolling or state.group.in_motion
        self.roll_button.config(state=tk.NORMAL if state.is_active and not busy else tk.DISABLED)
        self.turn_button.config(text="End Turn" if state.is_active else "New Turn",
                                state=tk.DISABLED if busy else tk.NORMAL)

    def on_event(self, event):
        if event["type"] == "TurnStarted":
            self.rebuild_dice()
        else:
            self.update_ui()

    def on_die_click(self, die: Die):
        if not self.controller.is_active() or die.in_motion:
            return
        try:
            self.controller.toggle_lock(die.id)
        except DiceSackError as e:
            self.status_var.set(str(e))

    def on_roll(self):
        try:
            self._rolling = True
            self.controller.roll_all_animated(self.on_roll_complete)
        except DiceSackError as e:
            self._rolling = False
            self.status_var.set(str(e))
        self.update_ui()

    def on_roll_complete(self):
        self._rolling = False
        self.status_var.set(f"Rolled {self.controller.group.values} (total {sum(self.controller.group.values)})")
        self.update_ui()

    def on_turn_button(self):
        try:
            if self.controller.is_active():
                self.controller.end_turn()
                self.status_var.set("Turn saved to history")
            else:
                self.controller.new_turn()
                self.status_var.set("New turn")
        except DiceSackError as e:
            self.status_var.set(str(e))
        self.update_ui()

    def show_history(self):
        window = tk.Toplevel(self.root)
        window.title("Roll history")
        listbox = tk.Listbox(window, width=60, height=15)
        listbox.pack(fill=tk.BOTH, expand=True, padx=6, pady=6)

        def refresh():
            listbox.delete(0, tk.END)
            for group in self.controller.history():
                listbox.insert(tk.END, f"{group.created_at:%Y-%m-%d %H:%M:%S}   {group.values}   total {sum(group.values)}")

        def clear():
            if messagebox.askyesno("Clear history", "Delete every saved roll?", parent=window):
                self.controller.clear_history()
                refresh()

        buttons = tk.Frame(window)
        buttons.pack(fill=tk.X, padx=6, pady=(0, 6))
        tk.Button(buttons, text="Clear history", command=clear).pack(side=tk.LEFT)
        tk.Button(buttons, text="Close", command=window.destroy).pack(side=tk.RIGHT)
        refresh()


def main():
    logging.basicConfig(level=logging.INFO)
    root = tk.Tk()
    store = SqlHistoryStore(make_session_factory())
    controller = TurnController(store, config=SackConfig(), scheduler=TkScheduler(root))
    DiceSackGUI(root, controller)
    root.mainloop()


if __name__ == "__main__":
    main()
