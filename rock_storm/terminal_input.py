"""
Terminal Input
===============
Translates blessed keystrokes and mouse reports into InputSnapshots.

Terminals send no key-up events, so a held key is simulated with a
frame countdown. A fresh press gets a window long enough to bridge the
OS autorepeat delay; each repeat keystroke then refreshes a shorter one.
"""

from typing import Dict, Optional, Set, Tuple

from blessed.keyboard import Keystroke

from .controls import (
    InputSnapshot, PointerPhase, PointerPoint,
    KEY_LEFT, KEY_RIGHT, KEY_UP, KEY_ENTER, KEY_ESCAPE, KEY_FIRE, KEY_PAUSE, KEY_QUIT
)
from .engine import FIELD_UNITS_X, FIELD_UNITS_Y


SEQUENCE_KEYS = frozenset({KEY_LEFT, KEY_RIGHT, KEY_UP, KEY_ENTER, KEY_ESCAPE})
CHAR_KEYS = frozenset({KEY_FIRE, KEY_PAUSE, KEY_QUIT})


class TerminalInput:
    """
    Keyboard and mouse state between frames.

    Call process_key() for every keystroke drained from the terminal,
    snapshot() once per simulation tick, then end_tick().
    """

    def __init__(self, hold_duration: int = 45, repeat_duration: int = 10):
        # hold_duration must outlast the autorepeat delay (typically 0.5 s)
        self.hold_duration = hold_duration
        self.repeat_duration = repeat_duration
        self.keys_held: Dict[str, int] = {}  # key -> frames remaining
        self._pressed: Set[str] = set()

        # Terminals report a single pointer
        self._pointer_id = 0
        self._pointer_cell: Optional[Tuple[int, int]] = None
        self._pointer_phase: Optional[PointerPhase] = None
        self._release_pending = False

    # -------------------------------------------------------------------------
    # Feeding events
    # -------------------------------------------------------------------------

    def process_key(self, key: Keystroke) -> None:
        """Process one keystroke from term.inkey()."""
        if key is None or not key:
            return

        name = key.name or ''
        if name.startswith('MOUSE_'):
            x, y = key.mouse_xy
            self.process_mouse(name, x, y)
            return

        symbol = self._symbol_for(key)
        if symbol is None:
            return

        # Only a fresh press counts as an edge; repeats just refresh the hold
        if symbol in self.keys_held:
            self.keys_held[symbol] = max(self.keys_held[symbol], self.repeat_duration)
        else:
            self._pressed.add(symbol)
            self.keys_held[symbol] = self.hold_duration

    @staticmethod
    def _symbol_for(key: Keystroke) -> Optional[str]:
        if key.is_sequence:
            if key.name in SEQUENCE_KEYS:
                return key.name
            return None
        if key in ('\r', '\n'):
            return KEY_ENTER
        key_str = key.lower()
        return key_str if key_str in CHAR_KEYS else None

    def process_mouse(self, name: str, col: int, row: int) -> None:
        """
        Update the pointer from a blessed mouse event name.

        Button press starts a pointer, drag moves it, release ends it.
        Wheel and bare motion events are ignored.
        """
        if 'SCROLL' in name or name == 'MOUSE_MOTION':
            return

        if name.endswith('RELEASED'):
            if self._pointer_cell is None:
                return
            self._pointer_cell = (col, row)
            if self._pointer_phase is PointerPhase.STARTED:
                # A click shorter than a tick still has to be seen as started
                self._release_pending = True
            else:
                self._pointer_phase = PointerPhase.ENDED
            return

        if name.endswith('_MOTION'):
            if self._pointer_cell is not None and self._pointer_phase is not PointerPhase.ENDED:
                self._pointer_cell = (col, row)
                if self._pointer_phase is not PointerPhase.STARTED:
                    self._pointer_phase = PointerPhase.MOVED
            return

        self._pointer_id += 1
        self._pointer_cell = (col, row)
        self._release_pending = False
        self._pointer_phase = PointerPhase.STARTED

    # -------------------------------------------------------------------------
    # Reading state
    # -------------------------------------------------------------------------

    def pointers(self) -> Tuple[PointerPoint, ...]:
        """Current pointer in field units (cell centers), if any."""
        if self._pointer_cell is None:
            return ()
        col, row = self._pointer_cell
        return (PointerPoint(
            id=self._pointer_id,
            x=(col + 0.5) * FIELD_UNITS_X,
            y=(row + 0.5) * FIELD_UNITS_Y,
            phase=self._pointer_phase,
        ),)

    def snapshot(self, now: float, width: float, height: float) -> InputSnapshot:
        return InputSnapshot(
            now=now,
            width=width,
            height=height,
            keys_down=frozenset(self.keys_held),
            keys_pressed=frozenset(self._pressed),
            pointers=self.pointers(),
        )

    def end_tick(self) -> None:
        """Decay key holds, drop edges, and age the pointer (call once per tick)."""
        self._pressed.clear()

        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

        if self._pointer_phase is PointerPhase.ENDED:
            self._pointer_cell = None
            self._pointer_phase = None
        elif self._release_pending:
            self._release_pending = False
            self._pointer_phase = PointerPhase.ENDED
        elif self._pointer_phase in (PointerPhase.STARTED, PointerPhase.MOVED):
            self._pointer_phase = PointerPhase.STATIONARY
