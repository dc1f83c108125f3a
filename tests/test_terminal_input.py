from blessed.keyboard import Keystroke

from rock_storm.controls import (
    KEY_ENTER, KEY_ESCAPE, KEY_FIRE, KEY_LEFT, KEY_PAUSE, KEY_QUIT, PointerPhase
)
from rock_storm.engine import FIELD_UNITS_X, FIELD_UNITS_Y
from rock_storm.terminal_input import TerminalInput


LEFT = Keystroke('\x1b[D', code=260, name='KEY_LEFT')
ENTER = Keystroke('\r', code=343, name='KEY_ENTER')
ESCAPE = Keystroke('\x1b', code=361, name='KEY_ESCAPE')


def snapshot(handler):
    return handler.snapshot(0.0, 640.0, 336.0)


class TestKeys:
    def test_press_is_an_edge_and_a_hold(self):
        handler = TerminalInput()
        handler.process_key(LEFT)

        snap = snapshot(handler)
        assert KEY_LEFT in snap.keys_down
        assert KEY_LEFT in snap.keys_pressed

        handler.end_tick()
        snap = snapshot(handler)
        assert KEY_LEFT in snap.keys_down
        assert KEY_LEFT not in snap.keys_pressed

    def test_repeat_refreshes_hold_without_new_edge(self):
        handler = TerminalInput(hold_duration=3, repeat_duration=5)
        handler.process_key(ESCAPE)
        handler.end_tick()
        handler.end_tick()
        handler.process_key(ESCAPE)

        assert KEY_ESCAPE not in snapshot(handler).keys_pressed
        assert handler.keys_held[KEY_ESCAPE] == 5

    def test_hold_bridges_autorepeat_delay(self):
        handler = TerminalInput()
        edges, gaps = [], []
        for tick in range(80):
            # First repeat arrives after 30 ticks, then every 2
            if tick == 0 or (tick >= 30 and tick % 2 == 0):
                handler.process_key(ESCAPE)
                handler.process_key(Keystroke(' '))
            snap = snapshot(handler)
            if KEY_ESCAPE in snap.keys_pressed:
                edges.append(tick)
            if KEY_FIRE not in snap.keys_down:
                gaps.append(tick)
            handler.end_tick()

        assert edges == [0]
        assert gaps == []

    def test_new_press_after_release_is_an_edge(self):
        handler = TerminalInput(hold_duration=4)
        handler.process_key(ESCAPE)
        for _ in range(4):
            handler.end_tick()
        assert KEY_ESCAPE not in snapshot(handler).keys_down

        handler.process_key(ESCAPE)
        assert KEY_ESCAPE in snapshot(handler).keys_pressed

    def test_hold_decays(self):
        handler = TerminalInput(hold_duration=2)
        handler.process_key(Keystroke(' '))
        handler.end_tick()
        assert KEY_FIRE in snapshot(handler).keys_down
        handler.end_tick()
        assert KEY_FIRE not in snapshot(handler).keys_down

    def test_character_keys(self):
        handler = TerminalInput()
        for char in (' ', 'P', 'q', 'x'):
            handler.process_key(Keystroke(char))
        assert snapshot(handler).keys_pressed == {KEY_FIRE, KEY_PAUSE, KEY_QUIT}

    def test_enter_variants(self):
        for key in (ENTER, Keystroke('\r'), Keystroke('\n')):
            handler = TerminalInput()
            handler.process_key(key)
            assert snapshot(handler).keys_pressed == {KEY_ENTER}

    def test_empty_keystroke_ignored(self):
        handler = TerminalInput()
        handler.process_key(Keystroke(''))
        snap = snapshot(handler)
        assert not snap.keys_down
        assert not snap.pointers


class TestMouse:
    def test_click_lifecycle(self):
        handler = TerminalInput()
        handler.process_mouse('MOUSE_LEFT', 10, 4)

        (point,) = snapshot(handler).pointers
        assert point.phase is PointerPhase.STARTED
        assert point.x == (10 + 0.5) * FIELD_UNITS_X
        assert point.y == (4 + 0.5) * FIELD_UNITS_Y

        handler.end_tick()
        assert snapshot(handler).pointers[0].phase is PointerPhase.STATIONARY

        handler.process_mouse('MOUSE_LEFT_MOTION', 12, 4)
        (point,) = snapshot(handler).pointers
        assert point.phase is PointerPhase.MOVED
        assert point.x == (12 + 0.5) * FIELD_UNITS_X

        handler.end_tick()
        handler.process_mouse('MOUSE_LEFT_RELEASED', 12, 4)
        assert snapshot(handler).pointers[0].phase is PointerPhase.ENDED

        handler.end_tick()
        assert snapshot(handler).pointers == ()

    def test_quick_click_is_seen_as_started(self):
        handler = TerminalInput()
        handler.process_mouse('MOUSE_LEFT', 3, 3)
        handler.process_mouse('MOUSE_LEFT_RELEASED', 3, 3)

        assert snapshot(handler).pointers[0].phase is PointerPhase.STARTED
        handler.end_tick()
        assert snapshot(handler).pointers[0].phase is PointerPhase.ENDED
        handler.end_tick()
        assert snapshot(handler).pointers == ()

    def test_new_press_gets_new_id(self):
        handler = TerminalInput()
        handler.process_mouse('MOUSE_LEFT', 1, 1)
        first = snapshot(handler).pointers[0].id
        handler.process_mouse('MOUSE_LEFT_RELEASED', 1, 1)
        handler.end_tick()
        handler.end_tick()
        handler.process_mouse('MOUSE_LEFT', 1, 1)
        assert snapshot(handler).pointers[0].id != first

    def test_scroll_and_motion_ignored(self):
        handler = TerminalInput()
        handler.process_mouse('MOUSE_SCROLL_UP', 1, 1)
        handler.process_mouse('MOUSE_MOTION', 1, 1)
        handler.process_mouse('MOUSE_LEFT_RELEASED', 1, 1)
        assert snapshot(handler).pointers == ()
