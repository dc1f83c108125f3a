#!/usr/bin/env python3
"""
ROCK_STORM - Terminal Asteroids
================================
Shoot the rocks, dodge the rocks. Rocks split when hit.

Controls (keyboard):
    LEFT/RIGHT  - Turn
    UP          - Thrust
    SPACE       - Fire
    ESC/P       - Pause
    ENTER       - Confirm
    F           - Toggle FPS
    Q           - Quit

Clicking on the start screen selects the on-screen zone controls
instead (auto-fire).
"""

import logging
import sys
import time
from typing import Optional

from blessed import Terminal

from .engine import GameRenderer
from .render import render
from .session import Session
from .states import Phase, step
from .terminal_input import TerminalInput


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MAX_TICKS_PER_FRAME = 4
MIN_WIDTH = 40
MIN_HEIGHT = 16

LOG_FILE = 'rockstorm.log'


def setup_logging(path: str = LOG_FILE, level: int = logging.INFO) -> logging.Logger:
    """Log to a file; the terminal is busy drawing the game."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            handlers=[logging.FileHandler(path)],
        )
    return logging.getLogger('rock_storm')


class Game:
    """Owns the session and wires it to the terminal."""

    def __init__(self, term: Terminal, seed: Optional[int] = None):
        self.term = term
        self.renderer = GameRenderer(term)
        self.input = TerminalInput()
        self.session = Session(seed)

    @property
    def running(self) -> bool:
        return self.session.phase is not Phase.QUIT

    def handle_input(self):
        """Drain every pending keystroke and mouse report."""
        key = self.term.inkey(timeout=0)
        while key:
            if not key.is_sequence and key.lower() == 'f':
                self.renderer.show_fps = not self.renderer.show_fps
            else:
                self.input.process_key(key)
            key = self.term.inkey(timeout=0)

    def update(self, now: float):
        """One fixed simulation tick."""
        if self.renderer.sync_size():
            logger.info("Viewport resized to %dx%d", self.renderer.width, self.renderer.height)

        snapshot = self.input.snapshot(now, self.renderer.field_width, self.renderer.field_height)
        before = self.session.phase
        after = step(self.session, snapshot)
        self.input.end_tick()

        if after is Phase.GAME_OVER and before is not Phase.GAME_OVER:
            self.renderer.trigger_shake(intensity=3, frames=12)

    def render(self):
        print(render(self.renderer, self.session), end='', flush=True)


def main(seed: Optional[int] = None):
    """Entry point. Sets up the terminal and runs the 60 FPS loop."""
    setup_logging()
    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    logger.info("Starting on a %dx%d terminal (seed=%s)", term.width, term.height, seed)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor(), term.mouse_enabled(report_drag=True):
        game = Game(term, seed)

        last_time = time.perf_counter()
        accumulator = 0.0
        fps_timer = 0.0
        fps_frame_count = 0

        print(term.home + term.clear, end='', flush=True)

        try:
            while game.running:
                now = time.perf_counter()
                delta = min(now - last_time, FRAME_TIME * 5)
                last_time = now

                accumulator += delta
                fps_timer += delta

                game.handle_input()

                ticks = 0
                while accumulator >= FRAME_TIME and ticks < MAX_TICKS_PER_FRAME:
                    game.update(now)
                    accumulator -= FRAME_TIME
                    ticks += 1
                    fps_frame_count += 1

                game.render()

                if fps_timer >= 0.5:
                    game.renderer.current_fps = fps_frame_count / fps_timer
                    fps_frame_count = 0
                    fps_timer = 0.0

                sleep_time = FRAME_TIME - (time.perf_counter() - now)
                if sleep_time > 0.001:
                    time.sleep(sleep_time * 0.9)
        except Exception:
            logger.exception("Game loop crashed in phase %s", game.session.phase.name)
            raise
        finally:
            print(term.normal, end='', flush=True)

    logger.info("Quit at level %d with score %d", game.session.level, game.session.score)


if __name__ == '__main__':
    main()
