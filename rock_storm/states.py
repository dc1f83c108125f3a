"""
Game State Machine
===================
One handler per phase, dispatched from a single table. A handler reads
the session and the frame's input snapshot, mutates the session, and
returns the next phase (or None to stay put).

    START_MENU -> INFO_SCREEN -> PLAYING <-> PAUSED
    PLAYING -> GAME_OVER -> START_MENU
    PLAYING -> WIN -> PLAYING (next level)
    any -> QUIT
"""

import logging
import random
from enum import Enum, auto
from typing import Callable, Dict, Optional

from .components import Heading, Position
from .controls import (
    Commands, ControlScheme, InputSnapshot, FIRE_COOLDOWN, KEY_ENTER, PAUSE_KEYS,
    THRUST_ACCEL, any_touch_started, detect_scheme, quit_pressed
)
from .collisions import RoundOutcome, collision_system
from .entities import spawn_bullet
from .geometry import heading_vector
from .particles import spawn_ship_wreck
from .systems import (
    asteroid_movement_system, bullet_lifetime_system, bullet_movement_system,
    particle_system, rotate_ship, ship_physics_system
)


logger = logging.getLogger(__name__)


class Phase(Enum):
    START_MENU = auto()
    INFO_SCREEN = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()
    WIN = auto()
    QUIT = auto()


# =============================================================================
# FRAME SIMULATION
# =============================================================================

def play_frame(round_state, commands: Commands, snapshot: InputSnapshot,
               rng: random.Random) -> RoundOutcome:
    """
    Advance one round by one frame: steer, fire, integrate, collide.
    """
    world = round_state.world
    ship_id = round_state.ship_id
    width, height = snapshot.width, snapshot.height
    round_state.frame += 1

    rotate_ship(world, ship_id, commands.rotation)

    accel = (0.0, 0.0)
    if commands.thrust:
        hx, hy = heading_vector(world.get_component(ship_id, Heading).degrees)
        accel = (hx * THRUST_ACCEL, hy * THRUST_ACCEL)

    if commands.fire and snapshot.now - round_state.last_shot > FIRE_COOLDOWN:
        spawn_bullet(world, ship_id, snapshot.now)
        round_state.last_shot = snapshot.now

    ship_physics_system(world, accel, width, height)
    bullet_movement_system(world, width, height)
    asteroid_movement_system(world, round_state.params.max_speed, width, height)
    particle_system(world)

    bullet_lifetime_system(world, snapshot.now)
    world.process_dead_entities()

    return collision_system(round_state, rng)


# =============================================================================
# PHASE HANDLERS
# =============================================================================

def _any_confirm(snapshot: InputSnapshot) -> bool:
    return KEY_ENTER in snapshot.keys_pressed or any_touch_started(snapshot)


def _start_menu(session, snapshot: InputSnapshot) -> Optional[Phase]:
    scheme = detect_scheme(snapshot)
    if scheme is None:
        return None
    session.scheme = scheme
    logger.info("Control scheme selected: %s", scheme.name)
    return Phase.INFO_SCREEN


def _info_screen(session, snapshot: InputSnapshot) -> Optional[Phase]:
    if not session.controls.confirmed(snapshot):
        return None
    session.start_round(snapshot.width, snapshot.height, snapshot.now)
    return Phase.PLAYING


def _playing(session, snapshot: InputSnapshot) -> Optional[Phase]:
    commands = session.controls.resolve(snapshot)
    if commands.pause:
        return Phase.PAUSED

    outcome = play_frame(session.round, commands, snapshot, session.rng)
    if outcome is RoundOutcome.SHIP_DESTROYED:
        ship_pos = session.round.world.get_component(session.round.ship_id, Position)
        spawn_ship_wreck(session.round.world, ship_pos.x, ship_pos.y)
        return Phase.GAME_OVER
    if outcome is RoundOutcome.ALL_ASTEROIDS_CLEARED:
        return Phase.WIN
    return None


def _paused(session, snapshot: InputSnapshot) -> Optional[Phase]:
    if session.controls.confirmed(snapshot):
        return Phase.PLAYING
    if session.scheme is ControlScheme.KEYBOARD and PAUSE_KEYS & snapshot.keys_pressed:
        return Phase.PLAYING
    return None


def _game_over(session, snapshot: InputSnapshot) -> Optional[Phase]:
    # Wreck debris keeps drifting behind the game-over text
    if session.round is not None:
        world = session.round.world
        particle_system(world)
        world.process_dead_entities()

    if not _any_confirm(snapshot):
        return None
    logger.info("Restart after game over: level %d, score %d", session.level, session.score)
    session.reset()
    return Phase.START_MENU


def _win(session, snapshot: InputSnapshot) -> Optional[Phase]:
    if not _any_confirm(snapshot):
        return None
    score = session.score
    session.advance_level()
    session.start_round(snapshot.width, snapshot.height, snapshot.now, score=score)
    return Phase.PLAYING


def _quit(session, snapshot: InputSnapshot) -> Optional[Phase]:
    return None


_HANDLERS: Dict[Phase, Callable[..., Optional[Phase]]] = {
    Phase.START_MENU: _start_menu,
    Phase.INFO_SCREEN: _info_screen,
    Phase.PLAYING: _playing,
    Phase.PAUSED: _paused,
    Phase.GAME_OVER: _game_over,
    Phase.WIN: _win,
    Phase.QUIT: _quit,
}


def step(session, snapshot: InputSnapshot) -> Phase:
    """Run one frame of whichever phase is active and apply its transition."""
    if session.phase is Phase.QUIT:
        return Phase.QUIT

    if quit_pressed(snapshot):
        next_phase = Phase.QUIT
    else:
        next_phase = _HANDLERS[session.phase](session, snapshot)

    if next_phase is None or next_phase is session.phase:
        session.phase_frame += 1
    else:
        logger.info("Phase %s -> %s", session.phase.name, next_phase.name)
        session.phase = next_phase
        session.phase_frame = 0

    return session.phase
