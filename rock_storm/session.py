"""
Round and Session State
========================
A Session spans a whole play session (level, palette, control scheme,
RNG). A RoundState is one play-through of a level and owns its World.
"""

import logging
import random
from typing import Optional

from .ecs import World
from .components import AsteroidBody, BulletBody
from .controls import ControlScheme, Controls, controls_for
from .entities import create_ship
from .levels import LevelParams, Palette, level_params, choose_palette, spawn_level_asteroids
from .states import Phase


logger = logging.getLogger(__name__)


class RoundState:
    """Live entities of one round plus its fire timer and score."""

    def __init__(self, params: LevelParams, palette: Palette,
                 width: float, height: float, now: float, score: int = 0):
        self.world = World()
        self.params = params
        self.palette = palette
        self.ship_id = create_ship(self.world, width / 2, height / 2)
        self.last_shot = now
        self.score = score
        self.frame = 0

    def add_score(self, points: int):
        """Score only ever goes up."""
        if points > 0:
            self.score += points

    def asteroid_count(self) -> int:
        return self.world.count(AsteroidBody)

    def bullet_count(self) -> int:
        return self.world.count(BulletBody)


class Session:
    """
    Persistent state handed to every phase handler.

    Level, palette and control scheme survive from round to round and
    reset only on a full restart.
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)
        self.phase = Phase.START_MENU
        self.phase_frame = 0
        self.level = 1
        self.palette = choose_palette(1, self.rng)
        self.scheme: Optional[ControlScheme] = None
        self.round: Optional[RoundState] = None

    @property
    def controls(self) -> Optional[Controls]:
        if self.scheme is None:
            return None
        return controls_for(self.scheme)

    @property
    def score(self) -> int:
        return self.round.score if self.round else 0

    def reseed(self, seed: int):
        self.rng.seed(seed)

    def reset(self):
        """Full restart: back to level 1 with no scheme and no round."""
        self.level = 1
        self.palette = choose_palette(1, self.rng)
        self.scheme = None
        self.round = None

    def start_round(self, width: float, height: float, now: float, score: int = 0) -> RoundState:
        """Build a fresh round for the current level."""
        params = level_params(self.level)
        self.round = RoundState(params, self.palette, width, height, now, score)
        spawn_level_asteroids(self.round.world, params, self.palette, self.rng, width, height)
        logger.info("Round started: level %d, score %d", self.level, score)
        return self.round

    def advance_level(self):
        self.level += 1
        self.palette = choose_palette(self.level, self.rng)
