"""
Level Progression
==================
Difficulty scaling per level, palette selection, and the opening
asteroid ring for a round.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Tuple

from .ecs import World
from .entities import create_asteroid, ROTATION_SPEED_RANGE
from .geometry import normalize
from .engine import (
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_GREEN, NEON_RED, NEON_ORANGE,
    NEON_PINK, GRAY_LIGHT, GRAY_MED, WHITE
)


logger = logging.getLogger(__name__)


# =============================================================================
# DIFFICULTY TABLE
# =============================================================================

BASE_ASTEROID_COUNT = 10
ASTEROIDS_PER_LEVEL = 2
SPEED_SCALE_PER_LEVEL = 0.25
BASE_MAX_SPEED = 5.0
MAX_SPEED_PER_LEVEL = 0.5

SIDES_RANGE = (3, 7)  # inclusive
SPAWN_RADIUS_FRACTION = 0.5   # of min(width, height)
ASTEROID_SIZE_FRACTION = 0.1  # of min(width, height)


@dataclass(frozen=True)
class LevelParams:
    level: int
    asteroid_count: int
    speed_scale: float
    max_speed: float


def level_params(level: int) -> LevelParams:
    """Asteroid count and speed limits for a level (1-based)."""
    return LevelParams(
        level=level,
        asteroid_count=int(BASE_ASTEROID_COUNT + level * ASTEROIDS_PER_LEVEL),
        speed_scale=1.0 + (level - 1) * SPEED_SCALE_PER_LEVEL,
        max_speed=BASE_MAX_SPEED + level * MAX_SPEED_PER_LEVEL,
    )


# =============================================================================
# PALETTES
# =============================================================================

@dataclass(frozen=True)
class Palette:
    """ANSI 256 colors for one level's visuals."""
    name: str
    background: int
    ship: int
    bullet: int
    text: int
    asteroids: Tuple[int, ...]


PALETTES: List[Palette] = [
    Palette('GRAYSCALE', background=234, ship=WHITE, bullet=WHITE, text=GRAY_LIGHT,
            asteroids=(GRAY_LIGHT, GRAY_MED, 250, 248)),
    Palette('NEON', background=233, ship=NEON_CYAN, bullet=NEON_YELLOW, text=NEON_MAGENTA,
            asteroids=(NEON_MAGENTA, NEON_PINK, NEON_CYAN, NEON_GREEN)),
    Palette('EMBER', background=52, ship=NEON_YELLOW, bullet=WHITE, text=NEON_ORANGE,
            asteroids=(NEON_ORANGE, NEON_RED, 214, 130)),
    Palette('GLACIER', background=17, ship=WHITE, bullet=NEON_CYAN, text=117,
            asteroids=(117, 153, 75, 111)),
    Palette('TOXIC', background=22, ship=NEON_YELLOW, bullet=WHITE, text=NEON_GREEN,
            asteroids=(NEON_GREEN, 154, 118, 190)),
]


def choose_palette(level: int, rng: random.Random) -> Palette:
    """Level 1 always uses the baseline palette; later levels draw one at random."""
    if level <= 1:
        return PALETTES[0]
    return rng.choice(PALETTES)


# =============================================================================
# SPAWNING
# =============================================================================

def spawn_level_asteroids(
    world: World,
    params: LevelParams,
    palette: Palette,
    rng: random.Random,
    width: float,
    height: float,
) -> List[int]:
    """
    Place the level's asteroids on a ring around the field center.

    Each one heads off in a random direction at the level's speed scale.
    """
    cx, cy = width / 2, height / 2
    extent = min(width, height)
    radius = extent * SPAWN_RADIUS_FRACTION
    size = extent * ASTEROID_SIZE_FRACTION

    spawned = []
    for _ in range(params.asteroid_count):
        ox, oy = normalize(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0))
        dx, dy = normalize(rng.uniform(-1.0, 1.0), rng.uniform(-1.0, 1.0))
        spawned.append(create_asteroid(
            world,
            cx + ox * radius, cy + oy * radius,
            dx * params.speed_scale, dy * params.speed_scale,
            size=size,
            sides=rng.randint(*SIDES_RANGE),
            color=rng.choice(palette.asteroids),
            rotation=0.0,
            rotation_speed=rng.uniform(*ROTATION_SPEED_RANGE),
        ))

    logger.info(
        "Level %d: spawned %d asteroids (speed x%.2f, cap %.1f, palette %s)",
        params.level, len(spawned), params.speed_scale, params.max_speed, palette.name,
    )
    return spawned
