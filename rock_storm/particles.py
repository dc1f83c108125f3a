"""
Particle System
================
Cosmetic bursts for rock hits and the ship's wreck. Particles draw from
the module-level random stream so they never disturb the session RNG.
"""

import math
import random
from dataclasses import dataclass
from typing import Sequence, Tuple

from .ecs import World
from .components import Position, Velocity, Renderable, Lifetime, ParticleTag
from .engine import NEON_YELLOW, NEON_RED, NEON_ORANGE, GRAY_LIGHT, WHITE


@dataclass(frozen=True)
class Burst:
    """Shape of a radial burst: glyphs, speed range and lifetime range (frames)."""
    chars: Tuple[str, ...]
    speed: Tuple[float, float] = (1.0, 4.0)
    lifetime: Tuple[int, int] = (10, 25)


DEBRIS = Burst(chars=('.', '*', "'", ','))
WRECK = Burst(chars=('*', '+', 'x', '#', '.'), speed=(0.5, 5.0), lifetime=(20, 45))
WRECK_COLORS = (NEON_ORANGE, NEON_RED, NEON_YELLOW, WHITE)


def spawn_particle(
    world: World,
    x: float, y: float,
    vx: float, vy: float,
    char: str = '.',
    color: int = WHITE,
    lifetime: int = 20,
) -> int:
    entity_id = world.create_entity()
    for component in (
        Position(x, y),
        Velocity(vx, vy),
        Renderable(char=char, color=color),
        Lifetime(lifetime),
        ParticleTag(),
    ):
        world.add_component(entity_id, component)
    return entity_id


def spawn_explosion(world: World, x: float, y: float, count: int,
                    colors: Sequence[int], burst: Burst = DEBRIS):
    """Throw `count` particles out from (x, y) in random directions."""
    for _ in range(count):
        angle = random.uniform(0.0, 2 * math.pi)
        speed = random.uniform(*burst.speed)
        spawn_particle(
            world, x, y,
            math.cos(angle) * speed, math.sin(angle) * speed,
            char=random.choice(burst.chars),
            color=random.choice(colors),
            lifetime=random.randint(*burst.lifetime),
        )


def spawn_asteroid_debris(world: World, x: float, y: float, color: int, sides: int):
    """Rock fragments; rocks with more sides throw more."""
    spawn_explosion(world, x, y, 4 + sides * 2, (color, GRAY_LIGHT, WHITE), DEBRIS)


def spawn_ship_wreck(world: World, x: float, y: float):
    spawn_explosion(world, x, y, 30, WRECK_COLORS, WRECK)
