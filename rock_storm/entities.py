"""
Entity Factories
=================
Creation of the ship, bullets and asteroids, including asteroid splitting.
"""

import logging
import random
from typing import List, Sequence

from .ecs import World
from .components import (
    Position, Velocity, Heading, Spin,
    BulletBody, AsteroidBody, ShipTag
)
from .geometry import heading_vector, normalize, rotate_cw90, rotate_ccw90


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

SHIP_HEIGHT = 25.0
SHIP_BASE = 22.0

BULLET_SPEED = 7.0
BULLET_TTL = 1.5  # seconds

SPLIT_SIZE_FACTOR = 0.8
SPLIT_SPEED_RANGE = (1.0, 3.0)
ROTATION_SPEED_RANGE = (-2.0, 2.0)


# =============================================================================
# SHIP
# =============================================================================

def create_ship(world: World, x: float, y: float) -> int:
    """Create the ship at rest, nose up."""
    entity_id = world.create_entity()
    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0.0, 0.0))
    world.add_component(entity_id, Heading(0.0))
    world.add_component(entity_id, ShipTag())
    return entity_id


def spawn_bullet(world: World, ship_id: int, now: float) -> int:
    """Fire a bullet from the ship's nose along its heading."""
    pos = world.get_component(ship_id, Position)
    heading = world.get_component(ship_id, Heading)
    dx, dy = heading_vector(heading.degrees)

    entity_id = world.create_entity()
    world.add_component(entity_id, Position(
        pos.x + dx * SHIP_HEIGHT / 2,
        pos.y + dy * SHIP_HEIGHT / 2,
    ))
    world.add_component(entity_id, Velocity(dx * BULLET_SPEED, dy * BULLET_SPEED))
    world.add_component(entity_id, BulletBody(shot_at=now))
    logger.debug("Bullet %d fired at t=%.3f heading=%.1f", entity_id, now, heading.degrees)
    return entity_id


def is_expired(bullet: BulletBody, now: float) -> bool:
    """A bullet lives while shot_at + TTL is still in the future."""
    return bullet.shot_at + BULLET_TTL <= now


# =============================================================================
# ASTEROIDS
# =============================================================================

def create_asteroid(
    world: World,
    x: float, y: float,
    vx: float, vy: float,
    size: float,
    sides: int,
    color: int,
    rotation: float = 0.0,
    rotation_speed: float = 0.0,
) -> int:
    """Create an asteroid entity."""
    entity_id = world.create_entity()
    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(vx, vy))
    world.add_component(entity_id, Spin(rotation, rotation_speed))
    world.add_component(entity_id, AsteroidBody(size=size, sides=max(3, sides), color=color))
    return entity_id


def split_asteroid(
    world: World,
    parent_pos: Position,
    parent: AsteroidBody,
    bullet_vel: Velocity,
    speed_scale: float,
    colors: Sequence[int],
    rng: random.Random,
) -> List[int]:
    """
    Break a hit asteroid into its children.

    Children leave at right angles to the bullet that hit the parent.
    A three-sided asteroid produces nothing.
    """
    if parent.sides <= 3:
        return []

    children = []
    for rotate in (rotate_cw90, rotate_ccw90):
        dx, dy = normalize(*rotate(bullet_vel.x, bullet_vel.y))
        speed = rng.uniform(*SPLIT_SPEED_RANGE) * speed_scale
        children.append(create_asteroid(
            world,
            parent_pos.x, parent_pos.y,
            dx * speed, dy * speed,
            size=parent.size * SPLIT_SIZE_FACTOR,
            sides=parent.sides - 1,
            color=rng.choice(colors),
            rotation=rng.uniform(0.0, 360.0),
            rotation_speed=rng.uniform(*ROTATION_SPEED_RANGE),
        ))

    logger.debug(
        "Asteroid split: sides %d -> 2x%d, size %.1f -> %.1f",
        parent.sides, parent.sides - 1, parent.size, parent.size * SPLIT_SIZE_FACTOR,
    )
    return children
