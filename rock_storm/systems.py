"""
ECS Systems
============
Per-frame physics. Each system queries the World for entities with the
required components and updates them in place.
"""

from typing import Tuple

from .ecs import World
from .components import (
    Position, Velocity, Heading, Spin, ShipTag,
    BulletBody, AsteroidBody, Lifetime, ParticleTag
)
from .entities import is_expired
from .geometry import clamp_length, wrap_around


# =============================================================================
# CONSTANTS
# =============================================================================

SHIP_MAX_SPEED = 5.0
SHIP_DRAG_DIVISOR = 100.0


# =============================================================================
# PHYSICS SYSTEMS
# =============================================================================

def ship_physics_system(world: World, accel: Tuple[float, float],
                        width: float, height: float, dt: float = 1.0):
    """
    Integrate the ship.

    Drag of -velocity/100 is always added to the commanded acceleration,
    then speed is capped at SHIP_MAX_SPEED before the position moves.
    """
    for entity_id, pos, vel, _ in world.query(Position, Velocity, ShipTag):
        ax = accel[0] - vel.x / SHIP_DRAG_DIVISOR
        ay = accel[1] - vel.y / SHIP_DRAG_DIVISOR
        vel.x, vel.y = clamp_length(vel.x + ax, vel.y + ay, SHIP_MAX_SPEED)

        pos.x += vel.x * dt
        pos.y += vel.y * dt
        pos.x, pos.y = wrap_around(pos.x, pos.y, width, height)


def rotate_ship(world: World, ship_id: int, delta_degrees: float):
    """Turn the ship; heading is left unbounded."""
    heading = world.get_component(ship_id, Heading)
    if heading:
        heading.degrees += delta_degrees


def bullet_movement_system(world: World, width: float, height: float, dt: float = 1.0):
    """Move bullets in a straight line. No drag."""
    for entity_id, pos, vel, _ in world.query(Position, Velocity, BulletBody):
        pos.x += vel.x * dt
        pos.y += vel.y * dt
        pos.x, pos.y = wrap_around(pos.x, pos.y, width, height)


def asteroid_movement_system(world: World, max_speed: float,
                             width: float, height: float, dt: float = 1.0):
    """Drift and spin asteroids, capped at the level's max speed."""
    for entity_id, pos, vel, spin, _ in world.query(Position, Velocity, Spin, AsteroidBody):
        vel.x, vel.y = clamp_length(vel.x, vel.y, max_speed)

        pos.x += vel.x * dt
        pos.y += vel.y * dt
        pos.x, pos.y = wrap_around(pos.x, pos.y, width, height)

        spin.rotation += spin.speed * dt


# =============================================================================
# LIFETIME SYSTEMS
# =============================================================================

def bullet_lifetime_system(world: World, now: float) -> int:
    """Destroy bullets past their time-to-live. Returns how many expired."""
    expired = 0
    for entity_id, bullet in world.query(BulletBody):
        if is_expired(bullet, now):
            world.destroy_entity(entity_id)
            expired += 1
    return expired


def particle_system(world: World, dt: float = 1.0):
    """Move particles and destroy them when their lifetime runs out."""
    for entity_id, pos, vel, lifetime, _ in world.query(
        Position, Velocity, Lifetime, ParticleTag
    ):
        pos.x += vel.x * dt
        pos.y += vel.y * dt
        lifetime.frames_remaining -= 1
        if lifetime.frames_remaining <= 0:
            world.destroy_entity(entity_id)
