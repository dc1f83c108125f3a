"""
Collision Resolution
=====================
Ship and bullet hits against asteroids, splitting, scoring, and the
round outcome for the frame.
"""

import logging
import random
from enum import Enum, auto

from .components import Position, Velocity, BulletBody, AsteroidBody
from .entities import SHIP_HEIGHT, split_asteroid
from .geometry import distance
from .particles import spawn_asteroid_debris


logger = logging.getLogger(__name__)


SCORE_MULTIPLIER = 5
SHIP_HIT_RADIUS = SHIP_HEIGHT / 3.0


class RoundOutcome(Enum):
    CONTINUE = auto()
    SHIP_DESTROYED = auto()
    ALL_ASTEROIDS_CLEARED = auto()


def ship_hit_asteroid(round_state) -> int:
    """Entity ID of the first asteroid touching the ship, or -1."""
    world = round_state.world
    ship_pos = world.get_component(round_state.ship_id, Position)
    for asteroid_id, pos, body in world.query(Position, AsteroidBody):
        if distance(pos.x, pos.y, ship_pos.x, ship_pos.y) < body.size + SHIP_HIT_RADIUS:
            return asteroid_id
    return -1


def collision_system(round_state, rng: random.Random) -> RoundOutcome:
    """
    Resolve one frame of collisions.

    The ship check runs first and short-circuits everything else. Each
    asteroid can be taken out by at most one bullet and each bullet hits
    at most one asteroid. Children spawned this frame are not tested
    until the next one.
    """
    world = round_state.world

    culprit = ship_hit_asteroid(round_state)
    if culprit >= 0:
        logger.info("Ship destroyed by asteroid %d (score %d)", culprit, round_state.score)
        return RoundOutcome.SHIP_DESTROYED

    asteroids = list(world.query(Position, AsteroidBody))
    bullets = list(world.query(Position, Velocity, BulletBody))

    for asteroid_id, a_pos, body in asteroids:
        for bullet_id, b_pos, b_vel, bullet in bullets:
            if bullet.consumed:
                continue
            if distance(a_pos.x, a_pos.y, b_pos.x, b_pos.y) >= body.size:
                continue

            body.consumed = True
            bullet.consumed = True
            round_state.add_score(body.sides * SCORE_MULTIPLIER)
            split_asteroid(
                world, a_pos, body, b_vel,
                round_state.params.speed_scale,
                round_state.palette.asteroids,
                rng,
            )
            spawn_asteroid_debris(world, a_pos.x, a_pos.y, body.color, body.sides)
            break

    for bullet_id, _, _, bullet in bullets:
        if bullet.consumed:
            world.destroy_entity(bullet_id)
    for asteroid_id, _, body in asteroids:
        if body.consumed:
            world.destroy_entity(asteroid_id)
    world.process_dead_entities()

    if round_state.asteroid_count() == 0:
        logger.info("All asteroids cleared (score %d)", round_state.score)
        return RoundOutcome.ALL_ASTEROIDS_CLEARED
    return RoundOutcome.CONTINUE
