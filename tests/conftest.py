import random

import pytest

from rock_storm.components import BulletBody, Position, Velocity
from rock_storm.entities import create_asteroid
from rock_storm.levels import PALETTES, level_params
from rock_storm.session import RoundState


FIELD_WIDTH = 640.0
FIELD_HEIGHT = 336.0


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def round_state():
    """Level 1 round with only the ship, parked in the middle of the field."""
    return RoundState(level_params(1), PALETTES[0], FIELD_WIDTH, FIELD_HEIGHT, now=0.0)


@pytest.fixture
def add_asteroid():
    def _add(world, x, y, sides=4, size=10.0, vx=0.0, vy=0.0):
        return create_asteroid(world, x, y, vx, vy, size=size, sides=sides, color=250)
    return _add


@pytest.fixture
def add_bullet():
    def _add(world, x, y, vx=7.0, vy=0.0, shot_at=0.0):
        entity_id = world.create_entity()
        world.add_component(entity_id, Position(x, y))
        world.add_component(entity_id, Velocity(vx, vy))
        world.add_component(entity_id, BulletBody(shot_at=shot_at))
        return entity_id
    return _add
