import pytest
from blessed.keyboard import Keystroke

from rock_storm.components import AsteroidBody, BulletBody, ParticleTag, Position, Velocity
from rock_storm.controls import (
    KEY_ENTER, KEY_ESCAPE, KEY_FIRE, KEY_PAUSE, ControlScheme, InputSnapshot,
    PointerPhase, PointerPoint
)
from rock_storm.entities import create_asteroid
from rock_storm.levels import PALETTES
from rock_storm.session import Session
from rock_storm.states import Phase, step
from rock_storm.terminal_input import TerminalInput


W, H = 640.0, 336.0


def snap(now=0.0, keys_down=(), keys_pressed=(), pointers=()):
    return InputSnapshot(
        now=now, width=W, height=H,
        keys_down=frozenset(keys_down),
        keys_pressed=frozenset(keys_pressed),
        pointers=tuple(pointers),
    )


def tap(x=W / 2, y=H / 2):
    return PointerPoint(id=1, x=x, y=y, phase=PointerPhase.STARTED)


def start_playing(session, scheme=ControlScheme.KEYBOARD, now=0.0):
    if scheme is ControlScheme.KEYBOARD:
        confirm = snap(now=now, keys_pressed={KEY_ENTER})
    else:
        confirm = snap(now=now, pointers=[tap()])
    assert step(session, confirm) is Phase.INFO_SCREEN
    assert step(session, confirm) is Phase.PLAYING
    return session.round


def clear_field_but_one(round_state, now):
    """Leave a single three-sided asteroid with a bullet sitting on it."""
    world = round_state.world
    for entity_id, _ in world.query(AsteroidBody):
        world.destroy_entity(entity_id)
    world.process_dead_entities()

    create_asteroid(world, 100.0, 100.0, 0.0, 0.0, size=10.0, sides=3, color=250)
    bullet_id = world.create_entity()
    world.add_component(bullet_id, Position(100.0, 100.0))
    world.add_component(bullet_id, Velocity(0.0, 0.0))
    world.add_component(bullet_id, BulletBody(shot_at=now))


def asteroid_positions(round_state):
    return [(p.x, p.y) for _, p, _ in round_state.world.query(Position, AsteroidBody)]


class TestStartAndInfo:
    def test_fresh_session(self):
        session = Session(seed=1)
        assert session.phase is Phase.START_MENU
        assert session.level == 1
        assert session.palette is PALETTES[0]
        assert session.scheme is None
        assert session.round is None
        assert session.score == 0

    def test_unrelated_input_is_ignored(self):
        session = Session(seed=1)
        assert step(session, snap(keys_pressed={'x'}, keys_down={'x'})) is Phase.START_MENU
        assert step(session, snap()) is Phase.START_MENU
        assert session.phase_frame == 2

    def test_enter_picks_keyboard(self):
        session = Session(seed=1)
        assert step(session, snap(keys_pressed={KEY_ENTER})) is Phase.INFO_SCREEN
        assert session.scheme is ControlScheme.KEYBOARD
        assert session.round is None
        assert session.phase_frame == 0

    def test_touch_picks_touch_and_needs_touch_to_continue(self):
        session = Session(seed=1)
        assert step(session, snap(pointers=[tap()])) is Phase.INFO_SCREEN
        assert session.scheme is ControlScheme.TOUCH

        assert step(session, snap(keys_pressed={KEY_ENTER})) is Phase.INFO_SCREEN
        assert step(session, snap(pointers=[tap()])) is Phase.PLAYING

    def test_round_created_on_launch(self):
        session = Session(seed=1)
        round_state = start_playing(session)
        assert round_state is session.round
        assert round_state.asteroid_count() == 12
        assert round_state.score == 0
        ship = round_state.world.get_component(round_state.ship_id, Position)
        assert (ship.x, ship.y) == (W / 2, H / 2)


class TestPlaying:
    def test_world_advances(self):
        session = Session(seed=2)
        round_state = start_playing(session)
        before = asteroid_positions(round_state)

        assert step(session, snap(now=0.02)) is Phase.PLAYING
        assert asteroid_positions(round_state) != before
        assert round_state.frame == 1

    def test_fire_cooldown(self):
        session = Session(seed=2)
        round_state = start_playing(session, now=0.0)

        for now in (0.1, 0.3, 0.4, 0.6):
            step(session, snap(now=now, keys_down={KEY_FIRE}))

        assert round_state.bullet_count() == 2

    def test_touch_auto_fire(self):
        session = Session(seed=2)
        round_state = start_playing(session, ControlScheme.TOUCH, now=0.0)
        step(session, snap(now=0.5))
        assert round_state.bullet_count() == 1

    def test_pause_freezes_the_world(self):
        session = Session(seed=3)
        round_state = start_playing(session)

        assert step(session, snap(now=0.1, keys_pressed={KEY_ESCAPE})) is Phase.PAUSED
        frozen = asteroid_positions(round_state)
        frame = round_state.frame

        for i in range(5):
            assert step(session, snap(now=0.2 + i, keys_down={KEY_FIRE})) is Phase.PAUSED
        assert asteroid_positions(round_state) == frozen
        assert round_state.frame == frame
        assert round_state.bullet_count() == 0

        assert step(session, snap(now=6.0, keys_pressed={KEY_PAUSE})) is Phase.PLAYING

    def test_enter_resumes(self):
        session = Session(seed=3)
        start_playing(session)
        step(session, snap(keys_pressed={KEY_PAUSE}))
        assert step(session, snap(keys_pressed={KEY_ENTER})) is Phase.PLAYING

    def test_touch_pause_zone(self):
        session = Session(seed=3)
        start_playing(session, ControlScheme.TOUCH)
        assert step(session, snap(pointers=[tap(W - 5, 5)])) is Phase.PAUSED
        assert step(session, snap(pointers=[tap()])) is Phase.PLAYING


    def test_expired_bullet_cannot_hit(self):
        session = Session(seed=4)
        round_state = start_playing(session, now=0.0)
        clear_field_but_one(round_state, now=0.0)

        # Bullet age equals its lifetime: gone before collisions run
        assert step(session, snap(now=1.5)) is Phase.PLAYING
        assert round_state.score == 0
        assert round_state.asteroid_count() == 1
        assert round_state.bullet_count() == 0

    def test_held_pause_key_pauses_once(self):
        session = Session(seed=3)
        start_playing(session)
        handler = TerminalInput()
        escape = Keystroke('\x1b', code=361, name='KEY_ESCAPE')

        for tick in range(80):
            if tick == 0 or (tick >= 30 and tick % 2 == 0):
                handler.process_key(escape)
            step(session, handler.snapshot(tick / 60, W, H))
            handler.end_tick()
            assert session.phase is Phase.PAUSED


class TestGameOver:
    def test_collision_ends_the_game_and_restart_resets(self):
        session = Session(seed=5)
        round_state = start_playing(session)
        world = round_state.world

        x, y = asteroid_positions(round_state)[0]
        ship = world.get_component(round_state.ship_id, Position)
        ship.x, ship.y = x, y

        assert step(session, snap(now=0.1)) is Phase.GAME_OVER
        assert world.count(ParticleTag) > 0

        # Waits for confirmation
        assert step(session, snap(now=0.2)) is Phase.GAME_OVER

        assert step(session, snap(now=0.3, keys_pressed={KEY_ENTER})) is Phase.START_MENU
        assert session.level == 1
        assert session.scheme is None
        assert session.round is None
        assert session.score == 0
        assert session.palette is PALETTES[0]


class TestWin:
    def test_clearing_the_field_wins_and_score_carries(self):
        session = Session(seed=6)
        round_state = start_playing(session)
        clear_field_but_one(round_state, now=1.0)

        assert step(session, snap(now=1.0)) is Phase.WIN
        assert session.score == 15

        assert step(session, snap(now=1.1)) is Phase.WIN
        assert step(session, snap(now=1.2, keys_pressed={KEY_ENTER})) is Phase.PLAYING

        assert session.level == 2
        assert session.round is not round_state
        assert session.round.score == 15
        assert session.round.asteroid_count() == 14
        assert session.round.params.speed_scale == pytest.approx(1.25)
        assert session.round.palette is session.palette

    def test_touch_confirms_win(self):
        session = Session(seed=6)
        clear_field_but_one(start_playing(session, ControlScheme.TOUCH), now=0.0)
        assert step(session, snap(now=0.0)) is Phase.WIN
        assert step(session, snap(now=0.5, pointers=[tap()])) is Phase.PLAYING
        assert session.level == 2


class TestQuit:
    @pytest.mark.parametrize('scheme', [ControlScheme.KEYBOARD, ControlScheme.TOUCH])
    def test_quit_from_playing(self, scheme):
        session = Session(seed=7)
        start_playing(session, scheme)
        assert step(session, snap(keys_pressed={'q'})) is Phase.QUIT

    def test_quit_is_absorbing(self):
        session = Session(seed=7)
        assert step(session, snap(keys_pressed={'q'})) is Phase.QUIT
        assert step(session, snap(keys_pressed={KEY_ENTER})) is Phase.QUIT
        assert step(session, snap(pointers=[tap()])) is Phase.QUIT


def test_same_seed_same_game():
    def run(seed, reseed=False):
        if reseed:
            session = Session()
            session.reseed(seed)
        else:
            session = Session(seed=seed)
        round_state = start_playing(session)
        for i in range(30):
            step(session, snap(now=i / 60, keys_down={KEY_FIRE}))
        return asteroid_positions(round_state), round_state.score

    assert run(42) == run(42)
    assert run(42, reseed=True) == run(42)


def test_score_never_decreases():
    session = Session(seed=8)
    round_state = start_playing(session)
    round_state.add_score(10)
    round_state.add_score(-5)
    round_state.add_score(0)
    assert round_state.score == 10
