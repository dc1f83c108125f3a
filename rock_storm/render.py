"""
Screen Rendering
=================
Draws the session for whichever phase is active. Reads state only.
"""

import math

from .components import Position, Heading, Spin, AsteroidBody, BulletBody, Renderable, ParticleTag
from .controls import ControlScheme, touch_zones
from .engine import (
    GameRenderer, FIELD_UNITS_X, FIELD_UNITS_Y,
    GRAY_DARK, GRAY_DARKER, GRAY_MED, NEON_CYAN, NEON_GREEN, NEON_MAGENTA,
    NEON_RED, NEON_YELLOW, WHITE
)
from .entities import SHIP_HEIGHT, SHIP_BASE
from .geometry import heading_vector
from .states import Phase


TITLE_ART = [
    r" ___  ___   ___ _  __  ___ _____ ___  ___ __  __ ",
    r"| _ \/ _ \ / __| |/ / / __|_   _/ _ \| _ \  \/  |",
    r"|   / (_) | (__| ' <  \__ \ | || (_) |   / |\/| |",
    r"|_|_\\___/ \___|_|\_\ |___/ |_| \___/|_|_\_|  |_|",
]


# =============================================================================
# ENTITIES
# =============================================================================

def ship_outline(x: float, y: float, degrees: float):
    """Elongated triangle: nose, back-left, back-right."""
    fx, fy = heading_vector(degrees)
    angle = math.radians(degrees)
    left = (-math.cos(angle), -math.sin(angle))
    right = (math.cos(angle), math.sin(angle))

    back_x = x - fx * SHIP_HEIGHT * 0.3
    back_y = y - fy * SHIP_HEIGHT * 0.3
    half_base = SHIP_BASE * 0.3
    return [
        (x + fx * SHIP_HEIGHT * 0.8, y + fy * SHIP_HEIGHT * 0.8),
        (back_x + left[0] * half_base, back_y + left[1] * half_base),
        (back_x + right[0] * half_base, back_y + right[1] * half_base),
    ]


def asteroid_outline(x: float, y: float, sides: int, radius: float, rotation: float):
    """Regular polygon vertices."""
    points = []
    for i in range(sides):
        angle = math.radians(rotation + i * 360.0 / sides)
        points.append((x + math.cos(angle) * radius, y + math.sin(angle) * radius))
    return points


def render_round(renderer: GameRenderer, round_state, draw_ship: bool = True):
    """Asteroids, bullets, particles and the ship."""
    world = round_state.world
    palette = round_state.palette

    for _, pos, spin, body in world.query(Position, Spin, AsteroidBody):
        renderer.polyline(
            asteroid_outline(pos.x, pos.y, body.sides, body.size, spin.rotation),
            body.color,
        )

    for _, pos, _ in world.query(Position, BulletBody):
        renderer.plot(pos.x, pos.y, palette.bullet)

    for _, pos, rend, _ in world.query(Position, Renderable, ParticleTag):
        cx, cy = renderer.field_to_cell(pos.x, pos.y)
        if 0 <= cx < renderer.width and 0 <= cy < renderer.game_height:
            renderer.put(cx, cy, rend.char, rend.color)

    if draw_ship:
        pos = world.get_component(round_state.ship_id, Position)
        heading = world.get_component(round_state.ship_id, Heading)
        renderer.polyline(ship_outline(pos.x, pos.y, heading.degrees), palette.ship)


def render_touch_zones(renderer: GameRenderer):
    """Outline the on-screen control zones with their labels."""
    labels = {'rotate_left': '<', 'rotate_right': '>', 'thrust': '^', 'pause': '||'}
    zones = touch_zones(renderer.field_width, renderer.field_height)
    for key, zone in zones.items():
        x0 = int(zone.x / FIELD_UNITS_X)
        y0 = int(zone.y / FIELD_UNITS_Y)
        x1 = min(renderer.width, int((zone.x + zone.w) / FIELD_UNITS_X))
        y1 = min(renderer.game_height, int((zone.y + zone.h) / FIELD_UNITS_Y))
        renderer.draw_box(x0, y0, x1 - x0, y1 - y0, GRAY_DARKER, '.', with_shake=False)
        label = labels[key]
        renderer.put_string((x0 + x1) // 2 - len(label) // 2, (y0 + y1) // 2,
                            label, GRAY_DARK, with_shake=False)


# =============================================================================
# UI
# =============================================================================

def render_hud(renderer: GameRenderer, session):
    """Bottom three rows: title bar, score/level, controls."""
    ui_y = renderer.game_height
    width = renderer.width
    text_color = session.palette.text

    renderer.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.buffer.put_string(2, ui_y, ' ROCK_STORM ', text_color)

    round_state = session.round
    if round_state is not None:
        status = f' LEVEL:{session.level}  SCORE:{round_state.score}  ROCKS:{round_state.asteroid_count()} '
        renderer.buffer.put_string(max(0, width - len(status) - 1), ui_y, status, NEON_YELLOW)

    if session.scheme is ControlScheme.TOUCH:
        controls = 'TAP ZONES: < > TURN  ^ THRUST  || PAUSE  (AUTO-FIRE)  Q:QUIT'
    else:
        controls = 'ARROWS:TURN/THRUST  SPACE:FIRE  ESC/P:PAUSE  Q:QUIT'
    renderer.buffer.put_string(2, ui_y + 2, controls[:max(0, width - 3)], GRAY_DARKER)

    if renderer.show_fps:
        fps_text = f'FPS:{renderer.current_fps:.0f}'
        renderer.buffer.put_string(width - len(fps_text) - 2, ui_y + 1, fps_text, GRAY_MED)


def render_start_menu(renderer: GameRenderer, frame: int):
    art_y = max(0, renderer.game_height // 2 - 5)
    for i, line in enumerate(TITLE_ART):
        color = NEON_MAGENTA if i % 2 == 0 else NEON_CYAN
        renderer.put_centered(art_y + i, line, color)

    renderer.put_centered(art_y + len(TITLE_ART) + 1, 'SHOOT THE ROCKS. DODGE THE ROCKS.', GRAY_MED)
    if (frame // 30) % 2 == 0:
        renderer.put_centered(art_y + len(TITLE_ART) + 3, '[ PRESS ENTER OR CLICK TO START ]', NEON_GREEN)
    renderer.put_centered(art_y + len(TITLE_ART) + 5, 'Q - QUIT', GRAY_DARK)
    renderer.draw_box(0, 0, renderer.width, renderer.game_height, GRAY_DARKER, '.', with_shake=False)


def render_info_screen(renderer: GameRenderer, session):
    y = max(0, renderer.game_height // 2 - 5)
    renderer.put_centered(y, 'HOW TO PLAY', NEON_YELLOW)
    if session.scheme is ControlScheme.TOUCH:
        lines = [
            'Bottom-left quarter  : turn left',
            'Bottom second quarter: turn right',
            'Bottom-right half    : thrust',
            'Top-right corner     : pause',
            'Your guns fire on their own.',
            '',
            '[ CLICK TO LAUNCH ]',
        ]
    else:
        lines = [
            'LEFT / RIGHT : turn',
            'UP           : thrust',
            'SPACE        : fire',
            'ESC or P     : pause',
            '',
            '',
            '[ PRESS ENTER TO LAUNCH ]',
        ]
    for i, line in enumerate(lines):
        color = NEON_GREEN if line.startswith('[') else GRAY_MED
        renderer.put_centered(y + 2 + i, line, color)
    renderer.put_centered(y + 2 + len(lines) + 1,
                          'Big rocks split in two. Clear every rock to win the level.', GRAY_DARK)
    if session.scheme is ControlScheme.TOUCH:
        render_touch_zones(renderer)


def _overlay_message(renderer: GameRenderer, title: str, title_color: int, lines, frame: int):
    y = max(0, renderer.game_height // 2 - 3)
    renderer.put_centered(y, title, title_color)
    for i, line in enumerate(lines):
        renderer.put_centered(y + 2 + i, line, NEON_YELLOW)
    if (frame // 30) % 2 == 0:
        renderer.put_centered(y + 3 + len(lines), '[ PRESS ENTER OR CLICK ]', NEON_CYAN)


# =============================================================================
# DISPATCH
# =============================================================================

def render(renderer: GameRenderer, session) -> str:
    """Draw the whole frame and return the terminal output."""
    phase = session.phase
    bg = session.palette.background if phase in (Phase.PLAYING, Phase.PAUSED) else -1
    renderer.begin_frame(bg)

    if phase is Phase.START_MENU:
        render_start_menu(renderer, session.phase_frame)
    elif phase is Phase.INFO_SCREEN:
        render_info_screen(renderer, session)
    elif phase is Phase.PLAYING:
        render_round(renderer, session.round)
        if session.scheme is ControlScheme.TOUCH:
            render_touch_zones(renderer)
    elif phase is Phase.PAUSED:
        render_round(renderer, session.round)
        renderer.put_centered(max(0, renderer.game_height // 2), ' PAUSED ', WHITE)
        resume = 'CLICK TO RESUME' if session.scheme is ControlScheme.TOUCH else 'ENTER OR ESC TO RESUME'
        renderer.put_centered(max(0, renderer.game_height // 2) + 1, resume, GRAY_MED)
    elif phase is Phase.GAME_OVER:
        if session.round is not None:
            render_round(renderer, session.round, draw_ship=False)
        _overlay_message(renderer, 'G A M E   O V E R', NEON_RED,
                         [f'LEVEL {session.level}   SCORE {session.score}'], session.phase_frame)
    elif phase is Phase.WIN:
        _overlay_message(renderer, 'L E V E L   C L E A R E D', NEON_GREEN,
                         [f'SCORE {session.score}', f'NEXT: LEVEL {session.level + 1}'],
                         session.phase_frame)

    render_hud(renderer, session)
    return renderer.end_frame()
