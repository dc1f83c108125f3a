"""
Controls
=========
Turns a raw input snapshot into one normalized command set.

Two control schemes exist: discrete keys and on-screen touch zones. A
session picks one the first time the player confirms and keeps it.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, FrozenSet, Optional, Tuple


# =============================================================================
# KEY NAMES
# =============================================================================

KEY_LEFT = 'KEY_LEFT'
KEY_RIGHT = 'KEY_RIGHT'
KEY_UP = 'KEY_UP'
KEY_ENTER = 'KEY_ENTER'
KEY_ESCAPE = 'KEY_ESCAPE'
KEY_FIRE = ' '
KEY_PAUSE = 'p'
KEY_QUIT = 'q'

PAUSE_KEYS = frozenset({KEY_ESCAPE, KEY_PAUSE})


# =============================================================================
# TUNING
# =============================================================================

KEY_TURN_STEP = 5.0    # degrees per frame
TOUCH_TURN_STEP = 3.0  # degrees per frame
THRUST_ACCEL = 2.0
FIRE_COOLDOWN = 0.25   # seconds between shots


# =============================================================================
# INPUT SNAPSHOT
# =============================================================================

class PointerPhase(Enum):
    STARTED = auto()
    MOVED = auto()
    STATIONARY = auto()
    ENDED = auto()
    CANCELLED = auto()


ACTIVE_PHASES = frozenset({PointerPhase.STARTED, PointerPhase.MOVED, PointerPhase.STATIONARY})


@dataclass(frozen=True)
class PointerPoint:
    """One touch or mouse pointer, positioned in field units."""
    id: int
    x: float
    y: float
    phase: PointerPhase = PointerPhase.STARTED

    @property
    def active(self) -> bool:
        return self.phase in ACTIVE_PHASES


@dataclass(frozen=True)
class InputSnapshot:
    """
    Everything one frame step reads from the outside world.

    keys_down holds keys currently held; keys_pressed holds keys whose
    key-down edge happened since the previous frame.
    """
    now: float = 0.0
    width: float = 640.0
    height: float = 336.0
    keys_down: FrozenSet[str] = frozenset()
    keys_pressed: FrozenSet[str] = frozenset()
    pointers: Tuple[PointerPoint, ...] = ()


# =============================================================================
# COMMANDS
# =============================================================================

class ControlScheme(Enum):
    KEYBOARD = auto()
    TOUCH = auto()


@dataclass
class Commands:
    rotate_left: bool = False
    rotate_right: bool = False
    thrust: bool = False
    fire: bool = False
    pause: bool = False
    turn_step: float = KEY_TURN_STEP

    @property
    def rotation(self) -> float:
        """Net heading change this frame in degrees."""
        delta = 0.0
        if self.rotate_left:
            delta -= self.turn_step
        if self.rotate_right:
            delta += self.turn_step
        return delta


class Controls:
    """Produces Commands from an InputSnapshot."""

    scheme: ControlScheme

    def resolve(self, snapshot: InputSnapshot) -> Commands:
        raise NotImplementedError

    def confirmed(self, snapshot: InputSnapshot) -> bool:
        """True if the snapshot holds this scheme's confirm gesture."""
        raise NotImplementedError


class KeyboardControls(Controls):
    """Arrow keys turn and thrust, space fires, Esc/P pauses, Enter confirms."""

    scheme = ControlScheme.KEYBOARD

    def resolve(self, snapshot: InputSnapshot) -> Commands:
        held = snapshot.keys_down
        return Commands(
            rotate_left=KEY_LEFT in held,
            rotate_right=KEY_RIGHT in held,
            thrust=KEY_UP in held,
            fire=KEY_FIRE in held,
            pause=bool(PAUSE_KEYS & snapshot.keys_pressed),
            turn_step=KEY_TURN_STEP,
        )

    def confirmed(self, snapshot: InputSnapshot) -> bool:
        return KEY_ENTER in snapshot.keys_pressed


# =============================================================================
# TOUCH ZONES
# =============================================================================

@dataclass(frozen=True)
class Zone:
    """Axis-aligned screen rectangle, half-open on its far edges."""
    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.x + self.w and self.y <= py < self.y + self.h


ZONE_ROTATE_LEFT = 'rotate_left'
ZONE_ROTATE_RIGHT = 'rotate_right'
ZONE_THRUST = 'thrust'
ZONE_PAUSE = 'pause'


def touch_zones(width: float, height: float) -> Dict[str, Zone]:
    """
    Zone layout for the current viewport.

    Bottom quarter: rotate-left | rotate-right | thrust (right half).
    Top-right corner: pause. Recomputed every frame since the viewport
    can change size.
    """
    band_y = height * 0.75
    # Far edges get a hair of slack so a pointer exactly on the border counts.
    band_h = height - band_y + 1e-6
    return {
        ZONE_ROTATE_LEFT: Zone(0.0, band_y, width * 0.25, band_h),
        ZONE_ROTATE_RIGHT: Zone(width * 0.25, band_y, width * 0.25, band_h),
        ZONE_THRUST: Zone(width * 0.5, band_y, width * 0.5 + 1e-6, band_h),
        ZONE_PAUSE: Zone(width * 0.85, 0.0, width * 0.15 + 1e-6, height * 0.15),
    }


class TouchControls(Controls):
    """
    On-screen zones. Firing is automatic, limited only by the cooldown.

    A pointer outside every zone does nothing; there is no tap-to-fire.
    """

    scheme = ControlScheme.TOUCH

    def resolve(self, snapshot: InputSnapshot) -> Commands:
        zones = touch_zones(snapshot.width, snapshot.height)
        commands = Commands(fire=True, turn_step=TOUCH_TURN_STEP)

        for point in snapshot.pointers:
            if not point.active:
                continue
            if zones[ZONE_ROTATE_LEFT].contains(point.x, point.y):
                commands.rotate_left = True
            elif zones[ZONE_ROTATE_RIGHT].contains(point.x, point.y):
                commands.rotate_right = True
            elif zones[ZONE_THRUST].contains(point.x, point.y):
                commands.thrust = True
            elif zones[ZONE_PAUSE].contains(point.x, point.y):
                if point.phase == PointerPhase.STARTED:
                    commands.pause = True

        return commands

    def confirmed(self, snapshot: InputSnapshot) -> bool:
        return any_touch_started(snapshot)


_CONTROLS = {
    ControlScheme.KEYBOARD: KeyboardControls(),
    ControlScheme.TOUCH: TouchControls(),
}


def controls_for(scheme: ControlScheme) -> Controls:
    return _CONTROLS[scheme]


# =============================================================================
# SCHEME-INDEPENDENT QUERIES
# =============================================================================

def any_touch_started(snapshot: InputSnapshot) -> bool:
    return any(p.phase == PointerPhase.STARTED for p in snapshot.pointers)


def detect_scheme(snapshot: InputSnapshot) -> Optional[ControlScheme]:
    """Which scheme the player just chose, if any. Enter wins a tie."""
    if KEY_ENTER in snapshot.keys_pressed:
        return ControlScheme.KEYBOARD
    if any_touch_started(snapshot):
        return ControlScheme.TOUCH
    return None


def quit_pressed(snapshot: InputSnapshot) -> bool:
    return KEY_QUIT in snapshot.keys_pressed
