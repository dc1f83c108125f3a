"""
Components
===========
Plain data attached to entities. Systems hold the behavior.
"""

from dataclasses import dataclass


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Field position in field units."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in field units per frame."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Heading:
    """Ship facing in degrees. 0 is up; never normalized."""
    degrees: float = 0.0


@dataclass
class Spin:
    """Cosmetic asteroid rotation."""
    rotation: float = 0.0
    speed: float = 0.0


# =============================================================================
# BODY COMPONENTS
# =============================================================================

@dataclass
class BulletBody:
    """Bullet bookkeeping. Expires by age or when consumed by a hit."""
    shot_at: float = 0.0
    consumed: bool = False


@dataclass
class AsteroidBody:
    """
    Asteroid collision radius and shape.

    sides doubles as remaining splittability: at 3 the asteroid is
    destroyed outright, above 3 it breaks into two (sides - 1) children.
    """
    size: float = 10.0
    sides: int = 3
    consumed: bool = False
    color: int = 255


# =============================================================================
# COSMETIC COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """Glyph and color for cell-rendered entities (particles)."""
    char: str = '.'
    color: int = 255


@dataclass
class Lifetime:
    """Entity lifetime in frames."""
    frames_remaining: int = 30


# =============================================================================
# TAG COMPONENTS (empty, used for queries)
# =============================================================================

@dataclass
class ShipTag:
    """Marks the player ship."""
    pass


@dataclass
class ParticleTag:
    """Marks a particle entity."""
    pass
