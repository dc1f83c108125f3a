"""
Vector Helpers
===============
Plain (x, y) float math. Headings are in degrees with 0 pointing up
(negative y), increasing clockwise.
"""

import math
from typing import Tuple


Vec = Tuple[float, float]

# Substitute for degenerate direction vectors
FALLBACK_DIRECTION: Vec = (1.0, 0.0)


def length(x: float, y: float) -> float:
    return math.sqrt(x * x + y * y)


def distance(ax: float, ay: float, bx: float, by: float) -> float:
    """Straight-line distance. Never wrap-aware."""
    return length(ax - bx, ay - by)


def normalize(x: float, y: float) -> Vec:
    """Unit vector along (x, y); zero-length input yields FALLBACK_DIRECTION."""
    mag = length(x, y)
    if mag == 0.0:
        return FALLBACK_DIRECTION
    return x / mag, y / mag


def clamp_length(x: float, y: float, max_length: float) -> Vec:
    """Rescale (x, y) to max_length if it is longer."""
    mag = length(x, y)
    if mag > max_length:
        scale = max_length / mag
        return x * scale, y * scale
    return x, y


def heading_vector(degrees: float) -> Vec:
    """Unit vector the ship nose points along."""
    angle = math.radians(degrees)
    return math.sin(angle), -math.cos(angle)


def rotate_cw90(x: float, y: float) -> Vec:
    return y, -x


def rotate_ccw90(x: float, y: float) -> Vec:
    return -y, x


def wrap_around(x: float, y: float, width: float, height: float) -> Vec:
    """
    Toroidal wrap that resets to the opposite boundary.

    A coordinate past the far edge becomes 0 and one below 0 becomes
    the extent. The overshoot is discarded, so this is not a modulo.
    """
    if x > width:
        x = 0.0
    if x < 0:
        x = float(width)
    if y > height:
        y = 0.0
    if y < 0:
        y = float(height)
    return x, y
