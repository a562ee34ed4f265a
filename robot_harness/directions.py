"""
Direction codec.

Converts between compass labels and unit vectors, and keeps a discrete
four-state turn table that knows nothing about vectors. The two are written
independently so the direction self-check can compare them.
"""

from types import MappingProxyType

from .geometry import Vector
from .models import CompassDirection

CANONICAL_VECTORS = MappingProxyType({
    CompassDirection.NORTH: Vector(0, 1),
    CompassDirection.SOUTH: Vector(0, -1),
    CompassDirection.WEST: Vector(-1, 0),
    CompassDirection.EAST: Vector(1, 0),
})

LEFT_TURN = Vector(0, 1)
RIGHT_TURN = Vector(0, -1)

LEFT_OF = MappingProxyType({
    CompassDirection.NORTH: CompassDirection.WEST,
    CompassDirection.WEST: CompassDirection.SOUTH,
    CompassDirection.SOUTH: CompassDirection.EAST,
    CompassDirection.EAST: CompassDirection.NORTH,
})

RIGHT_OF = MappingProxyType({after: before for before, after in LEFT_OF.items()})


def to_vector(direction: CompassDirection) -> Vector:
    """Return the unit vector for a compass label."""
    return CANONICAL_VECTORS[direction]


def to_direction(vector: Vector) -> CompassDirection:
    """
    Return the compass label whose unit vector best matches `vector`.

    The best match has the largest dot product. On a tie the label declared
    first in CompassDirection wins (NORTH, SOUTH, WEST, EAST).
    """
    # max() keeps the first of equal keys, and the enum iterates in declaration order
    return max(CompassDirection, key=lambda d: vector.dot(CANONICAL_VECTORS[d]))


def turn_left(vector: Vector) -> Vector:
    return vector * LEFT_TURN


def turn_right(vector: Vector) -> Vector:
    return vector * RIGHT_TURN
