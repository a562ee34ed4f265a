"""
Geometry Module

Plane geometry used by the reference robot:
- Vector: immutable 2D value, used as a point or (at magnitude 1) as a direction
- Polygon: closed vertex list with a ray-casting point-in-polygon test
- TableBounds: inclusive axis-aligned box test, written independently of Polygon
  so the two can be cross-checked

Rotation is complex multiplication: multiplying a unit vector by (0, 1) turns it
90 degrees counter-clockwise, by (0, -1) 90 degrees clockwise.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector:
    """A pair of real numbers (r, i)."""
    r: float
    i: float

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.r + other.r, self.i + other.i)

    def __mul__(self, other: "Vector") -> "Vector":
        return Vector(
            self.r * other.r - self.i * other.i,
            self.r * other.i + self.i * other.r,
        )

    def __abs__(self) -> float:
        return math.hypot(self.r, self.i)

    def dot(self, other: "Vector") -> float:
        return self.r * other.r + self.i * other.i

    def __str__(self) -> str:
        return f"({format_number(self.r)}, {format_number(self.i)})"


def format_number(value: float) -> str:
    """
    Render a coordinate for status text.

    Integral values print without a fractional part and negative zero prints
    as "0", so (0.0, -0.0) and (0, 0) produce the same text.
    """
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Polygon:
    """
    Closed polygon over an ordered vertex tuple.

    Edges join consecutive vertices; the last vertex joins the first.
    """
    vertices: tuple[Vector, ...] = ()

    def hit_test(self, point: Vector) -> bool:
        """
        Ray-casting containment test.

        The polygon is shifted so the query row becomes the zero line. Each edge
        whose endpoints lie strictly on opposite sides of that line contributes
        one crossing; the point is inside when an odd number of crossings lie
        strictly left of it.

        Vertices exactly on the query row never count as crossings, so points on
        a horizontal edge or at a corner are reported outside.

        Args:
            point: Query point

        Returns:
            True if the point is inside, False otherwise (always False for
            fewer than 3 vertices)
        """
        if len(self.vertices) < 3:
            return False

        shifted = [Vector(v.r, v.i - point.i) for v in self.vertices]
        crossings: list[float] = []
        for k, a in enumerate(shifted):
            b = shifted[(k + 1) % len(shifted)]
            if a.i * b.i < 0:
                crossings.append(a.r - (a.r - b.r) / (a.i - b.i) * a.i)

        left = [x for x in sorted(crossings) if x < point.r]
        return len(left) % 2 == 1


@dataclass(frozen=True)
class TableBounds:
    """Inclusive axis-aligned box [min_x, max_x] x [min_y, max_y]."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def hit_test(self, point: Vector) -> bool:
        return (
            self.min_x <= point.r <= self.max_x
            and self.min_y <= point.i <= self.max_y
        )
