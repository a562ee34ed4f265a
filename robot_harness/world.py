"""
Table World Definition Module

This module defines the table the robot moves on:
- build_table_polygon() -> Polygon: rectangle whose corners sit 0.5 outside
  the integer grid, so every grid cell centre is strictly inside
- build_table_bounds() -> TableBounds: the same table as an inclusive
  integer box, used to cross-check the polygon
"""

from .config import TABLE_MAX, TABLE_MIN
from .geometry import Polygon, TableBounds, Vector


def build_table_polygon(min_xy: int = TABLE_MIN, max_xy: int = TABLE_MAX) -> Polygon:
    """
    Build the square table polygon for grid cells min_xy..max_xy on both axes.

    With the defaults the corners are (-0.5, -0.5), (-0.5, 9.5), (9.5, 9.5)
    and (9.5, -0.5).

    Returns:
        Polygon: immutable table outline
    """
    low = min_xy - 0.5
    high = max_xy + 0.5
    return Polygon(vertices=(
        Vector(low, low),
        Vector(low, high),
        Vector(high, high),
        Vector(high, low),
    ))


def build_table_bounds(min_xy: int = TABLE_MIN, max_xy: int = TABLE_MAX) -> TableBounds:
    """Build the inclusive integer box matching build_table_polygon()."""
    return TableBounds(min_x=min_xy, min_y=min_xy, max_x=max_xy, max_y=max_xy)
