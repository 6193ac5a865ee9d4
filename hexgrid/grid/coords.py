"""Cube-coordinate math for flat-top hexagons.

Conversions between world positions and cube coordinates, cube
rounding, distance and the fixed neighbour offset tables.  All functions
here are pure: they allocate fresh results rather than writing into
shared scratch objects, so they are safe to call from inside each other
(for example rounding inside a neighbour loop).

World space is three-dimensional: ``x`` and ``z`` span the horizontal
plane the grid lies on and ``y`` is elevation.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import NamedTuple

from hexgrid.grid.cell import Cell, Coord

SQRT3 = math.sqrt(3.0)
TWO_THIRDS = 2.0 / 3.0

# Edge-adjacent offsets, flat-top orientation
DIRECTIONS: tuple[Coord, ...] = (
    (+1, -1, 0),
    (+1, 0, -1),
    (0, +1, -1),
    (-1, +1, 0),
    (-1, 0, +1),
    (0, -1, +1),
)

# Vertex-crossing offsets (cube distance 2)
DIAGONALS: tuple[Coord, ...] = (
    (+2, -1, -1),
    (+1, +1, -2),
    (-1, +2, -1),
    (-2, +1, +1),
    (-1, -1, +2),
    (+1, -2, +1),
)


class Position(NamedTuple):
    """A point in world space."""

    x: float
    y: float
    z: float


class FractionalCube(NamedTuple):
    """Cube coordinates before rounding; components need not be integers."""

    q: float
    r: float
    s: float


def cell_width(cell_size: float) -> float:
    """Corner-to-corner width of a hexagon of radius ``cell_size``."""
    return cell_size * 2.0


def cell_length(cell_size: float) -> float:
    """Edge-to-edge length of a hexagon of radius ``cell_size``."""
    return (SQRT3 * 0.5) * cell_width(cell_size)


def cell_to_hash(cell: Cell) -> Coord:
    """Return the store key for ``cell``.

    The key is the coordinate triple itself, so distinct cells can never
    collide the way delimiter-joined strings can.
    """
    return cell.q, cell.r, cell.s


def cell_to_pixel(cell: Cell, cell_size: float) -> Position:
    """Return the world position of a cell's centre.

    Args:
        cell: The cell to place.
        cell_size: Hexagon radius in world units.

    Returns:
        Position with ``y`` set to the cell's height.
    """
    x = cell.q * cell_width(cell_size) * 0.75
    z = (cell.s - cell.r) * cell_length(cell_size) * 0.5
    return Position(x, cell.h, z)


def pixel_to_cell(position: Position, cell_size: float) -> FractionalCube:
    """Return the fractional cube coordinates under a world position.

    This is the inverse of :func:`cell_to_pixel` on the horizontal plane;
    ``position.y`` is ignored.  Pass the result through
    :func:`cube_round` to get a lattice cell.

    Args:
        position: Any object with ``x`` and ``z`` attributes.
        cell_size: Hexagon radius in world units.
    """
    q = position.x * (TWO_THIRDS / cell_size)
    r = ((-position.x / 3.0) - (SQRT3 / 3.0) * position.z) / cell_size
    return FractionalCube(q, r, -q - r)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def cube_round(frac: FractionalCube) -> Cell:
    """Round fractional cube coordinates to the nearest cell.

    Each component is rounded on its own, then the one with the largest
    rounding error is rebuilt from the other two so the result sums to
    zero.  Ties fall through in the order q, r, s: q is rebuilt only when
    its error beats both others, r only when its error beats s's, and s
    otherwise.
    """
    rq = _round_half_up(frac.q)
    rr = _round_half_up(frac.r)
    rs = _round_half_up(frac.s)

    q_diff = abs(rq - frac.q)
    r_diff = abs(rr - frac.r)
    s_diff = abs(rs - frac.s)

    if q_diff > r_diff and q_diff > s_diff:
        rq = -rr - rs
    elif r_diff > s_diff:
        rr = -rq - rs
    else:
        rs = -rq - rr

    return Cell(rq, rr, rs)


def distance(a: Cell, b: Cell) -> float:
    """Cube distance between two cells plus the height change from a to b.

    The height term is signed: climbing adds cost and descending removes it.
    """
    d = max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))
    return d + (b.h - a.h)


def hex_range(radius: int) -> Iterator[Coord]:
    """Yield every cube coordinate within ``radius`` of the origin."""
    for x in range(-radius, radius + 1):
        for y in range(-radius, radius + 1):
            z = -x - y
            if abs(x) <= radius and abs(y) <= radius and abs(z) <= radius:
                yield x, y, z


def cell_vertices(
    center_x: float,
    center_z: float,
    cell_size: float,
) -> list[tuple[float, float]]:
    """Return the six corners of a flat-top hexagon on the x/z plane.

    Corners start on the +x axis and advance 60 degrees at a time.
    """
    points: list[tuple[float, float]] = []
    for i in range(6):
        angle = (math.tau / 6) * i
        points.append(
            (
                center_x + cell_size * math.cos(angle),
                center_z + cell_size * math.sin(angle),
            ),
        )
    return points
