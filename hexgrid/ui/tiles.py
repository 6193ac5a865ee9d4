"""Tiles — renderable handles for grid cells.

A tile is the polygon the viewer draws for one cell.  The rendering
layer owns the tiles; each cell only keeps a weak reference to its tile
through ``cell.tile``, so dropping the list returned by
:func:`generate_tiles` frees them.  The overlay is a plain set of
outlines covering every lattice position out to a given ring, stored
or not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from hexgrid.grid.cell import Cell
from hexgrid.grid.coords import cell_vertices, hex_range

if TYPE_CHECKING:
    from hexgrid.grid.hex_grid import HexGrid

# Colour ramp by height (low -> high)
_LOW = np.array([40, 90, 60], dtype=np.float64)
_HIGH = np.array([200, 190, 150], dtype=np.float64)
_BLOCKED = (70, 60, 60)


@dataclass(eq=False)
class HexTile:
    """A filled hexagon polygon placed on the x/z plane.

    Attributes:
        cell: The cell this tile depicts.
        points: Six corner points in world x/z coordinates.
        colour: RGB fill colour.
        scale: Fraction of the cell radius the polygon covers.
    """

    cell: Cell
    points: list[tuple[float, float]]
    colour: tuple[int, int, int]
    scale: float


def height_colour(h: float, max_height: float = 10.0) -> tuple[int, int, int]:
    """Interpolate the height ramp for elevation ``h``."""
    t = 0.0 if max_height <= 0 else float(np.clip(abs(h) / max_height, 0.0, 1.0))
    colour = _LOW + t * (_HIGH - _LOW)
    r, g, b = colour.astype(int).tolist()
    return r, g, b


def generate_tile(grid: HexGrid, cell: Cell, scale: float = 0.95) -> HexTile:
    """Build the tile for ``cell`` and attach it via ``cell.tile``.

    Args:
        grid: Grid supplying the cell size and placement.
        cell: The cell to depict.
        scale: Polygon radius as a fraction of the cell size.
    """
    pos = grid.cell_to_pixel(cell)
    tile = HexTile(
        cell=cell,
        points=cell_vertices(pos.x, pos.z, grid.cell_size * scale),
        colour=height_colour(cell.h) if cell.walkable else _BLOCKED,
        scale=scale,
    )
    cell.tile = tile
    return tile


def generate_tiles(grid: HexGrid, scale: float = 0.95) -> list[HexTile]:
    """Build one tile per stored cell.

    Returns:
        The tiles; the caller must keep this list alive for as long as
        the cells should see their tiles.
    """
    return [generate_tile(grid, cell, scale) for cell in grid.cells.values()]


def generate_overlay(
    grid: HexGrid,
    radius: int,
) -> list[list[tuple[float, float]]]:
    """Outline every lattice position within ``radius`` rings of the origin.

    The outline covers empty positions too, so a sparse map can be shown
    against the full hexagon it sits in.

    Returns:
        One list of six x/z corner points per position, at full cell size.
    """
    outlines = []
    for q, r, s in hex_range(radius):
        pos = grid.cell_to_pixel(Cell(q, r, s))
        outlines.append(cell_vertices(pos.x, pos.z, grid.cell_size))
    return outlines
