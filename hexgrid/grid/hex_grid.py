"""HexGrid — sparse store of hexagonal cells.

The grid owns its cells in a dict keyed by cube coordinate, so lookups
are O(1) whether the grid was generated as a filled hexagon or loaded
from an arbitrary sparse map.  Pathfinders, range queries and renderers
query it through ``get_cell_at``, ``get_neighbors``, ``cell_to_pixel``
and ``distance`` and then mutate the returned cells directly.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.random import Generator

from hexgrid.grid import coords
from hexgrid.grid.cell import Cell, Coord
from hexgrid.grid.errors import GridDisposedError
from hexgrid.persistence import records

if TYPE_CHECKING:
    from hexgrid.grid.config import GridConfig

logger = logging.getLogger(__name__)

NeighborFilter = Callable[[Cell, Cell], bool]


class HexGrid:
    """Graph of flat-top hexagons in cube coordinates.

    Attributes:
        size: Ring radius used by :meth:`generate`.
        cell_sides: Number of sides per cell.
        extrude_settings: Display settings carried through save/load.
        autogenerated: Whether the cells came from :meth:`generate`.
        rng: Generator used by :meth:`get_random_cell` by default.
        on_tile_release: Called with each live tile handle the grid drops.
    """

    cell_sides = 6

    def __init__(
        self,
        size: int = 5,
        cell_size: float = 10.0,
        *,
        rng: Generator | None = None,
        on_tile_release: Callable[[Any], None] | None = None,
    ) -> None:
        """Create an empty grid.

        Args:
            size: Ring radius for procedural generation.
            cell_size: Hexagon radius in world units.
            rng: Random generator; a fresh unseeded one if omitted.
            on_tile_release: Hook for the rendering layer to free tiles.
        """
        self._cells: dict[Coord, Cell] | None = {}
        self.size = size
        self.cell_size = cell_size
        self.extrude_settings: dict[str, Any] | None = None
        self.autogenerated = False
        self.rng = rng if rng is not None else np.random.default_rng()
        self.on_tile_release = on_tile_release

    @classmethod
    def from_config(cls, config: GridConfig) -> HexGrid:
        """Build a grid as described by a :class:`GridConfig`.

        A configured ``url`` takes precedence over ``map_file``; with
        neither, a hexagon of ``config.rings`` rings is generated.
        """
        from hexgrid.persistence import io

        grid = cls(
            size=config.rings,
            cell_size=config.cell_size,
            rng=np.random.default_rng(config.seed),
        )
        grid.extrude_settings = dict(config.extrude_settings)
        if config.url:
            grid.load(io.fetch_record(config.url))
        elif config.map_file:
            grid.load(io.read_record(config.map_file))
        else:
            grid.generate()
        return grid

    # ------------------------------------------------------------------
    # Store state
    # ------------------------------------------------------------------

    @property
    def cell_size(self) -> float:
        """Hexagon radius in world units."""
        return self._cell_size

    @cell_size.setter
    def cell_size(self, value: float) -> None:
        self._check_live()
        value = float(value)
        if not math.isfinite(value) or value <= 0:
            msg = f"cell_size must be finite and positive, got {value!r}"
            raise ValueError(msg)
        self._cell_size = value
        self._cell_width = coords.cell_width(self._cell_size)
        self._cell_length = coords.cell_length(self._cell_size)

    @property
    def cell_width(self) -> float:
        return self._cell_width

    @property
    def cell_length(self) -> float:
        return self._cell_length

    @property
    def cells(self) -> dict[Coord, Cell]:
        """The cell mapping, keyed by :func:`coords.cell_to_hash`.

        Raises:
            GridDisposedError: If the grid has been disposed.
        """
        self._check_live()
        return self._cells

    @property
    def num_cells(self) -> int:
        return len(self.cells)

    @property
    def disposed(self) -> bool:
        return self._cells is None

    def _check_live(self) -> None:
        if self._cells is None:
            msg = "HexGrid has been disposed"
            raise GridDisposedError(msg)

    def __len__(self) -> int:
        return self.num_cells

    def __contains__(self, cell: object) -> bool:
        return isinstance(cell, Cell) and cell.coords in self.cells

    # ------------------------------------------------------------------
    # Conversion math bound to this grid's cell size
    # ------------------------------------------------------------------

    def cell_to_pixel(self, cell: Cell) -> coords.Position:
        """World position of ``cell``'s centre."""
        self._check_live()
        return coords.cell_to_pixel(cell, self._cell_size)

    def pixel_to_cell(self, position: coords.Position) -> Cell:
        """The lattice cell whose hexagon contains ``position``.

        The result is a new cell; it is not looked up in the store.
        """
        self._check_live()
        return coords.cube_round(coords.pixel_to_cell(position, self._cell_size))

    def cube_round(self, frac: coords.FractionalCube) -> Cell:
        self._check_live()
        return coords.cube_round(frac)

    def cell_to_hash(self, cell: Cell) -> Coord:
        self._check_live()
        return coords.cell_to_hash(cell)

    def distance(self, cell_a: Cell, cell_b: Cell) -> float:
        """Cube distance plus the height change from ``cell_a`` to ``cell_b``."""
        self._check_live()
        return coords.distance(cell_a, cell_b)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cell_at(self, position: coords.Position) -> Cell | None:
        """Return the stored cell under a world position, if any.

        Positions with a non-finite ``x`` or ``z`` are never over a cell.
        """
        cells = self.cells
        if not (math.isfinite(position.x) and math.isfinite(position.z)):
            return None
        return cells.get(coords.cell_to_hash(self.pixel_to_cell(position)))

    def get_cell(self, q: int, r: int, s: int | None = None) -> Cell | None:
        """Return the stored cell at the given coordinates, if any."""
        return self.cells.get(coords.cell_to_hash(Cell(q, r, s)))

    def get_neighbors(
        self,
        cell: Cell,
        include_diagonals: bool = False,
        filter_fn: NeighborFilter | None = None,
    ) -> list[Cell]:
        """Return the stored cells adjacent to ``cell``.

        Args:
            cell: The cell to search around.
            include_diagonals: Also return the six vertex-crossing cells,
                after the edge neighbours.
            filter_fn: Called as ``filter_fn(cell, candidate)``; candidates
                it rejects are skipped.

        Returns:
            A new list in direction-table order.  Empty when nothing
            around ``cell`` is stored.
        """
        cells = self.cells
        offsets = coords.DIRECTIONS
        if include_diagonals:
            offsets = coords.DIRECTIONS + coords.DIAGONALS

        result: list[Cell] = []
        for offset in offsets:
            target = Cell(cell.q, cell.r, cell.s).add(offset)
            n = cells.get(coords.cell_to_hash(target))
            if n is None or (filter_fn is not None and not filter_fn(cell, n)):
                continue
            result.append(n)
        return result

    def get_random_cell(self, rng: Generator | None = None) -> Cell | None:
        """Pick a stored cell uniformly at random.

        Args:
            rng: Generator to draw from; defaults to ``self.rng``.

        Returns:
            A cell, or None when the grid is empty.
        """
        cells = self.cells
        if not cells:
            return None
        rng = rng if rng is not None else self.rng
        index = int(rng.integers(0, len(cells)))
        return next(itertools.islice(cells.values(), index, None))

    def traverse(self, callback: Callable[[Cell], Any]) -> None:
        """Call ``callback`` once for every stored cell."""
        for cell in list(self.cells.values()):
            callback(cell)

    def clear_path(self) -> None:
        """Reset every cell's pathfinder scratch fields."""
        for cell in self.cells.values():
            cell.reset_path()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, cell: Cell) -> Cell | None:
        """Store ``cell`` unless its coordinate is already taken.

        Returns:
            The cell if it was stored, None if the slot was occupied (the
            existing cell is kept).
        """
        cells = self.cells
        key = coords.cell_to_hash(cell)
        if key in cells:
            logger.debug("A cell already exists at %s", key)
            return None
        cells[key] = cell
        return cell

    def remove(self, cell: Cell) -> None:
        """Drop the cell at ``cell``'s coordinate if one is stored."""
        self.cells.pop(coords.cell_to_hash(cell), None)

    def generate(self) -> None:
        """Fill a flat hexagon of ``size`` rings around the origin."""
        for x, y, z in coords.hex_range(self.size):
            self.add(Cell(x, y, z))
        self.autogenerated = True
        logger.debug(
            "Generated hex grid of %d rings (%d cells)",
            self.size,
            self.num_cells,
        )

    def load(self, record: Mapping[str, Any]) -> None:
        """Replace the grid's contents with a serialized grid.

        Tiles attached to the outgoing cells are released first.  Every
        cell is rebuilt through the :class:`Cell` constructor.

        Args:
            record: A mapping shaped like :meth:`to_json` output.

        Raises:
            GridRecordError: If the record is malformed.
            CellValidationError: If a cell record has invalid coordinates.
        """
        self._check_live()
        fields = records.read_grid_fields(record)
        new_cells = records.cells_from_record(record)

        self._release_tiles()
        self._cells = {}
        self.size = fields["size"]
        self.cell_size = fields["cell_size"]
        self.extrude_settings = fields["extrude_settings"]
        self.autogenerated = fields["autogenerated"]
        for cell in new_cells:
            self.add(cell)
        logger.debug("Loaded hex grid with %d cells", self.num_cells)

    def to_json(self) -> dict[str, Any]:
        """Return the grid as a JSON-serializable record."""
        return records.grid_to_record(self)

    def dispose(self) -> None:
        """Release all cells and tiles; the grid is unusable afterwards."""
        if self._cells is None:
            return
        self._release_tiles()
        self._cells = None
        self.extrude_settings = None
        logger.debug("Disposed hex grid")

    def _release_tiles(self) -> None:
        """Detach tiles from every cell, notifying the tile owner."""
        for cell in self.cells.values():
            tile = cell.tile
            if tile is not None and self.on_tile_release is not None:
                self.on_tile_release(tile)
            cell.tile = None
