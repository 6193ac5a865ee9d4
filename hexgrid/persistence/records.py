"""Grid records — the portable dict form of a hex grid.

A record holds the grid metadata plus one entry per cell::

    {
        "version": 1,
        "size": 5,
        "cellSize": 10.0,
        "extrudeSettings": {...},
        "autogenerated": true,
        "cells": [{"q": 0, "r": 0, "s": 0, "h": 0.0,
                   "walkable": true, "userData": {}}, ...]
    }

``version`` is optional on input; records without it are read as
version 1.  Pathfinder scratch fields and tile handles are never stored.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from hexgrid.grid.cell import Cell
from hexgrid.grid.errors import GridRecordError

if TYPE_CHECKING:
    from hexgrid.grid.hex_grid import HexGrid

RECORD_VERSION = 1


def grid_to_record(grid: HexGrid) -> dict[str, Any]:
    """Serialize a grid's structure to a JSON-compatible dict."""
    return {
        "version": RECORD_VERSION,
        "size": grid.size,
        "cellSize": grid.cell_size,
        "extrudeSettings": grid.extrude_settings,
        "autogenerated": grid.autogenerated,
        "cells": [cell.to_dict() for cell in grid.cells.values()],
    }


def read_grid_fields(record: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a record's metadata and return it with Python names.

    Raises:
        GridRecordError: If the record is not a mapping, has an unknown
            version, a non-integral size or a cellSize that is not a
            finite positive number.
    """
    if not isinstance(record, Mapping):
        msg = f"grid record must be a mapping, got {type(record).__name__}"
        raise GridRecordError(msg)

    version = record.get("version", RECORD_VERSION)
    if version != RECORD_VERSION:
        msg = f"unsupported grid record version {version!r}"
        raise GridRecordError(msg)

    size = record.get("size", 0)
    cell_size = record.get("cellSize", 10.0)
    for name, value in (("size", size), ("cellSize", cell_size)):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            msg = f"grid record {name} must be a number, got {value!r}"
            raise GridRecordError(msg)
    if not math.isfinite(size) or int(size) != size:
        msg = f"grid record size must be integral, got {size!r}"
        raise GridRecordError(msg)
    if not math.isfinite(cell_size) or cell_size <= 0:
        msg = f"grid record cellSize must be finite and positive, got {cell_size!r}"
        raise GridRecordError(msg)

    return {
        "size": int(size),
        "cell_size": float(cell_size),
        "extrude_settings": record.get("extrudeSettings"),
        "autogenerated": bool(record.get("autogenerated", False)),
    }


def cells_from_record(record: Mapping[str, Any]) -> list[Cell]:
    """Build the cells listed in a record.

    Raises:
        GridRecordError: If ``cells`` is missing or not a list of mappings.
        CellValidationError: If a cell's coordinates are invalid.
    """
    raw_cells = record.get("cells")
    if not isinstance(raw_cells, list):
        msg = "grid record has no cells list"
        raise GridRecordError(msg)

    cells: list[Cell] = []
    for i, raw in enumerate(raw_cells):
        if not isinstance(raw, Mapping):
            msg = f"cell record {i} must be a mapping, got {raw!r}"
            raise GridRecordError(msg)
        cells.append(Cell.from_dict(raw))
    return cells
