"""Tests for hexgrid.persistence — records, files and URLs."""

import json
from pathlib import Path

import pytest

from hexgrid.grid.cell import Cell
from hexgrid.grid.errors import CellValidationError, GridRecordError
from hexgrid.grid.hex_grid import HexGrid
from hexgrid.persistence.io import fetch_record, read_record, write_record
from hexgrid.persistence.records import RECORD_VERSION


def _cell_tuples(grid: HexGrid) -> set[tuple]:
    return {
        (c.q, c.r, c.s, c.h, c.walkable, json.dumps(c.user_data, sort_keys=True))
        for c in grid.cells.values()
    }


def _sparse_grid() -> HexGrid:
    grid = HexGrid(size=3, cell_size=7.5)
    grid.extrude_settings = {"amount": 2, "bevelEnabled": False}
    grid.add(Cell(0, 0, h=1.0))
    grid.add(Cell(4, -1, h=-2.5, walkable=False))
    grid.add(Cell(-10, 3, user_data={"terrain": "swamp", "cost": 3}))
    return grid


class TestToJson:
    """Tests for the serialized record shape."""

    def test_fields(self) -> None:
        record = _sparse_grid().to_json()
        assert record["version"] == RECORD_VERSION
        assert record["size"] == 3
        assert record["cellSize"] == 7.5
        assert record["extrudeSettings"] == {"amount": 2, "bevelEnabled": False}
        assert record["autogenerated"] is False
        assert len(record["cells"]) == 3
        assert set(record["cells"][0]) == {"q", "r", "s", "h", "walkable", "userData"}

    def test_json_serializable(self, small_grid: HexGrid) -> None:
        text = json.dumps(small_grid.to_json())
        assert json.loads(text)["autogenerated"] is True


class TestRoundTrip:
    """Tests for load(to_json(grid))."""

    def test_sparse_grid(self) -> None:
        original = _sparse_grid()
        copy = HexGrid()
        copy.load(original.to_json())
        assert copy.num_cells == original.num_cells
        assert _cell_tuples(copy) == _cell_tuples(original)
        assert copy.size == 3
        assert copy.cell_size == 7.5
        assert copy.cell_width == 15.0
        assert copy.extrude_settings == original.extrude_settings

    def test_generated_grid(self, five_ring_grid: HexGrid) -> None:
        copy = HexGrid()
        copy.load(five_ring_grid.to_json())
        assert copy.num_cells == 91
        assert copy.autogenerated is True
        assert _cell_tuples(copy) == _cell_tuples(five_ring_grid)

    def test_empty_grid(self, empty_grid: HexGrid) -> None:
        copy = HexGrid()
        copy.generate()
        copy.load(empty_grid.to_json())
        assert copy.num_cells == 0
        assert copy.cells == {}

    def test_through_json_text(self) -> None:
        original = _sparse_grid()
        copy = HexGrid()
        copy.load(json.loads(json.dumps(original.to_json())))
        assert _cell_tuples(copy) == _cell_tuples(original)

    def test_scratch_fields_reset(self, small_grid: HexGrid) -> None:
        for cell in small_grid.cells.values():
            cell.calc_cost = 5.0
            cell.visited = True
        copy = HexGrid()
        copy.load(small_grid.to_json())
        for cell in copy.cells.values():
            assert cell.calc_cost == 0
            assert cell.visited is False
            assert cell.parent is None
            assert cell.tile is None


class TestLoad:
    """Tests for load validation and replacement."""

    def test_replaces_previous_cells(self, small_grid: HexGrid) -> None:
        small_grid.load({"size": 1, "cellSize": 5, "cells": [{"q": 9, "r": -9, "s": 0}]})
        assert small_grid.num_cells == 1
        assert small_grid.get_cell(0, 0) is None
        assert small_grid.get_cell(9, -9) is not None

    def test_legacy_record_without_version(self) -> None:
        grid = HexGrid()
        grid.load(
            {
                "size": 2,
                "cellSize": 10,
                "extrudeSettings": None,
                "autogenerated": False,
                "cells": [{"q": 1, "r": 0, "s": -1, "h": 0, "walkable": True, "userData": {}}],
            },
        )
        assert grid.num_cells == 1

    def test_releases_old_tiles(self, small_grid: HexGrid) -> None:
        released: list[object] = []
        small_grid.on_tile_release = released.append

        class Tile:
            pass

        origin = small_grid.get_cell(0, 0)
        handle = Tile()
        origin.tile = handle
        small_grid.load({"cells": []})
        assert released == [handle]
        assert origin.tile is None

    def test_missing_cells_rejected(self) -> None:
        with pytest.raises(GridRecordError):
            HexGrid().load({"size": 1, "cellSize": 10})

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(GridRecordError):
            HexGrid().load([])  # type: ignore[arg-type]

    def test_unknown_version_rejected(self) -> None:
        with pytest.raises(GridRecordError):
            HexGrid().load({"version": 99, "cells": []})

    def test_bad_cell_size_rejected(self) -> None:
        with pytest.raises(GridRecordError):
            HexGrid().load({"cellSize": "big", "cells": []})

    @pytest.mark.parametrize("text", ["NaN", "Infinity", "-Infinity", "0", "-5"])
    def test_non_positive_or_non_finite_cell_size_rejected(self, text: str) -> None:
        record = json.loads('{"cellSize": ' + text + ', "cells": [{"q": 0, "r": 0}]}')
        with pytest.raises(GridRecordError):
            HexGrid().load(record)

    def test_fractional_size_rejected(self) -> None:
        with pytest.raises(GridRecordError):
            HexGrid().load({"size": 2.7, "cells": []})

    def test_integral_float_size_accepted(self) -> None:
        grid = HexGrid()
        grid.load({"size": 3.0, "cells": []})
        assert grid.size == 3

    def test_string_walkable_rejected(self) -> None:
        with pytest.raises(CellValidationError):
            HexGrid().load({"cells": [{"q": 0, "r": 0, "walkable": "false"}]})

    def test_non_numeric_coordinate_rejected(self) -> None:
        with pytest.raises(CellValidationError):
            HexGrid().load({"cells": [{"q": "a", "r": 0}]})

    def test_broken_zero_sum_rejected(self) -> None:
        with pytest.raises(CellValidationError):
            HexGrid().load({"cells": [{"q": 1, "r": 1, "s": 1}]})

    def test_failed_load_keeps_grid(self, small_grid: HexGrid) -> None:
        with pytest.raises(CellValidationError):
            small_grid.load({"cells": [{"q": 0, "r": 0}, {"q": None, "r": 0}]})
        assert small_grid.num_cells == 19

    def test_duplicate_cells_keep_first(self) -> None:
        grid = HexGrid()
        grid.load({"cells": [{"q": 0, "r": 0, "h": 1}, {"q": 0, "r": 0, "h": 2}]})
        assert grid.num_cells == 1
        assert grid.get_cell(0, 0).h == 1.0


class TestFiles:
    """Tests for JSON file and URL access."""

    def test_write_then_read(self, tmp_path: Path) -> None:
        path = tmp_path / "map.json"
        original = _sparse_grid()
        write_record(path, original.to_json())
        copy = HexGrid()
        copy.load(read_record(path))
        assert _cell_tuples(copy) == _cell_tuples(original)

    def test_read_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(GridRecordError):
            read_record(path)

    def test_read_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.json"
        path.write_bytes(b'{"cells": "\xff\xfe"}')
        with pytest.raises(GridRecordError):
            read_record(path)

    def test_non_ascii_user_data_survives(self, tmp_path: Path) -> None:
        path = tmp_path / "map.json"
        grid = HexGrid()
        grid.add(Cell(0, 0, user_data={"name": "Ægir's reach"}))
        write_record(path, grid.to_json())
        copy = HexGrid()
        copy.load(read_record(path))
        assert copy.get_cell(0, 0).user_data == {"name": "Ægir's reach"}

    def test_read_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_record(tmp_path / "nope.json")

    def test_fetch_file_url(self, tmp_path: Path) -> None:
        path = tmp_path / "map.json"
        write_record(path, _sparse_grid().to_json())
        record = fetch_record(path.as_uri())
        assert len(record["cells"]) == 3

    def test_fetch_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.json"
        path.write_bytes(b'{"cells": "\xff\xfe"}')
        with pytest.raises(GridRecordError):
            fetch_record(path.as_uri())

    def test_fetch_failure(self, tmp_path: Path) -> None:
        with pytest.raises(GridRecordError):
            fetch_record((tmp_path / "missing.json").as_uri())
