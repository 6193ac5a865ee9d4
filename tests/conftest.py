"""Shared fixtures for the hexgrid test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from hexgrid.grid.config import GridConfig
from hexgrid.grid.hex_grid import HexGrid


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def empty_grid(rng: Generator) -> HexGrid:
    """A grid with no cells."""
    return HexGrid(size=0, cell_size=10.0, rng=rng)


@pytest.fixture
def small_grid(rng: Generator) -> HexGrid:
    """A generated 2-ring hexagon (19 cells) for fast tests."""
    grid = HexGrid(size=2, cell_size=10.0, rng=rng)
    grid.generate()
    return grid


@pytest.fixture
def five_ring_grid(rng: Generator) -> HexGrid:
    """A generated 5-ring hexagon (91 cells)."""
    grid = HexGrid(size=5, cell_size=10.0, rng=rng)
    grid.generate()
    return grid


@pytest.fixture
def default_config() -> GridConfig:
    """Default grid config (no YAML file needed)."""
    return GridConfig()
