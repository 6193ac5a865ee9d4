"""Config — load grid settings from YAML files.

Grid shape, cell size, map source and display settings live in YAML and
are parsed into a typed dataclass here, so a grid can be rebuilt the
same way from the command line, tests or an embedding application.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


def _default_extrude_settings() -> dict[str, Any]:
    return {
        "amount": 1,
        "bevelEnabled": True,
        "bevelSegments": 1,
        "steps": 1,
        "bevelSize": 0.5,
        "bevelThickness": 0.5,
    }


@dataclass
class GridConfig:
    """Top-level grid configuration.

    Attributes:
        seed: RNG seed for reproducible random cell picks.
        rings: Radius of the generated hexagon, in rings.
        cell_size: Hexagon radius in world units.
        url: Load a serialized grid from this URL instead of generating.
        map_file: Load a serialized grid from this JSON file instead of
            generating.  Ignored when ``url`` is set.
        tile_scale: Fraction of the cell each rendered tile covers.
        extrude_settings: Display settings stored with the grid; opaque
            to the grid itself.
        log_level: Logging level name for the command-line tool.
    """

    seed: int = 42
    rings: int = 5
    cell_size: float = 10.0
    url: str | None = None
    map_file: str | None = None
    tile_scale: float = 0.95
    extrude_settings: dict[str, Any] = field(
        default_factory=_default_extrude_settings,
    )
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str | Path) -> GridConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GridConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            rings=data.get("rings", cls.rings),
            cell_size=data.get("cell_size", cls.cell_size),
            url=data.get("url", cls.url),
            map_file=data.get("map_file", cls.map_file),
            tile_scale=data.get("tile_scale", cls.tile_scale),
            extrude_settings=data.get(
                "extrude_settings",
                _default_extrude_settings(),
            ),
            log_level=data.get("log_level", cls.log_level),
        )
