"""Entry point for ``python -m hexgrid``.

Loads the default YAML config, builds a hex grid (generated, or loaded
from a file or URL) and opens a Pygame window to explore it.  With
``--export`` the grid is written as JSON instead and no window opens.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import pathlib

from hexgrid.grid.config import GridConfig
from hexgrid.grid.hex_grid import HexGrid
from hexgrid.persistence.io import write_record

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger("hexgrid")


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="hexgrid",
        description="hexgrid - hexagonal cell grid viewer",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--rings",
        type=int,
        default=None,
        help="Rings in the generated hexagon (overrides config)",
    )
    parser.add_argument(
        "--cell-size",
        type=float,
        default=None,
        help="Hexagon radius in world units (overrides config)",
    )
    parser.add_argument(
        "--map",
        dest="map_file",
        default=None,
        help="Load a saved grid from this JSON file",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Load a saved grid from this URL",
    )
    parser.add_argument(
        "--export",
        type=pathlib.Path,
        default=None,
        help="Write the grid as JSON to this path and exit",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides config)",
    )
    return parser


def load_config(args: argparse.Namespace) -> GridConfig:
    """Read the YAML config and apply command-line overrides."""
    if args.config.exists():
        config = GridConfig.from_yaml(args.config)
    else:
        config = GridConfig()

    overrides = {
        "rings": args.rings,
        "cell_size": args.cell_size,
        "map_file": args.map_file,
        "url": args.url,
        "log_level": args.log_level,
    }
    return dataclasses.replace(
        config,
        **{k: v for k, v in overrides.items() if v is not None},
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, build the grid, export or launch the viewer."""
    args = build_parser().parse_args(argv)
    config = load_config(args)

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    grid = HexGrid.from_config(config)
    logger.info("Grid ready: %d cells", grid.num_cells)

    if args.export is not None:
        write_record(args.export, grid.to_json())
        return

    from hexgrid.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(grid=grid, tile_scale=config.tile_scale)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
