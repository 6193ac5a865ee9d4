"""Pygame 2D viewer for a hex grid.

Draws every cell as a flat hexagon, highlights the cell under the mouse
and its neighbours, and lets the user toggle walkability, pick random
cells and save the grid.  The viewer is a client of the grid: it reads
positions through ``cell_to_pixel``, picks cells through
``get_cell_at`` and owns the tiles it attaches to cells.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pygame

from hexgrid.grid.coords import Position
from hexgrid.persistence.io import write_record
from hexgrid.ui.tiles import (
    HexTile,
    generate_overlay,
    generate_tile,
    generate_tiles,
)

if TYPE_CHECKING:
    from hexgrid.grid.cell import Cell
    from hexgrid.grid.hex_grid import HexGrid

logger = logging.getLogger(__name__)

# Colour palette
_BG = (20, 24, 30)
_OUTLINE = (10, 12, 16)
_HOVER = (255, 220, 80)
_NEIGHBOUR = (90, 170, 255)
_PICKED = (255, 90, 90)
_OVERLAY = (70, 80, 95)

_MARGIN = 20


class PygameRenderer:
    """Renders a HexGrid into a Pygame window.

    Attributes:
        grid: The grid to display.
        tiles: Tiles owned by the viewer, one per cell, keyed by ``id``.
        overlay: Outlines of every position within ``grid.size`` rings.
        screen: The Pygame display surface.
    """

    def __init__(
        self,
        grid: HexGrid,
        tile_scale: float = 0.95,
        save_path: str | Path = "grid.json",
    ) -> None:
        """Initialise the renderer.

        Args:
            grid: The grid to render.
            tile_scale: Tile radius as a fraction of the cell size.
            save_path: Where ``S`` writes the grid.
        """
        self.grid = grid
        self.tile_scale = tile_scale
        self.save_path = Path(save_path)
        self.tiles: dict[int, HexTile] = {
            id(tile): tile for tile in generate_tiles(grid, tile_scale)
        }
        self.overlay = generate_overlay(grid, grid.size)
        grid.on_tile_release = self._release_tile

        self.include_diagonals = False
        self.show_overlay = False
        self.hovered: Cell | None = None
        self.picked: Cell | None = None

        min_x, min_z, max_x, max_z = self._bounds()
        self._offset = (_MARGIN - min_x, _MARGIN - min_z)
        self._panel_width = 220
        self._map_w = int(max_x - min_x) + 2 * _MARGIN
        self._win_w = self._map_w + self._panel_width
        self._win_h = max(int(max_z - min_z) + 2 * _MARGIN, 240)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("hexgrid")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    def _bounds(self) -> tuple[float, float, float, float]:
        """World-space bounding box of all tiles and the overlay."""
        polygons = [tile.points for tile in self.tiles.values()] + self.overlay
        xs = [x for points in polygons for x, _ in points] or [0.0]
        zs = [z for points in polygons for _, z in points] or [0.0]
        return min(xs), min(zs), max(xs), max(zs)

    def _release_tile(self, tile: HexTile) -> None:
        """Forget a tile the grid no longer references."""
        self.tiles.pop(id(tile), None)

    def _to_screen(self, x: float, z: float) -> tuple[int, int]:
        return int(x + self._offset[0]), int(z + self._offset[1])

    def _to_world(self, sx: int, sy: int) -> Position:
        return Position(sx - self._offset[0], 0.0, sy - self._offset[1])

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            self.clock.tick(fps)
            self._handle_events()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEMOTION:
                self.hovered = self.grid.get_cell_at(self._to_world(*event.pos))
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                cell = self.grid.get_cell_at(self._to_world(*event.pos))
                if cell is not None:
                    self._toggle_walkable(cell)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_d:
                    self.include_diagonals = not self.include_diagonals
                elif event.key == pygame.K_o:
                    self.show_overlay = not self.show_overlay
                elif event.key == pygame.K_r:
                    self.picked = self.grid.get_random_cell()
                elif event.key == pygame.K_s:
                    write_record(self.save_path, self.grid.to_json())

    def _toggle_walkable(self, cell: Cell) -> None:
        """Flip walkability and rebuild the cell's tile to match."""
        cell.walkable = not cell.walkable
        old = cell.tile
        if old is not None:
            self.tiles.pop(id(old), None)
        tile = generate_tile(self.grid, cell, self.tile_scale)
        self.tiles[id(tile)] = tile
        logger.debug("Cell %s walkable=%s", cell.coords, cell.walkable)

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_tiles()
        if self.show_overlay:
            self._draw_overlay()
        self._draw_highlights()
        self._draw_info_panel()
        pygame.display.flip()

    def _polygon(self, tile: HexTile) -> list[tuple[int, int]]:
        return [self._to_screen(x, z) for x, z in tile.points]

    def _draw_tiles(self) -> None:
        """Draw each tile as a filled, outlined hexagon."""
        for tile in self.tiles.values():
            points = self._polygon(tile)
            pygame.draw.polygon(self.screen, tile.colour, points)
            pygame.draw.polygon(self.screen, _OUTLINE, points, 1)

    def _draw_overlay(self) -> None:
        """Outline every position out to the grid's ring radius."""
        for outline in self.overlay:
            points = [self._to_screen(x, z) for x, z in outline]
            pygame.draw.polygon(self.screen, _OVERLAY, points, 1)

    def _outline(self, cell: Cell, colour: tuple[int, int, int], width: int) -> None:
        tile = cell.tile
        if tile is not None:
            pygame.draw.polygon(self.screen, colour, self._polygon(tile), width)

    def _draw_highlights(self) -> None:
        """Outline the hovered cell, its neighbours and the random pick."""
        if self.hovered is not None:
            for n in self.grid.get_neighbors(self.hovered, self.include_diagonals):
                self._outline(n, _NEIGHBOUR, 2)
            self._outline(self.hovered, _HOVER, 3)
        if self.picked is not None:
            self._outline(self.picked, _PICKED, 3)

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        panel_x = self._map_w + 10
        y = 10

        lines = [
            f"Cells: {self.grid.num_cells}",
            f"Rings: {self.grid.size}",
            f"Cell size: {self.grid.cell_size:g}",
            f"Diagonals: {'on' if self.include_diagonals else 'off'}",
            f"Overlay: {'on' if self.show_overlay else 'off'}",
            "",
        ]

        if self.hovered is not None:
            q, r, s = self.hovered.coords
            lines += [
                "--- Hover ---",
                f"q={q} r={r} s={s}",
                f"h={self.hovered.h:g}",
                f"walkable={self.hovered.walkable}",
            ]
            if self.picked is not None:
                d = self.grid.distance(self.hovered, self.picked)
                lines.append(f"dist to pick: {d:g}")
            lines.append("")

        lines += [
            "--- Controls ---",
            "click: walkable",
            "D: diagonals",
            "O: overlay",
            "R: random cell",
            "S: save",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, (200, 200, 200))
            self.screen.blit(surf, (panel_x, y))
            y += 18
