from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Tuple

from ..dungeon.tiles import Tile, TileGrid

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]
BoolGrid = List[List[bool]]


class FogState(str, Enum):
    UNSEEN = "unseen"        # never seen; fully dark
    EXPLORED = "explored"    # seen before but not currently visible; dim
    VISIBLE = "visible"      # currently visible; full brightness


class VisibilityCalculator:
    """
    Angular ray-cast field of view with persistent fog-of-war memory.

    One ray is cast every ``step_degrees`` from the center of the player's
    tile. Each ray advances one unit per step for ``radius`` steps, marking
    the tile it lands on (by truncating the float position) as visible and
    explored. A ray stops after marking a WALL or when it leaves the grid.

    Rays can slip through a diagonal gap between two wall tiles.

    ``visible`` is rebuilt on every recompute; ``explored`` only ever grows
    until ``reset`` is called for a new floor.
    """

    def __init__(self, width: int, height: int, radius: int = 6, step_degrees: int = 2) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        if radius < 0:
            raise ValueError("radius must be >= 0")
        if step_degrees <= 0 or 360 % step_degrees != 0:
            raise ValueError("step_degrees must be a positive divisor of 360")
        self.width = width
        self.height = height
        self.radius = radius
        self.step_degrees = step_degrees
        self.visible: BoolGrid = self._blank()
        self.explored: BoolGrid = self._blank()
        # Precomputed unit direction vectors, one per ray.
        self._rays: List[Tuple[float, float]] = [
            (math.cos(math.radians(a)), math.sin(math.radians(a)))
            for a in range(0, 360, step_degrees)
        ]
        logger.debug(
            "VisibilityCalculator initialized: %dx%d radius=%d rays=%d",
            width,
            height,
            radius,
            len(self._rays),
        )

    def _blank(self) -> BoolGrid:
        return [[False for _ in range(self.width)] for _ in range(self.height)]

    def reset(self) -> None:
        """Forget everything seen (e.g., on a new floor)."""
        self.visible = self._blank()
        self.explored = self._blank()
        logger.debug("Visibility memory reset")

    def recompute(self, player_pos: Coord, grid: TileGrid) -> Tuple[BoolGrid, BoolGrid]:
        if grid.width != self.width or grid.height != self.height:
            raise ValueError("grid dimensions do not match the visibility grids")

        for row in self.visible:
            for x in range(self.width):
                row[x] = False

        px, py = player_pos
        tiles = grid.tiles
        for dx, dy in self._rays:
            x = px + 0.5
            y = py + 0.5
            for _ in range(self.radius + 1):
                tx = int(x)
                ty = int(y)
                if tx < 0 or tx >= self.width or ty < 0 or ty >= self.height:
                    break
                self.visible[ty][tx] = True
                self.explored[ty][tx] = True
                if tiles[ty][tx] == Tile.WALL:
                    break
                x += dx
                y += dy

        logger.debug("Visibility recomputed at %s", player_pos)
        return self.visible, self.explored

    def is_visible(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and self.visible[y][x]

    def is_explored(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and self.explored[y][x]

    def state(self, x: int, y: int) -> FogState:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("Tile out of bounds")
        if self.visible[y][x]:
            return FogState.VISIBLE
        if self.explored[y][x]:
            return FogState.EXPLORED
        return FogState.UNSEEN

    def visible_count(self) -> int:
        return sum(row.count(True) for row in self.visible)

    def explored_count(self) -> int:
        return sum(row.count(True) for row in self.explored)


__all__ = ["FogState", "VisibilityCalculator"]
