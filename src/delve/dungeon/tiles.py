from __future__ import annotations

import hashlib
from enum import IntEnum
from typing import Dict, Iterator, List, Sequence, Tuple

Point = Tuple[int, int]


class Tile(IntEnum):
    WALL = 0
    FLOOR = 1
    STAIRS = 2
    ELEVATOR = 3
    TELEPORTER = 4
    LOCKED_DOOR = 5
    SAFE_ROOM = 6
    SECRET_WALL = 7


# ASCII glyphs used by from_ascii/to_ascii. A secret wall renders like a wall
# to the player; the debug glyph distinguishes it.
GLYPHS: Dict[Tile, str] = {
    Tile.WALL: "#",
    Tile.FLOOR: ".",
    Tile.STAIRS: ">",
    Tile.ELEVATOR: "E",
    Tile.TELEPORTER: "T",
    Tile.LOCKED_DOOR: "+",
    Tile.SAFE_ROOM: "s",
    Tile.SECRET_WALL: "%",
}
_FROM_GLYPH: Dict[str, Tile] = {v: k for k, v in GLYPHS.items()}

# Tiles that are walkable ground once reached (locked doors and secret walls
# become FLOOR when crossed).
GROUND_TILES = frozenset({Tile.FLOOR, Tile.STAIRS, Tile.ELEVATOR, Tile.TELEPORTER, Tile.SAFE_ROOM})


class TileGrid:
    """A fixed-size, mutable tile grid.

    Coordinates are (x, y) with (0,0) at top-left; x grows to the right, y grows
    down. Storage is row-major: ``tiles[y][x]``.
    """

    def __init__(self, width: int, height: int, fill: Tile = Tile.WALL) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("TileGrid width/height must be > 0")
        self.width = width
        self.height = height
        self.tiles: List[List[Tile]] = [[fill for _ in range(width)] for _ in range(height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x},{y}) out of bounds")
        return self.tiles[y][x]

    def set(self, x: int, y: int, tile: Tile) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile ({x},{y}) out of bounds")
        self.tiles[y][x] = tile

    def neighbors4(self, x: int, y: int) -> Iterator[Point]:
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def positions_of(self, tile: Tile) -> List[Point]:
        return [(x, y) for y in range(self.height) for x in range(self.width) if self.tiles[y][x] == tile]

    def count(self, tile: Tile) -> int:
        return sum(row.count(tile) for row in self.tiles)

    def rows(self) -> Tuple[Tuple[Tile, ...], ...]:
        return tuple(tuple(row) for row in self.tiles)

    def signature(self) -> str:
        """Deterministic digest of the layout, handy for comparing seeded runs."""
        raw = "\n".join(self.to_ascii()).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    @classmethod
    def from_ascii(cls, rows: Sequence[str]) -> "TileGrid":
        """Build a grid from ASCII rows for tests and tools (see GLYPHS)."""
        if not rows:
            raise ValueError("rows must not be empty")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("All rows must be same width")
        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch not in _FROM_GLYPH:
                    raise ValueError(f"Unknown tile glyph {ch!r} at ({x},{y})")
                grid.tiles[y][x] = _FROM_GLYPH[ch]
        return grid

    def to_ascii(self) -> List[str]:
        return ["".join(GLYPHS[t] for t in row) for row in self.tiles]

    def __repr__(self) -> str:
        return f"TileGrid({self.width}x{self.height})"


__all__ = ["Tile", "TileGrid", "Point", "GLYPHS", "GROUND_TILES"]
