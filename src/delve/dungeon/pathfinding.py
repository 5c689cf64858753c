from collections import deque
from typing import Optional, Set, Tuple

from .tiles import TileGrid, Tile

Point = Tuple[int, int]

# Tiles a walker cannot pass. Locked doors count as passable: they are
# ground tiles that only need a key.
_BLOCKING = frozenset({Tile.WALL, Tile.SECRET_WALL})


def is_passable(grid: TileGrid, x: int, y: int) -> bool:
    return grid.in_bounds(x, y) and grid.tiles[y][x] not in _BLOCKING


def reachable_from(grid: TileGrid, start: Point) -> Set[Point]:
    """Set of tiles reachable from ``start`` with 4-directional movement."""
    if not is_passable(grid, *start):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        x, y = q.popleft()
        for nx, ny in grid.neighbors4(x, y):
            if (nx, ny) not in seen and grid.tiles[ny][nx] not in _BLOCKING:
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen


def find_path_length(grid: TileGrid, start: Point, goal: Point) -> Optional[int]:
    """Breadth-first search shortest path length; returns number of steps or None.

    Uses 4-directional movement.
    """
    if not is_passable(grid, *start) or not is_passable(grid, *goal):
        return None

    q = deque([(start[0], start[1], 0)])
    seen = {start}
    while q:
        x, y, d = q.popleft()
        if (x, y) == goal:
            return d
        for nx, ny in grid.neighbors4(x, y):
            if (nx, ny) not in seen and grid.tiles[ny][nx] not in _BLOCKING:
                seen.add((nx, ny))
                q.append((nx, ny, d + 1))
    return None
