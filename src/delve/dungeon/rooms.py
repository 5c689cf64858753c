from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

Point = Tuple[int, int]

# Room sides for edge_cell()
LEFT, RIGHT, TOP, BOTTOM = 0, 1, 2, 3


@dataclass(frozen=True)
class Room:
    """An axis-aligned rectangular room carved during generation."""

    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> Point:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def intersects(self, other: "Room", buffer: int = 1) -> bool:
        """True when the rooms overlap or come within ``buffer`` tiles of each other."""
        return (
            self.x <= other.x + other.width + buffer
            and self.x + self.width + buffer >= other.x
            and self.y <= other.y + other.height + buffer
            and self.y + self.height + buffer >= other.y
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def tiles(self) -> List[Point]:
        return [(x, y) for y in range(self.y, self.y + self.height) for x in range(self.x, self.x + self.width)]

    def edge_cell(self, side: int, offset: int) -> Point:
        """Cell on the given side of the room; ``offset`` runs along that side."""
        if side == LEFT:
            return (self.x, self.y + offset)
        if side == RIGHT:
            return (self.x + self.width - 1, self.y + offset)
        if side == TOP:
            return (self.x + offset, self.y)
        return (self.x + offset, self.y + self.height - 1)

    def side_length(self, side: int) -> int:
        return self.height if side in (LEFT, RIGHT) else self.width


__all__ = ["Room", "LEFT", "RIGHT", "TOP", "BOTTOM"]
