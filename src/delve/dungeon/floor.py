from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..game.entities import Enemy, Item, Trap
from .rooms import Room
from .tiles import TileGrid

Point = Tuple[int, int]


@dataclass
class Floor:
    """One dungeon level: the tile grid plus everything living on it.

    Discarded wholesale on every floor transition; only the player survives.
    ``rooms`` is generation metadata kept for feature placement and debugging.
    """

    number: int
    grid: TileGrid
    rooms: List[Room]
    start: Point
    stairs: Point
    enemies: List[Enemy] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)
    traps: List[Trap] = field(default_factory=list)
    elevator: Optional[Point] = None
    teleporters: List[Point] = field(default_factory=list)
    locked_door: Optional[Point] = None
    key_position: Optional[Point] = None
    safe_room_center: Optional[Point] = None

    def enemy_at(self, x: int, y: int) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.x == x and enemy.y == y:
                return enemy
        return None

    def item_at(self, x: int, y: int) -> Optional[Item]:
        for item in self.items:
            if item.x == x and item.y == y:
                return item
        return None

    def trap_at(self, x: int, y: int) -> Optional[Trap]:
        for trap in self.traps:
            if trap.x == x and trap.y == y:
                return trap
        return None

    def paired_teleporter(self, pos: Point) -> Optional[Point]:
        """The other end of the teleporter pair that contains ``pos``."""
        if pos not in self.teleporters:
            return None
        idx = self.teleporters.index(pos)
        partner = idx + 1 if idx % 2 == 0 else idx - 1
        return self.teleporters[partner]


__all__ = ["Floor"]
