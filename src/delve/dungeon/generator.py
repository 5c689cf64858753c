from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..config import GameConfig
from ..game.bestiary import create_enemy, kinds_for_floor
from ..game.entities import LOOT_KINDS, Item, ItemKind, Trap, TrapKind
from ..rng import RandomSource
from .floor import Floor
from .pathfinding import find_path_length
from .rooms import Room
from .tiles import Tile, TileGrid

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

_TRAP_KINDS = tuple(TrapKind)


class LevelGenerator:
    """Rooms-and-corridors floor generator.

    Places up to ``max_rooms`` non-touching rectangular rooms, links them in
    generation order with L-shaped corridors, then populates the floor with
    enemies, loot, traps and traversal features. Every placement is a bounded
    retry loop; running out of attempts quietly drops that one placement.

    Given the same RandomSource state the output is identical.
    """

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()

    def generate(self, floor_number: int, rng: RandomSource) -> Floor:
        cfg = self.config
        grid = TileGrid(cfg.map_width, cfg.map_height)
        # The first attempt is always accepted, so there is at least one room.
        rooms = self._place_rooms(grid, rng)

        for prev, curr in zip(rooms, rooms[1:]):
            self._carve_corridor(grid, prev.center, curr.center, rng)

        start = rooms[0].center
        stairs = rooms[-1].center
        grid.set(*stairs, Tile.STAIRS)

        floor = Floor(number=floor_number, grid=grid, rooms=rooms, start=start, stairs=stairs)

        for _ in range(3 + 2 * floor_number):
            self._spawn_enemy(floor, rng)
        for _ in range(2 + rng.randrange(0, 3)):
            self._spawn_item(floor, rng)
        for _ in range(floor_number):
            self._spawn_trap(floor, rng)

        self._place_features(floor, rng)

        logger.debug(
            "Generated floor %d: rooms=%d enemies=%d items=%d traps=%d stairs_distance=%s signature=%s",
            floor_number,
            len(rooms),
            len(floor.enemies),
            len(floor.items),
            len(floor.traps),
            find_path_length(grid, start, stairs),
            grid.signature(),
        )
        return floor

    # Rooms and corridors

    def _place_rooms(self, grid: TileGrid, rng: RandomSource) -> List[Room]:
        cfg = self.config
        rooms: List[Room] = []
        for _ in range(cfg.max_rooms):
            w = rng.randint(cfg.room_min_size, cfg.room_max_size)
            h = rng.randint(cfg.room_min_size, cfg.room_max_size)
            x = rng.randrange(1, grid.width - w - 1)
            y = rng.randrange(1, grid.height - h - 1)
            room = Room(x, y, w, h)
            if any(room.intersects(other) for other in rooms):
                continue
            self._carve_room(grid, room)
            rooms.append(room)
        return rooms

    @staticmethod
    def _carve_room(grid: TileGrid, room: Room) -> None:
        for x, y in room.tiles():
            grid.tiles[y][x] = Tile.FLOOR

    def _carve_corridor(self, grid: TileGrid, a: Point, b: Point, rng: RandomSource) -> None:
        (x1, y1), (x2, y2) = a, b
        if rng.coin():
            self._carve_h_tunnel(grid, x1, x2, y1)
            self._carve_v_tunnel(grid, y1, y2, x2)
        else:
            self._carve_v_tunnel(grid, y1, y2, x1)
            self._carve_h_tunnel(grid, x1, x2, y2)

    @staticmethod
    def _carve_h_tunnel(grid: TileGrid, x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            if grid.in_bounds(x, y) and grid.tiles[y][x] == Tile.WALL:
                grid.tiles[y][x] = Tile.FLOOR

    @staticmethod
    def _carve_v_tunnel(grid: TileGrid, y1: int, y2: int, x: int) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            if grid.in_bounds(x, y) and grid.tiles[y][x] == Tile.WALL:
                grid.tiles[y][x] = Tile.FLOOR

    # Entity spawns

    def _random_tile(self, rooms: List[Room], rng: RandomSource) -> Point:
        room = rng.choice(rooms)
        return rng.randrange(room.x, room.x + room.width), rng.randrange(room.y, room.y + room.height)

    def _spawn_enemy(self, floor: Floor, rng: RandomSource) -> None:
        for _ in range(self.config.spawn_attempts):
            x, y = self._random_tile(floor.rooms, rng)
            if (
                floor.grid.tiles[y][x] == Tile.FLOOR
                and (x, y) != floor.start
                and floor.enemy_at(x, y) is None
            ):
                kind = rng.choice(kinds_for_floor(floor.number))
                floor.enemies.append(create_enemy(kind, x, y))
                return
        logger.debug("Enemy spawn skipped on floor %d: no free tile", floor.number)

    def _spawn_item(self, floor: Floor, rng: RandomSource) -> None:
        for _ in range(self.config.spawn_attempts):
            x, y = self._random_tile(floor.rooms, rng)
            if (
                floor.grid.tiles[y][x] == Tile.FLOOR
                and (x, y) != floor.start
                and floor.item_at(x, y) is None
            ):
                floor.items.append(Item(x, y, rng.choice(LOOT_KINDS)))
                return
        logger.debug("Item spawn skipped on floor %d: no free tile", floor.number)

    def _spawn_trap(self, floor: Floor, rng: RandomSource) -> None:
        for _ in range(self.config.spawn_attempts):
            x, y = self._random_tile(floor.rooms, rng)
            if (
                floor.grid.tiles[y][x] == Tile.FLOOR
                and (x, y) != floor.start
                and (x, y) != floor.stairs
                and floor.trap_at(x, y) is None
            ):
                kind = rng.choice(_TRAP_KINDS)
                floor.traps.append(Trap(x, y, kind, damage=5 + 3 * floor.number))
                return
        logger.debug("Trap spawn skipped on floor %d: no free tile", floor.number)

    # Traversal features

    def _place_features(self, floor: Floor, rng: RandomSource) -> None:
        cfg = self.config
        if floor.number >= 2 and rng.chance(cfg.elevator_chance):
            self._place_elevator(floor, rng)
        if rng.chance(cfg.teleporter_chance):
            self._place_teleporters(floor, rng)
        if floor.number >= 2 and rng.chance(cfg.locked_door_chance):
            self._place_locked_door(floor, rng)
        if rng.chance(cfg.safe_room_chance(floor.number)):
            self._place_safe_room(floor, rng)
        if rng.chance(cfg.secret_passage_chance):
            self._place_secret_passage(floor, rng)

    def _place_elevator(self, floor: Floor, rng: RandomSource) -> None:
        grid = floor.grid
        for _ in range(self.config.spawn_attempts):
            room = rng.choice(floor.rooms)
            x = rng.randrange(room.x + 1, room.x + room.width - 1)
            y = rng.randrange(room.y + 1, room.y + room.height - 1)
            if grid.tiles[y][x] == Tile.FLOOR and (x, y) != floor.stairs and (x, y) != floor.start:
                grid.set(x, y, Tile.ELEVATOR)
                floor.elevator = (x, y)
                logger.debug("Elevator placed at %s", floor.elevator)
                return
        logger.debug("Elevator omitted on floor %d", floor.number)

    def _free_tile_in(self, floor: Floor, room: Room, rng: RandomSource, exclude: Optional[Point] = None) -> Optional[Point]:
        for _ in range(self.config.spawn_attempts):
            x = rng.randrange(room.x, room.x + room.width)
            y = rng.randrange(room.y, room.y + room.height)
            if floor.grid.tiles[y][x] == Tile.FLOOR and (x, y) != floor.start and (x, y) != exclude:
                return (x, y)
        return None

    def _place_teleporters(self, floor: Floor, rng: RandomSource) -> None:
        rooms = floor.rooms
        first_room = rng.choice(rooms)
        others = [r for r in rooms if r is not first_room]
        second_room = rng.choice(others) if others else first_room

        first = self._free_tile_in(floor, first_room, rng)
        second = self._free_tile_in(floor, second_room, rng, exclude=first)
        if first is None or second is None:
            logger.debug("Teleporter pair omitted on floor %d", floor.number)
            return
        for x, y in (first, second):
            floor.grid.set(x, y, Tile.TELEPORTER)
        floor.teleporters.extend([first, second])
        logger.debug("Teleporters placed at %s <-> %s", first, second)

    def _place_locked_door(self, floor: Floor, rng: RandomSource) -> None:
        rooms = floor.rooms
        half = len(rooms) // 2
        if half == 0:
            return
        door_room = rooms[rng.randrange(half, len(rooms))]
        key_room = rooms[rng.randrange(0, half)]

        door: Optional[Point] = None
        for _ in range(self.config.spawn_attempts):
            side = rng.randrange(0, 4)
            x, y = door_room.edge_cell(side, rng.randrange(0, door_room.side_length(side)))
            if (
                floor.grid.tiles[y][x] == Tile.FLOOR
                and (x, y) != floor.stairs
                and (x, y) != floor.start
                and floor.enemy_at(x, y) is None
                and floor.item_at(x, y) is None
                and floor.trap_at(x, y) is None
            ):
                door = (x, y)
                break
        if door is None:
            logger.debug("Locked door omitted on floor %d", floor.number)
            return

        key: Optional[Point] = None
        for _ in range(self.config.spawn_attempts):
            x = rng.randrange(key_room.x, key_room.x + key_room.width)
            y = rng.randrange(key_room.y, key_room.y + key_room.height)
            if floor.grid.tiles[y][x] == Tile.FLOOR and (x, y) != floor.start and floor.item_at(x, y) is None:
                key = (x, y)
                break
        if key is None:
            # Never leave a door without its key.
            logger.debug("Key placement failed on floor %d; dropping the door", floor.number)
            return

        floor.grid.set(*door, Tile.LOCKED_DOOR)
        floor.locked_door = door
        floor.items.append(Item(key[0], key[1], ItemKind.KEY))
        floor.key_position = key
        logger.debug("Locked door at %s, key at %s", door, key)

    def _place_safe_room(self, floor: Floor, rng: RandomSource) -> None:
        limit = self.config.safe_room_max_size
        candidates = [
            room
            for room in floor.rooms[1:-1]
            if room.width <= limit and room.height <= limit
        ]
        if not candidates:
            return
        room = rng.choice(candidates)
        for x, y in room.tiles():
            if floor.grid.tiles[y][x] == Tile.FLOOR:
                floor.grid.tiles[y][x] = Tile.SAFE_ROOM
        before = len(floor.enemies)
        floor.enemies = [e for e in floor.enemies if not room.contains(e.x, e.y)]
        floor.safe_room_center = room.center
        logger.debug(
            "Safe room at %s; evicted %d enemies", floor.safe_room_center, before - len(floor.enemies)
        )

    def _place_secret_passage(self, floor: Floor, rng: RandomSource) -> None:
        grid = floor.grid
        t = grid.tiles
        for _ in range(self.config.secret_passage_attempts):
            x = rng.randrange(1, grid.width - 1)
            y = rng.randrange(1, grid.height - 1)
            if t[y][x] != Tile.WALL:
                continue
            horizontal = t[y][x - 1] == Tile.FLOOR and t[y][x + 1] == Tile.FLOOR
            vertical = t[y - 1][x] == Tile.FLOOR and t[y + 1][x] == Tile.FLOOR
            if horizontal or vertical:
                t[y][x] = Tile.SECRET_WALL
                logger.debug("Secret passage at (%d,%d)", x, y)
                return
        logger.debug("Secret passage omitted on floor %d", floor.number)


__all__ = ["LevelGenerator"]
