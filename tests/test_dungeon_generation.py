import pytest

from delve.config import GameConfig
from delve.dungeon.generator import LevelGenerator
from delve.dungeon.pathfinding import find_path_length, reachable_from
from delve.dungeon.rooms import Room
from delve.dungeon.tiles import GROUND_TILES, Tile, TileGrid
from delve.game.entities import ItemKind
from delve.rng import RandomSource

SEEDS = [1, 2, 3, 11, 42, 99, 1234, 2024]


def generate(seed, floor_number=1, config=None):
    return LevelGenerator(config).generate(floor_number, RandomSource(seed))


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("floor_number", [1, 5, 10])
def test_rooms_never_touch(seed, floor_number):
    floor = generate(seed, floor_number)
    assert floor.rooms
    for i, a in enumerate(floor.rooms):
        for b in floor.rooms[i + 1:]:
            assert not a.intersects(b)


@pytest.mark.parametrize("seed", SEEDS)
def test_exactly_one_stairs_in_last_room(seed):
    floor = generate(seed, 4)
    stairs = floor.grid.positions_of(Tile.STAIRS)
    assert stairs == [floor.stairs]
    assert floor.rooms[-1].contains(*floor.stairs)
    assert floor.start == floor.rooms[0].center


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("floor_number", [1, 6])
def test_every_ground_tile_reachable_from_start(seed, floor_number):
    floor = generate(seed, floor_number)
    reachable = reachable_from(floor.grid, floor.start)
    grid = floor.grid
    for y in range(grid.height):
        for x in range(grid.width):
            if grid.tiles[y][x] in GROUND_TILES:
                assert (x, y) in reachable, f"({x},{y}) unreachable"


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("floor_number", [1, 3, 8])
def test_spawn_invariants(seed, floor_number):
    floor = generate(seed, floor_number)
    grid = floor.grid

    for group in (floor.enemies, floor.items, floor.traps):
        positions = [(e.x, e.y) for e in group]
        assert len(positions) == len(set(positions))
        assert floor.start not in positions

    assert all(t.pos != floor.stairs for t in floor.traps)
    assert all(grid.tiles[e.y][e.x] in GROUND_TILES for e in floor.enemies)
    assert len(floor.enemies) <= 3 + 2 * floor_number
    assert len([i for i in floor.items if i.kind is not ItemKind.KEY]) <= 4
    assert all(t.damage == 5 + 3 * floor_number for t in floor.traps)


@pytest.mark.parametrize("seed", range(40))
def test_features_are_consistent(seed):
    floor = generate(seed, 2 + seed % 8)
    grid = floor.grid

    assert len(floor.teleporters) % 2 == 0
    assert sorted(grid.positions_of(Tile.TELEPORTER)) == sorted(floor.teleporters)

    keys = [i for i in floor.items if i.kind is ItemKind.KEY]
    if floor.locked_door is None:
        assert keys == []
        assert grid.count(Tile.LOCKED_DOOR) == 0
    else:
        assert len(keys) == 1
        assert grid.get(*floor.locked_door) == Tile.LOCKED_DOOR
        assert floor.locked_door not in (floor.stairs, floor.start)

    if floor.elevator is not None:
        assert grid.get(*floor.elevator) == Tile.ELEVATOR
        assert floor.elevator not in (floor.stairs, floor.start)

    assert grid.count(Tile.SECRET_WALL) <= 1


def test_forced_features_all_appear():
    cfg = GameConfig(
        elevator_chance=100,
        teleporter_chance=100,
        locked_door_chance=100,
        secret_passage_chance=100,
    )
    hits = {"elevator": 0, "teleporters": 0, "door": 0, "secret": 0}
    for seed in range(20):
        floor = generate(seed, 3, cfg)
        hits["elevator"] += floor.elevator is not None
        hits["teleporters"] += len(floor.teleporters) == 2
        hits["door"] += floor.locked_door is not None
        hits["secret"] += floor.grid.count(Tile.SECRET_WALL) == 1
    assert all(count > 0 for count in hits.values()), hits


def test_no_elevator_or_door_on_first_floor():
    cfg = GameConfig(elevator_chance=100, locked_door_chance=100)
    for seed in range(15):
        floor = generate(seed, 1, cfg)
        assert floor.elevator is None
        assert floor.locked_door is None


def test_safe_room_has_no_enemies():
    cfg = GameConfig(safe_room_base_chance=100)
    found = 0
    for seed in range(30):
        floor = generate(seed, 5, cfg)
        if floor.safe_room_center is None:
            continue
        found += 1
        room = next(r for r in floor.rooms if r.center == floor.safe_room_center)
        assert room.width <= 5 and room.height <= 5
        assert room is not floor.rooms[0] and room is not floor.rooms[-1]
        assert not any(room.contains(e.x, e.y) for e in floor.enemies)
        assert floor.grid.count(Tile.SAFE_ROOM) > 0
    assert found > 0


def test_same_seed_same_floor():
    a = generate(77, 6)
    b = generate(77, 6)
    assert a.grid.signature() == b.grid.signature()
    assert [(e.x, e.y, e.kind) for e in a.enemies] == [(e.x, e.y, e.kind) for e in b.enemies]
    assert [(i.x, i.y, i.kind) for i in a.items] == [(i.x, i.y, i.kind) for i in b.items]


def test_enemies_come_from_the_floor_tier():
    from delve.game.bestiary import kinds_for_floor

    for floor_number in (1, 4, 9, 10):
        floor = generate(5, floor_number)
        allowed = set(kinds_for_floor(floor_number))
        assert {e.kind for e in floor.enemies} <= allowed


def test_room_intersection_uses_buffer():
    a = Room(1, 1, 4, 4)
    assert a.intersects(Room(6, 1, 4, 4))  # one-tile gap still counts as touching
    assert not a.intersects(Room(7, 1, 4, 4))


def test_path_length_counts_secret_walls_as_blocking():
    grid = TileGrid.from_ascii([
        "#######",
        "#..%..#",
        "#.###.#",
        "#.....#",
        "#######",
    ])
    assert find_path_length(grid, (1, 1), (5, 1)) == 8
    grid.set(3, 1, Tile.FLOOR)
    assert find_path_length(grid, (1, 1), (5, 1)) == 4
    assert find_path_length(grid, (0, 0), (5, 1)) is None
